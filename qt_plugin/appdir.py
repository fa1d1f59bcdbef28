"""
AppDir abstraction used by the deployers.

Deployers never touch the AppDir directly: every copy or write is queued as a
deferred operation and applied once, after all modules have been processed,
by execute_deferred_operations(). Requests for the same target path collapse
into a single operation.
"""

from os import walk as os_walk
from os import chmod as os_chmod
from os import makedirs as os_makedirs

from os.path import join as os_path_join
from os.path import isfile as os_path_isfile
from os.path import lexists as os_path_lexists
from os.path import abspath as os_path_abspath
from os.path import dirname as os_path_dirname
from os.path import realpath as os_path_realpath
from os.path import basename as os_path_basename

from shutil import copy2 as shutil_copy2
from subprocess import run as subprocess_run

from dataclasses import dataclass
from threading import Lock
from typing import Dict, List, Mapping, Optional

from logger.logger import Logger

from .appdir_paths import AppDirPaths
from .elf import ElfFile, ElfFileParseError
from .exclude_libs import is_excluded_library

COPY_OPERATION = "copy"
WRITE_OPERATION = "write"

EXECUTABLE_MODE = 0o755
FILE_MODE = 0o644

# Debian packages install their copyright files to <HOST_DOC_DIR>/<package>/copyright
HOST_DOC_DIR = "/usr/share/doc"


@dataclass
class DeferredOperation:
    kind: str
    target: str
    source: str = ""
    content: str = ""
    mode: Optional[int] = None
    # only host files get their copyright files deployed
    from_host: bool = False


class DeferredOperationQueue:
    """Ordered list of file operations, unique per target path."""

    def __init__(self, log_level: str = "INFO"):
        self.logger = Logger(log_level, self.__class__.__name__)
        self._lock = Lock()
        self._operations: List[DeferredOperation] = []
        self._by_target: Dict[str, DeferredOperation] = {}

    def __len__(self):
        with self._lock:
            return len(self._operations)

    def add(self, operation: DeferredOperation) -> bool:
        """Queue an operation, returns False if the target was already requested."""
        target = os_path_abspath(operation.target)

        with self._lock:
            existing = self._by_target.get(target)
            if existing is not None:
                if existing.kind != operation.kind or existing.source != operation.source:
                    self.logger.warning(
                        f"Conflicting requests for {target}, keeping {existing.source or 'generated content'}"
                    )
                else:
                    self.logger.debug(f"Already scheduled: {target}")
                return False

            operation.target = target
            self._operations.append(operation)
            self._by_target[target] = operation
            return True

    def contains(self, target: str) -> bool:
        with self._lock:
            return os_path_abspath(target) in self._by_target

    def drain(self) -> List[DeferredOperation]:
        with self._lock:
            operations = self._operations
            self._operations = []
            self._by_target = {}
            return operations


class AppDir:
    def __init__(
        self,
        path: str,
        environ: Optional[Mapping[str, str]] = None,
        log_level: str = "INFO",
    ):
        self.path = os_path_abspath(path)
        self._real_path = os_path_realpath(self.path)
        self.paths = AppDirPaths(self.path)
        self.environ = environ
        self.log_level = log_level
        self.logger = Logger(log_level, self.__class__.__name__)

        self.deferred_operations = DeferredOperationQueue(log_level)
        self.disable_copyright_files_deployment = False

    def set_environment(self, environ: Mapping[str, str]):
        """Environment passed to all external tools started from now on."""
        self.environ = environ

    def set_disable_copyright_files_deployment(self, disable: bool):
        self.disable_copyright_files_deployment = disable

    def contains(self, path: str) -> bool:
        real_path = os_path_realpath(path)
        return real_path == self._real_path or real_path.startswith(
            self._real_path + "/"
        )

    def list_shared_libraries(self) -> List[str]:
        """All shared libraries below usr/lib, sorted for reproducible output."""
        libraries = []

        for root, _dirs, files in os_walk(self.paths.LIB_DIR):
            for file_name in files:
                if ".so" not in file_name or file_name.endswith(".debug"):
                    continue
                file_path = os_path_join(root, file_name)
                if os_path_isfile(file_path):
                    libraries.append(file_path)

        return sorted(libraries)

    def deploy_library(self, path: str, destination_dir: str) -> bool:
        """Schedule a library and its non-excluded dependencies for deployment."""
        if not os_path_isfile(path):
            self.logger.error(f"No such library: {path}")
            return False

        self._schedule_copy(path, destination_dir, EXECUTABLE_MODE)
        self.deploy_dependencies(path)
        return True

    def deploy_executable(self, path: str, destination_dir: str) -> bool:
        if not os_path_isfile(path):
            self.logger.error(f"No such executable: {path}")
            return False

        self._schedule_copy(path, destination_dir, EXECUTABLE_MODE)
        self.deploy_dependencies(path)
        return True

    def deploy_file(self, path: str, destination_dir: str) -> bool:
        if not os_path_isfile(path):
            self.logger.error(f"No such file: {path}")
            return False

        self._schedule_copy(path, destination_dir, None)
        return True

    def write_file(self, target: str, content: str, mode: int = FILE_MODE) -> bool:
        self.logger.debug(f"Scheduling write of {target}")
        self.deferred_operations.add(
            DeferredOperation(WRITE_OPERATION, target, content=content, mode=mode)
        )
        return True

    def deploy_dependencies(self, path: str):
        """Schedule the shared library dependencies of an ELF file for usr/lib."""
        try:
            dependencies = ElfFile(
                path, self.environ, self.log_level
            ).trace_dynamic_dependencies()
        except ElfFileParseError as e:
            self.logger.debug(f"Failed to parse file as ELF file: {path} ({e})")
            return

        for dependency in dependencies:
            if is_excluded_library(dependency):
                self.logger.debug(f"Skipping excluded library: {dependency}")
                continue
            if self.contains(dependency):
                continue
            self._schedule_copy(dependency, self.paths.LIB_DIR, EXECUTABLE_MODE)

    def _schedule_copy(self, source: str, destination_dir: str, mode: Optional[int]):
        target = os_path_join(destination_dir, os_path_basename(source))
        if self.contains(source) and os_path_realpath(source) == os_path_realpath(target):
            return

        # files linuxdeploy (or an earlier run) already put in place may have
        # been relinked, never replace them with the host copy
        if os_path_lexists(target):
            self.logger.debug(f"File exists, skipping deployment: {target}")
            return

        if self.deferred_operations.add(
            DeferredOperation(
                COPY_OPERATION,
                target,
                source=source,
                mode=mode,
                from_host=not self.contains(source),
            )
        ):
            self.logger.debug(f"Scheduled deployment of {source} -> {destination_dir}")

    def execute_deferred_operations(self) -> bool:
        """Apply and drain all queued operations."""
        operations = self.deferred_operations.drain()
        self.logger.info(f"Applying {len(operations)} deferred operations")

        try:
            for operation in operations:
                os_makedirs(os_path_dirname(operation.target), exist_ok=True)

                if operation.kind == COPY_OPERATION:
                    self.logger.debug(f"Copying {operation.source} -> {operation.target}")
                    shutil_copy2(operation.source, operation.target)
                elif operation.kind == WRITE_OPERATION:
                    self.logger.debug(f"Writing {operation.target}")
                    with open(operation.target, "w") as f:
                        f.write(operation.content)
                else:
                    raise ValueError(f"Unknown deferred operation: {operation.kind}")

                if operation.mode is not None:
                    os_chmod(operation.target, operation.mode)

        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to apply deferred operation: {e}")
            return False

        if self.disable_copyright_files_deployment:
            return True

        return self._deploy_copyright_files(
            [operation.source for operation in operations if operation.from_host]
        )

    def _deploy_copyright_files(self, source_paths: List[str]) -> bool:
        """Copy the Debian copyright files of the packages owning the deployed files."""
        packages = set()

        for source_path in source_paths:
            package = self._find_owning_package(source_path)
            if package:
                packages.add(package)

        try:
            for package in sorted(packages):
                copyright_file = os_path_join(HOST_DOC_DIR, package, "copyright")
                if not os_path_isfile(copyright_file):
                    continue
                target_dir = os_path_join(self.paths.DOC_DIR, package)
                os_makedirs(target_dir, exist_ok=True)
                shutil_copy2(copyright_file, os_path_join(target_dir, "copyright"))
                self.logger.debug(f"Deployed copyright file for {package}")
        except OSError as e:
            self.logger.error(f"Failed to deploy copyright files: {e}")
            return False

        return True

    def _find_owning_package(self, path: str) -> str:
        try:
            result = subprocess_run(
                ["dpkg-query", "-S", os_path_realpath(path)],
                capture_output=True,
                text=True,
                env=dict(self.environ) if self.environ is not None else None,
            )
        except FileNotFoundError:
            # not a dpkg based system
            return ""

        if result.returncode != 0 or ":" not in result.stdout:
            return ""

        # "libqt5gui5:amd64: /usr/lib/x86_64-linux-gnu/libQt5Gui.so.5"
        package = result.stdout.split(": ", 1)[0]
        return package.split(":", 1)[0].strip()
