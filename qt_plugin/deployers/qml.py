from os import walk as os_walk

from os.path import join as os_path_join
from os.path import isdir as os_path_isdir
from os.path import isfile as os_path_isfile
from os.path import relpath as os_path_relpath
from os.path import realpath as os_path_realpath

from json import loads as json_loads
from json import JSONDecodeError as json_JSONDecodeError

from subprocess import run as subprocess_run

from typing import Dict, List, Optional

from ..qmake import which
from .base import PluginsDeployer

QMLIMPORTSCANNER = "qmlimportscanner"


class QmlImportsDeployer(PluginsDeployer):
    """
    Deploys the QML imports used by the application, as reported by
    qmlimportscanner, into usr/qml.
    """

    def _deploy(self) -> bool:
        scanner_path = self._find_qmlimportscanner()
        if not scanner_path:
            self.logger.error(
                "qmlimportscanner not found, please install it to bundle QML based applications"
            )
            return False

        imports = self._scan_imports(scanner_path)
        if imports is None:
            return False

        self.logger.info(f"Found {len(imports)} QML imports")

        for qml_import in imports:
            if not self._deploy_import(qml_import):
                return False

        return True

    @property
    def import_paths(self) -> List[str]:
        return [self.qt_paths.qml] + list(self.options.qml_modules_paths)

    @property
    def root_paths(self) -> List[str]:
        return list(self.options.qml_sources_paths) or [self.appdir.path]

    def _find_qmlimportscanner(self) -> str:
        # Qt 5 ships it in bins, Qt 6 in libexecs
        for directory in (self.qt_paths.bins, self.qt_paths.libexecs):
            candidate = os_path_join(directory, QMLIMPORTSCANNER)
            if os_path_isfile(candidate):
                self.logger.debug(f"Found qmlimportscanner at: {candidate}")
                return candidate

        return which(QMLIMPORTSCANNER, self.appdir.environ, self.log_level)

    def _scan_imports(self, scanner_path: str) -> Optional[List[Dict[str, str]]]:
        args = [scanner_path]
        for root_path in self.root_paths:
            args.extend(["-rootPath", root_path])
        for import_path in self.import_paths:
            args.extend(["-importPath", import_path])

        self.logger.debug(f"Running: {' '.join(args)}")
        environ = self.appdir.environ
        result = subprocess_run(
            args,
            capture_output=True,
            text=True,
            env=dict(environ) if environ is not None else None,
        )

        if result.stderr:
            self.logger.warning(f"qmlimportscanner: {result.stderr.strip()}")

        if result.returncode != 0:
            self.logger.error(f"qmlimportscanner failed with exit code {result.returncode}")
            return None

        try:
            imports = json_loads(result.stdout)
        except json_JSONDecodeError as e:
            self.logger.error(f"Failed to parse qmlimportscanner output: {e}")
            return None

        if not isinstance(imports, list):
            self.logger.error("qmlimportscanner output error, expected a JSON array")
            return None

        return imports

    def _target_dir(self, import_path: str, import_name: str) -> str:
        real_import_path = os_path_realpath(import_path)

        for base_path in self.import_paths:
            real_base_path = os_path_realpath(base_path)
            if real_import_path.startswith(real_base_path + "/"):
                return os_path_join(
                    self.appdir.paths.QML_DIR,
                    os_path_relpath(real_import_path, real_base_path),
                )

        return os_path_join(self.appdir.paths.QML_DIR, *import_name.split("."))

    def _deploy_import(self, qml_import: Dict[str, str]) -> bool:
        name = qml_import.get("name", "")
        path = qml_import.get("path", "")

        if qml_import.get("type") != "module" or not name or not path:
            self.logger.debug(f"Skipping QML import: {name or qml_import}")
            return True

        if not os_path_isdir(path):
            self.logger.warning(f"QML import {name} not found at {path}")
            return True

        self.logger.info(f"Deploying QML import {name}")
        target_dir = self._target_dir(path, name)

        for root, dirs, files in os_walk(path):
            dirs.sort()
            destination = os_path_join(target_dir, os_path_relpath(root, path))

            for file_name in sorted(files):
                if file_name.endswith(".debug"):
                    continue

                source = os_path_join(root, file_name)
                if ".so" in file_name:
                    deployed = self.appdir.deploy_library(source, destination)
                else:
                    deployed = self.appdir.deploy_file(source, destination)

                if not deployed:
                    return False

        return True
