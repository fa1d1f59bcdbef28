"""
The plugin's deployment run as an ordered list of stages.

Every stage returns a StageResult; the first failing stage ends the run.
"""

from os.path import isdir as os_path_isdir

from typing import Callable, List, Mapping, Optional, Set

from logger.logger import Logger

from .appdir import AppDir
from .config import PluginOptions
from .deployers.factory import PluginsDeployerFactory
from .executor import DeploymentExecutor
from .library_closure import collect_library_names
from .module_resolver import ModuleResolver, ResolvedModules
from .qmake import (
    QtInstallationPaths,
    SearchPaths,
    locate_qmake,
    missing_qmake_keys,
    query_qmake,
)
from .qt_modules import detect_qt_version, get_qt_modules
from .results import ErrorKind, StageResult
from .runtime_config import create_apprun_hook, create_qt_conf


class DeploymentPipeline:
    def __init__(
        self,
        options: PluginOptions,
        environ: Mapping[str, str],
        log_level: str = "INFO",
    ):
        self.options = options
        self.environ = dict(environ)
        self.log_level = log_level
        self.logger = Logger(log_level, self.__class__.__name__)

        self.appdir: Optional[AppDir] = None
        self.library_names: Set[str] = set()
        self.qt_version = 5
        self.resolved = ResolvedModules()
        self.qt_paths: Optional[QtInstallationPaths] = None
        self.tool_environ: Mapping[str, str] = self.environ

    @property
    def stages(self) -> List[Callable[[], StageResult]]:
        return [
            self.open_appdir,
            self.resolve_modules,
            self.query_qt_installation,
            self.deploy,
            self.create_qt_conf,
            self.create_apprun_hook,
        ]

    def run(self) -> StageResult:
        for stage in self.stages:
            result = stage()
            if not result:
                self.logger.error(result.message)
                return result

        self.logger.success("Done!")
        return StageResult.success()

    def open_appdir(self) -> StageResult:
        if not os_path_isdir(self.options.appdir):
            return StageResult.failure(
                ErrorKind.CONFIGURATION, f"No such directory: {self.options.appdir}"
            )

        self.appdir = AppDir(self.options.appdir, self.environ, self.log_level)

        if self.options.disable_copyright_files_deployment:
            self.logger.warning("Copyright files deployment disabled")
            self.appdir.set_disable_copyright_files_deployment(True)

        return StageResult.success()

    def resolve_modules(self) -> StageResult:
        self.library_names = collect_library_names(
            self.appdir, self.environ, self.log_level
        )
        # explicitly requested library filenames count too, the bundle may be empty
        self.qt_version = detect_qt_version(
            list(self.library_names)
            + [token for tokens in self.options.token_sources for token in tokens]
        )

        resolver = ModuleResolver(get_qt_modules(self.qt_version), self.log_level)
        self.resolved = resolver.resolve(self.library_names, self.options.token_sources)

        if self.resolved.is_empty:
            return StageResult.failure(
                ErrorKind.CONFIGURATION, "Could not find Qt modules to deploy"
            )

        return StageResult.success()

    def query_qt_installation(self) -> StageResult:
        qmake_path, error = locate_qmake(self.environ, self.qt_version, self.log_level)
        if error:
            return StageResult.failure(ErrorKind.CONFIGURATION, error)

        self.logger.info(f"Using qmake: {qmake_path}")

        qmake_vars = query_qmake(qmake_path, self.environ, self.log_level)
        if not qmake_vars:
            return StageResult.failure(
                ErrorKind.CONFIGURATION, "Failed to query Qt paths using qmake -query"
            )

        missing = missing_qmake_keys(qmake_vars)
        if missing:
            return StageResult.failure(
                ErrorKind.CONFIGURATION,
                f"qmake -query did not report required paths: {', '.join(missing)}",
            )

        self.qt_paths = QtInstallationPaths.from_query(qmake_vars)
        self.logger.info(f"QT_INSTALL_LIBS: {self.qt_paths.libs}")

        search_paths = SearchPaths.for_installation(self.qt_paths, self.environ)
        self.tool_environ = search_paths.apply(self.environ)
        self.appdir.set_environment(self.tool_environ)

        self.logger.info(
            f"Prepending QT_INSTALL_LIBS path to $LD_LIBRARY_PATH, new $LD_LIBRARY_PATH: {search_paths.library_path}"
        )
        self.logger.info(
            f"Prepending QT_INSTALL_BINS path to $PATH, new $PATH: {search_paths.executable_path}"
        )
        return StageResult.success()

    def deploy(self) -> StageResult:
        factory = PluginsDeployerFactory(
            self.appdir, self.qt_paths, self.options, self.log_level
        )
        executor = DeploymentExecutor(
            self.appdir, factory, self.qt_paths.translations, self.log_level
        )
        return executor.execute(self.resolved.modules)

    def create_qt_conf(self) -> StageResult:
        self.logger.info("-- Creating qt.conf in AppDir --")
        if not create_qt_conf(self.appdir, self.log_level):
            return StageResult.failure(
                ErrorKind.RUNTIME_CONFIG, "Failed to create qt.conf in AppDir"
            )
        return StageResult.success()

    def create_apprun_hook(self) -> StageResult:
        self.logger.info("-- Creating AppRun hook --")
        if not create_apprun_hook(self.appdir, self.resolved.modules, self.log_level):
            return StageResult.failure(
                ErrorKind.RUNTIME_CONFIG, "Failed to create AppRun hook in AppDir"
            )
        return StageResult.success()
