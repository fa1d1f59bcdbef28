from os import walk as os_walk

from os.path import join as os_path_join
from os.path import isdir as os_path_isdir
from os.path import relpath as os_path_relpath

from subprocess import SubprocessError as subprocess_SubprocessError
from traceback import format_exc as traceback_format_exc

from typing import Iterable, Optional

from logger.logger import Logger

from ..appdir import AppDir
from ..config import PluginOptions
from ..qmake import QtInstallationPaths


class PluginsDeployer:
    """
    A deployment action bound to one Qt module.

    Subclasses implement _deploy(). Errors raised by the filesystem or by
    external tools are reported as a failed deployment, never propagated.
    """

    def __init__(
        self,
        module_name: str,
        appdir: AppDir,
        qt_paths: QtInstallationPaths,
        options: Optional[PluginOptions] = None,
        log_level: str = "INFO",
    ):
        self.module_name = module_name
        self.appdir = appdir
        self.qt_paths = qt_paths
        self.options = options or PluginOptions(appdir=appdir.path)
        self.log_level = log_level
        self.logger = Logger(log_level, self.__class__.__name__)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.module_name!r})"

    def deploy(self) -> bool:
        try:
            return self._deploy()
        except (OSError, subprocess_SubprocessError) as e:
            self.logger.error(f"Failed to deploy {self.module_name} plugins: {e}")
            self.logger.debug(f"Traceback: {traceback_format_exc()}")
            return False

    def _deploy(self) -> bool:
        raise NotImplementedError

    def deploy_standard_qt_plugins(self, plugin_dirs: Iterable[str]) -> bool:
        """Deploy every file of the given plugin directories, keeping their layout."""
        for plugin_dir in plugin_dirs:
            source_dir = os_path_join(self.qt_paths.plugins, plugin_dir)

            if not os_path_isdir(source_dir):
                self.logger.debug(f"No {plugin_dir} plugins in {self.qt_paths.plugins}")
                continue

            self.logger.info(f"Deploying {plugin_dir} plugins")

            for root, dirs, files in os_walk(source_dir):
                dirs.sort()
                for file_name in sorted(files):
                    if file_name.endswith(".debug"):
                        self.logger.debug(f"Skipping .debug file: {file_name}")
                        continue

                    relative_dir = os_path_relpath(root, self.qt_paths.plugins)
                    if not self.appdir.deploy_library(
                        os_path_join(root, file_name),
                        self.appdir.paths.plugins_subdir(relative_dir),
                    ):
                        return False

        return True
