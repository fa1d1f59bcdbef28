from os import listdir as os_listdir

from os.path import join as os_path_join
from os.path import isdir as os_path_isdir
from os.path import isfile as os_path_isfile
from os.path import dirname as os_path_dirname

from typing import Sequence

from .base import PluginsDeployer

GTK_PLATFORM_THEMES = ("libqgtk2.so", "libqgtk3.so")
GTK_STYLES = ("libqgtk2style.so",)


class StandardPluginsDeployer(PluginsDeployer):
    """Deploys whole plugin directories, e.g. sqldrivers or bearer."""

    def __init__(self, *args, plugin_dirs: Sequence[str] = (), **kwargs):
        super().__init__(*args, **kwargs)
        self.plugin_dirs = tuple(plugin_dirs)

    def _deploy(self) -> bool:
        return self.deploy_standard_qt_plugins(self.plugin_dirs)


class PluginFilesDeployer(PluginsDeployer):
    """Deploys single plugin files given relative to the plugins directory."""

    def __init__(self, *args, plugin_files: Sequence[str] = (), **kwargs):
        super().__init__(*args, **kwargs)
        self.plugin_files = tuple(plugin_files)

    def _deploy(self) -> bool:
        for plugin_file in self.plugin_files:
            source = os_path_join(self.qt_paths.plugins, plugin_file)

            if not os_path_isfile(source):
                self.logger.warning(f"Could not find plugin: {source}")
                continue

            self.logger.info(f"Deploying plugin {plugin_file}")
            destination = self.appdir.paths.plugins_subdir(os_path_dirname(plugin_file))
            if not self.appdir.deploy_library(source, destination):
                return False

        return True


class PlatformPluginsDeployer(PluginsDeployer):
    def _deploy(self) -> bool:
        self.logger.info("Deploying platform plugins")

        xcb_plugin = os_path_join(self.qt_paths.plugins, "platforms", "libqxcb.so")
        if not self.appdir.deploy_library(
            xcb_plugin, self.appdir.paths.plugins_subdir("platforms")
        ):
            return False

        for platform_plugin in self.options.extra_platform_plugins:
            self.logger.info(f"Deploying extra platform plugin {platform_plugin}")
            if not self.appdir.deploy_library(
                os_path_join(self.qt_paths.plugins, "platforms", platform_plugin),
                self.appdir.paths.plugins_subdir("platforms"),
            ):
                return False

        if not self.deploy_standard_qt_plugins(("platforminputcontexts", "imageformats")):
            return False

        return self._deploy_platform_themes()

    def _deploy_platform_themes(self) -> bool:
        if self.options.deploy_platform_themes:
            self.logger.warning("Deploying all platform themes and styles")
            return self.deploy_standard_qt_plugins(("platformthemes", "styles"))

        # Only the theme files themselves: if they cannot be loaded on the
        # target system, Qt falls back to its default theme
        self.logger.info("Trying to deploy Gtk platform themes and styles")
        for plugin_dir, file_names in (
            ("platformthemes", GTK_PLATFORM_THEMES),
            ("styles", GTK_STYLES),
        ):
            source_dir = os_path_join(self.qt_paths.plugins, plugin_dir)
            if not os_path_isdir(source_dir):
                continue

            available = set(os_listdir(source_dir))
            for file_name in file_names:
                if file_name not in available:
                    continue
                if not self.appdir.deploy_file(
                    os_path_join(source_dir, file_name),
                    self.appdir.paths.plugins_subdir(plugin_dir),
                ):
                    return False

        return True
