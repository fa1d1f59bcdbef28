from os import listdir as os_listdir

from os.path import join as os_path_join
from os.path import isdir as os_path_isdir
from os.path import isfile as os_path_isfile

from .base import PluginsDeployer

WEBENGINE_RESOURCES = (
    "qtwebengine_resources.pak",
    "qtwebengine_devtools_resources.pak",
    "qtwebengine_resources_100p.pak",
    "qtwebengine_resources_200p.pak",
    "icudtl.dat",
)

LIBEXEC_QT_CONF = """# generated by linuxdeploy-plugin-qt-python
[Paths]
Prefix = ../
"""


class LibexecDeployer(PluginsDeployer):
    """Deploys helper executables such as QtWebEngineProcess to usr/libexec."""

    def __init__(self, *args, prefix: str = "QtWeb", **kwargs):
        super().__init__(*args, **kwargs)
        self.prefix = prefix

    def _deploy(self) -> bool:
        libexecs_path = self.qt_paths.libexecs
        if not os_path_isdir(libexecs_path):
            self.logger.error(f"Qt libexecs directory not found: {libexecs_path}")
            return False

        self.logger.info(f"Deploying {self.prefix}* helpers from {libexecs_path}")

        for file_name in sorted(os_listdir(libexecs_path)):
            if not file_name.startswith(self.prefix):
                continue
            if not self.appdir.deploy_executable(
                os_path_join(libexecs_path, file_name), self.appdir.paths.LIBEXEC_DIR
            ):
                return False

        # the helpers resolve Qt's resources relative to their own location
        return self.appdir.write_file(
            os_path_join(self.appdir.paths.LIBEXEC_DIR, "qt.conf"), LIBEXEC_QT_CONF
        )


class WebEngineResourcesDeployer(PluginsDeployer):
    def _deploy(self) -> bool:
        self.logger.info("Deploying web engine resources")

        for file_name in WEBENGINE_RESOURCES:
            path = os_path_join(self.qt_paths.data, "resources", file_name)
            if not os_path_isfile(path):
                continue
            if not self.appdir.deploy_file(path, self.appdir.paths.RESOURCES_DIR):
                return False

        locales_dir = os_path_join(self.qt_paths.translations, "qtwebengine_locales")
        if not os_path_isdir(locales_dir):
            self.logger.debug(f"No web engine locales in {self.qt_paths.translations}")
            return True

        target_dir = os_path_join(self.appdir.paths.TRANSLATIONS_DIR, "qtwebengine_locales")
        for file_name in sorted(os_listdir(locales_dir)):
            path = os_path_join(locales_dir, file_name)
            if os_path_isfile(path) and not self.appdir.deploy_file(path, target_dir):
                return False

        return True
