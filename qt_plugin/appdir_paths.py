from os.path import join as os_path_join


class AppDirPaths:
    """AppDir layout used by linuxdeploy (FHS-like, everything below usr/)"""

    def __init__(self, appdir_path: str):
        self.appdir_path = appdir_path

        self.USR_DIR = os_path_join(appdir_path, "usr")
        self.BIN_DIR = os_path_join(self.USR_DIR, "bin")
        self.LIB_DIR = os_path_join(self.USR_DIR, "lib")
        self.PLUGINS_DIR = os_path_join(self.USR_DIR, "plugins")
        self.QML_DIR = os_path_join(self.USR_DIR, "qml")
        self.TRANSLATIONS_DIR = os_path_join(self.USR_DIR, "translations")
        self.LIBEXEC_DIR = os_path_join(self.USR_DIR, "libexec")
        self.RESOURCES_DIR = os_path_join(self.USR_DIR, "resources")
        self.DOC_DIR = os_path_join(self.USR_DIR, "share", "doc")
        self.APPRUN_HOOKS_DIR = os_path_join(appdir_path, "apprun-hooks")

        # Relative paths for qt.conf (relative to usr/bin)
        self.QT_CONF_PREFIX = "../"
        self.QT_CONF_PLUGINS = "plugins"
        self.QT_CONF_QML = "qml"
        self.QT_CONF_TRANSLATIONS = "translations"

    def plugins_subdir(self, *parts: str) -> str:
        return os_path_join(self.PLUGINS_DIR, *parts)
