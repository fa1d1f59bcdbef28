from os import chmod as os_chmod
from os import makedirs as os_makedirs

from os.path import join as os_path_join
from os.path import isdir as os_path_isdir
from os.path import isfile as os_path_isfile

from typing import Iterable

from logger.logger import Logger

from .appdir import AppDir
from .qt_modules import QtModule

APPRUN_HOOK_NAME = "linuxdeploy-plugin-qt-hook.sh"


def render_qt_conf(appdir: AppDir) -> str:
    paths = appdir.paths
    return (
        "# generated by linuxdeploy-plugin-qt-python\n"
        "[Paths]\n"
        f"Prefix = {paths.QT_CONF_PREFIX}\n"
        f"Plugins = {paths.QT_CONF_PLUGINS}\n"
        f"Imports = {paths.QT_CONF_QML}\n"
        f"Qml2Imports = {paths.QT_CONF_QML}\n"
        f"Translations = {paths.QT_CONF_TRANSLATIONS}\n"
    )


def render_apprun_hook(appdir: AppDir, modules: Iterable[QtModule] = ()) -> str:
    module_names = {module.name for module in modules}

    lines = [
        "# generated by linuxdeploy-plugin-qt-python",
        "",
        'APPDIR="${APPDIR:-"$(dirname "$(readlink -f "$0")")"}"',
        "",
        "# bundled Qt libraries, tools and plugins take precedence over the host's",
        'export LD_LIBRARY_PATH="$APPDIR/usr/lib${LD_LIBRARY_PATH:+:$LD_LIBRARY_PATH}"',
        'export PATH="$APPDIR/usr/bin${PATH:+:$PATH}"',
        'export QT_PLUGIN_PATH="$APPDIR/usr/plugins"',
    ]

    if os_path_isdir(appdir.paths.QML_DIR):
        lines.append('export QML2_IMPORT_PATH="$APPDIR/usr/qml"')

    if "webenginecore" in module_names:
        lines.append(
            'export QTWEBENGINEPROCESS_PATH="$APPDIR/usr/libexec/QtWebEngineProcess"'
        )

    lines.extend(
        [
            "",
            '# try to make Qt apps more "native looking" on Gtk-based desktops, if possible',
            'case "${XDG_CURRENT_DESKTOP}" in',
            "    *GNOME*|*gnome*|*XFCE*)",
            "        export QT_QPA_PLATFORMTHEME=gtk3",
            "        ;;",
            "esac",
        ]
    )
    return "\n".join(lines) + "\n"


def create_qt_conf(appdir: AppDir, log_level: str = "INFO") -> bool:
    """Write usr/bin/qt.conf pointing Qt to the bundled plugins, QML imports and translations."""
    logger = Logger(log_level, "RuntimeConfig")
    qt_conf_path = os_path_join(appdir.paths.BIN_DIR, "qt.conf")

    if os_path_isfile(qt_conf_path):
        logger.warning(f"Overwriting existing qt.conf file: {qt_conf_path}")

    try:
        os_makedirs(appdir.paths.BIN_DIR, exist_ok=True)
        with open(qt_conf_path, "w") as f:
            f.write(render_qt_conf(appdir))
    except OSError as e:
        logger.error(f"Failed to open {qt_conf_path} for writing: {e}")
        return False

    logger.info(f"Created qt.conf: {qt_conf_path}")
    return True


def create_apprun_hook(
    appdir: AppDir, modules: Iterable[QtModule] = (), log_level: str = "INFO"
) -> bool:
    logger = Logger(log_level, "RuntimeConfig")
    hook_path = os_path_join(appdir.paths.APPRUN_HOOKS_DIR, APPRUN_HOOK_NAME)

    try:
        os_makedirs(appdir.paths.APPRUN_HOOKS_DIR, exist_ok=True)
        with open(hook_path, "w") as f:
            f.write(render_apprun_hook(appdir, modules))
        os_chmod(hook_path, 0o644)
    except OSError as e:
        logger.error(f"Failed to create AppRun hook {hook_path}: {e}")
        return False

    logger.info(f"Created AppRun hook: {hook_path}")
    return True
