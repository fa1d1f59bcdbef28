"""
Catalog of the Qt modules the plugin knows how to detect and deploy.

Each module is identified by a canonical name (usable with -p/--extra-plugin
and $EXTRA_QT_PLUGINS), the filename prefix of its shared library (matched
with a trailing dot, see module_matcher) and the prefix of its translation
catalogs in QT_INSTALL_TRANSLATIONS.
"""

from dataclasses import dataclass
from os.path import basename as os_path_basename

from typing import Iterable, Tuple


@dataclass(frozen=True)
class QtModule:
    name: str
    library_file_prefix: str
    translation_file_prefix: str = ""


# (name, library suffix after libQt<version>, translation prefix)
# Order matters: resolved modules are reported and deployed in this order.
_QT_MODULE_TABLE = (
    ("bluetooth", "Bluetooth", ""),
    ("concurrent", "Concurrent", "qtbase"),
    ("core", "Core", "qtbase"),
    ("declarative", "Declarative", "qtquick1"),
    ("designer", "Designer", ""),
    ("designercomponents", "DesignerComponents", ""),
    ("gamepad", "Gamepad", ""),
    ("gui", "Gui", "qtbase"),
    ("help", "Help", "qt_help"),
    ("location", "Location", "qtlocation"),
    ("multimedia", "Multimedia", "qtmultimedia"),
    ("multimediaquick", "MultimediaQuick", "qtmultimedia"),
    ("multimediawidgets", "MultimediaWidgets", "qtmultimedia"),
    ("network", "Network", "qtbase"),
    ("nfc", "Nfc", ""),
    ("opengl", "OpenGL", "qtbase"),
    ("positioning", "Positioning", ""),
    ("printsupport", "PrintSupport", "qtbase"),
    ("qml", "Qml", "qtdeclarative"),
    ("qmltooling", "QmlTooling", ""),
    ("quick", "Quick", "qtdeclarative"),
    ("quickparticles", "QuickParticles", ""),
    ("quickwidgets", "QuickWidgets", ""),
    ("script", "Script", "qtscript"),
    ("scripttools", "ScriptTools", "qtscript"),
    ("sensors", "Sensors", ""),
    ("serialbus", "SerialBus", "qtserialbus"),
    ("serialport", "SerialPort", "qtserialport"),
    ("sql", "Sql", "qtbase"),
    ("sqlite", None, ""),
    ("svg", "Svg", ""),
    ("test", "Test", "qtbase"),
    ("texttospeech", "TextToSpeech", ""),
    ("webchannel", "WebChannel", ""),
    ("webengine", "WebEngine", "qtwebengine"),
    ("webenginecore", "WebEngineCore", "qtwebengine"),
    ("webenginewidgets", "WebEngineWidgets", "qtwebengine"),
    ("webkit", "WebKit", "qtwebkit"),
    ("webkitwidgets", "WebKitWidgets", "qtwebkit"),
    ("websockets", "WebSockets", "qtwebsockets"),
    ("webview", "WebView", ""),
    ("widgets", "Widgets", "qtbase"),
    ("xcbqpa", "XcbQpa", ""),
    ("xml", "Xml", "qtbase"),
    ("xmlpatterns", "XmlPatterns", "qtxmlpatterns"),
    ("3danimation", "3DAnimation", ""),
    ("3dcore", "3DCore", ""),
    ("3dextras", "3DExtras", ""),
    ("3dinput", "3DInput", ""),
    ("3dlogic", "3DLogic", ""),
    ("3dquick", "3DQuick", ""),
    ("3drender", "3DRender", ""),
)

# Modules that were removed in Qt 6
_QT5_ONLY_MODULES = {
    "declarative",
    "gamepad",
    "script",
    "scripttools",
    "webkit",
    "webkitwidgets",
    "xmlpatterns",
}

# The SQLite driver is a plugin, not a Qt library, but it can be requested
# by name or by its plugin filename.
SQLITE_PLUGIN_PREFIX = "libqsqlite"

SUPPORTED_QT_VERSIONS = (5, 6)
DEFAULT_QT_VERSION = 5


def _build_catalog(qt_version: int) -> Tuple[QtModule, ...]:
    modules = []
    for name, library_suffix, translation_prefix in _QT_MODULE_TABLE:
        if qt_version != 5 and name in _QT5_ONLY_MODULES:
            continue
        if library_suffix is None:
            prefix = SQLITE_PLUGIN_PREFIX
        else:
            prefix = f"libQt{qt_version}{library_suffix}"
        modules.append(QtModule(name, prefix, translation_prefix))
    return tuple(modules)


QT5_MODULES = _build_catalog(5)
QT6_MODULES = _build_catalog(6)


def get_qt_modules(qt_version: int = DEFAULT_QT_VERSION) -> Tuple[QtModule, ...]:
    """Return the catalog for a Qt major version."""
    if qt_version == 6:
        return QT6_MODULES
    if qt_version == 5:
        return QT5_MODULES
    raise ValueError(f"Unsupported Qt version: {qt_version}")


def detect_qt_version(library_names: Iterable[str]) -> int:
    """Detect the Qt major version from library filenames, Qt 5 by default."""
    for library_name in library_names:
        if os_path_basename(library_name).startswith("libQt6"):
            return 6
    return DEFAULT_QT_VERSION
