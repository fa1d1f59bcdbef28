"""
Maps Qt module names to the deployment actions they require.

The mapping is pure data: adding support for a module means adding a row to
DEPLOYER_RULES. Modules without a row (core, concurrent, ...) need no files
besides their libraries, which linuxdeploy already deployed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..appdir import AppDir
from ..config import PluginOptions
from ..qmake import QtInstallationPaths
from .base import PluginsDeployer
from .plugins import PlatformPluginsDeployer, PluginFilesDeployer, StandardPluginsDeployer
from .qml import QmlImportsDeployer
from .webengine import LibexecDeployer, WebEngineResourcesDeployer


class DeployerKind(Enum):
    PLATFORM_PLUGINS = "platform plugins"
    PLUGIN_DIRECTORIES = "plugin directories"
    PLUGIN_FILES = "plugin files"
    QML_IMPORTS = "qml imports"
    LIBEXEC_HELPERS = "libexec helpers"
    WEBENGINE_RESOURCES = "web engine resources"


@dataclass(frozen=True)
class DeployerRule:
    kind: DeployerKind
    # plugin directories or plugin files, relative to QT_INSTALL_PLUGINS
    plugins: Tuple[str, ...] = ()
    # filename prefix of libexec helpers
    prefix: str = ""


def _plugin_dirs(*plugin_dirs: str) -> DeployerRule:
    return DeployerRule(DeployerKind.PLUGIN_DIRECTORIES, plugins=plugin_dirs)


def _plugin_files(*plugin_files: str) -> DeployerRule:
    return DeployerRule(DeployerKind.PLUGIN_FILES, plugins=plugin_files)


# Directory lists cover Qt 5 and Qt 6, missing directories are skipped
DEPLOYER_RULES: Dict[str, Tuple[DeployerRule, ...]] = {
    "gui": (
        DeployerRule(DeployerKind.PLATFORM_PLUGINS),
        _plugin_dirs("xcbglintegrations"),
    ),
    # widgets applications cannot start without a platform plugin either
    "widgets": (DeployerRule(DeployerKind.PLATFORM_PLUGINS),),
    "opengl": (_plugin_dirs("xcbglintegrations"),),
    "xcbqpa": (_plugin_dirs("xcbglintegrations"),),
    "network": (_plugin_dirs("bearer", "networkinformation", "tls"),),
    "svg": (_plugin_files("iconengines/libqsvgicon.so"),),
    "sql": (_plugin_dirs("sqldrivers"),),
    "sqlite": (_plugin_files("sqldrivers/libqsqlite.so"),),
    "positioning": (_plugin_dirs("position"),),
    "printsupport": (_plugin_dirs("printsupport"),),
    "multimedia": (
        _plugin_dirs("mediaservice", "audio", "playlistformats", "multimedia"),
    ),
    "3drender": (
        _plugin_dirs("geometryloaders", "sceneparsers", "renderers", "renderplugins"),
    ),
    "gamepad": (_plugin_dirs("gamepads"),),
    "sensors": (_plugin_dirs("sensors", "sensorgestures"),),
    "serialbus": (_plugin_dirs("canbus"),),
    "texttospeech": (_plugin_dirs("texttospeech"),),
    "location": (_plugin_dirs("geoservices"),),
    "webview": (_plugin_dirs("webview"),),
    "webenginecore": (
        DeployerRule(DeployerKind.LIBEXEC_HELPERS, prefix="QtWeb"),
        DeployerRule(DeployerKind.WEBENGINE_RESOURCES),
    ),
    "qml": (DeployerRule(DeployerKind.QML_IMPORTS),),
}


class PluginsDeployerFactory:
    def __init__(
        self,
        appdir: AppDir,
        qt_paths: QtInstallationPaths,
        options: Optional[PluginOptions] = None,
        log_level: str = "INFO",
    ):
        self.appdir = appdir
        self.qt_paths = qt_paths
        self.options = options
        self.log_level = log_level

    def get_deployers(self, module_name: str) -> List[PluginsDeployer]:
        return [
            self._create(module_name, rule)
            for rule in DEPLOYER_RULES.get(module_name, ())
        ]

    def _create(self, module_name: str, rule: DeployerRule) -> PluginsDeployer:
        common = (module_name, self.appdir, self.qt_paths, self.options, self.log_level)

        if rule.kind is DeployerKind.PLATFORM_PLUGINS:
            return PlatformPluginsDeployer(*common)
        if rule.kind is DeployerKind.PLUGIN_DIRECTORIES:
            return StandardPluginsDeployer(*common, plugin_dirs=rule.plugins)
        if rule.kind is DeployerKind.PLUGIN_FILES:
            return PluginFilesDeployer(*common, plugin_files=rule.plugins)
        if rule.kind is DeployerKind.QML_IMPORTS:
            return QmlImportsDeployer(*common)
        if rule.kind is DeployerKind.LIBEXEC_HELPERS:
            return LibexecDeployer(*common, prefix=rule.prefix)
        if rule.kind is DeployerKind.WEBENGINE_RESOURCES:
            return WebEngineResourcesDeployer(*common)

        raise ValueError(f"Unknown deployer kind: {rule.kind}")
