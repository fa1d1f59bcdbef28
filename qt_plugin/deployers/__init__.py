from .base import PluginsDeployer
from .factory import DEPLOYER_RULES, DeployerKind, DeployerRule, PluginsDeployerFactory
from .plugins import PlatformPluginsDeployer, PluginFilesDeployer, StandardPluginsDeployer
from .qml import QmlImportsDeployer
from .webengine import LibexecDeployer, WebEngineResourcesDeployer

__all__ = [
    "DEPLOYER_RULES",
    "DeployerKind",
    "DeployerRule",
    "LibexecDeployer",
    "PlatformPluginsDeployer",
    "PluginFilesDeployer",
    "PluginsDeployer",
    "PluginsDeployerFactory",
    "QmlImportsDeployer",
    "StandardPluginsDeployer",
    "WebEngineResourcesDeployer",
]
