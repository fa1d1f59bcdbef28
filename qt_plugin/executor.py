from typing import Sequence

from logger.logger import Logger

from .appdir import AppDir
from .deployers.factory import PluginsDeployerFactory
from .qt_modules import QtModule
from .results import ErrorKind, StageResult
from .translations import deploy_translations


class DeploymentExecutor:
    """
    Runs the deployers of each module in order and stops at the first failure.

    Once every module is deployed, translations are scheduled and the AppDir's
    deferred operations are executed, exactly once per successful run.
    """

    def __init__(
        self,
        appdir: AppDir,
        deployer_factory: PluginsDeployerFactory,
        translations_path: str,
        log_level: str = "INFO",
    ):
        self.appdir = appdir
        self.deployer_factory = deployer_factory
        self.translations_path = translations_path
        self.log_level = log_level
        self.logger = Logger(log_level, self.__class__.__name__)

    def deploy_modules(self, modules: Sequence[QtModule]) -> StageResult:
        for module in modules:
            self.logger.info(f"-- Deploying module: {module.name} --")

            for deployer in self.deployer_factory.get_deployers(module.name):
                self.logger.debug(f"Running {deployer!r}")
                if not deployer.deploy():
                    return StageResult.failure(
                        ErrorKind.DEPLOYER, f"Failed to deploy module {module.name}"
                    )

        return StageResult.success()

    def execute(self, modules: Sequence[QtModule]) -> StageResult:
        result = self.deploy_modules(modules)
        if not result:
            return result

        self.logger.info("-- Deploying translations --")
        if not deploy_translations(
            self.appdir, self.translations_path, modules, self.log_level
        ):
            return StageResult.failure(
                ErrorKind.TRANSLATIONS, "Failed to deploy translations"
            )

        self.logger.info("-- Executing deferred operations --")
        if not self.appdir.execute_deferred_operations():
            return StageResult.failure(
                ErrorKind.DEFERRED_OPERATIONS, "Failed to execute deferred operations"
            )

        return StageResult.success()
