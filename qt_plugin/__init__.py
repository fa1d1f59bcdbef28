from .appdir import AppDir, DeferredOperation, DeferredOperationQueue
from .appdir_paths import AppDirPaths
from .config import PluginOptions
from .elf import ElfFile, ElfFileParseError
from .executor import DeploymentExecutor
from .library_closure import collect_library_names
from .module_matcher import matches_qt_module
from .module_resolver import ModuleResolver, ResolvedModules, split_plugin_list
from .pipeline import DeploymentPipeline
from .qmake import QtInstallationPaths, SearchPaths, find_qmake, parse_qmake_query, query_qmake
from .qt_modules import QtModule, detect_qt_version, get_qt_modules
from .results import ErrorKind, StageResult
from .runtime_config import create_apprun_hook, create_qt_conf
from .translations import deploy_translations

__all__ = [
    "AppDir",
    "AppDirPaths",
    "DeferredOperation",
    "DeferredOperationQueue",
    "DeploymentExecutor",
    "DeploymentPipeline",
    "ElfFile",
    "ElfFileParseError",
    "ErrorKind",
    "ModuleResolver",
    "PluginOptions",
    "QtInstallationPaths",
    "QtModule",
    "ResolvedModules",
    "SearchPaths",
    "StageResult",
    "collect_library_names",
    "create_apprun_hook",
    "create_qt_conf",
    "deploy_translations",
    "detect_qt_version",
    "find_qmake",
    "get_qt_modules",
    "matches_qt_module",
    "parse_qmake_query",
    "query_qmake",
    "split_plugin_list",
]
