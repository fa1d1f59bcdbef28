from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .module_resolver import split_plugin_list

PATH_LIST_SEPARATOR = ":"


def _split_paths(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [path for path in value.split(PATH_LIST_SEPARATOR) if path]


@dataclass
class PluginOptions:
    """Settings of one plugin run, from the command line and the environment."""

    appdir: str
    extra_plugins: List[str] = field(default_factory=list)
    extra_plugins_from_env: List[str] = field(default_factory=list)
    extra_platform_plugins: List[str] = field(default_factory=list)
    deploy_platform_themes: bool = False
    disable_copyright_files_deployment: bool = False
    qml_sources_paths: List[str] = field(default_factory=list)
    qml_modules_paths: List[str] = field(default_factory=list)
    debug: bool = False

    @classmethod
    def from_arguments(cls, args, environ: Mapping[str, str]) -> "PluginOptions":
        return cls(
            appdir=args.appdir,
            extra_plugins=list(args.extra_plugin or []),
            extra_plugins_from_env=split_plugin_list(environ.get("EXTRA_QT_PLUGINS")),
            extra_platform_plugins=split_plugin_list(
                environ.get("EXTRA_PLATFORM_PLUGINS")
            ),
            deploy_platform_themes=environ.get("DEPLOY_PLATFORM_THEMES") is not None,
            disable_copyright_files_deployment=(
                environ.get("DISABLE_COPYRIGHT_FILES_DEPLOYMENT") is not None
            ),
            qml_sources_paths=_split_paths(environ.get("QML_SOURCES_PATHS")),
            qml_modules_paths=_split_paths(environ.get("QML_MODULES_PATHS")),
            debug=environ.get("DEBUG") is not None,
        )

    @property
    def token_sources(self) -> List[List[str]]:
        """Explicit module requests, each source matched on its own."""
        return [self.extra_plugins, self.extra_plugins_from_env]
