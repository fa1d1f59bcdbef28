from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from logger.logger import Logger

from .module_matcher import matches_qt_module
from .qt_modules import QtModule, get_qt_modules

PLUGIN_LIST_SEPARATOR = ";"


def split_plugin_list(value: Optional[str]) -> List[str]:
    """Split a ;-separated list of module tokens such as $EXTRA_QT_PLUGINS."""
    if not value:
        return []
    return [token for token in value.split(PLUGIN_LIST_SEPARATOR) if token]


@dataclass
class ResolvedModules:
    found: List[QtModule] = field(default_factory=list)
    extra: List[QtModule] = field(default_factory=list)

    @property
    def modules(self) -> List[QtModule]:
        """Deployment order: discovered modules, then explicitly requested ones."""
        return self.found + self.extra

    @property
    def is_empty(self) -> bool:
        return not self.found and not self.extra


class ModuleResolver:
    def __init__(
        self, catalog: Optional[Sequence[QtModule]] = None, log_level: str = "INFO"
    ):
        self.catalog = tuple(catalog) if catalog is not None else get_qt_modules()
        self.logger = Logger(log_level, self.__class__.__name__)

    def match_modules(self, candidates: Iterable[str]) -> List[QtModule]:
        """Catalog modules matched by at least one candidate, in catalog order."""
        candidates = list(candidates)
        matched = []

        for module in self.catalog:
            for candidate in candidates:
                if matches_qt_module(candidate, module):
                    self.logger.debug(f"{candidate} -> found module: {module.name}")
                    matched.append(module)
                    break

        return matched

    def resolve(
        self,
        library_names: Iterable[str],
        token_sources: Sequence[Sequence[str]] = (),
    ) -> ResolvedModules:
        """
        Resolve the modules to deploy.

        Each token source (e.g. -p values, $EXTRA_QT_PLUGINS) is matched
        against the catalog on its own and the results are concatenated.
        The extra modules are not deduplicated against the found ones.
        """
        resolved = ResolvedModules(found=self.match_modules(library_names))

        for tokens in token_sources:
            resolved.extra.extend(self.match_modules(tokens))

        self.logger.info(
            f"Found Qt modules: {' '.join(sorted({m.name for m in resolved.found}))}"
        )
        self.logger.info(
            f"Extra Qt modules: {' '.join(sorted({m.name for m in resolved.extra}))}"
        )
        return resolved
