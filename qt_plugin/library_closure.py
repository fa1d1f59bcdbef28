from os.path import basename as os_path_basename

from typing import Mapping, Optional, Set

from logger.logger import Logger

from .appdir import AppDir
from .elf import ElfFile, ElfFileParseError


def collect_library_names(
    appdir: AppDir,
    environ: Optional[Mapping[str, str]] = None,
    log_level: str = "INFO",
) -> Set[str]:
    """
    Collect the filenames of the AppDir's shared libraries and of all their
    transitive dependencies. Files that cannot be parsed as ELF only
    contribute their own name.
    """
    logger = Logger(log_level, "LibraryClosure")
    library_names = set()

    for path in appdir.list_shared_libraries():
        library_names.add(os_path_basename(path))

        try:
            dependencies = ElfFile(path, environ, log_level).trace_dynamic_dependencies()
        except ElfFileParseError:
            logger.debug(f"Failed to parse file as ELF file: {path}")
            continue

        for dependency in dependencies:
            library_names.add(os_path_basename(dependency))

    logger.debug(f"Libraries to consider: {' '.join(sorted(library_names))}")
    return library_names
