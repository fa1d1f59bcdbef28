from os.path import isfile as os_path_isfile
from os.path import basename as os_path_basename

from .qt_modules import QtModule


def matches_qt_module(candidate: str, module: QtModule) -> bool:
    """
    Check whether a library filename, a path or a module name identifies a module.

    Paths to existing regular files are reduced to their filename first. The
    library prefix is compared with a trailing dot appended, so that e.g.
    libQt5WebEngineCore.so.5 is matched by webenginecore but not by webengine.
    """
    if not candidate:
        return False

    if os_path_isfile(candidate):
        candidate = os_path_basename(candidate)

    if candidate.startswith(module.library_file_prefix + "."):
        return True

    return candidate == module.name
