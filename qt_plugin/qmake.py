"""
Discovery of the Qt installation layout through `qmake -query`.
"""

from os.path import isfile as os_path_isfile

from subprocess import run as subprocess_run
from subprocess import CalledProcessError as subprocess_CalledProcessError

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from logger.logger import Logger

from .qt_modules import DEFAULT_QT_VERSION

QMAKE_CANDIDATES = {
    5: ("qmake-qt5", "qmake"),
    6: ("qmake6", "qmake"),
}

# key in the query output -> QtInstallationPaths field
REQUIRED_QMAKE_KEYS = (
    ("QT_INSTALL_PLUGINS", "plugins"),
    ("QT_INSTALL_LIBEXECS", "libexecs"),
    ("QT_INSTALL_DATA", "data"),
    ("QT_INSTALL_TRANSLATIONS", "translations"),
    ("QT_INSTALL_BINS", "bins"),
    ("QT_INSTALL_LIBS", "libs"),
    ("QT_INSTALL_QML", "qml"),
)


@dataclass(frozen=True)
class QtInstallationPaths:
    plugins: str
    libexecs: str
    data: str
    translations: str
    bins: str
    libs: str
    qml: str
    version: str = ""

    @classmethod
    def from_query(cls, qmake_vars: Mapping[str, str]) -> "QtInstallationPaths":
        """Raises KeyError naming the missing keys if the query result is incomplete."""
        missing = missing_qmake_keys(qmake_vars)
        if missing:
            raise KeyError(", ".join(missing))

        fields = {field: qmake_vars[key] for key, field in REQUIRED_QMAKE_KEYS}
        return cls(version=qmake_vars.get("QT_VERSION", ""), **fields)


def missing_qmake_keys(qmake_vars: Mapping[str, str]) -> List[str]:
    return [key for key, _field in REQUIRED_QMAKE_KEYS if not qmake_vars.get(key)]


@dataclass(frozen=True)
class SearchPaths:
    """
    Library and executable search paths with the Qt installation prepended.

    Instead of changing the plugin's own environment, the resulting mapping is
    handed to every external tool started afterwards.
    """

    library_path: str
    executable_path: str

    @classmethod
    def for_installation(
        cls, qt_paths: QtInstallationPaths, environ: Mapping[str, str]
    ) -> "SearchPaths":
        return cls(
            library_path=_prepend_path(qt_paths.libs, environ.get("LD_LIBRARY_PATH")),
            executable_path=_prepend_path(qt_paths.bins, environ.get("PATH")),
        )

    def apply(self, environ: Mapping[str, str]) -> Dict[str, str]:
        updated = dict(environ)
        updated["LD_LIBRARY_PATH"] = self.library_path
        updated["PATH"] = self.executable_path
        return updated


def _prepend_path(directory: str, current: Optional[str]) -> str:
    if not current:
        return directory
    return f"{directory}:{current}"


def which(name: str, environ: Optional[Mapping[str, str]] = None, log_level: str = "INFO") -> str:
    logger = Logger(log_level, "which")
    logger.debug(f"Calling 'which {name}'")

    try:
        result = subprocess_run(
            ["which", name],
            capture_output=True,
            text=True,
            check=True,
            env=dict(environ) if environ is not None else None,
        )
    except subprocess_CalledProcessError as e:
        logger.debug(f"which call failed, exit code: {e.returncode}")
        return ""
    except FileNotFoundError:
        logger.debug("which is not available")
        return ""

    return result.stdout.strip()


def find_qmake(
    environ: Mapping[str, str],
    qt_version: int = DEFAULT_QT_VERSION,
    log_level: str = "INFO",
) -> str:
    """Path of qmake: $QMAKE if set, otherwise the first candidate found on $PATH."""
    logger = Logger(log_level, "qmake")

    qmake_path = environ.get("QMAKE")
    if qmake_path:
        logger.info(f"Using user specified qmake: {qmake_path}")
        return qmake_path

    for candidate in QMAKE_CANDIDATES.get(qt_version, ("qmake",)):
        qmake_path = which(candidate, environ, log_level)
        if qmake_path:
            return qmake_path

    return ""


def parse_qmake_query(output: str) -> Dict[str, str]:
    """Parse `key:value` lines, ignoring lines that do not split into exactly two parts."""
    qmake_vars = {}

    for line in output.splitlines():
        parts = line.split(":")
        if len(parts) != 2:
            continue
        qmake_vars[parts[0]] = parts[1]

    return qmake_vars


def query_qmake(
    qmake_path: str,
    environ: Optional[Mapping[str, str]] = None,
    log_level: str = "INFO",
) -> Dict[str, str]:
    logger = Logger(log_level, "qmake")

    try:
        result = subprocess_run(
            [qmake_path, "-query"],
            capture_output=True,
            text=True,
            env=dict(environ) if environ is not None else None,
        )
    except OSError as e:
        logger.error(f"Call to qmake failed: {e}")
        return {}

    if result.returncode != 0:
        logger.error(f"Call to qmake failed: {result.stderr.strip()}")
        return {}

    return parse_qmake_query(result.stdout)


def locate_qmake(
    environ: Mapping[str, str],
    qt_version: int = DEFAULT_QT_VERSION,
    log_level: str = "INFO",
) -> Tuple[str, str]:
    """Returns (qmake path, error message); the message is empty on success."""
    qmake_path = find_qmake(environ, qt_version, log_level)

    if not qmake_path:
        return "", "Could not find qmake, please install or provide path using $QMAKE"

    if not os_path_isfile(qmake_path):
        return "", f"No such file or directory: {qmake_path}"

    return qmake_path, ""
