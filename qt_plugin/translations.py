from os import walk as os_walk

from os.path import join as os_path_join
from os.path import isdir as os_path_isdir
from os.path import splitext as os_path_splitext

from typing import Sequence

from logger.logger import Logger

from .appdir import AppDir
from .qt_modules import QtModule


def is_wanted_translation(file_name: str, modules: Sequence[QtModule]) -> bool:
    stem, extension = os_path_splitext(file_name)
    if extension != ".qm":
        return False

    # the base Qt catalogs, e.g. qt_de.qm, are always deployed
    if stem.startswith("qt_") and 5 <= len(stem) <= 6:
        return True

    return any(
        module.translation_file_prefix
        and file_name.startswith(module.translation_file_prefix)
        for module in modules
    )


def deploy_translations(
    appdir: AppDir,
    translations_path: str,
    modules: Sequence[QtModule],
    log_level: str = "INFO",
) -> bool:
    """
    Deploy the Qt translation catalogs of all resolved modules once.

    A missing translations directory and a directory without matching catalogs
    are logged as warnings and reported as success, since many Qt
    installations ship without translations (see "Missing translations
    directory" in DESIGN.md). Only errors while reading the directory or
    scheduling a file fail the deployment.
    """
    logger = Logger(log_level, "Translations")

    if not translations_path or not os_path_isdir(translations_path):
        logger.warning(
            f"Translation directory does not exist, skipping deployment: {translations_path}"
        )
        return True

    logger.info(f"Qt translations directory: {translations_path}")
    deployed = 0

    try:
        for root, dirs, files in os_walk(translations_path, onerror=_raise):
            dirs.sort()
            for file_name in sorted(files):
                if not is_wanted_translation(file_name, modules):
                    continue
                if not appdir.deploy_file(
                    os_path_join(root, file_name), appdir.paths.TRANSLATIONS_DIR
                ):
                    return False
                deployed += 1
    except OSError as e:
        logger.error(f"Failed to read translations directory: {e}")
        return False

    if deployed:
        logger.info(f"Scheduled {deployed} translation files for deployment")
    else:
        logger.warning("Could not find translation files for the deployed modules")

    return True


def _raise(error: OSError):
    raise error
