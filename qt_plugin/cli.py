"""
linuxdeploy-plugin-qt-python - Bundle Qt resources into an existing AppDir

For use as an input plugin of linuxdeploy, which creates the AppDir and
deploys the application's shared libraries before calling this plugin.
"""

from os import environ as os_environ
from sys import exit as sys_exit
from sys import stderr as sys_stderr
from traceback import format_exc as traceback_format_exc

from argparse import ArgumentParser as argparse_ArgumentParser

from typing import List, Mapping, Optional

from logger.logger import Logger, get_log_level

from .config import PluginOptions
from .pipeline import DeploymentPipeline

PLUGIN_TYPE = "input"
PLUGIN_API_VERSION = "0"


class PluginArgumentParser(argparse_ArgumentParser):
    """linuxdeploy expects exit code 1 on invalid arguments."""

    def error(self, message):
        self.print_usage(sys_stderr)
        print(f"{self.prog}: error: {message}", file=sys_stderr)
        sys_exit(1)


def build_parser() -> PluginArgumentParser:
    parser = PluginArgumentParser(
        description="Bundles Qt resources. For use with an existing AppDir, created by linuxdeploy.",
        prog="linuxdeploy-plugin-qt",
    )

    parser.add_argument(
        "--appdir",
        type=str,
        help="Path to an existing AppDir",
    )

    parser.add_argument(
        "-p",
        "--extra-plugin",
        type=str,
        action="append",
        metavar="PLUGIN",
        help="""Extra Qt plugin to deploy (specified by name, filename or path).
        Can be specified multiple times, see also $EXTRA_QT_PLUGINS.""",
    )

    parser.add_argument(
        "--plugin-type",
        action="store_true",
        help="Print plugin type and exit",
    )

    parser.add_argument(
        "--plugin-api-version",
        action="store_true",
        help="Print plugin API version and exit",
    )

    return parser


def run(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Run the plugin and return its exit code."""
    if environ is None:
        environ = dict(os_environ)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.plugin_type:
        print(PLUGIN_TYPE)
        return 0

    if args.plugin_api_version:
        print(PLUGIN_API_VERSION)
        return 0

    log_level = get_log_level(environ)
    logger = Logger(log_level, "linuxdeploy-plugin-qt")

    if not args.appdir:
        logger.error("--appdir parameter required")
        parser.print_help(sys_stderr)
        return 1

    options = PluginOptions.from_arguments(args, environ)
    logger.debug(f"Options: {options}")

    result = DeploymentPipeline(options, environ, log_level).run()
    return 0 if result else 1


def main():
    try:
        sys_exit(run())
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys_stderr)
        sys_exit(1)
    except Exception as e:
        print(f"ERROR: {e}", file=sys_stderr)
        if os_environ.get("DEBUG") is not None:
            print(traceback_format_exc(), file=sys_stderr)
        sys_exit(1)


if __name__ == "__main__":
    main()
