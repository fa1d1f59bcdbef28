#!/usr/bin/env python3
"""
linuxdeploy-plugin-qt-python - Bundle Qt resources into an existing AppDir

linuxdeploy discovers input plugins named linuxdeploy-plugin-<name>; link or
copy this launcher as linuxdeploy-plugin-qt next to linuxdeploy, or install
the package to get the linuxdeploy-plugin-qt console script.
"""
from qt_plugin.cli import main

if __name__ == "__main__":
    main()
