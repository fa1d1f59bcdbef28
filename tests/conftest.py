from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from qt_plugin.appdir import AppDir  # noqa: E402
from qt_plugin.qmake import QtInstallationPaths  # noqa: E402


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_script(path: Path, body: str) -> Path:
    write_file(path, "#!/bin/sh\n" + body)
    path.chmod(0o755)
    return path


class FakeQt:
    """A Qt installation layout with placeholder (non-ELF) files."""

    def __init__(self, root: Path):
        self.root = root
        self.plugins = root / "plugins"
        self.libexecs = root / "libexec"
        self.data = root
        self.translations = root / "translations"
        self.bins = root / "bin"
        self.libs = root / "lib"
        self.qml = root / "qml"
        for directory in (
            self.plugins,
            self.libexecs,
            self.translations,
            self.bins,
            self.libs,
            self.qml,
        ):
            directory.mkdir(parents=True, exist_ok=True)

    def add_plugin(self, relative_path: str) -> Path:
        return write_file(self.plugins / relative_path, "plugin")

    def add_translation(self, name: str) -> Path:
        return write_file(self.translations / name, "qm")

    @property
    def query_vars(self) -> Dict[str, str]:
        return {
            "QT_INSTALL_PLUGINS": str(self.plugins),
            "QT_INSTALL_LIBEXECS": str(self.libexecs),
            "QT_INSTALL_DATA": str(self.data),
            "QT_INSTALL_TRANSLATIONS": str(self.translations),
            "QT_INSTALL_BINS": str(self.bins),
            "QT_INSTALL_LIBS": str(self.libs),
            "QT_INSTALL_QML": str(self.qml),
            "QT_VERSION": "5.15.2",
        }

    @property
    def paths(self) -> QtInstallationPaths:
        return QtInstallationPaths.from_query(self.query_vars)

    def write_qmake(self, path: Optional[Path] = None, extra_lines: Iterable[str] = ()) -> Path:
        lines = [f"{key}:{value}" for key, value in self.query_vars.items()]
        lines.extend(extra_lines)
        output = "\n".join(lines)
        return write_script(path or self.bins / "qmake", f"cat <<'EOF'\n{output}\nEOF\n")


@pytest.fixture
def fake_qt(tmp_path: Path) -> FakeQt:
    return FakeQt(tmp_path / "qt")


@pytest.fixture
def appdir_path(tmp_path: Path) -> Path:
    path = tmp_path / "AppDir"
    (path / "usr" / "lib").mkdir(parents=True)
    (path / "usr" / "bin").mkdir(parents=True)
    return path


@pytest.fixture
def appdir(appdir_path: Path) -> AppDir:
    appdir = AppDir(str(appdir_path), environ=dict(os.environ))
    appdir.set_disable_copyright_files_deployment(True)
    return appdir
