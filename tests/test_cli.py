import os

import pytest

from qt_plugin.cli import build_parser, run
from qt_plugin.config import PluginOptions
from qt_plugin.pipeline import DeploymentPipeline
from qt_plugin.results import ErrorKind

from conftest import write_file, write_script


def base_environ(**extra):
    environ = {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "DISABLE_COPYRIGHT_FILES_DEPLOYMENT": "1",
    }
    environ.update(extra)
    return environ


@pytest.fixture
def widgets_appdir(appdir_path):
    write_file(appdir_path / "usr" / "lib" / "libQt5Widgets.so.5", "not elf")
    write_file(appdir_path / "usr" / "lib" / "libQt5Core.so.5", "not elf")
    return appdir_path


def test_plugin_type(capsys):
    assert run(["--plugin-type"], {}) == 0
    assert capsys.readouterr().out == "input\n"


def test_plugin_api_version(capsys):
    assert run(["--plugin-api-version"], {}) == 0
    assert capsys.readouterr().out == "0\n"


def test_missing_appdir_argument():
    assert run([], base_environ()) == 1


def test_invalid_arguments_exit_with_1():
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--no-such-option"])

    assert excinfo.value.code == 1


def test_extra_plugins_are_collected():
    args = build_parser().parse_args(["--appdir", "AppDir", "-p", "svg", "--extra-plugin", "sql"])
    options = PluginOptions.from_arguments(
        args, {"EXTRA_QT_PLUGINS": "sqlite;webenginecore", "QML_SOURCES_PATHS": "/src:/src2"}
    )

    assert options.extra_plugins == ["svg", "sql"]
    assert options.extra_plugins_from_env == ["sqlite", "webenginecore"]
    assert options.qml_sources_paths == ["/src", "/src2"]
    assert options.token_sources == [["svg", "sql"], ["sqlite", "webenginecore"]]
    assert not options.deploy_platform_themes
    assert not options.disable_copyright_files_deployment

    options = PluginOptions.from_arguments(args, {"DISABLE_COPYRIGHT_FILES_DEPLOYMENT": ""})
    assert options.disable_copyright_files_deployment


def test_nonexistent_appdir_fails_before_qmake(tmp_path):
    marker = tmp_path / "qmake-called"
    qmake = write_script(tmp_path / "qmake", f"touch {marker}\n")

    exit_code = run(
        ["--appdir", str(tmp_path / "nosuchdir")], base_environ(QMAKE=str(qmake))
    )

    assert exit_code == 1
    assert not marker.exists()


def test_appdir_without_qt_modules(appdir_path, tmp_path):
    write_file(appdir_path / "usr" / "lib" / "libfoo.so.1", "not elf")
    pipeline = DeploymentPipeline(
        PluginOptions(appdir=str(appdir_path)), base_environ(QMAKE=str(tmp_path / "qmake"))
    )

    result = pipeline.run()

    assert result.error is ErrorKind.CONFIGURATION
    assert result.message == "Could not find Qt modules to deploy"


def test_missing_qmake(widgets_appdir, tmp_path):
    qmake = str(tmp_path / "nosuchqmake")
    pipeline = DeploymentPipeline(
        PluginOptions(appdir=str(widgets_appdir)), base_environ(QMAKE=qmake)
    )

    result = pipeline.run()

    assert result.error is ErrorKind.CONFIGURATION
    assert result.message == f"No such file or directory: {qmake}"


def test_incomplete_qmake_query(widgets_appdir, tmp_path):
    qmake = write_script(
        tmp_path / "qmake", "echo QT_INSTALL_LIBS:/opt/qt/lib\necho QT_INSTALL_BINS:/opt/qt/bin\n"
    )
    pipeline = DeploymentPipeline(
        PluginOptions(appdir=str(widgets_appdir)), base_environ(QMAKE=str(qmake))
    )

    result = pipeline.run()

    assert result.error is ErrorKind.CONFIGURATION
    assert result.message.startswith("qmake -query did not report required paths: QT_INSTALL_PLUGINS")


def test_widgets_application(widgets_appdir, fake_qt):
    fake_qt.add_plugin("platforms/libqxcb.so")
    fake_qt.add_plugin("imageformats/libqgif.so")
    fake_qt.add_translation("qt_de.qm")
    fake_qt.add_translation("qtbase_de.qm")
    fake_qt.add_translation("qtwebengine_de.qm")
    qmake = fake_qt.write_qmake()

    exit_code = run(["--appdir", str(widgets_appdir)], base_environ(QMAKE=str(qmake)))

    assert exit_code == 0
    usr = widgets_appdir / "usr"
    assert (usr / "plugins" / "platforms" / "libqxcb.so").is_file()
    assert (usr / "plugins" / "imageformats" / "libqgif.so").is_file()
    assert sorted(path.name for path in (usr / "translations").iterdir()) == [
        "qt_de.qm",
        "qtbase_de.qm",
    ]
    assert "Prefix = ../" in (usr / "bin" / "qt.conf").read_text()
    assert (widgets_appdir / "apprun-hooks" / "linuxdeploy-plugin-qt-hook.sh").is_file()
    assert not (usr / "share" / "doc").exists()


def test_extra_plugins_from_environment(widgets_appdir, fake_qt):
    fake_qt.add_plugin("platforms/libqxcb.so")
    fake_qt.add_plugin("sqldrivers/libqsqlite.so")
    fake_qt.add_plugin("sqldrivers/libqsqlpsql.so")
    qmake = fake_qt.write_qmake()
    environ = base_environ(QMAKE=str(qmake), EXTRA_QT_PLUGINS="sqlite")

    args = build_parser().parse_args(["--appdir", str(widgets_appdir)])
    pipeline = DeploymentPipeline(PluginOptions.from_arguments(args, environ), environ)

    result = pipeline.run()

    assert result
    assert [module.name for module in pipeline.resolved.found] == ["core", "widgets"]
    assert [module.name for module in pipeline.resolved.extra] == ["sqlite"]
    sqldrivers = widgets_appdir / "usr" / "plugins" / "sqldrivers"
    assert [path.name for path in sqldrivers.iterdir()] == ["libqsqlite.so"]
    assert pipeline.tool_environ["LD_LIBRARY_PATH"] == str(fake_qt.libs)
    assert pipeline.tool_environ["PATH"].startswith(str(fake_qt.bins) + ":")


def test_failing_module_deployment_skips_runtime_config(widgets_appdir, fake_qt):
    # no platforms/libqxcb.so in the Qt installation
    qmake = fake_qt.write_qmake()

    exit_code = run(["--appdir", str(widgets_appdir)], base_environ(QMAKE=str(qmake)))

    assert exit_code == 1
    assert not (widgets_appdir / "usr" / "bin" / "qt.conf").exists()
    assert not (widgets_appdir / "apprun-hooks").exists()


def test_extra_modules_with_empty_bundle(appdir_path, fake_qt):
    write_file(fake_qt.libexecs / "QtWebEngineProcess", "process")
    qmake = fake_qt.write_qmake()
    environ = base_environ(QMAKE=str(qmake), EXTRA_QT_PLUGINS="sqlite;webenginecore")

    args = build_parser().parse_args(["--appdir", str(appdir_path)])
    pipeline = DeploymentPipeline(PluginOptions.from_arguments(args, environ), environ)

    assert pipeline.run()
    assert pipeline.resolved.found == []
    assert [module.name for module in pipeline.resolved.extra] == ["sqlite", "webenginecore"]
    assert (appdir_path / "usr" / "libexec" / "QtWebEngineProcess").is_file()
    hook = appdir_path / "apprun-hooks" / "linuxdeploy-plugin-qt-hook.sh"
    assert "QTWEBENGINEPROCESS_PATH" in hook.read_text()


def test_module_found_and_requested_is_deployed_once(widgets_appdir, fake_qt):
    fake_qt.add_plugin("platforms/libqxcb.so")
    qmake = fake_qt.write_qmake()

    exit_code = run(
        ["--appdir", str(widgets_appdir), "-p", "widgets"], base_environ(QMAKE=str(qmake))
    )

    assert exit_code == 0
    platforms = widgets_appdir / "usr" / "plugins" / "platforms"
    assert [path.name for path in platforms.iterdir()] == ["libqxcb.so"]


def test_qt6_detected_from_requested_library_filename(appdir_path):
    environ = base_environ(EXTRA_QT_PLUGINS="libQt6Svg.so.6")
    args = build_parser().parse_args(["--appdir", str(appdir_path)])
    pipeline = DeploymentPipeline(PluginOptions.from_arguments(args, environ), environ)

    assert pipeline.open_appdir()
    assert pipeline.resolve_modules()

    assert pipeline.qt_version == 6
    assert [module.name for module in pipeline.resolved.extra] == ["svg"]
    assert pipeline.resolved.extra[0].library_file_prefix == "libQt6Svg"
