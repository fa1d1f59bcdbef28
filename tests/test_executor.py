from qt_plugin.executor import DeploymentExecutor
from qt_plugin.qt_modules import QtModule
from qt_plugin.results import ErrorKind

from conftest import write_file


class RecordingDeployer:
    def __init__(self, module_name, calls, succeeds=True):
        self.module_name = module_name
        self.calls = calls
        self.succeeds = succeeds

    def deploy(self):
        self.calls.append(self.module_name)
        return self.succeeds


class FakeFactory:
    def __init__(self, failing=()):
        self.calls = []
        self.failing = set(failing)

    def get_deployers(self, module_name):
        return [
            RecordingDeployer(module_name, self.calls, module_name not in self.failing)
        ]


def count_flushes(monkeypatch, appdir):
    flushes = []
    original = appdir.execute_deferred_operations

    def execute_deferred_operations():
        flushes.append(True)
        return original()

    monkeypatch.setattr(appdir, "execute_deferred_operations", execute_deferred_operations)
    return flushes


MODULES = [QtModule("a", "libQt5A"), QtModule("b", "libQt5B"), QtModule("c", "libQt5C")]


def test_deployment_stops_at_first_failing_module(monkeypatch, appdir, tmp_path):
    flushes = count_flushes(monkeypatch, appdir)
    factory = FakeFactory(failing={"b"})
    executor = DeploymentExecutor(appdir, factory, str(tmp_path / "translations"))

    result = executor.execute(MODULES)

    assert not result
    assert result.error is ErrorKind.DEPLOYER
    assert result.message == "Failed to deploy module b"
    assert factory.calls == ["a", "b"]
    assert flushes == []


def test_flush_runs_exactly_once(monkeypatch, appdir, tmp_path):
    flushes = count_flushes(monkeypatch, appdir)
    factory = FakeFactory()
    executor = DeploymentExecutor(appdir, factory, str(tmp_path / "translations"))

    result = executor.execute(MODULES + MODULES)

    assert result
    assert factory.calls == ["a", "b", "c", "a", "b", "c"]
    assert flushes == [True]


def test_translations_are_flushed_with_the_modules(appdir, appdir_path, fake_qt):
    fake_qt.add_translation("qt_de.qm")
    fake_qt.add_translation("qtbase_de.qm")
    executor = DeploymentExecutor(appdir, FakeFactory(), str(fake_qt.translations))

    assert executor.execute([QtModule("widgets", "libQt5Widgets", "qtbase")])

    translations = appdir_path / "usr" / "translations"
    assert sorted(path.name for path in translations.iterdir()) == ["qt_de.qm", "qtbase_de.qm"]


def test_failing_flush_is_reported(appdir, tmp_path):
    source = write_file(tmp_path / "libfoo.so")
    appdir.deploy_file(str(source), appdir.paths.LIB_DIR)
    source.unlink()
    executor = DeploymentExecutor(appdir, FakeFactory(), str(tmp_path / "translations"))

    result = executor.execute(MODULES)

    assert result.error is ErrorKind.DEFERRED_OPERATIONS
    assert result.message == "Failed to execute deferred operations"
