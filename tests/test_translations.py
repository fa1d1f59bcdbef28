from qt_plugin.qt_modules import QtModule
from qt_plugin.translations import deploy_translations, is_wanted_translation

WIDGETS = QtModule("widgets", "libQt5Widgets", "qtbase")
WEBENGINE = QtModule("webengine", "libQt5WebEngine", "qtwebengine")
SVG = QtModule("svg", "libQt5Svg")


def test_base_catalogs_are_always_wanted():
    assert is_wanted_translation("qt_de.qm", [])
    assert is_wanted_translation("qt_zh.qm", [SVG])
    assert not is_wanted_translation("qt_pt_BR.qm", [])
    assert not is_wanted_translation("qt_help_de.qm", [])


def test_module_catalogs_follow_resolved_modules():
    assert is_wanted_translation("qtbase_de.qm", [WIDGETS])
    assert not is_wanted_translation("qtbase_de.qm", [WEBENGINE])
    assert is_wanted_translation("qtwebengine_de.qm", [WIDGETS, WEBENGINE])
    # modules without translations do not match everything
    assert not is_wanted_translation("qtmultimedia_de.qm", [SVG])


def test_only_qm_files_are_wanted():
    assert not is_wanted_translation("qtbase_de.ts", [WIDGETS])
    assert not is_wanted_translation("qt_de", [WIDGETS])


def test_deploy_translations(appdir, appdir_path, fake_qt):
    for name in ("qt_de.qm", "qt_fr.qm", "qtbase_de.qm", "qtwebengine_de.qm", "README"):
        fake_qt.add_translation(name)

    assert deploy_translations(appdir, str(fake_qt.translations), [WIDGETS, WIDGETS])
    assert appdir.execute_deferred_operations()

    translations = appdir_path / "usr" / "translations"
    assert sorted(path.name for path in translations.iterdir()) == [
        "qt_de.qm",
        "qt_fr.qm",
        "qtbase_de.qm",
    ]


def test_missing_translations_directory_is_not_an_error(appdir, tmp_path):
    assert deploy_translations(appdir, str(tmp_path / "nosuchdir"), [WIDGETS])
    assert deploy_translations(appdir, "", [WIDGETS])
    assert len(appdir.deferred_operations) == 0


def test_no_matching_translations(appdir, fake_qt):
    fake_qt.add_translation("qtwebengine_de.qm")

    assert deploy_translations(appdir, str(fake_qt.translations), [WIDGETS])
    assert len(appdir.deferred_operations) == 0
