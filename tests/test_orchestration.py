from pathlib import Path

from savestate.managers import MapManager, TableManager
from savestate.orchestration import DataManager


def _managers(root: Path):
    opts = MapManager("Options", {"volume": "5"}, root)
    enemies = TableManager("Enemies", {"hp": "100"}, ["goblin"], root)
    return opts, enemies


def test_first_start_records_version_without_reset(data_dir: Path):
    opts, enemies = _managers(data_dir)
    opts.set("volume", "9")
    dm = DataManager("1.0", data_dir, on_start=[opts, enemies])
    assert dm.stored_version == "1.0"
    assert dm.start() is False
    assert opts.get("volume") == "9"


def test_version_change_resets_start_managers(data_dir: Path):
    opts, enemies = _managers(data_dir)
    DataManager("1.0", data_dir).start()
    opts.set("volume", "9")
    opts.save()

    opts, enemies = _managers(data_dir)
    enemies.set("goblin", "hp", "1")
    dm = DataManager(" 2.0 ", data_dir, on_start=[opts], on_save=[enemies])
    assert dm.stored_version == "1.0"
    assert dm.start() is True
    assert dm.stored_version == "2.0"
    assert opts.get("volume") == "5"
    # not in the start list
    assert enemies.get("goblin", "hp") == "1"

    # persisted: a fresh load sees the new version and the reset values
    assert DataManager("2.0", data_dir).start() is False
    assert MapManager("Options", {"volume": "5"}, data_dir).get("volume") == "5"


def test_reset_on_start_forces_reset(data_dir: Path):
    opts, _ = _managers(data_dir)
    opts.set("volume", "9")
    dm = DataManager("1.0", data_dir, on_start=[opts])
    assert dm.start(reset_on_start=True) is True
    assert opts.get("volume") == "5"


def test_save_and_reset_managers(data_dir: Path):
    opts, enemies = _managers(data_dir)
    dm = DataManager("1.0", data_dir, on_save=[opts, enemies], on_reset=[enemies])

    opts.set("volume", "7")
    enemies.set("goblin", "hp", "42")
    dm.save_managers()
    assert MapManager("Options", {"volume": "5"}, data_dir).get("volume") == "7"

    dm.reset_managers()
    assert enemies.get("goblin", "hp") == "100"
    assert TableManager("Enemies", {"hp": "100"}, ["goblin"], data_dir).get("goblin", "hp") == "100"
    assert opts.get("volume") == "7"


def test_version_is_stored_without_manager_suffix(data_dir: Path):
    dm = DataManager("1.0", data_dir)
    assert dm.version_store.path == data_dir / "VersionData.json"
    assert dm.version_store.path.exists()
    assert not (data_dir / "VersionVariableData.json").exists()
