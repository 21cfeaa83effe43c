import json

from highwayexec.data.presets import (
    DEFAULT_PRESET,
    JsonPresetStore,
    MappingPreset,
    MemoryPresetStore,
    find_preset,
    upsert_preset,
)


def _custom(name="Contractor export"):
    return MappingPreset(
        name=name,
        physical_mapping={"ProjectID": "Code", "Date": "As Of", "ActualPhysicalPct": "Done %"},
        financial_mapping={"ProjectID": "Code", "Date": "As Of", "ActualAmount": "Spent"},
    )


def test_default_preset_is_identity():
    assert DEFAULT_PRESET.physical_mapping == {
        "ProjectID": "ProjectID",
        "Date": "Date",
        "ActualPhysicalPct": "ActualPhysicalPct",
    }
    assert DEFAULT_PRESET.financial_mapping["ActualAmount"] == "ActualAmount"


def test_missing_file_loads_default(tmp_path):
    presets = JsonPresetStore(tmp_path / "presets.json").load()

    assert [p.name for p in presets] == [DEFAULT_PRESET.name]


def test_json_store_round_trip(tmp_path):
    store = JsonPresetStore(tmp_path / "nested" / "presets.json")
    presets = upsert_preset(store.load(), _custom())

    assert store.save(presets) is True
    loaded = store.load()

    assert [p.name for p in loaded] == [DEFAULT_PRESET.name, "Contractor export"]
    assert find_preset(loaded, "Contractor export") == _custom()


def test_corrupt_file_falls_back_to_default(tmp_path):
    path = tmp_path / "presets.json"
    path.write_text("{not json", encoding="utf-8")

    assert [p.name for p in JsonPresetStore(path).load()] == [DEFAULT_PRESET.name]

    path.write_text(json.dumps([{"physical_mapping": {}}]), encoding="utf-8")
    assert [p.name for p in JsonPresetStore(path).load()] == [DEFAULT_PRESET.name]


def test_unwritable_location_reports_failure(tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")

    assert JsonPresetStore(blocker / "presets.json").save([_custom()]) is False


def test_upsert_replaces_same_name_and_appends():
    presets = [_custom("A"), _custom("B")]
    replacement = MappingPreset(name="A")

    result = upsert_preset(presets, replacement)

    assert [p.name for p in result] == ["B", "A"]
    assert result[-1] is replacement
    assert [p.name for p in presets] == ["A", "B"]


def test_memory_store():
    store = MemoryPresetStore()
    assert store.load()[0].name == DEFAULT_PRESET.name

    store.save([_custom()])
    assert [p.name for p in store.load()] == ["Contractor export"]
    assert find_preset(store.load(), "missing") is None
