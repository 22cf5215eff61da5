# tests/test_model_store.py
import json

from emoji_search.core.frequency_tracker import FrequencyTracker
from emoji_search.core.protocols import FrequencyPersistence
from emoji_search.utils.model_store import VERSION, JsonFrequencyStore


def test_is_a_frequency_persistence(tmp_path):
    assert isinstance(JsonFrequencyStore(str(tmp_path / "f.json")), FrequencyPersistence)


def test_save_then_load(tmp_path):
    path = tmp_path / "data" / "freq.json"
    store = JsonFrequencyStore(str(path))
    ft = FrequencyTracker(clock=lambda: 42.0)
    ft.increment("thumbsup")
    ft.increment("thumbsup")
    store.save_frequency(ft.snapshot())

    loaded = JsonFrequencyStore(str(path)).load_frequency()
    assert loaded == {"thumbsup": {"count": 2, "last_used": 42.0}}
    assert not (tmp_path / "data" / "freq.json.tmp").exists()


def test_missing_file_is_empty(tmp_path):
    assert JsonFrequencyStore(str(tmp_path / "nope.json")).load_frequency() == {}


def test_version_mismatch_starts_fresh(tmp_path):
    path = tmp_path / "freq.json"
    path.write_text(json.dumps({"version": VERSION + 1, "records": {"a": {"count": 1}}}), encoding="utf-8")
    assert JsonFrequencyStore(str(path)).load_frequency() == {}


def test_corrupt_file_is_empty(tmp_path):
    path = tmp_path / "freq.json"
    path.write_text("{{{", encoding="utf-8")
    assert JsonFrequencyStore(str(path)).load_frequency() == {}
