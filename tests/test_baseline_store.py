"""Tests for baseline persistence."""

import json

import pytest

from qa_html_capture.models.comparison import ComparisonResult, ComparisonSummary
from qa_html_capture.store import baseline_store
from qa_html_capture.store.baseline_store import (
    BaselineNotFoundError,
    BaselineReadError,
    BaselineStore,
    InvalidBaselineIdError,
    save_comparison,
)


class TestBaselineStore:
    """Tests for saving, loading and deleting baselines."""

    def test_roundtrip_preserves_data(self, store, baseline):
        store.save(baseline)
        loaded = store.get(baseline.id)
        assert loaded == baseline
        assert loaded.elements["submit"].css_selector == "button#submit"

    def test_json_schema(self, store, baseline):
        path = store.save(baseline)
        data = json.loads(path.read_text())
        assert set(data) == {"id", "name", "url", "timestamp", "html", "elementMap"}
        assert data["url"] == "https://example.com/login"
        element = data["elementMap"]["submit"]
        assert set(element) == {"tagName", "attributes", "text", "xpath", "cssSelector", "locators"}

    def test_save_creates_storage_dir(self, tmp_path, baseline):
        store = BaselineStore(tmp_path / "deep" / "nested")
        store.save(baseline)
        assert store.path_for(baseline.id).exists()

    def test_get_missing_raises(self, store):
        with pytest.raises(BaselineNotFoundError):
            store.get("nope")

    def test_get_corrupt_raises(self, store):
        store.storage_dir.mkdir(parents=True)
        store.path_for("bad").write_text("not valid json {{{")
        with pytest.raises(BaselineReadError):
            store.get("bad")

    def test_list_skips_unreadable_files(self, store, baseline):
        store.save(baseline)
        store.path_for("bad").write_text("{}")
        items = store.list_baselines()
        assert [b.id for b in items] == [baseline.id]

    def test_list_sorted_by_capture_time(self, store, baseline):
        later = baseline.model_copy(update={"id": "2", "captured_at": "2025-06-01T00:00:00Z"})
        earlier = baseline.model_copy(update={"id": "3", "captured_at": "2024-06-01T00:00:00Z"})
        store.save(later)
        store.save(earlier)
        assert [b.id for b in store.list_baselines()] == ["3", "2"]

    def test_list_without_directory(self, store):
        assert store.list_baselines() == []

    def test_delete(self, store, baseline):
        store.save(baseline)
        assert store.delete(baseline.id) is True
        assert store.exists(baseline.id) is False
        assert store.delete(baseline.id) is False

    def test_clear(self, store, baseline):
        store.save(baseline)
        store.save(baseline.model_copy(update={"id": "other"}))
        assert store.clear() == 2
        assert store.list_baselines() == []

    def test_new_id_avoids_existing_files(self, store, baseline, monkeypatch):
        monkeypatch.setattr(baseline_store.time, "time", lambda: 1.0)
        store.save(baseline.model_copy(update={"id": "1000"}))
        assert store.new_baseline_id() == "1001"


class TestSaveComparison:
    """Tests for save_comparison()."""

    def test_writes_json(self, tmp_path, baseline):
        result = ComparisonResult(
            baseline_id=baseline.id,
            baseline_name=baseline.name,
            summary=ComparisonSummary(),
        )
        path = save_comparison(result, tmp_path / "comparisons")
        assert path.name.startswith("comparison_")
        data = json.loads(path.read_text())
        assert data["baseline_id"] == baseline.id
        assert data["summary"]["total"] == 0


class TestUnreadableEntries:
    """Store entries that cannot be opened or name paths outside the store."""

    def test_list_skips_directory_named_like_baseline(self, store, baseline):
        store.save(baseline)
        (store.storage_dir / "broken.json").mkdir()
        assert [b.id for b in store.list_baselines()] == [baseline.id]

    def test_load_directory_raises_read_error(self, store, baseline):
        store.save(baseline)
        (store.storage_dir / "broken.json").mkdir()
        with pytest.raises(BaselineReadError):
            store.get("broken")

    def test_clear_ignores_directories(self, store, baseline):
        store.save(baseline)
        (store.storage_dir / "broken.json").mkdir()
        assert store.clear() == 1

    @pytest.mark.parametrize("bad_id", ["../outside", "a/b", "a\\b", "..", ""])
    def test_ids_cannot_escape_storage_dir(self, store, bad_id):
        with pytest.raises(InvalidBaselineIdError):
            store.path_for(bad_id)
        assert store.exists(bad_id) is False
        assert store.delete(bad_id) is False
        with pytest.raises(BaselineNotFoundError):
            store.get(bad_id)

    def test_delete_does_not_touch_files_outside(self, tmp_path, store, baseline):
        store.save(baseline)
        outside = tmp_path / "outside.json"
        outside.write_text("{}")
        assert store.delete("../outside") is False
        assert outside.exists()
