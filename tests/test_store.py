import json

from pitch_panda.store import AnalysisStore

from test_renderer import make_analysis


def test_save_and_get_by_domain(tmp_path):
    store = AnalysisStore(str(tmp_path / "db.json"))

    record = store.save("https://www.supercity.ai/pricing", make_analysis(), memo="memo")

    assert store.exists("supercity.ai")
    assert store.get("http://supercity.ai")["memo"] == "memo"
    assert record["analysis"]["sources"][0] == "https://www.supercity.ai/pricing"
    assert record["created_at"] == record["updated_at"]
    assert list(store.all()) == ["supercity.ai"]


def test_save_keeps_url_first_without_duplicates(tmp_path):
    store = AnalysisStore(str(tmp_path / "db.json"))
    record = store.save("https://supercity.ai", make_analysis())
    assert record["analysis"]["sources"] == ["https://supercity.ai"]


def test_update_preserves_created_at(tmp_path):
    store = AnalysisStore(str(tmp_path / "db.json"))
    first = store.save("supercity.ai", make_analysis())
    data = store.all()
    data["supercity.ai"]["created_at"] = "2020-01-01T00:00:00+00:00"
    store._write(data)

    second = store.save("supercity.ai", make_analysis(), memo="new")

    assert second["created_at"] == "2020-01-01T00:00:00+00:00"
    assert second["updated_at"] >= first["updated_at"]
    assert store.get("supercity.ai")["memo"] == "new"


def test_delete_and_clear(tmp_path):
    store = AnalysisStore(str(tmp_path / "db.json"))
    store.save("supercity.ai", make_analysis())
    store.save("gridco.com", make_analysis())

    assert store.delete("supercity.ai") is True
    assert store.delete("supercity.ai") is False
    assert list(store.all()) == ["gridco.com"]

    store.clear()
    assert store.all() == {}
    assert json.loads((tmp_path / "db.json").read_text()) == {}


def test_missing_or_corrupt_file_reads_empty(tmp_path):
    path = tmp_path / "db.json"
    store = AnalysisStore(str(path))
    assert store.all() == {}

    path.write_text("{not json")
    assert store.all() == {}
    assert store.get("supercity.ai") is None


def test_writes_leave_no_temp_files(tmp_path):
    store = AnalysisStore(str(tmp_path / "nested" / "db.json"))
    store.save("supercity.ai", make_analysis())
    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["db.json"]
