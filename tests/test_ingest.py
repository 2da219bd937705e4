import pytest

from catalog.core.store import AssetStore
from catalog.jobs import ingest

CSV_BODY = b'address,latitude,longitude\n"1 Main St",40.0,-74.0\n'


@pytest.fixture
def store():
    return AssetStore()


def test_ingest_csv_upload(store):
    summary = ingest.ingest_upload(store, company_id="  acme ", filename="assets.csv", content=CSV_BODY)

    assert summary.success is True
    assert summary.message == "Successfully uploaded 1 asset(s) for company acme"
    assert summary.duplicates_skipped == 0
    assert [r.address for r in summary.added] == ["1 Main St"]
    assert store.companies() == {"acme"}


def test_ingest_reports_duplicates_in_message(store):
    ingest.ingest_upload(store, company_id="acme", filename="a.csv", content=CSV_BODY)

    summary = ingest.ingest_upload(store, company_id="acme", filename="a.csv", content=CSV_BODY)

    assert summary.success is True
    assert summary.added == []
    assert summary.duplicates_skipped == 1
    assert summary.message.endswith(". 1 duplicate(s) were skipped")
    assert summary.to_dict()["assets"] == []


@pytest.mark.parametrize(
    "kwargs, message, error",
    [
        ({"company_id": "   ", "filename": "a.csv", "content": CSV_BODY}, "Validation failed", "companyId is required"),
        ({"company_id": None, "filename": "a.csv", "content": CSV_BODY}, "Validation failed", "companyId is required"),
        ({"company_id": "acme", "filename": None, "content": None}, "Validation failed", "assetFile is required"),
        (
            {"company_id": "acme", "filename": "a.xml", "content": b"<a/>"},
            "Invalid file type",
            "Only CSV and JSON files are supported",
        ),
        (
            {"company_id": "acme", "filename": "a.csv", "content": b"address,latitude,longitude\nA,x,1\n"},
            "File parsing failed",
            "Invalid latitude: x",
        ),
        (
            {"company_id": "acme", "filename": "a.json", "content": b'[{"address":"X","latitude":200,"longitude":0}]'},
            "Data validation failed",
            "Asset 1: latitude must be a number between -90 and 90",
        ),
    ],
)
def test_ingest_failures_leave_store_untouched(store, kwargs, message, error):
    summary = ingest.ingest_upload(store, **kwargs)

    assert summary.success is False
    assert summary.message == message
    assert summary.error == error
    assert summary.to_dict() == {"success": False, "message": message, "error": error}
    assert store.total_count() == 0


def test_ingest_rejects_whole_batch_when_one_record_is_invalid(store):
    content = b'[{"address":"ok","latitude":1,"longitude":1},{"address":"","latitude":1,"longitude":1}]'

    summary = ingest.ingest_upload(store, company_id="acme", filename="batch.json", content=content)

    assert summary.success is False
    assert "Asset 2: address cannot be empty" in summary.error
    assert store.total_count() == 0


def test_ingest_routes_by_suffix_not_mimetype(store):
    summary = ingest.ingest_upload(
        store,
        company_id="acme",
        filename="assets.json",
        content=b'{"address":"X","latitude":1,"longitude":2}',
        mimetype="text/csv",
    )
    assert summary.success is True
    assert summary.to_dict()["assets"] == [{"address": "X", "latitude": 1.0, "longitude": 2.0}]


def test_ingest_propagates_unexpected_errors(store, monkeypatch):
    def boom(company_id, records):
        raise RuntimeError("store offline")

    monkeypatch.setattr(store, "add_assets", boom)

    with pytest.raises(RuntimeError):
        ingest.ingest_upload(store, company_id="acme", filename="a.csv", content=CSV_BODY)
