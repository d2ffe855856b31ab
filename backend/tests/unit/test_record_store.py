"""Unit tests for the RecordStore (constraints, search, bulk import/export)."""

import asyncio
import copy

import pytest

from app.application.services import RecordStore
from app.domain.entities import CONTACT_SCHEMA
from app.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    RecordValidationError,
    StoreNotInitializedError,
)
from tests.fakes import FakeRecordDatabase, FakeRecordRepository, fake_repository_factory


@pytest.fixture
def db() -> FakeRecordDatabase:
    return FakeRecordDatabase()


@pytest.fixture
def raw_store(db: FakeRecordDatabase) -> RecordStore:
    return RecordStore(CONTACT_SCHEMA, fake_repository_factory(db), quota_bytes=1000)


@pytest.fixture
async def store(raw_store: RecordStore) -> RecordStore:
    await raw_store.initialize()
    return raw_store


def _ann() -> dict:
    return {"name": "Ann", "mobile": "555-1212", "email": "a@x.com"}


# ── Initialization ──────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_operations_fail_before_initialize(raw_store: RecordStore):
    with pytest.raises(StoreNotInitializedError):
        await raw_store.create(_ann())
    with pytest.raises(StoreNotInitializedError):
        await raw_store.list_records()
    with pytest.raises(StoreNotInitializedError):
        await raw_store.import_batch([_ann()])


@pytest.mark.asyncio
async def test_initialize_creates_schema(raw_store: RecordStore, db: FakeRecordDatabase):
    await raw_store.initialize()
    assert raw_store.is_ready
    assert db.schema_created


@pytest.mark.asyncio
async def test_storage_usage_unavailable_before_initialize(raw_store: RecordStore):
    usage = await raw_store.storage_usage()
    assert usage.available is False


# ── Create / Get ────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_assigns_id_and_timestamps(store: RecordStore):
    record = await store.create(_ann())
    assert record.id == 1
    assert record.created_at == record.updated_at
    assert record.data["mobile"] == "5551212"


@pytest.mark.asyncio
async def test_create_then_get_returns_equal_record(store: RecordStore):
    created = await store.create({**_ann(), "address": "1 Main St"})
    fetched = await store.get(created.id)
    assert fetched.to_dict() == created.to_dict()


@pytest.mark.asyncio
async def test_create_ignores_reserved_fields(store: RecordStore):
    record = await store.create({**_ann(), "id": 99, "created": "yesterday"})
    assert record.id == 1
    assert "created" not in record.data


@pytest.mark.asyncio
async def test_create_normalizes_email(store: RecordStore):
    record = await store.create({**_ann(), "email": "  Ann@X.COM "})
    assert record.data["email"] == "ann@x.com"


@pytest.mark.asyncio
async def test_create_missing_required_field(store: RecordStore):
    with pytest.raises(RecordValidationError) as exc_info:
        await store.create({"mobile": "1", "email": "c@x.com"})
    assert exc_info.value.fields == ["name"]


@pytest.mark.asyncio
async def test_create_mobile_without_digits_is_invalid(store: RecordStore):
    with pytest.raises(RecordValidationError):
        await store.create({**_ann(), "mobile": "n/a"})


@pytest.mark.asyncio
async def test_duplicate_mobile_after_normalization(store: RecordStore):
    await store.create(_ann())
    with pytest.raises(DuplicateEntityError) as exc_info:
        await store.create({"name": "Bob", "mobile": "5551212", "email": "b@x.com"})
    assert exc_info.value.field == "mobile"
    records = await store.list_records()
    assert len(records) == 1
    assert records[0].data["name"] == "Ann"


@pytest.mark.asyncio
async def test_duplicate_email_is_case_insensitive(store: RecordStore):
    await store.create(_ann())
    with pytest.raises(DuplicateEntityError) as exc_info:
        await store.create({"name": "Bob", "mobile": "999", "email": "A@X.com"})
    assert exc_info.value.field == "email"


@pytest.mark.asyncio
async def test_get_unknown_id(store: RecordStore):
    with pytest.raises(EntityNotFoundError):
        await store.get(42)


@pytest.mark.asyncio
async def test_reads_return_independent_copies(store: RecordStore):
    created = await store.create(_ann())
    fetched = await store.get(created.id)
    fetched.data["name"] = "Mallory"
    again = await store.get(created.id)
    assert again.data["name"] == "Ann"


@pytest.mark.asyncio
async def test_concurrent_creates_with_same_mobile(store: RecordStore, db: FakeRecordDatabase):
    results = await asyncio.gather(
        store.create({"name": "A", "mobile": "123", "email": "a@x.com"}),
        store.create({"name": "B", "mobile": "1-2-3", "email": "b@x.com"}),
        store.create({"name": "C", "mobile": "(12) 3", "email": "c@x.com"}),
        return_exceptions=True,
    )
    assert sum(isinstance(r, DuplicateEntityError) for r in results) == 2
    assert len(await store.list_records()) == 1
    assert list(db.keys.values()).count(1) == 2


# ── Update ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_merges_patch(store: RecordStore):
    created = await store.create({**_ann(), "address": "Old St"})
    updated = await store.update(created.id, {"address": "New St"})
    assert updated.data["address"] == "New St"
    assert updated.data["name"] == "Ann"
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at


@pytest.mark.asyncio
async def test_update_with_empty_patch_only_touches_updated(store: RecordStore):
    created = await store.create(_ann())
    updated = await store.update(created.id, {})
    assert updated.data == created.data
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at


@pytest.mark.asyncio
async def test_update_cannot_change_id_or_created(store: RecordStore):
    created = await store.create(_ann())
    updated = await store.update(created.id, {"id": 7, "created": "2000-01-01"})
    assert updated.id == created.id
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_self_conflict_is_allowed(store: RecordStore):
    created = await store.create(_ann())
    updated = await store.update(created.id, {"mobile": "(555) 1212"})
    assert updated.data["mobile"] == "5551212"


@pytest.mark.asyncio
async def test_update_conflict_leaves_record_unchanged(store: RecordStore):
    await store.create(_ann())
    bob = await store.create({"name": "Bob", "mobile": "777", "email": "b@x.com"})
    with pytest.raises(DuplicateEntityError):
        await store.update(bob.id, {"name": "Robert", "email": "a@x.com"})
    unchanged = await store.get(bob.id)
    assert unchanged.data == bob.data


@pytest.mark.asyncio
async def test_update_frees_old_unique_value(store: RecordStore):
    ann = await store.create(_ann())
    await store.update(ann.id, {"mobile": "000"})
    bob = await store.create({"name": "Bob", "mobile": "5551212", "email": "b@x.com"})
    assert bob.data["mobile"] == "5551212"


@pytest.mark.asyncio
async def test_update_removing_required_field_is_invalid(store: RecordStore):
    created = await store.create(_ann())
    with pytest.raises(RecordValidationError):
        await store.update(created.id, {"name": "  "})


@pytest.mark.asyncio
async def test_update_none_removes_optional_field(store: RecordStore):
    created = await store.create({**_ann(), "address": "1 Main St"})
    updated = await store.update(created.id, {"address": None})
    assert "address" not in updated.data


@pytest.mark.asyncio
async def test_update_unknown_id(store: RecordStore):
    with pytest.raises(EntityNotFoundError):
        await store.update(5, {"name": "Nobody"})


# ── Delete / Clear ──────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_delete_then_get_and_second_delete(store: RecordStore):
    created = await store.create(_ann())
    await store.delete(created.id)
    with pytest.raises(EntityNotFoundError):
        await store.get(created.id)
    with pytest.raises(EntityNotFoundError):
        await store.delete(created.id)


@pytest.mark.asyncio
async def test_ids_are_not_reused_after_delete(store: RecordStore):
    first = await store.create(_ann())
    await store.delete(first.id)
    second = await store.create(_ann())
    assert second.id != first.id


@pytest.mark.asyncio
async def test_clear_removes_everything(store: RecordStore):
    await store.create(_ann())
    await store.create({"name": "Bob", "mobile": "777", "email": "b@x.com"})
    assert await store.clear() == 2
    assert await store.list_records() == []
    assert await store.count() == 0


# ── Search ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_search_empty_term_equals_list(store: RecordStore):
    await store.create(_ann())
    await store.create({"name": "Bob", "mobile": "777", "email": "b@x.com"})
    listed = [r.to_dict() for r in await store.list_records()]
    assert [r.to_dict() for r in await store.search("")] == listed
    assert [r.to_dict() for r in await store.search("   ")] == listed


@pytest.mark.asyncio
async def test_search_matches_any_field_case_insensitively(store: RecordStore):
    await store.create({**_ann(), "address": "12 Baker Street"})
    await store.create({"name": "Bob", "mobile": "777", "email": "b@x.com"})
    assert [r.data["name"] for r in await store.search("BAKER")] == ["Ann"]
    assert [r.data["name"] for r in await store.search("bob")] == ["Bob"]
    assert [r.data["name"] for r in await store.search("777")] == ["Bob"]
    assert await store.search("nothing-matches") == []


@pytest.mark.asyncio
async def test_search_trims_the_term(store: RecordStore):
    await store.create({**_ann(), "address": "12 Baker Street"})
    assert [r.data["name"] for r in await store.search("  baker  ")] == ["Ann"]
    assert await store.search(" Baker  Street ") == []


# ── Import / Export ─────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_import_batch_skips_duplicates_and_invalid(store: RecordStore):
    result = await store.import_batch([
        {"name": "A", "mobile": "1", "email": "a@x.com"},
        {"name": "A2", "mobile": "1", "email": "a2@x.com"},
        {"mobile": "2", "email": "c@x.com"},
    ])
    assert result.imported_count == 1
    assert result.skipped_count == 2


@pytest.mark.asyncio
async def test_create_rejects_non_text_field_values(store: RecordStore):
    with pytest.raises(RecordValidationError) as exc_info:
        await store.create({**_ann(), "name": 123})
    assert exc_info.value.fields == ["name"]
    assert await store.list_records() == []


@pytest.mark.asyncio
async def test_update_rejects_non_text_field_values(store: RecordStore):
    created = await store.create(_ann())
    with pytest.raises(RecordValidationError):
        await store.update(created.id, {"mobile": 5551212})
    assert (await store.get(created.id)).data["mobile"] == "5551212"


@pytest.mark.asyncio
async def test_import_batch_skips_non_text_values(store: RecordStore):
    result = await store.import_batch([
        {"name": 123, "mobile": "1", "email": "a@x.com"},
        {"name": "Bob", "mobile": "2", "email": {"at": "x"}},
        _ann(),
    ])
    assert (result.imported_count, result.skipped_count) == (1, 2)
    assert [r.data["name"] for r in await store.list_records()] == ["Ann"]


@pytest.mark.asyncio
async def test_import_batch_skips_non_mapping_candidates(store: RecordStore):
    result = await store.import_batch(["not a record", _ann()])
    assert (result.imported_count, result.skipped_count) == (1, 1)


@pytest.mark.asyncio
async def test_import_batch_aborts_on_unexpected_error(db: FakeRecordDatabase):
    class BrokenRepository(FakeRecordRepository):
        async def create(self, record, keys):
            raise RuntimeError("disk full")

    store = RecordStore(CONTACT_SCHEMA, fake_repository_factory(db, BrokenRepository))
    await store.initialize()
    with pytest.raises(RuntimeError):
        await store.import_batch([_ann()])


@pytest.mark.asyncio
async def test_import_document_requires_records_array(store: RecordStore, db: FakeRecordDatabase):
    with pytest.raises(RecordValidationError):
        await store.import_document({"version": 1, "count": 0})
    with pytest.raises(RecordValidationError):
        await store.import_document({"records": "nope"})
    assert db.records == {}


@pytest.mark.asyncio
async def test_export_document_shape(store: RecordStore):
    await store.create(_ann())
    document = await store.export_all()
    payload = document.to_dict()
    assert payload["version"] == 1
    assert payload["databaseName"] == "ContactsDB"
    assert payload["count"] == len(payload["records"]) == 1
    assert payload["records"][0]["name"] == "Ann"
    assert "exportedAt" in payload


@pytest.mark.asyncio
async def test_export_then_import_round_trip(store: RecordStore):
    await store.create({**_ann(), "address": "1 Main St"})
    await store.create({"name": "Bob", "mobile": "777", "email": "b@x.com"})
    document = (await store.export_all()).to_dict()

    target = RecordStore(CONTACT_SCHEMA, fake_repository_factory(FakeRecordDatabase()))
    await target.initialize()
    result = await target.import_document(copy.deepcopy(document))

    assert result.imported_count == document["count"]
    assert result.skipped_count == 0
    original = [{k: v for k, v in r.items() if k not in ("id", "created", "updated")}
                for r in document["records"]]
    imported = [r.data for r in await target.list_records()]
    assert imported == original


# ── Lookup / Storage ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_find_by_normalizes_value(store: RecordStore):
    created = await store.create(_ann())
    found = await store.find_by("mobile", "555 1212")
    assert found is not None and found.id == created.id
    assert await store.find_by("email", "missing@x.com") is None


@pytest.mark.asyncio
async def test_find_by_rejects_non_unique_field(store: RecordStore):
    with pytest.raises(ValueError):
        await store.find_by("name", "Ann")


@pytest.mark.asyncio
async def test_storage_usage_reports_against_quota(store: RecordStore):
    await store.create(_ann())
    usage = await store.storage_usage()
    assert usage.available is True
    assert usage.quota_bytes == 1000
    assert usage.usage_bytes > 0
    assert usage.level in {"ok", "warning", "critical"}
