"""
Unit tests for the paginated listing and per-object signing.

Pagination is forced by giving the in-memory store a page size of 2.
"""

from datetime import datetime, timezone

import pytest

import filebucket.core.files.listing as listing
from filebucket.core.files.listing import (
    SIGNED_URL_EXPIRY_SECONDS,
    collect_file_entries,
    iter_objects,
    sign_object,
)
from filebucket.infrastructure.storage.client import (
    ObjectPage,
    StorageError,
    StoredObject,
)


async def _fill(storage, count: int) -> list[str]:
    keys = [f"file-{i}.txt" for i in range(count)]
    for key in keys:
        await storage.put_object(key, key.encode("utf-8"))
    return keys


class TestIterObjects:
    """Tests for walking every page of a listing."""

    @pytest.mark.asyncio
    async def test_empty_bucket_yields_nothing(self, storage):
        objects = [obj async for obj in iter_objects(storage)]

        assert objects == []
        assert storage.calls == [("list_objects", None)]

    @pytest.mark.asyncio
    async def test_returns_union_of_all_pages(self, storage):
        """Five objects over pages of two: three calls, nothing lost or repeated."""
        keys = await _fill(storage, 5)

        objects = [obj async for obj in iter_objects(storage)]

        assert [obj.key for obj in objects] == keys
        assert storage.call_names().count("list_objects") == 3

    @pytest.mark.asyncio
    async def test_first_call_has_no_token_and_later_calls_carry_it(self, storage):
        await _fill(storage, 3)

        [obj async for obj in iter_objects(storage)]

        tokens = [call[1] for call in storage.calls if call[0] == "list_objects"]
        assert tokens == [None, "2"]

    @pytest.mark.asyncio
    async def test_list_failure_propagates(self, make_storage):
        storage = make_storage(fail_on={"list_objects"})

        with pytest.raises(StorageError):
            [obj async for obj in iter_objects(storage)]

    @pytest.mark.asyncio
    async def test_truncated_page_without_token_is_an_error(self):
        """A store that claims more pages but gives no token must not loop forever."""

        class BrokenStore:
            async def list_objects(self, continuation_token=None):
                return ObjectPage(
                    objects=[StoredObject("a", datetime.now(timezone.utc))],
                    next_token=None,
                    is_truncated=True,
                )

        with pytest.raises(StorageError, match="continuation token"):
            [obj async for obj in iter_objects(BrokenStore())]

    @pytest.mark.asyncio
    async def test_truncated_empty_page_keeps_paging(self):
        """An empty page can still be truncated; the walk must continue."""
        modified = datetime(2024, 1, 1, tzinfo=timezone.utc)
        pages = {
            None: ObjectPage(objects=[], next_token="t1", is_truncated=True),
            "t1": ObjectPage(objects=[StoredObject("late.txt", modified)]),
        }

        class SparseStore:
            async def list_objects(self, continuation_token=None):
                return pages[continuation_token]

        objects = [obj async for obj in iter_objects(SparseStore())]

        assert [obj.key for obj in objects] == ["late.txt"]


class TestSigning:
    """Tests for per-object URL signing."""

    @pytest.mark.asyncio
    async def test_sign_object_uses_one_hour_expiry(self, storage):
        modified = datetime(2024, 5, 1, tzinfo=timezone.utc)

        entry = await sign_object(storage, StoredObject("a.txt", modified))

        assert entry.key == "a.txt"
        assert entry.last_modified == modified
        assert "a.txt" in entry.url
        assert storage.calls[-1] == ("presign_get", "a.txt", SIGNED_URL_EXPIRY_SECONDS)
        assert SIGNED_URL_EXPIRY_SECONDS == 3600

    @pytest.mark.asyncio
    async def test_collect_signs_every_object(self, storage):
        keys = await _fill(storage, 5)

        entries = await collect_file_entries(storage)

        assert [entry.key for entry in entries] == keys
        assert storage.call_names().count("presign_get") == 5

    @pytest.mark.asyncio
    async def test_urls_are_minted_fresh_on_every_call(self, storage):
        await _fill(storage, 1)

        await collect_file_entries(storage)
        await collect_file_entries(storage)

        assert storage.call_names().count("presign_get") == 2

    @pytest.mark.asyncio
    async def test_signing_failure_fails_the_whole_listing(self, make_storage):
        """No partial result: one bad signature fails the request."""
        storage = make_storage(fail_on={"presign_get"})
        await _fill(storage, 3)

        with pytest.raises(StorageError):
            await collect_file_entries(storage)

    @pytest.mark.asyncio
    async def test_signing_failure_closes_the_page_walk(self, make_storage, monkeypatch):
        """The page generator is closed as soon as signing fails."""
        storage = make_storage(fail_on={"presign_get"})
        await _fill(storage, 3)
        walks = []

        def tracking_iter_objects(store):
            walk = iter_objects(store)
            walks.append(walk)
            return walk

        monkeypatch.setattr(listing, "iter_objects", tracking_iter_objects)

        with pytest.raises(StorageError):
            await collect_file_entries(storage)

        assert len(walks) == 1
        assert walks[0].ag_frame is None
