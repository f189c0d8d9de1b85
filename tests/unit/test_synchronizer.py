"""Unit tests for SharedAssetSynchronizer."""

import json
import logging

import pytest

from anrsi_portal.core.domain import LOCALES, Locale, Page, UploadKey, UploadStatus
from anrsi_portal.core.domain.exceptions import ItemNotFoundError
from anrsi_portal.core.domain.page_kinds import REPORTS
from anrsi_portal.core.services.content_store import LanguageContentStore
from anrsi_portal.core.services.normalizer import normalize_page
from anrsi_portal.core.services.synchronizer import SharedAssetSynchronizer

pytestmark = pytest.mark.unit


@pytest.fixture
def store(reports_document):
    return LanguageContentStore(reports_document)


@pytest.fixture
def sync(store):
    return SharedAssetSynchronizer(store)


class TestCompleteUpload:
    """Tests for writing uploaded URLs into every locale."""

    def test_url_lands_in_every_locale(self, store, sync):
        sync.complete_upload(Locale.FR, "rapports", 0, 0, "/uploads/r.pdf")
        for locale in LOCALES:
            assert store.item(locale, "rapports", 0).attachments == ["/uploads/r.pdf"]

    def test_shorter_locale_and_attachment_list_are_padded(self, store, sync):
        del store.items(Locale.AR, "rapports")[1:]

        sync.complete_upload(Locale.FR, "rapports", 2, 1, "X")

        ar_items = store.items(Locale.AR, "rapports")
        assert len(ar_items) == 3
        assert [item.id for item in ar_items] == ["r0", "r1", "r2"]
        assert ar_items[1].is_blank()
        for locale in LOCALES:
            assert store.item(locale, "rapports", 2).attachments == ["", "X"]

    def test_other_attachments_are_untouched(self, store, sync):
        store.item(Locale.EN, "rapports", 1).attachments = ["/uploads/a.pdf", "/uploads/b.pdf"]
        sync.complete_upload(Locale.FR, "rapports", 1, 1, "/uploads/new.pdf")
        assert store.item(Locale.EN, "rapports", 1).attachments == [
            "/uploads/a.pdf",
            "/uploads/new.pdf",
        ]

    def test_matches_item_by_id_not_position(self, store, sync):
        store.items(Locale.AR, "rapports").reverse()
        sync.complete_upload(Locale.FR, "rapports", 0, 0, "/uploads/2023.pdf")
        assert store.item(Locale.AR, "rapports", 2).id == "r0"
        assert store.item(Locale.AR, "rapports", 2).attachments == ["/uploads/2023.pdf"]

    def test_stored_ids_differing_per_locale(self):
        fr = {"rapports": [{"id": i, "title": f"F{i}"} for i in ("a", "b", "c")]}
        ar = {"rapports": [{"id": i, "title": f"A{i}"} for i in ("x", "y", "z")]}
        page = Page(
            id=3,
            slug="rapports-annuels",
            translations={"fr": {"content": json.dumps(fr)}, "ar": {"content": json.dumps(ar)}},
        )
        store = LanguageContentStore(normalize_page(page, REPORTS))

        SharedAssetSynchronizer(store).complete_upload(Locale.FR, "rapports", 2, 1, "X")

        ar_items = store.items(Locale.AR, "rapports")
        assert [item.title for item in ar_items] == ["Ax", "Ay", "Az"]
        assert ar_items[2].attachments == ["", "X"]
        assert [item.attachments for item in ar_items[:2]] == [[], []]

    def test_state_is_tracked_for_source_locale_only(self, sync):
        sync.begin_upload(Locale.AR, "rapports", 1, 0)
        assert sync.has_pending_uploads()

        sync.complete_upload(Locale.AR, "rapports", 1, 0, "/uploads/x.pdf")

        assert not sync.has_pending_uploads()
        assert sync.uploads == {
            UploadKey(Locale.AR, "r1", 0): sync.status(Locale.AR, "rapports", 1, 0)
        }
        state = sync.status(Locale.AR, "rapports", 1, 0)
        assert state.status == UploadStatus.COMPLETE
        assert state.progress == 100
        assert sync.status(Locale.FR, "rapports", 1, 0) is None

    def test_unknown_source_item(self, sync):
        with pytest.raises(ItemNotFoundError):
            sync.complete_upload(Locale.FR, "rapports", 5, 0, "/uploads/x.pdf")

    def test_negative_slot(self, store, sync):
        with pytest.raises(ItemNotFoundError):
            sync.complete_upload(Locale.FR, "rapports", 0, -1, "/uploads/x.pdf")
        with pytest.raises(ItemNotFoundError):
            sync.begin_upload(Locale.FR, "rapports", 0, -1)
        assert store.item(Locale.EN, "rapports", 0).attachments == []


class TestFailUpload:
    """Tests for failed uploads."""

    def test_failure_writes_nothing(self, store, sync, caplog):
        before = store.document.model_dump()
        sync.begin_upload(Locale.FR, "rapports", 0, 0)

        with caplog.at_level(logging.WARNING):
            sync.fail_upload(Locale.FR, "rapports", 0, 0, "Server error")

        assert store.document.model_dump() == before
        state = sync.status(Locale.FR, "rapports", 0, 0)
        assert state.status == UploadStatus.FAILED
        assert state.error == "Server error"
        assert "failed" in caplog.text

    def test_progress_is_clamped(self, sync):
        sync.begin_upload(Locale.FR, "rapports", 0, 0)
        sync.report_progress(Locale.FR, "rapports", 0, 0, 140)
        assert sync.status(Locale.FR, "rapports", 0, 0).progress == 100
        sync.report_progress(Locale.FR, "rapports", 0, 0, -3)
        assert sync.status(Locale.FR, "rapports", 0, 0).progress == 0


class TestRemoveAttachment:
    """Tests for removing attachment slots."""

    def test_removes_slot_in_every_locale(self, store, sync):
        sync.complete_upload(Locale.FR, "rapports", 0, 0, "/uploads/a.pdf")
        sync.complete_upload(Locale.FR, "rapports", 0, 1, "/uploads/b.pdf")

        removed = sync.remove_attachment(Locale.EN, "rapports", 0, 0)

        assert removed == "/uploads/a.pdf"
        for locale in LOCALES:
            assert store.item(locale, "rapports", 0).attachments == ["/uploads/b.pdf"]

    def test_later_slot_states_move_down(self, sync):
        for slot in range(3):
            sync.complete_upload(Locale.FR, "rapports", 0, slot, f"/uploads/{slot}.pdf")
        sync.fail_upload(Locale.FR, "rapports", 0, 2, "timeout")

        sync.remove_attachment(Locale.FR, "rapports", 0, 1)

        keys = sorted(key.slot for key in sync.uploads if key.item_id == "r0")
        assert keys == [0, 1]
        assert sync.status(Locale.FR, "rapports", 0, 1).status == UploadStatus.FAILED

    def test_negative_slot_removes_nothing(self, store, sync):
        sync.complete_upload(Locale.FR, "rapports", 0, 0, "a")
        sync.complete_upload(Locale.FR, "rapports", 0, 1, "b")

        with pytest.raises(ItemNotFoundError):
            sync.remove_attachment(Locale.FR, "rapports", 0, -1)

        for locale in LOCALES:
            assert store.item(locale, "rapports", 0).attachments == ["a", "b"]
        assert sorted(key.slot for key in sync.uploads) == [0, 1]

    def test_missing_slot_returns_empty(self, sync):
        assert sync.remove_attachment(Locale.FR, "rapports", 1, 4) == ""

    def test_clear_item(self, sync):
        sync.begin_upload(Locale.FR, "rapports", 0, 0)
        sync.begin_upload(Locale.FR, "rapports", 1, 0)
        sync.clear_item("r0")
        assert [key.item_id for key in sync.uploads] == ["r1"]
