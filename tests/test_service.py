import pytest

from app.domains.moderation.entities import (ContentType, ModerationItem,
                                             NotificationType,
                                             ResourceModerationAction)
from app.domains.moderation.service import build_moderation_service
from tests.fakes import FakeMailer, InMemoryModerationStore


@pytest.fixture
def events(bus):
    seen = []

    async def handler(event):
        seen.append(event)

    bus.subscribe("moderation:action_applied", handler)
    return seen


class TestModerate:
    async def test_applies_invalidates_and_tracks(self, service, store, invalidated, events):
        store.add_user("author_1")
        store.add_content(ContentType.GROUP, "g1", owner_id="author_1", name="Club")

        await service.moderate(ModerationItem(ContentType.GROUP, "g1", moderator_id="mod_1"), "APPROVED")

        assert store.row(ContentType.GROUP, "g1")["moderation_approved"] is True
        assert invalidated == [("GROUP", "g1")]
        assert events == [
            {
                "event": "moderation:action_applied",
                "content_type": "GROUP",
                "content_id": "g1",
                "action": "APPROVED",
                "moderator_id": "mod_1",
            }
        ]

    @pytest.mark.parametrize("action", [None, "NO_ACTION"])
    async def test_noop_actions_skip_side_effects(self, service, store, invalidated, events, action):
        store.add_content(ContentType.POST, "p1", author_id=None)

        await service.moderate(ModerationItem(ContentType.POST, "p1"), action)

        assert store.write_count == 0
        assert invalidated == []
        assert events == []

    async def test_tracking_flag_off(self, service, store, flags, events):
        flags.values["trackModerationActions"] = False
        store.add_content(ContentType.POST, "p1", author_id=None)

        await service.moderate(ModerationItem(ContentType.POST, "p1"), "REJECTED")

        assert events == []

    async def test_edits_are_passed_through(self, service, store):
        store.add_content(ContentType.EVENT, "e1", creator_id="u1", title="Old")

        await service.moderate(
            ModerationItem(ContentType.EVENT, "e1", content_edits={"title": "New"}), "CONTENT_EDITED"
        )

        assert store.row(ContentType.EVENT, "e1")["title"] == "New"


class TestBulkModeration:
    @pytest.fixture
    def resources(self, store):
        store.add_user("mod_1", role="MODERATOR")
        store.add_user("admin_1", role="ADMIN")
        store.add_user("alice")
        for resource_id, kind in (("r1", "ARTICLE"), ("r2", "GUIDE")):
            store.add_content(
                ContentType.RESOURCE, resource_id, author_id="alice", type=kind, status="PENDING", featured=False
            )

    async def test_empty_input(self, service):
        result = await service.perform_bulk_moderation([], "approve", "mod_1")

        assert result.success is False
        assert result.error == "No resource IDs provided"
        assert result.batch_id == ""

    async def test_updates_status_and_logs(self, service, store, resources):
        result = await service.perform_bulk_moderation(
            ["r1", "r2", "missing"], "approve", "mod_1", send_notifications=False
        )

        assert result.success is True
        assert (result.processed, result.failed) == (2, 1)
        assert result.failed_ids == ["missing"]
        assert store.row(ContentType.RESOURCE, "r1")["status"] == "PUBLISHED"
        assert [log.batch_id for log in store.logs] == [result.batch_id] * 2
        assert store.logs[0].previous_status == "PENDING"
        assert store.logs[0].reason == "Bulk approve action"
        assert store.notifications == []

    async def test_feature_toggles_flag(self, service, store, resources):
        await service.perform_bulk_moderation(["r1"], ResourceModerationAction.FEATURE, "mod_1", send_notifications=False)
        row = store.row(ContentType.RESOURCE, "r1")
        assert (row["status"], row["featured"]) == ("FEATURED", True)

        await service.perform_bulk_moderation(["r1"], "unfeature", "mod_1", send_notifications=False)
        row = store.row(ContentType.RESOURCE, "r1")
        assert (row["status"], row["featured"]) == ("PUBLISHED", False)

    async def test_sends_batch_notifications(self, service, store, resources):
        result = await service.perform_bulk_moderation(["r1", "r2"], "archive", "mod_1", reason="Outdated")

        assert result.notifications_sent.authors == 1
        assert result.notifications_sent.admins == 1
        types = sorted(n.type.value for n in store.notifications)
        assert types == [
            NotificationType.ADMIN_MODERATION_BATCH.value,
            NotificationType.MODERATION.value,
            NotificationType.MODERATION.value,
        ]

    async def test_nothing_processed_sends_nothing(self, service, store, resources):
        result = await service.perform_bulk_moderation(["missing"], "approve", "mod_1")

        assert result.success is False
        assert result.notifications_sent is None
        assert store.notifications == []


def test_build_moderation_service_wires_one_store():
    store = InMemoryModerationStore()
    service = build_moderation_service(store=store, mailer=FakeMailer(), invalidate_cache=None)

    assert service.store is store
    assert service.notifications.store is store
    assert service.dispatcher.store is store
    assert service.dispatcher.sanctions.store is store
