import pytest

from app.domains.moderation.capabilities import CAPABILITIES
from app.domains.moderation.entities import ContentType, ModerationAction
from app.domains.moderation.exceptions import ContentNotFoundError

OWNER_FIELDS = {
    ContentType.POST: "author_id",
    ContentType.COMMENT: "author_id",
    ContentType.PRODUCT: "seller_id",
    ContentType.RESOURCE: "author_id",
    ContentType.GROUP: "owner_id",
    ContentType.EVENT: "creator_id",
    ContentType.MESSAGE: "sender_id",
}


def seed(store, content_type, content_id="c1"):
    store.add_user("author_1", name="Author")
    if content_type == ContentType.PROFILE:
        return "author_1"
    store.add_content(content_type, content_id, **{OWNER_FIELDS[content_type]: "author_1"})
    return content_id


@pytest.mark.parametrize("content_type", list(ContentType))
async def test_approve_writes_type_specific_fields(dispatcher, store, content_type):
    content_id = seed(store, content_type)

    await dispatcher.perform_moderator_action(content_type, content_id, ModerationAction.APPROVED)

    row = store.row(content_type, content_id)
    for name, value in CAPABILITIES[content_type].approve_fields.items():
        assert row[name] == value


@pytest.mark.parametrize("content_type", list(ContentType))
async def test_reject_writes_type_specific_fields(dispatcher, store, content_type):
    content_id = seed(store, content_type)

    await dispatcher.perform_moderator_action(content_type, content_id, ModerationAction.REJECTED)

    row = store.row(content_type, content_id)
    for name, value in CAPABILITIES[content_type].reject_fields.items():
        assert row[name] == value


async def test_post_approve_and_reject_values(dispatcher, store):
    seed(store, ContentType.POST, "p1")

    await dispatcher.perform_moderator_action(ContentType.POST, "p1", "APPROVED")
    assert store.row(ContentType.POST, "p1")["published"] is True
    assert store.row(ContentType.POST, "p1")["status"] == "PUBLISHED"

    await dispatcher.perform_moderator_action(ContentType.POST, "p1", "REJECTED")
    assert store.row(ContentType.POST, "p1")["published"] is False
    assert store.row(ContentType.POST, "p1")["status"] == "REJECTED"


@pytest.mark.parametrize("content_type", list(ContentType))
async def test_approve_reject_approve_matches_single_approve(dispatcher, store, content_type):
    content_id = seed(store, content_type, "round_trip")
    seed(store, content_type, "single")

    for action in ("APPROVED", "REJECTED", "APPROVED"):
        await dispatcher.perform_moderator_action(content_type, content_id, action)
    if content_type != ContentType.PROFILE:
        await dispatcher.perform_moderator_action(content_type, "single", "APPROVED")
        assert store.row(content_type, content_id) == {**store.row(content_type, "single"), "id": content_id}
    else:
        approve = CAPABILITIES[content_type].approve_fields
        assert {k: store.row(content_type, content_id)[k] for k in approve} == approve


@pytest.mark.parametrize("action", [None, ""])
async def test_missing_action_performs_no_writes(dispatcher, store, action):
    seed(store, ContentType.POST, "p1")

    await dispatcher.perform_moderator_action(ContentType.POST, "p1", action)

    assert store.write_count == 0


async def test_no_action_performs_no_writes(dispatcher, store):
    seed(store, ContentType.POST, "p1")

    await dispatcher.perform_moderator_action(ContentType.POST, "p1", ModerationAction.NO_ACTION)

    assert store.write_count == 0


async def test_unknown_content_type_is_ignored(dispatcher, store):
    await dispatcher.perform_moderator_action("PODCAST", "x1", "APPROVED")

    assert store.write_count == 0


async def test_content_type_accepts_lowercase(dispatcher, store):
    seed(store, ContentType.COMMENT, "c1")

    await dispatcher.perform_moderator_action("comment", "c1", "REJECTED")

    assert store.row(ContentType.COMMENT, "c1")["visible"] is False


async def test_reject_then_edit_post(dispatcher, store):
    seed(store, ContentType.POST, "p1")

    await dispatcher.perform_moderator_action(ContentType.POST, "p1", "REJECTED")
    await dispatcher.perform_moderator_action(
        ContentType.POST, "p1", "CONTENT_EDITED", {"title": "New Title"}
    )

    row = store.row(ContentType.POST, "p1")
    assert row["published"] is False
    assert row["status"] == "REJECTED"
    assert row["title"] == "New Title"
    assert row["moderated"] is True


async def test_edit_copies_only_editable_fields(dispatcher, store):
    seed(store, ContentType.PRODUCT, "prod1")

    await dispatcher.perform_moderator_action(
        ContentType.PRODUCT,
        "prod1",
        "CONTENT_EDITED",
        {"name": "Clean name", "price": 0, "seller_id": "someone_else"},
    )

    _, _, fields = store.updates[-1]
    assert fields == {"name": "Clean name", "moderated": True}
    assert store.row(ContentType.PRODUCT, "prod1")["seller_id"] == "author_1"


@pytest.mark.parametrize("edits", [None, {}])
async def test_edit_without_edits_is_skipped(dispatcher, store, edits):
    seed(store, ContentType.POST, "p1")

    await dispatcher.perform_moderator_action(ContentType.POST, "p1", "CONTENT_EDITED", edits)

    assert store.write_count == 0


async def test_restrict_visibility(dispatcher, store):
    seed(store, ContentType.MESSAGE, "m1")

    await dispatcher.perform_moderator_action(ContentType.MESSAGE, "m1", "RESTRICTED_VISIBILITY")

    row = store.row(ContentType.MESSAGE, "m1")
    assert row["visibility"] == "RESTRICTED"
    assert row["sensitive_content"] is True
    assert not store.notifications


async def test_restrict_profile_uses_profile_visibility(dispatcher, store):
    seed(store, ContentType.PROFILE)

    await dispatcher.perform_moderator_action(ContentType.PROFILE, "author_1", "RESTRICTED_VISIBILITY")

    _, _, fields = store.updates[-1]
    assert fields == {"profile_visibility": "RESTRICTED"}


async def test_warning_is_delegated_to_sanctions(dispatcher, store):
    seed(store, ContentType.POST, "p1")

    await dispatcher.perform_moderator_action(ContentType.POST, "p1", "WARNING_ISSUED", moderator_id="mod_1")

    assert len(store.warnings) == 1
    assert store.warnings[0].user_id == "author_1"
    assert store.warnings[0].moderator_id == "mod_1"


async def test_missing_content_propagates(dispatcher, store):
    with pytest.raises(ContentNotFoundError):
        await dispatcher.perform_moderator_action(ContentType.POST, "missing", "APPROVED")


async def test_store_failure_propagates(dispatcher, store):
    seed(store, ContentType.POST, "p1")
    store.fail_updates = True

    with pytest.raises(RuntimeError):
        await dispatcher.perform_moderator_action(ContentType.POST, "p1", "APPROVED")
