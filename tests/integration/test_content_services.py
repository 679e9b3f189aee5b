"""Integration tests for record and post services."""

import uuid

import pytest

from sce_archive.content import PostService, RecordService, reset_content
from sce_archive.content.base import ContentService
from sce_archive.errors import DuplicateKeyError, ForbiddenError, NotFoundError, ValidationError
from sce_archive.kernel.events import EventStore
from sce_archive.kernel.models.event_log import EventType


class TestContentService:
    """Tests for the shared service base."""

    def test_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            ContentService(None)


class TestRecordService:
    """Tests for RecordService."""

    @pytest.mark.asyncio
    async def test_admin_creates_record(self, db_session, admin, record_data):
        record = await RecordService(db_session).create(admin, record_data)

        assert record.external_number == "173"
        assert record.created_by == admin.id
        assert record.required_clearance == 2

    @pytest.mark.asyncio
    async def test_required_clearance_defaults_to_one(self, db_session, admin, record_data):
        record_data.pop("required_clearance")
        record = await RecordService(db_session).create(admin, record_data)
        assert record.required_clearance == 1

    @pytest.mark.asyncio
    async def test_non_admin_cannot_create(self, db_session, researcher, record_data):
        with pytest.raises(ForbiddenError) as exc_info:
            await RecordService(db_session).create(researcher, record_data)
        assert exc_info.value.reason == "insufficient_role"

    @pytest.mark.asyncio
    async def test_anonymous_cannot_create(self, db_session, record_data):
        with pytest.raises(ForbiddenError) as exc_info:
            await RecordService(db_session).create(None, record_data)
        assert exc_info.value.reason == "not_authenticated"

    @pytest.mark.parametrize("field", ["external_number", "title", "classification", "body", "procedures_text"])
    @pytest.mark.asyncio
    async def test_missing_required_field(self, db_session, admin, record_data, field):
        record_data[field] = None
        with pytest.raises(ValidationError) as exc_info:
            await RecordService(db_session).create(admin, record_data)
        assert exc_info.value.params["field"] == field

    @pytest.mark.asyncio
    async def test_caller_cannot_set_owner(self, db_session, admin, record_data):
        record_data["created_by"] = str(uuid.uuid4())
        with pytest.raises(ValidationError):
            await RecordService(db_session).create(admin, record_data)

    @pytest.mark.asyncio
    async def test_duplicate_external_number(self, db_session, admin, record_data):
        service = RecordService(db_session)
        await service.create(admin, record_data)

        with pytest.raises(DuplicateKeyError) as exc_info:
            await service.create(admin, dict(record_data, title="Impostor"))
        assert exc_info.value.field == "external_number"

    @pytest.mark.asyncio
    async def test_clearance_two_reader_scenarios(self, db_session, admin, reader, record_data):
        service = RecordService(db_session)
        level2 = await service.create(admin, record_data)
        level3 = await service.create(
            admin, dict(record_data, external_number="096", required_clearance=3)
        )

        assert (await service.get(reader, level2.id)).id == level2.id
        with pytest.raises(ForbiddenError) as exc_info:
            await service.get(reader, level3.id)
        assert exc_info.value.reason == "insufficient_clearance"
        assert exc_info.value.params["required"] == 3

        assert [r.id for r in await service.list(reader)] == [level2.id]

    @pytest.mark.asyncio
    async def test_anonymous_single_read(self, db_session, admin, record_data):
        service = RecordService(db_session)
        public = await service.create(admin, dict(record_data, required_clearance=1))
        gated = await service.create(admin, dict(record_data, external_number="049"))

        assert (await service.get(None, public.id)).id == public.id
        with pytest.raises(ForbiddenError) as exc_info:
            await service.get(None, gated.id)
        assert exc_info.value.reason == "not_authenticated"

    @pytest.mark.asyncio
    async def test_get_missing(self, db_session, admin):
        with pytest.raises(NotFoundError):
            await RecordService(db_session).get(admin, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_update_and_delete(self, db_session, admin, record_data):
        service = RecordService(db_session)
        record = await service.create(admin, record_data)

        updated = await service.update(admin, record.id, {"title": "The Statue"})
        assert updated.title == "The Statue"

        await service.delete(admin, record.id)
        with pytest.raises(NotFoundError):
            await service.delete(admin, record.id)

    @pytest.mark.asyncio
    async def test_update_cannot_null_required_field(self, db_session, admin, record_data):
        service = RecordService(db_session)
        record = await service.create(admin, record_data)
        with pytest.raises(ValidationError):
            await service.update(admin, record.id, {"body": None})

    @pytest.mark.asyncio
    async def test_update_cannot_blank_required_field(self, db_session, admin, record_data):
        service = RecordService(db_session)
        record = await service.create(admin, record_data)

        with pytest.raises(ValidationError) as exc_info:
            await service.update(admin, record.id, {"title": "   "})

        assert exc_info.value.params["field"] == "title"
        assert (await service.get(admin, record.id)).title == record_data["title"]

    @pytest.mark.asyncio
    async def test_non_admin_cannot_update_or_delete(self, db_session, admin, researcher, record_data):
        service = RecordService(db_session)
        record = await service.create(admin, record_data)

        with pytest.raises(ForbiddenError):
            await service.update(researcher, record.id, {"title": "x"})
        with pytest.raises(ForbiddenError):
            await service.delete(researcher, record.id)

    @pytest.mark.asyncio
    async def test_mutations_are_audited(self, db_session, admin, record_data):
        service = RecordService(db_session)
        record = await service.create(admin, record_data)
        await service.update(admin, record.id, {"notes": "Reclassified"})
        await service.delete(admin, record.id)

        history = await EventStore(db_session).get_entity_history("content_record", record.id)
        assert [e.event_type for e in history] == [
            EventType.RECORD_DELETED,
            EventType.RECORD_UPDATED,
            EventType.RECORD_CREATED,
        ]
        assert history[-1].actor_id == admin.id
        assert history[-1].payload["external_number"] == "173"


class TestPostService:
    """Tests for PostService."""

    @pytest.mark.asyncio
    async def test_author_is_requester(self, db_session, admin, post_data):
        post = await PostService(db_session).create(admin, post_data)

        assert post.author_id == admin.id
        assert post.author_name == admin.username
        assert post.required_clearance is None

    @pytest.mark.asyncio
    async def test_anonymous_listing_in_insertion_order(self, db_session, admin, post_data):
        service = PostService(db_session)
        first = await service.create(admin, dict(post_data, title="First"))
        await service.create(admin, dict(post_data, title="Gated", required_clearance=2))
        third = await service.create(admin, dict(post_data, title="Third", required_clearance=1))

        assert [p.id for p in await service.list(None)] == [first.id, third.id]

    @pytest.mark.asyncio
    async def test_clearance_filtering(self, db_session, admin, reader, post_data):
        service = PostService(db_session)
        await service.create(admin, dict(post_data, title="Two", required_clearance=2))
        await service.create(admin, dict(post_data, title="Four", required_clearance=4))

        assert [p.title for p in await service.list(reader)] == ["Two"]
        assert [p.title for p in await service.list(admin)] == ["Two", "Four"]

    @pytest.mark.asyncio
    async def test_missing_category(self, db_session, admin, post_data):
        post_data.pop("category")
        with pytest.raises(ValidationError):
            await PostService(db_session).create(admin, post_data)

    @pytest.mark.asyncio
    async def test_make_post_public(self, db_session, admin, post_data):
        service = PostService(db_session)
        post = await service.create(admin, dict(post_data, required_clearance=3))

        updated = await service.update(admin, post.id, {"required_clearance": None})
        assert (await service.get(None, updated.id)).id == post.id


class TestResetContent:
    """Tests for reset_content."""

    @pytest.mark.asyncio
    async def test_admin_resets_records_and_posts(self, db_session, admin, reader, record_data, post_data):
        await RecordService(db_session).create(admin, record_data)
        await PostService(db_session).create(admin, post_data)

        removed = await reset_content(db_session, admin)

        assert removed == {"content_records": 1, "posts": 1}
        assert await RecordService(db_session).list(admin) == []
        assert await PostService(db_session).list(admin) == []
        # accounts survive
        assert await db_session.get(type(reader), reader.id) is not None

    @pytest.mark.asyncio
    async def test_non_admin_cannot_reset(self, db_session, researcher):
        with pytest.raises(ForbiddenError):
            await reset_content(db_session, researcher)
