"""Tests for the artifact store repositories over an in-memory database."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError

from docforge.core.exceptions import StorageError
from docforge.schemas.artifacts import CONSISTENCY_CHECK_TYPE, UPLOADED_FILE_TYPE


@pytest.mark.asyncio
async def test_created_record_is_readable_by_id(store, project):
    doc = await store.documents.create_document(project.id, "requirements", {"content": "body"})

    fetched = await store.documents.get_by_id(doc.id)

    assert fetched is not None
    assert fetched.content == {"content": "body"}
    assert fetched.is_fallback is False
    assert await store.documents.get_by_id(uuid4()) is None


@pytest.mark.asyncio
async def test_list_in_range_is_newest_first(store, project):
    base = datetime(2024, 4, 1, tzinfo=timezone.utc)
    for offset in (0, 2, 1, 10):
        await store.activity_logs.create_log(
            project.id, "design", "completed", description=f"day {offset}", created_at=base + timedelta(days=offset)
        )

    logs = await store.activity_logs.list_in_range(project.id, base, base + timedelta(days=5))

    assert [log.description for log in logs] == ["day 2", "day 1", "day 0"]


@pytest.mark.asyncio
async def test_latest_upload_ignores_generated_documents(store, project, uploaded_document, requirements_document):
    latest = await store.documents.get_latest_upload(project.id)
    generated = await store.documents.list_generated(project.id)

    assert latest.id == uploaded_document.id
    assert latest.type == UPLOADED_FILE_TYPE
    assert [doc.id for doc in generated] == [requirements_document.id]


@pytest.mark.asyncio
async def test_get_many_skips_unknown_ids(store, uploaded_document, requirements_document):
    found = await store.documents.get_many([uploaded_document.id, uuid4()])

    assert [doc.id for doc in found] == [uploaded_document.id]
    assert await store.documents.get_many([]) == []


@pytest.mark.asyncio
async def test_latest_quality_check_of_type(store, project):
    await store.quality_checks.create_result(project.id, CONSISTENCY_CHECK_TYPE, {"score": 70})
    quality = await store.quality_checks.create_result(project.id, "ドキュメント", {"items": []})

    assert (await store.quality_checks.get_latest_of_type(project.id, CONSISTENCY_CHECK_TYPE)).result == {"score": 70}
    assert (await store.quality_checks.get_latest_of_type(project.id, "ドキュメント")).id == quality.id


@pytest.mark.asyncio
async def test_failed_commit_rolls_back_and_raises_storage_error(store, project):
    project_id = project.id

    with patch.object(store.session, "commit", AsyncMock(side_effect=SQLAlchemyError("disk full"))):
        with pytest.raises(StorageError):
            await store.documents.create_document(project_id, "design", {"content": "lost"})

    assert await store.documents.list_by_project(project_id) == []


@pytest.mark.asyncio
async def test_update_estimate_replaces_body(store, project):
    estimate = await store.work_estimates.create_estimate(
        project.id, {"totalHours": 10, "breakdown": [{"phase": "design", "hours": 10}]}
    )

    updated = await store.work_estimates.update_estimate(
        estimate.id, {"totalHours": 12, "breakdown": [{"phase": "design", "hours": 12}]}
    )

    assert updated.estimate["totalHours"] == 12
    assert await store.work_estimates.update_estimate(uuid4(), {}) is None


@pytest.mark.asyncio
async def test_templates_listed_by_name(store):
    await store.templates.create_template("Standard", ["Overview", "Plan"])
    await store.templates.create_template("Lean", ["Summary"], description="Short form")

    templates = await store.templates.list_all()

    assert [t.name for t in templates] == ["Lean", "Standard"]
    assert templates[1].structure == ["Overview", "Plan"]
