"""End-to-end pipeline flows through the orchestrator over the in-memory store."""

from uuid import uuid4

import pytest

from docforge.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    PreconditionNotMetError,
    ProviderUnavailableError,
)
from docforge.schemas.artifacts import CheckItemKind, EstimatePhase
from docforge.schemas.requests import (
    ActivityLogCreateRequest,
    CodeGenerationRequest,
    ConsistencyCheckRequest,
    DocumentGenerationRequest,
    ProgressReportRequest,
    ProposalCreationRequest,
    ProjectCreateRequest,
    QualityCheckRequest,
    TemplateCreateRequest,
    WorkEstimationRequest,
)
from docforge.services.orchestrator import PipelineOrchestrator
from docforge.services.project_service import ProjectService

pytestmark = pytest.mark.integration


@pytest.fixture
def offline_gateway(make_gateway):
    gateway, _ = make_gateway(ProviderUnavailableError("no network", provider="fake"))
    return gateway


@pytest.mark.asyncio
async def test_full_flow_without_any_provider(store, storage, offline_gateway, test_settings):
    """Every stage completes on fallback output when no provider can be reached."""
    projects = ProjectService(store, storage)
    orchestrator = PipelineOrchestrator(store, offline_gateway, test_settings, storage=storage)

    project = await projects.create_project(ProjectCreateRequest(name="Inventory renewal"))
    upload = await projects.ingest_upload(project.id, "brief.txt", "text/plain", b"Track stock per location.")
    assert upload.content["text"] == "Track stock per location."
    assert upload.content["file_path"].startswith(f"uploads/{project.id}/")

    doc = await orchestrator.generate_document(
        DocumentGenerationRequest(project_id=project.id, document_type="requirements")
    )
    assert doc.is_fallback is True
    assert doc.summary == "Sample requirements:"

    code = await orchestrator.generate_code(CodeGenerationRequest(document_id=doc.artifact_id, language="python"))
    source = await store.source_codes.get_by_id(code.artifact_id)
    assert source.file_name == "generated_code.python"
    assert source.content.strip()
    assert code.summary == "generated_code.python (3 lines)"

    consistency = await orchestrator.check_consistency(
        ConsistencyCheckRequest(document_ids=[doc.artifact_id, upload.id])
    )
    assert consistency.summary == "Consistency score: 0\nIssues found: 1"

    quality = await orchestrator.check_quality(
        QualityCheckRequest(project_id=project.id, items=[CheckItemKind.DOCUMENT])
    )
    assert quality.summary.startswith("ドキュメント: ")

    estimate = await orchestrator.estimate_work(WorkEstimationRequest(project_id=project.id))
    assert estimate.summary.splitlines()[0] == "Total: 1000 hours"

    await projects.add_activity_log(project.id, ActivityLogCreateRequest(phase="requirements", status="completed"))
    logs = await projects.list_activity_logs(project.id)
    report = await orchestrator.create_progress_report(
        ProgressReportRequest(
            project_id=project.id,
            start_date=logs[0].created_at.isoformat(),
            end_date=logs[0].created_at.isoformat(),
        )
    )
    assert "Overall progress: 25%" in report.summary

    template = await projects.create_template(TemplateCreateRequest(name="Standard", structure=["Overview", " "]))
    assert template.structure == ["Overview"]
    proposal = await orchestrator.create_proposal(
        ProposalCreationRequest(project_id=project.id, template_id=template.id)
    )
    stored = await store.proposals.get_by_id(proposal.artifact_id)
    assert stored.pdf_url == f"proposals/{project.id}/{stored.id}.pdf"
    assert proposal.summary == f"Proposal: Inventory renewal\nPDF: {stored.pdf_url}"


@pytest.mark.asyncio
async def test_repeated_runs_create_new_artifacts(store, project, uploaded_document, make_gateway, test_settings):
    gateway, _ = make_gateway("Deterministic document body")
    orchestrator = PipelineOrchestrator(store, gateway, test_settings)
    request = DocumentGenerationRequest(project_id=project.id, document_type="design")

    first = await orchestrator.generate_document(request)
    second = await orchestrator.generate_document(request)

    assert first.artifact_id != second.artifact_id
    first_doc = await store.documents.get_by_id(first.artifact_id)
    second_doc = await store.documents.get_by_id(second.artifact_id)
    assert first_doc.content == second_doc.content


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call, request_obj, field",
    [
        ("generate_document", DocumentGenerationRequest(document_type="requirements"), "project_id"),
        ("generate_document", DocumentGenerationRequest(project_id=uuid4(), document_type=" "), "document_type"),
        ("generate_code", CodeGenerationRequest(document_id=uuid4()), "language"),
        ("check_consistency", ConsistencyCheckRequest(document_ids=[]), "document_ids"),
        ("check_quality", QualityCheckRequest(project_id=uuid4(), items=[]), "items"),
        ("estimate_work", WorkEstimationRequest(), "project_id"),
        ("create_progress_report", ProgressReportRequest(project_id=uuid4()), "start_date"),
        ("create_proposal", ProposalCreationRequest(project_id=uuid4()), "template_id"),
    ],
)
async def test_invalid_requests_name_the_field(store, make_gateway, test_settings, call, request_obj, field):
    gateway, provider = make_gateway("unused")
    orchestrator = PipelineOrchestrator(store, gateway, test_settings)

    with pytest.raises(InvalidRequestError) as exc_info:
        await getattr(orchestrator, call)(request_obj)

    assert exc_info.value.field == field
    assert provider.calls == []


@pytest.mark.asyncio
async def test_reversed_period_is_invalid(store, project, make_gateway, test_settings):
    gateway, _ = make_gateway("unused")
    orchestrator = PipelineOrchestrator(store, gateway, test_settings)

    with pytest.raises(InvalidRequestError):
        await orchestrator.create_progress_report(
            ProgressReportRequest(project_id=project.id, start_date="2024-05-01T00:00:00", end_date="2024-04-01T00:00:00")
        )


@pytest.mark.asyncio
async def test_unknown_predecessors_are_preconditions(store, make_gateway, test_settings):
    gateway, _ = make_gateway("unused")
    orchestrator = PipelineOrchestrator(store, gateway, test_settings)

    with pytest.raises(PreconditionNotMetError):
        await orchestrator.check_consistency(ConsistencyCheckRequest(document_ids=[uuid4()]))
    with pytest.raises(PreconditionNotMetError):
        await orchestrator.estimate_work(WorkEstimationRequest(project_id=uuid4()))


@pytest.mark.asyncio
async def test_adjusting_an_estimate_recomputes_total(store, project, offline_gateway, test_settings):
    orchestrator = PipelineOrchestrator(store, offline_gateway, test_settings)
    created = await orchestrator.estimate_work(WorkEstimationRequest(project_id=project.id))

    record = await orchestrator.adjust_work_estimate(
        created.artifact_id,
        [EstimatePhase(phase="design", hours=120), EstimatePhase(phase="development", hours=380.5)],
    )

    assert record.estimate["totalHours"] == 500.5
    assert sum(p["hours"] for p in record.estimate["breakdown"]) == record.estimate["totalHours"]

    with pytest.raises(NotFoundError):
        await orchestrator.adjust_work_estimate(uuid4(), [EstimatePhase(phase="design", hours=1)])
    with pytest.raises(InvalidRequestError):
        await orchestrator.adjust_work_estimate(created.artifact_id, [])


@pytest.mark.asyncio
async def test_adjustment_overflowing_to_infinity_is_invalid(store, project, offline_gateway, test_settings):
    orchestrator = PipelineOrchestrator(store, offline_gateway, test_settings)
    created = await orchestrator.estimate_work(WorkEstimationRequest(project_id=project.id))

    with pytest.raises(InvalidRequestError) as exc_info:
        await orchestrator.adjust_work_estimate(
            created.artifact_id,
            [EstimatePhase(phase="design", hours=1e308), EstimatePhase(phase="test", hours=1e308)],
        )

    assert exc_info.value.field == "breakdown"
    stored = await store.work_estimates.get_by_id(created.artifact_id)
    assert stored.estimate["totalHours"] == 1000
