"""FastAPI entrypoint for the workshop archive."""
from __future__ import annotations

import base64
import binascii
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from lib import analytics
from lib.config import LOG_LEVEL
from lib.form_sync import CREATE_NEW, FormSyncEngine
from lib.record_store import RecordStore
from lib.workshop import WorkshopDraft, WorkshopRecord
from services.report_extractor.chain import LLMCall
from services.report_extractor.run import run as run_report_extractor
from supabase_store.attachments import AttachmentStorage
from utils.errors import (
    BucketNotFoundError,
    ExtractionError,
    PersistenceError,
    RecordNotFoundError,
    StorageError,
    StoragePolicyError,
    ValidationError,
)
from utils.logging import set_log_level

load_dotenv()
set_log_level(LOG_LEVEL)

logger = logging.getLogger(__name__)


class WorkshopFormRequest(WorkshopDraft):
    """Submitted create/edit form: the draft plus the custom category entry."""

    custom_category: Optional[str] = Field(None, alias="customCategory")


class ProcessReportRequest(BaseModel):
    text: str = Field(..., min_length=1)


class AttachmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., min_length=1, alias="fileName")
    content_base64: str = Field(..., alias="contentBase64")
    content_type: str = Field("application/octet-stream", alias="contentType")


def _detail(record: WorkshopRecord) -> dict[str, Any]:
    payload = record.to_payload()
    payload["budgetTotal"] = analytics.budget_total(record)
    payload["budgetUtilization"] = analytics.budget_utilization(record)
    payload["formattedDate"] = analytics.format_date(record.date)
    return payload


def _engine_for(form: WorkshopFormRequest, record_id: Optional[str] = None) -> FormSyncEngine:
    draft = WorkshopDraft.model_validate(form.model_dump(exclude={"custom_category"}))
    engine = FormSyncEngine(draft, record_id=record_id)
    if form.custom_category is not None:
        engine.set_category(CREATE_NEW)
        engine.set_custom_category(form.custom_category)
    return engine


def _raise_http(exc: Exception) -> None:
    if isinstance(exc, RecordNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, (ValidationError, ExtractionError)):
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if isinstance(exc, (BucketNotFoundError, StoragePolicyError)):
        raise HTTPException(
            status_code=424, detail={"message": str(exc), "remediation": exc.remediation}
        ) from exc
    if isinstance(exc, (PersistenceError, StorageError)):
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    raise exc


def create_app(
    store: Optional[RecordStore] = None,
    attachments: Optional[AttachmentStorage] = None,
    llm: Optional[LLMCall] = None,
) -> FastAPI:
    """
    Build the API with its collaborators injected.

    Args:
        store: Record store; a Supabase-backed one is built when omitted.
        attachments: Attachment storage; Supabase-backed when omitted.
        llm: Prompt-to-text callable for report extraction; Gemini when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store or RecordStore()
        app.state.attachments = attachments or AttachmentStorage()
        app.state.llm = llm
        result = app.state.store.load()
        if result.degraded:
            logger.warning("Archive running in offline fallback mode with %d records.", len(result.records))
        yield

    app = FastAPI(title="Workshop Hub API", lifespan=lifespan)

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, Any]:
        return {"status": "ok", "degraded": request.app.state.store.degraded}

    @app.get("/workshops")
    async def list_workshops(
        request: Request,
        category: str = Query(default=analytics.ALL_CATEGORIES),
        search: str = Query(default=""),
    ) -> dict[str, Any]:
        records = request.app.state.store.records
        return {
            "categories": analytics.inventory_categories(records),
            "workshops": [record.to_payload() for record in analytics.filter_inventory(records, category, search)],
        }

    @app.get("/workshops/{record_id}")
    async def get_workshop(record_id: str, request: Request) -> dict[str, Any]:
        try:
            return _detail(request.app.state.store.get(record_id))
        except RecordNotFoundError as exc:
            _raise_http(exc)

    @app.post("/workshops", status_code=201)
    def create_workshop(form: WorkshopFormRequest, request: Request) -> dict[str, Any]:
        try:
            record = _engine_for(form).finalize()
            request.app.state.store.add(record)
        except (ValidationError, PersistenceError) as exc:
            _raise_http(exc)
        return _detail(record)

    @app.put("/workshops/{record_id}")
    def update_workshop(record_id: str, form: WorkshopFormRequest, request: Request) -> dict[str, Any]:
        store: RecordStore = request.app.state.store
        try:
            store.get(record_id)
            record = _engine_for(form, record_id=record_id).finalize(record_id=record_id)
            store.update(record)
        except (RecordNotFoundError, ValidationError, PersistenceError) as exc:
            _raise_http(exc)
        return _detail(record)

    @app.delete("/workshops/{record_id}", status_code=204)
    def delete_workshop(record_id: str, request: Request) -> None:
        try:
            request.app.state.store.delete(record_id)
        except (RecordNotFoundError, PersistenceError) as exc:
            _raise_http(exc)

    @app.post("/workshops/{record_id}/attachment")
    def upload_attachment(record_id: str, payload: AttachmentRequest, request: Request) -> dict[str, Any]:
        store: RecordStore = request.app.state.store
        try:
            content = base64.b64decode(payload.content_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise HTTPException(status_code=422, detail="contentBase64 is not valid base64.") from exc
        try:
            engine = FormSyncEngine.for_record(store.get(record_id))
            attachment = request.app.state.attachments.upload(payload.file_name, content, payload.content_type)
            engine.attach(attachment.url, attachment.name)
            record = store.update(engine.finalize())
        except (RecordNotFoundError, StorageError, PersistenceError) as exc:
            _raise_http(exc)
        return _detail(record)

    @app.get("/dashboard")
    async def dashboard(request: Request, year: Optional[str] = Query(default=None)) -> dict[str, Any]:
        records = request.app.state.store.records
        summary = analytics.dashboard_summary(records, year)
        return {
            **summary,
            "records": [record.to_payload() for record in summary["records"]],
            "years": analytics.available_years(records),
        }

    @app.get("/compare")
    async def compare(request: Request) -> dict[str, Any]:
        return analytics.comparison_matrix(request.app.state.store.records)

    @app.post("/reports/process", status_code=201)
    def process_report(payload: ProcessReportRequest, request: Request) -> dict[str, Any]:
        try:
            record = run_report_extractor(payload.text, llm=request.app.state.llm)
            request.app.state.store.add(record)
        except (ValidationError, ExtractionError, PersistenceError) as exc:
            _raise_http(exc)
        return _detail(record)

    return app


app = create_app()
