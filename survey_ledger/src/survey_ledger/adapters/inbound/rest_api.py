"""REST API adapter for the survey ledger.

This module provides a FastAPI-based REST API in front of the operation
dispatcher, plus read-only record views over the index.

Endpoints:
    POST /invoke - Run an invoke operation (init, write, read, init_survey, delete)
    POST /query - Run a query operation (read)
    GET /records - List every indexed record
    GET /records/{id} - Get one record
    POST /reconcile - Rebuild the index from a full key scan
    GET /health - Health check

Usage:
    from survey_ledger.adapters.inbound import OperationDispatcher, create_app, run_server

    app = create_app(dispatcher)
    run_server(dispatcher, host="0.0.0.0", port=8080)

    # or, with settings from SURVEY_LEDGER_* environment variables:
    python -m survey_ledger.adapters.inbound.rest_api

References:
    - FastAPI documentation: https://fastapi.tiangolo.com/
"""

from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from survey_ledger import __version__
from survey_ledger.adapters.inbound.dispatcher import OperationDispatcher
from survey_ledger.domain.entities import SurveyRecord
from survey_ledger.domain.errors import (
    DuplicateError,
    LedgerError,
    NotFoundError,
    StorageError,
    UnknownOperationError,
    ValidationError,
)
from survey_ledger.domain.services import require_utf8
from survey_ledger.domain.value_objects import RecordId

_STATUS_CODES: dict[type[LedgerError], int] = {
    ValidationError: 400,
    UnknownOperationError: 400,
    NotFoundError: 404,
    DuplicateError: 409,
    StorageError: 503,
}


class OperationRequest(BaseModel):
    """Request model for a dispatched operation."""

    function: str = Field(..., description="Operation name")
    args: list[str] = Field(default_factory=list, description="Positional string arguments")


class OperationResponse(BaseModel):
    """Response model for a dispatched operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    payload: str = Field("", description="Returned value, UTF-8 decoded")


class RecordResponse(BaseModel):
    """Response model for one survey record."""

    id: str = Field(..., description="Record identifier")
    survey_id: str = Field(..., description="Survey identifier (lowercase)")
    subject_id: str = Field(..., description="Subject identifier (lowercase)")
    score: int = Field(..., description="Score")
    feedback: str = Field(..., description="Feedback text (lowercase)")
    submitted_date: str = Field(..., description="Submitted date as supplied (lowercase)")


class RecordListResponse(BaseModel):
    """Response model for index enumeration."""

    ids: list[str] = Field(..., description="Index in insertion order")
    records: list[RecordResponse] = Field(..., description="Records still present")


class ReconcileResponse(BaseModel):
    """Response model for index reconciliation."""

    index: list[str] = Field(..., description="Index as rewritten")
    added: list[str] = Field(..., description="Ids added to the index")
    removed: list[str] = Field(..., description="Ids removed from the index")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")


def _record_to_response(record: SurveyRecord) -> RecordResponse:
    return RecordResponse(
        id=record.id,
        survey_id=record.survey_id,
        subject_id=record.subject_id,
        score=record.score,
        feedback=record.feedback,
        submitted_date=record.submitted_date,
    )


def _http_error(error: LedgerError) -> HTTPException:
    status_code = next(
        (code for kind, code in _STATUS_CODES.items() if isinstance(error, kind)), 500
    )
    return HTTPException(status_code=status_code, detail=str(error))


def create_app(dispatcher: OperationDispatcher) -> FastAPI:
    """Create FastAPI application for the survey ledger.

    Args:
        dispatcher: Dispatcher routing operations to the ledger service

    Returns:
        Configured FastAPI application
    """
    ledger = dispatcher.ledger

    app = FastAPI(
        title="Survey Ledger API",
        description="REST API for indexed survey records",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.post("/invoke", response_model=OperationResponse, tags=["Operations"])
    async def invoke(request: OperationRequest) -> OperationResponse:
        """Run an invoke operation."""
        try:
            payload = dispatcher.invoke(request.function, request.args)
        except LedgerError as e:
            raise _http_error(e)
        return OperationResponse(success=True, payload=payload.decode("utf-8", errors="replace"))

    @app.post("/query", response_model=OperationResponse, tags=["Operations"])
    async def query(request: OperationRequest) -> OperationResponse:
        """Run a query operation."""
        try:
            payload = dispatcher.query(request.function, request.args)
        except LedgerError as e:
            raise _http_error(e)
        return OperationResponse(success=True, payload=payload.decode("utf-8", errors="replace"))

    @app.get("/records", response_model=RecordListResponse, tags=["Records"])
    async def list_records() -> RecordListResponse:
        """List every indexed record."""
        try:
            with ledger.transaction():
                ids = ledger.list_record_ids()
                records = ledger.list_records()
        except LedgerError as e:
            raise _http_error(e)
        return RecordListResponse(
            ids=ids,
            records=[_record_to_response(r) for r in records],
        )

    @app.get("/records/{record_id}", response_model=RecordResponse, tags=["Records"])
    async def get_record(record_id: str) -> RecordResponse:
        """Get one record by id."""
        try:
            require_utf8([record_id], ("id",))
            with ledger.transaction():
                record = ledger.get_record(RecordId(record_id))
        except LedgerError as e:
            raise _http_error(e)
        return _record_to_response(record)

    @app.post("/reconcile", response_model=ReconcileResponse, tags=["Records"])
    async def reconcile() -> ReconcileResponse:
        """Rebuild the index from the records actually stored."""
        try:
            with ledger.transaction():
                report = ledger.reconcile_index()
        except LedgerError as e:
            raise _http_error(e)
        return ReconcileResponse(index=report.index, added=report.added, removed=report.removed)

    return app


def run_server(
    dispatcher: OperationDispatcher,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> None:
    """Run the REST API server.

    Args:
        dispatcher: Dispatcher routing operations to the ledger service.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    uvicorn.run(create_app(dispatcher), host=host, port=port)


if __name__ == "__main__":
    from survey_ledger.infrastructure.container import Container

    Container.create().serve()
