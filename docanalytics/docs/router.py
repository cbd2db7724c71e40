# docanalytics/docs/router.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from docanalytics.auth.db import get_db
from docanalytics.auth.dependencies import AuthedUser, require_user
from docanalytics.classify.classifier import Classifier
from docanalytics.docs.repository import DocumentRepository
from docanalytics.docs.schemas import (
    ClassifiedResponse,
    DeleteResponse,
    DocumentListResponse,
    DocumentOut,
)
from docanalytics.errors import (
    DocumentError,
    ExtractionFailure,
    FileTooLarge,
    NotFound,
    PersistenceFailure,
    StorageFailure,
    ValidationFailure,
)
from docanalytics.ingest.extractors import TextExtractor
from docanalytics.ingest.orchestrator import IngestionOrchestrator, UploadedFile
from docanalytics.log import log_error
from docanalytics.storage.blob import BlobStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


# ---------- Dependencies ----------

def get_storage(request: Request) -> BlobStorage:
    return request.app.state.storage


def get_extractor(request: Request) -> TextExtractor:
    return request.app.state.extractor


def get_classifier(request: Request) -> Classifier:
    return request.app.state.classifier


def get_orchestrator(
    db: Session = Depends(get_db),
    storage: BlobStorage = Depends(get_storage),
    extractor: TextExtractor = Depends(get_extractor),
    classifier: Classifier = Depends(get_classifier),
) -> IngestionOrchestrator:
    return IngestionOrchestrator(
        repository=DocumentRepository(db),
        storage=storage,
        extractor=extractor,
        classifier=classifier,
    )


# ---------- Helpers ----------

_STATUS_FOR = (
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (ExtractionFailure, 422),
    (StorageFailure, status.HTTP_502_BAD_GATEWAY),
    (PersistenceFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def _to_http(exc: DocumentError) -> HTTPException:
    for kind, code in _STATUS_FOR:
        if isinstance(exc, kind):
            break
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if code >= 500:
        log_error(logger, "document_request_failed", kind=type(exc).__name__, error=str(exc))
    return HTTPException(status_code=code, detail=str(exc))


async def _read_upload(file: Optional[UploadFile], max_bytes: int) -> Optional[UploadedFile]:
    if file is None:
        return None
    # Starlette knows the spooled size; refuse oversized bodies before buffering them
    if file.size is not None and file.size > max_bytes:
        raise FileTooLarge(file.filename or "", file.size, max_bytes)
    data = await file.read()
    return UploadedFile(filename=file.filename or "", data=data, size=len(data))


# ---------- Read endpoints ----------

@router.get("", response_model=DocumentListResponse)
def list_documents(
    q: Optional[str] = Query(None, description="Case-insensitive keyword to search for in content"),
    user: AuthedUser = Depends(require_user),
    orch: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        items, stats = orch.list_documents(user.sub, q)
    except DocumentError as exc:
        raise _to_http(exc)
    return DocumentListResponse(query=q, stats=stats, items=items)


@router.get("/sorted", response_model=DocumentListResponse)
def sorted_documents(
    user: AuthedUser = Depends(require_user),
    orch: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        items, stats = orch.sorted_documents(user.sub)
    except DocumentError as exc:
        raise _to_http(exc)
    return DocumentListResponse(stats=stats, items=items)


@router.get("/classified", response_model=ClassifiedResponse)
def classified_documents(
    user: AuthedUser = Depends(require_user),
    orch: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        groups, stats = orch.classified_documents(user.sub)
    except DocumentError as exc:
        raise _to_http(exc)
    return ClassifiedResponse(stats=stats, groups=groups)


@router.get("/{doc_id}", response_model=DocumentOut)
def get_document(
    doc_id: str = Path(..., description="Document id"),
    user: AuthedUser = Depends(require_user),
    orch: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        return orch.get(user.sub, doc_id)
    except DocumentError as exc:
        raise _to_http(exc)


# ---------- Write endpoints ----------

@router.post("", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    user: AuthedUser = Depends(require_user),
    orch: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        upload = await _read_upload(file, orch.max_upload_bytes)
        return await run_in_threadpool(orch.upload, user.sub, upload)
    except DocumentError as exc:
        raise _to_http(exc)


@router.put("/{doc_id}", response_model=DocumentOut)
async def update_document(
    doc_id: str = Path(..., description="Document id"),
    file: Optional[UploadFile] = File(None),
    user: AuthedUser = Depends(require_user),
    orch: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        upload = await _read_upload(file, orch.max_upload_bytes)
        return await run_in_threadpool(orch.update, user.sub, doc_id, upload)
    except DocumentError as exc:
        raise _to_http(exc)


@router.delete("/{doc_id}", response_model=DeleteResponse)
def delete_document(
    doc_id: str = Path(..., description="Document id"),
    user: AuthedUser = Depends(require_user),
    orch: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        orch.delete(user.sub, doc_id)
    except DocumentError as exc:
        raise _to_http(exc)
    return DeleteResponse(deleted=True, doc_id=doc_id)
