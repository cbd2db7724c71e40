# docanalytics/ingest/orchestrator.py
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from docanalytics import config
from docanalytics.classify.classifier import Classifier
from docanalytics.docs import dashboard
from docanalytics.docs.repository import DocumentRepository
from docanalytics.docs.schemas import DashboardStats, DocumentOut
from docanalytics.errors import (
    EmptyFile,
    ExtractionFailure,
    FileTooLarge,
    NotFound,
    StorageFailure,
    UnsupportedFormat,
)
from docanalytics.ingest.extractors import TextExtractor
from docanalytics.log import log_error, log_step
from docanalytics.search.highlight import highlight_documents, is_blank
from docanalytics.storage.blob import BlobStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    data: bytes
    size: Optional[int] = None   # declared length; falls back to len(data)

    @property
    def length(self) -> int:
        return self.size if self.size is not None else len(self.data or b"")

    @property
    def extension(self) -> str:
        return Path(self.filename or "").suffix.lower()


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class IngestionOrchestrator:
    """
    Coordinates upload -> extract -> classify -> persist, plus the update,
    delete and read paths. Every collaborator is injected; nothing is global.

    Multi-step writes compensate instead of leaving orphans: a blob uploaded
    for a write that later fails is deleted again, and on update the old blob
    is only removed once the new record is committed.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        storage: BlobStorage,
        extractor: TextExtractor,
        classifier: Classifier,
        max_upload_bytes: int = config.MAX_UPLOAD_MB * 1024 * 1024,
        allowed_extensions: Tuple[str, ...] = config.ALLOWED_EXTENSIONS,
    ):
        self.repository = repository
        self.storage = storage
        self.extractor = extractor
        self.classifier = classifier
        self.max_upload_bytes = max_upload_bytes
        self.allowed_extensions = tuple(e.lower() for e in allowed_extensions)

    # ---------- Validation ----------

    def validate(self, file: Optional[UploadedFile]) -> None:
        """Reject bad uploads before any I/O happens."""
        if file is None or not file.data or file.length == 0:
            raise EmptyFile(file.filename if file else "")
        if file.extension not in self.allowed_extensions:
            raise UnsupportedFormat(file.filename, file.extension)
        if file.length > self.max_upload_bytes:
            raise FileTooLarge(file.filename, file.length, self.max_upload_bytes)

    # ---------- Helpers ----------

    @staticmethod
    def storage_name_for(file: UploadedFile) -> str:
        return f"{uuid.uuid4().hex}{file.extension}"

    def _discard_blob(self, name: str, reason: str) -> None:
        """Best-effort blob removal; a failure here is logged, never raised."""
        try:
            self.storage.delete(name)
            log_step(logger, "blob_discarded", storage_name=name, reason=reason)
        except StorageFailure as exc:
            log_error(logger, "blob_discard_failed", storage_name=name, reason=reason, error=str(exc))

    def _owned(self, user_id: str, doc_id: str):
        rec = self.repository.find_by_id(doc_id)
        if rec is None or rec.user_id != user_id:
            raise NotFound(doc_id)
        return rec

    def _derive_fields(self, file: UploadedFile, storage_name: str, url: str) -> Dict[str, Any]:
        """Extract and classify; everything a record needs except id and owner."""
        title = self.extractor.extract_title(file.filename, file.data)
        content = self.extractor.extract_full_text(file.filename, file.data)
        label, classify_ms = self.classifier.classify_timed(content)
        return {
            "title": (title or "").strip() or Path(file.filename).stem or "Untitled",
            "filename": file.filename,
            "storage_name": storage_name,
            "url": url,
            "content": content or "",
            "size_bytes": file.length,
            "uploaded_at": datetime.now(timezone.utc),
            "classification": label,
            "classification_ms": classify_ms,
        }

    def _store_and_derive(self, file: UploadedFile) -> Dict[str, Any]:
        storage_name = self.storage_name_for(file)
        url = self.storage.upload(file.data, storage_name, file.filename)
        try:
            return self._derive_fields(file, storage_name, url)
        except ExtractionFailure:
            self._discard_blob(storage_name, "extraction_failed")
            raise

    # ---------- Write paths ----------

    def upload(self, user_id: str, file: UploadedFile) -> DocumentOut:
        self.validate(file)

        fields = self._store_and_derive(file)
        try:
            rec = self.repository.insert({**fields, "user_id": user_id})
        except Exception:
            self._discard_blob(fields["storage_name"], "insert_failed")
            raise

        log_step(
            logger,
            "document_uploaded",
            doc_id=rec.id,
            user_id=user_id,
            filename=file.filename,
            size_bytes=file.length,
            classification=rec.classification,
            classification_ms=rec.classification_ms,
        )
        return DocumentOut.model_validate(rec)

    def update(self, user_id: str, doc_id: str, file: UploadedFile) -> DocumentOut:
        self.validate(file)
        existing = self._owned(user_id, doc_id)
        old_storage_name = existing.storage_name

        fields = self._store_and_derive(file)
        try:
            rec = self.repository.replace_by_id(doc_id, fields)
            if rec is None:
                raise NotFound(doc_id)
        except Exception:
            self._discard_blob(fields["storage_name"], "replace_failed")
            raise

        if old_storage_name and old_storage_name != fields["storage_name"]:
            self._discard_blob(old_storage_name, "replaced")

        log_step(
            logger,
            "document_updated",
            doc_id=doc_id,
            user_id=user_id,
            filename=file.filename,
            classification=rec.classification,
        )
        return DocumentOut.model_validate(rec)

    def delete(self, user_id: str, doc_id: str) -> None:
        rec = self._owned(user_id, doc_id)
        self._discard_blob(rec.storage_name, "deleted")
        self.repository.delete_by_id(doc_id)
        log_step(logger, "document_deleted", doc_id=doc_id, user_id=user_id)

    # ---------- Read paths ----------

    def get(self, user_id: str, doc_id: str) -> DocumentOut:
        return DocumentOut.model_validate(self._owned(user_id, doc_id))

    def _all(self, user_id: str) -> List[DocumentOut]:
        return [DocumentOut.model_validate(r) for r in self.repository.find_all_by_user(user_id)]

    def list_documents(self, user_id: str, query: Optional[str] = None) -> Tuple[List[DocumentOut], DashboardStats]:
        '''
        All of the user's documents, or those whose content contains `query`
        with every match highlighted. Timing covers retrieval and highlighting.
        '''
        started = time.perf_counter()
        if is_blank(query):
            docs = self._all(user_id)
        else:
            rows = self.repository.find_by_text_and_user(query.strip(), user_id)
            docs = highlight_documents((DocumentOut.model_validate(r) for r in rows), query.strip())
        stats = dashboard.summarize(docs, elapsed_ms=_elapsed_ms(started))
        return docs, stats

    def sorted_documents(self, user_id: str) -> Tuple[List[DocumentOut], DashboardStats]:
        started = time.perf_counter()
        docs = dashboard.sort_by_title(self._all(user_id))
        return docs, dashboard.summarize(docs, elapsed_ms=_elapsed_ms(started))

    def classified_documents(self, user_id: str) -> Tuple[Dict[str, List[DocumentOut]], DashboardStats]:
        docs = self._all(user_id)
        groups = dashboard.group_by_classification(docs)
        return groups, dashboard.summarize(docs, include_classification=True)
