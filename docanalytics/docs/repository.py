# docanalytics/docs/repository.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docanalytics.docs.models import DocumentRecord
from docanalytics.errors import PersistenceFailure
from docanalytics.log import log_error

logger = logging.getLogger(__name__)

# Fields a replace may overwrite; id and user_id are preserved
_REPLACEABLE = (
    "title",
    "filename",
    "storage_name",
    "url",
    "content",
    "size_bytes",
    "uploaded_at",
    "classification",
    "classification_ms",
)


def _like_escape(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DocumentRepository:
    """
    Persists document records through a SQLAlchemy session.
    Every SQLAlchemy error is rolled back and re-raised as PersistenceFailure.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, op: str, exc: SQLAlchemyError) -> PersistenceFailure:
        self.db.rollback()
        log_error(logger, "repository_failed", op=op, error=str(exc))
        return PersistenceFailure(f"Document store {op} failed")

    def insert(self, fields: Dict[str, Any]) -> DocumentRecord:
        rec = DocumentRecord(**fields)
        try:
            self.db.add(rec)
            self.db.commit()
            self.db.refresh(rec)
        except SQLAlchemyError as exc:
            raise self._fail("insert", exc) from exc
        return rec

    def find_all_by_user(self, user_id: str) -> List[DocumentRecord]:
        try:
            return (
                self.db.query(DocumentRecord)
                  .filter(DocumentRecord.user_id == user_id)
                  .order_by(DocumentRecord.uploaded_at.desc())
                  .all()
            )
        except SQLAlchemyError as exc:
            raise self._fail("find_all_by_user", exc) from exc

    def find_by_text_and_user(self, query: str, user_id: str) -> List[DocumentRecord]:
        """
        Case-insensitive substring containment over the extracted content.
        """
        q_like = f"%{_like_escape(query.lower())}%"
        try:
            return (
                self.db.query(DocumentRecord)
                  .filter(
                      DocumentRecord.user_id == user_id,
                      func.lower(DocumentRecord.content).like(q_like, escape="\\"),
                  )
                  .order_by(DocumentRecord.uploaded_at.desc())
                  .all()
            )
        except SQLAlchemyError as exc:
            raise self._fail("find_by_text_and_user", exc) from exc

    def find_by_id(self, doc_id: str) -> Optional[DocumentRecord]:
        try:
            return self.db.get(DocumentRecord, doc_id)
        except SQLAlchemyError as exc:
            raise self._fail("find_by_id", exc) from exc

    def replace_by_id(self, doc_id: str, fields: Dict[str, Any]) -> Optional[DocumentRecord]:
        """
        Overwrite every replaceable field in one commit, so content and
        classification never diverge. Returns None when the id is unknown.
        """
        try:
            rec = self.db.get(DocumentRecord, doc_id)
            if rec is None:
                return None
            for key in _REPLACEABLE:
                if key in fields:
                    setattr(rec, key, fields[key])
            self.db.commit()
            self.db.refresh(rec)
        except SQLAlchemyError as exc:
            raise self._fail("replace_by_id", exc) from exc
        return rec

    def delete_by_id(self, doc_id: str) -> bool:
        try:
            rec = self.db.get(DocumentRecord, doc_id)
            if rec is None:
                return False
            self.db.delete(rec)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete_by_id", exc) from exc
        return True
