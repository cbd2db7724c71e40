# docanalytics/docs/models.py
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Float, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from docanalytics.auth.db import Base  # same Base used by auth models
from docanalytics.auth.models import User
from docanalytics.classify.taxonomy import UNCLASSIFIED


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentRecord(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Display / provenance
    title = Column(String, nullable=False)
    filename = Column(String, nullable=False)       # name the user uploaded
    storage_name = Column(String, nullable=False)   # blob key, uuid-based
    url = Column(String, nullable=False)

    content = Column(Text, nullable=False, default="")
    size_bytes = Column(Integer, nullable=False, default=0)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    classification = Column(String, nullable=False, default=UNCLASSIFIED)
    classification_ms = Column(Float, nullable=False, default=0.0)

    owner = relationship(User)
