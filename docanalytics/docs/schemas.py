# docanalytics/docs/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    filename: str
    url: str
    content: str = ""
    size_bytes: int
    uploaded_at: datetime
    classification: Optional[str] = None
    classification_ms: float = 0.0
    user_id: str


class DashboardStats(BaseModel):
    total_documents: int = 0
    total_size_mb: float = 0.0
    search_execution_ms: float = 0.0
    total_classification_time_ms: float = 0.0


class DocumentListResponse(BaseModel):
    query: Optional[str] = None
    stats: DashboardStats
    items: List[DocumentOut] = Field(default_factory=list)


class ClassifiedResponse(BaseModel):
    stats: DashboardStats
    groups: Dict[str, List[DocumentOut]] = Field(default_factory=dict)


class DeleteResponse(BaseModel):
    deleted: bool
    doc_id: str
