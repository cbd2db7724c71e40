# docanalytics/docs/dashboard.py
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from docanalytics.classify.taxonomy import UNCLASSIFIED
from docanalytics.docs.schemas import DashboardStats, DocumentOut

_BYTES_PER_MB = 1024 * 1024


def total_size_mb(docs: Iterable[DocumentOut]) -> float:
    return round(sum(d.size_bytes for d in docs) / _BYTES_PER_MB, 2)


def summarize(
    docs: Sequence[DocumentOut],
    elapsed_ms: float = 0.0,
    include_classification: bool = False,
) -> DashboardStats:
    '''
    Dashboard numbers for an already user-scoped (and optionally filtered) result set.
    '''
    stats = DashboardStats(
        total_documents=len(docs),
        total_size_mb=total_size_mb(docs),
        search_execution_ms=elapsed_ms,
    )
    if include_classification:
        stats.total_classification_time_ms = round(sum(d.classification_ms for d in docs), 2)
    return stats


def group_by_classification(docs: Iterable[DocumentOut]) -> Dict[str, List[DocumentOut]]:
    '''
    Group by label (missing label -> "Unclassified"), keys sorted ascending.
    '''
    groups: Dict[str, List[DocumentOut]] = {}
    for d in docs:
        groups.setdefault(d.classification or UNCLASSIFIED, []).append(d)
    return {label: groups[label] for label in sorted(groups)}


def sort_by_title(docs: Iterable[DocumentOut]) -> List[DocumentOut]:
    return sorted(docs, key=lambda d: d.title)
