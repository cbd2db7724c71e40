# docanalytics/classify/classifier.py
from __future__ import annotations

import time
from typing import Iterable, Optional, Tuple

from docanalytics.classify.taxonomy import TAXONOMY, UNCLASSIFIED, TaxonomyEntry


class Classifier:
    """
    Rule-based classifier: scores text against each taxonomy entry by the
    number of distinct keywords it contains (case-insensitive substring match).
    """

    def __init__(self, taxonomy: Iterable[TaxonomyEntry] = TAXONOMY):
        # Lower-case once; keep the caller's order for tie-breaking
        self._rules: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(
            (entry.label, tuple(dict.fromkeys(k.lower() for k in entry.keywords)))
            for entry in taxonomy
        )

    def score(self, content: Optional[str]) -> list[tuple[str, int]]:
        """
        Return (label, distinct keyword hits) for every entry with at least one hit,
        in taxonomy order.
        """
        if not content:
            return []
        text = content.lower()
        scores: list[tuple[str, int]] = []
        for label, keywords in self._rules:
            count = sum(1 for kw in keywords if kw in text)
            if count > 0:
                scores.append((label, count))
        return scores

    def classify(self, content: Optional[str]) -> str:
        best_label, best_score = UNCLASSIFIED, 0
        # strict '>' keeps the earliest entry on ties
        for label, count in self.score(content):
            if count > best_score:
                best_label, best_score = label, count
        return best_label

    def classify_timed(self, content: Optional[str]) -> tuple[str, float]:
        started = time.perf_counter()
        label = self.classify(content)
        elapsed_ms = (time.perf_counter() - started) * 1000
        return label, elapsed_ms
