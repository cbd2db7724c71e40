# docanalytics/search/highlight.py
from __future__ import annotations

import re
from typing import Iterable, List, Optional, TypeVar

from pydantic import BaseModel

OPEN_MARK = "<mark>"
CLOSE_MARK = "</mark>"

_M = TypeVar("_M", bound=BaseModel)


def is_blank(query: Optional[str]) -> bool:
    return not query or not query.strip()


def highlight(
    text: str,
    query: Optional[str],
    open_tag: str = OPEN_MARK,
    close_tag: str = CLOSE_MARK,
) -> str:
    '''
    Wrap every case-insensitive occurrence of `query` in `text` with the marker tags.
    The query is escaped first, so regex metacharacters match literally.
    The matched text keeps its original casing. A blank query returns `text` unchanged.
    '''
    if not text or is_blank(query):
        return text
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    return pattern.sub(lambda m: f"{open_tag}{m.group(0)}{close_tag}", text)


def highlight_documents(docs: Iterable[_M], query: Optional[str], field: str = "content") -> List[_M]:
    '''
    Return highlighted copies of `docs`; the inputs are never modified.
    '''
    if is_blank(query):
        return list(docs)
    return [
        d.model_copy(update={field: highlight(getattr(d, field) or "", query)})
        for d in docs
    ]
