from langchain_community.document_loaders import PyPDFLoader
from langchain_core.documents import Document

from typing import Iterator, List, Optional
import io
import os
import tempfile
from pathlib import Path

import docx
from docx.table import Table
from pypdf import PdfReader

from docanalytics.errors import ExtractionFailure


UNTITLED_PDF = "Untitled PDF"
UNTITLED_WORD = "Untitled Word"

#utilities

def _extension(filename: str) -> str:
    return Path(filename or "").suffix.lower()

def _stem(filename: str) -> str:
    return Path(filename or "").stem or "Untitled"

def _normalize_text(s: str) -> str:
    '''
    Canonical text normalization used for storage:
    - remove zero-width/BOM characters
    - strip lines and drop empty ones
    - preserve paragraph boundaries via '\n'
    '''
    if not s:
         return ""
    s = s.replace("\u200b", " ").replace("\ufeff", " ")
    lines = [ln.strip() for ln in s.splitlines()]
    lines = [ln for ln in lines if ln]
    return "\n".join(lines)


#----------------
# PDF
#----------------

def load_pdf_pages(data: bytes) -> List[Document]:
    '''
    loads PDF bytes and returns one langchain document per page
    '''
    # PyPDFLoader only reads from a path
    with tempfile.NamedTemporaryFile(delete=False, suffix=".pdf") as tmp:
        tmp.write(data)
        tmp.flush()
        tmp_path = tmp.name
    try:
        return PyPDFLoader(tmp_path).load()
    finally:
        os.remove(tmp_path)


def _pdf_largest_font_text(page) -> Optional[str]:
    '''
    Text drawn at the largest font size on the page, in reading order.
    '''
    fragments: List[tuple[float, str]] = []

    def visitor(text, cm, tm, font_dict, font_size):
        if text and text.strip():
            scale = abs(tm[3]) if tm and tm[3] else 1.0
            fragments.append((round(float(font_size or 0) * scale, 2), text))

    page.extract_text(visitor_text=visitor)
    if not fragments:
        return None
    largest = max(size for size, _ in fragments)
    title = " ".join(t.strip() for size, t in fragments if size == largest)
    return title.strip() or None


def pdf_title(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    meta = reader.metadata
    if meta is not None and meta.title and str(meta.title).strip():
        return str(meta.title).strip()
    if reader.pages:
        title = _pdf_largest_font_text(reader.pages[0])
        if title:
            return title
    return UNTITLED_PDF


def pdf_text(data: bytes) -> str:
    pages = load_pdf_pages(data)
    return "\n".join(_normalize_text(p.page_content) for p in pages)


#----------------
# Word (.docx)
#----------------

def _table_texts(table, seen) -> Iterator[str]:
    for row in table.rows:
        for cell in row.cells:
            # merged cells come back once per spanned grid column
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            for p in cell.paragraphs:
                yield p.text
            for inner in cell.tables:
                yield from _table_texts(inner, seen)


def _docx_paragraphs(data: bytes) -> List[str]:
    '''
    Body text in document order: top-level paragraphs and every table cell.
    '''
    document = docx.Document(io.BytesIO(data))
    texts: List[str] = []
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            texts.extend(_table_texts(block, set()))
        else:
            texts.append(block.text)
    return texts


def docx_title(data: bytes) -> str:
    for text in _docx_paragraphs(data):
        if text and text.strip():
            return text.strip()
    return UNTITLED_WORD


def docx_text(data: bytes) -> str:
    return _normalize_text("\n".join(_docx_paragraphs(data)))


#----------------
# Extractor
#----------------

class TextExtractor:
    '''
    Title and full-text extraction for .pdf and .docx uploads.
    Other extensions degrade gracefully: title -> filename stem, text -> "".
    Parser errors surface as ExtractionFailure.
    '''

    def extract_title(self, filename: str, data: bytes) -> str:
        ext = _extension(filename)
        try:
            if ext == ".pdf":
                return pdf_title(data)
            if ext == ".docx":
                return docx_title(data)
        except Exception as exc:
            raise ExtractionFailure(f"Could not read title from '{filename}': {exc}") from exc
        return _stem(filename)

    def extract_full_text(self, filename: str, data: bytes) -> str:
        ext = _extension(filename)
        try:
            if ext == ".pdf":
                return pdf_text(data)
            if ext == ".docx":
                return docx_text(data)
        except Exception as exc:
            raise ExtractionFailure(f"Could not read text from '{filename}': {exc}") from exc
        return ""
