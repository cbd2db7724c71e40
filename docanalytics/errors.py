# docanalytics/errors.py
from __future__ import annotations


class DocumentError(Exception):
    """Base class for every failure the document core reports."""


# ---------- Validation (raised before any I/O) ----------

class ValidationFailure(DocumentError):
    pass


class EmptyFile(ValidationFailure):
    def __init__(self, filename: str = ""):
        self.filename = filename
        super().__init__("No file uploaded or the file is empty.")


class UnsupportedFormat(ValidationFailure):
    def __init__(self, filename: str = "", extension: str = ""):
        self.filename = filename
        self.extension = extension
        super().__init__("Only PDF and Word (.docx) files are allowed.")


class FileTooLarge(ValidationFailure):
    def __init__(self, filename: str, size_bytes: int, max_bytes: int):
        self.filename = filename
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"File '{filename}' exceeds the maximum size of {max_bytes // (1024 * 1024)} MB"
        )


# ---------- Lookup ----------

class NotFound(DocumentError):
    def __init__(self, doc_id: str):
        self.doc_id = doc_id
        super().__init__("Document not found")


# ---------- Collaborator failures ----------

class StorageFailure(DocumentError):
    pass


class ExtractionFailure(DocumentError):
    pass


class PersistenceFailure(DocumentError):
    pass
