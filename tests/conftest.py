# tests/conftest.py
import io
import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

# ---- Point the app at throwaway storage before anything imports docanalytics.config
_TMP = Path(tempfile.mkdtemp(prefix="docanalytics-tests-"))
TEST_JWT_SECRET = "docanalytics-test-secret-with-enough-bytes-for-hs256"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["STORAGE_BACKEND"] = "local"
os.environ["LOCAL_STORAGE_PATH"] = str(_TMP / "blobs")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import docx
from pypdf import PdfReader, PdfWriter
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docanalytics.errors import ExtractionFailure, PersistenceFailure, StorageFailure


# ---- Sample files
def make_pdf(lines, title=None, heading=None) -> bytes:
    """
    Build a one-page PDF. With no `title` the document info dictionary carries
    no Title at all, so title extraction has to fall back to the page text.
    """
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    if title:
        c.setTitle(title)
    y = 740
    if heading:
        c.setFont("Helvetica-Bold", 24)
        c.drawString(72, y, heading)
        y -= 40
    c.setFont("Helvetica", 10)
    for line in lines:
        c.drawString(72, y, line)
        y -= 16
    c.save()
    if title:
        return buf.getvalue()

    # ReportLab always writes "untitled"; copy the pages into a fresh file without it
    buf.seek(0)
    writer = PdfWriter()
    for page in PdfReader(buf).pages:
        writer.add_page(page)
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def make_docx(paragraphs, tables=()) -> bytes:
    """`tables` is a sequence of row lists, each row a list of cell strings; added after the paragraphs."""
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    for rows in tables:
        table = document.add_table(rows=len(rows), cols=max(len(r) for r in rows))
        for r, row in enumerate(rows):
            for c, text in enumerate(row):
                table.cell(r, c).text = text
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return make_pdf(
        ["We trained a neural transformer with a custom tokenizer.", "BERT and GPT baselines."],
        title="Language Models",
    )


@pytest.fixture
def sample_docx_bytes() -> bytes:
    return make_docx(["Shipping on AWS", "", "The service runs on EC2 and Lambda and stores files in S3."])


# ---- In-memory collaborators for orchestrator tests
class FakeStorage:
    def __init__(self):
        self.blobs = {}
        self.calls = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, data, name, original_filename=None):
        self.calls.append(("upload", name))
        if self.fail_upload:
            raise StorageFailure("upload refused")
        self.blobs[name] = data
        return f"mem://{name}"

    def delete(self, name):
        self.calls.append(("delete", name))
        if self.fail_delete:
            raise StorageFailure("delete refused")
        self.blobs.pop(name, None)


class FakeExtractor:
    def __init__(self, title="Fake Title", text="plain text"):
        self.title = title
        self.text = text
        self.fail = False
        self.calls = 0

    def extract_title(self, filename, data):
        self.calls += 1
        if self.fail:
            raise ExtractionFailure("unreadable")
        return self.title

    def extract_full_text(self, filename, data):
        self.calls += 1
        if self.fail:
            raise ExtractionFailure("unreadable")
        return self.text


class FakeRepository:
    def __init__(self):
        self.rows = {}
        self.calls = []
        self.fail_insert = False
        self.fail_replace = False

    def insert(self, fields):
        self.calls.append("insert")
        if self.fail_insert:
            raise PersistenceFailure("insert failed")
        rec = SimpleNamespace(id=str(uuid.uuid4()), **fields)
        self.rows[rec.id] = rec
        return rec

    def find_all_by_user(self, user_id):
        return sorted(
            (r for r in self.rows.values() if r.user_id == user_id),
            key=lambda r: r.uploaded_at,
            reverse=True,
        )

    def find_by_text_and_user(self, query, user_id):
        return [r for r in self.find_all_by_user(user_id) if query.lower() in r.content.lower()]

    def find_by_id(self, doc_id):
        return self.rows.get(doc_id)

    def replace_by_id(self, doc_id, fields):
        self.calls.append("replace")
        if self.fail_replace:
            raise PersistenceFailure("replace failed")
        rec = self.rows.get(doc_id)
        if rec is None:
            return None
        for key, value in fields.items():
            setattr(rec, key, value)
        return rec

    def delete_by_id(self, doc_id):
        self.calls.append("delete")
        return self.rows.pop(doc_id, None) is not None


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def fake_extractor():
    return FakeExtractor()


@pytest.fixture
def fake_repo():
    return FakeRepository()


# ---- Database session for repository tests
@pytest.fixture
def db_session():
    from docanalytics.auth.db import Base, SessionLocal, engine
    from docanalytics.auth import models as _auth_models  # noqa: F401
    from docanalytics.docs import models as _doc_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def assert_iso_timestamp():
    def _assert_iso(value: str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        now = datetime.now(timezone.utc)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        assert abs((now - dt).total_seconds()) < 60 * 60 * 24
    return _assert_iso


@pytest.fixture
def pdf_factory():
    return make_pdf


@pytest.fixture
def docx_factory():
    return make_docx


# ---- API client and signed-up users
@pytest.fixture(scope="session")
def client():
    from fastapi.testclient import TestClient
    from api.main import app

    with TestClient(app) as c:
        yield c


def _signup(client):
    email = f"user-{uuid.uuid4().hex[:10]}@example.com"
    r = client.post("/auth/signup", json={"email": email, "password": "pw-123456"})
    assert r.status_code == 200, r.text
    body = r.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user_id"]


@pytest.fixture
def user_headers(client):
    """(headers, user_id) for a freshly registered user."""
    return _signup(client)


@pytest.fixture
def other_headers(client):
    return _signup(client)
