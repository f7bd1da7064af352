"""
Test Configuration and Fixtures
"""
import copy
import json
import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import fitz
import pytest

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-service-role-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

from fastapi.testclient import TestClient

from resume_intake.dependencies import get_gemini_client, get_supabase_client
from resume_intake.main import app as fastapi_app
from resume_intake.services.candidate_repository import CandidateRepository
from resume_intake.services.gemini_service import StructuredDataRequester
from resume_intake.services.persistence_mapper import PersistenceMapper
from resume_intake.services.resume_processor import ResumeProcessor
from resume_intake.services.storage import ResumeStorage
from resume_intake.services.upload_orchestrator import UploadOrchestrator

TEST_TOKEN = "token-recruiter-1"
TEST_USER_ID = "user-recruiter-1"

JANE_DOE_REPLY = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane@x.com",
    "phone": "+1 555 0100",
    "location": "Boston, MA",
    "linkedinUrl": "https://linkedin.com/in/janedoe",
    "summary": "Backend engineer.",
    "totalExperienceYears": 6,
    "skills": [
        {"skillName": "Python", "skillCategory": "technical", "proficiencyLevel": "expert"},
        {"skillName": "Mentoring", "skillCategory": "soft", "proficiencyLevel": "intermediate"},
    ],
    "workExperience": [
        {
            "companyName": "Acme",
            "jobTitle": "Senior Engineer",
            "location": "Boston, MA",
            "startDate": "2021-03",
            "endDate": None,
            "isCurrent": True,
            "description": "Owns the billing service.",
        },
        {
            "companyName": "Initech",
            "jobTitle": "Engineer",
            "location": "Remote",
            "startDate": "2018-01",
            "endDate": "2021-02",
            "isCurrent": False,
            "description": "Built reporting pipelines.",
        },
    ],
    "education": [
        {
            "institutionName": "State University",
            "degree": "BSc",
            "fieldOfStudy": "Computer Science",
            "startDate": "2014",
            "endDate": "2018",
            "grade": "3.8",
        }
    ],
}


# --- In-memory Supabase ---


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.ordering = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows
        return self

    def update(self, values):
        self.op = "update"
        self.payload = values
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.fail_on:
            raise Exception(f"simulated {self.op} failure on {self.table}")

        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for row in new_rows:
                row = dict(row)
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", self.db.tick())
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return SimpleNamespace(data=inserted)

        matched = [row for row in rows if self._matches(row)]
        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(matched))
        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda row: str(row.get(column) or ""), reverse=desc)
        return SimpleNamespace(data=copy.deepcopy(matched))


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.attempts.append(path)
        if self.storage.error is not None:
            raise self.storage.error
        key = (self.name, path)
        if key in self.storage.objects:
            raise Exception(
                {"statusCode": 409, "error": "Duplicate", "message": "The resource already exists"}
            )
        self.storage.objects[key] = file
        return SimpleNamespace(path=path)


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.attempts = []
        self.error = None

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAuth:
    def __init__(self):
        self.users = {}

    def get_user(self, token):
        if token not in self.users:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.users[token])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_on = set()
        self.storage = FakeStorage()
        self.auth = FakeAuth()
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, name):
        return self.tables.get(name, [])


# --- Fake Gemini ---


class FakeModels:
    def __init__(self, gemini):
        self.gemini = gemini

    def generate_content(self, model, contents, config=None):
        self.gemini.calls.append({"model": model, "contents": contents, "config": config})
        if self.gemini.error is not None:
            raise self.gemini.error
        return SimpleNamespace(text=self.gemini.reply)


class FakeGemini:
    def __init__(self, reply=None):
        self.reply = json.dumps(reply if reply is not None else JANE_DOE_REPLY)
        self.error = None
        self.calls = []
        self.models = FakeModels(self)


# --- Fixtures ---


@pytest.fixture
def supabase():
    client = FakeSupabase()
    client.auth.users[TEST_TOKEN] = SimpleNamespace(id=TEST_USER_ID, email="recruiter@example.com")
    return client


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def repository(supabase):
    return CandidateRepository(supabase)


@pytest.fixture
def requester(gemini):
    return StructuredDataRequester(gemini, "gemini-test")


@pytest.fixture
def processor(requester, repository):
    return ResumeProcessor(requester, PersistenceMapper(repository))


@pytest.fixture
def orchestrator(supabase, repository, processor):
    return UploadOrchestrator(
        ResumeStorage(supabase, "resumes"), repository, processor, reset_after=0
    )


@pytest.fixture
def seeded_resume(supabase):
    """A resume row in the state the orchestrator leaves it before parsing."""
    row = {
        "id": "resume-1",
        "file_name": "jane.pdf",
        "file_path": f"resumes/{TEST_USER_ID}/1-jane.pdf",
        "file_size": 1024,
        "processing_status": "processing",
        "raw_text": "Jane Doe, jane@x.com",
        "uploaded_by": TEST_USER_ID,
        "candidate_id": None,
    }
    supabase.tables.setdefault("resumes", []).append(row)
    return row


@pytest.fixture
def make_pdf():
    def _make(pages=("Jane Doe, jane@x.com",)):
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            page.insert_text((72, 72), text)
        data = doc.tobytes()
        doc.close()
        return data

    return _make


@pytest.fixture
def client(supabase, gemini):
    """Create test client wired to the in-memory Supabase and Gemini fakes"""
    fastapi_app.dependency_overrides[get_supabase_client] = lambda: supabase
    fastapi_app.dependency_overrides[get_gemini_client] = lambda: gemini
    with TestClient(fastapi_app) as test_client:
        yield test_client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
