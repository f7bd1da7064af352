"""
Resume Storage Tests
"""
from types import SimpleNamespace

import pytest

from resume_intake.errors import PersistenceError
from resume_intake.services.storage import (
    ResumeStorage,
    build_storage_path,
    is_duplicate_object_error,
)


class TestPaths:
    """Test generated object paths"""

    def test_path_scoped_by_user_and_timestamp(self):
        path = build_storage_path("user-1", "jane.pdf")

        directory, name = path.rsplit("/", 1)
        assert directory == "resumes/user-1"
        timestamp, filename = name.split("-", 1)
        assert timestamp.isdigit()
        assert filename == "jane.pdf"

    def test_suffix_goes_before_filename(self):
        assert build_storage_path("user-1", "jane.pdf", "abcd1234").endswith("-abcd1234-jane.pdf")


class TestUpload:
    """Test collision detection"""

    def test_upload_stores_bytes(self, supabase):
        storage = ResumeStorage(supabase, "resumes")

        path = storage.upload("user-1", "jane.pdf", b"%PDF-1.7")

        assert supabase.storage.objects[("resumes", path)] == b"%PDF-1.7"

    def test_collision_gets_a_distinct_path(self, supabase, monkeypatch):
        monkeypatch.setattr(
            "resume_intake.services.storage.time", SimpleNamespace(time=lambda: 1767225600.0)
        )
        storage = ResumeStorage(supabase, "resumes", suffix_factory=lambda: "cafe0001")
        first = storage.upload("user-1", "jane.pdf", b"one")

        second = storage.upload("user-1", "jane.pdf", b"two")

        assert first == "resumes/user-1/1767225600000-jane.pdf"
        assert second == "resumes/user-1/1767225600000-cafe0001-jane.pdf"
        assert supabase.storage.objects[("resumes", first)] == b"one"
        assert supabase.storage.objects[("resumes", second)] == b"two"

    def test_gives_up_after_max_attempts(self, supabase):
        storage = ResumeStorage(supabase, "resumes", max_attempts=2)
        supabase.storage.error = Exception({"statusCode": "409", "error": "Duplicate"})

        with pytest.raises(PersistenceError):
            storage.upload("user-1", "jane.pdf", b"one")

        assert len(supabase.storage.attempts) == 2

    def test_other_errors_fail_immediately(self, supabase):
        storage = ResumeStorage(supabase, "resumes")
        supabase.storage.error = Exception({"statusCode": "403", "error": "Unauthorized"})

        with pytest.raises(PersistenceError):
            storage.upload("user-1", "jane.pdf", b"one")

        assert len(supabase.storage.attempts) == 1


def test_is_duplicate_object_error():
    assert is_duplicate_object_error(Exception({"statusCode": 409, "message": "x"}))
    assert is_duplicate_object_error(Exception("The resource already exists"))
    assert not is_duplicate_object_error(Exception("Bucket not found"))


def test_status_code_is_compared_exactly():
    assert is_duplicate_object_error(Exception({"statusCode": "409", "error": "Conflict"}))
    assert not is_duplicate_object_error(
        Exception({"statusCode": 500, "error": "Internal", "message": "request 40912 timed out"})
    )
    assert not is_duplicate_object_error(Exception("upload of resumes/u/1767225640912-jane.pdf failed"))
