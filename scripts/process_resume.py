"""Process a local resume PDF end to end, as the upload endpoint would.

Usage: python scripts/process_resume.py path/to/resume.pdf <user access token>
"""
import asyncio
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from resume_intake.config import settings
from resume_intake.dependencies import get_gemini_client, get_supabase_client
from resume_intake.errors import AuthError
from resume_intake.services.candidate_repository import CandidateRepository
from resume_intake.services.gemini_service import StructuredDataRequester
from resume_intake.services.persistence_mapper import PersistenceMapper
from resume_intake.services.resume_processor import ResumeProcessor
from resume_intake.services.storage import ResumeStorage
from resume_intake.services.upload_orchestrator import UploadOrchestrator


def build_orchestrator() -> UploadOrchestrator:
    supabase = get_supabase_client()
    repository = CandidateRepository(supabase)
    requester = StructuredDataRequester(get_gemini_client(), settings.gemini_model)
    return UploadOrchestrator(
        ResumeStorage(supabase, settings.storage_bucket, settings.storage_collision_attempts),
        repository,
        ResumeProcessor(requester, PersistenceMapper(repository)),
        reset_after=0,
    )


def main(pdf_path: str, token: str) -> int:
    user = get_supabase_client().auth.get_user(token).user
    if user is None:
        raise AuthError("Unauthorized")

    with open(pdf_path, "rb") as fh:
        data = fh.read()

    orchestrator = build_orchestrator()
    orchestrator.subscribe(lambda status: print(f"[{status.status.value}] {status.message}"))
    status = asyncio.run(orchestrator.upload(data, os.path.basename(pdf_path), user.id))
    if status.candidateId:
        print(f"✅ Candidate {status.candidateId}")
        return 0
    print(f"❌ {status.message}")
    return 1


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    sys.exit(main(sys.argv[1], sys.argv[2]))
