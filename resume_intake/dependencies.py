import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from google import genai
from supabase import create_client, Client

from .config import settings
from .errors import AuthError, ResumeIntakeError
from .services.candidate_repository import CandidateRepository
from .services.gemini_service import StructuredDataRequester
from .services.persistence_mapper import PersistenceMapper
from .services.resume_processor import ResumeProcessor
from .services.storage import ResumeStorage
from .services.upload_orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    if not settings.supabase_url or not settings.supabase_key:
        raise ResumeIntakeError("Supabase URL or Key not configured in .env file")
    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        raise ResumeIntakeError(f"Failed to initialize Supabase client: {str(e)}") from e


@lru_cache()
def get_gemini_client() -> Optional[genai.Client]:
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set; resume parsing is unavailable")
        return None
    return genai.Client(api_key=settings.gemini_api_key)


def get_current_user(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    client: Client = Depends(get_supabase_client),
):
    """Resolve the bearer token to a Supabase Auth user or fail with 401."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise AuthError("Unauthorized")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthError("Unauthorized")
    try:
        response = client.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthError("Unauthorized") from e
    user = getattr(response, "user", None) if response else None
    if user is None:
        raise AuthError("Unauthorized")
    return user


def get_candidate_repository(
    client: Client = Depends(get_supabase_client),
) -> CandidateRepository:
    return CandidateRepository(client)


def get_resume_processor(
    repository: CandidateRepository = Depends(get_candidate_repository),
    gemini_client=Depends(get_gemini_client),
) -> ResumeProcessor:
    requester = StructuredDataRequester(gemini_client, settings.gemini_model)
    return ResumeProcessor(requester, PersistenceMapper(repository))


def get_resume_storage(client: Client = Depends(get_supabase_client)) -> ResumeStorage:
    return ResumeStorage(
        client,
        settings.storage_bucket,
        max_attempts=settings.storage_collision_attempts,
    )


def get_upload_orchestrator(
    storage: ResumeStorage = Depends(get_resume_storage),
    repository: CandidateRepository = Depends(get_candidate_repository),
    processor: ResumeProcessor = Depends(get_resume_processor),
) -> UploadOrchestrator:
    return UploadOrchestrator(
        storage, repository, processor, reset_after=settings.status_reset_seconds
    )
