import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..dependencies import get_candidate_repository, get_current_user
from ..models import CandidateDetail, DeleteCandidateResponse
from ..services.candidate_repository import CandidateRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/candidates", response_model=List[Dict[str, Any]])
async def list_candidates(
    user=Depends(get_current_user),
    repository: CandidateRepository = Depends(get_candidate_repository),
):
    """Most recently created candidates first."""
    return repository.list_candidates()


@router.get("/candidates/{candidate_id}", response_model=CandidateDetail)
async def get_candidate(
    candidate_id: str,
    user=Depends(get_current_user),
    repository: CandidateRepository = Depends(get_candidate_repository),
):
    return repository.get_candidate_detail(candidate_id)


@router.delete("/candidates/{candidate_id}", response_model=DeleteCandidateResponse)
async def delete_candidate(
    candidate_id: str,
    user=Depends(get_current_user),
    repository: CandidateRepository = Depends(get_candidate_repository),
):
    repository.delete_candidate(candidate_id)
    return DeleteCandidateResponse(success=True, candidateId=candidate_id)
