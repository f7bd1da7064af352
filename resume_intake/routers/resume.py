import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from ..dependencies import (
    get_candidate_repository,
    get_current_user,
    get_resume_processor,
    get_upload_orchestrator,
)
from ..errors import InputError, ResumeIntakeError
from ..models import ProcessResumeRequest, ProcessResumeResponse, UploadState, UploadStatus
from ..services.candidate_repository import CandidateRepository
from ..services.resume_processor import ResumeProcessor
from ..services.upload_orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/resumes/upload", response_model=UploadStatus)
async def upload_resume_endpoint(
    file: UploadFile = File(...),
    user=Depends(get_current_user),
    orchestrator: UploadOrchestrator = Depends(get_upload_orchestrator),
):
    """
    Upload a resume PDF, extract its text and save the parsed candidate.
    """
    pdf_bytes = await file.read()
    status = await orchestrator.upload(
        pdf_bytes,
        filename=file.filename or "resume.pdf",
        user_id=user.id,
        content_type=file.content_type,
    )
    if status.status == UploadState.ERROR:
        return JSONResponse(
            status_code=orchestrator.error.status_code,
            content=status.model_dump(mode="json"),
        )
    return status


@router.post("/process-resume", response_model=ProcessResumeResponse)
async def process_resume_endpoint(
    request_data: Optional[ProcessResumeRequest] = None,
    user=Depends(get_current_user),
    processor: ResumeProcessor = Depends(get_resume_processor),
):
    """
    Parse raw resume text with Gemini and save it as a new candidate.

    Any failure after the request is accepted is reported as a 500.
    """
    request_data = request_data or ProcessResumeRequest()
    try:
        return await processor.process(request_data.resumeId, request_data.rawText, user.id)
    except InputError:
        raise
    except ResumeIntakeError as e:
        logger.error(f"Error processing resume {request_data.resumeId}: {e.message}")
        raise ResumeIntakeError(e.message, status_code=500) from e


@router.get("/resumes/{resume_id}")
async def get_resume_endpoint(
    resume_id: str,
    user=Depends(get_current_user),
    repository: CandidateRepository = Depends(get_candidate_repository),
):
    return repository.get_resume(resume_id)
