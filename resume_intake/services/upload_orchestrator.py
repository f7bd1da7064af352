import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from ..errors import InputError, ResumeIntakeError
from ..models import UploadState, UploadStatus
from ..parsers import extract_text_async
from .candidate_repository import CandidateRepository
from .resume_processor import ResumeProcessor
from .storage import ResumeStorage

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"

StatusListener = Callable[[UploadStatus], None]


def is_pdf_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    if content_type and content_type.lower() == PDF_CONTENT_TYPE:
        return True
    return bool(filename) and filename.lower().endswith(".pdf")


class UploadOrchestrator:
    """Runs one resume upload from raw bytes to a saved candidate.

    States move strictly forward: idle -> uploading -> processing -> success,
    or to error from uploading/processing. Listeners see every transition.
    Nothing is retried; the first failure ends the upload.
    """

    def __init__(
        self,
        storage: ResumeStorage,
        repository: CandidateRepository,
        processor: ResumeProcessor,
        extractor: Callable[[bytes], Awaitable[str]] = extract_text_async,
        reset_after: float = 3.0,
    ):
        self.storage = storage
        self.repository = repository
        self.processor = processor
        self.extractor = extractor
        self.reset_after = reset_after
        self.status = UploadStatus()
        self.error: Optional[ResumeIntakeError] = None
        self._listeners: List[StatusListener] = []

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _set_status(self, state: UploadState, message: str, **extra) -> None:
        self.status = UploadStatus(
            status=state,
            message=message,
            candidateId=extra.get("candidateId"),
            resumeId=extra.get("resumeId", self.status.resumeId),
        )
        logger.info(f"Upload {state.value}: {message}")
        for listener in self._listeners:
            listener(self.status.model_copy())

    def reset(self) -> None:
        self.error = None
        self._set_status(UploadState.IDLE, "", resumeId=None)

    def _schedule_reset(self) -> None:
        if self.reset_after <= 0:
            return
        asyncio.get_running_loop().call_later(self.reset_after, self._reset_if_finished)

    def _reset_if_finished(self) -> None:
        if self.status.status == UploadState.SUCCESS:
            self.reset()

    async def upload(
        self,
        data: bytes,
        filename: str,
        user_id: str,
        content_type: Optional[str] = None,
    ) -> UploadStatus:
        self.error = None
        try:
            if not is_pdf_upload(filename, content_type):
                raise InputError("Please upload a PDF file")
            if not data:
                raise InputError("The uploaded file is empty")

            self._set_status(UploadState.UPLOADING, "Uploading resume...")
            file_path = self.storage.upload(user_id, filename, data)
            resume = self.repository.create_resume(
                file_name=filename,
                file_path=file_path,
                file_size=len(data),
                uploaded_by=user_id,
            )
            resume_id = resume["id"]

            self._set_status(
                UploadState.PROCESSING, "Extracting text from PDF...", resumeId=resume_id
            )
            raw_text = await self.extractor(data)
            self.repository.update_resume_raw_text(resume_id, raw_text)

            self._set_status(UploadState.PROCESSING, "Parsing resume data...")
            result = await self.processor.process(resume_id, raw_text, user_id)
        except ResumeIntakeError as e:
            self.error = e
            logger.error(f"Error processing resume {filename}: {e.message}")
            self._set_status(UploadState.ERROR, e.message or "Failed to process resume")
            return self.status.model_copy()

        self._set_status(
            UploadState.SUCCESS,
            "Resume processed successfully!",
            candidateId=result["candidate"]["id"],
        )
        finished = self.status.model_copy()
        self._schedule_reset()
        return finished
