import logging
from typing import Any, Dict, Optional

from ..errors import InputError
from .gemini_service import StructuredDataRequester
from .persistence_mapper import PersistenceMapper

logger = logging.getLogger(__name__)


class ResumeProcessor:
    """Turns a resume's raw text into a saved candidate.

    This is the server-side half of an upload: it needs the Gemini key and the
    service-role database key, so browsers reach it through ``/process-resume``
    and the upload orchestrator calls it directly.
    """

    def __init__(self, requester: StructuredDataRequester, mapper: PersistenceMapper):
        self.requester = requester
        self.mapper = mapper

    async def process(
        self, resume_id: Optional[str], raw_text: Optional[str], user_id: str
    ) -> Dict[str, Any]:
        if not resume_id or not raw_text:
            raise InputError("Missing resumeId or rawText")

        record = await self.requester.request(raw_text)
        candidate = self.mapper.persist(record, creator_id=user_id, resume_id=resume_id)
        return {
            "success": True,
            "candidate": candidate,
            "resumeData": record.model_dump(by_alias=True),
        }
