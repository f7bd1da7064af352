import logging
import time
import uuid
from typing import Callable

from supabase import Client

from ..errors import PersistenceError

logger = logging.getLogger(__name__)

_DUPLICATE_STATUS = "409"
_DUPLICATE_MARKERS = ("duplicate", "already exists")


def is_duplicate_object_error(error: Exception) -> bool:
    details = error.args[0] if error.args else error
    if isinstance(details, dict):
        status = details.get("statusCode", details.get("status"))
        text = f"{details.get('error', '')} {details.get('message', '')}"
    else:
        status = getattr(error, "status", None) or getattr(error, "status_code", None)
        text = str(getattr(error, "message", None) or details)
    if status is not None and str(status).strip() == _DUPLICATE_STATUS:
        return True
    return any(marker in text.lower() for marker in _DUPLICATE_MARKERS)


def build_storage_path(user_id: str, filename: str, suffix: str = "") -> str:
    timestamp = int(time.time() * 1000)
    prefix = f"{timestamp}-{suffix}-" if suffix else f"{timestamp}-"
    return f"resumes/{user_id}/{prefix}{filename}"


class ResumeStorage:
    """Stores raw resume files in a Supabase Storage bucket.

    Objects are never overwritten. Two uploads that land on the same generated
    path are told apart by a random suffix; any other storage failure is
    reported straight away.
    """

    def __init__(
        self,
        client: Client,
        bucket: str,
        max_attempts: int = 3,
        suffix_factory: Callable[[], str] = lambda: uuid.uuid4().hex[:8],
    ):
        self.client = client
        self.bucket = bucket
        self.max_attempts = max(1, max_attempts)
        self.suffix_factory = suffix_factory

    def upload(self, user_id: str, filename: str, data: bytes, content_type: str = "application/pdf") -> str:
        path = build_storage_path(user_id, filename)
        for attempt in range(1, self.max_attempts + 1):
            try:
                self.client.storage.from_(self.bucket).upload(
                    path=path,
                    file=data,
                    file_options={"content-type": content_type, "upsert": "false"},
                )
                return path
            except Exception as e:
                if not is_duplicate_object_error(e):
                    logger.error(f"Storage upload to {path} failed: {e}")
                    raise PersistenceError(f"Failed to upload resume: {e}") from e
                logger.warning(f"Storage path collision on {path} (attempt {attempt})")
                path = build_storage_path(user_id, filename, self.suffix_factory())

        raise PersistenceError(
            f"Failed to upload resume: storage path still taken after {self.max_attempts} attempts"
        )
