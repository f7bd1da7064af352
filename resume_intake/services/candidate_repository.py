import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

from ..errors import NotFoundError, PersistenceError
from ..models import ProcessingStatus

logger = logging.getLogger(__name__)

CANDIDATES_TABLE = "candidates"
RESUMES_TABLE = "resumes"
SKILLS_TABLE = "candidate_skills"
WORK_EXPERIENCE_TABLE = "work_experience"
EDUCATION_TABLE = "education"

CHILD_TABLES = (SKILLS_TABLE, WORK_EXPERIENCE_TABLE, EDUCATION_TABLE)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CandidateRepository:
    """Row-level access to the five resume tables through the Supabase client."""

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, query, action: str) -> List[Dict[str, Any]]:
        try:
            result = query.execute()
        except Exception as e:
            logger.exception(f"Supabase error while trying to {action}: {e}")
            raise PersistenceError(f"Failed to {action}: {e}") from e
        return result.data or []

    # --- resumes ---

    def create_resume(
        self, file_name: str, file_path: str, file_size: int, uploaded_by: str
    ) -> Dict[str, Any]:
        rows = self._execute(
            self.client.table(RESUMES_TABLE).insert(
                {
                    "file_name": file_name,
                    "file_path": file_path,
                    "file_size": file_size,
                    "processing_status": ProcessingStatus.PROCESSING.value,
                    "uploaded_by": uploaded_by,
                    "uploaded_at": utc_now(),
                }
            ),
            "create resume record",
        )
        if not rows:
            raise PersistenceError("Failed to create resume record: no row returned")
        return rows[0]

    def update_resume_raw_text(self, resume_id: str, raw_text: str) -> None:
        self._execute(
            self.client.table(RESUMES_TABLE)
            .update({"raw_text": raw_text})
            .eq("id", resume_id),
            "store extracted resume text",
        )

    def mark_resume_completed(self, resume_id: str, candidate_id: str) -> None:
        rows = self._execute(
            self.client.table(RESUMES_TABLE)
            .update(
                {
                    "candidate_id": candidate_id,
                    "processing_status": ProcessingStatus.COMPLETED.value,
                    "processed_at": utc_now(),
                }
            )
            .eq("id", resume_id),
            "mark resume as completed",
        )
        if not rows:
            raise PersistenceError(f"Failed to mark resume as completed: resume {resume_id} not found")

    def get_resume(self, resume_id: str) -> Dict[str, Any]:
        rows = self._execute(
            self.client.table(RESUMES_TABLE).select("*").eq("id", resume_id),
            "load resume",
        )
        if not rows:
            raise NotFoundError("Resume not found")
        return rows[0]

    # --- candidates and child rows ---

    def insert_candidate(self, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute(
            self.client.table(CANDIDATES_TABLE).insert(row), "create candidate"
        )
        if not rows:
            raise PersistenceError("Failed to create candidate: no row returned")
        return rows[0]

    def insert_children(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return []
        return self._execute(
            self.client.table(table).insert(rows), f"insert {table} rows"
        )

    def delete_rows(self, table: str, ids: List[Any]) -> None:
        if not ids:
            return
        self._execute(
            self.client.table(table).delete().in_("id", ids), f"delete {table} rows"
        )

    def list_candidates(self) -> List[Dict[str, Any]]:
        return self._execute(
            self.client.table(CANDIDATES_TABLE)
            .select("*")
            .order("created_at", desc=True),
            "load candidates",
        )

    def get_candidate(self, candidate_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(
            self.client.table(CANDIDATES_TABLE).select("*").eq("id", candidate_id),
            "load candidate",
        )
        return rows[0] if rows else None

    def get_candidate_detail(self, candidate_id: str) -> Dict[str, Any]:
        candidate = self.get_candidate(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate not found")

        skills = self._execute(
            self.client.table(SKILLS_TABLE).select("*").eq("candidate_id", candidate_id),
            "load candidate skills",
        )
        work_experience = self._execute(
            self.client.table(WORK_EXPERIENCE_TABLE)
            .select("*")
            .eq("candidate_id", candidate_id)
            .order("start_date", desc=True),
            "load work experience",
        )
        education = self._execute(
            self.client.table(EDUCATION_TABLE)
            .select("*")
            .eq("candidate_id", candidate_id)
            .order("start_date", desc=True),
            "load education",
        )
        return {
            "candidate": candidate,
            "skills": skills,
            "workExperience": work_experience,
            "education": education,
        }

    def delete_candidate(self, candidate_id: str) -> None:
        """Delete a candidate together with its child rows.

        Child rows are removed explicitly and resumes are detached rather than
        relying on a cascade rule in the schema.
        """
        if self.get_candidate(candidate_id) is None:
            raise NotFoundError("Candidate not found")

        for table in CHILD_TABLES:
            self._execute(
                self.client.table(table).delete().eq("candidate_id", candidate_id),
                f"delete {table} rows",
            )
        self._execute(
            self.client.table(RESUMES_TABLE)
            .update({"candidate_id": None})
            .eq("candidate_id", candidate_id),
            "detach resumes",
        )
        rows = self._execute(
            self.client.table(CANDIDATES_TABLE).delete().eq("id", candidate_id),
            "delete candidate",
        )
        if not rows:
            raise NotFoundError("Candidate not found")
        logger.info(f"Deleted candidate {candidate_id}")
