import logging
from typing import Any, Dict, List, Tuple

from ..errors import PersistenceError, ResumeIntakeError
from ..models import StructuredResume
from .candidate_repository import (
    CANDIDATES_TABLE,
    EDUCATION_TABLE,
    SKILLS_TABLE,
    WORK_EXPERIENCE_TABLE,
    CandidateRepository,
)

logger = logging.getLogger(__name__)


def candidate_row(record: StructuredResume, creator_id: str) -> Dict[str, Any]:
    return {
        "email": record.email,
        "first_name": record.first_name,
        "last_name": record.last_name,
        "phone": record.phone,
        "location": record.location,
        "linkedin_url": record.linkedin_url,
        "summary": record.summary,
        "total_experience_years": record.total_experience_years,
        "created_by": creator_id,
    }


def skill_rows(record: StructuredResume, candidate_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "candidate_id": candidate_id,
            "skill_name": skill.skill_name,
            "skill_category": skill.skill_category,
            "proficiency_level": skill.proficiency_level,
        }
        for skill in record.skills
    ]


def work_experience_rows(record: StructuredResume, candidate_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "candidate_id": candidate_id,
            "company_name": exp.company_name,
            "job_title": exp.job_title,
            "location": exp.location,
            "start_date": exp.start_date,
            "end_date": None if exp.is_current else exp.end_date,
            "is_current": exp.is_current,
            "description": exp.description,
        }
        for exp in record.work_experience
    ]


def education_rows(record: StructuredResume, candidate_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "candidate_id": candidate_id,
            "institution_name": edu.institution_name,
            "degree": edu.degree,
            "field_of_study": edu.field_of_study,
            "start_date": edu.start_date,
            "end_date": edu.end_date,
            "grade": edu.grade,
        }
        for edu in record.education
    ]


class UnitOfWork:
    """Tracks inserted rows so a failed multi-table write can be undone.

    Used as a context manager: when the block raises, every recorded insert is
    deleted again in reverse order (children before their candidate) and the
    failure is re-raised as a single ``PersistenceError``.
    """

    def __init__(self, repository: CandidateRepository):
        self.repository = repository
        self._inserted: List[Tuple[str, List[Any]]] = []

    def record(self, table: str, rows: List[Dict[str, Any]]) -> None:
        ids = [row["id"] for row in rows if row.get("id") is not None]
        if ids:
            self._inserted.append((table, ids))

    def rollback(self) -> None:
        for table, ids in reversed(self._inserted):
            try:
                self.repository.delete_rows(table, ids)
            except PersistenceError as e:
                logger.error(f"Could not undo insert of {len(ids)} {table} row(s): {e.message}")
            else:
                logger.warning(f"Undid insert of {len(ids)} {table} row(s)")
        self._inserted = []

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self._inserted = []
            return False
        self.rollback()
        if isinstance(exc, PersistenceError):
            return False
        if isinstance(exc, ResumeIntakeError):
            raise PersistenceError(exc.message) from exc
        raise PersistenceError(f"Failed to save candidate: {exc}") from exc


class PersistenceMapper:
    """Writes a structured record as one candidate plus its child rows."""

    def __init__(self, repository: CandidateRepository):
        self.repository = repository

    def persist(
        self, record: StructuredResume, creator_id: str, resume_id: str
    ) -> Dict[str, Any]:
        with UnitOfWork(self.repository) as uow:
            candidate = self.repository.insert_candidate(candidate_row(record, creator_id))
            uow.record(CANDIDATES_TABLE, [candidate])
            candidate_id = candidate["id"]

            for table, rows in (
                (SKILLS_TABLE, skill_rows(record, candidate_id)),
                (WORK_EXPERIENCE_TABLE, work_experience_rows(record, candidate_id)),
                (EDUCATION_TABLE, education_rows(record, candidate_id)),
            ):
                if rows:
                    uow.record(table, self.repository.insert_children(table, rows))

            # resume is linked only once every child row is saved
            self.repository.mark_resume_completed(resume_id, candidate_id)

        logger.info(
            f"Saved candidate {candidate_id} from resume {resume_id} "
            f"({len(record.skills)} skills, {len(record.work_experience)} positions, "
            f"{len(record.education)} education entries)"
        )
        return candidate
