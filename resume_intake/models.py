from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .utils import (
    as_bool,
    as_non_negative_int,
    as_text,
    deep_merge,
    to_year,
    to_year_month,
)


class ProcessingStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class UploadState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


# --- Structured record returned by the language model (camelCase on the wire) ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SkillEntry(_CamelModel):
    skill_name: str = Field(alias="skillName", default="")
    skill_category: str = Field(alias="skillCategory", default="")  # technical | soft
    proficiency_level: str = Field(alias="proficiencyLevel", default="")


class WorkExperienceEntry(_CamelModel):
    company_name: str = Field(alias="companyName", default="")
    job_title: str = Field(alias="jobTitle", default="")
    location: str = ""
    start_date: Optional[str] = Field(alias="startDate", default=None)  # YYYY-MM
    end_date: Optional[str] = Field(alias="endDate", default=None)  # YYYY-MM
    is_current: bool = Field(alias="isCurrent", default=False)
    description: str = ""


class EducationEntry(_CamelModel):
    institution_name: str = Field(alias="institutionName", default="")
    degree: str = ""
    field_of_study: str = Field(alias="fieldOfStudy", default="")
    start_date: Optional[str] = Field(alias="startDate", default=None)  # YYYY
    end_date: Optional[str] = Field(alias="endDate", default=None)  # YYYY
    grade: str = ""


class StructuredResume(_CamelModel):
    first_name: str = Field(alias="firstName", default="")
    last_name: str = Field(alias="lastName", default="")
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin_url: str = Field(alias="linkedinUrl", default="")
    summary: str = ""
    total_experience_years: int = Field(alias="totalExperienceYears", default=0, ge=0)
    skills: List[SkillEntry] = Field(default_factory=list)
    work_experience: List[WorkExperienceEntry] = Field(
        alias="workExperience", default_factory=list
    )
    education: List[EducationEntry] = Field(default_factory=list)


STRUCTURED_RESUME_DEFAULTS: Dict[str, Any] = {
    "firstName": "",
    "lastName": "",
    "email": "",
    "phone": "",
    "location": "",
    "linkedinUrl": "",
    "summary": "",
    "totalExperienceYears": 0,
    "skills": [],
    "workExperience": [],
    "education": [],
}


def _entries(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _coerce_skill(raw: Dict[str, Any]) -> SkillEntry:
    return SkillEntry(
        skill_name=as_text(raw.get("skillName")),
        skill_category=as_text(raw.get("skillCategory")).lower(),
        proficiency_level=as_text(raw.get("proficiencyLevel")).lower(),
    )


def _coerce_work(raw: Dict[str, Any]) -> WorkExperienceEntry:
    is_current = as_bool(raw.get("isCurrent"))
    return WorkExperienceEntry(
        company_name=as_text(raw.get("companyName")),
        job_title=as_text(raw.get("jobTitle")),
        location=as_text(raw.get("location")),
        start_date=to_year_month(raw.get("startDate")),
        end_date=None if is_current else to_year_month(raw.get("endDate")),
        is_current=is_current,
        description=as_text(raw.get("description")),
    )


def _coerce_education(raw: Dict[str, Any]) -> EducationEntry:
    return EducationEntry(
        institution_name=as_text(raw.get("institutionName")),
        degree=as_text(raw.get("degree")),
        field_of_study=as_text(raw.get("fieldOfStudy")),
        start_date=to_year(raw.get("startDate")),
        end_date=to_year(raw.get("endDate")),
        grade=as_text(raw.get("grade")),
    )


def coerce_structured_resume(payload: Dict[str, Any]) -> StructuredResume:
    """Turn untrusted model JSON into a fully populated ``StructuredResume``.

    The payload is merged over ``STRUCTURED_RESUME_DEFAULTS`` and every field is
    coerced to its declared type, so a missing or malformed value yields the
    type's zero value instead of an error.
    """
    merged = deep_merge(STRUCTURED_RESUME_DEFAULTS, payload)
    return StructuredResume(
        first_name=as_text(merged.get("firstName")),
        last_name=as_text(merged.get("lastName")),
        email=as_text(merged.get("email")),
        phone=as_text(merged.get("phone")),
        location=as_text(merged.get("location")),
        linkedin_url=as_text(merged.get("linkedinUrl")),
        summary=as_text(merged.get("summary")),
        total_experience_years=as_non_negative_int(merged.get("totalExperienceYears")),
        skills=[_coerce_skill(s) for s in _entries(merged.get("skills"))],
        work_experience=[_coerce_work(w) for w in _entries(merged.get("workExperience"))],
        education=[_coerce_education(e) for e in _entries(merged.get("education"))],
    )


# --- API request / response models ---


class ProcessResumeRequest(BaseModel):
    resumeId: Optional[str] = None
    rawText: Optional[str] = None


class ProcessResumeResponse(BaseModel):
    success: bool
    candidate: Dict[str, Any]
    resumeData: Dict[str, Any]


class UploadStatus(BaseModel):
    status: UploadState = UploadState.IDLE
    message: str = ""
    candidateId: Optional[str] = None
    resumeId: Optional[str] = None


class CandidateDetail(BaseModel):
    candidate: Dict[str, Any]
    skills: List[Dict[str, Any]] = []
    workExperience: List[Dict[str, Any]] = []
    education: List[Dict[str, Any]] = []


class DeleteCandidateResponse(BaseModel):
    success: bool
    candidateId: str
