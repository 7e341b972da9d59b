"""Declared payload schemas for every owned resource and AI request body."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _Schema(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------

class CommunicationEntry(_Schema):
    type: Literal["email", "phone", "meeting", "linkedin", "other"]
    summary: str = Field(min_length=1)
    sentiment: Literal["positive", "neutral", "negative"] = "neutral"
    followup_needed: bool = False
    notes: Optional[str] = None
    date: Optional[str] = None


class ContactPayload(_Schema):
    name: str = Field(min_length=1)
    title: Optional[str] = None
    company: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None
    relationship_score: int = Field(default=50, ge=0, le=100)
    last_contact_date: Optional[str] = None
    next_followup_date: Optional[str] = None
    communication_history: List[CommunicationEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Resumes
# ---------------------------------------------------------------------------

class PersonalInfo(_Schema):
    fullName: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    location: str = Field(min_length=1)
    linkedin: Optional[str] = None
    website: Optional[str] = None


class ExperienceEntry(_Schema):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    duration: str = Field(min_length=1)
    description: str = Field(min_length=1)


class EducationEntry(_Schema):
    degree: str = Field(min_length=1)
    school: str = Field(min_length=1)
    year: str = Field(min_length=1)


class ProjectEntry(_Schema):
    name: str = Field(min_length=1)
    description: str = ""
    technologies: str = ""
    link: Optional[str] = None


class CertificationEntry(_Schema):
    name: str = Field(min_length=1)
    issuer: str = ""
    date: str = ""
    link: Optional[str] = None


class ResumeContent(_Schema):
    personalInfo: PersonalInfo
    experience: List[ExperienceEntry] = Field(min_length=1)
    education: List[EducationEntry] = Field(min_length=1)
    skills: List[str] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    certifications: List[CertificationEntry] = Field(default_factory=list)
    summary: Optional[str] = None
    template: Optional[str] = None


class ResumePayload(_Schema):
    title: str = Field(min_length=1)
    content: ResumeContent
    template: str = "professional"


# ---------------------------------------------------------------------------
# Cover letters and applications
# ---------------------------------------------------------------------------

class CoverLetterPayload(_Schema):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    job_title: Optional[str] = None
    company: Optional[str] = None


ApplicationStatus = Literal[
    "saved", "applied", "interviewing", "offered", "accepted", "rejected", "withdrawn"
]


class ApplicationPayload(_Schema):
    job_title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: Optional[str] = None
    status: ApplicationStatus = "applied"
    applied_date: Optional[str] = None
    contact_id: Optional[str] = None
    resume_id: Optional[str] = None
    cover_letter_id: Optional[str] = None
    notes: Optional[str] = None
    next_steps: Optional[str] = None
    communication_history: List[CommunicationEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Learning paths
# ---------------------------------------------------------------------------

class SkillInput(_Schema):
    name: str = Field(min_length=1)
    currentLevel: int = Field(default=1, ge=0, le=10)
    targetLevel: int = Field(default=5, ge=0, le=10)


class LearningPathRequest(_Schema):
    skills: List[SkillInput] = Field(min_length=1)


class LearningPathPayload(BaseModel):
    # skill gaps are assembled server-side, so nested shapes stay open
    model_config = ConfigDict(extra="forbid")

    title: str = "Custom Learning Path"
    description: Optional[str] = None
    skill_gaps: List[dict] = Field(default_factory=list)
    completed: bool = False


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: Literal["system", "user", "assistant"]
    content: str
    timestamp: Optional[str] = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    messages: List[ChatMessage]


# ---------------------------------------------------------------------------
# Sign-in
# ---------------------------------------------------------------------------

class CodeRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr


class VerifyRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    code: str = Field(min_length=1)
