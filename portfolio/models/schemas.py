"""Pydantic schemas for the portfolio content served by the upstream API.

The upstream JSON is camelCase; models accept either camelCase or snake_case.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class SkillCategory(str, Enum):
    FRONTEND = "FRONTEND"
    BACKEND = "BACKEND"
    DATABASE = "DATABASE"
    DEVOPS = "DEVOPS"
    DESIGN = "DESIGN"
    FRAMEWORKS = "FRAMEWORKS"
    LANGUAGES = "LANGUAGES"
    MOBILE = "MOBILE"
    TOOLS = "TOOLS"
    OTHER = "OTHER"


class SkillLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class TimelinePostType(str, Enum):
    EDUCATION = "EDUCATION"
    WORK = "WORK"
    AWARD = "AWARD"
    PUBLICATION = "PUBLICATION"
    PARTICIPATION = "PARTICIPATION"
    VOLUNTEERING = "VOLUNTEERING"


class CertificationStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    PENDING = "PENDING"
    REVOKED = "REVOKED"


class Profile(BaseModel):
    id: str
    name: str
    email: list[str] = Field(default_factory=list)
    location: Optional[str] = None
    bio: Optional[str] = None
    phone: list[str] = Field(default_factory=list)
    professions: list[str] = Field(default_factory=list)
    about: Optional[str] = None
    avatar: Optional[str] = None
    website: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    cv: Optional[str] = Field(None, alias="CV")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _CAMEL


class Skill(BaseModel):
    id: str
    name: str
    category: SkillCategory
    level: SkillLevel
    description: Optional[str] = None
    icon: Optional[str] = None
    years_of_experience: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _CAMEL


class Project(BaseModel):
    id: str
    title: str
    description: str
    image: Optional[str] = None
    github: Optional[str] = None
    live: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _CAMEL


class TimelinePost(BaseModel):
    id: str
    title: str
    institution: Optional[str] = None
    location: Optional[str] = None
    year: str
    description: str
    type: TimelinePostType
    link: Optional[str] = None

    model_config = _CAMEL


class Certification(BaseModel):
    id: str
    name: str
    issuer: str
    issue_date: datetime
    expiry_date: Optional[datetime] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None
    description: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    status: CertificationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _CAMEL
