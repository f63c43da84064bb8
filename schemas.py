"""
Database Schemas for the Portfolio content tables

Each Pydantic model = one MongoDB collection, named by its ``table``
attribute. Documents are stored with snake_case field names; the API
speaks camelCase through the model aliases.

``*Record`` models are what reads return: the stored fields plus the
store-assigned ``id``.
"""

from datetime import datetime, timezone
from typing import Annotated, ClassVar, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, StrictBool, computed_field, model_validator
from pydantic.alias_generators import to_camel

BULLET_SEPARATOR = " • "


def _as_utc(value: datetime) -> datetime:
    # Mongo hands datetimes back naive, in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Content(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    table: ClassVar[str]


class StoredRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str


# Header
class Header(Content):
    table: ClassVar[str] = "header"

    name: str
    description: str


class HeaderRecord(Header, StoredRecord):
    pass


# Introduction
class Introduction(Content):
    table: ClassVar[str] = "introduction"

    header: str  # free-text label, not a reference to a header record
    description: str
    title: str


class IntroductionRecord(Introduction, StoredRecord):
    pass


# Projects
class ProjectCreate(Content):
    table: ClassVar[str] = "projects"

    image: str  # storage id
    card_title: str
    card_description: str
    tag: str
    github_link: str
    website_link: Optional[str] = None


class Project(ProjectCreate):
    created_at: UtcDatetime
    updated_at: Optional[UtcDatetime] = None


class ProjectUpdate(Content):
    image: Optional[str] = None
    card_title: Optional[str] = None
    card_description: Optional[str] = None
    tag: Optional[str] = None
    github_link: Optional[str] = None
    website_link: Optional[str] = None


class ProjectRecord(Project, StoredRecord):
    pass


# Project details
class ProjectDetail(Content):
    table: ClassVar[str] = "projectdetails"

    title: str
    header: str
    description: str


class ProjectDetailUpdate(Content):
    title: Optional[str] = None
    header: Optional[str] = None
    description: Optional[str] = None


class ProjectDetailRecord(ProjectDetail, StoredRecord):
    pass


# Work experience
class WorkExperience(Content):
    table: ClassVar[str] = "workExperience"

    icon: str  # storage id
    workplace: str
    work_title: str
    description: str  # bullets joined with BULLET_SEPARATOR
    start_date: UtcDatetime
    end_date: Optional[UtcDatetime] = None
    is_current_job: StrictBool = False


class WorkExperienceUpdate(Content):
    icon: Optional[str] = None
    workplace: Optional[str] = None
    work_title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    is_current_job: Optional[StrictBool] = None


class WorkExperienceRecord(WorkExperience, StoredRecord):
    @model_validator(mode="after")
    def current_job_has_no_end_date(self):
        if self.is_current_job:
            self.end_date = None
        return self

    @computed_field(alias="descriptionItems")
    @property
    def description_items(self) -> List[str]:
        return [item.strip() for item in self.description.split(BULLET_SEPARATOR) if item.strip()]
