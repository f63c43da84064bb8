"""
Access functions for the portfolio content tables.

Every function takes the store as its first argument and performs one
store operation (two for the "latest" helpers). Store failures never
escape: they are logged and reported as ``None`` (or ``[]`` for listings),
so callers only ever check for a missing result. Stored documents that no
longer fit their record model are logged and read as missing. Bad argument
shapes raise ``pydantic.ValidationError`` before the store is touched.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Type, TypeVar

from pydantic import ValidationError

from database import Store, StoreError
from schemas import (
    Content,
    Header,
    HeaderRecord,
    Introduction,
    IntroductionRecord,
    Project,
    ProjectDetail,
    ProjectDetailRecord,
    ProjectDetailUpdate,
    ProjectRecord,
    ProjectUpdate,
    StoredRecord,
    WorkExperience,
    WorkExperienceRecord,
    WorkExperienceUpdate,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=StoredRecord)


# =======
# Helpers
# =======

def _insert(store: Store, item: Content) -> Optional[str]:
    try:
        record_id = store.insert(item.table, item.model_dump(exclude_none=True))
    except StoreError:
        logger.exception("Error creating %s", item.table)
        return None
    logger.info("Created %s %s", item.table, record_id)
    return record_id


def _validate(record_cls: Type[R], doc: dict) -> Optional[R]:
    # the database does not enforce the schema; unreadable documents are skipped
    try:
        return record_cls.model_validate(doc)
    except ValidationError:
        logger.exception("Skipping malformed %s document %s", record_cls.table, doc.get("id"))
        return None


def _list(store: Store, record_cls: Type[R], limit: Optional[int] = None) -> List[R]:
    try:
        docs = store.scan(record_cls.table, order="desc", limit=limit)
    except StoreError:
        logger.exception("Error reading %s", record_cls.table)
        return []
    records = []
    for doc in docs:
        record = _validate(record_cls, doc)
        if record is not None:
            records.append(record)
    return records


def _get(store: Store, record_cls: Type[R], record_id: str) -> Optional[R]:
    try:
        doc = store.get(record_cls.table, record_id)
    except StoreError:
        logger.exception("Error reading %s %s", record_cls.table, record_id)
        return None
    return _validate(record_cls, doc) if doc else None


def _patch(store: Store, table: str, record_id: str, fields: dict) -> Optional[str]:
    try:
        if not fields:
            # nothing to set, still report whether the record exists
            return record_id if store.get(table, record_id) else None
        matched = store.patch(table, record_id, fields)
    except StoreError:
        logger.exception("Error updating %s %s", table, record_id)
        return None
    return record_id if matched else None


def _delete(store: Store, table: str, record_id: str) -> Optional[str]:
    try:
        deleted = store.delete(table, record_id)
    except StoreError:
        logger.exception("Error deleting %s %s", table, record_id)
        return None
    if deleted:
        logger.info("Deleted %s %s", table, record_id)
    return record_id if deleted else None


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ======
# Header
# ======

def create_header(store: Store, name: str, description: str) -> Optional[str]:
    return _insert(store, Header(name=name, description=description))


def get_headers(store: Store) -> List[HeaderRecord]:
    """All headers, most recent first."""
    return _list(store, HeaderRecord)


def get_header_by_id(store: Store, header_id: str) -> Optional[HeaderRecord]:
    return _get(store, HeaderRecord, header_id)


# ============
# Introduction
# ============

def create_introduction(store: Store, header: str, description: str, title: str) -> Optional[str]:
    return _insert(store, Introduction(header=header, description=description, title=title))


def get_introductions(store: Store) -> List[IntroductionRecord]:
    """All introductions, most recent first."""
    return _list(store, IntroductionRecord)


def get_introduction_by_id(store: Store, introduction_id: str) -> Optional[IntroductionRecord]:
    return _get(store, IntroductionRecord, introduction_id)


# ========
# Projects
# ========

def create_project(
    store: Store,
    image: str,
    card_title: str,
    card_description: str,
    tag: str,
    github_link: str,
    website_link: Optional[str] = None,
) -> Optional[str]:
    project = Project(
        image=image,
        card_title=card_title,
        card_description=card_description,
        tag=tag,
        github_link=github_link,
        website_link=website_link,
        created_at=_now(),
    )
    return _insert(store, project)


def get_projects(store: Store) -> List[ProjectRecord]:
    return _list(store, ProjectRecord)


def get_project_by_id(store: Store, project_id: str) -> Optional[ProjectRecord]:
    return _get(store, ProjectRecord, project_id)


def update_project(store: Store, project_id: str, **changes) -> Optional[str]:
    """Patch the given fields and stamp ``updated_at``. Returns the id, or None if nothing was updated."""
    fields = ProjectUpdate(**changes).model_dump(exclude_none=True)
    fields["updated_at"] = _now()
    return _patch(store, Project.table, project_id, fields)


def delete_project(store: Store, project_id: str) -> Optional[str]:
    # the image stays in asset storage; storage ids are not managed here
    return _delete(store, Project.table, project_id)


# ===============
# Project details
# ===============

def create_project_detail(store: Store, title: str, header: str, description: str) -> Optional[str]:
    return _insert(store, ProjectDetail(title=title, header=header, description=description))


def get_project_details(store: Store) -> List[ProjectDetailRecord]:
    return _list(store, ProjectDetailRecord)


def get_project_detail_by_id(store: Store, detail_id: str) -> Optional[ProjectDetailRecord]:
    return _get(store, ProjectDetailRecord, detail_id)


def update_project_detail(store: Store, detail_id: str, **changes) -> Optional[str]:
    fields = ProjectDetailUpdate(**changes).model_dump(exclude_none=True)
    return _patch(store, ProjectDetail.table, detail_id, fields)


def delete_project_detail(store: Store, detail_id: str) -> Optional[str]:
    return _delete(store, ProjectDetail.table, detail_id)


# ===============
# Work experience
# ===============

def create_work_experience(
    store: Store,
    icon: str,
    workplace: str,
    work_title: str,
    description: str,
    start_date: datetime,
    end_date: Optional[datetime] = None,
    is_current_job: bool = False,
) -> Optional[str]:
    experience = WorkExperience(
        icon=icon,
        workplace=workplace,
        work_title=work_title,
        description=description,
        start_date=start_date,
        end_date=end_date,
        is_current_job=is_current_job,
    )
    return _insert(store, experience)


def get_work_experiences(store: Store) -> List[WorkExperienceRecord]:
    """All work experience entries, most recent first."""
    return _list(store, WorkExperienceRecord)


def get_work_experience_by_id(store: Store, experience_id: str) -> Optional[WorkExperienceRecord]:
    return _get(store, WorkExperienceRecord, experience_id)


def get_latest_work_experience(store: Store) -> Optional[WorkExperienceRecord]:
    latest = _list(store, WorkExperienceRecord, limit=1)
    return latest[0] if latest else None


def update_work_experience(store: Store, experience_id: str, **changes) -> Optional[str]:
    """Patch the fields that are not None. Returns the id, or None if no such entry."""
    fields = WorkExperienceUpdate(**changes).model_dump(exclude_none=True)
    return _patch(store, WorkExperience.table, experience_id, fields)


def update_latest_work_experience(store: Store, **changes) -> Optional[str]:
    # validate before looking anything up
    fields = WorkExperienceUpdate(**changes).model_dump(exclude_none=True)
    latest = get_latest_work_experience(store)
    if latest is None:
        return None
    return _patch(store, WorkExperience.table, latest.id, fields)


def delete_work_experience(store: Store, experience_id: str) -> Optional[str]:
    return _delete(store, WorkExperience.table, experience_id)


def delete_latest_work_experience(store: Store) -> Optional[str]:
    latest = get_latest_work_experience(store)
    if latest is None:
        return None
    return _delete(store, WorkExperience.table, latest.id)
