"""
Schema Tests
============
Field shape enforcement and the camelCase wire format.
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from schemas import (
    Header,
    ProjectCreate,
    ProjectRecord,
    WorkExperience,
    WorkExperienceRecord,
    WorkExperienceUpdate,
)


class TestValidation:

    def test_missing_field_rejected(self):
        with pytest.raises(ValidationError):
            Header(name="Site")

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            Header(name=123, description="v1")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            Header(name="Site", description="v1", subtitle="x")

    def test_current_job_flag_must_be_boolean(self):
        with pytest.raises(ValidationError):
            WorkExperience(
                icon="icon-1",
                workplace="Acme",
                work_title="Engineer",
                description="Built things",
                start_date=datetime(2021, 3, 1, tzinfo=timezone.utc),
                is_current_job="yes",
            )

    def test_website_link_is_optional(self):
        project = ProjectCreate(
            image="img-1", card_title="T", card_description="D", tag="web", github_link="https://github.com/x/y"
        )
        assert project.website_link is None

    def test_update_model_forbids_unknown_fields(self):
        with pytest.raises(ValidationError):
            WorkExperienceUpdate(salary=10)


class TestAliases:

    def test_accepts_camel_case(self):
        project = ProjectCreate.model_validate({
            "image": "img-1",
            "cardTitle": "T",
            "cardDescription": "D",
            "tag": "web",
            "githubLink": "https://github.com/x/y",
        })
        assert project.card_title == "T"

    def test_dumps_camel_case_by_alias(self):
        record = ProjectRecord(
            id="abc",
            image="img-1",
            card_title="T",
            card_description="D",
            tag="web",
            github_link="g",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        data = record.model_dump(by_alias=True)
        assert data["cardTitle"] == "T"
        assert data["createdAt"] == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert data["id"] == "abc"


class TestTimestamps:

    def test_naive_datetimes_are_utc(self):
        exp = WorkExperience(
            icon="i", workplace="w", work_title="t", description="d", start_date=datetime(2020, 5, 1)
        )
        assert exp.start_date == datetime(2020, 5, 1, tzinfo=timezone.utc)

    def test_epoch_milliseconds_accepted(self):
        exp = WorkExperience(
            icon="i", workplace="w", work_title="t", description="d", start_date=1577836800000
        )
        assert exp.start_date == datetime(2020, 1, 1, tzinfo=timezone.utc)


class TestWorkExperienceRecord:

    def _record(self, **overrides):
        fields = {
            "id": "abc",
            "icon": "icon-1",
            "workplace": "Acme",
            "work_title": "Engineer",
            "description": "Built the API • Ran the team •  ",
            "start_date": datetime(2021, 3, 1, tzinfo=timezone.utc),
            "end_date": datetime(2023, 3, 1, tzinfo=timezone.utc),
            "is_current_job": False,
        }
        fields.update(overrides)
        return WorkExperienceRecord.model_validate(fields)

    def test_description_items(self):
        assert self._record().description_items == ["Built the API", "Ran the team"]

    def test_description_items_serialized(self):
        data = self._record().model_dump(by_alias=True)
        assert data["descriptionItems"] == ["Built the API", "Ran the team"]

    def test_current_job_hides_end_date(self):
        assert self._record(is_current_job=True).end_date is None

    def test_past_job_keeps_end_date(self):
        assert self._record().end_date == datetime(2023, 3, 1, tzinfo=timezone.utc)

    def test_ignores_extra_stored_fields(self):
        record = self._record(legacy_field="x")
        assert not hasattr(record, "legacy_field")
