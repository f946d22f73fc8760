"""Unit tests for resume entries: validation, date formatting, list operations."""

import pytest
from pydantic import ValidationError

from careercoach.resume.entries import (
    CertificateEntry,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    add_entry,
    build_entry,
    format_month,
    format_period,
    remove_entry,
)
from careercoach.resume.errors import ResumeValidationError


def _fields(exc: ResumeValidationError) -> set[str]:
    return {e.field for e in exc.errors}


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [("2021-06", "Jun 2021"), ("1999-12", "Dec 1999"), ("2020-01", "Jan 2020"), ("", "")],
)
def test_format_month(value, expected):
    assert format_month(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize("value", ["2021-13", "2021-00", "06-2021", "June 2021", "2021/06"])
def test_format_month_rejects_bad_input(value):
    with pytest.raises(ValueError):
        format_month(value)


@pytest.mark.unit
def test_format_period():
    assert format_period("Jun 2021", "", True) == "Jun 2021 - Present"
    assert format_period("Jan 2019", "Dec 2020", False) == "Jan 2019 - Dec 2020"
    assert format_period("", "Dec 2020", False) == "Dec 2020"
    assert format_period("", "", False) == ""


@pytest.mark.unit
def test_build_entry_current_position(experience_form):
    """Current position: period ends in Present, no end date stored."""
    entry = build_entry("experience", experience_form)

    assert isinstance(entry, ExperienceEntry)
    assert entry.start_date == "Jun 2021"
    assert entry.end_date == ""
    assert entry.period == "Jun 2021 - Present"
    assert entry.description == "Built X\nScaled Y"


@pytest.mark.unit
def test_build_entry_clears_stale_end_date(experience_form):
    """A current entry carrying an end date is normalized, not rejected."""
    entry = build_entry("experience", {**experience_form, "end_date": "2023-01"})

    assert entry.end_date == ""
    assert entry.period.endswith("Present")


@pytest.mark.unit
def test_build_entry_formats_past_position():
    entry = build_entry(
        "education",
        {
            "title": "BSc Computer Science",
            "organization": "MIT",
            "start_date": "2015-09",
            "end_date": "2019-06",
            "description": "Graduated with honors",
            "gpa": "3.9",
            "location": "Cambridge, MA",
        },
    )

    assert isinstance(entry, EducationEntry)
    assert entry.period == "Sep 2015 - Jun 2019"
    assert entry.gpa == "3.9"
    assert entry.location == "Cambridge, MA"


@pytest.mark.unit
def test_build_entry_keeps_only_kind_fields():
    """Fields that do not belong to the entry kind are dropped."""
    form = {
        "title": "AWS Solutions Architect",
        "organization": "Amazon",
        "start_date": "2022-03",
        "end_date": "2025-03",
        "description": "Associate level",
        "link": "https://aws.amazon.com/cert/123",
        "gpa": "4.0",
    }
    entry = build_entry("certificate", form)

    assert isinstance(entry, CertificateEntry)
    assert entry.link == "https://aws.amazon.com/cert/123"
    assert not hasattr(entry, "gpa")


@pytest.mark.unit
def test_build_entry_project_technologies():
    entry = build_entry(
        "project",
        {
            "title": "Resume Builder",
            "organization": "Solo",
            "start_date": "2024-01",
            "end_date": "2024-04",
            "description": "Built it",
            "technologies": "Python, FastAPI",
        },
    )
    assert isinstance(entry, ProjectEntry)
    assert entry.technologies == "Python, FastAPI"


@pytest.mark.unit
def test_build_entry_required_fields():
    with pytest.raises(ResumeValidationError) as exc_info:
        build_entry("experience", {"title": "", "organization": "  ", "description": "", "current": True})

    assert _fields(exc_info.value) == {"title", "organization", "description"}
    assert all(e.message == "Required" for e in exc_info.value.errors)


@pytest.mark.unit
def test_build_entry_end_date_required_unless_current(experience_form):
    form = {**experience_form, "current": False}

    with pytest.raises(ResumeValidationError) as exc_info:
        build_entry("experience", form)

    assert _fields(exc_info.value) == {"end_date"}


@pytest.mark.unit
def test_build_entry_end_before_start(experience_form):
    form = {**experience_form, "current": False, "end_date": "2020-01"}

    with pytest.raises(ResumeValidationError) as exc_info:
        build_entry("experience", form)

    assert "end_date" in _fields(exc_info.value)


@pytest.mark.unit
def test_build_entry_invalid_link_and_month(experience_form):
    form = {**experience_form, "link": "not a url", "start_date": "2021-14"}

    with pytest.raises(ResumeValidationError) as exc_info:
        build_entry("experience", form)

    assert _fields(exc_info.value) == {"link", "start_date"}


@pytest.mark.unit
def test_build_entry_unknown_kind(experience_form):
    with pytest.raises(ResumeValidationError) as exc_info:
        build_entry("hobby", experience_form)

    assert _fields(exc_info.value) == {"kind"}


@pytest.mark.unit
def test_add_entry_does_not_mutate(experience_form):
    entries = []
    entry = build_entry("experience", experience_form)

    result = add_entry(entries, entry)

    assert result == [entry]
    assert entries == []


@pytest.mark.unit
@pytest.mark.parametrize("index", [0, 2, 4])
def test_remove_entry_preserves_order(index):
    entries = ["a", "b", "c", "d", "e"]

    result = remove_entry(entries, index)

    expected = entries[:index] + entries[index + 1:]
    assert result == expected
    assert len(entries) == 5


@pytest.mark.unit
@pytest.mark.parametrize("index", [-1, 3])
def test_remove_entry_out_of_range(index):
    with pytest.raises(IndexError):
        remove_entry(["a", "b", "c"], index)


@pytest.mark.unit
@pytest.mark.parametrize("missing", ["title", "organization", "description"])
def test_build_entry_missing_required_key(experience_form, missing):
    """A key left out of the form is reported like an empty one."""
    form = {k: v for k, v in experience_form.items() if k != missing}

    with pytest.raises(ResumeValidationError) as exc_info:
        build_entry("experience", form)

    assert [(e.field, e.message) for e in exc_info.value.errors] == [(missing, "Required")]


@pytest.mark.unit
def test_build_entry_empty_payload():
    with pytest.raises(ResumeValidationError) as exc_info:
        build_entry("project", {})

    assert _fields(exc_info.value) == {"title", "organization", "description"}


@pytest.mark.unit
@pytest.mark.parametrize(
    "data, message",
    [
        ({"start_date": "garbage"}, "Use 'Mon YYYY' format"),
        ({"start_date": "2021-06"}, "Use 'Mon YYYY' format"),
        ({"current": False, "end_date": ""}, "Required unless this is a current position"),
        ({"current": False, "end_date": "Jan 2020"}, "End date must not be before start date"),
        ({"title": "   "}, "Required"),
        ({"description": " \n "}, "Required"),
        ({"link": "not a url"}, "Invalid URL"),
    ],
)
def test_stored_entry_rules(data, message):
    """Stored entries that skip build_entry follow the same rules."""
    raw = {
        "title": "Engineer",
        "organization": "Acme",
        "start_date": "Jun 2021",
        "current": True,
        "description": "Built X",
        **data,
    }

    with pytest.raises(ValidationError) as exc_info:
        ExperienceEntry(**raw)

    assert message in str(exc_info.value)


@pytest.mark.unit
def test_stored_entry_compares_dates_by_month():
    """'Apr 2020' is after 'Dec 2019' although it sorts before it as text."""
    entry = ExperienceEntry(
        title="Engineer",
        organization="Acme",
        start_date="Dec 2019",
        end_date="Apr 2020",
        description="Built X",
    )

    assert entry.period == "Dec 2019 - Apr 2020"
