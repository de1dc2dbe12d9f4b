"""
Unit tests for the free-text parser.

Run with: python -m pytest tests/test_parser.py -v
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from taskpilot.domain.common.errors import EmptyInputError
from taskpilot.parser import (
    extract_category,
    extract_duration,
    extract_priority,
    extract_subtasks,
    extract_time,
    parse,
    resolve_due_date,
)

# Monday
NOW = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def test_presentation_deck_example():
    draft = parse("Tomorrow by 3pm finalize presentation deck urgent high priority", now=NOW)

    assert draft.priority == "Critical"
    assert draft.due_date == datetime(2024, 1, 2, 15, 0, tzinfo=timezone.utc)
    assert draft.category == "General"
    assert "finalize presentation deck" in draft.name
    assert "urgent" not in draft.name.lower()
    assert "priority" not in draft.name.lower()


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_input_raises(text):
    with pytest.raises(EmptyInputError):
        parse(text, now=NOW)


def test_plain_text_gets_defaults():
    draft = parse("Water the plants", now=NOW)

    assert draft.name == "Water the plants"
    assert draft.priority == "Medium"
    assert draft.category == "General"
    assert draft.due_date is None
    assert draft.estimated_minutes is None
    assert draft.subtasks == ()


def test_name_falls_back_to_input_when_everything_is_consumed():
    draft = parse("  urgent  ", now=NOW)

    assert draft.priority == "Critical"
    assert draft.name == "urgent"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("call bank asap", "Critical"),
        ("renew passport important", "High"),
        ("sort photos low priority", "Low"),
        ("tidy desk medium priority", "Medium"),
        ("critical fix, low priority docs", "Critical"),
    ],
)
def test_priority_keywords(text, expected):
    priority, _ = extract_priority(text)
    assert priority == expected


def test_priority_phrases_are_stripped():
    _, rest = extract_priority("important email high priority")
    assert "important" not in rest
    assert "priority" not in rest


def test_category_earliest_word_wins():
    category, rest = extract_category("finance review for work")
    assert category == "Finance"
    assert "finance" not in rest.lower()


def test_category_hashtag_and_singular_errand():
    assert extract_category("buy stamps #errands")[0] == "Errands"
    assert extract_category("quick errand downtown")[0] == "Errands"


def test_category_inside_other_word_is_ignored():
    assert extract_category("homework sheet")[0] == "General"


def test_duration_sums_spans():
    minutes, rest = extract_duration("deep work 1 hour 30 min")
    assert minutes == 90
    assert rest.split() == ["deep", "work"]


def test_duration_zero_is_not_a_match():
    minutes, rest = extract_duration("0 min warmup")
    assert minutes is None
    assert "0 min" in rest


def test_duration_number_without_unit_is_kept():
    draft = parse("Read 3 chapters", now=NOW)
    assert draft.estimated_minutes is None
    assert draft.due_date is None
    assert draft.name == "Read 3 chapters"


def test_estimate_is_parsed_into_minutes():
    draft = parse("Review slides for 1.5h", now=NOW)
    assert draft.estimated_minutes == 90
    assert draft.name == "Review slides"


def test_date_without_time_defaults_to_end_of_day():
    draft = parse("Pay rent 2024-02-05", now=NOW)
    assert draft.due_date == datetime(2024, 2, 5, 23, 59, tzinfo=timezone.utc)
    assert draft.name == "Pay rent"


def test_tonight_is_evening_today():
    draft = parse("Call mom tonight", now=NOW)
    assert draft.due_date == datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc)


def test_bare_weekday_can_be_today():
    draft = parse("Gym monday", now=NOW)
    assert draft.due_date == datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc)


def test_next_weekday_is_at_least_one_day_ahead():
    draft = parse("Gym next monday", now=NOW)
    assert draft.due_date == datetime(2024, 1, 8, 23, 59, tzinfo=timezone.utc)

    draft = parse("Submit report by friday at 14:00", now=NOW)
    assert draft.due_date == datetime(2024, 1, 5, 14, 0, tzinfo=timezone.utc)


def test_time_only_rolls_to_tomorrow_when_passed():
    assert parse("standup at 08:30", now=NOW).due_date == datetime(2024, 1, 2, 8, 30, tzinfo=timezone.utc)
    assert parse("lunch at noon", now=NOW).due_date == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_yearless_date_in_the_past_rolls_forward():
    now = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    draft = parse("dentist jan 5", now=now)
    assert draft.due_date == datetime(2025, 1, 5, 23, 59, tzinfo=timezone.utc)


def test_slash_and_day_month_dates():
    assert parse("book flights 3/15", now=NOW).due_date == datetime(2024, 3, 15, 23, 59, tzinfo=timezone.utc)
    assert parse("visa 12th feb", now=NOW).due_date == datetime(2024, 2, 12, 23, 59, tzinfo=timezone.utc)


def test_extract_time_forms():
    assert extract_time("by 9:30 am")[0] == (9, 30)
    assert extract_time("12am release")[0] == (0, 0)
    assert extract_time("before midnight")[0] == (23, 59)
    assert extract_time("25:00 meeting")[0] is None


def test_resolve_due_date_without_anything_is_none():
    assert resolve_due_date(None, None, NOW) is None


def test_subtasks_from_pipe_list_with_colon_head():
    titles, head = extract_subtasks("Launch prep: draft | review | | submit")
    assert titles == ("draft", "review", "submit")
    assert head == "Launch prep"


def test_subtasks_from_then_sequence():
    draft = parse("Clean kitchen then laundry and then vacuum", now=NOW)
    assert draft.name == "Clean kitchen"
    assert draft.subtasks == ("laundry", "vacuum")


def test_subtasks_mixed_pipe_and_then_delimiters():
    draft = parse("Buy milk and then eggs | bread", now=NOW)
    assert draft.name == "Buy milk"
    assert draft.subtasks == ("eggs", "bread")


def test_parse_does_not_depend_on_wall_clock():
    first = parse("tomorrow 3pm call plumber", now=NOW)
    second = parse("tomorrow 3pm call plumber", now=NOW)
    assert first == second
