"""
Tests for SheetValidator: utility-tab names and structural validity.
"""
import pytest

from core.roster.config import MergeConfig
from core.roster.sheet_validator import (
    REASON_NO_IDENTIFIER,
    REASON_NO_SENTINEL,
    REASON_OK,
    REASON_TOO_SHORT,
    REASON_UTILITY,
    SheetValidator,
)


@pytest.fixture
def validator():
    return SheetValidator()


@pytest.mark.parametrize("name", ["Sheet2", "Sheet3", "Sheet", "template", " Format ", "EXAMPLE", "Blank"])
def test_utility_sheet_names(validator, name):
    assert validator.is_utility_sheet(name)


@pytest.mark.parametrize("name", ["Sheet1", "CSE", "Mechanical Eng.", "Templates and more", "sheet2"])
def test_regular_sheet_names(validator, name):
    assert not validator.is_utility_sheet(name)


def test_valid_sheet(validator):
    rows = [["USN", "Name"], ["1MS22CS001", "Asha"]]
    assert validator.is_valid(rows, "CSE")
    assert validator.explain(rows, "CSE") == REASON_OK


def test_single_row_is_too_short(validator):
    assert validator.explain([["USN", "Name"]], "CSE") == REASON_TOO_SHORT
    assert validator.explain([], "CSE") == REASON_TOO_SHORT


def test_sentinel_is_case_insensitive_substring(validator):
    rows = [["Student usn no", "Name"], ["1MS22CS001", "Asha"]]
    assert validator.find_header_row(rows) == 0
    assert validator.is_valid(rows, "CSE")


def test_missing_sentinel(validator):
    rows = [["Roll", "Name"], ["1MS22CS001", "Asha"]]
    assert validator.explain(rows, "CSE") == REASON_NO_SENTINEL


def test_header_only_template_is_rejected(validator):
    # the batch header placeholder has digits and letters but sits in the header row
    rows = [["USN", "BATCH(20XX-20XX)"], ["", ""]]
    assert validator.explain(rows, "CSE") == REASON_NO_IDENTIFIER


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1MS22", False),      # 5 chars
        ("1MS22C", True),      # 6 chars
        ("123456", False),     # no letter
        ("ABCDEF", False),     # no digit
        ("  1MS22C  ", True),
    ],
)
def test_identifier_length_boundary(validator, value, expected):
    assert validator.looks_like_identifier(value) is expected


def test_utility_check_runs_before_content(validator):
    rows = [["USN", "Name"], ["1MS22CS001", "Asha"]]
    assert validator.explain(rows, "Sheet2") == REASON_UTILITY
    assert not validator.is_valid(rows, "template")


def test_custom_sentinel():
    validator = SheetValidator(MergeConfig(sentinel="ROLL"))
    assert validator.is_valid([["Roll No", "Name"], ["1MS22CS001", "Asha"]], "CSE")
