"""
Tests for header normalisation and alias lookup.
"""
import pytest

from core.ir import CanonicalField
from core.roster.aliases import HEADER_ALIASES
from core.roster.errors import AliasConflictError
from core.roster.header_canonicalizer import (
    HeaderCanonicalizer,
    build_alias_index,
    canonicalize,
    find_alias_conflicts,
    normalize_key,
)


def test_counsellor_headers_from_real_sheets():
    assert canonicalize("E-Mail ID of the Counsellors") == CanonicalField.COUNSELLOR_EMAIL
    assert canonicalize("COUNSELOR MOBILE") == CanonicalField.COUNSELLOR_PHONE


def test_shipped_alias_table_has_no_conflicts():
    assert find_alias_conflicts(HEADER_ALIASES) == []


@pytest.mark.parametrize("field", list(CanonicalField))
def test_canonicalize_is_idempotent(field):
    assert canonicalize(field.value) == field
    assert canonicalize(str(canonicalize(field.value))) == field


@pytest.mark.parametrize(
    "header,field",
    [
        ("usn", CanonicalField.USN),
        (" USN No. ", CanonicalField.USN),
        ("Student Name", CanonicalField.FULL_NAME),
        ("E-MAIL", CanonicalField.EMAIL),
        ("Mobile\nNo.", CanonicalField.PHONE_NUMBER),
        ("Counsellor Dept.", CanonicalField.COUNSELLOR_DEPARTMENT),
        ("BATCH(20XX-20XX)", CanonicalField.BATCH),
        ("Sec", CanonicalField.SECTION),
    ],
)
def test_variants_resolve(header, field):
    assert canonicalize(header) == field


def test_unknown_header_passes_through_trimmed():
    assert canonicalize("  Hostel Block ") == "Hostel Block"
    assert canonicalize(None) == ""


def test_normalize_key():
    assert normalize_key(" E-Mail ID  of the\tCounsellors ") == "EMAIL ID OF THE COUNSELLORS"
    assert normalize_key("Sl. No.") == "SL NO"
    assert normalize_key(None) == ""


def test_build_alias_index_rejects_conflicts():
    aliases = (
        ("Phone", CanonicalField.PHONE_NUMBER),
        ("PHONE.", CanonicalField.COUNSELLOR_PHONE),
    )
    with pytest.raises(AliasConflictError) as exc_info:
        build_alias_index(aliases)
    assert exc_info.value.conflicts == [
        ("PHONE", "Phone Number", "Counsellor Phone"),
    ]


def test_duplicate_alias_for_same_field_is_fine():
    index = build_alias_index((("Mail", CanonicalField.EMAIL), ("MAIL", CanonicalField.EMAIL)))
    assert index["MAIL"] == CanonicalField.EMAIL


def test_custom_index_includes_canonical_names():
    canon = HeaderCanonicalizer(build_alias_index((("Roll", CanonicalField.USN),)))
    assert canon.canonicalize("roll") == CanonicalField.USN
    assert canon.canonicalize("Counsellor Email") == CanonicalField.COUNSELLOR_EMAIL
    assert canon.lookup("Hostel") is None


def test_canonicalize_row():
    canon = HeaderCanonicalizer()
    assert canon.canonicalize_row(["USN", "Remarks", None]) == [CanonicalField.USN, "Remarks", ""]
