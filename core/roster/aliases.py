"""
Static alias tables: header spellings, branch sheet names, cohort year pairs.

All tables are immutable (tuples, read-only mappings) and are indexed once
at import time by the modules that use them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from core.ir import CanonicalField


# (raw header variant, canonical field). Variants are matched after
# normalisation (case, punctuation, whitespace), so "E-Mail" and "EMAIL"
# are the same key; both are listed where sheets commonly use either.
HEADER_ALIASES: Tuple[Tuple[str, CanonicalField], ...] = (
    ("USN", CanonicalField.USN),
    ("USN NO", CanonicalField.USN),
    ("USN No.", CanonicalField.USN),
    ("USN NUMBER", CanonicalField.USN),
    ("STUDENT USN", CanonicalField.USN),
    ("UNIVERSITY SEAT NUMBER", CanonicalField.USN),

    ("Full Name", CanonicalField.FULL_NAME),
    ("FULLNAME", CanonicalField.FULL_NAME),
    ("NAME", CanonicalField.FULL_NAME),
    ("STUDENT NAME", CanonicalField.FULL_NAME),
    ("STUDENT FULL NAME", CanonicalField.FULL_NAME),
    ("NAME OF THE STUDENT", CanonicalField.FULL_NAME),
    ("NAME OF STUDENT", CanonicalField.FULL_NAME),

    ("BRANCH", CanonicalField.BRANCH),
    ("BRANCH ", CanonicalField.BRANCH),
    ("BRANCH NAME", CanonicalField.BRANCH),
    ("STUDENT BRANCH", CanonicalField.BRANCH),
    ("PROGRAM", CanonicalField.BRANCH),
    ("PROGRAMME", CanonicalField.BRANCH),

    ("SECTION", CanonicalField.SECTION),
    ("SEC", CanonicalField.SECTION),
    ("SEC.", CanonicalField.SECTION),
    ("STUDENT SECTION", CanonicalField.SECTION),

    ("EMAIL", CanonicalField.EMAIL),
    ("E-MAIL", CanonicalField.EMAIL),
    ("EMAIL ID", CanonicalField.EMAIL),
    ("E-Mail ID", CanonicalField.EMAIL),
    ("EMAIL ADDRESS", CanonicalField.EMAIL),
    ("MAIL ID", CanonicalField.EMAIL),
    ("STUDENT EMAIL", CanonicalField.EMAIL),
    ("STUDENT EMAIL ID", CanonicalField.EMAIL),
    ("STUDENT E-MAIL ID", CanonicalField.EMAIL),

    ("PHONE NUMBER", CanonicalField.PHONE_NUMBER),
    ("PHONE", CanonicalField.PHONE_NUMBER),
    ("PHONE NO", CanonicalField.PHONE_NUMBER),
    ("PHONE NO.", CanonicalField.PHONE_NUMBER),
    ("MOBILE", CanonicalField.PHONE_NUMBER),
    ("MOBILE NO", CanonicalField.PHONE_NUMBER),
    ("MOBILE NO.", CanonicalField.PHONE_NUMBER),
    ("MOBILE NUMBER", CanonicalField.PHONE_NUMBER),
    ("CONTACT NO", CanonicalField.PHONE_NUMBER),
    ("CONTACT NUMBER", CanonicalField.PHONE_NUMBER),
    ("STUDENT PHONE", CanonicalField.PHONE_NUMBER),
    ("STUDENT MOBILE", CanonicalField.PHONE_NUMBER),
    ("STUDENT PHONE NUMBER", CanonicalField.PHONE_NUMBER),

    ("COUNSELLOR", CanonicalField.COUNSELLOR),
    ("COUNSELOR", CanonicalField.COUNSELLOR),
    ("COUNSELLORS", CanonicalField.COUNSELLOR),
    ("COUNSELLOR NAME", CanonicalField.COUNSELLOR),
    ("COUNSELOR NAME", CanonicalField.COUNSELLOR),
    ("NAME OF THE COUNSELLOR", CanonicalField.COUNSELLOR),
    ("NAME OF COUNSELLOR", CanonicalField.COUNSELLOR),
    ("FACULTY COUNSELLOR", CanonicalField.COUNSELLOR),
    ("PROCTOR", CanonicalField.COUNSELLOR),
    ("MENTOR", CanonicalField.COUNSELLOR),

    ("Counsellor Email", CanonicalField.COUNSELLOR_EMAIL),
    ("COUNSELOR EMAIL", CanonicalField.COUNSELLOR_EMAIL),
    ("COUNSELLOR E-MAIL", CanonicalField.COUNSELLOR_EMAIL),
    ("COUNSELLOR EMAIL ID", CanonicalField.COUNSELLOR_EMAIL),
    ("COUNSELOR EMAIL ID", CanonicalField.COUNSELLOR_EMAIL),
    ("COUNSELLOR MAIL ID", CanonicalField.COUNSELLOR_EMAIL),
    ("E-Mail ID of the Counsellors", CanonicalField.COUNSELLOR_EMAIL),
    ("E-Mail ID of the Counsellor", CanonicalField.COUNSELLOR_EMAIL),
    ("EMAIL ID OF COUNSELLOR", CanonicalField.COUNSELLOR_EMAIL),
    ("EMAIL OF THE COUNSELLOR", CanonicalField.COUNSELLOR_EMAIL),

    ("Counsellor Phone", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELOR PHONE", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELLOR PHONE NUMBER", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELLOR PHONE NO", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELLOR MOBILE", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELOR MOBILE", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELLOR MOBILE NO", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELLOR MOBILE NUMBER", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELLOR CONTACT", CanonicalField.COUNSELLOR_PHONE),
    ("COUNSELLOR CONTACT NUMBER", CanonicalField.COUNSELLOR_PHONE),

    ("Counsellor Department", CanonicalField.COUNSELLOR_DEPARTMENT),
    ("COUNSELLOR DEPT.", CanonicalField.COUNSELLOR_DEPARTMENT),
    ("COUNSELLOR DEPT", CanonicalField.COUNSELLOR_DEPARTMENT),
    ("COUNSELOR DEPT", CanonicalField.COUNSELLOR_DEPARTMENT),
    ("COUNSELOR DEPARTMENT", CanonicalField.COUNSELLOR_DEPARTMENT),
    ("DEPT OF COUNSELLOR", CanonicalField.COUNSELLOR_DEPARTMENT),
    ("DEPARTMENT OF THE COUNSELLOR", CanonicalField.COUNSELLOR_DEPARTMENT),

    ("BATCH", CanonicalField.BATCH),
    ("BATCH(20XX-20XX)", CanonicalField.BATCH),
    ("BATCH (20XX-20XX)", CanonicalField.BATCH),
    ("STUDENT BATCH", CanonicalField.BATCH),
    ("ADMISSION BATCH", CanonicalField.BATCH),
)


# Sheet label → display branch. Exact match only; anything else passes
# through verbatim.
BRANCH_ALIASES: Mapping[str, str] = MappingProxyType({
    "CSE(AIML)": "Computer Science Engineering (AI & ML)",
    "AIML": "Artificial Intelligence & Machine Learning",
    "CSE": "Computer Science Engineering",
    "Data Science": "CSE (Data Science)",
    "Cyber Security": "CSE (Cyber Security)",
    "Aerospace Eng.": "Aerospace Engineering",
    "Civil Eng.": "Civil Engineering",
    "Chemical Eng.": "Chemical Engineering",
    "Mechanical Eng.": "Mechanical Engineering",
    "Information Science": "Information Science & Engineering",
    "Biotechnology": "Biotechnology",
    "EEE": "Electrical & Electronics Engineering",
    "ECE": "Electronics & Communication Engineering",
    "EIE": "Electronics & Instrumentation Engineering",
    "ET": "Electronics & Telecommunication Engineering",
    "IEM": "Industrial Engineering & Management",
})


# (start year, end year, cohort label), oldest cohort first. The position in
# this tuple is the fixed file processing order.
COHORTS: Tuple[Tuple[str, str, str], ...] = (
    ("2022", "2026", "Year 4"),
    ("2023", "2027", "Year 3"),
    ("2024", "2028", "Year 2"),
)
