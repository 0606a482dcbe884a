"""
Intermediate Representation Module
==================================

Core data structures produced by the roster merge: student records,
batch/branch separators, per-sheet outcomes, statistics and the merge result.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, Field


class CanonicalField(str, Enum):
    """Fixed record attributes that heterogeneous headers are mapped onto."""

    USN = "USN"
    FULL_NAME = "Full Name"
    BRANCH = "Branch"
    SECTION = "Section"
    EMAIL = "Email"
    PHONE_NUMBER = "Phone Number"
    COUNSELLOR = "Counsellor"
    COUNSELLOR_EMAIL = "Counsellor Email"
    COUNSELLOR_PHONE = "Counsellor Phone"
    COUNSELLOR_DEPARTMENT = "Counsellor Department"
    BATCH = "Batch"

    def __str__(self) -> str:
        return self.value


class DerivedField(str, Enum):
    NORMALIZED_BRANCH = "Normalized Branch"

    def __str__(self) -> str:
        return self.value


IDENTIFIER_FIELD = CanonicalField.USN


class StudentRecord(BaseModel):
    """
    One student row after canonicalization.

    ``values`` always holds every CanonicalField (missing → ``""``), the
    derived ``Normalized Branch`` and any passthrough columns under their
    original header text. ``Batch`` holds the resolved batch.
    """
    kind: Literal["record"] = "record"
    values: Dict[str, str]
    source_file: str = ""
    sheet: str = ""

    def get(self, field: Union[CanonicalField, DerivedField, str], default: str = "") -> str:
        return self.values.get(str(field), default)

    @property
    def usn(self) -> str:
        return self.get(IDENTIFIER_FIELD)

    @property
    def normalized_branch(self) -> str:
        return self.get(DerivedField.NORMALIZED_BRANCH)

    @property
    def batch(self) -> str:
        return self.get(CanonicalField.BATCH)


class BatchSeparator(BaseModel):
    kind: Literal["batch_separator"] = "batch_separator"
    label: str
    batch: str = ""
    cohort: str = ""


class BranchSeparator(BaseModel):
    kind: Literal["branch_separator"] = "branch_separator"
    label: str


Separator = Union[BatchSeparator, BranchSeparator]
MergeEntry = Annotated[
    Union[StudentRecord, BatchSeparator, BranchSeparator],
    Field(discriminator="kind"),
]


class SkipReason(str, Enum):
    """Why a sheet contributed no records."""
    UTILITY_SHEET = "utility_sheet"
    INVALID = "invalid"
    NO_RECORDS = "no_records"
    BUILD_ERROR = "build_error"

    def __str__(self) -> str:
        return self.value


class SheetOutcome(BaseModel):
    """
    Result of processing one sheet: either records, or a skip reason.
    """
    sheet: str
    normalized_branch: str = ""
    records: List[StudentRecord] = Field(default_factory=list)
    skip_reason: Optional[SkipReason] = None
    detail: str = ""

    class Config:
        use_enum_values = True

    @property
    def ok(self) -> bool:
        return self.skip_reason is None and bool(self.records)


class MergeStatistics(BaseModel):
    total_files: int = 0
    total_sheets: int = 0
    total_records: int = 0
    branches: Set[str] = Field(default_factory=set)
    batches: Set[str] = Field(default_factory=set)

    def to_dict(self) -> dict:
        """JSON-friendly snapshot (sets become sorted lists)."""
        return {
            "total_files": self.total_files,
            "total_sheets": self.total_sheets,
            "total_records": self.total_records,
            "branches": sorted(self.branches),
            "batches": sorted(self.batches),
        }


class MergeDiagnostic(BaseModel):
    """Advisory note about something skipped or degraded during a merge."""
    code: str
    message: str
    file: Optional[str] = None
    sheet: Optional[str] = None


class MergeResult(BaseModel):
    entries: List[MergeEntry] = Field(default_factory=list)
    statistics: MergeStatistics = Field(default_factory=MergeStatistics)
    diagnostics: List[MergeDiagnostic] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def records(self) -> List[StudentRecord]:
        return [e for e in self.entries if isinstance(e, StudentRecord)]

    def to_dict(self) -> dict:
        return {
            "entries": [e.model_dump() for e in self.entries],
            "statistics": self.statistics.to_dict(),
            "diagnostics": [d.model_dump(exclude_none=True) for d in self.diagnostics],
            "cancelled": self.cancelled,
        }
