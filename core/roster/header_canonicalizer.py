"""
HeaderCanonicalizer: map raw header text onto canonical record fields.

The alias list is normalised once into a key → field index; lookups are
plain dictionary hits. Unknown headers are passed through (trimmed) so no
column is silently dropped.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from core.ir import CanonicalField
from core.roster.aliases import HEADER_ALIASES
from core.roster.config import HEADER_PUNCT_RE, WHITESPACE_RE
from core.roster.errors import AliasConflictError


def normalize_key(header: Any) -> str:
    """
    Uppercase, NBSP → space, keep only letters/digits/underscore/space,
    collapse whitespace, trim.
    """
    if header is None:
        return ""
    text = str(header).upper().replace("\u00a0", " ")
    # Line breaks inside header cells count as spaces.
    text = WHITESPACE_RE.sub(" ", text)
    text = HEADER_PUNCT_RE.sub("", text)
    text = WHITESPACE_RE.sub(" ", text)
    return text.strip()


def find_alias_conflicts(
    aliases: Iterable[Tuple[str, CanonicalField]],
) -> List[Tuple[str, str, str]]:
    """Return ``(key, field_a, field_b)`` for every key claimed by two fields."""
    seen = {}
    conflicts: List[Tuple[str, str, str]] = []
    for raw, field in aliases:
        key = normalize_key(raw)
        prev = seen.get(key)
        if prev is None:
            seen[key] = field
        elif prev != field:
            conflicts.append((key, str(prev), str(field)))
    return conflicts


def build_alias_index(
    aliases: Iterable[Tuple[str, CanonicalField]],
) -> Mapping[str, CanonicalField]:
    aliases = tuple(aliases)
    conflicts = find_alias_conflicts(aliases)
    if conflicts:
        raise AliasConflictError(conflicts)
    index = {normalize_key(raw): field for raw, field in aliases}
    # Canonical names always resolve to themselves.
    for field in CanonicalField:
        index.setdefault(normalize_key(field.value), field)
    return MappingProxyType(index)


class HeaderCanonicalizer:
    """
    Map header strings to :class:`CanonicalField` values.

    Typical use::

        canon = HeaderCanonicalizer()
        canon.canonicalize("E-Mail ID of the Counsellors")  # CanonicalField.COUNSELLOR_EMAIL
        canon.canonicalize("Hostel Block")                   # "Hostel Block"
    """

    def __init__(self, index: Optional[Mapping[str, CanonicalField]] = None):
        self._index = index if index is not None else DEFAULT_ALIAS_INDEX

    def lookup(self, header: Any) -> Optional[CanonicalField]:
        return self._index.get(normalize_key(header))

    def canonicalize(self, header: Any) -> Union[CanonicalField, str]:
        field = self.lookup(header)
        if field is not None:
            return field
        return "" if header is None else str(header).strip()

    def canonicalize_row(self, headers: Iterable[Any]) -> List[Union[CanonicalField, str]]:
        return [self.canonicalize(h) for h in headers]


DEFAULT_ALIAS_INDEX: Mapping[str, CanonicalField] = build_alias_index(HEADER_ALIASES)

_default = HeaderCanonicalizer()


def canonicalize(header: Any) -> Union[CanonicalField, str]:
    return _default.canonicalize(header)
