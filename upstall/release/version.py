"""Version comparison for release tags and installed-version strings.

Structured form: dotted numeric release with an optional pre-release label,
e.g. ``7.5.4``, ``v7.5.0-preview.3``, ``7.4.0-rc.1``. When either side does
not parse, comparison falls back to byte-wise ordering of the inputs
(after the ``v`` strip). The fallback can misorder non-canonical tags such
as ``"9"`` vs ``"10x"``. Comparisons never raise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from itertools import zip_longest

__all__ = ["Ordering", "ParsedVersion", "compare", "parse_version", "strip_prefix"]


_VERSION_RE = re.compile(
    r"^(?P<release>\d+(?:\.\d+)*)"
    r"(?:[-+_]?(?P<label>[A-Za-z]+)(?:[.\-_]?(?P<pre>\d+(?:\.\d+)*))?)?$"
)


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class ParsedVersion:
    release: tuple[int, ...]
    label: str | None = None
    pre: tuple[int, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return self.label is not None


def strip_prefix(raw: str) -> str:
    """Drop surrounding whitespace and a single leading 'v'/'V'."""
    s = raw.strip()
    if s[:1] in ("v", "V"):
        return s[1:]
    return s


def parse_version(raw: str) -> ParsedVersion | None:
    m = _VERSION_RE.match(strip_prefix(raw))
    if m is None:
        return None
    release = tuple(int(p) for p in m.group("release").split("."))
    label = m.group("label")
    pre_raw = m.group("pre")
    pre = tuple(int(p) for p in pre_raw.split(".")) if pre_raw else ()
    return ParsedVersion(release=release, label=label.lower() if label else None, pre=pre)


def _cmp[T: (int, str, bytes)](a: T, b: T) -> Ordering:
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


def _cmp_numbers(a: tuple[int, ...], b: tuple[int, ...]) -> Ordering:
    # Missing trailing components count as zero: 7.5 == 7.5.0
    for x, y in zip_longest(a, b, fillvalue=0):
        order = _cmp(x, y)
        if order != Ordering.EQUAL:
            return order
    return Ordering.EQUAL


def _cmp_parsed(a: ParsedVersion, b: ParsedVersion) -> Ordering:
    order = _cmp_numbers(a.release, b.release)
    if order != Ordering.EQUAL:
        return order

    if a.label is None or b.label is None:
        if a.label is None and b.label is None:
            return Ordering.EQUAL
        # A pre-release sorts below the release it precedes
        return Ordering.GREATER if a.label is None else Ordering.LESS

    order = _cmp(a.label, b.label)
    if order != Ordering.EQUAL:
        return order
    return _cmp_numbers(a.pre, b.pre)


def compare(a: str, b: str) -> Ordering:
    """Compare two version strings.

    Args:
        a: Left version (tag or installed version)
        b: Right version

    Returns:
        Ordering of `a` relative to `b`. Never raises.
    """
    pa = parse_version(a)
    pb = parse_version(b)
    if pa is not None and pb is not None:
        return _cmp_parsed(pa, pb)
    # Byte-wise fallback
    return _cmp(strip_prefix(a).encode("utf-8"), strip_prefix(b).encode("utf-8"))
