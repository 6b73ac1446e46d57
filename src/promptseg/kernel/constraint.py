"""Version-constraint evaluation.

Constraints use the semver requirement grammar: comparators separated by
commas are AND-ed together, each comparator being an optional operator
(`=`, `>`, `>=`, `<`, `<=`, `~`, `^`) followed by a full or partial
version (`1`, `1.2`, `1.2.3`, `1.2.3-beta.1`). Wildcards (`*`, `x`, `X`)
may replace trailing components. A bare version means `^`; a bare `*` or
an empty constraint matches everything.

Every comparator is lowered to one or two primitive bounds compared with
`semver.Version`, so pre-release tags order by semver rules and numeric
components with leading zeros are rejected.

Evaluation is fail-open: an absent or unparseable constraint counts as
compatible. The runtime version text, on the other hand, must embed a
MAJOR.MINOR.PATCH triple; `is_compatible` raises VersionExtractionError
when it does not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from semver import Version

VERSION_TRIPLE_RE = re.compile(r"\d+\.\d+\.\d+")

_WILDCARDS = {"*", "x", "X"}

_COMPARATOR_RE = re.compile(
    r"""
    ^\s*
    (?P<op>>=|<=|>|<|=|~|\^)?
    \s*
    (?P<major>0|[1-9]\d*|[*xX])
    (?:\.(?P<minor>0|[1-9]\d*|[*xX])
        (?:\.(?P<patch>0|[1-9]\d*|[*xX])
            (?:-(?P<pre>[0-9A-Za-z][0-9A-Za-z.-]*))?
            (?:\+(?P<build>[0-9A-Za-z][0-9A-Za-z.-]*))?
        )?
    )?
    \s*$
    """,
    re.VERBOSE,
)


class ConstraintParseError(ValueError):
    """Raised when a constraint string is not a valid requirement."""
    pass


class VersionExtractionError(ValueError):
    """Raised when runtime version text contains no MAJOR.MINOR.PATCH triple."""
    pass


# A primitive bound: (operator, version) with operator in {"==", ">", ">=", "<", "<="}
Bound = Tuple[str, Version]


def _version(major: int, minor: int = 0, patch: int = 0, pre: Optional[str] = None) -> Version:
    text = f"{major}.{minor}.{patch}"
    if pre:
        text = f"{text}-{pre}"
    try:
        return Version.parse(text)
    except ValueError as e:
        raise ConstraintParseError(f"Invalid version in constraint: {text}") from e


def _caret_upper(major: int, minor: Optional[int], patch: Optional[int]) -> Version:
    if major > 0 or minor is None:
        return _version(major + 1)
    if minor > 0 or patch is None:
        return _version(0, minor + 1)
    return _version(0, 0, patch + 1)


@dataclass(frozen=True)
class Comparator:
    """One comparator of a requirement, already lowered to bounds."""
    text: str
    bounds: Tuple[Bound, ...]
    release: Optional[Tuple[int, int, int]] = None  # set only when a pre-release tag is given

    def matches(self, version: Version) -> bool:
        for op, bound in self.bounds:
            if op == "==" and not version == bound:
                return False
            if op == ">" and not version > bound:
                return False
            if op == ">=" and not version >= bound:
                return False
            if op == "<" and not version < bound:
                return False
            if op == "<=" and not version <= bound:
                return False
        return True


def parse_comparator(text: str) -> Comparator:
    """Parse a single comparator such as `>=12.0.0`, `^1.2` or `1.x`.

    Raises:
        ConstraintParseError: If `text` is not a valid comparator
    """
    match = _COMPARATOR_RE.match(text)
    if match is None:
        raise ConstraintParseError(f"Invalid comparator: {text!r}")

    op = match.group("op")
    parts = [match.group("major"), match.group("minor"), match.group("patch")]
    pre = match.group("pre")

    # Wildcards may only replace trailing components
    numbers: List[int] = []
    wildcard = False
    for part in parts:
        if part is None:
            break
        if part in _WILDCARDS:
            wildcard = True
            continue
        if wildcard:
            raise ConstraintParseError(f"Wildcard must be trailing: {text!r}")
        numbers.append(int(part))
    if pre and (wildcard or len(numbers) < 3):
        raise ConstraintParseError(f"Pre-release requires a full version: {text!r}")

    if not numbers:
        if op not in (None, "="):
            raise ConstraintParseError(f"Operator {op!r} cannot apply to a bare wildcard: {text!r}")
        return Comparator(text=text.strip(), bounds=())

    if op is None:
        op = "=" if wildcard else "^"

    major = numbers[0]
    minor = numbers[1] if len(numbers) > 1 else None
    patch = numbers[2] if len(numbers) > 2 else None
    full = patch is not None
    lower = _version(major, minor or 0, patch or 0, pre)

    bounds: Tuple[Bound, ...]
    if op == "=":
        if full:
            bounds = (("==", lower),)
        elif minor is not None:
            bounds = ((">=", lower), ("<", _version(major, minor + 1)))
        else:
            bounds = ((">=", lower), ("<", _version(major + 1)))
    elif op == ">":
        if full:
            bounds = ((">", lower),)
        elif minor is not None:
            bounds = ((">=", _version(major, minor + 1)),)
        else:
            bounds = ((">=", _version(major + 1)),)
    elif op == ">=":
        bounds = ((">=", lower),)
    elif op == "<":
        bounds = (("<", lower),)
    elif op == "<=":
        if full:
            bounds = (("<=", lower),)
        elif minor is not None:
            bounds = (("<", _version(major, minor + 1)),)
        else:
            bounds = (("<", _version(major + 1)),)
    elif op == "~":
        if minor is not None:
            bounds = ((">=", lower), ("<", _version(major, minor + 1)))
        else:
            bounds = ((">=", lower), ("<", _version(major + 1)))
    else:  # "^"
        bounds = ((">=", lower), ("<", _caret_upper(major, minor, patch)))

    release = (major, minor, patch) if pre else None
    return Comparator(text=text.strip(), bounds=bounds, release=release)


@dataclass(frozen=True)
class VersionRequirement:
    """A parsed, comma-separated requirement; all comparators must match."""
    comparators: Tuple[Comparator, ...]

    @classmethod
    def parse(cls, text: str) -> "VersionRequirement":
        """Parse a requirement string.

        Raises:
            ConstraintParseError: If any comparator is malformed
        """
        if not text.strip():
            return cls(comparators=())
        return cls(comparators=tuple(parse_comparator(part) for part in text.split(",")))

    def matches(self, version: Version) -> bool:
        if version.prerelease and not self._allows_prerelease(version):
            return False
        return all(c.matches(version) for c in self.comparators)

    def _allows_prerelease(self, version: Version) -> bool:
        # Pre-releases only match comparators that name a pre-release of the same release
        release = (version.major, version.minor, version.patch)
        return any(c.release == release for c in self.comparators)


def extract_version_triple(text: str) -> str:
    """Return the first MAJOR.MINOR.PATCH substring of `text`.

    Raises:
        VersionExtractionError: If `text` contains no such substring
    """
    match = VERSION_TRIPLE_RE.search(text)
    if match is None:
        raise VersionExtractionError(f"No MAJOR.MINOR.PATCH version found in {text.strip()!r}")
    return match.group(0)


def is_compatible(version_text: str, constraint: Optional[str]) -> bool:
    """Check a runtime version against an optional declared constraint.

    Args:
        version_text: Free-form runtime output, e.g. "v12.0.0\\n"
        constraint: Declared requirement, or None when nothing is declared

    Returns:
        False only when the constraint is present, parses, and is violated.

    Raises:
        VersionExtractionError: If `version_text` embeds no version triple
    """
    if constraint is None:
        return True
    try:
        requirement = VersionRequirement.parse(constraint)
    except ConstraintParseError:
        return True

    triple = extract_version_triple(version_text)
    try:
        version = Version.parse(triple)
    except ValueError:
        return True
    return requirement.matches(version)
