"""Directory relevance probe.

Decides whether a segment applies to a directory by looking only at the
directory's immediate entries. Checks run in a fixed order and stop at the
first decisive answer:

1. exclusion folders (a hit forces a negative answer)
2. exact file names
3. file extensions
4. exact folder names

The probe never raises: an unreadable or vanished directory simply makes
the affected check report "no match".
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, Optional, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeSpec:
    """Markers that make a directory relevant (or explicitly irrelevant)."""
    file_names: FrozenSet[str] = field(default_factory=frozenset)
    extensions: FrozenSet[str] = field(default_factory=frozenset)  # without the leading "."
    folder_names: FrozenSet[str] = field(default_factory=frozenset)
    exclusion_folder_names: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        file_names: Iterable[str] = (),
        extensions: Iterable[str] = (),
        folder_names: Iterable[str] = (),
        exclusion_folder_names: Iterable[str] = (),
    ) -> "ProbeSpec":
        return cls(
            file_names=frozenset(file_names),
            extensions=frozenset(extensions),
            folder_names=frozenset(folder_names),
            exclusion_folder_names=frozenset(exclusion_folder_names),
        )


def _extension(name: str) -> Optional[str]:
    """Text after the last dot, or None for dotfiles and names without one."""
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or not ext:
        return None
    return ext


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError as e:
        logger.debug(f"Probe could not stat {path}: {e}")
        return False


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError as e:
        logger.debug(f"Probe could not stat {path}: {e}")
        return False


def _has_folder(directory: Path, names: FrozenSet[str]) -> bool:
    return any(_is_dir(directory / name) for name in sorted(names))


def _has_file(directory: Path, names: FrozenSet[str]) -> bool:
    return any(_is_file(directory / name) for name in sorted(names))


def _has_extension(directory: Path, extensions: FrozenSet[str]) -> bool:
    if not extensions:
        return False
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if _extension(entry.name) not in extensions:
                    continue
                try:
                    if entry.is_file():
                        return True
                except OSError as e:
                    logger.debug(f"Probe could not stat {entry.path}: {e}")
    except OSError as e:
        logger.debug(f"Probe could not list {directory}: {e}")
    return False


@dataclass(frozen=True)
class ProbeMatch:
    """Answer of a probe and the check that decided it."""
    relevant: bool
    reason: str  # "excluded" | "file" | "extension" | "folder" | "none"


@dataclass(frozen=True)
class ProbeCheck:
    reason: str
    verdict: bool  # answer when the predicate matches
    predicate: Callable[[Path, ProbeSpec], bool]


PROBE_CHECKS: Tuple[ProbeCheck, ...] = (
    ProbeCheck("excluded", False, lambda d, s: _has_folder(d, s.exclusion_folder_names)),
    ProbeCheck("file", True, lambda d, s: _has_file(d, s.file_names)),
    ProbeCheck("extension", True, lambda d, s: _has_extension(d, s.extensions)),
    ProbeCheck("folder", True, lambda d, s: _has_folder(d, s.folder_names)),
)

NO_MATCH = ProbeMatch(relevant=False, reason="none")


def scan(directory: Union[str, os.PathLike, Path], spec: ProbeSpec) -> ProbeMatch:
    """Run the ordered checks against `directory`, stopping at the first hit."""
    directory = Path(directory)
    for check in PROBE_CHECKS:
        if check.predicate(directory, spec):
            return ProbeMatch(relevant=check.verdict, reason=check.reason)
    return NO_MATCH


def evaluate(directory: Union[str, os.PathLike, Path], spec: ProbeSpec) -> bool:
    """Return True if `directory` is relevant according to `spec`.

    Args:
        directory: Directory whose immediate entries are inspected
        spec: Marker sets to look for

    Returns:
        False as soon as an exclusion folder is found, True on the first
        inclusion marker, False when nothing matches.
    """
    return scan(directory, spec).relevant
