#!/usr/bin/env python3
"""
Result types flowing out of builtins and the pipeline executor.

A stage produces exactly one StageOutcome variant:

    Listing  - structured `ls` output
    Text     - free-form text
    Failure  - a CommandError
    Chdir    - a successful `cd`, carrying the new directory

The only place a Listing is flattened to text is to_stdin().
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from .errors import CommandError


@dataclass(frozen=True)
class ListingEntry:
    """One entry of an `ls` listing."""
    name: str
    kind: str  # 'directory' or 'file'

    @property
    def display_name(self) -> str:
        return self.name + '/' if self.kind == 'directory' else self.name


@dataclass(frozen=True)
class ListingResult:
    """Structured output of `ls`, kept for rich rendering."""
    path: str
    entries: List[ListingEntry] = field(default_factory=list)
    show_hidden: bool = False
    long_format: bool = False
    human_readable: bool = False
    show_blocks: bool = False

    def names(self) -> List[str]:
        return [entry.display_name for entry in self.entries]


@dataclass(frozen=True)
class Listing:
    listing: ListingResult


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Failure:
    error: CommandError


@dataclass(frozen=True)
class Chdir:
    """Successful `cd`; only valid as the sole stage of a line."""
    path: str


StageOutcome = Union[Listing, Text, Failure, Chdir]


def to_stdin(outcome: StageOutcome) -> str:
    """Convert a successful stage outcome into the next stage's stdin."""
    if isinstance(outcome, Listing):
        return '\n'.join(outcome.listing.names())
    elif isinstance(outcome, Text):
        return outcome.text
    raise TypeError(f"cannot pipe a {type(outcome).__name__} outcome")


@dataclass(frozen=True)
class Session:
    """Per-user shell state. Replaced, never mutated, by `cd`."""
    cwd: str

    def apply(self, result: 'EvaluationResult') -> 'Session':
        """Return the session that follows an evaluated line."""
        if result.next_directory == self.cwd:
            return self
        return replace(self, cwd=result.next_directory)


@dataclass(frozen=True)
class EvaluationResult:
    """What the host receives for one submitted line."""
    next_directory: str
    text: Optional[str] = None
    listing: Optional[ListingResult] = None
    error: Optional[CommandError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return self.error.exit_code if self.error else 0
