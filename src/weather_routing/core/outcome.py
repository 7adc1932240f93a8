"""Structured validation outcomes.

Every fallible operation returns an :class:`Outcome` (or a :class:`Result`
bundling a value with its outcome) instead of raising. Outcomes distinguish
blocking errors from advisory warnings; deciding how to show them to a human
is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterable, TypeVar

T = TypeVar("T")


class Severity(Enum):
    """Ordered severity of an outcome."""

    ACCEPTED = 0
    WARNING = 1
    REJECTED = 2


class ErrorKind(str, Enum):
    """What went wrong."""

    PARSE_ERROR = "ParseError"
    RANGE_ERROR = "RangeError"
    ZERO_DURATION = "ZeroDuration"
    INVALID_DATE_TIME = "InvalidDateTime"
    INSUFFICIENT_RESOLUTION = "InsufficientResolution"
    MISSING_BOAT_FILE = "MissingBoatFile"

    @property
    def blocking(self) -> bool:
        return self not in _SOFT_KINDS


_SOFT_KINDS = frozenset(
    {ErrorKind.INSUFFICIENT_RESOLUTION, ErrorKind.MISSING_BOAT_FILE}
)


@dataclass(frozen=True)
class Issue:
    """Single finding of a check.

    Attributes
    ----------
    kind : ErrorKind
        Category of the finding.
    reason : str
        Short human-readable description.
    detail : str, optional
        Offending input (e.g. the malformed token).
    """

    kind: ErrorKind
    reason: str
    detail: str | None = None

    @property
    def severity(self) -> Severity:
        return Severity.REJECTED if self.kind.blocking else Severity.WARNING

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "reason": self.reason, "detail": self.detail}

    def __str__(self) -> str:
        if self.detail is None:
            return f"{self.kind.value}: {self.reason}"
        return f"{self.kind.value}: {self.reason} ({self.detail!r})"


@dataclass(frozen=True)
class Outcome:
    """Accepted, Warning or Rejected, with the issues that led there."""

    issues: tuple[Issue, ...] = ()

    @classmethod
    def accepted(cls) -> Outcome:
        return cls()

    @classmethod
    def of(cls, kind: ErrorKind, reason: str, detail: str | None = None) -> Outcome:
        """Outcome holding a single issue; its severity follows from ``kind``."""
        return cls(issues=(Issue(kind=kind, reason=reason, detail=detail),))

    @classmethod
    def combine(cls, outcomes: Iterable[Outcome]) -> Outcome:
        """Merge outcomes, keeping issue order."""
        return cls(issues=tuple(issue for o in outcomes for issue in o.issues))

    @property
    def severity(self) -> Severity:
        return max(
            (issue.severity for issue in self.issues),
            key=lambda s: s.value,
            default=Severity.ACCEPTED,
        )

    @property
    def rejected(self) -> bool:
        return self.severity is Severity.REJECTED

    @property
    def warnings(self) -> tuple[Issue, ...]:
        return tuple(i for i in self.issues if i.severity is Severity.WARNING)

    @property
    def errors(self) -> tuple[Issue, ...]:
        return tuple(i for i in self.issues if i.severity is Severity.REJECTED)

    @property
    def kinds(self) -> tuple[ErrorKind, ...]:
        return tuple(i.kind for i in self.issues)

    def has(self, kind: ErrorKind) -> bool:
        return kind in self.kinds

    def __add__(self, other: Outcome) -> Outcome:
        return Outcome(issues=self.issues + other.issues)

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.name,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True)
class Result(Generic[T]):
    """Value paired with the outcome of producing it.

    ``value`` is ``None`` when nothing could be produced. A Rejected result
    may still carry a fully assembled value for display; callers must not
    forward it.
    """

    value: T | None = None
    outcome: Outcome = Outcome()

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.outcome.rejected

    @classmethod
    def rejected(
        cls, kind: ErrorKind, reason: str, detail: str | None = None, value=None
    ) -> Result:
        return cls(value=value, outcome=Outcome.of(kind, reason, detail))
