"""Course deviation angles explored by the isochrone search."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, Iterator, Sequence

import numpy as np
import pandas as pd

from .outcome import ErrorKind, Result
from .units import ANGLE_DECIMALS, canonical_degrees
from .validation import check_degree_step_count, check_generation_range

# Slack when deciding whether the last step still fits below ``to``
_RANGE_TOLERANCE = 1e-9


def _canonical_sorted(values: Iterable[float]) -> tuple[float, ...]:
    angles = canonical_degrees(np.fromiter(values, dtype=float))
    return tuple(float(v) for v in np.unique(angles))


@dataclass(frozen=True)
class DegreeStepSet:
    """Ordered set of degree steps.

    Sets built by :meth:`generate`, :meth:`from_text` or :meth:`canonical`
    hold angles in [-180, 180), sorted ascending and without duplicates.
    The manual edits :meth:`insert`, :meth:`remove` and :meth:`clear` keep the
    order the caller chose; the next canonicalization restores the invariant.

    Attributes
    ----------
    values : tuple[float, ...]
        Angles in degrees.
    """

    values: tuple[float, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    @classmethod
    def from_values(cls, values: Iterable[float]) -> DegreeStepSet:
        """Canonical set from arbitrary angles."""
        return cls(values=_canonical_sorted(values))

    @classmethod
    def generate(
        cls, from_degrees: float, to_degrees: float, by_degrees: float
    ) -> Result[DegreeStepSet]:
        """Generate the symmetric fan ``±from, ±(from + by), ... <= to``.

        Parameters
        ----------
        from_degrees : float
            First deviation, ``0 <= from < 180``.
        to_degrees : float
            Last deviation (inclusive), ``0 < to <= 180`` and ``from < to``.
        by_degrees : float
            Increment, ``0 < by < 180``.

        Returns
        -------
        Result[DegreeStepSet]
            A fresh set replacing whatever was there before, or a RangeError
            rejection with no value.
        """
        outcome = check_generation_range(from_degrees, to_degrees, by_degrees)
        if outcome.rejected:
            return Result(value=None, outcome=outcome)

        count = int(np.floor((to_degrees - from_degrees) / by_degrees + _RANGE_TOLERANCE))
        magnitudes = np.round(
            from_degrees + by_degrees * np.arange(count + 1), ANGLE_DECIMALS
        )
        magnitudes = np.minimum(magnitudes, to_degrees)
        steps = cls.from_values(np.concatenate([magnitudes, -magnitudes]))
        return Result(value=steps, outcome=check_degree_step_count(steps))

    @classmethod
    def from_text(cls, tokens: Sequence[str]) -> Result[DegreeStepSet]:
        """Parse decimal-angle tokens into a canonical set.

        A single malformed token rejects the whole input with a ParseError
        naming that token.
        """
        angles = []
        for token in tokens:
            try:
                angle = float(token)
            except (TypeError, ValueError):
                return Result.rejected(
                    ErrorKind.PARSE_ERROR, "malformed degree step", str(token)
                )
            if not math.isfinite(angle):
                return Result.rejected(
                    ErrorKind.PARSE_ERROR, "malformed degree step", str(token)
                )
            angles.append(angle)
        steps = cls.from_values(angles)
        return Result(value=steps, outcome=check_degree_step_count(steps))

    def to_text(self) -> list[str]:
        """Render with one decimal. Precision below 0.1 degrees is lost."""
        return [f"{v:.1f}" for v in self.values]

    def to_list(self) -> list[float]:
        return list(self.values)

    def canonical(self) -> DegreeStepSet:
        return DegreeStepSet.from_values(self.values)

    @property
    def is_symmetric(self) -> bool:
        present = set(self.values)
        return all(canonical_degrees(-v) in present for v in self.values)

    def insert(self, value: float, index: int | None = None) -> DegreeStepSet:
        """Insert before ``index`` (the selection) or append when there is none."""
        values = list(self.values)
        if index is None or index < 0:
            index = len(values)
        values.insert(index, float(value))
        return DegreeStepSet(values=tuple(values))

    def remove(self, index: int) -> DegreeStepSet:
        values = list(self.values)
        del values[index]
        return DegreeStepSet(values=tuple(values))

    def clear(self) -> DegreeStepSet:
        return DegreeStepSet()

    @property
    def data_frame(self) -> pd.DataFrame:
        """One row per step with the degree value and its display text."""
        return pd.DataFrame({"degrees": self.to_list(), "text": self.to_text()})
