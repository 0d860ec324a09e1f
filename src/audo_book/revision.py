"""Revision counter owned by whoever finalizes exports."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RevisionCounter:
    """Monotonic export revision.

    Planning only reads :attr:`current`; :meth:`finalize` is called once per
    successful export or copy and is the only way the value moves.
    """

    current: int = 1

    def __post_init__(self) -> None:
        if self.current < 1:
            raise ValueError("Revision numbers start at 1.")

    def finalize(self) -> int:
        finalized = self.current
        self.current += 1
        return finalized
