"""Dry-run summary of a classified batch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .classify import NewContract, Reactivation, UnchangedContract

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .classify import Classification


@dataclass(frozen=True, slots=True)
class PreviewItem:
    name: str
    email: str
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class PreviewSummary:
    """Read-only projection of what a commit would do; never persisted."""

    total: int
    new: tuple[PreviewItem, ...] = ()
    unchanged: tuple[PreviewItem, ...] = ()
    reactivation: tuple[PreviewItem, ...] = ()

    @property
    def count_new(self) -> int:
        return len(self.new)

    @property
    def count_unchanged(self) -> int:
        return len(self.unchanged)

    @property
    def count_reactivation(self) -> int:
        return len(self.reactivation)

    def to_dict(self) -> dict[str, object]:
        def _items(items: tuple[PreviewItem, ...]) -> list[dict[str, str | None]]:
            return [{"name": i.name, "email": i.email, "reason": i.reason} for i in items]

        return {
            "total": self.total,
            "new": self.count_new,
            "unchanged": self.count_unchanged,
            "reactivation": self.count_reactivation,
            "details": {
                "new": _items(self.new),
                "unchanged": _items(self.unchanged),
                "reactivation": _items(self.reactivation),
            },
        }


def build_preview(classifications: Iterable[Classification]) -> PreviewSummary:
    """Aggregate classifications into per-outcome counts and listings."""

    new: list[PreviewItem] = []
    unchanged: list[PreviewItem] = []
    reactivation: list[PreviewItem] = []
    total = 0
    for classification in classifications:
        total += 1
        item = PreviewItem(
            name=classification.row.name,
            email=classification.row.email,
            reason=classification.reason,
        )
        if isinstance(classification, NewContract):
            new.append(item)
        elif isinstance(classification, Reactivation):
            reactivation.append(item)
        elif isinstance(classification, UnchangedContract):
            unchanged.append(item)
    return PreviewSummary(
        total=total,
        new=tuple(new),
        unchanged=tuple(unchanged),
        reactivation=tuple(reactivation),
    )
