from __future__ import annotations

from marketstate.core.state import (
    HIGHER_LOW_PREFIX,
    LOWER_HIGH_PREFIX,
    RANGE_HIGH,
    RANGE_LOW,
    STATUS_TEXT,
    Annotation,
    HorizontalLine,
    StatusText,
)

# Names the chart indicator has always removed before redrawing. They do not
# match the marker names it draws, so trend markers pile up on the chart.
LEGACY_HIGH_PREFIX = "HigherHigh"
LEGACY_LOW_PREFIX = "LowerLow"


def stale_annotation_names(lookback_period: int, legacy: bool = True) -> list[str]:
    """
    Names to remove before applying a new classification batch.

    legacy=True reproduces the historical removal set (leaks trend markers);
    legacy=False removes the marker names that are actually drawn.
    """
    high_prefix, low_prefix = (
        (LEGACY_HIGH_PREFIX, LEGACY_LOW_PREFIX) if legacy else (LOWER_HIGH_PREFIX, HIGHER_LOW_PREFIX)
    )
    names = [RANGE_HIGH, RANGE_LOW]
    for i in range(lookback_period):
        names.append(f"{high_prefix}{i}")
        names.append(f"{low_prefix}{i}")
    return names


class AnnotationBoard:
    """
    In-memory annotation sink keyed by name. Adding a name replaces it.
    """

    def __init__(self) -> None:
        self._items: dict[str, Annotation] = {}

    def remove(self, name: str) -> bool:
        return self._items.pop(name, None) is not None

    def add(self, annotation: Annotation) -> None:
        self._items[annotation.name] = annotation

    def apply(self, remove_names: list[str], annotations: tuple[Annotation, ...] | list[Annotation]) -> int:
        removed = sum(1 for n in remove_names if self.remove(n))
        for a in annotations:
            self.add(a)
        return removed

    def names(self) -> list[str]:
        return list(self._items)

    def lines(self) -> list[HorizontalLine]:
        return [a for a in self._items.values() if isinstance(a, HorizontalLine)]

    @property
    def status_text(self) -> str:
        a = self._items.get(STATUS_TEXT)
        return a.text if isinstance(a, StatusText) else ""

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items
