"""Per-feature diagnostics for a clipping pass.

The cropper never reports dropped features through exceptions. Callers
that need to know why a feature is missing from the result pass a
``CropDiagnostics`` sink and read it afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger("geocrop.audit.diagnostics")


class CropOutcome(Enum):
    """What happened to one input feature."""

    KEPT = "kept"                       # inside, unchanged
    CLIPPED = "clipped"                 # inside after cutting
    SKIPPED_MALFORMED = "skipped_malformed"
    DROPPED_OUTSIDE = "dropped_outside"
    DROPPED_EMPTY = "dropped_empty"     # intersected, but nothing survived clipping
    DROPPED_INVALID = "dropped_invalid"
    DROPPED_DUPLICATE = "dropped_duplicate"
    DROPPED_ERROR = "dropped_error"


@dataclass(frozen=True)
class DiagnosticEntry:
    """One record per input feature."""

    index: int
    outcome: CropOutcome
    geometry_kind: Optional[str] = None
    detail: str = ""


class CropDiagnostics:
    """Collects one ``DiagnosticEntry`` per input feature.

    Usage::

        sink = CropDiagnostics()
        crop_features(boundary, features, sink=sink)
        print(sink.summary())
        for entry in sink.entries_for(CropOutcome.DROPPED_ERROR):
            print(entry.index, entry.detail)
    """

    def __init__(self) -> None:
        self._entries: list[DiagnosticEntry] = []

    def record(
        self,
        index: int,
        outcome: CropOutcome,
        geometry_kind: Optional[str] = None,
        detail: str = "",
    ) -> None:
        self._entries.append(DiagnosticEntry(index, outcome, geometry_kind, detail))
        if outcome is CropOutcome.DROPPED_ERROR:
            logger.debug("Feature %d dropped after error: %s", index, detail)

    @property
    def entries(self) -> list[DiagnosticEntry]:
        return list(self._entries)

    def entries_for(self, outcome: CropOutcome) -> list[DiagnosticEntry]:
        return [e for e in self._entries if e.outcome is outcome]

    def summary(self) -> dict:
        """Counts per outcome plus processed/kept totals."""
        counts = {outcome.value: 0 for outcome in CropOutcome}
        for entry in self._entries:
            counts[entry.outcome.value] += 1
        kept = counts[CropOutcome.KEPT.value] + counts[CropOutcome.CLIPPED.value]
        # "kept" here is the total of kept and clipped, not the KEPT count alone
        return {
            **counts,
            "processed": len(self._entries),
            "kept": kept,
            "dropped": len(self._entries) - kept,
        }

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
