"""Service for detecting scheduling conflicts between trip placements."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from tripplanner.domain.models import ProposedPlacement, ScheduledPlacement


def overlaps(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    """Half-open interval overlap.

    Exact boundary touches (end_a == start_b) are NOT considered overlaps.
    """
    return start_a < end_b and start_b < end_a


def find_conflicts(
    proposal: ProposedPlacement,
    existing_placements: Iterable[ScheduledPlacement],
    exclude_id: str | None = None,
) -> list[ScheduledPlacement]:
    """Return existing placements whose absolute interval overlaps the proposal.

    Each placement is resolved in its own timezone, so placements from
    different destinations compare on the same UTC timeline. The placement
    matching ``exclude_id`` (the one being updated) is skipped. Input order
    is preserved.
    """
    new = proposal.absolute_interval()
    conflicts: list[ScheduledPlacement] = []
    for placement in existing_placements:
        if exclude_id is not None and placement.id == exclude_id:
            continue
        other = placement.absolute_interval()
        if overlaps(new.start, new.end, other.start, other.end):
            conflicts.append(placement)
    return conflicts
