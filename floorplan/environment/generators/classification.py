"""Assign a functional role to each room from its size and position in the tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

from floorplan.environment.layout import RoomClassification

if TYPE_CHECKING:
    from floorplan.environment.generators.settings import ClassificationPolicy


def classify_room(
    area: int, depth: int, policy: ClassificationPolicy
) -> RoomClassification:
    """
    Classify a room.

    Small rooms become storage. Large rooms near the root of the partition
    tree become lobbies and deeper large rooms become conference rooms.
    Everything else is an office.
    """
    if area <= policy.small_room_area:
        return RoomClassification.STORAGE
    if area >= policy.large_room_area:
        if depth <= policy.shallow_depth:
            return RoomClassification.LOBBY
        return RoomClassification.CONFERENCE
    return RoomClassification.OFFICE
