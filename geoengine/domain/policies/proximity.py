"""Rank caller-supplied entities by distance from a point."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from geoengine.domain.geo_math import distance_km, format_distance
from geoengine.domain.value_objects.coordinates import Coordinates

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ProximityMatch(Generic[T]):
    """One ranked candidate."""

    entity: T
    distance_km: float
    distance_label: str


def find_nearest(
    origin: Coordinates,
    candidates: Iterable[T],
    coord_extractor: Callable[[T], Coordinates | None],
    max_distance_km: float | None = None,
    limit: int | None = None,
) -> list[ProximityMatch[T]]:
    """Rank `candidates` by great-circle distance from `origin`.

    Args:
        origin: the query point.
        candidates: already-fetched entities (retrieval is the caller's job).
        coord_extractor: returns an entity's location, or None if unknown.
        max_distance_km: drop candidates farther than this, when given.
        limit: keep at most this many results; None returns all.

    Returns:
        Matches sorted ascending by distance. Ties keep input order.
        Candidates without usable coordinates are skipped.

    Raises:
        ValueError: if the origin is out of range or limit is negative.
    """
    problem = origin.validation_error()
    if problem:
        raise ValueError(f"Invalid origin: {problem}")
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")

    scored: list[tuple[T, float]] = []
    skipped = 0
    for entity in candidates:
        location = coord_extractor(entity)
        if location is None or not location.is_valid():
            skipped += 1
            continue
        d = distance_km(origin, location)
        if max_distance_km is not None and d > max_distance_km:
            continue
        scored.append((entity, d))

    if skipped:
        logger.debug("Proximity search skipped %d candidates without coordinates", skipped)

    # sorted() is stable, which keeps equal-distance candidates in input order
    scored.sort(key=lambda pair: pair[1])
    if limit is not None:
        scored = scored[:limit]

    return [
        ProximityMatch(entity=entity, distance_km=d, distance_label=format_distance(d))
        for entity, d in scored
    ]
