"""Region, species and hotspot aggregation over filtered sightings.

All three are built on :func:`group_and_count`, which takes a key extractor
and returns ``{key: count}``. Rankings sort by count descending with the key
name as a tie-break so output is reproducible.
"""

from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, NewType, TypeVar

from tick_tracker.schemas import Hotspot, RegionCount, SpeciesCount

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from tick_tracker.datasources.sightings.models import SightingRecord

RegionKey = NewType("RegionKey", str)
SpeciesKey = NewType("SpeciesKey", str)

K = TypeVar("K", bound="Hashable")

_INTENSITY_PLACES = Decimal("0.001")


def region_key(record: SightingRecord) -> RegionKey:
    return RegionKey(record.location)


def species_key(record: SightingRecord) -> SpeciesKey:
    return SpeciesKey(record.species)


def group_and_count(
    records: Iterable[SightingRecord],
    key_fn: Callable[[SightingRecord], K],
) -> Counter[K]:
    """Count records per key."""
    return Counter(key_fn(r) for r in records)


def _ranked(counts: Counter[K]) -> list[tuple[K, int]]:
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def region_counts(records: Iterable[SightingRecord]) -> list[RegionCount]:
    """Sightings per region, busiest first."""
    counts = group_and_count(records, region_key)
    return [RegionCount(region=region, count=n) for region, n in _ranked(counts)]


def species_counts(records: Iterable[SightingRecord]) -> list[SpeciesCount]:
    """
    Sightings per species, most common first.

    Each species reports the latin name of the first record seen for it in
    iteration order, since latin names are not guaranteed consistent.
    """
    latin_by_species: dict[SpeciesKey, str] = {}
    counts: Counter[SpeciesKey] = Counter()
    for record in records:
        key = species_key(record)
        counts[key] += 1
        latin_by_species.setdefault(key, record.latin_name)

    return [
        SpeciesCount(species=species, latin_name=latin_by_species.get(species, ""), count=n)
        for species, n in _ranked(counts)
    ]


def intensity(count: int, max_count: int) -> Decimal:
    """``count / max_count`` rounded half-up to three decimals."""
    ratio = Decimal(count) / Decimal(max_count or 1)
    return ratio.quantize(_INTENSITY_PLACES, rounding=ROUND_HALF_UP)


def hotspots(records: Iterable[SightingRecord]) -> list[Hotspot]:
    """Regions ranked by count with intensity relative to the busiest region."""
    ranked = _ranked(group_and_count(records, region_key))
    max_count = max((n for _, n in ranked), default=1)
    return [
        Hotspot(region=region, count=n, intensity=intensity(n, max_count))
        for region, n in ranked
    ]
