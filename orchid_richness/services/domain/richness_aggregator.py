"""
Domain service: species richness per conservation area.

Richness is the number of distinct, non-null species names among the
occurrences joined to an area. Every area appears in the output, with an
explicit zero when nothing was recorded inside it.
"""
from collections import defaultdict
from typing import Iterable
import logging

from orchid_richness.domain.models import (
    ConservationArea,
    JoinedOccurrence,
    RichnessRecord,
)

logger = logging.getLogger(__name__)


def overall_distinct_species(joined: Iterable[JoinedOccurrence]) -> int:
    """Count distinct non-null species across all occurrences."""
    return len({o.species for o in joined if o.species is not None})


class RichnessAggregator:
    """Groups joined occurrences by area and counts distinct species."""
    
    def aggregate(
        self,
        joined: Iterable[JoinedOccurrence],
        polygons: Iterable[ConservationArea],
    ) -> tuple[RichnessRecord, ...]:
        """
        Compute richness for every conservation area.
        
        Occurrences outside every area are ignored. Areas sharing a name are
        merged into a single record placed where the first of them appears.
        
        Args:
            joined: Output of the spatial join
            polygons: All conservation areas
            
        Returns:
            RichnessRecords sorted by richness descending, ties in area order
        """
        species_by_area: dict[str, set[str]] = defaultdict(set)
        outside = 0
        
        for occurrence in joined:
            if occurrence.area_name is None:
                outside += 1
                continue
            if occurrence.species is not None:
                species_by_area[occurrence.area_name].add(occurrence.species)
        
        # Left join against the full area list; dict keeps first-seen order
        area_names = dict.fromkeys(area.area_name for area in polygons)
        
        unknown = set(species_by_area) - set(area_names)
        if unknown:
            logger.warning(f"Ignoring occurrences tagged with unknown areas: {sorted(unknown)}")
        
        records = [
            RichnessRecord(area_name=name, richness=len(species_by_area.get(name, ())))
            for name in area_names
        ]
        records.sort(key=lambda r: r.richness, reverse=True)
        
        empty = sum(1 for r in records if r.richness == 0)
        logger.info(
            f"Richness computed for {len(records)} areas "
            f"({empty} without records, {outside} occurrences outside all areas)"
        )
        return tuple(records)
