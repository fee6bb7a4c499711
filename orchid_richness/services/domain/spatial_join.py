"""
Domain service: point-in-polygon join of occurrences to conservation areas.

Each occurrence is tested against every conservation area with a strict
"within" predicate (boundary contact does not count). An envelope
prefilter skips polygons whose bounding box excludes the point; it never
changes the result of the full scan.

Overlapping areas: the first containing area in the supplied order wins,
so every occurrence yields exactly one joined record.
"""
from typing import Iterable
import logging

from orchid_richness.domain.models import (
    ConservationArea,
    JoinedOccurrence,
    OrchidOccurrence,
)
from orchid_richness.utils.spatial_helpers import (
    build_bounds_index,
    containing_indices,
)

logger = logging.getLogger(__name__)


class SpatialJoinEngine:
    """
    Domain service that tags occurrences with their containing area.
    
    Cost is O(points × polygons) in the worst case; the envelope
    prefilter only trims the constant.
    """
    
    def join(
        self,
        points: Iterable[OrchidOccurrence],
        polygons: Iterable[ConservationArea],
    ) -> tuple[JoinedOccurrence, ...]:
        """
        Join occurrences to conservation areas.
        
        Args:
            points: Occurrence records
            polygons: Conservation areas; iteration order is the tie-break
            
        Returns:
            One JoinedOccurrence per input occurrence, in input order.
            area_name is None for points outside every area.
        """
        points = tuple(points)
        polygons = tuple(polygons)
        
        geometries = [area.geometry for area in polygons]
        bounds = build_bounds_index(geometries)
        
        joined = []
        unmatched = 0
        multi_matched = 0
        
        for occurrence in points:
            matches = containing_indices(occurrence.point, geometries, bounds)
            
            if not matches:
                unmatched += 1
                area_name = None
            else:
                if len(matches) > 1:
                    multi_matched += 1
                    logger.debug(
                        f"({occurrence.longitude}, {occurrence.latitude}) lies in "
                        f"{len(matches)} areas, keeping '{polygons[matches[0]].area_name}'"
                    )
                area_name = polygons[matches[0]].area_name
            
            joined.append(JoinedOccurrence.from_occurrence(occurrence, area_name))
        
        logger.info(
            f"Joined {len(points)} occurrences to {len(polygons)} areas: "
            f"{len(points) - unmatched} inside an area, {unmatched} outside"
        )
        if multi_matched:
            logger.warning(f"{multi_matched} occurrences fall in overlapping areas; first area kept")
        
        return tuple(joined)
