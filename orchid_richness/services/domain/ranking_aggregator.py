"""
Domain service: species ranked by raw occurrence count.

Unlike richness, this counts rows, not distinct names, and includes
occurrences outside every conservation area.
"""
from collections import Counter
from typing import Iterable, Optional
import logging

from orchid_richness.domain.models import JoinedOccurrence, TopSpeciesRecord

logger = logging.getLogger(__name__)


class RankingAggregator:
    """Counts occurrences per species and keeps the top N."""
    
    def __init__(
        self,
        include_blank_species: bool = False,
        blank_species_label: str = "(sin especie)",
    ):
        """
        Initialize the aggregator.
        
        Args:
            include_blank_species: Count records without a species name
            blank_species_label: Label used for those records when counted
        """
        self.include_blank_species = include_blank_species
        self.blank_species_label = blank_species_label
    
    def top_species(
        self,
        joined: Iterable[JoinedOccurrence],
        n: int = 10,
    ) -> tuple[TopSpeciesRecord, ...]:
        """
        Rank species by number of occurrence records.
        
        The list is cut at exactly n. Equal counts keep the order in which
        each species first appears in the input, so ties at the cut drop
        the later species.
        
        Args:
            joined: Joined occurrences (matched and unmatched)
            n: Maximum number of species returned
            
        Returns:
            Up to n TopSpeciesRecords sorted by count descending
            
        Raises:
            ValueError: If n is negative
        """
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        
        # Counter preserves first-insertion order and sorted() is stable
        counts: Counter[str] = Counter()
        skipped = 0
        for occurrence in joined:
            species: Optional[str] = occurrence.species
            if species is None:
                if not self.include_blank_species:
                    skipped += 1
                    continue
                species = self.blank_species_label
            counts[species] += 1
        
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:n]
        
        if skipped:
            logger.debug(f"Skipped {skipped} occurrences without species from the ranking")
        logger.info(f"Ranked {len(counts)} species, keeping top {len(ranked)} (n={n})")
        
        return tuple(
            TopSpeciesRecord(species=species, occurrence_count=count)
            for species, count in ranked
        )
