"""
Application service: Orchestration layer for a richness report run.
"""
from pathlib import Path
from typing import Optional, Union
import logging

from orchid_richness.config import Settings, settings as default_settings
from orchid_richness.domain.models import LoadedDatasets, PipelineResult
from orchid_richness.infrastructure.geometry_loader import GeometryLoader
from orchid_richness.services.domain.ranking_aggregator import RankingAggregator
from orchid_richness.services.domain.richness_aggregator import RichnessAggregator
from orchid_richness.services.domain.spatial_join import SpatialJoinEngine

logger = logging.getLogger(__name__)


class RichnessReportService:
    """
    Application service for richness report runs.
    
    Orchestrates loading, joining and aggregation.
    Follows the application layer pattern - no business logic here,
    only coordination between infrastructure and domain layers.
    """
    
    def __init__(
        self,
        loader: GeometryLoader,
        join_engine: SpatialJoinEngine,
        richness_aggregator: RichnessAggregator,
        ranking_aggregator: RankingAggregator,
        top_n: int = 10,
    ):
        """
        Initialize the service with dependencies.
        
        Args:
            loader: Reads both sources into domain records
            join_engine: Tags occurrences with their containing area
            richness_aggregator: Distinct species per area
            ranking_aggregator: Occurrence counts per species
            top_n: Default ranking length
        """
        self.loader = loader
        self.join_engine = join_engine
        self.richness_aggregator = richness_aggregator
        self.ranking_aggregator = ranking_aggregator
        self.top_n = top_n
    
    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "RichnessReportService":
        """
        Build the service with every component configured from settings.
        
        Args:
            config: Settings to use (defaults to global settings)
            
        Returns:
            RichnessReportService instance
        """
        config = config or default_settings
        return cls(
            loader=GeometryLoader(config),
            join_engine=SpatialJoinEngine(),
            richness_aggregator=RichnessAggregator(),
            ranking_aggregator=RankingAggregator(
                include_blank_species=config.include_blank_species,
                blank_species_label=config.blank_species_label,
            ),
            top_n=config.top_species_limit,
        )
    
    def run(
        self,
        polygon_path: Union[str, Path],
        occurrence_path: Union[str, Path],
        top_n: Optional[int] = None,
    ) -> PipelineResult:
        """
        Load both sources and compute the richness tables.
        
        This method orchestrates:
        1. Loading conservation areas and occurrences
        2. Joining occurrences to areas
        3. Aggregating richness per area
        4. Ranking species by occurrence count
        
        Args:
            polygon_path: Conservation area vector file
            occurrence_path: Occurrence table
            top_n: Ranking length (defaults to the service setting)
            
        Returns:
            PipelineResult with joined occurrences, richness and ranking
            
        Raises:
            LoadError: If a source cannot be read
            CRSMismatchError: If the polygons cannot be normalized to WGS84
        """
        datasets = self.loader.load(polygon_path, occurrence_path)
        return self.compute(datasets, top_n=top_n)
    
    def compute(
        self,
        datasets: LoadedDatasets,
        top_n: Optional[int] = None,
    ) -> PipelineResult:
        """
        Compute the richness tables from already loaded datasets.
        
        Args:
            datasets: Areas and occurrences in a shared CRS
            top_n: Ranking length (defaults to the service setting)
            
        Returns:
            PipelineResult
        """
        n = self.top_n if top_n is None else top_n
        
        joined = self.join_engine.join(datasets.occurrences, datasets.areas)
        richness = self.richness_aggregator.aggregate(joined, datasets.areas)
        top_species = self.ranking_aggregator.top_species(joined, n)
        
        logger.info(
            f"Pipeline complete: {len(joined)} joined occurrences, "
            f"{len(richness)} richness records, {len(top_species)} ranked species"
        )
        
        return PipelineResult(
            areas=datasets.areas,
            joined=joined,
            richness=richness,
            top_species=top_species,
        )
