"""
Builds the report payload from a pipeline result.

The payload holds plain tables and GeoJSON; drawing the map, table and
charts is left to the renderer.
"""
import math
from collections import defaultdict
from typing import Optional
import logging

from shapely.geometry import mapping

from orchid_richness.domain.models import PipelineResult
from orchid_richness.presentation.models import (
    BarChartSeries,
    PresentationConfig,
    RichnessReport,
    RichnessTableRow,
)
from orchid_richness.utils.geo_projection import geometry_area_km2

logger = logging.getLogger(__name__)


def richness_color(richness: int, max_richness: int, colors: list[str]) -> str:
    """
    Pick a palette color for a richness value.
    
    Zero always maps to the first color; positive values are spread
    evenly over the remaining colors up to max_richness.
    
    Args:
        richness: Richness of the area
        max_richness: Highest richness in the report
        colors: Palette, lightest first
        
    Returns:
        Hex color string
    """
    if richness <= 0 or max_richness <= 0 or len(colors) == 1:
        return colors[0]
    steps = len(colors) - 1
    fraction = min(richness / max_richness, 1.0)
    return colors[min(steps, math.ceil(fraction * steps))]


class ReportBuilder:
    """Turns pipeline tables into the renderer's payload."""
    
    def __init__(self, config: Optional[PresentationConfig] = None):
        self.config = config or PresentationConfig()
    
    def build(self, result: PipelineResult, title: str = "") -> RichnessReport:
        """
        Build the report payload.
        
        Args:
            result: Output of RichnessReportService
            title: Report title
            
        Returns:
            RichnessReport ready for JSON serialization
        """
        richness_by_name = {r.area_name: r.richness for r in result.richness}
        max_richness = max(richness_by_name.values(), default=0)
        colors = self.config.palette.colors
        
        area_features = []
        area_km2: dict[str, float] = defaultdict(float)
        for area in result.areas:
            richness = richness_by_name.get(area.area_name, 0)
            area_km2[area.area_name] += geometry_area_km2(area.geometry)
            area_features.append({
                "type": "Feature",
                "geometry": mapping(area.geometry),
                "properties": {
                    "area_name": area.area_name,
                    "richness": richness,
                    "fill_color": richness_color(richness, max_richness, colors),
                },
            })
        
        marker_features = [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [o.longitude, o.latitude]},
                "properties": {
                    "species": o.species,
                    "locality": o.locality,
                    "event_date": o.event_date,
                    "institution_code": o.institution_code,
                    "occurrence_id": o.occurrence_id,
                    "area_name": o.area_name,
                },
            }
            for o in result.joined
        ]
        
        table = [
            RichnessTableRow(
                area_name=r.area_name,
                richness=r.richness,
                area_km2=round(area_km2.get(r.area_name, 0.0), 2),
            )
            for r in result.richness
        ]
        
        logger.info(
            f"Report payload: {len(area_features)} area features, "
            f"{len(marker_features)} markers, {len(table)} table rows"
        )
        
        return RichnessReport(
            title=title,
            choropleth={"type": "FeatureCollection", "features": area_features},
            markers={"type": "FeatureCollection", "features": marker_features},
            table=table,
            table_page_size=self.config.table_page_size,
            richness_chart=BarChartSeries(
                title=self.config.richness_chart_title,
                categories=[r.area_name for r in result.richness],
                values=[r.richness for r in result.richness],
            ),
            species_chart=BarChartSeries(
                title=self.config.species_chart_title,
                categories=[s.species for s in result.top_species],
                values=[s.occurrence_count for s in result.top_species],
            ),
            map_view=self.config.map_view,
            palette=self.config.palette,
        )
