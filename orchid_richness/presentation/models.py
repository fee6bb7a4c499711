"""
Presentation models using Pydantic.

PresentationConfig is passed explicitly to the report builder; the map
view and palette are never module-level state.
"""
from typing import Any, List
from pydantic import BaseModel, Field


class MapView(BaseModel):
    """Initial map viewport."""
    center_lat: float = Field(
        default=9.75,
        description="Latitude of the map center in degrees",
        examples=[9.75]
    )
    center_lon: float = Field(
        default=-84.0,
        description="Longitude of the map center in degrees",
        examples=[-84.0]
    )
    zoom: int = Field(default=7, ge=0, le=20)
    tiles: str = Field(default="CartoDB positron", description="Base map tile set")


class ColorPalette(BaseModel):
    """Sequential palette for the choropleth, lightest color first."""
    name: str = "YlGn"
    colors: List[str] = Field(
        default_factory=lambda: [
            "#ffffcc", "#d9f0a3", "#addd8e", "#78c679", "#31a354", "#006837",
        ],
        min_length=1,
    )


class PresentationConfig(BaseModel):
    """Everything the renderer needs besides the data."""
    map_view: MapView = Field(default_factory=MapView)
    palette: ColorPalette = Field(default_factory=ColorPalette)
    table_page_size: int = Field(default=10, ge=1)
    richness_chart_title: str = "Riqueza de especies de orquídeas por área de conservación"
    species_chart_title: str = "Especies de orquídeas con más registros"


class RichnessTableRow(BaseModel):
    """One row of the richness table."""
    area_name: str
    richness: int
    area_km2: float = Field(description="Polygon area in km²")


class BarChartSeries(BaseModel):
    """Categories and values of one bar chart, in display order."""
    title: str
    categories: List[str]
    values: List[int]


class RichnessReport(BaseModel):
    """Report payload consumed by the presentation layer."""
    title: str
    choropleth: dict[str, Any] = Field(
        description="GeoJSON FeatureCollection of areas with richness and fill_color"
    )
    markers: dict[str, Any] = Field(
        description="GeoJSON FeatureCollection of occurrence points"
    )
    table: List[RichnessTableRow]
    table_page_size: int
    richness_chart: BarChartSeries
    species_chart: BarChartSeries
    map_view: MapView
    palette: ColorPalette
    
    class Config:
        json_schema_extra = {
            "example": {
                "title": "Riqueza de orquideas en areas de conservacion",
                "table": [
                    {"area_name": "Osa", "richness": 187, "area_km2": 4247.3},
                    {"area_name": "Tempisque", "richness": 12, "area_km2": 3956.1},
                ],
                "table_page_size": 10,
            }
        }
