"""
Domain models for conservation areas, orchid occurrences and the
aggregated richness tables.

These models represent the core domain entities and should be independent
of any infrastructure concerns (file formats, readers, renderers).
Every record is frozen: pipeline stages build new records instead of
mutating the ones they receive.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

WGS84 = "EPSG:4326"


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ConservationArea(BaseModel):
    """A conservation area polygon in WGS84 degrees."""
    area_name: str
    geometry: BaseGeometry = Field(description="Polygon or MultiPolygon, lon/lat")
    attributes: dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True
        arbitrary_types_allowed = True


class OrchidOccurrence(BaseModel):
    """Single georeferenced orchid record."""
    longitude: float
    latitude: float
    species: Optional[str] = None
    locality: Optional[str] = None
    event_date: Optional[str] = None
    institution_code: Optional[str] = None
    occurrence_id: Optional[str] = None

    class Config:
        frozen = True

    @field_validator(
        "species", "locality", "event_date", "institution_code", "occurrence_id",
        mode="before",
    )
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @property
    def point(self) -> Point:
        return Point(self.longitude, self.latitude)


class JoinedOccurrence(OrchidOccurrence):
    """Occurrence tagged with the conservation area that contains it, if any."""
    area_name: Optional[str] = None

    @classmethod
    def from_occurrence(
        cls,
        occurrence: OrchidOccurrence,
        area_name: Optional[str],
    ) -> "JoinedOccurrence":
        return cls(**occurrence.model_dump(exclude={"area_name"}), area_name=area_name)


class RichnessRecord(BaseModel):
    """Distinct species count for one conservation area."""
    area_name: str
    richness: int = Field(ge=0, description="Distinct non-null species names")

    class Config:
        frozen = True


class TopSpeciesRecord(BaseModel):
    """Raw occurrence count for one species."""
    species: str
    occurrence_count: int = Field(ge=1)

    class Config:
        frozen = True


class LoadedDatasets(BaseModel):
    """Both input datasets, tagged with their shared CRS."""
    areas: tuple[ConservationArea, ...]
    occurrences: tuple[OrchidOccurrence, ...]
    crs: str = WGS84

    class Config:
        frozen = True


class PipelineResult(BaseModel):
    """Output tables of a full pipeline run."""
    areas: tuple[ConservationArea, ...]
    joined: tuple[JoinedOccurrence, ...]
    richness: tuple[RichnessRecord, ...]
    top_species: tuple[TopSpeciesRecord, ...]

    class Config:
        frozen = True
