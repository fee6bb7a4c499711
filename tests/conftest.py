"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample conservation areas and occurrences
- Writers for polygon and occurrence source files
- Settings pointing at the sample sources
"""
import json
from pathlib import Path
from typing import Callable, Optional

import pytest
from shapely.geometry import box, mapping

from orchid_richness.config import Settings
from orchid_richness.domain.models import (
    ConservationArea,
    JoinedOccurrence,
    OrchidOccurrence,
)

OCCURRENCE_HEADER = [
    "species", "locality", "eventDate", "institutionCode", "occurrenceID",
    "decimalLongitude", "decimalLatitude",
]


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def sample_areas() -> tuple[ConservationArea, ...]:
    """Two disjoint square areas."""
    return (
        ConservationArea(area_name="AC1", geometry=box(0, 0, 10, 10)),
        ConservationArea(area_name="AC2", geometry=box(20, 20, 30, 30)),
    )


@pytest.fixture
def sample_occurrences() -> tuple[OrchidOccurrence, ...]:
    """Three points inside the areas and one outside both."""
    return (
        OrchidOccurrence(longitude=5, latitude=5, species="A", occurrence_id="occ-1"),
        OrchidOccurrence(longitude=5, latitude=5, species="B", occurrence_id="occ-2"),
        OrchidOccurrence(longitude=25, latitude=25, species="A", occurrence_id="occ-3"),
        OrchidOccurrence(longitude=50, latitude=50, species="C", occurrence_id="occ-4"),
    )


@pytest.fixture
def make_joined() -> Callable[..., JoinedOccurrence]:
    """Factory for joined occurrences without running the join."""
    def _make(species: Optional[str], area_name: Optional[str]) -> JoinedOccurrence:
        return JoinedOccurrence(
            longitude=0.0,
            latitude=0.0,
            species=species,
            area_name=area_name,
        )
    return _make


# ============================================================
# Source File Fixtures
# ============================================================

@pytest.fixture
def write_polygons(tmp_path) -> Callable[..., Path]:
    """Write (name, geometry) pairs as a GeoJSON FeatureCollection."""
    def _write(features, name: str = "areas.geojson", name_field: str = "nombre_ac") -> Path:
        path = tmp_path / name
        collection = {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {name_field: area_name, "siglas_ac": f"S{i}"},
                    "geometry": mapping(geometry) if geometry is not None else None,
                }
                for i, (area_name, geometry) in enumerate(features)
            ],
        }
        path.write_text(json.dumps(collection), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_occurrences(tmp_path) -> Callable[..., Path]:
    """Write rows as a tab separated occurrence table."""
    def _write(rows, name: str = "orquideas.csv", header=None) -> Path:
        path = tmp_path / name
        header = header or OCCURRENCE_HEADER
        lines = ["\t".join(header)]
        for row in rows:
            lines.append("\t".join("" if v is None else str(v) for v in row))
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def scenario_sources(write_polygons, write_occurrences) -> tuple[Path, Path]:
    """Source files for the two-area scenario."""
    polygon_path = write_polygons([
        ("AC1", box(0, 0, 10, 10)),
        ("AC2", box(20, 20, 30, 30)),
        ("AC3", box(40, 0, 45, 5)),
    ])
    occurrence_path = write_occurrences([
        ("A", "Sendero 1", "2019-03-01", "MO", "urn:occ:1", 5, 5),
        ("B", "Sendero 1", "2019-03-02", "MO", "urn:occ:2", 5, 5),
        ("A", "Cerro", "2020-07-11", "CR", "urn:occ:3", 25, 25),
        ("A", "Cerro", "2020-07-12", "CR", "urn:occ:4", 26, 26),
        ("C", "Fuera", "2021-01-01", "CR", "urn:occ:5", 50, 50),
        (None, "Sin nombre", None, None, None, 6, 6),
    ])
    return polygon_path, occurrence_path


@pytest.fixture
def test_settings() -> Settings:
    """Settings matching the sample source layout."""
    return Settings(
        area_name_field="nombre_ac",
        longitude_field="decimalLongitude",
        latitude_field="decimalLatitude",
        occurrence_separator="\t",
        top_species_limit=10,
        log_level="DEBUG",
    )
