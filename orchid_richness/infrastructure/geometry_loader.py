"""
Infrastructure layer: reads the polygon and occurrence sources into
domain records with a shared WGS84 CRS.

Load policy: the first malformed record aborts the whole load with a
LoadError naming the source and row. Records are never skipped.
"""
import logging
import math
from pathlib import Path
from typing import Any, Optional, Union

import geopandas as gpd
import pandas as pd

from orchid_richness.config import Settings, settings as default_settings
from orchid_richness.domain.exceptions import CRSMismatchError, LoadError
from orchid_richness.domain.models import (
    WGS84,
    ConservationArea,
    LoadedDatasets,
    OrchidOccurrence,
)
from orchid_richness.infrastructure.source_constants import (
    POLYGONAL_GEOMETRY_TYPES,
    CoordinateBounds,
    OccurrenceColumns,
)
from orchid_richness.utils.geo_projection import ensure_transformable_to_wgs84, is_wgs84
from orchid_richness.utils.spatial_helpers import repair_geometry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _clean_value(value: Any) -> Any:
    """Convert pandas missing values and numpy scalars to plain Python."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return value
    if hasattr(value, "item"):
        return value.item()
    return value


class GeometryLoader:
    """
    Loads conservation areas and orchid occurrences.
    
    Polygons are read with geopandas and reprojected to WGS84 when needed.
    Occurrences are read as a delimited table and their points are built
    from the longitude/latitude columns, with WGS84 assigned as-is.
    """
    
    def __init__(self, config: Optional[Settings] = None):
        """
        Initialize the loader.
        
        Args:
            config: Settings with the source layout (defaults to global settings)
        """
        self.config = config or default_settings
    
    def load(
        self,
        polygon_path: PathLike,
        occurrence_path: PathLike,
    ) -> LoadedDatasets:
        """
        Load both sources.
        
        Args:
            polygon_path: Vector file with conservation area polygons
            occurrence_path: Delimited occurrence table
            
        Returns:
            LoadedDatasets tagged with EPSG:4326
            
        Raises:
            LoadError: If a file is missing, unreadable or holds a malformed record
            CRSMismatchError: If the polygons cannot be normalized to WGS84
        """
        areas = self.load_areas(polygon_path)
        occurrences = self.load_occurrences(occurrence_path)
        logger.info(f"Loaded {len(areas)} conservation areas and {len(occurrences)} occurrences")
        return LoadedDatasets(areas=areas, occurrences=occurrences, crs=WGS84)
    
    def load_areas(self, path: PathLike) -> tuple[ConservationArea, ...]:
        """
        Read conservation area polygons.
        
        Args:
            path: Any vector format GDAL can read (GeoPackage, GeoJSON, Shapefile)
            
        Returns:
            Areas in file order
        """
        source = str(path)
        self._require_file(source)
        
        try:
            frame = gpd.read_file(source)
        except Exception as e:
            raise LoadError(f"Unreadable polygon source: {e}", source=source) from e
        
        name_field = self.config.area_name_field
        if name_field not in frame.columns:
            raise LoadError(
                f"Missing area name field '{name_field}' "
                f"(available: {', '.join(map(str, frame.columns))})",
                source=source,
            )
        
        frame = self._normalize_crs(frame, source)
        
        attribute_columns = [
            c for c in frame.columns
            if c != name_field and c != frame.geometry.name
        ]
        
        areas = []
        for row_number, record in enumerate(frame.to_dict("records")):
            geometry = self._validate_geometry(record.get(frame.geometry.name), source, row_number)
            area_name = _clean_value(record.get(name_field))
            area_name = str(area_name).strip() if area_name is not None else ""
            if not area_name:
                raise LoadError("Blank conservation area name", source=source, row=row_number)
            
            areas.append(ConservationArea(
                area_name=area_name,
                geometry=geometry,
                attributes={c: _clean_value(record.get(c)) for c in attribute_columns},
            ))
        
        logger.debug(f"Read {len(areas)} polygons from {source}")
        return tuple(areas)
    
    def load_occurrences(self, path: PathLike) -> tuple[OrchidOccurrence, ...]:
        """
        Read occurrence records and build their points.
        
        Args:
            path: Delimited table with longitude/latitude columns
            
        Returns:
            Occurrences in file order
        """
        source = str(path)
        self._require_file(source)
        
        try:
            frame = pd.read_csv(
                source,
                sep=self.config.occurrence_separator,
                dtype=str,
                encoding="utf-8",
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
            raise LoadError(f"Unreadable occurrence source: {e}", source=source) from e
        
        lon_field = self.config.longitude_field
        lat_field = self.config.latitude_field
        missing = [c for c in (lon_field, lat_field) if c not in frame.columns]
        if missing:
            raise LoadError(f"Missing coordinate columns: {', '.join(missing)}", source=source)
        
        absent = [c for c in OccurrenceColumns.attribute_columns() if c not in frame.columns]
        if absent:
            logger.warning(f"{source}: attribute columns not present, loaded as empty: {', '.join(absent)}")
        
        occurrences = []
        for row_number, record in enumerate(frame.to_dict("records")):
            longitude = self._parse_coordinate(record.get(lon_field), lon_field, source, row_number)
            latitude = self._parse_coordinate(record.get(lat_field), lat_field, source, row_number)
            if not CoordinateBounds.contains(longitude, latitude):
                raise LoadError(
                    f"Coordinates ({longitude}, {latitude}) are not in degrees",
                    source=source,
                    row=row_number,
                )
            
            attributes = {
                field: _clean_value(record.get(column))
                for column, field in OccurrenceColumns.ATTRIBUTE_FIELDS.items()
            }
            occurrences.append(OrchidOccurrence(
                longitude=longitude,
                latitude=latitude,
                **attributes,
            ))
        
        logger.debug(f"Read {len(occurrences)} occurrences from {source} (CRS assigned: {WGS84})")
        return tuple(occurrences)
    
    @staticmethod
    def _require_file(source: str) -> None:
        if not Path(source).is_file():
            raise LoadError("File not found", source=source)
    
    def _normalize_crs(self, frame: gpd.GeoDataFrame, source: str) -> gpd.GeoDataFrame:
        """Reproject the polygon frame to WGS84 if it is in another CRS."""
        try:
            if is_wgs84(frame.crs):
                return frame
            source_crs = ensure_transformable_to_wgs84(frame.crs)
        except CRSMismatchError as e:
            raise CRSMismatchError(f"{source}: {e}") from e
        
        logger.info(f"Reprojecting {source} from {source_crs.to_string()} to {WGS84}")
        try:
            return frame.to_crs(WGS84)
        except Exception as e:
            raise CRSMismatchError(f"{source}: reprojection to {WGS84} failed: {e}") from e
    
    def _validate_geometry(self, geometry, source: str, row_number: int):
        if geometry is None or geometry.is_empty:
            raise LoadError("Missing or empty geometry", source=source, row=row_number)
        
        if not geometry.is_valid:
            if not self.config.repair_invalid_geometry:
                raise LoadError("Invalid polygon geometry", source=source, row=row_number)
            geometry = repair_geometry(geometry)
        
        if geometry.geom_type not in POLYGONAL_GEOMETRY_TYPES:
            raise LoadError(
                f"Expected a polygon, got {geometry.geom_type}",
                source=source,
                row=row_number,
            )
        return geometry
    
    @staticmethod
    def _parse_coordinate(value: Any, column: str, source: str, row_number: int) -> float:
        try:
            parsed = float(value)
        except (TypeError, ValueError) as e:
            raise LoadError(f"Unparseable {column} value {value!r}", source=source, row=row_number) from e
        if not math.isfinite(parsed):
            raise LoadError(f"Missing {column} value", source=source, row=row_number)
        return parsed
