"""
Geospatial projection utilities for CRS resolution and area measurement.
"""
from typing import Any

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

from orchid_richness.domain.exceptions import CRSMismatchError
from orchid_richness.domain.models import WGS84


def get_utm_zone(longitude: float) -> int:
    """
    Calculate the UTM zone number from longitude.
    
    Args:
        longitude: Longitude in degrees
        
    Returns:
        UTM zone number (1-60)
    """
    return min(int((longitude + 180) / 6) + 1, 60)


def get_utm_crs(longitude: float, latitude: float) -> str:
    """
    Get the appropriate UTM CRS (Coordinate Reference System) for a location.
    
    Args:
        longitude: Longitude in degrees
        latitude: Latitude in degrees
        
    Returns:
        EPSG code for the UTM zone
    """
    zone = get_utm_zone(longitude)
    # Northern hemisphere: EPSG:326XX, Southern hemisphere: EPSG:327XX
    hemisphere = "6" if latitude >= 0 else "7"
    return f"EPSG:32{hemisphere}{zone:02d}"


def resolve_crs(crs_like: Any) -> CRS:
    """
    Build a pyproj CRS from whatever a reader reports.
    
    Args:
        crs_like: CRS object, EPSG string, WKT or None
        
    Returns:
        Resolved pyproj CRS
        
    Raises:
        CRSMismatchError: If the CRS is missing or cannot be parsed
    """
    if crs_like is None:
        raise CRSMismatchError("Dataset declares no CRS; cannot normalize to WGS84")
    try:
        return CRS.from_user_input(crs_like)
    except CRSError as e:
        raise CRSMismatchError(f"Unrecognized CRS {crs_like!r}: {e}") from e


def is_wgs84(crs_like: Any) -> bool:
    """
    Check whether a CRS is already WGS84 geographic coordinates.
    
    Args:
        crs_like: CRS object or any input accepted by resolve_crs
        
    Returns:
        True if the CRS equals EPSG:4326 (axis order ignored)
    """
    crs = resolve_crs(crs_like)
    return crs.equals(CRS.from_user_input(WGS84), ignore_axis_order=True)


def ensure_transformable_to_wgs84(crs_like: Any) -> CRS:
    """
    Check that coordinates in a CRS can be reprojected to WGS84.
    
    Args:
        crs_like: Source CRS
        
    Returns:
        Resolved source CRS
        
    Raises:
        CRSMismatchError: If no transformation to WGS84 exists
    """
    crs = resolve_crs(crs_like)
    try:
        Transformer.from_crs(crs, WGS84, always_xy=True)
    except (CRSError, ProjError) as e:
        raise CRSMismatchError(f"Cannot transform {crs.to_string()} to {WGS84}: {e}") from e
    return crs


def geometry_area_km2(geometry: BaseGeometry) -> float:
    """
    Measure a lon/lat geometry in square kilometers.
    
    The geometry is projected to the UTM zone of its centroid, which is
    accurate enough for areas the size of a conservation area.
    
    Args:
        geometry: Polygon or MultiPolygon in WGS84 degrees
        
    Returns:
        Area in km²
    """
    if geometry.is_empty:
        return 0.0
    
    centroid = geometry.centroid
    utm_crs = get_utm_crs(centroid.x, centroid.y)
    
    # Create transformer from WGS84 (EPSG:4326) to UTM
    transformer = Transformer.from_crs(
        WGS84,
        utm_crs,
        always_xy=True  # Ensure (lon, lat) -> (x, y) order
    )
    projected = transform(transformer.transform, geometry)
    return projected.area / 1_000_000
