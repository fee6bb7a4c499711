"""
Spatial analysis helper functions.

Provides utilities for:
- Bounding-box indexing of polygons
- Strict point-in-polygon tests
- Polygon validation and repair
"""
import logging

import numpy as np
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.validation import explain_validity, make_valid

logger = logging.getLogger(__name__)


def build_bounds_index(geometries: list[BaseGeometry]) -> np.ndarray:
    """
    Stack the envelopes of a list of geometries.
    
    Args:
        geometries: Geometries in iteration order
        
    Returns:
        Array of shape (n, 4) with (minx, miny, maxx, maxy) rows
    """
    if not geometries:
        return np.empty((0, 4), dtype=float)
    return np.array([geometry.bounds for geometry in geometries], dtype=float)


def candidate_indices(bounds: np.ndarray, x: float, y: float) -> np.ndarray:
    """
    Find geometries whose envelope covers a point.
    
    Boundary contact is kept here; the strict test happens afterwards.
    
    Args:
        bounds: Array from build_bounds_index
        x: Point longitude
        y: Point latitude
        
    Returns:
        Indices into the original geometry list, ascending
    """
    if len(bounds) == 0:
        return np.empty(0, dtype=int)
    mask = (
        (bounds[:, 0] <= x) & (x <= bounds[:, 2])
        & (bounds[:, 1] <= y) & (y <= bounds[:, 3])
    )
    return np.flatnonzero(mask)


def point_strictly_within(point: Point, polygon: BaseGeometry) -> bool:
    """
    Check if a point lies in the interior of a polygon.
    
    A point on the polygon boundary is not within it.
    
    Args:
        point: Point geometry
        polygon: Polygon or MultiPolygon
        
    Returns:
        True if point is inside polygon, False otherwise
    """
    return point.within(polygon)


def containing_indices(
    point: Point,
    polygons: list[BaseGeometry],
    bounds: np.ndarray,
) -> list[int]:
    """
    List every polygon that strictly contains a point.
    
    Args:
        point: Point geometry
        polygons: Polygons in iteration order
        bounds: Envelope index built from the same polygons
        
    Returns:
        Matching indices in iteration order
    """
    return [
        int(idx)
        for idx in candidate_indices(bounds, point.x, point.y)
        if point_strictly_within(point, polygons[idx])
    ]


def repair_geometry(geometry: BaseGeometry) -> BaseGeometry:
    """
    Repair an invalid polygon and keep only its polygonal parts.
    
    Args:
        geometry: Possibly invalid geometry
        
    Returns:
        Valid geometry; may be a GeometryCollection if nothing polygonal survives
    """
    reason = explain_validity(geometry)
    repaired = make_valid(geometry)
    
    if repaired.geom_type == "GeometryCollection":
        polygonal = [g for g in repaired.geoms if g.geom_type in ("Polygon", "MultiPolygon")]
        if len(polygonal) == 1:
            repaired = polygonal[0]
        elif polygonal:
            repaired = unary_union(polygonal)
    
    logger.warning(f"Repaired invalid geometry ({reason}) -> {repaired.geom_type}")
    return repaired
