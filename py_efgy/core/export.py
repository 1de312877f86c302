"""Export Voronoi diagrams as shapely geometries and GeoJSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import structlog
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import mapping

from .geometry import Polygon

logger = structlog.get_logger()


def polygon_to_shapely(polygon: Polygon) -> ShapelyPolygon:
    """Convert a kernel polygon (float or rational) to a shapely polygon."""
    return ShapelyPolygon([(float(x), float(y)) for x, y in polygon.vertices])


def to_shapely(cell) -> ShapelyPolygon:
    return polygon_to_shapely(cell.area)


def to_geojson(diagram) -> Dict[str, Any]:
    """
    Build a GeoJSON FeatureCollection with one polygon feature per cell.

    Properties carry the site, the cell area and the colour as a hex string
    (or None for cells without a colour).
    """
    features = []
    for index, cell in enumerate(diagram):
        geometry = to_shapely(cell)
        site = [float(cell.site[0]), float(cell.site[1])]
        features.append(
            {
                "type": "Feature",
                "id": index,
                "geometry": mapping(geometry),
                "properties": {
                    "site": site,
                    "site_wkt": ShapelyPoint(site).wkt,
                    "area": float(cell.area.area),
                    "colour": cell.colour.to_hex() if cell.colour is not None else None,
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}


def write_geojson(diagram, path: Union[str, Path]) -> Path:
    path = Path(path)
    document = to_geojson(diagram)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f)
    logger.info("Wrote GeoJSON", path=str(path), features=len(document["features"]))
    return path
