"""
Geography source adapter.
Turns a GeoJSON FeatureCollection or a TopoJSON topology of Europe into the
quiz's Country list: only allowed countries, canonical names, one anchor point each.
Features without usable geometry never reach the quiz.
"""

import io
import json
from pathlib import Path
from typing import Any

import geopandas as gpd
import pandas as pd
import requests
from shapely.geometry.base import BaseGeometry

from europa_quiz.engine.state import Country
from europa_quiz.engine.definitions import QuizDefinitions
from europa_quiz.engine.matcher import resolve_canonical_name

NAME_PROPERTIES = ("NAME", "name", "ADMIN")
SOURCE_TYPES = ("FeatureCollection", "Topology")


class GeographyLoadError(Exception):
    """The geography source could not be fetched or parsed."""


def fetch_geography(source: str | Path, timeout: float = 20) -> dict[str, Any]:
    """Fetch the raw dataset from an http(s) URL or read it from a local file."""
    source = str(source)
    try:
        if source.startswith(("http://", "https://")):
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
            data = resp.json()
        else:
            with open(source, "r", encoding="utf-8") as f:
                data = json.load(f)
    except (requests.RequestException, OSError, ValueError) as e:
        raise GeographyLoadError(f"Could not load geography from {source}: {e}") from e
    if not isinstance(data, dict):
        raise GeographyLoadError(f"Geography source {source} is not a JSON object")
    return data


def _topology_layer(data: dict[str, Any]) -> str:
    """Name of the topology's first object; that is the layer holding the countries."""
    objects = data.get("objects")
    if not isinstance(objects, dict) or not objects:
        raise GeographyLoadError("Topology has no objects")
    return next(iter(objects))


def read_frame(data: dict[str, Any]) -> gpd.GeoDataFrame:
    """
    Parse a GeoJSON or TopoJSON document into a GeoDataFrame in lon/lat.
    TopoJSON arcs, quantization and delta encoding are decoded by the reader.
    """
    source_type = data.get("type")
    if source_type not in SOURCE_TYPES:
        raise GeographyLoadError(f"Unsupported geography type: {source_type!r}")
    layer = _topology_layer(data) if source_type == "Topology" else None
    buffer = io.BytesIO(json.dumps(data).encode("utf-8"))
    try:
        frame = gpd.read_file(buffer, layer=layer)
    except (RuntimeError, ValueError, OSError) as e:
        raise GeographyLoadError(f"Could not parse geography: {e}") from e
    if frame.crs is not None and not frame.crs.is_geographic:
        frame = frame.to_crs("EPSG:4326")
    return frame


def anchor_point(geometry: BaseGeometry | None) -> tuple[float, float] | None:
    """Area-weighted centroid, (lon, lat). None for missing or empty shapes."""
    if geometry is None or geometry.is_empty:
        return None
    center = geometry.centroid
    if center.is_empty:
        return None
    return float(center.x), float(center.y)


def _text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value)


def feature_name(row: pd.Series) -> str:
    for key in NAME_PROPERTIES:
        value = _text(row.get(key))
        if value:
            return value
    return ""


def build_countries(frame: gpd.GeoDataFrame, definitions: QuizDefinitions) -> list[Country]:
    """
    Countries in source order: usable geometry, fixed-up names, allowed set only,
    first feature wins for duplicate names.
    """
    countries = []
    seen = set()
    for _, row in frame.iterrows():
        anchor = anchor_point(row.geometry)
        if anchor is None:
            continue
        name = resolve_canonical_name(feature_name(row), definitions)
        if name not in definitions.allowed_countries or name in seen:
            continue
        seen.add(name)
        countries.append(Country(
            id=_text(row.get("id")) or name,
            canonical_name=name,
            anchor_point=anchor,
        ))
    return countries


def load_countries(source: str | Path, definitions: QuizDefinitions, timeout: float = 20) -> list[Country]:
    """Fetch and build the country list. Raises GeographyLoadError on any failure."""
    data = fetch_geography(source, timeout=timeout)
    try:
        return build_countries(read_frame(data), definitions)
    except GeographyLoadError:
        raise
    except (KeyError, TypeError, IndexError, AttributeError, ValueError, RuntimeError) as e:
        raise GeographyLoadError(f"Malformed geography in {source}: {e}") from e
