"""
Geography adapter: GeoJSON and TopoJSON parsing, anchor points, name fixes
and filtering of unusable or disallowed features.
"""

import json

import pytest
import requests
from shapely.geometry import MultiPolygon, Polygon, Point

from europa_quiz.engine import geography
from europa_quiz.engine.geography import (
    GeographyLoadError,
    anchor_point,
    build_countries,
    fetch_geography,
    load_countries,
    read_frame,
)

SQUARE = [[0, 0], [2, 0], [2, 2], [0, 2], [0, 0]]


def feature(name, geometry, fid=None):
    return {"type": "Feature", "id": fid, "properties": {"NAME": name}, "geometry": geometry}


def polygon(ring):
    return {"type": "Polygon", "coordinates": [ring]}


def feature_collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


def topology(geometries, arcs, transform=None):
    data = {
        "type": "Topology",
        "objects": {"europe": {"type": "GeometryCollection", "geometries": geometries}},
        "arcs": arcs,
    }
    if transform:
        data["transform"] = transform
    return data


def countries_from(data, definitions):
    return build_countries(read_frame(data), definitions)


def test_polygon_anchor():
    assert anchor_point(Polygon(SQUARE)) == pytest.approx((1.0, 1.0))


def test_multipolygon_anchor_is_area_weighted():
    big = Polygon([(0, 0), (4, 0), (4, 4), (0, 4)])
    small = Polygon([(10, 0), (11, 0), (11, 1), (10, 1)])
    cx, cy = anchor_point(MultiPolygon([big, small]))
    # 16 * (2, 2) + 1 * (10.5, 0.5) over 17
    assert cx == pytest.approx((32 + 10.5) / 17)
    assert cy == pytest.approx((32 + 0.5) / 17)


def test_missing_or_empty_shape_has_no_anchor():
    assert anchor_point(None) is None
    assert anchor_point(Polygon()) is None
    assert anchor_point(Point(3, 4)) == pytest.approx((3.0, 4.0))


def test_geojson_names_fixed_and_filtered(definitions):
    data = feature_collection(
        feature("Holy See", polygon(SQUARE), fid="VA"),
        feature("Israel", polygon(SQUARE), fid="IL"),
        feature("France", None, fid="FR"),
        feature("Czech Republic", {"type": "MultiPolygon", "coordinates": [[SQUARE]]}, fid="CZ"),
        feature("Vatican", polygon([[5, 5], [6, 5], [6, 6], [5, 6], [5, 5]]), fid="VA2"),
    )
    countries = countries_from(data, definitions)
    assert [c.canonical_name for c in countries] == ["Vatican", "Czechia"]
    assert countries[0].anchor_point == pytest.approx((1.0, 1.0))
    assert countries[0].id == "VA"
    assert countries[1].id == "CZ"


def test_other_name_properties_are_used(definitions):
    data = feature_collection({
        "type": "Feature",
        "properties": {"ADMIN": "Portugal"},
        "geometry": polygon(SQUARE),
    })
    assert [c.canonical_name for c in countries_from(data, definitions)] == ["Portugal"]


def test_topojson_without_transform(definitions):
    data = topology(
        [{"type": "Polygon", "arcs": [[0]], "properties": {"NAME": "France"}}],
        [[[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]]],
    )
    (country,) = countries_from(data, definitions)
    assert country.canonical_name == "France"
    assert country.anchor_point == pytest.approx((2.0, 2.0))


def test_topojson_quantized_delta_arcs(definitions):
    data = topology(
        [{"type": "Polygon", "arcs": [[0]], "properties": {"NAME": "Germany"}}],
        [[[0, 0], [2, 0], [0, 2], [-2, 0], [0, -2]]],
        transform={"scale": [1, 1], "translate": [10, 20]},
    )
    (country,) = countries_from(data, definitions)
    assert country.anchor_point == pytest.approx((11.0, 21.0))


def test_topojson_quantized_point(definitions):
    data = topology(
        [{"type": "Point", "coordinates": [1, 1], "properties": {"NAME": "Monaco"}}],
        [],
        transform={"scale": [0.5, 0.5], "translate": [7, 43]},
    )
    (country,) = countries_from(data, definitions)
    assert country.anchor_point == pytest.approx((7.5, 43.5))


def test_topojson_reversed_arc(definitions):
    data = topology(
        [{"type": "Polygon", "arcs": [[-1]], "properties": {"NAME": "Spain"}}],
        [[[0, 0], [0, 2], [2, 2], [2, 0], [0, 0]]],
    )
    (country,) = countries_from(data, definitions)
    assert country.canonical_name == "Spain"
    assert country.anchor_point == pytest.approx((1.0, 1.0))


def test_load_from_local_file(tmp_path, definitions):
    path = tmp_path / "europe.geojson"
    path.write_text(json.dumps(feature_collection(feature("Malta", polygon(SQUARE)))), encoding="utf-8")
    countries = load_countries(path, definitions)
    assert [c.canonical_name for c in countries] == ["Malta"]


def test_missing_file_raises(tmp_path):
    with pytest.raises(GeographyLoadError):
        fetch_geography(tmp_path / "nope.json")


def test_non_object_json_raises(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(GeographyLoadError):
        fetch_geography(path)


@pytest.mark.parametrize("data", [
    {"hello": "world"},
    {"type": "Topology", "objects": [{"type": "Polygon", "arcs": [[0]]}], "arcs": []},
    {"type": "Topology", "objects": {}, "arcs": []},
])
def test_malformed_document_raises_load_error(tmp_path, definitions, data):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(GeographyLoadError):
        load_countries(path, definitions)


@pytest.mark.parametrize("error", [KeyError("scale"), TypeError("bad arcs"), IndexError("short arc")])
def test_parse_errors_become_load_errors(tmp_path, monkeypatch, definitions, error):
    path = tmp_path / "europe.topojson"
    path.write_text(json.dumps(topology([], [])), encoding="utf-8")

    def broken(data):
        raise error

    monkeypatch.setattr(geography, "read_frame", broken)
    with pytest.raises(GeographyLoadError):
        load_countries(path, definitions)


def test_reader_failure_becomes_load_error(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("not recognized as a supported file format")

    monkeypatch.setattr(geography.gpd, "read_file", broken)
    with pytest.raises(GeographyLoadError):
        read_frame(feature_collection())


def test_network_failure_raises(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(geography.requests, "get", boom)
    with pytest.raises(GeographyLoadError):
        fetch_geography("https://example.invalid/europe.topojson")


def test_http_fetch(monkeypatch, definitions):
    class FakeResponse:
        def raise_for_status(self):
            pass

        def json(self):
            return feature_collection(feature("Andorra", polygon(SQUARE)))

    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse()

    monkeypatch.setattr(geography.requests, "get", fake_get)
    countries = load_countries("https://example.invalid/europe.geojson", definitions, timeout=3)
    assert calls == [("https://example.invalid/europe.geojson", 3)]
    assert [c.canonical_name for c in countries] == ["Andorra"]
