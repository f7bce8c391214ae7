"""
Tests for the provider variants: URL building and response parsing.

Run with: python -m pytest tests/test_providers.py -v
"""

import json
import logging
import math

import pytest

from conftest import smhi_document, yr_document
from multi_wind.config import ProviderConfig
from multi_wind.models import Provider, WindObservation
from multi_wind.providers import (
    PROVIDERS,
    SmhiProvider,
    YrProvider,
    build_url,
    format_coordinate,
    get_provider,
    parse_response,
)
from multi_wind.resilience import ErrorType, MalformedBody, SchemaMismatch

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def encode(document) -> bytes:
    return json.dumps(document).encode("utf-8")


class TestRegistry:
    """Every provider variant has an implementation."""

    def test_every_variant_registered(self):
        for provider in Provider:
            assert get_provider(provider).provider is provider

    def test_registry_types(self):
        assert isinstance(PROVIDERS[Provider.SMHI], SmhiProvider)
        assert isinstance(PROVIDERS[Provider.YR], YrProvider)


class TestSmhiUrl:
    """SMHI needs exactly six decimals, longitude first."""

    @pytest.mark.parametrize("coord,expected", [
        (11, "11.000000"),
        (11.9746, "11.974600"),
        (57.70891234, "57.708912"),
        (-0.5, "-0.500000"),
        (0, "0.000000"),
        (-180, "-180.000000"),
    ])
    def test_format_coordinate(self, coord, expected):
        assert format_coordinate(coord) == expected

    def test_six_decimals_for_many_coordinates(self):
        for lat in (-90, -45.5, 0, 12.3456789, 89.999999):
            for lon in (-180, -0.1, 11, 179.9999999):
                for part in (format_coordinate(lat), format_coordinate(lon)):
                    assert len(part.split(".")[1]) == 6, part

    def test_build_url(self, smhi_config):
        url = build_url(smhi_config)
        logger.info(f"[TEST] SMHI URL: {url}")
        assert url == (
            "https://opendata-download-metfcst.smhi.se/api/category/pmp3g/version/2"
            "/geotype/point/lon/11.974600/lat/57.708900/data.json"
        )

    def test_integral_coordinates(self):
        url = build_url(ProviderConfig(provider=Provider.SMHI, lat=57, lon=11))
        assert "/lon/11.000000/lat/57.000000/" in url

    def test_headers_accept_json(self):
        headers = get_provider(Provider.SMHI).headers()
        assert headers["Accept"] == "application/json"
        assert "User-Agent" in headers


class TestYrUrl:
    """YR takes altitude, lat, lon as query parameters."""

    def test_build_url(self, yr_config):
        url = build_url(yr_config)
        logger.info(f"[TEST] YR URL: {url}")
        assert url == (
            "https://api.met.no/weatherapi/locationforecast/2.0/complete"
            "?altitude=23&lat=59.9139&lon=10.7522"
        )

    def test_altitude_defaults_to_zero(self):
        url = build_url(ProviderConfig(provider=Provider.YR, lat=57.7089, lon=11.9746))
        assert "altitude=0&" in url

    def test_altitude_truncated(self):
        config = ProviderConfig(provider=Provider.YR, lat=60.0, lon=-5.25, altitude=99.9)
        url = build_url(config)
        assert "altitude=99&" in url
        assert "lat=60&" in url
        assert url.endswith("lon=-5.25")

    def test_headers_identify_client(self):
        headers = get_provider(Provider.YR).headers()
        assert headers["User-Agent"].startswith("MultiWind/")
        assert "github.com" in headers["User-Agent"]

    def test_headers_are_copies(self):
        headers = get_provider(Provider.YR).headers()
        headers["User-Agent"] = "changed"
        assert get_provider(Provider.YR).headers()["User-Agent"] != "changed"


class TestSmhiParse:
    """SMHI parameters are looked up by name in the first time series entry."""

    def test_well_formed(self):
        obs = parse_response(Provider.SMHI, encode(smhi_document(ws=7.5, wd=180)))
        logger.info(f"[TEST] Parsed SMHI observation: {obs}")
        assert obs == WindObservation(wind_speed=7.5, wind_direction=180)
        assert obs.to_dict() == {"windSpeed": 7.5, "windDirection": 180}

    def test_integer_values_accepted(self):
        obs = parse_response(Provider.SMHI, encode(smhi_document(ws=3, wd=0)))
        assert obs.wind_speed == 3.0
        assert obs.wind_direction == 0.0

    def test_missing_wd(self):
        doc = smhi_document()
        doc["timeSeries"][0]["parameters"] = [
            p for p in doc["timeSeries"][0]["parameters"] if p["name"] != "wd"
        ]
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.SMHI, encode(doc))
        err = exc_info.value
        logger.info(f"[TEST] Schema error: {err}")
        assert err.error_type is ErrorType.SCHEMA_MISMATCH
        assert err.provider is Provider.SMHI
        assert err.field == "timeSeries[0].parameters[wd]"
        assert err.reason == "missing"

    def test_empty_time_series(self):
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.SMHI, encode({"timeSeries": []}))
        assert exc_info.value.field == "timeSeries[0]"

    def test_missing_parameters(self):
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.SMHI, encode({"timeSeries": [{"validTime": "x"}]}))
        assert exc_info.value.field == "timeSeries[0].parameters"

    def test_parameters_not_a_list(self):
        doc = {"timeSeries": [{"parameters": {"ws": 1}}]}
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.SMHI, encode(doc))
        assert "not an array" in exc_info.value.reason

    def test_non_numeric_value(self):
        doc = smhi_document(ws="7.5")
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.SMHI, encode(doc))
        assert exc_info.value.field == "timeSeries[0].parameters[ws].values[0]"
        assert "not a number" in exc_info.value.reason

    def test_boolean_is_not_numeric(self):
        with pytest.raises(SchemaMismatch):
            parse_response(Provider.SMHI, encode(smhi_document(wd=True)))

    def test_empty_values(self):
        doc = smhi_document()
        for param in doc["timeSeries"][0]["parameters"]:
            if param["name"] == "ws":
                param["values"] = []
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.SMHI, encode(doc))
        assert exc_info.value.field == "timeSeries[0].parameters[ws].values[0]"

    def test_root_not_an_object(self):
        with pytest.raises(SchemaMismatch):
            parse_response(Provider.SMHI, b"[1, 2, 3]")

    def test_nan_rejected(self):
        body = b'{"timeSeries": [{"parameters": [{"name": "ws", "values": [NaN]}, {"name": "wd", "values": [90]}]}]}'
        with pytest.raises(SchemaMismatch):
            parse_response(Provider.SMHI, body)


class TestYrParse:
    """YR wind lives at properties.timeseries[0].data.instant.details."""

    def test_well_formed(self):
        obs = parse_response(Provider.YR, encode(yr_document(speed=4.2, direction=225.3)))
        assert obs == WindObservation(wind_speed=4.2, wind_direction=225.3)

    def test_extra_fields_discarded(self):
        obs = parse_response(Provider.YR, encode(yr_document()))
        assert set(obs.to_dict()) == {"windSpeed", "windDirection"}

    @pytest.mark.parametrize("mutate,field", [
        (lambda d: d.pop("properties"), "properties"),
        (lambda d: d["properties"].update(timeseries=[]), "properties.timeseries[0]"),
        (lambda d: d["properties"]["timeseries"][0].pop("data"), "properties.timeseries[0].data"),
        (lambda d: d["properties"]["timeseries"][0]["data"].pop("instant"),
         "properties.timeseries[0].data.instant"),
        (lambda d: d["properties"]["timeseries"][0]["data"]["instant"].pop("details"),
         "properties.timeseries[0].data.instant.details"),
        (lambda d: d["properties"]["timeseries"][0]["data"]["instant"]["details"].pop("wind_speed"),
         "properties.timeseries[0].data.instant.details.wind_speed"),
        (lambda d: d["properties"]["timeseries"][0]["data"]["instant"]["details"].pop("wind_from_direction"),
         "properties.timeseries[0].data.instant.details.wind_from_direction"),
    ])
    def test_missing_link(self, mutate, field):
        doc = yr_document()
        mutate(doc)
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.YR, encode(doc))
        logger.info(f"[TEST] YR schema error: {exc_info.value}")
        assert exc_info.value.provider is Provider.YR
        assert exc_info.value.field == field

    def test_null_speed(self):
        with pytest.raises(SchemaMismatch):
            parse_response(Provider.YR, encode(yr_document(speed=None)))


class TestMalformedBody:
    """Bodies that are not JSON never reach the schema checks."""

    @pytest.mark.parametrize("provider", list(Provider))
    @pytest.mark.parametrize("body", [b"", b"<html>503</html>", b'{"timeSeries": [', b"\xff\xfe\x00"])
    def test_malformed(self, provider, body):
        with pytest.raises(MalformedBody) as exc_info:
            parse_response(provider, body)
        assert exc_info.value.error_type is ErrorType.MALFORMED_BODY

    def test_no_rounding(self):
        obs = parse_response(Provider.SMHI, encode(smhi_document(ws=7.123456789, wd=359.99)))
        assert math.isclose(obs.wind_speed, 7.123456789)
        assert obs.wind_direction == 359.99


def with_raw_speed(literal: bytes) -> bytes:
    """SMHI document whose ws value is the given JSON number literal."""
    return encode(smhi_document(ws="__WS__")).replace(b'"__WS__"', literal)


class TestHostileBody:
    """Well-formed HTTP, pathological JSON: always a typed error."""

    def test_integer_beyond_float_range(self):
        logger.info("[TEST] 400-digit integer speed")
        with pytest.raises(SchemaMismatch) as exc_info:
            parse_response(Provider.SMHI, with_raw_speed(b"1" + b"0" * 400))
        assert exc_info.value.field == "timeSeries[0].parameters[ws].values[0]"

    def test_exponent_overflow_is_infinite(self):
        with pytest.raises(SchemaMismatch):
            parse_response(Provider.SMHI, with_raw_speed(b"1e400"))

    def test_digit_string_over_conversion_limit(self):
        logger.info("[TEST] 5000-digit integer speed")
        # Rejected by the decoder where int digit limits exist, else out of float range
        with pytest.raises((MalformedBody, SchemaMismatch)):
            parse_response(Provider.SMHI, with_raw_speed(b"9" * 5000))

    @pytest.mark.parametrize("provider", list(Provider))
    def test_deep_nesting(self, provider):
        logger.info(f"[TEST] 100000 nested arrays for {provider.name}")
        with pytest.raises(MalformedBody):
            parse_response(provider, b"[" * 100000 + b"]" * 100000)
