"""Tests for the Nominatim geocoder using httpx.MockTransport (no network)."""

import json

import httpx
import pytest

from src.core.config import GeocoderConfig
from src.core.schemas import Coordinates
from src.geo.geocoder import GeocodingError, NominatimGeocoder


def _geocoder(handler) -> NominatimGeocoder:  # type: ignore[no-untyped-def]
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NominatimGeocoder(GeocoderConfig(), client=client)


class TestGeocode:
    async def test_first_result(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[
                {"lat": "47.4979", "lon": "19.0402", "display_name": "Budapest"},
                {"lat": "0", "lon": "0"},
            ])

        coords = await _geocoder(handler).geocode("Budapest")
        assert coords == Coordinates(lat=47.4979, lon=19.0402)
        params = seen[0].url.params
        assert params["q"] == "Budapest"
        assert params["format"] == "json"
        assert params["limit"] == "1"

    async def test_no_match(self) -> None:
        coords = await _geocoder(lambda r: httpx.Response(200, json=[])).geocode("Unknownville")
        assert coords is None

    async def test_http_error(self) -> None:
        with pytest.raises(GeocodingError, match="request failed"):
            await _geocoder(lambda r: httpx.Response(503)).geocode("Vienna")

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(GeocodingError):
            await _geocoder(handler).geocode("Vienna")

    async def test_invalid_json(self) -> None:
        with pytest.raises(GeocodingError, match="invalid JSON"):
            await _geocoder(lambda r: httpx.Response(200, content=b"<html>")).geocode("Vienna")

    async def test_unexpected_payload(self) -> None:
        body = json.dumps([{"name": "Vienna"}]).encode()
        with pytest.raises(GeocodingError, match="unexpected payload"):
            await _geocoder(lambda r: httpx.Response(200, content=body)).geocode("Vienna")


class TestLifecycle:
    async def test_not_entered_raises(self) -> None:
        geocoder = NominatimGeocoder(GeocoderConfig())
        with pytest.raises(RuntimeError, match="not entered"):
            await geocoder.geocode("Budapest")

    async def test_context_manager_owns_client(self) -> None:
        async with NominatimGeocoder(GeocoderConfig(user_agent="test-agent")) as geocoder:
            assert geocoder.client.headers["User-Agent"] == "test-agent"
        with pytest.raises(RuntimeError):
            _ = geocoder.client

    async def test_injected_client_not_closed(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))
        async with NominatimGeocoder(GeocoderConfig(), client=client):
            pass
        assert client.is_closed is False
        await client.aclose()
