"""Geocoding collaborators: resolve a city name to coordinates."""

import logging
from abc import ABC, abstractmethod
from types import TracebackType

import httpx

from src.core.config import GeocoderConfig
from src.core.schemas import Coordinates

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """The geocoding service failed (network, timeout, bad payload)."""


class Geocoder(ABC):
    """Base class that every geocoder must implement."""

    @abstractmethod
    async def geocode(self, city: str) -> Coordinates | None:
        """Return coordinates for a city, or None if the city is unknown.

        Raises:
            GeocodingError: If the lookup itself failed.
        """


class NominatimGeocoder(Geocoder):
    """Geocoder for the OpenStreetMap Nominatim search API.

    Async context manager that owns an httpx client unless one is injected::

        async with NominatimGeocoder(settings.geocoder) as geocoder:
            coords = await geocoder.geocode("Budapest")
    """

    def __init__(self, config: GeocoderConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "NominatimGeocoder":
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_s,
                headers={"User-Agent": self._config.user_agent},
            )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "NominatimGeocoder not entered, use 'async with'"
            raise RuntimeError(msg)
        return self._client

    async def geocode(self, city: str) -> Coordinates | None:
        logger.info("Geocoding '%s' using Nominatim", city)
        try:
            response = await self.client.get(
                self._config.base_url,
                params={"q": city, "format": "json", "limit": 1},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            msg = f"Nominatim request failed for '{city}': {e}"
            raise GeocodingError(msg) from e
        except ValueError as e:
            msg = f"Nominatim returned invalid JSON for '{city}': {e}"
            raise GeocodingError(msg) from e

        if not isinstance(data, list) or not data:
            logger.debug("Nominatim found no match for '%s'", city)
            return None
        try:
            return Coordinates(lat=float(data[0]["lat"]), lon=float(data[0]["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Nominatim returned an unexpected payload for '{city}': {e}"
            raise GeocodingError(msg) from e
