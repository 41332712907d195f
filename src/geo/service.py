"""Geodistance service: cache-aside coordinates and city-pair distances.

Every lookup fails soft. Blank input, unknown cities, geocoder failures and
cache store errors resolve to None for the affected lookup only.
"""

import asyncio
import logging

from src.core.schemas import Coordinates
from src.geo.cache import CacheStore, CacheStoreError
from src.geo.distance import haversine_km
from src.geo.geocoder import Geocoder, GeocodingError

logger = logging.getLogger(__name__)


class GeodistanceService:
    """Resolves coordinates and distances through an injected cache store.

    Usage::

        service = GeodistanceService(SqliteCacheStore(conn), geocoder)
        km = await service.distance("Budapest", "Vienna")
    """

    def __init__(self, store: CacheStore, geocoder: Geocoder, max_concurrency: int = 4) -> None:
        self._store = store
        self._geocoder = geocoder
        self._max_concurrency = max(1, max_concurrency)

    async def resolve_coordinates(self, city: str) -> Coordinates | None:
        """Cached coordinates for a city; geocode and write through on a miss."""
        city = city.strip()
        if not city:
            return None

        try:
            cached = self._store.get_coordinates(city)
        except CacheStoreError as e:
            logger.warning("Cache unavailable, treating '%s' as unresolved: %s", city, e)
            return None
        if cached is not None:
            return cached

        try:
            coords = await self._geocoder.geocode(city)
        except GeocodingError as e:
            logger.warning("Geocoding failed for '%s': %s", city, e)
            return None
        except TimeoutError:
            logger.warning("Geocoding timed out for '%s'", city)
            return None
        if coords is None:
            logger.info("City '%s' could not be geocoded", city)
            return None

        try:
            self._store.put_coordinates(city, coords)
        except CacheStoreError as e:
            logger.warning("Could not cache coordinates for '%s': %s", city, e)
        return coords

    async def distance(self, city_a: str, city_b: str) -> float | None:
        """Distance in km between two cities, or None if either side is unresolved."""
        city_a, city_b = city_a.strip(), city_b.strip()
        if not city_a or not city_b:
            return None
        if city_a.casefold() == city_b.casefold():
            coords = await self.resolve_coordinates(city_a)
            return None if coords is None else 0.0

        try:
            cached = self._store.get_distance(city_a, city_b)
        except CacheStoreError as e:
            logger.warning("Cache unavailable for '%s'/'%s': %s", city_a, city_b, e)
            return None
        if cached is not None:
            return cached

        coords_a, coords_b = await asyncio.gather(
            self.resolve_coordinates(city_a),
            self.resolve_coordinates(city_b),
        )
        if coords_a is None or coords_b is None:
            return None

        km = haversine_km(coords_a, coords_b)
        try:
            self._store.put_distance(city_a, city_b, km)
        except CacheStoreError as e:
            logger.warning("Could not cache distance '%s'/'%s': %s", city_a, city_b, e)
        return km

    async def batch_distance(self, reference: str, cities: list[str]) -> list[float | None]:
        """Distances from one reference city, in input order.

        Each distinct city is looked up once, with at most max_concurrency
        lookups in flight. Blank or unresolved cities map to None.
        """
        unique = list(dict.fromkeys(c.strip() for c in cities if c and c.strip()))
        if not unique or not reference.strip():
            return [None] * len(cities)

        if await self.resolve_coordinates(reference) is None:
            logger.info("Reference location '%s' is unresolved", reference)
            return [None] * len(cities)

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def lookup(city: str) -> float | None:
            async with semaphore:
                try:
                    return await self.distance(reference, city)
                except Exception:
                    logger.warning(
                        "Distance lookup failed for '%s'", city, exc_info=True,
                    )
                    return None

        resolved = await asyncio.gather(*(lookup(c) for c in unique))
        by_city = dict(zip(unique, resolved))
        logger.debug(
            "Batch distance from '%s': %d/%d cities resolved",
            reference, sum(d is not None for d in resolved), len(unique),
        )
        return [by_city.get(c.strip()) if c else None for c in cities]
