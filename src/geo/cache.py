"""Cache store interface for city coordinates and city-pair distances.

The service only issues cache-aside reads and write-throughs; eviction and
durability belong to the store.
"""

import logging
import sqlite3
from typing import Protocol, runtime_checkable

from src.core.db import (
    cache_city_coordinates,
    cache_distance,
    get_cached_distance,
    get_city_coordinates,
)
from src.core.schemas import Coordinates

logger = logging.getLogger(__name__)


class CacheStoreError(Exception):
    """The cache store could not complete a read or write."""


@runtime_checkable
class CacheStore(Protocol):
    """Key-value storage for coordinates and distances."""

    def get_coordinates(self, city: str) -> Coordinates | None: ...

    def put_coordinates(self, city: str, coords: Coordinates) -> None: ...

    def get_distance(self, city_a: str, city_b: str) -> float | None: ...

    def put_distance(self, city_a: str, city_b: str, distance_km: float) -> None: ...


class SqliteCacheStore:
    """CacheStore backed by the city_coordinates and distance_cache tables.

    Usage::

        store = SqliteCacheStore(init_db(settings.database.path))
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_coordinates(self, city: str) -> Coordinates | None:
        try:
            return get_city_coordinates(self._conn, city)
        except sqlite3.Error as e:
            msg = f"Coordinate lookup failed for '{city}': {e}"
            raise CacheStoreError(msg) from e

    def put_coordinates(self, city: str, coords: Coordinates) -> None:
        try:
            cache_city_coordinates(self._conn, city, coords)
        except sqlite3.Error as e:
            msg = f"Coordinate write failed for '{city}': {e}"
            raise CacheStoreError(msg) from e
        logger.debug("Cached coordinates for '%s'", city)

    def get_distance(self, city_a: str, city_b: str) -> float | None:
        try:
            return get_cached_distance(self._conn, city_a, city_b)
        except sqlite3.Error as e:
            msg = f"Distance lookup failed for '{city_a}'/'{city_b}': {e}"
            raise CacheStoreError(msg) from e

    def put_distance(self, city_a: str, city_b: str, distance_km: float) -> None:
        try:
            cache_distance(self._conn, city_a, city_b, distance_km)
        except sqlite3.Error as e:
            msg = f"Distance write failed for '{city_a}'/'{city_b}': {e}"
            raise CacheStoreError(msg) from e
        logger.debug("Cached distance '%s'/'%s': %.1f km", city_a, city_b, distance_km)
