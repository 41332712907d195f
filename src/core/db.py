"""SQLite database layer for the city coordinate and distance caches."""

import sqlite3
from datetime import datetime
from pathlib import Path

from src.core.schemas import Coordinates

_CITY_COORDINATES_TABLE = """
CREATE TABLE IF NOT EXISTS city_coordinates (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    city_name   TEXT    NOT NULL COLLATE NOCASE,
    latitude    REAL    NOT NULL,
    longitude   REAL    NOT NULL,
    created_at  TEXT    NOT NULL,
    updated_at  TEXT    NOT NULL,
    UNIQUE(city_name)
);
"""

_DISTANCE_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS distance_cache (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    city_a      TEXT    NOT NULL COLLATE NOCASE,
    city_b      TEXT    NOT NULL COLLATE NOCASE,
    distance_km REAL    NOT NULL,
    created_at  TEXT    NOT NULL,
    UNIQUE(city_a, city_b)
);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_CITY_COORDINATES_TABLE)
    conn.execute(_DISTANCE_CACHE_TABLE)
    conn.commit()
    return conn


def canonical_pair(city_a: str, city_b: str) -> tuple[str, str]:
    """Order a city pair so (A, B) and (B, A) share one cache row."""
    a, b = city_a.strip(), city_b.strip()
    if (b.casefold(), b) < (a.casefold(), a):
        return (b, a)
    return (a, b)


def get_city_coordinates(conn: sqlite3.Connection, city_name: str) -> Coordinates | None:
    """Return cached coordinates for a city (case-insensitive), or None."""
    row = conn.execute(
        "SELECT latitude, longitude FROM city_coordinates WHERE city_name = ? LIMIT 1",
        (city_name.strip(),),
    ).fetchone()
    if row is None:
        return None
    return Coordinates(lat=row["latitude"], lon=row["longitude"])


def cache_city_coordinates(
    conn: sqlite3.Connection,
    city_name: str,
    coords: Coordinates,
) -> None:
    """Insert or overwrite the coordinates of a city (last write wins)."""
    now = datetime.now().isoformat()
    conn.execute(
        """
        INSERT INTO city_coordinates (city_name, latitude, longitude, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(city_name)
        DO UPDATE SET
            latitude = excluded.latitude,
            longitude = excluded.longitude,
            updated_at = excluded.updated_at
        """,
        (city_name.strip(), coords.lat, coords.lon, now, now),
    )
    conn.commit()


def get_cached_distance(conn: sqlite3.Connection, city_a: str, city_b: str) -> float | None:
    """Return the cached distance in km for a city pair in either order, or None."""
    a, b = canonical_pair(city_a, city_b)
    row = conn.execute(
        "SELECT distance_km FROM distance_cache WHERE city_a = ? AND city_b = ? LIMIT 1",
        (a, b),
    ).fetchone()
    if row is None:
        return None
    return float(row["distance_km"])


def cache_distance(
    conn: sqlite3.Connection,
    city_a: str,
    city_b: str,
    distance_km: float,
) -> None:
    """Store the distance for a city pair under its canonical ordering."""
    a, b = canonical_pair(city_a, city_b)
    conn.execute(
        """
        INSERT INTO distance_cache (city_a, city_b, distance_km, created_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(city_a, city_b)
        DO UPDATE SET distance_km = excluded.distance_km
        """,
        (a, b, distance_km, datetime.now().isoformat()),
    )
    conn.commit()
