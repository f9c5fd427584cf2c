"""
Geocoding helper utilities for filling in trip coordinates from the
city/country a user typed, using the public Nominatim API.
"""
import httpx
from typing import Optional, Tuple

import config
from utils.logger import setup_api_logger

logger = setup_api_logger()


async def geocode_place_to_coords(
    place_query: str,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[Tuple[float, float]]:
    """
    Convert a place name to coordinates.

    Returns:
        (latitude, longitude) or None if the place cannot be resolved
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(
                config.NOMINATIM_URL,
                params={
                    "q": place_query,
                    "format": "json",
                    "limit": 1,
                },
                headers={"User-Agent": "TravelBuddyApp/1.0"}
            )
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Geocoding failed for %r: %s", place_query, exc)
        return None

    if not data:
        return None
    try:
        return float(data[0]["lat"]), float(data[0]["lon"])
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Unexpected geocoding payload for %r: %s", place_query, exc)
        return None


def build_place_query(city: Optional[str] = None, country: Optional[str] = None) -> Optional[str]:
    """Build a place query string from city and country."""
    parts = [p for p in (city, country) if p]
    return ", ".join(parts) if parts else None
