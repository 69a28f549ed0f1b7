# app/utils/geo_utils.py
import math

EARTH_RADIUS_MILES = 3959.0


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two lat/lng points, in miles."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def coerce_point(value) -> tuple[float, float] | None:
    """Accept {'lat', 'lng'} dicts or objects and return (lat, lng), else None."""
    if value is None:
        return None
    if isinstance(value, dict):
        lat, lng = value.get("lat"), value.get("lng")
    else:
        lat, lng = getattr(value, "lat", None), getattr(value, "lng", None)
    if lat is None or lng is None:
        return None
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError):
        return None
