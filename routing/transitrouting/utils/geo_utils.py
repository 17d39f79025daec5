import math

import numpy as np

EARTH_RADIUS_M = 6371000.0  # Earth's radius in meters


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate haversine distance between two points in meters"""
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)
    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad
    a = (math.sin(dlat/2)**2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon/2)**2)
    c = 2 * math.asin(math.sqrt(a))
    return EARTH_RADIUS_M * c


def vectorized_haversine(lat1, lon1, lat2, lon2):
    """Vectorized haversine distance calculation using numpy (meters)"""
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = np.sin(dlat/2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon/2)**2
    c = 2 * np.arcsin(np.sqrt(a))

    return EARTH_RADIUS_M * c


def path_length(coordinates) -> float:
    """Sum of great-circle distances between consecutive (lat, lng) points"""
    if len(coordinates) < 2:
        return 0.0
    points = np.asarray(coordinates, dtype=float)
    legs = vectorized_haversine(points[:-1, 0], points[:-1, 1], points[1:, 0], points[1:, 1])
    return float(np.sum(legs))
