"""Geofence evaluation for GPS presence checks."""
import math
from typing import Tuple

from siwesecure.utils.validators import Validator
from siwesecure.utils.errors import ValidationError

EARTH_RADIUS_METERS = 6371000


class GeofenceService:
    """Pure great-circle distance and radius checks."""

    @staticmethod
    def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate distance between two GPS points in meters (haversine)."""
        lat1_rad = math.radians(lat1)
        lat2_rad = math.radians(lat2)
        delta_lat = math.radians(lat2 - lat1)
        delta_lon = math.radians(lon2 - lon1)

        a = (math.sin(delta_lat / 2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) *
             math.sin(delta_lon / 2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_METERS * c

    @staticmethod
    def evaluate(reported_lat, reported_lon, reference_lat, reference_lon, radius_m) -> Tuple[float, bool]:
        """Return ``(distance_m, valid)`` for a reported coordinate.

        The boundary is inclusive and the comparison uses the unrounded
        distance; callers round only for storage.
        """
        reported_lat = Validator.latitude(reported_lat)
        reported_lon = Validator.longitude(reported_lon)
        reference_lat = Validator.latitude(reference_lat, 'reference latitude')
        reference_lon = Validator.longitude(reference_lon, 'reference longitude')
        radius_m = Validator.number(radius_m, 'allowed radius')
        if radius_m < 0:
            raise ValidationError("allowed radius must not be negative")

        distance = GeofenceService.calculate_distance(
            reported_lat, reported_lon,
            reference_lat, reference_lon
        )

        return distance, distance <= radius_m
