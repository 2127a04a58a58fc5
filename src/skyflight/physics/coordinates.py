"""Geodetic <-> Cartesian conversion on a fixed-radius sphere.

The world is a sphere of ``scene_radius`` units centred at the origin with Y
as the polar axis. Latitude 0 / longitude 0 maps to +X.

Pole convention: at latitude +/-90 the longitude is indeterminate. The reverse
conversion then returns the caller's previous longitude (default 0.0) instead
of whatever ``atan2(0, 0)`` happens to produce.

Typical usage:
    system = CoordinateSystem(scene_radius=100.0)
    position = system.to_cartesian(GeoPosition(48.85, 2.35, 2.0))
    geo = system.to_geodetic(position, previous_longitude=2.35)
"""

import math
from dataclasses import dataclass

from skyflight.physics.vectors import Vector3

# Horizontal radius below which a point is considered on the polar axis
POLE_EPSILON = 1e-9


@dataclass(frozen=True)
class GeoPosition:
    """Position relative to the reference sphere.

    Attributes:
        latitude: Degrees in [-90, 90].
        longitude: Degrees in (-180, 180].
        altitude: Scene units above the sphere surface.
    """

    latitude: float
    longitude: float
    altitude: float = 0.0


def normalize_longitude(longitude: float) -> float:
    """Wrap a longitude into (-180, 180]."""
    wrapped = (longitude + 180.0) % 360.0 - 180.0
    if wrapped <= -180.0:
        wrapped += 360.0
    return wrapped


def longitude_delta(from_lon: float, to_lon: float) -> float:
    """Signed shortest difference ``to_lon - from_lon`` in (-180, 180].

    Examples:
        >>> longitude_delta(179.0, -179.0)
        2.0
    """
    return normalize_longitude(to_lon - from_lon)


class CoordinateSystem:
    """Converts between geodetic and sphere-centred Cartesian coordinates.

    Attributes:
        scene_radius: Sphere radius in scene units.
        earth_radius_km: Real-world radius for scaling distances.
    """

    def __init__(self, scene_radius: float = 100.0, earth_radius_km: float = 6371.0) -> None:
        self.scene_radius = scene_radius
        self.earth_radius_km = earth_radius_km

    @property
    def km_per_unit(self) -> float:
        """Real-world kilometres per scene unit."""
        return self.earth_radius_km / self.scene_radius

    def to_cartesian(self, position: GeoPosition) -> Vector3:
        """Convert a geodetic position to a Cartesian point."""
        return self.lat_lon_to_vector(position.latitude, position.longitude, position.altitude)

    def lat_lon_to_vector(self, latitude: float, longitude: float, altitude: float = 0.0) -> Vector3:
        """Convert latitude/longitude/altitude to a Cartesian point.

        Out-of-range latitude and negative altitude are clamped.

        Args:
            latitude: Degrees, clamped to [-90, 90].
            longitude: Degrees, any value (periodic).
            altitude: Scene units above the surface, clamped to >= 0.

        Returns:
            Point with radius ``scene_radius + altitude``.
        """
        latitude = max(-90.0, min(90.0, latitude))
        altitude = max(0.0, altitude)

        phi = math.radians(90.0 - latitude)
        theta = math.radians(longitude + 180.0)
        radius = self.scene_radius + altitude

        return Vector3(
            -radius * math.sin(phi) * math.cos(theta),
            radius * math.cos(phi),
            radius * math.sin(phi) * math.sin(theta),
        )

    def to_geodetic(self, position: Vector3, previous_longitude: float = 0.0) -> GeoPosition:
        """Convert a Cartesian point back to geodetic coordinates.

        Args:
            position: Sphere-centred point.
            previous_longitude: Longitude reported when the point lies on the
                polar axis (or at the centre).

        Returns:
            Geodetic position; altitude may be negative for points inside the
            sphere.
        """
        radius = position.magnitude()
        if radius < POLE_EPSILON:
            return GeoPosition(0.0, normalize_longitude(previous_longitude), -self.scene_radius)

        altitude = radius - self.scene_radius
        cos_phi = max(-1.0, min(1.0, position.y / radius))
        latitude = 90.0 - math.degrees(math.acos(cos_phi))

        horizontal = math.hypot(position.x, position.z)
        if horizontal < POLE_EPSILON * max(1.0, radius):
            longitude = normalize_longitude(previous_longitude)
        else:
            longitude = normalize_longitude(math.degrees(math.atan2(position.z, -position.x)) - 180.0)

        return GeoPosition(latitude, longitude, altitude)

    def surface_distance_km(self, a: Vector3, b: Vector3) -> float:
        """Straight-line distance between two points, in real-world km."""
        return a.distance_to(b) * self.km_per_unit

    def local_up(self, position: Vector3) -> Vector3:
        """Unit radial vector at ``position`` (global +Y at the centre)."""
        return position.normalized_or(Vector3(0.0, 1.0, 0.0))
