"""Vector and rotation math for the spherical world.

Provides a small 3D vector type and a unit quaternion with the handful of
operations the flight model and camera need: Euler composition in
yaw-pitch-roll order and a "look" rotation built from a forward direction and
a local up vector.

Conventions:
- World frame: Y is the polar axis of the sphere.
- Body frame: +X is the nose, +Y is up, +Z is the right wing.

Typical usage example:
    from skyflight.physics.vectors import Quaternion, Vector3

    forward = Vector3(1.0, 0.0, 0.0).rotated_by_euler_yxz(pitch, heading, roll)
    orientation = Quaternion.look_rotation(velocity, position.normalized())
"""

import math
from dataclasses import dataclass

from skyflight.core.logging_system import get_logger

logger = get_logger(__name__)

# Below this squared length a vector has no usable direction
EPSILON_SQ = 1e-18

# Below this cross-product length forward and up are treated as colinear
COLINEAR_EPSILON = 1e-6


@dataclass
class Vector3:
    """Mutable 3D vector.

    Examples:
        >>> v = Vector3(3.0, 4.0, 0.0)
        >>> v.magnitude()
        5.0
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def zero() -> "Vector3":
        """Return a new zero vector."""
        return Vector3(0.0, 0.0, 0.0)

    def copy(self) -> "Vector3":
        """Return an independent copy."""
        return Vector3(self.x, self.y, self.z)

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector3":
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: "Vector3") -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        """Cross product (right-handed)."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude_squared(self) -> float:
        """Squared length (avoids the square root)."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.magnitude_squared())

    def distance_to(self, other: "Vector3") -> float:
        """Euclidean distance to another point."""
        return (self - other).magnitude()

    def is_near_zero(self) -> bool:
        """Check whether the vector is too short to carry a direction."""
        return self.magnitude_squared() < EPSILON_SQ

    def normalized(self) -> "Vector3":
        """Return the unit vector in the same direction.

        Raises:
            ValueError: If the vector is (near) zero length.
        """
        mag_sq = self.magnitude_squared()
        if mag_sq < EPSILON_SQ:
            raise ValueError("Cannot normalize a zero-length vector")
        return self / math.sqrt(mag_sq)

    def normalized_or(self, fallback: "Vector3") -> "Vector3":
        """Return the unit vector, or ``fallback`` when the vector has no direction."""
        if self.is_near_zero():
            return fallback.copy()
        return self.normalized()

    def lerp(self, target: "Vector3", t: float) -> "Vector3":
        """Linear interpolation toward ``target`` by fraction ``t``."""
        return Vector3(
            self.x + (target.x - self.x) * t,
            self.y + (target.y - self.y) * t,
            self.z + (target.z - self.z) * t,
        )

    def is_finite(self) -> bool:
        """Check that no component is NaN or infinite."""
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def rotated_by_euler_yxz(self, pitch_rad: float, yaw_rad: float, roll_rad: float) -> "Vector3":
        """Rotate by Euler angles composed in Y-X-Z order.

        The result is ``Ry(yaw) * Rx(pitch) * Rz(roll) * v``: roll is applied
        first and yaw is outermost.

        Args:
            pitch_rad: Rotation about X in radians.
            yaw_rad: Rotation about Y in radians.
            roll_rad: Rotation about Z in radians.

        Returns:
            Rotated vector.
        """
        cr, sr = math.cos(roll_rad), math.sin(roll_rad)
        cp, sp = math.cos(pitch_rad), math.sin(pitch_rad)
        cy, sy = math.cos(yaw_rad), math.sin(yaw_rad)

        # Rz(roll)
        x1 = self.x * cr - self.y * sr
        y1 = self.x * sr + self.y * cr
        z1 = self.z

        # Rx(pitch)
        x2 = x1
        y2 = y1 * cp - z1 * sp
        z2 = y1 * sp + z1 * cp

        # Ry(yaw)
        return Vector3(x2 * cy + z2 * sy, y2, -x2 * sy + z2 * cy)

    def __str__(self) -> str:
        return f"({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"


# Secondary axes tried, in order, when forward is colinear with up
_FALLBACK_AXES = (Vector3(1.0, 0.0, 0.0), Vector3(0.0, 0.0, 1.0))


@dataclass
class Quaternion:
    """Unit quaternion ``w + xi + yj + zk`` representing a rotation."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def identity() -> "Quaternion":
        """Return the identity rotation."""
        return Quaternion(1.0, 0.0, 0.0, 0.0)

    def copy(self) -> "Quaternion":
        """Return an independent copy."""
        return Quaternion(self.w, self.x, self.y, self.z)

    def __mul__(self, other: "Quaternion") -> "Quaternion":
        """Hamilton product: ``(self * other)`` applies ``other`` first."""
        return Quaternion(
            self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
        )

    def norm(self) -> float:
        """Quaternion norm."""
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Quaternion":
        """Return the unit quaternion (identity for a degenerate input)."""
        n = self.norm()
        if n < 1e-12 or not math.isfinite(n):
            return Quaternion.identity()
        return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def conjugate(self) -> "Quaternion":
        """Inverse rotation for a unit quaternion."""
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def rotate(self, v: Vector3) -> Vector3:
        """Rotate a vector by this quaternion."""
        # t = 2 * (q_vec x v); v' = v + w * t + q_vec x t
        qv = Vector3(self.x, self.y, self.z)
        t = qv.cross(v) * 2.0
        return v + t * self.w + qv.cross(t)

    @staticmethod
    def from_axis_angle(axis: Vector3, angle_rad: float) -> "Quaternion":
        """Build a rotation of ``angle_rad`` about ``axis``."""
        unit = axis.normalized()
        half = angle_rad * 0.5
        s = math.sin(half)
        return Quaternion(math.cos(half), unit.x * s, unit.y * s, unit.z * s)

    @staticmethod
    def from_euler_yxz(pitch_rad: float, yaw_rad: float, roll_rad: float) -> "Quaternion":
        """Compose ``Ry(yaw) * Rx(pitch) * Rz(roll)`` as a quaternion."""
        qy = Quaternion.from_axis_angle(Vector3(0.0, 1.0, 0.0), yaw_rad)
        qx = Quaternion.from_axis_angle(Vector3(1.0, 0.0, 0.0), pitch_rad)
        qz = Quaternion.from_axis_angle(Vector3(0.0, 0.0, 1.0), roll_rad)
        return qy * qx * qz

    @staticmethod
    def from_basis(forward: Vector3, up: Vector3, right: Vector3) -> "Quaternion":
        """Build the rotation mapping body X/Y/Z onto forward/up/right.

        The three vectors must be orthonormal and right-handed.
        """
        # Rotation matrix columns are the images of the body axes
        m00, m01, m02 = forward.x, up.x, right.x
        m10, m11, m12 = forward.y, up.y, right.y
        m20, m21, m22 = forward.z, up.z, right.z

        trace = m00 + m11 + m22
        if trace > 0.0:
            s = 0.5 / math.sqrt(trace + 1.0)
            q = Quaternion(0.25 / s, (m21 - m12) * s, (m02 - m20) * s, (m10 - m01) * s)
        elif m00 > m11 and m00 > m22:
            s = 2.0 * math.sqrt(1.0 + m00 - m11 - m22)
            q = Quaternion((m21 - m12) / s, 0.25 * s, (m01 + m10) / s, (m02 + m20) / s)
        elif m11 > m22:
            s = 2.0 * math.sqrt(1.0 + m11 - m00 - m22)
            q = Quaternion((m02 - m20) / s, (m01 + m10) / s, 0.25 * s, (m12 + m21) / s)
        else:
            s = 2.0 * math.sqrt(1.0 + m22 - m00 - m11)
            q = Quaternion((m10 - m01) / s, (m02 + m20) / s, (m12 + m21) / s, 0.25 * s)
        return q.normalized()

    @staticmethod
    def look_rotation(forward: Vector3, up: Vector3) -> "Quaternion":
        """Build an orientation whose nose points along ``forward``.

        The body up axis is ``up`` made orthogonal to ``forward``. When the
        two are colinear (e.g. flying straight up at a pole), a fixed
        secondary world axis supplies the right vector instead.

        Args:
            forward: Desired nose direction (any length).
            up: Reference up direction, usually the local radial vector.

        Returns:
            Unit quaternion.

        Raises:
            ValueError: If ``forward`` has no direction.
        """
        f = forward.normalized()
        right = f.cross(up.normalized_or(Vector3(0.0, 1.0, 0.0)))

        if right.magnitude() < COLINEAR_EPSILON:
            for axis in _FALLBACK_AXES:
                right = f.cross(axis)
                if right.magnitude() >= COLINEAR_EPSILON:
                    logger.debug("Look rotation degenerate, using fallback axis %s", axis)
                    break

        right = right.normalized()
        true_up = right.cross(f)
        return Quaternion.from_basis(f, true_up, right)

    def forward(self) -> Vector3:
        """Body +X expressed in world coordinates."""
        return self.rotate(Vector3(1.0, 0.0, 0.0))

    def up(self) -> Vector3:
        """Body +Y expressed in world coordinates."""
        return self.rotate(Vector3(0.0, 1.0, 0.0))

    def right(self) -> Vector3:
        """Body +Z expressed in world coordinates."""
        return self.rotate(Vector3(0.0, 0.0, 1.0))
