"""
Frame Conversion

Inertial (TEME) position -> Earth-fixed frame via Greenwich mean sidereal
time -> WGS-84 geodetic coordinates.

to_geodetic is the only place where radians become degrees and kilometres
become metres; everything upstream stays in the propagator's native units.
"""

import math
from datetime import datetime
from typing import NamedTuple, Sequence, Tuple

import numpy as np

from config import J2000_JD, SECONDS_PER_DAY, WGS84_A_KM, WGS84_B_KM, WGS84_E2
from orbit_track.propagator import datetime_to_jd_fr


class GeodeticPoint(NamedTuple):
    """Renderer-facing position: degrees and metres above the ellipsoid."""

    latitude_deg: float
    longitude_deg: float
    height_m: float


def gmst(instant: datetime) -> float:
    """
    Greenwich mean sidereal time (IAU-82).

    Args:
        instant: Datetime (naive means UTC); UT1 is approximated by UTC

    Returns:
        GMST in radians, in [0, 2*pi)
    """
    jd, fr = datetime_to_jd_fr(instant)
    T = (jd - J2000_JD + fr) / 36525.0

    gmst_sec = (
        67310.54841 +
        (876600.0 * 3600.0 + 8640184.812866) * T +
        0.093104 * T * T -
        6.2e-6 * T * T * T
    )

    return (gmst_sec % SECONDS_PER_DAY) * (2.0 * math.pi / SECONDS_PER_DAY)


def eci_to_ecef(position: Sequence[float], instant: datetime) -> np.ndarray:
    """
    Rotate an inertial position into the Earth-fixed frame.

    Args:
        position: Position vector [x, y, z] in km
        instant: Time the position is valid for

    Returns:
        ECEF position vector (km)
    """
    theta = gmst(instant)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    rotation = np.array([
        [cos_t, sin_t, 0.0],
        [-sin_t, cos_t, 0.0],
        [0.0, 0.0, 1.0],
    ])
    return rotation @ np.asarray(position, dtype=float)


def ecef_to_geodetic(r_ecef: Sequence[float]) -> Tuple[float, float, float]:
    """
    ECEF to geodetic conversion using Bowring's method.

    Args:
        r_ecef: Position vector in ECEF coordinates [x, y, z] (km)

    Returns:
        Tuple of (latitude_rad, longitude_rad, height_km)
    """
    a = WGS84_A_KM
    b = WGS84_B_KM
    e2 = WGS84_E2
    ep2 = e2 / (1.0 - e2)

    x, y, z = (float(c) for c in r_ecef)

    lon = math.atan2(y, x)
    p = math.hypot(x, y)

    # Pole
    if p < 1e-10:
        lat = math.pi / 2.0 if z >= 0 else -math.pi / 2.0
        return lat, lon, abs(z) - b

    theta = math.atan2(z * a, p * b)

    # Usually converges in 2-3 iterations
    for _ in range(5):
        sin_theta = math.sin(theta)
        cos_theta = math.cos(theta)

        lat = math.atan2(
            z + ep2 * b * sin_theta ** 3,
            p - e2 * a * cos_theta ** 3,
        )

        # Parametric latitude for the next pass
        new_theta = math.atan2(b * math.sin(lat), a * math.cos(lat))
        if abs(new_theta - theta) < 1e-12:
            break
        theta = new_theta

    cos_lat = math.cos(lat)
    sin_lat = math.sin(lat)
    N = a / math.sqrt(1.0 - e2 * sin_lat * sin_lat)

    if cos_lat > 1e-10:
        height = p / cos_lat - N
    else:
        height = z / sin_lat - N * (1.0 - e2)

    return lat, lon, height


def to_geodetic(position: Sequence[float], instant: datetime) -> GeodeticPoint:
    """
    Convert an inertial position to the renderer's geodetic point.

    Args:
        position: Inertial position (km) valid at ``instant``
        instant: Time the position was propagated to

    Returns:
        GeodeticPoint in degrees and metres
    """
    lat, lon, height_km = ecef_to_geodetic(eci_to_ecef(position, instant))
    return GeodeticPoint(math.degrees(lat), math.degrees(lon), height_km * 1000.0)
