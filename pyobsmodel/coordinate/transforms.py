# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""WGS84 conversions between ECEF, geodetic and local ENU frames

Geodetic positions are ``[lat (rad), lon (rad), h (m)]`` arrays, ECEF
positions ``[x, y, z]`` in meters.
"""

import numpy as np

from ..core.constants import FE_WGS84, RE_WGS84

E2_WGS84 = FE_WGS84 * (2.0 - FE_WGS84)  # first eccentricity squared


def _prime_vertical_radius(lat: float) -> float:
    return RE_WGS84 / np.sqrt(1.0 - E2_WGS84 * np.sin(lat)**2)


def ecef2llh(xyz: np.ndarray) -> np.ndarray:
    """Geodetic position of an ECEF point

    The latitude is found by fixed-point iteration, which converges to
    below a micrometer within a few steps for points near the Earth's
    surface and satellite altitudes. On the polar axis the latitude is
    ±π/2 and the height is measured from the pole.

    Examples
    --------
    >>> ecef2llh(np.array([6378137.0, 0.0, 0.0]))
    array([0., 0., 0.])
    """
    x, y, z = float(xyz[0]), float(xyz[1]), float(xyz[2])
    p = np.hypot(x, y)

    if p < 1e-9:
        return np.array([np.copysign(np.pi / 2.0, z), 0.0, abs(z) - RE_WGS84 * (1.0 - FE_WGS84)])

    lat = np.arctan2(z, p * (1.0 - E2_WGS84))
    for _ in range(5):
        N = _prime_vertical_radius(lat)
        h = p / np.cos(lat) - N
        lat = np.arctan2(z, p * (1.0 - E2_WGS84 * N / (N + h)))

    h = p / np.cos(lat) - _prime_vertical_radius(lat)
    return np.array([lat, np.arctan2(y, x), h])


def llh2ecef(llh: np.ndarray) -> np.ndarray:
    """ECEF position (m) of a geodetic position"""
    lat, lon, h = llh[0], llh[1], llh[2]
    N = _prime_vertical_radius(lat)
    r_eq = (N + h) * np.cos(lat)
    return np.array([r_eq * np.cos(lon), r_eq * np.sin(lon), (N * (1.0 - E2_WGS84) + h) * np.sin(lat)])


def compute_rotation_matrix_enu(llh: np.ndarray) -> np.ndarray:
    """Rotation from ECEF to the local East-North-Up frame

    Parameters
    ----------
    llh : np.ndarray
        Geodetic origin; only latitude and longitude are used

    Returns
    -------
    np.ndarray
        3x3 matrix R with v_enu = R @ v_ecef
    """
    sl, cl = np.sin(llh[0]), np.cos(llh[0])
    so, co = np.sin(llh[1]), np.cos(llh[1])
    return np.array([
        [-so, co, 0.0],
        [-sl * co, -sl * so, cl],
        [cl * co, cl * so, sl],
    ])


def ecef2enu(xyz: np.ndarray, org_llh: np.ndarray) -> np.ndarray:
    """Local ENU coordinates (m) of an ECEF point around a geodetic origin"""
    dx = np.asarray(xyz, dtype=float) - llh2ecef(org_llh)
    return compute_rotation_matrix_enu(org_llh) @ dx
