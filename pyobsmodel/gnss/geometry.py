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

"""Receiver-satellite geometry.

Stateless functions for the geometric part of the observation model:
line-of-sight range, Earth rotation (Sagnac) corrections for an
Earth-fixed frame, line-of-sight projection of the relative velocity
and satellite azimuth/elevation.

All positions and velocities are ECEF (m, m/s). The scalar kernels are
compiled with numba without fastmath, so results keep IEEE-754 double
semantics.
"""

from typing import Tuple

import numpy as np
from numba import njit

from ..coordinate.transforms import compute_rotation_matrix_enu
from ..core.constants import CLIGHT, GME, OMGE, RE_WGS84


@njit(cache=True)
def _norm3(x, y, z):
    return np.sqrt(x * x + y * y + z * z)


@njit(cache=True)
def _sagnac(xr, yr, xs, ys):
    return OMGE / CLIGHT * (xs * yr - ys * xr)


@njit(cache=True)
def _sagnac_rate(xr, yr, vxr, vyr, xs, ys, vxs, vys):
    return OMGE / CLIGHT * (vys * xr + ys * vxr - vxs * yr - xs * vyr)


def _vec3(v) -> np.ndarray:
    v = np.asarray(v, dtype=float)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {v.shape}")
    return v


def geometric_range(sat_pos, recv_pos) -> float:
    """
    Geometric distance between satellite and receiver

    Parameters:
    -----------
    sat_pos : array_like
        Satellite ECEF position (m)
    recv_pos : array_like
        Receiver ECEF position (m)

    Returns:
    --------
    float
        Euclidean distance (m)
    """
    d = _vec3(sat_pos) - _vec3(recv_pos)
    return float(_norm3(d[0], d[1], d[2]))


def line_of_sight(recv_pos, sat_pos) -> np.ndarray:
    """Unit vector from receiver to satellite (zero vector if coincident)"""
    d = _vec3(sat_pos) - _vec3(recv_pos)
    r = _norm3(d[0], d[1], d[2])
    return d / r if r > 0 else np.zeros(3)


def sagnac_correction(recv_pos, sat_pos) -> float:
    """
    Range correction for the Earth rotation during signal transit

    Parameters:
    -----------
    recv_pos : array_like
        Receiver ECEF position (m)
    sat_pos : array_like
        Satellite ECEF position at transmission time (m)

    Returns:
    --------
    float
        Sagnac correction OMGE/c * (xs*yr - ys*xr) (m)
    """
    r = _vec3(recv_pos)
    s = _vec3(sat_pos)
    return float(_sagnac(r[0], r[1], s[0], s[1]))


def sagnac_rate_correction(recv_pos, sat_pos, recv_vel, sat_vel) -> float:
    """
    Rate analogue of the Sagnac correction, used for Doppler

    The value is subtracted from the projected relative velocity, i.e. it
    is the negative time derivative of :func:`sagnac_correction`.

    Parameters:
    -----------
    recv_pos, sat_pos : array_like
        Receiver and satellite ECEF positions (m)
    recv_vel, sat_vel : array_like
        Receiver and satellite ECEF velocities (m/s)

    Returns:
    --------
    float
        Sagnac rate correction (m/s)
    """
    r, s = _vec3(recv_pos), _vec3(sat_pos)
    vr, vs = _vec3(recv_vel), _vec3(sat_vel)
    return float(_sagnac_rate(r[0], r[1], vr[0], vr[1], s[0], s[1], vs[0], vs[1]))


def projected_relative_velocity(los, sat_vel, recv_vel) -> float:
    """Relative satellite-receiver velocity projected on the line of sight (m/s)"""
    return float(np.dot(_vec3(los), _vec3(sat_vel) - _vec3(recv_vel)))


def sat_azimuth_elevation(recv_lla, los) -> Tuple[float, float]:
    """
    Satellite azimuth and elevation from the line-of-sight vector

    Parameters:
    -----------
    recv_lla : array_like
        Receiver geodetic position [lat (rad), lon (rad), h (m)]
    los : array_like
        Unit line-of-sight vector receiver -> satellite (ECEF)

    Returns:
    --------
    az : float
        Azimuth in [0, 2π) (rad), clockwise from north
    el : float
        Elevation (rad)
    """
    enu = compute_rotation_matrix_enu(recv_lla) @ _vec3(los)
    az = np.arctan2(enu[0], enu[1])
    if az < 0:
        az += 2 * np.pi
    el = np.arcsin(np.clip(enu[2], -1.0, 1.0))
    return float(az), float(el)


def shapiro_delay(recv_pos, sat_pos) -> float:
    """
    Relativistic signal delay from space-time curvature (Shapiro effect)

    Returns zero for receivers closer to the geocenter than half the
    Earth radius, where the formula is not meaningful.

    Returns:
    --------
    float
        Delay (s)
    """
    r, s = _vec3(recv_pos), _vec3(sat_pos)
    r_norm = _norm3(r[0], r[1], r[2])
    if r_norm <= RE_WGS84 / 2.0:
        return 0.0
    pos_norm = _norm3(s[0], s[1], s[2]) + r_norm
    rho = geometric_range(s, r)
    return float(2.0 * GME / CLIGHT**3 * np.log((pos_norm + rho) / (pos_norm - rho)))
