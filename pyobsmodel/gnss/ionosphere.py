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

"""Ionospheric delay models for GNSS.

This module implements the ionosphere part of the atmosphere model. The
delay is computed on L1 by the selected model and scaled to the signal
frequency with the first-order inverse-square law:

    I(f) = I(L1) * (f_L1 / f)^2

The same delay retards the code and advances the carrier phase.
"""

import logging
from enum import Enum
from typing import Optional

import numpy as np

from ..core.constants import CLIGHT, ERR_BRDCI, FREQ_L1
from ..core.data_structures import IonoParamKind, IonosphericCorrections
from ..core.exceptions import ConfigurationError, MissingDataError
from ..core.frequency import Frequency, SatelliteSystem

logger = logging.getLogger(__name__)

# Systems whose broadcast Klobuchar parameters are used, in order of preference
KLOBUCHAR_SOURCES = (SatelliteSystem.GPS, SatelliteSystem.QZSS, SatelliteSystem.BDS)


class IonosphereModel(Enum):
    """Ionosphere delay models"""
    NONE = 'None'
    KLOBUCHAR = 'Klobuchar'


def klobuchar_model(lat, lon, az, el, tow, alpha, beta):
    """
    Klobuchar L1 ionospheric delay from broadcast alpha/beta coefficients

    Parameters:
    -----------
    lat, lon : float
        Receiver latitude and longitude (rad)
    az, el : float
        Satellite azimuth and elevation (rad)
    tow : float
        GPS time of week (s)
    alpha, beta : array_like
        Broadcast coefficients (4 each)

    Returns:
    --------
    float
        Delay on L1 (m)
    """
    el_sc = el / np.pi

    # Ionospheric pierce point, in semicircles
    psi = 0.0137 / (el_sc + 0.11) - 0.022
    ipp_lat = np.clip(lat / np.pi + psi * np.cos(az), -0.416, 0.416)
    ipp_lon = lon / np.pi + psi * np.sin(az) / np.cos(ipp_lat * np.pi)
    mag_lat = ipp_lat + 0.064 * np.cos((ipp_lon - 1.617) * np.pi)

    local_time = (4.32e4 * ipp_lon + tow) % 86400.0

    amp = max(0.0, np.polyval(np.asarray(alpha)[::-1], mag_lat))
    period = max(72000.0, np.polyval(np.asarray(beta)[::-1], mag_lat))
    phase = 2.0 * np.pi * (local_time - 50400.0) / period

    slant = 1.0 + 16.0 * (0.53 - el_sc) ** 3

    # Night-time constant outside the cosine half-period
    if abs(phase) >= 1.57:
        return float(CLIGHT * slant * 5e-9)
    return float(CLIGHT * slant * (5e-9 + amp * (1.0 - phase**2 / 2.0 + phase**4 / 24.0)))


def scale_ionospheric_delay(delay: float, from_freq: float, to_freq: float) -> float:
    """Scale a first-order ionospheric delay between carrier frequencies (Hz)"""
    return delay * (from_freq / to_freq) ** 2


def _klobuchar_parameters(corrections: Optional[IonosphericCorrections]):
    if corrections is not None:
        for sys in KLOBUCHAR_SOURCES:
            if corrections.contains(sys, IonoParamKind.ALPHA) and corrections.contains(sys, IonoParamKind.BETA):
                return corrections.get(sys, IonoParamKind.ALPHA), corrections.get(sys, IonoParamKind.BETA)
    raise MissingDataError("Klobuchar model selected but no broadcast alpha/beta parameters available")


def calc_ionospheric_delay(tow: float, freq: Frequency, freq_num: Optional[int], lla_pos,
                           elevation: float, azimuth: float,
                           model: IonosphereModel = IonosphereModel.KLOBUCHAR,
                           corrections: Optional[IonosphericCorrections] = None) -> float:
    """Compute the ionospheric delay of one signal.

    Parameters
    ----------
    tow : float
        GPS time of week in seconds
    freq : Frequency
        Signal frequency band
    freq_num : int, optional
        GLONASS frequency channel number (needed for FDMA bands)
    lla_pos : array_like
        Receiver position in lat/lon/height (radians, radians, meters)
    elevation : float
        Satellite elevation in radians
    azimuth : float
        Satellite azimuth in radians
    model : IonosphereModel
        Model to use
    corrections : IonosphericCorrections, optional
        Broadcast ionosphere parameters

    Returns
    -------
    float
        Ionospheric delay on the signal frequency in meters. Zero for
        elevations at or below the horizon.

    Raises
    ------
    MissingDataError
        If the model needs broadcast parameters that are not available or
        the frequency number of an FDMA signal is missing
    ConfigurationError
        If the model is not a supported IonosphereModel
    """
    if model == IonosphereModel.NONE or elevation <= 0.0:
        return 0.0
    if model == IonosphereModel.KLOBUCHAR:
        alpha, beta = _klobuchar_parameters(corrections)
        delay_l1 = klobuchar_model(lla_pos[0], lla_pos[1], azimuth, elevation, tow, alpha, beta)
        return scale_ionospheric_delay(delay_l1, FREQ_L1, freq.get_frequency(freq_num))
    raise ConfigurationError(f"Unsupported ionosphere model: {model!r}")


def iono_error_var(dpsr_I: float) -> float:
    """
    Variance of the broadcast ionosphere model error

    (ERR_BRDCI * dpsr_I)^2; grows with the delay magnitude and vanishes
    when no delay is applied.

    Args:
        dpsr_I: Ionospheric delay on the signal frequency (m)

    Returns:
        Variance (m^2)
    """
    return (ERR_BRDCI * dpsr_I) ** 2
