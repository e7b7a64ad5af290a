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

"""Tropospheric delay models for GNSS.

This module implements the troposphere part of the atmosphere model. The
slant delay is decomposed into zenith hydrostatic (ZHD) and zenith wet (ZWD)
delays, each scaled to the satellite elevation by its own mapping function:

    dpsr_T = ZHD * m_h(el) + ZWD * m_w(el)

Zenith delay models:
- Saastamoinen model with meteorological parameters from either the
  international standard atmosphere (reduced to receiver height) or
  standard sea-level values

Mapping functions:
- Cosecant: 1/sin(el)
- Chao: continued fraction used with the simple Saastamoinen model
- NMF: Niell mapping functions with seasonal and height terms

Notes:
    All delay outputs are in meters.
    Angles are in radians unless otherwise specified.
    Meteorological parameters: pressure (hPa), temperature (K),
    relative humidity (fraction).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np
from numba import njit

from ..core.constants import ERR_SAAS, REL_HUMI
from ..core.data_structures import ZenithDelay
from ..core.exceptions import ConfigurationError
from ..core.time import GNSSTime
from ..utils import enum_from_name

# Saastamoinen validity range of the receiver height (m)
MIN_HEIGHT = -100.0
MAX_HEIGHT = 1e4


class TroposphereModel(Enum):
    """Zenith delay models"""
    NONE = 'None'
    SAASTAMOINEN = 'Saastamoinen'


class AtmosphereModel(Enum):
    """Sources of the meteorological parameters"""
    ISA = 'ISA'                # standard atmosphere at receiver height
    SEA_LEVEL = 'SeaLevel'     # standard atmosphere at sea level


class MappingFunction(Enum):
    """Elevation mapping functions"""
    NONE = 'None'
    COSECANT = 'Cosecant'
    CHAO = 'Chao'
    NMF = 'NMF'


@dataclass
class TroposphereModelSelection:
    """Selected zenith delay models and mapping functions

    Attributes
    ----------
    zhd_model : tuple
        (TroposphereModel, AtmosphereModel) for the hydrostatic delay
    zwd_model : tuple
        (TroposphereModel, AtmosphereModel) for the wet delay
    zhd_mapping_function : MappingFunction
        Hydrostatic mapping function
    zwd_mapping_function : MappingFunction
        Wet mapping function
    """
    zhd_model: Tuple[TroposphereModel, AtmosphereModel] = (TroposphereModel.SAASTAMOINEN, AtmosphereModel.ISA)
    zwd_model: Tuple[TroposphereModel, AtmosphereModel] = (TroposphereModel.SAASTAMOINEN, AtmosphereModel.ISA)
    zhd_mapping_function: MappingFunction = MappingFunction.NMF
    zwd_mapping_function: MappingFunction = MappingFunction.NMF

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check that every slot holds a model of the right kind

        Raises
        ------
        ConfigurationError
            On an unset or unsupported selection
        """
        for name in ('zhd_model', 'zwd_model'):
            model = getattr(self, name)
            if (not isinstance(model, (tuple, list)) or len(model) != 2
                    or not isinstance(model[0], TroposphereModel)
                    or not isinstance(model[1], AtmosphereModel)):
                raise ConfigurationError(f"{name} must be a (TroposphereModel, AtmosphereModel) pair, got {model!r}")
        for name in ('zhd_mapping_function', 'zwd_mapping_function'):
            mapping = getattr(self, name)
            if not isinstance(mapping, MappingFunction):
                raise ConfigurationError(f"{name} must be a MappingFunction, got {mapping!r}")

    @classmethod
    def disabled(cls) -> 'TroposphereModelSelection':
        """Selection that applies no troposphere delay"""
        return cls((TroposphereModel.NONE, AtmosphereModel.ISA),
                   (TroposphereModel.NONE, AtmosphereModel.ISA),
                   MappingFunction.NONE, MappingFunction.NONE)

    def to_dict(self) -> dict:
        """Convert selection to dictionary for serialization"""
        return {
            'zhd_model': {'model': self.zhd_model[0].name, 'atmosphere': self.zhd_model[1].name},
            'zwd_model': {'model': self.zwd_model[0].name, 'atmosphere': self.zwd_model[1].name},
            'zhd_mapping_function': self.zhd_mapping_function.name,
            'zwd_mapping_function': self.zwd_mapping_function.name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TroposphereModelSelection':
        """Create selection from dictionary; missing keys keep their defaults"""
        obj = cls()
        for key in ('zhd_model', 'zwd_model'):
            if key in data:
                setattr(obj, key, (enum_from_name(TroposphereModel, data[key]['model']),
                                   enum_from_name(AtmosphereModel, data[key]['atmosphere'])))
        for key in ('zhd_mapping_function', 'zwd_mapping_function'):
            if key in data:
                setattr(obj, key, enum_from_name(MappingFunction, data[key]))
        return obj


def meteorological_parameters(height: float, atmosphere: AtmosphereModel = AtmosphereModel.ISA):
    """
    Pressure, temperature and water vapor pressure

    Parameters:
    -----------
    height : float
        Receiver height above the ellipsoid (m)
    atmosphere : AtmosphereModel
        Source of the parameters

    Returns:
    --------
    pres : float
        Total pressure (hPa)
    temp : float
        Temperature (K)
    e : float
        Partial pressure of water vapor (hPa)
    """
    if atmosphere == AtmosphereModel.ISA:
        hgt = max(height, 0.0)
        pres = 1013.25 * (1.0 - 2.2557e-5 * hgt) ** 5.2568
        temp = 15.0 - 6.5e-3 * hgt + 273.16
    else:
        pres = 1013.25
        temp = 288.16
    e = 6.108 * REL_HUMI * np.exp((17.15 * temp - 4684.0) / (temp - 38.45))
    return pres, temp, e


def saastamoinen_zhd(lat: float, height: float, pres: float) -> float:
    """Saastamoinen zenith hydrostatic delay (m)"""
    return 0.0022768 * pres / (1.0 - 0.00266 * np.cos(2.0 * lat) - 0.00028 * height / 1000.0)


def saastamoinen_zwd(temp: float, e: float) -> float:
    """Saastamoinen zenith wet delay (m)"""
    return 0.002277 * (1255.0 / temp + 0.05) * e


@njit(cache=True)
def mapping_function_form(sin_el, a, b, c):
    """
    Common form for mapping functions

    m(e) = (1 + a/(1 + b/(1 + c))) / (sin(e) + a/(sin(e) + b/(sin(e) + c)))
    """
    numerator = 1.0 + a / (1.0 + b / (1.0 + c))
    denominator = sin_el + a / (sin_el + b / (sin_el + c))
    return numerator / denominator


# Niell (1996) coefficients at latitudes 15, 30, 45, 60, 75 deg
_NMF_LAT = np.array([15.0, 30.0, 45.0, 60.0, 75.0])
_NMF_HYD_AVG = np.array([
    [1.2769934e-3, 1.2683230e-3, 1.2465397e-3, 1.2196049e-3, 1.2045996e-3],
    [2.9153695e-3, 2.9152299e-3, 2.9288445e-3, 2.9022565e-3, 2.9024912e-3],
    [62.610505e-3, 62.837393e-3, 63.721774e-3, 63.824265e-3, 64.258455e-3],
])
_NMF_HYD_AMP = np.array([
    [0.0, 1.2709626e-5, 2.6523662e-5, 3.4000452e-5, 4.1202191e-5],
    [0.0, 2.1414979e-5, 3.0160779e-5, 7.2562722e-5, 11.723375e-5],
    [0.0, 9.0128400e-5, 4.3497037e-5, 84.795348e-5, 170.37206e-5],
])
_NMF_WET = np.array([
    [5.8021897e-4, 5.6794847e-4, 5.8118019e-4, 5.9727542e-4, 6.1641693e-4],
    [1.4275268e-3, 1.5138625e-3, 1.4572752e-3, 1.5007428e-3, 1.7599082e-3],
    [4.3472961e-2, 4.6729510e-2, 4.3908931e-2, 4.4626982e-2, 5.4736038e-2],
])
_NMF_HGT = (2.53e-5, 5.49e-3, 1.14e-3)


def niell_mapping(el: float, lat: float, height: float, doy: float):
    """
    Niell mapping functions

    Args:
        el: Satellite elevation (rad)
        lat: Receiver latitude (rad)
        height: Receiver height (m)
        doy: Day of year

    Returns:
        map_hyd: Hydrostatic mapping factor
        map_wet: Wet mapping factor
    """
    lat_deg = np.degrees(abs(lat))
    sin_el = np.sin(el)

    # Seasonal phase, shifted by half a year in the southern hemisphere
    y = (doy - 28.0) / 365.25 + (0.5 if lat < 0 else 0.0)
    cosy = np.cos(2.0 * np.pi * y)

    a, b, c = (np.interp(lat_deg, _NMF_LAT, _NMF_HYD_AVG[i]) - np.interp(lat_deg, _NMF_LAT, _NMF_HYD_AMP[i]) * cosy
               for i in range(3))
    dm = (1.0 / sin_el - mapping_function_form(sin_el, *_NMF_HGT)) * height / 1000.0
    map_hyd = mapping_function_form(sin_el, a, b, c) + dm

    aw, bw, cw = (np.interp(lat_deg, _NMF_LAT, _NMF_WET[i]) for i in range(3))
    map_wet = mapping_function_form(sin_el, aw, bw, cw)

    return float(map_hyd), float(map_wet)


def chao_mapping(el: float):
    """Chao hydrostatic and wet mapping factors"""
    map_hyd = 1.0 / (np.sin(el) + 0.00143 / (np.tan(el) + 0.0445))
    map_wet = 1.0 / (np.sin(el) + 0.00035 / (np.tan(el) + 0.017))
    return map_hyd, map_wet


def _mapping_factor(mapping: MappingFunction, wet: bool, el: float, lla_pos, doy: float) -> float:
    if mapping == MappingFunction.NONE:
        return 1.0
    if mapping == MappingFunction.COSECANT:
        return 1.0 / np.sin(el)
    if mapping == MappingFunction.CHAO:
        return chao_mapping(el)[1 if wet else 0]
    if mapping == MappingFunction.NMF:
        return niell_mapping(el, lla_pos[0], lla_pos[2], doy)[1 if wet else 0]
    raise ConfigurationError(f"Unsupported mapping function: {mapping!r}")


def _zenith_delay(model: Tuple[TroposphereModel, AtmosphereModel], wet: bool, lla_pos) -> float:
    tropo, atmosphere = model
    if tropo == TroposphereModel.NONE:
        return 0.0
    if tropo == TroposphereModel.SAASTAMOINEN:
        pres, temp, e = meteorological_parameters(lla_pos[2], atmosphere)
        return saastamoinen_zwd(temp, e) if wet else saastamoinen_zhd(lla_pos[0], lla_pos[2], pres)
    raise ConfigurationError(f"Unsupported troposphere model: {tropo!r}")


def calc_tropospheric_delay_and_mapping(time: GNSSTime, lla_pos, elevation: float, azimuth: float,
                                        selection: TroposphereModelSelection = None) -> ZenithDelay:
    """
    Zenith delays and mapping factors for one satellite

    Args:
        time: Epoch of the observation (day of year for NMF)
        lla_pos: Receiver geodetic position [lat (rad), lon (rad), h (m)]
        elevation: Satellite elevation (rad)
        azimuth: Satellite azimuth (rad), reserved for gradient mapping
        selection: Selected models (default: Saastamoinen/ISA/NMF)

    Returns:
        ZenithDelay with ZHD, ZWD and both mapping factors. All zero for
        elevation <= 0 or a receiver height outside [-100 m, 10 km].
    """
    if selection is None:
        selection = TroposphereModelSelection()
    if elevation <= 0.0 or not MIN_HEIGHT <= lla_pos[2] <= MAX_HEIGHT:
        return ZenithDelay()

    doy = time.day_of_year
    return ZenithDelay(
        ZHD=_zenith_delay(selection.zhd_model, False, lla_pos),
        ZWD=_zenith_delay(selection.zwd_model, True, lla_pos),
        zhd_mapping_factor=_mapping_factor(selection.zhd_mapping_function, False, elevation, lla_pos, doy),
        zwd_mapping_factor=_mapping_factor(selection.zwd_mapping_function, True, elevation, lla_pos, doy),
    )


def tropo_error_var(dpsr_T: float, elevation: float) -> float:
    """
    Variance of the troposphere delay model error

    Zero if no delay is applied, otherwise (ERR_SAAS / (sin(el) + 0.1))^2,
    which grows towards the horizon.

    Args:
        dpsr_T: Slant troposphere delay (m)
        elevation: Satellite elevation (rad)

    Returns:
        Variance (m^2)
    """
    if dpsr_T == 0.0:
        return 0.0
    return (ERR_SAAS / (np.sin(elevation) + 0.1)) ** 2
