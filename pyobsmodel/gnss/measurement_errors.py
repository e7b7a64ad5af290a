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

"""
Measurement Error Model
=======================

Baseline variances of raw GNSS measurements as a function of satellite
system, elevation and carrier-to-noise density ratio.

All weighting models share the form

    var = (sigma * system_factor)^2 * w(el, cn0)

where sigma is the standard deviation of the observable at zenith and
w is the elevation/CN0 dependent weighting function.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

import numpy as np

from ..core.constants import *
from ..core.exceptions import ConfigurationError
from ..core.frequency import Frequency, SatelliteSystem
from ..utils import enum_from_name

logger = logging.getLogger(__name__)

# Lower bound of sin(el) so weights stay finite at and below the horizon
MIN_SIN_EL = np.sin(0.1 * D2R)


class WeightingModel(Enum):
    """Elevation/CN0 weighting models"""
    NONE = 'None'                    # w = 1
    SINE = 'Sine'                    # w = 1/sin^2(el)
    SINE_OFFSET = 'SineOffset'       # w = a^2 + b^2/sin^2(el)
    SINE_CN0 = 'SineCN0'             # w = 10^(-(cn0-cn0_ref)/10) / sin^2(el)
    RTKLIB = 'RTKLIB'                # w = a^2 + b^2/sin^2(el) + c^2 10^(0.1 (snr_max-cn0))
    EXPONENTIAL = 'Exponential'      # w = (1 + a exp(-el/e0))^2


def default_system_factors() -> Dict[SatelliteSystem, float]:
    return {
        SatelliteSystem.GPS: EFACT_GPS,
        SatelliteSystem.GLO: EFACT_GLO,
        SatelliteSystem.GAL: EFACT_GAL,
        SatelliteSystem.BDS: EFACT_BDS,
        SatelliteSystem.QZSS: EFACT_QZS,
        SatelliteSystem.IRNSS: EFACT_IRN,
        SatelliteSystem.SBAS: EFACT_SBS,
    }


@dataclass
class GnssMeasurementErrorModel:
    """
    Measurement error model for pseudorange, carrier phase and Doppler

    Attributes
    ----------
    model : WeightingModel
        Elevation/CN0 weighting function
    carrier_std_dev : float
        Carrier-phase standard deviation at zenith (m)
    code_std_dev : float
        Pseudorange standard deviation at zenith (m)
    doppler_std_dev : float
        Doppler standard deviation at zenith (Hz)
    code_bias_std_dev : float
        Standard deviation of the uncorrected code bias (m)
    system_factors : dict
        SatelliteSystem -> multiplier of the standard deviations
    sine_offset : tuple
        (a, b) of the SineOffset model
    cn0_ref : float
        Reference CN0 of the SineCN0 model (dB-Hz)
    rtklib : tuple
        (a, b, c) of the RTKLIB model
    snr_max : float
        CN0 above which the RTKLIB SNR term vanishes (dB-Hz)
    exponential : tuple
        (a, e0) of the Exponential model, e0 in radians
    """
    model: WeightingModel = WeightingModel.SINE
    carrier_std_dev: float = ERR_CARRIER
    code_std_dev: float = ERR_CODE
    doppler_std_dev: float = ERR_DOPPLER
    code_bias_std_dev: float = ERR_CBIAS
    system_factors: Dict[SatelliteSystem, float] = field(default_factory=default_system_factors)
    sine_offset: tuple = (1.0, 1.0)
    cn0_ref: float = 50.0
    rtklib: tuple = (1.0, 1.0, 0.0)
    snr_max: float = 52.0
    exponential: tuple = (10.0, 10.0 * D2R)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError on an unsupported model or invalid parameters"""
        if not isinstance(self.model, WeightingModel):
            raise ConfigurationError(f"model must be a WeightingModel, got {self.model!r}")
        for name in ('carrier_std_dev', 'code_std_dev', 'doppler_std_dev', 'code_bias_std_dev'):
            value = getattr(self, name)
            if not np.isfinite(value) or value < 0.0:
                raise ConfigurationError(f"{name} must be a non-negative number, got {value}")
        for sys, factor in self.system_factors.items():
            if not np.isfinite(factor) or factor < 0.0:
                raise ConfigurationError(f"System factor of {sys.name} must be non-negative, got {factor}")
        if self.exponential[1] <= 0.0:
            raise ConfigurationError("Exponential model needs a positive elevation scale e0")

    def system_factor(self, sat_sys: SatelliteSystem) -> float:
        return self.system_factors.get(SatelliteSystem(sat_sys), 1.0)

    def weight(self, elevation: float, cn0: float) -> float:
        """
        Weighting function w(el, cn0)

        Parameters
        ----------
        elevation : float
            Satellite elevation (rad)
        cn0 : float
            Carrier-to-noise density ratio (dB-Hz)

        Returns
        -------
        float
            Dimensionless variance multiplier
        """
        sin_el = max(np.sin(elevation), MIN_SIN_EL)
        inv_sin2 = 1.0 / sin_el**2

        if self.model == WeightingModel.NONE:
            return 1.0
        if self.model == WeightingModel.SINE:
            return inv_sin2
        if self.model == WeightingModel.SINE_OFFSET:
            a, b = self.sine_offset
            return a**2 + b**2 * inv_sin2
        if self.model == WeightingModel.SINE_CN0:
            if cn0 >= self.cn0_ref:
                return inv_sin2
            return 10.0 ** (-(cn0 - self.cn0_ref) / 10.0) * inv_sin2
        if self.model == WeightingModel.RTKLIB:
            a, b, c = self.rtklib
            return a**2 + b**2 * inv_sin2 + c**2 * 10.0 ** (0.1 * max(self.snr_max - cn0, 0.0))
        if self.model == WeightingModel.EXPONENTIAL:
            a, e0 = self.exponential
            # Below the horizon the weight is held at its horizon value
            return (1.0 + a * np.exp(-max(elevation, 0.0) / e0)) ** 2
        raise ConfigurationError(f"Unsupported weighting model: {self.model!r}")

    def _variance(self, std_dev: float, sat_sys: SatelliteSystem, elevation: float, cn0: float) -> float:
        return float((std_dev * self.system_factor(sat_sys)) ** 2 * self.weight(elevation, cn0))

    def psr_meas_error_var(self, sat_sys: SatelliteSystem, elevation: float, cn0: float) -> float:
        """Pseudorange measurement variance (m^2)"""
        return self._variance(self.code_std_dev, sat_sys, elevation, cn0)

    def carrier_meas_error_var(self, sat_sys: SatelliteSystem, elevation: float, cn0: float) -> float:
        """Carrier-phase measurement variance (m^2)"""
        return self._variance(self.carrier_std_dev, sat_sys, elevation, cn0)

    def psr_rate_meas_error_var(self, freq: Frequency, freq_num: Optional[int],
                                elevation: float, cn0: float) -> float:
        """Pseudorange-rate (Doppler) measurement variance (m^2/s^2)

        The Doppler standard deviation in Hz is converted to m/s with the
        wavelength of the signal.
        """
        std_dev = self.doppler_std_dev * freq.get_wavelength(freq_num)
        return self._variance(std_dev, freq.sat_sys, elevation, cn0)

    def code_bias_error_var(self) -> float:
        """Variance of the uncorrected code bias (m^2)"""
        return self.code_bias_std_dev ** 2

    def to_dict(self) -> dict:
        """Convert model to dictionary for serialization"""
        return {
            'model': self.model.name,
            'carrier_std_dev': float(self.carrier_std_dev),
            'code_std_dev': float(self.code_std_dev),
            'doppler_std_dev': float(self.doppler_std_dev),
            'code_bias_std_dev': float(self.code_bias_std_dev),
            'system_factors': {sys.name: float(f) for sys, f in self.system_factors.items()},
            'sine_offset': [float(v) for v in self.sine_offset],
            'cn0_ref': float(self.cn0_ref),
            'rtklib': [float(v) for v in self.rtklib],
            'snr_max': float(self.snr_max),
            'exponential': [float(v) for v in self.exponential],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'GnssMeasurementErrorModel':
        """Create model from dictionary; missing keys keep their defaults"""
        kwargs = {}
        if 'model' in data:
            kwargs['model'] = enum_from_name(WeightingModel, data['model'])
        for key in ('carrier_std_dev', 'code_std_dev', 'doppler_std_dev', 'code_bias_std_dev',
                    'cn0_ref', 'snr_max'):
            if key in data:
                kwargs[key] = float(data[key])
        for key in ('sine_offset', 'rtklib', 'exponential'):
            if key in data:
                kwargs[key] = tuple(float(v) for v in data[key])
        if 'system_factors' in data:
            factors = default_system_factors()
            for name, value in data['system_factors'].items():
                factors[enum_from_name(SatelliteSystem, name)] = float(value)
            kwargs['system_factors'] = factors
        return cls(**kwargs)
