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

"""GNSS observation model.

This module provides the models that predict GNSS observations:

Key Components:
- Geometry: range, line of sight, Sagnac corrections, azimuth/elevation
- Troposphere: Saastamoinen zenith delays with Cosecant, Chao or Niell mapping
- Ionosphere: Klobuchar broadcast model with frequency scaling
- Measurement errors: elevation/CN0 dependent baseline variances
- Observation estimator: pseudorange, carrier-phase and Doppler estimates
  with their variances for undifferenced, single- and double-differenced
  processing

Examples:
    >>> from pyobsmodel.gnss import ObservationEstimator, ObservationDifference
    >>> estimator = ObservationEstimator()
    >>> estimator.estimate(observations, receivers, iono_corrections,
    ...                    ObservationDifference.SINGLE_DIFFERENCE)
"""

from .geometry import (geometric_range, line_of_sight, projected_relative_velocity, sagnac_correction,
                       sagnac_rate_correction, sat_azimuth_elevation, shapiro_delay)
from .ionosphere import IonosphereModel, calc_ionospheric_delay, iono_error_var, scale_ionospheric_delay
from .measurement_errors import GnssMeasurementErrorModel, WeightingModel
from .observation_estimator import (EstimateTrace, ObservationDifference, ObservationEstimator,
                                    trace_to_logger)
from .troposphere import (AtmosphereModel, MappingFunction, TroposphereModel, TroposphereModelSelection,
                          calc_tropospheric_delay_and_mapping, tropo_error_var)

__all__ = [
    'geometric_range', 'line_of_sight', 'projected_relative_velocity', 'sagnac_correction',
    'sagnac_rate_correction', 'sat_azimuth_elevation', 'shapiro_delay',
    'IonosphereModel', 'calc_ionospheric_delay', 'iono_error_var', 'scale_ionospheric_delay',
    'GnssMeasurementErrorModel', 'WeightingModel',
    'EstimateTrace', 'ObservationDifference', 'ObservationEstimator', 'trace_to_logger',
    'AtmosphereModel', 'MappingFunction', 'TroposphereModel', 'TroposphereModelSelection',
    'calc_tropospheric_delay_and_mapping', 'tropo_error_var',
]
