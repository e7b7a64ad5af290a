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

"""Core module.

This module provides the fundamental components shared by the models:

- **Constants**: physical constants, carrier frequencies, system identifiers
  and error model constants
- **Signals**: satellite systems, frequency bands and signal identifiers
- **Data Structures**: observations, receivers, clocks and navigation data
  references consumed and updated by the observation estimator
- **Time**: GNSS epochs (time of week, day of year)
- **Exceptions**: structured errors surfaced to the caller

Example Usage:
    >>> from pyobsmodel.core import *
    >>>
    >>> sig = SatSigId(Frequency.G01, 5)
    >>> datum = ObservationDatum(measurement=21123456.7)
    >>> recv_obs = ReceiverObservation(e_sat_pos=[15600e3, 7540e3, 20140e3],
    ...                                e_sat_vel=[0.0, 0.0, 0.0],
    ...                                obs={ObservationType.PSEUDORANGE: datum})
"""

from .constants import *
from .data_structures import *
from .exceptions import *
from .frequency import *
from .time import *
