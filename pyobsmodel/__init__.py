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
PyObsModel - GNSS Observation Estimation

Predicts pseudorange, carrier-phase and Doppler observations together with
their measurement variances from satellite/receiver geometry, clock states
and atmospheric models, as the measurement model of a navigation filter.
Inspired by RTKLIB.
"""

__version__ = "1.0.0"
__author__ = "PyObsModel Development Team"
__title__ = "pyobsmodel"
__description__ = "GNSS observation estimation and measurement error modeling"

from .core import *
from .coordinate import *
from .gnss import *
from .config import EstimatorConfig
from .logger import setup_logger
