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

"""Error types raised by the observation model.

All errors derive from ``ValueError`` so callers that already guard
numerical routines with ``except ValueError`` keep working.
"""


class ObservationModelError(ValueError):
    """Base class for all observation model failures"""


class ConfigurationError(ObservationModelError):
    """Unset or unsupported model selection or parameter"""


class MissingDataError(ObservationModelError):
    """Required input data is absent

    Raised for a satellite system without an inter-system bias/drift entry,
    a missing navigation data reference, missing broadcast ionosphere
    parameters or a missing GLONASS frequency number.
    """


class PreconditionViolation(ObservationModelError):
    """Inputs violate a structural precondition of the estimator"""
