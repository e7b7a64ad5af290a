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
Observation Estimator
=====================

Predicts the pseudorange, carrier-phase and Doppler observations of every
tracked signal at every receiver and the variance of each measurement.
The results are written into the observation batch and form the
measurement model of a navigation filter.

Estimates
---------
Pseudorange:  rho + dpsr_ie + dpsr_T + dpsr_I + c * (dt_r - dt_s + ISB + IFB)
Carrier:      rho + dpsr_ie + dpsr_T - dpsr_I + c * (dt_r - dt_s + ISB)
Doppler:      e . (v_s - v_r) - sagnac_rate + c * (ddt_r - ddt_s + ISD)

Receiver clock terms drop out of double differences, satellite clock
terms out of single and double differences.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import CLIGHT
from ..core.data_structures import (IonosphericCorrections, Observation, ObservationTerms, ObservationType,
                                    Receiver, ReceiverObservation, ReceiverRole)
from ..core.exceptions import ConfigurationError, MissingDataError, PreconditionViolation
from ..core.frequency import SatSigId
from ..logger import TRACE
from ..utils import enum_from_name
from .geometry import geometric_range, projected_relative_velocity, sagnac_correction, sagnac_rate_correction
from .ionosphere import IonosphereModel, calc_ionospheric_delay, iono_error_var
from .measurement_errors import GnssMeasurementErrorModel
from .troposphere import TroposphereModelSelection, calc_tropospheric_delay_and_mapping, tropo_error_var

logger = logging.getLogger(__name__)

# CN0 assumed for observations that do not report one (dB-Hz)
DEFAULT_CN0 = 1.0


class ObservationDifference(Enum):
    """Differencing applied to the observations by the filter"""
    NO_DIFFERENCE = 'NoDifference'
    SINGLE_DIFFERENCE = 'SingleDifference'
    DOUBLE_DIFFERENCE = 'DoubleDifference'


@dataclass
class EstimateTrace:
    """Intermediate terms of one estimated observation

    Attributes
    ----------
    sat_sig_id : SatSigId
        Signal the observation belongs to
    role : ReceiverRole
        Receiver that made the observation
    obs_type : ObservationType
        Observable
    estimate_terms : list
        (name, value) pairs summing up to the estimate
    variance_terms : list
        (name, value) pairs summing up to the variance
    estimate : float
        Estimated observation
    meas_var : float
        Measurement variance
    measurement : float
        Measured value
    """
    sat_sig_id: SatSigId
    role: ReceiverRole
    obs_type: ObservationType
    estimate_terms: List[Tuple[str, float]] = field(default_factory=list)
    variance_terms: List[Tuple[str, float]] = field(default_factory=list)
    estimate: float = 0.0
    meas_var: float = 0.0
    measurement: float = 0.0

    def format(self) -> str:
        lines = [f"[{self.sat_sig_id}][{self.role}] {self.obs_type}: "
                 f"measurement {self.measurement:.4f}, estimate {self.estimate:.4f}, variance {self.meas_var:.6g}"]
        lines.extend(f"    {name:<28} {value: .6f}" for name, value in self.estimate_terms)
        lines.extend(f"    var {name:<24} {value: .6g}" for name, value in self.variance_terms)
        return '\n'.join(lines)


def trace_to_logger(trace: EstimateTrace, log: Optional[logging.Logger] = None) -> None:
    """Trace callback writing the terms at TRACE level"""
    log = log or logger
    if log.isEnabledFor(TRACE):
        log.log(TRACE, trace.format())


TraceCallback = Callable[[EstimateTrace], None]


class ObservationEstimator:
    """
    Estimates GNSS observations and their variances

    Parameters
    ----------
    ionosphere_model : IonosphereModel
        Ionosphere delay model
    troposphere_models : TroposphereModelSelection, optional
        Zenith delay models and mapping functions (default: Saastamoinen/NMF)
    error_model : GnssMeasurementErrorModel, optional
        Baseline measurement variances (default parameters if None)

    Raises
    ------
    ConfigurationError
        If a model selection is unset or unsupported
    """

    def __init__(self,
                 ionosphere_model: IonosphereModel = IonosphereModel.KLOBUCHAR,
                 troposphere_models: Optional[TroposphereModelSelection] = None,
                 error_model: Optional[GnssMeasurementErrorModel] = None):
        self.ionosphere_model = enum_from_name(IonosphereModel, ionosphere_model)
        self.troposphere_models = troposphere_models if troposphere_models is not None else TroposphereModelSelection()
        self.error_model = error_model if error_model is not None else GnssMeasurementErrorModel()
        if not isinstance(self.troposphere_models, TroposphereModelSelection):
            raise ConfigurationError(f"Expected a TroposphereModelSelection, got {self.troposphere_models!r}")
        if not isinstance(self.error_model, GnssMeasurementErrorModel):
            raise ConfigurationError(f"Expected a GnssMeasurementErrorModel, got {self.error_model!r}")
        # Fields can be reassigned after the dataclasses are built
        self.troposphere_models.validate()
        self.error_model.validate()

    @classmethod
    def from_config(cls, config) -> 'ObservationEstimator':
        """Create an estimator from an :class:`~pyobsmodel.config.EstimatorConfig`"""
        return cls(config.ionosphere_model, config.troposphere_models, config.gnss_measurement_error)

    @property
    def config(self):
        """Current model selection as :class:`~pyobsmodel.config.EstimatorConfig`"""
        from ..config import EstimatorConfig

        return EstimatorConfig(ionosphere_model=self.ionosphere_model,
                               troposphere_models=self.troposphere_models,
                               gnss_measurement_error=self.error_model)

    def estimate(self,
                 observations: Dict[SatSigId, Observation],
                 receivers: Sequence[Receiver],
                 ionospheric_corrections: Optional[IonosphericCorrections],
                 obs_diff: ObservationDifference,
                 trace: Optional[TraceCallback] = None) -> None:
        """
        Estimate all observations of the batch in place

        Writes ``estimate`` and ``meas_var`` of every present observation
        type and the model terms of every receiver observation.

        Parameters
        ----------
        observations : dict
            SatSigId -> Observation
        receivers : sequence of Receiver
            Receivers indexed by their ReceiverRole value
        ionospheric_corrections : IonosphericCorrections
            Broadcast ionosphere parameters
        obs_diff : ObservationDifference
            Differencing applied by the filter
        trace : callable, optional
            Called with an EstimateTrace after each estimated observation

        Raises
        ------
        PreconditionViolation
            On a receiver list that does not match the receiver roles or a
            receiver index outside of it, or a non-finite or negative variance
        MissingDataError
            On missing inter-system bias/drift entries, navigation data or
            ionosphere parameters
        """
        if len(receivers) != len(ReceiverRole):
            raise PreconditionViolation(
                f"Expected {len(ReceiverRole)} receivers (one per role), got {len(receivers)}")
        for idx, receiver in enumerate(receivers):
            if receiver.role != ReceiverRole(idx):
                raise PreconditionViolation(f"Receiver at index {idx} has role {receiver.role}")

        n_estimates = 0
        for sat_sig_id, observation in observations.items():
            for recv_idx, recv_obs in observation.recv_obs.items():
                if not 0 <= recv_idx < len(receivers):
                    raise PreconditionViolation(f"[{sat_sig_id}] Receiver index {recv_idx} out of range")
                n_estimates += self._estimate_receiver_observation(
                    sat_sig_id, observation.freq_num, recv_obs, receivers[recv_idx],
                    ionospheric_corrections, obs_diff, trace)

        logger.debug("Estimated %d observations of %d signals (%s)",
                     n_estimates, len(observations), obs_diff.value)

    def _estimate_receiver_observation(self, sat_sig_id: SatSigId, freq_num: Optional[int],
                                       recv_obs: ReceiverObservation, receiver: Receiver,
                                       ionospheric_corrections: Optional[IonosphericCorrections],
                                       obs_diff: ObservationDifference,
                                       trace: Optional[TraceCallback]) -> int:
        freq = sat_sig_id.freq
        sat_sys = sat_sig_id.sat_sys

        isb = receiver.inter_system_bias.get(sat_sys)
        if isb is None:
            raise MissingDataError(f"[{sat_sig_id}] Receiver {receiver.role} has no inter-system bias for {sat_sys.name}")
        isd = receiver.inter_system_drift.get(sat_sys)
        if isd is None:
            raise MissingDataError(f"[{sat_sig_id}] Receiver {receiver.role} has no inter-system drift for {sat_sys.name}")
        ifb = receiver.inter_frequency_bias.get(freq)

        el = recv_obs.sat_elevation
        az = recv_obs.sat_azimuth

        rho = geometric_range(recv_obs.e_sat_pos, receiver.e_pos)
        zenith_delay = calc_tropospheric_delay_and_mapping(receiver.time, receiver.lla_pos, el, az,
                                                           self.troposphere_models)
        dpsr_T = zenith_delay.slant_delay
        dpsr_I = calc_ionospheric_delay(receiver.time.gps_tow, freq, freq_num, receiver.lla_pos, el, az,
                                        self.ionosphere_model, ionospheric_corrections)
        dpsr_ie = sagnac_correction(receiver.e_pos, recv_obs.e_sat_pos)
        recv_obs.terms = ObservationTerms(rho_r_s=rho, tropo_zenith_delay=zenith_delay,
                                          dpsr_T_r_s=dpsr_T, dpsr_I_r_s=dpsr_I, dpsr_ie_r_s=dpsr_ie)

        cn0 = recv_obs.cn0 if recv_obs.cn0 is not None else DEFAULT_CN0
        undifferenced = obs_diff == ObservationDifference.NO_DIFFERENCE
        with_recv_clock = obs_diff != ObservationDifference.DOUBLE_DIFFERENCE

        n_estimates = 0
        for obs_type, datum in recv_obs.obs.items():
            if obs_type == ObservationType.DOPPLER:
                sat_drift = recv_obs.sat_clock.drift if undifferenced else 0.0
                recv_drift = receiver.recv_clk.drift.value if with_recv_clock else 0.0
                isd_value = isd.value if undifferenced else 0.0
                estimate_terms = [
                    ('Range rate', projected_relative_velocity(recv_obs.e_p_los, recv_obs.e_sat_vel, receiver.e_vel)),
                    ('Sagnac rate', -sagnac_rate_correction(receiver.e_pos, recv_obs.e_sat_pos,
                                                            receiver.e_vel, recv_obs.e_sat_vel)),
                    ('Clock drift', CLIGHT * (recv_drift - sat_drift + isd_value)),
                ]
                variance_terms = [
                    ('Doppler measurement', self.error_model.psr_rate_meas_error_var(freq, freq_num, el, cn0)),
                ]
                if with_recv_clock:
                    variance_terms.append(('Receiver clock drift', CLIGHT**2 * receiver.recv_clk.drift.std_dev**2))
                    variance_terms.append(('Inter-system drift', CLIGHT**2 * isd.std_dev**2))
            else:
                is_code = obs_type == ObservationType.PSEUDORANGE
                sat_bias = recv_obs.sat_clock.bias if undifferenced else 0.0
                recv_bias = receiver.recv_clk.bias.value if with_recv_clock else 0.0
                clk_bias = recv_bias - sat_bias + isb.value
                if is_code and ifb is not None:
                    clk_bias += ifb.value
                estimate_terms = [
                    ('Geometric range', rho),
                    ('Sagnac', dpsr_ie),
                    ('Troposphere', dpsr_T),
                    ('Ionosphere', dpsr_I if is_code else -dpsr_I),
                    ('Clock bias', CLIGHT * clk_bias),
                ]
                if is_code:
                    variance_terms = [('Code measurement', self.error_model.psr_meas_error_var(sat_sys, el, cn0))]
                else:
                    variance_terms = [('Carrier measurement', self.error_model.carrier_meas_error_var(sat_sys, el, cn0))]
                if undifferenced:
                    if recv_obs.nav_data is None:
                        raise MissingDataError(f"[{sat_sig_id}] No navigation data for undifferenced {obs_type}")
                    variance_terms.append(('Satellite position', recv_obs.nav_data.calc_satellite_position_variance()))
                    variance_terms.append(('Ionosphere', iono_error_var(dpsr_I)))
                    variance_terms.append(('Troposphere', tropo_error_var(dpsr_T, el)))
                    if is_code:
                        variance_terms.append(('Code bias', self.error_model.code_bias_error_var()))
                        if ifb is not None:
                            variance_terms.append(('Inter-frequency bias', ifb.std_dev**2))
                if with_recv_clock:
                    variance_terms.append(('Receiver clock bias', CLIGHT**2 * receiver.recv_clk.bias.std_dev**2))
                    variance_terms.append(('Inter-system bias', CLIGHT**2 * isb.std_dev**2))

            estimate = sum(value for _, value in estimate_terms)
            meas_var = sum(value for _, value in variance_terms)
            if not np.isfinite(meas_var) or meas_var < 0.0:
                raise PreconditionViolation(f"[{sat_sig_id}][{receiver.role}] Invalid {obs_type} variance {meas_var}")

            datum.estimate = float(estimate)
            datum.meas_var = float(meas_var)
            n_estimates += 1

            if trace is not None:
                trace(EstimateTrace(sat_sig_id=sat_sig_id, role=receiver.role, obs_type=obs_type,
                                    estimate_terms=estimate_terms, variance_terms=variance_terms,
                                    estimate=datum.estimate, meas_var=datum.meas_var,
                                    measurement=datum.measurement))

        return n_estimates
