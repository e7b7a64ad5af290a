#!/usr/bin/env python3
"""Test suite for the observation estimator"""

import unittest
import numpy as np
from pyobsmodel.coordinate.transforms import llh2ecef
from pyobsmodel.core.constants import CLIGHT, RE_WGS84
from pyobsmodel.core.data_structures import (
    Ephemeris, IonosphericCorrections, NavData, Observation, ObservationDatum, ObservationType,
    Receiver, ReceiverClock, ReceiverObservation, ReceiverRole, SatelliteClock, UncertainValue
)
from pyobsmodel.core.exceptions import ConfigurationError, MissingDataError, PreconditionViolation
from pyobsmodel.core.frequency import Frequency, SatelliteSystem, SatSigId
from pyobsmodel.core.time import GNSSTime
from pyobsmodel.gnss.geometry import sagnac_rate_correction
from pyobsmodel.gnss.ionosphere import IonosphereModel, iono_error_var
from pyobsmodel.gnss.measurement_errors import GnssMeasurementErrorModel, WeightingModel
from pyobsmodel.gnss.observation_estimator import (
    EstimateTrace, ObservationDifference, ObservationEstimator, trace_to_logger
)
from pyobsmodel.gnss.troposphere import TroposphereModelSelection, tropo_error_var
from pyobsmodel.logger import TRACE

ALPHA = [1.118e-08, 7.451e-09, -5.961e-08, -5.961e-08]
BETA = [9.011e4, 1.638e4, -1.966e5, -6.554e4]

NO_DIFF = ObservationDifference.NO_DIFFERENCE
SINGLE_DIFF = ObservationDifference.SINGLE_DIFFERENCE
DOUBLE_DIFF = ObservationDifference.DOUBLE_DIFFERENCE


class BrokenNavData(NavData):
    """Navigation data reporting an invalid variance"""

    def calc_satellite_position_variance(self):
        return -1.0


def make_receiver(role, e_pos, bias=0.0, drift=0.0, systems=(SatelliteSystem.GPS,), **kwargs):
    return Receiver(role, e_pos=e_pos,
                    recv_clk=ReceiverClock(bias=UncertainValue(bias, 0.0), drift=UncertainValue(drift, 0.0)),
                    inter_system_bias={sys: UncertainValue() for sys in systems},
                    inter_system_drift={sys: UncertainValue() for sys in systems},
                    **kwargs)


def all_types(measurement=0.0):
    return {obs_type: ObservationDatum(measurement=measurement) for obs_type in ObservationType}


def plain_estimator(**error_kwargs):
    """Estimator without atmosphere"""
    return ObservationEstimator(IonosphereModel.NONE, TroposphereModelSelection.disabled(),
                                GnssMeasurementErrorModel(**error_kwargs))


class TestStaticScenario(unittest.TestCase):
    """Receiver on the equator, satellite 20200 km north of it"""

    def setUp(self):
        self.sig = SatSigId(Frequency.G01, 5)
        self.recv_pos = np.array([RE_WGS84, 0.0, 0.0])
        self.sat_pos = np.array([RE_WGS84, 0.0, 20200000.0])
        self.el = np.pi / 4

    def make_batch(self, sat_bias=0.0, nav_data=None, cn0=45.0):
        recv_obs = {
            int(role): ReceiverObservation(
                e_sat_pos=self.sat_pos, e_sat_vel=np.zeros(3), sat_clock=SatelliteClock(bias=sat_bias),
                e_p_los=[0.0, 0.0, 1.0], sat_elevation=self.el, sat_azimuth=0.0,
                nav_data=nav_data if nav_data is not None else Ephemeris(sat=5, sva=15),
                cn0=cn0, obs={ObservationType.PSEUDORANGE: ObservationDatum(measurement=20200005.0)})
            for role in ReceiverRole
        }
        return {self.sig: Observation(recv_obs=recv_obs)}

    def make_receivers(self, bias=0.0):
        return [make_receiver(role, self.recv_pos, bias=bias) for role in ReceiverRole]

    def test_range_and_baseline_variance_only(self):
        estimator = plain_estimator(code_bias_std_dev=0.0)
        observations = self.make_batch()
        estimator.estimate(observations, self.make_receivers(), None, NO_DIFF)

        recv_obs = observations[self.sig].recv_obs[ReceiverRole.ROVER]
        datum = recv_obs.obs[ObservationType.PSEUDORANGE]
        # Sagnac vanishes in the x-z plane, leaving the Euclidean distance
        self.assertAlmostEqual(datum.estimate, 20200000.0, places=6)
        self.assertAlmostEqual(datum.meas_var,
                               estimator.error_model.psr_meas_error_var(SatelliteSystem.GPS, self.el, 45.0))
        self.assertEqual(datum.measurement, 20200005.0)
        self.assertEqual(recv_obs.terms.rho_r_s, 20200000.0)
        self.assertEqual(recv_obs.terms.dpsr_I_r_s, 0.0)
        self.assertEqual(recv_obs.terms.dpsr_T_r_s, 0.0)
        self.assertEqual(recv_obs.terms.dt_rel_stc, 0.0)

    def test_single_difference_removes_satellite_terms(self):
        estimator = plain_estimator()

        obs_no = self.make_batch(sat_bias=1e-6, nav_data=Ephemeris(sat=5, sva=0))
        estimator.estimate(obs_no, self.make_receivers(bias=2e-6), None, NO_DIFF)
        obs_sd = self.make_batch(sat_bias=1e-6, nav_data=Ephemeris(sat=5, sva=0))
        estimator.estimate(obs_sd, self.make_receivers(bias=2e-6), None, SINGLE_DIFF)

        no = obs_no[self.sig].recv_obs[ReceiverRole.ROVER].obs[ObservationType.PSEUDORANGE]
        sd = obs_sd[self.sig].recv_obs[ReceiverRole.ROVER].obs[ObservationType.PSEUDORANGE]
        self.assertAlmostEqual(no.estimate, 20200000.0 + CLIGHT * (2e-6 - 1e-6), places=6)
        self.assertAlmostEqual(sd.estimate - no.estimate, CLIGHT * 1e-6, places=6)
        # Satellite position (URA 2.4 m) and code bias variances are gone
        self.assertAlmostEqual(no.meas_var - sd.meas_var, 2.4**2 + 0.3**2)

    def test_double_difference_cancels_clocks(self):
        estimator = plain_estimator()
        observations = self.make_batch(sat_bias=3e-4)
        estimator.estimate(observations, self.make_receivers(bias=1e-3), None, DOUBLE_DIFF)
        rover = observations[self.sig].recv_obs[ReceiverRole.ROVER].obs[ObservationType.PSEUDORANGE]
        base = observations[self.sig].recv_obs[ReceiverRole.BASE].obs[ObservationType.PSEUDORANGE]
        self.assertAlmostEqual(rover.estimate, 20200000.0, places=6)
        self.assertAlmostEqual(base.estimate, rover.estimate)

    def test_clock_variances(self):
        estimator = plain_estimator()
        receivers = self.make_receivers()
        for recv in receivers:
            recv.recv_clk.bias.std_dev = 1e-8
            recv.inter_system_bias[SatelliteSystem.GPS].std_dev = 2e-9
        baseline = estimator.error_model.psr_meas_error_var(SatelliteSystem.GPS, self.el, 45.0)

        observations = self.make_batch()
        estimator.estimate(observations, receivers, None, SINGLE_DIFF)
        datum = observations[self.sig].recv_obs[ReceiverRole.ROVER].obs[ObservationType.PSEUDORANGE]
        self.assertAlmostEqual(datum.meas_var, baseline + CLIGHT**2 * (1e-8**2 + 2e-9**2))

        observations = self.make_batch()
        estimator.estimate(observations, receivers, None, DOUBLE_DIFF)
        datum = observations[self.sig].recv_obs[ReceiverRole.ROVER].obs[ObservationType.PSEUDORANGE]
        self.assertAlmostEqual(datum.meas_var, baseline)

    def test_inter_frequency_bias(self):
        estimator = plain_estimator(code_bias_std_dev=0.0)
        receivers = self.make_receivers()
        receivers[ReceiverRole.ROVER].inter_frequency_bias[Frequency.G01] = UncertainValue(1e-9, 0.5)
        observations = self.make_batch()
        recv_obs = observations[self.sig].recv_obs[ReceiverRole.ROVER]
        recv_obs.obs[ObservationType.CARRIER] = ObservationDatum()
        estimator.estimate(observations, receivers, None, NO_DIFF)

        code = recv_obs.obs[ObservationType.PSEUDORANGE]
        carrier = recv_obs.obs[ObservationType.CARRIER]
        self.assertAlmostEqual(code.estimate - carrier.estimate, CLIGHT * 1e-9, places=6)
        baseline = estimator.error_model.psr_meas_error_var(SatelliteSystem.GPS, self.el, 45.0)
        self.assertAlmostEqual(code.meas_var, baseline + 0.5**2)

    def test_missing_cn0_uses_default(self):
        estimator = plain_estimator(model=WeightingModel.SINE_CN0)
        observations = self.make_batch(cn0=None)
        estimator.estimate(observations, self.make_receivers(), None, DOUBLE_DIFF)
        datum = observations[self.sig].recv_obs[ReceiverRole.ROVER].obs[ObservationType.PSEUDORANGE]
        self.assertAlmostEqual(datum.meas_var,
                               estimator.error_model.psr_meas_error_var(SatelliteSystem.GPS, self.el, 1.0))

    def test_only_present_types_estimated(self):
        observations = self.make_batch()
        plain_estimator().estimate(observations, self.make_receivers(), None, NO_DIFF)
        recv_obs = observations[self.sig].recv_obs[ReceiverRole.ROVER]
        self.assertEqual(list(recv_obs.obs), [ObservationType.PSEUDORANGE])


class TestAtmosphereScenario(unittest.TestCase):
    """Realistic geometry with troposphere and ionosphere enabled"""

    def setUp(self):
        self.sig = SatSigId(Frequency.G02, 12)
        self.time = GNSSTime(2250, 50400.0)
        rover_pos = llh2ecef(np.array([np.radians(35.0), np.radians(139.0), 40.0]))
        base_pos = llh2ecef(np.array([np.radians(35.01), np.radians(139.01), 30.0]))
        self.receivers = [make_receiver(ReceiverRole.ROVER, rover_pos, time=self.time),
                          make_receiver(ReceiverRole.BASE, base_pos, time=self.time)]
        self.sat_pos = llh2ecef(np.array([np.radians(45.0), np.radians(150.0), 20200e3]))
        self.sat_vel = np.array([1200.0, -2500.0, 800.0])
        self.corrections = IonosphericCorrections.from_klobuchar(ALPHA, BETA)
        self.estimator = ObservationEstimator()

    def make_batch(self, sat_bias=0.0):
        recv_obs = {
            int(recv.role): ReceiverObservation.from_geometry(
                self.sat_pos, self.sat_vel, recv, nav_data=Ephemeris(sat=12, sva=1), cn0=42.0,
                sat_clock=SatelliteClock(bias=sat_bias), obs=all_types())
            for recv in self.receivers
        }
        return {self.sig: Observation(recv_obs=recv_obs)}

    def test_undifferenced_variance_composition(self):
        self.receivers[ReceiverRole.ROVER].inter_frequency_bias[Frequency.G02] = UncertainValue(2e-9, 0.5)
        observations = self.make_batch()
        self.estimator.estimate(observations, self.receivers, self.corrections, NO_DIFF)

        recv_obs = observations[self.sig].recv_obs[ReceiverRole.ROVER]
        el = recv_obs.sat_elevation
        error_model = self.estimator.error_model
        atmosphere_var = (recv_obs.nav_data.calc_satellite_position_variance()
                          + iono_error_var(recv_obs.terms.dpsr_I_r_s)
                          + tropo_error_var(recv_obs.terms.dpsr_T_r_s, el))
        self.assertGreater(iono_error_var(recv_obs.terms.dpsr_I_r_s), 0.0)
        self.assertGreater(tropo_error_var(recv_obs.terms.dpsr_T_r_s, el), 0.0)

        # Carrier gets neither code bias nor inter-frequency bias variance
        carrier = recv_obs.obs[ObservationType.CARRIER]
        self.assertAlmostEqual(carrier.meas_var,
                               error_model.carrier_meas_error_var(SatelliteSystem.GPS, el, 42.0) + atmosphere_var)
        code = recv_obs.obs[ObservationType.PSEUDORANGE]
        self.assertAlmostEqual(code.meas_var,
                               error_model.psr_meas_error_var(SatelliteSystem.GPS, el, 42.0) + atmosphere_var
                               + error_model.code_bias_error_var() + 0.5**2)

    def test_double_difference_independent_of_clocks(self):
        estimates = []
        for sat_bias, recv_bias in ((0.0, 0.0), (2e-4, 1e-3), (-5e-5, -3e-3)):
            for recv in self.receivers:
                recv.recv_clk.bias.value = recv_bias
            observations = self.make_batch(sat_bias=sat_bias)
            self.estimator.estimate(observations, self.receivers, self.corrections, DOUBLE_DIFF)
            estimates.append({
                (role, obs_type): recv_obs.obs[obs_type].estimate
                for role, recv_obs in observations[self.sig].recv_obs.items()
                for obs_type in (ObservationType.PSEUDORANGE, ObservationType.CARRIER)
            })

        for other in estimates[1:]:
            for key, value in estimates[0].items():
                self.assertAlmostEqual(other[key], value, places=6)

    def test_variance_grows_towards_horizon(self):
        rover = self.receivers[ReceiverRole.ROVER]
        los = (self.sat_pos - rover.e_pos) / np.linalg.norm(self.sat_pos - rover.e_pos)
        variances = []
        for el_deg in (85.0, 60.0, 40.0, 25.0, 15.0, 10.0, 5.0):
            recv_obs = ReceiverObservation(
                e_sat_pos=self.sat_pos, e_sat_vel=self.sat_vel, e_p_los=los,
                sat_elevation=np.radians(el_deg), sat_azimuth=np.pi,
                nav_data=Ephemeris(sat=12, sva=1), cn0=42.0, obs=all_types())
            observations = {self.sig: Observation(recv_obs={int(ReceiverRole.ROVER): recv_obs})}
            self.estimator.estimate(observations, self.receivers, self.corrections, NO_DIFF)
            self.assertGreater(recv_obs.terms.dpsr_T_r_s, 0.0)
            variances.append({obs_type: datum.meas_var for obs_type, datum in recv_obs.obs.items()})

        for higher, lower in zip(variances[:-1], variances[1:]):
            for obs_type in ObservationType:
                self.assertGreater(lower[obs_type], higher[obs_type])

    def test_code_carrier_ionosphere_symmetry(self):
        observations = self.make_batch()
        self.estimator.estimate(observations, self.receivers, self.corrections, NO_DIFF)
        for recv_obs in observations[self.sig].recv_obs.values():
            dpsr_I = recv_obs.terms.dpsr_I_r_s
            self.assertGreater(dpsr_I, 0.0)
            self.assertGreater(recv_obs.terms.dpsr_T_r_s, 2.0)
            code = recv_obs.obs[ObservationType.PSEUDORANGE].estimate
            carrier = recv_obs.obs[ObservationType.CARRIER].estimate
            self.assertAlmostEqual(code - carrier, 2.0 * dpsr_I, places=6)

    def test_terms_are_consistent(self):
        observations = self.make_batch()
        self.estimator.estimate(observations, self.receivers, self.corrections, DOUBLE_DIFF)
        recv_obs = observations[self.sig].recv_obs[ReceiverRole.ROVER]
        terms = recv_obs.terms
        self.assertAlmostEqual(terms.dpsr_T_r_s, terms.tropo_zenith_delay.slant_delay)
        expected = terms.rho_r_s + terms.dpsr_ie_r_s + terms.dpsr_T_r_s + terms.dpsr_I_r_s
        self.assertAlmostEqual(recv_obs.obs[ObservationType.PSEUDORANGE].estimate, expected, places=6)

    def test_variances_positive(self):
        observations = self.make_batch()
        self.estimator.estimate(observations, self.receivers, self.corrections, NO_DIFF)
        for recv_obs in observations[self.sig].recv_obs.values():
            for datum in recv_obs.obs.values():
                self.assertGreater(datum.meas_var, 0.0)
                self.assertTrue(np.isfinite(datum.meas_var))
            self.assertLess(recv_obs.obs[ObservationType.CARRIER].meas_var,
                            recv_obs.obs[ObservationType.PSEUDORANGE].meas_var)

    def test_missing_ionosphere_parameters(self):
        with self.assertRaises(MissingDataError):
            self.estimator.estimate(self.make_batch(), self.receivers, IonosphericCorrections(), NO_DIFF)


class TestDoppler(unittest.TestCase):

    def setUp(self):
        self.sig = SatSigId(Frequency.G01, 7)
        self.recv_pos = llh2ecef(np.array([np.radians(48.0), np.radians(11.0), 500.0]))
        self.sat_pos = llh2ecef(np.array([np.radians(55.0), np.radians(20.0), 20200e3]))

    def estimate_doppler(self, recv_vel, sat_vel, obs_diff, drift=0.0, sat_drift=0.0, drift_std=0.0, isd_std=0.0):
        receivers = [make_receiver(role, self.recv_pos, drift=drift, e_vel=recv_vel) for role in ReceiverRole]
        for recv in receivers:
            recv.recv_clk.drift.std_dev = drift_std
            recv.inter_system_drift[SatelliteSystem.GPS].std_dev = isd_std
        recv_obs = ReceiverObservation.from_geometry(
            self.sat_pos, sat_vel, receivers[0], sat_clock=SatelliteClock(drift=sat_drift),
            obs={ObservationType.DOPPLER: ObservationDatum()})
        observations = {self.sig: Observation(recv_obs={0: recv_obs})}
        plain_estimator().estimate(observations, receivers, None, obs_diff)
        return recv_obs.obs[ObservationType.DOPPLER]

    def test_zero_relative_motion(self):
        vel = np.array([1500.0, -800.0, 300.0])
        datum = self.estimate_doppler(vel, vel, NO_DIFF)
        # Only the Sagnac rate remains when both move alike
        expected = -sagnac_rate_correction(self.recv_pos, self.sat_pos, vel, vel)
        self.assertNotEqual(expected, 0.0)
        self.assertAlmostEqual(datum.estimate, expected, places=9)

    def test_clock_drift_terms(self):
        datum = self.estimate_doppler(np.zeros(3), np.zeros(3), NO_DIFF, drift=2e-9, sat_drift=5e-10)
        self.assertAlmostEqual(datum.estimate, CLIGHT * (2e-9 - 5e-10))
        datum = self.estimate_doppler(np.zeros(3), np.zeros(3), SINGLE_DIFF, drift=2e-9, sat_drift=5e-10)
        self.assertAlmostEqual(datum.estimate, CLIGHT * 2e-9)
        datum = self.estimate_doppler(np.zeros(3), np.zeros(3), DOUBLE_DIFF, drift=2e-9, sat_drift=5e-10)
        self.assertEqual(datum.estimate, 0.0)

    def test_approaching_satellite(self):
        los = (self.sat_pos - self.recv_pos) / np.linalg.norm(self.sat_pos - self.recv_pos)
        datum = self.estimate_doppler(np.zeros(3), -1000.0 * los, DOUBLE_DIFF)
        # Sagnac rate is small compared to the line-of-sight velocity
        self.assertAlmostEqual(datum.estimate, -1000.0, delta=1.0)

    def test_variance_is_wavelength_scaled(self):
        datum = self.estimate_doppler(np.zeros(3), np.zeros(3), DOUBLE_DIFF)
        self.assertGreater(datum.meas_var, Frequency.G01.get_wavelength() ** 2)

    def test_clock_drift_variances(self):
        stds = dict(drift_std=1e-10, isd_std=3e-11)
        dd = self.estimate_doppler(np.zeros(3), np.zeros(3), DOUBLE_DIFF, **stds)
        sd = self.estimate_doppler(np.zeros(3), np.zeros(3), SINGLE_DIFF, **stds)
        no = self.estimate_doppler(np.zeros(3), np.zeros(3), NO_DIFF, **stds)

        self.assertAlmostEqual(sd.meas_var - dd.meas_var, CLIGHT**2 * (1e-10**2 + 3e-11**2), places=6)
        self.assertAlmostEqual(no.meas_var, sd.meas_var)
        # Double differences keep the baseline only
        self.assertAlmostEqual(dd.meas_var, self.estimate_doppler(np.zeros(3), np.zeros(3), DOUBLE_DIFF).meas_var)


class TestPreconditions(unittest.TestCase):
    """Test error paths of the estimator"""

    def setUp(self):
        self.recv_pos = np.array([RE_WGS84, 0.0, 0.0])
        self.sat_pos = np.array([RE_WGS84 + 20200e3, 1000e3, 0.0])
        self.receivers = [make_receiver(role, self.recv_pos) for role in ReceiverRole]

    def make_batch(self, freq=Frequency.G01, recv_idx=0, nav_data=None):
        recv_obs = ReceiverObservation.from_geometry(
            self.sat_pos, np.zeros(3), self.receivers[0], nav_data=nav_data,
            obs={ObservationType.PSEUDORANGE: ObservationDatum()})
        return {SatSigId(freq, 3): Observation(recv_obs={recv_idx: recv_obs})}

    def test_receiver_count_mismatch(self):
        with self.assertRaises(PreconditionViolation):
            plain_estimator().estimate(self.make_batch(), self.receivers[:1], None, SINGLE_DIFF)

    def test_receiver_role_order(self):
        with self.assertRaises(PreconditionViolation):
            plain_estimator().estimate(self.make_batch(), self.receivers[::-1], None, SINGLE_DIFF)

    def test_receiver_index_out_of_range(self):
        with self.assertRaises(PreconditionViolation):
            plain_estimator().estimate(self.make_batch(recv_idx=2), self.receivers, None, SINGLE_DIFF)

    def test_missing_inter_system_bias(self):
        with self.assertRaises(MissingDataError):
            plain_estimator().estimate(self.make_batch(freq=Frequency.E01), self.receivers, None, SINGLE_DIFF)

    def test_missing_nav_data(self):
        with self.assertRaises(MissingDataError):
            plain_estimator().estimate(self.make_batch(), self.receivers, None, NO_DIFF)
        # Not needed once the satellite terms are differenced out
        plain_estimator().estimate(self.make_batch(), self.receivers, None, SINGLE_DIFF)

    def test_invalid_variance(self):
        with self.assertRaises(PreconditionViolation):
            plain_estimator().estimate(self.make_batch(nav_data=BrokenNavData()), self.receivers, None, NO_DIFF)


class TestTrace(unittest.TestCase):
    """Test the trace callback"""

    def setUp(self):
        self.sig = SatSigId(Frequency.G01, 9)
        recv_pos = np.array([RE_WGS84, 0.0, 0.0])
        self.receivers = [make_receiver(role, recv_pos) for role in ReceiverRole]
        self.observations = {self.sig: Observation(recv_obs={
            int(role): ReceiverObservation.from_geometry(
                [RE_WGS84 + 20200e3, 500e3, 300e3], np.zeros(3), self.receivers[role],
                nav_data=Ephemeris(sat=9, sva=2), obs=all_types(21e6))
            for role in ReceiverRole
        })}

    def test_trace_called_per_observation(self):
        traces = []
        plain_estimator().estimate(self.observations, self.receivers, None, NO_DIFF, trace=traces.append)
        self.assertEqual(len(traces), len(ReceiverRole) * len(ObservationType))

        for trace in traces:
            self.assertIsInstance(trace, EstimateTrace)
            self.assertEqual(trace.sat_sig_id, self.sig)
            datum = self.observations[self.sig].recv_obs[trace.role].obs[trace.obs_type]
            self.assertEqual(trace.estimate, datum.estimate)
            self.assertEqual(trace.meas_var, datum.meas_var)
            self.assertAlmostEqual(sum(v for _, v in trace.estimate_terms), trace.estimate)
            self.assertAlmostEqual(sum(v for _, v in trace.variance_terms), trace.meas_var)

        code = next(t for t in traces if t.obs_type == ObservationType.PSEUDORANGE)
        self.assertEqual([name for name, _ in code.estimate_terms],
                         ['Geometric range', 'Sagnac', 'Troposphere', 'Ionosphere', 'Clock bias'])
        self.assertEqual(code.measurement, 21e6)
        self.assertIn('Satellite position', [name for name, _ in code.variance_terms])

    def test_trace_to_logger(self):
        logger_name = 'pyobsmodel.gnss.observation_estimator'
        with self.assertLogs(logger_name, level=TRACE) as cm:
            plain_estimator().estimate(self.observations, self.receivers, None, SINGLE_DIFF,
                                       trace=trace_to_logger)
        trace_records = [r for r in cm.records if r.levelno == TRACE]
        self.assertEqual(len(trace_records), len(ReceiverRole) * len(ObservationType))
        self.assertIn('G09-G01', trace_records[0].getMessage())
        self.assertIn('Geometric range', trace_records[0].getMessage())


class TestEstimatorConfig(unittest.TestCase):

    def test_config_round_trip(self):
        estimator = ObservationEstimator(IonosphereModel.NONE, TroposphereModelSelection.disabled(),
                                         GnssMeasurementErrorModel(model=WeightingModel.EXPONENTIAL))
        rebuilt = ObservationEstimator.from_config(estimator.config)
        self.assertEqual(rebuilt.ionosphere_model, IonosphereModel.NONE)
        self.assertEqual(rebuilt.troposphere_models, TroposphereModelSelection.disabled())
        self.assertEqual(rebuilt.error_model.model, WeightingModel.EXPONENTIAL)

    def test_model_given_by_name(self):
        estimator = ObservationEstimator('klobuchar')
        self.assertEqual(estimator.ionosphere_model, IonosphereModel.KLOBUCHAR)

    def test_unset_ionosphere_model(self):
        with self.assertRaises(ConfigurationError):
            ObservationEstimator(None, TroposphereModelSelection.disabled())
        with self.assertRaises(ConfigurationError):
            ObservationEstimator('NeQuick', TroposphereModelSelection.disabled())

    def test_unset_mapping_function(self):
        with self.assertRaises(ConfigurationError):
            ObservationEstimator(IonosphereModel.NONE, TroposphereModelSelection(zhd_mapping_function=None))

        selection = TroposphereModelSelection.disabled()
        selection.zwd_mapping_function = None
        with self.assertRaises(ConfigurationError):
            ObservationEstimator(IonosphereModel.NONE, selection)

    def test_unset_troposphere_model(self):
        selection = TroposphereModelSelection.disabled()
        selection.zhd_model = (None, None)
        with self.assertRaises(ConfigurationError):
            ObservationEstimator(IonosphereModel.NONE, selection)
        with self.assertRaises(ConfigurationError):
            ObservationEstimator(IonosphereModel.NONE, 'Saastamoinen')

    def test_unset_weighting_model(self):
        error_model = GnssMeasurementErrorModel()
        error_model.model = None
        with self.assertRaises(ConfigurationError):
            ObservationEstimator(IonosphereModel.NONE, TroposphereModelSelection.disabled(), error_model)


if __name__ == '__main__':
    unittest.main()
