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

"""Core data structures for GNSS observation estimation"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Optional

import numpy as np

from .constants import *
from .frequency import Frequency, SatelliteSystem
from .time import GNSSTime


class ObservationType(Enum):
    """Kinds of GNSS observables handled by the estimator.

    Attributes
    ----------
    PSEUDORANGE : str
        Code-based range in meters
    CARRIER : str
        Carrier-phase range in meters
    DOPPLER : str
        Pseudorange rate in meters per second
    """
    PSEUDORANGE = 'Pseudorange'
    CARRIER = 'Carrier'
    DOPPLER = 'Doppler'

    def __str__(self):
        return self.value


class ReceiverRole(IntEnum):
    """Receiver roles. The value is the index into the receiver list."""
    ROVER = 0
    BASE = 1

    def __str__(self):
        return self.name.capitalize()


@dataclass
class ObservationDatum:
    """Measurement together with its estimate and variance

    The estimator overwrites ``estimate`` and ``meas_var``.
    """
    measurement: float = 0.0
    estimate: float = 0.0
    meas_var: float = 0.0


@dataclass
class UncertainValue:
    """Value with its standard deviation"""
    value: float = 0.0
    std_dev: float = 0.0


@dataclass
class SatelliteClock:
    """Satellite clock state

    Attributes
    ----------
    bias : float
        Clock bias (s)
    drift : float
        Clock drift (s/s)
    """
    bias: float = 0.0
    drift: float = 0.0


def ura_value(sva: int) -> float:
    """
    Convert User Range Accuracy (URA) index to accuracy value in meters.

    Parameters
    ----------
    sva : int
        URA index (0-15) from satellite ephemeris

    Returns
    -------
    float
        URA accuracy value in meters. Index 15 (no accuracy prediction)
        and indices outside 0-15 return 0.0 meters.
    """
    ura_eph = [
        2.4, 3.4, 4.85, 6.85, 9.65, 13.65, 24.0, 48.0,
        96.0, 192.0, 384.0, 768.0, 1536.0, 3072.0, 6144.0, 0.0
    ]
    return ura_eph[sva] if 0 <= sva <= 15 else 0.0


class NavData(ABC):
    """Navigation data of one satellite, as far as the estimator needs it"""

    @abstractmethod
    def calc_satellite_position_variance(self) -> float:
        """Variance of the satellite position error projected on the range (m^2)"""


@dataclass
class Ephemeris(NavData):
    """Broadcast Keplerian ephemeris (GPS, Galileo, BeiDou, QZSS, IRNSS)

    Only the accuracy index is kept; orbit propagation happens upstream.

    Attributes
    ----------
    sat : int
        Satellite number
    sva : int
        URA index (0-15)
    """
    sat: int = 0
    sva: int = 0

    def calc_satellite_position_variance(self) -> float:
        return ura_value(self.sva) ** 2


@dataclass
class GloEphemeris(NavData):
    """GLONASS broadcast ephemeris

    Attributes
    ----------
    sat : int
        Satellite slot number
    frq : int
        Frequency channel number
    """
    sat: int = 0
    frq: int = 0

    def calc_satellite_position_variance(self) -> float:
        return ERREPH_GLO ** 2


@dataclass
class ZenithDelay:
    """Troposphere zenith delays and their mapping factors

    Attributes
    ----------
    ZHD : float
        Zenith hydrostatic delay (m)
    ZWD : float
        Zenith wet delay (m)
    zhd_mapping_factor : float
        Hydrostatic mapping factor
    zwd_mapping_factor : float
        Wet mapping factor
    """
    ZHD: float = 0.0
    ZWD: float = 0.0
    zhd_mapping_factor: float = 0.0
    zwd_mapping_factor: float = 0.0

    @property
    def slant_delay(self) -> float:
        """Slant troposphere delay ZHD*mapH + ZWD*mapW (m)"""
        return self.ZHD * self.zhd_mapping_factor + self.ZWD * self.zwd_mapping_factor


@dataclass
class ObservationTerms:
    """Intermediate model terms of one satellite/receiver pair (m)

    ``dt_rel_stc`` is the relativistic signal delay slot; it stays zero.
    """
    rho_r_s: float = 0.0
    tropo_zenith_delay: ZenithDelay = field(default_factory=ZenithDelay)
    dpsr_T_r_s: float = 0.0
    dpsr_I_r_s: float = 0.0
    dpsr_ie_r_s: float = 0.0
    dt_rel_stc: float = 0.0


@dataclass
class ReceiverObservation:
    """Observation of one satellite signal at one receiver.

    Attributes
    ----------
    e_sat_pos : np.ndarray
        Satellite ECEF position at transmission time (m)
    e_sat_vel : np.ndarray
        Satellite ECEF velocity (m/s)
    sat_clock : SatelliteClock
        Satellite clock bias and drift
    e_p_los : np.ndarray
        Unit line-of-sight vector from receiver to satellite (ECEF)
    sat_elevation : float
        Satellite elevation (rad)
    sat_azimuth : float
        Satellite azimuth (rad)
    nav_data : NavData, optional
        Navigation data used to look up the satellite position variance
    cn0 : float, optional
        Carrier-to-noise density ratio (dB-Hz)
    obs : dict
        ObservationType -> ObservationDatum, only the present types
    terms : ObservationTerms
        Model terms written by the estimator
    """
    e_sat_pos: np.ndarray
    e_sat_vel: np.ndarray
    sat_clock: SatelliteClock = field(default_factory=SatelliteClock)
    e_p_los: np.ndarray = field(default_factory=lambda: np.zeros(3))
    sat_elevation: float = 0.0
    sat_azimuth: float = 0.0
    nav_data: Optional[NavData] = None
    cn0: Optional[float] = None
    obs: Dict[ObservationType, ObservationDatum] = field(default_factory=dict)
    terms: ObservationTerms = field(default_factory=ObservationTerms)

    def __post_init__(self):
        self.e_sat_pos = np.asarray(self.e_sat_pos, dtype=float)
        self.e_sat_vel = np.asarray(self.e_sat_vel, dtype=float)
        self.e_p_los = np.asarray(self.e_p_los, dtype=float)

    @classmethod
    def from_geometry(cls, e_sat_pos, e_sat_vel, receiver: 'Receiver', **kwargs) -> 'ReceiverObservation':
        """Create a receiver observation with line of sight, elevation and
        azimuth computed from the satellite and receiver positions"""
        from ..gnss.geometry import line_of_sight, sat_azimuth_elevation

        e_sat_pos = np.asarray(e_sat_pos, dtype=float)
        los = line_of_sight(receiver.e_pos, e_sat_pos)
        az, el = sat_azimuth_elevation(receiver.lla_pos, los)
        return cls(e_sat_pos=e_sat_pos, e_sat_vel=e_sat_vel, e_p_los=los,
                   sat_elevation=el, sat_azimuth=az, **kwargs)


@dataclass
class Observation:
    """All receivers' observations of one satellite signal

    Attributes
    ----------
    freq_num : int, optional
        GLONASS frequency channel number, None for CDMA signals
    recv_obs : dict
        Receiver index -> ReceiverObservation
    """
    freq_num: Optional[int] = None
    recv_obs: Dict[int, ReceiverObservation] = field(default_factory=dict)


@dataclass
class ReceiverClock:
    """Receiver clock state

    Attributes
    ----------
    bias : UncertainValue
        Clock bias (s)
    drift : UncertainValue
        Clock drift (s/s)
    """
    bias: UncertainValue = field(default_factory=UncertainValue)
    drift: UncertainValue = field(default_factory=UncertainValue)


@dataclass
class Receiver:
    """State of one receiver as maintained by the navigation filter.

    Attributes
    ----------
    role : ReceiverRole
        Role of the receiver, equal to its index in the receiver list
    e_pos : np.ndarray
        ECEF position (m)
    e_vel : np.ndarray
        ECEF velocity (m/s)
    time : GNSSTime
        Epoch of the observations
    recv_clk : ReceiverClock
        Receiver clock bias and drift
    inter_system_bias : dict
        SatelliteSystem -> time difference bias to the reference system (s)
    inter_system_drift : dict
        SatelliteSystem -> time difference drift to the reference system (s/s)
    inter_frequency_bias : dict
        Frequency -> inter-frequency bias (s)
    lla_pos : np.ndarray, optional
        Geodetic position [lat (rad), lon (rad), h (m)]; derived from
        ``e_pos`` when not given
    """
    role: ReceiverRole
    e_pos: np.ndarray
    e_vel: np.ndarray = field(default_factory=lambda: np.zeros(3))
    time: GNSSTime = field(default_factory=GNSSTime)
    recv_clk: ReceiverClock = field(default_factory=ReceiverClock)
    inter_system_bias: Dict[SatelliteSystem, UncertainValue] = field(default_factory=dict)
    inter_system_drift: Dict[SatelliteSystem, UncertainValue] = field(default_factory=dict)
    inter_frequency_bias: Dict[Frequency, UncertainValue] = field(default_factory=dict)
    lla_pos: Optional[np.ndarray] = None

    def __post_init__(self):
        from ..coordinate.transforms import ecef2llh

        self.e_pos = np.asarray(self.e_pos, dtype=float)
        self.e_vel = np.asarray(self.e_vel, dtype=float)
        if self.lla_pos is None:
            self.lla_pos = ecef2llh(self.e_pos)
        else:
            self.lla_pos = np.asarray(self.lla_pos, dtype=float)


class IonoParamKind(Enum):
    """Kinds of broadcast ionosphere parameters"""
    ALPHA = 'Alpha'
    BETA = 'Beta'


class IonosphericCorrections:
    """Broadcast ionosphere correction parameters collected from navigation data

    Parameters are stored per (satellite system, kind) as arrays of four
    coefficients and are treated as read-only by the estimator.
    """

    def __init__(self, corrections: Optional[Dict] = None):
        self._corrections = {}
        for (sys, kind), values in (corrections or {}).items():
            self.insert(sys, kind, values)

    @classmethod
    def from_klobuchar(cls, alpha, beta, sys: SatelliteSystem = SatelliteSystem.GPS) -> 'IonosphericCorrections':
        """Create a parameter set from Klobuchar alpha/beta coefficients"""
        return cls({(sys, IonoParamKind.ALPHA): alpha, (sys, IonoParamKind.BETA): beta})

    def insert(self, sys: SatelliteSystem, kind: IonoParamKind, values) -> None:
        values = np.asarray(values, dtype=float)
        if values.shape != (4,):
            raise ValueError(f"{kind.value} parameters need 4 coefficients, got shape {values.shape}")
        self._corrections[(SatelliteSystem(sys), kind)] = values

    def get(self, sys: SatelliteSystem, kind: IonoParamKind) -> Optional[np.ndarray]:
        """Coefficients for the system and kind, or None if not broadcast"""
        values = self._corrections.get((SatelliteSystem(sys), kind))
        return None if values is None else values.copy()

    def contains(self, sys: SatelliteSystem, kind: IonoParamKind) -> bool:
        return (SatelliteSystem(sys), kind) in self._corrections
