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

"""GNSS satellite systems, signal frequencies and signal identifiers.

The module supports the following GNSS constellations:
- GPS (Global Positioning System): L1, L2, L5 frequencies
- GLONASS: G1, G2 with Frequency Division Multiple Access (FDMA)
- Galileo: E1, E5a, E5b, E5, E6 frequencies
- BeiDou: B1I, B1C, B2a, B2b, B2, B3 frequencies
- QZSS (Quasi-Zenith Satellite System): J1, J2, J5, J6 frequencies
- SBAS (Satellite-Based Augmentation Systems): S1, S5 frequencies
- IRNSS (Indian Regional Navigation Satellite System): I5, IS frequencies

Notes:
    - GLONASS uses FDMA with frequency channel numbers from -7 to +13
    - All frequencies are in Hz, wavelengths in meters
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from .constants import *
from .exceptions import MissingDataError


class SatelliteSystem(IntEnum):
    """Satellite systems, valued with the ``SYS_*`` identifiers"""
    GPS = SYS_GPS
    GLO = SYS_GLO
    GAL = SYS_GAL
    BDS = SYS_BDS
    QZSS = SYS_QZS
    SBAS = SYS_SBS
    IRNSS = SYS_IRN

    @property
    def char(self) -> str:
        """RINEX system character"""
        return sys2char(int(self))

    @classmethod
    def from_char(cls, c: str) -> 'SatelliteSystem':
        """Satellite system from its RINEX character"""
        return cls(char2sys(c))


class Frequency(Enum):
    """Signal frequency bands (RINEX band naming)"""
    G01 = 'G01'  # GPS L1
    G02 = 'G02'  # GPS L2
    G05 = 'G05'  # GPS L5
    R01 = 'R01'  # GLONASS G1 (FDMA)
    R02 = 'R02'  # GLONASS G2 (FDMA)
    E01 = 'E01'  # Galileo E1
    E05 = 'E05'  # Galileo E5a
    E06 = 'E06'  # Galileo E6
    E07 = 'E07'  # Galileo E5b
    E08 = 'E08'  # Galileo E5 (E5a+E5b)
    B01 = 'B01'  # BeiDou B1C
    B02 = 'B02'  # BeiDou B1I
    B05 = 'B05'  # BeiDou B2a
    B06 = 'B06'  # BeiDou B3
    B07 = 'B07'  # BeiDou B2b
    B08 = 'B08'  # BeiDou B2 (B2a+B2b)
    J01 = 'J01'  # QZSS L1
    J02 = 'J02'  # QZSS L2
    J05 = 'J05'  # QZSS L5
    J06 = 'J06'  # QZSS L6
    I05 = 'I05'  # IRNSS L5
    I09 = 'I09'  # IRNSS S
    S01 = 'S01'  # SBAS L1
    S05 = 'S05'  # SBAS L5

    @property
    def sat_sys(self) -> SatelliteSystem:
        """Satellite system the band belongs to"""
        if self.value[0] == 'B':
            return SatelliteSystem.BDS
        return SatelliteSystem.from_char(self.value[0])

    @property
    def is_fdma(self) -> bool:
        """Whether the carrier depends on a frequency channel number"""
        return self in (Frequency.R01, Frequency.R02)

    def get_frequency(self, freq_num: Optional[int] = None) -> float:
        """Carrier frequency of the band

        Parameters
        ----------
        freq_num : int, optional
            GLONASS frequency channel number (-7 to +13). Required for the
            FDMA bands, ignored otherwise.

        Returns
        -------
        float
            Carrier frequency in Hz

        Raises
        ------
        MissingDataError
            If an FDMA band is queried without a valid frequency number
        """
        if self.is_fdma:
            if freq_num is None or not GLO_FCN_MIN <= freq_num <= GLO_FCN_MAX:
                raise MissingDataError(
                    f"{self.name} needs a frequency number in [{GLO_FCN_MIN}, {GLO_FCN_MAX}], got {freq_num}")
            if self is Frequency.R01:
                return FREQ_G1 + freq_num * DFREQ_G1
            return FREQ_G2 + freq_num * DFREQ_G2
        return _CARRIER_FREQUENCIES[self]

    def get_wavelength(self, freq_num: Optional[int] = None) -> float:
        """Carrier wavelength of the band in meters"""
        return CLIGHT / self.get_frequency(freq_num)

    def __str__(self):
        return self.value


_CARRIER_FREQUENCIES = {
    Frequency.G01: FREQ_L1,
    Frequency.G02: FREQ_L2,
    Frequency.G05: FREQ_L5,
    Frequency.E01: FREQ_E1,
    Frequency.E05: FREQ_E5a,
    Frequency.E06: FREQ_E6,
    Frequency.E07: FREQ_E5b,
    Frequency.E08: FREQ_E5,
    Frequency.B01: FREQ_B1C,
    Frequency.B02: FREQ_B1I,
    Frequency.B05: FREQ_B2a,
    Frequency.B06: FREQ_B3,
    Frequency.B07: FREQ_B2b,
    Frequency.B08: FREQ_B2,
    Frequency.J01: FREQ_L1,
    Frequency.J02: FREQ_L2,
    Frequency.J05: FREQ_L5,
    Frequency.J06: FREQ_L6,
    Frequency.I05: FREQ_I5,
    Frequency.I09: FREQ_IS,
    Frequency.S01: FREQ_L1,
    Frequency.S05: FREQ_L5,
}


@dataclass(frozen=True)
class SatSigId:
    """Identifies one signal of one satellite

    Attributes
    ----------
    freq : Frequency
        Signal frequency band
    sat_num : int
        Satellite number (PRN or slot) within the constellation
    """
    freq: Frequency
    sat_num: int

    @property
    def sat_sys(self) -> SatelliteSystem:
        return self.freq.sat_sys

    def __str__(self):
        return f"{self.sat_sys.char}{self.sat_num:02d}-{self.freq}"
