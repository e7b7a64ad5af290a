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

"""GNSS Constants and System Parameters"""

import numpy as np

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# GPS frequencies
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)
FREQ_L5 = 1.17645E9   # L5 frequency (Hz)
FREQ_L6 = 1.27875E9   # QZSS L6 frequency (Hz)

# GLONASS frequencies
FREQ_G1 = 1.60200E9   # GLONASS G1 base frequency (Hz)
FREQ_G2 = 1.24600E9   # GLONASS G2 base frequency (Hz)
DFREQ_G1 = 0.56250E6  # GLONASS G1 channel spacing (Hz)
DFREQ_G2 = 0.43750E6  # GLONASS G2 channel spacing (Hz)
GLO_FCN_MIN = -7      # lowest GLONASS frequency channel number
GLO_FCN_MAX = 13      # highest GLONASS frequency channel number

# Galileo frequencies
FREQ_E1 = 1.57542E9   # E1 frequency (Hz) - same as GPS L1
FREQ_E5a = 1.17645E9  # E5a frequency (Hz) - same as GPS L5
FREQ_E5b = 1.20714E9  # E5b frequency (Hz)
FREQ_E5 = 1.191795E9  # E5 (E5a+E5b) frequency (Hz)
FREQ_E6 = 1.27875E9   # E6 frequency (Hz)

# BeiDou frequencies
FREQ_B1I = 1.561098E9  # BeiDou B1I frequency (Hz)
FREQ_B1C = 1.57542E9   # BeiDou B1C frequency (Hz) - same as GPS L1
FREQ_B2a = 1.17645E9   # BeiDou B2a frequency (Hz) - same as GPS L5
FREQ_B2b = 1.20714E9   # BeiDou B2b frequency (Hz) - same as Galileo E5b
FREQ_B2 = 1.191795E9   # BeiDou B2 (B2a+B2b) frequency (Hz)
FREQ_B3 = 1.26852E9    # BeiDou B3 frequency (Hz)

# IRNSS frequencies
FREQ_I5 = FREQ_L5      # IRNSS L5 frequency (Hz)
FREQ_IS = 2.492028E9   # IRNSS S frequency (Hz)

# GNSS System IDs
SYS_NONE = 0x00   # invalid
SYS_GPS = 0x01    # GPS
SYS_GLO = 0x02    # GLONASS
SYS_GAL = 0x04    # Galileo
SYS_BDS = 0x08    # BeiDou
SYS_QZS = 0x10    # QZSS
SYS_SBS = 0x20    # SBAS
SYS_IRN = 0x40    # IRNSS

# Earth Parameters (WGS84)
RE_WGS84 = 6378137.0           # earth semimajor axis (m)
FE_WGS84 = 1.0 / 298.257223563 # earth flattening
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)
GME = 3.986004418E14           # earth gravitational constant (m^3/s^2)

# Unit conversions
R2D = 180.0 / np.pi            # radians to degrees
D2R = np.pi / 180.0            # degrees to radians

# Error/Threshold Constants
ERR_SAAS = 0.3      # Saastamoinen model error std (m)
ERR_BRDCI = 0.5     # broadcast ionosphere model error factor
ERR_CBIAS = 0.3     # code bias error std (m)
ERR_DOPPLER = 1.0   # Doppler error std (Hz)
ERR_CARRIER = 0.003 # carrier-phase error std (m)
ERR_CODE = 0.3      # pseudorange error std (m)
ERREPH_GLO = 5.0    # GLONASS ephemeris error (m)
REL_HUMI = 0.7      # relative humidity

# Error factors per system (RTKLIB EFACT_*)
EFACT_GPS = 1.0
EFACT_GLO = 1.5
EFACT_GAL = 1.0
EFACT_BDS = 1.0
EFACT_QZS = 1.0
EFACT_IRN = 1.5
EFACT_SBS = 3.0


def sys2char(sys):
    """Convert system ID to character"""
    syschar = {
        SYS_GPS: 'G',
        SYS_GLO: 'R',
        SYS_GAL: 'E',
        SYS_BDS: 'C',
        SYS_QZS: 'J',
        SYS_SBS: 'S',
        SYS_IRN: 'I'
    }
    return syschar.get(sys, ' ')


def char2sys(c):
    """Convert character to system ID"""
    charmap = {
        'G': SYS_GPS,
        'R': SYS_GLO,
        'E': SYS_GAL,
        'C': SYS_BDS,
        'J': SYS_QZS,
        'S': SYS_SBS,
        'I': SYS_IRN
    }
    return charmap.get(c.upper(), SYS_NONE)
