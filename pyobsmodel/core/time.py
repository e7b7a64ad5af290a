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

"""GNSS epoch representation used by the atmosphere models"""

from datetime import datetime, timedelta

GPST0 = [1980, 1, 6, 0, 0, 0]  # GPS time reference epoch
GST0 = [1999, 8, 22, 0, 0, 0]  # Galileo time reference epoch
BDT0 = [2006, 1, 1, 0, 0, 0]   # BeiDou time reference epoch

GPS_BDS_OFFSET = 14.0          # GPS-BeiDou time offset (seconds)
SECONDS_PER_WEEK = 604800.0

_REFERENCE_EPOCHS = {
    'GPS': GPST0,
    'GAL': GST0,
    'BDS': BDT0,
}


class GNSSTime:
    """GNSS Time representation as week number and time of week

    Week and time of week are counted from the reference epoch of the
    given time system. The time of week is normalized to [0, 604800).
    """

    def __init__(self, week: int = 0, tow: float = 0.0, time_sys: str = 'GPS'):
        """
        Initialize GNSS time

        Parameters:
        -----------
        week : int
            Week number
        tow : float
            Time of week in seconds
        time_sys : str
            Time system ('GPS', 'GAL', 'BDS')
        """
        self.week = int(week)
        self.tow = float(tow)
        self.time_sys = time_sys.upper()

        if self.time_sys not in _REFERENCE_EPOCHS:
            raise ValueError(f"Invalid time system: {time_sys}. Must be one of {list(_REFERENCE_EPOCHS)}")

        while self.tow >= SECONDS_PER_WEEK:
            self.week += 1
            self.tow -= SECONDS_PER_WEEK
        while self.tow < 0:
            self.week -= 1
            self.tow += SECONDS_PER_WEEK

    @classmethod
    def from_datetime(cls, dt, time_sys='GPS'):
        """Create GNSSTime from datetime object"""
        ref_date = datetime(*_REFERENCE_EPOCHS[time_sys.upper()])
        delta = dt - ref_date
        weeks = delta.days // 7
        tow = (delta.days % 7) * 86400 + delta.seconds + delta.microseconds * 1e-6
        return cls(weeks, tow, time_sys)

    @classmethod
    def from_gps_seconds(cls, gps_seconds, time_sys='GPS'):
        """Create GNSSTime from seconds since the reference epoch"""
        week = int(gps_seconds // SECONDS_PER_WEEK)
        tow = gps_seconds % SECONDS_PER_WEEK
        return cls(week, tow, time_sys)

    def to_datetime(self):
        """Convert to datetime object (in the scale of the time system)"""
        ref_date = datetime(*_REFERENCE_EPOCHS[self.time_sys])
        return ref_date + timedelta(weeks=self.week, seconds=self.tow)

    def to_gps(self) -> 'GNSSTime':
        """Convert to GPS time"""
        if self.time_sys == 'GPS':
            return GNSSTime(self.week, self.tow, 'GPS')
        offset = 0.0 if self.time_sys == 'GAL' else GPS_BDS_OFFSET
        dt = self.to_datetime() + timedelta(seconds=offset)
        return GNSSTime.from_datetime(dt, 'GPS')

    @property
    def gps_tow(self) -> float:
        """GPS time of week in seconds"""
        return self.to_gps().tow

    @property
    def day_of_year(self) -> float:
        """Fractional day of year (1.0 at January 1st, 00:00)"""
        dt = self.to_datetime()
        start = datetime(dt.year, 1, 1)
        return 1.0 + (dt - start).total_seconds() / 86400.0

    def __eq__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        return self.time_sys == other.time_sys and self.week == other.week and abs(self.tow - other.tow) < 1e-9

    def __hash__(self):
        return hash((self.time_sys, self.week, round(self.tow, 9)))

    def __str__(self):
        return f"{self.time_sys} Week: {self.week}, TOW: {self.tow:.3f}"

    def __repr__(self):
        return f"GNSSTime({self.week}, {self.tow}, '{self.time_sys}')"
