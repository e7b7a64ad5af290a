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

"""Logging configuration for the observation model

Adds a TRACE level below DEBUG for the per-term detail of the estimator.
Library modules log through ``logging.getLogger(__name__)`` and never
install handlers themselves; applications call :func:`setup_logger`.
"""

import copy
import logging
import sys
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log levels of the package"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, level: str) -> int:
        """Numeric level for a level name"""
        try:
            return cls[level.upper()].value
        except KeyError:
            raise ValueError(f"Unknown log level: {level}") from None


TRACE = LogLevel.TRACE.value

logging.addLevelName(TRACE, "TRACE")


def trace(self, message, *args, **kwargs):
    """Log a message at TRACE level"""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


logging.Logger.trace = trace


class ColoredFormatter(logging.Formatter):
    """Console formatter with colored level names"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Color a copy, other handlers share the record
        record = copy.copy(record)
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = "pyobsmodel",
                 level: str = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Setup logger with specified configuration

    Parameters:
    -----------
    name : str
        Logger name
    level : str
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    numeric_level = LogLevel.from_name(level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    logger.handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger
