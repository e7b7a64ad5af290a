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

"""Estimator configuration with YAML/JSON persistence"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import yaml

from .core.exceptions import ConfigurationError
from .gnss.ionosphere import IonosphereModel
from .gnss.measurement_errors import GnssMeasurementErrorModel
from .gnss.troposphere import TroposphereModelSelection
from .utils import enum_from_name

logger = logging.getLogger(__name__)


@dataclass
class EstimatorConfig:
    """
    Model selection of the observation estimator.

    Attributes:
        ionosphere_model (IonosphereModel): Ionosphere delay model
        troposphere_models (TroposphereModelSelection): Zenith delay models
            and mapping functions
        gnss_measurement_error (GnssMeasurementErrorModel): Measurement
            error model parameters

    Examples:
        >>> config = EstimatorConfig.load_from_file('estimator.yaml')
        >>> estimator = ObservationEstimator.from_config(config)
    """
    ionosphere_model: IonosphereModel = IonosphereModel.KLOBUCHAR
    troposphere_models: TroposphereModelSelection = field(default_factory=TroposphereModelSelection)
    gnss_measurement_error: GnssMeasurementErrorModel = field(default_factory=GnssMeasurementErrorModel)

    def to_dict(self) -> dict:
        """
        Convert configuration to dictionary for serialization.

        Returns:
        --------
        dict
            Plain record with enums stored by name
        """
        return {
            'ionosphere_model': self.ionosphere_model.name,
            'troposphere_models': self.troposphere_models.to_dict(),
            'gnss_measurement_error': self.gnss_measurement_error.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'EstimatorConfig':
        """
        Create configuration from dictionary.

        Missing keys keep their defaults.

        Raises:
            ConfigurationError: If an enum name is unknown or a parameter invalid
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a mapping, got {type(data).__name__}")
        config = cls()
        if 'ionosphere_model' in data:
            config.ionosphere_model = enum_from_name(IonosphereModel, data['ionosphere_model'])
        if 'troposphere_models' in data:
            config.troposphere_models = TroposphereModelSelection.from_dict(data['troposphere_models'])
        if 'gnss_measurement_error' in data:
            config.gnss_measurement_error = GnssMeasurementErrorModel.from_dict(data['gnss_measurement_error'])
        return config

    def save_to_file(self, filepath: Union[str, Path], format: str = 'yaml') -> None:
        """
        Save configuration to file

        Parameters:
        -----------
        filepath : str or Path
            Path to save file
        format : str
            File format: 'yaml' or 'json'
        """
        data = self.to_dict()

        filepath = Path(filepath)
        if format == 'yaml':
            with open(filepath, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        elif format == 'json':
            with open(filepath, 'w') as f:
                json.dump(data, f, indent=2)
        else:
            raise ConfigurationError(f"Unsupported format: {format}")
        logger.debug("Saved estimator configuration to %s", filepath)

    @classmethod
    def load_from_file(cls, filepath: Union[str, Path]) -> 'EstimatorConfig':
        """
        Load configuration from file.

        The file format is determined from the file extension.

        Parameters:
        -----------
        filepath : str or Path
            Path to configuration file (.yaml, .yml, or .json)

        Raises:
            ConfigurationError: If the file format or a value is not supported
            FileNotFoundError: If the specified file doesn't exist
        """
        filepath = Path(filepath)

        if filepath.suffix in ['.yaml', '.yml']:
            with open(filepath) as f:
                data = yaml.safe_load(f)
        elif filepath.suffix == '.json':
            with open(filepath) as f:
                data = json.load(f)
        else:
            raise ConfigurationError(f"Unsupported file format: {filepath.suffix}")

        logger.debug("Loaded estimator configuration from %s", filepath)
        return cls.from_dict(data or {})
