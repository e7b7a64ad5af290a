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

"""Helpers shared by the configuration adapters"""

from enum import Enum
from typing import Type, TypeVar, Union

from .core.exceptions import ConfigurationError

E = TypeVar('E', bound=Enum)


def enum_from_name(enum_cls: Type[E], name: Union[str, E]) -> E:
    """Look up an enum member by name (case-insensitive)

    Raises
    ------
    ConfigurationError
        If the name is not a member of the enumeration
    """
    if isinstance(name, enum_cls):
        return name
    if not isinstance(name, str):
        raise ConfigurationError(f"{enum_cls.__name__} must be given by name, got {name!r}")
    try:
        return enum_cls[name.upper()]
    except KeyError:
        valid = ', '.join(m.name for m in enum_cls)
        raise ConfigurationError(f"Unsupported {enum_cls.__name__} '{name}'. Must be one of: {valid}") from None
