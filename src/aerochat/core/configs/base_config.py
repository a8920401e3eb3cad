# Copyright 2025 - Oumi
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

import dataclasses
import logging
import re
from collections.abc import Iterator
from io import StringIO
from pathlib import Path
from typing import Any, Optional, TypeVar, Union, cast

from omegaconf import OmegaConf

from aerochat.core.configs.params.base_params import BaseParams

T = TypeVar("T", bound="BaseConfig")


def _read_config_without_interpolation(config_path: str) -> str:
    """Reads a configuration file without interpolating variables.

    Args:
        config_path: The path to the configuration file.

    Returns:
        str: The stringified configuration.
    """
    with open(config_path) as f:
        stringified_config = f.read()
        pattern = r"(?<!\\)\$\{"  # Matches "${" but not "\${"
        stringified_config = re.sub(pattern, "\\${", stringified_config)
    return stringified_config


@dataclasses.dataclass
class BaseConfig:
    def to_yaml(self, config_path: Union[str, Path, StringIO]) -> None:
        """Saves the configuration to a YAML file."""
        OmegaConf.save(config=self, f=config_path)

    def to_dict(self) -> dict[str, Any]:
        """Converts the configuration to a JSON-compatible dictionary."""
        container = OmegaConf.to_container(
            OmegaConf.structured(self), resolve=True, enum_to_str=True
        )
        return cast(dict[str, Any], container)

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        """Overlays a (possibly partial) dictionary onto the default configuration.

        Raises:
            ValueError, KeyError: If the dictionary has unknown keys or values of
                the wrong type.
        """
        config = OmegaConf.to_object(
            OmegaConf.merge(OmegaConf.structured(cls), OmegaConf.create(data))
        )
        if not isinstance(config, cls):
            raise TypeError(f"config is not {cls}")
        return cast(T, config)

    @classmethod
    def from_yaml(
        cls: type[T], config_path: Union[str, Path], ignore_interpolation=True
    ) -> T:
        """Loads a configuration from a YAML file.

        Args:
            config_path: The path to the YAML file.
            ignore_interpolation: If True, then any interpolation variables in the
                configuration file will be escaped.

        Returns:
            BaseConfig: The merged configuration object.
        """
        schema = OmegaConf.structured(cls)
        if ignore_interpolation:
            stringified_config = _read_config_without_interpolation(str(config_path))
            file_config = OmegaConf.create(stringified_config)
        else:
            file_config = OmegaConf.load(config_path)
        config = OmegaConf.to_object(OmegaConf.merge(schema, file_config))
        if not isinstance(config, cls):
            raise TypeError(f"config is not {cls}")
        return cast(T, config)

    @classmethod
    def from_yaml_and_arg_list(
        cls: type[T],
        config_path: Optional[str],
        arg_list: list[str],
        logger: Optional[logging.Logger] = None,
    ) -> T:
        """Loads a configuration from a YAML file and dot-separated overrides.

        Parameters specified in `arg_list` have higher precedence than the file.

        Args:
            config_path: The path to the YAML file, if any.
            arg_list: Overrides such as `remote.connection_timeout=30`.
            logger: (optional) Logger.

        Returns:
            BaseConfig: The merged configuration object.
        """
        all_configs = [OmegaConf.structured(cls)]

        if config_path is not None:
            stringified_config = _read_config_without_interpolation(config_path)
            all_configs.append(OmegaConf.create(stringified_config))

        try:
            config = OmegaConf.merge(*all_configs)
        except Exception:
            if logger:
                configs_str = "\n\n".join([f"{config}" for config in all_configs])
                logger.exception(
                    f"Failed to merge {len(all_configs)} Omega configs:\n{configs_str}"
                )
            raise

        try:
            config.merge_with_dotlist(arg_list)
        except Exception:
            if logger:
                logger.exception(
                    f"Failed to merge arglist {arg_list} with Omega config:\n{config}"
                )
            raise

        config = OmegaConf.to_object(config)
        if not isinstance(config, cls):
            raise TypeError(f"config {type(config)} is not {type(cls)}")

        return cast(T, config)

    def with_overrides(self: T, arg_list: list[str]) -> T:
        """Returns a copy of this configuration with dot-separated overrides applied.

        Example:
            >>> config.with_overrides(["tools.google_search=true", "top_p=0.5"])
        """
        config = OmegaConf.structured(self)
        config.merge_with_dotlist(arg_list)
        result = OmegaConf.to_object(config)
        if not isinstance(result, type(self)):
            raise TypeError(f"config {type(result)} is not {type(self)}")
        return cast(T, result)

    def finalize_and_validate(self) -> None:
        """Finalizes and validates the top level params objects."""
        for _, attr_value in self:
            if isinstance(attr_value, BaseParams):
                attr_value.finalize_and_validate()

        self.__finalize_and_validate__()

    def __finalize_and_validate__(self) -> None:
        """Finalizes and validates the parameters of this object.

        In case of validation errors, this method should raise a `ValueError`.
        """

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        """Returns an iterator over field names and values."""
        for param in dataclasses.fields(self):
            yield param.name, getattr(self, param.name)
