# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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
Loaders for the defaults file and the per-image config.yml files.
"""
import logging
import os
from typing import Any, Dict, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from ..MODELS.image_config import DefaultsConfig, ImageConfig
from ..errors import ConfigIOError, ConfigParseError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config-defaults.yml"
CHILD_CONFIG_FILE = "config.yml"

ModelT = TypeVar("ModelT", bound=BaseModel)


class StringScalarLoader(yaml.SafeLoader):
    """
    SafeLoader that keeps plain scalars as the text written in the file.

    Only null is resolved implicitly, so `repo_tag: 1.10` stays "1.10" and an
    account id with a leading zero is not read as an octal number.
    """


StringScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag == "tag:yaml.org,2002:null"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class ConfigLoader:
    """
    Reads the defaults record and every image directory's config file.
    No merging happens here.
    """
    def __init__(self, child_config_file: str = CHILD_CONFIG_FILE):
        """
        :param child_config_file: File name looked up inside each image directory.
        """
        self.child_config_file = child_config_file

    def load_defaults(self, defaults_path: str = DEFAULT_CONFIG_FILE) -> DefaultsConfig:
        """
        Loads the defaults record. The file must exist.

        :param defaults_path: Path to the defaults file.
        :return: Parsed defaults.
        """
        return self._parse_file(defaults_path, DefaultsConfig)

    def discover(self, image_directory: str) -> Dict[str, ImageConfig]:
        """
        Loads the config file of every image directory directly under image_directory.

        Plain files and hidden directories are ignored. A directory without a
        config file is skipped with a warning.

        :param image_directory: Root directory holding one directory per image.
        :return: Image configs keyed by their config file path.
        """
        try:
            entries = sorted(os.listdir(image_directory))
        except OSError as e:
            raise ConfigIOError(image_directory, f"reading directories: {e}") from e

        images: Dict[str, ImageConfig] = {}
        for name in entries:
            if name.startswith(".") or not os.path.isdir(os.path.join(image_directory, name)):
                continue

            config_path = os.path.join(image_directory, name, self.child_config_file)
            try:
                with open(config_path, "r") as f:
                    content = f.read()
            except FileNotFoundError:
                logger.warning("Skipping directory as child config file doesn't exist: %s", config_path)
                continue
            except OSError as e:
                raise ConfigIOError(config_path, f"opening YAML file: {e}") from e

            logger.info("Found child config file: %s", config_path)
            images[config_path] = self.parse_from_string(content, ImageConfig, source=config_path)

        return images

    def parse_from_string(self, content: str, model: Type[ModelT], source: str = "<string>") -> ModelT:
        """
        Parses YAML content into the given model.

        :param content: YAML document.
        :param model: DefaultsConfig or ImageConfig.
        :param source: Name used in error messages.
        :return: Model instance.
        """
        try:
            data = yaml.load(content, Loader=StringScalarLoader)
        except yaml.YAMLError as e:
            raise ConfigParseError(source, str(e)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigParseError(source, f"expected a mapping at the top level, got {type(data).__name__}")

        return self._build(data, model, source)

    def _parse_file(self, path: str, model: Type[ModelT]) -> ModelT:
        try:
            with open(path, "r") as f:
                content = f.read()
        except OSError as e:
            raise ConfigIOError(path, f"opening YAML file: {e}") from e
        return self.parse_from_string(content, model, source=path)

    def _build(self, data: Dict[str, Any], model: Type[ModelT], source: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ConfigParseError(source, str(e)) from e
