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
Orchestration of a full run: load, resolve, validate, decorate, check, aggregate.
"""
import logging
from typing import Dict, List, Optional

from ..BUILDERS.target_builder import decorate
from ..CONVERTERS.to_github_output import filter_missing_targets, to_github_output
from ..MODELS.image_config import ImageConfig, Target
from ..PARSERS.config_loader import ConfigLoader, DEFAULT_CONFIG_FILE
from ..REGISTRY.registry_client import EcrRegistryClient
from ..RESOLVERS.config_resolver import ConfigResolver
from ..VALIDATORS.config_validator import ConfigValidator

logger = logging.getLogger(__name__)


class ImageChecker:
    """
    Runs every stage in order over all image configs under a directory.

    Stages hand a new mapping to the next one. Remote checks run one target
    at a time and the first failure aborts the run.
    """
    def __init__(
        self,
        image_directory: str = ".",
        defaults_file: str = DEFAULT_CONFIG_FILE,
        registry_client: Optional[EcrRegistryClient] = None,
        loader: Optional[ConfigLoader] = None,
    ):
        """
        Initializes the checker.

        :param image_directory: Root directory holding one directory per image.
        :param defaults_file: Path to the defaults file.
        :param registry_client: Client used for remote tag lookups.
        :param loader: Config loader, mainly overridden in tests.
        """
        self.image_directory = image_directory
        self.defaults_file = defaults_file
        self.registry_client = registry_client or EcrRegistryClient()
        self.loader = loader or ConfigLoader()
        self.validator = ConfigValidator()

    def prepare(self) -> Dict[str, ImageConfig]:
        """
        Loads, resolves, validates and decorates every image config.
        Makes no remote calls.

        :return: Decorated image configs keyed by config path.
        """
        logger.info("Base image directory: %s", self.image_directory)

        defaults = self.loader.load_defaults(self.defaults_file)
        images = self.loader.discover(self.image_directory)

        resolved = ConfigResolver(defaults).resolve_all(images)
        for path, image in resolved.items():
            for target in image.targets or []:
                logger.debug(
                    "Child config %s: repo=%s tag=%s target=%s role=%s",
                    path,
                    image.repo_name,
                    image.repo_tag,
                    target.label,
                    target.aws_role_name or "",
                )

        self.validator.validate(resolved)
        return decorate(resolved)

    def check_remote_tags(self, images: Dict[str, ImageConfig]) -> Dict[str, ImageConfig]:
        """
        Looks up every target's tag in its registry.

        :param images: Decorated image configs.
        :return: New mapping with remote_tag_missing set on each target.
        """
        checked: Dict[str, ImageConfig] = {}
        for path, image in images.items():
            targets: List[Target] = []
            for target in image.targets or []:
                missing = self.registry_client.check(target, image.repo_name, image.repo_tag)
                if missing:
                    logger.info("Tag %s missing for %s", image.repo_tag, target.full_image_ref)
                targets.append(target.model_copy(update={"remote_tag_missing": missing}))
            checked[path] = image.model_copy(update={"targets": targets})
        return checked

    def run(self) -> str:
        """
        Runs the whole pipeline.

        :return: The manifest line for the targets that need building.
        """
        checked = self.check_remote_tags(self.prepare())
        missing = filter_missing_targets(checked)
        logger.info("%d target(s) need building", len(missing))
        return to_github_output(missing)
