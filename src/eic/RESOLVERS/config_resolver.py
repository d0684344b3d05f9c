"""
Merges the defaults record into per-image configs.
"""
import logging
from typing import Dict, Optional

from ..MODELS.image_config import DefaultsConfig, ImageConfig, Target
from ..UTILS.strings import is_blank

logger = logging.getLogger(__name__)


class ConfigResolver:
    """
    Fills unset target fields from the defaults record and synthesises a
    single target for images that declare none.

    Resolution is lenient: it never fails. Gaps that the defaults cannot
    fill are left in place for the validator to report.
    """
    def __init__(self, defaults: DefaultsConfig):
        """
        :param defaults: The process-wide defaults record.
        """
        self.defaults = defaults

    def resolve(self, child: ImageConfig) -> ImageConfig:
        """
        Resolves a single image config against the defaults.

        :param child: The image config as loaded from disk. It is not modified.
        :return: A new, resolved image config.
        """
        d = self.defaults
        resolved = child.model_copy(
            deep=True,
            update={
                "default_aws_account_id": d.default_aws_account_id,
                "default_aws_region": d.default_aws_region,
                "default_aws_role_name": d.default_aws_role_name,
            },
        )
        repo = resolved.repo_name or ""

        for target in resolved.targets or []:
            if is_blank(target.aws_account_id) and not is_blank(d.default_aws_account_id):
                target.aws_account_id = d.default_aws_account_id
                logger.debug("Using default aws_account_id %s for %s", d.default_aws_account_id, repo)

            if is_blank(target.aws_region) and not is_blank(d.default_aws_region):
                target.aws_region = d.default_aws_region
                logger.debug("Using default aws_region %s for %s", d.default_aws_region, repo)

            # An explicit empty role name opts out of the default role
            if target.aws_role_name is None and not is_blank(d.default_aws_role_name):
                target.aws_role_name = d.default_aws_role_name
                logger.debug("Using default aws_role_name %s for %s", d.default_aws_role_name, repo)

        if not resolved.targets:
            implicit = self._implicit_target()
            if implicit is not None:
                resolved.targets = [implicit]
                logger.debug("No targets declared for %s, using defaults: %s", repo, implicit.label)

        return resolved

    def resolve_all(self, images: Dict[str, ImageConfig]) -> Dict[str, ImageConfig]:
        """
        Resolves every image config.

        :param images: Image configs keyed by config path.
        :return: New mapping of resolved configs with the same keys.
        """
        return {path: self.resolve(image) for path, image in images.items()}

    def _implicit_target(self) -> Optional[Target]:
        d = self.defaults
        if is_blank(d.default_aws_account_id) or is_blank(d.default_aws_region):
            return None

        target = Target(aws_account_id=d.default_aws_account_id, aws_region=d.default_aws_region)
        if not is_blank(d.default_aws_role_name):
            target.aws_role_name = d.default_aws_role_name
        return target
