"""
Validation of resolved image configs.
"""
from typing import Dict

from ..MODELS.image_config import ImageConfig
from ..UTILS.strings import is_blank
from ..errors import ConfigValidationError


class ConfigValidator:
    """
    Checks that every resolved image config is safe to act on.

    Validation stops at the first violation and reports the config path and
    the field that failed.
    """

    def validate(self, images: Dict[str, ImageConfig]) -> None:
        """
        Validates every image config.

        :param images: Resolved image configs keyed by config path.
        :raises ConfigValidationError: On the first invariant that does not hold.
        """
        for path, image in images.items():
            self.validate_image(path, image)

    def validate_image(self, path: str, image: ImageConfig) -> None:
        """
        Validates a single resolved image config.

        :param path: Config path used to identify the record in errors.
        :param image: The resolved image config.
        """
        if is_blank(image.repo_name):
            raise ConfigValidationError(path, "repo_name", f"repo_name not set for {path}")

        if is_blank(image.repo_tag):
            raise ConfigValidationError(path, "repo_tag", f"repo_tag not set for {path}")

        if not image.targets:
            raise ConfigValidationError(
                path, "targets", f"targets not set for {path} either at the child level or via defaults"
            )

        if not image.target_platforms:
            raise ConfigValidationError(path, "target_platforms", f"target_platforms not set for {path}")

        for idx, platform in enumerate(image.target_platforms):
            if is_blank(platform):
                raise ConfigValidationError(
                    path,
                    "target_platforms",
                    f"target_platforms cannot contain empty values for {path} index {idx}",
                )

        if image.build_args is not None:
            if not image.build_args:
                raise ConfigValidationError(
                    path, "build_args", f"build_args must have at least one key/value pair when defined for {path}"
                )
            for key, value in image.build_args.items():
                if is_blank(value):
                    raise ConfigValidationError(
                        path, "build_args", f"build_args must have no empty values for {path} key {key}"
                    )

        default_account_set = not is_blank(image.default_aws_account_id)
        default_region_set = not is_blank(image.default_aws_region)

        for idx, target in enumerate(image.targets):
            if is_blank(target.aws_account_id) and not default_account_set:
                raise ConfigValidationError(
                    path,
                    "aws_account_id",
                    f"aws_account_id not set for {path} target index {idx} and there is no default set",
                )
            if is_blank(target.aws_region) and not default_region_set:
                raise ConfigValidationError(
                    path,
                    "aws_region",
                    f"aws_region not set for {path} target index {idx} and there is no default set",
                )
