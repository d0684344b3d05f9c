"""
Builders for the fields that only exist once a config has been resolved.
"""
import os
from typing import Dict, Optional

from ..MODELS.image_config import ImageConfig, Target
from ..REGISTRY.image_reference import EcrImageReference, role_arn
from ..UTILS.strings import is_blank


class TargetBuilder:
    """
    Calculates the role ARN, image reference, working directory and the
    flattened platform and build-arg strings for every target.

    Input must already have passed validation; there is no failure path.
    """

    def build(self, config_path: str, image: ImageConfig) -> ImageConfig:
        """
        Decorates every target of one image config.

        :param config_path: Path of the image's config file.
        :param image: The resolved, validated image config.
        :return: A copy of the image config with calculated target fields.
        """
        platform_str = ",".join(image.target_platforms) if image.target_platforms else ""
        build_args_str = self.format_build_args(image.build_args)
        working_directory = os.path.dirname(config_path)

        targets = []
        for target in image.targets or []:
            account_id = self._pick(target.aws_account_id, image.default_aws_account_id)
            region = self._pick(target.aws_region, image.default_aws_region)

            ref = EcrImageReference(
                account_id=account_id,
                region=region,
                repository=image.repo_name,
                tag=image.repo_tag,
            )

            targets.append(
                target.model_copy(
                    update={
                        "aws_account_id": account_id,
                        "aws_region": region,
                        "aws_role_arn": role_arn(account_id, target.aws_role_name)
                        if not is_blank(target.aws_role_name)
                        else "",
                        "full_image_ref": ref.full_name,
                        "working_directory": working_directory,
                        "target_platform_str": platform_str,
                        "build_args_str": build_args_str,
                    }
                )
            )

        return image.model_copy(deep=True, update={"targets": targets})

    @staticmethod
    def format_build_args(build_args: Optional[Dict[str, str]]) -> str:
        """
        Flattens build args into docker build flags.

        :param build_args: Mapping of build arg names to values.
        :return: e.g. '--build-arg A=1 --build-arg B=2', or '' when there are none.
        """
        if not build_args:
            return ""
        return " ".join(f"--build-arg {k}={v}" for k, v in sorted(build_args.items()))

    @staticmethod
    def _pick(value: Optional[str], fallback: Optional[str]) -> str:
        return value if not is_blank(value) else (fallback or "")


def decorate(images: Dict[str, ImageConfig]) -> Dict[str, ImageConfig]:
    """Returns a new mapping with the calculated fields of every target filled in."""
    builder = TargetBuilder()
    return {path: builder.build(path, image) for path, image in images.items()}
