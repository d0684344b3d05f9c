"""
Models for the defaults record, per-image configs and their build targets.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class DefaultsConfig(BaseModel):
    """
    Process-wide fallback values, read once from config-defaults.yml.
    """
    model_config = ConfigDict(frozen=True)

    default_aws_account_id: Optional[str] = None
    default_aws_region: Optional[str] = None
    default_aws_role_name: Optional[str] = None


class Target(BaseModel):
    """
    One account/region (and optional role) an image is checked and built against.

    The first three fields come from YAML; the rest are calculated after
    resolution and validation.
    """
    aws_account_id: Optional[str] = None
    aws_region: Optional[str] = None
    aws_role_name: Optional[str] = None

    # Calculated
    aws_role_arn: str = ""
    full_image_ref: str = ""
    remote_tag_missing: bool = False
    working_directory: str = ""
    target_platform_str: str = ""
    build_args_str: str = ""

    @property
    def label(self) -> str:
        """Short human readable identifier used in logs and errors."""
        return f"{self.aws_account_id or '?'}/{self.aws_region or '?'}"

    def to_manifest_entry(self) -> Dict[str, Any]:
        """
        Converts the target into an entry of the build manifest.

        :return: Dictionary using the manifest key names.
        """
        return {
            "aws_account_id": self.aws_account_id,
            "aws_region": self.aws_region,
            "aws_role_name": self.aws_role_name,
            "aws_role_arn": self.aws_role_arn,
            "full_image_ref": self.full_image_ref,
            "remote_tag_missing": self.remote_tag_missing,
            "working_directory": self.working_directory,
            "target_platforms": self.target_platform_str,
            "build_args": self.build_args_str,
        }


class ImageConfig(BaseModel):
    """
    The contents of one image directory's config.yml.

    Required fields are optional here so that a missing value is reported by
    the validator with the offending path rather than by the parser.
    """
    repo_name: Optional[str] = None
    repo_tag: Optional[str] = None
    target_platforms: Optional[List[str]] = None
    build_args: Optional[Dict[str, str]] = None
    targets: Optional[List[Target]] = None

    # Fallbacks copied in from the defaults record during resolution
    default_aws_account_id: Optional[str] = None
    default_aws_region: Optional[str] = None
    default_aws_role_name: Optional[str] = None

    @field_validator("target_platforms", mode="before")
    @classmethod
    def _coerce_platforms(cls, value: Any) -> Any:
        if isinstance(value, list):
            return ["" if v is None else v for v in value]
        return value

    @field_validator("build_args", mode="before")
    @classmethod
    def _coerce_build_args(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): "" if v is None else v for k, v in value.items()}
        return value
