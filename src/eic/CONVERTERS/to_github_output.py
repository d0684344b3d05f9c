"""
Converters for turning check results into a GitHub Actions output line.

The line is written to stdout and consumed by a workflow matrix, e.g.
``targets=[{"full_image_ref": "...", ...}]``.
"""
import json
from typing import Dict, Iterable, List

from ..MODELS.image_config import ImageConfig, Target

OUTPUT_KEY = "targets"


def filter_missing_targets(images: Dict[str, ImageConfig]) -> List[Target]:
    """
    Collects every target whose remote tag is missing.

    :param images: Checked image configs keyed by config path.
    :return: Flat list of targets that need building.
    """
    missing: List[Target] = []
    for image in (images or {}).values():
        for target in image.targets or []:
            if target.remote_tag_missing:
                missing.append(target)
    return missing


class GitHubOutputConverter:
    """
    Serialises targets into the ``targets=<json>`` manifest line.
    """
    def __init__(self, key: str = OUTPUT_KEY):
        """
        :param key: Name of the output variable.
        """
        self.key = key

    def convert(self, targets: Iterable[Target]) -> str:
        """
        :param targets: Targets that need building.
        :return: The manifest line. Never contains null for an empty list.
        """
        entries = [t.to_manifest_entry() for t in targets]
        if not entries:
            return f"{self.key}=[]"
        return f"{self.key}={json.dumps(entries, separators=(',', ':'))}"


def to_github_output(targets: Iterable[Target]) -> str:
    """Renders targets as the manifest line using the default output key."""
    return GitHubOutputConverter().convert(targets)
