import pytest

from eic.errors import RemoteCheckError


class FakeRegistryClient:
    """In-memory stand-in for EcrRegistryClient."""

    def __init__(self, tags=None, fail_for=None):
        # {(account_id, region, repo_name): {tag, ...}}
        self.tags = tags or {}
        self.fail_for = fail_for
        self.calls = []

    def check(self, target, repo_name, repo_tag):
        self.calls.append((target.aws_account_id, target.aws_region, repo_name, repo_tag))
        if repo_name == self.fail_for:
            raise RemoteCheckError(repo_name, "listing Docker tags: boom", target.label)
        return repo_tag not in self.tags.get((target.aws_account_id, target.aws_region, repo_name), set())


@pytest.fixture
def fake_registry():
    return FakeRegistryClient


@pytest.fixture
def image_tree(tmp_path, write_yaml):
    """
    Two images: image-1 with one implicit target, image-2 with two explicit targets.
    """
    defaults = write_yaml(
        tmp_path / "config-defaults.yml",
        {"default_aws_account_id": "111111111111", "default_aws_region": "eu-west-1"},
    )
    images = tmp_path / "images"
    write_yaml(
        images / "image-1" / "config.yml",
        {"repo_name": "repo-1", "repo_tag": "alpine", "target_platforms": ["linux/amd64"]},
    )
    write_yaml(
        images / "image-2" / "config.yml",
        {
            "repo_name": "repo-2",
            "repo_tag": "my-tag",
            "target_platforms": ["linux/arm64", "linux/amd64"],
            "build_args": {"BASE": "alpine"},
            "targets": [
                {"aws_region": "eu-west-1"},
                {"aws_account_id": "222222222222", "aws_region": "ca-central-1", "aws_role_name": "builder"},
            ],
        },
    )
    return {"defaults": defaults, "images": str(images)}
