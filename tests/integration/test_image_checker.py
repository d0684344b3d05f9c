import json
import os

import pytest

from eic.MANAGERS.image_checker import ImageChecker
from eic.errors import ConfigIOError, ConfigValidationError, RemoteCheckError


def _entries(line):
    key, _, payload = line.partition("=")
    assert key == "targets"
    return json.loads(payload)


def test_prepare_resolves_and_decorates(image_tree, fake_registry):
    checker = ImageChecker(image_tree["images"], image_tree["defaults"], registry_client=fake_registry())
    images = checker.prepare()

    image_1 = images[os.path.join(image_tree["images"], "image-1", "config.yml")]
    assert len(image_1.targets) == 1
    assert image_1.targets[0].aws_account_id == "111111111111"
    assert image_1.targets[0].aws_region == "eu-west-1"
    assert image_1.targets[0].full_image_ref == "111111111111.dkr.ecr.eu-west-1.amazonaws.com/repo-1:alpine"

    image_2 = images[os.path.join(image_tree["images"], "image-2", "config.yml")]
    assert [t.full_image_ref for t in image_2.targets] == [
        "111111111111.dkr.ecr.eu-west-1.amazonaws.com/repo-2:my-tag",
        "222222222222.dkr.ecr.ca-central-1.amazonaws.com/repo-2:my-tag",
    ]
    assert image_2.targets[1].aws_role_arn == "arn:aws:iam::222222222222:role/builder"
    assert image_2.targets[0].build_args_str == "--build-arg BASE=alpine"
    assert image_2.targets[0].working_directory == os.path.join(image_tree["images"], "image-2")


def test_run_reports_only_missing_targets(image_tree, fake_registry):
    registry = fake_registry(tags={("111111111111", "eu-west-1", "repo-2"): {"my-tag"}})
    output = ImageChecker(image_tree["images"], image_tree["defaults"], registry_client=registry).run()

    refs = sorted(e["full_image_ref"] for e in _entries(output))
    assert refs == [
        "111111111111.dkr.ecr.eu-west-1.amazonaws.com/repo-1:alpine",
        "222222222222.dkr.ecr.ca-central-1.amazonaws.com/repo-2:my-tag",
    ]
    assert all(e["remote_tag_missing"] for e in _entries(output))
    assert len(registry.calls) == 3


def test_run_nothing_to_build(image_tree, fake_registry):
    registry = fake_registry(
        tags={
            ("111111111111", "eu-west-1", "repo-1"): {"alpine"},
            ("111111111111", "eu-west-1", "repo-2"): {"my-tag"},
            ("222222222222", "ca-central-1", "repo-2"): {"my-tag", "older"},
        }
    )
    output = ImageChecker(image_tree["images"], image_tree["defaults"], registry_client=registry).run()
    assert output == "targets=[]"


def test_run_remote_failure_aborts(image_tree, fake_registry):
    checker = ImageChecker(
        image_tree["images"], image_tree["defaults"], registry_client=fake_registry(fail_for="repo-2")
    )
    with pytest.raises(RemoteCheckError) as exc:
        checker.run()
    assert exc.value.repository == "repo-2"


def test_validation_failure_stops_before_remote_calls(image_tree, fake_registry, write_yaml):
    write_yaml(
        os.path.join(image_tree["images"], "image-3", "config.yml"),
        {"repo_name": "repo-3", "repo_tag": "x", "target_platforms": []},
    )
    registry = fake_registry()
    with pytest.raises(ConfigValidationError) as exc:
        ImageChecker(image_tree["images"], image_tree["defaults"], registry_client=registry).run()

    assert exc.value.field == "target_platforms"
    assert "image-3" in exc.value.path
    assert registry.calls == []


def test_missing_defaults_file(tmp_path, fake_registry):
    checker = ImageChecker(str(tmp_path), str(tmp_path / "config-defaults.yml"), registry_client=fake_registry())
    with pytest.raises(ConfigIOError):
        checker.run()


def test_missing_defaults_leave_targets_unresolved(tmp_path, write_yaml, fake_registry):
    defaults = write_yaml(tmp_path / "config-defaults.yml", {"default_aws_region": "eu-west-1"})
    write_yaml(
        tmp_path / "images" / "image-1" / "config.yml",
        {"repo_name": "repo-1", "repo_tag": "alpine", "target_platforms": ["linux/amd64"]},
    )
    with pytest.raises(ConfigValidationError) as exc:
        ImageChecker(str(tmp_path / "images"), defaults, registry_client=fake_registry()).prepare()
    assert exc.value.field == "targets"
