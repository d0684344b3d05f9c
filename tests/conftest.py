import os

import pytest
import yaml


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never reaches for a real profile."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def write_yaml():
    """Writes a dict as YAML, creating parent directories."""
    def _write(path, content):
        os.makedirs(os.path.dirname(str(path)), exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(content, f)
        return str(path)
    return _write
