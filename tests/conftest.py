import pytest

from deployer.models import TaskRequest
from deployer.settings import settings


@pytest.fixture(autouse=True)
def _isolated_log(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "LOG_PATH", str(tmp_path / "deployer.log"))


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json body")
        return self._body


def make_request(**overrides) -> TaskRequest:
    data = {
        "email": "student@example.com",
        "secret": "s3cret",
        "task": "t1",
        "round": 2,
        "nonce": "nonce-123",
        "brief": "Show a counter",
        "checks": ["a", "b"],
        "evaluation_url": "https://eval.example.com/notify",
        "attachments": [],
    }
    data.update(overrides)
    return TaskRequest(**data)
