import base64

import pytest
import requests

from conftest import FakeResponse
from deployer import gh_api
from deployer.gh_api import ArtifactPublisher, GitHubClient, PublishError
from deployer.models import PublishedLocation


class FakeClient:
    def __init__(self, fail_on=None, pages_status=201):
        self.calls = []
        self.fail_on = fail_on
        self.pages_status = pages_status
        self.sha_counter = 0

    def create_repo(self, name):
        self.calls.append(("create", name))
        return {
            "name": name,
            "owner": {"login": "octo"},
            "default_branch": "main",
            "html_url": f"https://github.com/octo/{name}",
        }

    def put_file(self, owner, repo, path, content, message, branch):
        self.calls.append(("put", path, content, message))
        if path == self.fail_on:
            raise PublishError(f"write {path}: HTTP 409")
        self.sha_counter += 1
        return {"commit": {"sha": f"sha{self.sha_counter}"}}


def _publisher(client, sleeps=None):
    return ArtifactPublisher(client, init_settle_seconds=3,
                             sleep=(sleeps.append if sleeps is not None else lambda s: None))


def test_publish_writes_files_in_insertion_order():
    client = FakeClient()
    sleeps = []
    bundle = {"index.html": "<html></html>", "README.md": "# hi", "LICENSE": "MIT", "data.csv": b"a,b\n"}

    loc = _publisher(client, sleeps).publish("t1-round2", bundle)

    assert client.calls[0] == ("create", "t1-round2")
    puts = [c for c in client.calls if c[0] == "put"]
    assert [p[1] for p in puts] == ["index.html", "README.md", "LICENSE", "data.csv"]
    assert [p[3] for p in puts] == ["Add index.html", "Add README.md", "Add LICENSE", "Add data.csv"]
    assert puts[0][2] == b"<html></html>"
    assert puts[3][2] == b"a,b\n"
    assert sleeps == [3]
    assert loc.owner == "octo"
    assert loc.repo == "t1-round2"
    assert loc.commit_sha == "sha4"
    assert loc.pages_url == "https://octo.github.io/t1-round2/"


def test_publish_stops_at_first_failed_write():
    client = FakeClient(fail_on="README.md")
    bundle = {"index.html": "x", "README.md": "y", "LICENSE": "z"}

    with pytest.raises(PublishError):
        _publisher(client).publish("t1-round1", bundle)

    puts = [c[1] for c in client.calls if c[0] == "put"]
    assert puts == ["index.html", "README.md"]
    # nothing tries to undo index.html
    assert not any(c[0] not in ("create", "put") for c in client.calls)


def _location():
    return PublishedLocation(repo="t1-round1", owner="octo", default_branch="main",
                             repo_url="https://github.com/octo/t1-round1", commit_sha="abc")


class RecordingRequests:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, method, url, json=None, params=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "params": params, "headers": headers})
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


def test_enable_pages_already_enabled_is_not_an_error(monkeypatch):
    fake = RecordingRequests([FakeResponse(409, text="already enabled")])
    monkeypatch.setattr(gh_api.requests, "request", fake)
    publisher = ArtifactPublisher(GitHubClient("tok"), pages_path="/")

    publisher.enable_hosting(_location())

    assert fake.calls[0]["method"] == "POST"
    assert fake.calls[0]["url"] == "https://api.github.com/repos/octo/t1-round1/pages"
    assert fake.calls[0]["json"] == {"source": {"branch": "main", "path": "/"}}
    assert fake.calls[0]["headers"]["Authorization"] == "Bearer tok"


def test_enable_pages_other_failure_raises(monkeypatch):
    monkeypatch.setattr(gh_api.requests, "request", RecordingRequests([FakeResponse(422, text="nope")]))
    with pytest.raises(PublishError):
        ArtifactPublisher(GitHubClient("tok")).enable_hosting(_location())


def test_client_put_file_encodes_content(monkeypatch):
    fake = RecordingRequests([FakeResponse(404, text="Not Found"),
                              FakeResponse(201, {"commit": {"sha": "deadbeef"}})])
    monkeypatch.setattr(gh_api.requests, "request", fake)

    res = GitHubClient("tok", api_url="https://gh.local/api/").put_file(
        "octo", "repo", "index.html", b"<p>hi</p>", "Add index.html", "main")

    assert res["commit"]["sha"] == "deadbeef"
    lookup, call = fake.calls
    assert lookup["method"] == "GET"
    assert lookup["params"] == {"ref": "main"}
    assert call["method"] == "PUT"
    assert "sha" not in call["json"]
    assert call["url"] == "https://gh.local/api/repos/octo/repo/contents/index.html"
    assert base64.b64decode(call["json"]["content"]) == b"<p>hi</p>"
    assert call["json"]["message"] == "Add index.html"
    assert call["json"]["branch"] == "main"


def test_client_transport_error_becomes_publish_error(monkeypatch):
    monkeypatch.setattr(gh_api.requests, "request",
                        RecordingRequests([requests.ConnectionError("boom")]))
    with pytest.raises(PublishError):
        GitHubClient("tok").create_repo("t1-round1")


def test_client_create_repo_requires_201(monkeypatch):
    monkeypatch.setattr(gh_api.requests, "request",
                        RecordingRequests([FakeResponse(422, text="name already exists")]))
    with pytest.raises(PublishError, match="create repo t1-round1"):
        GitHubClient("tok").create_repo("t1-round1")


class FakeGitHub:
    """Contents API that behaves like a repo created with auto_init: README.md exists."""

    def __init__(self):
        self.files = {"README.md": "sha-readme-0"}
        self.calls = []

    def __call__(self, method, url, json=None, params=None, headers=None, timeout=None):
        self.calls.append((method, url))
        if url.endswith("/user/repos"):
            return FakeResponse(201, {"name": json["name"], "owner": {"login": "octo"},
                                      "default_branch": "main",
                                      "html_url": f"https://github.com/octo/{json['name']}"})
        path = url.split("/contents/", 1)[1]
        if method == "GET":
            if path in self.files:
                return FakeResponse(200, {"sha": self.files[path]})
            return FakeResponse(404, text="Not Found")
        if path in self.files and json.get("sha") != self.files[path]:
            return FakeResponse(422, text='{"message": "\\"sha\\" wasn\'t supplied."}')
        self.files[path] = f"sha-{path}-1"
        return FakeResponse(201 if "sha" not in json else 200, {"commit": {"sha": f"commit-{path}"}})


def test_publish_overwrites_auto_init_readme(monkeypatch):
    github = FakeGitHub()
    monkeypatch.setattr(gh_api.requests, "request", github)
    publisher = ArtifactPublisher(GitHubClient("tok"), sleep=lambda s: None)

    loc = publisher.publish("t1-round2", {"index.html": "<html/>", "README.md": "# new", "LICENSE": "MIT"})

    puts = [url.rsplit("/", 1)[1] for method, url in github.calls if method == "PUT"]
    assert puts == ["index.html", "README.md", "LICENSE"]
    assert github.files["README.md"] == "sha-README.md-1"
    assert loc.commit_sha == "commit-LICENSE"


def test_file_paths_are_url_quoted(monkeypatch):
    fake = RecordingRequests([FakeResponse(404, text="Not Found"),
                              FakeResponse(201, {"commit": {"sha": "s"}})])
    monkeypatch.setattr(gh_api.requests, "request", fake)

    GitHubClient("tok").put_file("octo", "repo", "data/q?#1 a.csv", b"x", "Add", "main")

    expected = "https://api.github.com/repos/octo/repo/contents/data/q%3F%231%20a.csv"
    assert [c["url"] for c in fake.calls] == [expected, expected]
