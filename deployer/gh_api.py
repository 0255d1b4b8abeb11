import base64, time, requests
from typing import Optional
from urllib.parse import quote
from .log import log
from .models import ArtifactBundle, PublishedLocation
from .settings import settings

class PublishError(RuntimeError):
    pass

class GitHubClient:
    """Thin wrapper over the GitHub REST endpoints the publisher needs.

    Holds configuration only; every call goes through module-level
    ``requests`` functions so one instance is shared by all pipelines.
    """

    def __init__(self, token: str, api_url: str = "https://api.github.com", timeout: float = 30.0):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _call(self, method: str, path: str, payload: Optional[dict] = None,
              params: Optional[dict] = None) -> requests.Response:
        log("github", f"{method} {path}")
        try:
            return requests.request(method, self.api_url + path, json=payload, params=params,
                                    headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise PublishError(f"{method} {path} failed: {e}") from e

    @staticmethod
    def _fail(r: requests.Response, what: str) -> PublishError:
        return PublishError(f"{what}: HTTP {r.status_code} {r.text[:200]}")

    @staticmethod
    def _json(r: requests.Response, what: str) -> dict:
        try:
            return r.json()
        except ValueError as e:
            raise PublishError(f"{what}: malformed response body") from e

    def create_repo(self, name: str) -> dict:
        r = self._call("POST", "/user/repos", {"name": name, "auto_init": True, "private": False})
        if r.status_code != 201:
            raise self._fail(r, f"create repo {name}")
        return self._json(r, f"create repo {name}")

    def file_sha(self, owner: str, repo: str, path: str, branch: str) -> Optional[str]:
        """Blob sha of an existing file, None when the path does not exist yet."""
        r = self._call("GET", f"/repos/{owner}/{repo}/contents/{quote(path)}", params={"ref": branch})
        if r.status_code == 404:
            return None
        if r.status_code != 200:
            raise self._fail(r, f"look up {path}")
        body = self._json(r, f"look up {path}")
        return body.get("sha") if isinstance(body, dict) else None

    def put_file(self, owner: str, repo: str, path: str, content: bytes, message: str, branch: str) -> dict:
        # auto_init already committed README.md; overwriting needs its blob sha
        payload = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": branch,
        }
        sha = self.file_sha(owner, repo, path, branch)
        if sha:
            payload["sha"] = sha
        r = self._call("PUT", f"/repos/{owner}/{repo}/contents/{quote(path)}", payload)
        if r.status_code not in (200, 201):
            raise self._fail(r, f"write {path}")
        return self._json(r, f"write {path}")

    def enable_pages(self, owner: str, repo: str, branch: str, path: str = "/") -> bool:
        """Returns False when Pages was already enabled (HTTP 409)."""
        r = self._call("POST", f"/repos/{owner}/{repo}/pages",
                       {"source": {"branch": branch, "path": path}})
        if r.status_code == 409:
            return False
        if r.status_code not in (200, 201):
            raise self._fail(r, f"enable pages for {repo}")
        return True


def _as_bytes(content) -> bytes:
    return content if isinstance(content, bytes) else content.encode("utf-8")


class ArtifactPublisher:
    def __init__(self, client: GitHubClient, branch: str = "main", pages_path: str = "/",
                 init_settle_seconds: float = 3.0, sleep=time.sleep):
        self.client = client
        self.branch = branch
        self.pages_path = pages_path
        self.init_settle_seconds = init_settle_seconds
        self.sleep = sleep

    def publish(self, location_name: str, bundle: ArtifactBundle) -> PublishedLocation:
        """Create repo ``location_name`` and write every bundle entry, in order.

        Writes are sequential; a failure stops the sequence and leaves the
        files written so far in place.
        """
        repo = self.client.create_repo(location_name)
        try:
            owner = repo["owner"]["login"]
            name = repo.get("name") or location_name
            branch = repo.get("default_branch") or self.branch
            repo_url = repo.get("html_url") or f"https://github.com/{owner}/{name}"
        except (KeyError, TypeError, AttributeError) as e:
            raise PublishError(f"unexpected create-repo response: {e!r}") from e

        # auto_init commit must land before the contents API accepts writes
        self.sleep(self.init_settle_seconds)

        commit_sha: Optional[str] = None
        for filename, content in bundle.items():
            res = self.client.put_file(owner, name, filename, _as_bytes(content),
                                       message=f"Add {filename}", branch=branch)
            commit_sha = (res.get("commit") or {}).get("sha") or commit_sha

        log("github", f"published {len(bundle)} files to {owner}/{name}")
        return PublishedLocation(
            repo=name,
            owner=owner,
            default_branch=branch,
            repo_url=repo_url,
            commit_sha=commit_sha or branch,
        )

    def enable_hosting(self, location: PublishedLocation) -> None:
        created = self.client.enable_pages(location.owner, location.repo,
                                           branch=location.default_branch, path=self.pages_path)
        if not created:
            log("github", f"pages already enabled for {location.owner}/{location.repo}")


def default_publisher() -> ArtifactPublisher:
    if not settings.GITHUB_TOKEN:
        raise RuntimeError("GITHUB_TOKEN not set")
    client = GitHubClient(settings.GITHUB_TOKEN, settings.GITHUB_API_URL, settings.GITHUB_TIMEOUT)
    return ArtifactPublisher(
        client,
        branch=settings.DEFAULT_BRANCH,
        pages_path=settings.PAGES_BUILD_PATH,
        init_settle_seconds=settings.REPO_INIT_SETTLE_SECONDS,
    )
