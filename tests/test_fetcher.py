from __future__ import annotations

import io
import tarfile
from pathlib import Path

import httpx
import pytest

from genfrom.errors import DownloadError, RepositoryCheckError
from genfrom.fetcher import GitHubFetcher, split_repo


def _tarball(files: dict[str, str], root: str = "acme-lib-0123abc") -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(f"{root}/{name}")
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


class Forge:
    """Minimal fake of the GitHub endpoints the fetcher calls."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.archive = _tarball({"README.md": "# PROJECT_NAME\n", "src/index.ts": "export {};\n"})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/repos/acme/lib":
            return httpx.Response(200, json={"full_name": "acme/lib"})
        if path == "/repos/acme/boom":
            return httpx.Response(503)
        if path in ("/repos/acme/lib/tarball", "/repos/acme/lib/tarball/v2"):
            return httpx.Response(200, content=self.archive)
        if path == "/repos/acme/corrupt/tarball":
            return httpx.Response(200, content=b"definitely not a tarball")
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture()
def forge() -> Forge:
    return Forge()


@pytest.fixture()
def fetcher(forge: Forge) -> GitHubFetcher:
    client = httpx.Client(transport=httpx.MockTransport(forge))
    return GitHubFetcher(client, token="secret")


def test_split_repo():
    assert split_repo("acme/lib") == ("acme/lib", None)
    assert split_repo("acme/lib#v2") == ("acme/lib", "v2")


def test_exists_for_present_and_missing_repositories(fetcher: GitHubFetcher, forge: Forge):
    assert fetcher.exists("acme/lib")
    assert not fetcher.exists("acme/missing")
    assert forge.requests[0].headers["Authorization"] == "Bearer secret"
    assert forge.requests[0].url == "https://api.github.com/repos/acme/lib"


def test_exists_ignores_ref(fetcher: GitHubFetcher, forge: Forge):
    assert fetcher.exists("acme/lib#v2")
    assert forge.requests[0].url.path == "/repos/acme/lib"


def test_exists_raises_on_other_failures(fetcher: GitHubFetcher):
    with pytest.raises(RepositoryCheckError, match="503"):
        fetcher.exists("acme/boom")


def test_exists_wraps_transport_errors():
    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    fetcher = GitHubFetcher(httpx.Client(transport=httpx.MockTransport(broken)), token="")
    with pytest.raises(RepositoryCheckError, match="offline"):
        fetcher.exists("acme/lib")


def test_materialize_strips_archive_root(fetcher: GitHubFetcher, tmp_path: Path):
    destination = tmp_path / "project"
    fetcher.materialize("acme/lib", destination)

    assert (destination / "README.md").read_text(encoding="utf-8") == "# PROJECT_NAME\n"
    assert (destination / "src" / "index.ts").exists()
    assert not (destination / "acme-lib-0123abc").exists()


def test_materialize_uses_ref(fetcher: GitHubFetcher, forge: Forge, tmp_path: Path):
    fetcher.materialize("acme/lib#v2", tmp_path / "project")
    assert forge.requests[-1].url.path == "/repos/acme/lib/tarball/v2"


def test_materialize_overwrites_existing_files(fetcher: GitHubFetcher, tmp_path: Path):
    destination = tmp_path / "project"
    destination.mkdir()
    (destination / "README.md").write_text("old", encoding="utf-8")
    (destination / "keep.txt").write_text("keep", encoding="utf-8")

    fetcher.materialize("acme/lib", destination)

    assert (destination / "README.md").read_text(encoding="utf-8") == "# PROJECT_NAME\n"
    assert (destination / "keep.txt").read_text(encoding="utf-8") == "keep"


def test_failed_download_leaves_destination_alone(fetcher: GitHubFetcher, tmp_path: Path):
    destination = tmp_path / "project"

    with pytest.raises(DownloadError, match="Failed to download"):
        fetcher.materialize("acme/missing", destination)
    assert not destination.exists()

    with pytest.raises(DownloadError, match="Failed to extract"):
        fetcher.materialize("acme/corrupt", destination)
    assert not destination.exists()
