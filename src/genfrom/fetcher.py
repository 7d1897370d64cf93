"""Remote template access: existence checks and downloading repository trees."""

from __future__ import annotations

import io
import logging
import os
import shutil
import tarfile
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import httpx

from .errors import DownloadError, RepositoryCheckError

__all__ = ["GitHubFetcher", "RemoteFetcher", "split_repo"]

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


def split_repo(repo: str) -> tuple[str, str | None]:
    """Split ``owner/name#ref`` into ``("owner/name", "ref")``."""

    identifier, _, ref = repo.partition("#")
    return identifier.strip("/"), ref or None


class RemoteFetcher(ABC):
    """Access to template repositories hosted on a forge."""

    @abstractmethod
    def exists(self, repo: str) -> bool:
        """Return whether ``repo`` exists.

        Raises :class:`RepositoryCheckError` when the answer cannot be
        determined (network failure, rate limiting, server error).
        """

    @abstractmethod
    def materialize(self, repo: str, destination: Path) -> None:
        """Write the file tree of ``repo`` into ``destination``.

        Existing files in ``destination`` are overwritten. Raises
        :class:`DownloadError` on failure, in which case nothing has been
        copied into ``destination``.
        """


class GitHubFetcher(RemoteFetcher):
    """Fetch templates through the GitHub REST API.

    Authentication is optional and read from ``GITHUB_TOKEN`` or ``GH_TOKEN``
    when no token is passed; it only raises the API rate limit.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.token = token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN", "")
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            self._headers["Authorization"] = f"Bearer {self.token}"

    def close(self) -> None:
        self._client.close()

    def exists(self, repo: str) -> bool:
        identifier, _ = split_repo(repo)
        url = f"{self.api_url}/repos/{identifier}"
        try:
            response = self._client.get(url, headers=self._headers)
        except httpx.HTTPError as exc:
            raise RepositoryCheckError(f"Failed to verify template repository: {exc}") from exc

        if response.status_code == 404:
            return False
        if response.is_error:
            raise RepositoryCheckError(
                f"Failed to verify template repository: {response.status_code} {response.reason_phrase}"
            )
        return True

    def materialize(self, repo: str, destination: Path) -> None:
        identifier, ref = split_repo(repo)
        url = f"{self.api_url}/repos/{identifier}/tarball"
        if ref:
            url = f"{url}/{ref}"

        LOGGER.debug("downloading %s", url)
        try:
            response = self._client.get(url, headers=self._headers, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DownloadError(f"Failed to download template: {exc}") from exc

        with tempfile.TemporaryDirectory(prefix="gen-from-") as tmp_dir:
            try:
                with tarfile.open(fileobj=io.BytesIO(response.content), mode="r:*") as archive:
                    _extract(archive, Path(tmp_dir))
            except tarfile.TarError as exc:
                raise DownloadError(f"Failed to extract template: {exc}") from exc

            # GitHub wraps the tree in a single "<owner>-<name>-<sha>" directory
            extracted = list(Path(tmp_dir).iterdir())
            if len(extracted) == 1 and extracted[0].is_dir():
                source = extracted[0]
            else:
                source = Path(tmp_dir)

            try:
                destination.mkdir(parents=True, exist_ok=True)
                shutil.copytree(source, destination, dirs_exist_ok=True)
            except OSError as exc:
                raise DownloadError(f"Failed to copy template into {destination}: {exc}") from exc


def _extract(archive: tarfile.TarFile, target: Path) -> None:
    if hasattr(tarfile, "data_filter"):
        archive.extractall(target, filter="data")
        return

    root = target.resolve()
    for member in archive.getmembers():
        member_path = (target / member.name).resolve()
        if root not in member_path.parents and member_path != root:
            raise tarfile.TarError(f"refusing to extract {member.name} outside the target")
        if member.issym() or member.islnk():
            raise tarfile.TarError(f"refusing to extract link {member.name}")
    archive.extractall(target)
