"""HTTP client for the Sonatype Nexus 2 staging API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from promoter.modules.promotion.domain import StagingProfile, StagingRepository
from promoter.modules.promotion.errors import StagingError
from promoter.settings import Settings

UPLOAD_CHUNK_SIZE = 256 * 1000


def _read_chunks(path: Path):
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(UPLOAD_CHUNK_SIZE), b""):
            yield chunk


class NexusStagingClient:
    """Thin wrapper over the staging endpoints: evaluate, start, deploy and finish."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self.base_url = settings.nexus_address.rstrip("/")
        self.log = logging.getLogger(self.__class__.__name__)
        auth = None
        if settings.nexus_username and settings.nexus_password:
            auth = (settings.nexus_username, settings.nexus_password)
        self._auth = auth
        self._client = client or httpx.Client(timeout=settings.http_timeout, verify=True)

    def close(self) -> None:
        self._client.close()

    def evaluate_profile(self, group_id: str, artifact_id: str, version: str) -> Optional[StagingProfile]:
        """Return the first staging profile matching the coordinate, or ``None``."""
        url = f"{self.base_url}/service/local/staging/profile_evaluate"
        params = {"a": artifact_id, "t": "maven2", "g": group_id, "v": version}
        try:
            resp = self._client.get(url, params=params, auth=self._auth, headers={"Accept": "application/json"})
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise StagingError(
                f"Cannot evaluate staging profile for {group_id}:{artifact_id}:{version}",
                exc.response.text,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise StagingError(f"Cannot evaluate staging profile for {group_id}:{artifact_id}:{version}: {exc}") from exc
        items = data.get("data") or []
        if not items:
            return None
        return StagingProfile(str(items[0]["id"]))

    def start_staging(self, profile: StagingProfile, description: str) -> StagingRepository:
        url = f"{self.base_url}/service/local/staging/profiles/{quote(profile.profile_id, safe='')}/start"
        payload = {"data": {"description": description}}
        try:
            resp = self._client.post(url, json=payload, auth=self._auth, headers={"Accept": "application/json"})
            resp.raise_for_status()
            repository_id = resp.json()["data"]["stagedRepositoryId"]
        except httpx.HTTPStatusError as exc:
            raise StagingError(
                f"Cannot create staging repository for {profile.profile_id}",
                exc.response.text,
            ) from exc
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            raise StagingError(f"Cannot create staging repository for {profile.profile_id}: {exc}") from exc
        return StagingRepository(repository_id=str(repository_id), profile=profile, description=description)

    def deploy_file(self, repository: StagingRepository, layout_path: str, filename: str, path: Path) -> None:
        url = (
            f"{self.base_url}/service/local/staging/deployByRepositoryId/"
            f"{quote(repository.repository_id, safe='')}/{layout_path.strip('/')}/{quote(filename)}"
        )
        headers = {
            "Pragma": "no-cache",
            "Cache-Control": "no-cache",
            "Content-Type": "application/octet-stream",
            "Content-Length": str(path.stat().st_size),
        }
        try:
            resp = self._client.put(url, content=_read_chunks(path), headers=headers, auth=self._auth)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StagingError(f"Cannot upload {filename}", exc.response.text) from exc
        except (httpx.HTTPError, OSError) as exc:
            raise StagingError(f"Cannot upload {filename}: {exc}") from exc
        self.log.debug("Uploaded %s to %s", filename, url)

    def finish_staging(self, repository: StagingRepository) -> None:
        url = (
            f"{self.base_url}/service/local/staging/profiles/"
            f"{quote(repository.profile.profile_id, safe='')}/finish"
        )
        payload = {
            "data": {
                "stagedRepositoryId": repository.repository_id,
                "description": repository.description,
            }
        }
        try:
            resp = self._client.post(url, json=payload, auth=self._auth, headers={"Accept": "application/json"})
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StagingError(
                f"Cannot close staging repository {repository.repository_id}",
                exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            raise StagingError(f"Cannot close staging repository {repository.repository_id}: {exc}") from exc
