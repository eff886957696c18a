"""HTTP client for the Artifactory build and search API."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote

import httpx

from promoter.modules.promotion.domain import BuildMetadata
from promoter.modules.promotion.errors import RepositoryError
from promoter.settings import Settings

CHUNK_SIZE = 65536


class ArtifactoryClient:
    """Read build info from Artifactory and stream build artifacts to disk."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self.base_url = settings.artifactory_address.rstrip("/")
        self.log = logging.getLogger(self.__class__.__name__)
        auth = None
        if settings.artifactory_username and settings.artifactory_password:
            auth = (settings.artifactory_username, settings.artifactory_password)
        self._auth = auth
        self._client = client or httpx.Client(timeout=settings.http_timeout, verify=True)

    def close(self) -> None:
        self._client.close()

    def get_build_info(self, build_name: str, build_number: Union[int, str]) -> BuildMetadata:
        url = f"{self.base_url}/api/build/{quote(build_name, safe='')}/{quote(str(build_number), safe='')}"
        self.log.info("Fetching build info build=%s number=%s url=%s", build_name, build_number, url)
        try:
            resp = self._client.get(url, auth=self._auth, headers={"Accept": "application/json"})
            resp.raise_for_status()
            return BuildMetadata.from_dict(resp.json())
        except httpx.HTTPStatusError as exc:
            raise RepositoryError(
                f"Cannot fetch build info for {build_name} #{build_number} ({exc.response.status_code})",
                exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            raise RepositoryError(f"Cannot fetch build info for {build_name} #{build_number}: {exc}") from exc
        except ValueError as exc:
            raise RepositoryError(f"Malformed build info for {build_name} #{build_number}: {exc}") from exc

    def search_build_artifacts(self, build_name: str, build_number: Union[int, str]) -> List[str]:
        url = f"{self.base_url}/api/search/buildArtifacts"
        payload = {"buildName": build_name, "buildNumber": str(build_number)}
        try:
            resp = self._client.post(url, json=payload, auth=self._auth)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise RepositoryError(
                f"Cannot search artifacts of {build_name} #{build_number} ({exc.response.status_code})",
                exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            raise RepositoryError(f"Cannot search artifacts of {build_name} #{build_number}: {exc}") from exc
        except ValueError as exc:
            raise RepositoryError(f"Malformed search response for {build_name} #{build_number}: {exc}") from exc
        results = data.get("results") or []
        uris = [item["downloadUri"] for item in results if item.get("downloadUri")]
        self.log.info("Build %s #%s has %d downloadable files", build_name, build_number, len(uris))
        return uris

    def resolve_url(self, uri: str) -> str:
        if uri.startswith(("http://", "https://")):
            return uri
        return f"{self.base_url}/{uri.lstrip('/')}"

    def download(self, uri: str, target: Path) -> int:
        """Stream ``uri`` into ``target`` and return the number of bytes written."""
        url = self.resolve_url(uri)
        start_time = time.time()
        downloaded = 0
        try:
            with self._client.stream("GET", url, auth=self._auth) as response:
                if response.is_error:
                    response.read()
                    raise RepositoryError(
                        f"Cannot download {url} ({response.status_code})",
                        response.text,
                    )
                with open(target, "wb") as fh:
                    for chunk in response.iter_bytes(CHUNK_SIZE):
                        if not chunk:
                            continue
                        fh.write(chunk)
                        downloaded += len(chunk)
        except httpx.HTTPError as exc:
            raise RepositoryError(f"Cannot download {url}: {exc}") from exc
        except OSError as exc:
            raise RepositoryError(f"Cannot write {target}: {exc}") from exc
        elapsed = max(time.time() - start_time, 1e-3)
        self.log.debug(
            "Downloaded %s -> %s (%d bytes, %.2f MB/s)",
            url,
            target,
            downloaded,
            (downloaded / 1024 / 1024) / elapsed,
        )
        return downloaded
