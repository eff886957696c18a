import json

import httpx
import pytest

from conftest import FIXTURES, build_settings
from promoter.modules.promotion.errors import RepositoryError
from promoter.modules.promotion.fileget import ArtifactoryClient


def make_client(tmp_path, handler) -> ArtifactoryClient:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ArtifactoryClient(build_settings(tmp_path), client=client)


def test_get_build_info(tmp_path):
    payload = json.loads((FIXTURES / "build_info.json").read_text())

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/artifactory/api/build/reactor netty/2409"
        assert request.headers["Authorization"].startswith("Basic ")
        return httpx.Response(200, json=payload)

    build = make_client(tmp_path, handler).get_build_info("reactor netty", 2409)

    assert build.name == "Project Reactor - Reactor Netty - Netty"
    assert build.number == "2409"
    assert [module.id for module in build.modules][0] == "io.projectreactor.netty:reactor-netty-core:1.0.4-SNAPSHOT"
    assert len(build.modules[0].artifacts) == 5


def test_build_info_error_carries_response_body(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text='{"errors":[{"status":404,"message":"No build was found"}]}')

    with pytest.raises(RepositoryError) as excinfo:
        make_client(tmp_path, handler).get_build_info("missing", "1")

    assert "No build was found" in str(excinfo.value)
    assert "No build was found" in excinfo.value.response_body


def test_malformed_build_info_is_a_repository_error(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["not", "an", "object"])

    with pytest.raises(RepositoryError, match="Malformed build info"):
        make_client(tmp_path, handler).get_build_info("demo", "1")


def test_search_build_artifacts(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/artifactory/api/search/buildArtifacts"
        assert json.loads(request.content) == {"buildName": "demo", "buildNumber": "3"}
        return httpx.Response(
            200,
            json={"results": [{"downloadUri": "http://repo/a.jar"}, {"downloadUri": "http://repo/a.pom"}, {}]},
        )

    uris = make_client(tmp_path, handler).search_build_artifacts("demo", 3)

    assert uris == ["http://repo/a.jar", "http://repo/a.pom"]


def test_download_streams_to_target(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "http://repo.example.com/artifactory/libs/demo.jar"
        return httpx.Response(200, content=b"binary-data")

    target = tmp_path / "demo.jar"
    written = make_client(tmp_path, handler).download("/libs/demo.jar", target)

    assert written == len(b"binary-data")
    assert target.read_bytes() == b"binary-data"


def test_download_failure_raises_repository_error(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="storage offline")

    with pytest.raises(RepositoryError, match="storage offline"):
        make_client(tmp_path, handler).download("http://repo/demo.jar", tmp_path / "demo.jar")
