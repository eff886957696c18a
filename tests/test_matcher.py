import pytest

from promoter.modules.promotion.domain import ArtifactTypes, Coordinate
from promoter.modules.promotion.errors import ResolutionError
from promoter.modules.promotion.resolution import CandidateMatcher, DownloadCandidate

BASE = "/com/example/demo/1.0"


@pytest.fixture
def matcher():
    return CandidateMatcher(ArtifactTypes.well_known())


def test_plain_jar_never_selects_classifier_jar(matcher):
    types = matcher.types
    candidates = [
        DownloadCandidate(f"{BASE}/demo-1.0-sources.jar"),
        DownloadCandidate(f"{BASE}/demo-1.0-javadoc.jar"),
        DownloadCandidate(f"{BASE}/demo-1.0-original.jar"),
        DownloadCandidate(f"{BASE}/demo-1.0.jar"),
    ]

    selected = matcher.resolve(Coordinate.parse("com.example:demo:1.0"), types.of("jar"), candidates)

    assert selected.uri == f"{BASE}/demo-1.0.jar"


def test_classifier_type_selects_its_jar(matcher):
    candidates = [DownloadCandidate(f"{BASE}/demo-1.0.jar"), DownloadCandidate(f"{BASE}/demo-1.0-sources.jar")]

    selected = matcher.resolve(Coordinate.parse("com.example:demo:1.0"), matcher.types.of("sources-jar"), candidates)

    assert selected.uri.endswith("-sources.jar")


def test_first_match_in_pool_order_wins(matcher):
    candidates = [
        DownloadCandidate(f"/mirror-a{BASE}/demo-1.0.pom"),
        DownloadCandidate(f"/mirror-b{BASE}/demo-1.0.pom"),
    ]

    selected = matcher.resolve(Coordinate.parse("com.example:demo:1.0"), matcher.types.of("pom"), candidates)

    assert selected.uri.startswith("/mirror-a")


def test_candidates_outside_the_coordinate_path_are_ignored(matcher):
    candidates = [DownloadCandidate("/com/example/demo-extra/1.0/demo-extra-1.0.jar")]

    with pytest.raises(ResolutionError, match="com.example:demo:1.0, type jar"):
        matcher.resolve(Coordinate.parse("com.example:demo:1.0"), matcher.types.of("jar"), candidates)
