from promoter.modules.promotion.domain import ArtifactType, ArtifactTypes, WellKnownType


def test_hyphenated_type_matches_classifier_suffix():
    assert ArtifactType.of("sources-jar").matches("x-1.0-sources.jar")
    assert ArtifactType.of("javadoc-jar").matches("X-1.0-JAVADOC.JAR")


def test_plain_type_matches_extension():
    assert ArtifactType.of("pom").matches("x-1.0.pom")
    assert ArtifactType.of("jar").matches("x-1.0.jar")
    assert not ArtifactType.of("pom").matches("x-1.0.jar")


def test_plain_jar_rule_does_not_reject_classifiers_by_itself():
    # The generic rule only looks at the suffix; the matcher rejects classifier jars.
    assert ArtifactType.of("jar").matches("x-1.0-sources.jar")
    assert not ArtifactType.of("jar").matches("x-1.0-sources.zip")


def test_well_known_registry():
    types = ArtifactTypes.well_known()

    assert len(types) == len(WellKnownType)
    assert "original-jar" in types
    assert {str(item) for item in types.known_classifiers()} == {"javadoc-jar", "sources-jar", "original-jar"}
    assert types.of("sources-jar").is_classifier
    assert not types.of("jar").is_classifier
    assert types.of("jar").is_plain_jar


def test_unknown_name_falls_back_to_ad_hoc_type():
    adhoc = ArtifactTypes.well_known().of("test-fixtures-jar")

    assert adhoc.kind is None
    assert adhoc.suffix == "-test.fixtures.jar"
    assert adhoc == ArtifactType("test-fixtures-jar")
    assert ArtifactType.of("module").matches("demo-1.0.module")


def test_custom_registry_is_used_for_lookup():
    types = ArtifactTypes([ArtifactType("pom", WellKnownType.POM)])

    assert "jar" not in types
    assert types.of("pom").kind is WellKnownType.POM
    assert ArtifactType.of("jar", types).kind is None
