import pytest

from conftest import descriptor, write_artifact
from promoter.modules.promotion.domain import Coordinate, Module, ModuleSet
from promoter.modules.promotion.errors import IntegrityError
from promoter.modules.promotion.verify import IntegrityVerifier, compute_digests
from promoter.modules.promotion.workspace import prepare_directories


def test_known_bytes_give_known_digests(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello world")

    assert compute_digests(path) == {
        "sha1": "2aae6c35c94fcfb415dbe95f408b9ce91ee846ed",
        "md5": "5eb63bbbe01eeed093cb22bb8f5acdc3",
    }


def stage_module(tmp_path, context, content: bytes):
    artifact = descriptor("demo-1.0.0.jar", content)
    module_set = ModuleSet([Module(Coordinate.parse("com.example:demo:1.0.0"), (artifact,))])
    directory = prepare_directories(tmp_path, context, module_set)[module_set[0]]
    write_artifact(directory, artifact, content)
    return module_set, directory, artifact


def test_matching_files_verify(tmp_path, context):
    module_set, _, _ = stage_module(tmp_path, context, b"content")

    results = IntegrityVerifier(tmp_path).verify(module_set, context)

    assert [result.ok for result in results] == [True]


def test_uppercase_digests_are_accepted(tmp_path, context):
    module_set, directory, artifact = stage_module(tmp_path, context, b"content")
    (directory / f"{artifact.name}.sha1").write_text(artifact.sha1.upper() + "  demo-1.0.0.jar\n")

    IntegrityVerifier(tmp_path).check(module_set, context)


def test_flipped_byte_fails_verification(tmp_path, context):
    module_set, directory, artifact = stage_module(tmp_path, context, b"content")
    (directory / artifact.name).write_bytes(b"Content")

    with pytest.raises(IntegrityError, match="SHA1 checksum verification failed for demo-1.0.0.jar"):
        IntegrityVerifier(tmp_path).check(module_set, context)


def test_sidecar_disagreeing_with_file_fails(tmp_path, context):
    module_set, directory, artifact = stage_module(tmp_path, context, b"content")
    (directory / f"{artifact.name}.md5").write_text("0" * 32)

    results = IntegrityVerifier(tmp_path).verify(module_set, context)

    assert not results[0].ok
    assert "MD5" in results[0].message


def test_missing_sidecar_is_an_integrity_error(tmp_path, context):
    module_set, directory, artifact = stage_module(tmp_path, context, b"content")
    (directory / f"{artifact.name}.sha1").unlink()

    with pytest.raises(IntegrityError, match="cannot read"):
        IntegrityVerifier(tmp_path).check(module_set, context)
