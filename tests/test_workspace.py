import os

import pytest

from promoter.modules.promotion.domain import PromotionContext
from promoter.modules.promotion.errors import FormatError
from promoter.modules.promotion.workspace import (
    clean_context_directory,
    context_directory,
    prepare_directories,
    safe_name,
)


def test_safe_name_keeps_ascii_letters_digits_dash_underscore():
    assert safe_name("Project Reactor - Reactor Netty/2.x") == "ProjectReactor-ReactorNetty2x"
    assert safe_name("spring_data-é") == "spring_data-"


def test_prepare_directories_uses_repository_layout(tmp_path, context, module_set):
    directories = prepare_directories(tmp_path, context, module_set)

    module = module_set[0]
    expected = tmp_path / "demo-build" / "com" / "example" / "demo" / "1.0.0"
    assert directories[module] == expected
    assert expected.is_dir()
    assert str(directories[module]).endswith(os.sep.join(["com", "example", "demo", "1.0.0"]))


def test_clean_context_directory_removes_previous_run(tmp_path, context, module_set):
    directories = prepare_directories(tmp_path, context, module_set)
    leftover = directories[module_set[0]] / "stale.jar"
    leftover.write_bytes(b"old")
    (tmp_path / "other-build").mkdir()

    clean_context_directory(tmp_path, context)

    assert not (tmp_path / "demo-build").exists()
    assert (tmp_path / "other-build").exists()


def test_build_name_without_safe_characters_is_rejected(tmp_path):
    with pytest.raises(FormatError):
        context_directory(tmp_path, PromotionContext("/// ...", "1"))
