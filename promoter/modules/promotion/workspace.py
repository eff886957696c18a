"""Local workspace layout shared by the downloader, verifier, signer and uploader.

Layout: ``<root>/<safe build name>/<group as path>/<artifact>/<version>/<file>``.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Dict

from promoter.modules.promotion.domain import Module, ModuleSet, PromotionContext
from promoter.modules.promotion.errors import FormatError

log = logging.getLogger(__name__)


def safe_name(build_name: str) -> str:
    """Drop every character that is not an ASCII letter, digit, ``-`` or ``_``."""
    return "".join(
        char
        for char in build_name
        if ("a" <= char <= "z") or ("A" <= char <= "Z") or ("0" <= char <= "9") or char in "-_"
    )


def context_directory(root: Path, context: PromotionContext) -> Path:
    name = safe_name(context.build_name)
    if not name:
        raise FormatError(f"Build name {context.build_name!r} has no filesystem-safe characters")
    return Path(root) / name


def module_directory(build_dir: Path, module: Module) -> Path:
    return Path(build_dir) / module.id.format(layout=True, delimiter=os.sep)


def module_directories(build_dir: Path, module_set: ModuleSet) -> Dict[Module, Path]:
    return {module: module_directory(build_dir, module) for module in module_set}


def prepare_directories(root: Path, context: PromotionContext, module_set: ModuleSet) -> Dict[Module, Path]:
    """Create the build and module directories. Must finish before any download starts."""
    build_dir = context_directory(root, context)
    build_dir.mkdir(parents=True, exist_ok=True)
    directories = module_directories(build_dir, module_set)
    for directory in directories.values():
        directory.mkdir(parents=True, exist_ok=True)
    log.debug("Prepared %d module directories under %s", len(directories), build_dir)
    return directories


def clean_context_directory(root: Path, context: PromotionContext) -> None:
    """Remove leftovers of an earlier run of the same build."""
    build_dir = context_directory(root, context)
    if build_dir.exists():
        log.info("Removing stale workspace %s", build_dir)
        shutil.rmtree(build_dir)
