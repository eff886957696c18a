"""Command line entry point: ``artifact-promoter promote BUILD_NAME BUILD_NUMBER``."""

from __future__ import annotations

import logging
from typing import Optional

import cyclopts

from promoter.logging_config import configure_logging
from promoter.modules.promotion import PromotionService
from promoter.modules.promotion.errors import PromotionError
from promoter.settings import Settings, get_settings

log = logging.getLogger(__name__)

app = cyclopts.App(
    name="artifact-promoter",
    help="Promote an Artifactory build into a Nexus staging repository.",
)


def build_service(settings: Settings) -> PromotionService:
    return PromotionService(settings)


@app.command
def promote(build_name: str, build_number: str, *, close: Optional[bool] = None) -> None:
    """Download, verify, sign and stage one build.

    Parameters
    ----------
    build_name
        Build name as recorded in Artifactory.
    build_number
        Build number as recorded in Artifactory.
    close
        Close the staging repository after upload; defaults to the configured value.
    """
    settings = get_settings()
    if close is not None:
        settings = settings.model_copy(update={"close_staging_repository": close})
    configure_logging(settings.log_level)

    service = build_service(settings)
    try:
        result = service.promote(build_name, build_number)
    except PromotionError as exc:
        log.error("Promotion of %s #%s failed: %s", build_name, build_number, exc)
        raise SystemExit(1) from exc
    finally:
        service.close()
    log.info(
        "Staged %s #%s in repository %s%s",
        build_name,
        build_number,
        result.repository.repository_id if result.repository else "-",
        " (closed)" if result.closed else "",
    )


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    app()
