"""FastAPI routes that trigger a promotion."""

from __future__ import annotations

import logging
from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from promoter.modules.promotion.errors import (
    FormatError,
    IntegrityError,
    PromotionError,
    PromotionInProgressError,
    RemoteError,
    ResolutionError,
)
from promoter.modules.promotion.service import PromotionService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/promotions", tags=["promotion"])


class PromotionRequest(BaseModel):
    build_name: str = Field(..., alias="buildName", min_length=1)
    build_number: Union[int, str] = Field(..., alias="buildNumber")


def get_service(request: Request) -> PromotionService:
    container = getattr(request.app.state, "container", None)
    if not container or not getattr(container, "promotion_service", None):
        raise HTTPException(status_code=500, detail="Promotion service not initialized.")
    return container.promotion_service


def status_for(exc: PromotionError) -> int:
    if isinstance(exc, PromotionInProgressError):
        return 409
    if isinstance(exc, (FormatError, ResolutionError, IntegrityError)):
        return 422
    if isinstance(exc, RemoteError):
        return 502
    return 500


@router.post("")
def promote(payload: PromotionRequest, svc: PromotionService = Depends(get_service)) -> Dict[str, Any]:
    try:
        result = svc.promote(payload.build_name, payload.build_number)
    except PromotionError as exc:
        log.error("Promotion of %s #%s failed: %s", payload.build_name, payload.build_number, exc)
        raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc
    return result.as_dict()
