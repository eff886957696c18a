"""Wiring of the promotion services around one Settings instance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from promoter.modules.promotion import PromotionService
from .settings import Settings

log = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Container that wires plain-Python services with shared settings."""

    settings: Settings
    promotion_service: PromotionService = field(init=False)

    def __post_init__(self) -> None:
        self.promotion_service = PromotionService(self.settings)
        log.info(
            "Services ready artifactory=%s nexus=%s signing=%s",
            self.settings.artifactory_address,
            self.settings.nexus_address,
            "on" if self.settings.signing_enabled else "off",
        )

    def close(self) -> None:
        self.promotion_service.close()
