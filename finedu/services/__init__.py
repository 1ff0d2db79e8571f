"""
Service layer: persistence and orchestration around the progression engine
"""
import logging
from typing import Optional

from finedu.services.avatar_store import (
    AvatarStore,
    InMemoryAvatarStore,
    JsonFileAvatarStore,
    create_avatar_store,
)
from finedu.services.progression_service import ProgressionService

logger = logging.getLogger(__name__)


def create_progression_service(store: Optional[AvatarStore] = None) -> ProgressionService:
    """ProgressionService wired to the configured avatar store"""
    service = ProgressionService(store or create_avatar_store())
    logger.debug("ProgressionService instantiated")
    return service


__all__ = [
    "AvatarStore",
    "InMemoryAvatarStore",
    "JsonFileAvatarStore",
    "create_avatar_store",
    "ProgressionService",
    "create_progression_service",
]
