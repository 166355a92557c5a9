import logging
from typing import Any, Dict

from fastapi import APIRouter

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", summary="Liveness of the gateway")
def health() -> Dict[str, Any]:
    logger.debug("Checking health")
    return {"status": "ok"}
