"""
Audit envelope population.

Actor resolution and stamping must never break the write they accompany:
every failure here is logged and swallowed.
"""

from typing import Optional
from framework.logging.logger import get_current_request, get_logger

logger = get_logger("audit")

SYSTEM_ACTOR = "system"


def current_actor() -> str:
    """User id of the authenticated caller for the current request, else 'system'."""
    try:
        request = get_current_request()
        if request is None:
            return SYSTEM_ACTOR
        return getattr(request.state, "user_id", None) or SYSTEM_ACTOR
    except Exception as e:
        logger.warning(f"Could not resolve current actor: {str(e)}")
        return SYSTEM_ACTOR


def populate_created(entity, actor: Optional[str]) -> None:
    """Set created_by/updated_by on a new entity."""
    try:
        actor = actor or current_actor()
        if not entity.created_by:
            entity.created_by = actor
        entity.updated_by = actor
    except Exception:
        logger.opt(exception=True).error(
            f"Error populating creation audit info for {type(entity).__name__}"
        )


def populate_updated(entity, actor: Optional[str]) -> None:
    """Set updated_by on a modified entity."""
    try:
        entity.updated_by = actor or current_actor()
    except Exception:
        logger.opt(exception=True).error(
            f"Error populating update audit info for {type(entity).__name__}"
        )
