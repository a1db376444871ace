import logging

from fastapi import Header, HTTPException

from shipspace.core.config import settings
from shipspace.core.security import same_secret

log = logging.getLogger(__name__)


async def require_internal_admin(x_internal_admin_key: str | None = Header(default=None)) -> None:
    """
    Guard for ops-only routes (user bootstrap). Not tied to any marketplace identity.
    """
    if not same_secret(x_internal_admin_key, settings.internal_admin_key):
        log.warning("internal route called without a valid internal admin key")
        raise HTTPException(status_code=403, detail="Internal admin key required")
