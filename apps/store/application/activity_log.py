"""
Audit trail of admin mutations.
Writing a log entry must never break the request that triggered it.
"""

import logging
from typing import Any, Optional

from django.db import DatabaseError, transaction

from apps.store.infrastructure.persistence.models import ActivityAction, ActivityResource
from apps.store.infrastructure.persistence.repositories import ActivityLogRepository

logger = logging.getLogger(__name__)


def _user_fields(user) -> dict:
    if user is None or not getattr(user, "is_authenticated", False):
        return {"user_id": "anonymous", "user_name": "anonymous", "user_email": ""}

    full_name = user.get_full_name() if hasattr(user, "get_full_name") else ""
    return {
        "user_id": str(user.pk),
        "user_name": full_name or user.get_username(),
        "user_email": getattr(user, "email", "") or "",
    }


def log_activity(
    user,
    action: ActivityAction,
    resource: ActivityResource,
    details: str,
    resource_id: Optional[Any] = None,
    metadata: Optional[dict] = None,
) -> bool:
    """
    Record who did what to which resource.

    Returns:
        True when the entry was stored, False when the write failed
    """
    try:
        with transaction.atomic():
            ActivityLogRepository.create(
                action=action,
                resource=resource,
                resource_id=str(resource_id) if resource_id is not None else "",
                details=details,
                metadata=metadata,
                **_user_fields(user),
            )
    except DatabaseError:
        logger.exception("Error logging activity: %s %s %s", action, resource, resource_id)
        return False
    return True
