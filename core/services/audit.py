import logging
from typing import Optional, Any, Dict
from django.contrib.auth import get_user_model
from core.models import AuditEvent

User = get_user_model()
logger = logging.getLogger(__name__)


def actor_name(user) -> str:
    """Value stored in the ``created_by`` columns."""
    if user is not None and getattr(user, 'is_authenticated', False):
        return user.get_username()
    return ''


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[int]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    actor = user if isinstance(user, User) and user.pk else None
    event = AuditEvent.objects.create(
        user=actor,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )
    logger.info('audit action=%s object=%s#%s user=%s', action, object_type, object_id, actor_name(actor) or '-')
    return event
