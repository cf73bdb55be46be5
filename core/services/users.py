"""
Staff account administration.

Accounts sign in with their e-mail address, which doubles as username.
"""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import PermissionDenied

from core.exceptions import RecordNotFound
from core.services.audit import log_action

User = get_user_model()
logger = logging.getLogger(__name__)


def search_users(q: str | None = None):
    qs = User.objects.all()
    if q:
        qs = (qs.filter(first_name__icontains=q) | qs.filter(last_name__icontains=q)
              | qs.filter(email__icontains=q) | qs.filter(username__icontains=q))
    return qs.order_by('email', 'username')


def create_user(data: dict, *, actor=None):
    data = dict(data)
    password = data.pop('password')
    data.pop('confirm_password', None)
    email = data['email']
    with transaction.atomic():
        user = User.objects.create_user(username=email, password=password, **data)
    log_action(user=actor, action='user_create', object_type='user', object_id=user.id, detail={'role': user.role})
    return user


def update_user(user, data: dict, *, actor=None):
    data = dict(data)
    password = data.pop('password', None)
    data.pop('confirm_password', None)
    for field, value in data.items():
        setattr(user, field, value)
    if 'email' in data:
        user.username = data['email']
    if password:
        user.set_password(password)
    user.save()
    log_action(user=actor, action='user_update', object_type='user', object_id=user.id,
               detail={'role': user.role, 'password_changed': bool(password)})
    return user


def delete_user(user_id: int, *, actor) -> None:
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise RecordNotFound('User not found.')
    if actor is not None and user.pk == actor.pk:
        raise PermissionDenied('You cannot delete your own account.')
    user.delete()
    logger.info('user %s deleted by %s', user_id, actor.get_username() if actor else '-')
    log_action(user=actor, action='user_delete', object_type='user', object_id=user_id)
