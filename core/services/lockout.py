"""
Login lockout backed by the Django cache.

After ``LOGIN_MAX_FAILED_ATTEMPTS`` consecutive failures an account name
is locked for ``LOGIN_LOCKOUT_MINUTES``.  A successful login clears the
counter.
"""
from __future__ import annotations

from django.conf import settings
from django.core.cache import cache


def _key(username: str) -> str:
    return f'login:fail:{(username or "").strip().lower()}'


def is_locked(username: str) -> bool:
    return cache.get(_key(username), 0) >= settings.LOGIN_MAX_FAILED_ATTEMPTS


def register_failure(username: str) -> int:
    key = _key(username)
    timeout = settings.LOGIN_LOCKOUT_MINUTES * 60
    if cache.add(key, 1, timeout):
        return 1
    try:
        count = cache.incr(key)
    except ValueError:
        # expired between add() and incr()
        cache.set(key, 1, timeout)
        count = 1
    cache.touch(key, timeout)
    return count


def reset(username: str) -> None:
    cache.delete(_key(username))
