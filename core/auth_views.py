"""
Authentication views.

Username (or e-mail) and password login returning a DRF token plus a
simplejwt access/refresh pair, JWT refresh and logout, and the current
user.  Repeated failures lock the account name for a while.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import authenticate
from django.db.models import Q
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from core.models import User
from core.serializers.auth import LoginSerializer
from core.serializers.user import serialize_user
from core.services import lockout
from core.services.audit import log_action

logger = logging.getLogger(__name__)


def _resolve_username(account: str) -> str:
    """Accounts may sign in with their e-mail address as well as the username."""
    match = User.objects.filter(Q(username__iexact=account) | Q(email__iexact=account)).first()
    return match.username if match else account


def _client_ip(request) -> str | None:
    return request.META.get('REMOTE_ADDR')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    account = s.validated_data['account']
    password = s.validated_data['password']

    if lockout.is_locked(account):
        logger.warning('login refused for locked account %s', account)
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'locked', 'username': account, 'ip': _client_ip(request)})
        return Response(
            {'ok': False, 'error': {
                'code': 'account_locked',
                'message': f'Account locked due to multiple failed login attempts. '
                           f'Please try again in {settings.LOGIN_LOCKOUT_MINUTES} minutes.',
            }},
            status=status.HTTP_423_LOCKED,
        )

    user = authenticate(request, username=_resolve_username(account), password=password)
    if user is None:
        failures = lockout.register_failure(account)
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': account, 'ip': _client_ip(request), 'failures': failures})
        return Response(
            {'ok': False, 'error': {'code': 'invalid_credentials', 'message': 'Invalid login attempt.'}},
            status=status.HTTP_400_BAD_REQUEST,
        )

    lockout.reset(account)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': _client_ip(request)})

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': serialize_user(user),
    })


login_view.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user_view(request):
    return Response(serialize_user(request.user))


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or every outstanding token of the user."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as exc:
            return Response({'ok': False, 'error': {'code': 'invalid_token', 'message': str(exc)}},
                            status=status.HTTP_400_BAD_REQUEST)
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
