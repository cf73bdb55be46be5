"""
User administration (Admin role only).
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import User
from core.permissions import IsAdminRole
from core.serializers.user import UserWriteSerializer, serialize_user
from core.services import users as user_service
from core.views.common import get_or_404, list_query, paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def users(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = user_service.search_users(params.get('q'))
        return Response([serialize_user(u) for u in paginate(qs, params)])

    s = UserWriteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = user_service.create_user(s.validated_data, actor=request.user)
    return Response(serialize_user(user), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def roles(request):
    return Response([{'name': value, 'label': label} for value, label in User.ROLE_CHOICES])


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk: int):
    if request.method == 'DELETE':
        user_service.delete_user(pk, actor=request.user)
        return Response({'ok': True, 'message': 'User deleted successfully!'})
    user = get_or_404(User, pk)
    if request.method == 'GET':
        return Response(serialize_user(user))
    s = UserWriteSerializer(user, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    user = user_service.update_user(user, s.validated_data, actor=request.user)
    return Response(serialize_user(user))
