"""Small helpers shared by the clinic record views."""
from __future__ import annotations

from rest_framework import serializers
from rest_framework.response import Response

from core.exceptions import RecordNotFound
from core.services.audit import log_action
from core.services.concurrency import save_serializer_update


class ListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)


def list_query(request) -> dict:
    s = ListQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    return s.validated_data


def paginate(qs, params: dict):
    page = params.get('page') or 1
    page_size = params.get('pageSize') or 0
    if page_size:
        start = (page - 1) * page_size
        return qs[start:start + page_size]
    return qs


def get_or_404(model, pk: int):
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise RecordNotFound(f'{model._meta.verbose_name.title()} with ID {pk} not found.')
    return obj


def update_from_request(request, serializer_class, instance, *, action: str):
    """PUT/PATCH: validate a partial payload and apply it under the row_version check."""
    s = serializer_class(instance, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    obj = save_serializer_update(s)
    log_action(user=request.user, action=action, object_type=instance._meta.model_name, object_id=obj.pk,
               detail={'fields': sorted(k for k in s.validated_data if k != 'row_version')})
    return Response(serializer_class(obj).data)


def delete_instance(request, instance, *, action: str, message: str):
    pk = instance.pk
    instance.delete()
    log_action(user=request.user, action=action, object_type=instance._meta.model_name, object_id=pk)
    return Response({'ok': True, 'message': message})
