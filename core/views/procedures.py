"""
Procedure records.

A procedure referenced by lab tests, transactions or prescriptions can
only be removed with ``force``, which detaches those records first.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import Procedure
from core.permissions import IsClinicalOrReadOnly
from core.serializers.clinical import ProcedureSerializer
from core.services import procedures as procedure_service
from core.services.audit import actor_name, log_action
from core.views.common import get_or_404, list_query, paginate, update_from_request
from core.views.doctors import _truthy


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalOrReadOnly])
def procedures(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = Procedure.objects.select_related('patient', 'doctor', 'nurse')
        for key in ('patient', 'doctor'):
            value = request.query_params.get(key)
            if value and value.isdigit():
                qs = qs.filter(**{f'{key}_id': int(value)})
        if params.get('q'):
            q = params['q']
            qs = (qs.filter(procedure_name__icontains=q) | qs.filter(patient__first_name__icontains=q)
                  | qs.filter(patient__last_name__icontains=q) | qs.filter(patient__mr_number__icontains=q))
        qs = qs.order_by('-procedure_date')
        return Response(ProcedureSerializer(paginate(qs, params), many=True).data)

    s = ProcedureSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    data.pop('row_version', None)
    procedure = Procedure.objects.create(created_by=actor_name(request.user), **data)
    log_action(user=request.user, action='procedure_create', object_type='procedure', object_id=procedure.id)
    return Response(ProcedureSerializer(procedure).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalOrReadOnly])
def procedure_detail(request, pk: int):
    procedure = get_or_404(Procedure, pk)
    if request.method == 'GET':
        return Response(ProcedureSerializer(procedure).data)
    if request.method == 'DELETE':
        message = procedure_service.delete_procedure(procedure.id, user=request.user)
        return Response({'ok': True, 'message': message})
    return update_from_request(request, ProcedureSerializer, procedure, action='procedure_update')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def procedure_delete_check(request, pk: int):
    return Response(procedure_service.check_procedure_delete(pk).as_dict())


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalOrReadOnly])
def procedure_delete(request, pk: int):
    force = _truthy(request.data.get('force', False))
    message = procedure_service.delete_procedure(pk, force=force, user=request.user)
    return Response({'ok': True, 'message': message})
