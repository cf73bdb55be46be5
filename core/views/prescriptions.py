from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import Prescription
from core.permissions import IsClinicalOrReadOnly
from core.serializers.clinical import PrescriptionSerializer
from core.services.audit import actor_name, log_action
from core.views.common import delete_instance, get_or_404, list_query, paginate, update_from_request


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalOrReadOnly])
def prescriptions(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = Prescription.objects.select_related('patient', 'doctor')
        for key in ('patient', 'doctor'):
            value = request.query_params.get(key)
            if value and value.isdigit():
                qs = qs.filter(**{f'{key}_id': int(value)})
        qs = qs.order_by('-prescription_date')
        return Response(PrescriptionSerializer(paginate(qs, params), many=True).data)

    s = PrescriptionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    data.pop('row_version', None)
    prescription = Prescription.objects.create(created_by=actor_name(request.user), **data)
    log_action(user=request.user, action='prescription_create', object_type='prescription', object_id=prescription.id)
    return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalOrReadOnly])
def prescription_detail(request, pk: int):
    prescription = get_or_404(Prescription, pk)
    if request.method == 'GET':
        return Response(PrescriptionSerializer(prescription).data)
    if request.method == 'DELETE':
        return delete_instance(request, prescription, action='prescription_delete',
                               message='Prescription deleted successfully!')
    return update_from_request(request, PrescriptionSerializer, prescription, action='prescription_update')
