"""
Patient registration and records.

MR numbers are issued on create and never change afterwards.  A patient
with appointments, procedures, lab tests, transactions or prescriptions
cannot be deleted.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import Patient
from core.serializers.patient import PatientListQuerySerializer, PatientSerializer
from core.services.billing import unpaid_items_for_patient
from core.services.patients import create_patient, search_patients
from core.views.common import delete_instance, get_or_404, paginate, update_from_request


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = search_patients(q.validated_data.get('q'))
        return Response(PatientSerializer(paginate(qs, q.validated_data), many=True).data)

    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = create_patient(s.validated_data, user=request.user)
    return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    patient = get_or_404(Patient, pk)
    if request.method == 'GET':
        data = PatientSerializer(patient).data
        data['appointmentCount'] = patient.appointments.count()
        data['procedureCount'] = patient.procedures.count()
        data['labTestCount'] = patient.lab_tests.count()
        data['unpaidTotal'] = unpaid_items_for_patient(patient.id).total_amount
        return Response(data)
    if request.method == 'DELETE':
        return delete_instance(request, patient, action='patient_delete', message='Patient deleted successfully!')
    return update_from_request(request, PatientSerializer, patient, action='patient_update')
