"""
Appointment booking and patient notifications.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from core.models import Appointment, Nurse, Patient
from core.serializers.clinical import AppointmentSerializer
from core.services import appointments as appointment_service
from core.services.doctors import active_doctors
from core.views.common import delete_instance, get_or_404, list_query, paginate, update_from_request


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointments(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = Appointment.objects.select_related('patient', 'doctor', 'nurse')
        for key in ('patient', 'doctor'):
            value = request.query_params.get(key)
            if value and value.isdigit():
                qs = qs.filter(**{f'{key}_id': int(value)})
        if request.query_params.get('status'):
            qs = qs.filter(status=request.query_params['status'])
        if params.get('q'):
            q = params['q']
            qs = (qs.filter(patient__first_name__icontains=q) | qs.filter(patient__last_name__icontains=q)
                  | qs.filter(patient__mr_number__icontains=q))
        qs = qs.order_by('-appointment_date')
        return Response(AppointmentSerializer(paginate(qs, params), many=True).data)

    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = appointment_service.create_appointment(s.validated_data, user=request.user)
    return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_form_options(request):
    """Picker contents for the booking form."""
    return Response({
        'patients': [
            {'id': p.id, 'label': f'{p.full_name} ({p.mr_number})'}
            for p in Patient.objects.order_by('first_name', 'last_name')
        ],
        'doctors': [
            {'id': d.id, 'label': f'Dr. {d.full_name} - {d.specialization}', 'consultationFee': d.consultation_fee}
            for d in active_doctors()
        ],
        'nurses': [
            {'id': n.id, 'label': n.full_name}
            for n in Nurse.objects.filter(is_active=True).order_by('first_name', 'last_name')
        ],
        'appointmentTypes': [value for value, _ in Appointment.TYPE_CHOICES],
        'statuses': [value for value, _ in Appointment.STATUS_CHOICES],
        'defaultAppointmentDate': appointment_service.default_appointment_date(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, pk: int):
    appointment = get_or_404(Appointment, pk)
    if request.method == 'GET':
        return Response(AppointmentSerializer(appointment).data)
    if request.method == 'DELETE':
        return delete_instance(request, appointment, action='appointment_delete',
                               message='Appointment deleted successfully!')
    return update_from_request(request, AppointmentSerializer, appointment, action='appointment_update')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([ScopedRateThrottle])
def appointment_sms(request, pk: int):
    result = appointment_service.send_sms_notification(pk, user=request.user)
    if not result.success:
        return Response(
            {'ok': False, 'error': {'code': 'sms_failed', 'message': f'Failed to send SMS: {result.error}'}},
            status=status.HTTP_502_BAD_GATEWAY,
        )
    return Response({'ok': True, 'message': 'SMS sent successfully!', 'sid': result.sid, 'status': result.status})


appointment_sms.cls.throttle_scope = 'sms'


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def appointment_whatsapp(request, pk: int):
    appointment_service.send_whatsapp_notification(pk, user=request.user)
    return Response({'ok': True, 'message': 'WhatsApp notification marked as sent.'})
