"""
Doctor, nurse and doctor schedule endpoints.

Deleting a doctor goes through the dependency checker: procedures and
schedules are removed with the doctor, prescriptions block the delete
unless ``force`` is sent.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import Doctor, DoctorSchedule, Nurse
from core.serializers.staff import DoctorScheduleSerializer, DoctorSerializer, NurseSerializer
from core.services import doctors as doctor_service
from core.services.audit import log_action
from core.views.common import delete_instance, get_or_404, list_query, paginate, update_from_request


def _truthy(value) -> bool:
    return str(value).lower() in ('1', 'true', 'yes', 'on')


def _with_stats(doctor) -> dict:
    data = DoctorSerializer(doctor).data
    data['totalAppointments'] = doctor.total_appointments
    data['totalRevenue'] = doctor.appointment_revenue + doctor.procedure_revenue
    return data


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def doctors(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = doctor_service.list_doctors_with_stats(
            q=params.get('q'), active_only=_truthy(request.query_params.get('active'))
        ).order_by('last_name', 'first_name')
        return Response([_with_stats(d) for d in paginate(qs, params)])

    s = DoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    data.pop('row_version', None)
    doctor = Doctor.objects.create(**data)
    log_action(user=request.user, action='doctor_create', object_type='doctor', object_id=doctor.id)
    return Response(DoctorSerializer(doctor).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def active_doctors(request):
    return Response(DoctorSerializer(doctor_service.active_doctors(), many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def doctor_detail(request, pk: int):
    doctor = get_or_404(Doctor, pk)
    if request.method == 'GET':
        data = DoctorSerializer(doctor).data
        data['totalRevenue'] = doctor_service.doctor_revenue(doctor.id)
        data['schedules'] = DoctorScheduleSerializer(doctor.schedules.order_by('day_of_week', 'start_time'), many=True).data
        return Response(data)
    if request.method == 'DELETE':
        message = doctor_service.delete_doctor(doctor.id, user=request.user)
        return Response({'ok': True, 'message': message})
    return update_from_request(request, DoctorSerializer, doctor, action='doctor_update')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_delete_check(request, pk: int):
    return Response(doctor_service.check_doctor_delete(pk).as_dict())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def doctor_delete(request, pk: int):
    force = _truthy(request.data.get('force', False))
    message = doctor_service.delete_doctor(pk, force=force, user=request.user)
    return Response({'ok': True, 'message': message})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def nurses(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = Nurse.objects.all()
        if _truthy(request.query_params.get('active')):
            qs = qs.filter(is_active=True)
        if params.get('q'):
            q = params['q']
            qs = qs.filter(first_name__icontains=q) | qs.filter(last_name__icontains=q) | qs.filter(department__icontains=q)
        qs = qs.order_by('last_name', 'first_name')
        return Response(NurseSerializer(paginate(qs, params), many=True).data)

    s = NurseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    data.pop('row_version', None)
    nurse = Nurse.objects.create(**data)
    log_action(user=request.user, action='nurse_create', object_type='nurse', object_id=nurse.id)
    return Response(NurseSerializer(nurse).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def nurse_detail(request, pk: int):
    nurse = get_or_404(Nurse, pk)
    if request.method == 'GET':
        return Response(NurseSerializer(nurse).data)
    if request.method == 'DELETE':
        return delete_instance(request, nurse, action='nurse_delete', message='Nurse deleted successfully!')
    return update_from_request(request, NurseSerializer, nurse, action='nurse_update')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def schedules(request):
    if request.method == 'GET':
        qs = DoctorSchedule.objects.select_related('doctor')
        doctor_id = request.query_params.get('doctor')
        if doctor_id and doctor_id.isdigit():
            qs = qs.filter(doctor_id=int(doctor_id))
        qs = qs.order_by('doctor__last_name', 'day_of_week', 'start_time')
        return Response(DoctorScheduleSerializer(qs, many=True).data)

    s = DoctorScheduleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    data.pop('row_version', None)
    schedule = DoctorSchedule.objects.create(**data)
    log_action(user=request.user, action='schedule_create', object_type='doctorschedule', object_id=schedule.id)
    return Response(DoctorScheduleSerializer(schedule).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def schedule_detail(request, pk: int):
    schedule = get_or_404(DoctorSchedule, pk)
    if request.method == 'GET':
        return Response(DoctorScheduleSerializer(schedule).data)
    if request.method == 'DELETE':
        return delete_instance(request, schedule, action='schedule_delete', message='Schedule deleted successfully!')
    return update_from_request(request, DoctorScheduleSerializer, schedule, action='schedule_update')
