"""
Doctor services: delete-dependency checks, (force) deletion and the
per-doctor revenue statistics shown on the doctor list.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Count, DecimalField, OuterRef, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from core.exceptions import DeleteBlocked, RecordNotFound
from core.models import Appointment, Doctor, Prescription, Procedure
from core.services.audit import log_action
from core.services.dependencies import DeleteReport

logger = logging.getLogger(__name__)


def _get_doctor(doctor_id: int) -> Doctor:
    doctor = Doctor.objects.filter(pk=doctor_id).first()
    if doctor is None:
        raise RecordNotFound(f'Doctor with ID {doctor_id} not found.')
    return doctor


def doctor_delete_report(doctor: Doctor) -> DeleteReport:
    """Procedures and schedules go with the doctor; prescriptions block.

    Appointments only lose their doctor reference, so they are not reported.
    """
    report = DeleteReport(entity='doctor')
    report.add(doctor.procedures.count(), 'Procedure(s)', cascade=True)
    report.add(doctor.schedules.count(), 'Schedule(s)', cascade=True)
    report.add(doctor.prescriptions.count(), 'Prescription(s)', cascade=False)
    return report


def check_doctor_delete(doctor_id: int) -> DeleteReport:
    return doctor_delete_report(_get_doctor(doctor_id))


def delete_doctor(doctor_id: int, *, force: bool = False, user=None) -> str:
    """Delete a doctor, clearing blocking references first when ``force`` is set.

    Everything runs in one transaction; a failure leaves the doctor and
    all references untouched.
    """
    with transaction.atomic():
        doctor = Doctor.objects.select_for_update().filter(pk=doctor_id).first()
        if doctor is None:
            raise RecordNotFound(f'Doctor with ID {doctor_id} not found.')
        report = doctor_delete_report(doctor)
        if not report.can_delete and not force:
            logger.info('refused to delete doctor %s: %s', doctor_id, report.blocking_records)
            raise DeleteBlocked(report.message, extra=report.as_dict())

        if force:
            cleared = Prescription.objects.filter(doctor_id=doctor_id).update(doctor=None)
            Appointment.objects.filter(doctor_id=doctor_id).update(doctor=None)
            logger.warning('force deleting doctor %s, cleared %s prescription reference(s)', doctor_id, cleared)
        doctor.delete()

    log_action(user=user, action='doctor_force_delete' if force else 'doctor_delete',
               object_type='doctor', object_id=doctor_id,
               detail={'cascade': report.cascade_records, 'blocking': report.blocking_records})
    return 'Doctor force deleted successfully!' if force else 'Doctor deleted successfully!'


def active_doctors():
    return Doctor.objects.filter(is_active=True).order_by('last_name', 'first_name')


def doctor_revenue(doctor_id: int) -> Decimal:
    """Completed appointment fees plus completed procedure fees."""
    zero = Decimal('0')
    appointments = Appointment.objects.filter(
        doctor_id=doctor_id, status=Appointment.STATUS_COMPLETED
    ).aggregate(total=Sum('consultation_fee'))['total'] or zero
    procedures = Procedure.objects.filter(
        doctor_id=doctor_id, status=Procedure.STATUS_COMPLETED
    ).aggregate(total=Sum('procedure_fee'))['total'] or zero
    return appointments + procedures


def list_doctors_with_stats(*, q: Optional[str] = None, active_only: bool = False):
    """Doctors annotated with ``total_appointments`` and ``total_revenue``."""
    money = DecimalField(max_digits=18, decimal_places=2)
    appt_revenue = (
        Appointment.objects.filter(doctor=OuterRef('pk'), status=Appointment.STATUS_COMPLETED)
        .values('doctor').annotate(s=Sum('consultation_fee')).values('s')
    )
    proc_revenue = (
        Procedure.objects.filter(doctor=OuterRef('pk'), status=Procedure.STATUS_COMPLETED)
        .values('doctor').annotate(s=Sum('procedure_fee')).values('s')
    )
    appt_count = (
        Appointment.objects.filter(doctor=OuterRef('pk'))
        .values('doctor').annotate(c=Count('id')).values('c')
    )
    qs = Doctor.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)
    if q:
        qs = qs.filter(first_name__icontains=q) | qs.filter(last_name__icontains=q) | qs.filter(specialization__icontains=q)
    return qs.annotate(
        total_appointments=Coalesce(Subquery(appt_count), Value(0)),
        appointment_revenue=Coalesce(Subquery(appt_revenue, output_field=money), Value(Decimal('0')), output_field=money),
        procedure_revenue=Coalesce(Subquery(proc_revenue, output_field=money), Value(Decimal('0')), output_field=money),
    )
