"""
Appointment services: booking defaults and patient notifications.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.db.models import F
from django.utils import timezone

from core.exceptions import RecordNotFound
from core.models import Appointment
from core.services import sms
from core.services.audit import actor_name, log_action

logger = logging.getLogger(__name__)

SMS_MAX_LENGTH = 160


def default_appointment_date():
    return timezone.now() + timedelta(hours=1)


def create_appointment(data: dict, *, user=None) -> Appointment:
    """Book an appointment; new bookings are always ``Scheduled``.

    The consultation fee falls back to the doctor's fee when omitted.
    """
    data = dict(data)
    data.pop('row_version', None)
    data['status'] = Appointment.STATUS_SCHEDULED
    data.setdefault('appointment_date', default_appointment_date())
    doctor = data.get('doctor')
    if data.get('consultation_fee') is None:
        data['consultation_fee'] = doctor.consultation_fee if doctor else 0
    appointment = Appointment.objects.create(created_by=actor_name(user), **data)
    log_action(user=user, action='appointment_create', object_type='appointment', object_id=appointment.id)
    return appointment


def _get(appointment_id: int) -> Appointment:
    appointment = Appointment.objects.select_related('patient', 'doctor').filter(pk=appointment_id).first()
    if appointment is None:
        raise RecordNotFound(f'Appointment with ID {appointment_id} not found.')
    return appointment


def build_sms_message(appointment: Appointment) -> str:
    when = timezone.localtime(appointment.appointment_date).strftime('%d %b %Y, %I:%M %p')
    first_name = (appointment.patient.full_name or 'Patient').split(' ')[0]
    message = f'Hi {first_name}, your appointment is on {when}'
    if appointment.doctor is not None:
        message += f" with Dr. {appointment.doctor.full_name.split(' ')[-1]}"
    message += f'. Status: {appointment.status}'
    if appointment.consultation_fee and appointment.consultation_fee > 0:
        message += f'. Fee: {settings.CLINIC_CURRENCY} {appointment.consultation_fee:,.0f}'
    message += f'. -{settings.CLINIC_SMS_SIGNATURE}'
    if len(message) > SMS_MAX_LENGTH:
        message = message[:SMS_MAX_LENGTH - 3] + '...'
    return message


def send_sms_notification(appointment_id: int, *, user=None) -> sms.SmsResult:
    appointment = _get(appointment_id)
    if not appointment.patient.contact_number.strip():
        logger.warning('patient %s has no contact number, SMS skipped', appointment.patient_id)
        return sms.SmsResult(success=False, error='Patient does not have a contact number.')

    result = sms.send_sms(appointment.patient.contact_number, build_sms_message(appointment))
    if result.success:
        Appointment.objects.filter(pk=appointment.pk).update(sms_sent=True, row_version=F('row_version') + 1)
        logger.info('SMS notification sent for appointment %s', appointment_id)
    else:
        logger.warning('SMS notification failed for appointment %s: %s', appointment_id, result.error)
    log_action(user=user, action='appointment_sms', object_type='appointment', object_id=appointment_id,
               detail={'success': result.success, 'sid': result.sid, 'status': result.status})
    return result


def send_whatsapp_notification(appointment_id: int, *, user=None) -> bool:
    """No WhatsApp provider is wired in; the appointment is only flagged."""
    appointment = _get(appointment_id)
    Appointment.objects.filter(pk=appointment.pk).update(whatsapp_sent=True, row_version=F('row_version') + 1)
    log_action(user=user, action='appointment_whatsapp', object_type='appointment', object_id=appointment_id)
    return True
