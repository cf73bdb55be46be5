"""
Appointment booking and SMS notifications (Twilio replaced by a fake client).
"""
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.utils import timezone
from twilio.base.exceptions import TwilioException

from core.models import Appointment
from core.services import appointments as appointment_service
from core.services import sms


class FakeMessages:
    def __init__(self, status='queued', error_code=None, exc=None):
        self.status = status
        self.error_code = error_code
        self.exc = exc
        self.sent = []

    def create(self, **kwargs):
        if self.exc is not None:
            raise self.exc
        self.sent.append(kwargs)
        return SimpleNamespace(sid='SM123', status=self.status, error_code=self.error_code,
                               error_message='failed' if self.error_code else None)


@pytest.fixture
def twilio(settings, monkeypatch):
    settings.TWILIO_ACCOUNT_SID = 'AC123'
    settings.TWILIO_AUTH_TOKEN = 'secret'
    settings.TWILIO_FROM_PHONE_NUMBER = '+15005550006'
    messages = FakeMessages()
    monkeypatch.setattr(sms, 'get_client', lambda: SimpleNamespace(messages=messages))
    return messages


@pytest.fixture
def booked(make_patient, make_doctor, make_appointment):
    return make_appointment(
        make_patient(), make_doctor(),
        appointment_date=timezone.make_aware(datetime(2025, 1, 15, 10, 30)),
        status=Appointment.STATUS_SCHEDULED,
    )


def test_create_forces_scheduled_and_defaults_fee(api, make_patient, make_doctor):
    doctor = make_doctor(consultation_fee=Decimal('2000'))
    resp = api.post('/api/appointments', {
        'patient': make_patient().id, 'doctor': doctor.id, 'status': 'Completed',
    }, format='json')
    assert resp.status_code == 201, resp.data
    appointment = Appointment.objects.get()
    assert appointment.status == Appointment.STATUS_SCHEDULED
    assert appointment.consultation_fee == Decimal('2000')
    assert appointment.appointment_date > timezone.now()


def test_create_rejects_inactive_doctor(api, make_patient, make_doctor):
    doctor = make_doctor(is_active=False)
    resp = api.post('/api/appointments', {'patient': make_patient().id, 'doctor': doctor.id}, format='json')
    assert resp.status_code == 400
    assert resp.data['error']['message']['doctor'] == ['Selected doctor does not exist or is not active.']


def test_create_rejects_unknown_patient(api):
    resp = api.post('/api/appointments', {'patient': 42}, format='json')
    assert resp.status_code == 400
    assert resp.data['error']['message']['patient'] == ['Selected patient does not exist.']


def test_form_options_lists_only_active_staff(api, make_patient, make_doctor, nurse):
    make_patient()
    active = make_doctor()
    make_doctor(first_name='Old', is_active=False)
    resp = api.get('/api/appointments/form-options')
    assert resp.status_code == 200
    assert [d['id'] for d in resp.data['doctors']] == [active.id]
    assert [n['id'] for n in resp.data['nurses']] == [nurse.id]
    assert len(resp.data['patients']) == 1


def test_sms_message_format(booked):
    assert appointment_service.build_sms_message(booked) == (
        'Hi Ali, your appointment is on 15 Jan 2025, 10:30 AM with Dr. Ahmed. '
        'Status: Scheduled. Fee: PKR 1,500. -MMGC'
    )


def test_sms_message_without_doctor_or_fee(make_patient, make_appointment):
    appointment = make_appointment(make_patient(), None, consultation_fee=Decimal('0'),
                                   appointment_date=timezone.make_aware(datetime(2025, 3, 2, 16, 5)))
    assert appointment_service.build_sms_message(appointment) == (
        'Hi Ali, your appointment is on 02 Mar 2025, 04:05 PM. Status: Scheduled. -MMGC'
    )


def test_sms_message_is_truncated(booked):
    booked.patient.first_name = 'A' * 150
    message = appointment_service.build_sms_message(booked)
    assert len(message) == 160
    assert message.endswith('...')


@pytest.mark.parametrize('raw, expected', [
    ('03001234567', '+923001234567'),
    ('923001234567', '+923001234567'),
    ('3001234567', '+923001234567'),
    ('+14155550100', '+14155550100'),
    ('0300-123 4567', '+923001234567'),
])
def test_format_phone_number(settings, raw, expected):
    settings.SMS_DEFAULT_COUNTRY_CODE = '92'
    assert sms.format_phone_number(raw) == expected


def test_send_sms_success_marks_appointment(api, twilio, booked):
    resp = api.post(f'/api/appointments/{booked.id}/sms')
    assert resp.status_code == 200, resp.data
    assert resp.data['sid'] == 'SM123'
    assert twilio.sent[0]['to'] == '+923001234567'
    assert twilio.sent[0]['from_'] == '+15005550006'
    booked.refresh_from_db()
    assert booked.sms_sent is True


@pytest.mark.parametrize('status, error_code', [('failed', None), ('queued', 30003)])
def test_send_sms_failure_leaves_flag(api, twilio, booked, status, error_code):
    twilio.status = status
    twilio.error_code = error_code
    resp = api.post(f'/api/appointments/{booked.id}/sms')
    assert resp.status_code == 502
    assert resp.data['error']['code'] == 'sms_failed'
    booked.refresh_from_db()
    assert booked.sms_sent is False


def test_send_sms_provider_exception(twilio, booked):
    twilio.exc = TwilioException('auth failed')
    result = appointment_service.send_sms_notification(booked.id)
    assert result.success is False
    assert 'auth failed' in result.error


def test_send_sms_not_configured(settings, booked):
    settings.TWILIO_ACCOUNT_SID = ''
    result = appointment_service.send_sms_notification(booked.id)
    assert result.success is False
    assert result.error == 'SMS service is not configured.'


def test_whatsapp_marks_flag(api, booked):
    resp = api.post(f'/api/appointments/{booked.id}/whatsapp')
    assert resp.status_code == 200
    booked.refresh_from_db()
    assert booked.whatsapp_sent is True
