from datetime import date, datetime
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from core.models import (
    Appointment, Doctor, LabTest, LabTestCategory, Nurse, Patient, Prescription, Procedure, Transaction, User,
)
from core.services.patients import next_mr_number


def aware(*args) -> datetime:
    return timezone.make_aware(datetime(*args))


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / 'media'
    return settings.MEDIA_ROOT


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='admin@clinic.local', email='admin@clinic.local', password='Admin@123',
        first_name='Clinic', last_name='Admin', role=User.ROLE_ADMIN,
    )


@pytest.fixture
def receptionist(db):
    return User.objects.create_user(
        username='desk@clinic.local', email='desk@clinic.local', password='Desk@123',
        role=User.ROLE_RECEPTIONIST,
    )


@pytest.fixture
def api(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def make_patient(db):
    def _make(first_name='Ali', last_name='Khan', **kwargs):
        defaults = {
            'contact_number': '03001234567',
            'date_of_birth': date(1990, 5, 17),
            'gender': 'Male',
        }
        defaults.update(kwargs)
        defaults.setdefault('mr_number', next_mr_number())
        return Patient.objects.create(first_name=first_name, last_name=last_name, **defaults)
    return _make


@pytest.fixture
def make_doctor(db):
    def _make(first_name='Sara', last_name='Ahmed', **kwargs):
        kwargs.setdefault('specialization', 'Gynecology')
        kwargs.setdefault('consultation_fee', Decimal('1500'))
        return Doctor.objects.create(first_name=first_name, last_name=last_name, **kwargs)
    return _make


@pytest.fixture
def nurse(db):
    return Nurse.objects.create(first_name='Hina', last_name='Raza', department='OPD')


@pytest.fixture
def make_appointment(db):
    def _make(patient, doctor=None, **kwargs):
        kwargs.setdefault('appointment_date', aware(2025, 1, 1, 10, 0))
        kwargs.setdefault('consultation_fee', doctor.consultation_fee if doctor else Decimal('1000'))
        return Appointment.objects.create(patient=patient, doctor=doctor, **kwargs)
    return _make


@pytest.fixture
def make_procedure(db):
    def _make(patient, doctor, **kwargs):
        kwargs.setdefault('procedure_name', 'Dressing')
        kwargs.setdefault('procedure_type', 'Minor')
        kwargs.setdefault('procedure_fee', Decimal('5000'))
        return Procedure.objects.create(patient=patient, doctor=doctor, **kwargs)
    return _make


@pytest.fixture
def category(db):
    return LabTestCategory.objects.create(category_name='Hematology')


@pytest.fixture
def make_lab_test(category):
    def _make(patient, **kwargs):
        kwargs.setdefault('test_name', 'CBC')
        kwargs.setdefault('test_fee', Decimal('800'))
        kwargs.setdefault('category', category)
        return LabTest.objects.create(patient=patient, **kwargs)
    return _make


@pytest.fixture
def make_transaction(db):
    def _make(patient, **kwargs):
        kwargs.setdefault('amount', Decimal('1000'))
        kwargs.setdefault('description', 'Payment')
        kwargs.setdefault('payment_mode', 'Cash')
        return Transaction.objects.create(patient=patient, **kwargs)
    return _make


@pytest.fixture
def make_prescription(db):
    def _make(patient, doctor=None, **kwargs):
        kwargs.setdefault('prescription_details', 'Paracetamol 500mg')
        return Prescription.objects.create(patient=patient, doctor=doctor, **kwargs)
    return _make
