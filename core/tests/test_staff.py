"""
Doctor, nurse and schedule endpoints.

Written against ``APITestCase`` with an authenticated admin client.
"""
from datetime import datetime
from decimal import Decimal

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from core.models import Appointment, Doctor, DoctorSchedule, Nurse, Patient, User


class StaffAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            username='admin@clinic.local', email='admin@clinic.local', password='Admin@123', role=User.ROLE_ADMIN,
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)
        self.doctor = Doctor.objects.create(
            first_name='Sara', last_name='Ahmed', specialization='Gynecology', consultation_fee=Decimal('1500'),
        )

    def test_create_doctor_cleans_names(self):
        resp = self.client.post('/api/doctors', {
            'first_name': '<b>Omar</b>', 'last_name': 'Farooq', 'specialization': 'Pediatrics',
            'consultation_fee': '2000.00',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        self.assertEqual(resp.data['first_name'], 'Omar')
        self.assertEqual(resp.data['row_version'], 1)

    def test_active_doctors_excludes_inactive(self):
        Doctor.objects.create(first_name='Old', last_name='Timer', specialization='ENT', is_active=False)
        resp = self.client.get('/api/doctors/active')
        self.assertEqual([d['id'] for d in resp.data], [self.doctor.id])
        resp = self.client.get('/api/doctors', {'active': 'true'})
        self.assertEqual([d['id'] for d in resp.data], [self.doctor.id])

    def test_doctor_update_bumps_version(self):
        resp = self.client.patch(f'/api/doctors/{self.doctor.id}', {
            'specialization': 'Obstetrics', 'row_version': 1,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.data)
        self.assertEqual(resp.data['row_version'], 2)
        self.doctor.refresh_from_db()
        self.assertEqual(self.doctor.specialization, 'Obstetrics')

    def test_schedule_end_must_follow_start(self):
        resp = self.client.post('/api/schedules', {
            'doctor': self.doctor.id, 'day_of_week': 'Monday', 'start_time': '14:00', 'end_time': '09:00',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['message']['end_time'], ['End time must be after start time.'])

    def test_schedule_partial_update_checks_stored_times(self):
        resp = self.client.post('/api/schedules', {
            'doctor': self.doctor.id, 'day_of_week': 'Monday', 'start_time': '09:00', 'end_time': '13:00',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        schedule_id = resp.data['id']

        resp = self.client.patch(f'/api/schedules/{schedule_id}', {'end_time': '08:00'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.get('/api/schedules', {'doctor': self.doctor.id})
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]['doctor_name'], 'Sara Ahmed')

        detail = self.client.get(f'/api/doctors/{self.doctor.id}')
        self.assertEqual(len(detail.data['schedules']), 1)

    def test_schedule_for_unknown_doctor(self):
        resp = self.client.post('/api/schedules', {
            'doctor': 9999, 'day_of_week': 'Friday', 'start_time': '09:00', 'end_time': '10:00',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['message']['doctor'], ['Selected doctor does not exist.'])
        self.assertFalse(DoctorSchedule.objects.exists())

    def test_delete_nurse_clears_appointments(self):
        nurse = Nurse.objects.create(first_name='Hina', last_name='Raza', department='OPD')
        patient = Patient.objects.create(
            mr_number='MR202500001', first_name='Ali', last_name='Khan', contact_number='03001234567',
            date_of_birth=datetime(1990, 5, 17).date(), gender='Male',
        )
        appt = Appointment.objects.create(
            patient=patient, doctor=self.doctor, nurse=nurse,
            appointment_date=timezone.make_aware(datetime(2025, 1, 1, 10, 0)),
        )
        resp = self.client.delete(f'/api/nurses/{nurse.id}')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['message'], 'Nurse deleted successfully!')
        appt.refresh_from_db()
        self.assertIsNone(appt.nurse_id)

    def test_missing_nurse(self):
        resp = self.client.get('/api/nurses/4242')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error']['message'], 'Nurse with ID 4242 not found.')
