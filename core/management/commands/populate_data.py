"""
Management command to populate the database with demo clinic data.
"""
from datetime import time, timedelta
from decimal import Decimal
import random

from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.utils import timezone

from core.models import (
    Appointment, Doctor, DoctorSchedule, LabTest, LabTestCategory, Nurse, Patient,
    Prescription, Procedure, Transaction, User,
)
from core.services.patients import next_mr_number

FIRST_NAMES = ['Ahmed', 'Ayesha', 'Bilal', 'Fatima', 'Hamza', 'Hina', 'Imran', 'Maryam', 'Omar', 'Sana']
LAST_NAMES = ['Khan', 'Malik', 'Qureshi', 'Sheikh', 'Butt', 'Chaudhry', 'Raza', 'Siddiqui']
SPECIALIZATIONS = [
    ('Gynecology', Decimal('2000')),
    ('Pediatrics', Decimal('1500')),
    ('General Medicine', Decimal('1000')),
    ('Radiology', Decimal('2500')),
]
CATEGORIES = ['Hematology', 'Biochemistry', 'Microbiology', 'Radiology']
TESTS = ['CBC', 'Blood Sugar', 'Urine R/E', 'Ultrasound', 'LFT', 'Lipid Profile']
PROCEDURES = ['C-Section', 'Normal Delivery', 'Dressing', 'Minor Surgery', 'IV Therapy']


class Command(BaseCommand):
    help = 'Populate database with demo clinic data'

    def add_arguments(self, parser):
        parser.add_argument('--patients', type=int, default=20)
        parser.add_argument('--seed', type=int, default=None)

    @transaction.atomic
    def handle(self, *args, **options):
        if options['seed'] is not None:
            random.seed(options['seed'])
        self.stdout.write('Creating demo data...')

        self.create_staff_users()
        doctors = self.create_doctors()
        nurses = self.create_nurses()
        self.create_schedules(doctors)
        categories = self.create_categories()
        patients = self.create_patients(options['patients'])
        appointments = self.create_appointments(patients, doctors, nurses)
        procedures = self.create_procedures(patients, doctors, nurses)
        lab_tests = self.create_lab_tests(patients, categories, procedures)
        self.create_prescriptions(appointments)
        self.create_transactions(appointments, lab_tests)

        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def create_staff_users(self):
        for role in (User.ROLE_DOCTOR, User.ROLE_NURSE, User.ROLE_RECEPTIONIST):
            email = f'{role.lower()}@clinic.local'
            User.objects.get_or_create(
                username=email,
                defaults={'email': email, 'first_name': role, 'last_name': 'Demo', 'role': role,
                          'password': make_password('Demo@123')},
            )
        self.stdout.write('  staff users ok')

    def create_doctors(self):
        doctors = []
        for i, (specialization, fee) in enumerate(SPECIALIZATIONS):
            doctor, _ = Doctor.objects.get_or_create(
                license_number=f'PMDC-{1000 + i}',
                defaults={
                    'first_name': random.choice(FIRST_NAMES), 'last_name': random.choice(LAST_NAMES),
                    'specialization': specialization, 'consultation_fee': fee,
                    'contact_number': f'0300{random.randint(1000000, 9999999)}',
                },
            )
            doctors.append(doctor)
        self.stdout.write(f'  {len(doctors)} doctors')
        return doctors

    def create_nurses(self):
        nurses = []
        for i, department in enumerate(['OPD', 'Ward', 'Labour Room']):
            nurse, _ = Nurse.objects.get_or_create(
                license_number=f'PNC-{2000 + i}',
                defaults={'first_name': random.choice(FIRST_NAMES), 'last_name': random.choice(LAST_NAMES),
                          'department': department},
            )
            nurses.append(nurse)
        self.stdout.write(f'  {len(nurses)} nurses')
        return nurses

    def create_schedules(self, doctors):
        days = [value for value, _ in DoctorSchedule.DAY_CHOICES][:5]
        for doctor in doctors:
            for day in days:
                DoctorSchedule.objects.get_or_create(
                    doctor=doctor, day_of_week=day,
                    defaults={'start_time': time(9, 0), 'end_time': time(14, 0)},
                )

    def create_categories(self):
        categories = []
        for name in CATEGORIES:
            category, _ = LabTestCategory.objects.get_or_create(category_name=name)
            categories.append(category)
        return categories

    def create_patients(self, count):
        patients = []
        today = timezone.localdate()
        for _ in range(count):
            patients.append(Patient.objects.create(
                mr_number=next_mr_number(),
                first_name=random.choice(FIRST_NAMES),
                last_name=random.choice(LAST_NAMES),
                contact_number=f'03{random.randint(100000000, 999999999)}',
                date_of_birth=today - timedelta(days=random.randint(365, 365 * 70)),
                gender=random.choice([value for value, _ in Patient.GENDER_CHOICES]),
                city='Lahore',
            ))
        self.stdout.write(f'  {len(patients)} patients')
        return patients

    def create_appointments(self, patients, doctors, nurses):
        now = timezone.now()
        statuses = [value for value, _ in Appointment.STATUS_CHOICES]
        appointments = []
        for patient in patients:
            doctor = random.choice(doctors)
            appointments.append(Appointment.objects.create(
                patient=patient, doctor=doctor, nurse=random.choice(nurses),
                appointment_date=now + timedelta(days=random.randint(-60, 14), hours=random.randint(0, 8)),
                status=random.choice(statuses), consultation_fee=doctor.consultation_fee,
                reason='Routine checkup', created_by='populate_data',
            ))
        self.stdout.write(f'  {len(appointments)} appointments')
        return appointments

    def create_procedures(self, patients, doctors, nurses):
        now = timezone.now()
        procedures = []
        for patient in random.sample(patients, k=max(1, len(patients) // 3)):
            procedures.append(Procedure.objects.create(
                patient=patient, doctor=random.choice(doctors), nurse=random.choice(nurses),
                procedure_name=random.choice(PROCEDURES), procedure_type='Surgical',
                procedure_date=now - timedelta(days=random.randint(0, 60)),
                procedure_fee=Decimal(random.choice([5000, 15000, 45000])),
                status=random.choice([Procedure.STATUS_COMPLETED, 'Scheduled']), created_by='populate_data',
            ))
        self.stdout.write(f'  {len(procedures)} procedures')
        return procedures

    def create_lab_tests(self, patients, categories, procedures):
        now = timezone.now()
        lab_tests = []
        for patient in random.sample(patients, k=max(1, len(patients) // 2)):
            lab_tests.append(LabTest.objects.create(
                patient=patient, category=random.choice(categories),
                procedure=random.choice(procedures) if procedures and random.random() < 0.2 else None,
                test_name=random.choice(TESTS), test_date=now - timedelta(days=random.randint(0, 30)),
                test_fee=Decimal(random.choice([500, 800, 1200, 3000])), created_by='populate_data',
            ))
        self.stdout.write(f'  {len(lab_tests)} lab tests')
        return lab_tests

    def create_prescriptions(self, appointments):
        for appointment in appointments:
            if appointment.status != Appointment.STATUS_COMPLETED:
                continue
            Prescription.objects.create(
                patient=appointment.patient, doctor=appointment.doctor, appointment=appointment,
                prescription_details='Paracetamol 500mg', instructions='Twice daily after meals',
                created_by='populate_data',
            )

    def create_transactions(self, appointments, lab_tests):
        modes = [value for value, _ in Transaction.PAYMENT_MODE_CHOICES]
        count = 0
        for appointment in appointments:
            if appointment.status != Appointment.STATUS_COMPLETED:
                continue
            Transaction.objects.create(
                patient=appointment.patient, transaction_type=Transaction.TYPE_APPOINTMENT,
                appointment=appointment, amount=appointment.consultation_fee,
                description=f'Payment for: Appointment #{appointment.id}',
                payment_mode=random.choice(modes), created_by='populate_data',
            )
            count += 1
        for lab_test in lab_tests[: len(lab_tests) // 2]:
            Transaction.objects.create(
                patient=lab_test.patient, transaction_type=Transaction.TYPE_LAB_TEST,
                lab_test=lab_test, amount=lab_test.test_fee,
                description=f'Payment for: Lab Test: {lab_test.test_name}',
                payment_mode=random.choice(modes), created_by='populate_data',
            )
            count += 1
        self.stdout.write(f'  {count} transactions')
