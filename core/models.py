"""
Database models for the clinic.

The schema covers patient registration, the clinical staff (doctors and
nurses), appointments, procedures, lab tests and their categories,
billing transactions, prescriptions and doctor schedules.  Referential
actions mirror how the clinic treats each relationship:

* patients are never removed while clinical or billing records point at
  them (``PROTECT``),
* removing a doctor removes the doctor's procedures and schedules
  (``CASCADE``) but must not silently orphan prescriptions,
* optional links such as an appointment's nurse simply fall back to
  ``NULL``.

Every editable record carries a ``row_version`` used for optimistic
concurrency (see :mod:`core.services.concurrency`).
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Staff account with a single clinic role."""
    ROLE_ADMIN = 'Admin'
    ROLE_DOCTOR = 'Doctor'
    ROLE_NURSE = 'Nurse'
    ROLE_RECEPTIONIST = 'Receptionist'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_NURSE, 'Nurse'),
        (ROLE_RECEPTIONIST, 'Receptionist'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_RECEPTIONIST, db_index=True)
    phone_number = models.CharField(max_length=20, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class VersionedModel(models.Model):
    """Abstract base adding the optimistic concurrency token."""
    row_version = models.PositiveIntegerField(default=1)

    class Meta:
        abstract = True


class PersonNameMixin:
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Patient(PersonNameMixin, VersionedModel):
    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
    ]
    mr_number = models.CharField(max_length=50, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    contact_number = models.CharField(max_length=15)
    alternate_contact = models.CharField(max_length=15, blank=True)
    email = models.EmailField(max_length=100, blank=True)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    address = models.CharField(max_length=500, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=50, blank=True)
    postal_code = models.CharField(max_length=10, blank=True)
    medical_history = models.CharField(max_length=500, blank=True)
    allergies = models.CharField(max_length=500, blank=True)
    created_date = models.DateTimeField(default=timezone.now)
    updated_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_date']

    @property
    def age(self) -> int:
        today = date.today()
        dob = self.date_of_birth
        return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))

    def __str__(self) -> str:
        return f"{self.full_name} ({self.mr_number})"


class Doctor(PersonNameMixin, VersionedModel):
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    specialization = models.CharField(max_length=100)
    contact_number = models.CharField(max_length=15, blank=True)
    email = models.EmailField(max_length=100, blank=True)
    license_number = models.CharField(max_length=50, blank=True)
    address = models.CharField(max_length=500, blank=True)
    consultation_fee = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0'))
    is_active = models.BooleanField(default=True, db_index=True)
    created_date = models.DateTimeField(default=timezone.now)
    updated_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['last_name', 'first_name']

    def __str__(self) -> str:
        return f"Dr. {self.full_name} ({self.specialization})"


class Nurse(PersonNameMixin, VersionedModel):
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    contact_number = models.CharField(max_length=15, blank=True)
    email = models.EmailField(max_length=100, blank=True)
    license_number = models.CharField(max_length=50, blank=True)
    department = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_date = models.DateTimeField(default=timezone.now)
    updated_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['last_name', 'first_name']

    def __str__(self) -> str:
        return self.full_name


class Appointment(VersionedModel):
    TYPE_CHOICES = [
        ('General', 'General'),
        ('Follow-up', 'Follow-up'),
        ('Emergency', 'Emergency'),
    ]
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        ('Scheduled', 'Scheduled'),
        ('Confirmed', 'Confirmed'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
        ('No-Show', 'No-Show'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    doctor = models.ForeignKey(Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    nurse = models.ForeignKey(Nurse, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    appointment_date = models.DateTimeField()
    appointment_type = models.CharField(max_length=50, choices=TYPE_CHOICES, default='General')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED)
    reason = models.CharField(max_length=500, blank=True)
    notes = models.CharField(max_length=1000, blank=True)
    consultation_fee = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0'))
    sms_sent = models.BooleanField(default=False)
    whatsapp_sent = models.BooleanField(default=False)
    created_date = models.DateTimeField(default=timezone.now)
    updated_date = models.DateTimeField(null=True, blank=True)
    created_by = models.CharField(max_length=150, blank=True)

    class Meta:
        ordering = ['-appointment_date']
        indexes = [
            models.Index(fields=['appointment_date'], name='core_appt_date_idx'),
            models.Index(fields=['patient', 'appointment_date'], name='core_appt_patient_date_idx'),
        ]

    def __str__(self) -> str:
        return f"Appointment #{self.pk} {self.patient_id} @ {self.appointment_date:%Y-%m-%d %H:%M}"


class Procedure(VersionedModel):
    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        ('Scheduled', 'Scheduled'),
        ('In Progress', 'In Progress'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='procedures')
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='procedures')
    nurse = models.ForeignKey(Nurse, null=True, blank=True, on_delete=models.SET_NULL, related_name='procedures')
    procedure_name = models.CharField(max_length=100)
    procedure_type = models.CharField(max_length=50)
    procedure_date = models.DateTimeField(default=timezone.now)
    treatment_notes = models.CharField(max_length=2000, blank=True)
    prescription = models.CharField(max_length=2000, blank=True)
    procedure_fee = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Scheduled')
    created_date = models.DateTimeField(default=timezone.now)
    updated_date = models.DateTimeField(null=True, blank=True)
    created_by = models.CharField(max_length=150, blank=True)

    class Meta:
        ordering = ['-procedure_date']

    def __str__(self) -> str:
        return self.procedure_name


class LabTestCategory(VersionedModel):
    category_name = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['category_name']
        verbose_name_plural = 'lab test categories'

    def __str__(self) -> str:
        return self.category_name


class LabTest(VersionedModel):
    STATUS_PENDING = 'Pending'
    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Sample Collected', 'Sample Collected'),
        ('In Progress', 'In Progress'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='lab_tests')
    category = models.ForeignKey(LabTestCategory, on_delete=models.PROTECT, related_name='lab_tests')
    procedure = models.ForeignKey(Procedure, null=True, blank=True, on_delete=models.SET_NULL, related_name='lab_tests')
    test_name = models.CharField(max_length=100)
    test_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    assigned_to_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='assigned_lab_tests'
    )
    test_fee = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0'))
    report_file_path = models.CharField(max_length=500, blank=True)
    report_notes = models.CharField(max_length=2000, blank=True)
    created_date = models.DateTimeField(default=timezone.now)
    updated_date = models.DateTimeField(null=True, blank=True)
    created_by = models.CharField(max_length=150, blank=True)

    class Meta:
        ordering = ['-test_date']

    def __str__(self) -> str:
        return self.test_name


class Transaction(VersionedModel):
    TYPE_APPOINTMENT = 'Appointment'
    TYPE_LAB_TEST = 'LabTest'
    TYPE_PROCEDURE = 'Procedure'
    TYPE_OTHER = 'Other'
    TYPE_CHOICES = [
        ('Appointment', 'Appointment'),
        ('LabTest', 'Lab Test'),
        ('Procedure', 'Procedure'),
        ('Pharmacy', 'Pharmacy'),
        ('Other', 'Other'),
    ]
    PAYMENT_MODE_CHOICES = [
        ('Cash', 'Cash'),
        ('Bank', 'Bank'),
        ('Card', 'Card'),
        ('Online', 'Online'),
    ]
    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Completed', 'Completed'),
        ('Refunded', 'Refunded'),
        ('Cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='transactions')
    transaction_type = models.CharField(max_length=50, choices=TYPE_CHOICES, default=TYPE_OTHER)
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='transactions')
    procedure = models.ForeignKey(Procedure, null=True, blank=True, on_delete=models.SET_NULL, related_name='transactions')
    lab_test = models.ForeignKey(LabTest, null=True, blank=True, on_delete=models.SET_NULL, related_name='transactions')
    description = models.CharField(max_length=500)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    payment_mode = models.CharField(max_length=20, choices=PAYMENT_MODE_CHOICES)
    reference_number = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_COMPLETED, db_index=True)
    transaction_date = models.DateTimeField(default=timezone.now)
    invoice_generated = models.BooleanField(default=False)
    invoice_path = models.CharField(max_length=500, blank=True)
    payment_confirmation_sent = models.BooleanField(default=False)
    created_date = models.DateTimeField(default=timezone.now)
    created_by = models.CharField(max_length=150, blank=True)
    # every item settled by a "bill all" payment; the FKs above hold only the first of each kind
    billed_appointments = models.ManyToManyField(Appointment, blank=True, related_name='billed_transactions')
    billed_procedures = models.ManyToManyField(Procedure, blank=True, related_name='billed_transactions')
    billed_lab_tests = models.ManyToManyField(LabTest, blank=True, related_name='billed_transactions')

    class Meta:
        ordering = ['-transaction_date']
        indexes = [
            models.Index(fields=['transaction_date'], name='core_txn_date_idx'),
            models.Index(fields=['patient', 'status'], name='core_txn_patient_status_idx'),
        ]

    def __str__(self) -> str:
        return f"Transaction #{self.pk} {self.amount} ({self.status})"


class Prescription(VersionedModel):
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='prescriptions')
    # PROTECT blocks a plain doctor delete; force delete nulls this column first
    doctor = models.ForeignKey(Doctor, null=True, blank=True, on_delete=models.PROTECT, related_name='prescriptions')
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='prescriptions')
    procedure = models.ForeignKey(Procedure, null=True, blank=True, on_delete=models.SET_NULL, related_name='prescriptions')
    prescription_details = models.CharField(max_length=2000)
    instructions = models.CharField(max_length=1000, blank=True)
    prescription_date = models.DateTimeField(default=timezone.now)
    created_date = models.DateTimeField(default=timezone.now)
    created_by = models.CharField(max_length=150, blank=True)

    class Meta:
        ordering = ['-prescription_date']

    def __str__(self) -> str:
        return f"Prescription #{self.pk} for {self.patient_id}"


class DoctorSchedule(VersionedModel):
    DAY_CHOICES = [
        ('Monday', 'Monday'),
        ('Tuesday', 'Tuesday'),
        ('Wednesday', 'Wednesday'),
        ('Thursday', 'Thursday'),
        ('Friday', 'Friday'),
        ('Saturday', 'Saturday'),
        ('Sunday', 'Sunday'),
    ]
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='schedules')
    day_of_week = models.CharField(max_length=20, choices=DAY_CHOICES)
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_available = models.BooleanField(default=True)
    created_date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['doctor_id', 'day_of_week', 'start_time']

    def __str__(self) -> str:
        return f"{self.doctor_id} {self.day_of_week} {self.start_time}-{self.end_time}"


class AuditEvent(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='core_audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='core_audit_object_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.object_type}#{self.object_id}"
