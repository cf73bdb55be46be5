"""
Django admin registrations for the clinic models.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    Appointment,
    AuditEvent,
    Doctor,
    DoctorSchedule,
    LabTest,
    LabTestCategory,
    Nurse,
    Patient,
    Prescription,
    Procedure,
    Transaction,
    User,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'first_name', 'last_name', 'role', 'is_active')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'email', 'first_name', 'last_name')
    fieldsets = BaseUserAdmin.fieldsets + (('Clinic', {'fields': ('role', 'phone_number')}),)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('mr_number', 'first_name', 'last_name', 'gender', 'contact_number', 'created_date')
    list_filter = ('gender', 'city')
    search_fields = ('mr_number', 'first_name', 'last_name', 'contact_number', 'email')
    readonly_fields = ('mr_number', 'row_version')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('first_name', 'last_name', 'specialization', 'consultation_fee', 'is_active')
    list_filter = ('is_active', 'specialization')
    search_fields = ('first_name', 'last_name', 'specialization', 'license_number')


@admin.register(Nurse)
class NurseAdmin(admin.ModelAdmin):
    list_display = ('first_name', 'last_name', 'department', 'is_active')
    list_filter = ('is_active', 'department')
    search_fields = ('first_name', 'last_name', 'license_number')


@admin.register(DoctorSchedule)
class DoctorScheduleAdmin(admin.ModelAdmin):
    list_display = ('doctor', 'day_of_week', 'start_time', 'end_time', 'is_available')
    list_filter = ('day_of_week', 'is_available')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment_date', 'appointment_type', 'status', 'sms_sent')
    list_filter = ('status', 'appointment_type', 'sms_sent')
    search_fields = ('id', 'patient__mr_number', 'patient__last_name', 'doctor__last_name')
    date_hierarchy = 'appointment_date'


@admin.register(Procedure)
class ProcedureAdmin(admin.ModelAdmin):
    list_display = ('id', 'procedure_name', 'patient', 'doctor', 'procedure_date', 'status', 'procedure_fee')
    list_filter = ('status', 'procedure_type')
    search_fields = ('id', 'procedure_name', 'patient__mr_number')


@admin.register(LabTestCategory)
class LabTestCategoryAdmin(admin.ModelAdmin):
    list_display = ('category_name', 'is_active', 'created_date')
    list_filter = ('is_active',)
    search_fields = ('category_name',)


@admin.register(LabTest)
class LabTestAdmin(admin.ModelAdmin):
    list_display = ('id', 'test_name', 'patient', 'category', 'test_date', 'status', 'test_fee')
    list_filter = ('status', 'category')
    search_fields = ('id', 'test_name', 'patient__mr_number')


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'transaction_type', 'amount', 'payment_mode', 'status', 'invoice_generated')
    list_filter = ('status', 'transaction_type', 'payment_mode', 'invoice_generated')
    search_fields = ('id', 'patient__mr_number', 'reference_number', 'description')
    readonly_fields = ('invoice_path', 'row_version')
    raw_id_fields = ('billed_appointments', 'billed_procedures', 'billed_lab_tests')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'prescription_date')
    search_fields = ('id', 'patient__mr_number', 'doctor__last_name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'user', 'action', 'object_type', 'object_id')
    list_filter = ('action', 'object_type')
    search_fields = ('action', 'object_type', 'user__username')
    readonly_fields = ('created_at', 'user', 'action', 'object_type', 'object_id', 'detail')
