"""Serializers for appointments, procedures, lab tests and prescriptions."""
from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.models import (
    Appointment, Doctor, LabTest, LabTestCategory, Nurse, Patient, Prescription, Procedure,
)
from core.serializers.base import ClinicModelSerializer, pk_field

INACTIVE_DOCTOR_MESSAGE = 'Selected doctor does not exist or is not active.'


class AppointmentSerializer(ClinicModelSerializer):
    patient = pk_field(Patient.objects.all(), 'patient')
    doctor = pk_field(Doctor.objects.all(), 'doctor', required=False, message=INACTIVE_DOCTOR_MESSAGE)
    nurse = pk_field(Nurse.objects.all(), 'nurse', required=False)
    appointment_date = serializers.DateTimeField(required=False)
    consultation_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.full_name', read_only=True, allow_null=True)
    nurse_name = serializers.CharField(source='nurse.full_name', read_only=True, allow_null=True)

    class Meta:
        model = Appointment
        fields = [
            'id', 'patient', 'patient_name', 'doctor', 'doctor_name', 'nurse', 'nurse_name',
            'appointment_date', 'appointment_type', 'status', 'reason', 'notes', 'consultation_fee',
            'sms_sent', 'whatsapp_sent', 'created_date', 'updated_date', 'created_by', 'row_version',
        ]
        read_only_fields = ['sms_sent', 'whatsapp_sent', 'created_date', 'updated_date', 'created_by']

    def validate_doctor(self, doctor):
        # an appointment may keep a doctor who has since been deactivated
        if doctor is None or doctor.is_active:
            return doctor
        if self.instance is not None and self.instance.doctor_id == doctor.id:
            return doctor
        raise serializers.ValidationError(INACTIVE_DOCTOR_MESSAGE)


class ProcedureSerializer(ClinicModelSerializer):
    patient = pk_field(Patient.objects.all(), 'patient')
    doctor = pk_field(Doctor.objects.all(), 'doctor')
    nurse = pk_field(Nurse.objects.all(), 'nurse', required=False)
    procedure_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.full_name', read_only=True)
    nurse_name = serializers.CharField(source='nurse.full_name', read_only=True, allow_null=True)

    class Meta:
        model = Procedure
        fields = [
            'id', 'patient', 'patient_name', 'doctor', 'doctor_name', 'nurse', 'nurse_name',
            'procedure_name', 'procedure_type', 'procedure_date', 'treatment_notes', 'prescription',
            'procedure_fee', 'status', 'created_date', 'updated_date', 'created_by', 'row_version',
        ]
        read_only_fields = ['created_date', 'updated_date', 'created_by']


class LabTestCategorySerializer(ClinicModelSerializer):
    class Meta:
        model = LabTestCategory
        fields = ['id', 'category_name', 'description', 'is_active', 'created_date', 'row_version']
        read_only_fields = ['created_date']


class LabTestSerializer(ClinicModelSerializer):
    patient = pk_field(Patient.objects.all(), 'patient')
    category = pk_field(LabTestCategory.objects.all(), 'category')
    procedure = pk_field(Procedure.objects.all(), 'procedure', required=False)
    assigned_to_user = pk_field(get_user_model().objects.all(), 'user', required=False)
    test_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    category_name = serializers.CharField(source='category.category_name', read_only=True)

    class Meta:
        model = LabTest
        fields = [
            'id', 'patient', 'patient_name', 'category', 'category_name', 'procedure', 'test_name',
            'test_date', 'status', 'assigned_to_user', 'test_fee', 'report_file_path', 'report_notes',
            'created_date', 'updated_date', 'created_by', 'row_version',
        ]
        read_only_fields = ['report_file_path', 'created_date', 'updated_date', 'created_by']


class LabReportUploadSerializer(serializers.Serializer):
    report_file = serializers.FileField(error_messages={'required': 'Please select a file to upload.'})
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class PrescriptionSerializer(ClinicModelSerializer):
    patient = pk_field(Patient.objects.all(), 'patient')
    doctor = pk_field(Doctor.objects.all(), 'doctor')
    appointment = pk_field(Appointment.objects.all(), 'appointment', required=False)
    procedure = pk_field(Procedure.objects.all(), 'procedure', required=False)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.full_name', read_only=True, allow_null=True)

    class Meta:
        model = Prescription
        fields = [
            'id', 'patient', 'patient_name', 'doctor', 'doctor_name', 'appointment', 'procedure',
            'prescription_details', 'instructions', 'prescription_date', 'created_date', 'created_by',
            'row_version',
        ]
        read_only_fields = ['created_date', 'created_by']

    def validate(self, attrs):
        patient = attrs.get('patient', getattr(self.instance, 'patient', None))
        for name in ('appointment', 'procedure'):
            linked = attrs.get(name)
            if linked is not None and patient is not None and linked.patient_id != patient.id:
                raise serializers.ValidationError({name: [f'Selected {name} does not belong to this patient.']})
        return attrs
