"""Serializers for doctors, nurses and doctor schedules."""
from rest_framework import serializers

from core.models import Doctor, DoctorSchedule, Nurse
from core.serializers.base import ClinicModelSerializer, clean_text, pk_field


class DoctorSerializer(ClinicModelSerializer):
    full_name = serializers.CharField(read_only=True)
    consultation_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)

    class Meta:
        model = Doctor
        fields = [
            'id', 'first_name', 'last_name', 'full_name', 'specialization', 'contact_number',
            'email', 'license_number', 'address', 'consultation_fee', 'is_active',
            'created_date', 'updated_date', 'row_version',
        ]
        read_only_fields = ['created_date', 'updated_date']

    def validate_first_name(self, v):
        return clean_text(v)

    def validate_last_name(self, v):
        return clean_text(v)


class NurseSerializer(ClinicModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Nurse
        fields = [
            'id', 'first_name', 'last_name', 'full_name', 'contact_number', 'email',
            'license_number', 'department', 'is_active', 'created_date', 'updated_date', 'row_version',
        ]
        read_only_fields = ['created_date', 'updated_date']

    def validate_first_name(self, v):
        return clean_text(v)

    def validate_last_name(self, v):
        return clean_text(v)


class DoctorScheduleSerializer(ClinicModelSerializer):
    doctor = pk_field(Doctor.objects.all(), 'doctor')
    doctor_name = serializers.CharField(source='doctor.full_name', read_only=True)

    class Meta:
        model = DoctorSchedule
        fields = [
            'id', 'doctor', 'doctor_name', 'day_of_week', 'start_time', 'end_time',
            'is_available', 'created_date', 'row_version',
        ]
        read_only_fields = ['created_date']

    def validate(self, attrs):
        start = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'end_time': ['End time must be after start time.']})
        return attrs
