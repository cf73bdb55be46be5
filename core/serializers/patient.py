from datetime import date

from rest_framework import serializers

from core.models import Patient
from core.serializers.base import ClinicModelSerializer, clean_text


class PatientSerializer(ClinicModelSerializer):
    full_name = serializers.CharField(read_only=True)
    age = serializers.IntegerField(read_only=True)

    class Meta:
        model = Patient
        fields = [
            'id', 'mr_number', 'first_name', 'last_name', 'full_name', 'contact_number',
            'alternate_contact', 'email', 'date_of_birth', 'age', 'gender', 'address', 'city',
            'state', 'postal_code', 'medical_history', 'allergies', 'created_date',
            'updated_date', 'row_version',
        ]
        read_only_fields = ['mr_number', 'created_date', 'updated_date']

    def validate_first_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('First Name is required.')
        return v

    def validate_last_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Last Name is required.')
        return v

    def validate_date_of_birth(self, v):
        if v > date.today():
            raise serializers.ValidationError('Date of birth cannot be in the future.')
        return v


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)
