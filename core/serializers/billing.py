from rest_framework import serializers

from core.models import Appointment, LabTest, Patient, Procedure, Transaction
from core.serializers.base import ClinicModelSerializer, pk_field


class TransactionSerializer(ClinicModelSerializer):
    """Payment record.

    ``amount``, ``description`` and ``transaction_type`` may be left out on
    create; they are derived from the billed items.
    """
    patient = pk_field(Patient.objects.all(), 'patient')
    appointment = pk_field(Appointment.objects.all(), 'appointment', required=False)
    procedure = pk_field(Procedure.objects.all(), 'procedure', required=False)
    lab_test = pk_field(LabTest.objects.all(), 'lab test', required=False)
    amount = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, max_length=500)
    transaction_type = serializers.ChoiceField(choices=Transaction.TYPE_CHOICES, required=False, allow_blank=True)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    mr_number = serializers.CharField(source='patient.mr_number', read_only=True)

    class Meta:
        model = Transaction
        fields = [
            'id', 'patient', 'patient_name', 'mr_number', 'transaction_type', 'appointment', 'procedure',
            'lab_test', 'description', 'amount', 'payment_mode', 'reference_number', 'status',
            'transaction_date', 'invoice_generated', 'invoice_path', 'payment_confirmation_sent',
            'created_date', 'created_by', 'row_version',
        ]
        read_only_fields = [
            'invoice_generated', 'invoice_path', 'payment_confirmation_sent', 'created_date', 'created_by',
        ]

    def validate(self, attrs):
        if self.instance is not None:
            if 'amount' in attrs and attrs['amount'] is None:
                raise serializers.ValidationError({'amount': ['Amount is required.']})
            if 'description' in attrs and not attrs['description']:
                raise serializers.ValidationError({'description': ['Description is required.']})
            if 'transaction_type' in attrs and not attrs['transaction_type']:
                attrs['transaction_type'] = Transaction.TYPE_OTHER
        return attrs
