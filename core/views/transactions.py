"""
Billing endpoints: transactions, unpaid items per patient and invoices.
"""
from __future__ import annotations

from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import Patient, Transaction
from core.serializers.billing import TransactionSerializer
from core.services import billing, invoices
from core.views.common import delete_instance, get_or_404, list_query, paginate, update_from_request


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def transactions(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = Transaction.objects.select_related('patient')
        value = request.query_params.get('patient')
        if value and value.isdigit():
            qs = qs.filter(patient_id=int(value))
        if request.query_params.get('status'):
            qs = qs.filter(status=request.query_params['status'])
        if params.get('q'):
            q = params['q']
            qs = (qs.filter(description__icontains=q) | qs.filter(patient__first_name__icontains=q)
                  | qs.filter(patient__last_name__icontains=q) | qs.filter(patient__mr_number__icontains=q)
                  | qs.filter(reference_number__icontains=q))
        qs = qs.order_by('-transaction_date')
        return Response(TransactionSerializer(paginate(qs, params), many=True).data)

    s = TransactionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    txn = billing.create_transaction(s.validated_data, user=request.user)
    return Response(TransactionSerializer(txn).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_records(request, patient_id: int):
    """Unpaid appointments, procedures and lab tests of a patient."""
    patient = get_or_404(Patient, patient_id)
    data = billing.unpaid_items_for_patient(patient.id).as_dict()
    data['patientName'] = patient.full_name
    data['mrNumber'] = patient.mr_number
    return Response(data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def transaction_detail(request, pk: int):
    txn = get_or_404(Transaction, pk)
    if request.method == 'GET':
        return Response(TransactionSerializer(txn).data)
    if request.method == 'DELETE':
        return delete_instance(request, txn, action='transaction_delete', message='Transaction deleted successfully!')
    return update_from_request(request, TransactionSerializer, txn, action='transaction_update')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def transaction_invoice(request, pk: int):
    path = invoices.generate_invoice(pk, user=request.user)
    return Response({'ok': True, 'message': 'Invoice generated successfully!', 'invoicePath': path})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transaction_invoice_download(request, pk: int):
    path = invoices.invoice_file(pk)
    inline = path.suffix.lower() in ('.html', '.htm')
    return FileResponse(open(path, 'rb'), as_attachment=not inline, filename=path.name)
