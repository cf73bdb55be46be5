from decimal import Decimal
from pathlib import Path

import pytest

from core.exceptions import InvoiceUnavailable
from core.models import Transaction
from core.services import invoices
from core.services.billing import create_transaction


@pytest.fixture
def paid_appointment(make_patient, make_doctor, make_appointment, make_transaction):
    patient = make_patient()
    appointment = make_appointment(patient, make_doctor())
    return make_transaction(patient, appointment=appointment, amount=Decimal('1234'), reference_number='RCPT-7')


def test_money_and_invoice_number():
    assert invoices.money(Decimal('1234')) == 'PKR 1,234.00'
    assert invoices.money(None) == 'PKR 0.00'
    assert invoices.invoice_number(7) == 'INV-00007'


def test_render_contains_clinic_patient_and_total(paid_appointment):
    html = invoices.render_invoice(paid_appointment)
    patient = paid_appointment.patient
    assert 'MMGC Hospital' in html
    assert invoices.invoice_number(paid_appointment.id) in html
    assert patient.mr_number in html
    assert patient.full_name in html
    assert 'PKR 1,234.00' in html
    assert f'Appointment #{paid_appointment.appointment_id}' in html
    assert 'RCPT-7' in html


def test_bill_all_invoice_lists_every_billed_item(make_patient, make_doctor, make_appointment, make_procedure):
    patient = make_patient()
    doctor = make_doctor()
    first = make_appointment(patient, doctor)
    second = make_appointment(patient, doctor)
    make_procedure(patient, doctor, procedure_name='Suturing')

    txn = create_transaction({'patient': patient, 'payment_mode': 'Cash'})
    html = invoices.render_invoice(txn)
    assert f'Appointment #{first.id}' in html
    assert f'Appointment #{second.id}' in html
    assert 'Procedure: Suturing' in html
    assert 'PKR 8,000.00' in html


def test_description_is_used_when_no_items_linked(make_patient, make_transaction):
    txn = make_transaction(make_patient(), description='Pharmacy counter sale')
    html = invoices.render_invoice(txn)
    assert 'Pharmacy counter sale' in html


def test_generate_twice_keeps_both_files_and_latest_path(paid_appointment, media_root):
    first = invoices.generate_invoice(paid_appointment.id)
    second = invoices.generate_invoice(paid_appointment.id)

    assert first != second
    files = sorted(p.name for p in (Path(media_root) / 'invoices').iterdir())
    assert len(files) == 2
    txn = Transaction.objects.get(pk=paid_appointment.id)
    assert txn.invoice_generated is True
    assert txn.invoice_path == second
    assert txn.row_version == paid_appointment.row_version + 2


def test_invoice_file_requires_generation(paid_appointment):
    with pytest.raises(InvoiceUnavailable, match='Invoice has not been generated'):
        invoices.invoice_file(paid_appointment.id)


def test_invoice_file_missing_on_disk(paid_appointment, media_root):
    path = invoices.generate_invoice(paid_appointment.id)
    (Path(media_root) / path).unlink()
    with pytest.raises(InvoiceUnavailable, match='Please regenerate'):
        invoices.invoice_file(paid_appointment.id)


def test_invoice_endpoints(api, paid_appointment):
    resp = api.get(f'/api/transactions/{paid_appointment.id}/invoice/download')
    assert resp.status_code == 404
    assert resp.data['error']['code'] == 'invoice_unavailable'

    resp = api.post(f'/api/transactions/{paid_appointment.id}/invoice')
    assert resp.status_code == 200
    assert resp.data['invoicePath'].startswith('invoices/invoice_')

    resp = api.get(f'/api/transactions/{paid_appointment.id}/invoice/download')
    assert resp.status_code == 200
    assert resp['Content-Disposition'].startswith('inline')
    body = b''.join(resp.streaming_content)
    assert b'INV-' in body


def test_invoice_for_unknown_transaction(api):
    resp = api.post('/api/transactions/404/invoice')
    assert resp.status_code == 404
    assert resp.data['error']['message'] == 'Transaction not found.'
