"""
Invoice rendering.

Invoices are static HTML files (printable to PDF from a browser) written
under ``MEDIA_ROOT/invoices``.  Each generation writes a new file and
points the transaction at it; earlier files are left on disk.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path

from django.conf import settings
from django.db.models import F
from django.template.loader import render_to_string
from django.utils import timezone

from core.exceptions import InvoiceUnavailable, RecordNotFound
from core.models import Transaction
from core.services.audit import log_action
from core.services.billing import appointment_line

logger = logging.getLogger(__name__)

INVOICE_DIR = 'invoices'


def money(amount: Decimal | None) -> str:
    return f'{settings.CLINIC_CURRENCY} {Decimal(amount or 0):,.2f}'


def invoice_number(transaction_id: int) -> str:
    return f'INV-{transaction_id:05d}'


def _billed(related, single) -> list:
    items = list(related)
    if not items and single is not None:
        items = [single]
    return items


def _charges(txn: Transaction) -> list[dict]:
    """One line per billed item; a "bill all" payment lists every item it settled."""
    charges = []
    for a in _billed(txn.billed_appointments.select_related('doctor'), txn.appointment):
        charges.append({'description': appointment_line(a), 'amount': money(a.consultation_fee)})
    for p in _billed(txn.billed_procedures.all(), txn.procedure):
        charges.append({'description': f'Procedure: {p.procedure_name}', 'amount': money(p.procedure_fee)})
    for t in _billed(txn.billed_lab_tests.all(), txn.lab_test):
        charges.append({'description': f'Lab Test: {t.test_name}', 'amount': money(t.test_fee)})
    if not charges:
        charges.append({'description': txn.description, 'amount': money(txn.amount)})
    return charges


def render_invoice(txn: Transaction, *, generated_at=None) -> str:
    generated_at = timezone.localtime(generated_at or timezone.now())
    patient = txn.patient
    context = {
        'clinic_name': settings.CLINIC_NAME,
        'clinic_address_lines': settings.CLINIC_ADDRESS_LINES,
        'clinic_contact': settings.CLINIC_CONTACT,
        'invoice_number': invoice_number(txn.id),
        'generated_at': generated_at,
        'patient_name': patient.full_name if patient else 'N/A',
        'mr_number': patient.mr_number if patient else 'N/A',
        'charges': _charges(txn),
        'txn': txn,
        'transaction_date': timezone.localtime(txn.transaction_date),
        'total': money(txn.amount),
    }
    return render_to_string('core/invoice.html', context)


def _media_root() -> Path:
    return Path(settings.MEDIA_ROOT)


def generate_invoice(transaction_id: int, *, user=None) -> str:
    """Write a fresh invoice file and return its path relative to ``MEDIA_ROOT``."""
    txn = (Transaction.objects
           .select_related('patient', 'appointment__doctor', 'procedure', 'lab_test')
           .filter(pk=transaction_id).first())
    if txn is None:
        raise RecordNotFound('Transaction not found.')

    now = timezone.localtime()
    folder = _media_root() / INVOICE_DIR
    folder.mkdir(parents=True, exist_ok=True)
    # microseconds keep two generations within the same second apart
    file_name = f'invoice_{txn.id}_{now:%Y%m%d%H%M%S%f}.html'
    (folder / file_name).write_text(render_invoice(txn, generated_at=now), encoding='utf-8')

    relative_path = f'{INVOICE_DIR}/{file_name}'
    Transaction.objects.filter(pk=txn.pk).update(
        invoice_generated=True, invoice_path=relative_path, row_version=F('row_version') + 1
    )
    logger.info('invoice %s written for transaction %s', relative_path, txn.id)
    log_action(user=user, action='invoice_generate', object_type='transaction', object_id=txn.id,
               detail={'path': relative_path})
    return relative_path


def invoice_file(transaction_id: int) -> Path:
    """Resolve the stored invoice of a transaction on disk."""
    txn = Transaction.objects.filter(pk=transaction_id).first()
    if txn is None:
        raise RecordNotFound('Transaction not found.')
    if not txn.invoice_generated or not txn.invoice_path:
        raise InvoiceUnavailable('Invoice has not been generated for this transaction.')
    root = _media_root().resolve()
    path = (root / txn.invoice_path.lstrip('/')).resolve()
    if root not in path.parents or not path.is_file():
        logger.warning('invoice file missing for transaction %s: %s', txn.id, txn.invoice_path)
        raise InvoiceUnavailable('Invoice file not found. Please regenerate the invoice.')
    return path
