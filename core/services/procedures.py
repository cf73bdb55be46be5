"""
Procedure services.

Lab tests, transactions and prescriptions that reference a procedure
are treated as blocking: deleting the procedure would silently detach
billing and clinical history, so it must be forced explicitly.
"""
from __future__ import annotations

import logging

from django.db import transaction

from core.exceptions import DeleteBlocked, RecordNotFound
from core.models import LabTest, Prescription, Procedure, Transaction
from core.services.audit import log_action
from core.services.dependencies import DeleteReport

logger = logging.getLogger(__name__)


def procedure_delete_report(procedure: Procedure) -> DeleteReport:
    report = DeleteReport(entity='procedure')
    report.add(procedure.lab_tests.count(), 'Lab Test(s)', cascade=False)
    report.add(procedure.transactions.count(), 'Transaction(s)', cascade=False)
    report.add(procedure.prescriptions.count(), 'Prescription(s)', cascade=False)
    return report


def check_procedure_delete(procedure_id: int) -> DeleteReport:
    procedure = Procedure.objects.filter(pk=procedure_id).first()
    if procedure is None:
        raise RecordNotFound(f'Procedure with ID {procedure_id} not found.')
    return procedure_delete_report(procedure)


def delete_procedure(procedure_id: int, *, force: bool = False, user=None) -> str:
    with transaction.atomic():
        procedure = Procedure.objects.select_for_update().filter(pk=procedure_id).first()
        if procedure is None:
            raise RecordNotFound(f'Procedure with ID {procedure_id} not found.')
        report = procedure_delete_report(procedure)
        if not report.can_delete and not force:
            logger.info('refused to delete procedure %s: %s', procedure_id, report.blocking_records)
            raise DeleteBlocked(report.message, extra=report.as_dict())

        if force:
            LabTest.objects.filter(procedure_id=procedure_id).update(procedure=None)
            Transaction.objects.filter(procedure_id=procedure_id).update(procedure=None)
            Prescription.objects.filter(procedure_id=procedure_id).update(procedure=None)
            logger.warning('force deleting procedure %s, cleared %s', procedure_id, report.blocking_records)
        procedure.delete()

    log_action(user=user, action='procedure_force_delete' if force else 'procedure_delete',
               object_type='procedure', object_id=procedure_id,
               detail={'blocking': report.blocking_records})
    return 'Procedure force deleted successfully!' if force else 'Procedure deleted successfully!'
