"""
Billing services: unpaid-item aggregation and transaction creation.

An appointment, procedure or lab test counts as paid once any
transaction with status ``Completed`` references it, either through its
foreign keys or through the items billed by a "bill all" payment.
Pending, cancelled and refunded transactions never settle an item.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from django.db import transaction as db_transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.models import Appointment, LabTest, Patient, Procedure, Transaction
from core.services.audit import actor_name, log_action

logger = logging.getLogger(__name__)

KIND_APPOINTMENT = 'Appointment'
KIND_PROCEDURE = 'Procedure'
KIND_LAB_TEST = 'LabTest'

MAX_DESCRIPTION = Transaction._meta.get_field('description').max_length


@dataclass
class BillableItem:
    kind: str
    id: int
    description: str
    amount: Decimal
    date: object = None

    def as_dict(self) -> dict:
        return {
            'id': self.id,
            'type': self.kind,
            'description': self.description,
            'amount': self.amount,
            'date': self.date.isoformat() if self.date else None,
        }


@dataclass
class UnpaidItems:
    patient_id: int
    appointments: list[BillableItem] = field(default_factory=list)
    procedures: list[BillableItem] = field(default_factory=list)
    lab_tests: list[BillableItem] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((i.amount for i in self.appointments + self.procedures + self.lab_tests), Decimal('0'))

    def is_empty(self) -> bool:
        return not (self.appointments or self.procedures or self.lab_tests)

    def as_dict(self) -> dict:
        return {
            'patientId': self.patient_id,
            'appointments': [i.as_dict() for i in self.appointments],
            'procedures': [i.as_dict() for i in self.procedures],
            'labTests': [i.as_dict() for i in self.lab_tests],
            'totalAmount': self.total_amount,
        }


@dataclass
class PaidIds:
    appointments: set[int]
    procedures: set[int]
    lab_tests: set[int]


def paid_item_ids() -> PaidIds:
    rows = Transaction.objects.filter(status=Transaction.STATUS_COMPLETED).values_list(
        'appointment_id', 'procedure_id', 'lab_test_id'
    )
    paid = PaidIds(set(), set(), set())
    for appointment_id, procedure_id, lab_test_id in rows:
        if appointment_id:
            paid.appointments.add(appointment_id)
        if procedure_id:
            paid.procedures.add(procedure_id)
        if lab_test_id:
            paid.lab_tests.add(lab_test_id)
    completed = {'transaction__status': Transaction.STATUS_COMPLETED}
    paid.appointments.update(
        Transaction.billed_appointments.through.objects.filter(**completed).values_list('appointment_id', flat=True))
    paid.procedures.update(
        Transaction.billed_procedures.through.objects.filter(**completed).values_list('procedure_id', flat=True))
    paid.lab_tests.update(
        Transaction.billed_lab_tests.through.objects.filter(**completed).values_list('labtest_id', flat=True))
    return paid


def _fmt_date(value) -> str:
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%d %b %Y')


def appointment_line(appointment: Appointment) -> str:
    doctor = appointment.doctor.full_name if appointment.doctor else 'N/A'
    return f'Appointment #{appointment.id} - {_fmt_date(appointment.appointment_date)} - Dr. {doctor}'


def unpaid_items_for_patient(patient_id: int, paid: Optional[PaidIds] = None) -> UnpaidItems:
    """Every appointment, procedure and lab test of the patient not yet settled."""
    paid = paid or paid_item_ids()
    result = UnpaidItems(patient_id=patient_id)

    appointments = (Appointment.objects.filter(patient_id=patient_id)
                    .exclude(id__in=paid.appointments).select_related('doctor').order_by('appointment_date', 'id'))
    for a in appointments:
        result.appointments.append(BillableItem(KIND_APPOINTMENT, a.id, appointment_line(a), a.consultation_fee, a.appointment_date))

    procedures = Procedure.objects.filter(patient_id=patient_id).exclude(id__in=paid.procedures).order_by('procedure_date', 'id')
    for p in procedures:
        result.procedures.append(BillableItem(KIND_PROCEDURE, p.id, p.procedure_name, p.procedure_fee, p.procedure_date))

    lab_tests = LabTest.objects.filter(patient_id=patient_id).exclude(id__in=paid.lab_tests).order_by('test_date', 'id')
    for t in lab_tests:
        result.lab_tests.append(BillableItem(KIND_LAB_TEST, t.id, t.test_name, t.test_fee, t.test_date))
    return result


def _single_kind_or_other(kinds: list[str]) -> Optional[str]:
    if len(kinds) == 1:
        return kinds[0]
    if len(kinds) > 1:
        return Transaction.TYPE_OTHER
    return None


def _check_not_paid(paid: PaidIds, appointment, procedure, lab_test) -> None:
    errors = []
    if appointment is not None and appointment.id in paid.appointments:
        errors.append(f'Appointment #{appointment.id} has already been paid.')
    if procedure is not None and procedure.id in paid.procedures:
        errors.append(f'Procedure #{procedure.id} has already been paid.')
    if lab_test is not None and lab_test.id in paid.lab_tests:
        errors.append(f'Lab Test #{lab_test.id} has already been paid.')
    if errors:
        raise ValidationError({'non_field_errors': errors})


def _check_ownership(patient: Patient, appointment, procedure, lab_test) -> None:
    errors = {}
    for name, obj in (('appointment', appointment), ('procedure', procedure), ('lab_test', lab_test)):
        if obj is not None and obj.patient_id != patient.id:
            errors[name] = [f'Selected {name.replace("_", " ")} does not belong to this patient.']
    if errors:
        raise ValidationError(errors)


def create_transaction(data: dict, *, user=None) -> Transaction:
    """Create a payment from validated serializer data.

    With no appointment/procedure/lab test selected, every unpaid item of
    the patient is billed: the first item of each kind is linked through the
    foreign keys and every billed item is recorded in the ``billed_*`` sets.
    With items selected, the amount is the sum of their fees.  A description
    supplied by the cashier is kept as is.
    """
    data = dict(data)
    data.pop('row_version', None)
    patient: Patient = data['patient']
    appointment = data.get('appointment')
    procedure = data.get('procedure')
    lab_test = data.get('lab_test')

    with db_transaction.atomic():
        paid = paid_item_ids()
        _check_ownership(patient, appointment, procedure, lab_test)
        _check_not_paid(paid, appointment, procedure, lab_test)

        calculated = Decimal('0')
        parts: list[str] = []
        kinds: list[str] = []
        billed: dict[str, list[int]] = {}
        if appointment is None and procedure is None and lab_test is None:
            unpaid = unpaid_items_for_patient(patient.id, paid)
            for items, kind, label, attr in (
                (unpaid.appointments, KIND_APPOINTMENT, 'Appointment(s)', 'appointment'),
                (unpaid.procedures, KIND_PROCEDURE, 'Procedure(s)', 'procedure'),
                (unpaid.lab_tests, KIND_LAB_TEST, 'Lab Test(s)', 'lab_test'),
            ):
                if not items:
                    continue
                calculated += sum((i.amount for i in items), Decimal('0'))
                parts.append(f'{len(items)} {label}')
                kinds.append(kind)
                data.pop(attr, None)
                data[f'{attr}_id'] = items[0].id
                billed[attr] = [i.id for i in items]
        else:
            if appointment is not None:
                calculated += appointment.consultation_fee
                parts.append(f'Appointment #{appointment.id} - {_fmt_date(appointment.appointment_date)}')
                kinds.append(KIND_APPOINTMENT)
            if procedure is not None:
                calculated += procedure.procedure_fee
                parts.append(f'Procedure: {procedure.procedure_name}')
                kinds.append(KIND_PROCEDURE)
            if lab_test is not None:
                calculated += lab_test.test_fee
                parts.append(f'Lab Test: {lab_test.test_name}')
                kinds.append(KIND_LAB_TEST)

        if calculated > 0:
            data['amount'] = calculated
            if not data.get('description') and parts:
                data['description'] = ('Payment for: ' + ', '.join(parts))[:MAX_DESCRIPTION]
            data['transaction_type'] = _single_kind_or_other(kinds) or data.get('transaction_type')
        if not data.get('transaction_type'):
            data['transaction_type'] = Transaction.TYPE_OTHER
        if data.get('amount') is None:
            raise ValidationError({'amount': ['Amount is required when there are no unpaid items to bill.']})
        if not data.get('description'):
            raise ValidationError({'description': ['Description is required.']})

        txn = Transaction.objects.create(created_by=actor_name(user), **data)
        if billed:
            txn.billed_appointments.set(billed.get('appointment', []))
            txn.billed_procedures.set(billed.get('procedure', []))
            txn.billed_lab_tests.set(billed.get('lab_test', []))

    logger.info('transaction %s created for patient %s amount=%s type=%s',
                txn.id, patient.id, txn.amount, txn.transaction_type)
    log_action(user=user, action='transaction_create', object_type='transaction', object_id=txn.id,
               detail={'amount': str(txn.amount), 'type': txn.transaction_type})
    return txn
