"""
Patient services.

Medical record numbers have the form ``MR{year}{sequence:05d}`` with the
sequence restarting every calendar year.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from core.models import Patient
from core.services.audit import log_action

logger = logging.getLogger(__name__)


def next_mr_number(year: int | None = None) -> str:
    """Next free number for the year, based on the highest one issued so far."""
    year = year or timezone.localdate().year
    prefix = f'MR{year}'
    existing = Patient.objects.filter(mr_number__startswith=prefix).values_list('mr_number', flat=True)
    highest = 0
    for mr in existing:
        suffix = mr[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f'{prefix}{highest + 1:05d}'


def create_patient(data: dict, *, user=None) -> Patient:
    data = dict(data)
    data.pop('row_version', None)
    data.pop('mr_number', None)
    with transaction.atomic():
        patient = Patient.objects.create(mr_number=next_mr_number(), **data)
    logger.info('registered patient %s as %s', patient.id, patient.mr_number)
    log_action(user=user, action='patient_create', object_type='patient', object_id=patient.id,
               detail={'mr_number': patient.mr_number})
    return patient


def search_patients(q: str | None = None):
    qs = Patient.objects.all()
    if q:
        qs = (qs.filter(first_name__icontains=q) | qs.filter(last_name__icontains=q)
              | qs.filter(mr_number__icontains=q) | qs.filter(contact_number__icontains=q))
    return qs.order_by('-created_date')
