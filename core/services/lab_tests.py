"""
Lab test services: creation defaults, report uploads and category rules.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.exceptions import DeleteBlocked, InvalidUpload, RecordNotFound
from core.models import LabTest, LabTestCategory
from core.services.audit import actor_name, log_action

logger = logging.getLogger(__name__)

REPORT_DIR = 'uploads/labreports'
CATEGORY_IN_USE_MESSAGE = 'Cannot delete category. It has associated lab tests. Please deactivate it instead.'

_unsafe_chars = re.compile(r'[^A-Za-z0-9._-]+')


def create_lab_test(data: dict, *, user=None) -> LabTest:
    """New lab tests always start as ``Pending`` regardless of the submitted status."""
    data = dict(data)
    data.pop('row_version', None)
    data['status'] = LabTest.STATUS_PENDING
    lab_test = LabTest.objects.create(created_by=actor_name(user), **data)
    log_action(user=user, action='lab_test_create', object_type='lab_test', object_id=lab_test.id)
    return lab_test


def safe_filename(name: str) -> str:
    base = os.path.basename(name or '').strip()
    base = _unsafe_chars.sub('_', base)
    return base or 'report'


def validate_report_file(upload) -> str:
    """Return the lower-case extension or raise :class:`InvalidUpload`."""
    if upload is None or not getattr(upload, 'size', 0):
        raise InvalidUpload('Please select a file to upload.')
    max_bytes = settings.LAB_REPORT_MAX_MB * 1024 * 1024
    if upload.size > max_bytes:
        raise InvalidUpload(f'File size exceeds {settings.LAB_REPORT_MAX_MB}MB limit.')
    ext = Path(upload.name or '').suffix.lower()
    allowed = settings.LAB_REPORT_ALLOWED_EXTENSIONS
    if ext not in allowed:
        raise InvalidUpload(f"Invalid file type. Allowed types: {', '.join(allowed)}")
    return ext


def upload_report(lab_test_id: int, upload, *, notes: str | None = None, user=None) -> LabTest:
    """Store a report file for the lab test and mark the test completed."""
    lab_test = LabTest.objects.filter(pk=lab_test_id).first()
    if lab_test is None:
        raise RecordNotFound(f'Lab Test with ID {lab_test_id} not found.')
    validate_report_file(upload)

    folder = Path(settings.MEDIA_ROOT) / REPORT_DIR
    folder.mkdir(parents=True, exist_ok=True)
    stamp = timezone.localtime().strftime('%Y%m%d%H%M%S')
    file_name = f'{lab_test.id}_{stamp}_{safe_filename(upload.name)}'
    with open(folder / file_name, 'wb') as fh:
        for chunk in upload.chunks():
            fh.write(chunk)

    relative_path = f'{REPORT_DIR}/{file_name}'
    now = timezone.now()
    LabTest.objects.filter(pk=lab_test.pk).update(
        report_file_path=relative_path,
        report_notes=notes or '',
        status=LabTest.STATUS_COMPLETED,
        updated_date=now,
        row_version=F('row_version') + 1,
    )
    lab_test.refresh_from_db()
    logger.info('lab report %s stored for lab test %s (%s bytes)', relative_path, lab_test.id, upload.size)
    log_action(user=user, action='lab_report_upload', object_type='lab_test', object_id=lab_test.id,
               detail={'path': relative_path})
    return lab_test


def active_categories():
    return LabTestCategory.objects.filter(is_active=True).order_by('category_name')


def delete_category(category_id: int, *, user=None) -> str:
    with transaction.atomic():
        category = LabTestCategory.objects.filter(pk=category_id).first()
        if category is None:
            raise RecordNotFound(f'Lab Test Category with ID {category_id} not found.')
        if category.lab_tests.exists():
            raise DeleteBlocked(CATEGORY_IN_USE_MESSAGE)
        category.delete()
    log_action(user=user, action='lab_test_category_delete', object_type='lab_test_category', object_id=category_id)
    return 'Lab test category deleted successfully!'
