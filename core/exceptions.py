"""
Clinic domain exceptions and the unified API exception handler.

Every error leaving the API has the shape::

    {"ok": false, "error": {"code": "...", "message": ...}}

Serializer validation errors keep their field map as ``message`` so a
form can show each message next to its input.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError
from django.db.models import ProtectedError, RestrictedError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

CONCURRENCY_MESSAGE = 'Another user modified this record. Please reload and try again.'
GENERIC_ERROR_MESSAGE = 'An unexpected error occurred. Please try again.'


class ClinicError(Exception):
    code = 'clinic_error'
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, extra: dict | None = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class RecordNotFound(ClinicError):
    code = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND


class ConcurrencyConflict(ClinicError):
    code = 'concurrency_conflict'
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = CONCURRENCY_MESSAGE, **kwargs):
        super().__init__(message, **kwargs)


class DeleteBlocked(ClinicError):
    """Raised when dependent rows prevent a delete; ``extra`` holds the dependency report."""
    code = 'delete_blocked'
    status_code = status.HTTP_409_CONFLICT


class InvoiceUnavailable(ClinicError):
    code = 'invoice_unavailable'
    status_code = status.HTTP_404_NOT_FOUND


class InvalidUpload(ClinicError):
    code = 'invalid_upload'


def _error(code: str, message, status_code: int, extra: dict | None = None) -> Response:
    body = {'ok': False, 'error': {'code': code, 'message': message}}
    if extra:
        body['error'].update(extra)
    return Response(body, status=status_code)


def api_exception_handler(exc, context):
    if isinstance(exc, ClinicError):
        return _error(exc.code, exc.message, exc.status_code, exc.extra)
    if isinstance(exc, (ProtectedError, RestrictedError)):
        return _error(
            'delete_blocked',
            'This record cannot be deleted because other records reference it.',
            status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, IntegrityError):
        logger.warning('integrity error in %s: %s', _view_name(context), exc)
        return _error('integrity_error', 'The change conflicts with existing data.', status.HTTP_409_CONFLICT)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', _view_name(context), exc_info=exc)
        return _error('server_error', GENERIC_ERROR_MESSAGE, 500)
    if isinstance(exc, ValidationError):
        return _error('validation_error', resp.data, resp.status_code)
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return _error('api_error', detail, resp.status_code)


def _view_name(context) -> str:
    request = (context or {}).get('request')
    return getattr(request, 'path', None) or 'unknown view'
