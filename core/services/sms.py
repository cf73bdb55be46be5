"""
Outbound SMS through Twilio.

Credentials come from ``TWILIO_ACCOUNT_SID``, ``TWILIO_AUTH_TOKEN`` and
``TWILIO_FROM_PHONE_NUMBER``.  Local numbers are normalised to E.164
using ``SMS_DEFAULT_COUNTRY_CODE`` (Pakistan by default).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

logger = logging.getLogger(__name__)

# Twilio accepted the message; delivery to unverified numbers on trial accounts may still fail later
ACCEPTED_STATUSES = {'queued', 'sending', 'sent', 'delivered'}


@dataclass
class SmsResult:
    success: bool
    sid: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None


def format_phone_number(phone: str, country_code: str | None = None) -> str:
    country_code = country_code or settings.SMS_DEFAULT_COUNTRY_CODE
    phone = (phone or '').strip()
    if phone.startswith('+'):
        return phone
    digits = ''.join(ch for ch in phone if ch.isdigit())
    if digits.startswith(country_code):
        return f'+{digits}'
    if digits.startswith('0'):
        return f'+{country_code}{digits[1:]}'
    if len(digits) == 10:
        return f'+{country_code}{digits}'
    return f'+{digits}'


def is_configured() -> bool:
    return bool(settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_FROM_PHONE_NUMBER)


def get_client() -> Client:
    return Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)


def send_sms(to: str, body: str) -> SmsResult:
    if not is_configured():
        logger.warning('SMS not sent: Twilio credentials are not configured')
        return SmsResult(success=False, error='SMS service is not configured.')

    number = format_phone_number(to)
    logger.debug('sending SMS to %s (%s chars)', number, len(body))
    try:
        message = get_client().messages.create(to=number, from_=settings.TWILIO_FROM_PHONE_NUMBER, body=body)
    except TwilioException as exc:
        logger.error('Twilio rejected SMS to %s: %s', number, exc)
        return SmsResult(success=False, error=str(exc))

    status = str(message.status or '').lower()
    logger.info('SMS sid=%s to=%s status=%s error_code=%s', message.sid, number, status, message.error_code)
    if message.error_code:
        return SmsResult(success=False, sid=message.sid, status=status,
                         error=message.error_message or f'Twilio error {message.error_code}')
    if status in ACCEPTED_STATUSES:
        return SmsResult(success=True, sid=message.sid, status=status)
    return SmsResult(success=False, sid=message.sid, status=status, error=f'Unexpected message status: {status}')
