"""
Dashboard aggregates for the admin landing page.
"""
from __future__ import annotations

from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import ExtractMonth
from django.utils import timezone

from core.models import Appointment, LabTest, Patient, Procedure, Transaction

MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def total_lab_reports() -> int:
    return LabTest.objects.filter(status=LabTest.STATUS_COMPLETED).exclude(report_file_path='').count()


def total_revenue() -> Decimal:
    total = Transaction.objects.filter(status=Transaction.STATUS_COMPLETED).aggregate(s=Sum('amount'))['s']
    return total or Decimal('0')


def monthly_revenue(year: int) -> dict[str, Decimal]:
    """Completed revenue per month, always Jan..Dec."""
    rows = (Transaction.objects
            .filter(status=Transaction.STATUS_COMPLETED, transaction_date__year=year)
            .annotate(month=ExtractMonth('transaction_date'))
            .values('month')
            .annotate(revenue=Sum('amount'))
            .order_by('month'))
    by_month = {row['month']: row['revenue'] for row in rows}
    return {name: by_month.get(i, Decimal('0')) or Decimal('0') for i, name in enumerate(MONTH_NAMES, start=1)}


def today_appointments() -> list[dict]:
    today = timezone.localdate()
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(today, time.min), tz)
    end = start + timedelta(days=1)
    qs = (Appointment.objects.select_related('patient', 'doctor')
          .filter(appointment_date__gte=start, appointment_date__lt=end)
          .order_by('appointment_date'))
    return [{
        'id': a.id,
        'patientName': a.patient.full_name,
        'doctorName': a.doctor.full_name if a.doctor else 'Not Assigned',
        'appointmentDate': a.appointment_date.isoformat(),
        'status': a.status,
        'appointmentType': a.appointment_type,
    } for a in qs]


def dashboard_summary(year: int | None = None) -> dict:
    year = year or timezone.localdate().year
    return {
        'totalAppointments': Appointment.objects.count(),
        'totalPatients': Patient.objects.count(),
        'totalProcedures': Procedure.objects.count(),
        'totalLabReports': total_lab_reports(),
        'totalRevenue': total_revenue(),
        'year': year,
        'monthlyRevenue': monthly_revenue(year),
        'todayAppointments': today_appointments(),
    }
