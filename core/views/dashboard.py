"""
Dashboard endpoint: record totals, revenue and today's appointments.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.services.dashboard import dashboard_summary


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    year = request.query_params.get('year')
    year = int(year) if year and year.isdigit() else None
    return Response(dashboard_summary(year))
