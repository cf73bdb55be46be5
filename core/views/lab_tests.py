"""
Lab tests, report uploads and lab test categories.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import LabTest, LabTestCategory
from core.serializers.clinical import LabReportUploadSerializer, LabTestCategorySerializer, LabTestSerializer
from core.services import lab_tests as lab_service
from core.services.audit import log_action
from core.views.common import delete_instance, get_or_404, list_query, paginate, update_from_request


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def lab_tests(request):
    if request.method == 'GET':
        params = list_query(request)
        qs = LabTest.objects.select_related('patient', 'category')
        for key in ('patient', 'category'):
            value = request.query_params.get(key)
            if value and value.isdigit():
                qs = qs.filter(**{f'{key}_id': int(value)})
        if request.query_params.get('status'):
            qs = qs.filter(status=request.query_params['status'])
        if params.get('q'):
            q = params['q']
            qs = (qs.filter(test_name__icontains=q) | qs.filter(patient__first_name__icontains=q)
                  | qs.filter(patient__last_name__icontains=q) | qs.filter(patient__mr_number__icontains=q))
        qs = qs.order_by('-test_date')
        return Response(LabTestSerializer(paginate(qs, params), many=True).data)

    s = LabTestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    lab_test = lab_service.create_lab_test(s.validated_data, user=request.user)
    return Response(LabTestSerializer(lab_test).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def lab_test_detail(request, pk: int):
    lab_test = get_or_404(LabTest, pk)
    if request.method == 'GET':
        return Response(LabTestSerializer(lab_test).data)
    if request.method == 'DELETE':
        return delete_instance(request, lab_test, action='lab_test_delete', message='Lab test deleted successfully!')
    return update_from_request(request, LabTestSerializer, lab_test, action='lab_test_update')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def lab_test_report(request, pk: int):
    s = LabReportUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    lab_test = lab_service.upload_report(
        pk, s.validated_data['report_file'], notes=s.validated_data.get('notes'), user=request.user
    )
    return Response({'ok': True, 'message': 'Report uploaded successfully!', 'labTest': LabTestSerializer(lab_test).data})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def categories(request):
    if request.method == 'GET':
        qs = LabTestCategory.objects.order_by('category_name')
        return Response(LabTestCategorySerializer(qs, many=True).data)

    s = LabTestCategorySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    data.pop('row_version', None)
    category = LabTestCategory.objects.create(**data)
    log_action(user=request.user, action='lab_test_category_create', object_type='lab_test_category',
               object_id=category.id)
    return Response(LabTestCategorySerializer(category).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def active_categories(request):
    return Response(LabTestCategorySerializer(lab_service.active_categories(), many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def category_detail(request, pk: int):
    category = get_or_404(LabTestCategory, pk)
    if request.method == 'GET':
        data = LabTestCategorySerializer(category).data
        data['labTestCount'] = category.lab_tests.count()
        return Response(data)
    if request.method == 'DELETE':
        message = lab_service.delete_category(category.id, user=request.user)
        return Response({'ok': True, 'message': message})
    return update_from_request(request, LabTestCategorySerializer, category, action='lab_test_category_update')

