"""
Test-result statistics for the signed-in doctor.

All endpoints are read only and answer with the usual
``{'ok': True, 'data': ...}`` envelope.  Query parameters are validated by
the serializers in :mod:`surveillance.serializers.statistics`; invalid
input yields a 400 through the project exception handler.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from surveillance.permissions import IsReportViewer
from surveillance.serializers.statistics import (
    GeoStatisticsQuerySerializer,
    ScopeDistributionQuerySerializer,
    StatisticsQuerySerializer,
    TrendsQuerySerializer,
)
from surveillance.services.aggregates import (
    pathogen_distribution_by_scope,
    positive_by_age_groups,
    positive_by_pathogens,
    positive_negative_counts,
    positive_pathogens_by_age_groups,
)
from surveillance.services.audience import Audience
from surveillance.services.trends import positive_trends_by_pathogens

logger = logging.getLogger(__name__)


def _query(serializer_class, request):
    ser = serializer_class(data=request.query_params)
    ser.is_valid(raise_exception=True)
    return ser


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsReportViewer])
def positive_negative(request):
    """Positive and negative result counts of the current doctor."""
    filters = _query(StatisticsQuerySerializer, request).to_filter()
    data = positive_negative_counts(Audience.doctor(request.user.id), filters)
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsReportViewer])
def positive_by_age(request):
    filters = _query(StatisticsQuerySerializer, request).to_filter()
    data = positive_by_age_groups(Audience.doctor(request.user.id), filters)
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsReportViewer])
def positive_by_pathogen(request):
    filters = _query(StatisticsQuerySerializer, request).to_filter()
    data = positive_by_pathogens(Audience.doctor(request.user.id), filters)
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsReportViewer])
def positive_trends(request):
    """Gap-filled positive counts per period, for the doctor or every doctor.

    ``allDoctors=true`` widens the audience to the whole country; the
    region/city filters still apply.
    """
    ser = _query(TrendsQuerySerializer, request)
    all_doctors = ser.validated_data['allDoctors']
    audience = Audience.for_doctor(None if all_doctors else request.user.id)
    data = positive_trends_by_pathogens(audience, ser.to_filter(), ser.validated_data['period'])
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsReportViewer])
def pathogens_by_age(request):
    """Pathogen x age group counts over all doctors' results."""
    filters = _query(GeoStatisticsQuerySerializer, request).to_filter()
    data = positive_pathogens_by_age_groups(Audience.country(), filters)
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsReportViewer])
def distribution_by_scope(request):
    """Pathogen shares for the doctor, their district, region and country."""
    ser = _query(ScopeDistributionQuerySerializer, request)
    v = ser.validated_data
    data = pathogen_distribution_by_scope(
        request.user.id,
        ser.to_filter(),
        region_id=v.get('regionId'),
        city_id=v.get('cityId'),
    )
    logger.debug('scope distribution for user %s: %s', request.user.id, {k: len(rows) for k, rows in data.items()})
    return Response({'ok': True, 'data': data})
