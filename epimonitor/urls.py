"""
URL configuration for the epidemiological reporting backend.

The `urlpatterns` list routes URLs to views.  This module includes
the Django admin, the API routes provided by the surveillance app and
the Prometheus metrics endpoint.  OpenAPI documentation is exposed at
``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Epidemiological Reporting API",
    default_version='v1',
    description="Test-result statistics for doctors and administrators.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    # Django admin site, used by administrators to maintain reference data
    path('admin/', admin.site.urls),
    path('', include('surveillance.routers')),
    path('', include('django_prometheus.urls')),
    # Swagger and ReDoc
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
