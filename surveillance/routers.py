"""
URL mappings for the reporting API.

Trailing slashes are omitted; ``APPEND_SLASH`` is disabled in settings.
"""
from django.urls import path

from .views import health
from .views import statistics

STATISTICS = 'api/test-results/my/statistics/'

urlpatterns = [
    path('api/health', health.healthz),
    path(STATISTICS + 'positive-negative', statistics.positive_negative),
    path(STATISTICS + 'positive-by-age-groups', statistics.positive_by_age),
    path(STATISTICS + 'positive-by-pathogens', statistics.positive_by_pathogen),
    path(STATISTICS + 'positive-trends-by-pathogens', statistics.positive_trends),
    path(STATISTICS + 'pathogens-by-age-groups', statistics.pathogens_by_age),
    path(STATISTICS + 'pathogen-distribution-by-scope', statistics.distribution_by_scope),
]
