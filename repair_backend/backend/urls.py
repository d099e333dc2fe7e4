"""
PROJECT URLS

Everything is mounted under /api/:
- /api/auth/...    JWT pair + refresh, current user, admin-only registration
- /api/ledger/...  transactions, expenditures, supplier payments, summary,
                   admin resets, live event stream
- /api/health/     public DB health check
- /api/docs/       Swagger UI (drf-spectacular)

The Django admin path comes from settings.ADMIN_PATH (default "admin/").
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import admin
from django.db import connection
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema, inline_serializer
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from ledger.events import get_broadcaster

logger = logging.getLogger("django")

API_LINKS = {
    "auth": {
        "jwt_create": "/api/auth/jwt/create/",
        "jwt_refresh": "/api/auth/jwt/refresh/",
        "me": "/api/auth/me/",
        "register": "/api/auth/register/",
    },
    "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
    "ledger": {
        "transactions": "/api/ledger/transactions/",
        "expenditures": "/api/ledger/expenditures/",
        "supplier_summary": "/api/ledger/expenditures/supplier-summary/",
        "supplier_payments": "/api/ledger/supplier-payments/",
        "events": "/api/ledger/events/",
    },
}

HealthSerializer = inline_serializer(
    name="Health",
    fields={
        "status": serializers.CharField(),
        "db": serializers.CharField(),
        "event_subscribers": serializers.IntegerField(),
    },
)


@extend_schema(responses={200: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response({"message": "Repair Shop Backend API is running", **API_LINKS})


@extend_schema(responses={200: HealthSerializer, 503: HealthSerializer})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    body = {"status": "ok", "db": "ok", "event_subscribers": get_broadcaster().subscriber_count}
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except OperationalError:
        logger.exception("Health check: database unreachable")
        body.update(status="degraded", db="down")
        return Response(body, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(body)


ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Auth
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("auth/", include("users.urls")),
    # Supplier ledger
    path("ledger/", include("ledger.api.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
