# PATH: ledger/api/views/events.py

"""
LEDGER EVENT STREAM

GET /api/ledger/events/
    - Server-Sent Events (text/event-stream), staff only
    - Token via Authorization header or ?token=<access> (EventSource)
    - First frame: `connected` -> client re-fetches summary/lists
    - Then one frame per committed mutation:
        transactionCreated | expenditureCreated | supplierPaymentCreated |
        dataCleared
    - `resync` frame when events were dropped for this client
    - Comment heartbeats while idle
"""

import json

from django.conf import settings
from django.http import StreamingHttpResponse
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.renderers import BaseRenderer
from rest_framework.views import APIView

from ledger.api.authentication import TOKEN_QUERY_PARAM, QueryParamJWTAuthentication
from ledger.events import get_broadcaster, stream_events
from users.permissions import IsStaff


class EventStreamRenderer(BaseRenderer):
    media_type = "text/event-stream"
    format = "txt"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        # Error bodies (401/403) still go out as JSON text.
        if isinstance(data, (bytes, str)):
            return data
        return json.dumps(data).encode(self.charset)


class LedgerEventStreamView(APIView):
    authentication_classes = [QueryParamJWTAuthentication]
    permission_classes = [IsStaff]
    renderer_classes = [EventStreamRenderer]

    @extend_schema(
        tags=["ledger"],
        parameters=[
            OpenApiParameter(
                name=TOKEN_QUERY_PARAM,
                type=str,
                required=False,
                description="JWT access token for clients that cannot send headers",
            )
        ],
        responses={(200, "text/event-stream"): str},
    )
    def get(self, request, *args, **kwargs):
        heartbeat = float(getattr(settings, "LEDGER_EVENT_HEARTBEAT_SECONDS", 15))
        response = StreamingHttpResponse(
            stream_events(get_broadcaster(), heartbeat=heartbeat),
            content_type="text/event-stream",
        )
        response["Cache-Control"] = "no-cache"
        response["X-Accel-Buffering"] = "no"
        return response
