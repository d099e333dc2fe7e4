# users/views/auth.py

"""
STAFF REGISTRATION

Only admins create staff accounts; there is no public sign-up.
Token issuing lives in SimpleJWT (/api/auth/jwt/create/).
"""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsAdmin
from users.serializers import RegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = RegisterSerializer

    @extend_schema(
        request=RegisterSerializer,
        responses={201: UserSerializer},
        description="Register a new staff account (admin only)",
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info(
            "Staff account registered",
            extra={
                "username": user.username,
                "role": user.role,
                "registered_by": request.user.username,
            },
        )

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
