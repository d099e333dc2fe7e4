# ledger/api/authentication.py

"""
Browser EventSource cannot set an Authorization header, so the event stream
also accepts the access token as ?token=<jwt>.
The header still wins when both are present.
"""

from rest_framework_simplejwt.authentication import JWTAuthentication

TOKEN_QUERY_PARAM = "token"


class QueryParamJWTAuthentication(JWTAuthentication):
    def authenticate(self, request):
        if self.get_header(request) is not None:
            return super().authenticate(request)

        raw_token = request.query_params.get(TOKEN_QUERY_PARAM)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
