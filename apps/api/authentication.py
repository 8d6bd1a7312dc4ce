# apps/api/authentication.py
"""
JWT authentication for API and browser clients.

An Authorization header always wins. Without one, the access token is read
from the httpOnly cookie the login view sets, so the web portal never has to
keep the token in JavaScript.
"""
from rest_framework_simplejwt.authentication import JWTAuthentication

ACCESS_TOKEN_COOKIE = 'srm_access'
REFRESH_TOKEN_COOKIE = 'srm_refresh'


class CookieJWTAuthentication(JWTAuthentication):

    def authenticate(self, request):
        if self.get_header(request) is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(ACCESS_TOKEN_COOKIE)
        if not raw_token:
            return None
        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
