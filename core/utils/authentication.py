from typing import Optional, Tuple
from django.conf import settings
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieJWTAuthentication(JWTAuthentication):
    """Authenticates with a bearer token from the Authorization header, or the JWT access token stored in an HttpOnly cookie"""

    def authenticate(self, request: Request) -> Optional[Tuple[object, object]]:
        if self.get_header(request) is not None:
            return super().authenticate(request)
        cookie_name = getattr(settings, 'JWT_ACCESS_COOKIE_NAME', 'access_token')
        raw = request.COOKIES.get(cookie_name)
        if not raw:
            return None
        validated = self.get_validated_token(raw)
        return self.get_user(validated), validated
