import logging
from django.conf import settings # access Django settings for lifetimes/flags
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework.serializers import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView # DRF base API view
from rest_framework.request import Request
from rest_framework.response import Response # DRF HTTP response wrapper
from rest_framework import status # symbolic HTTP status codes
from rest_framework_simplejwt.tokens import RefreshToken # token issuer for JWTs
from rest_framework_simplejwt.exceptions import TokenError
from auth_app.api.serializers import RegisterSerializer, LoginSerializer
from auth_app.models import role_of

logger = logging.getLogger(__name__)


def _cookie_settings() -> dict:
    """Cookie names and security flags shared by login, refresh and logout"""
    return {
        'access_name': getattr(settings, 'JWT_ACCESS_COOKIE_NAME', 'access_token'),
        'refresh_name': getattr(settings, 'JWT_REFRESH_COOKIE_NAME', 'refresh_token'),
        'secure': getattr(settings, 'JWT_COOKIE_SECURE', True),
        'samesite': getattr(settings, 'JWT_COOKIE_SAMESITE', 'Lax'),
    }


def _lifetime_seconds(key: str, fallback: int) -> int:
    """Cookie max_age derived from the SIMPLE_JWT lifetimes"""
    lifetime = getattr(settings, 'SIMPLE_JWT', {}).get(key)
    return int(lifetime.total_seconds()) if lifetime else fallback


def issue_tokens_for(user) -> RefreshToken:
    """Creates a refresh token carrying the user's role; access tokens derived from it inherit the claim"""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = role_of(user)
    return refresh


class RegisterView(APIView):
    """
    API endpoint for registering a new user with a role (student or instructor).
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        """
        Handle POST requests to create a new user.
        """
        serializer = RegisterSerializer(data=request.data)  # init serializer with request data

        if serializer.is_valid():  # validate input
            user = serializer.save()  # create user + profile
            logger.info('Registered user %s as %s', user.id, role_of(user))
            return Response({'detail': 'User created successfully!'}, status=status.HTTP_201_CREATED)

        # return validation errors
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@method_decorator(csrf_exempt, name='dispatch')
class LoginView(APIView):
    """
    Handle user login and set JWT cookies.

    On success:
      - returns 200 with user payload (including role), the access token and a 'detail' message
      - sets 'access_token' and 'refresh_token' as HttpOnly cookies

    On failure:
      - returns 401 for invalid credentials
      - returns 500 for unexpected server errors
    """
    permission_classes = [AllowAny]
    # no SessionAuthentication, avoids CSRF 403 on POST
    authentication_classes = []

    def post(self, request: Request):
        """
        Validate credentials, generate JWT tokens, and set them in HttpOnly cookies.
        """
        serializer = LoginSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
            user = serializer.validated_data['user']

            refresh = issue_tokens_for(user)
            access = refresh.access_token

            response_data = {
                'detail': 'Login successfully!',
                'user': {
                    'id': user.id,
                    'username': user.username,
                    'email': user.email,
                    'role': refresh['role'],
                },
                # bearer clients that cannot use cookies read the token from the body
                'access': str(access),
            }
            resp = Response(response_data, status=status.HTTP_200_OK)

            cookies = _cookie_settings()
            resp.set_cookie(
                key=cookies['access_name'],
                value=str(access),
                max_age=_lifetime_seconds('ACCESS_TOKEN_LIFETIME', 300),
                secure=cookies['secure'],
                httponly=True,
                samesite=cookies['samesite'],
                path='/',
            )
            resp.set_cookie(
                key=cookies['refresh_name'],
                value=str(refresh),
                max_age=_lifetime_seconds('REFRESH_TOKEN_LIFETIME', 86400),
                secure=cookies['secure'],
                httponly=True,
                samesite=cookies['samesite'],
                path='/',
            )
            return resp

        except ValidationError as exc:
            # --- robust error extraction (list, dict, str) ---
            detail_obj = exc.detail

            if isinstance(detail_obj, list) and detail_obj:
                return Response({'detail': str(detail_obj[0])}, status=status.HTTP_401_UNAUTHORIZED)

            if isinstance(detail_obj, dict):
                for v in detail_obj.values():
                    if isinstance(v, list) and v:
                        return Response({'detail': str(v[0])}, status=status.HTTP_401_UNAUTHORIZED)
                    if isinstance(v, str):
                        return Response({'detail': v}, status=status.HTTP_401_UNAUTHORIZED)

            if isinstance(detail_obj, str):
                return Response({'detail': detail_obj}, status=status.HTTP_401_UNAUTHORIZED)

            return Response({'detail': 'Invalid credentials.'}, status=status.HTTP_401_UNAUTHORIZED)

        except Exception:
            logger.exception('Login failed unexpectedly')
            return Response({'detail': 'Internal server error.'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@method_decorator(csrf_exempt, name='dispatch')
class LogoutView(APIView):
    """
    Log the user out by clearing JWT cookies and blacklisting the refresh token.
    """

    authentication_classes = []
    permission_classes = []

    def post(self, request):
        """
        Steps:
          1) Check if the refresh cookie is present -> else 401.
          2) Blacklist the refresh token; an invalid or expired token is already unusable.
          3) Delete both cookies on the response and return 200 with detail.
        """
        cookies = _cookie_settings()

        refresh_token = request.COOKIES.get(cookies['refresh_name'])
        if not refresh_token:
            return Response(
                {'detail': 'Authentication credentials were not provided.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as exc:
            logger.info('Logout with unusable refresh token: %s', exc)

        resp = Response(
            {'detail': 'Log-Out successfully! All Tokens will be deleted. Refresh token is now invalid.'},
            status=status.HTTP_200_OK
        )
        resp.delete_cookie(key=cookies['access_name'], path='/', samesite=cookies['samesite'])
        resp.delete_cookie(key=cookies['refresh_name'], path='/', samesite=cookies['samesite'])
        return resp


@method_decorator(csrf_exempt, name='dispatch')
class TokenRefreshView(APIView):
    """
    Issue a new access token from the refresh token stored in an HttpOnly cookie.

    Behavior:
      - Requires the presence of the 'refresh_token' cookie.
      - Validates the refresh token and issues a new access token.
      - Sets the new 'access_token' cookie on the response.
      - Returns JSON body: {'detail': 'Token refreshed', 'access': '<new_access>'}.
      - Returns 401 if the refresh cookie is missing or invalid.
    """

    authentication_classes = []
    permission_classes = []

    def post(self, request):
        """
        POST: Refresh the access token using the refresh cookie.
        """
        cookies = _cookie_settings()

        refresh_token = request.COOKIES.get(cookies['refresh_name'])
        if not refresh_token:
            return Response(
                {'detail': 'Refresh token missing.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            new_access = RefreshToken(refresh_token).access_token
        except TokenError:
            return Response(
                {'detail': 'Invalid refresh token.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        resp = Response({'detail': 'Token refreshed', 'access': str(new_access)}, status=status.HTTP_200_OK)
        resp.set_cookie(
            key=cookies['access_name'],
            value=str(new_access),
            max_age=_lifetime_seconds('ACCESS_TOKEN_LIFETIME', 300),
            secure=cookies['secure'],
            httponly=True,
            samesite=cookies['samesite'],
            path='/',
        )
        return resp


class MeView(APIView):
    """
    Returns minimal info about the authenticated user, including the resolved role.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        u = request.user
        return Response(
            {'id': u.id, 'username': u.username, 'email': u.email, 'role': role_of(u)},
            status=status.HTTP_200_OK,
        )
