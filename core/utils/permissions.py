from rest_framework.permissions import SAFE_METHODS, BasePermission
from auth_app.models import Profile, role_of


class IsInstructor(BasePermission):
    message = 'Forbidden: only instructors can manage quizzes.'

    def has_permission(self, request, view):
        # anonymous requests are reported as 401 by DRF
        if not request.user or not request.user.is_authenticated:
            return False
        return role_of(request.user) == Profile.Role.INSTRUCTOR


class IsInstructorOrReadOnly(IsInstructor):
    """Any authenticated user may read; writes need the instructor role"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)
