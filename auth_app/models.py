from django.conf import settings
from django.db import models


class Profile(models.Model):
    """
    Platform profile attached 1:1 to a Django user.

    Fields:
    - user: the auth user this profile belongs to.
    - role: student (default), instructor or admin; drives quiz authoring
      rights and answer redaction.
    """
    class Role(models.TextChoices):
        STUDENT = 'student', 'Student'
        INSTRUCTOR = 'instructor', 'Instructor'
        ADMIN = 'admin', 'Admin'

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile',
    )
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STUDENT)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f'Profile({self.user_id}): {self.role}'


PRIVILEGED_ROLES = (Profile.Role.INSTRUCTOR, Profile.Role.ADMIN)


def role_of(user) -> str:
    """Resolves the role of a user; superusers are admins, users without a profile are students"""
    if user is None or not getattr(user, 'is_authenticated', False):
        return Profile.Role.STUDENT.value
    if user.is_superuser:
        return Profile.Role.ADMIN.value
    profile = Profile.objects.filter(user_id=user.id).only('role').first()
    return profile.role if profile else Profile.Role.STUDENT.value
