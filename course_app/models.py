import uuid
from django.conf import settings
from django.db import models


class Course(models.Model):
    """
    A purchasable course.

    Fields:
    - price: integer amount in minor currency units (paise); 0 means free.
    - video_links: ordered lesson URLs, also the item count for progress tracking.
    - students: enrollment roster; the implicit join table keeps (course, user) unique.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='created_courses',
    )
    price = models.PositiveIntegerField(default=0)
    currency = models.CharField(max_length=3, default='INR')
    video_links = models.JSONField(default=list, blank=True)
    students = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name='enrolled_courses',
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f'Course({self.id}): {self.title}'

    @property
    def is_free(self) -> bool:
        return not self.price or self.price <= 0
