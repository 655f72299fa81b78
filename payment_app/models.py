import uuid
from django.conf import settings
from django.db import models


class Payment(models.Model):
    """
    A course purchase tracked against the payment gateway.

    Fields:
    - gateway_order_id: order created before the user pays.
    - gateway_payment_id: the gateway's payment id, unique when set; this is the
      idempotency key of verification, so at most one row per payment can be paid.
    - amount: integer minor currency units (paise), fixed from the server-side
      price or the gateway order, never from the client.
    - raw: the callback body as received, for audits.

    Lifecycle: created (order step) -> paid (verification). failed/refunded are
    set manually or by external tooling.
    """
    class Status(models.TextChoices):
        CREATED = 'created', 'Created'
        PAID = 'paid', 'Paid'
        FAILED = 'failed', 'Failed'
        REFUNDED = 'refunded', 'Refunded'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='payments',
    )
    course = models.ForeignKey(
        'course_app.Course',
        on_delete=models.CASCADE,
        related_name='payments',
    )
    gateway_order_id = models.CharField(max_length=100, db_index=True)
    gateway_payment_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    gateway_signature = models.CharField(max_length=255, blank=True, default='')
    amount = models.PositiveIntegerField()
    currency = models.CharField(max_length=3, default='INR')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.CREATED)
    raw = models.JSONField(null=True, blank=True)
    receipt = models.CharField(max_length=100, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'course']),
        ]

    def __str__(self) -> str:
        return f'Payment({self.id}) User({self.user_id}) Course({self.course_id}): {self.status} {self.amount} {self.currency}'
