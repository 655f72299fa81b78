"""
Payment verification and course enrollment.

A verified payment and the enrollment it buys are committed together or not at
all. Verification is idempotent on the gateway payment id: replaying a callback
returns the stored payment and writes nothing.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction

from core.utils import exceptions as errors
from course_app.models import Course
from course_app.services import enroll_student, get_course
from payment_app.models import Payment
from payment_app.services.gateway import GatewayConfig, build_gateway, signature_matches

logger = logging.getLogger(__name__)

ALREADY_PROCESSED = 'Payment already processed'
VERIFIED = 'Payment verified and course unlocked'


@dataclass
class VerificationResult:
    payment: Payment
    created: bool
    message: str


class PaymentVerifier:

    def __init__(self, gateway=None, config: Optional[GatewayConfig] = None):
        self.config = config or GatewayConfig.from_settings()
        self.gateway = gateway or build_gateway(self.config)

    def verify(self, payment_id: str, order_id: str, signature: str, course_id, user,
               raw: Optional[dict] = None) -> VerificationResult:
        existing = self._find(payment_id)
        if existing is not None:
            logger.info('Payment %s already processed', payment_id)
            return VerificationResult(existing, False, ALREADY_PROCESSED)

        course = get_course(course_id)
        self._check_signature(order_id, payment_id, signature)
        amount = self._settled_amount(order_id, course)

        try:
            payment = self._commit(payment_id, order_id, signature, course, user, amount, raw)
        except IntegrityError:
            # lost a race against a concurrent callback for the same payment
            existing = self._find(payment_id)
            if existing is None:
                logger.exception('Payment transaction failed for %s', payment_id)
                raise errors.TransactionError()
            return VerificationResult(existing, False, ALREADY_PROCESSED)
        except DatabaseError as exc:
            logger.exception('Payment transaction failed for %s', payment_id)
            raise errors.TransactionError() from exc

        logger.info('Payment %s committed, user %s enrolled in course %s', payment_id, user.pk, course.pk)
        return VerificationResult(payment, True, VERIFIED)

    def _find(self, payment_id: str) -> Optional[Payment]:
        return Payment.objects.filter(gateway_payment_id=payment_id).first()

    def _check_signature(self, order_id: str, payment_id: str, signature: str) -> None:
        secret = self.config.key_secret
        if not secret:
            if not self.config.dev_mode:
                raise errors.GatewayUnavailableError()
            logger.warning('Payment secret not configured, skipping signature check for %s', payment_id)
            return
        if not signature_matches(secret, order_id, payment_id, signature):
            logger.warning('Signature mismatch for order %s payment %s', order_id, payment_id)
            raise errors.SignatureError()

    def _settled_amount(self, order_id: str, course: Course) -> int:
        """Amount captured by the gateway order, falling back to the course price"""
        amount = self.gateway.fetch_order_amount(order_id)
        if amount:
            return amount
        return course.price

    def _commit(self, payment_id, order_id, signature, course, user, amount, raw) -> Payment:
        with transaction.atomic():
            locked = Course.objects.select_for_update().get(pk=course.pk)
            payment = (
                Payment.objects.select_for_update()
                .filter(
                    gateway_order_id=order_id,
                    user=user,
                    course=locked,
                    status=Payment.Status.CREATED,
                )
                .first()
            )
            if payment is None:
                payment = Payment(user=user, course=locked, gateway_order_id=order_id)
            payment.gateway_payment_id = payment_id
            payment.gateway_signature = signature or ''
            payment.amount = amount
            payment.currency = locked.currency or self.config.currency
            payment.status = Payment.Status.PAID
            payment.raw = raw
            payment.save()
            enroll_student(locked, user)
        return payment
