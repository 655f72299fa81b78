import logging
from typing import Optional

from core.utils import exceptions as errors
from course_app.services import get_course
from payment_app.models import Payment
from payment_app.services.gateway import GatewayConfig, build_gateway, now_ms

logger = logging.getLogger(__name__)


class OrderService:
    """
    Creates gateway orders for course purchases.

    The amount always comes from the course record. A Payment row in status
    'created' is stored for every order so verification can promote it.
    """

    def __init__(self, gateway=None, config: Optional[GatewayConfig] = None):
        self.config = config or GatewayConfig.from_settings()
        self.gateway = gateway or build_gateway(self.config)

    def create_order(self, course_id, user) -> dict:
        course = get_course(course_id)
        if course.is_free:
            raise errors.InvalidPriceError()

        currency = course.currency or self.config.currency
        receipt = f'rcpt_{now_ms()}'
        notes = {'courseId': str(course.pk), 'userId': str(user.pk)}
        order = self.gateway.create_order(course.price, currency, receipt, notes)

        Payment.objects.create(
            user=user,
            course=course,
            gateway_order_id=order['id'],
            amount=course.price,
            currency=currency,
            status=Payment.Status.CREATED,
            receipt=receipt,
        )
        logger.info('Order %s created for course %s by user %s', order['id'], course.pk, user.pk)
        return order
