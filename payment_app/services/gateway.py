"""
Payment gateway access.

GatewayConfig is read once per service construction from Django settings and
handed to the order and verification services. Without credentials the
gateway is an UnavailableGateway: it never talks to Razorpay, and it only
produces stub orders when dev mode is on. A configured gateway cannot produce
stubs at all.
"""
import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from typing import Optional

import razorpay
from razorpay.errors import BadRequestError, GatewayError, ServerError
import requests
from django.conf import settings

from core.utils import exceptions as errors

logger = logging.getLogger(__name__)

STUB_ORDER_PREFIX = 'order_stub_'
GATEWAY_FAILURES = (
    BadRequestError,
    GatewayError,
    ServerError,
    requests.RequestException,
)


@dataclass(frozen=True)
class GatewayConfig:
    key_id: str = ''
    key_secret: str = ''
    currency: str = 'INR'
    timeout: float = 10.0
    dev_mode: bool = False

    @property
    def has_credentials(self) -> bool:
        return bool(self.key_id and self.key_secret)

    @classmethod
    def from_settings(cls) -> 'GatewayConfig':
        return cls(
            key_id=getattr(settings, 'RAZORPAY_KEY_ID', '') or '',
            key_secret=getattr(settings, 'RAZORPAY_KEY_SECRET', '') or '',
            currency=getattr(settings, 'PAYMENT_CURRENCY', 'INR'),
            timeout=float(getattr(settings, 'PAYMENT_GATEWAY_TIMEOUT', 10)),
            dev_mode=bool(getattr(settings, 'PAYMENT_DEV_MODE', False)),
        )


def now_ms() -> int:
    return int(time.time() * 1000)


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """HMAC-SHA256 hex digest of '<order_id>|<payment_id>', as the gateway signs callbacks"""
    message = f'{order_id}|{payment_id}'.encode('utf-8')
    return hmac.new(secret.encode('utf-8'), message, hashlib.sha256).hexdigest()


def signature_matches(secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    """Constant-time comparison on bytes, so non-ASCII input is a plain mismatch"""
    expected = compute_signature(secret, order_id, payment_id).encode('utf-8')
    return hmac.compare_digest(expected, str(signature or '').encode('utf-8'))


class RazorpayGateway:
    """Gateway backed by the Razorpay API"""
    available = True

    def __init__(self, config: GatewayConfig, client: Optional[razorpay.Client] = None):
        self.config = config
        if client is None:
            client = razorpay.Client(auth=(config.key_id, config.key_secret))
            client.session.request = _with_timeout(client.session.request, config.timeout)
        self.client = client

    def create_order(self, amount: int, currency: str, receipt: str, notes: dict) -> dict:
        try:
            order = self.client.order.create(data={
                'amount': amount,
                'currency': currency,
                'receipt': receipt,
                'notes': notes,
            })
        except GATEWAY_FAILURES as exc:
            logger.error('Razorpay order creation failed: %s', exc)
            raise errors.GatewayUnavailableError('Could not create order with the payment gateway.') from exc
        logger.info('Razorpay order created: %s', order.get('id'))
        return order

    def fetch_order_amount(self, order_id: str) -> Optional[int]:
        """Authoritative amount of a gateway order, or None if it cannot be fetched"""
        try:
            order = self.client.order.fetch(order_id)
        except GATEWAY_FAILURES as exc:
            logger.warning('Failed to fetch order %s from Razorpay: %s', order_id, exc)
            return None
        amount = order.get('amount')
        logger.info('Fetched order %s from Razorpay, amount=%s', order_id, amount)
        return int(amount) if amount else None


class UnavailableGateway:
    """Gateway state when no credentials are configured"""
    available = False

    def __init__(self, config: GatewayConfig):
        self.config = config

    def create_order(self, amount: int, currency: str, receipt: str, notes: dict) -> dict:
        if not self.config.dev_mode:
            raise errors.GatewayUnavailableError()
        order = {
            'id': f'{STUB_ORDER_PREFIX}{now_ms()}',
            'amount': amount,
            'currency': currency,
            'receipt': receipt,
            'status': 'created',
        }
        logger.warning('Payment gateway not configured, returning stub order %s', order['id'])
        return order

    def fetch_order_amount(self, order_id: str) -> Optional[int]:
        return None


def _with_timeout(request, timeout: float):
    def wrapped(method, url, **kwargs):
        kwargs.setdefault('timeout', timeout)
        return request(method, url, **kwargs)
    return wrapped


def build_gateway(config: GatewayConfig):
    if config.has_credentials:
        return RazorpayGateway(config)
    return UnavailableGateway(config)
