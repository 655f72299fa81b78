import pytest
from django.db import DatabaseError
from core.utils import exceptions as errors
from payment_app.models import Payment
from payment_app.services import verification
from payment_app.services.gateway import (
    STUB_ORDER_PREFIX,
    GatewayConfig,
    UnavailableGateway,
    compute_signature,
    signature_matches,
)
from payment_app.services.orders import OrderService
from payment_app.services.verification import ALREADY_PROCESSED, PaymentVerifier

SECRET = 'test_secret'
CONFIG = GatewayConfig(key_id='rzp_test_key', key_secret=SECRET, currency='INR', dev_mode=False)


class FakeGateway:
    """In-memory gateway: fixed order ids and a configurable settled amount"""
    available = True

    def __init__(self, amount=None):
        self.amount = amount
        self.orders = []

    def create_order(self, amount, currency, receipt, notes):
        order = {'id': f'order_test_{len(self.orders) + 1}', 'amount': amount, 'currency': currency,
                 'receipt': receipt, 'notes': notes, 'status': 'created'}
        self.orders.append(order)
        return order

    def fetch_order_amount(self, order_id):
        return self.amount


def _verify(verifier, course, user, payment_id='pay_1', order_id='order_test_1', signature=None):
    if signature is None:
        signature = compute_signature(SECRET, order_id, payment_id)
    return verifier.verify(payment_id, order_id, signature, str(course.id), user, raw={'amount': 1})


def test_signature_matches_only_exact_digest():
    good = compute_signature(SECRET, 'order_1', 'pay_1')
    assert signature_matches(SECRET, 'order_1', 'pay_1', good)
    assert not signature_matches(SECRET, 'order_1', 'pay_2', good)
    assert not signature_matches('other', 'order_1', 'pay_1', good)
    assert not signature_matches(SECRET, 'order_1', 'pay_1', None)


def test_signature_with_non_ascii_characters_is_a_mismatch():
    assert not signature_matches(SECRET, 'order_1', 'pay_1', 'sigé')
    assert not signature_matches(SECRET, 'order_1', 'pay_1', compute_signature(SECRET, 'order_1', 'pay_1') + 'é')


@pytest.mark.django_db
def test_create_order_uses_course_price_and_records_payment(course, student):
    gateway = FakeGateway()
    order = OrderService(gateway, CONFIG).create_order(str(course.id), student)
    assert order['amount'] == course.price
    assert order['receipt'].startswith('rcpt_')
    assert order['notes'] == {'courseId': str(course.id), 'userId': str(student.id)}
    payment = Payment.objects.get()
    assert payment.status == Payment.Status.CREATED
    assert payment.gateway_order_id == order['id']
    assert payment.amount == course.price


@pytest.mark.django_db
def test_create_order_rejects_free_course(course, student):
    course.price = 0
    course.save()
    with pytest.raises(errors.InvalidPriceError):
        OrderService(FakeGateway(), CONFIG).create_order(str(course.id), student)
    assert Payment.objects.count() == 0


@pytest.mark.django_db
def test_create_order_unknown_course(student):
    with pytest.raises(errors.NotFoundError):
        OrderService(FakeGateway(), CONFIG).create_order('00000000-0000-0000-0000-000000000000', student)


@pytest.mark.django_db
def test_stub_orders_only_in_dev_mode(course, student):
    dev = GatewayConfig(dev_mode=True)
    order = OrderService(UnavailableGateway(dev), dev).create_order(str(course.id), student)
    assert order['id'].startswith(STUB_ORDER_PREFIX)
    assert order['status'] == 'created'

    prod = GatewayConfig(dev_mode=False)
    with pytest.raises(errors.GatewayUnavailableError):
        OrderService(UnavailableGateway(prod), prod).create_order(str(course.id), student)


@pytest.mark.django_db
def test_verify_promotes_order_and_enrolls(course, student):
    gateway = FakeGateway()
    OrderService(gateway, CONFIG).create_order(str(course.id), student)
    result = _verify(PaymentVerifier(gateway, CONFIG), course, student)
    assert result.created is True
    assert Payment.objects.count() == 1
    payment = Payment.objects.get()
    assert payment.status == Payment.Status.PAID
    assert payment.gateway_payment_id == 'pay_1'
    assert course.students.filter(pk=student.pk).exists()


@pytest.mark.django_db
def test_verify_replay_writes_nothing(course, student):
    verifier = PaymentVerifier(FakeGateway(), CONFIG)
    first = _verify(verifier, course, student)
    second = _verify(verifier, course, student)
    assert second.created is False
    assert second.message == ALREADY_PROCESSED
    assert second.payment.pk == first.payment.pk
    assert Payment.objects.filter(gateway_payment_id='pay_1').count() == 1
    assert course.students.filter(pk=student.pk).count() == 1


@pytest.mark.django_db
def test_verify_bad_signature_writes_nothing(course, student):
    with pytest.raises(errors.SignatureError):
        _verify(PaymentVerifier(FakeGateway(), CONFIG), course, student, signature='0' * 64)
    assert not Payment.objects.filter(status=Payment.Status.PAID).exists()
    assert not course.students.exists()


@pytest.mark.django_db
def test_verify_unknown_course(course, student):
    class Missing:
        id = '11111111-1111-1111-1111-111111111111'
    with pytest.raises(errors.NotFoundError):
        _verify(PaymentVerifier(FakeGateway(), CONFIG), Missing, student)


@pytest.mark.django_db
def test_verify_amount_comes_from_gateway_order(course, student):
    result = _verify(PaymentVerifier(FakeGateway(amount=12345), CONFIG), course, student)
    assert result.payment.amount == 12345


@pytest.mark.django_db
def test_verify_amount_falls_back_to_course_price(course, student):
    result = _verify(PaymentVerifier(FakeGateway(amount=None), CONFIG), course, student)
    assert result.payment.amount == course.price


@pytest.mark.django_db
def test_missing_secret_skips_check_only_in_dev_mode(course, student):
    dev = GatewayConfig(dev_mode=True)
    result = _verify(PaymentVerifier(FakeGateway(), dev), course, student, signature='anything')
    assert result.created is True

    prod = GatewayConfig(dev_mode=False)
    with pytest.raises(errors.GatewayUnavailableError):
        _verify(PaymentVerifier(FakeGateway(), prod), course, student, payment_id='pay_2', signature='anything')


@pytest.mark.django_db
def test_verify_rolls_back_when_enrollment_fails(course, student, monkeypatch):
    def broken(course, user):
        raise DatabaseError('roster unavailable')

    monkeypatch.setattr(verification, 'enroll_student', broken)
    with pytest.raises(errors.TransactionError):
        _verify(PaymentVerifier(FakeGateway(), CONFIG), course, student)
    assert not Payment.objects.filter(gateway_payment_id='pay_1').exists()
    assert not course.students.exists()


@pytest.mark.django_db
def test_verify_race_on_payment_id_returns_stored_payment(course, student, monkeypatch):
    """A concurrent callback stored the payment between lookup and commit"""
    stored = Payment.objects.create(
        user=student, course=course, gateway_order_id='order_test_1',
        gateway_payment_id='pay_1', amount=course.price, status=Payment.Status.PAID,
    )
    verifier = PaymentVerifier(FakeGateway(), CONFIG)
    real_find = verifier._find
    calls = []

    def find_after_race(payment_id):
        calls.append(payment_id)
        return None if len(calls) == 1 else real_find(payment_id)

    monkeypatch.setattr(verifier, '_find', find_after_race)
    result = _verify(verifier, course, student)
    assert result.created is False
    assert result.payment.pk == stored.pk
    assert Payment.objects.filter(gateway_payment_id='pay_1').count() == 1
