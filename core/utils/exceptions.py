import logging
from typing import Optional

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PlatformError(APIException):
    """Base class for domain errors raised by the service layer"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed.'
    default_code = 'error'


class ValidationError(PlatformError):
    """Malformed or missing input. 'index' is the 1-based position of an offending quiz question"""
    default_detail = 'Invalid input.'
    default_code = 'invalid'

    def __init__(self, detail=None, index: Optional[int] = None):
        super().__init__(detail)
        self.index = index


class NotFoundError(PlatformError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class ForbiddenError(PlatformError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'


class DuplicateError(PlatformError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'duplicate'


class SignatureError(PlatformError):
    default_detail = 'Invalid signature'
    default_code = 'invalid_signature'


class InvalidPriceError(PlatformError):
    default_detail = 'Course has no price set'
    default_code = 'invalid_price'


class PaymentRequiredError(PlatformError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = 'Course requires payment'
    default_code = 'payment_required'


class TransactionError(PlatformError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Transaction failed'
    default_code = 'transaction_failed'


class GatewayUnavailableError(PlatformError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Payment gateway is not configured.'
    default_code = 'gateway_unavailable'


def custom_exception_handler(exc, context):
    """
    Project-wide DRF exception handler.

    Known API exceptions are rendered by DRF; quiz validation errors also carry
    the 1-based question index. Anything else is logged and hidden behind a
    generic 500 so internals never leak to the client.
    """
    response = exception_handler(exc, context)
    if response is not None:
        index = getattr(exc, 'index', None)
        if index is not None and isinstance(response.data, dict):
            response.data['question'] = index
        return response

    view = context.get('view')
    logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'unknown view')
    return Response({'detail': 'Internal Server Error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
