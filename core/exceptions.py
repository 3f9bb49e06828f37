import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ValidationError(exceptions.ValidationError):
    """Bad input: missing field, out-of-range quantity, disallowed unit or date."""


class NotFoundError(exceptions.NotFound):
    """Referenced distributor/product/order/bill/payment is absent."""


class ConflictError(exceptions.APIException):
    """State-guard violation, e.g. editing a delivered order or a locked bill."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Request conflicts with the current state of the record.'
    default_code = 'conflict'


class AuthError(exceptions.AuthenticationFailed):
    """Missing, expired or invalid token."""


def error_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return error_message(value)
        return ''
    if isinstance(detail, list):
        return error_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every error as {"error": <message>, "detail": <original detail>}.
    Anything DRF does not know about is logged and surfaced as an opaque 500.
    """
    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else 'request')
        return Response({'error': 'Failed to process request'},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = response.data
    response.data = {'error': error_message(detail), 'detail': detail}
    return response
