import logging

from django.db import transaction
from rest_framework.exceptions import APIException

from .exceptions import error_message

logger = logging.getLogger(__name__)


def run_bulk(ids, action):
    """
    Apply ``action(id)`` to every id, each in its own savepoint.

    A failing item is rolled back on its own and reported; the rest still
    go through. Returns a structured per-item outcome.
    """
    results = []
    for pk in ids:
        try:
            with transaction.atomic():
                action(pk)
        except APIException as exc:
            results.append({'id': pk, 'ok': False, 'error': error_message(exc.detail)})
        else:
            results.append({'id': pk, 'ok': True})
    succeeded = sum(1 for r in results if r['ok'])
    failed = len(results) - succeeded
    if failed:
        logger.info("Bulk operation: %s succeeded, %s failed", succeeded, failed)
    return {
        'succeeded': succeeded,
        'failed': failed,
        'message': f'{succeeded} succeeded, {failed} failed',
        'results': results,
    }
