import calendar
import datetime

from .exceptions import ValidationError


def _parse_date(value, field):
    try:
        return datetime.datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValidationError({field: 'Use the YYYY-MM-DD format.'})


def parse_date_range(params):
    """
    (start, end) from ``month``/``year`` or ``start_date``/``end_date`` query params.

    Either bound may be None. ``month`` and ``year`` take precedence and
    cover the whole calendar month.
    """
    month = params.get('month')
    year = params.get('year')
    if month or year:
        if not (month and year):
            raise ValidationError('Both month and year are required.')
        try:
            month, year = int(month), int(year)
            last_day = calendar.monthrange(year, month)[1]
        except (TypeError, ValueError, calendar.IllegalMonthError):
            raise ValidationError({'month': 'Invalid month or year.'})
        return datetime.date(year, month, 1), datetime.date(year, month, last_day)

    start = params.get('start_date')
    end = params.get('end_date')
    start = _parse_date(start, 'start_date') if start else None
    end = _parse_date(end, 'end_date') if end else None
    if start and end and start > end:
        raise ValidationError({'end_date': 'End date must not be before start date.'})
    return start, end


def parse_id(params, name):
    """Integer id from a query param, or None when it is absent."""
    value = params.get(name)
    if not value:
        return None
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: 'Must be a whole number.'})
    if value < 1:
        raise ValidationError({name: 'Must be a whole number.'})
    return value
