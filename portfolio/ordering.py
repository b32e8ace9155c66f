"""Month ordinals and the newest-first sort rules built on them.

The same table feeds the Python sort keys used on fetched lists and the ORM
expressions used for server-side ordering, so both orders always agree.
"""

from django.db.models import Case, IntegerField, Value, When

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MONTH_CHOICES = [(name, name) for name in MONTHS]

MONTH_ORDINALS = {name: index for index, name in enumerate(MONTHS, start=1)}


def month_ordinal(name) -> int:
    """1..12 for a month name, 0 for anything unknown or empty."""
    return MONTH_ORDINALS.get(name or "", 0)


def month_ordinal_expression(field: str) -> Case:
    """ORM expression mapping a month-name column to its ordinal."""
    return Case(
        *[When(**{field: name}, then=Value(ordinal)) for name, ordinal in MONTH_ORDINALS.items()],
        default=Value(0),
        output_field=IntegerField(),
    )


def _get(item, key):
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def certification_sort_key(item):
    # pinned first, then newest completion date
    return (
        not bool(_get(item, "pinned")),
        -(_get(item, "completion_year") or 0),
        -month_ordinal(_get(item, "completion_month")),
    )


def experience_sort_key(item):
    return (
        _get(item, "order") or 0,
        -(_get(item, "start_year") or 0),
        -month_ordinal(_get(item, "start_month")),
    )


def award_sort_key(item):
    return (
        _get(item, "order") or 0,
        -(_get(item, "issue_year") or 0),
        -month_ordinal(_get(item, "issue_month")),
    )


def sort_certifications(items):
    return sorted(items, key=certification_sort_key)


def sort_experiences(items):
    return sorted(items, key=experience_sort_key)


def sort_awards(items):
    return sorted(items, key=award_sort_key)
