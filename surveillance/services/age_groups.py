from __future__ import annotations

from django.db.models import Case, CharField, ExpressionWrapper, IntegerField, QuerySet, Value, When
from django.db.models.functions import ExtractDay, ExtractMonth, ExtractYear
from django.db.models.lookups import Exact, LessThan

# (label, response key, lowest age, highest age); ages are whole years.
AGE_GROUPS = [
    ('0-5', 'age0to5', 0, 5),
    ('6-14', 'age6to14', 6, 14),
    ('15-24', 'age15to24', 15, 24),
    ('25-64', 'age25to64', 25, 64),
    ('65+', 'age65plus', 65, None),
]
AGE_GROUP_LABELS = [label for label, _, _, _ in AGE_GROUPS]
AGE_GROUP_KEYS = {label: key for label, key, _, _ in AGE_GROUPS}


def age_at_test(prefix: str = '') -> ExpressionWrapper:
    """Completed years between date of birth and the test timestamp."""
    observed = f'{prefix}created_at'
    born = f'{prefix}date_of_birth'
    observed_month, born_month = ExtractMonth(observed), ExtractMonth(born)
    birthday_not_reached = Case(
        When(LessThan(observed_month, born_month), then=Value(1)),
        When(
            Exact(observed_month, born_month) & LessThan(ExtractDay(observed), ExtractDay(born)),
            then=Value(1),
        ),
        default=Value(0),
    )
    return ExpressionWrapper(
        ExtractYear(observed) - ExtractYear(born) - birthday_not_reached,
        output_field=IntegerField(),
    )


def with_age_group(qs: QuerySet, prefix: str = '') -> QuerySet:
    """Annotate ``age_group`` (a label from :data:`AGE_GROUPS` or NULL).

    A negative age, e.g. a date of birth after the test, falls outside
    every group and is annotated as NULL.
    """
    whens = []
    for label, _, low, high in AGE_GROUPS:
        bounds = {'age_at_test__gte': low}
        if high is not None:
            bounds['age_at_test__lte'] = high
        whens.append(When(then=Value(label), **bounds))
    return qs.alias(age_at_test=age_at_test(prefix)).annotate(
        age_group=Case(*whens, default=Value(None), output_field=CharField())
    )


def empty_age_buckets() -> dict:
    return {key: 0 for _, key, _, _ in AGE_GROUPS}
