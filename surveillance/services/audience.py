"""
Audiences: whose test results an aggregate is computed over.

An audience is either a single doctor's own results, a district, a
region, the whole country or nobody at all (a scope that could not be
resolved).  "All doctors" and "country" are the same audience.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.db.models import Q

SELF = 'self'
DISTRICT = 'district'
REGION = 'region'
COUNTRY = 'country'
NOBODY = 'nobody'


@dataclass(frozen=True)
class Audience:
    kind: str
    ref_id: Optional[int] = None

    @classmethod
    def doctor(cls, doctor_id: int) -> 'Audience':
        return cls(SELF, doctor_id)

    @classmethod
    def district(cls, district_id: Optional[int]) -> 'Audience':
        return cls(DISTRICT, district_id) if district_id is not None else cls.nobody()

    @classmethod
    def region(cls, region_id: Optional[int]) -> 'Audience':
        return cls(REGION, region_id) if region_id is not None else cls.nobody()

    @classmethod
    def country(cls) -> 'Audience':
        return cls(COUNTRY)

    @classmethod
    def nobody(cls) -> 'Audience':
        return cls(NOBODY)

    @classmethod
    def for_doctor(cls, doctor_id: Optional[int]) -> 'Audience':
        """The doctor's own results, or the whole country for ``None``."""
        return cls.country() if doctor_id is None else cls.doctor(doctor_id)

    @property
    def is_empty(self) -> bool:
        return self.kind == NOBODY

    def to_q(self, prefix: str = '') -> Q:
        if self.kind == SELF:
            return Q(**{f'{prefix}created_by_id': self.ref_id})
        if self.kind == DISTRICT:
            return Q(**{f'{prefix}city__district_id': self.ref_id})
        if self.kind == REGION:
            return Q(**{f'{prefix}city__district__region_id': self.ref_id})
        if self.kind == COUNTRY:
            return Q()
        return Q(pk__in=[])

    def __str__(self) -> str:
        return self.kind if self.ref_id is None else f'{self.kind}:{self.ref_id}'
