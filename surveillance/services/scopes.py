"""
Geographic scope resolution for per-doctor statistics.

A doctor sees pathogen statistics at four levels: their own results
("me"), their district, their region and the whole country.  The
district and region are derived from the doctor's home city; explicit
region/city overrides replace the doctor's own location.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from rest_framework.exceptions import NotFound

from surveillance.models import City, User
from surveillance.services.audience import Audience

logger = logging.getLogger(__name__)


class DoctorNotFound(NotFound):
    default_detail = 'doctor not found'
    default_code = 'doctor_not_found'


@dataclass(frozen=True)
class GeoAnchor:
    city_id: Optional[int] = None
    district_id: Optional[int] = None
    region_id: Optional[int] = None


@dataclass(frozen=True)
class ScopeSet:
    """The four reporting audiences of one request.

    ``district`` is normally a single district.  When only a region
    override is given it is the whole overridden region instead, i.e. all
    districts within that region.  Any scope may be an empty audience;
    callers must not assume all four produce rows.
    """
    me: Audience
    district: Audience
    region: Audience
    country: Audience

    def items(self):
        return [
            ('me', self.me),
            ('district', self.district),
            ('region', self.region),
            ('country', self.country),
        ]


def locate_doctor(doctor_id) -> GeoAnchor:
    """Home city, district and region of a user in one joined read."""
    row = (
        User.objects.filter(pk=doctor_id)
        .values('city_id', 'city__district_id', 'city__district__region_id')
        .first()
    )
    if row is None:
        raise DoctorNotFound()
    return GeoAnchor(row['city_id'], row['city__district_id'], row['city__district__region_id'])


def locate_city(city_id) -> Optional[GeoAnchor]:
    row = (
        City.objects.filter(pk=city_id)
        .values('id', 'district_id', 'district__region_id')
        .first()
    )
    if row is None:
        return None
    return GeoAnchor(row['id'], row['district_id'], row['district__region_id'])


def resolve_scopes(doctor_id, *, region_id: Optional[int] = None, city_id: Optional[int] = None) -> ScopeSet:
    home = locate_doctor(doctor_id)

    if city_id is not None:
        anchor = locate_city(city_id)
        if anchor is None:
            logger.info('city override %s not found; district and region scopes are empty', city_id)
            anchor = GeoAnchor()
        district = Audience.district(anchor.district_id)
        region = Audience.region(anchor.region_id)
    elif region_id is not None:
        # no single district to show: broaden to every district of the region
        district = Audience.region(region_id)
        region = Audience.region(region_id)
    else:
        district = Audience.district(home.district_id)
        region = Audience.region(home.region_id)
        if home.city_id is None:
            logger.info('doctor %s has no home city; district and region scopes are empty', doctor_id)

    scopes = ScopeSet(
        me=Audience.doctor(doctor_id),
        district=district,
        region=region,
        country=Audience.country(),
    )
    logger.debug('resolved scopes for doctor %s: %s', doctor_id, {k: str(v) for k, v in scopes.items()})
    return scopes
