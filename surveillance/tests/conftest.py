"""Shared fixtures: a small geography, a few doctors and a result factory."""
from datetime import date, datetime
from types import SimpleNamespace

import pytest
from django.utils import timezone

from surveillance.models import City, District, Pathogen, Patient, Region, TestResult, TestResultPathogen, TestType, User


def at(year, month, day, hour=10, minute=0):
    """Aware datetime in the project time zone."""
    return timezone.make_aware(datetime(year, month, day, hour, minute))


@pytest.fixture
def world(db):
    south = Region.objects.create(name='Jihomoravský kraj')
    north = Region.objects.create(name='Moravskoslezský kraj')
    brno_district = District.objects.create(name='Brno-město', region=south)
    znojmo_district = District.objects.create(name='Znojmo', region=south)
    ostrava_district = District.objects.create(name='Ostrava-město', region=north)
    brno = City.objects.create(name='Brno', district=brno_district)
    znojmo = City.objects.create(name='Znojmo', district=znojmo_district)
    ostrava = City.objects.create(name='Ostrava', district=ostrava_district)

    flu_a = Pathogen.objects.create(name='Influenza A')
    rsv = Pathogen.objects.create(name='RSV')
    covid = Pathogen.objects.create(name='SARS-CoV-2')
    pcr = TestType.objects.create(name='PCR respiratory panel')
    pcr.pathogens.set([flu_a, rsv, covid])
    antigen = TestType.objects.create(name='Antigen COVID-19')
    antigen.pathogens.set([covid])

    return SimpleNamespace(
        south=south, north=north,
        brno_district=brno_district, znojmo_district=znojmo_district, ostrava_district=ostrava_district,
        brno=brno, znojmo=znojmo, ostrava=ostrava,
        flu_a=flu_a, rsv=rsv, covid=covid,
        pcr=pcr, antigen=antigen,
        doctor=User.objects.create_user(username='novak', password='P@ssw0rd1', role='doctor', city=brno),
        colleague=User.objects.create_user(username='svoboda', password='P@ssw0rd1', role='doctor', city=ostrava),
        homeless=User.objects.create_user(username='dvorak', password='P@ssw0rd1', role='doctor'),
    )


@pytest.fixture
def make_result(world):
    """Create a test result; ``pathogens`` makes it positive."""
    def _make(owner=None, created_at=None, pathogens=(), city=None, born=date(1990, 6, 15),
              test_type=None, patient=None, icp_number='12345678'):
        result = TestResult.objects.create(
            city=city or (owner or world.doctor).city or world.brno,
            icp_number=icp_number,
            test_type=test_type or world.pcr,
            date_of_birth=born,
            patient=Patient.objects.create(identifier=patient) if patient else None,
            created_by=owner or world.doctor,
            created_at=created_at or at(2024, 1, 15),
        )
        for pathogen in pathogens:
            TestResultPathogen.objects.create(test_result=result, pathogen=pathogen)
        return result
    return _make
