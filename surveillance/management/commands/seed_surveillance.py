"""
Management command to populate the database with demo surveillance data.
"""
import random
from datetime import date, timedelta

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from rest_framework.authtoken.models import Token

from surveillance.models import (
    City, District, Pathogen, Patient, Region, TestResult, TestResultPathogen, TestType, User, Vaccination,
)

GEOGRAPHY = {
    'Hlavní město Praha': {'Praha': ['Praha']},
    'Jihomoravský kraj': {'Brno-město': ['Brno'], 'Znojmo': ['Znojmo', 'Moravský Krumlov']},
    'Moravskoslezský kraj': {'Ostrava-město': ['Ostrava'], 'Opava': ['Opava', 'Hradec nad Moravicí']},
}

PATHOGENS = ['Influenza A', 'Influenza B', 'RSV', 'SARS-CoV-2', 'Adenovirus', 'Metapneumovirus']

TEST_TYPES = {
    'PCR respiratory panel': PATHOGENS,
    'Antigen influenza': ['Influenza A', 'Influenza B'],
    'Antigen COVID-19': ['SARS-CoV-2'],
}

VACCINATIONS = ['Influenza', 'COVID-19', 'RSV', 'Pneumococcus']

SYMPTOMS = ['fever', 'cough', 'sore throat', 'dyspnoea', 'myalgia', 'headache']


class Command(BaseCommand):
    help = 'Populate database with demo surveillance data'

    def add_arguments(self, parser):
        parser.add_argument('--results', type=int, default=500, help='number of test results to create')
        parser.add_argument('--days', type=int, default=120, help='spread results over this many past days')
        parser.add_argument('--seed', type=int, default=None, help='random seed for reproducible data')

    def handle(self, *args, **options):
        if options['seed'] is not None:
            random.seed(options['seed'])
        self.stdout.write('Creating demo data...')

        with transaction.atomic():
            cities = self.create_geography()
            pathogens = self.create_pathogens()
            test_types = self.create_test_types(pathogens)
            self.create_vaccinations()
            doctors = self.create_doctors(cities)
            self.create_admin()
            created = self.create_test_results(doctors, cities, test_types, options['results'], options['days'])

        self.stdout.write(self.style.SUCCESS(f'Demo data created ({created} test results).'))

    def create_geography(self):
        cities = []
        for region_name, districts in GEOGRAPHY.items():
            region, _ = Region.objects.get_or_create(name=region_name)
            for district_name, city_names in districts.items():
                district, _ = District.objects.get_or_create(name=district_name, region=region)
                for city_name in city_names:
                    city, _ = City.objects.get_or_create(name=city_name, district=district)
                    cities.append(city)
        self.stdout.write(f'Geography: {len(GEOGRAPHY)} regions, {len(cities)} cities')
        return cities

    def create_pathogens(self):
        pathogens = {}
        for name in PATHOGENS:
            pathogens[name], _ = Pathogen.objects.get_or_create(name=name)
        return pathogens

    def create_test_types(self, pathogens):
        test_types = []
        for name, detectable in TEST_TYPES.items():
            test_type, _ = TestType.objects.get_or_create(name=name)
            test_type.pathogens.set([pathogens[p] for p in detectable])
            test_types.append(test_type)
        return test_types

    def create_vaccinations(self):
        for name in VACCINATIONS:
            Vaccination.objects.get_or_create(name=name)

    def create_doctors(self, cities):
        doctors = []
        for i, city in enumerate(cities, start=1):
            user, _ = User.objects.get_or_create(
                username=f'doctor{i}',
                defaults={
                    'email': f'doctor{i}@example.com',
                    'password': make_password('123456'),
                    'role': 'doctor',
                    'city': city,
                    'first_name': f'Doctor {i}',
                    'last_name': city.name,
                },
            )
            token, _ = Token.objects.get_or_create(user=user)
            doctors.append(user)
            self.stdout.write(f'Doctor: {user.username} ({city.name}) token={token.key}')
        return doctors

    def create_admin(self):
        user, _ = User.objects.get_or_create(
            username='admin',
            defaults={
                'email': 'admin@example.com',
                'password': make_password('123456'),
                'role': 'admin',
                'is_staff': True,
                'is_superuser': True,
            },
        )
        token, _ = Token.objects.get_or_create(user=user)
        self.stdout.write(f'Administrator: {user.username} token={token.key}')
        return user

    def create_test_results(self, doctors, cities, test_types, count, days):
        now = timezone.now()
        created = 0
        for _ in range(count):
            doctor = random.choice(doctors)
            # most results come from the doctor's own city
            city = doctor.city if random.random() < 0.8 else random.choice(cities)
            test_type = random.choice(test_types)
            observed = now - timedelta(days=random.randint(0, days), minutes=random.randint(0, 24 * 60))
            born = date(observed.year - random.randint(0, 90), random.randint(1, 12), random.randint(1, 28))
            patient, _ = Patient.objects.get_or_create(
                identifier=f'{born:%y%m%d}{random.randint(1000, 9999)}',
                defaults={'created_by': doctor},
            )
            result = TestResult.objects.create(
                city=city,
                icp_number=f'{random.randint(10000000, 99999999)}',
                test_type=test_type,
                date_of_birth=born,
                symptoms=random.sample(SYMPTOMS, k=random.randint(0, 3)),
                patient=patient,
                sari=random.random() < 0.1,
                created_by=doctor,
                created_at=observed,
            )
            detectable = list(test_type.pathogens.all())
            if detectable and random.random() < 0.45:
                k = 1 if random.random() < 0.9 else min(2, len(detectable))
                for pathogen in random.sample(detectable, k=k):
                    TestResultPathogen.objects.create(test_result=result, pathogen=pathogen)
            created += 1
        return created
