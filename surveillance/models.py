"""
Database models for the reporting backend.

These models capture the records the statistics engine reads: the
geography hierarchy (region → district → city), users (doctors and
administrators), reference data maintained by administrators
(pathogens, test types, vaccinations) and the test results doctors
submit.  A test result links zero or more pathogens through
:class:`TestResultPathogen`; zero links means the result is negative.
"""
from __future__ import annotations

import uuid
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class Region(models.Model):
    """Top level of the geography hierarchy (kraj)."""
    name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class District(models.Model):
    """A district (okres); every district belongs to exactly one region."""
    name = models.CharField(max_length=255)
    region = models.ForeignKey(Region, on_delete=models.PROTECT, related_name='districts')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class City(models.Model):
    """Lowest level of the geography hierarchy."""
    name = models.CharField(max_length=255, db_index=True)
    district = models.ForeignKey(District, on_delete=models.PROTECT, related_name='cities')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'cities'

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    """Custom user model with a role and an optional home city.

    A doctor's district and region are not stored; they are derived from
    the home city whenever a geographic scope has to be resolved.
    """
    ROLE_CHOICES = [
        ('doctor', 'Doctor'),
        ('admin', 'Administrator'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='doctor')
    city = models.ForeignKey(
        City, null=True, blank=True, on_delete=models.SET_NULL, related_name='users'
    )

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Pathogen(models.Model):
    name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class TestType(models.Model):
    """A kind of laboratory test and the pathogens it can detect."""
    name = models.CharField(max_length=255, unique=True)
    pathogens = models.ManyToManyField(Pathogen, blank=True, related_name='test_types')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class Vaccination(models.Model):
    name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class Patient(models.Model):
    """A patient known by an external identifier (e.g. insurance number)."""
    identifier = models.CharField(max_length=64, unique=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.identifier


class TestResult(models.Model):
    """A single test result submitted by a doctor.

    ``created_at`` is the observation timestamp: date filters, time
    series buckets and the patient's age at testing are all computed
    from it.
    """
    TRIMESTER_CHOICES = [(1, '1'), (2, '2'), (3, '3')]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    city = models.ForeignKey(City, on_delete=models.PROTECT, related_name='test_results')
    icp_number = models.CharField(max_length=32)
    test_type = models.ForeignKey(TestType, on_delete=models.PROTECT, related_name='test_results')
    date_of_birth = models.DateField()
    symptoms = models.JSONField(default=list, blank=True)
    pathogens = models.ManyToManyField(
        Pathogen, through='TestResultPathogen', blank=True, related_name='test_results'
    )
    patient = models.ForeignKey(
        Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='test_results'
    )
    other_informations = models.TextField(blank=True)
    sari = models.BooleanField(null=True, blank=True)
    atb = models.BooleanField(null=True, blank=True)
    antivirals = models.BooleanField(null=True, blank=True)
    obesity = models.BooleanField(null=True, blank=True)
    respiratory_support = models.BooleanField(null=True, blank=True)
    ecmo = models.BooleanField(null=True, blank=True)
    pregnancy = models.BooleanField(null=True, blank=True)
    # only meaningful when pregnancy is true
    trimester = models.PositiveSmallIntegerField(null=True, blank=True, choices=TRIMESTER_CHOICES)
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='test_results')
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='test_result_owner_created_idx'),
        ]

    @property
    def is_positive(self) -> bool:
        return self.pathogen_links.exists()

    def __str__(self) -> str:
        return f"{self.icp_number} by {self.created_by_id}@{self.created_at:%F}"


class TestResultPathogen(models.Model):
    """Links a positive test result to one detected pathogen."""
    test_result = models.ForeignKey(TestResult, on_delete=models.CASCADE, related_name='pathogen_links')
    pathogen = models.ForeignKey(Pathogen, on_delete=models.PROTECT, related_name='result_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('test_result', 'pathogen')]

    def __str__(self) -> str:
        return f"{self.test_result_id} -> {self.pathogen_id}"
