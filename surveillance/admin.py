"""
Django admin registrations for the surveillance models.

Administrators maintain the geography tree and the reference data
(pathogens, test types, vaccinations) here; test results are listed
read-mostly with their detected pathogens inline.
"""

from django.contrib import admin

from .models import (
    Region,
    District,
    City,
    User,
    Pathogen,
    TestType,
    Vaccination,
    Patient,
    TestResult,
    TestResultPathogen,
)


@admin.register(Region)
class RegionAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'created_at')
    search_fields = ('name',)


@admin.register(District)
class DistrictAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'region')
    list_filter = ('region',)
    search_fields = ('name', 'region__name')


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'district')
    list_filter = ('district__region',)
    search_fields = ('name', 'district__name')


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'city', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name')


@admin.register(Pathogen)
class PathogenAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)


@admin.register(TestType)
class TestTypeAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)
    filter_horizontal = ('pathogens',)


@admin.register(Vaccination)
class VaccinationAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('identifier', 'created_by', 'created_at')
    search_fields = ('identifier',)


class TestResultPathogenInline(admin.TabularInline):
    model = TestResultPathogen
    extra = 0


@admin.register(TestResult)
class TestResultAdmin(admin.ModelAdmin):
    list_display = ('icp_number', 'test_type', 'city', 'created_by', 'created_at')
    list_filter = ('test_type', 'city__district__region')
    search_fields = ('icp_number', 'city__name', 'patient__identifier')
    inlines = [TestResultPathogenInline]
