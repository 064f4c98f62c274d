"""Surveillance application for the reporting backend.

This package contains the test-result models, the statistics services
(filters, geographic scopes, aggregates and time series) and the API
routes exposing them to the doctor and administrator front-ends.
"""
