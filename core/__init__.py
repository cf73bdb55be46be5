"""Core application for the clinic backend.

Models, serializers, services and API views for patients, staff,
appointments, procedures, lab tests, prescriptions and billing.
"""
