"""
URL mappings for the clinic API.

Trailing slashes are omitted throughout (``APPEND_SLASH = False``).
"""
from django.urls import path

from .auth_views import current_user_view, jwt_logout_view, jwt_refresh_view, login_view
from .views import appointments, dashboard, doctors, health, lab_tests, patients, prescriptions, procedures
from .views import transactions, users

urlpatterns = [
    path('api/healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view),
    path('api/auth/logout', jwt_logout_view),
    path('api/auth/me', current_user_view),
    # Dashboard
    path('api/dashboard', dashboard.dashboard),
    # Patients
    path('api/patients', patients.patients),
    path('api/patients/<int:pk>', patients.patient_detail),
    # Doctors, nurses, schedules
    path('api/doctors', doctors.doctors),
    path('api/doctors/active', doctors.active_doctors),
    path('api/doctors/<int:pk>', doctors.doctor_detail),
    path('api/doctors/<int:pk>/delete-check', doctors.doctor_delete_check),
    path('api/doctors/<int:pk>/delete', doctors.doctor_delete),
    path('api/nurses', doctors.nurses),
    path('api/nurses/<int:pk>', doctors.nurse_detail),
    path('api/schedules', doctors.schedules),
    path('api/schedules/<int:pk>', doctors.schedule_detail),
    # Appointments
    path('api/appointments', appointments.appointments),
    path('api/appointments/form-options', appointments.appointment_form_options),
    path('api/appointments/<int:pk>', appointments.appointment_detail),
    path('api/appointments/<int:pk>/sms', appointments.appointment_sms),
    path('api/appointments/<int:pk>/whatsapp', appointments.appointment_whatsapp),
    # Procedures
    path('api/procedures', procedures.procedures),
    path('api/procedures/<int:pk>', procedures.procedure_detail),
    path('api/procedures/<int:pk>/delete-check', procedures.procedure_delete_check),
    path('api/procedures/<int:pk>/delete', procedures.procedure_delete),
    # Lab tests
    path('api/lab-tests', lab_tests.lab_tests),
    path('api/lab-tests/<int:pk>', lab_tests.lab_test_detail),
    path('api/lab-tests/<int:pk>/report', lab_tests.lab_test_report),
    path('api/lab-test-categories', lab_tests.categories),
    path('api/lab-test-categories/active', lab_tests.active_categories),
    path('api/lab-test-categories/<int:pk>', lab_tests.category_detail),
    # Prescriptions
    path('api/prescriptions', prescriptions.prescriptions),
    path('api/prescriptions/<int:pk>', prescriptions.prescription_detail),
    # Billing
    path('api/transactions', transactions.transactions),
    path('api/transactions/patient-records/<int:patient_id>', transactions.patient_records),
    path('api/transactions/<int:pk>', transactions.transaction_detail),
    path('api/transactions/<int:pk>/invoice', transactions.transaction_invoice),
    path('api/transactions/<int:pk>/invoice/download', transactions.transaction_invoice_download),
    # User administration
    path('api/users', users.users),
    path('api/users/roles', users.roles),
    path('api/users/<int:pk>', users.user_detail),
]
