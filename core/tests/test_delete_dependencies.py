"""
Delete-dependency checks for doctors and procedures.
"""
from datetime import time

import pytest
from django.db import DatabaseError

from core.exceptions import GENERIC_ERROR_MESSAGE, DeleteBlocked, RecordNotFound
from core.models import Appointment, Doctor, DoctorSchedule, LabTest, Prescription, Procedure, Transaction
from core.services import doctors as doctor_service
from core.services import procedures as procedure_service


def _schedule(doctor, day='Monday'):
    return DoctorSchedule.objects.create(doctor=doctor, day_of_week=day, start_time=time(9), end_time=time(13))


def test_doctor_without_dependents_can_be_deleted(make_doctor):
    doctor = make_doctor()
    report = doctor_service.check_doctor_delete(doctor.id)
    assert report.can_delete and not report.is_warning
    assert doctor_service.delete_doctor(doctor.id) == 'Doctor deleted successfully!'
    assert not Doctor.objects.filter(pk=doctor.id).exists()


def test_doctor_cascade_only_delete_removes_dependents(make_patient, make_doctor, make_procedure):
    doctor = make_doctor()
    patient = make_patient()
    make_procedure(patient, doctor)
    make_procedure(patient, doctor, procedure_name='IV Therapy')
    _schedule(doctor)

    report = doctor_service.check_doctor_delete(doctor.id)
    assert report.can_delete
    assert report.is_warning
    assert report.cascade_records == ['2 Procedure(s)', '1 Schedule(s)']
    assert report.message == 'Deleting this doctor will also delete: 2 Procedure(s), 1 Schedule(s).'

    assert doctor_service.delete_doctor(doctor.id) == 'Doctor deleted successfully!'
    assert Procedure.objects.count() == 0
    assert DoctorSchedule.objects.count() == 0


def test_doctor_delete_clears_appointment_doctor(make_patient, make_doctor, make_appointment):
    doctor = make_doctor()
    appointment = make_appointment(make_patient(), doctor)
    report = doctor_service.check_doctor_delete(doctor.id)
    assert report.cascade_records == [] and report.blocking_records == []

    doctor_service.delete_doctor(doctor.id)
    appointment.refresh_from_db()
    assert appointment.doctor_id is None


def test_doctor_with_prescriptions_is_blocked_without_force(make_patient, make_doctor, make_prescription):
    doctor = make_doctor()
    make_prescription(make_patient(), doctor)

    report = doctor_service.check_doctor_delete(doctor.id)
    assert not report.can_delete
    assert report.blocking_records == ['1 Prescription(s)']
    assert report.message == 'Cannot delete doctor. It is referenced by: 1 Prescription(s).'

    with pytest.raises(DeleteBlocked) as exc:
        doctor_service.delete_doctor(doctor.id)
    assert exc.value.extra['blockingRecords'] == ['1 Prescription(s)']
    assert Doctor.objects.filter(pk=doctor.id).exists()


def test_doctor_force_delete_nulls_blocking_references(make_patient, make_doctor, make_prescription,
                                                      make_appointment, make_procedure):
    doctor = make_doctor()
    patient = make_patient()
    prescription = make_prescription(patient, doctor)
    appointment = make_appointment(patient, doctor)
    make_procedure(patient, doctor)

    assert doctor_service.delete_doctor(doctor.id, force=True) == 'Doctor force deleted successfully!'
    prescription.refresh_from_db()
    appointment.refresh_from_db()
    assert prescription.doctor_id is None
    assert appointment.doctor_id is None
    assert Procedure.objects.count() == 0
    assert not Doctor.objects.filter(pk=doctor.id).exists()


def test_force_delete_rolls_back_on_failure(monkeypatch, make_patient, make_doctor, make_prescription):
    doctor = make_doctor()
    prescription = make_prescription(make_patient(), doctor)

    def broken_delete(self, *args, **kwargs):
        raise RuntimeError('disk full')

    monkeypatch.setattr(Doctor, 'delete', broken_delete)
    with pytest.raises(RuntimeError):
        doctor_service.delete_doctor(doctor.id, force=True)

    prescription.refresh_from_db()
    assert prescription.doctor_id == doctor.id


def test_missing_doctor_is_reported(db):
    with pytest.raises(RecordNotFound, match='Doctor with ID 999 not found.'):
        doctor_service.delete_doctor(999)


def test_procedure_blocked_by_lab_tests_transactions_and_prescriptions(
        make_patient, make_doctor, make_procedure, make_lab_test, make_transaction, make_prescription):
    patient = make_patient()
    procedure = make_procedure(patient, make_doctor())
    make_lab_test(patient, procedure=procedure)
    make_transaction(patient, procedure=procedure)
    make_prescription(patient, procedure=procedure)

    report = procedure_service.check_procedure_delete(procedure.id)
    assert report.blocking_records == ['1 Lab Test(s)', '1 Transaction(s)', '1 Prescription(s)']
    assert report.as_dict()['canForceDelete'] is True

    with pytest.raises(DeleteBlocked):
        procedure_service.delete_procedure(procedure.id)

    assert procedure_service.delete_procedure(procedure.id, force=True) == 'Procedure force deleted successfully!'
    assert not Procedure.objects.filter(pk=procedure.id).exists()
    assert LabTest.objects.get().procedure_id is None
    assert Transaction.objects.get().procedure_id is None
    assert Prescription.objects.get().procedure_id is None


def test_procedure_without_dependents_is_deleted(make_patient, make_doctor, make_procedure):
    procedure = make_procedure(make_patient(), make_doctor())
    assert procedure_service.delete_procedure(procedure.id) == 'Procedure deleted successfully!'


def test_delete_check_endpoint(api, make_patient, make_doctor, make_procedure):
    doctor = make_doctor()
    make_procedure(make_patient(), doctor)
    resp = api.get(f'/api/doctors/{doctor.id}/delete-check')
    assert resp.status_code == 200
    assert resp.data == {
        'canDelete': True,
        'canForceDelete': False,
        'isWarning': True,
        'blockingRecords': [],
        'cascadeRecords': ['1 Procedure(s)'],
        'message': 'Deleting this doctor will also delete: 1 Procedure(s).',
    }


def test_delete_endpoint_returns_conflict_then_force_succeeds(api, make_patient, make_doctor, make_prescription):
    doctor = make_doctor()
    make_prescription(make_patient(), doctor)

    resp = api.post(f'/api/doctors/{doctor.id}/delete', {}, format='json')
    assert resp.status_code == 409
    assert resp.data['ok'] is False
    assert resp.data['error']['code'] == 'delete_blocked'
    assert resp.data['error']['blockingRecords'] == ['1 Prescription(s)']

    resp = api.post(f'/api/doctors/{doctor.id}/delete', {'force': True}, format='json')
    assert resp.status_code == 200
    assert resp.data['message'] == 'Doctor force deleted successfully!'


def test_procedure_delete_endpoint_missing_row(api):
    resp = api.post('/api/procedures/12345/delete', {}, format='json')
    assert resp.status_code == 404
    assert resp.data['error']['message'] == 'Procedure with ID 12345 not found.'


def test_delete_check_database_error_is_generic(api, monkeypatch, make_patient, make_doctor, make_prescription):
    doctor = make_doctor()
    make_prescription(make_patient(), doctor)

    def broken_count(self):
        raise DatabaseError('connection lost')

    monkeypatch.setattr(Doctor.prescriptions.related_manager_cls, 'count', broken_count)
    resp = api.get(f'/api/doctors/{doctor.id}/delete-check')
    assert resp.status_code == 500
    assert resp.data['error']['code'] == 'server_error'
    assert resp.data['error']['message'] == GENERIC_ERROR_MESSAGE
    assert 'connection lost' not in str(resp.data)


def test_appointment_rows_survive_doctor_delete_via_api(api, make_patient, make_doctor, make_appointment):
    doctor = make_doctor()
    appointment = make_appointment(make_patient(), doctor)
    resp = api.delete(f'/api/doctors/{doctor.id}')
    assert resp.status_code == 200
    assert Appointment.objects.get(pk=appointment.id).doctor_id is None
