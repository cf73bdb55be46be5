from rest_framework.test import APIClient

from core.models import AuditEvent, User


def _payload(**overrides):
    data = {
        'first_name': 'Nadia', 'last_name': 'Hussain', 'email': 'nadia@clinic.local',
        'phone_number': '03001112222', 'password': 'Secret1', 'confirm_password': 'Secret1', 'role': 'Doctor',
    }
    data.update(overrides)
    return data


def test_user_admin_requires_admin_role(receptionist):
    client = APIClient()
    client.force_authenticate(user=receptionist)
    resp = client.get('/api/users')
    assert resp.status_code == 403


def test_create_user_uses_email_as_username(api):
    resp = api.post('/api/users', _payload(), format='json')
    assert resp.status_code == 201, resp.data
    user = User.objects.get(email='nadia@clinic.local')
    assert user.username == 'nadia@clinic.local'
    assert user.role == User.ROLE_DOCTOR
    assert user.check_password('Secret1')
    assert AuditEvent.objects.filter(action='user_create', object_id=user.id).exists()


def test_password_policy(api):
    resp = api.post('/api/users', _payload(password='short', confirm_password='short'), format='json')
    assert resp.status_code == 400
    errors = resp.data['error']['message']['password']
    assert 'The Password must be at least 6 characters long.' in errors
    assert "Passwords must have at least one digit ('0'-'9')." in errors
    assert "Passwords must have at least one uppercase ('A'-'Z')." in errors


def test_password_confirmation_must_match(api):
    resp = api.post('/api/users', _payload(confirm_password='Secret2'), format='json')
    assert resp.status_code == 400
    assert resp.data['error']['message']['confirm_password'] == [
        'The password and confirmation password do not match.'
    ]


def test_duplicate_email_rejected(api, admin_user):
    resp = api.post('/api/users', _payload(email=admin_user.email), format='json')
    assert resp.status_code == 400
    assert 'email' in resp.data['error']['message']


def test_role_is_required(api):
    data = _payload()
    data.pop('role')
    resp = api.post('/api/users', data, format='json')
    assert resp.status_code == 400
    assert resp.data['error']['message']['role'] == ['Role is required.']


def test_edit_without_password_keeps_it(api, receptionist):
    resp = api.put(f'/api/users/{receptionist.id}', {
        'first_name': 'Front', 'last_name': 'Desk', 'email': receptionist.email, 'role': 'Nurse',
    }, format='json')
    assert resp.status_code == 200, resp.data
    receptionist.refresh_from_db()
    assert receptionist.role == User.ROLE_NURSE
    assert receptionist.check_password('Desk@123')


def test_edit_changes_password(api, receptionist):
    resp = api.patch(f'/api/users/{receptionist.id}', {
        'password': 'NewPass9', 'confirm_password': 'NewPass9',
    }, format='json')
    assert resp.status_code == 200, resp.data
    receptionist.refresh_from_db()
    assert receptionist.check_password('NewPass9')


def test_cannot_delete_own_account(api, admin_user):
    resp = api.delete(f'/api/users/{admin_user.id}')
    assert resp.status_code == 403
    assert resp.data['error']['message'] == 'You cannot delete your own account.'
    assert User.objects.filter(pk=admin_user.id).exists()


def test_delete_other_user(api, receptionist):
    resp = api.delete(f'/api/users/{receptionist.id}')
    assert resp.status_code == 200
    assert not User.objects.filter(pk=receptionist.id).exists()


def test_search_and_roles(api, receptionist):
    resp = api.get('/api/users', {'q': 'desk'})
    assert [u['id'] for u in resp.data] == [receptionist.id]
    resp = api.get('/api/users/roles')
    assert [r['name'] for r in resp.data] == ['Admin', 'Doctor', 'Nurse', 'Receptionist']
