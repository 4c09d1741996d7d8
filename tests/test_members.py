import pytest

from snootclub import db
from snootclub.errors import InvalidInput, NotFound
from snootclub.models import Member
from snootclub.services import directory, normalize_phone


@pytest.mark.parametrize('raw, expected', [
    ('(555) 123-4567', '+15551234567'),
    ('15551234567', '+15551234567'),
    ('+44 20 7946 0958', '+44 20 7946 0958'),
    ('442079460958', '+442079460958'),
    ('', ''),
    (None, ''),
])
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_register_creates_pending_member(client):
    response = client.post('/register', json={'phone': '555-123-4567', 'name': 'Ada'})
    assert response.status_code == 200
    data = response.get_json()
    assert data['ok'] is True
    assert data['status'] == 'pending'

    member = db.session.get(Member, data['memberId'])
    assert member.phone == '+15551234567'
    assert member.name == 'Ada'


def test_register_is_idempotent_and_keeps_existing_fields(client):
    first = client.post('/register', json={'phone': '5551234567', 'name': 'Ada'}).get_json()
    second = client.post('/register', json={
        'phone': '+1 555 123 4567',
        'name': 'Someone Else',
        'email': 'ada@example.com',
        'expoToken': 'ExponentPushToken[abc]',
    }).get_json()
    third = client.post('/register', json={'phone': '5551234567', 'expoToken': 'ExponentPushToken[abc]'}).get_json()

    assert first['memberId'] == second['memberId'] == third['memberId']
    assert Member.query.count() == 1
    member = db.session.get(Member, first['memberId'])
    assert member.name == 'Ada'
    assert member.email == 'ada@example.com'
    assert member.expo_tokens == ['ExponentPushToken[abc]']


def test_register_requires_phone(client):
    response = client.post('/register', json={'name': 'No Phone'})
    assert response.status_code == 400
    assert response.get_json() == {'ok': False, 'error': 'phone required'}


def test_register_accepts_numeric_phone(client):
    response = client.post('/register', json={'phone': 5551234567})
    assert response.status_code == 200
    assert Member.query.one().phone == '+15551234567'


def test_status_only_changes_through_admin(client, admin_headers):
    member_id = client.post('/register', json={'phone': '5551234567'}).get_json()['memberId']

    # Re-registering never approves
    client.post('/register', json={'phone': '5551234567'})
    assert db.session.get(Member, member_id).status == 'pending'

    assert client.post(f'/members/{member_id}/approve', headers=admin_headers).status_code == 200
    assert db.session.get(Member, member_id).status == 'approved'

    assert client.post(f'/members/{member_id}/reject', headers=admin_headers).status_code == 200
    assert db.session.get(Member, member_id).status == 'rejected'

    client.post(f'/members/{member_id}/approve', headers=admin_headers)
    assert db.session.get(Member, member_id).status == 'approved'


def test_set_status_rejects_unknown_status(app, make_member):
    member = make_member('+15551234567', status='pending')
    with pytest.raises(InvalidInput):
        directory.set_status(member.id, 'pending')


def test_approve_unknown_member_is_404(client, admin_headers):
    response = client.post('/members/nope/approve', headers=admin_headers)
    assert response.status_code == 404
    assert response.get_json()['ok'] is False


def test_list_members_filters_by_status(client, admin_headers, make_member):
    make_member('+15550000001', status='pending')
    make_member('+15550000002', status='approved')
    make_member('+15550000003', status='rejected')

    everyone = client.get('/members', headers=admin_headers).get_json()
    assert len(everyone) == 3

    pending = client.get('/members?status=pending', headers=admin_headers).get_json()
    assert [m['phone'] for m in pending] == ['+15550000001']
    assert 'sessionTokens' not in pending[0]

    response = client.get('/members?status=bogus', headers=admin_headers)
    assert response.status_code == 400


def test_admin_flag_toggle(client, admin_headers, make_member):
    member = make_member('+15551234567')
    client.post(f'/members/{member.id}/make-admin', headers=admin_headers)
    assert db.session.get(Member, member.id).is_admin is True
    client.post(f'/members/{member.id}/remove-admin', headers=admin_headers)
    assert db.session.get(Member, member.id).is_admin is False


def test_delete_member_is_idempotent(client, admin_headers, make_member):
    member = make_member('+15551234567', tokens=['ExponentPushToken[abc]'])
    member_id = member.id

    assert client.delete(f'/members/{member_id}', headers=admin_headers).get_json() == {'ok': True}
    assert db.session.get(Member, member_id) is None
    assert client.delete(f'/members/{member_id}', headers=admin_headers).get_json() == {'ok': True}


def test_require_unknown_member(app):
    with pytest.raises(NotFound):
        directory.require('missing')


def test_member_routes_need_admin_pin(client, make_member, login):
    make_member('+15551234567')
    member_headers = login('+15551234567')

    assert client.get('/members').status_code == 401
    assert client.get('/members', headers={'X-Admin-Pin': 'wrong'}).status_code == 401
    # A member session is not an admin credential
    assert client.get('/members', headers=member_headers).status_code == 401
    assert client.get('/members?pin=test-pin').status_code == 200


def test_directory_lookups(app, make_member, login):
    member = make_member('+15551234567', name='Ada')
    headers = login('+15551234567')
    token = headers['Authorization'].split()[1]

    assert directory.get(member.id).name == 'Ada'
    assert directory.get('missing') is None
    assert directory.by_phone('(555) 123-4567').id == member.id
    assert directory.by_phone('5550000000') is None
    assert directory.by_session_token(token).id == member.id
    assert directory.by_session_token('nope') is None
