import pytest
from sqlalchemy import text

from snootclub import db
from snootclub.errors import Conflict
from snootclub.models import Member
from snootclub.services import store


def test_stale_write_raises_conflict(app, make_member):
    member = make_member('+15551234567', status='pending')
    assert member.version_id == 1

    # Another writer commits a newer revision behind our back
    with db.engine.begin() as connection:
        connection.execute(text("UPDATE members SET version_id = version_id + 1, status = 'rejected'"))

    member.status = 'approved'
    with pytest.raises(Conflict):
        store.write()

    store.read()
    assert db.session.get(Member, member.id).status == 'rejected'


def test_duplicate_phone_is_conflict(app, make_member):
    make_member('+15551234567')
    store.add(Member(phone='+15551234567', name='', email='', status='pending', is_admin=False))
    with pytest.raises(Conflict):
        store.write()


def test_health(client):
    response = client.get('/healthz')
    assert response.status_code == 200
    assert response.get_json() == {'ok': True, 'app': 'Snoot Club'}
