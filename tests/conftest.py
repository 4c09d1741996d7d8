from datetime import datetime

import pytest

from snootclub import create_app, db
from snootclub.models import Member
from snootclub.services import otp_registry, sms_channel

ADMIN_HEADERS = {'X-Admin-Pin': 'test-pin'}


class FakeMessage:
    def __init__(self, sid):
        self.sid = sid


class FakeTwilioMessages:
    """Records every send; raises for numbers listed in ``failing``."""

    def __init__(self):
        self.sent = []
        self.failing = set()

    def create(self, to, from_, body):
        if to in self.failing:
            raise RuntimeError(f"carrier rejected {to}")
        self.sent.append({'to': to, 'from_': from_, 'body': body})
        return FakeMessage(f"SM{len(self.sent):04d}")


class FakeTwilioClient:
    def __init__(self):
        self.messages = FakeTwilioMessages()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError('no JSON')
        return self._payload


class FakeExpo:
    """Stand-in for the Expo push endpoint.

    Each call gets one 'ok' ticket per message unless the token is in
    ``rejected`` (error ticket) or the call number is in ``fail_calls``
    (HTTP 500). Setting ``raw_payload`` returns that body verbatim.
    """

    def __init__(self):
        self.calls = []
        self.rejected = set()
        self.fail_calls = set()
        self.raw_payload = None

    def __call__(self, url, headers=None, json=None, timeout=None):
        self.calls.append({'url': url, 'headers': headers, 'json': json})
        if len(self.calls) in self.fail_calls:
            return FakeResponse(500, text='upstream down')
        if self.raw_payload is not None:
            return FakeResponse(200, self.raw_payload)
        tickets = []
        for message in json:
            if message['to'] in self.rejected:
                tickets.append({'status': 'error', 'message': 'DeviceNotRegistered'})
            else:
                tickets.append({'status': 'ok', 'id': f"ticket-{len(tickets)}"})
        return FakeResponse(200, {'data': tickets})

    @property
    def delivered(self):
        return [m['to'] for call in self.calls for m in call['json']]


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def reset_otp_registry():
    otp_registry.clear()
    yield
    otp_registry.clear()


@pytest.fixture(autouse=True)
def expo(monkeypatch):
    fake = FakeExpo()
    monkeypatch.setattr('snootclub.services.push_service.requests.post', fake)
    return fake


@pytest.fixture
def twilio(app, monkeypatch):
    """Configure the SMS channel against a fake Twilio client."""
    app.config['TWILIO_ACCOUNT_SID'] = 'AC-test'
    app.config['TWILIO_AUTH_TOKEN'] = 'secret'
    app.config['TWILIO_FROM'] = '+15550000000'
    fake = FakeTwilioClient()
    monkeypatch.setattr(sms_channel, '_client', fake)
    return fake.messages


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture
def make_member(app):
    def _make(phone, status='approved', name='', is_admin=False, tokens=()):
        member = Member(phone=phone, name=name, email='', status=status, is_admin=is_admin,
                        created_at=datetime.utcnow())
        for token in tokens:
            member.add_push_token(token)
        db.session.add(member)
        db.session.commit()
        return member
    return _make


@pytest.fixture
def login(client):
    """Log a member in through the API and return auth headers."""
    def _login(phone, expo_token=None):
        code = client.post('/auth/request-code', json={'phone': phone}).get_json()['demoCode']
        body = {'phone': phone, 'code': code}
        if expo_token:
            body['expoToken'] = expo_token
        token = client.post('/auth/verify-code', json=body).get_json()['token']
        return {'Authorization': f'Bearer {token}'}
    return _login
