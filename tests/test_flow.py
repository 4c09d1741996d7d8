import re
from datetime import datetime, timedelta

PHONE = '+15551234567'
CRON = {'X-Cron-Secret': 'test-cron'}


def _texted_code(twilio):
    return re.search(r'\b(\d{6})\b', twilio.sent[-1]['body']).group(1)


def test_member_joins_logs_in_and_gets_one_reminder(client, admin_headers, twilio, expo):
    registered = client.post('/register', json={
        'phone': '555-123-4567',
        'name': 'Ada',
        'expoToken': 'ExponentPushToken[ada-phone]',
    }).get_json()
    assert registered['status'] == 'pending'
    member_id = registered['memberId']

    # Pending members cannot log in
    response = client.post('/auth/request-code', json={'phone': PHONE})
    assert response.status_code == 403
    assert response.get_json()['status'] == 'pending'

    assert client.post(f'/members/{member_id}/approve', headers=admin_headers).status_code == 200

    assert client.post('/auth/request-code', json={'phone': PHONE}).get_json() == {'ok': True, 'sent': True}
    verified = client.post('/auth/verify-code', json={'phone': PHONE, 'code': _texted_code(twilio)})
    assert verified.status_code == 200
    member_headers = {'Authorization': f"Bearer {verified.get_json()['token']}"}

    assert client.get('/meetings', headers=member_headers).get_json() == []

    starts_at = datetime.utcnow() + timedelta(hours=24)
    created = client.post('/meetings', headers=admin_headers, json={
        'title': 'Autumn Walk',
        'startsAt': starts_at.isoformat() + 'Z',
        'location': 'Riverside',
    }).get_json()
    assert created['delivery'] == {'smsAttempted': 1, 'smsSent': 1, 'pushAttempted': 1, 'pushSent': 1}

    first = client.post('/tasks/notify-24h', headers=CRON).get_json()
    assert first == {'ok': True, 'meetingsNotified': [created['id']], 'smsCount': 1, 'pushCount': 1}

    second = client.post('/tasks/notify-24h', headers=CRON).get_json()
    assert second == {'ok': True, 'meetingsNotified': [], 'smsCount': 0, 'pushCount': 0}

    # login code, announcement, reminder
    assert [m['to'] for m in twilio.sent] == [PHONE, PHONE, PHONE]
    assert expo.delivered == ['ExponentPushToken[ada-phone]', 'ExponentPushToken[ada-phone]']

    meetings = client.get('/meetings', headers=member_headers).get_json()
    assert [(m['id'], m['didNotify24h']) for m in meetings] == [(created['id'], True)]
