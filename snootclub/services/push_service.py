"""
Expo push notification channel.

Talks to the Expo push HTTP API directly:
- POST https://exp.host/--/api/v2/push/send with a list of messages
- the response carries one ticket per message, in request order

Requires nothing to run; EXPO_ACCESS_TOKEN is only sent when set.
"""

import re
import requests
from flask import current_app

from snootclub.errors import DeliveryError


_UUID_TOKEN = re.compile(r'^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$', re.IGNORECASE)


class PushChannel:
    """Service for Expo push API interactions."""

    SEND_URL = "https://exp.host/--/api/v2/push/send"

    # Expo rejects requests with more than 100 messages
    CHUNK_SIZE = 100

    @staticmethod
    def is_valid_token(token) -> bool:
        """Check the shape of an Expo push token."""
        if not isinstance(token, str):
            return False
        if (token.startswith('ExponentPushToken[') or token.startswith('ExpoPushToken[')) and token.endswith(']'):
            return True
        return bool(_UUID_TOKEN.match(token))

    def chunk(self, messages: list) -> list:
        """Split messages into provider-sized batches."""
        return [messages[i:i + self.CHUNK_SIZE] for i in range(0, len(messages), self.CHUNK_SIZE)]

    def send_chunk(self, chunk: list) -> list:
        """
        Send one batch of messages.

        Args:
            chunk: List of message dicts with at least 'to', 'title' and 'body'

        Returns:
            list of dicts with 'to', 'success' and 'error', one per message

        Raises:
            DeliveryError if the whole request failed.
        """
        headers = {
            'Accept': 'application/json',
            'Accept-Encoding': 'gzip, deflate',
            'Content-Type': 'application/json',
        }
        access_token = current_app.config.get('EXPO_ACCESS_TOKEN')
        if access_token:
            headers['Authorization'] = f'Bearer {access_token}'

        recipients = f"{len(chunk)} devices"
        try:
            response = requests.post(self.SEND_URL, headers=headers, json=chunk, timeout=15)
        except requests.RequestException as e:
            raise DeliveryError('push', recipients, str(e)) from e

        if response.status_code != 200:
            raise DeliveryError('push', recipients, f"API error: {response.status_code} - {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise DeliveryError('push', recipients, 'invalid JSON in response') from e

        if not isinstance(data, dict):
            raise DeliveryError('push', recipients, f"unexpected response body: {data!r}")

        if data.get('errors'):
            raise DeliveryError('push', recipients, str(data['errors']))

        tickets = data.get('data')
        if not isinstance(tickets, list):
            tickets = []
        results = []
        for i, message in enumerate(chunk):
            ticket = tickets[i] if i < len(tickets) else {}
            if not isinstance(ticket, dict):
                ticket = {}
            ok = ticket.get('status') == 'ok'
            results.append({
                'to': message['to'],
                'success': ok,
                'error': None if ok else ticket.get('message', 'no ticket returned'),
            })
        return results


# Global instance
push_channel = PushChannel()
