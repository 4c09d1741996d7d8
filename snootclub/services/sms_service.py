"""
SMS channel via Twilio.

Disabled (not an error) when TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN or
TWILIO_FROM is missing.
"""

from flask import current_app
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from snootclub.errors import DeliveryError


class SmsChannel:
    """Service for sending text messages through Twilio."""

    def __init__(self):
        self._client = None

    def is_configured(self) -> bool:
        config = current_app.config
        return bool(config.get('TWILIO_ACCOUNT_SID') and config.get('TWILIO_AUTH_TOKEN')
                    and config.get('TWILIO_FROM'))

    @property
    def client(self):
        """Get or create the Twilio client."""
        if self._client is None:
            self._client = Client(current_app.config['TWILIO_ACCOUNT_SID'],
                                  current_app.config['TWILIO_AUTH_TOKEN'])
        return self._client

    def send(self, to_phone: str, body: str) -> str:
        """
        Send one SMS.

        Returns:
            The provider message SID.

        Raises:
            DeliveryError if Twilio rejects the message or the call fails.
        """
        try:
            message = self.client.messages.create(
                to=to_phone,
                from_=current_app.config['TWILIO_FROM'],
                body=body,
            )
        except TwilioException as e:
            raise DeliveryError('sms', to_phone, str(e)) from e
        except Exception as e:
            raise DeliveryError('sms', to_phone, f"unexpected error: {e}") from e

        current_app.logger.info(f"SMS sent to {to_phone}")
        return message.sid


# Global instance
sms_channel = SmsChannel()
