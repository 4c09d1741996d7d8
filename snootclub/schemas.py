"""Request bodies, validated before they reach the services."""

from datetime import datetime, timezone
from typing import Annotated, Optional

from flask import request
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _to_str(value):
    # Phones, codes and PINs sometimes arrive as JSON numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if value is None:
        return ''
    return value


DigitsStr = Annotated[str, BeforeValidator(_to_str)]


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class RegisterRequest(RequestModel):
    phone: DigitsStr = ''
    name: Optional[str] = None
    email: Optional[str] = None
    expo_token: Optional[str] = Field(default=None, alias='expoToken')


class RequestCodeRequest(RequestModel):
    phone: DigitsStr = ''


class VerifyCodeRequest(RequestModel):
    phone: DigitsStr = ''
    code: DigitsStr = ''
    expo_token: Optional[str] = Field(default=None, alias='expoToken')


class AdminPinRequest(RequestModel):
    pin: DigitsStr = ''


class AdminLoginRequest(RequestModel):
    phone: DigitsStr = ''
    pin: DigitsStr = ''


class MeetingCreate(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    starts_at: datetime = Field(alias='startsAt')
    description: str = ''
    location: str = ''
    reminder_minutes: int = Field(default=60, alias='reminderMinutes', ge=1)
    send_sms: bool = Field(default=True, alias='sendSms')
    send_push: bool = Field(default=True, alias='sendPush')

    @field_validator('starts_at')
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are taken as UTC
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @field_validator('description', 'location', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return '' if value is None else value


class ChatSendRequest(RequestModel):
    room_id: str = Field(default='all', alias='roomId')
    text: str = ''


def parse_body(model):
    """Validate the JSON body of the current request against ``model``."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    return model.model_validate(data)
