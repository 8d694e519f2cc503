"""
Model Serializers
-----------------

Defines serializers for the various models in the system, as well
as the request bodies the api accepts.
"""
from enum import Enum

from marshmallow import Schema
from marshmallow.fields import Integer, Boolean, String, Email, DateTime
from marshmallow.validate import Range, Length

from powerhub.models import PowerBankStatus, PaymentStatus, UserRole
from .fields import EnumField


class BanAction(str, Enum):
    BAN = "ban"
    UNBAN = "unban"


class UserSchema(Schema):
    """The schema corresponding to the :class:`~powerhub.models.user.User` model."""

    user_id = String(required=True, data_key="userId", validate=Length(min=1, max=128))
    name = String(required=True, validate=Length(min=1, max=255))
    email = Email(allow_none=True)
    reminders_sent = Integer(data_key="remindersSent")
    is_banned = Boolean(data_key="isBanned")
    role = EnumField(UserRole)


class StationSchema(Schema):
    id = Integer(required=True)
    location = String(required=True)
    capacity = Integer()
    free_power_banks = Integer(data_key="freePowerBanks")


class PowerBankSchema(Schema):
    """The schema corresponding to the :class:`~powerhub.models.power_bank.PowerBank` model."""

    id = Integer(required=True)
    station_id = Integer(required=True, data_key="stationId")
    status = EnumField(PowerBankStatus)
    location = String(allow_none=True)
    rented_at = DateTime(allow_none=True, data_key="rentedAt")


class PaymentSchema(Schema):
    """The schema corresponding to the :class:`~powerhub.models.payment.Payment` model."""

    id = Integer(required=True)
    station_id = Integer(data_key="stationId")
    power_bank_id = Integer(data_key="powerBankId")
    user_id = String(data_key="userId")
    amount = Integer()
    currency = String()
    session_id = String(data_key="sessionId")
    status = EnumField(PaymentStatus)
    created_at = DateTime(data_key="createdAt")
    paid_at = DateTime(allow_none=True, data_key="paidAt")


class CheckoutSessionSchema(Schema):
    """The body needed to open a rental checkout session."""

    station_id = Integer(required=True, strict=True, data_key="stationId")
    amount = Integer(required=True, strict=True, validate=Range(min=1))
    """The price of the rental, in cents."""

    user_id = String(required=True, data_key="userId", validate=Length(min=1, max=128))


class UserIdSchema(Schema):
    user_id = String(required=True, data_key="userId", validate=Length(min=1, max=128))


class UserStatusSchema(UserIdSchema):
    action = EnumField(BanAction, required=True)
