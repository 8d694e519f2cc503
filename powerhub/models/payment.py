"""
Payment
---------------------------

A payment is opened for every checkout session and links the
session to the power bank that was reserved for it.
"""
from enum import Enum

from tortoise import Model, fields


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"


class Payment(Model):
    id = fields.IntField(pk=True)
    station_id = fields.IntField()
    power_bank_id = fields.IntField()
    user_id = fields.CharField(max_length=128, index=True)

    amount = fields.IntField()
    """The amount charged (in the smallest currency unit, ie. cents)."""

    currency = fields.CharField(max_length=3)
    session_id = fields.CharField(max_length=255, unique=True)
    reservation_id = fields.CharField(max_length=32)
    """The reservation made on the power bank for this payment."""

    status = fields.CharEnumField(PaymentStatus, max_length=16, default=PaymentStatus.PENDING)
    created_at = fields.DatetimeField(auto_now_add=True)
    paid_at = fields.DatetimeField(null=True)

    def serialize(self):
        return {
            "id": self.id,
            "station_id": self.station_id,
            "power_bank_id": self.power_bank_id,
            "user_id": self.user_id,
            "amount": self.amount,
            "currency": self.currency,
            "session_id": self.session_id,
            "status": self.status,
            "created_at": self.created_at,
            "paid_at": self.paid_at,
        }

    def __str__(self):
        return f"[{self.id}] {self.amount} {self.currency} for bank {self.power_bank_id} ({self.status.value})"
