"""
Power Bank
---------------------------

Represents a rentable battery unit docked at a station.

A power bank moves through three states::

    FREE --(checkout opened)--> RESERVED --(payment confirmed)--> INUSE
      ^                            |                               |
      +---(reservation expired)----+                               |
      +-------------------------(returned)-------------------------+

The renter and the rental start are only ever set while the bank is
``INUSE``, and the reservation expiry and id only while it is ``RESERVED``.
"""
from enum import Enum

from tortoise import Model, fields


class PowerBankStatus(str, Enum):
    """We subclass string to make json serialization work."""
    FREE = "FREE"
    RESERVED = "RESERVED"
    INUSE = "INUSE"


class PowerBank(Model):
    id = fields.IntField(pk=True)
    station_id = fields.IntField(index=True)
    """The station the bank belongs to. This is not enforced as a foreign key."""

    status = fields.CharEnumField(PowerBankStatus, max_length=16, default=PowerBankStatus.FREE)
    user_id = fields.CharField(max_length=128, null=True)
    rented_at = fields.DatetimeField(null=True)
    reserved_until = fields.DatetimeField(null=True)
    reservation_id = fields.CharField(max_length=32, null=True)
    """Identifies the checkout holding the bank while it is reserved."""

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "power_bank"

    def serialize(self, location: str = None):
        data = {
            "id": self.id,
            "station_id": self.station_id,
            "status": self.status,
            "rented_at": self.rented_at,
        }

        if location is not None:
            data["location"] = location

        return data

    def __str__(self):
        return f"[{self.id}] station {self.station_id} ({self.status.value})"
