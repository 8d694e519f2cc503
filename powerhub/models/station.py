"""
Station
---------------------------

A physical docking location holding a number of power banks.
Stations are reference data and are only created when the fleet is provisioned.
"""
from typing import Dict, Any

from tortoise import Model, fields


class Station(Model):
    id = fields.IntField(pk=True)
    location = fields.CharField(max_length=255)
    capacity = fields.IntField(default=6)
    """The number of power banks the station can hold."""

    def serialize(self, free_count: int = None) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "location": self.location,
            "capacity": self.capacity,
        }

        if free_count is not None:
            data["free_power_banks"] = free_count

        return data

    def qr_payload(self) -> Dict[str, Any]:
        """The data encoded in the QR code stuck on the station."""
        return {"stationId": self.id, "location": self.location}

    def __str__(self):
        return f"[{self.id}] {self.location}"
