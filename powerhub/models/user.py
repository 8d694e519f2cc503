"""
User
---------------------------
"""
from enum import Enum

from tortoise import Model, fields


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(Model):
    """
    Represents a User in the system.

    Users are identified by the external ``user_id`` handed to us by the
    client app. The integer ``id`` is internal only.
    """

    id = fields.IntField(pk=True)
    user_id = fields.CharField(max_length=128, unique=True)

    name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255, null=True)

    reminders_sent = fields.IntField(default=0)
    is_banned = fields.BooleanField(default=False)
    role = fields.CharEnumField(UserRole, max_length=16, default=UserRole.USER)

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def serialize(self):
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "reminders_sent": self.reminders_sent,
            "is_banned": self.is_banned,
            "role": self.role,
        }

    def __str__(self):
        return f"[{self.user_id}] {self.name} ({self.email})"
