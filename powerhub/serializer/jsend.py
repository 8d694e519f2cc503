"""
JSend Envelope
--------------

Every JSON response is wrapped in a `JSend`_ envelope. Successes and
failures carry their payload in ``data``, failures always include a
``message`` the app can show to the user, and errors carry a top level
``message`` instead.

.. _`JSend`: https://github.com/omniti-labs/jsend
"""

from enum import Enum

from marshmallow import Schema, fields, validates_schema, ValidationError
from marshmallow.fields import Field

from .fields import EnumField


class JSendStatus(str, Enum):
    SUCCESS = "success"
    FAIL = "fail"
    """The request was at fault, such as a missing user or an empty station."""

    ERROR = "error"
    """We were at fault, or stripe was."""


class JSendSchema(Schema):
    status = EnumField(JSendStatus, required=True)
    data = fields.Dict()
    message = fields.String()

    @validates_schema
    def check_envelope(self, envelope, **kwargs):
        status = envelope["status"]

        if status is not JSendStatus.ERROR and "data" not in envelope:
            raise ValidationError(f"A {status.value} response needs data.")
        if status is JSendStatus.FAIL and "message" not in envelope["data"]:
            raise ValidationError("A failed response needs a message for the user.")
        if status is JSendStatus.ERROR and "message" not in envelope:
            raise ValidationError("An error response needs a message.")

    @staticmethod
    def of(**data_fields):
        """
        Creates an envelope whose ``data`` holds the given fields. Schemas
        are nested, fields are used as they are.

        >>> JSendSchema.of(user=UserSchema(), created=Boolean())
        """
        DataSchema = type("DataSchema", (Schema,), {
            name: field if isinstance(field, Field) else fields.Nested(field)
            for name, field in data_fields.items()
        })

        class TypedJSendSchema(JSendSchema):
            data = fields.Nested(DataSchema)

        return TypedJSendSchema()
