"""
.. autoclasstree:: powerhub.serializer

The serializer package houses all the schemas for the input/output in the system.
The serializers are used to generate and validate any raw data (such as JSON)
going in and out of the system.

.. note:: The api speaks camelCase while the models are snake_case. The
    conversion happens here, using the ``data_key`` of each field.
"""

from .fields import EnumField, Many
from .jsend import JSendSchema, JSendStatus
from .decorators import expects, returns
