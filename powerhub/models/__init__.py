"""
The models package contains all the models used on the server.

.. autoclasstree:: powerhub.models
"""

from .payment import Payment, PaymentStatus
from .power_bank import PowerBank, PowerBankStatus
from .station import Station
from .user import User, UserRole
