"""
.. autoclasstree:: powerhub.service

The service layer for the system. Acts as the internal API.
The REST API and the background tasks use the service layer
to implement their logic.

The service layer implements the use cases for the system, such
that they may be reused by any program that needs to access it.
It is designed to represent the business logic.
"""

from .manager.rental_manager import RentalManager, NoAvailabilityError, BannedUserError
from .payment import PaymentManager, StripePaymentManager, DummyPaymentManager, SignatureError, PaymentProviderError
from .mail import Mailer, SMTPMailer, DummyMailer, MailError
