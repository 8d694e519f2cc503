"""
Payment
-------

Wraps the stripe checkout flow. A checkout session is opened for every
rental and stripe reports back through a signed webhook once the
customer has paid.

The stripe library is synchronous, so calls that hit the network are
run in a thread pool to keep the event loop free.
"""
import abc
import asyncio
from concurrent.futures.thread import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import NamedTuple
from uuid import uuid4

import stripe

from powerhub import logger

MINIMUM_SESSION_LIFETIME = timedelta(minutes=30)
MAXIMUM_SESSION_LIFETIME = timedelta(hours=24)
"""Stripe only accepts checkout session expiries within this window."""


class PaymentError(Exception):
    pass


class SignatureError(PaymentError):
    """Raised when a webhook payload cannot be verified."""


class PaymentProviderError(PaymentError):
    """Raised when stripe could not be reached or refused the request."""


class CheckoutSession(NamedTuple):
    id: str
    url: str


class PaymentManager(abc.ABC):

    def __init__(self, webhook_secret: str, public_url: str):
        self._webhook_secret = webhook_secret
        self._public_url = public_url

    @property
    def success_url(self):
        return f"{self._public_url}/success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def cancel_url(self):
        return f"{self._public_url}/cancel"

    @abc.abstractmethod
    async def create_checkout_session(
        self, station_id: int, amount: int, currency: str, user_id: str, expires_at: datetime
    ) -> CheckoutSession:
        pass

    def construct_event(self, payload: bytes, signature: str) -> stripe.Event:
        """
        Verifies and parses a webhook payload.

        :param payload: The raw request body.
        :param signature: The value of the ``Stripe-Signature`` header.
        :raises SignatureError: If the payload was not signed with our secret.
        """
        if not signature:
            raise SignatureError("Missing Stripe-Signature header.")
        if not self._webhook_secret:
            raise SignatureError("No webhook secret is configured.")

        try:
            return stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except ValueError as error:
            raise SignatureError(f"Invalid payload: {error}") from error
        except stripe.SignatureVerificationError as error:
            raise SignatureError(str(error)) from error


class DummyPaymentManager(PaymentManager):
    """
    Opens fake checkout sessions without talking to stripe.
    Webhook signatures are still checked for real.
    """

    def __init__(self, webhook_secret: str = "whsec_dummy", public_url: str = "http://localhost:4242", fail=False):
        super().__init__(webhook_secret, public_url)
        self.fail = fail
        self.sessions = []

    async def create_checkout_session(self, station_id, amount, currency, user_id, expires_at):
        if self.fail:
            raise PaymentProviderError("Stripe is unavailable.")

        session_id = f"cs_test_{uuid4().hex}"
        session = CheckoutSession(session_id, f"https://checkout.stripe.com/c/pay/{session_id}")
        self.sessions.append(session)
        return session


class StripePaymentManager(PaymentManager):

    def __init__(self, stripe_key: str, webhook_secret: str, public_url: str):
        """
        Creates a new instance of the StripePaymentManager class.
        """
        super().__init__(webhook_secret, public_url)
        stripe.api_key = stripe_key

        self._executor = ThreadPoolExecutor()

    async def _run_in_executor(self, func, *args, **kwargs):
        pfunc = partial(func, *args, **kwargs)
        return await asyncio.get_event_loop().run_in_executor(
            self._executor,
            pfunc
        )

    async def create_checkout_session(self, station_id, amount, currency, user_id, expires_at):
        """
        Opens a stripe checkout session for a single power bank rental.

        :param station_id: The station the rental is from.
        :param amount: The price in the smallest currency unit.
        :param currency: The three letter currency code.
        :param user_id: The user paying.
        :param expires_at: When the session should stop accepting payment.
        :raises PaymentProviderError: If stripe fails to create the session.
        """
        now = datetime.now(timezone.utc)
        expires_at = min(max(expires_at, now + MINIMUM_SESSION_LIFETIME), now + MAXIMUM_SESSION_LIFETIME)

        try:
            session = await self._run_in_executor(
                stripe.checkout.Session.create,
                payment_method_types=['card'],
                mode='payment',
                line_items=[{
                    "price_data": {
                        "currency": currency,
                        "product_data": {"name": f"PowerBank Rental - Station {station_id}"},
                        "unit_amount": amount,
                    },
                    "quantity": 1,
                }],
                client_reference_id=user_id,
                expires_at=int(expires_at.timestamp()),
                success_url=self.success_url,
                cancel_url=self.cancel_url,
            )
        except stripe.StripeError as error:
            logger.error("Could not create checkout session: %s", error.user_message or str(error))
            raise PaymentProviderError(str(error)) from error

        return CheckoutSession(session.id, session.url)
