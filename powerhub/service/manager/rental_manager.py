"""
Rental Manager
--------------

This module is what handles the lifecycle of all the rentals in the system.

Responsibilities
================

- checking power bank availability
- opening a paid rental (reserving a bank and opening a checkout)
- confirming the rental when stripe reports the payment
- releasing reservations that were never paid for
- returning power banks

A rental goes through the following steps. When a checkout is opened,
a free power bank is reserved so that nobody else can pay for it and a
pending payment is recorded. Once stripe reports the session completed,
the payment is marked as paid and the bank handed over to the user. If
the session expires instead, the bank goes back to being free.
"""
from datetime import datetime, timezone, timedelta
from typing import Tuple
from uuid import uuid4

from powerhub import logger
from powerhub.models import Payment
from powerhub.service.access.payments import create_payment, mark_paid, mark_expired
from powerhub.service.access.power_banks import (
    count_free, get_free_power_banks, reserve_power_bank, release_reservation,
    release_expired_reservations, start_rental, return_power_banks
)
from powerhub.service.access.users import get_user
from powerhub.service.payment import PaymentManager, PaymentProviderError

CHECKOUT_COMPLETED = "checkout.session.completed"
CHECKOUT_EXPIRED = "checkout.session.expired"


class RentalError(Exception):
    pass


class NoAvailabilityError(RentalError):
    """Raised when there are no free power banks at a station."""

    def __init__(self, station_id):
        super().__init__(f"No FREE PowerBanks available at station {station_id}.")
        self.station_id = station_id


class BannedUserError(RentalError):
    """Raised when a banned user tries to rent a power bank."""

    def __init__(self, user_id):
        super().__init__(f"User {user_id} is banned and may not rent power banks.")
        self.user_id = user_id


class RentalManager:
    """
    Handles the lifecycle of the rental in the system.
    """

    def __init__(self, payment_manager: PaymentManager, currency: str, reservation_timeout: timedelta):
        self._payment_manager = payment_manager
        self.currency = currency
        self.reservation_timeout = reservation_timeout

    async def check_availability(self, station_id: int) -> Tuple[bool, int]:
        """
        Checks whether there are free power banks at a station.

        :return: Whether a bank is available, and the number of free banks.
        """
        free_count = await count_free(station_id)
        return free_count > 0, free_count

    async def create_session(self, station_id: int, amount: int, user_id: str) -> Tuple[str, Payment]:
        """
        Reserves a power bank at the station and opens a checkout session for it.

        :return: The url to send the user to, and the pending payment.
        :raises BannedUserError: If the user is banned.
        :raises NoAvailabilityError: If there are no free power banks at the station.
        :raises PaymentProviderError: If the checkout session could not be opened.
        """
        user = await get_user(user_id=user_id)
        if user is not None and user.is_banned:
            raise BannedUserError(user_id)

        now = datetime.now(timezone.utc)
        reserved_until = now + self.reservation_timeout
        reservation_id = uuid4().hex

        for candidate in await get_free_power_banks(station_id):
            # someone else may grab the same bank between the lookup and the reservation
            if await reserve_power_bank(candidate, reserved_until, reservation_id):
                power_bank = candidate
                break
        else:
            raise NoAvailabilityError(station_id)

        try:
            session = await self._payment_manager.create_checkout_session(
                station_id, amount, self.currency, user_id, reserved_until
            )
        except PaymentProviderError:
            await release_reservation(power_bank.id, reservation_id)
            raise

        payment = await create_payment(
            station_id=station_id,
            power_bank_id=power_bank.id,
            user_id=user_id,
            amount=amount,
            currency=self.currency,
            session_id=session.id,
            reservation_id=reservation_id,
        )

        logger.info("Reserved power bank %s for user %s (session %s)", power_bank.id, user_id, session.id)
        return session.url, payment

    async def handle_payment_event(self, payload: bytes, signature: str) -> bool:
        """
        Applies a stripe webhook event.

        Replaying an event is harmless, as both transitions only
        apply to payments that are still pending.

        :return: Whether the event changed anything.
        :raises SignatureError: If the event could not be verified.
        """
        event = self._payment_manager.construct_event(payload, signature)

        if event["type"] == CHECKOUT_COMPLETED:
            return await self.confirm_payment(event["data"]["object"]["id"])
        elif event["type"] == CHECKOUT_EXPIRED:
            return await self.expire_payment(event["data"]["object"]["id"])

        logger.debug("Ignoring stripe event %s", event["type"])
        return False

    async def confirm_payment(self, session_id: str) -> bool:
        """Marks the payment as paid and hands the power bank over to the user."""
        now = datetime.now(timezone.utc)
        payment = await mark_paid(session_id, now)
        if payment is None:
            logger.info("No pending payment for session %s, ignoring", session_id)
            return False

        if await start_rental(payment.power_bank_id, payment.reservation_id, payment.user_id, now):
            logger.info("PowerBank %s set to INUSE by user %s", payment.power_bank_id, payment.user_id)
        else:
            logger.warning(
                "Payment %s was paid but power bank %s is held by someone else",
                payment.id, payment.power_bank_id
            )

        return True

    async def expire_payment(self, session_id: str) -> bool:
        """Marks the payment as expired and frees the reserved power bank."""
        payment = await mark_expired(session_id)
        if payment is None:
            return False

        if await release_reservation(payment.power_bank_id, payment.reservation_id):
            logger.info("Checkout %s expired, released power bank %s", session_id, payment.power_bank_id)
        return True

    async def release_expired_reservations(self, now: datetime) -> int:
        """Frees the power banks whose checkout was never completed in time."""
        released = await release_expired_reservations(now)
        if released:
            logger.info("Released %s expired reservations", released)
        return released

    async def return_all(self, user_id: str) -> int:
        """
        Returns all the power banks the user is renting.
        Reminders and bans are left as they are.

        :return: The number of returned power banks.
        """
        returned = await return_power_banks(user_id)
        logger.info("User %s returned %s power banks", user_id, returned)
        return returned
