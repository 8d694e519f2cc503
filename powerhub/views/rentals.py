"""
Rental Related Views
---------------------------

Handles opening rentals, the stripe webhook, and returning power banks.

To rent a power bank, open a checkout session at a station and
send the user to the returned url. Once stripe lets us know the
payment went through, the power bank is theirs.
"""
from http import HTTPStatus
from typing import List

from marshmallow.fields import String, Boolean, Integer

from powerhub import logger
from powerhub.models import PowerBank
from powerhub.serializer import JSendSchema, JSendStatus, Many
from powerhub.serializer.decorators import expects, returns
from powerhub.serializer.models import CheckoutSessionSchema, PaymentSchema, PowerBankSchema, UserIdSchema
from powerhub.service.access.payments import get_payments
from powerhub.service.access.power_banks import get_rented_power_banks
from powerhub.service.access.stations import get_stations
from powerhub.service.manager.rental_manager import NoAvailabilityError, BannedUserError
from powerhub.service.payment import PaymentProviderError, SignatureError
from powerhub.views.base import BaseView
from powerhub.views.decorators import match_getter, Query


class CheckoutSessionView(BaseView):
    """
    Reserves a power bank and opens a checkout session for it.
    """
    url = "/create-checkout-session"
    name = "checkout_session"

    @expects(CheckoutSessionSchema())
    @returns(
        no_availability=(JSendSchema(), HTTPStatus.BAD_REQUEST),
        banned=(JSendSchema(), HTTPStatus.FORBIDDEN),
        provider_error=(JSendSchema(), HTTPStatus.INTERNAL_SERVER_ERROR),
        success=JSendSchema.of(url=String(required=True)),
    )
    async def post(self):
        data = self.request["data"]
        try:
            url, payment = await self.rental_manager.create_session(
                data["station_id"], data["amount"], data["user_id"]
            )
        except NoAvailabilityError as error:
            return "no_availability", {
                "status": JSendStatus.FAIL,
                "data": {"message": str(error)}
            }
        except BannedUserError as error:
            return "banned", {
                "status": JSendStatus.FAIL,
                "data": {"message": str(error)}
            }
        except PaymentProviderError as error:
            logger.error("Error creating Checkout Session: %s", error)
            return "provider_error", {
                "status": JSendStatus.ERROR,
                "message": "Could not open a checkout session with the payment provider.",
            }

        return "success", {
            "status": JSendStatus.SUCCESS,
            "data": {"url": url}
        }


class WebhookView(BaseView):
    """
    Receives the payment events from stripe.

    Any event that carries a valid signature is acknowledged, even if there
    is nothing to do for it, so that stripe stops retrying.
    """
    url = "/webhook"
    name = "webhook"

    @returns(
        invalid=(JSendSchema(), HTTPStatus.BAD_REQUEST),
        success=JSendSchema.of(received=Boolean(required=True)),
    )
    async def post(self):
        payload = await self.request.read()
        signature = self.request.headers.get("Stripe-Signature")

        try:
            await self.rental_manager.handle_payment_event(payload, signature)
        except SignatureError as error:
            logger.warning("Webhook error: %s", error)
            return "invalid", {
                "status": JSendStatus.FAIL,
                "data": {"message": f"Webhook Error: {error}"}
            }

        return "success", {
            "status": JSendStatus.SUCCESS,
            "data": {"received": True}
        }


class PaymentsView(BaseView):
    """
    Gets the payments a user has made.
    """
    url = "/payments"
    name = "payments"
    with_payments = match_getter(get_payments, 'payments', user_id=Query('userId'))

    @with_payments
    @returns(JSendSchema.of(payments=Many(PaymentSchema())))
    async def get(self, payments):
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"payments": [payment.serialize() for payment in payments]}
        }


class UserPowerBanksView(BaseView):
    """
    Gets the power banks a user is currently renting, and where they were taken from.
    """
    url = "/my-powerbanks"
    name = "user_power_banks"
    with_power_banks = match_getter(get_rented_power_banks, 'power_banks', user_id=Query('userId'))

    @with_power_banks
    @returns(JSendSchema.of(power_banks=Many(
        PowerBankSchema(only=("id", "station_id", "location", "rented_at")), data_key="powerBanks"
    )))
    async def get(self, power_banks: List[PowerBank]):
        locations = {station.id: station.location for station in await get_stations()}
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"power_banks": [
                power_bank.serialize(locations.get(power_bank.station_id, "Unknown")) for power_bank in power_banks
            ]}
        }


class ReturnPowerBanksView(BaseView):
    """
    Returns all the power banks a user is renting.
    """
    url = "/return-powerbanks"
    name = "return_power_banks"

    @expects(UserIdSchema())
    @returns(JSendSchema.of(message=String(), returned=Integer()))
    async def post(self):
        returned = await self.rental_manager.return_all(self.request["data"]["user_id"])
        return {
            "status": JSendStatus.SUCCESS,
            "data": {
                "message": f"{returned} power banks returned.",
                "returned": returned,
            }
        }
