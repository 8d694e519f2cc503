from aiohttp.test_utils import TestClient
from marshmallow.fields import String, Boolean, Integer

from powerhub.models import PowerBank, PowerBankStatus, Payment, PaymentStatus
from powerhub.serializer import JSendSchema, JSendStatus, Many
from powerhub.serializer.models import PaymentSchema, PowerBankSchema
from tests.util import completed_event, signed_event


class TestCheckoutSessionView:

    async def test_create_checkout_session(self, client: TestClient, payment_manager, free_power_banks, random_user):
        """Assert that opening a session returns the checkout url and reserves a power bank."""
        response_schema = JSendSchema.of(url=String(required=True))
        response = await client.post("/create-checkout-session", json={
            "stationId": 1, "amount": 200, "userId": random_user.user_id
        })
        response_data = response_schema.load(await response.json())
        assert response.status == 200
        assert response_data["status"] == JSendStatus.SUCCESS
        assert response_data["data"]["url"] == payment_manager.sessions[0].url
        assert await PowerBank.filter(status=PowerBankStatus.RESERVED).count() == 1
        assert await Payment.filter(status=PaymentStatus.PENDING).count() == 1

    async def test_create_checkout_session_no_availability(self, client: TestClient, random_station, random_user):
        """Assert that an empty station fails with a message."""
        response = await client.post("/create-checkout-session", json={
            "stationId": random_station.id, "amount": 200, "userId": random_user.user_id
        })
        response_data = JSendSchema().load(await response.json())
        assert response.status == 400
        assert response_data["status"] == JSendStatus.FAIL
        assert response_data["data"]["message"] == f"No FREE PowerBanks available at station {random_station.id}."
        assert await Payment.all().count() == 0

    async def test_create_checkout_session_banned(self, client: TestClient, random_user_factory, free_power_banks):
        """Assert that banned users cannot rent."""
        user = await random_user_factory(is_banned=True)
        response = await client.post("/create-checkout-session", json={
            "stationId": 1, "amount": 200, "userId": user.user_id
        })
        response_data = JSendSchema().load(await response.json())
        assert response.status == 403
        assert response_data["status"] == JSendStatus.FAIL
        assert await PowerBank.filter(status=PowerBankStatus.FREE).count() == 6

    async def test_create_checkout_session_provider_error(
        self, client: TestClient, payment_manager, free_power_banks, random_user
    ):
        """Assert that a failing payment provider gives an error and frees the power bank again."""
        payment_manager.fail = True
        response = await client.post("/create-checkout-session", json={
            "stationId": 1, "amount": 200, "userId": random_user.user_id
        })
        response_data = JSendSchema().load(await response.json())
        assert response.status == 500
        assert response_data["status"] == JSendStatus.ERROR
        assert "message" in response_data
        assert await PowerBank.filter(status=PowerBankStatus.FREE).count() == 6

    async def test_create_checkout_session_bad_amount(self, client: TestClient, free_power_banks, random_user):
        response = await client.post("/create-checkout-session", json={
            "stationId": 1, "amount": 0, "userId": random_user.user_id
        })
        response_data = JSendSchema().load(await response.json())
        assert response.status == 400
        assert "amount" in response_data["data"]["errors"]

    async def test_create_checkout_session_missing_fields(self, client: TestClient, free_power_banks):
        response = await client.post("/create-checkout-session", json={"amount": 200})
        response_data = JSendSchema().load(await response.json())
        assert response.status == 400
        assert "stationId" in response_data["data"]["errors"]
        assert "userId" in response_data["data"]["errors"]


class TestWebhookView:

    async def open_session(self, client, user_id):
        await client.post("/create-checkout-session", json={"stationId": 1, "amount": 200, "userId": user_id})
        return await Payment.get(user_id=user_id)

    async def test_completed_checkout(self, client: TestClient, free_power_banks, random_user):
        """Assert that a completed checkout hands the power bank over to the user."""
        payment = await self.open_session(client, random_user.user_id)
        payload, signature = completed_event(payment.session_id)

        response = await client.post("/webhook", data=payload, headers={"Stripe-Signature": signature})
        response_data = JSendSchema.of(received=Boolean(required=True)).load(await response.json())
        assert response.status == 200
        assert response_data["data"]["received"]

        power_bank = await PowerBank.get(id=payment.power_bank_id)
        assert power_bank.status is PowerBankStatus.INUSE
        assert power_bank.user_id == random_user.user_id
        assert power_bank.rented_at is not None
        await payment.refresh_from_db()
        assert payment.status is PaymentStatus.PAID

    async def test_expired_checkout(self, client: TestClient, free_power_banks, random_user):
        payment = await self.open_session(client, random_user.user_id)
        payload, signature = signed_event("checkout.session.expired", payment.session_id)

        response = await client.post("/webhook", data=payload, headers={"Stripe-Signature": signature})
        assert response.status == 200
        assert (await PowerBank.get(id=payment.power_bank_id)).status is PowerBankStatus.FREE

    async def test_unknown_session(self, client: TestClient, free_power_banks):
        """Assert that events for sessions we never opened are acknowledged and ignored."""
        payload, signature = completed_event("cs_test_unknown")
        response = await client.post("/webhook", data=payload, headers={"Stripe-Signature": signature})
        assert response.status == 200
        assert await PowerBank.filter(status=PowerBankStatus.FREE).count() == 6

    async def test_other_event(self, client: TestClient, database):
        payload, signature = signed_event("payment_intent.created", "pi_123")
        response = await client.post("/webhook", data=payload, headers={"Stripe-Signature": signature})
        assert response.status == 200

    async def test_invalid_signature(self, client: TestClient, free_power_banks, random_user):
        """Assert that an event not signed with our secret changes nothing."""
        payment = await self.open_session(client, random_user.user_id)
        payload, signature = completed_event(payment.session_id, secret="whsec_wrong")

        response = await client.post("/webhook", data=payload, headers={"Stripe-Signature": signature})
        response_data = JSendSchema().load(await response.json())
        assert response.status == 400
        assert response_data["status"] == JSendStatus.FAIL
        assert response_data["data"]["message"].startswith("Webhook Error")
        assert (await PowerBank.get(id=payment.power_bank_id)).status is PowerBankStatus.RESERVED

    async def test_missing_signature(self, client: TestClient, database):
        payload, _ = completed_event("cs_test_123")
        response = await client.post("/webhook", data=payload)
        assert response.status == 400

    async def test_malformed_payload(self, client: TestClient, database):
        response = await client.post("/webhook", data=b"not json", headers={"Stripe-Signature": "t=1,v1=abc"})
        assert response.status == 400


class TestPaymentsView:

    async def test_get_payments(self, client: TestClient, free_power_banks, random_user):
        """Assert that a user can see the payments they made."""
        await client.post("/create-checkout-session", json={
            "stationId": 1, "amount": 350, "userId": random_user.user_id
        })
        response_schema = JSendSchema.of(payments=Many(PaymentSchema()))
        response = await client.get("/payments", params={"userId": random_user.user_id})
        response_data = response_schema.load(await response.json())
        assert response_data["status"] == JSendStatus.SUCCESS
        assert len(response_data["data"]["payments"]) == 1
        assert response_data["data"]["payments"][0]["amount"] == 350
        assert response_data["data"]["payments"][0]["status"] is PaymentStatus.PENDING

    async def test_get_payments_missing_user_id(self, client: TestClient, database):
        response = await client.get("/payments")
        response_data = JSendSchema().load(await response.json())
        assert response.status == 400
        assert response_data["status"] == JSendStatus.FAIL


class TestUserPowerBanksView:

    response_schema = JSendSchema.of(power_banks=Many(
        PowerBankSchema(only=("id", "station_id", "location", "rented_at")), data_key="powerBanks"
    ))

    async def test_get_my_power_banks(self, client: TestClient, random_station, overdue_power_bank, random_user):
        """Assert that the rented power banks are listed with the station location."""
        response = await client.get("/my-powerbanks", params={"userId": random_user.user_id})
        response_data = self.response_schema.load(await response.json())
        assert response.status == 200
        power_banks = response_data["data"]["power_banks"]
        assert len(power_banks) == 1
        assert power_banks[0]["id"] == overdue_power_bank.id
        assert power_banks[0]["station_id"] == random_station.id
        assert power_banks[0]["location"] == random_station.location
        assert power_banks[0]["rented_at"] is not None

    async def test_get_my_power_banks_none(self, client: TestClient, random_user):
        response = await client.get("/my-powerbanks", params={"userId": random_user.user_id})
        response_data = self.response_schema.load(await response.json())
        assert response_data["data"]["power_banks"] == []

    async def test_get_my_power_banks_missing_user_id(self, client: TestClient, database):
        response = await client.get("/my-powerbanks")
        assert response.status == 400


class TestReturnPowerBanksView:

    async def test_return_power_banks(self, client: TestClient, rented_power_bank_factory, random_user_factory):
        """Assert that returning frees every power bank the user rented, and keeps their reminders."""
        user = await random_user_factory(reminders_sent=2)
        await rented_power_bank_factory(user)
        await rented_power_bank_factory(user)

        response_schema = JSendSchema.of(message=String(), returned=Integer())
        response = await client.post("/return-powerbanks", json={"userId": user.user_id})
        response_data = response_schema.load(await response.json())
        assert response.status == 200
        assert response_data["data"]["returned"] == 2
        assert response_data["data"]["message"] == "2 power banks returned."

        assert await PowerBank.filter(status=PowerBankStatus.FREE, user_id=None, rented_at=None).count() == 2
        await user.refresh_from_db()
        assert user.reminders_sent == 2

    async def test_return_nothing(self, client: TestClient, random_user):
        response = await client.post("/return-powerbanks", json={"userId": random_user.user_id})
        response_data = await response.json()
        assert response.status == 200
        assert response_data["data"]["returned"] == 0
