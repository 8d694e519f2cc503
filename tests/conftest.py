from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient
from faker import Faker
from tortoise import Tortoise, connections

from powerhub.middleware import error_middleware
from powerhub.models import User, UserRole, Station, PowerBank, PowerBankStatus
from powerhub.service import RentalManager, DummyPaymentManager, DummyMailer
from powerhub.service.background.overdue_sweeper import OverdueSweeper
from powerhub.service.background.reservation_reaper import ReservationReaper
from powerhub.signals import register_signals
from powerhub.views import register_views
from tests.util import WEBHOOK_SECRET

fake = Faker()


@pytest.fixture
async def database():
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={'models': ['powerhub.models']},
        use_tz=True,
    )
    await Tortoise.generate_schemas()
    yield
    await connections.close_all()


@pytest.fixture
def payment_manager():
    return DummyPaymentManager(WEBHOOK_SECRET)


@pytest.fixture
def mailer():
    return DummyMailer()


@pytest.fixture
def rental_manager(database, payment_manager) -> RentalManager:
    return RentalManager(payment_manager, "usd", timedelta(minutes=30))


@pytest.fixture
def overdue_sweeper(database, mailer) -> OverdueSweeper:
    return OverdueSweeper(mailer, timedelta(hours=24), max_reminders=3)


@pytest.fixture
def reservation_reaper(rental_manager) -> ReservationReaper:
    return ReservationReaper(rental_manager)


@pytest.fixture
async def client(aiohttp_client, database, payment_manager, mailer, rental_manager) -> TestClient:
    app = web.Application(middlewares=[error_middleware])

    app['payment_manager'] = payment_manager
    app['mailer'] = mailer
    app['rental_manager'] = rental_manager

    register_signals(app, init_database=False, background_tasks=False)  # we get the database from a fixture
    register_views(app, "")

    return await aiohttp_client(app)


@pytest.fixture
def random_user_factory(database):
    user_number = count(1)

    async def create_user(is_admin=False, reminders_sent=0, is_banned=False, email=True):
        return await User.create(
            user_id=f"{fake.user_name()}-{next(user_number)}", name=fake.name(),
            email=fake.email() if email else None, reminders_sent=reminders_sent, is_banned=is_banned,
            role=UserRole.ADMIN if is_admin else UserRole.USER,
        )

    return create_user


@pytest.fixture
async def random_user(random_user_factory) -> User:
    """Creates a random user in the database."""
    return await random_user_factory()


@pytest.fixture
async def random_admin(random_user_factory) -> User:
    return await random_user_factory(is_admin=True)


@pytest.fixture
async def random_station(database) -> Station:
    return await Station.create(id=1, location=fake.street_address(), capacity=6)


@pytest.fixture
async def free_power_banks(random_station):
    """Fills the station up with free power banks."""
    return [await PowerBank.create(station_id=random_station.id) for _ in range(random_station.capacity)]


@pytest.fixture
def rented_power_bank_factory(random_station):

    async def rent_power_bank(user: User, rented_for=timedelta(days=2)):
        return await PowerBank.create(
            station_id=random_station.id, status=PowerBankStatus.INUSE,
            user_id=user.user_id, rented_at=datetime.now(timezone.utc) - rented_for
        )

    return rent_power_bank


@pytest.fixture
async def overdue_power_bank(rented_power_bank_factory, random_user) -> PowerBank:
    """A power bank that the random user should have returned a day ago."""
    return await rented_power_bank_factory(random_user)
