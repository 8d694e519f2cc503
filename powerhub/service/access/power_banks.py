"""
Power Banks
-----------

Every state change of a power bank is a conditional update that
only applies if the bank is still in the state we expect. Callers
check the number of modified rows to know whether they won.

A reservation carries an id that is also stored on its payment, so
that events for one checkout can never touch a reservation made for
another.
"""
from datetime import datetime
from typing import List, Dict

from tortoise.expressions import Q
from tortoise.functions import Count

from powerhub.models import PowerBank, PowerBankStatus


async def count_free(station_id: int) -> int:
    """Counts the free power banks at a station."""
    return await PowerBank.filter(station_id=station_id, status=PowerBankStatus.FREE).count()


async def count_free_by_station() -> Dict[int, int]:
    counts = await PowerBank.filter(status=PowerBankStatus.FREE).annotate(
        count=Count("id")
    ).group_by("station_id").values_list("station_id", "count")
    return dict(counts)


async def get_free_power_banks(station_id: int) -> List[PowerBank]:
    return await PowerBank.filter(station_id=station_id, status=PowerBankStatus.FREE)


async def get_power_bank(*, power_bank_id: int):
    return await PowerBank.filter(id=power_bank_id).first()


async def get_rented_power_banks(user_id: str) -> List[PowerBank]:
    """Gets the power banks the given user is currently renting."""
    return await PowerBank.filter(user_id=user_id, status=PowerBankStatus.INUSE).order_by("rented_at")


async def get_overdue_power_banks(rented_before: datetime) -> List[PowerBank]:
    """Gets the power banks that have been in use since before the given time."""
    return await PowerBank.filter(status=PowerBankStatus.INUSE, rented_at__lte=rented_before).order_by("rented_at")


async def reserve_power_bank(power_bank: PowerBank, until: datetime, reservation_id: str) -> bool:
    """
    Reserves the power bank if it is still free.

    :return: Whether the reservation was made.
    """
    modified = await PowerBank.filter(id=power_bank.id, status=PowerBankStatus.FREE).update(
        status=PowerBankStatus.RESERVED, reserved_until=until, reservation_id=reservation_id
    )
    return modified == 1


async def release_reservation(power_bank_id: int, reservation_id: str) -> bool:
    """Frees a reserved power bank, as long as it is still held by the given reservation."""
    modified = await PowerBank.filter(
        id=power_bank_id, status=PowerBankStatus.RESERVED, reservation_id=reservation_id
    ).update(
        status=PowerBankStatus.FREE, reserved_until=None, reservation_id=None
    )
    return modified == 1


async def release_expired_reservations(now: datetime) -> int:
    """Frees all the power banks whose reservation ran out before ``now``."""
    return await PowerBank.filter(status=PowerBankStatus.RESERVED, reserved_until__lte=now).update(
        status=PowerBankStatus.FREE, reserved_until=None, reservation_id=None
    )


async def start_rental(power_bank_id: int, reservation_id: str, user_id: str, now: datetime) -> bool:
    """
    Hands the power bank over to the user holding the reservation.

    A bank whose reservation was reaped but that is still free is
    handed over too, as the user has paid for it. A bank reserved
    by someone else is not.
    """
    modified = await PowerBank.filter(
        Q(status=PowerBankStatus.FREE) | Q(status=PowerBankStatus.RESERVED, reservation_id=reservation_id),
        id=power_bank_id,
    ).update(
        status=PowerBankStatus.INUSE, user_id=user_id, rented_at=now, reserved_until=None, reservation_id=None
    )
    return modified == 1


async def return_power_banks(user_id: str) -> int:
    """
    Returns all the power banks a user is renting.

    :return: The number of returned power banks.
    """
    return await PowerBank.filter(user_id=user_id, status=PowerBankStatus.INUSE).update(
        status=PowerBankStatus.FREE, user_id=None, rented_at=None
    )
