"""
Stations
--------

Stations are provisioned once with a fixed set of locations.
"""
from typing import Optional, List, Tuple

from powerhub import logger
from powerhub.models import Station, PowerBank

STATIONS = [
    (1, "Saulėtekio al. 15, Vilnius, Lithuania"),
    (2, "Antakalnio g. 86, Vilnius, Lithuania"),
    (3, "Antakalnio g. 41, Vilnius, Lithuania"),
]
"""The stations the fleet is provisioned with."""

DEFAULT_CAPACITY = 6


async def get_stations() -> List[Station]:
    return await Station.all().order_by("id")


async def get_station(*, station_id: int) -> Optional[Station]:
    return await Station.filter(id=station_id).first()


async def initialize_stations(stations=None, capacity: int = DEFAULT_CAPACITY) -> Tuple[int, int]:
    """
    Creates the given stations if they do not exist and tops each
    one up with free power banks until it is full.

    :param stations: A list of ``(id, location)`` pairs.
    :param capacity: The capacity of newly created stations.
    :return: The number of created stations and created power banks.
    """
    if stations is None:
        stations = STATIONS

    created_stations = 0
    created_banks = 0

    for station_id, location in stations:
        station, created = await Station.get_or_create(
            id=station_id, defaults={"location": location, "capacity": capacity}
        )
        created_stations += int(created)

        missing = station.capacity - await PowerBank.filter(station_id=station.id).count()
        for _ in range(max(missing, 0)):
            await PowerBank.create(station_id=station.id)
        created_banks += max(missing, 0)

    logger.info("Provisioned %s stations and %s power banks", created_stations, created_banks)
    return created_stations, created_banks
