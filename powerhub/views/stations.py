"""
Station Related Views
---------------------------

Handles provisioning the fleet and looking up what is free where.
"""
from aiohttp import web
from marshmallow.fields import Boolean, Integer, String

from powerhub.models import Station
from powerhub.serializer import JSendSchema, JSendStatus, Many
from powerhub.serializer.decorators import returns
from powerhub.serializer.models import StationSchema
from powerhub.service.access.power_banks import count_free_by_station
from powerhub.service.access.stations import initialize_stations, get_stations, get_station
from powerhub.service.qr import station_qr_code
from powerhub.views.base import BaseView
from powerhub.views.decorators import match_getter


class InitializeDataView(BaseView):
    """
    Provisions the stations and fills them up with free power banks.
    """
    url = "/initialize-data"
    name = "initialize_data"

    @returns(JSendSchema.of(
        message=String(),
        created_stations=Integer(data_key="createdStations"),
        created_power_banks=Integer(data_key="createdPowerBanks"),
    ))
    async def post(self):
        stations, power_banks = await initialize_stations()
        return {
            "status": JSendStatus.SUCCESS,
            "data": {
                "message": "Data initialized successfully.",
                "created_stations": stations,
                "created_power_banks": power_banks,
            }
        }


class AvailabilityView(BaseView):
    """
    Gets the number of free power banks at a station.
    """
    url = r"/check-availability/{id:\d+}"
    name = "availability"

    @returns(JSendSchema.of(
        available=Boolean(required=True),
        free_power_banks=Integer(required=True, data_key="freePowerBanks"),
    ))
    async def get(self):
        station_id = int(self.request.match_info["id"])
        available, free_count = await self.rental_manager.check_availability(station_id)
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"available": available, "free_power_banks": free_count}
        }


class StationsView(BaseView):
    """
    Gets the list of all stations.
    """
    url = "/stations"
    name = "stations"

    @returns(JSendSchema.of(stations=Many(StationSchema())))
    async def get(self):
        free_counts = await count_free_by_station()
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"stations": [
                station.serialize(free_counts.get(station.id, 0)) for station in await get_stations()
            ]}
        }


class StationQRView(BaseView):
    """
    Gets the QR code to stick on a station.
    """
    url = r"/stations/{id:\d+}/qr"
    name = "station_qr"
    with_station = match_getter(get_station, 'station', station_id='id')

    @with_station
    async def get(self, station: Station):
        return web.Response(body=station_qr_code(station), content_type="image/png")
