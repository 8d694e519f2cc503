from powerhub.models import Station
from powerhub.service.qr import station_qr_code, write_station_qr_codes

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


async def test_station_qr_code(database):
    station = Station(id=1, location="Saulėtekio al. 15, Vilnius, Lithuania", capacity=6)
    assert station_qr_code(station).startswith(PNG_SIGNATURE)


async def test_qr_payload(database):
    station = Station(id=2, location="Antakalnio g. 86", capacity=6)
    assert station.qr_payload() == {"stationId": 2, "location": "Antakalnio g. 86"}


async def test_write_station_qr_codes(database, tmp_path):
    stations = [Station(id=1, location="One"), Station(id=2, location="Two")]
    paths = write_station_qr_codes(stations, tmp_path / "qr_codes_img")

    assert [path.name for path in paths] == ["station_1.png", "station_2.png"]
    assert all(path.read_bytes().startswith(PNG_SIGNATURE) for path in paths)
