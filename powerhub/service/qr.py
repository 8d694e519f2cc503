"""
QR Codes
--------

Every station carries a QR code the app scans to find out which
station the user is standing at. The code encodes the station
data as JSON.
"""
import json
from io import BytesIO
from pathlib import Path
from typing import List, Iterable

import qrcode
import qrcode.constants

from powerhub import logger
from powerhub.models import Station


def station_qr_code(station: Station) -> bytes:
    """Renders the QR code for a station as a PNG image."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(json.dumps(station.qr_payload(), ensure_ascii=False))
    qr.make(fit=True)

    image = qr.make_image(fill_color="#000000", back_color="#FFFFFF")
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def write_station_qr_codes(stations: Iterable[Station], directory: Path) -> List[Path]:
    """
    Writes the QR code of every station to ``station_<id>.png`` in the directory.

    :return: The paths of the written files.
    """
    directory.mkdir(parents=True, exist_ok=True)
    paths = []

    for station in stations:
        path = directory / f"station_{station.id}.png"
        path.write_bytes(station_qr_code(station))
        logger.info("QR code for station %s saved as %s", station.id, path)
        paths.append(path)

    return paths
