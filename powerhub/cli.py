"""
The entry points for the CLI tools.
"""
import asyncio
from pathlib import Path

from aiohttp import web
from tortoise import Tortoise, connections

from powerhub import logger, config
from powerhub.app import build_app
from powerhub.service.access.stations import get_stations
from powerhub.service.qr import write_station_qr_codes
from powerhub.version import __version__, name


def run():
    """Runs the server."""
    logger.info(f'Starting {name} %s!', __version__)
    web.run_app(build_app(), port=config.port)


async def _generate_qr_codes(directory: Path):
    await Tortoise.init(db_url=config.database_uri, modules={'models': ['powerhub.models']}, use_tz=True)
    try:
        await Tortoise.generate_schemas(safe=True)
        return write_station_qr_codes(await get_stations(), directory)
    finally:
        await connections.close_all()


def generate_qr_codes():
    """Writes the QR codes of all provisioned stations to the ``QR_OUTPUT_DIR``."""
    paths = asyncio.run(_generate_qr_codes(Path(config.qr_output_dir)))
    logger.info("Wrote %s QR codes to %s", len(paths), config.qr_output_dir)


if __name__ == '__main__':
    run()
