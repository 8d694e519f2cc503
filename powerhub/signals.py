"""
Signals
-------

Defines a number of signals that the aiohttp server uses
to facilitate some of the advanced functionality.

Each signal must accept an the ``app`` argument.
"""
import asyncio
from asyncio import CancelledError
from contextlib import suppress

from aiohttp.web import Application
from tortoise import Tortoise, connections

from powerhub import logger
from powerhub.config import sweep_interval

BACKGROUND_TASKS = ("overdue_sweeper_task", "reservation_reaper_task")


async def initialize_database(app: Application):
    """Initializes and generates the schema for our database."""
    await Tortoise.init(
        db_url=app['database_uri'],
        modules={'models': ['powerhub.models']},
        use_tz=True,
    )
    await Tortoise.generate_schemas(safe=True)


async def close_database_connections(app: Application):
    """Closes the open database connections."""
    await connections.close_all()


async def start_background_tasks(app: Application):
    """Starts the background tasks."""
    logger.info("Starting Background Tasks")
    loop = asyncio.get_event_loop()

    app['overdue_sweeper_task'] = loop.create_task(app['overdue_sweeper'].run(sweep_interval))
    app['reservation_reaper_task'] = loop.create_task(app['reservation_reaper'].run(sweep_interval))


async def stop_background_tasks(app: Application):
    """
    Stops the background tasks.

    .. note: We suppress CancelledError so that coroutines that do not handle it don't cause issues.
    """
    for name in BACKGROUND_TASKS:
        task = app.get(name)
        if task is None:
            continue
        task.cancel()
        with suppress(CancelledError):
            await task


def register_signals(app, init_database=True, background_tasks=True):
    """Registers all the signals at the appropriate hooks."""
    if init_database:
        app.on_startup.append(initialize_database)

    if background_tasks:
        app.on_startup.append(start_background_tasks)
        app.on_cleanup.append(stop_background_tasks)

    if init_database:
        app.on_cleanup.append(close_database_connections)
