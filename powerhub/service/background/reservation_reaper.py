from asyncio import sleep, gather
from datetime import timedelta, datetime, timezone

from powerhub import logger
from powerhub.service.manager.rental_manager import RentalManager


class ReservationReaper:
    """
    This background service frees power banks whose checkout
    session was abandoned without stripe telling us.
    """

    def __init__(self, rental_manager: RentalManager):
        self._rental_manager = rental_manager

    async def run(self, interval: timedelta = None):
        """Frees expired reservations at most once every ``interval``."""
        if interval is None:
            interval = timedelta(minutes=1)

        while True:
            await gather(
                self._safe_reap(),
                sleep(interval.total_seconds())
            )

    async def _safe_reap(self):
        try:
            await self.reap(datetime.now(timezone.utc))
        except Exception:
            logger.exception("Releasing expired reservations failed")

    async def reap(self, now: datetime) -> int:
        return await self._rental_manager.release_expired_reservations(now)
