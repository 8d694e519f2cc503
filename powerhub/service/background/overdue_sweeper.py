"""
Overdue Sweeper
---------------

Periodically looks for power banks that have been out for too long
and nags their renters. Each pass, a renter with an overdue power bank
is sent a reminder email. Once they have been sent ``max_reminders``
reminders and still not returned it, their account is banned.

Failed emails are not counted, and so are retried on the next pass.
Unbanning a user does not reset their reminders, so a user that is
unbanned while still overdue is banned again on the next pass.
"""
from asyncio import sleep, gather
from datetime import timedelta, datetime, timezone
from typing import NamedTuple, Set

from powerhub import logger
from powerhub.models import User
from powerhub.service.access.power_banks import get_overdue_power_banks
from powerhub.service.access.users import get_user, ban_user, increment_reminders
from powerhub.service.mail import Mailer, MailError

REMINDER_SUBJECT = "Please return your power bank"


class SweepReport(NamedTuple):
    reminded: int = 0
    banned: int = 0
    skipped: int = 0
    failed: int = 0


def reminder_body(user: User, threshold: timedelta, reminder_number: int, max_reminders: int) -> str:
    hours = threshold.total_seconds() / 3600
    return (
        f"Hello {user.name},\n\n"
        f"You have had a power bank for more than {hours:g} hours. "
        f"Please return it to any station as soon as possible.\n\n"
        f"This is reminder {reminder_number} of {max_reminders}. "
        f"If the power bank is not returned, your account will be banned.\n"
    )


class OverdueSweeper:
    """
    This background service enforces the return of overdue power banks.
    """

    def __init__(self, mailer: Mailer, threshold: timedelta, max_reminders: int = 3):
        self._mailer = mailer
        self.threshold = threshold
        self.max_reminders = max_reminders

    async def run(self, interval: timedelta = None):
        """Runs the sweep at most once every ``interval``."""
        if interval is None:
            interval = timedelta(minutes=1)

        while True:
            await gather(
                self._safe_sweep(),
                sleep(interval.total_seconds())
            )

    async def _safe_sweep(self):
        try:
            await self.sweep(datetime.now(timezone.utc))
        except Exception:
            logger.exception("Overdue sweep failed")

    async def sweep(self, now: datetime) -> SweepReport:
        """
        Escalates every user holding a power bank rented before ``now - threshold``.
        Users are escalated at most once per sweep.
        """
        reminded = banned = skipped = failed = 0
        seen: Set[str] = set()

        for power_bank in await get_overdue_power_banks(now - self.threshold):
            if power_bank.user_id in seen:
                continue
            seen.add(power_bank.user_id)

            user = await get_user(user_id=power_bank.user_id)
            if user is None or user.is_banned:
                skipped += 1
                continue

            if user.reminders_sent >= self.max_reminders:
                if await ban_user(user):
                    logger.warning("Banned user %s for not returning power bank %s", user.user_id, power_bank.id)
                    banned += 1
                continue

            if not user.email:
                skipped += 1
                continue

            try:
                await self._mailer.send(
                    user.email, REMINDER_SUBJECT,
                    reminder_body(user, self.threshold, user.reminders_sent + 1, self.max_reminders)
                )
            except MailError as error:
                logger.error("Could not send reminder to %s: %s", user.user_id, error)
                failed += 1
                continue

            await increment_reminders(user)
            logger.info("Sent reminder %s to user %s", user.reminders_sent + 1, user.user_id)
            reminded += 1

        report = SweepReport(reminded, banned, skipped, failed)
        if any(report):
            logger.info("Overdue sweep: %s", report)
        return report
