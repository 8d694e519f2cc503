"""
Payments
--------

A payment only ever leaves the pending state once. The transition
is a conditional update on the pending status so that replayed
webhooks cannot apply it twice.
"""
from datetime import datetime
from typing import List, Optional

from powerhub.models import Payment, PaymentStatus


async def create_payment(
    *, station_id: int, power_bank_id: int, user_id: str,
    amount: int, currency: str, session_id: str, reservation_id: str
) -> Payment:
    return await Payment.create(
        station_id=station_id,
        power_bank_id=power_bank_id,
        user_id=user_id,
        amount=amount,
        currency=currency,
        session_id=session_id,
        reservation_id=reservation_id,
        status=PaymentStatus.PENDING,
    )


async def get_payments(*, user_id: str) -> List[Payment]:
    return await Payment.filter(user_id=user_id).order_by("-created_at")


async def get_payment(*, session_id: str) -> Optional[Payment]:
    return await Payment.filter(session_id=session_id).first()


async def mark_paid(session_id: str, now: datetime) -> Optional[Payment]:
    """
    Marks the pending payment for the given session as paid.

    :return: The payment, or None if there is no pending payment for the session.
    """
    modified = await Payment.filter(session_id=session_id, status=PaymentStatus.PENDING).update(
        status=PaymentStatus.PAID, paid_at=now
    )
    if not modified:
        return None
    return await get_payment(session_id=session_id)


async def mark_expired(session_id: str) -> Optional[Payment]:
    """
    Marks the pending payment for the given session as expired.

    :return: The payment, or None if there is no pending payment for the session.
    """
    modified = await Payment.filter(session_id=session_id, status=PaymentStatus.PENDING).update(
        status=PaymentStatus.EXPIRED
    )
    if not modified:
        return None
    return await get_payment(session_id=session_id)
