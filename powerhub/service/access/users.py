"""
Users
-----
"""
from typing import Optional, List, Tuple

from tortoise.expressions import F

from powerhub.models import User, UserRole


class UserNotFoundError(Exception):
    def __init__(self, user_id):
        super().__init__(f"No user with id {user_id}.")
        self.user_id = user_id


async def get_users(*, include_admins=False) -> List[User]:
    """
    Gets all the users in the system.

    :param include_admins: Whether to also list the admins.
    """
    query = User.all()

    if not include_admins:
        query = query.filter(role__not=UserRole.ADMIN)

    return await query.order_by("id")


async def get_user(*, user_id: str) -> Optional[User]:
    """
    :param user_id: The external id of the user to get.
    :return: The user with the given id.
    """
    return await User.filter(user_id=user_id).first()


async def register_user(user_id: str, name: str, email: str = None) -> Tuple[User, bool]:
    """
    Creates a new user, unless one with that id already exists
    in which case it is left untouched.

    :return: The user, and whether it was created.
    """
    return await User.get_or_create(user_id=user_id, defaults={"name": name, "email": email})


async def set_user_banned(user_id: str, banned: bool) -> User:
    """
    Bans or unbans a user.

    :raises UserNotFoundError: If there is no such user.
    """
    modified = await User.filter(user_id=user_id).update(is_banned=banned)
    if not modified:
        raise UserNotFoundError(user_id)
    return await User.get(user_id=user_id)


async def ban_user(user: User) -> bool:
    """
    Bans a user that is not yet banned.

    :return: Whether the user was banned by this call.
    """
    modified = await User.filter(id=user.id, is_banned=False).update(is_banned=True)
    return modified == 1


async def increment_reminders(user: User):
    await User.filter(id=user.id).update(reminders_sent=F("reminders_sent") + 1)
