"""
User Related Views
-------------------------

Handles registering users, and the admin actions on them.
"""
from http import HTTPStatus

from marshmallow.fields import String, Boolean

from powerhub.models import User
from powerhub.serializer import JSendSchema, JSendStatus, Many
from powerhub.serializer.decorators import expects, returns
from powerhub.serializer.models import UserSchema, UserStatusSchema, BanAction
from powerhub.service.access.users import get_users, get_user, register_user, set_user_banned, UserNotFoundError
from powerhub.views.base import BaseView
from powerhub.views.decorators import match_getter, Query

PUBLIC_USER_FIELDS = ("user_id", "name", "email", "reminders_sent", "is_banned")


class RegisterUserView(BaseView):
    """
    Adds a user to the system, if they are not already in it.
    """
    url = "/register-user"
    name = "register_user"

    @expects(UserSchema(only=("user_id", "name", "email")))
    @returns(JSendSchema.of(message=String(), created=Boolean()))
    async def post(self):
        """
        The app registers the user every time they sign in. Only the
        first registration creates the user, later ones change nothing.
        """
        data = self.request["data"]
        user, created = await register_user(data["user_id"], data["name"], data.get("email"))
        return {
            "status": JSendStatus.SUCCESS,
            "data": {
                "message": "User registered successfully." if created else "User already exists.",
                "created": created,
            }
        }


class UserView(BaseView):
    """
    Gets a single user.
    """
    url = "/get-user"
    name = "user"
    with_user = match_getter(get_user, 'user', user_id=Query('userId'))

    @with_user
    @returns(JSendSchema.of(user=UserSchema()))
    async def get(self, user: User):
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"user": user.serialize()}
        }


class BanStatusView(BaseView):
    """
    Gets whether a user is banned.
    """
    url = "/check-ban"
    name = "ban_status"
    with_user = match_getter(get_user, 'user', user_id=Query('userId'))

    @with_user
    @returns(JSendSchema.of(is_banned=Boolean(required=True, data_key="isBanned")))
    async def get(self, user: User):
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"is_banned": user.is_banned}
        }


class UsersView(BaseView):
    """
    Gets the list of users, leaving out the admins.
    """
    url = "/users"
    name = "users"

    @returns(JSendSchema.of(users=Many(UserSchema(only=PUBLIC_USER_FIELDS))))
    async def get(self):
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"users": [user.serialize() for user in await get_users()]}
        }


class UserStatusView(BaseView):
    """
    Bans or unbans a user.
    """
    url = "/user-status"
    name = "user_status"

    @expects(UserStatusSchema())
    @returns(
        missing=(JSendSchema(), HTTPStatus.NOT_FOUND),
        success=JSendSchema.of(message=String(), user=UserSchema(only=PUBLIC_USER_FIELDS)),
    )
    async def post(self):
        """
        Unbanning a user does not reset their reminders. If they are
        still holding an overdue power bank, they will be banned again.
        """
        data = self.request["data"]
        action = data["action"]

        try:
            user = await set_user_banned(data["user_id"], action is BanAction.BAN)
        except UserNotFoundError as error:
            return "missing", {
                "status": JSendStatus.FAIL,
                "data": {"message": str(error)}
            }

        return "success", {
            "status": JSendStatus.SUCCESS,
            "data": {
                "message": f"User {user.user_id} {'banned' if action is BanAction.BAN else 'unbanned'}.",
                "user": user.serialize(),
            }
        }
