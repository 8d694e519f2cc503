"""
.. autoclasstree:: powerhub.views

This package contains the server API for checking availability,
renting, returning and administering power banks and their users.

API Conventions
---------------

The paths and the camelCase keys follow the ones the mobile app was
built against. Query strings are used to pass the user a request is for.

API Expected Responses
----------------------

The server responds with JSend formatted JSON to all requests, apart
from the payment redirect pages and the station QR codes.
"""

import aiohttp_cors
from aiohttp.abc import Application

from powerhub import logger
from .misc import success, cancel
from .rentals import CheckoutSessionView, WebhookView, PaymentsView, UserPowerBanksView, ReturnPowerBanksView
from .stations import InitializeDataView, AvailabilityView, StationsView, StationQRView
from .users import RegisterUserView, UserView, BanStatusView, UsersView, UserStatusView

views = [
    InitializeDataView, AvailabilityView, StationsView, StationQRView,
    CheckoutSessionView, WebhookView, PaymentsView, UserPowerBanksView, ReturnPowerBanksView,
    RegisterUserView, UserView, BanStatusView, UsersView, UserStatusView,
]


def register_views(app: Application, base: str):
    """
    Registers all the API views onto the given router at a specific root url.

    :param app: The app to register the views to.
    :param base: The base URL.
    """
    cors = aiohttp_cors.setup(app, defaults={
        "*": aiohttp_cors.ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods="*",
        )
    })

    for view in views:
        logger.info("Registered %s at %s", view.__name__, base + view.url)
        view.register_route(app, base)
        view.enable_cors(cors)

    app.router.add_get(base + "/success", success)
    app.router.add_get(base + "/cancel", cancel)
