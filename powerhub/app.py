"""
App
-----
"""

import sentry_sdk
import uvloop
from aiohttp import web
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from powerhub import logger, config
from powerhub.middleware import error_middleware
from powerhub.service import (
    RentalManager, StripePaymentManager, DummyPaymentManager, SMTPMailer, DummyMailer, PaymentManager, Mailer
)
from powerhub.service.background.overdue_sweeper import OverdueSweeper
from powerhub.service.background.reservation_reaper import ReservationReaper
from powerhub.signals import register_signals
from powerhub.version import __version__
from powerhub.views import register_views


def build_payment_manager() -> PaymentManager:
    if config.stripe_key is not None:
        return StripePaymentManager(config.stripe_key, config.stripe_webhook_secret, config.public_url)
    elif config.server_mode == "development":
        logger.warning("No stripe key supplied, checkout sessions will be faked")
        return DummyPaymentManager(config.stripe_webhook_secret or "whsec_dummy", config.public_url)
    else:
        raise RuntimeError("You must specify STRIPE_API_KEY in the environment variables.")


def build_mailer() -> Mailer:
    if config.smtp_host is not None:
        return SMTPMailer(
            config.smtp_host, config.smtp_port,
            config.smtp_username, config.smtp_password, config.mail_from
        )
    elif config.server_mode == "development":
        logger.warning("No mail server supplied, reminders will not be sent")
        return DummyMailer()
    else:
        raise RuntimeError("You must specify SMTP_HOST in the environment variables.")


def build_app(db_uri=None):
    """Sets up the app and installs uvloop."""
    app = web.Application(middlewares=[error_middleware])
    uvloop.install()

    app['database_uri'] = db_uri if db_uri is not None else config.database_uri
    app['payment_manager'] = build_payment_manager()
    app['mailer'] = build_mailer()
    app['rental_manager'] = RentalManager(app['payment_manager'], config.currency, config.reservation_timeout)
    app['overdue_sweeper'] = OverdueSweeper(app['mailer'], config.overdue_threshold, config.max_reminders)
    app['reservation_reaper'] = ReservationReaper(app['rental_manager'])

    # set up the background tasks
    register_signals(app)

    # register views
    register_views(app, config.api_root)

    # set up sentry exception tracking
    if config.server_mode != "development" and config.sentry_dsn:
        logger.info("Starting Sentry Logging")
        sentry_sdk.init(
            dsn=config.sentry_dsn,
            environment=config.server_mode,
            release=f"powerhub@{__version__}",
            integrations=[AioHttpIntegration()],
        )

    return app
