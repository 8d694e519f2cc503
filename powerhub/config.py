import os
from datetime import timedelta

server_mode = os.getenv("SERVER_MODE", "development")
"""The operational mode of the server."""

database_uri = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")
"""The tortoise connection url for the record store."""

stripe_key = os.getenv("STRIPE_API_KEY", None)
"""The stripe API key."""

stripe_webhook_secret = os.getenv("STRIPE_WEBHOOK_SECRET", None)
"""The secret used to sign the stripe webhook events."""

currency = os.getenv("CURRENCY", "usd")
"""The currency all rentals are charged in."""

public_url = os.getenv("PUBLIC_URL", "http://localhost:4242").rstrip("/")
"""The url the server is reachable at, used for the checkout redirects."""

port = int(os.getenv("PORT", "4242"))
"""The port to listen on."""

api_root = os.getenv("API_ROOT", "")
"""The base url for the api."""

smtp_host = os.getenv("SMTP_HOST", None)
"""The outbound mail server."""

smtp_port = int(os.getenv("SMTP_PORT", "587"))

smtp_username = os.getenv("SMTP_USERNAME", None)

smtp_password = os.getenv("SMTP_PASSWORD", None)

mail_from = os.getenv("MAIL_FROM", "noreply@powerhub.local")
"""The sender address of the reminder emails."""

sweep_interval = timedelta(seconds=int(os.getenv("SWEEP_INTERVAL_SECONDS", "60")))
"""How often the overdue rentals are checked."""

overdue_threshold = timedelta(seconds=int(os.getenv("OVERDUE_THRESHOLD_SECONDS", str(24 * 60 * 60))))
"""How long a power bank may be rented before reminders are sent."""

max_reminders = int(os.getenv("MAX_REMINDERS", "3"))
"""The number of reminders a user receives before being banned."""

reservation_timeout = timedelta(seconds=int(os.getenv("RESERVATION_TIMEOUT_SECONDS", str(30 * 60))))
"""How long a power bank is held for an unpaid checkout session."""

sentry_dsn = os.getenv("SENTRY_DSN", None)
"""The sentry project to report errors to."""

qr_output_dir = os.getenv("QR_OUTPUT_DIR", "qr_codes_img")
"""Where the station QR codes are written to."""
