"""
Mail
----

Outbound email, used to remind users to return their power banks.
"""
import abc
from email.message import EmailMessage
from typing import List, Tuple

import aiosmtplib

from powerhub import logger


class MailError(Exception):
    pass


class Mailer(abc.ABC):

    @abc.abstractmethod
    async def send(self, to: str, subject: str, body: str):
        """
        Sends a plain text email.

        :raises MailError: If the mail could not be delivered to the server.
        """


class DummyMailer(Mailer):
    """Keeps the sent mails in memory instead of sending them."""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent: List[Tuple[str, str, str]] = []

    async def send(self, to, subject, body):
        if self.fail:
            raise MailError(f"Could not deliver mail to {to}.")
        logger.debug("Not sending mail to %s: %s", to, subject)
        self.sent.append((to, subject, body))


class SMTPMailer(Mailer):
    """Sends mail through an SMTP server using STARTTLS."""

    def __init__(self, host: str, port: int, username: str = None, password: str = None, sender: str = None):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender

    async def send(self, to, subject, body):
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                start_tls=True,
            )
        except aiosmtplib.SMTPException as error:
            raise MailError(str(error)) from error
        except OSError as error:
            raise MailError(f"Could not connect to {self.host}:{self.port}: {error}") from error

        logger.info("Sent mail to %s: %s", to, subject)
