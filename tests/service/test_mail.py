import pytest

from powerhub.service.mail import SMTPMailer, DummyMailer, MailError


async def test_dummy_mailer():
    mailer = DummyMailer()
    await mailer.send("user@example.com", "Subject", "Body")
    assert mailer.sent == [("user@example.com", "Subject", "Body")]


async def test_dummy_mailer_failure():
    with pytest.raises(MailError):
        await DummyMailer(fail=True).send("user@example.com", "Subject", "Body")


async def test_smtp_mailer_unreachable():
    """Assert that a mail server we cannot reach is reported as a mail error."""
    mailer = SMTPMailer("127.0.0.1", 1, sender="noreply@example.com")
    with pytest.raises(MailError):
        await mailer.send("user@example.com", "Subject", "Body")
