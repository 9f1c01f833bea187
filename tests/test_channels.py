import smtplib
from pathlib import Path
from unittest.mock import MagicMock, patch

from slack_sdk.errors import SlackApiError

from releasewatch.channels.base import DeliveryResult, build_test_message
from releasewatch.channels.mail import EmailChannel, build_recipients, route_recipients
from releasewatch.channels.slack import SlackChannel
from releasewatch.core.composer import MessageComposer
from releasewatch.core.release import ReleaseSeverity


def _message():
    return MessageComposer().compose(
        "2.4.5", "2.4.6", ReleaseSeverity.PATCH, "help@example.com", "https://example.com"
    )


def _email_channel(**kwargs) -> EmailChannel:
    defaults = {"sender_email": "store@example.com", "smtp_host": "smtp.example.com"}
    defaults.update(kwargs)
    return EmailChannel(**defaults)


# Recipients


def test_build_recipients_skips_empty() -> None:
    assert build_recipients("a@x.com", "") == ["a@x.com"]
    assert build_recipients("", None, "  ") == []
    assert build_recipients("a@x.com", "b@x.com") == ["a@x.com", "b@x.com"]


def test_route_no_recipients_uses_default() -> None:
    assert route_recipients([], "store@example.com") == ("store@example.com", [])


def test_route_single_recipient() -> None:
    assert route_recipients(["a@x.com"], "store@example.com") == ("a@x.com", [])


def test_route_two_recipients() -> None:
    assert route_recipients(["a@x.com", "b@x.com"], "store@example.com") == ("a@x.com", ["b@x.com"])


def test_route_more_recipients_go_to_cc() -> None:
    to, cc = route_recipients(["a@x.com", "b@x.com", "c@x.com"], "store@example.com")
    assert to == "a@x.com"
    assert cc == ["b@x.com", "c@x.com"]


# Email


def test_email_message_headers_and_body() -> None:
    channel = _email_channel(customer_email="a@x.com", developer_email="b@x.com")
    mail = channel.build_message(_message())

    assert mail["To"] == "a@x.com"
    assert mail["Cc"] == "b@x.com"
    assert "store@example.com" in mail["From"]
    assert "2.4.6" in mail["Subject"]

    text = mail.get_body(preferencelist=("plain",)).get_content()
    assert "Installed version: 2.4.5" in text
    assert "help@example.com" in text
    assert mail.get_body(preferencelist=("html",)) is not None


def test_email_without_recipients_goes_to_sender() -> None:
    mail = _email_channel().build_message(_message())
    assert mail["To"] == "store@example.com"
    assert mail["Cc"] is None


@patch("releasewatch.channels.mail.smtplib.SMTP")
def test_email_send(smtp_cls: MagicMock) -> None:
    channel = _email_channel(
        customer_email="a@x.com",
        smtp_username="user",
        smtp_password="secret",
        use_tls=True,
    )
    result = channel.send(_message())

    assert result == DeliveryResult(channel="email", success=True)
    smtp_cls.assert_called_once_with("smtp.example.com", 25, timeout=10.0)
    server = smtp_cls.return_value.__enter__.return_value
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("user", "secret")
    server.send_message.assert_called_once()


@patch("releasewatch.channels.mail.smtplib.SMTP")
def test_email_smtp_error_is_a_failed_result(smtp_cls: MagicMock) -> None:
    smtp_cls.return_value.__enter__.return_value.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
    result = _email_channel().send(_message())
    assert not result.success
    assert result.channel == "email"
    assert "SMTP delivery failed" in result.error


def test_email_missing_template_is_a_failed_result(tmp_path: Path) -> None:
    channel = _email_channel(template="nope", template_dir=tmp_path)
    result = channel.send(_message())
    assert not result.success
    assert "template" in result.error


@patch("releasewatch.channels.mail.smtplib.SMTP")
def test_email_dry_run_does_not_connect(smtp_cls: MagicMock) -> None:
    result = _email_channel(dry_run=True).send(_message())
    assert result.success
    smtp_cls.assert_not_called()


def test_email_not_configured() -> None:
    result = EmailChannel(sender_email="").send(_message())
    assert result == DeliveryResult(channel="email", success=False, error="not configured")


# Slack


def test_slack_posts_chat_text() -> None:
    client = MagicMock()
    channel = SlackChannel(token="xoxb-1", channel="#ops", username="Watcher", client=client)
    message = _message()

    result = channel.send(message)

    assert result.success
    client.chat_postMessage.assert_called_once_with(
        channel="#ops", text=message.chat_text, username="Watcher"
    )


def test_slack_api_error_is_a_failed_result() -> None:
    client = MagicMock()
    client.chat_postMessage.side_effect = SlackApiError(
        "failed", {"ok": False, "error": "channel_not_found"}
    )
    channel = SlackChannel(token="xoxb-1", channel="#missing", client=client)

    result = channel.send(_message())

    assert not result.success
    assert result.channel == "slack"
    assert "channel_not_found" in result.error


def test_slack_unexpected_error_is_a_failed_result() -> None:
    client = MagicMock()
    client.chat_postMessage.side_effect = RuntimeError("boom")
    result = SlackChannel(token="xoxb-1", channel="#ops", client=client).send(_message())
    assert not result.success
    assert "boom" in result.error


def test_slack_requires_token_and_channel() -> None:
    assert not SlackChannel(token="", channel="#ops").is_configured()
    assert not SlackChannel(token="xoxb-1", channel="").is_configured()


def test_send_test_message() -> None:
    client = MagicMock()
    result = SlackChannel(token="xoxb-1", channel="#ops", client=client).send_test()
    assert result.success
    _, kwargs = client.chat_postMessage.call_args
    assert "test message" in kwargs["text"]


def test_test_email_has_no_release_notes_line() -> None:
    text, _ = _email_channel().render(build_test_message())
    assert "test message" in text
    assert "Release notes:" not in text


def test_release_notes_line_present_for_real_message() -> None:
    text, _ = _email_channel().render(_message())
    assert "Release notes: https://devdocs.magento.com/guides/v2.4/" in text
