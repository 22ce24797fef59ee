from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from src.roomease.roomease.core.exceptions import NotificationError
from src.roomease.roomease.notifications.gateways import SendGridEmailGateway, TwilioSmsGateway

GATEWAYS = "src.roomease.roomease.notifications.gateways"


def _response(ok=True, status_code=201, payload=None):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.text = "error"
    response.json.return_value = payload or {}
    return response


def test_twilio_posts_message():
    gateway = TwilioSmsGateway("AC123", "token", "+15550001111")

    with patch(f"{GATEWAYS}.requests.post", return_value=_response(payload={"sid": "SM1", "status": "queued"})) as post:
        sid = gateway.send(to="+60123456789", body="hello")

    assert sid == "SM1"
    args, kwargs = post.call_args
    assert args[0] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert kwargs["data"] == {"To": "+60123456789", "From": "+15550001111", "Body": "hello"}
    assert kwargs["auth"] == ("AC123", "token")


def test_twilio_error_response_raises():
    gateway = TwilioSmsGateway("AC123", "token", "+15550001111")
    bad = _response(ok=False, status_code=400, payload={"code": 21211, "message": "Invalid 'To' Phone Number"})

    with patch(f"{GATEWAYS}.requests.post", return_value=bad):
        with pytest.raises(NotificationError, match="21211"):
            gateway.send(to="+600", body="hello")


def test_twilio_network_error_raises():
    gateway = TwilioSmsGateway("AC123", "token", "+15550001111")

    with patch(f"{GATEWAYS}.requests.post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(NotificationError):
            gateway.send(to="+60123456789", body="hello")


def test_gateways_report_configuration():
    assert not TwilioSmsGateway(None, "token", "+1").is_configured
    assert TwilioSmsGateway("AC", "token", "+1").is_configured
    assert not SendGridEmailGateway("key", "").is_configured
    assert SendGridEmailGateway("key", "noreply@uptm.edu.my").is_configured


def test_sendgrid_sends_mail():
    gateway = SendGridEmailGateway("key", "noreply@uptm.edu.my")

    with patch(f"{GATEWAYS}.SendGridAPIClient") as client_cls:
        client_cls.return_value.send.return_value = MagicMock(status_code=202)
        gateway.send(to="a@uptm.edu.my", subject="Hi", text="plain", html="<p>html</p>")

    client_cls.assert_called_once_with("key")
    client_cls.return_value.send.assert_called_once()


def test_sendgrid_failure_raises():
    gateway = SendGridEmailGateway("key", "noreply@uptm.edu.my")

    with patch(f"{GATEWAYS}.SendGridAPIClient") as client_cls:
        client_cls.return_value.send.side_effect = RuntimeError("401 Unauthorized")
        with pytest.raises(NotificationError):
            gateway.send(to="a@uptm.edu.my", subject="Hi", text="plain", html="<p>html</p>")
