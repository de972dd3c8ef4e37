"""Webhook notifier for WeChat Work style group bots."""

import json
import logging
from http.client import HTTPException
from typing import Optional
from urllib.request import Request, urlopen

from .config import ProviderConfig
from .errors import NotifyError
from .models import NotifyResult

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Webhook not configured, skipping notification"
SENT_MESSAGE = "Table sent to webhook"
FAILED_MESSAGE = "Webhook notification failed"
UNKNOWN_ERROR = "unknown error"


class WebhookNotifier:
    """Posts plain-text messages to a bot webhook.

    The bot answers with JSON; ``errcode == 0`` means the message was accepted.
    """

    def __init__(self, url: str = "", config: Optional[ProviderConfig] = None) -> None:
        self.url = url
        self.config = config or ProviderConfig()

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def send(self, text: str) -> NotifyResult:
        if not self.configured:
            return NotifyResult(success=False, message=NOT_CONFIGURED_MESSAGE, configured=False)

        try:
            self._post(text)
        except NotifyError as e:
            logger.warning("Webhook rejected message: %s", e)
            return NotifyResult(success=False, message=f"{FAILED_MESSAGE}: {e}")
        except (OSError, HTTPException, ValueError) as e:
            logger.warning("Webhook request failed: %s", e)
            return NotifyResult(success=False, message=FAILED_MESSAGE)

        return NotifyResult(success=True, message=SENT_MESSAGE)

    def _post(self, text: str) -> None:
        body = json.dumps(
            {"msgtype": "text", "text": {"content": text}}, ensure_ascii=False
        ).encode("utf-8")
        req = Request(
            self.url,
            data=body,
            headers={"Content-Type": "application/json; charset=utf-8"},
            method="POST",
        )
        with urlopen(req, timeout=self.config.REQUEST_TIMEOUT_S) as response:
            reply = json.loads(response.read())

        if not isinstance(reply, dict):
            raise NotifyError(UNKNOWN_ERROR)
        errcode = reply.get("errcode")
        if isinstance(errcode, bool) or errcode != 0:
            raise NotifyError(reply.get("errmsg") or UNKNOWN_ERROR)
