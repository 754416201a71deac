# noticias/services/mail.py

import concurrent.futures
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import sib_api_v3_sdk
from sib_api_v3_sdk.rest import ApiException

from noticias.core.exceptions import MailDeliveryError
from noticias.utils.templating import render_email

logger = logging.getLogger(__name__)


class EmailPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


# X-Priority header values
_PRIORITY_HEADERS = {
    EmailPriority.LOW: "5",
    EmailPriority.NORMAL: "3",
    EmailPriority.HIGH: "1",
}


@dataclass
class MailMessage:
    to: str
    subject: str
    template: Optional[str] = None
    context: dict = field(default_factory=dict)
    priority: EmailPriority = EmailPriority.NORMAL
    # Pre-rendered body, used instead of the template when present
    html: Optional[str] = None
    # Plain-text alternative
    text: Optional[str] = None

    def render(self) -> str:
        if self.html is not None:
            return self.html
        return render_email(self.template, **self.context)


@dataclass
class MailResult:
    to: str
    ok: bool
    error: Optional[str] = None


class MailSender:
    """Transactional email through the Brevo API."""

    def __init__(self, api_key: str, sender_email: str, sender_name: str, max_workers: int = 10):
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.max_workers = max_workers
        self._api_key = api_key
        self._api_instance = None

    def _api(self):
        if self._api_instance is None:
            configuration = sib_api_v3_sdk.Configuration()
            configuration.api_key['api-key'] = self._api_key
            api_client = sib_api_v3_sdk.ApiClient(configuration)
            self._api_instance = sib_api_v3_sdk.TransactionalEmailsApi(api_client)
        return self._api_instance

    def send(self, to: str, subject: str, template: str, context: dict = None,
             priority: EmailPriority = EmailPriority.NORMAL) -> None:
        self.deliver(MailMessage(to=to, subject=subject, template=template,
                                 context=context or {}, priority=priority))

    def deliver(self, message: MailMessage) -> None:
        html_content = message.render()
        send_smtp_email = sib_api_v3_sdk.SendSmtpEmail(
            to=[{"email": message.to}],
            subject=message.subject,
            html_content=html_content,
            text_content=message.text,
            sender={"name": self.sender_name, "email": self.sender_email},
            headers={"X-Priority": _PRIORITY_HEADERS[message.priority]},
        )
        try:
            self._api().send_transac_email(send_smtp_email)
        except ApiException as e:
            logger.error(f"Error sending email to {message.to}: {e}")
            raise MailDeliveryError(f"Could not deliver email to {message.to}") from e
        logger.info(f"Email sent successfully to {message.to}")

    def send_bulk(self, messages: List[MailMessage]) -> List[MailResult]:
        """
        Send every message and report one result per message, in order.

        Individual failures are captured in the result instead of raised.
        At most ``max_workers`` sends run at the same time.
        """
        if not messages:
            return []

        workers = min(self.max_workers, len(messages))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.deliver, message) for message in messages]
            concurrent.futures.wait(futures)

        results = []
        for message, future in zip(messages, futures):
            error = future.exception()
            if error is None:
                results.append(MailResult(to=message.to, ok=True))
            else:
                results.append(MailResult(to=message.to, ok=False, error=str(error)))
        failed = sum(1 for result in results if not result.ok)
        logger.info(f"Bulk send finished: {len(results) - failed} sent, {failed} failed")
        return results
