"""
E-mail notifications for moderation results and admin broadcasts.

Mail goes out through the EmailJS REST API using the same template the web
client used; when the EmailJS credentials are not configured every send is
skipped with a warning and reported as not sent.
"""
import asyncio
import logging
from typing import Iterable, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailNotifier:
    def __init__(
        self,
        api_url: Optional[str] = None,
        service_id: Optional[str] = None,
        template_id: Optional[str] = None,
        public_key: Optional[str] = None,
        private_key: Optional[str] = None,
        from_name: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url or settings.EMAILJS_API_URL
        self.service_id = service_id or settings.EMAILJS_SERVICE_ID
        self.template_id = template_id or settings.EMAILJS_TEMPLATE_ID
        self.public_key = public_key or settings.EMAILJS_PUBLIC_KEY
        self.private_key = private_key or settings.EMAILJS_PRIVATE_KEY
        self.from_name = from_name or settings.NOTIFICATION_FROM_NAME
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.service_id and self.template_id and self.public_key)

    async def send(self, template_params: dict) -> bool:
        if not self.configured:
            logger.warning("EmailJS is not configured, skipping mail to %s", template_params.get("to_email"))
            return False

        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "template_params": template_params,
        }
        if self.private_key:
            payload["accessToken"] = self.private_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to send mail to %s: %s", template_params.get("to_email"), e)
            return False

        logger.info("Mail sent to %s", template_params.get("to_email"))
        return True

    async def send_group_status(self, notification) -> bool:
        """Tell a group's creator that the group was approved or rejected."""
        return await self.send({
            "to_email": notification.user_email,
            "to_name": notification.user_name,
            "group_title": notification.group_title,
            "group_subject": notification.group_subject,
            "group_description": notification.group_description,
            "status": notification.status,
            "from_name": self.from_name,
        })

    async def broadcast(self, users: Iterable, subject: str, message: str) -> dict:
        users = list(users)
        results = await asyncio.gather(*[
            self.send({
                "to_email": user.email,
                "to_name": user.name,
                "subject": subject,
                "message": message,
                "from_name": self.from_name,
                "group_title": subject,
                "group_subject": "",
                "group_description": message,
                "status": "notification",
            })
            for user in users
        ])
        sent = sum(1 for ok in results if ok)
        return {"sent": sent, "failed": len(users) - sent, "total": len(users)}
