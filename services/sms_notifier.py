"""
SMS delivery through Twilio.

``send_text`` reports every failure through ``SMSResult`` instead of raising, so
a bad number or a provider outage never breaks the scheduler's tick loop.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from config.settings import settings
from core import get_logger, mask_phone_number, ConfigurationError, SMSDeliveryError
from prompts import MANUAL_AFFIRMATION_SMS

logger = get_logger(__name__)


@dataclass
class SMSResult:
    """Outcome of one SMS send."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class TwilioSMSNotifier:
    """
    Twilio-backed notifier.

    Authenticates with either the account auth token or an API key pair. The
    REST client is built lazily so a missing configuration only fails sends,
    not startup.
    """

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        api_key: Optional[str] = None,
        api_key_secret: Optional[str] = None,
        from_number: Optional[str] = None,
        client: Optional[Client] = None,
    ):
        self.account_sid = account_sid if account_sid is not None else settings.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token if auth_token is not None else settings.TWILIO_AUTH_TOKEN
        self.api_key = api_key if api_key is not None else settings.TWILIO_API_KEY
        self.api_key_secret = api_key_secret if api_key_secret is not None else settings.TWILIO_API_KEY_SECRET
        self.from_number = from_number if from_number is not None else settings.TWILIO_FROM_NUMBER
        self._client = client

    def _get_client(self) -> Client:
        """Build (once) the Twilio REST client from the configured credentials."""
        if self._client is not None:
            return self._client

        if not self.account_sid:
            raise ConfigurationError("TWILIO_ACCOUNT_SID", "not set")

        if self.api_key and self.api_key_secret:
            self._client = Client(self.api_key, self.api_key_secret, self.account_sid)
        elif self.auth_token:
            self._client = Client(self.account_sid, self.auth_token)
        else:
            raise ConfigurationError(
                "TWILIO_AUTH_TOKEN", "set an auth token or TWILIO_API_KEY/TWILIO_API_KEY_SECRET"
            )
        return self._client

    async def send_text(self, destination: str, body: str) -> SMSResult:
        """
        Send one SMS.

        Args:
            destination: Recipient phone number
            body: Message text

        Returns:
            SMSResult with the Twilio message SID on success, or an error description
        """
        if not self.from_number:
            return SMSResult(success=False, error="No Twilio phone number configured")
        if not destination:
            return SMSResult(success=False, error="No destination phone number")

        try:
            client = self._get_client()
            message = await asyncio.to_thread(
                client.messages.create,
                body=body,
                from_=self.from_number,
                to=destination,
            )
        except ConfigurationError as e:
            logger.error("Twilio is not configured", **e.to_dict())
            return SMSResult(success=False, error=e.message)
        except TwilioRestException as e:
            err = SMSDeliveryError(details=e.msg, status_code=e.status)
            logger.error("Twilio rejected SMS", to=mask_phone_number(destination), **err.to_dict())
            return SMSResult(success=False, error=err.message)
        except Exception as e:
            logger.error("Twilio SMS error", to=mask_phone_number(destination), error=str(e))
            return SMSResult(success=False, error=str(e) or "Failed to send SMS")

        logger.info("SMS sent", to=mask_phone_number(destination), message_id=message.sid)
        return SMSResult(success=True, message_id=message.sid)

    async def send_affirmation_reminder(self, phone_number: str, affirmation: str) -> SMSResult:
        """Send a hand-picked affirmation with the longer manual-send wording."""
        return await self.send_text(phone_number, MANUAL_AFFIRMATION_SMS.format(affirmation=affirmation))


# Singleton instance
sms_notifier = TwilioSMSNotifier()
