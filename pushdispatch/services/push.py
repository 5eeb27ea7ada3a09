import logging
from collections.abc import Callable

from pushdispatch.core.config import settings
from pushdispatch.schemas.jpush import (
    AndroidIntent,
    AndroidNotification,
    Audience,
    IosAlert,
    IosNotification,
    Notification,
    NotificationPayload,
    Options,
)
from pushdispatch.schemas.push import DispatchOutcome, Platform, PushRequest
from pushdispatch.services.jpush_client import (
    GLOBAL_TIME_TO_LIVE,
    APIConnectionError,
    APIRequestError,
    ClientConfig,
    JPushClient,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_EXCEEDED = 2002
NO_TARGET_MATCHED = 1011

TIME_TO_LIVE = 24 * 60 * 60 * 2


class JPushException(Exception):
    pass


def build_push_payload(push_request: PushRequest) -> NotificationPayload:
    platforms = set(push_request.platforms)

    if Platform.ANDROID in platforms and Platform.IOS in platforms:
        platform = [Platform.ANDROID, Platform.IOS]
    elif Platform.ANDROID in platforms:
        platform = [Platform.ANDROID]
    elif Platform.IOS in platforms:
        platform = [Platform.IOS]
    else:
        platform = None

    notification = Notification()
    if Platform.ANDROID in platforms:
        notification.android = AndroidNotification(
            title=push_request.title,
            alert=push_request.message,
            extras=push_request.extras,
        )
        if push_request.intent is not None:
            notification.android.intent = AndroidIntent(url=push_request.intent.url)
    if Platform.IOS in platforms:
        # The deep-link intent is only carried on Android
        notification.ios = IosNotification(
            alert=IosAlert(title=push_request.title, body=push_request.message),
            content_available=True,
            mutable_content=True,
            extras=push_request.extras,
        )

    return NotificationPayload(
        platform=platform,
        audience=Audience(alias=list(push_request.aliases)),
        notification=notification,
        options=Options(apns_production=False, time_to_live=TIME_TO_LIVE),
    )


class PushService:
    _instance: "PushService" = None

    def __init__(self, client_factory: Callable[..., JPushClient] = JPushClient):
        if PushService._instance is not None:
            raise Exception("This class is a singleton!")
        self.client_factory = client_factory

    @classmethod
    def get_instance(cls) -> "PushService":
        if PushService._instance is None:
            PushService._instance = cls()
        return PushService._instance

    def _client_config(self) -> ClientConfig:
        return ClientConfig(
            push_url=settings.JPUSH_PUSH_URL,
            timeout=settings.JPUSH_TIMEOUT,
            apns_production=False,
            time_to_live=GLOBAL_TIME_TO_LIVE,
        )

    async def dispatch(
        self,
        push_request: PushRequest,
        master_secret: str | None = None,
        app_key: str | None = None,
    ) -> DispatchOutcome:
        """
        Send one push and classify the vendor's answer.

        Rate limiting (2002) and connection failures come back as RETRY_LATER.
        A push that matched no device (1011) counts as delivered, since the
        recipient may simply not be logged in anywhere. Everything else is FAILED.
        Raises ConfigurationError when the client cannot be built.
        """
        client = self.client_factory(
            master_secret or settings.JPUSH_MASTER_SECRET,
            app_key or settings.JPUSH_APP_KEY,
            config=self._client_config(),
        )

        payload = build_push_payload(push_request)
        if payload.platform is None:
            error_message = "Push request has no target platform, nothing to send"
            logger.error(error_message)
            return DispatchOutcome.failed(error_message)

        try:
            result = await client.send_push(payload)
        except APIConnectionError as e:
            logger.error("JPush API connection error, retry later", exc_info=e)
            return DispatchOutcome.retry_later(str(e))
        except APIRequestError as e:
            error_message = (
                "Internal error: JPush API rejected the request parameters, "
                "the request must be fixed"
            )
            logger.error(error_message)
            logger.error(
                f"HTTP Status: {e.status}, Error Code: {e.error_code}, "
                f"Error Message: {e.error_message}"
            )
            return DispatchOutcome.failed(f"{error_message} ({e})")

        if result.ok:
            return DispatchOutcome.delivered()

        error_code = result.error.code if result.error else None
        if error_code == RATE_LIMIT_EXCEEDED:
            logger.warning("JPush API rate limit exceeded")
            return DispatchOutcome.retry_later("JPush API rate limit exceeded")
        if error_code == NO_TARGET_MATCHED:
            logger.info("No device matched the push audience, the user may not be logged in")
            return DispatchOutcome.delivered("No device matched the push audience")

        error_message = (
            f"JPush API error, statusCode={result.status_code}, code={error_code}, "
            f"msg={result.error.message if result.error else ''}"
        )
        logger.error(error_message)
        return DispatchOutcome.failed(error_message)

    async def send_push(
        self,
        push_request: PushRequest,
        master_secret: str | None = None,
        app_key: str | None = None,
    ) -> bool:
        """
        Returns True when the push was delivered or had no target, False when it
        should be retried later. Fatal errors raise JPushException.
        """
        outcome = await self.dispatch(push_request, master_secret, app_key)
        if outcome.is_failed:
            raise JPushException(outcome.message)
        return outcome.is_delivered


push_service = PushService.get_instance()
