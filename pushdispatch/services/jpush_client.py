import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from pushdispatch.core.config import settings
from pushdispatch.schemas.jpush import NotificationPayload, PushResult
from pushdispatch.schemas.push import Platform

logger = logging.getLogger(__name__)

GLOBAL_TIME_TO_LIVE = 24 * 60 * 60 * 2


class JPushClientError(Exception):
    pass


class ConfigurationError(JPushClientError):
    pass


class APIConnectionError(JPushClientError):
    pass


class APIRequestError(JPushClientError):
    def __init__(self, status: int, error_code: int | None, error_message: str):
        super().__init__(f"status={status}, code={error_code}, msg={error_message}")
        self.status = status
        self.error_code = error_code
        self.error_message = error_message


class ClientConfig(BaseModel):
    """
    Global push setting for a client: option defaults applied to every payload
    that leaves them unset, plus transport settings.
    """

    push_url: str = settings.JPUSH_PUSH_URL
    timeout: float = settings.JPUSH_TIMEOUT
    apns_production: bool = False
    time_to_live: int = GLOBAL_TIME_TO_LIVE

    model_config = ConfigDict(frozen=True)


class JPushClient:
    def __init__(
        self,
        master_secret: str,
        app_key: str,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not master_secret or not app_key:
            raise ConfigurationError("JPush app key and master secret are required")
        self.auth = httpx.BasicAuth(app_key, master_secret)
        self.config = config or ClientConfig()
        self.transport = transport

    def validate(self, payload: NotificationPayload) -> None:
        if not payload.platform:
            raise APIRequestError(400, 1003, "platform is required")
        if payload.notification.android is None and payload.notification.ios is None:
            raise APIRequestError(400, 1003, "notification is required")
        for platform in payload.platform:
            if getattr(payload.notification, Platform(platform).value) is None:
                raise APIRequestError(400, 1003, f"notification.{platform} is required")

    def _apply_global_setting(self, payload: NotificationPayload) -> dict:
        body = payload.to_wire()
        options = body.setdefault("options", {})
        options.setdefault("apns_production", self.config.apns_production)
        options.setdefault("time_to_live", self.config.time_to_live)
        return body

    async def send_push(self, payload: NotificationPayload) -> PushResult:
        self.validate(payload)
        body = self._apply_global_setting(payload)

        async with httpx.AsyncClient(
            timeout=self.config.timeout, auth=self.auth, transport=self.transport
        ) as client:
            try:
                response = await client.post(
                    self.config.push_url,
                    json=body,
                    headers={"Content-Type": "application/json", "Accept": "application/json"},
                )
            except httpx.TransportError as e:
                logger.error(f"Error connecting to JPush API: {e}")
                raise APIConnectionError(f"Connection to JPush API failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise APIRequestError(
                response.status_code, None, f"Invalid response from JPush API: {response.text}"
            ) from e
        if not isinstance(data, dict):
            raise APIRequestError(
                response.status_code, None, f"Unexpected response from JPush API: {data}"
            )
        if response.is_error and "error" not in data:
            raise APIRequestError(
                response.status_code, None, f"JPush API returned no error detail: {data}"
            )

        try:
            return PushResult(status_code=response.status_code, **data)
        except ValidationError as e:
            raise APIRequestError(
                response.status_code, None, f"Malformed JPush API response: {e}"
            ) from e
