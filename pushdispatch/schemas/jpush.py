from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pushdispatch.schemas.push import Platform


class Audience(BaseModel):
    alias: list[str]


class AndroidIntent(BaseModel):
    url: str


class AndroidNotification(BaseModel):
    alert: str
    title: str
    extras: dict[str, str] | None = None
    intent: AndroidIntent | None = None


class IosAlert(BaseModel):
    title: str
    body: str


class IosNotification(BaseModel):
    alert: IosAlert
    content_available: bool = Field(default=True, serialization_alias="content-available")
    mutable_content: bool = Field(default=True, serialization_alias="mutable-content")
    # "+1" asks the vendor to increment the badge on every delivery
    badge: str = "+1"
    extras: dict[str, str] | None = None

    model_config = ConfigDict(populate_by_name=True)


class Notification(BaseModel):
    android: AndroidNotification | None = None
    ios: IosNotification | None = None


class Options(BaseModel):
    apns_production: bool | None = None
    time_to_live: int | None = None


class NotificationPayload(BaseModel):
    platform: list[Platform] | None = None
    audience: Audience
    notification: Notification = Field(default_factory=Notification)
    options: Options = Field(default_factory=Options)

    model_config = ConfigDict(use_enum_values=True)

    def to_wire(self) -> dict[str, Any]:
        """
        Render the payload as the JSON document the JPush push API expects.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PushError(BaseModel):
    code: int
    message: str = ""


class PushResult(BaseModel):
    status_code: int
    msg_id: str | int | None = None
    sendno: str | int | None = None
    error: PushError | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300 and self.error is None
