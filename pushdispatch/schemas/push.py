from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    ANDROID = "android"
    IOS = "ios"


class Intent(BaseModel):
    url: str

    model_config = ConfigDict(frozen=True)


class PushRequest(BaseModel):
    platforms: list[Platform] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    title: str
    message: str
    extras: dict[str, str] | None = None
    intent: Intent | None = None

    model_config = ConfigDict(frozen=True)


class DispatchStatus(str, Enum):
    DELIVERED = "DELIVERED"
    RETRY_LATER = "RETRY_LATER"
    FAILED = "FAILED"


class DispatchOutcome(BaseModel):
    status: DispatchStatus
    message: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def delivered(cls, message: str | None = None) -> "DispatchOutcome":
        return cls(status=DispatchStatus.DELIVERED, message=message)

    @classmethod
    def retry_later(cls, message: str | None = None) -> "DispatchOutcome":
        return cls(status=DispatchStatus.RETRY_LATER, message=message)

    @classmethod
    def failed(cls, message: str) -> "DispatchOutcome":
        return cls(status=DispatchStatus.FAILED, message=message)

    @property
    def is_delivered(self) -> bool:
        return self.status == DispatchStatus.DELIVERED

    @property
    def is_retryable(self) -> bool:
        return self.status == DispatchStatus.RETRY_LATER

    @property
    def is_failed(self) -> bool:
        return self.status == DispatchStatus.FAILED
