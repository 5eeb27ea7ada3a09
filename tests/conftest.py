import pytest

from pushdispatch.schemas.jpush import PushError, PushResult
from pushdispatch.schemas.push import Intent, Platform, PushRequest
from pushdispatch.services.push import push_service


class FakeJPushClient:
    """Stands in for JPushClient: returns a canned result or raises a canned error."""

    def __init__(self, result: PushResult | None = None, error: Exception | None = None):
        self.result = result or PushResult(status_code=200, sendno="0", msg_id="1")
        self.error = error
        self.payloads = []
        self.credentials = None
        self.config = None

    def __call__(self, master_secret, app_key, config=None):
        self.credentials = (master_secret, app_key)
        self.config = config
        return self

    async def send_push(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.result


def error_result(code: int, message: str = "error", status_code: int = 400) -> PushResult:
    return PushResult(status_code=status_code, error=PushError(code=code, message=message))


@pytest.fixture
def fake_client(monkeypatch):
    def install(result: PushResult | None = None, error: Exception | None = None):
        client = FakeJPushClient(result=result, error=error)
        monkeypatch.setattr(push_service, "client_factory", client)
        return client

    return install


@pytest.fixture
def push_request():
    return PushRequest(
        platforms=[Platform.ANDROID, Platform.IOS],
        aliases=["user-1", "user-2"],
        title="Order shipped",
        message="Your order is on its way",
        extras={"order_id": "42"},
        intent=Intent(url="app://orders/42"),
    )
