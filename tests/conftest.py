import json
import threading
import time
from typing import Any, Callable, Dict, List, Tuple
from urllib.parse import urlsplit

import pytest
import requests
from requests import PreparedRequest, Response

from reddio_pay import ExternalPayment, Payment, ReddioPayClient

BASE_URL = "https://pay.example.test"


def _create_response(request: PreparedRequest, status_code: int, body: Any) -> Response:
    """Build a Response the way requests' adapters would."""
    if isinstance(body, bytes):
        content = body
    elif isinstance(body, str):
        content = body.encode("utf-8")
    else:
        content = json.dumps(body).encode("utf-8")

    response = Response()
    response.status_code = status_code
    response._content = content
    response.headers["Content-Type"] = "application/json"
    response.request = request
    response.url = request.url
    return response


class RecordingSession(requests.Session):
    """
    A real requests.Session whose transport is replaced by canned routes.

    Routes map ``(METHOD, path)`` to ``(status, body)``, to an exception
    instance to raise, or to a callable receiving the prepared request and
    returning one of those.
    """

    def __init__(self) -> None:
        super().__init__()
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.sent: List[PreparedRequest] = []
        self._lock = threading.Lock()

    def route(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        self.routes[(method, path)] = (status, body)

    def route_with(self, method: str, path: str, handler: Callable[[PreparedRequest], Any]) -> None:
        self.routes[(method, path)] = handler

    def requests_to(self, method: str, path: str) -> List[PreparedRequest]:
        with self._lock:
            return [
                prepared
                for prepared in self.sent
                if prepared.method == method and urlsplit(prepared.url).path == path
            ]

    def send(self, request: PreparedRequest, **kwargs: Any) -> Response:
        with self._lock:
            self.sent.append(request)
        outcome = self.routes.get((request.method, urlsplit(request.url).path))
        if outcome is None:
            outcome = (404, {"message": "route not found"})
        if callable(outcome):
            outcome = outcome(request)
        if isinstance(outcome, Exception):
            raise outcome
        status, body = outcome
        return _create_response(request, status, body)


def login_body(access_token: str = "A") -> Dict[str, str]:
    return {"access_token": access_token, "refresh_token": "R", "message": "ok"}


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def session():
    """A recording session with a successful login route."""
    recording = RecordingSession()
    recording.route("POST", "/accounts/apikeys/login", 200, login_body("A"))
    return recording


@pytest.fixture
def client(session):
    sdk = ReddioPayClient.open(BASE_URL, "K", session=session)
    try:
        yield sdk
    finally:
        sdk.close()


def make_payment(payment_id, status, transaction_hash=None):
    return Payment(
        payment_id=payment_id,
        account_id="a1",
        token_id="t1",
        product_id="p1",
        product_token_id="pt1",
        count=1,
        status=status,
        created_at="2024-01-01T00:00:00Z",
        updated_at="2024-01-01T00:00:00Z",
        total_amount="1000",
        fee_amount="10",
        recipient_amount="990",
        transaction_hash=transaction_hash,
    )


class FakeGateway:
    def __init__(self):
        self.created = []
        self.payments = {}
        self.create_error = None
        self.lookup_error = None

    def external_create_payment(self, request):
        self.created.append(request)
        if self.create_error is not None:
            raise self.create_error
        payment_id = f"pay{len(self.created)}"
        self.payments[payment_id] = make_payment(payment_id, "created")
        return ExternalPayment(
            message="ok",
            payment_id=payment_id,
            pay_link=f"https://pay.example.test/{payment_id}",
            contract_address="0xrouter",
            token_address="0xtoken",
            decimals=18,
        )

    def get_payment(self, payment_id):
        if self.lookup_error is not None:
            raise self.lookup_error
        return self.payments[payment_id]
