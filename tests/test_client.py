"""End-to-end tests of the client session against a recording transport."""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
import requests

from conftest import BASE_URL, RecordingSession, login_body, wait_for
from reddio_pay import (
    AddProductTokenRequest,
    AuthError,
    ClientConfig,
    ConfigError,
    CreateProductRequest,
    ExternalCreatePaymentRequest,
    HTTPStatusError,
    PaymentNotifyRequest,
    ReddioPayClient,
    TransportError,
    create_client,
    open_client,
)
from reddio_pay.core.refresh import RefreshScheduler


def _auth(prepared):
    return prepared.headers.get("Authorization")


class TestLifecycle:
    def test_open_logs_in_and_installs_token(self, client, session):
        assert client.token_holder.get() == "A"
        assert not client.closed
        (login,) = session.requests_to("POST", "/accounts/apikeys/login")
        assert json.loads(login.body) == {"api_key": "K"}

    def test_close_is_idempotent(self, client):
        client.close()
        client.close()
        assert client.closed
        assert "closed" in repr(client)

    def test_context_manager_closes(self, session):
        with ReddioPayClient.open(BASE_URL, "K", session=session) as client:
            assert not client.closed
        assert client.closed

    def test_failed_login_raises_and_starts_no_refresh(self, monkeypatch):
        session = RecordingSession()
        session.route("POST", "/accounts/apikeys/login", 401, {"message": "bad key"})
        started = []
        monkeypatch.setattr(RefreshScheduler, "start", lambda self: started.append(self))

        with pytest.raises(AuthError) as excinfo:
            ReddioPayClient.open(BASE_URL, "K", session=session)

        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "bad key"
        assert started == []

    def test_unreachable_service_raises_transport_error(self):
        session = RecordingSession()
        session.routes[("POST", "/accounts/apikeys/login")] = requests.ConnectionError("refused")

        with pytest.raises(TransportError):
            ReddioPayClient.open(BASE_URL, "K", session=session)

    def test_empty_api_key_is_rejected_before_login(self):
        session = RecordingSession()
        with pytest.raises(ConfigError):
            ReddioPayClient.open(BASE_URL, "  ", session=session)
        assert session.sent == []

    def test_create_client_from_config(self, session):
        config = ClientConfig(base_url=BASE_URL, api_key="K")
        client = create_client(config=config, session=session)
        try:
            assert client.config is config
            assert client.token_holder.get() == "A"
        finally:
            client.close()

    def test_create_client_rejects_config_with_parameters(self, session):
        config = ClientConfig(base_url=BASE_URL, api_key="K")
        with pytest.raises(ValueError):
            create_client(config=config, api_key="other", session=session)
        assert session.sent == []

    def test_create_client_from_environment(self, session):
        client = create_client(
            env_file=None,
            base={"REDDIO_URL": BASE_URL + "/", "REDDIO_API_KEY": "K"},
            session=session,
        )
        try:
            assert client.config.base_url == BASE_URL
        finally:
            client.close()

    def test_open_client_helper(self, session):
        client = open_client(BASE_URL, "K", session=session)
        try:
            assert client.config.refresh_interval_seconds == 3600.0
        finally:
            client.close()


class TestProducts:
    def test_list_products_sends_bearer_and_no_body(self, client, session):
        session.route(
            "GET",
            "/products",
            200,
            {
                "message": "ok",
                "products": [
                    {
                        "product_id": "p1",
                        "name": "Tee",
                        "product_tokens": [{"product_token_id": "pt1", "chain_id": "11155111"}],
                        "total_sale_amount": 12.5,
                    }
                ],
            },
        )

        products = client.list_products()

        (sent,) = session.requests_to("GET", "/products")
        assert _auth(sent) == "Bearer A"
        assert sent.body is None
        assert products.products[0].product_id == "p1"
        assert products.products[0].product_tokens[0].chain_id == "11155111"
        assert products.products[0].total_sale_amount == 12.5

    def test_create_product_sends_exact_json(self, client, session):
        session.route(
            "POST",
            "/products",
            200,
            {"message": "created", "product": {"product_id": "p1", "name": "Tee"}},
        )

        created = client.create_product(
            CreateProductRequest(
                name="Tee",
                description="",
                content="",
                token_ids=["t1"],
                price="1",
                recipient_address="0xabc",
            )
        )

        (sent,) = session.requests_to("POST", "/products")
        assert sent.body == (
            b'{"name":"Tee","description":"","content":"","token_ids":["t1"],'
            b'"price":"1","recipient_address":"0xabc"}'
        )
        assert _auth(sent) == "Bearer A"
        assert created.product.product_id == "p1"

    def test_get_product_and_status(self, client, session):
        session.route("GET", "/products/p1", 200, {"product_id": "p1", "active": True})
        session.route(
            "GET",
            "/products/p1/token/status",
            200,
            {
                "message": "ok",
                "status": [{"product_token_id": "pt1", "total_sale_count": 3}],
            },
        )

        product = client.get_product("p1")
        status = client.get_product_token_status("p1")

        assert product.active is True
        assert product.description == ""
        assert status.status[0].total_sale_count == 3
        assert status.status[0].product_name == ""

    def test_add_product_token(self, client, session):
        session.route(
            "POST",
            "/products/p1/token",
            200,
            {"message": "ok", "product_token": {"product_token_id": "pt2"}},
        )

        created = client.add_product_token(
            "p1", AddProductTokenRequest(token_id="t2", price="5", recipient_address="0xabc")
        )

        (sent,) = session.requests_to("POST", "/products/p1/token")
        assert json.loads(sent.body) == {
            "token_id": "t2",
            "price": "5",
            "recipient_address": "0xabc",
        }
        assert created.product_token.product_token_id == "pt2"


class TestPayments:
    def test_paginated_list(self, client, session):
        session.route(
            "GET",
            "/payments/list",
            200,
            {
                "message": "ok",
                "total_count": 120,
                "total_pages": 5,
                "current_page": 3,
                "page_size": 25,
                "payments": [{"payment_id": "pay1", "status": "paid", "block_number": 7}],
            },
        )

        page = client.list_payments(limit=25, offset=50)

        (sent,) = session.requests_to("GET", "/payments/list")
        assert sent.url == BASE_URL + "/payments/list?limit=25&offset=50"
        assert (page.total_count, page.total_pages, page.current_page, page.page_size) == (
            120,
            5,
            3,
            25,
        )
        assert page.payments[0].is_paid
        assert page.payments[0].block_number == 7
        assert page.payments[0].paid_at is None

    def test_default_list_sends_no_query(self, client, session):
        session.route("GET", "/payments/list", 200, {"message": "ok"})

        page = client.list_payments()

        (sent,) = session.requests_to("GET", "/payments/list")
        assert sent.url == BASE_URL + "/payments/list"
        assert page.payments == []

    def test_get_payment_and_product_payments(self, client, session):
        session.route("GET", "/payments/pay1", 200, {"payment_id": "pay1", "status": "created"})
        session.route(
            "GET",
            "/payments/product/p1",
            200,
            {"message": "ok", "payments": [{"payment_id": "pay1"}]},
        )

        assert client.get_payment("pay1").status == "created"
        assert [p.payment_id for p in client.list_payments_by_product("p1").payments] == ["pay1"]

    def test_missing_payment_propagates_status_error(self, client, session):
        session.route("GET", "/payments/nope", 404, {"message": "payment not found"})

        with pytest.raises(HTTPStatusError) as excinfo:
            client.get_payment("nope")

        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "payment not found"

    def test_external_create_payment(self, client, session):
        session.route(
            "POST",
            "/external/payments",
            200,
            {
                "message": "ok",
                "payment_id": "pay9",
                "pay_link": "https://pay.example.test/pay9",
                "decimals": 18,
                "payment_receivers": [
                    {"type": "fee", "recipient_address": "0x1", "amount": "10", "rate": "1"}
                ],
            },
        )

        payment = client.external_create_payment(
            ExternalCreatePaymentRequest(product_id="p1", product_token_id="pt1", count=2)
        )

        (sent,) = session.requests_to("POST", "/external/payments")
        assert sent.body == b'{"product_id":"p1","product_token_id":"pt1","count":2}'
        assert _auth(sent) == "Bearer A"
        assert payment.pay_link == "https://pay.example.test/pay9"
        assert payment.payment_receivers[0].type == "fee"

    def test_notify_payment_success(self, client, session):
        session.route("POST", "/external/payments/success/notify", 200, {"message": "sent"})

        result = client.external_notify_payment_success(
            PaymentNotifyRequest(payment_id="pay9", email="a@example.test")
        )

        (sent,) = session.requests_to("POST", "/external/payments/success/notify")
        assert json.loads(sent.body) == {"payment_id": "pay9", "email": "a@example.test"}
        assert result.message == "sent"


class TestAccounts:
    def test_account_info(self, client, session):
        session.route(
            "GET",
            "/accounts/info",
            200,
            {"email": "m@example.test", "activated": True, "created_at": "2024-01-01"},
        )

        info = client.get_account_info()

        assert info.email == "m@example.test"
        assert info.activated is True
        assert info.webhook is None

    def test_update_webhook_and_company(self, client, session):
        session.route("PUT", "/accounts/webhook", 200, {"message": "updated"})
        session.route("PUT", "/accounts/info", 200, {"message": "updated"})

        client.update_webhook("https://shop.example.test/hook")
        client.update_account_info("Shop", "https://shop.example.test")

        (webhook,) = session.requests_to("PUT", "/accounts/webhook")
        (info,) = session.requests_to("PUT", "/accounts/info")
        assert webhook.body == b'{"webhook":"https://shop.example.test/hook"}'
        assert json.loads(info.body) == {
            "company_name": "Shop",
            "company_url": "https://shop.example.test",
        }

    def test_wallet_balances_are_public(self, client, session):
        session.route(
            "POST",
            "/accounts/wallet/info",
            200,
            {
                "wallet_address": "0xabc",
                "chain_id": 11155111,
                "balances": [{"symbol": "USDT", "balance": "1000", "decimals": 6}],
            },
        )

        balances = client.get_token_balances("0xabc", 11155111)

        (sent,) = session.requests_to("POST", "/accounts/wallet/info")
        assert "Authorization" not in sent.headers
        assert json.loads(sent.body) == {"wallet_address": "0xabc", "chain_id": 11155111}
        assert balances.balances[0].decimals == 6

    def test_addresses_and_tokens(self, client, session):
        session.route("GET", "/accounts/addresses", 200, [{"account_id": "a1", "ref_name": "main"}])
        session.route(
            "GET",
            "/tokens",
            200,
            {"count": 1, "tokens": [{"token_id": "t1", "symbol": "USDT", "is_active": True}]},
        )

        addresses = client.list_account_addresses()
        tokens = client.list_tokens()

        assert [address.ref_name for address in addresses] == ["main"]
        assert tokens.count == 1
        assert tokens.tokens[0].is_active


class TestRefresh:
    def test_every_request_carries_a_valid_token_while_refreshing(self):
        session = RecordingSession()
        issued = ["A", "T1", "T2", "T3"]
        issued_lock = threading.Lock()

        def login(_prepared):
            with issued_lock:
                token = issued.pop(0) if len(issued) > 1 else issued[0]
            return 200, login_body(token)

        session.route_with("POST", "/accounts/apikeys/login", login)
        session.route("GET", "/products", 200, {"message": "ok", "products": []})

        client = ReddioPayClient.open(
            BASE_URL,
            "K",
            session=session,
            refresh_interval_seconds=0.01,
            retry_interval_seconds=0.01,
        )
        try:
            with ThreadPoolExecutor(max_workers=16) as pool:
                list(pool.map(lambda _: client.list_products(), range(1000)))

            assert wait_for(lambda: client.token_holder.get() == "T3")
        finally:
            client.close()

        allowed = {"Bearer A", "Bearer T1", "Bearer T2", "Bearer T3"}
        headers = {_auth(sent) for sent in session.requests_to("GET", "/products")}
        assert len(session.requests_to("GET", "/products")) == 1000
        assert headers <= allowed

    def test_no_login_after_close(self):
        session = RecordingSession()
        session.route("POST", "/accounts/apikeys/login", 200, login_body("A"))
        client = ReddioPayClient.open(
            BASE_URL,
            "K",
            session=session,
            refresh_interval_seconds=0.01,
            retry_interval_seconds=0.01,
        )
        assert wait_for(lambda: len(session.requests_to("POST", "/accounts/apikeys/login")) > 1)

        client.close()
        logins = len(session.requests_to("POST", "/accounts/apikeys/login"))
        time.sleep(0.1)

        assert len(session.requests_to("POST", "/accounts/apikeys/login")) == logins
