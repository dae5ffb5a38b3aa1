"""Tests for request composition, status classification and decoding."""

import json

import pytest
import requests

from conftest import BASE_URL, RecordingSession
from reddio_pay import (
    DecodeError,
    HTTPStatusError,
    ReddioPayError,
    SerializeError,
    TokenHolder,
    TransportError,
)
from reddio_pay.core.endpoints import pagination_query
from reddio_pay.core.models import MessageResponse, ProductList
from reddio_pay.core.payloads import CreateProductRequest
from reddio_pay.core.pipeline import (
    AuthMode,
    EndpointRequest,
    RequestPipeline,
    encode_json,
    error_message,
)


@pytest.fixture
def holder():
    return TokenHolder("A")


@pytest.fixture
def recording():
    return RecordingSession()


@pytest.fixture
def pipeline(recording, holder):
    return RequestPipeline(BASE_URL, session=recording, token_holder=holder)


def _product_request():
    return CreateProductRequest(
        name="Tee",
        description="",
        content="",
        price="1",
        recipient_address="0xabc",
        token_ids=["t1"],
    )


class TestPrepare:
    def test_same_inputs_produce_identical_requests(self, pipeline):
        request = EndpointRequest("POST", "/products", body=_product_request())

        first = pipeline.prepare(request)
        second = pipeline.prepare(request)

        assert first.method == second.method
        assert first.url == second.url
        assert first.body == second.body
        assert dict(first.headers) == dict(second.headers)

    def test_post_carries_compact_json_and_bearer_token(self, pipeline):
        prepared = pipeline.prepare(EndpointRequest("POST", "/products", body=_product_request()))

        assert prepared.method == "POST"
        assert prepared.url == BASE_URL + "/products"
        assert prepared.headers["Authorization"] == "Bearer A"
        assert prepared.headers["Content-Type"] == "application/json"
        assert prepared.headers["Accept"] == "application/json"
        assert prepared.body == (
            b'{"name":"Tee","description":"","content":"","token_ids":["t1"],'
            b'"price":"1","recipient_address":"0xabc"}'
        )

    def test_get_has_no_body_or_content_type(self, pipeline):
        prepared = pipeline.prepare(EndpointRequest("GET", "/products"))

        assert prepared.body is None
        assert "Content-Type" not in prepared.headers
        assert prepared.url == BASE_URL + "/products"

    def test_query_parameters_are_encoded_in_order(self, pipeline):
        prepared = pipeline.prepare(
            EndpointRequest("GET", "/payments/list", query=pagination_query(25, 50))
        )
        assert prepared.url == BASE_URL + "/payments/list?limit=25&offset=50"

    def test_trailing_slash_on_base_url_is_ignored(self, recording, holder):
        pipeline = RequestPipeline(BASE_URL + "/", session=recording, token_holder=holder)
        assert pipeline.prepare(EndpointRequest("GET", "/tokens")).url == BASE_URL + "/tokens"

    def test_non_ascii_body_is_sent_as_utf8(self, pipeline):
        prepared = pipeline.prepare(
            EndpointRequest("PUT", "/accounts/info", body={"company_name": "Café"})
        )
        assert prepared.body == '{"company_name":"Café"}'.encode("utf-8")


class TestPaginationQuery:
    @pytest.mark.parametrize(
        "limit, offset, expected",
        [
            (0, -1, {}),
            (10, -1, {"limit": "10"}),
            (0, 0, {"offset": "0"}),
            (25, 50, {"limit": "25", "offset": "50"}),
            (-3, -3, {}),
        ],
    )
    def test_only_meaningful_values_are_sent(self, limit, offset, expected):
        assert pagination_query(limit, offset) == expected


class TestAuthModes:
    def test_required_without_token_fails_before_sending(self, recording):
        pipeline = RequestPipeline(BASE_URL, session=recording, token_holder=TokenHolder())

        with pytest.raises(ReddioPayError):
            pipeline.get("/products", ProductList.from_payload)

        assert recording.sent == []

    def test_optional_without_token_omits_header(self, recording):
        recording.route("POST", "/external/payments", 200, {"message": "ok"})
        pipeline = RequestPipeline(BASE_URL, session=recording, token_holder=TokenHolder())

        pipeline.post("/external/payments", {}, MessageResponse.from_payload, auth=AuthMode.OPTIONAL)

        (sent,) = recording.sent
        assert "Authorization" not in sent.headers

    def test_optional_with_token_sends_header(self, pipeline, recording):
        recording.route("POST", "/external/payments", 200, {"message": "ok"})

        pipeline.post("/external/payments", {}, MessageResponse.from_payload, auth=AuthMode.OPTIONAL)

        (sent,) = recording.sent
        assert sent.headers["Authorization"] == "Bearer A"

    def test_none_never_sends_header(self, pipeline, recording):
        recording.route("POST", "/accounts/wallet/info", 200, {"message": "ok"})

        pipeline.post("/accounts/wallet/info", {}, MessageResponse.from_payload, auth=AuthMode.NONE)

        (sent,) = recording.sent
        assert "Authorization" not in sent.headers

    def test_token_is_read_at_send_time(self, pipeline, recording, holder):
        recording.route("GET", "/products", 200, {"message": "ok", "products": []})

        pipeline.get("/products", ProductList.from_payload)
        holder.set("B")
        pipeline.get("/products", ProductList.from_payload)

        assert [sent.headers["Authorization"] for sent in recording.sent] == [
            "Bearer A",
            "Bearer B",
        ]


class TestStatusClassification:
    @pytest.mark.parametrize("status", [201, 204, 301, 400, 401, 404, 500, 503])
    def test_any_status_but_200_is_an_error(self, pipeline, recording, status):
        recording.route("GET", "/products", status, {"message": "nope"})

        with pytest.raises(HTTPStatusError) as excinfo:
            pipeline.get("/products", ProductList.from_payload)

        assert excinfo.value.status_code == status
        assert excinfo.value.message == "nope"
        assert str(excinfo.value) == f"API request failed with status {status}: nope"

    def test_raw_body_is_used_without_message_envelope(self, pipeline, recording):
        recording.route("GET", "/products", 502, "upstream exploded")

        with pytest.raises(HTTPStatusError) as excinfo:
            pipeline.get("/products", ProductList.from_payload)

        assert excinfo.value.message == "upstream exploded"
        assert excinfo.value.body == "upstream exploded"

    def test_error_never_contains_token(self, pipeline, recording):
        recording.route("GET", "/products", 401, {"message": "token expired"})

        with pytest.raises(HTTPStatusError) as excinfo:
            pipeline.get("/products", ProductList.from_payload)

        assert "Bearer" not in str(excinfo.value)

    @pytest.mark.parametrize(
        "body, expected",
        [
            ('{"message":"bad input"}', "bad input"),
            ('{"error":"x"}', '{"error":"x"}'),
            ('{"message":""}', '{"message":""}'),
            ("[1,2]", "[1,2]"),
            ("plain text", "plain text"),
            ("", ""),
        ],
    )
    def test_error_message(self, body, expected):
        assert error_message(body) == expected


class TestDecoding:
    def test_success_is_decoded(self, pipeline, recording):
        recording.route(
            "GET",
            "/products",
            200,
            {"message": "ok", "products": [{"product_id": "p1", "name": "Tee"}]},
        )

        result = pipeline.get("/products", ProductList.from_payload)

        assert result.message == "ok"
        assert [product.product_id for product in result.products] == ["p1"]
        assert result.products[0].product_tokens == []

    @pytest.mark.parametrize("body", [b"", b"   ", b"<html>", b"{"])
    def test_unparseable_body_is_a_decode_error(self, pipeline, recording, body):
        recording.route("GET", "/products", 200, body)

        with pytest.raises(DecodeError):
            pipeline.get("/products", ProductList.from_payload)

    @pytest.mark.parametrize("body", [[1, 2], "just a string", {"products": "nope"}])
    def test_wrong_shape_is_a_decode_error(self, pipeline, recording, body):
        recording.route("GET", "/products", 200, body)

        with pytest.raises(DecodeError):
            pipeline.get("/products", ProductList.from_payload)


class TestTransportAndSerialization:
    def test_connection_failure_is_a_transport_error(self, pipeline, recording):
        recording.routes[("GET", "/products")] = requests.ConnectionError("refused")

        with pytest.raises(TransportError) as excinfo:
            pipeline.get("/products", ProductList.from_payload)

        assert isinstance(excinfo.value.__cause__, requests.ConnectionError)

    def test_timeout_is_a_transport_error(self, pipeline, recording):
        recording.routes[("GET", "/products")] = requests.Timeout("slow")

        with pytest.raises(TransportError):
            pipeline.get("/products", ProductList.from_payload)

    @pytest.mark.parametrize("body", [{"value": object()}, {"value": float("nan")}])
    def test_unserializable_body_is_a_serialize_error(self, pipeline, recording, body):
        with pytest.raises(SerializeError):
            pipeline.post("/products", body, MessageResponse.from_payload)

        assert recording.sent == []

    def test_encode_json_uses_to_payload(self):
        assert encode_json(_product_request()) == json.dumps(
            _product_request().to_payload(), separators=(",", ":")
        ).encode("utf-8")
