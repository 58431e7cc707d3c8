"""Tests for the JSON-RPC line codec and client message notifications."""

import json

import pytest

from clipdrive.core.buffer import MIME_OCTET_STREAM, TypedBuffer
from clipdrive.rpc.protocol import (
    MESSAGE_METHOD,
    InvalidRequestError,
    ParseError,
    decode_argument,
    decode_bytes,
    encode_argument,
    make_error_response,
    make_message_notification,
    make_success_response,
    parse_message_notification,
    parse_request,
    parse_response,
    serialize_request,
    serialize_response,
)
from clipdrive.rpc.types import ClientMessage, MessageStatus, Request


class TestMessageStatus:
    def test_wire_values_are_stable(self):
        assert MessageStatus.SUCCESS == 0
        assert MessageStatus.ERROR == 1
        assert MessageStatus.FINISHED == 2
        assert MessageStatus.READ_INPUT_REQUEST == 3


class TestParseRequest:
    def test_valid(self):
        request = parse_request('{"jsonrpc":"2.0","method":"run","params":{"command":"str"},"id":1}')
        assert request.method == "run"
        assert request.params == {"command": "str"}
        assert request.id == 1

    def test_notification_has_no_id(self):
        assert parse_request('{"jsonrpc":"2.0","method":"abort"}').id is None

    @pytest.mark.parametrize(
        "line,match",
        [
            ("not json", "Invalid JSON"),
            ("[1]", "must be a JSON object"),
            ('{"jsonrpc":"1.0","method":"run"}', "jsonrpc"),
            ('{"jsonrpc":"2.0","method":5}', "method"),
            ('{"jsonrpc":"2.0","method":"run","params":[1]}', "params"),
            ('{"jsonrpc":"2.0","method":"run","id":[1]}', "id"),
        ],
    )
    def test_invalid(self, line, match):
        with pytest.raises(ParseError, match=match):
            parse_request(line)

    @pytest.mark.parametrize(
        "line",
        [
            "[1]",
            '{"jsonrpc":"1.0","method":"run"}',
            '{"jsonrpc":"2.0","method":"run","params":[1]}',
        ],
    )
    def test_wrong_structure_is_invalid_request(self, line):
        with pytest.raises(InvalidRequestError):
            parse_request(line)

    def test_bad_json_is_not_invalid_request(self):
        with pytest.raises(ParseError) as exc_info:
            parse_request("{oops")
        assert not isinstance(exc_info.value, InvalidRequestError)

    def test_serialize_request_is_parseable(self):
        request = Request(jsonrpc="2.0", method="input", params={"x": 1}, id="a")
        assert parse_request(serialize_request(request)) == request


class TestResponses:
    def test_success(self):
        line = serialize_response(make_success_response(3, {"result": "success"}))
        assert json.loads(line) == {"jsonrpc": "2.0", "id": 3, "result": {"result": "success"}}
        assert parse_response(line).result == {"result": "success"}

    def test_error(self):
        line = serialize_response(make_error_response(3, -32602, "bad", data={"k": 1}))
        response = parse_response(line)
        assert response.error == {"code": -32602, "message": "bad", "data": {"k": 1}}

    def test_response_needs_exactly_one_of_result_or_error(self):
        with pytest.raises(ParseError, match="exactly one"):
            parse_response('{"jsonrpc":"2.0","id":1}')

    def test_response_needs_id(self):
        with pytest.raises(ParseError, match="id"):
            parse_response('{"jsonrpc":"2.0","result":1}')


class TestMessageNotification:
    def test_shape(self):
        request = make_message_notification(
            "inv-1", ClientMessage(payload=b"\x00hi", status=MessageStatus.ERROR)
        )
        assert request.method == MESSAGE_METHOD
        assert request.id is None
        assert request.params == {"invocation_id": "inv-1", "status": 1, "payload": "AGhp"}

    def test_parse(self):
        request = Request(
            jsonrpc="2.0",
            method=MESSAGE_METHOD,
            params={"invocation_id": "x", "status": 3, "payload": ""},
        )
        invocation_id, message = parse_message_notification(request)
        assert invocation_id == "x"
        assert message == ClientMessage(payload=b"", status=MessageStatus.READ_INPUT_REQUEST)

    @pytest.mark.parametrize(
        "params",
        [
            {"invocation_id": "x", "status": 9, "payload": ""},
            {"status": 0, "payload": ""},
            {"invocation_id": "x", "status": 0, "payload": "***"},
        ],
    )
    def test_parse_invalid(self, params):
        request = Request(jsonrpc="2.0", method=MESSAGE_METHOD, params=params)
        with pytest.raises(ParseError):
            parse_message_notification(request)

    def test_parse_other_method(self):
        with pytest.raises(ParseError, match="Not a message"):
            parse_message_notification(Request(jsonrpc="2.0", method="run", params={}))


class TestArguments:
    def test_scalars_pass_through(self):
        for value in ("text", 5, 1.5, True, None):
            assert decode_argument(value) == value

    def test_binary_argument(self):
        value = decode_argument({"mime": "image/png", "base64": "AAH/"})
        assert value == TypedBuffer.from_bytes(b"\x00\x01\xff", "image/png")
        assert value.is_binary

    def test_binary_argument_default_mime(self):
        assert decode_argument({"base64": ""}).mime == MIME_OCTET_STREAM

    def test_encode_binary_argument(self):
        buf = TypedBuffer.from_bytes(b"\x00", "image/png")
        assert encode_argument(buf) == {"mime": "image/png", "base64": "AA=="}
        assert decode_argument(encode_argument(buf)) == buf

    @pytest.mark.parametrize("value", [[1, 2], {"mime": "x"}, {"base64": 5}])
    def test_unsupported(self, value):
        with pytest.raises(ParseError):
            decode_argument(value)

    def test_decode_bytes_rejects_garbage(self):
        with pytest.raises(ParseError, match="base64"):
            decode_bytes("@@@")
