import pytest
from pydantic import ValidationError

from backdrop.server.messages import PingMessage, ViewportMessage, parse_background_message


class TestParseBackgroundMessage:
    def test_viewport(self):
        message = parse_background_message('{"type": "viewport", "width": 640}')
        assert isinstance(message, ViewportMessage)
        assert message.width == 640

    def test_ping(self):
        assert isinstance(parse_background_message('{"type": "ping"}'), PingMessage)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_background_message('{"type": "dance"}')

    def test_negative_width_rejected(self):
        with pytest.raises(ValidationError):
            parse_background_message('{"type": "viewport", "width": -1}')

    def test_malformed_json_rejected(self):
        with pytest.raises(ValueError):
            parse_background_message("{not json")

    def test_oversized_message_rejected(self):
        with pytest.raises(ValueError, match="too large"):
            parse_background_message('{"type": "ping", "pad": "' + "x" * 5000 + '"}')

    def test_deeply_nested_json_rejected(self):
        with pytest.raises(ValueError, match="nested too deeply"):
            parse_background_message("[" * 3000)
