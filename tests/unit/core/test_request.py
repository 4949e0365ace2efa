"""
Tests for APIRequest and the ModifiableRequest protocol.
"""

from request_shaper.core.request import APIRequest, ModifiableRequest, wire_value
from request_shaper.core.warning_handler import NoWarnings


class TestAPIRequest:
    """APIRequest header storage."""

    def test_defaults(self):
        request = APIRequest("get", "https://api.example.com/api/v1/pods")
        assert request.method == "GET"
        assert request.params == {}
        assert request.body is None
        assert request.warning_handler is None
        assert list(request.header_items()) == []

    def test_set_header_replaces_values(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("Impersonate-Group", "dev", "ops")
        request.set_header("Impersonate-Group", "admins")
        assert request.get_header("Impersonate-Group") == ["admins"]

    def test_header_names_case_insensitive(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("impersonate-user", "alice")
        assert request.get_header("Impersonate-User") == ["alice"]
        assert request.has_header("IMPERSONATE-USER")

    def test_last_name_casing_wins(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("x-team", "a")
        request.set_header("X-Team", "b")
        assert list(request.header_items()) == [("X-Team", "b")]

    def test_missing_header(self):
        request = APIRequest("GET", "https://api.example.com/x")
        assert request.get_header("Impersonate-Uid") is None
        assert not request.has_header("Impersonate-Uid")

    def test_multi_valued_header_joined(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("Impersonate-Group", "dev", "ops")
        assert dict(request.header_items()) == {"Impersonate-Group": "dev, ops"}

    def test_zero_value_header_kept_but_not_emitted(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("Impersonate-Group")
        assert request.has_header("Impersonate-Group")
        assert request.get_header("Impersonate-Group") == []
        assert dict(request.header_items()) == {}

    def test_empty_string_value_emitted(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("Impersonate-User", "")
        assert dict(request.header_items()) == {"Impersonate-User": ""}

    def test_header_fields_one_per_value(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("Impersonate-User", "alice")
        request.set_header("Impersonate-Group", "dev", "ops")
        request.set_header("Impersonate-Uid")
        assert list(request.header_fields()) == [
            ("Impersonate-User", "alice"),
            ("Impersonate-Group", "dev"),
            ("Impersonate-Group", "ops"),
        ]

    def test_header_fields_non_ascii_as_utf8(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("Impersonate-User", "José")
        assert list(request.header_fields()) == [("Impersonate-User", "José".encode("utf-8"))]

    def test_wire_value(self):
        assert wire_value("alice") == "alice"
        assert wire_value("") == ""
        assert wire_value("пользователь") == "пользователь".encode("utf-8")

    def test_get_header_returns_copy(self):
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_header("X-A", "1")
        request.get_header("X-A").append("2")
        assert request.get_header("X-A") == ["1"]

    def test_set_warning_handler(self):
        handler = NoWarnings()
        request = APIRequest("GET", "https://api.example.com/x")
        request.set_warning_handler(handler)
        assert request.warning_handler is handler

    def test_params_copied(self):
        params = {"limit": 10}
        request = APIRequest("GET", "https://api.example.com/x", params=params)
        request.params["continue"] = "abc"
        assert params == {"limit": 10}


class TestModifiableRequestProtocol:
    """Runtime protocol check."""

    def test_api_request_satisfies_protocol(self):
        assert isinstance(APIRequest("GET", "https://api.example.com/x"), ModifiableRequest)

    def test_recording_request_satisfies_protocol(self, recording_request):
        assert isinstance(recording_request, ModifiableRequest)

    def test_object_without_capabilities_does_not(self):
        assert not isinstance(object(), ModifiableRequest)
