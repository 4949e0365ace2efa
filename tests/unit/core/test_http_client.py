"""
Tests for APIClient: modifiers on the wire, warnings, errors.
"""

import json
from unittest.mock import Mock

import pytest
import responses

from request_shaper.core.config import ClientConfig, SecurityConfig
from request_shaper.core.exceptions import (
    ConflictError,
    ConnectionError,
    ForbiddenError,
    InvalidResponseError,
    NotFoundError,
    ResponseTooLargeError,
    ServerError,
)
from request_shaper.core.http_client import CORRELATION_ID_HEADER, APIClient, PatchType
from request_shaper.core.impersonation import ImpersonationConfig
from request_shaper.core.modifiers import Impersonate, SetHeader, SetWarningHandler
from request_shaper.core.options import (
    CreateOptions,
    DeleteOptions,
    GetOptions,
    ListOptions,
    Options,
    PatchOptions,
)
from request_shaper.core.warning_handler import LoggingWarningHandler, NoWarnings

PODS = "/api/v1/namespaces/default/pods"


class TestNewRequest:
    """Построение запроса без отправки."""

    def test_default_headers(self, client):
        request = client.new_request("GET", PODS)
        assert request.get_header("Accept") == ["application/json"]
        assert len(request.get_header(CORRELATION_ID_HEADER)[0]) == 36
        assert request.url == "https://api.example.com/api/v1/namespaces/default/pods"

    def test_correlation_id_unique_per_request(self, client):
        first = client.new_request("GET", PODS).get_header(CORRELATION_ID_HEADER)
        second = client.new_request("GET", PODS).get_header(CORRELATION_ID_HEADER)
        assert first != second

    def test_default_warning_handler(self, client):
        assert isinstance(client.new_request("GET", PODS).warning_handler, LoggingWarningHandler)

    def test_client_warning_handler(self, base_url):
        handler = NoWarnings()
        with APIClient(base_url=base_url, warning_handler=handler) as client:
            assert client.new_request("GET", PODS).warning_handler is handler

    def test_name_is_escaped(self, client):
        request = client.new_request("GET", "/api/v1/namespaces/default/configmaps", name="a/b")
        assert request.url.endswith("/configmaps/a%2Fb")

    def test_absolute_url_kept(self, client):
        request = client.new_request("GET", "https://other.example.com/healthz")
        assert request.url == "https://other.example.com/healthz"

    def test_params_from_options(self, client):
        request = client.new_request("GET", PODS, options=ListOptions(limit=10))
        assert request.params == {"limit": 10}

    def test_empty_username_still_sent(self, client):
        options = Options(request_modifiers=[Impersonate(ImpersonationConfig())])
        request = client.new_request("GET", PODS, options=options)
        assert request.get_header("Impersonate-User") == [""]
        assert request.get_header("Impersonate-Group") == []
        assert not request.has_header("Impersonate-Uid")

    def test_options_modifiers_run_after_defaults(self, client):
        options = Options(request_modifiers=[SetHeader("Accept", "application/yaml")])
        request = client.new_request("GET", PODS, options=options)
        assert request.get_header("Accept") == ["application/yaml"]

    def test_config_headers_applied(self, base_url):
        config = ClientConfig.create(base_url=base_url, headers={"X-Team": "platform"})
        with APIClient(config=config) as client:
            assert client.new_request("GET", PODS).get_header("X-Team") == ["platform"]

    def test_modifier_exception_propagates(self, client):
        def boom(request):
            raise RuntimeError("modifier failed")

        with pytest.raises(RuntimeError, match="modifier failed"):
            client.get(PODS, "web-0", GetOptions(request_modifiers=[boom]))


class TestWire:
    """То, что реально уходит на сервер."""

    @responses.activate
    def test_impersonation_headers(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", json={"kind": "Pod"})
        config = ImpersonationConfig(
            username="alice",
            groups=["dev", "ops"],
            extra={"example.com/Reason": ["on-call"]},
        )

        result = client.get(PODS, "web-0", GetOptions(request_modifiers=[Impersonate(config)]))

        assert result == {"kind": "Pod"}
        headers = responses.calls[0].request.headers
        assert headers["Impersonate-User"] == "alice"
        assert headers.getlist("Impersonate-Group") == ["dev", "ops"]
        assert headers["Impersonate-Extra-example.com%2Freason"] == "on-call"
        assert "Impersonate-Uid" not in headers

    @responses.activate
    def test_uid_sent(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", json={})
        config = ImpersonationConfig(username="alice", uid="1234")
        client.get(PODS, "web-0", GetOptions(request_modifiers=[Impersonate(config)]))
        assert responses.calls[0].request.headers["Impersonate-Uid"] == "1234"

    @responses.activate
    def test_non_ascii_username_sent_as_utf8(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", json={})
        config = ImpersonationConfig(username="пользователь")
        client.get(PODS, "web-0", GetOptions(request_modifiers=[Impersonate(config)]))
        headers = responses.calls[0].request.headers
        assert headers.getlist("Impersonate-User") == ["пользователь".encode("utf-8")]

    @responses.activate
    def test_group_header_omitted_without_groups(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", json={})
        config = ImpersonationConfig(username="alice")
        client.get(PODS, "web-0", GetOptions(request_modifiers=[Impersonate(config)]))
        assert "Impersonate-Group" not in responses.calls[0].request.headers

    @responses.activate
    def test_config_impersonation_overridden_by_options(self, base_url):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", json={})
        config = ClientConfig.create(
            base_url=base_url,
            impersonate=ImpersonationConfig(username="alice", groups=["dev"]),
        )
        bob = Impersonate(ImpersonationConfig(username="bob"))

        with APIClient(config=config) as client:
            client.get(PODS, "web-0", GetOptions(request_modifiers=[bob]))

        headers = responses.calls[0].request.headers
        assert headers["Impersonate-User"] == "bob"
        assert "Impersonate-Group" not in headers

    @responses.activate
    def test_config_impersonation_applied(self, base_url):
        responses.add(responses.GET, f"https://api.example.com{PODS}", json={"items": []})
        config = ClientConfig.create(
            base_url=base_url,
            impersonate=ImpersonationConfig(username="alice", groups=["dev"]),
        )
        with APIClient(config=config) as client:
            client.list(PODS)

        headers = responses.calls[0].request.headers
        assert headers["Impersonate-User"] == "alice"
        assert headers["Impersonate-Group"] == "dev"

    @responses.activate
    def test_user_agent_and_accept(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}", json={"items": []})
        client.list(PODS)
        headers = responses.calls[0].request.headers
        assert headers["User-Agent"] == "request-shaper"
        assert headers["Accept"] == "application/json"
        assert CORRELATION_ID_HEADER in headers

    @responses.activate
    def test_list_query_params(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}", json={"items": []})
        client.list(PODS, ListOptions(label_selector="app=web", limit=10))
        url = responses.calls[0].request.url
        assert "labelSelector=app%3Dweb" in url
        assert "limit=10" in url

    @responses.activate
    def test_delete_grace_period(self, client):
        responses.add(responses.DELETE, f"https://api.example.com{PODS}/web-0", json={"status": "Success"})
        client.delete(PODS, "web-0", DeleteOptions(grace_period_seconds=0))
        assert "gracePeriodSeconds=0" in responses.calls[0].request.url

    @responses.activate
    def test_create_sends_json(self, client):
        responses.add(responses.POST, f"https://api.example.com{PODS}", json={"kind": "Pod"}, status=201)
        obj = {"metadata": {"name": "web-0"}}

        client.create(PODS, obj, CreateOptions(dry_run=True))

        request = responses.calls[0].request
        assert json.loads(request.body) == obj
        assert request.headers["Content-Type"] == "application/json"
        assert "dryRun=All" in request.url

    @responses.activate
    def test_update_uses_put(self, client):
        responses.add(responses.PUT, f"https://api.example.com{PODS}/web-0", json={})
        client.update(PODS, "web-0", {"spec": {}})
        assert responses.calls[0].request.method == "PUT"

    @responses.activate
    def test_patch_content_type(self, client):
        responses.add(responses.PATCH, f"https://api.example.com{PODS}/web-0", json={})
        client.patch(
            PODS, "web-0", {"metadata": {"labels": {"tier": "web"}}},
            patch_type=PatchType.STRATEGIC_MERGE,
            options=PatchOptions(field_manager="ci"),
        )
        request = responses.calls[0].request
        assert request.headers["Content-Type"] == "application/strategic-merge-patch+json"
        assert "fieldManager=ci" in request.url

    @responses.activate
    def test_no_content_type_without_body(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}", json={})
        client.list(PODS)
        assert "Content-Type" not in responses.calls[0].request.headers


class TestWarnings:

    @responses.activate
    def test_warning_goes_to_request_handler(self, client, collecting_handler):
        responses.add(
            responses.GET, f"https://api.example.com{PODS}/web-0", json={},
            headers={"Warning": '299 - "v1beta1 is deprecated"'},
        )
        options = GetOptions(request_modifiers=[SetWarningHandler(collecting_handler)])

        client.get(PODS, "web-0", options)

        assert collecting_handler.warnings == [(299, "-", "v1beta1 is deprecated")]

    @responses.activate
    def test_default_handler_receives_warning(self, base_url):
        responses.add(
            responses.GET, f"https://api.example.com{PODS}", json={},
            headers={"Warning": '299 - "one", 299 - "two"'},
        )
        handler = Mock()
        with APIClient(base_url=base_url, warning_handler=handler) as client:
            client.list(PODS)
        assert handler.handle_warning_header.call_count == 2

    @responses.activate
    def test_warning_handled_on_error_response(self, client, collecting_handler):
        responses.add(
            responses.GET, f"https://api.example.com{PODS}/web-0", status=404,
            headers={"Warning": '299 - "gone"'},
        )
        options = GetOptions(request_modifiers=[SetWarningHandler(collecting_handler)])

        with pytest.raises(NotFoundError):
            client.get(PODS, "web-0", options)
        assert collecting_handler.warnings == [(299, "-", "gone")]

    @responses.activate
    def test_malformed_warning_does_not_fail_request(self, client, collecting_handler):
        responses.add(
            responses.GET, f"https://api.example.com{PODS}", json={"items": []},
            headers={"Warning": "garbage"},
        )
        options = ListOptions(request_modifiers=[SetWarningHandler(collecting_handler)])
        assert client.list(PODS, options) == {"items": []}
        assert collecting_handler.warnings == []


class TestErrors:

    @pytest.mark.parametrize("status, error_cls", [
        (403, ForbiddenError),
        (404, NotFoundError),
        (409, ConflictError),
        (500, ServerError),
    ])
    @responses.activate
    def test_status_errors(self, client, status, error_cls):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", json={"reason": "x"}, status=status)
        with pytest.raises(error_cls) as exc_info:
            client.get(PODS, "web-0")
        assert exc_info.value.status_code == status

    def test_connection_error(self, client, mock_responses):
        with pytest.raises(ConnectionError):
            client.get(PODS, "web-0")

    @responses.activate
    def test_invalid_json(self, client):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", body="not json")
        with pytest.raises(InvalidResponseError):
            client.get(PODS, "web-0")

    @responses.activate
    def test_empty_body_returns_none(self, client):
        responses.add(responses.DELETE, f"https://api.example.com{PODS}/web-0", body="", status=200)
        assert client.delete(PODS, "web-0") is None

    @responses.activate
    def test_response_too_large(self, base_url):
        responses.add(responses.GET, f"https://api.example.com{PODS}", body="x" * 100)
        config = ClientConfig(base_url=base_url, security=SecurityConfig(max_response_size=10))
        with APIClient(config=config) as client:
            with pytest.raises(ResponseTooLargeError):
                client.list(PODS)


class TestClientLifecycle:

    def test_immutable(self, client):
        with pytest.raises(RuntimeError):
            client.timeout = 5

    def test_properties(self, client):
        assert client.base_url == "https://api.example.com"
        assert client.config.timeout.read == 10
        assert client.session is client.session

    def test_close_idempotent(self, base_url):
        client = APIClient(base_url=base_url)
        client.session
        client.close()
        client.close()


class TestLogging:

    @responses.activate
    def test_request_logged_with_masked_headers(self, base_url, logging_config_with_file):
        responses.add(responses.GET, f"https://api.example.com{PODS}", json={"items": []})
        config = ClientConfig.create(
            base_url=base_url,
            headers={"Authorization": "Bearer secret-token"},
            logging=logging_config_with_file,
        )
        alice = Impersonate(ImpersonationConfig(username="alice"))

        with APIClient(config=config) as client:
            client.list(PODS, ListOptions(request_modifiers=[alice]))

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]

        prepared = next(r for r in records if r["message"] == "Request prepared")
        assert prepared["headers"]["Authorization"] == "***REDACTED***"
        assert prepared["headers"]["Impersonate-User"] == "alice"
        assert "secret-token" not in json.dumps(records)

        completed = next(r for r in records if r["message"] == "Request completed")
        assert completed["status_code"] == 200
        assert completed["impersonate_user"] == "alice"
        assert completed["correlation_id"] == prepared["correlation_id"]

        applied = next(r for r in records if r["message"] == "Request modifiers applied")
        assert "Impersonate(username='alice')" in applied["modifiers"]
        assert applied["impersonate_user"] == "alice"

    @responses.activate
    def test_failure_logged(self, logged_client, logging_config_with_file):
        responses.add(responses.GET, f"https://api.example.com{PODS}/web-0", status=404)
        with pytest.raises(NotFoundError):
            logged_client.get(PODS, "web-0")

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]
        failed = next(r for r in records if r["message"] == "Request failed")
        assert failed["status_code"] == 404
        assert failed["error_type"] == "NotFoundError"
