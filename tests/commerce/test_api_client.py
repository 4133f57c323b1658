"""Tests for src/commerce/api_client.py"""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from src.commerce.api_client import CommerceAPIClient, build_search_criteria
from src.commerce.errors import AdminTokenExpiredError, CommerceAPIError


def make_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


class TestBuildSearchCriteria:
    def test_paging_only(self):
        assert build_search_criteria(50, 2) == {
            "searchCriteria[pageSize]": 50,
            "searchCriteria[currentPage]": 2,
        }

    def test_filter_groups(self):
        params = build_search_criteria(page_size=3, filters=[("sku", "A,B,C", "in")])
        assert params["searchCriteria[filter_groups][0][filters][0][field]"] == "sku"
        assert params["searchCriteria[filter_groups][0][filters][0][value]"] == "A,B,C"
        assert params["searchCriteria[filter_groups][0][filters][0][condition_type]"] == "in"
        assert "searchCriteria[currentPage]" not in params

    def test_each_filter_gets_own_group(self):
        params = build_search_criteria(filters=[("sku", "A", "eq"), ("status", 1, "eq")])
        assert params["searchCriteria[filter_groups][1][filters][0][field]"] == "status"

    def test_empty(self):
        assert build_search_criteria() == {}


class TestInit:
    def test_rest_url(self, client):
        assert client.rest_url == "https://store.example.com/rest/V1"

    def test_strips_trailing_slash(self):
        c = CommerceAPIClient(base_url="https://store.example.com/")
        assert c.base_url == "https://store.example.com"

    def test_custom_api_version(self):
        c = CommerceAPIClient(base_url="https://store.example.com", api_version="all")
        assert c.build_url("products") == "https://store.example.com/rest/all/products"

    def test_session_headers(self, client):
        assert client.session.headers["Content-Type"] == "application/json"
        assert client.session.headers["Accept"] == "application/json"


class TestRestRequest:
    def test_successful_get(self, client):
        response = make_response(json_data={"items": [], "total_count": 0})

        with patch.object(client.session, "get", return_value=response) as mock_get:
            result = client.rest_request("GET", "products", params={"a": 1}, token="tok")

        assert result == {"items": [], "total_count": 0}
        _, kwargs = mock_get.call_args
        assert mock_get.call_args[0][0] == "https://store.example.com/rest/V1/products"
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert kwargs["params"] == {"a": 1}

    def test_successful_post(self, client):
        response = make_response(json_data="abc123")

        with patch.object(client.session, "post", return_value=response) as mock_post:
            result = client.rest_request("POST", "integration/admin/token", data={"username": "u"})

        assert result == "abc123"
        assert mock_post.call_args.kwargs["json"] == {"username": "u"}
        assert mock_post.call_args.kwargs["headers"] is None

    def test_returns_text_when_not_json(self, client):
        response = make_response(text="plain body")

        with patch.object(client.session, "get", return_value=response):
            assert client.rest_request("GET", "products") == "plain body"

    def test_401_raises_token_expired(self, client):
        response = make_response(status_code=401, text="The consumer isn't authorized")

        with patch.object(client.session, "get", return_value=response):
            with pytest.raises(AdminTokenExpiredError) as exc_info:
                client.rest_request("GET", "products", token="old")

        assert exc_info.value.is_token_expired is True
        assert exc_info.value.status == 401

    def test_error_status_raises_api_error(self, client):
        response = make_response(status_code=404, text="Not Found")

        with patch.object(client.session, "get", return_value=response):
            with pytest.raises(CommerceAPIError) as exc_info:
                client.rest_request("GET", "categories/99")

        assert exc_info.value.status == 404
        assert exc_info.value.body == "Not Found"
        assert not isinstance(exc_info.value, AdminTokenExpiredError)

    def test_timeout_raises_api_error(self, client):
        with patch.object(client.session, "get", side_effect=requests.exceptions.Timeout):
            with pytest.raises(CommerceAPIError, match="Request timeout"):
                client.rest_request("GET", "products")

    def test_connection_error_raises_api_error(self, client):
        with patch.object(client.session, "get", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(CommerceAPIError, match="Request failed"):
                client.rest_request("GET", "products")

    def test_unsupported_method_raises(self, client):
        with pytest.raises(ValueError, match="Unsupported method"):
            client.rest_request("PATCH", "products")

class TestRequestAsync:
    def test_delegates_to_rest_request(self, client):
        with patch.object(client, "rest_request", return_value={"ok": True}) as mock_request:
            result = asyncio.run(client.request_async("GET", "products", params={"p": 1}, token="t"))

        assert result == {"ok": True}
        mock_request.assert_called_once_with("GET", "products", params={"p": 1}, data=None, token="t")

    def test_propagates_errors(self, client):
        with patch.object(client, "rest_request", side_effect=AdminTokenExpiredError()):
            with pytest.raises(AdminTokenExpiredError):
                asyncio.run(client.request_async("GET", "products"))
