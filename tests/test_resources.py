# tests/test_resources.py
from typing import ClassVar
from unittest.mock import MagicMock

import httpx
import pytest
from pydantic import BaseModel, Field

from stackfabric.client import ServiceClient
from stackfabric.config import BaseApiSettings
from stackfabric.exceptions import DecodeError, StackfabricError, ValidationError
from stackfabric.models import QueryOptions
from stackfabric.pagination import LinkedPageBase, Pager
from stackfabric.resources import BaseResourceClient

ENDPOINT = "https://api.example.com/v1"

# --- Mocks and Fixtures ---


class MockEntityModel(BaseModel):
    id: str
    value: str


class MockPage(LinkedPageBase):
    collection_key: ClassVar[str] = "widgets"


class MockListOpts(QueryOptions):
    value: str | None = Field(default=None, alias="value")


class ConcreteResourceClient(BaseResourceClient):
    _collection_path = "parents/{parent_id}/widgets"
    _resource_key = "widget"
    _entity_model = MockEntityModel
    _page_class = MockPage


@pytest.fixture
def mock_service_client():
    client = MagicMock(spec=ServiceClient)
    real = ServiceClient(BaseApiSettings(max_retries=0), endpoint=ENDPOINT)
    client.service_url.side_effect = real.service_url
    yield client
    real.close()


@pytest.fixture
def resource_client(mock_service_client):
    return ConcreteResourceClient(mock_service_client)


def json_response(status_code: int, body) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=body,
        request=httpx.Request("GET", f"{ENDPOINT}/parents/p1/widgets/w1"),
    )


# --- URL building ---


def test_collection_url_fills_path_parameters(resource_client):
    assert (
        resource_client._collection_url(parent_id="p1")
        == f"{ENDPOINT}/parents/p1/widgets"
    )


def test_resource_url_quotes_identifier(resource_client):
    assert (
        resource_client._resource_url("a/b", parent_id="p1")
        == f"{ENDPOINT}/parents/p1/widgets/a%2Fb"
    )


def test_missing_collection_path_raises(mock_service_client):
    class Incomplete(BaseResourceClient):
        pass

    with pytest.raises(StackfabricError, match="must define _collection_path"):
        Incomplete(mock_service_client)._collection_url()


# --- List ---


def test_list_returns_pager_with_query(resource_client, mock_service_client):
    pager = resource_client._list(MockListOpts(value="x"), parent_id="p1")

    assert isinstance(pager, Pager)
    assert pager.initial_url == f"{ENDPOINT}/parents/p1/widgets?value=x"
    mock_service_client.get.assert_not_called()


def test_list_without_page_class_raises(mock_service_client):
    class NoPages(BaseResourceClient):
        _collection_path = "widgets"

    with pytest.raises(StackfabricError, match="must define _page_class"):
        NoPages(mock_service_client)._list()


# --- Single resource operations ---


def test_get_decodes_enveloped_entity(resource_client, mock_service_client):
    mock_service_client.get.return_value = json_response(
        200, {"widget": {"id": "w1", "value": "v"}}
    )

    entity = resource_client._decode_entity(
        resource_client._get("w1", parent_id="p1")
    )

    assert entity == MockEntityModel(id="w1", value="v")
    mock_service_client.get.assert_called_once_with(
        f"{ENDPOINT}/parents/p1/widgets/w1", ok_codes=(200,)
    )


def test_decode_entity_invalid_model(resource_client):
    with pytest.raises(DecodeError, match="Failed to decode MockEntityModel"):
        resource_client._decode_entity(json_response(200, {"widget": {"id": "w1"}}))


def test_decode_entity_not_json(resource_client):
    response = httpx.Response(
        200, content=b"not json", request=httpx.Request("GET", ENDPOINT)
    )

    with pytest.raises(DecodeError, match="not valid JSON"):
        resource_client._decode_entity(response)


def test_create_posts_to_collection(resource_client, mock_service_client):
    resource_client._create({"widget": {}}, ok_codes=(201,), parent_id="p1")

    mock_service_client.post.assert_called_once_with(
        f"{ENDPOINT}/parents/p1/widgets", json_data={"widget": {}}, ok_codes=(201,)
    )


def test_update_puts_to_resource(resource_client, mock_service_client):
    resource_client._update("w1", {"widget": {"value": "y"}}, parent_id="p1")

    mock_service_client.put.assert_called_once_with(
        f"{ENDPOINT}/parents/p1/widgets/w1",
        json_data={"widget": {"value": "y"}},
        ok_codes=(200, 202),
    )


def test_delete_uses_given_ok_codes(resource_client, mock_service_client):
    resource_client._delete("w1", ok_codes=(204,), parent_id="p1")

    mock_service_client.delete.assert_called_once_with(
        f"{ENDPOINT}/parents/p1/widgets/w1", ok_codes=(204,)
    )


# --- Path parameters ---


def test_path_parameter_with_slash_stays_one_segment(resource_client):
    assert (
        resource_client._collection_url(parent_id="a/b")
        == f"{ENDPOINT}/parents/a%2Fb/widgets"
    )


@pytest.mark.parametrize("parent_id", ["", None])
def test_empty_path_parameter_is_rejected(
    resource_client, mock_service_client, parent_id
):
    with pytest.raises(ValidationError, match="'parent_id' is required"):
        resource_client._list(parent_id=parent_id)

    mock_service_client.service_url.assert_not_called()


def test_empty_resource_id_is_rejected(resource_client, mock_service_client):
    with pytest.raises(ValidationError, match="non-empty resource ID"):
        resource_client._delete("", parent_id="p1")

    mock_service_client.delete.assert_not_called()
