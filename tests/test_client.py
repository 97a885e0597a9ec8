# Pinot Controller MCP Server
# File: tests/test_client.py
# Version: v2

"""End-to-end request shapes through the client and an httpx mock transport."""

from __future__ import annotations

import json

import httpx
import pytest

from pinot_controller_mcp.models import TableType

EXCHANGE_CONTENT_TYPE = "application/json; charset=UTF-8"
EXCHANGE_ACCEPT = "text/plain, */*; q=0.01"


@pytest.mark.asyncio
async def test_get_tenant(client, controller) -> None:
    await client.get_tenant("tenant1")

    request = controller.last
    assert request.method == "GET"
    assert request.url.raw_path == b"/tenants/tenant1"
    assert request.content == b""


@pytest.mark.asyncio
async def test_get_query_tables_with_and_without_type(client, controller) -> None:
    await client.get_query_tables()
    assert controller.last.url.raw_path == b"/tables"
    assert controller.last.url.query == b""

    await client.get_query_tables("OFFLINE")
    assert controller.last.url.raw_path == b"/tables?type=OFFLINE"

    await client.get_query_tables(TableType.REALTIME)
    assert controller.last.url.raw_path == b"/tables?type=REALTIME"


@pytest.mark.asyncio
async def test_get_server_list_of_tenant(client, controller) -> None:
    await client.get_server_list_of_tenant("t1")

    assert controller.last.method == "GET"
    assert controller.last.url.raw_path == b"/tenants/t1?type=server"


@pytest.mark.asyncio
async def test_get_query_result_posts_json(client, controller) -> None:
    await client.get_query_result({"sql": "select 1"}, "sql")

    request = controller.last
    assert request.method == "POST"
    assert request.url.raw_path == b"/sql"
    assert request.content == b'{"sql":"select 1"}'
    assert request.headers["Content-Type"] == EXCHANGE_CONTENT_TYPE
    assert request.headers["Accept"] == EXCHANGE_ACCEPT


@pytest.mark.asyncio
async def test_get_query_result_with_leading_slash_endpoint(client, controller) -> None:
    await client.get_query_result({"sql": "select 1"}, "/sql")
    assert controller.last.url.raw_path == b"/sql"
    assert str(controller.last.url) == "http://controller.test:9000/sql"

    await client.get_query_result({"sql": "select 1"}, "//query/sql")
    assert controller.last.url.raw_path == b"/query/sql"


@pytest.mark.asyncio
async def test_zookeeper_put_data(client, controller) -> None:
    await client.zookeeper_put_data("path=/a&data=b")

    request = controller.last
    assert request.method == "PUT"
    assert request.url.raw_path == b"/zk/put?path=/a&data=b"
    assert request.content == b""
    assert request.headers["Content-Type"] == EXCHANGE_CONTENT_TYPE
    assert request.headers["Accept"] == EXCHANGE_ACCEPT


@pytest.mark.asyncio
async def test_zookeeper_delete_node(client, controller) -> None:
    await client.zookeeper_delete_node("/a/b")

    assert controller.last.method == "DELETE"
    assert controller.last.url.raw_path == b"/zk/delete?path=/a/b"


@pytest.mark.asyncio
async def test_plain_operations_use_default_negotiation(client, controller) -> None:
    await client.get_cluster_info()

    request = controller.last
    assert request.headers["Accept"] == "application/json, text/plain, */*"
    assert "Content-Type" not in request.headers


@pytest.mark.asyncio
async def test_remaining_operations_hit_expected_paths(client, controller) -> None:
    await client.get_tenants()
    await client.get_tenant_table("t1")
    await client.get_tenant_table_details("events")
    await client.get_segment_metadata("events", "events_0")
    await client.get_table_size("events")
    await client.get_ideal_state("events")
    await client.get_external_view("events")
    await client.get_instances()
    await client.get_instance("Broker_h_8099")
    await client.get_cluster_config()
    await client.get_table_schema("events")
    await client.zookeeper_get_list("/")
    await client.zookeeper_get_data("/c")
    await client.zookeeper_get_stat("/c")
    await client.zookeeper_get_list_with_stat("/c")
    await client.get_broker_list_of_tenant("t1")

    sent = [(r.method, r.url.raw_path.decode()) for r in controller.requests]
    assert sent == [
        ("GET", "/tenants"),
        ("GET", "/tenants/t1/tables"),
        ("GET", "/tables/events"),
        ("GET", "/segments/events/events_0/metadata"),
        ("GET", "/tables/events/size"),
        ("GET", "/tables/events/idealstate"),
        ("GET", "/tables/events/externalview"),
        ("GET", "/instances"),
        ("GET", "/instances/Broker_h_8099"),
        ("GET", "/cluster/configs"),
        ("GET", "/tables/events/schema"),
        ("GET", "/zk/ls?path=/"),
        ("GET", "/zk/get?path=/c"),
        ("GET", "/zk/stat?path=/c"),
        ("GET", "/zk/lsl?path=/c"),
        ("GET", "/brokers/tenants/t1"),
    ]
    assert all(r.content == b"" for r in controller.requests)


@pytest.mark.asyncio
async def test_response_is_passed_through_untouched(client_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            text='{"clusterName": "prod"}',
            headers={"X-Pinot-Controller": "c-0"},
        )

    client, _ = client_factory(handler)
    response = await client.get_cluster_info()

    assert isinstance(response, httpx.Response)
    assert response.status_code == 200
    assert response.headers["X-Pinot-Controller"] == "c-0"
    assert response.text == '{"clusterName": "prod"}'
    assert json.loads(response.text) == {"clusterName": "prod"}


@pytest.mark.asyncio
async def test_http_errors_propagate(client_factory) -> None:
    client, controller = client_factory(
        lambda request: httpx.Response(404, json={"code": 404, "error": "Tenant missing not found"})
    )

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await client.get_tenant("missing")

    assert exc_info.value.response.status_code == 404
    assert exc_info.value.response.json()["error"] == "Tenant missing not found"
    # No retries.
    assert len(controller.requests) == 1


@pytest.mark.asyncio
async def test_network_errors_propagate(client_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, controller = client_factory(handler)

    with pytest.raises(httpx.ConnectError):
        await client.get_instances()
    assert len(controller.requests) == 1


def test_describe_does_not_send(client, controller) -> None:
    spec = client.describe("get_query_result", body={"sql": "select 1"}, url="query/sql")

    assert spec.method == "POST"
    assert spec.url == "/query/sql"
    assert spec.body == b'{"sql":"select 1"}'
    assert controller.requests == []
