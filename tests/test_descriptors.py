# Pinot Controller MCP Server
# File: tests/test_descriptors.py
# Version: v1

"""Request construction for every controller operation, without any I/O."""

from __future__ import annotations

import pytest

from pinot_controller_mcp import models
from pinot_controller_mcp.descriptors import (
    JSON_EXCHANGE_HEADERS,
    OPERATIONS,
    get_descriptor,
)

EXCHANGE = {
    "Content-Type": "application/json; charset=UTF-8",
    "Accept": "text/plain, */*; q=0.01",
}


@pytest.mark.parametrize(
    "name, params, method, url",
    [
        ("get_tenants", {}, "GET", "/tenants"),
        ("get_tenant", {"name": "tenant1"}, "GET", "/tenants/tenant1"),
        ("get_tenant_table", {"name": "t1"}, "GET", "/tenants/t1/tables"),
        ("get_tenant_table_details", {"table_name": "events"}, "GET", "/tables/events"),
        (
            "get_segment_metadata",
            {"table_name": "events", "segment_name": "events_0"},
            "GET",
            "/segments/events/events_0/metadata",
        ),
        ("get_table_size", {"name": "events"}, "GET", "/tables/events/size"),
        ("get_ideal_state", {"name": "events"}, "GET", "/tables/events/idealstate"),
        ("get_external_view", {"name": "events"}, "GET", "/tables/events/externalview"),
        ("get_instances", {}, "GET", "/instances"),
        ("get_instance", {"name": "Server_h_8098"}, "GET", "/instances/Server_h_8098"),
        ("get_cluster_config", {}, "GET", "/cluster/configs"),
        ("get_query_tables", {"table_type": None}, "GET", "/tables"),
        ("get_query_tables", {"table_type": "OFFLINE"}, "GET", "/tables?type=OFFLINE"),
        ("get_table_schema", {"name": "events"}, "GET", "/tables/events/schema"),
        ("get_query_result", {"url": "sql"}, "POST", "/sql"),
        ("get_cluster_info", {}, "GET", "/cluster/info"),
        ("zookeeper_get_list", {"path": "/a"}, "GET", "/zk/ls?path=/a"),
        ("zookeeper_get_data", {"path": "/a"}, "GET", "/zk/get?path=/a"),
        ("zookeeper_get_stat", {"path": "/a"}, "GET", "/zk/stat?path=/a"),
        ("zookeeper_get_list_with_stat", {"path": "/a"}, "GET", "/zk/lsl?path=/a"),
        ("zookeeper_put_data", {"query": "path=/a&data=b"}, "PUT", "/zk/put?path=/a&data=b"),
        ("zookeeper_delete_node", {"path": "/a/b"}, "DELETE", "/zk/delete?path=/a/b"),
        ("get_broker_list_of_tenant", {"name": "t1"}, "GET", "/brokers/tenants/t1"),
        ("get_server_list_of_tenant", {"name": "t1"}, "GET", "/tenants/t1?type=server"),
    ],
)
def test_operation_builds_expected_request(name, params, method, url) -> None:
    request = get_descriptor(name).build(**params)
    assert request.method == method
    assert request.url == url


def test_every_operation_is_covered() -> None:
    assert len(OPERATIONS) == 23


@pytest.mark.parametrize("name", ["get_query_result", "zookeeper_put_data"])
def test_exchange_headers_only_on_json_operations(name) -> None:
    assert get_descriptor(name).exchange_headers is True
    assert dict(JSON_EXCHANGE_HEADERS) == EXCHANGE

    others = [d for d in OPERATIONS.values() if d.name not in {"get_query_result", "zookeeper_put_data"}]
    assert not any(d.exchange_headers for d in others)


def test_get_requests_carry_no_body_or_headers() -> None:
    request = get_descriptor("get_tenant").build(name="tenant1")
    assert request.body is None
    assert dict(request.headers) == {}
    assert request.path == "/tenants/tenant1"
    assert request.query is None


def test_query_body_is_compact_utf8_json() -> None:
    request = get_descriptor("get_query_result").build(body={"sql": "select 1"}, url="sql")
    assert request.body == b'{"sql":"select 1"}'
    assert dict(request.headers) == EXCHANGE


def test_zookeeper_put_has_null_body() -> None:
    request = get_descriptor("zookeeper_put_data").build(query="path=/a&data=b")
    assert request.body is None
    assert request.query == "path=/a&data=b"
    assert dict(request.headers) == EXCHANGE


def test_table_type_empty_string_is_a_present_value() -> None:
    request = get_descriptor("get_query_tables").build(table_type="")
    assert request.url == "/tables?type="


def test_table_type_accepts_enum() -> None:
    request = get_descriptor("get_query_tables").build(table_type=models.TableType.REALTIME)
    assert request.url == "/tables?type=REALTIME"


def test_identifiers_are_not_escaped() -> None:
    request = get_descriptor("zookeeper_get_data").build(path="/x y/z&w")
    assert request.url == "/zk/get?path=/x y/z&w"

    request = get_descriptor("get_tenant").build(name="a{b}")
    assert request.url == "/tenants/a{b}"


def test_parameters_follow_template_order() -> None:
    assert get_descriptor("get_segment_metadata").parameters == ("table_name", "segment_name")
    assert get_descriptor("get_tenants").parameters == ()
    assert get_descriptor("zookeeper_put_data").parameters == ("query",)


def test_missing_parameter_raises_type_error() -> None:
    with pytest.raises(TypeError, match="missing required parameter"):
        get_descriptor("get_segment_metadata").build(table_name="events")


def test_unknown_parameter_raises_type_error() -> None:
    with pytest.raises(TypeError, match="unexpected parameter"):
        get_descriptor("get_tenants").build(name="x")


def test_none_path_parameter_raises_type_error() -> None:
    with pytest.raises(TypeError, match="must not be None"):
        get_descriptor("get_tenant").build(name=None)


def test_none_for_required_query_parameter_raises_type_error() -> None:
    with pytest.raises(TypeError, match="must not be None"):
        get_descriptor("zookeeper_get_list").build(path=None)


def test_unknown_operation_lists_known_names() -> None:
    with pytest.raises(KeyError, match="get_tenants"):
        get_descriptor("drop_everything")


def test_repeated_builds_are_identical() -> None:
    descriptor = get_descriptor("zookeeper_delete_node")
    assert descriptor.build(path="/a/b") == descriptor.build(path="/a/b")


def test_operations_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        OPERATIONS["get_tenants"] = None  # type: ignore[index]


def test_declared_shapes() -> None:
    assert get_descriptor("get_tenant_table_details").shape is models.IdealState
    assert get_descriptor("get_segment_metadata").shape is models.SegmentMetadata
    assert get_descriptor("get_query_result").shape is models.SQLResult
    assert get_descriptor("zookeeper_delete_node").shape is models.ZKOperationResponse
