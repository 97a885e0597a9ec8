# Pinot Controller MCP Server
# File: tools/tasks.py
# Version: v7
#
# NOTE: This module is the single place where controller responses are turned
# into tool results. The resource client hands back raw responses; everything
# here is presentation for the MCP caller.

from __future__ import annotations

import asyncio
import dataclasses
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode, urlparse

import httpx

from ..auth import ControllerAuth
from ..client import ClusterResourceClient
from ..config import ControllerConfig
from ..mock import MOCK_CONTROLLER_URL, mock_transport
from ..models import TableType
from ..transport import ControllerTransport


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


_INSTANCE_ROLES = ("Controller", "Broker", "Server", "Minion")


def _make_error(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Small, LLM-friendly error shape used by diagnostics."""
    err: Dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return err


def _make_client(cfg: Optional[ControllerConfig] = None) -> ClusterResourceClient:
    """Create a ClusterResourceClient from environment variables.

    If PINOT_MOCK_MODE is truthy, requests are answered in-process by the
    mock controller instead of going over the network.

    Note: Callers should prefer invoking this with *no arguments* to keep
    unit tests monkeypatch-friendly (tests often replace _make_client with
    a no-arg lambda).
    """
    cfg = cfg or ControllerConfig.from_env()

    if cfg.mock_mode:
        if not cfg.controller_url:
            cfg = dataclasses.replace(cfg, controller_url=MOCK_CONTROLLER_URL)
        return ClusterResourceClient(
            ControllerTransport(config=cfg, http_transport=mock_transport())
        )

    return ClusterResourceClient(ControllerTransport(config=cfg))


def _body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _instance_role(instance_name: str) -> str:
    prefix = instance_name.split("_", 1)[0]
    return prefix if prefix in _INSTANCE_ROLES else "<unknown>"


def _segment_counts(state: Any) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    if isinstance(state, dict):
        for table_type, segments in state.items():
            counts[table_type] = len(segments) if isinstance(segments, dict) else 0
    return counts


def _schema_columns(schema: Any) -> List[Dict[str, Any]]:
    if not isinstance(schema, dict):
        return []

    columns: List[Dict[str, Any]] = []
    for key, role in (
        ("dimensionFieldSpecs", "dimension"),
        ("metricFieldSpecs", "metric"),
        ("dateTimeFieldSpecs", "datetime"),
    ):
        for spec in schema.get(key) or []:
            if not isinstance(spec, dict) or not spec.get("name"):
                continue
            columns.append(
                {
                    "name": spec["name"],
                    "data_type": spec.get("dataType"),
                    "role": role,
                    "single_value": spec.get("singleValueField", True),
                }
            )
    return columns


# ---------------------------------------------------------------------------
# Tenants
# ---------------------------------------------------------------------------


async def list_tenants() -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_tenants())
    body = body if isinstance(body, dict) else {}
    return {
        "server_tenants": list(body.get("SERVER_TENANTS") or []),
        "broker_tenants": list(body.get("BROKER_TENANTS") or []),
    }


async def get_tenant(name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_tenant(name))
    body = body if isinstance(body, dict) else {}
    return {
        "tenant": name,
        "server_instances": list(body.get("ServerInstances") or []),
        "broker_instances": list(body.get("BrokerInstances") or []),
    }


async def list_tenant_tables(name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_tenant_table(name))
    tables = body.get("tables") if isinstance(body, dict) else None
    return {"tenant": name, "tables": list(tables or [])}


async def list_tenant_brokers(name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_broker_list_of_tenant(name))
    brokers = body if isinstance(body, list) else []
    return {"tenant": name, "brokers": brokers, "count": len(brokers)}


async def list_tenant_servers(name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_server_list_of_tenant(name))
    servers = body.get("ServerInstances") if isinstance(body, dict) else None
    servers = list(servers or [])
    return {"tenant": name, "servers": servers, "count": len(servers)}


# ---------------------------------------------------------------------------
# Tables and segments
# ---------------------------------------------------------------------------


async def list_tables(table_type: Optional[str] = None) -> Dict[str, Any]:
    if table_type is not None:
        # Validate early so a typo does not silently list nothing.
        table_type = TableType(table_type.upper()).value

    client = _make_client()
    body = _body(await client.get_query_tables(table_type))
    tables = body.get("tables") if isinstance(body, dict) else None
    tables = list(tables or [])
    return {"table_type": table_type, "tables": tables, "count": len(tables)}


async def get_table(table_name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_tenant_table_details(table_name))
    return {
        "table": table_name,
        "segment_counts": _segment_counts(body),
        "ideal_state": body,
    }


async def get_table_size(table_name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_table_size(table_name))
    body = body if isinstance(body, dict) else {}
    return {
        "table": table_name,
        "reported_size_bytes": body.get("reportedSizeInBytes"),
        "estimated_size_bytes": body.get("estimatedSizeInBytes"),
        "raw": body,
    }


async def get_table_schema(table_name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_table_schema(table_name))
    return {
        "table": table_name,
        "schema_name": body.get("schemaName") if isinstance(body, dict) else None,
        "columns": _schema_columns(body),
        "raw": body,
    }


async def get_ideal_state(table_name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_ideal_state(table_name))
    return {"table": table_name, "segment_counts": _segment_counts(body), "state": body}


async def get_external_view(table_name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_external_view(table_name))
    return {"table": table_name, "segment_counts": _segment_counts(body), "state": body}


async def get_segment_metadata(table_name: str, segment_name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_segment_metadata(table_name, segment_name))
    return {"table": table_name, "segment": segment_name, "metadata": body}


# ---------------------------------------------------------------------------
# Instances and cluster
# ---------------------------------------------------------------------------


async def list_instances() -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_instances())
    instances = body.get("instances") if isinstance(body, dict) else None
    instances = list(instances or [])

    by_role: Dict[str, int] = {}
    for name in instances:
        role = _instance_role(str(name))
        by_role[role] = by_role.get(role, 0) + 1

    return {"instances": instances, "count": len(instances), "by_role": by_role}


async def get_instance(name: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_instance(name))
    return {"instance": name, "role": _instance_role(name), "detail": body}


async def get_cluster_config() -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_cluster_config())
    return {"config": body}


async def get_cluster_info() -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.get_cluster_info())
    name = body.get("clusterName") if isinstance(body, dict) else None
    return {"cluster_name": name}


async def cluster_summary() -> Dict[str, Any]:
    """Cluster name, tenants, instances per role and tables in one call.

    The four lookups run concurrently. The first failure cancels the others
    and is re-raised.
    """
    pending = [
        asyncio.ensure_future(coro)
        for coro in (get_cluster_info(), list_tenants(), list_instances(), list_tables())
    ]
    try:
        info, tenants, instances, tables = await asyncio.gather(*pending)
    except BaseException:
        for task in pending:
            task.cancel()
        # Drain the cancelled siblings so none is left with an unretrieved error.
        await asyncio.gather(*pending, return_exceptions=True)
        raise

    return {
        "cluster_name": info["cluster_name"],
        "tenants": tenants,
        "instance_count": instances["count"],
        "instances_by_role": instances["by_role"],
        "table_count": tables["count"],
        "tables": tables["tables"],
    }


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------


_QUERY_STATS = (
    "numServersQueried",
    "numServersResponded",
    "numSegmentsQueried",
    "numSegmentsMatched",
    "numDocsScanned",
    "totalDocs",
    "timeUsedMs",
)


async def run_query(
    sql: str,
    endpoint: str = "sql",
    trace: bool = False,
    query_options: Optional[str] = None,
) -> Dict[str, Any]:
    """Run ``sql`` and flatten the broker response into columns and rows.

    A body that is not a JSON object (e.g. a plain-text error from a proxy)
    yields an empty table with the text under ``raw``.
    """
    params: Dict[str, Any] = {"sql": sql, "trace": bool(trace)}
    if query_options:
        params["queryOptions"] = query_options

    client = _make_client()
    body = _body(await client.get_query_result(params, endpoint))

    out: Dict[str, Any] = {
        "columns": [],
        "column_types": [],
        "rows": [],
        "row_count": 0,
        "exceptions": [],
        "stats": {},
        "raw": None,
    }
    if not isinstance(body, dict):
        out["raw"] = body
        return out

    result_table = body.get("resultTable") or {}
    schema = result_table.get("dataSchema") or {}
    rows = result_table.get("rows") or []

    out.update(
        columns=list(schema.get("columnNames") or []),
        column_types=list(schema.get("columnDataTypes") or []),
        rows=rows,
        row_count=len(rows),
        exceptions=list(body.get("exceptions") or []),
        stats={key: body[key] for key in _QUERY_STATS if key in body},
    )
    return out


# ---------------------------------------------------------------------------
# ZooKeeper browser
# ---------------------------------------------------------------------------


async def zk_list(path: str = "/") -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.zookeeper_get_list(path))
    children = body if isinstance(body, list) else []
    return {"path": path, "children": children}


async def zk_get(path: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.zookeeper_get_data(path))
    return {"path": path, "data": body}


async def zk_stat(path: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.zookeeper_get_stat(path))
    return {"path": path, "stat": body}


async def zk_list_with_stat(path: str = "/") -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.zookeeper_get_list_with_stat(path))
    return {"path": path, "children": body}


async def zk_put(
    path: str,
    data: str,
    expected_version: int = -1,
    access_option: int = 1,
) -> Dict[str, Any]:
    # The client sends the query verbatim, so the encoding happens here.
    query = urlencode(
        {
            "path": path,
            "data": data,
            "expectedVersion": int(expected_version),
            "accessOption": int(access_option),
        },
        quote_via=quote,
    )

    client = _make_client()
    body = _body(await client.zookeeper_put_data(query))
    return {"path": path, "result": body}


async def zk_delete(path: str) -> Dict[str, Any]:
    client = _make_client()
    body = _body(await client.zookeeper_delete_node(path))
    return {"path": path, "result": body}


# ---------------------------------------------------------------------------
# Diagnostics & connection info
# ---------------------------------------------------------------------------


def _collect_connection_info() -> Dict[str, Any]:
    """Redacted snapshot of controller configuration from env."""
    cfg = ControllerConfig.from_env()

    host = None
    if cfg.controller_url:
        parsed = urlparse(cfg.controller_url)
        host = parsed.hostname or cfg.controller_url

    return {
        "controller_url": cfg.controller_url,
        "host": host,
        "mock_mode": bool(cfg.mock_mode),
        "verify_tls": bool(cfg.verify_tls),
        "timeout_seconds": cfg.timeout_seconds,
        "auth": {
            "header_configured": ControllerAuth(config=cfg).configured,
            "token_configured": bool(cfg.auth_token),
            "username_configured": bool(cfg.username),
            "password_configured": cfg.password is not None,
        },
    }


async def get_connection_info() -> Dict[str, Any]:
    return _collect_connection_info()


async def diagnostics() -> Dict[str, Any]:
    started = time.time()
    config_info = _collect_connection_info()

    checks: List[Dict[str, Any]] = []
    overall_ok = True

    # Client init
    t0 = time.time()
    try:
        client = _make_client()
        checks.append(
            {"name": "client_init", "ok": True, "error": None, "elapsed_ms": int((time.time() - t0) * 1000)}
        )
    except Exception as exc:  # noqa: BLE001
        checks.append(
            {
                "name": "client_init",
                "ok": False,
                "error": _make_error("CONFIG_ERROR", str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
        return {
            "ok": False,
            "mock_mode": config_info["mock_mode"],
            "config": config_info,
            "checks": checks,
            "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
        }

    # Cluster info
    t0 = time.time()
    try:
        body = _body(await client.get_cluster_info())
        checks.append(
            {
                "name": "cluster_info",
                "ok": True,
                "cluster_name": body.get("clusterName") if isinstance(body, dict) else None,
                "error": None,
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
    except Exception as exc:  # noqa: BLE001
        overall_ok = False
        checks.append(
            {
                "name": "cluster_info",
                "ok": False,
                "error": _make_error(_error_code(exc), str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )

    # Tenants
    t0 = time.time()
    try:
        body = _body(await client.get_tenants())
        body = body if isinstance(body, dict) else {}
        checks.append(
            {
                "name": "list_tenants",
                "ok": True,
                "count": len(set(body.get("SERVER_TENANTS") or []) | set(body.get("BROKER_TENANTS") or [])),
                "error": None,
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
    except Exception as exc:  # noqa: BLE001
        overall_ok = False
        checks.append(
            {
                "name": "list_tenants",
                "ok": False,
                "error": _make_error(_error_code(exc), str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )

    return {
        "ok": overall_ok,
        "mock_mode": config_info["mock_mode"],
        "config": config_info,
        "checks": checks,
        "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
    }


def _error_code(exc: Exception) -> str:
    if isinstance(exc, RuntimeError):
        return "CONFIG_ERROR"
    return "BACKEND_ERROR"


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


def register_tools(server: Any) -> None:
    """Register MCP tools on an MCP Server-like instance."""
    if server is None or not hasattr(server, "tool"):
        raise ValueError(
            "register_tools(server) expects an MCP Server-like object that exposes a .tool() decorator."
        )

    @server.tool(name="pinot_list_tenants", description="List server and broker tenants of the Pinot cluster.")
    async def mcp_list_tenants() -> Dict[str, Any]:
        return await list_tenants()

    @server.tool(name="pinot_get_tenant", description="Show the broker and server instances of a tenant.")
    async def mcp_get_tenant(name: str) -> Dict[str, Any]:
        return await get_tenant(name=name)

    @server.tool(name="pinot_list_tenant_tables", description="List the tables served by a tenant.")
    async def mcp_list_tenant_tables(name: str) -> Dict[str, Any]:
        return await list_tenant_tables(name=name)

    @server.tool(name="pinot_list_tenant_brokers", description="List the brokers of a tenant.")
    async def mcp_list_tenant_brokers(name: str) -> Dict[str, Any]:
        return await list_tenant_brokers(name=name)

    @server.tool(name="pinot_list_tenant_servers", description="List the servers of a tenant.")
    async def mcp_list_tenant_servers(name: str) -> Dict[str, Any]:
        return await list_tenant_servers(name=name)

    @server.tool(
        name="pinot_list_tables",
        description="List tables, optionally restricted to OFFLINE or REALTIME.",
    )
    async def mcp_list_tables(table_type: Optional[str] = None) -> Dict[str, Any]:
        return await list_tables(table_type=table_type)

    @server.tool(name="pinot_get_table", description="Show a table's segment assignment (ideal state).")
    async def mcp_get_table(table_name: str) -> Dict[str, Any]:
        return await get_table(table_name=table_name)

    @server.tool(name="pinot_get_table_size", description="Report the on-disk size of a table.")
    async def mcp_get_table_size(table_name: str) -> Dict[str, Any]:
        return await get_table_size(table_name=table_name)

    @server.tool(name="pinot_get_table_schema", description="Show a table's schema as a flat column list.")
    async def mcp_get_table_schema(table_name: str) -> Dict[str, Any]:
        return await get_table_schema(table_name=table_name)

    @server.tool(name="pinot_get_ideal_state", description="Show the desired segment-to-server assignment.")
    async def mcp_get_ideal_state(table_name: str) -> Dict[str, Any]:
        return await get_ideal_state(table_name=table_name)

    @server.tool(name="pinot_get_external_view", description="Show the observed segment-to-server assignment.")
    async def mcp_get_external_view(table_name: str) -> Dict[str, Any]:
        return await get_external_view(table_name=table_name)

    @server.tool(name="pinot_get_segment_metadata", description="Show metadata of a single segment.")
    async def mcp_get_segment_metadata(table_name: str, segment_name: str) -> Dict[str, Any]:
        return await get_segment_metadata(table_name=table_name, segment_name=segment_name)

    @server.tool(name="pinot_list_instances", description="List cluster instances with counts per role.")
    async def mcp_list_instances() -> Dict[str, Any]:
        return await list_instances()

    @server.tool(name="pinot_get_instance", description="Show host, port, tags and state of an instance.")
    async def mcp_get_instance(name: str) -> Dict[str, Any]:
        return await get_instance(name=name)

    @server.tool(name="pinot_get_cluster_config", description="Show cluster-level configuration.")
    async def mcp_get_cluster_config() -> Dict[str, Any]:
        return await get_cluster_config()

    @server.tool(name="pinot_get_cluster_info", description="Show the cluster name.")
    async def mcp_get_cluster_info() -> Dict[str, Any]:
        return await get_cluster_info()

    @server.tool(
        name="pinot_cluster_summary",
        description="Summarise the cluster: name, tenants, instances per role and tables.",
    )
    async def mcp_cluster_summary() -> Dict[str, Any]:
        return await cluster_summary()

    @server.tool(name="pinot_run_query", description="Run a SQL query through the controller's query endpoint.")
    async def mcp_run_query(
        sql: str,
        endpoint: str = "sql",
        trace: bool = False,
        query_options: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await run_query(sql=sql, endpoint=endpoint, trace=trace, query_options=query_options)

    @server.tool(name="pinot_zk_list", description="List the children of a ZooKeeper node.")
    async def mcp_zk_list(path: str = "/") -> Dict[str, Any]:
        return await zk_list(path=path)

    @server.tool(name="pinot_zk_get", description="Read the data of a ZooKeeper node.")
    async def mcp_zk_get(path: str) -> Dict[str, Any]:
        return await zk_get(path=path)

    @server.tool(name="pinot_zk_stat", description="Read the stat of a ZooKeeper node.")
    async def mcp_zk_stat(path: str) -> Dict[str, Any]:
        return await zk_stat(path=path)

    @server.tool(name="pinot_zk_list_with_stat", description="List the children of a ZooKeeper node with their stats.")
    async def mcp_zk_list_with_stat(path: str = "/") -> Dict[str, Any]:
        return await zk_list_with_stat(path=path)

    @server.tool(name="pinot_zk_put", description="Write data to a ZooKeeper node.")
    async def mcp_zk_put(
        path: str,
        data: str,
        expected_version: int = -1,
        access_option: int = 1,
    ) -> Dict[str, Any]:
        return await zk_put(path=path, data=data, expected_version=expected_version, access_option=access_option)

    @server.tool(name="pinot_zk_delete", description="Delete a ZooKeeper node.")
    async def mcp_zk_delete(path: str) -> Dict[str, Any]:
        return await zk_delete(path=path)

    @server.tool(
        name="pinot_get_connection_info",
        description="Return redacted controller connection settings (no secrets).",
    )
    async def mcp_get_connection_info() -> Dict[str, Any]:
        return await get_connection_info()

    @server.tool(
        name="pinot_diagnostics",
        description="Run high-level health checks against the MCP server and the Pinot controller.",
    )
    async def mcp_diagnostics() -> Dict[str, Any]:
        return await diagnostics()
