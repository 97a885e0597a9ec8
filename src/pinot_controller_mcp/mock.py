# Pinot Controller MCP Server
# File: mock.py
# Version: v2

"""In-process stand-in for a Pinot controller.

Activated when PINOT_MOCK_MODE is truthy. Answers every controller path the
resource client knows with a small, static demo cluster so the tools work
without a running Pinot deployment.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

MOCK_CLUSTER_NAME = "PinotMockCluster"
MOCK_CONTROLLER_URL = "http://pinot-mock.local:9000"

_TABLE = "airlineStats"
_OFFLINE_TABLE = f"{_TABLE}_OFFLINE"
_SEGMENTS = [f"{_TABLE}_OFFLINE_16071_16071_0", f"{_TABLE}_OFFLINE_16072_16072_0"]

_BROKER = "Broker_pinot-broker-0_8099"
_SERVER = "Server_pinot-server-0_8098"
_CONTROLLER = "Controller_pinot-controller-0_9000"

_IDEAL_STATE: Dict[str, Any] = {
    "OFFLINE": {segment: {_SERVER: "ONLINE"} for segment in _SEGMENTS},
    "REALTIME": None,
}

_SCHEMA: Dict[str, Any] = {
    "schemaName": _TABLE,
    "dimensionFieldSpecs": [
        {"name": "Carrier", "dataType": "STRING"},
        {"name": "Origin", "dataType": "STRING"},
        {"name": "Dest", "dataType": "STRING"},
    ],
    "metricFieldSpecs": [
        {"name": "ArrDelay", "dataType": "INT"},
        {"name": "Distance", "dataType": "INT"},
    ],
    "dateTimeFieldSpecs": [
        {
            "name": "DaysSinceEpoch",
            "dataType": "INT",
            "format": "1:DAYS:EPOCH",
            "granularity": "1:DAYS",
        }
    ],
}

_ZK_TREE: Dict[str, Dict[str, Any]] = {
    "/": {"children": [MOCK_CLUSTER_NAME], "data": ""},
    f"/{MOCK_CLUSTER_NAME}": {
        "children": ["CONFIGS", "IDEALSTATES", "INSTANCES", "PROPERTYSTORE"],
        "data": "",
    },
    f"/{MOCK_CLUSTER_NAME}/IDEALSTATES": {"children": [_OFFLINE_TABLE], "data": ""},
    f"/{MOCK_CLUSTER_NAME}/IDEALSTATES/{_OFFLINE_TABLE}": {
        "children": [],
        "data": {
            "id": _OFFLINE_TABLE,
            "simpleFields": {"NUM_PARTITIONS": str(len(_SEGMENTS)), "REPLICAS": "1"},
            "mapFields": _IDEAL_STATE["OFFLINE"],
            "listFields": {},
        },
    },
}


def _zk_stat(path: str) -> Dict[str, Any]:
    node = _ZK_TREE[path]
    return {
        "version": 0,
        "aversion": 0,
        "cversion": len(node["children"]),
        "ctime": 1700000000000,
        "mtime": 1700000000000,
        "ephemeralOwner": 0,
        "numChildren": len(node["children"]),
        "dataLength": len(json.dumps(node["data"])),
    }


def _zk_path(request: httpx.Request) -> Optional[str]:
    path = request.url.params.get("path")
    if path is None:
        return None
    if path != "/":
        path = path.rstrip("/")
    return path if path in _ZK_TREE else None


def _json(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def _not_found(message: str) -> httpx.Response:
    return _json({"code": 404, "error": message}, status_code=404)


def _zk_handler(kind: str) -> Callable[[httpx.Request, re.Match], httpx.Response]:
    def handler(request: httpx.Request, _: re.Match) -> httpx.Response:
        path = _zk_path(request)
        if path is None:
            return _not_found(f"ZNode not found: {request.url.params.get('path')}")
        node = _ZK_TREE[path]
        if kind == "ls":
            return _json(list(node["children"]))
        if kind == "get":
            data = node["data"]
            if isinstance(data, str):
                return httpx.Response(200, text=data)
            return _json(data)
        if kind == "stat":
            return _json(_zk_stat(path))
        # lsl: stat per child
        prefix = "" if path == "/" else path
        stats = {}
        for child in node["children"]:
            child_path = f"{prefix}/{child}"
            if child_path in _ZK_TREE:
                stats[child] = _zk_stat(child_path)
        return _json(stats)

    return handler


def _zk_write(request: httpx.Request, _: re.Match) -> httpx.Response:
    if request.url.params.get("path") is None:
        return _json({"code": 400, "error": "ZNode path is required"}, status_code=400)
    verb = "updated" if request.method == "PUT" else "deleted"
    return _json({"code": 200, "status": f"Successfully {verb} path: {request.url.params['path']}"})


def _query(request: httpx.Request, _: re.Match) -> httpx.Response:
    try:
        body = json.loads(request.content or b"{}")
    except ValueError:
        return _json({"code": 400, "error": "Request body is not valid JSON"}, status_code=400)
    sql = str(body.get("sql") or "")
    return _json(
        {
            "resultTable": {
                "dataSchema": {
                    "columnNames": ["Carrier", "cnt"],
                    "columnDataTypes": ["STRING", "LONG"],
                },
                "rows": [["AA", 1250], ["DL", 980], ["UA", 860]],
            },
            "exceptions": [],
            "numServersQueried": 1,
            "numServersResponded": 1,
            "numSegmentsQueried": len(_SEGMENTS),
            "numSegmentsProcessed": len(_SEGMENTS),
            "numSegmentsMatched": len(_SEGMENTS),
            "numDocsScanned": 3090,
            "totalDocs": 3090,
            "timeUsedMs": 7,
            "traceInfo": {"sql": sql} if body.get("trace") else {},
        }
    )


def _tenant(request: httpx.Request, match: re.Match) -> httpx.Response:
    name = match.group("name")
    if name != "DefaultTenant":
        return _not_found(f"Tenant {name} not found")
    if request.url.params.get("type") == "server":
        return _json({"tenantName": name, "ServerInstances": [_SERVER]})
    return _json({"tenantName": name, "ServerInstances": [_SERVER], "BrokerInstances": [_BROKER]})


def _table(payload: Any) -> Callable[[httpx.Request, re.Match], httpx.Response]:
    def handler(request: httpx.Request, match: re.Match) -> httpx.Response:
        name = match.group("name")
        if name not in (_TABLE, _OFFLINE_TABLE):
            return _not_found(f"Table {name} not found")
        return _json(payload(name) if callable(payload) else payload)

    return handler


def _segment_metadata(request: httpx.Request, match: re.Match) -> httpx.Response:
    segment = match.group("segment")
    if segment not in _SEGMENTS:
        return _not_found(f"Segment {segment} not found")
    return _json(
        {
            "segmentName": segment,
            "schemaName": _TABLE,
            "crc": "3146470429",
            "creationTimeMillis": 1700000000000,
            "creationTimeReadable": "2023-11-14T22:13:20:000 UTC",
            "totalDocs": 1545,
            "columns": [],
            "indexes": {},
        }
    )


def _instance(request: httpx.Request, match: re.Match) -> httpx.Response:
    name = match.group("name")
    if name not in (_BROKER, _SERVER, _CONTROLLER):
        return _not_found(f"Instance {name} not found")
    host, port = name.split("_", 1)[1].rsplit("_", 1)
    tags = {
        _BROKER: ["DefaultTenant_BROKER"],
        _SERVER: ["DefaultTenant_OFFLINE", "DefaultTenant_REALTIME"],
        _CONTROLLER: ["controller"],
    }[name]
    return _json(
        {
            "instanceName": name,
            "hostName": host,
            "enabled": True,
            "port": port,
            "tags": tags,
            "pools": None,
            "grpcPort": -1,
        }
    )


def _table_size(name: str) -> Dict[str, Any]:
    per_segment = 1310720
    return {
        "tableName": name,
        "reportedSizeInBytes": per_segment * len(_SEGMENTS),
        "estimatedSizeInBytes": per_segment * len(_SEGMENTS),
        "offlineSegments": {
            "reportedSizeInBytes": per_segment * len(_SEGMENTS),
            "segments": {s: {"reportedSizeInBytes": per_segment} for s in _SEGMENTS},
        },
        "realtimeSegments": None,
    }


def _tenant_tables(request: httpx.Request, match: re.Match) -> httpx.Response:
    tables = [_TABLE] if match.group("name") == "DefaultTenant" else []
    return _json({"tables": tables})


def _tenant_brokers(request: httpx.Request, match: re.Match) -> httpx.Response:
    if match.group("name") != "DefaultTenant":
        return _json([])
    return _json([{"instanceName": _BROKER, "host": "pinot-broker-0", "port": 8099}])


def _query_tables(request: httpx.Request, _: re.Match) -> httpx.Response:
    table_type = request.url.params.get("type")
    if table_type is not None and table_type.upper() == "REALTIME":
        return _json({"tables": []})
    return _json({"tables": [_TABLE]})


_Route = Tuple[str, "re.Pattern[str]", Callable[[httpx.Request, re.Match], httpx.Response]]

_ROUTES: List[_Route] = [
    (
        "GET",
        re.compile(r"/tenants"),
        lambda r, m: _json({"SERVER_TENANTS": ["DefaultTenant"], "BROKER_TENANTS": ["DefaultTenant"]}),
    ),
    ("GET", re.compile(r"/tenants/(?P<name>[^/]+)"), _tenant),
    ("GET", re.compile(r"/tenants/(?P<name>[^/]+)/tables"), _tenant_tables),
    ("GET", re.compile(r"/brokers/tenants/(?P<name>[^/]+)"), _tenant_brokers),
    ("GET", re.compile(r"/tables"), _query_tables),
    ("GET", re.compile(r"/tables/(?P<name>[^/]+)"), _table(_IDEAL_STATE)),
    ("GET", re.compile(r"/tables/(?P<name>[^/]+)/size"), _table(_table_size)),
    ("GET", re.compile(r"/tables/(?P<name>[^/]+)/idealstate"), _table(_IDEAL_STATE)),
    ("GET", re.compile(r"/tables/(?P<name>[^/]+)/externalview"), _table(_IDEAL_STATE)),
    ("GET", re.compile(r"/tables/(?P<name>[^/]+)/schema"), _table(_SCHEMA)),
    ("GET", re.compile(r"/segments/(?P<name>[^/]+)/(?P<segment>[^/]+)/metadata"), _segment_metadata),
    ("GET", re.compile(r"/instances"), lambda r, m: _json({"instances": [_CONTROLLER, _BROKER, _SERVER]})),
    ("GET", re.compile(r"/instances/(?P<name>[^/]+)"), _instance),
    (
        "GET",
        re.compile(r"/cluster/configs"),
        lambda r, m: _json(
            {
                "allowParticipantAutoJoin": "true",
                "pinot.broker.enable.query.limit.override": "false",
            }
        ),
    ),
    ("GET", re.compile(r"/cluster/info"), lambda r, m: _json({"clusterName": MOCK_CLUSTER_NAME})),
    ("POST", re.compile(r"/(?P<endpoint>sql|query/sql)"), _query),
    ("GET", re.compile(r"/zk/ls"), _zk_handler("ls")),
    ("GET", re.compile(r"/zk/get"), _zk_handler("get")),
    ("GET", re.compile(r"/zk/stat"), _zk_handler("stat")),
    ("GET", re.compile(r"/zk/lsl"), _zk_handler("lsl")),
    ("PUT", re.compile(r"/zk/put"), _zk_write),
    ("DELETE", re.compile(r"/zk/delete"), _zk_write),
]


def handle(request: httpx.Request) -> httpx.Response:
    """Route a request to the canned controller payloads."""
    path = request.url.path
    for method, pattern, handler in _ROUTES:
        if request.method != method:
            continue
        match = pattern.fullmatch(path)
        if match is not None:
            return handler(request, match)
    return _not_found(f"No mock route for {request.method} {path}")


def mock_transport() -> httpx.MockTransport:
    return httpx.MockTransport(handle)
