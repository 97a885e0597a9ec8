# Pinot Controller MCP Server
# File: models.py
# Version: v2

"""Response shapes and request bodies for the Pinot controller REST API.

The shapes are declarations only. The resource client passes the controller's
response through untouched and never validates a body against them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, TypedDict


class TableType(str, Enum):
    """Table flavours accepted by ``GET /tables?type=...``."""

    OFFLINE = "OFFLINE"
    REALTIME = "REALTIME"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class QueryRequest(TypedDict, total=False):
    """JSON body posted to the broker-proxy query endpoints (``/sql``)."""

    sql: str
    trace: bool
    queryOptions: str


# ---------------------------------------------------------------------------
# Tenants
# ---------------------------------------------------------------------------


class Tenants(TypedDict):
    SERVER_TENANTS: List[str]
    BROKER_TENANTS: List[str]


class TenantDetail(TypedDict, total=False):
    tenantName: str
    ServerInstances: List[str]
    BrokerInstances: List[str]


class TableNameList(TypedDict):
    tables: List[str]


class ServerList(TypedDict, total=False):
    tenantName: str
    ServerInstances: List[str]


# Broker entries are returned as objects on recent controllers and as plain
# instance ids on older ones.
BrokerList = List[Any]


# ---------------------------------------------------------------------------
# Tables and segments
# ---------------------------------------------------------------------------


class IdealState(TypedDict, total=False):
    # segment -> instance -> state, per table type; a type is null when absent
    OFFLINE: Optional[Dict[str, Dict[str, str]]]
    REALTIME: Optional[Dict[str, Dict[str, str]]]


class SegmentMetadata(TypedDict, total=False):
    segmentName: str
    schemaName: str
    crc: str
    creationTimeMillis: int
    creationTimeReadable: str
    startTimeMillis: int
    endTimeMillis: int
    totalDocs: int
    columns: List[Dict[str, Any]]
    indexes: Dict[str, Any]


class TableSize(TypedDict, total=False):
    tableName: str
    reportedSizeInBytes: int
    estimatedSizeInBytes: int
    offlineSegments: Optional[Dict[str, Any]]
    realtimeSegments: Optional[Dict[str, Any]]


class QueryTables(TypedDict):
    tables: List[str]


class TableSchema(TypedDict, total=False):
    schemaName: str
    dimensionFieldSpecs: List[Dict[str, Any]]
    metricFieldSpecs: List[Dict[str, Any]]
    dateTimeFieldSpecs: List[Dict[str, Any]]
    primaryKeyColumns: List[str]


# ---------------------------------------------------------------------------
# Instances and cluster
# ---------------------------------------------------------------------------


class Instances(TypedDict):
    instances: List[str]


class Instance(TypedDict, total=False):
    instanceName: str
    hostName: str
    enabled: bool
    port: str
    tags: List[str]
    pools: Optional[Dict[str, Any]]
    grpcPort: int
    adminPort: int
    queryServicePort: int
    queryMailboxPort: int
    systemResourceInfo: Optional[Dict[str, Any]]


ClusterConfig = Dict[str, str]


class ClusterName(TypedDict):
    clusterName: str


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------


class DataSchema(TypedDict):
    columnNames: List[str]
    columnDataTypes: List[str]


class ResultTable(TypedDict):
    dataSchema: DataSchema
    rows: List[List[Any]]


class SQLResult(TypedDict, total=False):
    resultTable: ResultTable
    exceptions: List[Dict[str, Any]]
    numServersQueried: int
    numServersResponded: int
    numSegmentsQueried: int
    numSegmentsProcessed: int
    numSegmentsMatched: int
    numDocsScanned: int
    totalDocs: int
    timeUsedMs: int
    traceInfo: Dict[str, Any]


# ---------------------------------------------------------------------------
# ZooKeeper browser
# ---------------------------------------------------------------------------


ZKGetList = List[str]

# /zk/get returns the znode payload (usually a ZNRecord), /zk/stat and
# /zk/lsl return stat objects keyed by field or child name.
ZKConfig = Dict[str, Any]


class ZKOperationResponse(TypedDict):
    code: int
    status: str
