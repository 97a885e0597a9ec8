# Pinot Controller MCP Server
# File: descriptors.py
# Version: v4

"""Request descriptors for every controller operation.

A descriptor pins down the HTTP method, the path template, an optional query
template and the declared response shape of one operation. Templates use
``{param}`` placeholders that are filled by raw string substitution: nothing is
percent-encoded here, so callers that pass reserved characters must encode
them first. The ZooKeeper write operation relies on this and takes a complete,
already-encoded query string.
"""

from __future__ import annotations

import json
import string
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from . import models

JSON_EXCHANGE_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Content-Type": "application/json; charset=UTF-8",
        "Accept": "text/plain, */*; q=0.01",
    }
)

_FORMATTER = string.Formatter()


def _placeholders(template: Optional[str]) -> Tuple[str, ...]:
    if not template:
        return ()
    return tuple(
        field_name
        for _, field_name, _, _ in _FORMATTER.parse(template)
        if field_name is not None
    )


def _substitute(template: str, params: Mapping[str, Any]) -> str:
    parts = []
    for literal, field_name, _, _ in _FORMATTER.parse(template):
        parts.append(literal)
        if field_name is not None:
            parts.append(str(params[field_name]))
    return "".join(parts)


@dataclass(frozen=True)
class RequestSpec:
    """A fully-resolved request, ready for the transport."""

    method: str
    url: str
    body: Optional[bytes] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.url.split("?", 1)[0]

    @property
    def query(self) -> Optional[str]:
        if "?" not in self.url:
            return None
        return self.url.split("?", 1)[1]


@dataclass(frozen=True)
class ResourceDescriptor:
    """Static description of one controller operation."""

    name: str
    method: str
    path: str
    query: Optional[str] = None

    # Drop the whole "?..." segment when a query parameter is None.
    query_optional: bool = False

    # Declared payload type; informational only.
    shape: Any = dict

    # Send the JSON content type and ask for a plain-text-preferred answer.
    exchange_headers: bool = False

    @property
    def parameters(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for name in _placeholders(self.path) + _placeholders(self.query):
            seen.setdefault(name, None)
        return tuple(seen)

    def build(self, body: Optional[Any] = None, **params: Any) -> RequestSpec:
        """Resolve this descriptor into a :class:`RequestSpec`.

        ``body`` is serialised as compact UTF-8 JSON unless it is already
        ``bytes``. A ``None`` body sends no payload.
        """
        expected = set(self.parameters)
        unknown = sorted(set(params) - expected)
        if unknown:
            raise TypeError(
                f"{self.name}() got unexpected parameter(s): {', '.join(unknown)}"
            )
        missing = [p for p in self.parameters if p not in params]
        if missing:
            raise TypeError(
                f"{self.name}() missing required parameter(s): {', '.join(missing)}"
            )

        for name in _placeholders(self.path):
            if params[name] is None:
                raise TypeError(f"{self.name}() parameter '{name}' must not be None")

        url = _substitute(self.path, params)

        if self.query is not None:
            query_params = _placeholders(self.query)
            absent = any(params[name] is None for name in query_params)
            if absent and not self.query_optional:
                raise TypeError(
                    f"{self.name}() query parameter(s) must not be None: "
                    f"{', '.join(query_params)}"
                )
            if not absent:
                url = f"{url}?{_substitute(self.query, params)}"

        payload: Optional[bytes]
        if body is None or isinstance(body, bytes):
            payload = body
        else:
            payload = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode(
                "utf-8"
            )

        headers = dict(JSON_EXCHANGE_HEADERS) if self.exchange_headers else {}
        return RequestSpec(method=self.method, url=url, body=payload, headers=headers)


def _op(name: str, method: str, path: str, shape: Any, **kwargs: Any) -> Tuple[str, ResourceDescriptor]:
    return name, ResourceDescriptor(name=name, method=method, path=path, shape=shape, **kwargs)


OPERATIONS: Mapping[str, ResourceDescriptor] = MappingProxyType(
    dict(
        [
            # Tenants
            _op("get_tenants", "GET", "/tenants", models.Tenants),
            _op("get_tenant", "GET", "/tenants/{name}", models.TenantDetail),
            _op("get_tenant_table", "GET", "/tenants/{name}/tables", models.TableNameList),
            _op("get_broker_list_of_tenant", "GET", "/brokers/tenants/{name}", models.BrokerList),
            _op(
                "get_server_list_of_tenant",
                "GET",
                "/tenants/{name}",
                models.ServerList,
                query="type=server",
            ),
            # Tables and segments
            _op("get_tenant_table_details", "GET", "/tables/{table_name}", models.IdealState),
            _op(
                "get_segment_metadata",
                "GET",
                "/segments/{table_name}/{segment_name}/metadata",
                models.SegmentMetadata,
            ),
            _op("get_table_size", "GET", "/tables/{name}/size", models.TableSize),
            _op("get_ideal_state", "GET", "/tables/{name}/idealstate", models.IdealState),
            _op("get_external_view", "GET", "/tables/{name}/externalview", models.IdealState),
            _op(
                "get_query_tables",
                "GET",
                "/tables",
                models.QueryTables,
                query="type={table_type}",
                query_optional=True,
            ),
            _op("get_table_schema", "GET", "/tables/{name}/schema", models.TableSchema),
            # Instances and cluster
            _op("get_instances", "GET", "/instances", models.Instances),
            _op("get_instance", "GET", "/instances/{name}", models.Instance),
            _op("get_cluster_config", "GET", "/cluster/configs", models.ClusterConfig),
            _op("get_cluster_info", "GET", "/cluster/info", models.ClusterName),
            # Query
            _op(
                "get_query_result",
                "POST",
                "/{url}",
                models.SQLResult,
                exchange_headers=True,
            ),
            # ZooKeeper browser
            _op("zookeeper_get_list", "GET", "/zk/ls", models.ZKGetList, query="path={path}"),
            _op("zookeeper_get_data", "GET", "/zk/get", models.ZKConfig, query="path={path}"),
            _op("zookeeper_get_stat", "GET", "/zk/stat", models.ZKConfig, query="path={path}"),
            _op(
                "zookeeper_get_list_with_stat",
                "GET",
                "/zk/lsl",
                models.ZKConfig,
                query="path={path}",
            ),
            _op(
                "zookeeper_put_data",
                "PUT",
                "/zk/put",
                models.ZKOperationResponse,
                query="{query}",
                exchange_headers=True,
            ),
            _op(
                "zookeeper_delete_node",
                "DELETE",
                "/zk/delete",
                models.ZKOperationResponse,
                query="path={path}",
            ),
        ]
    )
)


def get_descriptor(name: str) -> ResourceDescriptor:
    """Look up an operation by name."""
    try:
        return OPERATIONS[name]
    except KeyError:
        raise KeyError(
            f"Unknown controller operation '{name}'. "
            f"Known operations: {', '.join(sorted(OPERATIONS))}"
        ) from None
