# Pinot Controller MCP Server
# File: client.py
# Version: v5
"""Cluster resource client for the Pinot controller REST API.

Each method maps one administrative operation to one request:

- tenants: get_tenants(), get_tenant(), get_tenant_table(),
  get_broker_list_of_tenant(), get_server_list_of_tenant()
- tables: get_query_tables(), get_tenant_table_details(), get_table_size(),
  get_table_schema(), get_ideal_state(), get_external_view(),
  get_segment_metadata()
- cluster: get_instances(), get_instance(), get_cluster_config(),
  get_cluster_info()
- query: get_query_result()
- ZooKeeper: zookeeper_get_list(), zookeeper_get_data(),
  zookeeper_get_stat(), zookeeper_get_list_with_stat(),
  zookeeper_put_data(), zookeeper_delete_node()

The transport's ``httpx.Response`` is returned unmodified. Nothing is parsed,
validated, retried or caught here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

import httpx

from .descriptors import RequestSpec, get_descriptor
from .models import QueryRequest, TableType

if TYPE_CHECKING:
    from .transport import ControllerTransport


class ClusterResourceClient:
    """Typed binding of controller operations onto an injected transport."""

    def __init__(self, transport: "ControllerTransport") -> None:
        self.transport = transport

    def describe(self, operation: str, body: Optional[Any] = None, **params: Any) -> RequestSpec:
        """Return the request ``operation`` would send, without sending it."""
        return get_descriptor(operation).build(body=body, **params)

    async def _call(
        self, operation: str, body: Optional[Any] = None, **params: Any
    ) -> httpx.Response:
        return await self.transport.send(self.describe(operation, body=body, **params))

    # ------------------------------------------------------------------
    # Tenants
    # ------------------------------------------------------------------

    async def get_tenants(self) -> httpx.Response:
        return await self._call("get_tenants")

    async def get_tenant(self, name: str) -> httpx.Response:
        return await self._call("get_tenant", name=name)

    async def get_tenant_table(self, name: str) -> httpx.Response:
        """Tables served by a tenant."""
        return await self._call("get_tenant_table", name=name)

    async def get_broker_list_of_tenant(self, name: str) -> httpx.Response:
        return await self._call("get_broker_list_of_tenant", name=name)

    async def get_server_list_of_tenant(self, name: str) -> httpx.Response:
        """Same path as get_tenant(), narrowed with ``?type=server``."""
        return await self._call("get_server_list_of_tenant", name=name)

    # ------------------------------------------------------------------
    # Tables and segments
    # ------------------------------------------------------------------

    async def get_tenant_table_details(self, table_name: str) -> httpx.Response:
        return await self._call("get_tenant_table_details", table_name=table_name)

    async def get_segment_metadata(self, table_name: str, segment_name: str) -> httpx.Response:
        return await self._call(
            "get_segment_metadata", table_name=table_name, segment_name=segment_name
        )

    async def get_table_size(self, name: str) -> httpx.Response:
        return await self._call("get_table_size", name=name)

    async def get_ideal_state(self, name: str) -> httpx.Response:
        return await self._call("get_ideal_state", name=name)

    async def get_external_view(self, name: str) -> httpx.Response:
        return await self._call("get_external_view", name=name)

    async def get_query_tables(
        self, table_type: Optional[Union[TableType, str]] = None
    ) -> httpx.Response:
        """List tables, optionally narrowed to one table type.

        ``None`` sends plain ``/tables``. Any other value, including an empty
        string, is sent as ``?type=<value>``.
        """
        return await self._call("get_query_tables", table_type=table_type)

    async def get_table_schema(self, name: str) -> httpx.Response:
        return await self._call("get_table_schema", name=name)

    # ------------------------------------------------------------------
    # Instances and cluster
    # ------------------------------------------------------------------

    async def get_instances(self) -> httpx.Response:
        return await self._call("get_instances")

    async def get_instance(self, name: str) -> httpx.Response:
        return await self._call("get_instance", name=name)

    async def get_cluster_config(self) -> httpx.Response:
        return await self._call("get_cluster_config")

    async def get_cluster_info(self) -> httpx.Response:
        return await self._call("get_cluster_info")

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    async def get_query_result(
        self, params: Union[QueryRequest, Mapping[str, Any]], url: str
    ) -> httpx.Response:
        """POST ``params`` as JSON to ``/<url>`` (``"sql"`` for the SQL endpoint).

        Leading slashes on ``url`` are dropped; ``//sql`` would otherwise be
        read as a scheme-relative URL with host ``sql``.
        """
        return await self._call("get_query_result", body=dict(params), url=url.lstrip("/"))

    # ------------------------------------------------------------------
    # ZooKeeper browser
    # ------------------------------------------------------------------

    async def zookeeper_get_list(self, path: str) -> httpx.Response:
        return await self._call("zookeeper_get_list", path=path)

    async def zookeeper_get_data(self, path: str) -> httpx.Response:
        return await self._call("zookeeper_get_data", path=path)

    async def zookeeper_get_stat(self, path: str) -> httpx.Response:
        return await self._call("zookeeper_get_stat", path=path)

    async def zookeeper_get_list_with_stat(self, path: str) -> httpx.Response:
        return await self._call("zookeeper_get_list_with_stat", path=path)

    async def zookeeper_put_data(self, query: str) -> httpx.Response:
        """PUT with an empty body.

        ``query`` is the complete, already-encoded query string, e.g.
        ``path=%2Fa&data=...&expectedVersion=-1&accessOption=1``.
        """
        return await self._call("zookeeper_put_data", query=query)

    async def zookeeper_delete_node(self, path: str) -> httpx.Response:
        return await self._call("zookeeper_delete_node", path=path)
