# demo_mcp_cluster_summary.py
# Version: v1

r"""
Quick demo for the cluster_summary() MCP task.

Usage (bash):

  export PINOT_CONTROLLER_URL=http://localhost:9000
  python demo_mcp_cluster_summary.py

Set PINOT_MOCK_MODE=1 instead to run against the in-process mock controller.
"""

import asyncio

from pinot_controller_mcp.tools.tasks import cluster_summary, run_query


SAMPLE_SQL = "select count(*) from airlineStats"


async def main() -> None:
    print("Calling MCP task: cluster_summary()")
    result = await cluster_summary()

    print("Cluster name :", result.get("cluster_name"))
    print("Instances    :", result.get("instance_count"))
    for role, count in (result.get("instances_by_role") or {}).items():
        print(f"  - {role}: {count}")
    print()

    tenants = result.get("tenants") or {}
    print("Server tenants:", ", ".join(tenants.get("server_tenants", [])) or "-")
    print("Broker tenants:", ", ".join(tenants.get("broker_tenants", [])) or "-")
    print()

    print(f"Tables ({result.get('table_count')}):")
    for name in result.get("tables", []):
        print(f"- {name}")

    if "airlineStats" in result.get("tables", []):
        print()
        print(f"Running: {SAMPLE_SQL}")
        answer = await run_query(SAMPLE_SQL)
        print("Columns:", answer["columns"])
        for row in answer["rows"]:
            print("  ", row)


if __name__ == "__main__":
    asyncio.run(main())
