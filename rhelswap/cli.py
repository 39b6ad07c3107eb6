"""rhelswap CLI: inspect cached instance licenses and swap them from the shell.

Usage examples::

    rhelswap --project my-project instances --zone us-central1-a
    rhelswap --project my-project update-license web-1 --zone us-central1-a \\
        --license-type BYOS --rhel-version rhel-9
    rhelswap --project my-project --store gcp -c '{"bucket": "state"}' stats
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, get_args

from rhelswap.base.supported_services import license_types, rhel_versions

OPERATIONS = [
    "instances",
    "instance",
    "refresh",
    "stats",
    "clear-cache",
    "zones",
    "licenses",
    "update-license",
]


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``rhelswap`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="rhelswap",
        description="RHEL license inventory and PAYG/BYOS swaps for Compute Engine",
    )
    parser.add_argument("--project", "-p", required=True, help="GCP project ID to inspect")
    parser.add_argument(
        "--store",
        choices=["local", "gcp"],
        default="local",
        help="Snapshot store backend (default: local files)",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config for the store backend (e.g. \'{"state_dir":"data/state"}\')',
    )
    parser.add_argument("--ttl", type=float, default=None, help="Cache TTL in seconds")
    parser.add_argument("operation", choices=OPERATIONS, help="Operation to perform")
    parser.add_argument("instance_name", nargs="?", help="Instance name, where needed")
    parser.add_argument("--zone", "-z", default=None, help="Compute zone")
    parser.add_argument("--refresh", action="store_true", help="Bypass a fresh cache")
    parser.add_argument(
        "--license-type", choices=get_args(license_types), help="Target billing model"
    )
    parser.add_argument(
        "--rhel-version", choices=get_args(rhel_versions), help="RHEL major version"
    )
    return parser


def _run(dashboard: Any, ns: argparse.Namespace) -> Any:
    """Dispatch one operation and return a JSON-serialisable result."""
    project = ns.project
    if ns.operation == "instances":
        result = dashboard.get_data(project, ns.zone, ns.refresh)
        return {
            "instances": [i.model_dump(mode="json") for i in result.data],
            "metadata": {
                "project_id": project,
                "zone": ns.zone or "all",
                "cached": result.cached,
                "stale": result.stale,
                "last_updated": result.last_updated.isoformat(),
                "count": result.count,
                "error": result.error,
                "persistence_error": result.persistence_error,
            },
        }
    if ns.operation == "instance":
        return dashboard.get_instance(project, ns.zone, ns.instance_name).model_dump(mode="json")
    if ns.operation == "refresh":
        return [i.model_dump(mode="json") for i in dashboard.sync_with_gcp(project, ns.zone)]
    if ns.operation == "stats":
        return {"project_id": project, "cache": dashboard.get_cache_stats(project).model_dump(mode="json")}
    if ns.operation == "clear-cache":
        dashboard.clear_cache(project)
        return None
    if ns.operation == "zones":
        return [z.model_dump(mode="json") for z in dashboard.list_zones(project)]
    if ns.operation == "licenses":
        return dashboard.license_catalog()
    return dashboard.update_license(
        project, ns.zone, ns.instance_name, ns.license_type, ns.rhel_version
    ).model_dump(mode="json")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, composes a dashboard via :func:`build_dashboard`, and
    invokes the requested operation.  Results are printed as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        store_config: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)

    if ns.operation in ("instance", "update-license") and not (ns.instance_name and ns.zone):
        parser.error(f"{ns.operation} requires an instance name and --zone")
    if ns.operation == "update-license" and not (ns.license_type and ns.rhel_version):
        parser.error("update-license requires --license-type and --rhel-version")

    # Lazy-import so argument errors exit before any backend is built
    from rhelswap.factory import build_dashboard

    cache_config = {"ttl_seconds": ns.ttl} if ns.ttl is not None else None
    try:
        dashboard = build_dashboard(
            store_provider=ns.store,
            store_config=store_config,
            cache_config=cache_config,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        result = _run(dashboard, ns)
    except Exception as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        print("OK")
    else:
        print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
