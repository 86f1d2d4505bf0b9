"""CLI entrypoint for the dust storm risk pipeline."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dustwatch.common.config_loader import ConfigBundle, load_all_configs
from dustwatch.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, GLOBAL_GROUP
from dustwatch.common.errors import ConfigError, PipelineError
from dustwatch.common.http import HttpClient
from dustwatch.common.ids import generate_run_id
from dustwatch.common.logging import build_logger, log_event
from dustwatch.common.models import Snapshot
from dustwatch.common.registry import LocationRegistry, build_registry
from dustwatch.pipeline.aggregate import run_cycle
from dustwatch.pipeline.coordinator import Poller
from dustwatch.pipeline.export import active_alerts, build_output_payload, select_group, write_locations_csv, write_snapshot
from dustwatch.pipeline.reports import write_cycle_summary

COMMANDS = ("locations", "fetch", "poll")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--group", default=GLOBAL_GROUP)
    parser.add_argument("--tiering", default=None, choices=["global", "per-group"])
    parser.add_argument("--interval", type=float, default=None)
    parser.add_argument("--max-cycles", type=int, default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def _check_group(registry: LocationRegistry, group: str) -> None:
    if group != GLOBAL_GROUP and group not in registry.groups:
        raise ConfigError(f"Unknown group: {group}")


def _list_locations(registry: LocationRegistry, group: str) -> int:
    for location in registry:
        if group == GLOBAL_GROUP or location.group == group:
            print(json.dumps(location.to_dict(), ensure_ascii=False))
    return EXIT_SUCCESS


def _snapshot_writer(data_dir: Path, registry: LocationRegistry, group: str):
    def write(snapshot: Snapshot) -> None:
        write_snapshot(data_dir, snapshot)
        write_locations_csv(data_dir, snapshot.result)
        write_cycle_summary(data_dir, snapshot, total_locations=len(registry))
        records = select_group(build_output_payload(snapshot.result)["locations"], group)
        print(
            json.dumps(
                {
                    "cycle_id": snapshot.cycle_id,
                    "group": group,
                    "scored": len(records),
                    "failed": len(snapshot.result.failed),
                    "alerts": [record["id"] for record in active_alerts(records)],
                },
                ensure_ascii=False,
            )
        )

    return write


def _build_poller(
    args: argparse.Namespace,
    bundle: ConfigBundle,
    registry: LocationRegistry,
    client: HttpClient,
    logger,
) -> Poller:
    sources = bundle.sources
    tiering_mode = args.tiering or sources["tiering"]["mode"]
    interval = args.interval if args.interval is not None else float(sources["polling"]["interval_seconds"])

    def cycle(cycle_id: str):
        return run_cycle(
            registry,
            client,
            sources,
            tiering_mode=tiering_mode,
            max_workers=int(sources["http"]["max_workers"]),
            horizon=int(sources["polling"]["horizon"]),
            logger=logger,
            cycle_id=cycle_id,
        )

    return Poller(
        cycle,
        interval_seconds=interval,
        max_cycles=1 if args.command == "fetch" else args.max_cycles,
        on_publish=_snapshot_writer(Path(args.data_dir), registry, args.group),
        logger=logger,
    )


def run_command(args: argparse.Namespace, http_client: HttpClient | None = None) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    bundle = load_all_configs(config_dir, overlay_config_dir=overlay_config_dir)
    registry = build_registry(bundle.locations)
    _check_group(registry, args.group)

    if args.command == "locations":
        return _list_locations(registry, args.group)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    owns_client = http_client is None
    client = http_client or HttpClient.from_config(bundle.sources["http"])
    poller = _build_poller(args, bundle, registry, client, logger)
    try:
        if args.command == "fetch":
            snapshot = poller.run_once()
        else:
            try:
                snapshot = poller.run()
            except KeyboardInterrupt:
                poller.stop()
                snapshot = poller.store.latest()
    finally:
        if owns_client:
            client.close()

    if snapshot is None:
        log_event(logger, "no snapshot produced", stage=args.command, event="RUN_FAIL", status="error")
        return EXIT_HARD_FAIL
    if snapshot.result.failed or poller.publish_failures:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError as exc:
        print(f"{exc.error_code}: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
