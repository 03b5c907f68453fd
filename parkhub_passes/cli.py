"""CLI entry point for the ParkHub pass SDK."""

import argparse
import asyncio
import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .api.client import ParkHubPassClient
from .config.settings import ClientConfig
from .models.passes import CreationRequest, SpotType
from .models.results import BatchSummary, ReferenceDefaults
from .reliability.errors import AppError

# Column headers accepted in CSV input, mapped to request fields
CSV_COLUMNS = {
    "eventid": "event_id",
    "event_id": "event_id",
    "accountid": "account_id",
    "account_id": "account_id",
    "barcode": "barcode",
    "customername": "customer_name",
    "customer_name": "customer_name",
    "spottype": "spot_type",
    "spot_type": "spot_type",
    "lotid": "lot_id",
    "lot_id": "lot_id",
}


def load_requests(path: str) -> List[CreationRequest]:
    """Read creation requests from a CSV file or a JSON list."""
    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8")

    if file_path.suffix.lower() == ".csv":
        rows: List[Dict[str, Any]] = []
        for row in csv.DictReader(text.splitlines()):
            rows.append({
                CSV_COLUMNS[key.strip().lower()]: value
                for key, value in row.items()
                if key and key.strip().lower() in CSV_COLUMNS
            })
    else:
        rows = json.loads(text)
        if not isinstance(rows, list):
            raise ValueError(f"{path}: expected a JSON list of requests")

    return [CreationRequest.model_validate(row) for row in rows]


def load_summary(path: str) -> BatchSummary:
    return BatchSummary.from_json_dict(json.loads(Path(path).read_text(encoding="utf-8")))


def print_summary(summary: BatchSummary) -> None:
    print(f"Event: {summary.event_id}")
    print(f"Succeeded: {summary.total_success}  Failed: {summary.total_failed}")
    print("-" * 50)
    for success in summary.successful:
        print(f"✓ {success.barcode} -> {success.pass_id}")
    for failure in summary.failed:
        field = getattr(failure.error, "field", None)
        where = f" [{field}]" if field else ""
        print(f"✗ {failure.barcode}: {failure.error.code.value}{where} {failure.error.message}")


def write_summary(summary: BatchSummary, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(json.dumps(summary.to_json_dict(), indent=2), encoding="utf-8")
        print(f"\nSummary written to {output}")


async def list_events(client: ParkHubPassClient) -> int:
    response = await client.get_events()
    if not response.success:
        print(f"Error: {response.error.message}")
        return 1
    for event in response.data:
        print(f"{event.id}  {event.name or ''}  {event.date or ''}  {event.venue or ''}")
    return 0


async def list_passes(client: ParkHubPassClient, event_id: str) -> int:
    response = await client.get_passes(event_id)
    if not response.success:
        print(f"Error: {response.error.message}")
        return 1
    for item in response.data:
        print(f"{item.id}  {item.barcode or ''}  {item.customer_name or ''}  {item.spot_type or ''}")
    return 0


async def create_passes(client: ParkHubPassClient, path: str, output: Optional[str]) -> int:
    requests = load_requests(path)
    summary = await client.create_batch(requests)
    print_summary(summary)
    write_summary(summary, output)
    return 1 if summary.total_failed else 0


async def retry_passes(client: ParkHubPassClient, args: argparse.Namespace) -> int:
    prior = load_summary(args.summary)
    selected = None
    if args.barcode:
        wanted = set(args.barcode)
        selected = [f for f in prior.failed if f.barcode in wanted]

    defaults = ReferenceDefaults(
        event_id=args.event_id,
        account_id=args.account_id,
        spot_type=args.spot_type,
        lot_id=args.lot_id,
    )
    originals = load_requests(args.requests) if args.requests else None

    retry = await client.retry_failed(
        prior,
        selected_failures=selected,
        reference_defaults=defaults,
        original_requests=originals,
    )
    print_summary(retry)
    write_summary(retry, args.output)
    return 1 if retry.total_failed else 0


async def run(args: argparse.Namespace) -> int:
    config = ClientConfig.from_env(api_key=args.api_key, chunk_size=args.chunk_size)
    async with ParkHubPassClient(config) as client:
        if args.command == 'events':
            return await list_events(client)
        if args.command == 'passes':
            return await list_passes(client, args.event_id)
        if args.command == 'create':
            return await create_passes(client, args.file, args.output)
        return await retry_passes(client, args)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = argparse.ArgumentParser(description="ParkHub pass batch CLI")
    parser.add_argument('--api-key', help='ParkHub API key (default: $PARKHUB_API_KEY)')
    parser.add_argument('--chunk-size', type=int, help='Concurrent creation calls per chunk')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('events', help='List upcoming events')

    passes_parser = subparsers.add_parser('passes', help='List passes for an event')
    passes_parser.add_argument('event_id', help='Event ID')

    create_parser = subparsers.add_parser('create', help='Create passes from a CSV or JSON file')
    create_parser.add_argument('file', help='CSV or JSON list of pass requests')
    create_parser.add_argument('--output', '-o', help='Write the batch summary as JSON')

    retry_parser = subparsers.add_parser('retry', help='Retry the failed items of a saved summary')
    retry_parser.add_argument('summary', help='Summary JSON written by "create --output"')
    retry_parser.add_argument('--requests', help='Original request file, matched by barcode')
    retry_parser.add_argument('--barcode', action='append', help='Only retry this barcode (repeatable)')
    retry_parser.add_argument('--event-id', help='Event ID for rebuilt requests')
    retry_parser.add_argument('--account-id', help='Account ID for rebuilt requests')
    retry_parser.add_argument('--spot-type', choices=[s.value for s in SpotType],
                              help='Spot type for rebuilt requests')
    retry_parser.add_argument('--lot-id', help='Lot ID for rebuilt requests')
    retry_parser.add_argument('--output', '-o', help='Write the retry summary as JSON')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return asyncio.run(run(args))
    except (AppError, ValueError, OSError) as e:
        print(f"Error: {str(e)}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
