"""Main CLI entry point for the Insightly client."""

import argparse
import json
import logging
import sys

from insightly_client.core import (
    ConfigError,
    InsightlyError,
    HttpStatusError,
    list_resources,
    load_settings,
    save_settings,
)
from insightly_client.core.config_store import get_base_dir
from insightly_client.generator import InsightlyClient, generate_client
from insightly_client.demo import run_smoke_test

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def print_json(data) -> None:
    print(json.dumps(data, indent=2))


def parse_params(pairs: list[str] | None) -> dict[str, str]:
    """Parse repeated key=value arguments into a dict."""
    params = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ConfigError(f"Invalid parameter '{pair}'. Expected key=value.")
        key, value = pair.split("=", 1)
        params[key.strip()] = value.strip()
    return params


def make_client(args) -> InsightlyClient:
    return generate_client(args.api_key)


def report_error(action: str, e: Exception) -> None:
    print(f"Error {action}: {e}", file=sys.stderr)
    if isinstance(e, HttpStatusError):
        print(f"HTTP Status: {e.status_code}", file=sys.stderr)


def cmd_configure(args):
    """Handle the configure command."""
    try:
        path = save_settings(
            base_url=args.base_url,
            api_version=args.api_version,
            timeout_seconds=args.timeout,
        )
        print(f"Settings saved to: {path}")
    except ConfigError as e:
        report_error("saving settings", e)
        sys.exit(1)


def cmd_show_config(args):
    """Handle the show-config command."""
    try:
        settings = load_settings()
    except ConfigError as e:
        report_error("loading settings", e)
        sys.exit(1)

    print(f"Config directory: {get_base_dir()}")
    print(f"  Base URL:    {settings['base_url']}")
    print(f"  API version: {settings['api_version']}")
    print(f"  Timeout:     {settings['timeout_seconds']}s")


def cmd_resources(args):
    """Handle the resources command."""
    # Template-only entries (e.g. note_comments) have no endpoint of their own
    listed = []
    for resource in list_resources():
        operations = [
            op for op, enabled in (
                ("list", resource.listable),
                ("get", resource.gettable),
                ("add", resource.writable),
                ("delete", resource.deletable),
            ) if enabled
        ]
        if operations or resource.sub_resources:
            listed.append((resource, operations))

    print(f"Resources ({len(listed)}):")
    print()
    for resource, operations in listed:
        print(f"  {resource.name:28s} /{resource.path:24s} {', '.join(operations)}")
        if resource.sub_resources:
            print(f"    related: {', '.join(sorted(resource.sub_resources))}")


def cmd_list(args):
    """Handle the list command."""
    try:
        params = parse_params(args.param)
        with make_client(args) as client:
            records = client.list_records(
                args.resource,
                top=args.top,
                skip=args.skip,
                orderby=args.orderby,
                filters=args.filter or [],
                **params,
            )
        print_json(records)
    except InsightlyError as e:
        report_error(f"listing {args.resource}", e)
        sys.exit(1)


def cmd_get(args):
    """Handle the get command."""
    try:
        with make_client(args) as client:
            print_json(client.get_record(args.resource, args.id))
    except InsightlyError as e:
        report_error(f"getting {args.resource} {args.id}", e)
        sys.exit(1)


def cmd_related(args):
    """Handle the related command."""
    try:
        with make_client(args) as client:
            print_json(client.list_related(args.resource, args.id, args.sub))
    except InsightlyError as e:
        report_error(f"listing {args.sub} of {args.resource} {args.id}", e)
        sys.exit(1)


def cmd_sample(args):
    """Handle the sample command."""
    try:
        with make_client(args) as client:
            print_json(client.sample(args.resource))
    except InsightlyError as e:
        report_error(f"fetching a sample of {args.resource}", e)
        sys.exit(1)


def cmd_download(args):
    """Handle the download command."""
    try:
        with make_client(args) as client:
            if args.output:
                written = client.get_file(args.id, args.output)
                print(f"✓ Saved {written} bytes to {args.output}")
            else:
                sys.stdout.buffer.write(client.get_file(args.id))
    except InsightlyError as e:
        report_error(f"downloading file {args.id}", e)
        sys.exit(1)


def cmd_smoke_test(args):
    """Handle the smoke-test command."""
    try:
        with make_client(args) as client:
            result = run_smoke_test(client, top=args.top)
    except ConfigError as e:
        report_error("running smoke test", e)
        sys.exit(1)

    if not result.ok:
        print(f"{result.failed} tests failed!", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="insightly",
        description="Insightly CRM API client",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--api-key", help="API key (or set INSIGHTLY_API_KEY env var)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Configure command
    configure_parser = subparsers.add_parser("configure", help="Save connection settings")
    configure_parser.add_argument("--base-url", default="https://api.insight.ly", help="API origin")
    configure_parser.add_argument("--api-version", default="v2.2", help="API version path segment")
    configure_parser.add_argument("--timeout", type=float, default=10.0, help="Request timeout in seconds")
    configure_parser.set_defaults(func=cmd_configure)

    # Show-config command
    show_parser = subparsers.add_parser("show-config", help="Show saved connection settings")
    show_parser.set_defaults(func=cmd_show_config)

    # Resources command
    resources_parser = subparsers.add_parser("resources", help="List known API resources")
    resources_parser.set_defaults(func=cmd_resources)

    # List command
    list_parser = subparsers.add_parser("list", help="List records of a resource")
    list_parser.add_argument("resource", help="Resource name (e.g., 'contacts')")
    list_parser.add_argument("--top", type=int, help="Maximum number of records")
    list_parser.add_argument("--skip", type=int, help="Number of records to skip")
    list_parser.add_argument("--orderby", help="Ordering, e.g. 'FIRST_NAME desc'")
    list_parser.add_argument(
        "--filter",
        action="append",
        help="Filter expression, e.g. \"FIRST_NAME='Brian'\" (repeatable)",
    )
    list_parser.add_argument(
        "--param",
        action="append",
        help="Resource search parameter as key=value (repeatable)",
    )
    list_parser.set_defaults(func=cmd_list)

    # Get command
    get_parser = subparsers.add_parser("get", help="Get a single record")
    get_parser.add_argument("resource", help="Resource name (e.g., 'contacts')")
    get_parser.add_argument("id", help="Record ID")
    get_parser.set_defaults(func=cmd_get)

    # Related command
    related_parser = subparsers.add_parser("related", help="List a sub-resource of a record")
    related_parser.add_argument("resource", help="Resource name (e.g., 'contacts')")
    related_parser.add_argument("id", help="Record ID")
    related_parser.add_argument("sub", help="Sub-resource (e.g., 'emails')")
    related_parser.set_defaults(func=cmd_related)

    # Sample command
    sample_parser = subparsers.add_parser("sample", help="Show a sample record of a resource")
    sample_parser.add_argument("resource", help="Resource name (e.g., 'events')")
    sample_parser.set_defaults(func=cmd_sample)

    # Download command
    download_parser = subparsers.add_parser("download", help="Download a file attachment")
    download_parser.add_argument("id", help="File attachment ID")
    download_parser.add_argument("--output", help="Write to this path instead of stdout")
    download_parser.set_defaults(func=cmd_download)

    # Smoke-test command
    smoke_parser = subparsers.add_parser("smoke-test", help="Run the live smoke test suite")
    smoke_parser.add_argument("--top", type=int, help="Page size for list calls")
    smoke_parser.set_defaults(func=cmd_smoke_test)

    return parser


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
