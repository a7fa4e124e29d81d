# Main script to find the slowest route of a city's live congestion dataset.

import argparse
import os
import sys
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from congestion_log import DEFAULT_LOG_FILE, append_log
from dataset_adapters import DatasetAdapter, LocalFileAdapter, OpenDataJsonAdapter, locate_records
from field_extractor import extract_all
from report_assembler import assemble
from route_selector import select_slowest
from route_structures import ErrorKind, PipelineError, ReportOutcome

DEFAULT_DATASET_URL = "https://datos.vigo.org/data/trafico/treal_congestion.json"
DEFAULT_TIMEZONE = "Europe/Madrid"
MISSING_URL_MESSAGE = "La URL de la API no está configurada."
REPORT_TITLE = "Vigo — Ruta más lenta"


@dataclass
class Settings:
    dataset_url: str
    log_file: str = DEFAULT_LOG_FILE
    timezone: ZoneInfo = ZoneInfo(DEFAULT_TIMEZONE)
    verbose: bool = False


def load_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"FATAL ERROR: The timezone '{name}' set in the REPORT_TZ environment variable is invalid. "
            "Please use a valid IANA timezone name (e.g., 'Europe/Madrid', 'Europe/London').")


def load_settings(verbose: bool = False) -> Settings:
    """Reads the settings from the environment (and a .env file, if present)."""
    load_dotenv()
    return Settings(
        dataset_url=os.getenv("DATASET_URL", DEFAULT_DATASET_URL).strip(),
        log_file=os.getenv("CONGESTION_LOG", DEFAULT_LOG_FILE),
        timezone=load_timezone(os.getenv("REPORT_TZ", DEFAULT_TIMEZONE)),
        verbose=verbose,
    )


# --- Core Logic ---

def run_report(settings: Settings, adapter: DatasetAdapter | None = None) -> ReportOutcome:
    """
    Runs one full cycle: fetch, extract, select, assemble and log.
    Stops at the first stage that returns a PipelineError; nothing is logged then.
    """
    if adapter is None:
        if not settings.dataset_url:
            return ReportOutcome(error=PipelineError(ErrorKind.MISSING_CONFIGURATION, MISSING_URL_MESSAGE))
        adapter = OpenDataJsonAdapter(settings.dataset_url, verbose=settings.verbose)

    document = adapter.fetch_document()
    if isinstance(document, PipelineError):
        return ReportOutcome(error=document)

    records = locate_records(document)
    if isinstance(records, PipelineError):
        return ReportOutcome(error=records)

    routes = extract_all(records)
    if settings.verbose:
        print(f"   > Normalized {len(routes)} records.")

    selection = select_slowest(routes)
    if isinstance(selection, PipelineError):
        return ReportOutcome(error=selection)

    report = assemble(selection)
    logged = append_log(report.log_line, settings.log_file, settings.timezone)
    if settings.verbose:
        print(f"   > Logged to {settings.log_file}: {logged}")

    return ReportOutcome(report=report, logged=logged)


def display_results(outcome: ReportOutcome, log_file: str = DEFAULT_LOG_FILE):
    """Prints the report, or the error that stopped the run."""
    print(f"\n{REPORT_TITLE}\n")

    if not outcome.ok:
        print(f"Error: {outcome.error.message}")
        return

    display = outcome.report.display
    print("Ruta más lenta:")
    print(f"  ID:      {display.id}")
    print(f"  Nombre:  {display.name}")
    print(f"  Métrica: {display.clause}")
    print(f"\nRegistrado en {log_file}: {outcome.logged}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Slowest Route Reporter: find the most congested route of an open-data traffic feed.")
    parser.add_argument('--url', help="Dataset URL (overrides DATASET_URL).")
    parser.add_argument('--file', help="Read the dataset from a saved JSON file instead of the URL.")
    parser.add_argument('--log-file', help="Log file to append to (overrides CONGESTION_LOG).")
    parser.add_argument('--tz', help="IANA timezone for log timestamps (overrides REPORT_TZ).")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose mode to see the requests being made.")
    parser.add_argument('--serve', action='store_true',
                        help="Serve the report as a web page instead of printing it once.")
    parser.add_argument('--host', default="127.0.0.1")
    parser.add_argument('--port', type=int, default=5000)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(verbose=args.verbose)
        if args.tz:
            settings.timezone = load_timezone(args.tz)
    except ValueError as e:
        print(e)
        return 1

    if args.url is not None:
        settings.dataset_url = args.url.strip()
    if args.log_file:
        settings.log_file = args.log_file
    print(f"Using timezone: {settings.timezone.key}")

    adapter = None
    if args.file:
        adapter = LocalFileAdapter(args.file, verbose=args.verbose)

    if args.serve:
        from report_server import create_app
        create_app(settings, adapter=adapter).run(host=args.host, port=args.port)
        return 0

    outcome = run_report(settings, adapter)
    display_results(outcome, settings.log_file)
    return 0 if outcome.ok else 1


if __name__ == '__main__':
    sys.exit(main())
