"""Typer command line for address reconciliation."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from loguru import logger

from .adapters import (
    AddressSchema,
    read_addresses,
    read_business_licenses,
    read_business_match_records,
    read_fire_inspections,
    read_match_records,
    write_rows,
)
from .business import BUSINESS_RECORD_COLUMNS, BusinessMatchRecords
from .components import ADDRESS_COLUMNS
from .config import get_settings
from .engine import AddressDeltas, EngineConfig, MatchRecords
from .errors import AddressReconcileError
from .filters import BusinessFilter, FireFilter, MatchFilter
from .fire import FIRE_RECORD_COLUMNS, FireInspectionMatchRecords
from .lexisnexis import LEXISNEXIS_COLUMNS, LexisNexis
from .logging import setup_logging
from .records import DELTA_COLUMNS, MATCH_RECORD_COLUMNS
from .reporting import NullReporter, TqdmReporter
from .scorer import STREET_SUGGESTION_COLUMNS, suggest_streets

app = typer.Typer(name="address-reconcile", help="Reconcile municipal and county address datasets")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


def _engine_config() -> EngineConfig:
    settings = get_settings()
    reporter = TqdmReporter() if settings.show_progress else NullReporter()
    return EngineConfig.from_settings(settings, reporter=reporter)


@contextmanager
def _command(name: str) -> Iterator[None]:
    """Turn setup failures into a logged message and exit code 1."""
    try:
        yield
    except (OSError, AddressReconcileError, ValueError) as error:
        logger.error("{} failed: {}", name, error)
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from None


@app.command()
def compare(
    source: Path = typer.Option(..., "--source", help="Addresses to check"),
    source_type: AddressSchema = typer.Option(AddressSchema.GRANTS_PASS, "--source-type", help="Source schema"),
    target: Path = typer.Option(..., "--target", help="Reference addresses"),
    target_type: AddressSchema = typer.Option(AddressSchema.JOSEPHINE_COUNTY, "--target-type", help="Target schema"),
    output: Path = typer.Option(..., "--output", help="Match records CSV to write"),
    filter_name: Optional[str] = typer.Option(None, "--filter", help=f"One of {', '.join(MatchFilter.choices())}"),
) -> None:
    """Match every source address against the target addresses."""
    with _command("compare"):
        predicate = MatchFilter.parse(filter_name) if filter_name else None
        subjects = read_addresses(source, source_type)
        candidates = read_addresses(target, target_type)
        records = MatchRecords.compare(subjects, candidates, _engine_config())
        if predicate is not None:
            records = records.filter(predicate)
        count = write_rows(output, records.as_rows(), columns=MATCH_RECORD_COLUMNS)
    typer.echo(f"Wrote {count} match records to {output}")


@app.command()
def drift(
    source: Path = typer.Option(..., "--source", help="Addresses to check"),
    source_type: AddressSchema = typer.Option(AddressSchema.GRANTS_PASS, "--source-type", help="Source schema"),
    target: Path = typer.Option(..., "--target", help="Reference addresses"),
    target_type: AddressSchema = typer.Option(AddressSchema.JOSEPHINE_COUNTY, "--target-type", help="Target schema"),
    output: Path = typer.Option(..., "--output", help="Drift CSV to write"),
    minimum: Optional[float] = typer.Option(None, "--minimum", help="Report distances above this value"),
) -> None:
    """Report addresses whose position differs between two sources."""
    with _command("drift"):
        threshold = get_settings().drift_minimum if minimum is None else minimum
        subjects = read_addresses(source, source_type)
        others = read_addresses(target, target_type)
        deltas = AddressDeltas.compute(subjects, others, threshold, _engine_config())
        count = write_rows(output, deltas.as_rows(), columns=DELTA_COLUMNS)
    typer.echo(f"Wrote {count} drifted addresses to {output}")


@app.command("filter")
def filter_records(
    source: Path = typer.Option(..., "--source", help="Match records CSV written by compare or business"),
    filter_name: str = typer.Option(..., "--filter", help="Filter to apply"),
    output: Path = typer.Option(..., "--output", help="Filtered CSV to write"),
    business: bool = typer.Option(False, "--business", help="Source holds business match records"),
) -> None:
    """Subset previously written match records."""
    with _command("filter"):
        if business:
            business_records = read_business_match_records(source).filter(BusinessFilter.parse(filter_name))
            count = write_rows(output, business_records.as_rows(), columns=BUSINESS_RECORD_COLUMNS)
        else:
            records = read_match_records(source).filter(MatchFilter.parse(filter_name))
            count = write_rows(output, records.as_rows(), columns=MATCH_RECORD_COLUMNS)
    typer.echo(f"Wrote {count} records to {output}")


@app.command()
def save(
    source: Path = typer.Option(..., "--source", help="Addresses to normalize"),
    source_type: AddressSchema = typer.Option(AddressSchema.GRANTS_PASS, "--source-type", help="Source schema"),
    output: Path = typer.Option(..., "--output", help="Canonical CSV to write"),
) -> None:
    """Write addresses in the canonical schema, readable with --source-type canonical."""
    with _command("save"):
        addresses = read_addresses(source, source_type)
        count = write_rows(output, (address.as_row() for address in addresses), columns=ADDRESS_COLUMNS)
    typer.echo(f"Saved {count} addresses to {output}")


@app.command("orphan-streets")
def orphan_streets(
    source: Path = typer.Option(..., "--source", help="Addresses to check"),
    source_type: AddressSchema = typer.Option(AddressSchema.JOSEPHINE_COUNTY, "--source-type", help="Source schema"),
    target: Path = typer.Option(..., "--target", help="Reference addresses"),
    target_type: AddressSchema = typer.Option(AddressSchema.GRANTS_PASS, "--target-type", help="Target schema"),
    output: Path = typer.Option(..., "--output", help="Street names CSV to write"),
) -> None:
    """List street names in the source that the target does not know."""
    with _command("orphan-streets"):
        addresses = read_addresses(source, source_type)
        reference = read_addresses(target, target_type)
        orphans = addresses.orphan_streets(reference)
        suggestions = suggest_streets(orphans, reference.street_names())
        count = write_rows(output, (s.as_row() for s in suggestions), columns=STREET_SUGGESTION_COLUMNS)
    typer.echo(f"Found {count} orphan streets")


@app.command()
def duplicates(
    source: Path = typer.Option(..., "--source", help="Addresses to check"),
    source_type: AddressSchema = typer.Option(AddressSchema.GRANTS_PASS, "--source-type", help="Source schema"),
    output: Path = typer.Option(..., "--output", help="Duplicate addresses CSV to write"),
) -> None:
    """Write every address whose label occurs more than once."""
    with _command("duplicates"):
        repeated = read_addresses(source, source_type).duplicates()
        count = write_rows(output, (address.as_row() for address in repeated), columns=ADDRESS_COLUMNS)
    typer.echo(f"Found {count} duplicate addresses")


@app.command("business")
def business_command(
    source: Path = typer.Option(..., "--source", help="Business license export"),
    target: List[Path] = typer.Option(..., "--target", help="Address sources, highest priority first"),
    target_type: List[AddressSchema] = typer.Option(
        ..., "--target-type", help="Schema for each --target, in the same order"
    ),
    output: Path = typer.Option(..., "--output", help="Business match records CSV to write"),
    filter_name: Optional[str] = typer.Option(None, "--filter", help=f"One of {', '.join(BusinessFilter.choices())}"),
) -> None:
    """Match business licenses against one or more address sources."""
    with _command("business"):
        if len(target) != len(target_type):
            raise ValueError("each --target needs a matching --target-type")
        predicate = BusinessFilter.parse(filter_name) if filter_name else None
        businesses = read_business_licenses(source).deduplicate()
        targets = [read_addresses(path, schema) for path, schema in zip(target, target_type)]
        records = BusinessMatchRecords.compare_chain(businesses, targets, _engine_config())
        if predicate is not None:
            records = records.filter(predicate)
        count = write_rows(output, records.as_rows(), columns=BUSINESS_RECORD_COLUMNS)
    typer.echo(f"Wrote {count} business match records to {output}")


@app.command()
def lexisnexis(
    include: Path = typer.Option(..., "--include", help="Addresses inside the service area"),
    include_type: AddressSchema = typer.Option(AddressSchema.GRANTS_PASS, "--include-type", help="Include schema"),
    exclude: Path = typer.Option(..., "--exclude", help="Addresses outside the service area"),
    exclude_type: AddressSchema = typer.Option(AddressSchema.JOSEPHINE_COUNTY, "--exclude-type", help="Exclude schema"),
    output: Path = typer.Option(..., "--output", help="LexisNexis range CSV to write"),
) -> None:
    """Compress serviceable address numbers into LexisNexis street ranges."""
    with _command("lexisnexis"):
        served = read_addresses(include, include_type)
        excluded = read_addresses(exclude, exclude_type)
        export = LexisNexis.from_addresses(served, excluded)
        count = write_rows(output, export.as_rows(), columns=LEXISNEXIS_COLUMNS)
    typer.echo(f"Wrote {count} ranges to {output}")


@app.command()
def fire(
    source: Path = typer.Option(..., "--source", help="Fire inspection export"),
    target: Path = typer.Option(..., "--target", help="Reference addresses"),
    target_type: AddressSchema = typer.Option(AddressSchema.GRANTS_PASS, "--target-type", help="Target schema"),
    output: Path = typer.Option(..., "--output", help="Inspection match records CSV to write"),
    filter_name: Optional[str] = typer.Option(None, "--filter", help=f"One of {', '.join(FireFilter.choices())}"),
) -> None:
    """Match free-text fire inspection addresses against an address source."""
    with _command("fire"):
        predicate = FireFilter.parse(filter_name) if filter_name else None
        inspections = read_fire_inspections(source)
        addresses = read_addresses(target, target_type)
        records = FireInspectionMatchRecords.compare(inspections, addresses, _engine_config())
        if predicate is not None:
            records = records.filter(predicate)
        count = write_rows(output, records.as_rows(), columns=FIRE_RECORD_COLUMNS)
    typer.echo(f"Wrote {count} inspection records to {output}")


def main() -> None:
    app()
