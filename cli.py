import os
from pathlib import Path
from typing import Optional

import pandas as pd
import typer

import config
from data_source import load_orders, unparseable_date_counts, write_cleaned_orders
from exceptions import SalesReportingError
from export import (
    get_run_id,
    save_definitions,
    save_kpi_summary,
    save_report_tables,
    save_summary_report,
)
from kpi import compute_kpi_summary
from logging_config import configure_logging, get_logger
from report_definitions import REPORT_DEFINITIONS, audit_to_frame, run_all_reports, run_report
from reports import delivery_trends_by_state, null_audit, sales_by_category, top_customers_by_profit
from template_report import generate_summary_report

logger = get_logger(__name__)

app = typer.Typer(name="sales-reports", help="Descriptive reports over a Superstore-style order table.")


class LoadOptions:
    def __init__(self, data: Path, dayfirst: bool, date_format: Optional[str]):
        self.data = data
        self.dayfirst = dayfirst
        self.date_format = date_format


@app.callback()
def main(
    ctx: typer.Context,
    data: Path = typer.Option(Path(config.SALES_DATA_PATH), "--data", "-d", help="Order table CSV."),
    dayfirst: bool = typer.Option(config.DATE_DAYFIRST, "--dayfirst/--monthfirst", help="Date locale of the CSV."),
    date_format: Optional[str] = typer.Option(config.DATE_FORMAT, "--date-format", help="Explicit strftime format for dates."),
    log_level: str = typer.Option(config.LOG_LEVEL, "--log-level", help="Logging level."),
):
    """Load settings shared by every command."""
    configure_logging(log_level)
    ctx.obj = LoadOptions(data=data, dayfirst=dayfirst, date_format=date_format)


def _load(ctx: typer.Context) -> pd.DataFrame:
    opts: LoadOptions = ctx.obj
    try:
        return load_orders(opts.data, dayfirst=opts.dayfirst, date_format=opts.date_format)
    except SalesReportingError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _echo_table(table: pd.DataFrame) -> None:
    if table.empty:
        typer.echo("(no rows)")
    else:
        typer.echo(table.to_string(index=False))


@app.command("list-reports")
def list_reports_command():
    """Lists the available reports."""
    for name, defn in REPORT_DEFINITIONS.items():
        typer.echo(f"{name:<28} {defn['output_type']:<8} {defn['business_question']}")


@app.command("audit")
def audit_command(ctx: typer.Context):
    """Prints missing-value counts and unparseable dates."""
    df = _load(ctx)
    _echo_table(audit_to_frame(null_audit(df)))
    for col, count in unparseable_date_counts(df).items():
        if count:
            typer.secho(f"{col}: {count} unparseable value(s)", fg=typer.colors.YELLOW)


@app.command("report")
def report_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Report name, see list-reports."),
    top_n: int = typer.Option(config.TOP_N_CUSTOMERS, "--top-n", help="Rows for top_customers_by_profit."),
):
    """Runs one report and prints it."""
    df = _load(ctx)
    try:
        result = run_report(df, name, top_n=top_n)
    except SalesReportingError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if isinstance(result, pd.DataFrame):
        _echo_table(result)
    elif isinstance(result, dict):
        _echo_table(audit_to_frame(result))
    elif hasattr(result, "to_dict"):
        for key, value in result.to_dict().items():
            typer.echo(f"{key}: {'n/a' if value is None else value}")
    else:
        typer.echo(str(result))


@app.command("kpi")
def kpi_command(
    ctx: typer.Context,
    top_n: int = typer.Option(config.TOP_N_CUSTOMERS, "--top-n", help="Customers to rank."),
):
    """Prints the KPI summary as a short text report."""
    df = _load(ctx)
    summary = compute_kpi_summary(df)
    text = generate_summary_report(
        summary,
        categories=sales_by_category(df),
        top_customers=top_customers_by_profit(df, n=top_n),
        delivery=delivery_trends_by_state(df),
    )
    typer.echo(text)


@app.command("export")
def export_command(
    ctx: typer.Context,
    output_dir: str = typer.Option(config.REPORTS_OUTPUT_DIR, "--output-dir", "-o", help="Output directory."),
    top_n: int = typer.Option(config.TOP_N_CUSTOMERS, "--top-n", help="Rows for top_customers_by_profit."),
):
    """Writes every report, the KPI summary and the definitions to disk."""
    opts: LoadOptions = ctx.obj
    df = _load(ctx)
    run_id = get_run_id()
    dataset_name = os.path.basename(str(opts.data))

    summary = compute_kpi_summary(df)
    tables = run_all_reports(df, top_n=top_n)
    save_report_tables(run_id, tables, output_dir)
    kpi_path = save_kpi_summary(
        run_id, summary, output_dir, dataset_name=dataset_name,
        unparseable_dates=unparseable_date_counts(df),
    )
    text = generate_summary_report(
        summary,
        categories=tables["sales_by_category"],
        top_customers=tables["top_customers_by_profit"],
        delivery=tables["delivery_trends_by_state"],
    )
    save_summary_report(run_id, text, output_dir, dataset_name, len(df))
    save_definitions(output_dir)
    typer.secho(f"Run {run_id}: {len(tables)} report table(s) and {kpi_path} written.", fg=typer.colors.GREEN)


@app.command("clean")
def clean_command(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="Where to write the cleaned CSV."),
):
    """Writes a copy of the order table with ISO dates."""
    opts: LoadOptions = ctx.obj
    df = _load(ctx)
    try:
        path = write_cleaned_orders(df, output, source_path=opts.data)
    except SalesReportingError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"Cleaned order table written to {path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
