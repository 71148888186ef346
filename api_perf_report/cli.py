"""Command-line interface for api-perf-report."""

import json
import sys

import click
import yaml

from .config import ReportConfig
from .core.analysis import ResultAnalyzer
from .core.errors import ConfigurationError, MalformedSourceError
from .core.pipeline import generate_reports
from .utils.logging import setup_logging


def _load_config(config_path):
    config = ReportConfig.from_file(config_path) if config_path else ReportConfig()
    config.apply_env_overrides()
    return config


@click.group(invoke_without_command=True)
@click.version_option()
@click.option("--config", type=click.Path(exists=True), help="Path to config file (YAML or JSON)")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.pass_context
def cli(ctx, config, verbose, log_file):
    """API Perf Report - Dashboard and summary generation for API test results."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["log_file"] = log_file

    setup_logging(log_file=log_file, verbose=verbose)

    if ctx.invoked_subcommand is None:
        ctx.invoke(generate)


@cli.command()
@click.option("--reports-dir", help="Directory holding the results documents and receiving the reports")
@click.option("--details-url", help="Link to the detailed reports used in the summary")
@click.pass_context
def generate(ctx, reports_dir, details_url):
    """Generate the dashboard and summary from the results documents."""
    try:
        config = _load_config(ctx.obj.get("config"))
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error generating summary: {ConfigurationError(str(e))}", err=True)
        sys.exit(ConfigurationError.exit_code)

    if reports_dir:
        config.reports_dir = reports_dir
    if details_url:
        config.details_url = details_url

    click.echo("Generating performance summary...")

    result = generate_reports(config)

    if not result.ok:
        click.echo(f"Error generating summary: {result.error}", err=True)
        sys.exit(result.exit_code)

    click.echo("Performance summary generated successfully!")
    for line in result.status_lines():
        click.echo(line)

    if ctx.obj.get("verbose"):
        click.echo(f"  Dashboard: {config.dashboard_path}")
        click.echo(f"  Summary:   {config.summary_path}")


@cli.command()
@click.argument("results_file", type=click.Path())
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Output format",
)
def analyze(results_file, output_format):
    """Print the metrics of a single results document."""
    try:
        summary = ResultAnalyzer().analyze(results_file)
    except MalformedSourceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)

    if summary is None:
        click.echo(f"No results document found at {results_file}")
        return

    if output_format == "yaml":
        click.echo(yaml.safe_dump(summary.to_dict(), default_flow_style=False, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(summary.to_dict(), indent=2))
