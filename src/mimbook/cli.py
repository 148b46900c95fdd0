"""
Command-line interface for mimbook

Provides CLI commands for:
- Generating runbooks: mimbook generate --incident-file inc.yml --stakeholders-file team.yml
- Validating inputs: mimbook validate --incident-file inc.yml --stakeholders-file team.yml
- Managing configuration: mimbook config --show
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click
import yaml

from . import __version__
from .config import get_config
from .exceptions import InputValidationError, MimbookError
from .generator import RunbookGenerator
from .loader import load_incident_file, load_stakeholders_file, validate_both
from .markdown import runbook_to_markdown
from .observability import configure_tracing

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="mimbook")
@click.option("--log-level", default=None, help="Override the configured log level")
def cli(log_level: Optional[str]):
    """mimbook - Major incident runbook generator"""
    config_obj = get_config()
    logging.basicConfig(
        level=(log_level or config_obj.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    configure_tracing(config_obj.telemetry)


def _echo_issues(title: str, issues, marker: str, err: bool = False) -> None:
    if not issues:
        return
    click.echo(title, err=err)
    for issue in issues:
        click.echo(f"  {marker} {issue.field}: {issue.message}", err=err)


@cli.command()
@click.option(
    "--incident-file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="YAML file containing the incident record",
)
@click.option(
    "--stakeholders-file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="YAML file containing stakeholders and vendor escalations",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the generated runbook (defaults to output.directory)",
)
@click.option("--json", "write_json", is_flag=True, help="Also write the runbook model as JSON")
def generate(
    incident_file: str,
    stakeholders_file: str,
    output_dir: Optional[str],
    write_json: bool,
):
    """Generate a major incident runbook from incident and stakeholder files"""
    config_obj = get_config()
    try:
        incident_result = load_incident_file(incident_file)
        stakeholders_result = load_stakeholders_file(stakeholders_file)

        _echo_issues(
            "⚠️  Warnings:",
            incident_result.warnings + stakeholders_result.warnings,
            "-",
        )

        roster = stakeholders_result.data
        runbook = RunbookGenerator(config_obj).generate(
            incident_result.data, roster.stakeholders, roster.vendor_escalations
        )

        target_dir = Path(output_dir or config_obj.output.directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(timezone.utc).strftime(
            config_obj.output.timestamp_format
        )
        base_name = config_obj.output.filename_pattern.format(
            number=runbook.incident.number, timestamp=timestamp
        )

        md_path = target_dir / f"{base_name}.md"
        md_path.write_text(runbook_to_markdown(runbook), encoding="utf-8")
        logger.info(f"Wrote {md_path}")

        click.echo(f"✅ Runbook generated for {runbook.incident.number}")
        click.echo(f"📄 Markdown: {md_path}")

        if write_json:
            json_path = target_dir / f"{base_name}.json"
            json_path.write_text(runbook.model_dump_json(indent=2), encoding="utf-8")
            click.echo(f"🗂  JSON: {json_path}")

        click.echo(
            f"Sections: {len(runbook.sections)} | "
            f"Action items: {len(runbook.action_items)} | "
            f"Email templates: {len(runbook.email_templates)}"
        )

    except InputValidationError as e:
        click.echo(f"❌ {e.source} failed validation", err=True)
        _echo_issues("Errors:", e.errors, "✗", err=True)
        sys.exit(1)
    except (MimbookError, OSError, UnicodeDecodeError) as e:
        logger.error(f"Runbook generation failed: {e}")
        click.echo(f"❌ Runbook generation failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--incident-file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="YAML file containing the incident record",
)
@click.option(
    "--stakeholders-file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="YAML file containing stakeholders and vendor escalations",
)
def validate(incident_file: str, stakeholders_file: str):
    """Validate input files without generating a runbook"""
    try:
        report = validate_both(
            Path(incident_file).read_text(encoding="utf-8"),
            Path(stakeholders_file).read_text(encoding="utf-8"),
        )
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"❌ Failed to read input: {e}", err=True)
        sys.exit(1)

    _echo_issues("⚠️  Warnings:", report.warnings, "-")

    if not report.valid:
        click.echo("❌ Validation failed", err=True)
        _echo_issues("Errors:", report.errors, "✗", err=True)
        sys.exit(1)

    click.echo("✅ Inputs are valid")


@cli.command()
@click.option("--show", is_flag=True, help="Show current configuration")
@click.option("--format", type=click.Choice(["yaml", "json"]), default="yaml", help="Output format")
def config(show: bool, format: str):
    """Manage mimbook configuration"""
    if show:
        config_dict = get_config().model_dump()

        click.echo("🔧 Current mimbook Configuration")
        click.echo("=" * 40)

        if format == "yaml":
            click.echo(yaml.dump(config_dict, default_flow_style=False, indent=2))
        elif format == "json":
            click.echo(json.dumps(config_dict, indent=2))
    else:
        click.echo("Use --show to display current configuration")
        click.echo("Available options:")
        click.echo("  --show          Show current configuration")
        click.echo("  --format yaml   Output in YAML format (default)")
        click.echo("  --format json   Output in JSON format")


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == "__main__":
    main()
