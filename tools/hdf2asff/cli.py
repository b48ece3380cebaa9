#!/usr/bin/env python3
"""
hdf2asff CLI - converts HDF evaluation results into AWS Security Finding Format

Reads an HDF/InSpec execution JSON document, builds one ASFF finding per executed
check plus a run summary finding, and writes them to chunked JSON files and/or
uploads them to AWS Security Hub.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import ConversionContext
from .converter import convert as convert_evaluation
from .delivery import BatchDispatcher, FindingFileWriter, SecurityHubUploader
from .hdf import HDFValidator, count, create_description
from .readers import HDFReader

# Set up console and logging
console = Console()
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(console=console, show_time=False, show_path=False)]
)
logger = logging.getLogger("hdf2asff")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """hdf2asff - convert HDF results to AWS Security Hub findings"""
    ctx.ensure_object(dict)

    if quiet:
        logging.getLogger().setLevel(logging.WARNING)
    elif verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


def _load(ctx, input_path: Path):
    """Load an evaluation, exiting on unreadable input"""
    try:
        return HDFReader(input_path).to_evaluation()
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read {input_path}: {e}")
        if ctx.obj.get('verbose'):
            logger.exception(e)
        sys.exit(1)


@cli.command()
@click.option('--input', '-i', 'input_path', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Input HDF/InSpec JSON')
@click.option('--aws-account-id', '-a', required=True, envvar='AWS_ACCOUNT_ID',
              help='AWS Account ID')
@click.option('--region', '-r', required=True, envvar=['AWS_REGION', 'AWS_DEFAULT_REGION'],
              help='AWS Account Region')
@click.option('--target', '-t', required=True, envvar='HDF2ASFF_TARGET',
              help='Name of targeted host (re-use target to preserve findings across time)')
@click.option('--output', '-o', type=click.Path(path_type=Path),
              help='Output path prefix for ASFF findings JSON files')
@click.option('--upload', '-u', is_flag=True,
              help='Upload findings to Security Hub (AWS credentials must be configured or passed)')
@click.option('--access-key-id', envvar='AWS_ACCESS_KEY_ID', help='AWS access key id')
@click.option('--secret-access-key', envvar='AWS_SECRET_ACCESS_KEY', help='AWS secret access key')
@click.option('--session-token', envvar='AWS_SESSION_TOKEN', help='AWS session token')
@click.pass_context
def convert(ctx, input_path: Path, aws_account_id: str, region: str, target: str,
            output: Optional[Path], upload: bool, access_key_id: Optional[str],
            secret_access_key: Optional[str], session_token: Optional[str]):
    """Convert an HDF document to ASFF findings

    Writes <output>.p<N>.json files of 20 findings each with -o, and uploads
    to Security Hub in batches of 100 with -u.
    """
    if not upload and not output:
        logger.error(
            "You have not provided an output path or enabled upload. Use -o <path> to "
            "output files or -u to upload findings to Security Hub. Use --help for more help."
        )
        sys.exit(1)

    evaluation = _load(ctx, input_path)
    context = ConversionContext.from_options(target, aws_account_id, region, str(input_path))
    result = convert_evaluation(evaluation, context)

    delivered_ok = True

    if output:
        report = FindingFileWriter(output).write(result.findings)
        delivered_ok = delivered_ok and report.ok

    if upload:
        uploader = SecurityHubUploader(
            region,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
        )
        report = BatchDispatcher(uploader).dispatch(result.findings, result.summary)
        delivered_ok = delivered_ok and report.ok
        logger.info(
            f"Security Hub upload complete: {report.succeeded} succeeded, "
            f"{report.failed} failed of {report.submitted} submitted"
        )

    if not delivered_ok:
        logger.error("Some findings were not delivered - see errors above")
        sys.exit(1)

    logger.info(f"Conversion completed for target {context.target}")


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx, input_path: Path):
    """Validate an HDF document against the bundled schema"""
    try:
        with open(input_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Input is not valid JSON: {e}")
        sys.exit(1)

    report = HDFValidator().get_validation_report(data)
    console.print_json(data=report)

    if not report["valid"]:
        logger.error("HDF validation failed")
        sys.exit(1)


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def stats(ctx, input_path: Path):
    """Show control status counts for an HDF document"""
    evaluation = _load(ctx, input_path)
    counts = count(evaluation)

    table = Table(title=f"Control status: {evaluation.primary_profile.name}")
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right")
    for name, value in counts.as_dict().items():
        table.add_row(name, str(value))

    console.print(table)
    console.print(create_description(counts))


if __name__ == '__main__':
    cli()
