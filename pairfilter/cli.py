#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for PairFilter.

This module provides the main CLI entry point and all subcommands for
filtering paired-end FASTQ files.
"""

import logging
import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config import (
    CONFIG_TEMPLATES,
    ConfigParser,
    ConfigValidationError,
    save_config_template,
)
from .errors import PairFilterError
from .filtering import DEFAULT_LENGTH_THRESHOLD, PairFilterRunner

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _configure_logging(level: int):
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose (debug) logging')
@click.option('--quiet', '-q', is_flag=True, help='Only log warnings and errors')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    PairFilter: lockstep filtering of paired-end FASTQ files

    Reads two mate-matched FASTQ files together, keeps pairs whose mates
    are both longer than a length threshold and whose tile and read ids
    are not excluded, and writes the rest to separate filtered files.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet

    if verbose:
        _configure_logging(logging.DEBUG)
    elif quiet:
        _configure_logging(logging.WARNING)
    else:
        _configure_logging(logging.INFO)


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='pairfilter_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(CONFIG_TEMPLATES),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        parser = ConfigParser(config_file)
    except ConfigValidationError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    errors = parser.errors()
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    settings = parser.to_settings()
    click.echo("✓ Configuration is valid")
    click.echo("\nKey Settings:")
    click.echo(f"  Inputs: {settings.r1_input}, {settings.r2_input}")
    click.echo(f"  Threshold: {settings.threshold}")
    click.echo(f"  Excluded tiles: {', '.join(settings.remove_tiles) or 'none'}")
    click.echo(f"  Excluded reads file: {settings.remove_reads or 'none'}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
def config_show(config_file):
    """Display the merged configuration as YAML."""
    try:
        parser = ConfigParser(config_file)
    except ConfigValidationError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(yaml.dump(parser.to_dict(), default_flow_style=False, sort_keys=False))


# ============================================================================
# Filtering Command
# ============================================================================

@main.command('filter')
@click.option('--i1', 'i1', type=click.Path(exists=True, dir_okay=False),
              help='Mate-1 input FASTQ (gzipped or plain)')
@click.option('--i2', 'i2', type=click.Path(exists=True, dir_okay=False),
              help='Mate-2 input FASTQ (gzipped or plain)')
@click.option('--o1', 'o1', type=click.Path(dir_okay=False),
              help='Mate-1 kept output [default: <i1>_filtered.fastq]')
@click.option('--o2', 'o2', type=click.Path(dir_okay=False),
              help='Mate-2 kept output [default: <i2>_filtered.fastq]')
@click.option('--f1', 'f1', type=click.Path(dir_okay=False),
              help='Mate-1 filtered output [default: <i1>_filtered_reads.fastq]')
@click.option('--f2', 'f2', type=click.Path(dir_okay=False),
              help='Mate-2 filtered output [default: <i2>_filtered_reads.fastq]')
@click.option('--threshold', 'threshold', type=click.IntRange(min=0), default=None,
              help=f'Both mates must be longer than this [default: {DEFAULT_LENGTH_THRESHOLD}]')
@click.option('--stats_file', '--stats-file', 'stats_file', type=click.Path(dir_okay=False),
              help='Write a stats report to this file')
@click.option('--remove_tiles', '--remove-tiles', 'remove_tiles', multiple=True,
              help='Tile id to exclude (repeatable)')
@click.option('--remove_reads', '--remove-reads', 'remove_reads', type=click.Path(),
              help='File of read ids to exclude, one per line')
@click.option('--trim_r1', '--trim-r1', 'trim_r1', type=int, default=None,
              help='Reserved; accepted but not applied')
@click.option('--trim_r2', '--trim-r2', 'trim_r2', type=int, default=None,
              help='Reserved; accepted but not applied')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              help='YAML configuration file (command-line values take precedence)')
@click.pass_context
def filter_command(ctx, i1, i2, o1, o2, f1, f2, threshold, stats_file,
                   remove_tiles, remove_reads, trim_r1, trim_r2, config_file):
    """
    Filter a pair of mate-matched FASTQ files.

    Examples:
        # Keep pairs where both mates are longer than 36 bp
        pairfilter filter --i1 S1_R1.fastq.gz --i2 S1_R2.fastq.gz

        # Drop two tiles and a list of reads, and write a report
        pairfilter filter --i1 S1_R1.fastq.gz --i2 S1_R2.fastq.gz \\
            --remove_tiles 1101 --remove_tiles 2101 \\
            --remove_reads bad_reads.txt --stats_file S1_stats.txt
    """
    try:
        parser = ConfigParser(config_file)
        parser.merge_cli_overrides({
            'input.r1': i1,
            'input.r2': i2,
            'output.r1_kept': o1,
            'output.r2_kept': o2,
            'output.r1_filtered': f1,
            'output.r2_filtered': f2,
            'output.stats_file': stats_file,
            'filter.threshold': threshold,
            'filter.remove_tiles': list(remove_tiles) or None,
            'filter.remove_reads': remove_reads,
            'filter.trim_r1': trim_r1,
            'filter.trim_r2': trim_r2,
        })
        settings = parser.to_settings()
    except ConfigValidationError as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        sys.exit(1)

    # Log level from the config file applies unless -v/-q was given
    obj = ctx.obj or {}
    if not obj.get('VERBOSE') and not obj.get('QUIET'):
        logging.getLogger().setLevel(str(parser.get('logging.level', 'INFO')).upper())

    click.echo(f"{'='*60}")
    click.echo("PairFilter")
    click.echo(f"{'='*60}")
    click.echo(f"R1 input:  {settings.r1_input}")
    click.echo(f"R2 input:  {settings.r2_input}")
    click.echo(f"R1 kept:   {settings.r1_kept}")
    click.echo(f"R2 kept:   {settings.r2_kept}")
    click.echo(f"R1 removed: {settings.r1_filtered}")
    click.echo(f"R2 removed: {settings.r2_filtered}")
    click.echo(f"Threshold: {settings.threshold}")
    click.echo(f"{'='*60}\n")

    try:
        stats = PairFilterRunner(settings).run()
    except PairFilterError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)

    click.echo(stats.summary())
    if settings.stats_file is not None:
        click.echo(f"✓ Stats written to: {settings.stats_file}")


if __name__ == '__main__':
    main()
