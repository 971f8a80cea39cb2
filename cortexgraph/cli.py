#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for cortexgraph.

This module provides the main CLI entry point and all subcommands for
inspecting Cortex coloured de Bruijn graph binaries.
"""

import logging
import sys
from pathlib import Path

import click
import yaml

from .version import __version__
from .config.schema import (
    ConfigValidationError,
    load_config,
    save_config_template,
    validate_config,
)
from .io.cortex_binary_module import GraphFileReader, GraphFormatError, ReaderConfig
from .kmer_core.packed_kmer_module import BitPackedSequence


def _configure_logging(config, verbose: bool, quiet: bool):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, str(config['logging']['level']).upper())
    logging.basicConfig(level=level, format=config['logging']['format'])


def _open_reader(ctx, graph_file) -> GraphFileReader:
    try:
        return GraphFileReader(graph_file, ReaderConfig.from_config(ctx.obj['CONFIG']))
    except GraphFormatError as e:
        click.echo(f"✗ Invalid Cortex binary {graph_file}: {e}", err=True)
        sys.exit(1)


def _check_colours(colours, header, graph_file):
    if colours is None:
        return
    bad = [c for c in colours if c >= header.colour_count]
    if bad:
        click.echo(
            f"✗ neighbors.colours {bad} out of range: {graph_file} has {header.colour_count} colours",
            err=True,
        )
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file')
@click.pass_context
def main(ctx, verbose, quiet, config_file):
    """
    cortexgraph: Cortex coloured de Bruijn graph reader

    Decode headers, k-mers, coverages and edges from Cortex binaries (.ctx).
    """
    ctx.ensure_object(dict)
    try:
        config = load_config(config_file)
    except ConfigValidationError as e:
        raise click.ClickException(str(e))

    errors = validate_config(config)
    if errors:
        for error in errors:
            click.echo(f"  • {error}", err=True)
        raise click.ClickException("Configuration is invalid")

    _configure_logging(config, verbose, quiet)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet
    ctx.obj['CONFIG'] = config


# ============================================================================
# Graph Inspection Commands
# ============================================================================

@main.command('header')
@click.argument('graph_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def header_cmd(ctx, graph_file):
    """Print the header of a Cortex binary."""
    with _open_reader(ctx, graph_file) as reader:
        click.echo(reader.header.summary(), nl=False)
        click.echo(f"Kmer records:      {reader.kmer_count}")


@main.command('kmers')
@click.argument('graph_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--reverse', is_flag=True, help='Print k-mers position-reversed')
@click.option('--limit', '-n', type=int, default=None, help='Stop after N k-mers')
@click.option('--coverage', is_flag=True, help='Append per-colour coverage')
@click.option('--neighbors', is_flag=True, help='Append left and right neighbour k-mers')
@click.pass_context
def kmers_cmd(ctx, graph_file, reverse, limit, coverage, neighbors):
    """Print one k-mer per line."""
    colours = ctx.obj['CONFIG']['neighbors']['colours']

    with _open_reader(ctx, graph_file) as reader:
        k = reader.header.kmer_size
        if neighbors:
            _check_colours(colours, reader.header, graph_file)
        records = iter(reader)
        try:
            for i, record in enumerate(records):
                if limit is not None and i >= limit:
                    break
                fields = [record.reverse_nucleotides(k) if reverse else record.nucleotides(k)]
                if coverage:
                    fields.append(','.join(str(c) for c in record.coverages.tolist()))
                if neighbors:
                    left = record.left_neighbors(k, colours)
                    right = record.right_neighbors(k, colours)
                    fields.append(','.join(n.nucleotides(k) for n in left) or '-')
                    fields.append(','.join(n.nucleotides(k) for n in right) or '-')
                click.echo('\t'.join(fields))
        except GraphFormatError as e:
            click.echo(f"✗ Corrupt record in {graph_file}: {e}", err=True)
            sys.exit(1)
        finally:
            records.close()


@main.command('neighbors')
@click.argument('graph_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('kmer')
@click.pass_context
def neighbors_cmd(ctx, graph_file, kmer):
    """Look up KMER and print its left and right neighbours."""
    config = ctx.obj['CONFIG']
    try:
        query = BitPackedSequence.from_nucleotides(kmer, strict=config['reader']['strict_alphabet'])
    except ValueError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    with _open_reader(ctx, graph_file) as reader:
        k = reader.header.kmer_size
        if len(kmer) != k:
            click.echo(f"✗ Query has length {len(kmer)} but graph k is {k}", err=True)
            sys.exit(1)
        colours = config['neighbors']['colours']
        _check_colours(colours, reader.header, graph_file)

        match = None
        records = iter(reader)
        try:
            for record in records:
                if record.kmer == query:
                    match = record
                    break
        except GraphFormatError as e:
            click.echo(f"✗ Corrupt record in {graph_file}: {e}", err=True)
            sys.exit(1)
        finally:
            records.close()

        if match is None:
            click.echo(f"✗ K-mer not found: {kmer}", err=True)
            sys.exit(1)

        click.echo(f"kmer:  {match.nucleotides(k)}")
        click.echo(f"left:  {' '.join(n.nucleotides(k) for n in match.left_neighbors(k, colours)) or '-'}")
        click.echo(f"right: {' '.join(n.nucleotides(k) for n in match.right_neighbors(k, colours)) or '-'}")


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='cortexgraph_config.yaml',
              help='Output configuration file path')
def config_init(output):
    """Generate a template configuration file with all available parameters."""
    save_config_template(Path(output))
    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    try:
        cfg = load_config(Path(config_file))
    except Exception as e:
        click.echo(f"✗ Error loading configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(cfg)
    if errors:
        click.echo("✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
def config_show(config_file):
    """Display configuration settings merged over defaults."""
    cfg = load_config(Path(config_file))
    click.echo(yaml.dump(cfg, default_flow_style=False, sort_keys=False))


if __name__ == '__main__':
    main()
