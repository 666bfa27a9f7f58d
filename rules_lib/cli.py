"""
CLI tool for rules_lib.
Provides commands for mining association rules and for stratified sampling.
"""

import json
import logging
import sys

import click
import pandas as pd

from rules_lib.config_schemas import RulesConfig, default_rules_config
from rules_lib.logging_config import configure_structlog
from rules_lib.models.mining_config import ConfigurationError
from rules_lib.preparation.table_prep import resolve_class_column
from rules_lib.runners.rules_runner import RulesRunner
from rules_lib.sampling.stratified import stratified_undersample

logger = logging.getLogger(__name__)


@click.group()
@click.option('--log-level', default='INFO', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Write JSON logs to this file')
def cli(log_level, log_file):
    """Adaptive association rule search."""
    configure_structlog(log_level=log_level, log_file=log_file)


@cli.command()
@click.argument('data_csv', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML config overriding the default grids')
@click.option('--class-column', help='Class attribute (default: status, cls_label, else last column)')
def mine(data_csv, config_path, class_column):
    """Mine class association rules and general rules from DATA_CSV."""
    try:
        config = RulesConfig.from_yaml(config_path) if config_path else default_rules_config()
        table = pd.read_csv(data_csv)
        report = RulesRunner(config).run(table, class_column=class_column)
    except (ConfigurationError, ValueError) as e:
        logger.error("Rules run failed: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(report.to_dict(), indent=2, default=str))


@cli.command()
@click.argument('data_csv', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_csv', type=click.Path(dir_okay=False))
@click.option('--target', type=int, required=True, help='Target row count')
@click.option('--seed', type=int, default=42, show_default=True, help='Shuffle seed')
@click.option('--class-column', help='Class attribute (default: status, cls_label, else last column)')
def sample(data_csv, output_csv, target, seed, class_column):
    """Write a class-balanced undersample of DATA_CSV to OUTPUT_CSV."""
    table = pd.read_csv(data_csv)
    try:
        class_column = class_column or resolve_class_column(
            table, default_rules_config().class_column_candidates
        )
        sampled = stratified_undersample(table, class_column, target, seed)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    sampled.to_csv(output_csv, index=False)
    click.echo(f"Wrote {len(sampled)} of {len(table)} rows to {output_csv}")


if __name__ == '__main__':
    cli()
