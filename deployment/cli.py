#!/usr/bin/env python3
"""
migrate: run pending contract migrations against the configured network
"""

import sys
import logging
import argparse

from .artifacts import ArtifactRegistry
from .config import DeploymentConfig
from .deployer import DryRunDeployer, Web3Deployer
from .errors import MigrationsError
from .notifications import SlackNotifier
from .runner import DeploymentRecord, MigrationRunner

logger = logging.getLogger(__name__)


def configure_logging(log_file: str):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="migrate", description=__doc__.strip())
    parser.add_argument("--network", help="network name used for bookkeeping (default: $NETWORK)")
    parser.add_argument("--reset", action="store_true", help="run all migrations from the beginning")
    parser.add_argument("--to", type=int, dest="to_number", help="run migrations up to this number")
    parser.add_argument("--dry-run", action="store_true", help="resolve artifacts and log deployments without sending transactions")
    parser.add_argument("--list", action="store_true", help="list pending migrations and exit")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = DeploymentConfig.from_env()
        if args.network:
            config.network = args.network
        configure_logging(config.log_file)

        registry = ArtifactRegistry.from_config(config)
        record = DeploymentRecord.load(config.deployment_file)
        dry_run = args.dry_run or args.list
        deployer = DryRunDeployer() if dry_run else Web3Deployer.from_config(config)
        notifier = SlackNotifier(config.slack_webhook) if config.slack_webhook and not dry_run else None

        runner = MigrationRunner(
            deployer,
            registry,
            config.migrations_dir,
            record,
            network=config.network,
            notifier=notifier,
            persist=not dry_run,
        )

        if args.list:
            pending = runner.pending(reset=args.reset, to_number=args.to_number)
            for migration in pending:
                print(f"{migration.number}_{migration.name}")
            if not pending:
                print(f"Network '{config.network}' is up to date")
            return 0

        runner.migrate(reset=args.reset, to_number=args.to_number)
        return 0

    except MigrationsError as e:
        logger.error(f"Migration aborted: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Migration stopped by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
