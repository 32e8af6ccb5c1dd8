#!/usr/bin/env python3
"""
Migration runner

Discovers numbered migration scripts (``<number>_<name>.py``), runs the ones
that have not completed on the target network, and keeps a per-network
record of the last completed migration and deployed contract addresses.
"""

import os
import re
import json
import logging
import importlib.util
from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .errors import MigrationError

logger = logging.getLogger(__name__)

MIGRATION_FILENAME = re.compile(r'^(\d+)_(\w+)\.py$')


@dataclass
class Migration:
    """A migration script on disk"""
    number: int
    name: str
    path: str


def discover_migrations(directory: str) -> List[Migration]:
    """Return the migration scripts in a directory ordered by number."""
    if not os.path.isdir(directory):
        raise MigrationError(f"Migrations directory {directory} does not exist")

    migrations: Dict[int, Migration] = {}
    for filename in os.listdir(directory):
        match = MIGRATION_FILENAME.match(filename)
        if not match:
            continue
        number = int(match.group(1))
        if number in migrations:
            raise MigrationError(
                f"Duplicate migration number {number}: "
                f"{os.path.basename(migrations[number].path)} and {filename}"
            )
        migrations[number] = Migration(number, match.group(2), os.path.join(directory, filename))

    return [migrations[number] for number in sorted(migrations)]


def load_migration(migration: Migration) -> Callable:
    """Import a migration script by path and return its run() entry point."""
    module_name = f"migration_{migration.number}_{migration.name}"
    spec = importlib.util.spec_from_file_location(module_name, migration.path)
    if spec is None or spec.loader is None:
        raise MigrationError(f"Could not load migration {migration.path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    run = getattr(module, 'run', None)
    if not callable(run):
        raise MigrationError(f"Migration {migration.path} does not define run(deployer)")
    return run


@dataclass
class DeploymentRecord:
    """Per-network migration progress, persisted as JSON"""
    path: str
    networks: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str) -> "DeploymentRecord":
        if not os.path.exists(path):
            return cls(path)
        try:
            with open(path, 'r') as f:
                networks = json.load(f)
        except ValueError as e:
            raise MigrationError(f"Could not parse deployment record {path}: {e}")
        if not isinstance(networks, dict):
            raise MigrationError(f"Deployment record {path} must be a JSON object keyed by network")
        return cls(path, networks)

    def _network(self, network: str) -> Dict[str, Any]:
        return self.networks.setdefault(network, {'lastCompletedMigration': 0, 'contracts': {}})

    def last_completed(self, network: str) -> int:
        return self.networks.get(network, {}).get('lastCompletedMigration', 0)

    def contracts(self, network: str) -> Dict[str, str]:
        return dict(self.networks.get(network, {}).get('contracts', {}))

    def mark_completed(self, network: str, number: int, contracts: Dict[str, str]):
        entry = self._network(network)
        entry['lastCompletedMigration'] = number
        entry['contracts'].update(contracts)
        entry['updatedAt'] = datetime.now().isoformat()

    def reset(self, network: str):
        self.networks.pop(network, None)

    def save(self):
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, 'w') as f:
            json.dump(self.networks, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)


class MigrationRunner:
    def __init__(self, deployer, registry, migrations_dir: str, record: DeploymentRecord,
                 network: str = "development", notifier=None, persist: bool = True):
        self.deployer = deployer
        self.registry = registry
        self.migrations_dir = migrations_dir
        self.record = record
        self.network = network
        self.notifier = notifier
        self.persist = persist

    def pending(self, reset: bool = False, to_number: Optional[int] = None) -> List[Migration]:
        """Migrations that still have to run on this network"""
        last_completed = 0 if reset else self.record.last_completed(self.network)
        return [
            m for m in discover_migrations(self.migrations_dir)
            if m.number > last_completed and (to_number is None or m.number <= to_number)
        ]

    def migrate(self, reset: bool = False, to_number: Optional[int] = None) -> List[Migration]:
        """
        Run pending migrations in order

        Args:
            reset: run every migration again, ignoring recorded progress
            to_number: last migration number to run

        Returns:
            The migrations that ran
        """
        migrations = self.pending(reset=reset, to_number=to_number)
        if not migrations:
            logger.info(f"Network '{self.network}' is up to date")
            return []

        if reset and self.persist:
            self.record.reset(self.network)

        completed = []
        for migration in migrations:
            self._run_one(migration)
            completed.append(migration)

        summary = ", ".join(f"{m.number}_{m.name}" for m in completed)
        logger.info(f"Migrations completed on '{self.network}': {summary}")
        self._notify(f"Migrations completed on {self.network}", {
            "Migrations": summary,
            "Contracts": str(len(self.record.contracts(self.network))),
        })
        return completed

    def _run_one(self, migration: Migration):
        logger.info(f"Running migration {migration.number}_{migration.name}...")
        already_deployed = len(getattr(self.deployer, 'deployments', []))
        try:
            run = load_migration(migration)
            run(self.deployer, self.registry)
        except Exception as e:
            logger.error(f"Migration {migration.number}_{migration.name} failed: {e}")
            self._notify(f"Migration {migration.number}_{migration.name} failed on {self.network}: {e}", {
                "Last Completed": str(self.record.last_completed(self.network)),
            })
            raise

        new_deployments = getattr(self.deployer, 'deployments', [])[already_deployed:]
        contracts = {d.name: d.address for d in new_deployments if d.address}
        if self.persist:
            self.record.mark_completed(self.network, migration.number, contracts)
            self.record.save()
        logger.info(f"Migration {migration.number}_{migration.name} done ({len(new_deployments)} contract(s))")

    def _notify(self, message: str, fields: Dict[str, str]):
        if self.notifier is None:
            return
        try:
            self.notifier.send(message, fields)
        except Exception as e:
            logger.error(f"Failed to send notification: {e}")
