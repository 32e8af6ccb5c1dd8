"""Exceptions raised by the migration tooling."""


class MigrationsError(Exception):
    """Base class for all migration tooling errors"""


class ConfigurationError(MigrationsError):
    """Missing or malformed configuration value"""


class ArtifactError(MigrationsError):
    """A build artifact exists but cannot be used"""


class ArtifactNotFoundError(ArtifactError):
    """No build artifact for the requested contract name"""


class DeploymentError(MigrationsError):
    """A contract creation transaction could not be submitted or was reverted"""


class MigrationError(MigrationsError):
    """A migration script is invalid or could not be loaded"""
