import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()


def _int_from_env(name: str, default: Optional[str]) -> Optional[int]:
    value = os.getenv(name, default)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass
class DeploymentConfig:
    """Settings for a migration run"""
    rpc_url: str = "http://localhost:8545"
    private_key: Optional[str] = None
    chain_id: int = 1337
    network: str = "development"
    build_dir: str = "build/contracts"
    migrations_dir: str = "migrations"
    deployment_file: str = "deployment.json"
    gas_limit: Optional[int] = None
    receipt_timeout: int = 300
    slack_webhook: Optional[str] = None
    log_file: str = "migrations.log"

    @classmethod
    def from_env(cls) -> "DeploymentConfig":
        """Build the configuration from environment variables (and .env)."""
        return cls(
            rpc_url=os.getenv("RPC_URL", "http://localhost:8545"),
            private_key=os.getenv("PRIVATE_KEY") or None,
            chain_id=_int_from_env("CHAIN_ID", "1337"),
            network=os.getenv("NETWORK", "development"),
            build_dir=os.getenv("BUILD_DIR", "build/contracts"),
            migrations_dir=os.getenv("MIGRATIONS_DIR", "migrations"),
            deployment_file=os.getenv("DEPLOYMENT_FILE", "deployment.json"),
            gas_limit=_int_from_env("GAS_LIMIT", None),
            receipt_timeout=_int_from_env("RECEIPT_TIMEOUT", "300"),
            slack_webhook=os.getenv("SLACK_WEBHOOK") or None,
            log_file=os.getenv("LOG_FILE", "migrations.log"),
        )
