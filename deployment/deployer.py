#!/usr/bin/env python3
"""
Deployer capabilities handed to migration scripts.

Web3Deployer signs and submits contract creation transactions and waits for
each receipt before returning. DryRunDeployer only records what it was asked
to deploy.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from .artifacts import Artifact
from .errors import ConfigurationError, DeploymentError

logger = logging.getLogger(__name__)


@dataclass
class DeployedContract:
    """Result of a contract creation"""
    name: str
    address: Optional[str]
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None


class Web3Deployer:
    def __init__(self, w3: Web3, account: Any, private_key: str, chain_id: int,
                 gas_limit: Optional[int] = None, receipt_timeout: int = 300):
        self.w3 = w3
        self.account = account
        self.private_key = private_key
        self.chain_id = chain_id
        self.gas_limit = gas_limit
        self.receipt_timeout = receipt_timeout
        self.deployments: List[DeployedContract] = []

    @classmethod
    def from_config(cls, config) -> "Web3Deployer":
        """Connect to the configured RPC endpoint and load the deployer account"""
        if not config.private_key:
            raise ConfigurationError("PRIVATE_KEY not found in environment")

        w3 = Web3(Web3.HTTPProvider(config.rpc_url))
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        if not w3.is_connected():
            raise DeploymentError(f"Could not connect to RPC URL: {config.rpc_url}")
        logger.info(f"Connected to blockchain at {config.rpc_url}")

        account = w3.eth.account.from_key(config.private_key)
        logger.info(f"Using deployer account: {account.address}")

        return cls(
            w3,
            account,
            config.private_key,
            config.chain_id,
            gas_limit=config.gas_limit,
            receipt_timeout=config.receipt_timeout,
        )

    def deploy(self, artifact: Artifact, *args) -> DeployedContract:
        """
        Deploy an artifact and wait for the creation receipt

        Args:
            artifact: compiled contract to deploy
            *args: constructor arguments

        Returns:
            DeployedContract with the new address
        """
        if not artifact.is_deployable:
            raise DeploymentError(
                f"{artifact.name} has no bytecode; abstract contracts and interfaces cannot be deployed"
            )

        logger.info(f"Deploying {artifact.name}...")
        contract = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

        tx_params = {
            'from': self.account.address,
            'nonce': self.w3.eth.get_transaction_count(self.account.address),
            'chainId': self.chain_id,
            'gasPrice': self.w3.eth.gas_price,
        }
        if self.gas_limit is not None:
            tx_params['gas'] = self.gas_limit

        tx = contract.constructor(*args).build_transaction(tx_params)
        signed_tx = self.w3.eth.account.sign_transaction(tx, self.private_key)
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hex = self.w3.to_hex(tx_hash)
        logger.info(f"-> Transaction sent! Hash: {tx_hex}")

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        if receipt['status'] != 1:
            raise DeploymentError(
                f"Deployment of {artifact.name} reverted in block {receipt['blockNumber']}"
            )

        deployed = DeployedContract(
            name=artifact.name,
            address=receipt['contractAddress'],
            tx_hash=tx_hex,
            block_number=receipt['blockNumber'],
        )
        logger.info(f"-> {artifact.name} deployed at {deployed.address} (block {deployed.block_number})")
        self.deployments.append(deployed)
        return deployed


class DryRunDeployer:
    """Records deploy requests without touching a network"""

    def __init__(self):
        self.requests: List[tuple] = []
        self.deployments: List[DeployedContract] = []

    def deploy(self, artifact: Artifact, *args) -> DeployedContract:
        if not artifact.is_deployable:
            raise DeploymentError(
                f"{artifact.name} has no bytecode; abstract contracts and interfaces cannot be deployed"
            )
        logger.info(f"[dry-run] would deploy {artifact.name} with {len(args)} constructor argument(s)")
        self.requests.append((artifact.name, args))
        deployed = DeployedContract(name=artifact.name, address=None)
        self.deployments.append(deployed)
        return deployed
