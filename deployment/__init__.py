"""
Contract Migration Tooling
==========================

Deploys compiled contract artifacts to an EVM network through numbered
migration scripts.

Structure:
- artifacts: compiled artifact lookup (Truffle and Hardhat build layouts)
- deployer: web3-backed and dry-run deployer capabilities
- runner: migration discovery, ordering and bookkeeping
- notifications: Slack alerts for migration results
- cli: the `migrate` command
"""

__version__ = "1.0.0"
