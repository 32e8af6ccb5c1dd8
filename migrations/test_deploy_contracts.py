#!/usr/bin/env python3
"""
Tests for the 2_deploy_contracts migration
Checks the deploy order, argument-free deploys and failure propagation
"""

import os
import pytest
from unittest.mock import patch

from deployment.artifacts import Artifact, ArtifactRegistry
from deployment.errors import ArtifactNotFoundError, DeploymentError
from deployment.runner import Migration, load_migration

MIGRATION_PATH = os.path.join(os.path.dirname(__file__), '2_deploy_contracts.py')

EXPECTED_ORDER = [
    "SimpleStorage",
    "ERC1155",
    "ERC1155Mintable",
    "ERC1155MixedFungible",
    "ERC1155MixedFungibleMintable",
]


class StubRegistry:
    """In-memory artifact registry"""

    def __init__(self, missing=()):
        self.missing = set(missing)
        self.lookups = []

    def require(self, name):
        self.lookups.append(name)
        if name in self.missing:
            raise ArtifactNotFoundError(f"Could not find artifact for {name}")
        return Artifact(name=name, abi=[], bytecode="0x6080")


class RecordingDeployer:
    """Deployer double that records calls and can fail on the nth one"""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []

    def deploy(self, artifact, *args):
        self.calls.append((artifact.name, args))
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise DeploymentError(f"{artifact.name} reverted")


@pytest.fixture
def run():
    return load_migration(Migration(2, "deploy_contracts", MIGRATION_PATH))


class TestDeployContracts:
    def test_deploys_all_contracts_in_order(self, run):
        deployer = RecordingDeployer()

        result = run(deployer, StubRegistry())

        assert result is None
        assert [name for name, _ in deployer.calls] == EXPECTED_ORDER

    def test_deploys_without_constructor_arguments(self, run):
        deployer = RecordingDeployer()
        run(deployer, StubRegistry())

        assert len(deployer.calls) == 5
        assert all(args == () for _, args in deployer.calls)

    def test_failure_stops_sequence_and_propagates(self, run):
        """A failing 3rd deploy is the last one issued"""
        deployer = RecordingDeployer(fail_on=3)

        with pytest.raises(DeploymentError, match="ERC1155Mintable reverted"):
            run(deployer, StubRegistry())

        assert [name for name, _ in deployer.calls] == EXPECTED_ORDER[:3]

    def test_missing_artifact_fails_before_any_deploy(self, run):
        deployer = RecordingDeployer()

        with pytest.raises(ArtifactNotFoundError):
            run(deployer, StubRegistry(missing={"ERC1155MixedFungible"}))

        assert deployer.calls == []

    def test_second_run_repeats_the_same_deploys(self, run):
        deployer = RecordingDeployer()
        registry = StubRegistry()

        run(deployer, registry)
        run(deployer, registry)

        assert [name for name, _ in deployer.calls] == EXPECTED_ORDER * 2

    def test_registry_defaults_to_configured_build_dir(self, run):
        deployer = RecordingDeployer()
        registry = StubRegistry()

        with patch.object(ArtifactRegistry, 'from_config', return_value=registry) as from_config:
            run(deployer)

        from_config.assert_called_once()
        assert registry.lookups == EXPECTED_ORDER
        assert [name for name, _ in deployer.calls] == EXPECTED_ORDER
