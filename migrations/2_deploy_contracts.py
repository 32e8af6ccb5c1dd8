"""Deploy the SimpleStorage and ERC1155 sample contracts."""

from deployment.artifacts import ArtifactRegistry
from deployment.config import DeploymentConfig

DEPLOYMENT_PLAN = (
    "SimpleStorage",
    "ERC1155",
    "ERC1155Mintable",
    "ERC1155MixedFungible",
    "ERC1155MixedFungibleMintable",
)


def run(deployer, artifacts=None):
    if artifacts is None:
        artifacts = ArtifactRegistry.from_config(DeploymentConfig.from_env())

    # resolve everything before the first transaction goes out
    contracts = [artifacts.require(name) for name in DEPLOYMENT_PLAN]

    for contract in contracts:
        deployer.deploy(contract)
