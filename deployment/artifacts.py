"""
Compiled contract artifacts.

Artifacts are the JSON files produced by the build step. Both the Truffle
layout (``build/contracts/<Name>.json``) and the Hardhat layout
(``artifacts/contracts/<Name>.sol/<Name>.json``) are understood.
"""

import os
import glob
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import ArtifactError, ArtifactNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """Compiled contract: interface plus creation bytecode"""
    name: str
    abi: List[Dict[str, Any]] = field(hash=False)
    bytecode: str
    source_path: str = ""

    @property
    def is_deployable(self) -> bool:
        # interfaces and abstract contracts compile to empty bytecode
        return self.bytecode not in ("", "0x")


class ArtifactRegistry:
    """Resolves contract names to artifacts under a build directory."""

    def __init__(self, build_dir: str):
        self.build_dir = build_dir
        self._cache: Dict[str, Artifact] = {}

    @classmethod
    def from_config(cls, config) -> "ArtifactRegistry":
        return cls(config.build_dir)

    def path_for(self, name: str) -> str:
        """
        Locate the artifact file for a contract name.

        Accepts a bare name (``ERC1155``) or a fully qualified Hardhat name
        (``contracts/ERC1155.sol:ERC1155``).

        Raises:
            ArtifactNotFoundError: if neither layout has the artifact
            ArtifactError: if a bare name matches more than one artifact
        """
        if ":" in name:
            source, contract_name = name.rsplit(":", 1)
            qualified_path = os.path.join(self.build_dir, source, f"{contract_name}.json")
            if os.path.isfile(qualified_path):
                return qualified_path
            raise ArtifactNotFoundError(
                f"Could not find artifact for {name} in {self.build_dir}. "
                f"Compile the contracts first."
            )

        flat_path = os.path.join(self.build_dir, f"{name}.json")
        if os.path.isfile(flat_path):
            return flat_path

        pattern = os.path.join(glob.escape(self.build_dir), "**", f"{name}.sol", f"{name}.json")
        matches = sorted(glob.glob(pattern, recursive=True))
        if len(matches) > 1:
            candidates = ", ".join(
                f"{os.path.dirname(os.path.relpath(m, self.build_dir))}:{name}" for m in matches
            )
            raise ArtifactError(
                f"Multiple artifacts named {name} in {self.build_dir}; "
                f"use a fully qualified name: {candidates}"
            )
        if matches:
            return matches[0]

        raise ArtifactNotFoundError(
            f"Could not find artifact for {name} in {self.build_dir}. "
            f"Compile the contracts first."
        )

    def require(self, name: str) -> Artifact:
        """Load (once) and return the artifact for a contract name."""
        if name in self._cache:
            return self._cache[name]

        path = self.path_for(name)
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ArtifactError(f"Could not read artifact {path}: {e}")

        if not isinstance(data, dict) or 'abi' not in data:
            raise ArtifactError(f"Artifact {path} has no ABI")

        bytecode = data.get('bytecode') or ""
        # solc standard JSON nests the bytecode object
        if isinstance(bytecode, dict):
            bytecode = bytecode.get('object', "")
        if bytecode and not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode

        artifact = Artifact(
            name=data.get('contractName', name.rsplit(":", 1)[-1]),
            abi=data['abi'],
            bytecode=bytecode,
            source_path=path,
        )
        logger.debug(f"Loaded artifact {artifact.name} from {path}")
        self._cache[name] = artifact
        return artifact
