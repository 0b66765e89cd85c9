"""Token checks run by the analysis orchestrator.

In execution order:
  - HP-ERC20      ERC20 metadata read
  - HP-BYTECODE   opcode pattern heuristics
  - HP-OWNER      ownership classification
  - HP-LIQUIDITY  pair lookup and buy simulation
  - HP-SIZE       EIP-170 size check
"""

from honeyscan.analyzer.checks.bytecode import BytecodeHeuristicsCheck
from honeyscan.analyzer.checks.liquidity import LiquidityCheck
from honeyscan.analyzer.checks.metadata import TokenMetadataCheck
from honeyscan.analyzer.checks.ownership import OwnershipCheck
from honeyscan.analyzer.checks.size import ContractSizeCheck

__all__ = [
    "TokenMetadataCheck",
    "BytecodeHeuristicsCheck",
    "OwnershipCheck",
    "LiquidityCheck",
    "ContractSizeCheck",
]
