"""Generation layers, one per pipeline phase."""

from .corridors import PrimarySpineLayer, SecondaryBranchLayer
from .partition import PartitionLayer
from .validation import ValidationLayer

__all__ = [
    "PartitionLayer",
    "PrimarySpineLayer",
    "SecondaryBranchLayer",
    "ValidationLayer",
]
