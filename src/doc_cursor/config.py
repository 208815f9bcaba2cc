"""CursorConfig and EqualityMode for cursor behaviour configuration.

CursorConfig is a frozen (immutable) dataclass shared by every cursor that
derives from one root.  EqualityMode selects how value-reference segments and
``remove`` payloads are matched against sequence elements.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto


class EqualityMode(StrEnum):
    """How sequence elements are compared to a reference value.

    - STRUCTURAL: Deep equality (mappings, sequences, numpy arrays), identity
                  as a fallback for values that cannot be compared.
    - IDENTITY:   Only the very same object matches (``is``).
    """

    STRUCTURAL = auto()
    IDENTITY = auto()


@dataclass(frozen=True, slots=True)
class CursorConfig:
    """Immutable configuration for a root cursor.

    Attributes:
        equality: Matching rule for value-reference segments and ``remove``.
        create_missing_keys: When True, ``set`` on a missing final key of an
            existing mapping creates the key.  When False it raises
            ``PathNotFoundError`` like every other operator.  Default True.
    """

    equality: EqualityMode = EqualityMode.STRUCTURAL
    create_missing_keys: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.equality, EqualityMode):
            msg = f"equality must be an EqualityMode, got {self.equality!r}"
            raise ValueError(msg)
        if not isinstance(self.create_missing_keys, bool):
            msg = (
                "create_missing_keys must be a bool, "
                f"got {type(self.create_missing_keys).__name__}"
            )
            raise ValueError(msg)


DEFAULT_CONFIG = CursorConfig()
