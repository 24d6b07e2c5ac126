"""Ordered class names of a classified raster."""

from dataclasses import dataclass
from typing import Sequence

from lucsmith.utils.errors import ParameterError


@dataclass(frozen=True)
class LabelSet:
    """Ordered, unique land-cover class names.

    A raster cell value ``v`` refers to ``names[v - index_base]``.

    Attributes:
        names: Class names in raster code order.
        index_base: Raster code of the first class, 1 (default) or 0.
    """

    names: tuple[str, ...]
    index_base: int = 1

    def __post_init__(self) -> None:
        """Validate LabelSet parameters."""
        if isinstance(self.names, str):
            raise ValueError("names must be a sequence of class names, not a string")
        names = tuple(str(name) for name in self.names)
        if len(names) == 0:
            raise ValueError("LabelSet must contain at least one class name")
        if len(set(names)) != len(names):
            raise ValueError(f"Class names must be unique, got {list(names)}")
        if self.index_base not in (0, 1):
            raise ValueError(f"index_base must be 0 or 1, got {self.index_base}")
        object.__setattr__(self, "names", names)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def code_of(self, name: str) -> int:
        """Raster value of a class name.

        Raises:
            ParameterError: If the class is not part of the label set.
        """
        try:
            return self.names.index(name) + self.index_base
        except ValueError:
            raise ParameterError(
                f"Class '{name}' is not part of the label set",
                suggestion=f"Use one of: {', '.join(self.names)}",
            ) from None

    def name_of(self, code: int) -> str:
        """Class name of a raster value.

        Raises:
            ParameterError: If the value is not a valid class position.
        """
        position = int(code) - self.index_base
        if position < 0 or position >= len(self.names):
            raise ParameterError(
                f"Raster value {code} does not map to a class "
                f"(valid range {self.index_base}..{len(self.names) - 1 + self.index_base})"
            )
        return self.names[position]

    @classmethod
    def from_sequence(cls, names: Sequence[str], index_base: int = 1) -> "LabelSet":
        """Create a label set from any sequence of names."""
        return cls(names=tuple(names), index_base=index_base)

    def __repr__(self) -> str:
        """String representation."""
        return f"LabelSet(names={list(self.names)}, index_base={self.index_base})"
