"""Group parameters (N, g)."""

from dataclasses import InitVar, dataclass

from srp_pake.core.constants import MIN_MODULUS_BITS
from srp_pake.groups.validation import validate_group


@dataclass(frozen=True)
class GroupParameters:
    """An immutable SRP group.

    Attributes
    ----------
    name : str
        Human readable name ("2048", "custom", ...).
    N : int
        Safe prime modulus.
    g : int
        Generator modulo N.

    Parameters
    ----------
    min_bits : int, optional
        Smallest accepted modulus size when validating.

    Raises
    ------
    InvalidGroup
        If (N, g) fails validation.

    Notes
    -----
    Instances are shared across concurrent sessions and are never mutated.
    """

    name: str
    N: int
    g: int
    min_bits: InitVar[int] = MIN_MODULUS_BITS

    def __post_init__(self, min_bits: int) -> None:
        validate_group(self.N, self.g, min_bits=min_bits)

    def __repr__(self) -> str:
        return f"GroupParameters(name={self.name!r}, bits={self.bit_length}, g={self.g})"

    @property
    def bit_length(self) -> int:
        """Modulus size in bits."""
        return self.N.bit_length()

    @property
    def byte_length(self) -> int:
        """Width of the padded encoding of any value modulo N."""
        return (self.N.bit_length() + 7) // 8


def custom_group(
    N: int, g: int, name: str = "custom", min_bits: int = MIN_MODULUS_BITS
) -> GroupParameters:
    """Build and validate a caller-supplied group.

    Parameters
    ----------
    N : int
        Safe prime modulus.
    g : int
        Generator.
    name : str, optional
        Label used in logs.
    min_bits : int, optional
        Smallest accepted modulus size.

    Returns
    -------
    GroupParameters
        Validated group.

    Raises
    ------
    InvalidGroup
        If (N, g) fails validation.
    """
    return GroupParameters(name=name, N=N, g=g, min_bits=min_bits)
