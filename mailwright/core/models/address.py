"""Mailbox value objects and recipient normalisation.

Recipients arrive in several shapes: a bare address string, an
``Address``, a mapping with ``email`` and optional ``name`` keys, or a
list mixing any of those. They are resolved once, at message
construction, into a tuple of ``Address``.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

AddressLike = Union[str, "Address", Mapping[str, Optional[str]]]
AddressInput = Union[AddressLike, Sequence[AddressLike], None]


@dataclass(frozen=True)
class Address:
    """A single mailbox. The email is kept exactly as given."""

    email: str
    name: Optional[str] = None

    def format(self) -> str:
        """Render as ``name <email>``, or the bare email without a name."""
        if self.name:
            return f"{self.name} <{self.email}>"
        return self.email

    @property
    def domain(self) -> str:
        """Part after the last ``@`` (the whole value when there is none)."""
        return self.email.rpartition("@")[2]

    def __str__(self) -> str:
        return self.format()


def to_address(value: AddressLike) -> Address:
    """Resolve one address-like value."""
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address(email=value)
    if isinstance(value, Mapping) and "email" in value:
        return Address(email=value["email"], name=value.get("name"))
    raise TypeError(f"Cannot build an address from {type(value).__name__}")


def normalize_addresses(value: AddressInput) -> Optional[Tuple[Address, ...]]:
    """Resolve any accepted recipient shape into an ordered address tuple.

    Args:
        value: None, a single address-like value, or a list/tuple of them

    Returns:
        Tuple of Address in input order, or None when the input is absent
        or empty
    """
    if not value:
        return None

    if isinstance(value, (str, Address, Mapping)):
        return (to_address(value),)

    addresses = tuple(to_address(item) for item in value)
    return addresses or None


def format_address_list(addresses: Iterable[Address]) -> str:
    """Join addresses for a To/CC header."""
    return ", ".join(address.format() for address in addresses)
