"""FeliCa status flag data model."""

from dataclasses import dataclass

from .constants import SUCCESS_STATUS, TERMINAL_STATUS

S1_DESCRIPTIONS = {
    0x00: "Success",
    0xFF: "Error (no block list)",
}

S2_DESCRIPTIONS = {
    # common
    0x00: "Success",
    0x01: "Purse data under/overflow",
    0x02: "Cashback data exceeded",
    0x70: "Memory error",
    0x71: "Memory warning",
    # card-specific
    0xA1: "Illegal Number of Service",
    0xA2: "Illegal command packet (specified Number of Block)",
    0xA3: "Illegal Block List (specified order of Service)",
    0xA4: "Illegal Service type",
    0xA5: "Access is not allowed",
    0xA6: "Illegal Service Code List",
    0xA7: "Illegal Block List (access mode)",
    0xA8: "Illegal Block Number (access to the specified data is inhibited)",
    0xA9: "Data write failure",
    0xAA: "Key-change failure",
    0xAB: "Illegal Package Parity or Illegal Package MAC",
    0xAC: "Illegal parameter",
    0xAD: "Service exists already",
    0xAE: "Illegal System Code",
    0xAF: "Too many simultaneous cyclic write operations",
    0xC0: "Illegal Package Identifier",
    0xC1: "Discrepancy of parameters inside and outside Package",
    0xC2: "Command is disabled already",
}


@dataclass(frozen=True)
class StatusCode:
    """Status flags (S1, S2) returned by every FeliCa command."""

    s1: int  # Status flag 1, 0xFF when the error is not tied to a block
    s2: int  # Status flag 2, detailed error code

    def __post_init__(self) -> None:
        for name in ("s1", "s2"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} must be a single byte, got {value!r}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "StatusCode":
        """Build a status code from the two status bytes of a response."""
        if len(data) != 2:
            raise ValueError(f"expected 2 status bytes, got {len(data)}")
        return cls(data[0], data[1])

    def is_success(self) -> bool:
        return (self.s1, self.s2) == SUCCESS_STATUS

    def is_terminal(self) -> bool:
        """Whether the card reported that the addressed block does not exist.

        The history read loop treats this as the end of the data. Only the
        two flags decide it, so no service argument is needed.
        """
        return (self.s1, self.s2) == TERMINAL_STATUS

    def describe(self) -> str:
        """Return a human readable description of both status flags."""
        s1_text = S1_DESCRIPTIONS.get(self.s1, "Error (block list)")
        s2_text = S2_DESCRIPTIONS.get(self.s2, "Unknown")
        return f"{s1_text}: {s2_text}"

    def __str__(self) -> str:
        return f"[{self.s1:02X}:{self.s2:02X}] {self.describe()}"
