"""Database keys built from a position hash, a player and a date."""

import hashlib
from dataclasses import dataclass

from openingexplorer.date import Month, Year
from openingexplorer.stats import Color
from openingexplorer.user import UserId
from openingexplorer.variant import Variant

_MASK_128 = (1 << 128) - 1

# Zobrist hashes are far from cryptographically secure, so an attacker could
# craft positions that collide with another player's records. There is little
# incentive, so a cheap hash is used until that changes.
_VARIANT_SALT = {
    Variant.CHESS: 0,
    Variant.ANTICHESS: 0x44782FCE075483666C81899CB65921C9,
    Variant.ATOMIC: 0x66CCBD680F655D562689CA333C5E2A42,
    Variant.CRAZYHOUSE: 0x9D04DB38CA4D923D82FF24EB9530E986,
    Variant.HORDE: 0xC29DFB1076AA15186EFFD0D34CC60737,
    Variant.KING_OF_THE_HILL: 0xDFB25D5DF41FC5961E61F6B4BA613FBE,
    Variant.RACING_KINGS: 0x8E72F94307F96710B3910CF7E5808E0D,
    Variant.THREE_CHECK: 0xD19242BAE967B40E7856BD1C71AA4220,
}

KEY_SIZE = 14


@dataclass(frozen=True)
class KeyPrefix:
    """The position part of a key, before a date is appended."""

    prefix: bytes

    SIZE = 12

    def _with_u16(self, value: int) -> bytes:
        return self.prefix[: self.SIZE] + value.to_bytes(2, "big")

    def with_month(self, month: Month) -> bytes:
        return self._with_u16(month.value)

    def with_year(self, year: Year) -> bytes:
        return self._with_u16(year.value)


@dataclass(frozen=True)
class KeyBuilder:
    """A base hash that positions are mixed into."""

    base: int = 0

    @classmethod
    def player(cls, user: UserId, color: Color) -> "KeyBuilder":
        digest = hashlib.sha1()
        digest.update(color.char.encode("ascii"))
        digest.update(user.as_lowercase_str().encode("utf-8"))
        return cls(int.from_bytes(digest.digest()[:16], "little"))

    @classmethod
    def masters(cls) -> "KeyBuilder":
        return cls(0)

    @classmethod
    def lichess(cls) -> "KeyBuilder":
        return cls(0)

    def with_zobrist(self, variant: Variant, zobrist: int) -> KeyPrefix:
        mixed = (self.base ^ zobrist ^ _VARIANT_SALT[variant]) & _MASK_128
        return KeyPrefix(mixed.to_bytes(16, "little"))