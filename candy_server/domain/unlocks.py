from dataclasses import dataclass

from candy_server.domain.levels import MAX_LEVEL, MIN_LEVEL

U64_MASK = (1 << 64) - 1


@dataclass(frozen=True)
class UnlockBitmap:
    """Set of playable levels stored as a 64-bit field (bit L-1 = level L).

    Bits are only ever added.
    """

    bits: int = 1

    def is_unlocked(self, level: int) -> bool:
        if level < 1 or level > 64:
            return False
        return bool(self.bits & (1 << (level - 1)))

    def unlock(self, level: int) -> "UnlockBitmap":
        if level < 1 or level > 64:
            raise ValueError(f"level {level} does not fit the unlock bitmap")
        return UnlockBitmap((self.bits | (1 << (level - 1))) & U64_MASK)

    def levels(self) -> list[int]:
        return [level for level in range(MIN_LEVEL, MAX_LEVEL + 1) if self.is_unlocked(level)]

    @classmethod
    def initial(cls) -> "UnlockBitmap":
        # level 1 is playable from creation
        return cls(1)
