"""
K value parsing

A k value is given either as a single number ("5"), an inclusive range
("3-10") or an inclusive range with a step ("2-10,3"). The high bound is
stored exclusive so that iteration maps directly onto ``range``.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


def _parse_int(text: str, error: str) -> int:
    text = text.strip()

    # int() would also accept "+3" or "-0"
    if not text.isdecimal():
        raise ValueError(error)

    return int(text)


@dataclass(frozen=True)
class KValue:
    """Represents the k value (or range of k values) to use for calculations."""

    low: int
    high: int
    step: int = 1

    @staticmethod
    def _parse_range(given: str) -> Optional[Tuple[int, int]]:
        if '-' not in given:
            return None

        low, high = given.split('-', 1)
        low = _parse_int(low, "failed to parse low value for k range")
        high = _parse_int(high, "failed to parse high value for k range")

        if low == 0:
            raise ValueError("low value for k range cannot be 0")

        if low > high:
            raise ValueError("low value for k range cannot be greater than the high value")

        return low, high + 1

    @classmethod
    def parse(cls, given: str) -> 'KValue':
        """
        Parse a k value from text.

        Args:
            given: "<n>", "<low>-<high>" or "<low>-<high>,<step>"

        Returns:
            Parsed KValue

        Raises:
            ValueError: If the text is malformed or any bound is invalid
        """
        given = given.strip()

        if ',' in given:
            range_text, step = given.split(',', 1)
            step = _parse_int(step, "failed to parse step size for k value")

            if step == 0:
                raise ValueError("step size must be larger than 0")

            bounds = cls._parse_range(range_text)

            if bounds is None:
                raise ValueError("you must specify a range when using a k range")

            return cls(bounds[0], bounds[1], step)

        bounds = cls._parse_range(given)

        if bounds is not None:
            return cls(bounds[0], bounds[1], 1)

        value = _parse_int(given, "invalid k value specified")

        if value == 0:
            raise ValueError("k value cannot be 0")

        return cls(value, value + 1, 1)

    @property
    def is_range(self) -> bool:
        return self.high - self.low > 1

    def get_range(self, total: int) -> range:
        """
        Return the k values to evaluate given the number of available records.

        The exclusive high bound is clamped to ``total``.
        """
        return range(self.low, min(total, self.high), self.step)

    def __str__(self) -> str:
        if not self.is_range and self.step == 1:
            return str(self.low)
        if self.step == 1:
            return f"{self.low}-{self.high - 1}"
        return f"{self.low}-{self.high - 1},{self.step}"
