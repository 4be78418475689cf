from typing import Dict

OPPORTUNITY_PREFIX = "O"
APPLICATION_PREFIX = "A"
WITHDRAWAL_PREFIX = "W"
REGISTRATION_PREFIX = "REG"


class IdGenerator:
    """Prefix + zero-padded counter ids (``O001``, ``REG012``), one counter per prefix."""

    def __init__(self, width: int = 3):
        self.width = width
        self._counters: Dict[str, int] = {}

    def new_id(self, prefix: str) -> str:
        if not prefix or not prefix.strip():
            raise ValueError("Prefix cannot be blank")
        prefix = prefix.strip().upper()
        self._counters[prefix] = self._counters.get(prefix, 0) + 1
        return f"{prefix}{self._counters[prefix]:0{self.width}d}"

    def seed(self, prefix: str, current_max: int) -> None:
        """Continue numbering after ``current_max`` (never moves a counter backwards)."""
        if not prefix or not prefix.strip():
            return
        prefix = prefix.strip().upper()
        self._counters[prefix] = max(self._counters.get(prefix, 0), current_max)
