"""Source of registration time and sequence numbers."""
import time

SEQUENCE_KEY = "SEQ"
MAX_SEQUENCE = 2**32 - 1


class Ledger:
    def timestamp(self) -> int:
        raise NotImplementedError

    def sequence(self, tx) -> int:
        raise NotImplementedError


class SystemLedger(Ledger):
    """Wall clock plus a persisted sequence that advances once per call."""

    def timestamp(self) -> int:
        return int(time.time())

    def sequence(self, tx) -> int:
        current = int(tx.get(SEQUENCE_KEY) or 0)
        if current >= MAX_SEQUENCE:
            raise OverflowError("Ledger sequence exhausted")
        tx.set(SEQUENCE_KEY, current + 1)
        return current + 1


class FixedLedger(Ledger):
    def __init__(self, timestamp: int = 0, sequence: int = 0):
        self._timestamp = timestamp
        self._sequence = sequence

    def advance(self, seconds: int = 1, blocks: int = 1) -> None:
        self._timestamp += seconds
        self._sequence += blocks

    def timestamp(self) -> int:
        return self._timestamp

    def sequence(self, tx) -> int:
        return self._sequence
