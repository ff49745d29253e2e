"""Thread-safe issuer of strictly increasing 64-bit ids.

The issuer keeps a composite counter of four fields (see
:mod:`butterfly_ids.core.layout`) and advances it like an odometer: the low
sequence rolls into the high sequence, which rolls into the timestamp. Once
seeded, the timestamp is a logical clock and is never re-read from the wall.
"""

from __future__ import annotations

import logging
import threading
from functools import lru_cache

from butterfly_ids.core import layout
from butterfly_ids.core.layout import IdFields
from butterfly_ids.core.settings import Settings, settings
from butterfly_ids.utils import clock

logger = logging.getLogger(__name__)


class IssuerError(RuntimeError):
    """Base error raised by the issuer."""


class OutOfRangeError(IssuerError, ValueError):
    """Raised when a seed timestamp or machine id does not fit its field."""


class InvariantViolationError(IssuerError):
    """Raised when the issuer's machine id is found out of range while issuing."""


class ExhaustedError(IssuerError):
    """Raised once every field of the composite counter is saturated."""


def _check_timestamp(timestamp: int) -> None:
    if not 0 <= timestamp <= layout.TIMESTAMP_MAX:
        raise OutOfRangeError(
            f"timestamp[{timestamp}] can't be more than the max[{layout.TIMESTAMP_MAX}] "
            "of timestamp or negative"
        )


def _check_machine(machine: int) -> None:
    if not 0 <= machine <= layout.MACHINE_MAX:
        raise OutOfRangeError(
            f"machine[{machine}] can't be more than the max[{layout.MACHINE_MAX}] "
            "of machine or negative"
        )


class Issuer:
    """Issue ids from a seeded composite counter.

    Low sequence values above 1 spill into the three lowest machine bits, so
    ids are unique and strictly increasing only for machine ids that are
    multiples of 8. Other machine ids can repeat an id within one instance.
    Multiples of 8 also keep ids from different instances apart.
    """

    def __init__(self, timestamp: int, machine: int = 0) -> None:
        _check_machine(machine)
        _check_timestamp(timestamp)
        self._lock = threading.Lock()
        self._timestamp = timestamp
        self._high_sequence = 0
        self._machine = machine
        self._low_sequence = 0
        logger.debug("Issuer created with timestamp=%s machine=%s", timestamp, machine)

    @classmethod
    def create(cls, timestamp: int) -> Issuer:
        """Return an issuer for machine 0 seeded with ``timestamp`` milliseconds.

        Raises:
            OutOfRangeError: If ``timestamp`` does not fit in 41 bits.
        """
        _check_timestamp(timestamp)
        return cls.create_with_machine(timestamp, 0)

    @classmethod
    def create_with_machine(cls, timestamp: int, machine: int) -> Issuer:
        """Return an issuer for ``machine`` seeded with ``timestamp`` milliseconds.

        The machine id is validated before the timestamp, so its error wins
        when both are out of range.

        Raises:
            OutOfRangeError: If ``machine`` does not fit in 13 bits or
                ``timestamp`` does not fit in 41 bits.
        """
        return cls(timestamp, machine)

    @classmethod
    def create_now(cls, machine: int = 0) -> Issuer:
        """Return an issuer seeded from the current wall-clock time."""
        return cls.create_with_machine(clock.now_millis(), machine)

    @property
    def machine(self) -> int:
        """The machine id packed into every issued id."""
        return self._machine

    @property
    def timestamp(self) -> int:
        """The current value of the logical timestamp field."""
        return self._timestamp

    @property
    def state(self) -> IdFields:
        """Return a consistent snapshot of the composite counter."""
        with self._lock:
            return IdFields(
                self._timestamp,
                self._high_sequence,
                self._machine,
                self._low_sequence,
            )

    def generate(self) -> int:
        """Advance the composite counter by one and return the packed id.

        Raises:
            InvariantViolationError: If the machine id was pushed out of range
                after construction. The counter is left untouched.
            ExhaustedError: If timestamp, high sequence and low sequence are
                all at their maximum. Every later call raises it again.
        """
        with self._lock:
            if self._low_sequence < layout.LOW_SEQUENCE_MAX:
                self._low_sequence += 1
            else:
                if self._machine > layout.MACHINE_MAX:
                    raise InvariantViolationError(
                        f"the machine[{self._machine}] can't be bigger than the "
                        f"max[{layout.MACHINE_MAX}] of machine"
                    )
                if self._high_sequence < layout.HIGH_SEQUENCE_MAX:
                    self._high_sequence += 1
                elif self._timestamp < layout.TIMESTAMP_MAX:
                    self._timestamp += 1
                    self._high_sequence = 0
                else:
                    raise ExhaustedError("no more id")
                self._low_sequence = 0

            return layout.pack(
                self._timestamp,
                self._high_sequence,
                self._machine,
                self._low_sequence,
            )

    def generate_batch(self, count: int) -> list[int]:
        """Return ``count`` ids in issuance order.

        A failure on any id discards the ids collected so far and re-raises
        the underlying error. ``count <= 0`` yields an empty list.
        """
        ids: list[int] = []
        for _ in range(count):
            ids.append(self.generate())
        return ids

    def decompose(self, packed_id: int) -> IdFields:
        """Split an id issued by this instance back into its fields."""
        return layout.decompose(packed_id, machine=self._machine)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(timestamp={self._timestamp}, machine={self._machine})"


def build_issuer(config: Settings) -> Issuer:
    """Return a new issuer seeded from ``config``."""
    timestamp = config.seed_timestamp
    if timestamp is None:
        return Issuer.create_now(config.machine_id)
    return Issuer.create_with_machine(timestamp, config.machine_id)


@lru_cache(maxsize=1)
def get_issuer() -> Issuer:
    """Return the process-wide issuer built from the active settings."""
    issuer = build_issuer(settings)
    logger.info(
        "Process issuer ready (machine=%s, seed=%s, from_clock=%s)",
        issuer.machine,
        issuer.timestamp,
        settings.seeds_from_clock,
    )
    return issuer
