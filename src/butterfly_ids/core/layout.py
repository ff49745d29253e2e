"""Bit layout of issued identifiers.

An id is a non-negative 64-bit signed integer built from four fields,
most significant first::

    | 0 | timestamp (41) | high sequence (8) | machine (13) | low sequence (1) |

The low sequence is capped at 9 rather than at its bit-width maximum of 1,
so low-sequence values 2-9 share bits 1-3 with the machine field. Callers
that need exact decomposition should use machine ids that are multiples of 8.
"""

from __future__ import annotations

from typing import Final, NamedTuple

TIMESTAMP_BITS: Final[int] = 41
HIGH_SEQUENCE_BITS: Final[int] = 8
MACHINE_BITS: Final[int] = 13
LOW_SEQUENCE_BITS: Final[int] = 1


def _max_for_width(width: int) -> int:
    """Return the largest unsigned value representable in ``width`` bits."""
    return (1 << width) - 1


TIMESTAMP_MAX: Final[int] = _max_for_width(TIMESTAMP_BITS)
HIGH_SEQUENCE_MAX: Final[int] = _max_for_width(HIGH_SEQUENCE_BITS)
MACHINE_MAX: Final[int] = _max_for_width(MACHINE_BITS)
# Decimal digit ceiling, wider than LOW_SEQUENCE_BITS allows.
LOW_SEQUENCE_MAX: Final[int] = 9

MACHINE_SHIFT: Final[int] = LOW_SEQUENCE_BITS
HIGH_SEQUENCE_SHIFT: Final[int] = MACHINE_BITS + LOW_SEQUENCE_BITS
TIMESTAMP_SHIFT: Final[int] = HIGH_SEQUENCE_BITS + MACHINE_BITS + LOW_SEQUENCE_BITS

# Bits 0-3 hold every low-sequence value from 0 to LOW_SEQUENCE_MAX.
_LOW_SEQUENCE_SPAN: Final[int] = _max_for_width(LOW_SEQUENCE_MAX.bit_length())
_LOW_FIELD_MASK: Final[int] = _max_for_width(HIGH_SEQUENCE_SHIFT)


class IdFields(NamedTuple):
    """The composite counter behind one issued id."""

    timestamp: int
    high_sequence: int
    machine: int
    low_sequence: int


def pack(timestamp: int, high_sequence: int, machine: int, low_sequence: int) -> int:
    """Combine the four fields into a single integer id.

    Args:
        timestamp: Millisecond counter, at most ``TIMESTAMP_MAX``.
        high_sequence: Secondary counter, at most ``HIGH_SEQUENCE_MAX``.
        machine: Instance discriminator, at most ``MACHINE_MAX``.
        low_sequence: Primary counter, at most ``LOW_SEQUENCE_MAX``.

    Returns:
        The packed id. Fields are OR-ed together, so overlapping low bits are
        not separated.
    """
    return (
        timestamp << TIMESTAMP_SHIFT
        | high_sequence << HIGH_SEQUENCE_SHIFT
        | machine << MACHINE_SHIFT
        | low_sequence
    )


def decompose(packed_id: int, machine: int | None = None) -> IdFields:
    """Split an id back into its fields.

    Args:
        packed_id: An id produced by :func:`pack`.
        machine: The machine id of the issuing instance, if known. With it the
            low sequence is read from bits 0-3 minus the machine's own bits;
            without it every field is read at its allocated bit width.

    Returns:
        The recovered fields.

    Raises:
        ValueError: If ``packed_id`` is negative.
    """
    if packed_id < 0:
        raise ValueError(f"id[{packed_id}] can't be negative")

    timestamp = packed_id >> TIMESTAMP_SHIFT
    high_sequence = (packed_id >> HIGH_SEQUENCE_SHIFT) & HIGH_SEQUENCE_MAX
    if machine is None:
        machine = (packed_id >> MACHINE_SHIFT) & MACHINE_MAX
        low_sequence = packed_id & _max_for_width(LOW_SEQUENCE_BITS)
    else:
        machine_bits = (machine << MACHINE_SHIFT) & _LOW_FIELD_MASK
        low_sequence = packed_id & _LOW_SEQUENCE_SPAN & ~machine_bits
    return IdFields(timestamp, high_sequence, machine, low_sequence)
