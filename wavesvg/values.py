"""Tri-state value helpers: normalization, width validation and labels."""

from typing import Iterable, Optional

from .data_model import Signal, Time, TriState, Value, Vector
from .errors import MalformedTraceError, WidthMismatchError


def normalize(value: Value) -> Value:
    """Collapse a one-element vector to the equivalent scalar.

    Every other value is returned unchanged, so normalize is idempotent.
    """
    if isinstance(value, tuple) and len(value) == 1:
        return value[0]
    return value


def value_width(value: Value) -> int:
    """Number of bits carried by a value."""
    if isinstance(value, TriState):
        return 1
    return len(value)


def is_driven(bit: TriState) -> bool:
    """True for driven 0/1, False for unknown and high impedance."""
    return bit is TriState.V0 or bit is TriState.V1


def is_fully_driven(value: Vector) -> bool:
    return all(is_driven(bit) for bit in value)


def project_bit(value: Value, index: int) -> TriState:
    """Select one bit of a value; index 0 is the most significant bit."""
    if isinstance(value, TriState):
        return value
    return value[index]


def parse_bits(text: str, line: Optional[int] = None) -> Vector:
    """Parse a string of value characters ("01xz") into a vector."""
    bits = []
    for char in text:
        bit = TriState.from_char(char)
        if bit is None:
            raise MalformedTraceError(f"invalid value character {char!r} in {text!r}", line)
        bits.append(bit)
    return tuple(bits)


def bits_from_int(number: int, width: int) -> Vector:
    """Expand an unsigned integer to `width` bits, most significant first."""
    return tuple(TriState.V1 if c == '1' else TriState.V0 for c in format(number, f"0{width}b")[-width:])


def vector_to_int(value: Iterable[TriState]) -> int:
    """Interpret bits as an unsigned integer; X and Z count as 0."""
    result = 0
    for bit in value:
        result = result * 2 + (1 if bit is TriState.V1 else 0)
    return result


def format_vector_label(value: Vector) -> str:
    """Hexadecimal label of a bus value, e.g. "0xa" for 1010.

    The field width is len(value) // 4 and counts the "0x" prefix, so buses
    narrower than 16 bits get no zero padding at all and widths that are not a
    multiple of 4 are under-represented. Unknown bits render as 0.
    """
    digits = len(value) // 4
    return f"{vector_to_int(value):#0{max(digits, 1)}x}"


def validate(signal: Signal, time: Time, value: Value) -> Value:
    """Normalize a recorded value and check it against the declared width.

    Returns:
        The normalized value

    Raises:
        WidthMismatchError: If the normalized width is not signal.width
    """
    value = normalize(value)
    width = value_width(value)
    if width != signal.width:
        raise WidthMismatchError(time, signal.name, signal.width, width)
    return value
