# ecc200/model/errors.py
# exception hierarchy for the DataMatrix model
# everything derives from ValueError so callers that only guard against
# bad input (the way the rest of the model raises) still catch these

from typing import Optional


class DataMatrixError(ValueError):
    """Base class for all DataMatrix encoding errors."""


class DataMatrixEncodingError(DataMatrixError):
    """Input cannot be represented in the requested compaction mode."""


class X12EncodingError(DataMatrixEncodingError):
    """Byte outside the X12 character set."""

    def __init__(self, byte: int, position: Optional[int] = None):
        msg = f"Unexpected byte 0x{byte:02x} in X12 encoding"
        if position is not None:
            msg += f" (input offset {position})"
        super().__init__(msg)
        self.byte = byte
        self.position = position


class CapacityExceededError(DataMatrixError):
    """Payload does not fit the largest symbol and truncation was disabled."""

    def __init__(self, length: int, capacity: int):
        super().__init__(
            f"{length} codewords exceed the largest symbol capacity of {capacity}"
        )
        self.length = length
        self.capacity = capacity


class DataMatrixStateError(DataMatrixError):
    """Builder used out of order (ECC before sizing, reuse after finalisation)."""


class GaloisFieldError(ValueError):
    """Field parameters do not describe GF(256) with a primitive generator."""
