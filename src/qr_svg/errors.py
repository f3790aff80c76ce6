"""Errors raised while encoding text into a QR symbol."""

from __future__ import annotations


class QrCodeError(ValueError):
    """Base class for encoding failures."""


class InvalidInput(QrCodeError):
    """The text is missing, empty after trimming, or not encodable as UTF-8."""


class PayloadTooLarge(QrCodeError):
    """The encoded payload does not fit in the largest supported version."""

    def __init__(self, length: int, capacity: int) -> None:
        super().__init__(
            f"payload of {length} bytes exceeds the maximum capacity of {capacity} bytes"
        )
        self.length = length
        self.capacity = capacity
