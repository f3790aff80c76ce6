"""QR Code to SVG encoding toolkit."""

from .errors import InvalidInput, PayloadTooLarge, QrCodeError
from .generator import download_filename, encode_text, generate_qr, matrix_from_text
from .svg import qr_matrix_to_svg

__all__ = [
    "InvalidInput",
    "PayloadTooLarge",
    "QrCodeError",
    "download_filename",
    "encode_text",
    "generate_qr",
    "matrix_from_text",
    "qr_matrix_to_svg",
]
