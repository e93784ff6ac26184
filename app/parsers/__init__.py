"""
app/parsers package marker.
"""

from app.parsers.tabular_decoder import DecodeResult, TabularDecoder, decode

__all__ = [
    "DecodeResult",
    "TabularDecoder",
    "decode",
]
