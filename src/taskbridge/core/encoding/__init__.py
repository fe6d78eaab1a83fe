"""Wire encoders for data points."""

from taskbridge.core.encoding.line_protocol import encode_lines, encode_point

__all__ = ["encode_lines", "encode_point"]
