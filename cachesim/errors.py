from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised for an invalid cache geometry or simulator configuration."""


class ParseError(ValueError):
    """Raised when a trace line does not match `<hex>:<R|W> <hex> <dec>`."""

    def __init__(self, line: str, line_number: int, order: int, reason: str = "malformed trace line"):
        self.line = line
        self.line_number = line_number
        self.order = order
        self.reason = reason
        super().__init__(f"{reason} at line {line_number} (order {order}): {line.rstrip()!r}")
