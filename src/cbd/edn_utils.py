"""Diagnostic notation output through cbor-diag.

Diagnostic notation keeps tags and byte strings that the JSON rendering
maps away, so it is the lossless view of a decoded item.
"""

import cbor_diag  # type: ignore[import-untyped]


class DiagnosticError(ValueError):
    """Raised when cbor-diag cannot render an item."""


def cbor_to_diag(cbor_data: bytes) -> str:
    """Render a single CBOR item as diagnostic notation.

    Args:
        cbor_data: CBOR encoded bytes

    Returns:
        Diagnostic notation without surrounding whitespace

    Raises:
        DiagnosticError: If cbor-diag rejects the item
    """
    try:
        diag = cbor_diag.cbor2diag(cbor_data)
    except Exception as e:
        raise DiagnosticError(f"cbor-diag could not render {len(cbor_data)} bytes") from e
    return str(diag).strip()
