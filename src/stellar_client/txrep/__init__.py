"""
TxRep (SEP-0011) transcoder.

Key components:
- encoder.py: to_txrep, envelope -> ``dotted.path: value`` lines
- decoder.py: from_txrep, lines -> envelope with path-carrying errors
- options.py: TxRepOptions (annotations, amount precision)
"""

from typing import Optional

from ..xdr.transaction import TransactionEnvelope
from .decoder import TxRepDecoder, from_txrep, parse_lines
from .encoder import TxRepEncoder, to_txrep
from .options import DEFAULT_OPTIONS, TxRepOptions


def txrep_from_xdr_base64(envelope_b64: str, options: Optional[TxRepOptions] = None) -> str:
    """Render a base64 XDR envelope as TxRep."""
    return to_txrep(TransactionEnvelope.from_xdr_base64(envelope_b64), options)


def xdr_base64_from_txrep(text: str) -> str:
    """Parse TxRep and return the envelope as base64 XDR."""
    return from_txrep(text).to_xdr_base64()


__all__ = [
    "DEFAULT_OPTIONS",
    "TxRepDecoder",
    "TxRepEncoder",
    "TxRepOptions",
    "from_txrep",
    "parse_lines",
    "to_txrep",
    "txrep_from_xdr_base64",
    "xdr_base64_from_txrep",
]
