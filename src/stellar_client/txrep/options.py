"""
TxRep rendering options.
"""

from __future__ import annotations
from pydantic import BaseModel, Field


class TxRepOptions(BaseModel):
    """
    Options for ``to_txrep``.

    Annotations are informational only: the parser strips everything from the
    first ``(`` outside a quoted string, so annotated and plain text decode to
    the same envelope.
    """
    annotations: bool = Field(False, description="Append decimal amounts and UTC times")
    amount_decimals: int = Field(7, alias="amountDecimals", ge=0, le=7,
                                 description="Decimal places of annotated amounts")

    model_config = {"populate_by_name": True, "frozen": True}


DEFAULT_OPTIONS = TxRepOptions()
