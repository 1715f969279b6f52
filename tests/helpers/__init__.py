from .factories import mk_envelope, mk_keypair, mk_payment
from .parity import assert_hex_equal

__all__ = [
    "mk_envelope",
    "mk_keypair",
    "mk_payment",
    "assert_hex_equal",
]
