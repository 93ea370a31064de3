from .builder import build_routes, per_path_amount, propagate
from .models import HtlcInstruction, Hop, Path, PaymentContext
from .paths import count_paths, group_by_path
from .tlv import decode_payment_data, encode_payment_data

__all__ = [
    "Hop",
    "HtlcInstruction",
    "Path",
    "PaymentContext",
    "build_routes",
    "count_paths",
    "decode_payment_data",
    "encode_payment_data",
    "group_by_path",
    "per_path_amount",
    "propagate",
]
