"""GST arithmetic and tolerance checks.

Rounding follows the backend's JavaScript ``Math.round(x * 100) / 100``:
halves round toward positive infinity, on binary floats. Intra-state tax
is split into CGST and SGST, each rounded on its own, and the total is the
rounded sum of those rounded halves. That can differ by one paisa from
rounding the combined tax once; keep it that way for parity with amounts
the server computes.
"""

import math
from dataclasses import dataclass


def round_to_2_decimals(value: float) -> float:
    """Round to 2 decimals the way the API server does."""
    return math.floor(value * 100 + 0.5) / 100


def calculate_percentage(part: float, whole: float) -> float:
    if whole == 0:
        return 0
    return (part / whole) * 100


def is_within_tolerance(a: float, b: float, tolerance: float) -> bool:
    """True when |a - b| <= tolerance (inclusive)."""
    return abs(a - b) <= tolerance


@dataclass(frozen=True)
class IntraStateGST:
    cgst: float
    sgst: float
    total: float

    def as_dict(self) -> dict[str, float]:
        return {"cgst": self.cgst, "sgst": self.sgst, "total": self.total}


@dataclass(frozen=True)
class InterStateGST:
    igst: float
    total: float

    def as_dict(self) -> dict[str, float]:
        return {"igst": self.igst, "total": self.total}


def calculate_intra_state_gst(taxable_amount: float, gst_rate: float) -> IntraStateGST:
    """Split GST at ``gst_rate`` percent into equal CGST and SGST halves."""
    half_rate = gst_rate / 2
    cgst = round_to_2_decimals((taxable_amount * half_rate) / 100)
    sgst = round_to_2_decimals((taxable_amount * half_rate) / 100)
    return IntraStateGST(
        cgst=cgst,
        sgst=sgst,
        total=round_to_2_decimals(cgst + sgst),
    )


def calculate_inter_state_gst(taxable_amount: float, gst_rate: float) -> InterStateGST:
    """IGST at ``gst_rate`` percent."""
    igst = round_to_2_decimals((taxable_amount * gst_rate) / 100)
    return InterStateGST(igst=igst, total=igst)
