"""Typed records for API payloads.

The server speaks camelCase JSON; records use snake_case attributes.
``from_dict`` maps keys, ignores anything unknown and leaves missing
optional fields at their defaults, so older or newer servers still parse.
Nested objects (``vendor``, ``invoice``, ``gstEntry`` ...) stay plain dicts.
Dates are kept as the ISO strings the server sent.

Example:

    page = Page.from_payload(resp.data, "vendors", Vendor)
    for v in page.items:
        print(v.name, v.gstin)
"""

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

# --- Enumerations (wire values) ---

USER_ROLES = ("ADMIN", "ACCOUNTANT", "VIEWER")

DOCUMENT_TYPES = (
    "PURCHASE_ORDER",
    "PURCHASE_INVOICE",
    "SALES_INVOICE",
    "BANK_STATEMENT",
    "GST_RETURN",
    "CREDIT_DEBIT_NOTE",
    "INVENTORY_UPLOAD",
    "VENDOR_MASTER",
    "CUSTOMER_MASTER",
    "OTHER",
)

PROCESSING_STATUSES = ("PENDING", "PROCESSING", "COMPLETED", "FAILED")

INVOICE_STATUSES = (
    "PENDING",
    "PROCESSING",
    "EXTRACTED",
    "VERIFIED",
    "MATCHED",
    "DISPUTED",
    "CLOSED",
)

PAYMENT_STATUSES = ("UNPAID", "PARTIALLY_PAID", "PAID", "OVERPAID")

MATCH_TYPES = (
    "EXACT",
    "PARTIAL_QTY",
    "PARTIAL_VALUE",
    "PARTIAL_BOTH",
    "NO_MATCH",
    "MANUAL",
)

GST_RETURN_TYPES = ("GSTR1", "GSTR2A", "GSTR2B", "GSTR3B")

ITC_STATUSES = ("AVAILABLE", "NOT_FILED", "MISMATCH", "REVERSED", "INELIGIBLE")

RECON_RUN_TYPES = (
    "PO_INVOICE",
    "INVOICE_PAYMENT",
    "GST_RECONCILIATION",
    "VENDOR_LEDGER",
    "CUSTOMER_LEDGER",
    "INVENTORY",
    "FULL",
)

DISCOUNT_TERM_TYPES = (
    "TRADE_DISCOUNT",
    "CASH_DISCOUNT",
    "VOLUME_REBATE",
    "LATE_PAYMENT_PENALTY",
    "LATE_DELIVERY_PENALTY",
    "SPECIAL_SCHEME",
)

NOTE_TYPES = (
    "CREDIT_NOTE_RECEIVED",
    "DEBIT_NOTE_ISSUED",
    "CREDIT_NOTE_ISSUED",
    "DEBIT_NOTE_RECEIVED",
)

NOTE_STATUSES = ("PENDING", "ADJUSTED", "DISPUTED")

REMINDER_STATUSES = ("PENDING", "SENT", "PAYMENT_RECEIVED", "ESCALATED")

INVOICE_TYPES = ("purchase", "sales")


def camel_to_snake(name: str) -> str:
    """'gstEntry' -> 'gst_entry', 'totalITCValue' -> 'total_itc_value'."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


R = TypeVar("R", bound="Record")


@dataclass
class Record:
    """Base for all payload records."""

    # Wire keys that camel_to_snake does not map onto the attribute name
    _aliases: ClassVar[dict[str, str]] = {}

    @classmethod
    def from_dict(cls: type[R], payload: dict[str, Any] | None) -> R:
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise TypeError(
                f"{cls.__name__}.from_dict expects a dict, got {type(payload).__name__}"
            )
        names = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in payload.items():
            attr = cls._aliases.get(key) or camel_to_snake(key)
            if attr in names:
                kwargs[attr] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


# ---------------------------------------------------------------------------
# Master data
# ---------------------------------------------------------------------------


@dataclass
class Vendor(Record):
    id: str = ""
    name: str = ""
    gstin: str | None = None
    pan: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    contact_person: str | None = None
    payment_terms_days: int | None = None
    erp_vendor_code: str | None = None
    is_active: bool = True
    created_at: str | None = None


@dataclass
class Customer(Record):
    id: str = ""
    name: str = ""
    gstin: str | None = None
    pan: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    payment_terms_days: int | None = None
    credit_limit: float | None = None
    is_active: bool = True
    created_at: str | None = None


@dataclass
class SKU(Record):
    id: str = ""
    sku_code: str = ""
    name: str = ""
    description: str | None = None
    hsn_code: str | None = None
    unit: str = "PCS"
    gst_rate: float | None = None
    category: str | None = None
    sub_category: str | None = None
    aliases: list[str] = field(default_factory=list)
    is_active: bool = True


@dataclass
class UploadedFile(Record):
    id: str = ""
    file_name: str = ""
    original_name: str = ""
    mime_type: str = ""
    file_size: int = 0
    document_type: str = "OTHER"
    processing_status: str = "PENDING"
    uploaded_at: str | None = None
    created_at: str | None = None


# ---------------------------------------------------------------------------
# Reconciliation modules
# ---------------------------------------------------------------------------


@dataclass
class BankTransaction(Record):
    id: str = ""
    transaction_date: str = ""
    description: str = ""
    reference_number: str | None = None
    debit: float | None = None
    credit: float | None = None
    balance: float | None = None
    match_status: str = "UNMATCHED"
    statement: dict[str, Any] | None = None

    @property
    def amount(self) -> float:
        """Signed amount: credits positive, debits negative."""
        return (self.credit or 0) - (self.debit or 0)


@dataclass
class PaymentMatch(Record):
    id: str = ""
    bank_transaction: dict[str, Any] | None = None
    purchase_invoice: dict[str, Any] | None = None
    sales_invoice: dict[str, Any] | None = None
    matched_amount: float = 0.0
    match_type: str = ""
    created_at: str | None = None


@dataclass
class GSTMatch(Record):
    id: str = ""
    match_type: str = ""
    match_score: float = 0.0
    value_diff: float | None = None
    gst_diff: float | None = None
    itc_status: str | None = None
    created_at: str | None = None
    gst_entry: dict[str, Any] = field(default_factory=dict)
    purchase_invoice: dict[str, Any] | None = None


@dataclass
class POInvoiceMatch(Record):
    id: str = ""
    match_type: str = ""
    match_score: float = 0.0
    qty_match: bool = False
    value_match: bool = False
    gst_match: bool = False
    created_at: str | None = None
    resolved_at: str | None = None
    invoice: dict[str, Any] = field(default_factory=dict)
    po: dict[str, Any] = field(default_factory=dict)


@dataclass
class DiscountAudit(Record):
    id: str = ""
    invoice_id: str = ""
    expected_discount: float = 0.0
    actual_discount: float = 0.0
    difference: float = 0.0
    status: str = ""
    notes: str | None = None
    created_at: str | None = None
    invoice: dict[str, Any] = field(default_factory=dict)


@dataclass
class DiscountTerm(Record):
    id: str = ""
    vendor_id: str = ""
    term_type: str = ""
    description: str = ""
    flat_percent: float | None = None
    flat_amount: float | None = None
    slabs: list[Any] = field(default_factory=list)
    min_order_value: float | None = None
    payment_within_days: int | None = None
    late_payment_penalty_percent: float | None = None
    late_delivery_penalty_per_day: float | None = None
    valid_from: str | None = None
    valid_to: str | None = None
    is_active: bool = True
    vendor: dict[str, Any] | None = None


@dataclass
class InventorySnapshot(Record):
    id: str = ""
    sku_id: str = ""
    snapshot_date: str = ""
    opening_qty: float = 0
    purchased_qty: float = 0
    sold_qty: float = 0
    adjustment_qty: float = 0
    closing_qty: float = 0
    expected_closing: float = 0
    discrepancy: float = 0
    notes: str | None = None
    created_at: str | None = None
    sku: dict[str, Any] | None = None


@dataclass
class PaymentReminder(Record):
    id: str = ""
    customer_id: str = ""
    sales_invoice_id: str = ""
    reminder_number: int = 1
    due_amount: float = 0.0
    days_overdue: int = 0
    status: str = "PENDING"
    sent_at: str | None = None
    created_at: str | None = None
    customer: dict[str, Any] | None = None
    sales_invoice: dict[str, Any] | None = None


@dataclass
class VendorConfirmation(Record):
    id: str = ""
    vendor_id: str = ""
    period_from: str = ""
    period_to: str = ""
    our_balance: float = 0.0
    vendor_balance: float | None = None
    difference: float | None = None
    status: str = "PENDING"
    sent_at: str | None = None
    responded_at: str | None = None
    response_notes: str | None = None
    created_at: str | None = None
    vendor: dict[str, Any] | None = None


@dataclass
class CreditDebitNote(Record):
    id: str = ""
    note_type: str = ""
    note_number: str = ""
    note_date: str = ""
    vendor_id: str | None = None
    customer_id: str | None = None
    reason: str | None = None
    original_invoice_ref: str | None = None
    total_amount: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0
    total_with_gst: float = 0.0
    status: str = "PENDING"
    created_at: str | None = None
    vendor: dict[str, Any] | None = None
    customer: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@dataclass
class GSTStats(Record):
    total_matches: int = 0
    exact_matches: int = 0
    partial_matches: int = 0
    total_itc_value: float = 0.0
    available_itc_value: float = 0.0
    blocked_itc_value: float = 0.0
    itc_available: int = 0
    itc_mismatch: int = 0


@dataclass
class AuditStats(Record):
    total_audited: int = 0
    correct: int = 0
    under_discounted: int = 0
    over_discounted: int = 0
    penalty_issues: int = 0
    needs_review: int = 0
    total_discrepancy: float = 0.0


@dataclass
class ReminderStats(Record):
    total_reminders: int = 0
    pending: int = 0
    sent: int = 0
    payment_received: int = 0
    escalated: int = 0


@dataclass
class AgeBucket(Record):
    count: int = 0
    amount: float = 0.0


@dataclass
class OverdueSummary(Record):
    _aliases: ClassVar[dict[str, str]] = {
        "by0to7Days": "by_0_to_7_days",
        "by8to30Days": "by_8_to_30_days",
        "by31to60Days": "by_31_to_60_days",
        "by60PlusDays": "by_60_plus_days",
    }

    total_overdue: int = 0
    total_amount: float = 0.0
    by_0_to_7_days: AgeBucket = field(default_factory=AgeBucket)
    by_8_to_30_days: AgeBucket = field(default_factory=AgeBucket)
    by_31_to_60_days: AgeBucket = field(default_factory=AgeBucket)
    by_60_plus_days: AgeBucket = field(default_factory=AgeBucket)

    def __post_init__(self) -> None:
        for name in (
            "by_0_to_7_days",
            "by_8_to_30_days",
            "by_31_to_60_days",
            "by_60_plus_days",
        ):
            value = getattr(self, name)
            if isinstance(value, dict):
                setattr(self, name, AgeBucket.from_dict(value))

    def buckets(self) -> list[tuple[str, AgeBucket]]:
        return [
            ("0-7 days", self.by_0_to_7_days),
            ("8-30 days", self.by_8_to_30_days),
            ("31-60 days", self.by_31_to_60_days),
            ("60+ days", self.by_60_plus_days),
        ]


@dataclass
class ConfirmationStats(Record):
    total: int = 0
    pending: int = 0
    sent: int = 0
    confirmed: int = 0
    disputed: int = 0
    no_response: int = 0
    total_difference: float = 0.0


@dataclass
class InventorySummary(Record):
    _aliases: ClassVar[dict[str, str]] = {"totalSKUs": "total_skus"}

    total_skus: int = 0
    total_value: float = 0.0
    last_reconciliation: str | None = None
    discrepancies: int = 0
    match_rate: float = 0.0


@dataclass
class NotesStats(Record):
    total: int = 0
    credit_notes_received: int = 0
    credit_notes_issued: int = 0
    debit_notes_received: int = 0
    debit_notes_issued: int = 0
    total_credit_amount: float = 0.0
    total_debit_amount: float = 0.0
    pending: int = 0
    adjusted: int = 0
    disputed: int = 0


@dataclass
class DashboardStats(Record):
    """Counts shown on the landing dashboard, gathered from several endpoints."""

    uploads_total: int = 0
    uploads_processing: int = 0
    uploads_completed: int = 0
    uploads_failed: int = 0
    po_matches: int = 0
    po_exact_matches: int = 0
    po_needs_review: int = 0
    payment_matches: int = 0
    unmatched_transactions: int = 0
    gst_matches: int = 0
    itc_available: int = 0
    itc_mismatch: int = 0
    vendors: int = 0
    customers: int = 0
    skus: int = 0
    # Endpoints that failed and fell back to zeros
    unavailable: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@dataclass
class Page:
    """One page of a list endpoint: ``{<key>: [...], total, limit, offset}``."""

    items: list[Any] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0

    @classmethod
    def from_payload(
        cls, data: Any, key: str, record_cls: type[Record] | None = None
    ) -> "Page":
        """Build a page from an envelope's ``data``.

        Accepts either the paginated object or a bare list (some endpoints
        return the list directly). Endpoints that page by 1-based ``page``
        number get their offset derived from it.
        """
        if data is None:
            return cls()
        if isinstance(data, list):
            raw_items, total, limit, offset = data, len(data), len(data), 0
        elif isinstance(data, dict):
            raw_items = data.get(key) or []
            total = data.get("total", len(raw_items))
            limit = data.get("limit", len(raw_items))
            if "offset" in data:
                offset = data["offset"]
            elif "page" in data:
                offset = max(int(data["page"]) - 1, 0) * int(limit)
            else:
                offset = 0
        else:
            raise TypeError(f"Cannot build a page from {type(data).__name__}")
        items = (
            [record_cls.from_dict(item) for item in raw_items]
            if record_cls is not None
            else list(raw_items)
        )
        return cls(items=items, total=total, limit=limit, offset=offset)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
