"""REST client for the AuditFlow API.

Features:
- Connection pooling (single httpx.AsyncClient per AuditFlowClient)
- Uniform ``{success, data, error}`` envelope: HTTP and network failures
  come back as ``ApiResponse(success=False, error=...)`` instead of raising
- Bearer token from a TokenStore on every request
- Optional retry with exponential backoff for GET requests, respects
  Retry-After for 429 (off unless max_retries > 0)

Example usage:

    async with AuditFlowClient("http://localhost:4000", TokenStore()) as client:
        resp = await client.list_vendors(search="steel")
        if resp.success:
            for vendor in resp.data:
                print(vendor.name)
        else:
            print(resp.error)
"""

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import httpx

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT, TokenStore
from .models import (
    DOCUMENT_TYPES,
    INVOICE_TYPES,
    NOTE_STATUSES,
    REMINDER_STATUSES,
    SKU,
    AuditStats,
    BankTransaction,
    ConfirmationStats,
    CreditDebitNote,
    Customer,
    DashboardStats,
    DiscountAudit,
    DiscountTerm,
    GSTMatch,
    GSTStats,
    InventorySnapshot,
    InventorySummary,
    NotesStats,
    OverdueSummary,
    Page,
    PaymentMatch,
    PaymentReminder,
    POInvoiceMatch,
    Record,
    ReminderStats,
    UploadedFile,
    Vendor,
    VendorConfirmation,
)
from .validators import guess_mime_type, validate_upload_files, validate_vendor

MAX_ERROR_DETAIL_CHARS = (
    300  # Truncation limit for response bodies quoted in error messages
)
DEFAULT_ERROR = "An error occurred"
NETWORK_ERROR = "Network error"

log = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """An API call reported failure where the caller needs an exception."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class ApiResponse:
    """The server's response envelope."""

    success: bool
    data: Any = None
    error: str | None = None
    message: str | None = None
    status_code: int | None = None

    @classmethod
    def from_payload(cls, payload: Any, status_code: int | None = None) -> "ApiResponse":
        # Endpoints outside the envelope (e.g. /health) are taken as data
        if not isinstance(payload, dict) or "success" not in payload:
            return cls(success=True, data=payload, status_code=status_code)
        return cls(
            success=bool(payload.get("success")),
            data=payload.get("data"),
            error=payload.get("error"),
            message=payload.get("message"),
            status_code=status_code,
        )

    @classmethod
    def failure(cls, error: str, status_code: int | None = None) -> "ApiResponse":
        return cls(success=False, error=error, status_code=status_code)

    def unwrap(self, default_error: str = DEFAULT_ERROR) -> Any:
        """Return ``data`` or raise ApiError with the server's message."""
        if not self.success:
            raise ApiError(self.error or default_error, self.status_code)
        return self.data


def build_headers(token: str | None, json_body: bool = True) -> dict[str, str]:
    """Request headers: JSON content type plus bearer auth when logged in."""
    headers = {"Accept": "application/json"}
    if json_body:
        headers["Content-Type"] = "application/json"
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _query(**params: Any) -> dict[str, str]:
    """Drop unset params; booleans as 'true'/'false' like the browser sends."""
    out: dict[str, str] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        else:
            out[key] = str(value)
    return out


def _error_detail(payload: Any) -> str | None:
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return None


class AuditFlowClient:
    """Async client for the AuditFlow REST API.

    Must be used as an async context manager to ensure proper connection cleanup:

        async with AuditFlowClient(url, tokens) as client:
            resp = await client.get("/api/vendors")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token_store: TokenStore | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store or TokenStore()
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AuditFlowClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "AuditFlowClient must be used as async context manager: "
                "async with AuditFlowClient(...) as client: ..."
            )
        return self._client

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    @property
    def token(self) -> str | None:
        return self.token_store.load()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        endpoint: str,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        files: Any = None,
        form: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Send a request and return the response envelope.

        Never raises for HTTP status or transport failures; those become
        ``ApiResponse(success=False)``. GET requests are retried up to
        ``max_retries`` times on network errors, 429 and 5xx.
        """
        client = self._get_client()
        method = method.upper()
        retryable = method == "GET"
        headers = build_headers(self.token, json_body=files is None)

        kwargs: dict[str, Any] = {"headers": headers}
        if params:
            kwargs["params"] = params
        if files is not None:
            kwargs["files"] = files
            if form:
                kwargs["data"] = form
        elif json_body is not None:
            kwargs["content"] = json.dumps(json_body)

        backoff = 1.0
        max_backoff = 30.0
        attempt = 0

        while True:
            try:
                response = await client.request(method, self.url(endpoint), **kwargs)
            except (httpx.TimeoutException, httpx.RequestError) as e:
                if retryable and attempt < self.max_retries:
                    jitter = random.uniform(0, 1)
                    log.warning(
                        "[Retry %d/%d] %s %s network error: %s: %s",
                        attempt + 1,
                        self.max_retries,
                        method,
                        endpoint,
                        type(e).__name__,
                        e,
                    )
                    await asyncio.sleep(backoff + jitter)
                    backoff = min(backoff * 2, max_backoff)
                    attempt += 1
                    continue
                log.warning("%s %s failed: %s: %s", method, endpoint, type(e).__name__, e)
                return ApiResponse.failure(str(e) or NETWORK_ERROR)

            response_text = response.text
            try:
                payload = json.loads(response_text) if response_text else {}
            except json.JSONDecodeError:
                payload = None

            status = response.status_code
            should_retry = retryable and (status == 429 or status >= 500)
            if should_retry and attempt < self.max_retries:
                # Respect Retry-After header for 429
                wait = backoff
                if status == 429:
                    retry_after = response.headers.get("retry-after")
                    if retry_after:
                        try:
                            wait = float(retry_after)
                        except ValueError:
                            wait = backoff
                jitter = random.uniform(0, 1)
                log.warning(
                    "[Retry %d/%d] %s %s HTTP %d: %s",
                    attempt + 1,
                    self.max_retries,
                    method,
                    endpoint,
                    status,
                    _error_detail(payload)
                    or response_text[:MAX_ERROR_DETAIL_CHARS],
                )
                await asyncio.sleep(wait + jitter)
                backoff = min(backoff * 2, max_backoff)
                attempt += 1
                continue

            if payload is None:
                return ApiResponse.failure(
                    f"Invalid JSON response (status {status}): "
                    f"{response_text[:MAX_ERROR_DETAIL_CHARS]}",
                    status_code=status,
                )

            if not response.is_success:
                error = _error_detail(payload) or DEFAULT_ERROR
                log.debug("%s %s -> HTTP %d: %s", method, endpoint, status, error)
                return ApiResponse.failure(error, status_code=status)

            return ApiResponse.from_payload(payload, status_code=status)

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, body: Any = None) -> ApiResponse:
        return await self.request("POST", endpoint, json_body=body if body is not None else {})

    async def put(self, endpoint: str, body: Any = None) -> ApiResponse:
        return await self.request("PUT", endpoint, json_body=body if body is not None else {})

    async def delete(self, endpoint: str) -> ApiResponse:
        return await self.request("DELETE", endpoint)

    def open_stream(self, endpoint: str, params: dict[str, str]):
        """Open a streaming GET (Server-Sent Events).

        Returns httpx's streaming context manager. Auth travels in
        ``params``: EventSource-style endpoints read the token from the
        query string, not from headers. No read timeout, the server holds
        the connection open while the assistant works.
        """
        client = self._get_client()
        return client.stream(
            "GET",
            self.url(endpoint),
            params=params,
            headers={"Accept": "text/event-stream", "Cache-Control": "no-cache"},
            timeout=httpx.Timeout(self.timeout, read=None),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _convert(resp: ApiResponse, convert: Callable[[Any], Any]) -> ApiResponse:
        """Replace ``resp.data`` with a typed value; shape errors become failures."""
        if not resp.success or resp.data is None:
            return resp
        try:
            resp.data = convert(resp.data)
        except (TypeError, ValueError, AttributeError) as e:
            log.warning("Unexpected response shape: %s", e)
            return ApiResponse.failure(
                f"Unexpected response shape: {e}", status_code=resp.status_code
            )
        return resp

    async def _list(
        self, endpoint: str, key: str, record_cls: type[Record], **params: Any
    ) -> ApiResponse:
        resp = await self.get(endpoint, params=_query(**params))
        return self._convert(resp, lambda d: Page.from_payload(d, key, record_cls))

    async def _record(
        self, resp_coro, record_cls: type[Record]
    ) -> ApiResponse:
        resp = await resp_coro
        return self._convert(resp, record_cls.from_dict)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> ApiResponse:
        """Log in and persist the returned token."""
        resp = await self.post("/api/auth/login", {"email": email, "password": password})
        self._remember_token(resp)
        return resp

    async def register(self, payload: dict[str, Any]) -> ApiResponse:
        resp = await self.post("/api/auth/register", payload)
        self._remember_token(resp)
        return resp

    async def logout(self) -> ApiResponse:
        """Log out server-side (best effort) and always forget the local token."""
        resp = await self.post("/api/auth/logout")
        if not resp.success:
            log.info("Server logout failed (%s); clearing local token anyway", resp.error)
        self.token_store.clear()
        return resp

    async def me(self) -> ApiResponse:
        """Current user and organization. A rejected token is cleared locally."""
        resp = await self.get("/api/auth/me")
        if not resp.success and resp.status_code in (401, 403):
            self.token_store.clear()
        return resp

    async def refresh_token(self) -> ApiResponse:
        resp = await self.post("/api/auth/refresh")
        self._remember_token(resp)
        return resp

    def _remember_token(self, resp: ApiResponse) -> None:
        if resp.success and isinstance(resp.data, dict) and resp.data.get("token"):
            self.token_store.save(resp.data["token"])

    async def health(self) -> ApiResponse:
        return await self.get("/health")

    # ------------------------------------------------------------------
    # Master data
    # ------------------------------------------------------------------

    async def list_vendors(
        self,
        search: str | None = None,
        is_active: bool | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ApiResponse:
        return await self._list(
            "/api/vendors",
            "vendors",
            Vendor,
            search=search,
            isActive=is_active,
            limit=limit,
            offset=offset,
        )

    async def get_vendor(self, vendor_id: str) -> ApiResponse:
        return await self.get(f"/api/vendors/{vendor_id}")

    async def create_vendor(self, payload: dict[str, Any]) -> ApiResponse:
        """Validate the vendor form locally, then create it."""
        errors = validate_vendor(payload)
        if errors:
            return ApiResponse.failure("; ".join(errors))
        return await self._record(self.post("/api/vendors", payload), Vendor)

    async def update_vendor(self, vendor_id: str, payload: dict[str, Any]) -> ApiResponse:
        # Partial update: only validate what is being changed
        errors = [
            e
            for e in validate_vendor({"name": "-", **payload})
            if e != "Vendor name is required"
        ]
        if "name" in payload and not str(payload["name"] or "").strip():
            errors.insert(0, "Vendor name is required")
        if errors:
            return ApiResponse.failure("; ".join(errors))
        return await self._record(self.put(f"/api/vendors/{vendor_id}", payload), Vendor)

    async def delete_vendor(self, vendor_id: str) -> ApiResponse:
        return await self.delete(f"/api/vendors/{vendor_id}")

    async def vendor_stats(self) -> ApiResponse:
        return await self.get("/api/vendors/stats")

    async def list_customers(
        self, search: str | None = None, limit: int = 50, offset: int = 0
    ) -> ApiResponse:
        return await self._list(
            "/api/customers",
            "customers",
            Customer,
            search=search,
            limit=limit,
            offset=offset,
        )

    async def get_customer(self, customer_id: str) -> ApiResponse:
        return await self.get(f"/api/customers/{customer_id}")

    async def create_customer(self, payload: dict[str, Any]) -> ApiResponse:
        errors = validate_vendor(payload)
        if errors:
            return ApiResponse.failure("; ".join(e.replace("Vendor", "Customer") for e in errors))
        return await self._record(self.post("/api/customers", payload), Customer)

    async def customer_stats(self) -> ApiResponse:
        return await self.get("/api/customers/stats")

    async def list_skus(
        self,
        search: str | None = None,
        category: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ApiResponse:
        return await self._list(
            "/api/skus",
            "skus",
            SKU,
            search=search,
            category=category,
            limit=limit,
            offset=offset,
        )

    async def get_sku(self, sku_id: str) -> ApiResponse:
        return await self._record(self.get(f"/api/skus/{sku_id}"), SKU)

    async def create_sku(self, payload: dict[str, Any]) -> ApiResponse:
        return await self._record(self.post("/api/skus", payload), SKU)

    async def sku_categories(self) -> ApiResponse:
        return await self.get("/api/skus/categories")

    # ------------------------------------------------------------------
    # Bank and payments
    # ------------------------------------------------------------------

    async def list_bank_transactions(
        self, match_status: str | None = None, limit: int = 50, offset: int = 0
    ) -> ApiResponse:
        # This endpoint pages by 1-based page number instead of offset
        return await self._list(
            "/api/bank-transactions",
            "transactions",
            BankTransaction,
            matchStatus=match_status,
            limit=limit,
            page=offset // limit + 1 if limit > 0 else 1,
        )

    async def bank_transaction_stats(self) -> ApiResponse:
        return await self.get("/api/bank-transactions/stats")

    async def create_bank_transaction(self, payload: dict[str, Any]) -> ApiResponse:
        return await self._record(
            self.post("/api/bank-transactions", payload), BankTransaction
        )

    async def list_payment_matches(self, limit: int = 50, offset: int = 0) -> ApiResponse:
        return await self._list(
            "/api/payment-matches", "matches", PaymentMatch, limit=limit, offset=offset
        )

    async def payment_match_stats(self) -> ApiResponse:
        return await self.get("/api/payment-matches/stats")

    async def auto_match_payments(
        self, bank_txn_id: str | None = None, invoice_type: str = "purchase"
    ) -> ApiResponse:
        """Ask the server to auto-match one bank transaction, or all unmatched ones."""
        if invoice_type not in INVOICE_TYPES:
            raise ValueError(f"invoice_type must be one of {INVOICE_TYPES}")
        body: dict[str, Any] = {"invoiceType": invoice_type}
        if bank_txn_id:
            body["bankTxnId"] = bank_txn_id
        return await self.post("/api/payment-matches/auto-match", body)

    async def create_payment_match(
        self,
        bank_txn_id: str,
        invoice_id: str,
        matched_amount: float,
        invoice_type: str = "purchase",
        notes: str | None = None,
    ) -> ApiResponse:
        if invoice_type not in INVOICE_TYPES:
            raise ValueError(f"invoice_type must be one of {INVOICE_TYPES}")
        if matched_amount <= 0:
            raise ValueError("matched_amount must be positive")
        body: dict[str, Any] = {
            "bankTxnId": bank_txn_id,
            "invoiceId": invoice_id,
            "invoiceType": invoice_type,
            "matchedAmount": matched_amount,
        }
        if notes:
            body["notes"] = notes
        return await self.post("/api/payment-matches", body)

    async def split_payment(
        self, bank_txn_id: str, splits: list[dict[str, Any]], notes: str | None = None
    ) -> ApiResponse:
        """Match one bank transaction against several invoices.

        ``splits`` items: ``{"invoiceId", "invoiceType", "amount"}``.
        """
        if not splits:
            raise ValueError("splits must not be empty")
        body: dict[str, Any] = {"bankTxnId": bank_txn_id, "splits": splits}
        if notes:
            body["notes"] = notes
        return await self.post("/api/payment-matches/split", body)

    async def delete_payment_match(self, match_id: str) -> ApiResponse:
        return await self.delete(f"/api/payment-matches/{match_id}")

    # ------------------------------------------------------------------
    # GST
    # ------------------------------------------------------------------

    async def list_gst_matches(
        self, itc_status: str | None = None, limit: int = 50, offset: int = 0
    ) -> ApiResponse:
        return await self._list(
            "/api/gst-matches",
            "matches",
            GSTMatch,
            itcStatus=itc_status,
            limit=limit,
            offset=offset,
        )

    async def gst_stats(self) -> ApiResponse:
        return self._convert(await self.get("/api/gst-matches/stats"), GSTStats.from_dict)

    async def reconcile_gst_return(self, return_id: str, auto_save: bool = False) -> ApiResponse:
        return await self.post(
            "/api/gst-matches/reconcile", {"returnId": return_id, "autoSave": auto_save}
        )

    async def gst_return_summary(self, return_id: str) -> ApiResponse:
        return await self.get(f"/api/gst-matches/return/{return_id}/summary")

    async def gst_return_exceptions(self, return_id: str) -> ApiResponse:
        return await self.get(f"/api/gst-matches/return/{return_id}/exceptions")

    # ------------------------------------------------------------------
    # Discounts
    # ------------------------------------------------------------------

    async def list_discount_audits(
        self, status: str | None = None, limit: int = 50, offset: int = 0
    ) -> ApiResponse:
        return await self._list(
            "/api/discount-audits",
            "audits",
            DiscountAudit,
            status=status,
            limit=limit,
            offset=offset,
        )

    async def discount_audit_stats(self) -> ApiResponse:
        return self._convert(
            await self.get("/api/discount-audits/stats"), AuditStats.from_dict
        )

    async def run_discount_audit(self, invoice_id: str) -> ApiResponse:
        return await self.post("/api/discount-audits/run", {"invoiceId": invoice_id})

    async def list_discount_terms(
        self,
        vendor_id: str | None = None,
        term_type: str | None = None,
        is_active: bool | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ApiResponse:
        return await self._list(
            "/api/discount-terms",
            "discountTerms",
            DiscountTerm,
            vendorId=vendor_id,
            termType=term_type,
            isActive=is_active,
            limit=limit,
            offset=offset,
        )

    async def create_discount_term(self, payload: dict[str, Any]) -> ApiResponse:
        return await self._record(self.post("/api/discount-terms", payload), DiscountTerm)

    async def calculate_discount(self, payload: dict[str, Any]) -> ApiResponse:
        return await self.post("/api/discount-terms/calculate", payload)

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    async def inventory_summary(self) -> ApiResponse:
        return self._convert(
            await self.get("/api/inventory/summary"), InventorySummary.from_dict
        )

    async def list_inventory_snapshots(self, limit: int = 20, offset: int = 0) -> ApiResponse:
        return await self._list(
            "/api/inventory/snapshots",
            "snapshots",
            InventorySnapshot,
            limit=limit,
            offset=offset,
        )

    async def inventory_discrepancies(self) -> ApiResponse:
        return self._convert(
            await self.get("/api/inventory/discrepancies"),
            lambda d: [InventorySnapshot.from_dict(x) for x in d],
        )

    async def reconcile_inventory(self, snapshot_date: str | None = None) -> ApiResponse:
        body = {"snapshotDate": snapshot_date} if snapshot_date else {}
        return await self.post("/api/inventory/reconcile", body)

    # ------------------------------------------------------------------
    # Payment reminders
    # ------------------------------------------------------------------

    async def list_payment_reminders(
        self, status: str | None = None, limit: int = 50, offset: int = 0
    ) -> ApiResponse:
        return await self._list(
            "/api/payment-reminders",
            "reminders",
            PaymentReminder,
            status=status,
            limit=limit,
            offset=offset,
        )

    async def reminder_stats(self) -> ApiResponse:
        return self._convert(
            await self.get("/api/payment-reminders/stats"), ReminderStats.from_dict
        )

    async def overdue_summary(self) -> ApiResponse:
        return self._convert(
            await self.get("/api/payment-reminders/overdue"), OverdueSummary.from_dict
        )

    async def generate_reminders(self) -> ApiResponse:
        return await self.post("/api/payment-reminders/generate")

    async def send_reminder(self, reminder_id: str) -> ApiResponse:
        return await self.post(f"/api/payment-reminders/send/{reminder_id}")

    async def set_reminder_status(self, reminder_id: str, status: str) -> ApiResponse:
        if status not in REMINDER_STATUSES:
            raise ValueError(f"status must be one of {REMINDER_STATUSES}")
        return await self.put(f"/api/payment-reminders/{reminder_id}/status", {"status": status})

    # ------------------------------------------------------------------
    # Vendor ledger confirmation
    # ------------------------------------------------------------------

    async def list_ledger_confirmations(
        self, status: str | None = None, limit: int = 50, offset: int = 0
    ) -> ApiResponse:
        return await self._list(
            "/api/vendor-ledger/confirmations",
            "confirmations",
            VendorConfirmation,
            status=status,
            limit=limit,
            offset=offset,
        )

    async def ledger_stats(self) -> ApiResponse:
        return self._convert(
            await self.get("/api/vendor-ledger/stats"), ConfirmationStats.from_dict
        )

    async def generate_vendor_ledger(
        self, vendor_id: str, period_from: str, period_to: str
    ) -> ApiResponse:
        return await self.post(
            "/api/vendor-ledger/generate",
            {"vendorId": vendor_id, "periodFrom": period_from, "periodTo": period_to},
        )

    async def request_ledger_confirmation(
        self, vendor_id: str, period_from: str, period_to: str, send_email: bool = False
    ) -> ApiResponse:
        return await self.post(
            "/api/vendor-ledger/confirm",
            {
                "vendorId": vendor_id,
                "periodFrom": period_from,
                "periodTo": period_to,
                "sendEmail": send_email,
            },
        )

    async def record_ledger_response(
        self, confirmation_id: str, vendor_balance: float, notes: str | None = None
    ) -> ApiResponse:
        body: dict[str, Any] = {"vendorBalance": vendor_balance}
        if notes:
            body["responseNotes"] = notes
        return await self.post(f"/api/vendor-ledger/respond/{confirmation_id}", body)

    async def send_ledger_confirmation(self, confirmation_id: str) -> ApiResponse:
        return await self.post(f"/api/vendor-ledger/send/{confirmation_id}")

    # ------------------------------------------------------------------
    # PO / invoice matching
    # ------------------------------------------------------------------

    async def list_po_invoice_matches(
        self, match_type: str | None = None, limit: int = 50, offset: int = 0
    ) -> ApiResponse:
        return await self._list(
            "/api/po-invoice-matches",
            "matches",
            POInvoiceMatch,
            matchType=match_type,
            limit=limit,
            offset=offset,
        )

    async def po_match_stats(self) -> ApiResponse:
        return await self.get("/api/po-invoice-matches/stats")

    async def create_po_invoice_match(self, invoice_id: str, po_id: str) -> ApiResponse:
        return await self.post(
            "/api/po-invoice-matches", {"invoiceId": invoice_id, "poId": po_id}
        )

    async def auto_match_invoice(self, invoice_id: str) -> ApiResponse:
        return await self.post("/api/po-invoice-matches/auto-match", {"invoiceId": invoice_id})

    async def resolve_po_invoice_match(self, match_id: str, resolution: str) -> ApiResponse:
        if not resolution.strip():
            raise ValueError("resolution must not be empty")
        return await self.put(
            f"/api/po-invoice-matches/{match_id}/resolve", {"resolution": resolution}
        )

    # ------------------------------------------------------------------
    # Credit / debit notes
    # ------------------------------------------------------------------

    async def list_credit_debit_notes(
        self,
        note_type: str | None = None,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ApiResponse:
        return await self._list(
            "/api/credit-debit-notes",
            "notes",
            CreditDebitNote,
            noteType=note_type,
            status=status,
            limit=limit,
            offset=offset,
        )

    async def notes_stats(self) -> ApiResponse:
        return self._convert(
            await self.get("/api/credit-debit-notes/stats"), NotesStats.from_dict
        )

    async def set_note_status(self, note_id: str, status: str) -> ApiResponse:
        if status not in NOTE_STATUSES:
            raise ValueError(f"status must be one of {NOTE_STATUSES}")
        return await self.put(f"/api/credit-debit-notes/{note_id}/status", {"status": status})

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def upload_document(
        self, path: str | Path, document_type: str = "OTHER"
    ) -> ApiResponse:
        """Upload one file as ``document_type``; data becomes a list of UploadedFile."""
        if document_type not in DOCUMENT_TYPES:
            raise ValueError(f"document_type must be one of {DOCUMENT_TYPES}")
        path = Path(path)
        mime_type = guess_mime_type(path) or "application/octet-stream"
        with open(path, "rb") as fh:
            resp = await self.request(
                "POST",
                "/api/uploads",
                files={"file": (path.name, fh, mime_type)},
                form={"documentType": document_type},
            )
        return self._convert(
            resp, lambda d: [UploadedFile.from_dict(u) for u in d.get("uploads", [])]
        )

    async def upload_documents(
        self,
        paths: list[str | Path],
        document_type: str = "OTHER",
        on_progress: Callable[[Path, ApiResponse], None] | None = None,
    ) -> list[tuple[Path, ApiResponse]]:
        """Validate the batch, then upload files one at a time.

        A failed file does not stop the batch; each result is reported.
        Raises UploadValidationError before anything is sent if the batch
        breaks the size/type/count limits.
        """
        files = validate_upload_files(paths)
        results: list[tuple[Path, ApiResponse]] = []
        for path in files:
            resp = await self.upload_document(path, document_type)
            if not resp.success:
                log.warning("Upload failed for %s: %s", path.name, resp.error)
            if on_progress:
                on_progress(path, resp)
            results.append((path, resp))
        return results

    async def list_uploads(self, limit: int = 50, offset: int = 0) -> ApiResponse:
        return await self._list(
            "/api/uploads", "files", UploadedFile, limit=limit, offset=offset
        )

    async def upload_stats(self) -> ApiResponse:
        return await self.get("/api/uploads/stats")

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    async def dashboard_stats(self) -> DashboardStats:
        """Fetch dashboard counts in parallel.

        Each endpoint falls back to zeros on failure so one broken module
        does not blank the dashboard; failed endpoints are listed in
        ``unavailable``.
        """
        endpoints = {
            "uploads": "/api/uploads/stats",
            "po_matches": "/api/po-invoice-matches/stats",
            "payment_matches": "/api/payment-matches/stats",
            "gst_matches": "/api/gst-matches/stats",
            "vendors": "/api/vendors?limit=1",
            "customers": "/api/customers?limit=1",
            "skus": "/api/skus?limit=1",
        }
        responses = await asyncio.gather(*(self.get(ep) for ep in endpoints.values()))
        data: dict[str, dict[str, Any]] = {}
        unavailable: list[str] = []
        for name, resp in zip(endpoints, responses):
            if resp.success and isinstance(resp.data, dict):
                data[name] = resp.data
            else:
                data[name] = {}
                unavailable.append(name)

        def num(section: str, key: str) -> int:
            value = data[section].get(key) or 0
            return int(value) if isinstance(value, (int, float)) else 0

        return DashboardStats(
            # /api/uploads/stats reports totalFiles
            uploads_total=num("uploads", "total") or num("uploads", "totalFiles"),
            uploads_processing=num("uploads", "processing"),
            uploads_completed=num("uploads", "completed"),
            uploads_failed=num("uploads", "failed"),
            po_matches=num("po_matches", "totalMatches"),
            po_exact_matches=num("po_matches", "exactMatches"),
            po_needs_review=num("po_matches", "needsReview"),
            payment_matches=num("payment_matches", "totalMatches"),
            unmatched_transactions=num("payment_matches", "unmatchedTxns"),
            gst_matches=num("gst_matches", "totalMatches"),
            itc_available=num("gst_matches", "itcAvailable"),
            itc_mismatch=num("gst_matches", "itcMismatch"),
            vendors=num("vendors", "total"),
            customers=num("customers", "total"),
            skus=num("skus", "total"),
            unavailable=unavailable,
        )
