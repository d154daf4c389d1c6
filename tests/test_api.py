import asyncio

import httpx
import pytest

from auditflow.api import ApiError, ApiResponse, AuditFlowClient, build_headers
from auditflow.config import TokenStore
from auditflow.models import DashboardStats, OverdueSummary, Page, UploadedFile, Vendor
from auditflow.validators import UploadValidationError
from tests.conftest import Router, envelope, json_body, run_with_client


@pytest.fixture
def no_sleep(monkeypatch):
    """Record retry delays instead of sleeping; jitter pinned to 0."""
    delays: list[float] = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr("auditflow.api.asyncio.sleep", fake_sleep)
    monkeypatch.setattr("auditflow.api.random.uniform", lambda a, b: 0)
    return delays


class TestApiResponse:
    def test_from_envelope(self):
        resp = ApiResponse.from_payload({"success": True, "data": {"x": 1}, "message": "ok"}, 200)
        assert resp.success
        assert resp.data == {"x": 1}
        assert resp.message == "ok"
        assert resp.status_code == 200

    def test_non_envelope_payload_is_data(self):
        resp = ApiResponse.from_payload({"status": "ok"})
        assert resp.success
        assert resp.data == {"status": "ok"}

    def test_unwrap(self):
        assert ApiResponse(success=True, data=[1]).unwrap() == [1]
        with pytest.raises(ApiError, match="Failed to fetch"):
            ApiResponse(success=False, status_code=500).unwrap("Failed to fetch")
        with pytest.raises(ApiError, match="Conversation not found") as exc:
            ApiResponse.failure("Conversation not found", 404).unwrap("Failed to fetch")
        assert exc.value.status_code == 404

    def test_headers(self):
        assert build_headers("t")["Authorization"] == "Bearer t"
        assert "Authorization" not in build_headers(None)
        assert "Content-Type" not in build_headers(None, json_body=False)


class TestRequest:
    def test_requires_context_manager(self, token_store):
        client = AuditFlowClient("http://api.test", token_store)
        with pytest.raises(RuntimeError, match="async context manager"):
            asyncio.run(client.get("/api/vendors"))

    def test_success_sends_bearer_token(self, token_store):
        router = Router({("GET", "/api/auth/me"): envelope({"user": {"id": "u1"}})})
        resp = run_with_client(router, lambda c: c.get("/api/auth/me"), token_store)
        assert resp.success
        assert resp.data == {"user": {"id": "u1"}}
        assert router.requests[0].headers["authorization"] == "Bearer tok-123"

    def test_no_token_no_auth_header(self, tmp_path):
        router = Router({("GET", "/health"): {"status": "ok"}})
        run_with_client(router, lambda c: c.health(), TokenStore(tmp_path / "none"))
        assert "authorization" not in router.requests[0].headers

    def test_server_error_message(self, token_store):
        router = Router(
            {("GET", "/api/vendors/v9"): (404, envelope(success=False, error="Vendor not found"))}
        )
        resp = run_with_client(router, lambda c: c.get_vendor("v9"), token_store)
        assert not resp.success
        assert resp.error == "Vendor not found"
        assert resp.status_code == 404

    def test_error_without_message_uses_fallback(self, token_store):
        router = Router({("GET", "/api/vendors/stats"): (500, {})})
        resp = run_with_client(router, lambda c: c.vendor_stats(), token_store)
        assert resp.error == "An error occurred"

    def test_invalid_json(self, token_store):
        router = Router({("GET", "/health"): httpx.Response(200, text="<html>")})
        resp = run_with_client(router, lambda c: c.health(), token_store)
        assert not resp.success
        assert resp.error.startswith("Invalid JSON response (status 200)")

    def test_network_error_does_not_raise(self, token_store):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        router = Router({("GET", "/api/vendors"): refuse})
        resp = run_with_client(router, lambda c: c.list_vendors(), token_store)
        assert not resp.success
        assert resp.error == "Connection refused"

    def test_retries_get_on_5xx(self, token_store, no_sleep):
        responses = iter([(503, {}), (503, {}), envelope({"vendors": [], "total": 0})])
        router = Router({("GET", "/api/vendors"): lambda r: next(responses)})
        resp = run_with_client(router, lambda c: c.list_vendors(), token_store, max_retries=3)
        assert resp.success
        assert len(router.requests) == 3
        assert no_sleep == [1.0, 2.0]

    def test_no_retry_by_default(self, token_store, no_sleep):
        router = Router({("GET", "/api/vendors"): (503, {})})
        resp = run_with_client(router, lambda c: c.list_vendors(), token_store)
        assert not resp.success
        assert len(router.requests) == 1

    def test_post_is_never_retried(self, token_store, no_sleep):
        router = Router({("POST", "/api/payment-reminders/generate"): (503, {})})
        resp = run_with_client(
            router, lambda c: c.generate_reminders(), token_store, max_retries=3
        )
        assert not resp.success
        assert len(router.requests) == 1
        assert no_sleep == []

    def test_client_errors_are_not_retried(self, token_store, no_sleep):
        router = Router({("GET", "/api/vendors"): (401, envelope(success=False, error="Unauthorized"))})
        resp = run_with_client(router, lambda c: c.list_vendors(), token_store, max_retries=3)
        assert resp.error == "Unauthorized"
        assert len(router.requests) == 1

    def test_retry_after_is_respected(self, token_store, no_sleep):
        responses = iter(
            [
                httpx.Response(429, headers={"Retry-After": "7"}, json={}),
                httpx.Response(200, json=envelope({"total": 1})),
            ]
        )
        router = Router({("GET", "/api/uploads/stats"): lambda r: next(responses)})
        resp = run_with_client(router, lambda c: c.upload_stats(), token_store, max_retries=1)
        assert resp.success
        assert no_sleep == [7.0]


class TestAuth:
    def test_login_saves_token(self, tmp_path):
        store = TokenStore(tmp_path / "token")
        router = Router(
            {("POST", "/api/auth/login"): envelope({"user": {"id": "u1"}, "token": "jwt-1"})}
        )
        resp = run_with_client(router, lambda c: c.login("a@b.in", "pw"), store)
        assert resp.success
        assert store.load() == "jwt-1"
        assert json_body(router.requests[0]) == {"email": "a@b.in", "password": "pw"}

    def test_failed_login_keeps_no_token(self, tmp_path):
        store = TokenStore(tmp_path / "token")
        router = Router(
            {("POST", "/api/auth/login"): (401, envelope(success=False, error="Invalid credentials"))}
        )
        resp = run_with_client(router, lambda c: c.login("a@b.in", "bad"), store)
        assert resp.error == "Invalid credentials"
        assert store.load() is None

    def test_logout_clears_token_even_on_failure(self, token_store):
        router = Router({("POST", "/api/auth/logout"): (500, {})})
        run_with_client(router, lambda c: c.logout(), token_store)
        assert token_store.load() is None

    def test_me_clears_rejected_token(self, token_store):
        router = Router({("GET", "/api/auth/me"): (401, envelope(success=False, error="Unauthorized"))})
        run_with_client(router, lambda c: c.me(), token_store)
        assert token_store.load() is None

    def test_refresh_replaces_token(self, token_store):
        router = Router({("POST", "/api/auth/refresh"): envelope({"token": "jwt-2"})})
        run_with_client(router, lambda c: c.refresh_token(), token_store)
        assert token_store.load() == "jwt-2"


class TestResources:
    def test_list_vendors_query_and_page(self, token_store):
        router = Router(
            {
                ("GET", "/api/vendors"): envelope(
                    {"vendors": [{"id": "v1", "name": "Shree Steel"}], "total": 1, "limit": 10, "offset": 0}
                )
            }
        )
        resp = run_with_client(
            router, lambda c: c.list_vendors(search="steel", is_active=True, limit=10), token_store
        )
        assert isinstance(resp.data, Page)
        assert resp.data.items == [Vendor(id="v1", name="Shree Steel")]
        params = router.requests[0].url.params
        assert params["search"] == "steel"
        assert params["isActive"] == "true"
        assert params["limit"] == "10"
        assert params["offset"] == "0"

    def test_bank_transactions_page_by_number(self, token_store):
        def bank_page(request):
            page = int(request.url.params.get("page", "1"))
            limit = int(request.url.params["limit"])
            ids = ["t1", "t2", "t3", "t4"][(page - 1) * limit : page * limit]
            return envelope(
                {
                    "transactions": [{"id": i} for i in ids],
                    "total": 4,
                    "page": page,
                    "limit": limit,
                    "totalPages": 2,
                }
            )

        router = Router({("GET", "/api/bank-transactions"): bank_page})
        resp = run_with_client(
            router, lambda c: c.list_bank_transactions(limit=2, offset=2), token_store
        )
        params = router.requests[0].url.params
        assert params["page"] == "2"
        assert "offset" not in params
        assert [t.id for t in resp.data] == ["t3", "t4"]
        assert resp.data.offset == 2

    def test_unexpected_shape_becomes_failure(self, token_store):
        router = Router({("GET", "/api/gst-matches"): envelope("oops")})
        resp = run_with_client(router, lambda c: c.list_gst_matches(), token_store)
        assert not resp.success
        assert resp.error.startswith("Unexpected response shape")

    def test_create_vendor_validates_before_sending(self, token_store):
        router = Router()
        resp = run_with_client(
            router, lambda c: c.create_vendor({"name": "X", "gstin": "bad"}), token_store
        )
        assert resp.error == "Invalid GSTIN format"
        assert router.requests == []

    def test_create_vendor(self, token_store):
        router = Router({("POST", "/api/vendors"): (201, envelope({"id": "v2", "name": "New"}))})
        resp = run_with_client(router, lambda c: c.create_vendor({"name": "New"}), token_store)
        assert resp.data == Vendor(id="v2", name="New")

    def test_get_sku_is_typed(self, token_store):
        router = Router(
            {("GET", "/api/skus/s1"): envelope({"id": "s1", "skuCode": "TMT-12", "hsnCode": "7214"})}
        )
        resp = run_with_client(router, lambda c: c.get_sku("s1"), token_store)
        assert resp.data.sku_code == "TMT-12"
        assert resp.data.hsn_code == "7214"

    def test_update_vendor_validates_changed_fields_only(self, token_store):
        router = Router({("PUT", "/api/vendors/v1"): envelope({"id": "v1", "name": "Same"})})
        ok = run_with_client(router, lambda c: c.update_vendor("v1", {"city": "Pune"}), token_store)
        assert ok.success
        bad = run_with_client(router, lambda c: c.update_vendor("v1", {"name": ""}), token_store)
        assert bad.error == "Vendor name is required"

    def test_manual_payment_match_body(self, token_store):
        router = Router({("POST", "/api/payment-matches"): envelope({"id": "m1"})})
        run_with_client(
            router,
            lambda c: c.create_payment_match("txn-1", "inv-1", 5000.0, "sales", notes="part"),
            token_store,
        )
        assert json_body(router.requests[0]) == {
            "bankTxnId": "txn-1",
            "invoiceId": "inv-1",
            "invoiceType": "sales",
            "matchedAmount": 5000.0,
            "notes": "part",
        }

    def test_argument_validation(self, token_store):
        router = Router()
        with pytest.raises(ValueError):
            run_with_client(router, lambda c: c.create_payment_match("t", "i", 1, "bogus"), token_store)
        with pytest.raises(ValueError):
            run_with_client(router, lambda c: c.set_reminder_status("r1", "DONE"), token_store)
        with pytest.raises(ValueError):
            run_with_client(router, lambda c: c.set_note_status("n1", "CLOSED"), token_store)
        assert router.requests == []

    def test_gst_reconcile_body(self, token_store):
        router = Router({("POST", "/api/gst-matches/reconcile"): envelope({"matched": 4})})
        run_with_client(router, lambda c: c.reconcile_gst_return("ret-1", auto_save=True), token_store)
        assert json_body(router.requests[0]) == {"returnId": "ret-1", "autoSave": True}

    def test_overdue_summary_is_typed(self, token_store):
        router = Router(
            {("GET", "/api/payment-reminders/overdue"): envelope({"totalOverdue": 2, "by0to7Days": {"count": 2, "amount": 10.0}})}
        )
        resp = run_with_client(router, lambda c: c.overdue_summary(), token_store)
        assert isinstance(resp.data, OverdueSummary)
        assert resp.data.by_0_to_7_days.count == 2


class TestUploads:
    def test_upload_document_multipart(self, token_store, tmp_path):
        pdf = tmp_path / "inv-001.pdf"
        pdf.write_bytes(b"%PDF-1.4")
        router = Router(
            {
                ("POST", "/api/uploads"): (
                    201,
                    envelope({"uploads": [{"id": "f1", "originalName": "inv-001.pdf"}], "count": 1}),
                )
            }
        )
        resp = run_with_client(
            router, lambda c: c.upload_document(pdf, "PURCHASE_INVOICE"), token_store
        )
        assert resp.data == [UploadedFile(id="f1", original_name="inv-001.pdf")]
        request = router.requests[0]
        assert request.headers["content-type"].startswith("multipart/form-data")
        body = request.content
        assert b'name="documentType"' in body
        assert b"PURCHASE_INVOICE" in body
        assert b'filename="inv-001.pdf"' in body
        assert b"application/pdf" in body

    def test_rejects_unknown_document_type(self, token_store, tmp_path):
        with pytest.raises(ValueError, match="document_type"):
            run_with_client(Router(), lambda c: c.upload_document(tmp_path / "a.pdf", "RECEIPT"), token_store)

    def test_batch_is_validated_before_upload(self, token_store, tmp_path):
        bad = tmp_path / "a.exe"
        bad.write_bytes(b"x")
        router = Router()
        with pytest.raises(UploadValidationError):
            run_with_client(router, lambda c: c.upload_documents([bad]), token_store)
        assert router.requests == []

    def test_batch_continues_after_failure(self, token_store, tmp_path):
        files = []
        for name in ("a.pdf", "b.pdf"):
            p = tmp_path / name
            p.write_bytes(b"x")
            files.append(p)
        responses = iter(
            [(500, envelope(success=False, error="Failed to upload file")), envelope({"uploads": [{"id": "f2"}]})]
        )
        router = Router({("POST", "/api/uploads"): lambda r: next(responses)})
        seen = []
        results = run_with_client(
            router,
            lambda c: c.upload_documents(files, on_progress=lambda p, r: seen.append(p.name)),
            token_store,
        )
        assert [r.success for _, r in results] == [False, True]
        assert seen == ["a.pdf", "b.pdf"]


class TestDashboard:
    def test_parallel_stats_with_fallbacks(self, token_store):
        router = Router(
            {
                ("GET", "/api/uploads/stats"): envelope({"totalFiles": 12}),
                ("GET", "/api/po-invoice-matches/stats"): envelope(
                    {"totalMatches": 8, "exactMatches": 5, "partialMatches": 2, "needsReview": 1}
                ),
                ("GET", "/api/payment-matches/stats"): (500, envelope(success=False, error="boom")),
                ("GET", "/api/gst-matches/stats"): envelope(
                    {"totalMatches": 30, "itcAvailable": 25, "itcMismatch": 3}
                ),
                ("GET", "/api/vendors"): envelope({"vendors": [{}], "total": 41}),
                ("GET", "/api/customers"): envelope({"customers": [], "total": 9}),
            }
        )
        stats = run_with_client(router, lambda c: c.dashboard_stats(), token_store)
        assert isinstance(stats, DashboardStats)
        assert stats.uploads_total == 12
        assert stats.po_matches == 8
        assert stats.po_needs_review == 1
        assert stats.payment_matches == 0
        assert stats.itc_available == 25
        assert stats.vendors == 41
        assert stats.customers == 9
        assert stats.skus == 0
        assert stats.unavailable == ["payment_matches", "skus"]
        assert router.last("GET", "/api/vendors").url.params["limit"] == "1"
