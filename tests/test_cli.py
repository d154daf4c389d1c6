import csv

import httpx
import pytest
from click.testing import CliRunner

from scripts.cli import main
from tests.conftest import (
    API_URL,
    GSTIN_KA,
    GSTIN_MH,
    Router,
    envelope,
    json_body,
    sse_body,
)


@pytest.fixture
def cli(tmp_path):
    """Invoke the CLI against a Router with a temp token file."""
    token_file = tmp_path / "token"

    def invoke(args, router=None, logged_in=True, **kwargs):
        if logged_in:
            token_file.write_text("tok-123\n")
        env = {
            "AUDITFLOW_API_URL": API_URL,
            "AUDITFLOW_TOKEN": "",
            "AUDITFLOW_TOKEN_FILE": str(token_file),
            "AUDITFLOW_MAX_RETRIES": "0",
        }
        obj = {"transport": router.transport} if router is not None else {}
        return CliRunner().invoke(main, args, obj=obj, env=env, **kwargs)

    invoke.token_file = token_file
    return invoke


class TestOfflineCommands:
    def test_validate_gstin(self, cli):
        result = cli(["validate", "gstin", GSTIN_KA])
        assert result.exit_code == 0, result.output
        assert "valid gstin" in result.output
        assert "29 Karnataka" in result.output
        assert "ABCDE1234F" in result.output

    def test_validate_invalid(self, cli):
        result = cli(["validate", "pan", "ABCDE12345"])
        assert result.exit_code == 1
        assert "invalid pan" in result.output

    def test_gst_split_intra_state(self, cli):
        result = cli(["gst", "split", "1000", "18"])
        assert result.exit_code == 0, result.output
        assert "CGST:    ₹90.00" in result.output
        assert "SGST:    ₹90.00" in result.output
        assert "GST:     ₹180.00" in result.output
        assert "Total:   ₹1,180.00" in result.output

    def test_gst_split_from_gstins(self, cli):
        result = cli(["gst", "split", "1000", "18", "--supplier", GSTIN_KA, "--recipient", GSTIN_MH])
        assert result.exit_code == 0, result.output
        assert "IGST:    ₹180.00" in result.output
        assert "CGST" not in result.output

    def test_gst_split_warns_on_odd_rate(self, cli):
        result = cli(["gst", "split", "100", "7", "--inter-state"])
        assert result.exit_code == 0
        assert "not a standard GST rate" in result.output

    def test_gst_fy(self, cli):
        result = cli(["gst", "fy", "2024-02-15"])
        assert result.output.strip() == "2023-24"

    def test_gst_state(self, cli):
        assert cli(["gst", "state", GSTIN_MH]).output.strip() == "27 Maharashtra"
        result = cli(["gst", "state", "nope"])
        assert result.exit_code != 0
        assert "Invalid GSTIN format" in result.output

    def test_gst_period(self, cli):
        assert cli(["gst", "period", "042024"]).output.strip() == "April 2024"
        assert cli(["gst", "period", "132024"]).exit_code != 0

    def test_templates(self, cli):
        result = cli(["templates", "--category", "communication"])
        assert result.exit_code == 0
        assert "Communication: Send reminders and requests to vendors" in result.output
        assert "payment-reminders" in result.output
        assert "monthly-gst-reconciliation" not in result.output


class TestAuthCommands:
    def test_login(self, cli):
        router = Router(
            {("POST", "/api/auth/login"): envelope({"user": {"name": "Asha"}, "token": "jwt-9"})}
        )
        result = cli(["login", "asha@example.in", "--password", "pw"], router, logged_in=False)
        assert result.exit_code == 0, result.output
        assert "Logged in as Asha" in result.output
        assert cli.token_file.read_text().strip() == "jwt-9"

    def test_login_failure(self, cli):
        router = Router(
            {("POST", "/api/auth/login"): (401, envelope(success=False, error="Invalid credentials"))}
        )
        result = cli(["login", "asha@example.in", "--password", "bad"], router, logged_in=False)
        assert result.exit_code == 1
        assert "Invalid credentials" in result.output

    def test_whoami_requires_login(self, cli):
        result = cli(["whoami"], Router(), logged_in=False)
        assert result.exit_code == 1
        assert "Not logged in" in result.output

    def test_whoami(self, cli):
        router = Router(
            {
                ("GET", "/api/auth/me"): envelope(
                    {
                        "user": {"name": "Asha", "email": "asha@example.in", "role": "ACCOUNTANT"},
                        "organization": {"name": "Shree Steel", "gstin": GSTIN_KA},
                    }
                )
            }
        )
        result = cli(["whoami"], router)
        assert "Asha <asha@example.in> (ACCOUNTANT)" in result.output
        assert "Organization: Shree Steel" in result.output

    def test_logout(self, cli):
        router = Router({("POST", "/api/auth/logout"): envelope()})
        result = cli(["logout"], router)
        assert result.exit_code == 0
        assert not cli.token_file.exists()


class TestDataCommands:
    def test_vendors_list(self, cli):
        router = Router(
            {
                ("GET", "/api/vendors"): envelope(
                    {"vendors": [{"name": "Shree Steel", "gstin": GSTIN_KA, "city": "Bengaluru"}], "total": 1, "limit": 50, "offset": 0}
                )
            }
        )
        result = cli(["vendors", "list", "--search", "shree"], router)
        assert result.exit_code == 0, result.output
        assert "Shree Steel" in result.output
        assert "Showing 1-1 of 1" in result.output
        assert router.requests[0].url.params["isActive"] == "true"

    def test_vendors_add_validates(self, cli):
        router = Router()
        result = cli(["vendors", "add", "--name", "X", "--pincode", "012345"], router)
        assert result.exit_code == 1
        assert "Invalid pincode format" in result.output
        assert router.requests == []

    def test_vendors_add(self, cli):
        router = Router({("POST", "/api/vendors"): (201, envelope({"id": "v1", "name": "X"}))})
        result = cli(
            ["vendors", "add", "--name", "X", "--gstin", GSTIN_KA.lower(), "--payment-terms", "30"],
            router,
        )
        assert result.exit_code == 0, result.output
        assert "Created vendor X (v1)" in result.output
        body = json_body(router.requests[0])
        assert body == {"name": "X", "gstin": GSTIN_KA, "paymentTermsDays": 30}

    def test_dashboard(self, cli):
        router = Router(
            {
                ("GET", "/api/uploads/stats"): envelope({"total": 4, "failed": 1}),
                ("GET", "/api/vendors"): envelope({"total": 12}),
            }
        )
        result = cli(["dashboard"], router)
        assert result.exit_code == 0, result.output
        assert "total 4" in result.output
        assert "vendors 12" in result.output
        assert "Unavailable: po_matches, payment_matches, gst_matches, customers, skus" in result.output

    def test_recon_list_with_filter(self, cli):
        router = Router(
            {
                ("GET", "/api/gst-matches"): envelope(
                    {"matches": [{"id": "g1", "matchType": "PARTIAL", "matchScore": 0.8, "itcStatus": "MISMATCH"}], "total": 1}
                )
            }
        )
        result = cli(["recon", "gst", "--status", "MISMATCH"], router)
        assert result.exit_code == 0, result.output
        assert "MISMATCH" in result.output
        assert router.requests[0].url.params["itcStatus"] == "MISMATCH"

    def test_recon_list_without_filter(self, cli):
        result = cli(["recon", "payments", "--status", "X"], Router())
        assert result.exit_code == 1
        assert "payments has no status filter" in result.output

    def test_recon_run_gst_requires_return(self, cli):
        result = cli(["recon", "run", "gst"], Router())
        assert result.exit_code == 1
        assert "--return-id is required" in result.output

    def test_recon_run_payments(self, cli):
        router = Router(
            {
                ("POST", "/api/payment-matches/auto-match"): envelope(
                    {"matched": 3, "unmatched": 1}, message="Auto-matched 3 transactions"
                )
            }
        )
        result = cli(["recon", "run", "payments", "--invoice-type", "sales"], router)
        assert result.exit_code == 0, result.output
        assert "Auto-matched 3 transactions" in result.output
        assert "matched: 3" in result.output
        assert json_body(router.requests[0]) == {"invoiceType": "sales"}

    def test_upload(self, cli, tmp_path):
        pdf = tmp_path / "inv.pdf"
        pdf.write_bytes(b"%PDF")
        router = Router({("POST", "/api/uploads"): envelope({"uploads": [{"id": "f1"}]})})
        result = cli(["upload", str(pdf), "--type", "PURCHASE_INVOICE"], router)
        assert result.exit_code == 0, result.output
        assert "uploaded  inv.pdf" in result.output
        assert "Uploaded 1/1 files" in result.output

    def test_upload_rejects_bad_files(self, cli, tmp_path):
        exe = tmp_path / "setup.exe"
        exe.write_bytes(b"MZ")
        result = cli(["upload", str(exe)], Router())
        assert result.exit_code == 1
        assert "Unsupported file type: setup.exe" in result.output

    def test_export_csv(self, cli, tmp_path):
        router = Router(
            {
                ("GET", "/api/payment-reminders"): envelope(
                    {"reminders": [{"id": "r1", "dueAmount": 5000.0, "customer": {"name": "Acme"}}], "total": 1}
                )
            }
        )
        out = tmp_path / "reminders.csv"
        result = cli(["export", "reminders", str(out)], router)
        assert result.exit_code == 0, result.output
        assert "Wrote 1 rows" in result.output
        with open(out, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert rows[0]["id"] == "r1"
        assert rows[0]["customer.name"] == "Acme"
        assert router.requests[0].url.params["limit"] == "500"


class TestChatCommands:
    def test_send_streams_and_saves_table(self, cli, tmp_path):
        stream = sse_body(
            {"type": "content", "text": "Here are "},
            {"type": "content", "text": "your invoices."},
            {
                "type": "data_table",
                "tableData": {
                    "title": "Unpaid",
                    "columns": [{"key": "no", "label": "Invoice"}],
                    "rows": [{"no": "INV-1", "extra": 1}],
                },
            },
            {"type": "done"},
        )
        router = Router(
            {
                ("POST", "/api/chat/conversations"): envelope({"id": "c1", "title": "New"}),
                ("GET", "/api/chat/stream"): lambda r: httpx.Response(200, text=stream),
            }
        )
        out = tmp_path / "table.csv"
        result = cli(["chat", "send", "Show unpaid", "--save-table", str(out)], router)
        assert result.exit_code == 0, result.output
        assert "Here are your invoices." in result.output
        assert "Saved table 'Unpaid' (1 rows)" in result.output
        with open(out, newline="", encoding="utf-8") as f:
            assert list(csv.reader(f)) == [["no"], ["INV-1"]]
        assert router.last("GET", "/api/chat/stream").url.params["conversation_id"] == "c1"

    def test_send_error_event_fails(self, cli):
        router = Router(
            {
                ("GET", "/api/chat/stream"): lambda r: httpx.Response(
                    200, text=sse_body({"type": "error", "error": "Model unavailable"})
                ),
            }
        )
        result = cli(["chat", "send", "hi", "--conversation", "c1"], router)
        assert result.exit_code == 1
        assert "Model unavailable" in result.output

    def test_send_rejects_unsupported_attachment(self, cli, tmp_path):
        exe = tmp_path / "setup.exe"
        exe.write_bytes(b"MZ")
        router = Router({})
        result = cli(["chat", "send", "hi", "--conversation", "c1", "--file", str(exe)], router)
        assert result.exit_code == 1
        assert "Unsupported file type: setup.exe" in result.output
        assert router.requests == []

    def test_list(self, cli):
        router = Router(
            {("GET", "/api/chat/conversations"): envelope([{"id": "c1", "title": "GST recon"}])}
        )
        result = cli(["chat", "list"], router)
        assert result.exit_code == 0, result.output
        assert "GST recon" in result.output

    def test_history(self, cli):
        router = Router(
            {
                ("GET", "/api/chat/conversations/c1"): envelope(
                    {"conversation": {"id": "c1", "title": "GST"}, "messages": [{"role": "USER", "content": "hi"}]}
                )
            }
        )
        result = cli(["chat", "history", "c1"], router)
        assert "[user] hi" in result.output

    def test_delete_missing(self, cli):
        router = Router(
            {("DELETE", "/api/chat/conversations/c1"): (404, envelope(success=False, error="Conversation not found"))}
        )
        result = cli(["chat", "delete", "c1"], router)
        assert result.exit_code == 1
        assert "Conversation not found" in result.output
