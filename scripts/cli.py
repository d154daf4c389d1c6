"""CLI entry point for the AuditFlow client.

Usage:
    auditflow login you@example.com
    auditflow dashboard
    auditflow recon gst --status MISMATCH
    auditflow recon run payments
    auditflow upload invoice.pdf --type PURCHASE_INVOICE
    auditflow chat send "Show me all unpaid invoices"
    auditflow export reminders reminders.xlsx

    # Offline helpers
    auditflow validate gstin 29ABCDE1234F1Z5
    auditflow gst split 1000 18
"""

import asyncio
import logging
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable

import click
from dotenv import find_dotenv, load_dotenv

# Load .env by walking upward from the CWD.
_dotenv_path = find_dotenv(usecwd=True)
DOTENV_PATH = Path(_dotenv_path) if _dotenv_path else None
if _dotenv_path:
    load_dotenv(_dotenv_path)

from auditflow.api import ApiError, ApiResponse, AuditFlowClient
from auditflow.chat import ChatClient
from auditflow.config import TOKEN_ENV, Settings
from auditflow.constants import GST_RATES
from auditflow.export import write_table
from auditflow.formatting import (
    format_currency,
    format_period,
    get_financial_year,
    parse_period,
)
from auditflow.gst import calculate_inter_state_gst, calculate_intra_state_gst
from auditflow.models import DOCUMENT_TYPES, INVOICE_TYPES, Page
from auditflow.templates import (
    CATEGORIES,
    CATEGORY_DESCRIPTIONS,
    CATEGORY_LABELS,
    get_templates_by_category,
)
from auditflow.validators import (
    UploadValidationError,
    get_pan_from_gstin,
    get_state_code_from_gstin,
    get_state_name,
    is_intra_state_transaction,
    validate_email,
    validate_gstin,
    validate_mobile,
    validate_pan,
    validate_pincode,
)

log = logging.getLogger(__name__)

VALIDATORS: dict[str, Callable[[Any], bool]] = {
    "gstin": validate_gstin,
    "pan": validate_pan,
    "pincode": validate_pincode,
    "mobile": validate_mobile,
    "email": validate_email,
}


@dataclass(frozen=True)
class ReconModule:
    """How to list one reconciliation module from the CLI."""

    method: str
    columns: tuple[str, ...]
    filter_param: str | None = None
    help: str = ""


RECON_MODULES: dict[str, ReconModule] = {
    "bank": ReconModule(
        "list_bank_transactions",
        ("transaction_date", "description", "debit", "credit", "match_status"),
        "match_status",
        "Bank transactions (filter: match status)",
    ),
    "payments": ReconModule(
        "list_payment_matches",
        ("id", "match_type", "matched_amount", "created_at"),
        None,
        "Payment matches",
    ),
    "gst": ReconModule(
        "list_gst_matches",
        ("id", "match_type", "match_score", "gst_diff", "itc_status"),
        "itc_status",
        "GST matches (filter: ITC status)",
    ),
    "discounts": ReconModule(
        "list_discount_audits",
        ("invoice_id", "expected_discount", "actual_discount", "difference", "status"),
        "status",
        "Discount audits (filter: status)",
    ),
    "discount-terms": ReconModule(
        "list_discount_terms",
        ("vendor_id", "term_type", "description", "is_active"),
        "term_type",
        "Vendor discount terms (filter: term type)",
    ),
    "inventory": ReconModule(
        "list_inventory_snapshots",
        ("snapshot_date", "sku_id", "closing_qty", "expected_closing", "discrepancy"),
        None,
        "Inventory snapshots",
    ),
    "reminders": ReconModule(
        "list_payment_reminders",
        ("sales_invoice_id", "reminder_number", "due_amount", "days_overdue", "status"),
        "status",
        "Payment reminders (filter: status)",
    ),
    "ledger": ReconModule(
        "list_ledger_confirmations",
        ("vendor_id", "period_from", "period_to", "our_balance", "difference", "status"),
        "status",
        "Vendor ledger confirmations (filter: status)",
    ),
    "po-matches": ReconModule(
        "list_po_invoice_matches",
        ("id", "match_type", "match_score", "qty_match", "value_match", "gst_match"),
        "match_type",
        "PO / invoice matches (filter: match type)",
    ),
    "notes": ReconModule(
        "list_credit_debit_notes",
        ("note_number", "note_type", "note_date", "total_with_gst", "status"),
        "status",
        "Credit / debit notes (filter: status)",
    ),
}

# Master data is exportable alongside the reconciliation modules
EXPORT_MODULES: dict[str, str] = {
    "vendors": "list_vendors",
    "customers": "list_customers",
    "skus": "list_skus",
    "uploads": "list_uploads",
    **{name: module.method for name, module in RECON_MODULES.items()},
}


def _configure_logging(quiet: bool, verbose: bool) -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _client(ctx: click.Context) -> AuditFlowClient:
    settings = _settings(ctx)
    return AuditFlowClient(
        settings.api_url,
        settings.token_store(),
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        transport=ctx.obj.get("transport"),
    )


def _run(coro):
    """Run a coroutine, turning API failures into CLI errors."""
    try:
        return asyncio.run(coro)
    except ApiError as e:
        raise click.ClickException(e.message)


def _check(resp: ApiResponse) -> Any:
    if not resp.success:
        raise click.ClickException(resp.error or "An error occurred")
    return resp.data


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:,.2f}"
    return str(value)


def _print_rows(rows: list[Any], columns: tuple[str, ...] | list[str]) -> None:
    """Print records or dicts as an aligned text table."""
    table = [
        [_cell(row.get(c) if isinstance(row, dict) else getattr(row, c, None)) for c in columns]
        for row in rows
    ]
    widths = [
        max([len(c)] + [len(r[i]) for r in table]) for i, c in enumerate(columns)
    ]
    click.echo("  ".join(c.upper().ljust(w) for c, w in zip(columns, widths)).rstrip())
    for r in table:
        click.echo("  ".join(v.ljust(w) for v, w in zip(r, widths)).rstrip())


def _print_page(page: Page, columns: tuple[str, ...]) -> None:
    if not page.items:
        click.echo("No records.")
        return
    _print_rows(page.items, columns)
    shown_to = page.offset + len(page.items)
    click.echo(f"\nShowing {page.offset + 1}-{shown_to} of {page.total}")


@click.group()
@click.option("--api-url", help="API base URL (default: $AUDITFLOW_API_URL or http://localhost:4000)")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.pass_context
def main(ctx: click.Context, api_url: str | None, quiet: bool, verbose: bool):
    """AuditFlow: accounting reconciliation from the command line."""
    _configure_logging(quiet, verbose)
    ctx.ensure_object(dict)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise click.ClickException(str(e))
    if api_url:
        settings.api_url = api_url
    ctx.obj["settings"] = settings


# ---------------------------------------------------------------------------
# Offline helpers
# ---------------------------------------------------------------------------


@main.command()
@click.argument("kind", type=click.Choice(sorted(VALIDATORS)))
@click.argument("value")
@click.pass_context
def validate(ctx: click.Context, kind: str, value: str):
    """Check the format of a GSTIN, PAN, pincode, mobile number or email."""
    if not VALIDATORS[kind](value):
        click.echo(f"{value}: invalid {kind}")
        ctx.exit(1)
    click.echo(f"{value}: valid {kind}")
    if kind == "gstin":
        code = get_state_code_from_gstin(value)
        click.echo(f"  state: {code} {get_state_name(code) or '(unknown)'}")
        click.echo(f"  PAN:   {get_pan_from_gstin(value)}")


@main.group()
def gst():
    """GST calculations."""


@gst.command("split")
@click.argument("amount", type=float)
@click.argument("rate", type=float)
@click.option("--inter-state", is_flag=True, help="Charge IGST instead of CGST + SGST")
@click.option("--supplier", help="Supplier GSTIN (with --recipient, decides intra/inter-state)")
@click.option("--recipient", help="Recipient GSTIN")
def gst_split(
    amount: float,
    rate: float,
    inter_state: bool,
    supplier: str | None,
    recipient: str | None,
):
    """Compute GST on a taxable AMOUNT at RATE percent."""
    if rate not in GST_RATES:
        log.warning("Note: %s%% is not a standard GST rate (%s)", rate, ", ".join(map(str, GST_RATES)))
    if supplier or recipient:
        if not (supplier and recipient):
            raise click.ClickException("--supplier and --recipient must be given together")
        for gstin in (supplier, recipient):
            if not validate_gstin(gstin):
                raise click.ClickException(f"Invalid GSTIN format: {gstin}")
        inter_state = not is_intra_state_transaction(supplier, recipient)

    click.echo(f"Taxable: {format_currency(amount)}")
    if inter_state:
        tax = calculate_inter_state_gst(amount, rate)
        click.echo(f"IGST:    {format_currency(tax.igst)}")
    else:
        tax = calculate_intra_state_gst(amount, rate)
        click.echo(f"CGST:    {format_currency(tax.cgst)}")
        click.echo(f"SGST:    {format_currency(tax.sgst)}")
    click.echo(f"GST:     {format_currency(tax.total)}")
    click.echo(f"Total:   {format_currency(amount + tax.total)}")


@gst.command("fy")
@click.argument("when", required=False, type=click.DateTime(formats=["%Y-%m-%d"]))
def gst_fy(when):
    """Financial year for a date (YYYY-MM-DD, default today)."""
    day = when.date() if when else date.today()
    click.echo(get_financial_year(day))


@gst.command("state")
@click.argument("gstin")
def gst_state(gstin: str):
    """State of registration for a GSTIN."""
    code = get_state_code_from_gstin(gstin)
    if code is None:
        raise click.ClickException(f"Invalid GSTIN format: {gstin}")
    click.echo(f"{code} {get_state_name(code) or '(unknown state code)'}")


@gst.command("period")
@click.argument("period", required=False)
def gst_period(period: str | None):
    """Check a return period (MMYYYY); without one, print the current period."""
    if period is None:
        click.echo(format_period(date.today()))
        return
    parsed = parse_period(period)
    if parsed is None:
        raise click.ClickException(f"Invalid return period: {period} (expected MMYYYY)")
    click.echo(date(parsed.year, parsed.month, 1).strftime("%B %Y"))


@main.command()
@click.option(
    "--category",
    type=click.Choice(CATEGORIES),
    help="Only show one category",
)
def templates(category: str | None):
    """List the workflow prompt templates for the chat assistant."""
    for cat, items in get_templates_by_category().items():
        if category and cat != category:
            continue
        click.echo(f"{CATEGORY_LABELS[cat]}: {CATEGORY_DESCRIPTIONS[cat]}")
        for t in items:
            extra = f" ({t.estimated_time})" if t.estimated_time else ""
            files = " [files]" if t.requires_files else ""
            click.echo(f"  {t.id:<28}{t.title}{extra}{files}")
        click.echo()


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
@click.pass_context
def login(ctx: click.Context, email: str, password: str):
    """Log in and store the session token."""
    if not validate_email(email):
        raise click.ClickException("Invalid email format")

    async def _login():
        async with _client(ctx) as client:
            return await client.login(email, password)

    data = _check(_run(_login())) or {}
    user = data.get("user") or {}
    click.echo(f"Logged in as {user.get('name') or email}")
    click.echo(f"Token saved to {_settings(ctx).token_file}")


@main.command()
@click.pass_context
def logout(ctx: click.Context):
    """Log out and delete the stored token."""

    async def _logout():
        async with _client(ctx) as client:
            return await client.logout()

    _run(_logout())
    click.echo("Logged out")


@main.command()
@click.pass_context
def whoami(ctx: click.Context):
    """Show the logged-in user and organization."""
    settings = _settings(ctx)
    if not settings.token_store().load():
        raise click.ClickException(f"Not logged in. Run `auditflow login` or set {TOKEN_ENV}.")

    async def _me():
        async with _client(ctx) as client:
            return await client.me()

    data = _check(_run(_me())) or {}
    user = data.get("user") or data
    org = data.get("organization") or user.get("organization") or {}
    click.echo(f"{user.get('name', '')} <{user.get('email', '')}> ({user.get('role', '')})")
    if org:
        click.echo(f"Organization: {org.get('name', '')}")
        if org.get("gstin"):
            click.echo(f"GSTIN: {org['gstin']}")


@main.command()
@click.pass_context
def health(ctx: click.Context):
    """Check that the API server is reachable."""

    async def _health():
        async with _client(ctx) as client:
            return await client.health()

    data = _check(_run(_health()))
    status = data.get("status") if isinstance(data, dict) else data
    click.echo(f"{_settings(ctx).api_url}: {status or 'ok'}")


# ---------------------------------------------------------------------------
# Master data
# ---------------------------------------------------------------------------


@main.group()
def vendors():
    """Vendor master data."""


@vendors.command("list")
@click.option("--search", help="Match name, GSTIN or PAN")
@click.option("--inactive", is_flag=True, help="Show inactive vendors instead of active ones")
@click.option("--limit", default=50, show_default=True)
@click.option("--offset", default=0, show_default=True)
@click.pass_context
def vendors_list(ctx: click.Context, search: str | None, inactive: bool, limit: int, offset: int):
    """List vendors."""

    async def _list():
        async with _client(ctx) as client:
            return await client.list_vendors(
                search=search, is_active=not inactive, limit=limit, offset=offset
            )

    page = _check(_run(_list()))
    _print_page(page, ("name", "gstin", "city", "state", "payment_terms_days"))


@vendors.command("add")
@click.option("--name", required=True)
@click.option("--gstin")
@click.option("--pan")
@click.option("--email")
@click.option("--phone")
@click.option("--address")
@click.option("--city")
@click.option("--state")
@click.option("--pincode")
@click.option("--contact-person")
@click.option("--payment-terms", type=int, help="Payment terms in days")
@click.pass_context
def vendors_add(ctx: click.Context, payment_terms: int | None, contact_person: str | None, **fields):
    """Create a vendor."""
    payload = {k: v for k, v in fields.items() if v}
    if contact_person:
        payload["contactPerson"] = contact_person
    if payment_terms is not None:
        payload["paymentTermsDays"] = payment_terms
    if payload.get("gstin"):
        payload["gstin"] = payload["gstin"].upper()
    if payload.get("pan"):
        payload["pan"] = payload["pan"].upper()

    async def _create():
        async with _client(ctx) as client:
            return await client.create_vendor(payload)

    vendor = _check(_run(_create()))
    click.echo(f"Created vendor {vendor.name} ({vendor.id})")


# ---------------------------------------------------------------------------
# Dashboard and reconciliation
# ---------------------------------------------------------------------------


@main.command()
@click.pass_context
def dashboard(ctx: click.Context):
    """Summary counts across uploads, matching and master data."""

    async def _stats():
        async with _client(ctx) as client:
            return await client.dashboard_stats()

    stats = _run(_stats())
    click.echo("Uploads")
    click.echo(
        f"  total {stats.uploads_total}  processing {stats.uploads_processing}  "
        f"completed {stats.uploads_completed}  failed {stats.uploads_failed}"
    )
    click.echo("Matching")
    click.echo(
        f"  PO/invoice {stats.po_matches} (exact {stats.po_exact_matches}, "
        f"needs review {stats.po_needs_review})"
    )
    click.echo(
        f"  payments {stats.payment_matches} (unmatched bank transactions "
        f"{stats.unmatched_transactions})"
    )
    click.echo(
        f"  GST {stats.gst_matches} (ITC available {stats.itc_available}, "
        f"mismatch {stats.itc_mismatch})"
    )
    click.echo("Master data")
    click.echo(f"  vendors {stats.vendors}  customers {stats.customers}  SKUs {stats.skus}")
    if stats.unavailable:
        log.warning("\nUnavailable: %s", ", ".join(stats.unavailable))


@main.group()
def recon():
    """List reconciliation results or trigger reconciliation runs."""


def _make_recon_list_command(name: str, module: ReconModule) -> click.Command:
    @click.option("--status", "status", help="Filter (see module help)")
    @click.option("--limit", default=50, show_default=True)
    @click.option("--offset", default=0, show_default=True)
    @click.pass_context
    def _cmd(ctx: click.Context, status: str | None, limit: int, offset: int):
        kwargs: dict[str, Any] = {"limit": limit, "offset": offset}
        if status:
            if module.filter_param is None:
                raise click.ClickException(f"{name} has no status filter")
            kwargs[module.filter_param] = status

        async def _list():
            async with _client(ctx) as client:
                return await getattr(client, module.method)(**kwargs)

        _print_page(_check(_run(_list())), module.columns)

    return click.command(name, help=module.help)(_cmd)


for _name, _module in RECON_MODULES.items():
    recon.add_command(_make_recon_list_command(_name, _module))


@recon.command("run")
@click.argument("module", type=click.Choice(["payments", "gst", "inventory", "reminders"]))
@click.option("--invoice-type", type=click.Choice(INVOICE_TYPES), default="purchase", show_default=True, help="payments: invoices to match against")
@click.option("--bank-txn", help="payments: match only this bank transaction")
@click.option("--return-id", help="gst: GST return to reconcile (required)")
@click.option("--save", is_flag=True, help="gst: persist the matches")
@click.option("--snapshot-date", help="inventory: snapshot date (YYYY-MM-DD)")
@click.pass_context
def recon_run(
    ctx: click.Context,
    module: str,
    invoice_type: str,
    bank_txn: str | None,
    return_id: str | None,
    save: bool,
    snapshot_date: str | None,
):
    """Ask the server to run a reconciliation for MODULE."""
    if module == "gst" and not return_id:
        raise click.ClickException("--return-id is required for gst")

    async def _action():
        async with _client(ctx) as client:
            if module == "payments":
                return await client.auto_match_payments(bank_txn, invoice_type)
            if module == "gst":
                return await client.reconcile_gst_return(return_id, auto_save=save)
            if module == "inventory":
                return await client.reconcile_inventory(snapshot_date)
            return await client.generate_reminders()

    resp = _run(_action())
    _check(resp)
    click.echo(resp.message or f"{module} reconciliation started")
    if isinstance(resp.data, dict):
        for key, value in resp.data.items():
            if isinstance(value, (int, float, str)):
                click.echo(f"  {key}: {_cell(value)}")


# ---------------------------------------------------------------------------
# Uploads and export
# ---------------------------------------------------------------------------


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--type",
    "document_type",
    type=click.Choice(DOCUMENT_TYPES),
    default="OTHER",
    show_default=True,
)
@click.pass_context
def upload(ctx: click.Context, files: tuple[Path, ...], document_type: str):
    """Upload documents for processing."""

    def _progress(path, resp):
        if resp.success:
            click.echo(f"  uploaded  {path.name}")
        else:
            click.echo(f"  FAILED    {path.name}: {resp.error}")

    async def _upload():
        async with _client(ctx) as client:
            return await client.upload_documents(list(files), document_type, _progress)

    try:
        results = _run(_upload())
    except UploadValidationError as e:
        raise click.ClickException(str(e))

    ok = sum(1 for _, resp in results if resp.success)
    click.echo(f"\nUploaded {ok}/{len(results)} files")
    if ok < len(results):
        ctx.exit(1)


@main.command()
@click.argument("module", type=click.Choice(sorted(EXPORT_MODULES)))
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--limit", default=500, show_default=True)
@click.pass_context
def export(ctx: click.Context, module: str, output: Path, limit: int):
    """Export MODULE records to OUTPUT (.csv or .xlsx)."""
    if output.suffix.lower() not in (".csv", ".xlsx"):
        raise click.ClickException("OUTPUT must end in .csv or .xlsx")

    async def _fetch():
        async with _client(ctx) as client:
            return await getattr(client, EXPORT_MODULES[module])(limit=limit)

    page = _check(_run(_fetch()))
    count = write_table(page.items, output, title=module)
    click.echo(f"Wrote {count} rows to {output}")
    if page.total > count:
        log.warning("Only %d of %d records exported; raise --limit for more", count, page.total)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


@main.group()
def chat():
    """Talk to the accounting assistant."""


def _table_columns(columns: Any) -> list[str] | None:
    """Column keys from a data_table event: plain names or {key, label} objects."""
    if not columns:
        return None
    keys = []
    for col in columns:
        if isinstance(col, dict):
            key = col.get("key") or col.get("field") or col.get("name")
            if key:
                keys.append(str(key))
        else:
            keys.append(str(col))
    return keys or None


@chat.command("send")
@click.argument("message")
@click.option("--conversation", "conversation_id", help="Conversation id (default: start a new one)")
@click.option("--file", "files", multiple=True, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Attach a file (repeatable)")
@click.option("--save-table", type=click.Path(path_type=Path), help="Write data tables from the reply to this .csv/.xlsx")
@click.pass_context
def chat_send(
    ctx: click.Context,
    message: str,
    conversation_id: str | None,
    files: tuple[Path, ...],
    save_table: Path | None,
):
    """Send MESSAGE and stream the assistant's reply."""

    async def _send():
        async with _client(ctx) as client:
            chat_client = ChatClient(client)
            conv_id = conversation_id
            if conv_id is None:
                conv_id = (await chat_client.create_conversation()).id
                log.info("Conversation %s", conv_id)
            file_ids = [await chat_client.upload_chat_file(p) for p in files]

            printed = 0

            def _echo_delta(store):
                nonlocal printed
                text = store.streaming_message
                if len(text) > printed:
                    click.echo(text[printed:], nl=False)
                    printed = len(text)
                elif not text:
                    printed = 0

            unsubscribe = chat_client.store.subscribe(_echo_delta)
            try:
                return await chat_client.send_message(conv_id, message, file_ids)
            finally:
                unsubscribe()

    try:
        result = _run(_send())
    except UploadValidationError as e:
        raise click.ClickException(str(e))
    click.echo()
    if save_table and result.tables:
        for i, table in enumerate(result.tables):
            path = save_table
            if i:
                path = save_table.with_name(f"{save_table.stem}-{i + 1}{save_table.suffix}")
            count = write_table(
                table.get("rows") or [],
                path,
                columns=_table_columns(table.get("columns")),
                title=table.get("title"),
            )
            click.echo(f"Saved table '{table.get('title', '')}' ({count} rows) to {path}")
    elif save_table:
        log.warning("The reply contained no data tables")
    if result.error:
        raise click.ClickException(result.error)


@chat.command("list")
@click.pass_context
def chat_list(ctx: click.Context):
    """List conversations."""

    async def _list():
        async with _client(ctx) as client:
            return await ChatClient(client).fetch_conversations()

    conversations = _run(_list())
    if not conversations:
        click.echo("No conversations.")
        return
    _print_rows(conversations, ("id", "title", "updated_at"))


@chat.command("new")
@click.pass_context
def chat_new(ctx: click.Context):
    """Start a new conversation and print its id."""

    async def _new():
        async with _client(ctx) as client:
            return await ChatClient(client).create_conversation()

    click.echo(_run(_new()).id)


@chat.command("history")
@click.argument("conversation_id")
@click.pass_context
def chat_history(ctx: click.Context, conversation_id: str):
    """Show the messages of a conversation."""

    async def _history():
        async with _client(ctx) as client:
            return await ChatClient(client).fetch_conversation_history(conversation_id)

    conversation, messages = _run(_history())
    click.echo(conversation.title or conversation_id)
    for m in messages:
        click.echo(f"\n[{m.role.lower()}] {m.content}")


@chat.command("delete")
@click.argument("conversation_id")
@click.pass_context
def chat_delete(ctx: click.Context, conversation_id: str):
    """Delete a conversation."""

    async def _delete():
        async with _client(ctx) as client:
            await ChatClient(client).delete_conversation(conversation_id)

    _run(_delete())
    click.echo(f"Deleted {conversation_id}")


if __name__ == "__main__":
    main()
