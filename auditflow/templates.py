"""Canned prompts for common accounting workflows, sent to the chat assistant."""

from dataclasses import dataclass

CATEGORIES = ("upload", "reconciliation", "analysis", "communication")

CATEGORY_LABELS = {
    "upload": "Document Upload",
    "reconciliation": "Reconciliation",
    "analysis": "Analysis & Reports",
    "communication": "Communication",
}

CATEGORY_DESCRIPTIONS = {
    "upload": "Upload and process documents with automatic extraction",
    "reconciliation": "Match and reconcile transactions across systems",
    "analysis": "Generate insights and identify issues",
    "communication": "Send reminders and requests to vendors",
}


@dataclass(frozen=True)
class WorkflowTemplate:
    id: str
    title: str
    description: str
    icon: str
    prompt: str
    category: str
    estimated_time: str | None = None
    requires_files: bool = False


WORKFLOW_TEMPLATES: tuple[WorkflowTemplate, ...] = (
    # Upload
    WorkflowTemplate(
        id="upload-process-invoice",
        title="Upload & Process Invoice",
        description="Upload invoice files and automatically extract, classify, and validate data",
        icon="FileText",
        prompt=(
            "I want to upload and process invoice files. Please guide me through uploading "
            "invoices, and then automatically extract all data, validate arithmetic, classify "
            "the document type, and suggest next steps for reconciliation."
        ),
        category="upload",
        estimated_time="2-3 min",
        requires_files=True,
    ),
    WorkflowTemplate(
        id="batch-document-upload",
        title="Batch Document Upload",
        description="Upload multiple documents at once for processing",
        icon="Upload",
        prompt=(
            "I need to upload multiple documents in batch. Please help me upload all files, "
            "process them sequentially, classify each document type, extract data from all of "
            "them, and provide a summary of what was processed."
        ),
        category="upload",
        estimated_time="5-10 min",
        requires_files=True,
    ),
    WorkflowTemplate(
        id="bank-statement-upload",
        title="Process Bank Statement",
        description="Upload and reconcile bank statements with invoices",
        icon="CreditCard",
        prompt=(
            "I want to upload a bank statement. Please extract all transactions, match them to "
            "existing invoices and payments, identify unmatched transactions, and show "
            "reconciliation status."
        ),
        category="upload",
        estimated_time="3-5 min",
        requires_files=True,
    ),
    # Reconciliation
    WorkflowTemplate(
        id="monthly-gst-reconciliation",
        title="Monthly GST Reconciliation",
        description="Complete GST return reconciliation for the month",
        icon="Receipt",
        prompt=(
            "Run monthly GST reconciliation for this month. Show me GSTR-2A entries, match them "
            "with book entries, identify ITC available, flag mismatches, and provide a "
            "reconciliation summary with action items."
        ),
        category="reconciliation",
        estimated_time="5-7 min",
    ),
    WorkflowTemplate(
        id="po-invoice-matching",
        title="PO-Invoice Matching",
        description="Match purchase orders with received invoices",
        icon="GitCompare",
        prompt=(
            "Run PO-Invoice matching for recent invoices. Find all unmatched invoices, search for "
            "corresponding POs, show match scores, highlight discrepancies in quantity or "
            "amount, and recommend actions."
        ),
        category="reconciliation",
        estimated_time="3-5 min",
    ),
    WorkflowTemplate(
        id="payment-reconciliation",
        title="Payment Reconciliation",
        description="Match payments to invoices and identify discrepancies",
        icon="CreditCard",
        prompt=(
            "Reconcile payments with invoices. Show all unmatched payments, find matching "
            "invoices, calculate outstanding amounts, identify partial payments, and flag any "
            "payment discrepancies."
        ),
        category="reconciliation",
        estimated_time="4-6 min",
    ),
    WorkflowTemplate(
        id="month-end-close",
        title="Month-End Close",
        description="Complete month-end closing checklist",
        icon="Calendar",
        prompt=(
            "Help me with month-end closing. Show pending reconciliations, unmatched "
            "transactions, outstanding invoices, GST status, payment status, and generate a "
            "month-end summary report."
        ),
        category="reconciliation",
        estimated_time="10-15 min",
    ),
    # Analysis
    WorkflowTemplate(
        id="vendor-aging-analysis",
        title="Vendor Aging Analysis",
        description="Analyze outstanding vendor payments by age",
        icon="Users",
        prompt=(
            "Run vendor aging analysis. Show all unpaid vendor invoices grouped by age buckets "
            "(0-30, 31-60, 61-90, 90+ days), calculate total outstanding by vendor, flag overdue "
            "payments, and suggest payment priorities."
        ),
        category="analysis",
        estimated_time="2-3 min",
    ),
    WorkflowTemplate(
        id="discount-audit",
        title="Discount Audit",
        description="Audit vendor discounts and identify missed opportunities",
        icon="TrendingUp",
        prompt=(
            "Audit vendor discounts. Check all invoices against discount terms, identify missed "
            "early payment discounts, calculate potential savings, flag non-compliant discounts, "
            "and recommend actions."
        ),
        category="analysis",
        estimated_time="3-5 min",
    ),
    WorkflowTemplate(
        id="reconciliation-health",
        title="Reconciliation Health Check",
        description="Get overall status of all reconciliation modules",
        icon="FileCheck",
        prompt=(
            "Show me reconciliation health across all modules. Display PO-invoice match rates, "
            "payment match rates, GST reconciliation status, unmatched items count, and overall "
            "reconciliation health score."
        ),
        category="analysis",
        estimated_time="1-2 min",
    ),
    WorkflowTemplate(
        id="find-duplicates",
        title="Find Duplicate Payments",
        description="Identify potential duplicate or erroneous payments",
        icon="AlertCircle",
        prompt=(
            "Find potential duplicate payments. Search for payments with same amount, vendor, "
            "and dates within 7 days. Show suspicious transactions, calculate total amount at "
            "risk, and suggest verification steps."
        ),
        category="analysis",
        estimated_time="2-3 min",
    ),
    # Communication
    WorkflowTemplate(
        id="vendor-statement-request",
        title="Vendor Statement Request",
        description="Request ledger confirmation from vendors",
        icon="Mail",
        prompt=(
            "Help me request vendor statements. Show vendors with outstanding balances, draft "
            "ledger confirmation requests with account details, and prepare a list of vendors "
            "to contact."
        ),
        category="communication",
        estimated_time="5-10 min",
    ),
    WorkflowTemplate(
        id="payment-reminders",
        title="Payment Reminders",
        description="Send payment reminders for overdue invoices",
        icon="Mail",
        prompt=(
            "Generate payment reminders. Identify overdue invoices, draft reminder messages with "
            "invoice details and amounts, prioritize by vendor and amount, and prepare reminder "
            "emails."
        ),
        category="communication",
        estimated_time="5-8 min",
    ),
    WorkflowTemplate(
        id="inventory-check",
        title="Inventory Reconciliation",
        description="Reconcile physical inventory with book records",
        icon="PackageCheck",
        prompt=(
            "Help with inventory reconciliation. Compare physical stock with book records, "
            "identify discrepancies, calculate variance amounts, flag high-value differences, "
            "and suggest corrective actions."
        ),
        category="analysis",
        estimated_time="5-10 min",
    ),
)


def get_templates_by_category() -> dict[str, list[WorkflowTemplate]]:
    """Group templates by category, in first-seen order."""
    grouped: dict[str, list[WorkflowTemplate]] = {}
    for template in WORKFLOW_TEMPLATES:
        grouped.setdefault(template.category, []).append(template)
    return grouped


def get_template(template_id: str) -> WorkflowTemplate | None:
    for template in WORKFLOW_TEMPLATES:
        if template.id == template_id:
            return template
    return None
