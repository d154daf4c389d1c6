"""AuditFlow client toolkit: validators, GST math, REST and chat clients."""

from .api import ApiError, ApiResponse, AuditFlowClient
from .chat import ChatClient, ChatStore, ChatStreamError, StreamResult
from .config import Settings, TokenStore
from .export import write_table
from .formatting import (
    format_currency,
    format_indian_number,
    format_period,
    get_financial_year,
    parse_period,
)
from .gst import (
    calculate_inter_state_gst,
    calculate_intra_state_gst,
    is_within_tolerance,
    round_to_2_decimals,
)
from .templates import WORKFLOW_TEMPLATES, get_template, get_templates_by_category
from .validators import (
    UploadValidationError,
    get_pan_from_gstin,
    get_state_code_from_gstin,
    is_intra_state_transaction,
    validate_email,
    validate_gstin,
    validate_mobile,
    validate_pan,
    validate_pincode,
)

__all__ = [
    # REST client
    "ApiError",
    "ApiResponse",
    "AuditFlowClient",
    # Chat
    "ChatClient",
    "ChatStore",
    "ChatStreamError",
    "StreamResult",
    # Config
    "Settings",
    "TokenStore",
    # Export
    "write_table",
    # Formatting
    "format_currency",
    "format_indian_number",
    "format_period",
    "get_financial_year",
    "parse_period",
    # GST
    "calculate_inter_state_gst",
    "calculate_intra_state_gst",
    "is_within_tolerance",
    "round_to_2_decimals",
    # Workflow templates
    "WORKFLOW_TEMPLATES",
    "get_template",
    "get_templates_by_category",
    # Validators
    "UploadValidationError",
    "get_pan_from_gstin",
    "get_state_code_from_gstin",
    "is_intra_state_transaction",
    "validate_email",
    "validate_gstin",
    "validate_mobile",
    "validate_pan",
    "validate_pincode",
]
