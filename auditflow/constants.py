"""Static reference data shared by validators, formatters and the CLI.

Indian GST rates and state codes, upload limits, default reconciliation
tolerances and the regular expressions used for master-data validation.
"""

import re

# Indian GST slabs (percent)
GST_RATES = (0, 5, 12, 18, 28)

# GST state codes (first two characters of a GSTIN)
INDIAN_STATES: dict[str, str] = {
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "26": "Dadra and Nagar Haveli and Daman and Diu",
    "27": "Maharashtra",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "38": "Ladakh",
}

# --- Uploads ---

MAX_FILE_SIZE = 26214400  # 25MB in bytes
MAX_FILES_PER_UPLOAD = 10

ACCEPTED_FILE_TYPES: dict[str, tuple[str, ...]] = {
    "application/pdf": (".pdf",),
    "application/vnd.ms-excel": (".xls",),
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": (".xlsx",),
    "text/csv": (".csv",),
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
}

# Reverse lookup: extension -> MIME type
EXTENSION_MIME_TYPES: dict[str, str] = {
    ext: mime for mime, exts in ACCEPTED_FILE_TYPES.items() for ext in exts
}

# --- Reconciliation defaults ---

DEFAULT_REMINDER_DAYS = (7, 15, 30)

RECONCILIATION_FREQUENCIES = ("WEEKLY", "BIWEEKLY", "MONTHLY", "QUARTERLY")

DEFAULT_TOLERANCES: dict[str, float] = {
    "payment": 1.0,  # Rs 1
    "gst": 1.0,  # Rs 1
    "quantity": 0,  # exact match
    "price": 0.5,  # percent
}

BANK_TRANSACTION_TYPES = (
    "NEFT",
    "RTGS",
    "IMPS",
    "UPI",
    "CHEQUE",
    "CASH_DEPOSIT",
    "CASH_WITHDRAWAL",
    "BANK_CHARGES",
    "INTEREST",
    "OTHER",
)

UNITS = (
    "PCS",
    "KG",
    "GRAM",
    "LTR",
    "ML",
    "MTR",
    "CM",
    "SQM",
    "SQFT",
    "BOX",
    "CTN",
    "BUNDLE",
    "DOZEN",
    "SET",
)

# Indian financial year runs April..March
FINANCIAL_YEAR_START_MONTH = 4
FINANCIAL_YEAR_END_MONTH = 3

# --- Patterns ---

GSTIN_RE = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$")
PAN_RE = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$")
MOBILE_RE = re.compile(r"^[6-9]\d{9}$")
# Indian pincodes never start with 0
PINCODE_RE = re.compile(r"^[1-9][0-9]{5}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PATTERNS: dict[str, re.Pattern[str]] = {
    "GSTIN": GSTIN_RE,
    "PAN": PAN_RE,
    "MOBILE": MOBILE_RE,
    "PINCODE": PINCODE_RE,
    "EMAIL": EMAIL_RE,
}
