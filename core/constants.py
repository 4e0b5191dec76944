"""
Constants and configuration values for document analysis.
"""

# Spatial reconstruction tolerances (relative to average element height)
RECONSTRUCTION_PARAMS = {
    'min_tolerance': 5.0,          # Lower bound for same-line alignment tolerance
    'tolerance_ratio': 0.4,        # Alignment tolerance = avg_height * ratio
    'paragraph_gap_ratio': 2.5,    # Vertical gap > 2.5x avg height -> blank line
    'column_gap_ratio': 3.0,       # Horizontal gap > 3x avg height -> tab
    'min_space_gap': 5.0,          # Horizontal gap > 5 units -> single space
}

# Structured-completion defaults
DEFAULT_LLM_PARAMS = {
    'temperature': 0.01,
    'max_tokens': 8000,
    'text_budget': 25000,
}

# Default OCR parameters
DEFAULT_OCR_PARAMS = {
    'max_tokens': 4096,
    'temperature': 0.0,
    'target_dpi': 200,
    'max_image_size': 2048,
}

# OCR prompt templates
OCR_PROMPTS = {
    'grounded_words': '<image>\n<|grounding|>OCR this image.',
}

# Grounding format regex pattern: (full_match, text, coords)
GROUNDING_PATTERN = r'(<\|ref\|>(.*?)<\|/ref\|><\|det\|>(.*?)<\|/det\|>)'

# Grounding coordinates are normalized to 0-999
GROUNDING_COORD_SCALE = 999.0

# Recognised document types; anything else is stored as 'other'
DOCUMENT_TYPES = frozenset({
    'request',
    'quote',
    'invoice',
    'delivery',
    'transfer',
    'receipt',
    'other',
})

DEFAULT_CURRENCY = 'EUR'
DEFAULT_UNIT = 'kom'

# Provenance tags and nominal confidence per extraction path
METHOD_LLM = 'LLM (Spatial)'
METHOD_LLM_RECOVERED = 'LLM (Spatial Fallback)'
METHOD_REGEX = 'Regex (Fallback)'
METHOD_DISABLED = 'Disabled'
METHOD_FAILED = 'Failed'

CONFIDENCE = {
    METHOD_LLM: 0.98,
    METHOD_LLM_RECOVERED: 0.85,
    METHOD_REGEX: 0.60,
    METHOD_DISABLED: 0.0,
    METHOD_FAILED: 0.0,
}

# Field-path conventions used by manual edits
NUMERIC_PATH_MARKERS = ('totals.', 'Price', 'Amount', 'quantity', 'Percent')
DATE_FIELDS = ('date', 'dueDate')

LLM_SYSTEM_PROMPT = """
You are an assistant specialised in analysing business documents (quotes, invoices, delivery notes).
Your input is text reconstructed from the spatial layout of the page: spaces separate words and
TAB characters (\\t) separate table columns. Extract the structured data and return it EXCLUSIVELY
as one JSON object.

### SPATIAL AWARENESS:
The input keeps the visual layout of the original document. Treat tab-separated runs on one line
as cells of one table row.

### CRITICAL INSTRUCTIONS:
1. **Numbers:** The input may use European formatting (1.234,56 or 4,25). Every number in the JSON
   output MUST be of type 'number' (e.g. 1234.56).
2. **Dates:** All dates must be ISO formatted: YYYY-MM-DD. Convert formats such as '08.07.25'.
3. **Parties:** Identify the supplier and the buyer. Look for tax ids (OIB with 11 digits,
   VAT ids such as HR..., or national id numbers).
4. **Items:** Use the column layout to identify code, description (join descriptions that span
   several visually grouped lines), quantity, unit (pcs, kom, kg, m2), unit price, discount
   percent and the line total (net).

### JSON SCHEMA (follow strictly):
{
  "documentType": "string (enum: request, quote, invoice, delivery, transfer, receipt, other)",
  "documentNumber": "string",
  "date": "YYYY-MM-DD",
  "dueDate": "YYYY-MM-DD | null",
  "currency": "string (e.g. EUR, BAM)",
  "supplier": { "name": "string", "address": "string | null", "taxId": "string | null", "iban": "string | null" },
  "buyer": { "name": "string", "address": "string | null", "taxId": "string | null" },
  "items": [
    {
      "position": "integer",
      "code": "string | null",
      "description": "string",
      "quantity": "number",
      "unit": "string",
      "unitPrice": "number",
      "discountPercent": "number | null",
      "totalPrice": "number"
    }
  ],
  "totals": {
    "subtotal": "number",
    "vatAmount": "number",
    "totalAmount": "number"
  }
}
"""

LLM_USER_PREFIX = 'Analyze the following document:\n\n'

# Fallback regex patterns: field path -> candidate patterns (first capture group wins)
_AMOUNT = r'(?:EUR|€|BAM|KM)?\s*(-?\d[\d.,]*)'
_DATE = r'(\d{1,2}[./-]\d{1,2}[./-]\d{2,4}\.?)'

REGEX_FIELD_PATTERNS = {
    'documentNumber': [
        r'(?:Ponuda|Predračun|Račun|Otpremnica|Invoice|Quote|Offer)\s*(?:br|No|Nr|#)\.?[\s:]*([A-Z0-9][A-Z0-9\-/]*)',
        r'\bbr\.[\s:]*([A-Z0-9][A-Z0-9\-/]*)',
    ],
    'date': [
        r'(?:Datum(?:\s+(?:računa|izdavanja|ponude|dokumenta))?|Invoice\s+date|Date(?:\s+of\s+issue)?)[\s:]*' + _DATE,
    ],
    'dueDate': [
        r'(?:Rok\s+plaćanja|Dospijeće|Valuta\s+plaćanja|Due\s+date|Payment\s+due)[\s:]*' + _DATE,
    ],
    'currency': [
        r'\b(EUR|BAM|HRK|USD|GBP|CHF)\b',
        r'(€)',
    ],
    'supplier.taxId': [
        r'\bOIB[\s:]*(\d{11})\b',
        r'\b(HR\d{11})\b',
    ],
    'supplier.iban': [
        r'\bIBAN[\s:]*([A-Z]{2}\d{2}(?: ?[A-Z0-9]{4}){3,7}(?: ?[A-Z0-9]{1,3})?)',
        r'\b(HR\d{19})\b',
    ],
    'totals.subtotal': [
        r'(?:Osnovica|(?:Ukupno|Iznos)\s+bez\s+PDV-?a|Subtotal|Net\s+amount|Total\s+net)[\s:]*' + _AMOUNT,
    ],
    'totals.vatAmount': [
        r'(?:PDV|VAT)(?:\s*\d{1,2}(?:[.,]\d+)?\s*%)?[\s:]*' + _AMOUNT,
    ],
    'totals.totalAmount': [
        r'(?:Ukupno\s+za\s+platiti|Sveukupno|Za\s+platiti|Ukupan\s+iznos|Total\s+amount|Grand\s+total|Amount\s+due)[\s:]*' + _AMOUNT,
        r'\bUkupno\b[\s:]*' + _AMOUNT,
        r'\bTotal\b[\s:]*' + _AMOUNT,
    ],
}

# Ordered keyword rules for coarse document type detection (lowercase substring match)
DOCUMENT_TYPE_KEYWORDS = [
    ('request', ('zahtjev za ponudu', 'upit za ponudu', 'request for quotation', 'request for quote')),
    ('quote', ('ponuda', 'predračun', 'offer', 'quotation', 'quote', 'pro forma', 'proforma', 'pre-invoice')),
    ('invoice', ('račun', 'invoice', 'faktura')),
    ('delivery', ('otpremnica', 'delivery note', 'dispatch note')),
    ('transfer', ('međuskladišnica', 'stock transfer', 'transfer note')),
    ('receipt', ('primka', 'goods receipt')),
]

DEFAULT_DOCUMENT_TYPE = 'invoice'

CURRENCY_SYMBOLS = {
    '€': 'EUR',
    'KM': 'BAM',
    'kn': 'HRK',
    '$': 'USD',
    '£': 'GBP',
}
