"""
Compensation parsing — free text like "$150k-$175k" into {min, max, currency, raw}.
"""
import re

DEFAULT_CURRENCY = 'USD'

_RANGE = re.compile(r'(\d+)\s*-\s*(\d+)')
_NUMBER = re.compile(r'(\d+)')


def parse_compensation(value, currency=DEFAULT_CURRENCY):
    """
    Parse a compensation string into a structured dict.

    "$150k-$175k"   -> min=150000, max=175000
    "120000"        -> min=max=120000
    "competitive"   -> min=max=None
    The original text is always kept in `raw`.
    """
    if value is None:
        return {'min': None, 'max': None, 'currency': currency, 'raw': ''}

    raw = str(value).strip()
    if not raw:
        return {'min': None, 'max': None, 'currency': currency, 'raw': ''}

    cleaned = re.sub(r'[$,]', '', raw)
    cleaned = re.sub(r'k', '000', cleaned, flags=re.IGNORECASE)

    match = _RANGE.search(cleaned)
    if match:
        return {
            'min': int(match.group(1)),
            'max': int(match.group(2)),
            'currency': currency,
            'raw': raw,
        }

    match = _NUMBER.search(cleaned)
    if match:
        amount = int(match.group(1))
        return {'min': amount, 'max': amount, 'currency': currency, 'raw': raw}

    return {'min': None, 'max': None, 'currency': currency, 'raw': raw}
