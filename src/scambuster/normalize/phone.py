# src/scambuster/normalize/phone.py

import re

_NON_DIGIT = re.compile(r"\D")
_KENYAN_CORE = re.compile(r"^[17]")


def normalize_phone(phone: str) -> str:
    """
    Normalize a Kenyan phone number to digits only in 254XXXXXXXXX form.

    Numbers that do not look Kenyan are returned as their digits unchanged.

    Examples:
        >>> normalize_phone("0712 345 678")
        '254712345678'
        >>> normalize_phone("+254712345678")
        '254712345678'
    """
    cleaned = _NON_DIGIT.sub("", phone)

    if cleaned.startswith("254"):
        # Someone typed 25407...
        if len(cleaned) > 12 and cleaned.startswith("2540"):
            cleaned = "254" + cleaned[4:]
    elif cleaned.startswith("0"):
        cleaned = "254" + cleaned[1:]
    elif len(cleaned) == 9 and _KENYAN_CORE.match(cleaned):
        cleaned = "254" + cleaned

    return cleaned


def format_kenyan_phone(phone: str) -> str:
    """Format a phone number for display (e.g. 0712 345 678)."""
    if not phone:
        return phone

    cleaned = _NON_DIGIT.sub("", phone)

    core = None
    if cleaned.startswith("254") and len(cleaned) == 12:
        core = cleaned[3:]
    elif cleaned.startswith("0") and len(cleaned) == 10:
        core = cleaned[1:]
    elif len(cleaned) == 9 and _KENYAN_CORE.match(cleaned):
        core = cleaned

    if core:
        return f"0{core[:3]} {core[3:6]} {core[6:9]}"
    return phone


def looks_like_kenyan_phone(value: str) -> bool:
    """Tell a Kenyan mobile number apart from a paybill or till number."""
    cleaned = _NON_DIGIT.sub("", value)
    if re.match(r"^\+?254", value):
        return True
    if re.match(r"^0[71]", value) and len(cleaned) >= 9:
        return True
    if len(cleaned) == 9 and re.match(r"^[71]", cleaned):
        return True
    if len(cleaned) == 10 and re.match(r"^0[71]", cleaned):
        return True
    if len(cleaned) == 12 and cleaned.startswith("254"):
        return True
    return False
