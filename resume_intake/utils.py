import copy
import re
from typing import Dict, Any, Optional


YEAR_MONTH_PATTERN = re.compile(r"\b((?:19|20)\d{2})[-/.](0?[1-9]|1[0-2])\b")
YEAR_PATTERN = re.compile(r"\b((?:19|20)\d{2})\b")
MONTH_YEAR_PATTERN = re.compile(r"\b(0?[1-9]|1[0-2])[-/.]((?:19|20)\d{2})\b")
MONTH_NAME_PATTERN = re.compile(
    r"\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?,?\s+((?:19|20)\d{2})\b",
    re.IGNORECASE,
)
MONTH_NUMBERS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"), 1
    )
}


def is_object(item: Any) -> bool:
    return bool(item) and isinstance(item, dict)


def deep_merge(
    target: Dict[str, Any], source: Dict[str, Any], level: int = 0
) -> Dict[str, Any]:
    """
    Deep merge two objects by overriding target with fields in source.
    Returns a new object.
    """
    copy_target = copy.deepcopy(target) if level == 0 else target
    for key, source_value in source.items():
        if not is_object(source_value):
            copy_target[key] = source_value
        else:
            if not is_object(copy_target.get(key)):
                copy_target[key] = {}
            deep_merge(copy_target[key], source_value, level + 1)
    return copy_target


def as_text(value: Any) -> str:
    """Coerce an untrusted scalar to a stripped string, ``""`` for null/containers."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


def as_non_negative_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        match = re.search(r"\d+", as_text(value))
        number = int(match.group(0)) if match else 0
    return max(number, 0)


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "current", "present")
    if isinstance(value, (int, float)):
        return value != 0
    return False


def to_year_month(value: Any) -> Optional[str]:
    """Normalize a date-ish value to ``YYYY-MM``.

    Accepts ``YYYY-MM``, ``MM/YYYY`` and ``Mar 2019`` style values. Anything
    without a recognizable month, a bare year included, becomes ``None``.
    """
    text = as_text(value)
    if not text:
        return None
    match = YEAR_MONTH_PATTERN.search(text)
    if match:
        return f"{match.group(1)}-{int(match.group(2)):02d}"
    match = MONTH_YEAR_PATTERN.search(text)
    if match:
        return f"{match.group(2)}-{int(match.group(1)):02d}"
    match = MONTH_NAME_PATTERN.search(text)
    if match:
        return f"{match.group(2)}-{MONTH_NUMBERS[match.group(1)[:3].lower()]:02d}"
    return None


def to_year(value: Any) -> Optional[str]:
    text = as_text(value)
    if not text:
        return None
    match = YEAR_PATTERN.search(text)
    return match.group(1) if match else None
