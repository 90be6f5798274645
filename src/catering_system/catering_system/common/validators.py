from __future__ import annotations

from typing import Iterable, Optional

from ..core.enums import ErrorKind
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", kind=ErrorKind.MISSING_REQUIRED_FIELD)
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def unique_names(values: Iterable[str]) -> tuple[str, ...]:
    """Trim, drop blanks and case-insensitive duplicates; first spelling wins."""
    seen: set[str] = set()
    out: list[str] = []
    for v in values or ():
        name = str(v).strip()
        if not name or name.casefold() in seen:
            continue
        seen.add(name.casefold())
        out.append(name)
    return tuple(out)


def clean_list(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(v.strip() for v in (values or ()) if v and str(v).strip())
