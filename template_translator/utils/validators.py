from typing import Optional


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def require_not_blank(value: Optional[str], name: str) -> str:
    if is_blank(value):
        raise ValueError(f"{name} must not be empty or whitespace")
    return value
