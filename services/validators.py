"""Validators and input masks for Brazilian document and contact formats."""

import re

CPF_RE = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{2}$")
CNPJ_RE = re.compile(r"^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$")
PHONE_RE = re.compile(r"^\(\d{2}\) \d{4,5}-\d{4}$")
CEP_RE = re.compile(r"^\d{5}-\d{3}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _digits(value: str | None) -> str:
    return re.sub(r"\D", "", value or "")


def mask_phone(value: str) -> str:
    """Format raw digits as ``(11) 91234-5678`` / ``(11) 1234-5678``.

    Args:
        value: Phone number in any notation.

    Returns:
        str: The masked number; partial input is masked as far as possible.
    """
    digits = _digits(value)
    digits = re.sub(r"^(\d{2})(\d)", r"(\1) \2", digits)
    return re.sub(r"(\d)(\d{4})$", r"\1-\2", digits)


def mask_cep(value: str) -> str:
    return re.sub(r"(\d{5})(\d)", r"\1-\2", _digits(value))


def mask_cpf(value: str) -> str:
    digits = _digits(value)
    digits = re.sub(r"(\d{3})(\d)", r"\1.\2", digits, count=1)
    digits = re.sub(r"(\d{3})(\d)", r"\1.\2", digits, count=1)
    return re.sub(r"(\d{3})(\d{1,2})$", r"\1-\2", digits)


def mask_cnpj(value: str) -> str:
    digits = _digits(value)
    digits = re.sub(r"(\d{2})(\d)", r"\1.\2", digits, count=1)
    digits = re.sub(r"(\d{3})(\d)", r"\1.\2", digits, count=1)
    digits = re.sub(r"(\d{3})(\d)", r"\1/\2", digits, count=1)
    return re.sub(r"(\d{4})(\d)", r"\1-\2", digits, count=1)


def is_valid_cpf(value: str | None) -> bool:
    """Format check only, check digits are not verified."""
    return bool(value) and bool(CPF_RE.match(value))


def is_valid_cnpj(value: str | None) -> bool:
    return bool(value) and bool(CNPJ_RE.match(value))


def is_valid_phone(value: str | None) -> bool:
    return bool(value) and bool(PHONE_RE.match(value))


def is_valid_cep(value: str | None) -> bool:
    return bool(value) and bool(CEP_RE.match(value))


def is_valid_email(value: str | None) -> bool:
    return bool(value) and bool(EMAIL_RE.match(value.strip()))


def compose_address(address: str, city: str, uf: str, cep: str) -> str:
    """Join the address form fields into the single stored line."""
    return f"{address}, {city}, {uf}, {cep}"


def normalize_text(value: str | None) -> str:
    """Collapse runs of whitespace and strip the ends."""
    return re.sub(r"\s+", " ", value or "").strip()
