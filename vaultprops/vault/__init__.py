"""Vault loading and property lint rules."""

from .loader import Vault, load_note, load_vault
from .rules import LintResult, PropertyRules

__all__ = [
    "load_note",
    "load_vault",
    "Vault",
    "LintResult",
    "PropertyRules",
]
