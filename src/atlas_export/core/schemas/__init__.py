"""
Schema validation for template documents.
"""

from .validator import ValidationError, validate_template

__all__ = ["ValidationError", "validate_template"]
