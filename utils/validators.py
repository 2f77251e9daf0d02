from typing import Optional

# Characters that would break the line-oriented record files
FORBIDDEN_CHARS = ("|", "\n", "\r")


class TextValidator:
    """Validations for the identifiers the catalog stores."""

    @staticmethod
    def problem(label: str, text: Optional[str]) -> Optional[str]:
        """Describe why ``text`` cannot be stored, or None if it can."""
        if text is None or not text.strip():
            return f"{label} cannot be empty."
        if any(ch in text.strip() for ch in FORBIDDEN_CHARS):
            return f"{label} cannot contain '|' or line breaks."
        return None
