from typing import Any, List

from .errors import InputError

REQUIRED_TEXT_FIELDS = ("resume_text", "job_text")


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_match_request(resume_text: Any, job_text: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []
    for name, value in zip(REQUIRED_TEXT_FIELDS, (resume_text, job_text)):
        if value is None:
            errors.append(f"Missing required field: {name}")
        elif not isinstance(value, str):
            errors.append(f"Field '{name}' must be a string")
        elif not _is_non_empty_str(value):
            errors.append(f"Field '{name}' must be a non-empty string")
    return errors


def require_valid_inputs(resume_text: Any, job_text: Any) -> None:
    """Raise InputError listing every problem with the request texts."""
    errors = validate_match_request(resume_text, job_text)
    if errors:
        raise InputError("Invalid match request: " + "; ".join(errors), errors=errors)
