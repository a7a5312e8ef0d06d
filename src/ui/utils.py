"""UI helpers that do not depend on Streamlit."""

from src.core.models import EXTRACTION_FIELDS, LOCATIONS

DEFAULT_LOCATION = LOCATIONS[0]


def empty_form() -> dict[str, str]:
    """Initial state of a creation form."""
    return {
        "title": "",
        "description": "",
        "location": DEFAULT_LOCATION,
        "category": "",
        "author": "",
    }


def merge_extracted_fields(form: dict[str, str], extracted: dict) -> dict[str, str]:
    """Overlay extracted fields onto the current form state.

    Only fields present (and non-empty) in *extracted* overwrite the form;
    everything else the user typed is kept. A location outside the
    selectable set is ignored.
    """
    merged = dict(form)
    for field in EXTRACTION_FIELDS:
        value = extracted.get(field)
        if not isinstance(value, str) or not value.strip():
            continue
        if field == "location" and value not in LOCATIONS:
            continue
        merged[field] = value
    return merged


def build_draft(form: dict[str, str], post_type: str) -> dict[str, str]:
    """Turn form state into a ``POST /posts`` body."""
    draft = {field: (form.get(field) or "").strip() for field in EXTRACTION_FIELDS}
    draft["type"] = post_type
    return draft


def missing_required(form: dict[str, str]) -> list[str]:
    """Return the required form fields that are still empty."""
    return [
        field
        for field in ("title", "location", "category", "author")
        if not (form.get(field) or "").strip()
    ]


def describe_voice_error(error_type: str | None, message: str, post_type: str) -> tuple[str, str]:
    """Return a (heading, body) pair for a failed voice extraction."""
    if error_type == "INSUFFICIENT_INFO":
        return (
            "Not enough information",
            "I couldn't gather enough details from your recording. "
            "Please try again with more specific information.",
        )
    if error_type == "INVALID_FORMAT":
        return (
            "Format issue",
            "I had trouble extracting structured data from your recording. "
            f"Please try again with a clearer description of your {post_type.lower()}.",
        )
    if error_type == "MIC_PERMISSION":
        return ("Microphone access needed", message)
    return ("Error", message)
