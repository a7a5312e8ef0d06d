"""
Extraction module - LLM-based transcript parsing into post fields.
"""

from src.services.extraction.extractor import (
    MalformedOutputError,
    PostExtractor,
    build_system_prompt,
    parse_model_output,
)

__all__ = ["MalformedOutputError", "PostExtractor", "build_system_prompt", "parse_model_output"]
