"""Content-generation collaborator: LiteLLM client and prompt templates."""

from inkwell.llm.client import error_payload, generate_content, validate_api_key
from inkwell.llm.prompts import (
    build_generate_messages,
    build_patch_messages,
    generate_system_prompt,
    patch_system_prompt,
)

__all__ = [
    "build_generate_messages",
    "build_patch_messages",
    "error_payload",
    "generate_content",
    "generate_system_prompt",
    "patch_system_prompt",
    "validate_api_key",
]
