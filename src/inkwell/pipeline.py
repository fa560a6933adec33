"""Generate and patch pipelines.

Generation:
  prompt → model → normalize → extract working markup → sanitize
         → decompose → reassemble → Project

Patching:
  project + target id + instruction → owning fragment → target markup
         → model → normalize (patch rules) → sanitize → patch orchestrator

Network calls happen before the markup core runs; nothing here touches disk.
Persisting the returned Project is the caller's job.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from inkwell.config import InkwellConfig
from inkwell.errors import InvalidInputError, TargetNotFoundError, UpstreamError
from inkwell.llm.client import error_payload, generate_content
from inkwell.llm.prompts import (
    build_generate_messages,
    build_patch_messages,
    generate_system_prompt,
    patch_system_prompt,
)
from inkwell.markup.assembler import reassemble, verify_assembly
from inkwell.markup.decomposer import decompose_markup
from inkwell.markup.identity import new_id
from inkwell.markup.normalize import GENERATION_RULES, PATCH_RULES, normalize
from inkwell.markup.parser import error_fragment, extract_working_markup
from inkwell.markup.sanitizer import sanitize
from inkwell.markup.splicer import extract_target_markup
from inkwell.models import ChangeRecord, Project, utcnow
from inkwell.patcher import find_owner, patch_project

logger = logging.getLogger(__name__)

GenerateFn = Callable[..., str]

_TITLE_LENGTH = 50
INITIAL_CHANGE_ID = "initial"
INITIAL_DESCRIPTION = "Initial generation."


def prepare_markup(raw_output: str, config: InkwellConfig) -> str | None:
    """Return the sanitized working markup of a model reply.

    None means the reply has no recognisable markup shape at all. The result
    is ready for ``decompose_markup``; its shape is not checked again.
    """
    working = extract_working_markup(normalize(raw_output, GENERATION_RULES))
    if working is None:
        return None
    return sanitize(
        working,
        config.sanitizer,
        identity_attribute=config.markup.identity_attribute,
    )


def build_project(
    prompt: str,
    raw_output: str,
    *,
    config: InkwellConfig,
    model_used: str,
    id_factory: Callable[[], str] = new_id,
    now: datetime | None = None,
) -> Project:
    """Turn raw model output for *prompt* into a new draft Project.

    Raises:
        AssemblyInvariantError: Reassembly lost the wrapper marker.
    """
    stamp = now or utcnow()
    working = prepare_markup(raw_output, config)
    if not working:
        logger.warning("Model output has no markup to decompose (%d chars)", len(raw_output))
        fragments = [error_fragment(id_factory)]
    else:
        fragments = decompose_markup(
            working,
            identity_attribute=config.markup.identity_attribute,
            id_factory=id_factory,
            now=stamp,
        )
    assembled = reassemble(fragments)
    verify_assembly(assembled)

    project = Project(
        id=id_factory(),
        title=prompt[:_TITLE_LENGTH],
        initial_prompt=prompt,
        fragments=fragments,
        assembled_content=assembled,
        history=[
            ChangeRecord(
                timestamp=stamp,
                description=INITIAL_DESCRIPTION,
                model_used=model_used,
                change_id=INITIAL_CHANGE_ID,
            )
        ],
        created_at=stamp,
    )
    logger.info("Built project '%s' with %d fragment(s)", project.id, len(fragments))
    return project


def generate_project(
    prompt: str,
    config: InkwellConfig,
    *,
    generate: GenerateFn | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Project:
    """Ask the model for a UI matching *prompt* and build a Project from it.

    Args:
        prompt: The user's description of the UI.
        config: Loaded configuration (models, identity attribute, sanitizer).
        generate: Content-generation collaborator (see ``generate_content``).
        id_factory: Source of fresh ids.

    Raises:
        InvalidInputError: *prompt* is empty.
        UpstreamError: The collaborator returned its error sentinel.
    """
    if not prompt or not prompt.strip():
        raise InvalidInputError("Prompt is required.")

    generate = generate or generate_content
    model = config.generation.model
    raw = generate(
        model,
        build_generate_messages(prompt),
        generate_system_prompt(config.markup.identity_attribute),
        max_tokens=config.generation.max_tokens,
        temperature=config.generation.temperature,
    )
    payload = error_payload(raw)
    if payload is not None:
        raise UpstreamError(payload)

    return build_project(prompt, raw, config=config, model_used=model, id_factory=id_factory)


def regenerate_element(
    project: Project,
    target_id: str,
    instruction: str,
    config: InkwellConfig,
    *,
    generate: GenerateFn | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Project:
    """Ask the model to rewrite one element of *project* and patch it in.

    Only the markup of the targeted element is sent to the model. The
    returned Project is a new value; *project* is never modified.

    Raises:
        InvalidInputError: *target_id* or *instruction* is empty.
        TargetNotFoundError: No fragment contains *target_id*.
        UpstreamError: The collaborator returned its error sentinel.
        InvalidPatchError: The model's reply dropped the target identity.
    """
    if not target_id or not target_id.strip():
        raise InvalidInputError("Target identity is required.")
    if not instruction or not instruction.strip():
        raise InvalidInputError("Edit instruction is required.")

    attr = config.markup.identity_attribute
    index = find_owner(project.fragments, target_id, attr)
    if index is None:
        raise TargetNotFoundError(target_id)

    owner = project.fragments[index]
    if owner.id == target_id:
        target_markup = owner.content
    else:
        target_markup = extract_target_markup(owner.content, target_id, identity_attribute=attr)

    generate = generate or generate_content
    model = config.generation.patch_model
    raw = generate(
        model,
        build_patch_messages(target_markup, instruction, target_id, attr),
        patch_system_prompt(attr),
        max_tokens=config.generation.max_tokens,
        temperature=config.generation.temperature,
    )
    payload = error_payload(raw)
    if payload is not None:
        raise UpstreamError(payload)

    text = normalize(raw, PATCH_RULES)
    replacement = sanitize(
        extract_working_markup(text) or text,
        config.sanitizer,
        identity_attribute=attr,
    )

    return patch_project(
        project,
        target_id,
        replacement,
        description=f"Patched element {target_id}: {instruction}",
        model_used=model,
        identity_attribute=attr,
        preserve_styles=config.markup.preserve_styles,
        id_factory=id_factory,
    )
