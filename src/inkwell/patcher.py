"""Patch orchestrator: apply new content for one identity to a Project.

Steps:
  1. Find the owning fragment: the one whose id is the target, otherwise the
     first whose content carries the target identity attribute.
  2. Reject replacement content that does not carry the target identity.
  3. Fragment root → replace its content wholesale.
     Nested element → splice it in place inside the owner's content.
  4. Build a new fragment list; only the owner is replaced (fresh timestamp).
  5. Reassemble and verify the wrapper.

Nothing is mutated: on any error the caller's Project and fragments are
exactly as they were. Sanitizing the replacement is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Sequence

from inkwell.errors import InvalidPatchError, TargetNotFoundError
from inkwell.markup.assembler import reassemble, verify_assembly
from inkwell.markup.decomposer import ROOT_CONTAINER_NAME
from inkwell.markup.identity import DEFAULT_IDENTITY_ATTRIBUTE, carries_identity, new_id
from inkwell.markup.parser import (
    ERROR_FALLBACK_NAME,
    display_name_for,
    first_element,
    parse_tree,
)
from inkwell.markup.splicer import splice
from inkwell.models import ChangeRecord, Fragment, Project, utcnow

logger = logging.getLogger(__name__)

_SENTINEL_NAMES = frozenset([ROOT_CONTAINER_NAME, ERROR_FALLBACK_NAME])


@dataclass(frozen=True)
class PatchResult:
    fragments: list[Fragment]
    assembled_content: str
    owner_id: str


def find_owner(
    fragments: Sequence[Fragment],
    target_id: str,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
) -> int | None:
    """Return the index of the fragment that owns *target_id*, or None."""
    for i, frag in enumerate(fragments):
        if frag.id == target_id:
            return i
    for i, frag in enumerate(fragments):
        if carries_identity(frag.content, target_id, identity_attribute):
            return i
    return None


def apply_patch(
    fragments: Sequence[Fragment],
    target_id: str,
    new_content: str,
    *,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
    preserve_styles: bool = True,
    now: datetime | None = None,
) -> PatchResult:
    """Replace the element named *target_id* with *new_content*.

    Args:
        fragments: Current ordered fragments (never mutated).
        target_id: Identity of a fragment root or of a nested element.
        new_content: Sanitized replacement markup for that element.
        identity_attribute: Name of the identity attribute.
        preserve_styles: Keep the prior class/style of a nested target.
        now: Timestamp for the changed fragment.

    Returns:
        PatchResult with the new fragment list and the reassembled document.

    Raises:
        TargetNotFoundError: No fragment contains *target_id*.
        InvalidPatchError: *new_content* lacks the target identity attribute.
        AssemblyInvariantError: Reassembly lost the wrapper marker.
    """
    index = find_owner(fragments, target_id, identity_attribute)
    if index is None:
        raise TargetNotFoundError(target_id)

    if not carries_identity(new_content, target_id, identity_attribute):
        raise InvalidPatchError(target_id, identity_attribute)

    owner = fragments[index]
    if owner.id == target_id:
        updated = _replace_root(owner, new_content.strip(), now or utcnow())
    else:
        content = splice(
            owner.content,
            target_id,
            new_content,
            identity_attribute=identity_attribute,
            preserve_styles=preserve_styles,
        )
        updated = replace(owner, content=content, last_modified_at=now or utcnow())

    new_fragments = [*fragments[:index], updated, *fragments[index + 1:]]
    assembled = reassemble(new_fragments)
    verify_assembly(assembled)

    logger.info("Patched '%s' inside fragment '%s'", target_id, owner.id)
    return PatchResult(fragments=new_fragments, assembled_content=assembled, owner_id=owner.id)


def patch_project(
    project: Project,
    target_id: str,
    new_content: str,
    *,
    description: str,
    model_used: str,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
    preserve_styles: bool = True,
    now: datetime | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Project:
    """Return a copy of *project* with the patch applied and a history entry appended."""
    stamp = now or utcnow()
    result = apply_patch(
        project.fragments,
        target_id,
        new_content,
        identity_attribute=identity_attribute,
        preserve_styles=preserve_styles,
        now=stamp,
    )
    record = ChangeRecord(
        timestamp=stamp,
        description=description,
        model_used=model_used,
        change_id=id_factory(),
    )
    return replace(
        project,
        fragments=result.fragments,
        assembled_content=result.assembled_content,
        history=[*project.history, record],
    )


def _replace_root(owner: Fragment, content: str, stamp: datetime) -> Fragment:
    """Swap a fragment's whole content, keeping kind and name in step with its root tag."""
    root = first_element(parse_tree(content))
    kind = root.name.lower() if root is not None else owner.element_kind
    name = owner.display_name
    if root is not None and name not in _SENTINEL_NAMES:
        name = display_name_for(root.name)
    return replace(owner, content=content, element_kind=kind, display_name=name, last_modified_at=stamp)
