"""Prompt templates for UI generation and element patching.

Generation: the system prompt carries the rules, the user message is the
prompt verbatim.

Patching: only the markup of the element being edited is shown to the model,
fenced as untrusted data, followed by the instruction and a reminder to keep
the identity attribute intact.
"""

from __future__ import annotations

from inkwell.markup.identity import DEFAULT_IDENTITY_ATTRIBUTE

_GENERATE_SYSTEM_PROMPT = """\
You are an expert React and Tailwind CSS developer. Your task is to generate a \
single, complete, functional React functional component using ONLY Tailwind CSS.

RULES:
1. Output ONLY the raw JSX code. Do not include markdown code fences or any surrounding text.
2. The code MUST be a single function named 'GeneratedUI'.
3. Every main element MUST include a unique '{identity_attribute}' attribute.
4. Do NOT use external imports or libraries.
5. All styling MUST use Tailwind classes.
6. Do NOT use JavaScript expressions or event handlers (like onClick or onSubmit) \
in the JSX. Keep all attributes simple strings.
"""

_PATCH_SYSTEM_PROMPT = """\
You are a fast, precise React and Tailwind CSS patching agent.
You will be given EXISTING_ELEMENT_CODE and a USER_INSTRUCTION.
Modify the element according to the instruction while preserving its structure.

RULES:
1. Return ONLY the element that changes. Do NOT wrap it in a function.
2. Preserve the tag type and all attributes of the element.
3. Preserve {identity_attribute} EXACTLY; it identifies the element.
4. When modifying className, KEEP existing classes unless told to remove them. \
Add new classes at the end.
5. Do NOT change other attributes (type, htmlFor, ...) unless asked.
6. No markdown, no backticks, no comments. ONLY the JSX.
"""

_PATCH_USER_TEMPLATE = """\
EXISTING_ELEMENT_CODE:
```jsx
{target_markup}
```
USER_INSTRUCTION: {instruction}

IMPORTANT: Return ONLY the modified code for the element with {identity_attribute}="{target_id}".\
"""


def generate_system_prompt(identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE) -> str:
    return _GENERATE_SYSTEM_PROMPT.format(identity_attribute=identity_attribute)


def patch_system_prompt(identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE) -> str:
    return _PATCH_SYSTEM_PROMPT.format(identity_attribute=identity_attribute)


def build_generate_messages(prompt: str) -> list[dict]:
    """Return the user message list for an initial generation."""
    return [{"role": "user", "content": prompt}]


def build_patch_messages(
    target_markup: str,
    instruction: str,
    target_id: str,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
) -> list[dict]:
    """Return the user message list asking the model to rewrite one element.

    Args:
        target_markup: Serialized markup of the element being edited.
        instruction: The user's edit instruction.
        target_id: Identity of the element; the reply must keep it.
        identity_attribute: Name of the identity attribute.
    """
    content = _PATCH_USER_TEMPLATE.format(
        target_markup=target_markup,
        instruction=instruction,
        identity_attribute=identity_attribute,
        target_id=target_id,
    )
    return [{"role": "user", "content": content}]
