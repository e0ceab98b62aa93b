"""Prompt assembly.

Contains:
- PromptPayload: The (system, user) pair sent to a provider
- render_template: Substitute the diff into a template
- build_prompt: Build the payload from the filtered diff and configuration
"""

import logging
from dataclasses import dataclass

from asum.config import AsumConfig
from asum.diff import FilteredDiff
from asum.llm.prompts.system import SYSTEM_PROMPT
from asum.llm.prompts.user import DIFF_PLACEHOLDER, USER_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptPayload:
    """Final prompt strings for one generation request."""

    system: str
    user: str


def render_template(template: str, diff: str) -> str:
    """Replace the {{diff}} token with the diff text.

    This is a literal replacement, not a templating engine. If the template has
    no placeholder, the diff is appended after it so the model always sees it.

    Args:
        template: The user prompt template.
        diff: The filtered diff text.

    Returns:
        The rendered prompt.
    """
    if DIFF_PLACEHOLDER in template:
        return template.replace(DIFF_PLACEHOLDER, diff)

    logger.warning("User prompt has no %s placeholder; appending the diff after it", DIFF_PLACEHOLDER)
    return f"{template.rstrip()}\n\n{diff}"


def build_prompt(filtered: FilteredDiff, config: AsumConfig) -> PromptPayload:
    """Build the prompt payload for a filtered diff.

    Configured [prompts] overrides are used when set, the built-in prompts
    otherwise.

    Args:
        filtered: The filtered diff (must not be the empty signal).
        config: The resolved configuration.

    Returns:
        The system and user prompt strings.
    """
    system = config.prompts.system_prompt
    if system is None:
        system = SYSTEM_PROMPT

    template = config.prompts.user_prompt
    if template is None:
        template = USER_PROMPT_TEMPLATE

    return PromptPayload(system=system, user=render_template(template, filtered.text))
