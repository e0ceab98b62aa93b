"""Prompt templates for commit message generation.

This package contains:
- system: The built-in system prompt (grammar, type vocabulary, examples)
- user: The built-in user prompt template with the {{diff}} placeholder
- builder: PromptPayload assembly from the filtered diff and configuration
"""

from asum.llm.prompts.system import SYSTEM_PROMPT
from asum.llm.prompts.user import DIFF_PLACEHOLDER, USER_PROMPT_TEMPLATE
from asum.llm.prompts.builder import PromptPayload, build_prompt, render_template


__all__ = [
    "SYSTEM_PROMPT",
    "USER_PROMPT_TEMPLATE",
    "DIFF_PLACEHOLDER",
    "PromptPayload",
    "build_prompt",
    "render_template",
]
