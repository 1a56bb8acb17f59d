"""System prompt templates.

Markdown templates live beside this module and are rendered with Jinja2.
``website.md`` is the system prompt for every generation; its ``stack`` and
``extra_rules`` variables come from the ``[prompt]`` settings section.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from sitestream.schemas.config import PromptConfig

_PROMPTS_DIR = Path(__file__).parent

WEBSITE_TEMPLATE = "website"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(_PROMPTS_DIR),
        keep_trailing_newline=True,
        autoescape=False,
    )


def render_prompt(template_name: str, **variables: object) -> str:
    """Render ``<template_name>.md`` with the given variables.

    Missing variables render as empty, so ``{% if %}`` blocks drop out.

    Raises:
        FileNotFoundError: If the template does not exist.
    """
    try:
        template = _environment().get_template(f"{template_name}.md")
    except TemplateNotFound:
        raise FileNotFoundError(
            f"Prompt template not found: {_PROMPTS_DIR / template_name}.md"
        ) from None
    return template.render(**variables)


def website_prompt(config: PromptConfig) -> str:
    """System prompt for website generation under the configured stack and rules."""
    return render_prompt(
        WEBSITE_TEMPLATE, stack=config.stack, extra_rules=config.extra_rules,
    )
