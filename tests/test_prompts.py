"""Tests for sitestream.prompts — Prompt template loading and rendering."""

import pytest

from sitestream.prompts import render_prompt, website_prompt
from sitestream.schemas.config import PromptConfig


class TestRenderPrompt:
    def test_website_template_describes_tags(self):
        result = render_prompt("website")
        assert '<file path="path">' in result
        assert "<package>name</package>" in result

    def test_default_stack(self):
        result = render_prompt("website")
        assert "React + Vite + Tailwind CSS" in result

    def test_stack_override(self):
        result = render_prompt("website", stack="Vue 3 + Vite + UnoCSS")
        assert "Vue 3 + Vite + UnoCSS" in result
        assert "React + Vite + Tailwind CSS" not in result

    def test_optional_rules_omitted_gracefully(self):
        result = render_prompt("website")
        assert "Additional Rules" not in result

    def test_extra_rules_rendered_when_provided(self):
        result = render_prompt("website", extra_rules="Use a dark colour scheme")
        assert "Additional Rules" in result
        assert "Use a dark colour scheme" in result

    def test_example_jsx_survives_rendering(self):
        result = render_prompt("website")
        assert 'className="min-h-screen bg-gray-50"' in result

    def test_nonexistent_template_raises(self):
        with pytest.raises(FileNotFoundError, match="Prompt template not found"):
            render_prompt("nonexistent")


class TestWebsitePrompt:
    def test_default_config_matches_plain_render(self):
        assert website_prompt(PromptConfig()) == render_prompt("website")

    def test_config_fields_reach_template(self):
        result = website_prompt(
            PromptConfig(stack="Svelte + Vite", extra_rules="Never use inline styles")
        )
        assert "Svelte + Vite" in result
        assert "## Additional Rules" in result
        assert "Never use inline styles" in result
