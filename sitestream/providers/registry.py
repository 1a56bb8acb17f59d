"""Settings loader and provider resolution.

Loads relay, prompt, scanner, apply-service, and provider definitions from
defaults.toml, and maps a namespaced model id (``anthropic/...``,
``openai/...``, ``google/...``, anything else) to the provider that
serves it.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from sitestream.providers.base import ModelProvider
from sitestream.providers.litellm_provider import LiteLLMProvider
from sitestream.schemas.config import ProviderConfig, Settings

# Default config directory relative to the sitestream package
_CONFIG_DIR = Path(__file__).parent.parent / "config"


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        config_path: Path to a settings file. Defaults to
                     sitestream/config/defaults.toml.

    Returns:
        Validated Settings.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the TOML has no providers or more than one default.
    """
    path = config_path or _CONFIG_DIR / "defaults.toml"
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    providers_section = raw.get("providers")
    if not providers_section or not isinstance(providers_section, dict):
        raise ValueError(f"No [providers] section found in {path}")

    providers: dict[str, ProviderConfig] = {}
    for key, entry in providers_section.items():
        if not isinstance(entry, dict):
            continue
        providers[key] = ProviderConfig(**{**entry, "name": key})

    return Settings(
        relay=raw.get("relay", {}),
        prompt=raw.get("prompt", {}),
        scanner=raw.get("scanner", {}),
        apply=raw.get("apply", {}),
        providers=providers,
    )


def resolve_provider(settings: Settings, model: str) -> tuple[ProviderConfig, str]:
    """Find the provider serving ``model`` and the provider-local model name.

    Prefixed providers are tried first; the longest matching prefix wins.
    Without a match the default provider gets the full model id unchanged.

    Raises:
        LookupError: If nothing matches and no default provider is configured.
    """
    prefixed = sorted(
        (p for p in settings.providers.values() if p.prefix),
        key=lambda p: len(p.prefix),
        reverse=True,
    )
    for provider in prefixed:
        if model.startswith(provider.prefix):
            return provider, model[len(provider.prefix):]

    for provider in settings.providers.values():
        if provider.default:
            return provider, model

    raise LookupError(f"No provider configured for model '{model}'")


def create_provider(settings: Settings, model: str) -> ModelProvider:
    """Build the ModelProvider for a requested model id."""
    config, model_name = resolve_provider(settings, model)
    return LiteLLMProvider(config, model_name)
