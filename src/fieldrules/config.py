"""Process-wide validation configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ValidatorConfig:
    """Settings consulted by every validation call.

    Attributes:
        required_by_default: Fields without an annotation fail, and empty
            fields fail unless marked optional
        tag_key: Field metadata key holding the rule annotation
        alias_key: Field metadata key holding the serialization name
        max_depth: Maximum nesting depth before the walk is aborted
    """

    required_by_default: bool = False
    tag_key: str = "valid"
    alias_key: str = "json"
    max_depth: int = 64

    @classmethod
    def from_env(cls) -> ValidatorConfig:
        """Create config from environment variables.

        Recognised variables:
        1. FIELDRULES_REQUIRED_BY_DEFAULT ("1", "true", "yes", "on")
        2. FIELDRULES_TAG_KEY
        3. FIELDRULES_ALIAS_KEY
        4. FIELDRULES_MAX_DEPTH
        """
        defaults = cls()
        required = os.environ.get("FIELDRULES_REQUIRED_BY_DEFAULT")
        max_depth = os.environ.get("FIELDRULES_MAX_DEPTH")

        if max_depth is not None:
            try:
                depth = int(max_depth)
            except ValueError:
                raise ValueError(
                    f"FIELDRULES_MAX_DEPTH must be an integer, got {max_depth!r}"
                ) from None
        else:
            depth = defaults.max_depth

        return cls(
            required_by_default=(
                required.strip().lower() in _TRUTHY
                if required is not None
                else defaults.required_by_default
            ),
            tag_key=os.environ.get("FIELDRULES_TAG_KEY", defaults.tag_key),
            alias_key=os.environ.get("FIELDRULES_ALIAS_KEY", defaults.alias_key),
            max_depth=depth,
        )


_config = ValidatorConfig()


def get_config() -> ValidatorConfig:
    return _config


def set_config(config: ValidatorConfig) -> None:
    """Replace the process-wide configuration.

    Intended to be called once at startup, before any validation runs.
    """
    global _config
    if config.max_depth < 1:
        raise ValueError("max_depth must be at least 1")
    _config = config
    logger.debug("fieldrules configuration set: %s", config)


def reset_config() -> None:
    """Restore the default configuration. Primarily for testing."""
    set_config(ValidatorConfig())


def set_fields_required_by_default(enabled: bool) -> None:
    """Make validation fail for unannotated fields and empty non-optional ones.

    With this enabled, a field with no annotation at all is reported as
    missing its validation, and an empty field fails unless its annotation
    contains "optional". Use "-" to exempt a field completely.
    """
    set_config(replace(_config, required_by_default=enabled))


def fields_required_by_default() -> bool:
    return _config.required_by_default
