"""Configuration resolver — decode, expand templates, check required fields.

Resolution never stops at the first problem once decoding has succeeded:
every template failure and every missing required field is collected and
reported together in a single ``ConfigValidationError``, so an operator can
fix a configuration in one pass.

Building the store client is deliberately *not* part of resolution; see
``consulpost.core.store.connect``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from consulpost.core.templating import TemplateContext, TemplateExpansionError
from consulpost.models.config import (
    REQUIRED_FIELDS,
    TEMPLATED_FIELDS,
    PostProcessorConfig,
)

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Base class for configuration failures."""


class ConfigDecodeError(ConfigError):
    """Raised when raw configuration cannot be decoded into the config shape."""


class ConfigValidationError(ConfigError):
    """Raised with every collected validation problem at once.

    Attributes
    ----------
    errors : list[str]
        One human-readable message per problem, in discovery order.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} error(s) occurred:\n"
            + "\n".join(f"  * {e}" for e in self.errors)
        )


def merge_raws(*raws: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge raw configuration mappings left to right; later keys win."""
    merged: dict[str, Any] = {}
    for raw in raws:
        if raw is None:
            continue
        if not isinstance(raw, Mapping):
            raise ConfigDecodeError(
                f"Configuration must be a mapping, got {type(raw).__name__}"
            )
        merged.update(raw)
    return merged


def decode_config(*raws: Mapping[str, Any] | None) -> PostProcessorConfig:
    """Decode raw mappings into a ``PostProcessorConfig`` without expansion."""
    merged = merge_raws(*raws)
    try:
        return PostProcessorConfig.model_validate(merged)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigDecodeError(
            f"Error decoding configuration: {problems}"
        ) from exc


def resolve_config(
    *raws: Mapping[str, Any] | None,
    user_variables: Mapping[str, str] | None = None,
) -> PostProcessorConfig:
    """Decode, expand and validate raw configuration.

    Parameters
    ----------
    *raws:
        One or more raw configuration mappings, merged left to right.
    user_variables:
        Variables for template expansion. Defaults to the
        ``packer_user_variables`` carried in the raw configuration.

    Returns
    -------
    PostProcessorConfig
        A new frozen config with every templated field expanded.

    Raises
    ------
    ConfigDecodeError
        If the raw input has unknown keys or values of the wrong shape.
    ConfigValidationError
        If any template fails to expand or a required field is empty.
    """
    decoded = decode_config(*raws)
    variables = (
        user_variables if user_variables is not None
        else decoded.packer_user_variables
    )
    context = TemplateContext(variables)

    errors: list[str] = []
    expanded: dict[str, str] = {}
    for field in TEMPLATED_FIELDS:
        raw_value: str = getattr(decoded, field)
        try:
            expanded[field] = context.expand(raw_value)
        except TemplateExpansionError as exc:
            errors.append(f"Error processing {field}: {exc}")
            expanded[field] = ""

    for field in REQUIRED_FIELDS:
        if not expanded.get(field, getattr(decoded, field)):
            errors.append(f"{field} must be set")

    prefix_segments = expanded["key_prefix"].strip("/").split("/")
    if any(segment in (".", "..") for segment in prefix_segments):
        errors.append("key_prefix must not contain '.' or '..' segments")

    if errors:
        logger.error("Configuration rejected with %d error(s)", len(errors))
        raise ConfigValidationError(errors)

    resolved = decoded.model_copy(update=expanded)
    logger.debug(
        "Resolved configuration: address=%s scheme=%s datacenter=%s",
        resolved.address,
        resolved.scheme or "<default>",
        resolved.datacenter or "<default>",
    )
    return resolved
