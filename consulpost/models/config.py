"""Post-processor configuration model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Fields expanded against user variables, in expansion order.
TEMPLATED_FIELDS: tuple[str, ...] = (
    "address",
    "scheme",
    "datacenter",
    "token",
    "key_prefix",
)

# Fields that must be non-empty once templates are expanded.
REQUIRED_FIELDS: tuple[str, ...] = ("address",)


class PostProcessorConfig(BaseModel):
    """Operator-supplied settings for one post-processor instance.

    Frozen once resolved. The ``packer_*`` fields are injected into every
    raw configuration by the pipeline runner; ``packer_user_variables`` is
    the default variable set for template expansion.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact: str = ""
    artifact_type: str = ""
    artifact_type_override: bool = False
    metadata: dict[str, str] | None = None

    address: str = ""
    scheme: str = ""
    datacenter: str = ""
    token: str = Field(default="", repr=False)
    key_prefix: str = ""

    packer_build_name: str = ""
    packer_builder_type: str = ""
    packer_debug: bool = False
    packer_force: bool = False
    packer_user_variables: dict[str, str] = Field(default_factory=dict)

