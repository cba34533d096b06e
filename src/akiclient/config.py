"""Client configuration with Pydantic validation.

The configuration can be:
- Instantiated with defaults: `ClientConfig()`
- Loaded from YAML: `ClientConfig.from_yaml("client.yaml")`
- Saved to YAML: `config.to_yaml("client.yaml")`
"""

from __future__ import annotations

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from akiclient.models import Category, Endpoint, EndpointGroup, Language
from akiclient.transport import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_USER_AGENT,
)

DEFAULT_PLAYER_NAME = "AkiClientUser"
DEFAULT_FILTER_PROFANITY = False
DEFAULT_PROBE_TIMEOUT = 2.5


class ClientConfig(BaseModel):
    """Settings used by the client builder.

    ``endpoint`` and ``group`` override automatic server selection; when both
    are unset the group is looked up in the catalog by language and category.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: Endpoint | None = Field(
        None,
        description="Single server to use; no failover when set",
    )
    group: EndpointGroup | None = Field(
        None,
        description="Explicit server group to fail over through",
    )
    language: Language = Field(
        Language.ENGLISH,
        description="Language of questions and guesses",
    )
    category: Category = Field(
        Category.CHARACTER,
        description="What the player is thinking of",
    )
    filter_profanity: bool = Field(
        DEFAULT_FILTER_PROFANITY,
        description="Ask the server to filter explicit questions",
    )
    player_name: str = Field(
        DEFAULT_PLAYER_NAME,
        min_length=1,
        description="Player name sent on session creation",
    )
    user_agent: str = Field(
        DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent header for every request",
    )
    connect_timeout: float = Field(
        DEFAULT_CONNECT_TIMEOUT,
        gt=0,
        description="Connection timeout per request (seconds)",
    )
    read_timeout: float = Field(
        DEFAULT_READ_TIMEOUT,
        gt=0,
        description="Read timeout per request (seconds)",
    )
    probe_timeout: float = Field(
        DEFAULT_PROBE_TIMEOUT,
        gt=0,
        description="Connection timeout for reachability probes (seconds)",
    )
    probe_first: bool = Field(
        False,
        description="Probe candidates before establishing a session on them",
    )

    @model_validator(mode="after")
    def _check_overrides(self) -> ClientConfig:
        if self.endpoint is not None and self.group is not None:
            raise ValueError("Set either endpoint or group, not both")
        return self

    @classmethod
    def from_yaml(cls, path: str) -> ClientConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            A validated ClientConfig instance.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            ValidationError: If the configuration is invalid.
        """
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    def to_yaml(self, path: str) -> None:
        """Save configuration to a YAML file.

        Args:
            path: Path where the YAML file will be saved.
        """
        with open(path, "w") as f:
            yaml.dump(
                self.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )
