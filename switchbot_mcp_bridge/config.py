"""
Runtime configuration for the SwitchBot bridge.

Values come from the environment (and can be overridden by the server's
command-line flags):

    SWITCHBOT_INTERPRETER   program used to run the CLI (default: node)
    SWITCHBOT_CLI_PATH      path to homebridge-switchbot-ble's bot-cmd.mjs
    SWITCHBOT_TIMEOUT       seconds to wait for the CLI (default: no limit)
    SWITCHBOT_LOG_LEVEL     logging level name (default: INFO)
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_INTERPRETER = "node"
DEFAULT_CLI_PATH = "/usr/local/lib/node_modules/homebridge-switchbot-ble/bot-cmd.mjs"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    interpreter: str = Field(DEFAULT_INTERPRETER, min_length=1)
    cli_path: str = Field(DEFAULT_CLI_PATH, min_length=1)
    timeout: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from SWITCHBOT_* variables; blank values use defaults."""
        env = os.environ if environ is None else environ
        values = {
            "interpreter": env.get("SWITCHBOT_INTERPRETER"),
            "cli_path": env.get("SWITCHBOT_CLI_PATH"),
            "timeout": env.get("SWITCHBOT_TIMEOUT"),
            "log_level": env.get("SWITCHBOT_LOG_LEVEL"),
        }
        return cls(**{k: v.strip() for k, v in values.items() if v and v.strip()})
