"""Settings for the host application, read from the environment."""

import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel

ENV_PREFIX = "REGICIDE_"
DEFAULT_DATABASE_URL = "sqlite:///regicide.db"


class Settings(BaseModel):
    database_url: str = DEFAULT_DATABASE_URL
    database_echo: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """
        Build the settings from REGICIDE_* environment variables.

        ex. REGICIDE_DATABASE_URL=sqlite:///games.db, REGICIDE_DATABASE_ECHO=true
        Unset variables fall back to the defaults. Pydantic takes care of parsing "true"/"1"/"no" etc. into booleans.
        """
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls.model_validate(values)
