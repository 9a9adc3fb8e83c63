"""Packaged resources for twigsdc."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

__all__ = ["load_config_schema"]

CONFIG_SCHEMA_RESOURCE = "config.schema.json"


@lru_cache(maxsize=1)
def load_config_schema() -> Dict[str, Any]:
    """Return the JSON schema for ``twigsdc.yaml`` shipped with the package."""

    resource = resources.files(__name__) / CONFIG_SCHEMA_RESOURCE
    with resource.open("r", encoding="utf-8") as handle:
        return json.load(handle)
