# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Load data-only templates from YAML or JSON files.

File templates can express type tags, constraints and ``regexp`` pattern
strings. Hooks, classes and ``check_equality`` need Python callables and are
only available to templates built in code.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..exceptions import TemplateError

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_template(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a template mapping from *path*.

    The format follows the file suffix: ``.yaml``/``.yml`` for YAML, anything
    else is parsed as JSON. The result is a plain mapping to feed into
    ``create_validator``.

    Raises:
        TemplateError: if the file is unreadable, unparsable or does not
            contain a mapping at the top level.
    """

    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateError(f"Cannot read template file '{file_path}': {exc}") from exc

    try:
        if file_path.suffix.lower() in _YAML_SUFFIXES:
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise TemplateError(f"Cannot parse template file '{file_path}': {exc}") from exc

    if not isinstance(raw, dict):
        raise TemplateError(f"Template file '{file_path}' must contain a mapping at the top level")

    logger.debug("Loaded template from %s", file_path)
    return raw


__all__ = ["load_template"]
