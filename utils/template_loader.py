"""
Template Loader - Centralized user-facing message text.
Loads templates from templates.yaml so wording can change without touching code.
Reloads the file when its modification time changes.
"""

import logging
import os
import random
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_FILE = Path(__file__).resolve().parent.parent / "configs" / "templates.yaml"

class TemplateLoader:
    """Loads message templates from a YAML file, keyed by dotted paths like ``toggle.now_public``."""

    def __init__(self, templates_file: Optional[str] = None):
        self.templates_file = Path(templates_file) if templates_file else DEFAULT_TEMPLATES_FILE
        self._templates: Dict[str, Any] = {}
        self._file_mtime: Optional[float] = None
        self._load_templates()

    def _current_mtime(self) -> Optional[float]:
        """Modification time of the templates file, None if it cannot be read."""
        try:
            return os.path.getmtime(self.templates_file)
        except OSError:
            return None

    def _load_templates(self):
        current_mtime = self._current_mtime()
        if current_mtime is None or current_mtime == self._file_mtime:
            return
        with open(self.templates_file, "r", encoding="utf-8") as f:
            self._templates = yaml.safe_load(f) or {}
        # only a successful parse marks this version as loaded
        self._file_mtime = current_mtime
        logger.info(f"Loaded message templates from {self.templates_file}")

    def _lookup(self, key: str) -> Any:
        node: Any = self._templates
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(f"Unknown message template: {key}")
            node = node[part]
        return node

    def render(self, key: str, **values: Any) -> str:
        """
        Render a template, picking one variant at random when the key holds a list.

        Args:
            key: Dotted template key
            **values: Placeholder values for ``str.format``

        Returns:
            Rendered message text
        """
        self._load_templates()
        template = self._lookup(key)
        if isinstance(template, list):
            template = random.choice(template)
        return str(template).format(**values)

