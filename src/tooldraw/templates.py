"""
Drawing templates.

A template is metadata only: an id the remote service understands plus a
display name and description. Unknown ids resolve to the default template
instead of failing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawingTemplate:
    """A named drawing template."""
    id: str
    name: str = ""
    description: str = ""


BUILTIN_TEMPLATES: tuple[DrawingTemplate, ...] = (
    DrawingTemplate("template-endmill", "Standard End Mill", "Template for standard end mill tools"),
    DrawingTemplate("template-drill", "Standard Drill", "Template for standard drill tools"),
    DrawingTemplate("template-reamer", "Standard Reamer", "Template for standard reamer tools"),
)

DEFAULT_TEMPLATE_ID = "template-endmill"


class TemplateCatalog:
    """
    Built-in templates plus any extra templates from configuration.

    Extra templates with the id of a built-in replace it.
    """

    def __init__(self, extra: Iterable[DrawingTemplate] | None = None,
                 default_id: str = DEFAULT_TEMPLATE_ID):
        self._templates: dict[str, DrawingTemplate] = {t.id: t for t in BUILTIN_TEMPLATES}
        for template in extra or ():
            self._templates[template.id] = DrawingTemplate(
                template.id, template.name or template.id, template.description
            )
        if default_id not in self._templates:
            raise ValueError(f"Default template {default_id!r} is not in the catalog")
        self.default_id = default_id

    @classmethod
    def from_config(cls, templates) -> "TemplateCatalog":
        """Catalog from the ``templates`` section of AppConfig."""
        return cls(DrawingTemplate(t.id, t.name, t.description) for t in templates)

    def __iter__(self):
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    @property
    def default(self) -> DrawingTemplate:
        return self._templates[self.default_id]

    def resolve(self, template_id: str | None) -> DrawingTemplate:
        """Template for ``template_id``, or the default when it is unknown."""
        if template_id and template_id in self._templates:
            return self._templates[template_id]
        if template_id:
            logger.info("Unknown template %r; using %s", template_id, self.default_id)
        return self.default

    def default_for(self, tool_type: str) -> DrawingTemplate:
        """Built-in template matching a tool type, else the default."""
        return self._templates.get(f"template-{tool_type}", self.default)
