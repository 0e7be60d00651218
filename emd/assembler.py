"""
Document assembly: frames rendered resource sections into one Markdown
document.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .blueprint import Blueprint, BlueprintResource, ResolvedResource
from .catalog import ResourceDetail, detail_kind
from .i18n import Labeler, Language
from .render import render_detail

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """Assembled Markdown plus the blueprint entries that were left out."""
    title: str
    text: str
    skipped: List[BlueprintResource] = field(default_factory=list)

    @property
    def section_count(self) -> int:
        return self.text.count("<a id=\"resource-")

    def skipped_names(self) -> List[str]:
        return [r.display() for r in self.skipped]


def section_anchor(position: int) -> str:
    return f"resource-{position}"


def _detail_title(detail: ResourceDetail) -> str:
    resource_id, name = detail.identity()
    return name or resource_id


class DocumentAssembler:
    """
    Builds the exported document for a single detail or a whole blueprint.

    The assembler only handles framing (title, table of contents, anchors
    and ordering); section bodies come from render_detail.
    """

    def __init__(self, language: Language = Language.ENGLISH):
        self.language = language
        self.labeler = Labeler(language)

    def render_single(self, detail: ResourceDetail) -> Document:
        title = _detail_title(detail)
        text = f"# {title}\n\n{render_detail(detail, self.language)}"
        return Document(title=title, text=text)

    def render_blueprint(self, blueprint: Blueprint, resolved: List[ResolvedResource]) -> Document:
        """
        Assemble every successfully resolved entry in stored order.

        Entries without a detail are skipped and listed in Document.skipped.

        Args:
            blueprint: The blueprint being exported (for the title)
            resolved: One entry per blueprint resource, in blueprint order

        Returns:
            Document: The assembled document
        """
        t = self.labeler
        included = [entry for entry in resolved if entry.ok]
        skipped = [entry.resource for entry in resolved if not entry.ok]
        for resource in skipped:
            logger.warning(f"Skipping {resource.resource_type.value} {resource.resource_id} in '{blueprint.name}'")

        lines = [f"# {blueprint.name}", ""]

        if len(included) > 1:
            lines += [f"## {t.text('md_table_of_contents')}", ""]
            for position, entry in enumerate(included, start=1):
                kind = t.text(detail_kind(entry.detail).label_key)
                label = f"{kind}: {_detail_title(entry.detail)}"
                lines.append(f"{position}. [{label}](#{section_anchor(position)})")
            lines.append("")

        for position, entry in enumerate(included, start=1):
            lines.append(f"<a id=\"{section_anchor(position)}\"></a>")
            lines.append("")
            region = entry.resource.region
            body = render_detail(entry.detail, self.language)
            lines.append(body.rstrip("\n"))
            lines += ["", f"_{t.text('md_region')}: {region}_", ""]

        logger.info(f"Assembled '{blueprint.name}': {len(included)} section(s), {len(skipped)} skipped")
        return Document(title=blueprint.name, text="\n".join(lines).rstrip("\n") + "\n", skipped=skipped)

    def render(self, selection, resolved: Optional[List[ResolvedResource]] = None) -> Document:
        """Render either a single detail or a blueprint with its resolved entries."""
        if isinstance(selection, Blueprint):
            return self.render_blueprint(selection, resolved or [])
        return self.render_single(selection)

    def skipped_message(self, document: Document) -> str:
        if not document.skipped:
            return ""
        return self.labeler.text(
            "skipped_resources",
            count=len(document.skipped),
            names=", ".join(document.skipped_names()),
        )
