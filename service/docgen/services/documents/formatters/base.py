"""Base formatter: normalized structure in, ordered document sections out."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence, Tuple

from docgen.services.documents import dates
from docgen.services.documents.html import Element, Section, mark_defaults, placeholder, table
from docgen.services.documents.indicators import visual_indicator
from docgen.services.documents.mermaid import mermaid_block
from docgen.services.documents.metadata import DocumentMetadata, FormattedDocument, FormatterOptions
from docgen.services.documents.normalizers import normalize
from docgen.services.documents.normalizers.base import default_texts
from docgen.services.documents.risk import LEVEL_NAMES, rate_risk, risk_level

logger = logging.getLogger(__name__)

SectionBuilder = Callable[[dict], Any]


class BaseFormatter(ABC):
    """Base class for all document formatters.

    Subclasses declare ``document_type``, ``title`` and an ordered list of
    section builders. Each builder receives the normalized structure and
    returns the section body (a node, a list of nodes, a ``Section``) or
    ``None`` to omit the section. A builder that raises is logged and
    replaced by a placeholder section so the rest of the document still
    renders.
    """

    document_type: str = ""
    title: str = ""
    styles: str = ""

    def __init__(self):
        self.metadata = DocumentMetadata.create()
        self.options = FormatterOptions()

    @abstractmethod
    def sections(self) -> List[Tuple[str, SectionBuilder]]:
        """Ordered (section title, builder) pairs."""
        pass

    def cover_subtitle(self, data: dict) -> str:
        return ""

    def document_title(self, project_name: str) -> str:
        return f"{project_name} - {self.title}"

    def format(self, content: Any, metadata: Any = None, options: Any = None) -> FormattedDocument:
        """Normalize ``content`` and build every section in order."""
        if not isinstance(metadata, DocumentMetadata):
            metadata = DocumentMetadata.create(**(metadata or {}))
        self.metadata = metadata.with_type(self.document_type, self.document_title(metadata.project_name))
        self.options = FormatterOptions.create(options)

        data = normalize(self.document_type, content)
        built: List[Section] = []
        for title, builder in self.sections():
            section = self._build_section(title, builder, data)
            if section is not None:
                built.append(section)

        defaults = default_texts(data)
        for section in built:
            mark_defaults(section, defaults)

        for number, section in enumerate(built, start=1):
            section.number = number

        if self.options.include_version_history:
            built.append(self.version_history())

        return FormattedDocument(
            document_type=self.document_type,
            title=self.metadata.title,
            metadata=self.metadata,
            options=self.options,
            sections=built,
            styles=self.styles,
            cover_subtitle=self.cover_subtitle(data),
        )

    def generate_html(self, content: Any, metadata: Any = None, options: Any = None) -> str:
        """In-app HTML fragment (cover, TOC and sections) for ``content``."""
        from docgen.services.documents.assembler import render_fragment

        return render_fragment(self.format(content, metadata, options))

    def _build_section(self, title: str, builder: SectionBuilder, data: dict) -> Optional[Section]:
        try:
            body = builder(data)
        except Exception as e:
            logger.error(f"[formatter] {self.document_type}: section '{title}' failed: {e}", exc_info=True)
            return Section(title, [placeholder(f"{title} to be defined")])
        if body is None:
            return None
        if isinstance(body, Section):
            return body
        children = list(body) if isinstance(body, (list, tuple)) else [body]
        return Section(title, children)

    def version_history(self) -> Section:
        rows = [[self.metadata.version, self.metadata.date, self.metadata.author, f"Initial {self.title}"]]
        return Section(
            "Version History",
            [table(rows, headers=["Version", "Date", "Author", "Description"], class_="data-table control-table")],
            css_class="version-history",
        )

    # Shared pieces --------------------------------------------------------

    def chart(self, definition: str, chart_type: str, caption: Optional[str] = None) -> Any:
        if not self.options.include_charts:
            return ""
        return mermaid_block(definition, chart_type, caption)

    def indicator(self, status: Any) -> str:
        if not self.options.include_visual_indicators:
            return ""
        return visual_indicator(status)

    def budget_thresholds(self) -> dates.Thresholds:
        return dates.calculate_budget_thresholds(self.metadata.budget)

    def delay_thresholds(self) -> dates.Thresholds:
        return dates.calculate_delay_thresholds(self.metadata.timeline)

    def milestone_date(self, month_offset: Any, fallback: str = "TBD") -> str:
        if self.metadata.start_date and isinstance(month_offset, int) and not isinstance(month_offset, bool):
            return dates.calculate_milestone_date(self.metadata.start_date, month_offset)
        return fallback

    def risk_rows(self, risks: Sequence[dict], name_key: str = "description") -> List[list]:
        """Table rows with the shared probability x impact score and band."""
        rows = []
        for risk in risks:
            rating = rate_risk(risk.get("probability"), risk.get("impact"))
            band = f"{self.indicator(rating.band)} {rating.band}".strip()
            rows.append([
                risk.get(name_key),
                LEVEL_NAMES[risk_level(risk.get("probability"))],
                LEVEL_NAMES[risk_level(risk.get("impact"))],
                rating.score,
                band,
                risk.get("mitigation"),
            ])
        return rows

    def risk_table(self, risks: Sequence[dict], name_key: str = "description", label: str = "Risk") -> Any:
        return table(
            self.risk_rows(risks, name_key),
            headers=[label, "Probability", "Impact", "Score", "Rating", "Mitigation"],
            class_="data-table risk-table",
        )


def heat_map(risks: Sequence[dict], label_key: str = "id") -> Element:
    """5x5 probability/impact grid; each cell lists the risks that land in it."""
    cells = {}
    for index, risk in enumerate(risks):
        key = (risk_level(risk.get("probability")), risk_level(risk.get("impact")))
        cells.setdefault(key, []).append(str(risk.get(label_key) or f"R{index + 1}"))

    header = Element("tr", Element("th", "Probability / Impact"), *[Element("th", LEVEL_NAMES[i]) for i in range(1, 6)])
    rows = []
    for probability in range(5, 0, -1):
        row = [Element("th", LEVEL_NAMES[probability])]
        for impact in range(1, 6):
            rating = rate_risk(probability, impact)
            row.append(Element("td", ", ".join(cells.get((probability, impact), [])), class_=f"heat-cell heat-{rating.color}"))
        rows.append(Element("tr", *row))
    return Element("table", Element("thead", header), Element("tbody", *rows), class_="heat-map")
