"""Per-render presentation metadata, formatter flags and the formatter result."""
from dataclasses import dataclass, field, fields, replace
from typing import Any, List, Optional

from docgen.services.documents.dates import today_long
from docgen.services.documents.html import Section


@dataclass(frozen=True)
class DocumentMetadata:
    project_name: str = "Project"
    company_name: str = "Organization"
    version: str = "1.0"
    date: str = ""
    author: str = "Project Genie"
    methodology: str = "prince2"
    document_type: str = ""
    title: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None

    @classmethod
    def create(cls, **raw: Any) -> "DocumentMetadata":
        """Build metadata from loose keyword values, default-filling every field."""
        names = {f.name for f in fields(cls)}
        values = {key: value for key, value in raw.items() if key in names and value not in (None, "")}
        project = str(values.get("project_name") or "Project")
        values["project_name"] = project
        values["company_name"] = str(values.get("company_name") or raw.get("project_name") or "Organization")
        values["version"] = str(values.get("version") or "1.0")
        values["date"] = str(values.get("date") or today_long())
        values.setdefault("title", project)
        for key in ("start_date", "end_date", "budget", "timeline"):
            if key in values:
                values[key] = str(values[key])
        return cls(**values)

    def with_type(self, document_type: str, title: str) -> "DocumentMetadata":
        return replace(self, document_type=document_type, title=title)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class FormatterOptions:
    include_toc: bool = True
    include_charts: bool = True
    include_visual_indicators: bool = True
    include_styles: bool = True
    include_cover: bool = True
    include_version_history: bool = True
    theme: str = "light"

    @classmethod
    def create(cls, options: Any = None) -> "FormatterOptions":
        """Accept None, a FormatterOptions, a pydantic model or a dict (snake or camel case)."""
        if isinstance(options, cls):
            return options
        if options is None:
            return cls()
        if hasattr(options, "model_dump"):
            options = options.model_dump()
        if not isinstance(options, dict):
            return cls()
        camel = {
            "includeToc": "include_toc",
            "includeTOC": "include_toc",
            "includeCharts": "include_charts",
            "includeVisualIndicators": "include_visual_indicators",
            "includeStyles": "include_styles",
            "includeCover": "include_cover",
            "includeVersionHistory": "include_version_history",
        }
        names = {f.name for f in fields(cls)}
        values = {}
        for key, value in options.items():
            key = camel.get(key, key)
            if key in names and value is not None:
                values[key] = value
        return cls(**values)


@dataclass
class FormattedDocument:
    """What a formatter produces; the assembler turns it into HTML."""

    document_type: str
    title: str
    metadata: DocumentMetadata
    options: FormatterOptions
    sections: List[Section] = field(default_factory=list)
    styles: str = ""
    cover_subtitle: str = ""

    @property
    def toc_entries(self) -> List[Section]:
        return [section for section in self.sections if section.in_toc]
