from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UserTier = Literal["free", "basic", "premium"]
Classification = Literal["CONFIDENTIAL", "INTERNAL", "PUBLIC"]


class CamelModel(BaseModel):
    """Accepts both snake_case and the camelCase keys the web client sends."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageMargin(CamelModel):
    top: str = "20mm"
    right: str = "12mm"
    bottom: str = "20mm"
    left: str = "12mm"


class PDFOptions(CamelModel):
    white_label: bool = False
    watermark_text: str | None = None
    watermark_enabled: bool = True
    hide_attribution: bool = False
    show_draft: bool = False
    classification: Classification | None = None
    header_text: str | None = None
    footer_text: str | None = None
    page_numbers: bool = True
    format: Literal["A4", "Letter"] = "A4"
    margin: PageMargin | None = None
    user_tier: UserTier = "free"
    author: str | None = None

    # Dates and figures used by timeline and threshold calculations
    start_date: str | None = None
    end_date: str | None = None
    budget: str | None = None
    timeline: str | None = None

    # Cache controls
    user_id: str | None = None
    document_id: str | None = None
    use_cache: bool = True
    force_regenerate: bool = False

    def with_tier_defaults(self) -> "PDFOptions":
        """Apply tier rules: free users keep the watermark and attribution."""
        if self.user_tier == "free":
            return self.model_copy(update={"watermark_enabled": True, "hide_attribution": False})
        return self

    @property
    def shows_header_footer(self) -> bool:
        return bool(self.page_numbers or self.header_text or self.footer_text)

    @property
    def shows_attribution(self) -> bool:
        return self.user_tier == "free" or not self.hide_attribution

    def cache_fields(self) -> dict[str, Any]:
        """Options that change the rendered output; cache controls are excluded."""
        return self.model_dump(exclude={"user_id", "document_id", "use_cache", "force_regenerate"}, mode="json")


class HTMLFormatterOptions(CamelModel):
    include_toc: bool = True
    include_charts: bool = True
    include_visual_indicators: bool = True
    include_styles: bool = True
    include_cover: bool = True
    include_version_history: bool = True
    theme: Literal["light", "dark"] = "light"


class GenerateDocumentRequest(CamelModel):
    document_type: str
    content: Any = None
    project_name: str = "Project"
    company_name: str | None = None
    options: PDFOptions = Field(default_factory=PDFOptions)
    html_options: HTMLFormatterOptions = Field(default_factory=HTMLFormatterOptions)


class DocumentTypeRead(BaseModel):
    document_type: str
    title: str


class HTMLResponse(BaseModel):
    document_type: str
    title: str
    html: str


class PoolStatsRead(BaseModel):
    browsers: int
    active_pages: int
    pages_created: int
    launches: int
    memory_estimate_mb: int
    connected: bool
