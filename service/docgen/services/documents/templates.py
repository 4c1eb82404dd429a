"""Jinja templates for the document fragment, the printable page and the error report."""

DOCUMENT_FRAGMENT_TEMPLATE = """
<div class="document document-{{ doc.document_type }} theme-{{ doc.options.theme }}">
{% if doc.options.include_cover %}
    <div class="cover-page">
        {% if not white_label %}
        <div class="cover-logo">Project Genie 🧞</div>
        {% endif %}
        <h1 class="cover-title">{{ doc.metadata.title }}</h1>
        {% if doc.cover_subtitle %}
        <p class="cover-subtitle">{{ doc.cover_subtitle }}</p>
        {% endif %}
        <div class="cover-metadata">
            <p class="cover-metadata-item"><strong>Project:</strong> {{ doc.metadata.project_name }}</p>
            <p class="cover-metadata-item"><strong>Company:</strong> {{ doc.metadata.company_name }}</p>
            <p class="cover-metadata-item"><strong>Date:</strong> {{ doc.metadata.date }}</p>
            <p class="cover-metadata-item"><strong>Version:</strong> {{ doc.metadata.version }}</p>
            {% if doc.metadata.author %}
            <p class="cover-metadata-item"><strong>Author:</strong> {{ doc.metadata.author }}</p>
            {% endif %}
        </div>
    </div>
{% endif %}
{% if doc.options.include_toc and doc.toc_entries %}
    <nav class="toc">
        <h2>Table of Contents</h2>
        <ol class="toc-list">
        {% for section in doc.toc_entries %}
            <li class="toc-item"><a class="toc-title" href="#{{ section.id }}">{{ section.heading }}</a></li>
        {% endfor %}
        </ol>
    </nav>
{% endif %}
{% for section in doc.sections %}
    {{ section }}
{% endfor %}
</div>
"""

PRINT_CSS = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    line-height: 1.6;
    color: #333;
    background: #fff;
    font-size: 12px;
    -webkit-print-color-adjust: exact;
    print-color-adjust: exact;
}
.pdf-container { width: 100%; max-width: 210mm; margin: 0 auto; padding: 0 4mm; }
h1 { font-size: 2rem; margin: 1.5rem 0 1rem; color: #1a1a1a; }
h2 { font-size: 1.5rem; margin: 1.25rem 0 0.75rem; color: #333; border-bottom: 2px solid #667eea; padding-bottom: 0.25rem; page-break-after: avoid; }
h3 { font-size: 1.2rem; margin: 1rem 0 0.5rem; color: #444; page-break-after: avoid; }
h4 { font-size: 1.05rem; margin: 0.75rem 0 0.5rem; color: #555; page-break-after: avoid; }
p { margin: 0.5rem 0; }
ul, ol { margin: 0.5rem 0; padding-left: 1.75rem; }
li { margin: 0.2rem 0; }
a { color: #4f46e5; text-decoration: none; }

table { width: 100%; border-collapse: collapse; margin: 0.75rem 0; page-break-inside: auto; }
thead { display: table-header-group; }
tr { page-break-inside: avoid; break-inside: avoid; }
th { background: #f5f5f5; padding: 0.5rem; text-align: left; border: 1px solid #ddd; font-weight: 600; }
td { padding: 0.5rem; border: 1px solid #ddd; vertical-align: top; }
tr:nth-child(even) td { background: #fafafa; }

.document-section { page-break-before: always; break-before: page; margin-bottom: 1.5rem; }
.document-section:first-of-type { page-break-before: auto; }
.page-break-before { page-break-before: always; }
.subsection { margin-top: 1rem; }
.subsection h3 { border-bottom: 1px solid #e0e0e0; padding-bottom: 0.25rem; }
.placeholder { color: #9ca3af; font-style: italic; }

.cover-page {
    display: flex;
    flex-direction: column;
    justify-content: center;
    align-items: center;
    min-height: calc(100vh - 70mm);
    text-align: center;
    page-break-after: always;
    padding: 10mm 20mm;
}
.cover-logo { font-size: 1.5rem; font-weight: bold; color: #667eea; margin-bottom: 2rem; }
.cover-title { font-size: 2.5rem; font-weight: bold; color: #1a1a1a; margin: 2rem 0 1rem; max-width: 80%; }
.cover-subtitle { font-size: 1.4rem; color: #666; margin-bottom: 3rem; }
.cover-metadata { margin-top: auto; padding: 1.5rem 2rem; background: #f9f9f9; border-radius: 8px; min-width: 400px; text-align: left; }
.cover-metadata-item { margin: 0.4rem 0; font-size: 1rem; color: #555; }
.cover-metadata-item strong { color: #333; margin-right: 0.5rem; }

.toc { page-break-after: always; }
.toc-list { list-style: none; padding-left: 0; }
.toc-item { margin: 0.4rem 0; padding: 0.25rem 0; border-bottom: 1px dotted #ddd; }

.metrics-grid { display: flex; flex-wrap: wrap; gap: 12px; margin: 1rem 0; }
.metric-card { flex: 1 1 140px; border: 1px solid #e5e7eb; border-radius: 8px; padding: 12px; text-align: center; page-break-inside: avoid; }
.metric-value { font-size: 1.4rem; font-weight: 700; color: #1f2937; }
.metric-label { font-size: 0.8rem; color: #6b7280; text-transform: uppercase; letter-spacing: 0.5px; }

.highlight-box { border-left: 4px solid #2196f3; background: #f0f8ff; padding: 0.75rem 1rem; margin: 1rem 0; page-break-inside: avoid; }
.highlight-box-title { font-weight: 700; margin-bottom: 0.25rem; }
.highlight-success { border-left-color: #10b981; background: #ecfdf5; }
.highlight-warning { border-left-color: #f59e0b; background: #fffbeb; }
.highlight-error { border-left-color: #ef4444; background: #fef2f2; }

.progress-container { margin: 0.75rem 0; }
.progress-bar { height: 10px; background: #e5e7eb; border-radius: 5px; overflow: hidden; }
.progress-fill { height: 100%; background: #667eea; }
.progress-text { font-size: 0.8rem; color: #6b7280; }

.badge { display: inline-block; padding: 1px 8px; border-radius: 10px; background: #e5e7eb; font-size: 0.8em; }
.key-value-list dt { font-weight: 600; margin-top: 0.4rem; }
.key-value-list dd { margin-left: 1rem; }
.checklist { list-style: none; padding-left: 0.5rem; }

.heat-map { table-layout: fixed; }
.heat-map th { text-align: center; font-size: 0.8rem; }
.heat-map td.heat-cell { text-align: center; font-size: 0.8rem; height: 36px; }
.heat-map td.heat-green { background: #d1fae5; }
.heat-map td.heat-yellow { background: #fef3c7; }
.heat-map td.heat-orange { background: #fed7aa; }
.heat-map td.heat-red { background: #fecaca; }

.mermaid-chart { margin: 1rem 0; text-align: center; page-break-inside: avoid; }
pre.mermaid { background: transparent; font-size: 0.75rem; white-space: pre-wrap; }
.chart-caption { font-size: 0.8rem; color: #6b7280; margin-top: 0.25rem; }

.watermark {
    position: fixed;
    top: 50%;
    left: 50%;
    transform: translate(-50%, -50%) rotate(-45deg);
    font-size: 6rem;
    color: rgba(0, 0, 0, 0.05);
    font-weight: bold;
    z-index: -1;
    pointer-events: none;
    white-space: nowrap;
}
.classification-banner { text-align: center; font-weight: 700; letter-spacing: 2px; padding: 4px; margin-bottom: 8px; color: #fff; }
.classification-confidential { background: #b91c1c; }
.classification-internal { background: #b45309; }
.classification-public { background: #047857; }
.formatting-error pre { white-space: pre-wrap; word-break: break-all; background: #f3f4f6; padding: 0.75rem; font-size: 0.75rem; }

@media print {
    .cover-page { min-height: calc(100vh - 60mm); }
}
"""

DOCUMENT_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ title }}</title>
    {% if include_styles %}
    <style>{{ print_css }}{{ extra_css }}</style>
    {% endif %}
</head>
<body>
    {% if watermark %}
    <div class="watermark">{{ watermark }}</div>
    {% endif %}
    <div class="pdf-container">
        {% if classification %}
        <div class="classification-banner classification-{{ classification | lower }}">{{ classification }}</div>
        {% endif %}
        {{ fragment }}
    </div>
</body>
</html>
"""

ERROR_REPORT_TEMPLATE = """
<section class="document-section formatting-error" id="formatting-error">
    <h1>{{ title }}</h1>
    <h2>Formatting Error</h2>
    <p>The document could not be formatted properly. This may be due to incomplete data generation.</p>
    {% if error %}
    <p class="placeholder">{{ error }}</p>
    {% endif %}
    <h3>Raw Document Content</h3>
    <pre>{{ raw_json }}</pre>
    <h3>Document Metadata</h3>
    <ul>
        <li><strong>Project:</strong> {{ metadata.project_name }}</li>
        <li><strong>Version:</strong> {{ metadata.version }}</li>
        <li><strong>Date:</strong> {{ metadata.date }}</li>
    </ul>
    <h3>Troubleshooting</h3>
    <ol>
        <li>The document may have been partially generated</li>
        <li>Try regenerating the document</li>
        <li>Check the service logs for detailed error messages</li>
    </ol>
</section>
"""

HEADER_TEMPLATE = """<div style="width: 100%; padding: 8px 20px; font-size: 8px; color: #999; display: flex; justify-content: space-between;">
    <span>{{ header_text }}</span>
    <span class="date"></span>
</div>"""

FOOTER_TEMPLATE = """<div style="width: 100%; padding: 8px 20px; font-size: 9px; color: #666; display: flex; justify-content: space-between;">
    <span>{{ attribution }}</span>
    <span>{{ footer_text }}</span>
    <span>{% if page_numbers %}Page <span class="pageNumber"></span> of <span class="totalPages"></span>{% endif %}</span>
</div>"""
