"""Plain-text rendering of export reports and inventories for the CLI."""

from __future__ import annotations

from jinja2 import Template

from postman_exporter.types import CollectionSummary, ExportReport, WorkspaceSummary

# Jinja template for the per-collection export table
EXPORT_REPORT_TEMPLATE = Template(
    """
Exported collections:
{% for result in report.results %}
{% if result.success %}
  ✓ {{ result.name }} -> {{ result.file }}
{% else %}
  ✗ {{ result.name }}: {{ result.error }}
{% endif %}
{% endfor %}

Export Summary:
  Successful: {{ report.successful }}
  Failed: {{ report.failed }}
""".strip(),
    trim_blocks=True,
    lstrip_blocks=True,
)

WORKSPACES_TEMPLATE = Template(
    """
{% for ws in workspaces %}
{{ ws.id }}  {{ ws.name }}{% if ws.description %} - {{ ws.description }}{% endif %}

{% endfor %}
""".strip(),
    trim_blocks=True,
    lstrip_blocks=True,
)

COLLECTIONS_TEMPLATE = Template(
    """
{% for col in collections %}
{{ col.uid }}  {{ col.name }}
{% endfor %}
""".strip(),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_report(report: ExportReport) -> str:
    return EXPORT_REPORT_TEMPLATE.render(report=report)


def render_workspaces(workspaces: list[WorkspaceSummary]) -> str:
    return WORKSPACES_TEMPLATE.render(workspaces=workspaces)


def render_collections(collections: list[CollectionSummary]) -> str:
    return COLLECTIONS_TEMPLATE.render(collections=collections)
