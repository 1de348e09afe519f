"""Report Renderer

Turns month buckets into JSON, CSV or a standalone HTML page.
"""

import csv
import io
import json
from datetime import datetime, timezone
from html import escape
from typing import List, Optional

from ..schemas import MonthBucket, UNDATED_PLACEHOLDER


HTML_TEMPLATE = """<!doctype html>
<html lang="sv">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Sorterade sökresultat: {query}</title>
<style>
  body {{ font-family: system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial, sans-serif; margin: 24px; }}
  h1 {{ font-size: 1.35rem; margin: 0 0 8px; }}
  h2 {{ font-size: 1.1rem; margin: 24px 0 6px; }}
  .meta {{ color: #555; margin-bottom: 12px; }}
  table {{ border-collapse: collapse; width: 100%; }}
  th, td {{ padding: 10px 8px; border-bottom: 1px solid #e5e5e5; vertical-align: top; }}
  th {{ text-align: left; }}
  .date-col {{ width: 120px; white-space: nowrap; }}
</style>
</head>
<body>
  <h1>Sorterade sökresultat</h1>
  <div class="meta">Sökterm: <strong>{query}</strong> · Antal: {count} · Genererad: {generated}</div>
{sections}
</body>
</html>
"""

CSV_FIELDS = ['month', 'date', 'title', 'page_url', 'download_url']


def _timestamp(generated_at: Optional[datetime]) -> datetime:
    return generated_at or datetime.now(timezone.utc)


def render_json(buckets: List[MonthBucket], query: str, generated_at: Optional[datetime] = None) -> str:
    """Render buckets as a JSON document.

    Args:
        buckets: Month buckets in presentation order
        query: Search term
        generated_at: Report timestamp (defaults to now)

    Returns:
        Pretty-printed JSON string
    """
    payload = {
        'query': query,
        'generated_at': _timestamp(generated_at).isoformat(),
        'count': sum(len(bucket.items) for bucket in buckets),
        'months': [bucket.to_dict() for bucket in buckets],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render_csv(buckets: List[MonthBucket]) -> str:
    """Render buckets as CSV, one row per item."""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDS, lineterminator='\n')
    writer.writeheader()
    for bucket in buckets:
        for item in bucket.items:
            row = item.to_dict()
            writer.writerow({
                'month': bucket.label,
                'date': row['date'],
                'title': row['title'],
                'page_url': row['page_url'] or '',
                'download_url': row['download_url'] or '',
            })
    return output.getvalue()


def _render_row(item) -> str:
    date_text = item.date.isoformat() if item.date else UNDATED_PLACEHOLDER
    title = escape(item.title or UNDATED_PLACEHOLDER)
    if item.page_url:
        title = f'<a href="{escape(item.page_url)}" target="_blank" rel="noopener">{title}</a>'
    download = ''
    if item.download_url:
        download = (
            f' · <a href="{escape(item.download_url)}" target="_blank" rel="noopener">Ladda ner</a>'
        )
    return f'<tr><td class="date-col">{date_text}</td><td>{title}{download}</td></tr>'


def render_html(buckets: List[MonthBucket], query: str, generated_at: Optional[datetime] = None) -> str:
    """Render buckets as a standalone HTML page with one table per month.

    Args:
        buckets: Month buckets in presentation order
        query: Search term
        generated_at: Report timestamp (defaults to now)

    Returns:
        HTML document
    """
    sections = []
    for bucket in buckets:
        rows = ''.join(_render_row(item) for item in bucket.items)
        sections.append(
            f'  <h2>{escape(bucket.label)}</h2>\n'
            '  <table>\n'
            '    <thead><tr><th class="date-col">Datum</th><th>Titel &amp; länkar</th></tr></thead>\n'
            f'    <tbody>{rows}</tbody>\n'
            '  </table>'
        )

    generated = _timestamp(generated_at).strftime('%Y-%m-%d %H:%M:%S UTC')
    return HTML_TEMPLATE.format(
        query=escape(query),
        count=sum(len(bucket.items) for bucket in buckets),
        generated=generated,
        sections='\n'.join(sections)
    )


RENDERERS = {
    'json': lambda buckets, query: render_json(buckets, query),
    'html': lambda buckets, query: render_html(buckets, query),
    'csv': lambda buckets, query: render_csv(buckets),
}
