from flask import Blueprint, Response, get_flashed_messages, url_for
from markupsafe import escape

from assembler import is_spacer
from models import NAME_DETAIL
from pdf_export import EXPORT_FILENAME
from routes import current_workspace

export_bp = Blueprint("export", __name__)

PREVIEW_ROWS = 15


def _cell_html(cell) -> str:
    style = f"font-size:{cell.font_size}pt;"
    if cell.bold:
        style += "font-weight:700;"
    if cell.italic:
        style += "font-style:italic;"
    return f'<td style="{style}">{escape(cell.text)}</td>'


def _section_html(section, header_style, labels) -> str:
    head_style = f"text-align:{header_style.alignment};font-size:{header_style.font_size}pt;"
    head_style += "font-weight:700;" if header_style.bold else "font-weight:400;"
    if header_style.italic:
        head_style += "font-style:italic;"
    if header_style.underline:
        head_style += "text-decoration:underline;"
    if header_style.in_box:
        head_style += "background:#e0e0e0;border:1px solid #000;padding:4px 6px;"

    body_parts = []
    for row in section.rows[:PREVIEW_ROWS]:
        if is_spacer(row):
            body_parts.append(f'<tr class="spacer"><td colspan="{len(section.columns)}">&nbsp;</td></tr>')
        else:
            body_parts.append("<tr>" + "".join(_cell_html(c) for c in row) + "</tr>")
    more = len(section.rows) - PREVIEW_ROWS
    if more > 0:
        body_parts.append(f'<tr><td class="more" colspan="{len(section.columns)}">… {more} more row(s)</td></tr>')

    header_cells = "".join(
        f'<th class="{"wide" if col == NAME_DETAIL else ""}">{escape(labels.get(col, col))}</th>'
        for col in section.columns
    )
    return (
        f'<section id="{escape(section.context)}">'
        f'<h2 style="{head_style}">{escape(section.title)}</h2>'
        f'<div class="meta">{len(section.song_rows)} song(s) · context <code>{escape(section.context)}</code></div>'
        f"<table><thead><tr>{header_cells}</tr></thead><tbody>{''.join(body_parts)}</tbody></table>"
        "</section>"
    )


@export_bp.get("/")
def index():
    workspace = current_workspace()
    songs = workspace.visible_songs()
    sections = workspace.sections()
    state = workspace.state
    labels = {d.id: d.label for d in state.details}

    flashes = "".join(
        f'<div class="flash {escape(cat)}">{escape(msg)}</div>'
        for cat, msg in get_flashed_messages(with_categories=True)
    )
    sections_html = "".join(_section_html(s, state.header_style, labels) for s in sections)

    html = f"""
    <!doctype html>
    <html>
    <head>
      <meta charset="utf-8">
      <title>Song Export</title>
      <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; margin: 24px; }}
        h1 {{ margin: 0 0 6px; }}
        .meta {{ color:#555; margin-bottom:8px; font-size: 0.9em; }}
        .flash {{ padding:6px 10px; margin-bottom:8px; border-radius:6px; background:#eef; }}
        .flash.danger {{ background:#fde2e2; }}
        .flash.success {{ background:#e2f6e2; }}
        table {{ border-collapse: collapse; width: 100%; margin-bottom: 24px; }}
        th, td {{ padding: 4px 6px; text-align:left; vertical-align:top; }}
        th {{ background:#f7f7f7; }}
        th.wide {{ width: 100%; }}
        tr.spacer td {{ height: 6px; padding: 0; }}
        td.more {{ color:#777; font-style: italic; }}
      </style>
    </head>
    <body>
      {flashes}
      <h1>Song Export</h1>
      <div class="meta">{len(songs)} song(s) · {len(sections)} section(s)</div>
      <div style="margin-bottom:12px;">
        <a href="{url_for('export.export_pdf')}">📄 Export PDF</a>
        &nbsp;·&nbsp;
        <a href="{url_for('settings.export_settings')}">⚙️ Export Settings</a>
      </div>
      <form method="post" action="{url_for('settings.import_settings')}" enctype="multipart/form-data" style="margin-bottom:16px;">
        <input type="file" name="file" accept="application/json,.json">
        <button type="submit">📥 Import Settings</button>
      </form>
      {sections_html}
    </body>
    </html>
    """
    return html


@export_bp.get("/export.pdf")
def export_pdf():
    workspace = current_workspace()
    if not workspace.visible_songs():
        return "No songs to export. Please select at least one category.", 400
    pdf_bytes = workspace.export_pdf()
    resp = Response(pdf_bytes, mimetype="application/pdf")
    resp.headers["Content-Disposition"] = f'attachment; filename="{EXPORT_FILENAME}"'
    return resp
