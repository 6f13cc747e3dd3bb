#!/usr/bin/env python3

"""Service for rendering analysis results as shareable HTML dashboards and PDFs."""

import datetime
from html import escape

from fpdf import FPDF

IMPORTANCE_COLORS = {"high": "#dc2626", "medium": "#d97706", "low": "#0A6D86"}

PTD_SCORE_LABELS = [
    ("hookStrength", "Hook Strength"),
    ("problemAgitation", "Problem Agitation"),
    ("solutionClarity", "Solution Clarity"),
    ("transformationAppeal", "Transformation Appeal"),
    ("ctaEffectiveness", "CTA Effectiveness"),
    ("overall", "Overall Conversion"),
]


def format_time(seconds) -> str:
  """Render seconds as m:ss."""
  try:
    total = max(0, int(round(float(seconds))))
  except (TypeError, ValueError):
    return "0:00"
  return f"{total // 60}:{total % 60:02d}"


def _sanitize_pdf_text(text: str) -> str:
  """Remove or replace characters that Helvetica/latin-1 cannot render."""
  cleaned = str(text).encode("latin-1", errors="replace").decode("latin-1")
  return cleaned.strip()


def _score_color(score: float) -> str:
  """Return a hex color for a 0-100 score."""
  if score >= 80:
    return "#16a34a"
  elif score >= 65:
    return "#d97706"
  return "#dc2626"


def _score_color_rgb(score: float) -> tuple[int, int, int]:
  if score >= 80:
    return (22, 163, 74)
  elif score >= 65:
    return (217, 119, 6)
  return (220, 38, 38)


def _priority_color(priority: float) -> str:
  if priority >= 8:
    return "#dc2626"
  elif priority >= 5:
    return "#d97706"
  return "#0A6D86"


def _average_scene_score(scenes: list[dict]) -> float | None:
  scores = [float(s.get("score", 0) or 0) for s in scenes]
  return round(sum(scores) / len(scores), 1) if scores else None


def _emotion_chart_html(emotions: list[dict]) -> str:
  """Build an inline SVG line chart of emotion intensity over time."""
  if len(emotions) < 2:
    return ""

  points = sorted(emotions, key=lambda e: float(e.get("timestamp", 0) or 0))
  chart_w, chart_h = 800, 180
  pad_l, pad_r, pad_t, pad_b = 40, 16, 16, 36
  plot_w = chart_w - pad_l - pad_r
  plot_h = chart_h - pad_t - pad_b
  end = max(float(points[-1].get("timestamp", 0) or 0), 1.0)

  def _x(t: float) -> float:
    return pad_l + plot_w * t / end

  def _y(v: float) -> float:
    return pad_t + plot_h - plot_h * min(max(v, 0.0), 100.0) / 100.0

  svg = [
      f'<svg xmlns="http://www.w3.org/2000/svg" width="100%" viewBox="0 0 {chart_w} {chart_h}"'
      f' style="font-family:Inter,-apple-system,sans-serif;background:#f8f9fa;border-radius:12px">',
  ]
  for val in (0, 50, 100):
    y = _y(val)
    svg.append(
        f'<text x="{pad_l - 6}" y="{y + 4}" text-anchor="end" fill="#aaa" font-size="9">{val}</text>'
        f'<line x1="{pad_l}" y1="{y}" x2="{pad_l + plot_w}" y2="{y}" stroke="#e5e7eb" stroke-width="0.5"/>'
    )
  coords = [
      (_x(float(e.get("timestamp", 0) or 0)), _y(float(e.get("intensity", 0) or 0)), e)
      for e in points
  ]
  path = " ".join(f"{x:.1f},{y:.1f}" for x, y, _ in coords)
  svg.append(f'<polyline points="{path}" fill="none" stroke="#831F80" stroke-width="2"/>')
  for x, y, e in coords:
    svg.append(
        f'<circle cx="{x:.1f}" cy="{y:.1f}" r="3.5" fill="#831F80">'
        f'<title>{escape(format_time(e.get("timestamp")))} {escape(str(e.get("emotion", "")))}'
        f' ({e.get("intensity", 0)})</title></circle>'
    )
    svg.append(
        f'<text x="{x:.1f}" y="{chart_h - 12}" text-anchor="middle" fill="#888"'
        f' font-size="9">{escape(format_time(e.get("timestamp")))}</text>'
    )
  svg.append("</svg>")
  return "".join(svg)


def _scene_rows_html(scenes: list[dict]) -> str:
  rows = []
  for i, s in enumerate(scenes, start=1):
    score = float(s.get("score", 0) or 0)
    objects = ", ".join(escape(str(o)) for o in s.get("objects", []))
    rows.append(f"""
      <tr>
        <td class="num">{i}</td>
        <td class="time">{format_time(s.get("startTime"))} - {format_time(s.get("endTime"))}</td>
        <td>{escape(str(s.get("description", "")))}
          {f'<div class="muted">Objects: {objects}</div>' if objects else ''}</td>
        <td>{escape(str(s.get("dominantEmotion", "")))}</td>
        <td class="score" style="color:{_score_color(score)}">{score:g}</td>
      </tr>""")
  return "\n".join(rows)


def _timestamp_rows_html(timestamps: list[dict]) -> str:
  rows = []
  for t in timestamps:
    importance = str(t.get("importance", "medium")).lower()
    color = IMPORTANCE_COLORS.get(importance, "#888")
    actionable = '<span class="pill">actionable</span>' if t.get("actionable") else ""
    rows.append(f"""
      <tr>
        <td class="time">{format_time(t.get("time"))}</td>
        <td>{escape(str(t.get("description", "")))} {actionable}</td>
        <td style="color:{color};font-weight:600;text-transform:uppercase;font-size:11px">{escape(importance)}</td>
      </tr>""")
  return "\n".join(rows)


def _recommendation_cards_html(recommendations: list[dict]) -> str:
  cards = []
  ordered = sorted(recommendations, key=lambda r: float(r.get("priority", 0) or 0), reverse=True)
  for r in ordered:
    priority = float(r.get("priority", 0) or 0)
    color = _priority_color(priority)
    implementation = r.get("implementation", "")
    cards.append(f"""
      <div class="rec" style="border-left-color:{color}">
        <div><span class="pill" style="background:{color};color:#fff">{escape(str(r.get("type", "")))}</span>
          <span class="muted">priority {priority:g}/10</span></div>
        <div style="margin-top:6px">{escape(str(r.get("description", "")))}</div>
        {f'<div class="muted" style="margin-top:6px">{escape(str(implementation))}</div>' if implementation else ''}
      </div>""")
  return "\n".join(cards)


def _ptd_scores_html(ptd: dict) -> str:
  if not ptd:
    return ""
  cards = []
  for key, label in PTD_SCORE_LABELS:
    value = float(ptd.get(key, 0) or 0)
    cards.append(
        f'<div class="card"><div class="muted">{label}</div>'
        f'<div class="big" style="color:{_score_color(value)}">{value:g}</div></div>'
    )
  return f'<h2>Conversion Funnel Scores</h2><div class="cards">{"".join(cards)}</div>'


def generate_report_html(data: dict, report_url: str = "") -> str:
  """Generate a self-contained HTML dashboard for one analysis.

  Args:
    data: Stored report: report_id, timestamp, video_name and the analysis
      under "result" (camelCase, as returned by the JSON API).
    report_url: Permalink shown in the header.
  Returns:
    Complete HTML string.
  """
  result = data.get("result", {})
  report_id = data.get("report_id", "")
  video = escape(data.get("video_name", ""))
  timestamp = data.get("timestamp", datetime.datetime.now().isoformat(timespec="seconds"))
  scenes = result.get("scenes", [])
  timestamps = result.get("timestamps", [])
  recommendations = result.get("recommendations", [])
  avg = _average_scene_score(scenes)

  summary_cards = [
      f'<div class="card"><div class="muted">Scenes</div><div class="big">{len(scenes)}</div></div>',
      f'<div class="card"><div class="muted">Key Moments</div><div class="big">{len(timestamps)}</div></div>',
      f'<div class="card"><div class="muted">Recommendations</div><div class="big">{len(recommendations)}</div></div>',
  ]
  if avg is not None:
    summary_cards.insert(
        0,
        f'<div class="card"><div class="muted">Avg. Engagement</div>'
        f'<div class="big" style="color:{_score_color(avg)}">{avg:g}</div></div>',
    )

  sections = []
  ptd_html = _ptd_scores_html(result.get("ptdScores") or {})
  if ptd_html:
    sections.append(ptd_html)
  if scenes:
    sections.append(f"""
    <h2>Scenes</h2>
    <table><tr><th>#</th><th>Time</th><th>Description</th><th>Emotion</th><th>Score</th></tr>
    {_scene_rows_html(scenes)}
    </table>""")
  if timestamps:
    sections.append(f"""
    <h2>Key Moments</h2>
    <table><tr><th>Time</th><th>Moment</th><th>Importance</th></tr>
    {_timestamp_rows_html(timestamps)}
    </table>""")
  chart = _emotion_chart_html(result.get("emotions", []))
  if chart:
    sections.append(f"<h2>Emotional Arc</h2>{chart}")
  if recommendations:
    sections.append(f"<h2>Recommendations</h2>{_recommendation_cards_html(recommendations)}")
  objects = result.get("objects", [])
  if objects:
    pills = "".join(
        f'<span class="pill">{escape(str(o.get("name", "")))} {float(o.get("confidence", 0) or 0):g}%</span>'
        for o in objects
    )
    sections.append(f"<h2>Objects</h2><div>{pills}</div>")
  transcription = result.get("transcription", "")
  if transcription:
    sections.append(f'<h2>Transcription</h2><pre class="transcript">{escape(transcription)}</pre>')

  video_html = ""
  if data.get("video_url"):
    video_html = (
        f'<video controls style="width:100%;border-radius:12px;background:#000;'
        f'max-height:480px;margin-bottom:24px" src="{escape(data["video_url"])}"></video>'
    )
  link_html = f'<a href="{escape(report_url)}">{escape(report_url)}</a>' if report_url else ""

  return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Video Analysis - {video}</title>
<style>
  body {{ font-family: Inter, -apple-system, sans-serif; background: #fff; color: #1a1a1a; margin: 0; }}
  .wrap {{ max-width: 960px; margin: 0 auto; padding: 32px 24px; }}
  h1 {{ font-size: 24px; margin: 0 0 4px; }}
  h2 {{ font-size: 18px; margin: 32px 0 12px; border-bottom: 1px solid #eee; padding-bottom: 6px; }}
  .muted {{ color: #888; font-size: 12px; }}
  .cards {{ display: flex; flex-wrap: wrap; gap: 12px; }}
  .card {{ flex: 1 1 140px; background: #f8f9fa; border-radius: 12px; padding: 16px; }}
  .big {{ font-size: 28px; font-weight: 700; }}
  table {{ width: 100%; border-collapse: collapse; font-size: 13px; }}
  th {{ text-align: left; color: #888; font-weight: 500; padding: 8px 12px; border-bottom: 1px solid #ddd; }}
  td {{ padding: 10px 12px; border-bottom: 1px solid #eee; vertical-align: top; }}
  td.num, td.time {{ white-space: nowrap; color: #555; }}
  td.score {{ font-weight: 700; text-align: right; }}
  .pill {{ display: inline-block; background: #e0f2f6; color: #0A6D86; padding: 2px 8px;
           border-radius: 10px; font-size: 11px; margin: 2px 3px; }}
  .rec {{ border-left: 3px solid #888; background: #f8f9fa; border-radius: 4px;
          padding: 10px 14px; margin-bottom: 10px; font-size: 13px; }}
  .transcript {{ white-space: pre-wrap; background: #f8f9fa; padding: 16px; border-radius: 8px; font-size: 12px; }}
</style>
</head>
<body>
<div class="wrap">
  <h1>Video Analysis</h1>
  <div class="muted">{video} &middot; {escape(timestamp)} {link_html}</div>
  <p>{escape(result.get("summary", ""))}</p>
  {video_html}
  <div class="cards">{"".join(summary_cards)}</div>
  {"".join(sections)}
  <p class="muted" style="margin-top:32px"><a href="/api/report/{escape(report_id)}/pdf">Download PDF</a></p>
</div>
</body>
</html>"""


def _pdf_heading(pdf: FPDF, title: str) -> None:
  if pdf.get_y() > 250:
    pdf.add_page()
  pdf.set_font("Helvetica", "B", 14)
  pdf.set_text_color(0, 0, 0)
  pdf.cell(0, 10, title, new_x="LMARGIN", new_y="NEXT")
  pdf.set_draw_color(200, 200, 200)
  pdf.line(10, pdf.get_y(), 200, pdf.get_y())
  pdf.ln(4)


def _pdf_score_box(pdf: FPDF, label: str, value: float) -> None:
  """Draw a score summary line in the PDF."""
  pdf.set_font("Helvetica", "", 9)
  pdf.set_text_color(120, 120, 120)
  pdf.cell(60, 7, label)
  pdf.set_font("Helvetica", "B", 14)
  pdf.set_text_color(*_score_color_rgb(value))
  pdf.cell(0, 7, f"{value:g}", new_x="LMARGIN", new_y="NEXT")
  pdf.set_text_color(0, 0, 0)


def _pdf_text(pdf: FPDF, text: str, size: int = 9, style: str = "", color=(60, 60, 60)) -> None:
  pdf.set_x(pdf.l_margin)
  pdf.set_font("Helvetica", style, size)
  pdf.set_text_color(*color)
  pdf.multi_cell(0, 5, _sanitize_pdf_text(text))


def generate_report_pdf(data: dict) -> bytes:
  """Generate a PDF version of the dashboard using fpdf2.

  Args:
    data: Stored report, same shape as for generate_report_html.
  Returns:
    PDF file content as bytes.
  """
  result = data.get("result", {})
  pdf = FPDF()
  pdf.set_auto_page_break(auto=True, margin=20)
  pdf.add_page()

  pdf.set_font("Helvetica", "B", 20)
  pdf.cell(0, 12, "Video Analysis", new_x="LMARGIN", new_y="NEXT")
  pdf.set_font("Helvetica", "", 10)
  pdf.set_text_color(120, 120, 120)
  timestamp = data.get("timestamp", datetime.datetime.now().isoformat(timespec="seconds"))
  header = f"{data.get('video_name', '')}  |  {timestamp}" if data.get("video_name") else timestamp
  pdf.cell(0, 6, _sanitize_pdf_text(header), new_x="LMARGIN", new_y="NEXT")
  pdf.ln(6)

  if result.get("summary"):
    _pdf_heading(pdf, "Summary")
    _pdf_text(pdf, result["summary"], size=10)
    pdf.ln(2)

  scenes = result.get("scenes", [])
  avg = _average_scene_score(scenes)
  ptd = result.get("ptdScores") or {}
  if avg is not None or ptd:
    _pdf_heading(pdf, "Scores")
    if avg is not None:
      _pdf_score_box(pdf, "Average engagement", avg)
    for key, label in PTD_SCORE_LABELS:
      if key in ptd:
        _pdf_score_box(pdf, label, float(ptd.get(key) or 0))
    pdf.ln(2)

  if scenes:
    _pdf_heading(pdf, "Scenes")
    for i, s in enumerate(scenes, start=1):
      line = (
          f"{i}. [{format_time(s.get('startTime'))}-{format_time(s.get('endTime'))}] "
          f"score {float(s.get('score', 0) or 0):g}  {s.get('dominantEmotion', '')}"
      )
      _pdf_text(pdf, line, style="B")
      _pdf_text(pdf, f"    {s.get('description', '')}")
    pdf.ln(2)

  timestamps = result.get("timestamps", [])
  if timestamps:
    _pdf_heading(pdf, "Key Moments")
    for t in timestamps:
      flag = " (actionable)" if t.get("actionable") else ""
      _pdf_text(
          pdf,
          f"{format_time(t.get('time'))}  [{str(t.get('importance', '')).upper()}]  "
          f"{t.get('description', '')}{flag}",
      )
    pdf.ln(2)

  recommendations = result.get("recommendations", [])
  if recommendations:
    _pdf_heading(pdf, "Recommendations")
    ordered = sorted(recommendations, key=lambda r: float(r.get("priority", 0) or 0), reverse=True)
    for r in ordered:
      _pdf_text(
          pdf,
          f"[{str(r.get('type', '')).upper()}] priority {float(r.get('priority', 0) or 0):g}/10",
          style="B", color=(10, 109, 134),
      )
      _pdf_text(pdf, f"    {r.get('description', '')}")
      if r.get("implementation"):
        _pdf_text(pdf, f"    {r['implementation']}", size=8, color=(120, 120, 120))
    pdf.ln(2)

  if result.get("transcription"):
    _pdf_heading(pdf, "Transcription")
    _pdf_text(pdf, result["transcription"], size=8)

  return bytes(pdf.output())
