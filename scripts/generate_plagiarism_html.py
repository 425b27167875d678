#!/usr/bin/env python3
"""Generate HTML plagiarism report for easy review."""

import argparse
import html
from pathlib import Path

from plagiarism_models import PlagiarismReport

STYLE = """
        * { box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            max-width: 1400px;
            margin: 0 auto;
            padding: 20px;
            background: #f5f5f5;
        }
        h1 { color: #333; border-bottom: 3px solid #e74c3c; padding-bottom: 10px; }
        h2 { color: #444; margin-top: 30px; }
        .summary {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(180px, 1fr));
            gap: 20px;
            margin: 20px 0;
        }
        .summary-card {
            background: white;
            padding: 20px;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
            text-align: center;
        }
        .summary-card.high { border-left: 4px solid #e74c3c; }
        .summary-card.medium { border-left: 4px solid #f39c12; }
        .summary-card.low { border-left: 4px solid #3498db; }
        .summary-card.checked { border-left: 4px solid #27ae60; }
        .summary-card.flagged { border-left: 4px solid #8e44ad; }
        .summary-card h3 { margin: 0 0 10px 0; font-size: 2em; }
        .summary-card p { margin: 0; color: #666; }

        .pair {
            background: white;
            margin: 20px 0;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
            overflow: hidden;
        }
        .pair-header {
            padding: 15px 20px;
            display: flex;
            justify-content: space-between;
            align-items: center;
            cursor: pointer;
            color: white;
        }
        .pair-header.high { background: #e74c3c; }
        .pair-header.medium { background: #f39c12; }
        .pair-header.low { background: #3498db; }
        .pair-header h3 { margin: 0; font-size: 1.1em; }
        .pair-header .score {
            background: rgba(255,255,255,0.2);
            padding: 5px 15px;
            border-radius: 20px;
            font-weight: bold;
        }

        .pair-content { padding: 20px; display: none; }
        .pair.expanded .pair-content { display: block; }

        .excerpt-comparison {
            display: grid;
            grid-template-columns: 1fr 1fr;
            gap: 10px;
            margin: 10px 0;
        }
        .excerpt {
            background: #2d2d2d;
            color: #f8f8f2;
            padding: 15px;
            border-radius: 4px;
            font-family: 'Monaco', 'Menlo', monospace;
            font-size: 0.85em;
            white-space: pre-wrap;
        }
        .excerpt h4 { color: #888; margin: 0 0 10px 0; font-size: 0.9em; }
        .no-excerpts { color: #888; font-style: italic; }

        .timestamp { color: #888; font-size: 0.9em; margin-top: 30px; }

        @media (max-width: 800px) {
            .excerpt-comparison { grid-template-columns: 1fr; }
        }
"""

SEVERITY_EMOJI = {"high": "🚨", "medium": "⚠️", "low": "📋"}


def _summary_card(css_class: str, value: int, label: str) -> str:
    return f"""
        <div class="summary-card {css_class}">
            <h3>{value}</h3>
            <p>{label}</p>
        </div>"""


def render_html_report(report: PlagiarismReport) -> str:
    """Render a plagiarism report as a standalone HTML page."""
    title = html.escape(report.assignment_title)

    cards = "".join([
        _summary_card("checked", report.total_submissions_checked, "Submissions Checked"),
        _summary_card("flagged", report.flagged_count, "Flagged Pairs"),
        _summary_card("high", report.high_severity_count, "🚨 High"),
        _summary_card("medium", report.medium_severity_count, "⚠️ Medium"),
        _summary_card("low", report.low_severity_count, "📋 Low"),
    ])

    html_content = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Plagiarism Report: {title}</title>
    <style>{STYLE}</style>
    <script>
        function togglePair(el) {{
            el.closest('.pair').classList.toggle('expanded');
        }}
    </script>
</head>
<body>
    <h1>🔍 Plagiarism Report: {title}</h1>

    <div class="summary">{cards}
    </div>

    <h2>Flagged Pairs ({report.flagged_count})</h2>
"""

    for match in report.matches:
        severity = match.severity.value
        name_a = html.escape(match.student_name_a)
        name_b = html.escape(match.student_name_b)
        html_content += f"""
    <div class="pair">
        <div class="pair-header {severity}" onclick="togglePair(this)">
            <h3>{SEVERITY_EMOJI[severity]} {name_a} ↔ {name_b}</h3>
            <span class="score">{match.similarity_percentage:.1f}% · {match.severity.display_name}</span>
        </div>
        <div class="pair-content">
"""
        if not match.matching_excerpts:
            html_content += '            <p class="no-excerpts">No overlapping passages long enough to show.</p>\n'
        for excerpt in match.matching_excerpts:
            html_content += f"""
            <div class="excerpt-comparison">
                <div class="excerpt"><h4>{name_a}</h4>{html.escape(excerpt.excerpt_a)}</div>
                <div class="excerpt"><h4>{name_b}</h4>{html.escape(excerpt.excerpt_b)}</div>
            </div>
"""
        html_content += """
        </div>
    </div>
"""

    if not report.matches:
        html_content += "\n    <p>✅ No significant plagiarism detected.</p>\n"

    html_content += f"""
    <p class="timestamp">Generated: {report.run_date.strftime('%Y-%m-%d %H:%M:%S %Z')}</p>
</body>
</html>
"""
    return html_content


def generate_html_report(json_path: Path, output_path: Path) -> None:
    """Generate HTML report from a JSON plagiarism report."""
    report = PlagiarismReport.model_validate_json(json_path.read_text(encoding="utf-8"))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_html_report(report), encoding="utf-8")
    print(f"Generated HTML report: {output_path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a plagiarism JSON report as HTML")
    parser.add_argument("--input", default="results/plagiarism_report.json")
    parser.add_argument("--output", default="results/plagiarism_report.html")
    args = parser.parse_args()

    json_path = Path(args.input)
    if not json_path.exists():
        raise SystemExit(f"Input report not found: {json_path}")

    generate_html_report(json_path, Path(args.output))


if __name__ == "__main__":
    main()
