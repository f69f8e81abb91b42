"""Self-contained HTML report for polyloc.

The report embeds the same document the JSON formatter produces as a JSON
blob inside a ``<script>`` tag and renders it with plain DOM code. Language
shares are drawn as CSS bars, so the file has no external dependencies and
opens from any local file:// path.
"""

import json
from typing import Optional

from ..analysis import COMPLEXITY_WARNING, FunctionSummary
from ..models import ScanResult
from .base import BaseFormatter
from .json_formatter import build_report

# Rows in the file table; the search box filters before the cut.
MAX_FILE_ROWS = 50


def _embed(data: dict) -> str:
    # A path containing "</script>" must not close the script element.
    return json.dumps(data).replace("</", "<\\/")


class HtmlFormatter(BaseFormatter):
    """Render a scan result as a standalone HTML page."""

    def render(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> None:
        print(self.format(result, summary))

    def format(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> str:
        return _build_html(_embed(build_report(result, summary)))


# ── Private helpers ──────────────────────────────────────────────────


def _build_html(data_json: str) -> str:
    """Fill the page template. Literal braces in CSS and JS are doubled."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>polyloc report</title>
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; background: #0f172a; color: #f8fafc; padding: 32px; }}
.container {{ max-width: 1200px; margin: 0 auto; }}
header {{ display: flex; justify-content: space-between; align-items: baseline; padding-bottom: 16px; margin-bottom: 24px; border-bottom: 1px solid #334155; }}
header h1 {{ font-size: 24px; color: #38bdf8; }}
#timestamp {{ font-size: 13px; color: #94a3b8; }}
#stats {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 16px; margin-bottom: 24px; }}
.stat {{ background: #1e293b; border: 1px solid #334155; border-radius: 10px; padding: 16px; text-align: center; }}
.stat-value {{ display: block; font-size: 28px; font-weight: 700; }}
.stat-label {{ font-size: 12px; color: #94a3b8; text-transform: uppercase; letter-spacing: 0.5px; }}
.panel {{ background: #1e293b; border: 1px solid #334155; border-radius: 10px; padding: 16px; margin-bottom: 24px; }}
.panel h2 {{ font-size: 16px; color: #38bdf8; margin-bottom: 12px; }}
.bar-row {{ display: grid; grid-template-columns: 140px 1fr 110px; gap: 12px; align-items: center; font-size: 13px; padding: 4px 0; }}
.bar {{ height: 12px; border-radius: 6px; background: #38bdf8; }}
.bar-value {{ text-align: right; color: #94a3b8; }}
#search {{ width: 100%; background: #0f172a; border: 1px solid #334155; color: #f8fafc; padding: 8px 12px; border-radius: 6px; margin-bottom: 12px; }}
table {{ width: 100%; border-collapse: collapse; font-size: 13px; }}
th {{ text-align: left; color: #94a3b8; border-bottom: 1px solid #334155; padding: 8px; }}
td {{ border-bottom: 1px solid #334155; padding: 8px; }}
td.num {{ text-align: right; }}
.badge {{ display: inline-block; padding: 1px 8px; border-radius: 999px; font-size: 12px; font-weight: 600; }}
.low {{ background: #10b98122; color: #10b981; }}
.med {{ background: #f59e0b22; color: #f59e0b; }}
.high {{ background: #ef444422; color: #ef4444; }}
.issue {{ font-size: 13px; padding: 4px 0; }}
.issue.error {{ color: #ef4444; }}
.issue.warning {{ color: #f59e0b; }}
footer {{ text-align: center; color: #475569; font-size: 12px; margin-top: 32px; }}
</style>
</head>
<body>
<div class="container">
<header>
  <h1>polyloc report</h1>
  <div id="timestamp"></div>
</header>
<div id="stats"></div>
<div class="panel"><h2>Code Lines by Language</h2><div id="languages"></div></div>
<div class="panel">
  <h2>Files</h2>
  <input type="text" id="search" placeholder="Filter by path...">
  <table>
    <thead><tr><th>Path</th><th>Language</th><th>Code</th><th>Comment</th><th>Blank</th><th id="complexity-header">Max Complexity</th></tr></thead>
    <tbody id="file-rows"></tbody>
  </table>
</div>
<div class="panel" id="issues-panel"><h2>Issues</h2><div id="issues"></div></div>
<footer id="generator"></footer>
</div>

<script>
// All report data embedded at generation time.
const DATA = {data_json};
const MAX_ROWS = {MAX_FILE_ROWS};
const WARN = {COMPLEXITY_WARNING};

function escapeHtml(str) {{
  var div = document.createElement("div");
  div.appendChild(document.createTextNode(String(str)));
  return div.innerHTML;
}}

function fmt(n) {{ return Number(n).toLocaleString(); }}

// ── Header and stat cards ────────────────────────────────────────
(function() {{
  var m = DATA.metadata;
  document.getElementById("timestamp").textContent = "Generated " + new Date(m.timestamp).toLocaleString();
  document.getElementById("generator").textContent = m.generator;
  var cards = [["Total Lines", m.total_lines], ["Text Files", m.total_files], ["Binary Files", m.binary_files]];
  if (m.function_extraction_enabled) {{
    cards.push(["Functions", m.total_functions], ["Classes", m.total_classes]);
  }}
  document.getElementById("stats").innerHTML = cards.map(function(c) {{
    return '<div class="stat"><span class="stat-value">' + fmt(c[1]) + '</span><span class="stat-label">' + c[0] + '</span></div>';
  }}).join("");
}})();

// ── Language bars ────────────────────────────────────────────────
(function() {{
  var names = Object.keys(DATA.breakdown).filter(function(k) {{ return DATA.breakdown[k].files > 0; }});
  names.sort(function(a, b) {{ return DATA.breakdown[b].code - DATA.breakdown[a].code; }});
  var max = names.length ? Math.max(1, DATA.breakdown[names[0]].code) : 1;
  document.getElementById("languages").innerHTML = names.map(function(name) {{
    var t = DATA.breakdown[name];
    var width = (t.code / max * 100).toFixed(1);
    return '<div class="bar-row"><span>' + escapeHtml(name) + '</span>' +
      '<div class="bar" style="width:' + width + '%"></div>' +
      '<span class="bar-value">' + fmt(t.code) + ' / ' + fmt(t.files) + ' files</span></div>';
  }}).join("");
}})();

// ── File table ───────────────────────────────────────────────────
function maxComplexity(f) {{
  if (!f.functions) return null;
  var values = f.functions.map(function(fn) {{ return fn.complexity; }}).filter(function(c) {{ return c !== null; }});
  return values.length ? Math.max.apply(null, values) : null;
}}

function badge(c) {{
  if (c === null) return "-";
  var cls = c > WARN ? "high" : (c > WARN / 2 ? "med" : "low");
  return '<span class="badge ' + cls + '">' + c + '</span>';
}}

function renderFiles(filter) {{
  var needle = (filter || "").toLowerCase();
  var rows = DATA.files
    .filter(function(f) {{ return f.path.toLowerCase().indexOf(needle) !== -1; }})
    .sort(function(a, b) {{ return b.lines - a.lines; }})
    .slice(0, MAX_ROWS);
  document.getElementById("file-rows").innerHTML = rows.map(function(f) {{
    return '<tr><td>' + escapeHtml(f.path) + '</td><td>' + escapeHtml(f.language || "unknown") + '</td>' +
      '<td class="num">' + fmt(f.code) + '</td><td class="num">' + fmt(f.comment) + '</td>' +
      '<td class="num">' + fmt(f.blank) + '</td><td class="num">' + badge(maxComplexity(f)) + '</td></tr>';
  }}).join("");
}}

if (!DATA.metadata.complexity_enabled) {{
  document.getElementById("complexity-header").textContent = "";
}}
document.getElementById("search").addEventListener("input", function(e) {{ renderFiles(e.target.value); }});

// ── Issues ───────────────────────────────────────────────────────
(function() {{
  var issues = DATA.errors.concat(DATA.warnings);
  if (!issues.length) {{
    document.getElementById("issues-panel").style.display = "none";
    return;
  }}
  document.getElementById("issues").innerHTML = issues.map(function(i) {{
    return '<div class="issue ' + i.severity + '">' + escapeHtml(i.error_code + " " + i.path + ": " + i.message) + '</div>';
  }}).join("");
}})();

// Initial render.
renderFiles("");
</script>
</body>
</html>
"""
