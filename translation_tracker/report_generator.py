"""HTML report of translation progress and MT abuse warnings."""

from datetime import datetime
from pathlib import Path
from typing import List

from jinja2 import Template

from .models import SectionState, TranslationProgress


class ReportGenerator:
    """Generates HTML reports for a tracked translation."""

    TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Translation Progress Report</title>
    <style>
        body { font-family: sans-serif; max-width: 960px; margin: 0 auto; padding: 16px; color: #222; }
        .header { border-bottom: 3px solid #34495e; margin-bottom: 16px; }
        .status-success { color: #1e8449; }
        .status-warning { color: #b9770e; }
        .status-success, .status-warning, .stat-value { font-weight: bold; }
        .stats { display: flex; flex-wrap: wrap; gap: 12px; }
        .stat-item { border: 1px solid #ccc; padding: 8px 12px; min-width: 140px; }
        .stat-label, .footer { color: #777; font-size: 0.9em; }
        table { width: 100%; border-collapse: collapse; }
        th, td { text-align: left; padding: 4px 8px; border-bottom: 1px solid #ddd; }
        tr.flagged { background: #fdecea; }
    </style>
</head>
<body>
    <div class="header">
        <h1>Translation Progress Report</h1>
        {% if title %}<p><strong>Article:</strong> {{ title }}</p>{% endif %}
        <p><strong>Languages:</strong> {{ source_language }} → {{ target_language }}</p>
        <p><strong>Generated:</strong> {{ timestamp }}</p>
        <p><strong>Status:</strong>
            <span class="status-{{ status_class }}">{{ status_text }}</span>
        </p>
    </div>

    <div>
        <h2>Progress</h2>
        <div class="stats">
            <div class="stat-item">
                <div class="stat-label">Any Translation</div>
                <div class="stat-value">{{ "%.0f"|format(progress.any * 100) }}%</div>
            </div>
            <div class="stat-item">
                <div class="stat-label">Human Modified</div>
                <div class="stat-value">{{ "%.0f"|format(progress.human * 100) }}%</div>
            </div>
            <div class="stat-item">
                <div class="stat-label">Unmodified MT</div>
                <div class="stat-value">{{ "%.0f"|format(progress.mt * 100) }}%</div>
            </div>
            <div class="stat-item">
                <div class="stat-label">Translated Sections</div>
                <div class="stat-value">{{ progress.translated_sections_count }} / {{ sections|length }}</div>
            </div>
            <div class="stat-item">
                <div class="stat-label">Unmodified MT Tokens</div>
                <div class="stat-value">{{ "%.1f"|format(unmodified_tokens) }}%</div>
            </div>
        </div>
    </div>

    <div>
        <h2>Sections</h2>
        <table>
            <tr>
                <th>Section</th>
                <th>Source</th>
                <th>Progress</th>
                <th>Unmodified</th>
                <th>Warning</th>
            </tr>
            {% for state in sections %}
            <tr{% if state.mt_abuse_warning %} class="flagged"{% endif %}>
                <td>{{ state.section_number }}</td>
                <td>{{ state.current_provider }}</td>
                <td>{{ "%.0f"|format(state.translation_progress * 100) }}%</td>
                <td>{{ "%.0f"|format(state.unmodified_percentage * 100) }}%</td>
                <td>{% if state.mt_abuse_warning %}MT abuse{% endif %}</td>
            </tr>
            {% endfor %}
        </table>
    </div>

    <div class="footer">
        <p>Generated by Translation Tracker</p>
        <p>Exit Code: {{ exit_code }}</p>
    </div>
</body>
</html>
"""

    def render(
        self,
        sections: List[SectionState],
        progress: TranslationProgress,
        source_language: str,
        target_language: str,
        unmodified_tokens: float = 0.0,
        title: str = "",
    ) -> str:
        """Render the report HTML.

        Args:
            sections: Section states, in document order
            progress: Aggregate progress
            source_language: Source language code
            target_language: Target language code
            unmodified_tokens: Percentage of unmodified MT tokens in the translation
            title: Article title

        Returns:
            Report HTML
        """
        flagged = sum(1 for state in sections if state.mt_abuse_warning)
        exit_code = 1 if flagged else 0

        if flagged:
            status_text = f"MT ABUSE WARNINGS ({flagged} sections)"
            status_class = "warning"
        else:
            status_text = "OK"
            status_class = "success"

        template = Template(self.TEMPLATE)
        return template.render(
            title=title,
            source_language=source_language,
            target_language=target_language,
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            status_text=status_text,
            status_class=status_class,
            progress=progress,
            unmodified_tokens=unmodified_tokens,
            sections=sections,
            exit_code=exit_code,
        )

    def generate_report(self, output_path: str, **kwargs) -> str:
        """Render the report and write it to a file.

        Args:
            output_path: Path to save report
            **kwargs: Arguments of ``render``

        Returns:
            Path to generated report
        """
        html = self.render(**kwargs)

        report_path = Path(output_path)
        report_path.parent.mkdir(parents=True, exist_ok=True)

        with open(report_path, 'w', encoding='utf-8') as f:
            f.write(html)

        return str(report_path)
