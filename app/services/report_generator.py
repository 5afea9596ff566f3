# backend/app/services/report_generator.py
import io
from datetime import datetime
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

NOT_AVAILABLE = "N/A"
RULE = "━" * 62
ACCENT = colors.HexColor("#1a365d")

def _value(data: Optional[Dict[str, Any]], key: str) -> str:
    value = (data or {}).get(key)
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)

def _format_date(value: Optional[str]) -> str:
    if not value:
        return NOT_AVAILABLE
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d")
    except (TypeError, ValueError):
        return str(value)

def _markup(text: str) -> str:
    """Escape user text for a Paragraph and keep its line breaks."""
    return escape(text).replace("\n", "<br/>")

class ProjectReportGenerator:
    """Render a project's backup data as a PDF or a plain-text report"""

    def __init__(self, generated_at: Optional[datetime] = None):
        self.generated_at = generated_at or datetime.now()
        self.styles = getSampleStyleSheet()
        self.setup_custom_styles()

    def setup_custom_styles(self):
        self.title_style = ParagraphStyle(
            'ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            textColor=ACCENT,
            spaceAfter=6,
            alignment=TA_CENTER,
        )

        self.subtitle_style = ParagraphStyle(
            'ReportSubtitle',
            parent=self.styles['Normal'],
            fontSize=9,
            textColor=colors.grey,
            alignment=TA_CENTER,
        )

        self.header_style = ParagraphStyle(
            'SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=14,
            textColor=ACCENT,
            spaceBefore=12,
            spaceAfter=8,
        )

        self.item_title_style = ParagraphStyle(
            'ItemTitle',
            parent=self.styles['Normal'],
            fontName='Helvetica-Bold',
            fontSize=10,
            spaceBefore=6,
        )

        self.body_style = ParagraphStyle(
            'Body',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=12,
        )

        self.table_cell_style = ParagraphStyle(
            'TableCell',
            parent=self.styles['Normal'],
            fontSize=8,
            leading=10,
        )

    @property
    def timestamp(self) -> str:
        return self.generated_at.strftime("%Y-%m-%d %H:%M:%S")

    def _draw_footer(self, canv: canvas.Canvas, doc):
        page_width, _ = doc.pagesize
        canv.saveState()
        canv.setFont('Helvetica', 8)
        canv.setFillColor(colors.grey)
        canv.drawCentredString(page_width / 2, 0.5 * inch, f"Page {doc.page}")
        canv.restoreState()

    def _section(self, story: List, title: str, count: Optional[int] = None):
        label = f"{title} ({count})" if count is not None else title
        story.append(Paragraph(escape(label), self.header_style))

    # table rows never split across pages, so long free text stays out of tables
    def _info_table(self, project: Dict[str, Any]) -> Table:
        rows = [
            ("Project Name", _value(project, "project_name")),
            ("Status", _value(project, "status")),
            ("Start Date", _value(project, "start_date")),
            ("Repository", _value(project, "repo_link")),
            ("Live Site", _value(project, "live_link")),
        ]
        data = [
            [Paragraph(f"<b>{label}</b>", self.table_cell_style), Paragraph(_markup(value), self.table_cell_style)]
            for label, value in rows
        ]
        table = Table(data, colWidths=[1.6 * inch, 4.9 * inch])
        table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f1f5f9')),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        return table

    def _issues_table(self, issues: List[Dict[str, Any]]) -> Table:
        header = ["#", "Title", "Priority", "Status", "Created"]
        data = [[Paragraph(f"<b>{h}</b>", self.table_cell_style) for h in header]]
        for index, issue in enumerate(issues, start=1):
            data.append([
                Paragraph(str(index), self.table_cell_style),
                Paragraph(_markup(_value(issue, "title")), self.table_cell_style),
                Paragraph(_markup(_value(issue, "priority")), self.table_cell_style),
                Paragraph(_markup(_value(issue, "status")), self.table_cell_style),
                Paragraph(_format_date(issue.get("created_at")), self.table_cell_style),
            ])
        table = Table(
            data,
            colWidths=[0.4 * inch, 3.6 * inch, 0.8 * inch, 0.8 * inch, 0.9 * inch],
            repeatRows=1,
        )
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), ACCENT),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f8f9fa')]),
        ]))
        return table

    def build_pdf(self, data: Dict[str, Any]) -> bytes:
        project = data.get("project") or {}
        notes = data.get("notes") or []
        issues = data.get("issues") or []
        team = data.get("team") or []
        goals = data.get("goals") or []

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            topMargin=0.6 * inch,
            bottomMargin=0.8 * inch,
            leftMargin=0.7 * inch,
            rightMargin=0.7 * inch,
            title=f"{_value(project, 'project_name')} - Project Details",
        )
        story = []

        story.append(Paragraph("PROJECT DETAILS REPORT", self.title_style))
        story.append(Paragraph(f"Generated: {self.timestamp}", self.subtitle_style))
        story.append(Spacer(1, 0.25 * inch))

        self._section(story, "PROJECT INFORMATION")
        story.append(self._info_table(project))
        story.append(Spacer(1, 0.15 * inch))
        story.append(Paragraph("<b>Description</b>", self.body_style))
        story.append(Paragraph(_markup(_value(project, "description")), self.body_style))
        story.append(Spacer(1, 0.15 * inch))
        story.append(Paragraph("<b>Technology Stack</b>", self.body_style))
        stack = project.get("technology_stack") or []
        if stack:
            for tech in stack:
                story.append(Paragraph(_markup(tech), self.body_style, bulletText="•"))
        else:
            story.append(Paragraph("No technologies listed", self.body_style))

        self._section(story, "DEVELOPMENT NOTES", len(notes))
        if notes:
            for index, note in enumerate(notes, start=1):
                story.append(Paragraph(f"Note #{index}", self.item_title_style))
                story.append(Paragraph(f"Date: {_format_date(note.get('created_at'))}", self.body_style))
                story.append(Paragraph(_markup(note.get("content") or "No content"), self.body_style))
        else:
            story.append(Paragraph("No notes available.", self.body_style))

        self._section(story, "ISSUES & BUGS", len(issues))
        if issues:
            story.append(self._issues_table(issues))
            for index, issue in enumerate(issues, start=1):
                story.append(Paragraph(
                    f"Issue #{index}: {_markup(_value(issue, 'title'))}", self.item_title_style
                ))
                story.append(Paragraph(_markup(issue.get("description") or "No description"), self.body_style))
        else:
            story.append(Paragraph("No issues reported.", self.body_style))

        self._section(story, "TEAM MEMBERS", len(team))
        if team:
            for member in team:
                line = f"<b>{_markup(_value(member, 'name'))}</b> ({_markup(_value(member, 'role'))})"
                story.append(Paragraph(line, self.body_style, bulletText="•"))
                story.append(Paragraph(
                    f"Contact: {_markup(member.get('contact') or 'Not provided')}", self.body_style
                ))
        else:
            story.append(Paragraph("No team members listed.", self.body_style))

        self._section(story, "PROJECT GOALS", len(goals))
        if goals:
            for index, goal in enumerate(goals, start=1):
                mark = "[x]" if goal.get("completed") else "[ ]"
                state = "Completed" if goal.get("completed") else "In Progress"
                story.append(Paragraph(
                    f"{mark} Goal #{index}: {_markup(_value(goal, 'goal'))} <i>({state})</i>", self.body_style
                ))
        else:
            story.append(Paragraph("No goals defined.", self.body_style))

        story.append(Spacer(1, 0.3 * inch))
        story.append(Paragraph("END OF REPORT", self.subtitle_style))

        doc.build(story, onFirstPage=self._draw_footer, onLaterPages=self._draw_footer)
        return buffer.getvalue()

    def build_text(self, data: Dict[str, Any]) -> str:
        project = data.get("project") or {}
        notes = data.get("notes") or []
        issues = data.get("issues") or []
        team = data.get("team") or []
        goals = data.get("goals") or []

        def section(title: str) -> List[str]:
            return ["", RULE, title, RULE, ""]

        lines = [
            "PROJECT DETAILS REPORT",
            f"Generated: {self.timestamp}",
        ]

        lines += section("PROJECT INFORMATION")
        lines += [
            f"Project Name:     {_value(project, 'project_name')}",
            f"Description:      {_value(project, 'description')}",
            f"Status:           {_value(project, 'status')}",
            f"Start Date:       {_value(project, 'start_date')}",
            f"Repository:       {_value(project, 'repo_link')}",
            f"Live Site:        {_value(project, 'live_link')}",
            "",
            "Technology Stack:",
        ]
        stack = project.get("technology_stack") or []
        lines += [f"  • {tech}" for tech in stack] or ["  No technologies listed"]

        lines += section(f"DEVELOPMENT NOTES ({len(notes)})")
        if notes:
            for index, note in enumerate(notes, start=1):
                lines += [
                    f"Note #{index}",
                    f"Date: {_format_date(note.get('created_at'))}",
                    "Content:",
                    note.get("content") or "No content",
                    "",
                    "-" * 60,
                ]
        else:
            lines.append("No notes available.")

        lines += section(f"ISSUES & BUGS ({len(issues)})")
        if issues:
            for index, issue in enumerate(issues, start=1):
                lines += [
                    f"Issue #{index}: {_value(issue, 'title')}",
                    f"Priority:     {_value(issue, 'priority')}",
                    f"Status:       {_value(issue, 'status')}",
                    f"Description:  {issue.get('description') or 'No description'}",
                    f"Created:      {_format_date(issue.get('created_at'))}",
                    "",
                    "-" * 60,
                ]
        else:
            lines.append("No issues reported.")

        lines += section(f"TEAM MEMBERS ({len(team)})")
        if team:
            for member in team:
                lines += [
                    f"  • {_value(member, 'name')} ({_value(member, 'role')})",
                    f"    Contact: {member.get('contact') or 'Not provided'}",
                ]
        else:
            lines.append("No team members listed.")

        lines += section(f"PROJECT GOALS ({len(goals)})")
        if goals:
            for index, goal in enumerate(goals, start=1):
                mark = "✓" if goal.get("completed") else "○"
                state = "Completed" if goal.get("completed") else "In Progress"
                lines += [
                    f"  {mark} Goal #{index}: {_value(goal, 'goal')}",
                    f"    Status: {state}",
                ]
        else:
            lines.append("No goals defined.")

        lines += ["", RULE, "END OF REPORT".center(62), RULE, ""]
        return "\n".join(lines)
