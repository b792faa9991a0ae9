"""PDF generation for schedule results.

This module creates printable PDF reports showing:
- Final meeting dates with vote counts, core dates highlighted
- Per-participant attendance bars
- The vote distribution over all submitted dates
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from meetpoll.domain.models import ScheduleRequest, ScheduleResult, ScheduleStatistics
from meetpoll.scheduling.availability import AvailabilityIndex
from meetpoll.scheduling.ranker import CandidateRanker
from meetpoll.scheduling.scheduler import calculate_statistics

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "core": (0.9, 0.6, 0.2),  # Orange
    "final": (0.4, 0.6, 0.8),  # Blue
    "other": (0.75, 0.75, 0.75),  # Gray
    "attended": (0.4, 0.7, 0.4),  # Green
    "missed": (0.95, 0.95, 0.95),  # Light gray
    "warning": (0.8, 0.2, 0.2),  # Red
}


class PDFGenerator:
    """Generates printable PDF reports for schedule results.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(result, request, "meetings.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        result: ScheduleResult,
        request: ScheduleRequest,
        output_path: Union[str, Path],
        include_votes: bool = True,
    ) -> None:
        """Generate PDF report and save to file.

        Args:
            result: The schedule result to render.
            request: Request the result was produced from.
            output_path: Path to save the PDF.
            include_votes: Whether to include the vote distribution page.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw(c, result, request, include_votes)
        c.save()

    def generate_to_buffer(
        self,
        result: ScheduleResult,
        request: ScheduleRequest,
        include_votes: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer.

        Returns:
            BytesIO buffer containing PDF data.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw(c, result, request, include_votes)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, result: ScheduleResult, request: ScheduleRequest, include_votes: bool) -> None:
        index = AvailabilityIndex.build(request.participants)
        stats = calculate_statistics(result.final_dates, request.participants, index.tally)

        self._draw_summary_pages(c, result, request, stats)
        if include_votes:
            self._draw_votes_page(c, result, index)

    def _wrap_lines(self, text: str, font: str, size: float, width: float) -> list[str]:
        """Split text into lines that fit the given width."""
        from reportlab.lib.utils import simpleSplit

        return simpleSplit(text, font, size, width) or [""]

    def _draw_header(self, c, title: str, subtitle: str) -> None:
        """Draw page header with title."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, title)
        c.setFont("Helvetica", 10)
        c.drawString(self.margin, self.page_height - self.margin - 35, subtitle)

    def _draw_summary_pages(
        self,
        c,
        result: ScheduleResult,
        request: ScheduleRequest,
        stats: ScheduleStatistics,
    ) -> None:
        """Draw final dates, warnings and per-participant attendance."""
        settings = request.settings
        self._draw_header(
            c,
            "Meeting Date Recommendation",
            f"{len(request.participants)} participants, quorum "
            f"{settings.min_participants_per_meeting}, target "
            f"{settings.min_meeting_dates} meetings",
        )

        y = self.page_height - self.margin - 65

        if result.warnings:
            c.setFont("Helvetica-Bold", 12)
            c.setFillColorRGB(*COLORS["warning"])
            c.drawString(self.margin, y, "Warnings")
            y -= 16
            c.setFont("Helvetica", 9)
            text_width = self.page_width - 2 * self.margin - 20
            for warning in result.warnings:
                for line in self._wrap_lines(warning, "Helvetica", 9, text_width):
                    c.drawString(self.margin + 20, y, line)
                    y -= 13
            c.setFillColorRGB(0, 0, 0)
            y -= 10

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, f"Final Dates ({len(result.final_dates)})")
        y -= 18

        c.setFont("Helvetica", 9)
        dates_x = self.margin + 20
        for date_stat in sorted(stats.date_stats, key=lambda d: d.date):
            key = "core" if result.is_core_date(date_stat.date) else "final"
            c.setFillColorRGB(*COLORS[key])
            c.rect(dates_x, y - 2, 10, 10, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(dates_x + 14, y, f"{date_stat.date} ({date_stat.participants})")
            dates_x += 120
            if dates_x > self.page_width - self.margin - 120:
                dates_x = self.margin + 20
                y -= 15
        y -= 30

        if not stats.total_meetings:
            c.showPage()
            return

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Attendance")
        y -= 20

        chronological = sorted(result.final_dates)
        grid_left = self.margin + 150
        grid_width = self.page_width - self.margin - grid_left
        cell = min(24.0, grid_width / len(chronological))
        row_height = 16

        for p in stats.participant_stats:
            if y < self.margin + row_height:
                c.showPage()
                y = self.page_height - self.margin - 20
            c.setFont("Helvetica", 9)
            c.drawString(self.margin, y, p.name[:18])
            c.drawRightString(
                grid_left - 8, y, f"{p.attending_count}/{stats.total_meetings}"
            )
            attended = set(p.attending_dates)
            for i, day in enumerate(chronological):
                key = "attended" if day in attended else "missed"
                c.setFillColorRGB(*COLORS[key])
                c.rect(grid_left + i * cell, y - 3, cell - 1, row_height - 4, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            y -= row_height

        c.showPage()

    def _draw_votes_page(self, c, result: ScheduleResult, index: AvailabilityIndex) -> None:
        """Draw a bar chart of votes for every submitted date."""
        ranked = list(CandidateRanker().rank(index.tally))
        self._draw_header(c, "Vote Distribution", f"{len(ranked)} dates submitted")

        if not ranked:
            c.showPage()
            return

        final = set(result.final_dates)
        top = ranked[0].votes
        row_height = 14
        bar_left = self.margin + 90
        bar_max = self.page_width - self.margin - bar_left - 40
        y = self.page_height - self.margin - 65

        for candidate in sorted(ranked, key=lambda r: r.date):
            if y < self.margin:
                c.showPage()
                y = self.page_height - self.margin - 20
            if result.is_core_date(candidate.date):
                key = "core"
            elif candidate.date in final:
                key = "final"
            else:
                key = "other"
            c.setFont("Helvetica", 8)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(self.margin, y, candidate.date)
            c.setFillColorRGB(*COLORS[key])
            width = bar_max * candidate.votes / top
            c.rect(bar_left, y - 2, width, row_height - 5, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(bar_left + width + 4, y, str(candidate.votes))
            y -= row_height

        c.showPage()
