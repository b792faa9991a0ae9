"""Plain text report for a schedule result.

This module creates a human-readable summary showing:
- Warnings raised during selection
- Final meeting dates with vote counts and core date markers
- Per-participant attendance
- The full vote histogram over every submitted date
"""

from datetime import date
from pathlib import Path
from typing import Union

from meetpoll.domain.models import ScheduleRequest, ScheduleResult
from meetpoll.scheduling.availability import AvailabilityIndex
from meetpoll.scheduling.ranker import CandidateRanker
from meetpoll.scheduling.scheduler import calculate_statistics


class TextReportGenerator:
    """Generates text reports for schedule results.

    Example:
        >>> generator = TextReportGenerator()
        >>> print(generator.generate_to_string(result, request))
    """

    def __init__(self, width: int = 80, max_bar: int = 40):
        self.width = width
        self.max_bar = max_bar

    def generate(
        self,
        result: ScheduleResult,
        request: ScheduleRequest,
        output_path: Union[str, Path],
    ) -> str:
        """Generate the report and save it to a file.

        Args:
            result: The schedule result to report on.
            request: Request the result was produced from.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(result, request)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(self, result: ScheduleResult, request: ScheduleRequest) -> str:
        """Generate the report and return it as a string."""
        return self._generate_content(result, request)

    def _generate_content(self, result: ScheduleResult, request: ScheduleRequest) -> str:
        lines = []
        settings = request.settings
        index = AvailabilityIndex.build(request.participants)

        lines.append("=" * self.width)
        lines.append("MEETING DATE RECOMMENDATION")
        lines.append("=" * self.width)
        lines.append("")
        lines.append(f"Participants: {len(request.participants)}")
        lines.append(
            f"Quorum per date: {settings.min_participants_per_meeting}, "
            f"target meetings: {settings.min_meeting_dates}, "
            f"minimum meetings per person: {settings.min_meetings_per_person}"
        )
        lines.append("")

        if result.warnings:
            lines.append("-" * self.width)
            lines.append(f"WARNINGS ({len(result.warnings)})")
            lines.append("-" * self.width)
            for warning in result.warnings:
                lines.append(f"  ! {warning}")
            lines.append("")

        lines.append("-" * self.width)
        lines.append(f"FINAL MEETING DATES ({len(result.final_dates)})")
        lines.append("-" * self.width)
        if result.final_dates:
            lines.append(f"{'#':>3} {'Date':<12} {'Day':<4} {'Votes':>5}  Core")
            for i, day in enumerate(sorted(result.final_dates), 1):
                core = "*" if result.is_core_date(day) else ""
                lines.append(
                    f"{i:>3} {day:<12} {self._weekday(day):<4} "
                    f"{index.get_votes(day):>5}  {core}"
                )
        else:
            lines.append("  No meeting dates selected.")
        lines.append("")

        stats = calculate_statistics(result.final_dates, request.participants, index.tally)
        if stats.total_meetings:
            lines.append("-" * self.width)
            lines.append("PARTICIPANT ATTENDANCE")
            lines.append("-" * self.width)
            for p in stats.participant_stats:
                dates_str = ", ".join(p.attending_dates) if p.attending_dates else "none"
                lines.append(
                    f"  {p.name[:20]:<20} {p.attending_count}/{stats.total_meetings} "
                    f"({p.attendance_rate:.0f}%)  {dates_str}"
                )
            lines.append("")

        lines.append("-" * self.width)
        lines.append("ALL VOTES")
        lines.append("-" * self.width)
        ranked = list(CandidateRanker().rank(index.tally))
        if ranked:
            top = ranked[0].votes
            final = set(result.final_dates)
            for candidate in ranked:
                bar = "#" * max(1, round(self.max_bar * candidate.votes / top))
                mark = " <" if candidate.date in final else ""
                lines.append(f"{candidate.date}: {bar} ({candidate.votes}){mark}")
        else:
            lines.append("  No votes submitted.")

        lines.append("")
        lines.append("=" * self.width)

        return "\n".join(lines)

    def _weekday(self, day: str) -> str:
        return date.fromisoformat(day).strftime("%a")
