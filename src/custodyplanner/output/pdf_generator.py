"""PDF generation for custody calendars.

This module creates printable month calendars showing:
- One landscape page per month covered by the schedule
- Each night coloured by the party holding custody
- Markers for unavailable and adjusted nights
"""

import calendar
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from custodyplanner.domain.models import CustodySchedule, Party, PartyNames

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    Party.PERSON_A: (0.05, 0.65, 0.91),  # Sky blue
    Party.PERSON_B: (0.98, 0.45, 0.09),  # Orange
    "outside": (0.95, 0.95, 0.95),  # Light gray
    "grid": (0.6, 0.6, 0.6),
}


class PDFGenerator:
    """Generates printable PDF calendars.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(schedule, "custody.pdf", PartyNames("Alex", "Sam"))
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
        schedule: CustodySchedule,
        output_path: Union[str, Path],
        names: Optional[PartyNames] = None,
    ) -> None:
        """Generate PDF calendar and save to file.

        Args:
            schedule: The schedule to render.
            output_path: Path to save the PDF.
            names: Display names for the legend.
        """
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw_months(c, schedule, names or PartyNames())
        c.save()

    def generate_to_buffer(
        self,
        schedule: CustodySchedule,
        names: Optional[PartyNames] = None,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw_months(c, schedule, names or PartyNames())
        c.save()
        buffer.seek(0)
        return buffer

    def _draw_months(self, c, schedule: CustodySchedule, names: PartyNames) -> None:
        """Draw one page per month covered by the schedule."""
        dates = schedule.sorted_dates()
        if not dates:
            c.setFont("Helvetica", 12)
            c.drawString(self.margin, self.page_height - self.margin - 20, "Empty schedule")
            c.showPage()
            return

        year, month = dates[0].year, dates[0].month
        while (year, month) <= (dates[-1].year, dates[-1].month):
            self._draw_month(c, schedule, names, year, month)
            c.showPage()
            month += 1
            if month > 12:
                year, month = year + 1, 1

    def _draw_month(
        self,
        c,
        schedule: CustodySchedule,
        names: PartyNames,
        year: int,
        month: int,
    ) -> None:
        """Draw a single month grid."""
        header_height = 50
        legend_height = 30

        c.setFont("Helvetica-Bold", 18)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Custody Calendar - {date(year, month, 1).strftime('%B %Y')}",
        )

        weeks = calendar.Calendar(firstweekday=0).monthdatescalendar(year, month)
        grid_top = self.page_height - self.margin - header_height
        grid_bottom = self.margin + legend_height
        grid_width = self.page_width - 2 * self.margin
        cell_width = grid_width / 7
        cell_height = (grid_top - grid_bottom - 15) / len(weeks)

        # Weekday labels
        c.setFont("Helvetica-Bold", 10)
        c.setFillColorRGB(0, 0, 0)
        for i, label in enumerate(calendar.day_abbr):
            c.drawCentredString(
                self.margin + i * cell_width + cell_width / 2, grid_top - 10, label
            )

        for row, week in enumerate(weeks):
            y = grid_top - 15 - (row + 1) * cell_height
            for col, day in enumerate(week):
                x = self.margin + col * cell_width
                self._draw_cell(c, schedule, names, day, month, x, y, cell_width, cell_height)

        self._draw_legend(c, names, self.margin, self.margin + 5)

    def _draw_cell(
        self,
        c,
        schedule: CustodySchedule,
        names: PartyNames,
        day: date,
        month: int,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw one day cell."""
        entry = schedule.get(day)

        if entry is None or day.month != month:
            c.setFillColorRGB(*COLORS["outside"])
        else:
            c.setFillColorRGB(*COLORS[entry.assigned_to])
        c.setStrokeColorRGB(*COLORS["grid"])
        c.rect(x, y, width, height, fill=1, stroke=1)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(x + 4, y + height - 12, str(day.day))

        if entry is None or day.month != month:
            return

        c.setFont("Helvetica", 8)
        c.drawString(x + 4, y + height - 24, names.name_for(entry.assigned_to)[:16])

        markers = []
        if entry.is_unavailable:
            markers.append("U")
        if entry.is_adjusted:
            markers.append("*")
        if markers:
            c.setFont("Helvetica-Bold", 10)
            c.drawRightString(x + width - 4, y + height - 12, " ".join(markers))

    def _draw_legend(self, c, names: PartyNames, x: float, y: float) -> None:
        """Draw color legend."""
        c.setFont("Helvetica", 9)
        box = 10
        offset = x

        for party in Party:
            c.setFillColorRGB(*COLORS[party])
            c.rect(offset, y, box, box, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            label = names.name_for(party)
            c.drawString(offset + box + 4, y + 1, label)
            offset += box + 12 + c.stringWidth(label, "Helvetica", 9)

        c.drawString(offset + 10, y + 1, "U = unavailable    * = adjusted")
