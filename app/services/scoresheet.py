from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm
import io

from app.models.match import Match


def _team_names(team) -> str:
    if team is None:
        return "-"
    return " / ".join(p.name for p in team.players)


def render(match: Match) -> io.BytesIO:
    """Draw a one-page PDF scoresheet for a match."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    y = height - 2 * cm

    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawCentredString(width / 2, y, "Badminton Doubles")
    y -= 20
    pdf.setFont("Helvetica", 12)
    pdf.drawCentredString(
        width / 2,
        y,
        f"Match of {match.match_date.strftime('%d/%m/%Y')}"
    )

    y -= 35
    pdf.setFont("Helvetica-Bold", 11)
    pdf.drawString(2 * cm, y, _team_names(match.team_a))
    pdf.drawCentredString(width / 2, y, "VS")
    pdf.drawRightString(width - 2 * cm, y, _team_names(match.team_b))

    y -= 25
    pdf.setFont("Helvetica", 10)
    for s in sorted(match.sets, key=lambda s: s.number):
        pdf.drawString(2 * cm, y, f"Set {s.number}")
        pdf.drawCentredString(width / 2 - 20, y, str(s.points_a))
        pdf.drawCentredString(width / 2, y, "-")
        pdf.drawCentredString(width / 2 + 20, y, str(s.points_b))
        y -= 15

    y -= 20
    pdf.setFont("Helvetica-Bold", 11)
    pdf.drawString(2 * cm, y, f"Status: {match.status.value}")
    if match.winning_team is not None:
        y -= 15
        pdf.drawString(2 * cm, y, f"Winner: {_team_names(match.winning_team)}")

    pdf.save()
    buffer.seek(0)
    return buffer
