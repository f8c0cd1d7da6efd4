"""
PDF export of the admin user table.
Renders the currently filtered users as a landscape A4 table.
"""

from datetime import datetime, timezone
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.models.user import User

EXPORT_COLUMNS = ['Name', 'Email', 'Phone', 'Village', 'Union', 'Role', 'Status', 'Created']


def user_row(user: User) -> list[str]:
    role = getattr(user.role, 'value', user.role)
    return [
        user.full_name or '',
        user.email or '',
        user.phone_number or '',
        user.village or '',
        user.union or '',
        role or '',
        'Active' if user.is_active else 'Inactive',
        user.created_at.strftime('%Y-%m-%d') if user.created_at else '',
    ]


def export_filename(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"users_{now.strftime('%Y%m%d%H%M%S')}.pdf"


def render_users_pdf(users: list[User], title: str = 'Users Export') -> bytes:
    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=0.5 * inch,
        rightMargin=0.5 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
        title=title,
    )
    styles = getSampleStyleSheet()

    generated = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')
    story = [
        Paragraph(title, styles['Title']),
        Paragraph(f'Generated {generated} - {len(users)} user(s)', styles['Normal']),
        Spacer(1, 0.2 * inch),
    ]

    table = Table([EXPORT_COLUMNS] + [user_row(user) for user in users], repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1f2937')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f3f4f6')]),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]))
    story.append(table)

    document.build(story)
    return buffer.getvalue()
