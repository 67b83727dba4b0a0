import logging
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

from app.exceptions import PortalError
from app.models.application import Application
from app.services.export_service import EXPORT_SECTIONS, format_value
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

PROGRAMME_NAME = "AYuTe Africa Challenge Nigeria"


class PDFGenerationError(PortalError):
    """Raised when a summary PDF cannot be rendered"""
    default_message = "Error downloading application"


class ApplicationPDFGenerator:
    """Renders one application as a sectioned summary, using the export column table"""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self.setup_custom_styles()

    def setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='PortalTitle',
            parent=self.styles['Title'],
            fontSize=20,
            textColor=colors.HexColor('#1b5e20'),
            spaceAfter=12
        ))

        self.styles.add(ParagraphStyle(
            name='PortalHeading',
            parent=self.styles['Heading2'],
            fontSize=13,
            textColor=colors.HexColor('#2e7d32'),
            spaceBefore=10,
            spaceAfter=6
        ))

        self.styles.add(ParagraphStyle(
            name='PortalCell',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=11
        ))

        self.styles.add(ParagraphStyle(
            name='PortalFooter',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.gray,
            alignment=1
        ))

    def _section_table(self, application: Application, columns) -> Table:
        rows = [
            [Paragraph(escape(header), self.styles['PortalCell']),
             Paragraph(escape(format_value(getter(application))) or "N/A", self.styles['PortalCell'])]
            for header, _, getter in columns
        ]
        table = Table(rows, colWidths=[2.2 * inch, 4.6 * inch])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('PADDING', (0, 0), (-1, -1), 5),
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#e8f5e9')),
        ]))
        return table

    def generate(self, application: Application) -> bytes:
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                leftMargin=0.6 * inch,
                rightMargin=0.6 * inch,
                topMargin=0.6 * inch,
                bottomMargin=0.6 * inch,
                title=f"Application {application.reference_number}",
            )
            story = [
                Paragraph(escape(PROGRAMME_NAME), self.styles['PortalTitle']),
                Paragraph(
                    escape(f"Application {application.reference_number} ({application.full_name})"),
                    self.styles['PortalHeading'],
                ),
                Spacer(1, 6),
            ]
            for title, columns in EXPORT_SECTIONS:
                story.append(Paragraph(escape(title), self.styles['PortalHeading']))
                story.append(self._section_table(application, columns))

            story.append(Spacer(1, 12))
            story.append(Paragraph(
                f"Generated {utcnow().strftime('%Y-%m-%d %H:%M')} UTC",
                self.styles['PortalFooter'],
            ))
            doc.build(story)
        except Exception as e:
            logger.error(f"Failed to render PDF for {application.reference_number}: {str(e)}")
            raise PDFGenerationError() from e

        logger.info(f"Rendered PDF summary for {application.reference_number}")
        return buffer.getvalue()


def application_pdf_filename(application: Application) -> str:
    return f"application_{application.reference_number}_{utcnow().strftime('%Y%m%d')}.pdf"


def generate_application_pdf(application: Application) -> bytes:
    return ApplicationPDFGenerator().generate(application)
