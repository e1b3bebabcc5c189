"""Export endpoints: CSV raw data download and PDF symptom report.

GET /api/export/csv  — All symptoms as a CSV attachment. 404 when the store
                       holds no symptoms (no empty files).
GET /api/export/pdf  — Printable report: severity overview plus a table of
                       every symptom, oldest first.
"""
import csv
import logging
from datetime import datetime, timezone
from io import BytesIO, StringIO
from xml.sax.saxutils import escape

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    HRFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from symptrack.api.dependencies import Store
from symptrack.models.symptoms import Symptom
from symptrack.services.analytics import count_by_severity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])

CSV_HEADERS = [
    "ID",
    "Symptom",
    "Severity (1-10)",
    "Duration",
    "Duration Type",
    "Date",
    "Triggers",
    "Notes",
    "Relief Methods",
    "Relief Effectiveness",
]

_DATE_FORMAT = "%Y-%m-%d %H:%M"

# ---------------------------------------------------------------------------
# PDF styling constants
# ---------------------------------------------------------------------------

_NEUTRAL_DARK = colors.HexColor("#2D3748")
_NEUTRAL_LIGHT = colors.HexColor("#718096")
_ACCENT = colors.HexColor("#2B6CB0")
_HEADER_BG = colors.HexColor("#F7FAFC")
_BORDER = colors.HexColor("#CBD5E0")
_ALT_ROW = colors.HexColor("#EDF2F7")


def _format_duration(value: float) -> str:
    return f"{value:g}"


def _format_date(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(_DATE_FORMAT)


def symptom_csv_row(symptom: Symptom) -> list[str]:
    return [
        str(symptom.id),
        symptom.name,
        str(symptom.severity),
        _format_duration(symptom.duration),
        symptom.duration_type,
        _format_date(symptom.date),
        ", ".join(symptom.triggers),
        symptom.notes or "",
        ", ".join(symptom.relief_methods),
        str(symptom.relief_effectiveness) if symptom.relief_effectiveness else "",
    ]


def build_csv(symptoms: list[Symptom]) -> str:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADERS)
    for symptom in symptoms:
        writer.writerow(symptom_csv_row(symptom))
    return output.getvalue()


# ---------------------------------------------------------------------------
# PDF builder
# ---------------------------------------------------------------------------


def _build_pdf(symptoms: list[Symptom]) -> bytes:
    """Assemble the symptom report using reportlab and return raw bytes."""
    buffer = BytesIO()
    pagesize = landscape(letter)
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        rightMargin=0.6 * inch,
        leftMargin=0.6 * inch,
        topMargin=0.7 * inch,
        bottomMargin=0.8 * inch,
    )

    base = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "TrackerTitle",
        parent=base["Title"],
        fontSize=20,
        textColor=_NEUTRAL_DARK,
        fontName="Helvetica-Bold",
        spaceAfter=4,
        alignment=TA_LEFT,
    )
    meta_style = ParagraphStyle(
        "TrackerMeta",
        parent=base["Normal"],
        fontSize=9,
        textColor=_NEUTRAL_LIGHT,
        fontName="Helvetica",
        spaceAfter=2,
    )
    heading_style = ParagraphStyle(
        "TrackerHeading",
        parent=base["Heading2"],
        fontSize=12,
        textColor=_ACCENT,
        fontName="Helvetica-Bold",
        spaceBefore=14,
        spaceAfter=6,
    )
    cell_style = ParagraphStyle(
        "TrackerCell",
        parent=base["Normal"],
        fontSize=8,
        textColor=_NEUTRAL_DARK,
        fontName="Helvetica",
        leading=10,
    )

    story = []
    story.append(Paragraph("Symptom Tracker - Export", title_style))
    story.append(
        Paragraph(
            f"Generated: {datetime.now(tz=timezone.utc).strftime(_DATE_FORMAT)} UTC",
            meta_style,
        )
    )
    story.append(Spacer(1, 6))
    story.append(HRFlowable(width="100%", thickness=1, color=_BORDER, spaceAfter=8))

    if not symptoms:
        story.append(Paragraph("No symptom data available to export.", cell_style))
        doc.build(story)
        return buffer.getvalue()

    # --- Severity overview ---
    counts = count_by_severity(symptoms)
    story.append(Paragraph("Severity Overview", heading_style))
    overview = Table(
        [
            ["Mild (1-3)", "Moderate (4-7)", "Severe (8-10)", "Total"],
            [str(counts.mild), str(counts.moderate), str(counts.severe), str(counts.total)],
        ],
        colWidths=[1.5 * inch] * 4,
    )
    overview.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -1), 0.5, _BORDER),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ]
        )
    )
    story.append(overview)

    # --- Symptom log ---
    story.append(Paragraph("Symptom Log", heading_style))
    header = [
        "Date",
        "Symptom",
        "Severity",
        "Duration",
        "Triggers",
        "Relief Methods",
        "Relief Effectiveness",
        "Notes",
    ]
    data: list[list] = [header]
    for s in sorted(symptoms, key=lambda s: s.date):
        data.append(
            [
                _format_date(s.date),
                Paragraph(escape(s.name), cell_style),
                f"{s.severity}/10",
                f"{_format_duration(s.duration)} {s.duration_type}",
                Paragraph(escape(", ".join(s.triggers)), cell_style),
                Paragraph(escape(", ".join(s.relief_methods)), cell_style),
                f"{s.relief_effectiveness}/10" if s.relief_effectiveness else "N/A",
                Paragraph(escape(s.notes or ""), cell_style),
            ]
        )

    col_widths = [
        1.1 * inch,
        1.2 * inch,
        0.7 * inch,
        0.9 * inch,
        1.5 * inch,
        1.5 * inch,
        0.9 * inch,
        2.0 * inch,
    ]
    table = Table(data, colWidths=col_widths, repeatRows=1)
    ts = [
        ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), _NEUTRAL_DARK),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, _BORDER),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    for i in range(1, len(data)):
        ts.append(("BACKGROUND", (0, i), (-1, i), colors.white if i % 2 else _ALT_ROW))
    table.setStyle(TableStyle(ts))
    story.append(table)

    def _page_footer(canvas, doc):  # noqa: ANN001
        canvas.saveState()
        canvas.setFont("Helvetica", 7)
        canvas.setFillColor(_NEUTRAL_LIGHT)
        canvas.drawRightString(
            pagesize[0] - 0.6 * inch,
            0.45 * inch,
            f"Page {canvas.getPageNumber()}",
        )
        canvas.restoreState()

    doc.build(story, onFirstPage=_page_footer, onLaterPages=_page_footer)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# GET /api/export/csv
# ---------------------------------------------------------------------------


@router.get(
    "/csv",
    status_code=status.HTTP_200_OK,
    summary="Export symptoms as CSV",
    description=(
        "Download every symptom as a CSV file. List fields are joined with "
        "', '. Compatible with Excel and Google Sheets."
    ),
)
async def export_csv(store: Store) -> Response:
    """Return all symptoms as a downloadable CSV file.

    Raises:
        HTTPException: 404 if there are no symptoms to export.
    """
    symptoms = await store.get_symptoms()
    if not symptoms:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No symptoms to export",
        )

    csv_content = build_csv(symptoms)
    logger.info(
        "CSV export complete: symptoms=%d size=%d bytes",
        len(symptoms),
        len(csv_content),
    )
    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={
            "Content-Disposition": 'attachment; filename="symptoms_export.csv"',
            "Content-Length": str(len(csv_content.encode())),
        },
    )


# ---------------------------------------------------------------------------
# GET /api/export/pdf
# ---------------------------------------------------------------------------


@router.get(
    "/pdf",
    status_code=status.HTTP_200_OK,
    summary="Export symptoms as PDF",
    description="Download a printable report with a severity overview and the full symptom log.",
)
async def export_pdf(store: Store) -> Response:
    """Return the symptom report as a PDF attachment.

    An empty store still yields a one-page PDF stating there is no data.

    Raises:
        HTTPException: 500 if PDF generation fails.
    """
    symptoms = await store.get_symptoms()
    try:
        pdf_bytes = _build_pdf(symptoms)
    except Exception as exc:
        logger.error("PDF generation failed: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate PDF report",
        )

    logger.info(
        "PDF export complete: symptoms=%d size=%d bytes", len(symptoms), len(pdf_bytes)
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="symptoms_export.pdf"'},
    )
