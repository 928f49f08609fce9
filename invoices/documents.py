# invoices/documents.py
import logging
from io import BytesIO
from xml.sax.saxutils import escape

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.mail import EmailMessage
from django.core.validators import validate_email
from django.utils import timezone
from num2words import num2words
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)


def _fmt(x):
    return f"{x:,.2f}"


def amount_in_words(amount, currency):
    if amount == amount.to_integral_value():
        amount = int(amount)
    return f"{currency} {num2words(amount, lang='en_IN').title()} Only"


def invoice_filename(invoice):
    return f"Invoice_{invoice.invoice_number}.pdf"


def render_invoice_pdf(invoice) -> bytes:
    """Render an invoice with its line items to PDF bytes."""
    from core.models import GlobalSettings

    site_name = GlobalSettings.get_solo().site_name
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4,
                            rightMargin=15*mm, leftMargin=15*mm,
                            topMargin=15*mm, bottomMargin=15*mm,
                            title=f"Invoice {invoice.invoice_number}")

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name='Header1',
        parent=styles['Heading1'],
        fontSize=16,
        alignment=TA_CENTER,
        spaceAfter=6,
        textColor=colors.darkblue
    ))
    styles.add(ParagraphStyle(
        name='Right',
        parent=styles['Normal'],
        alignment=TA_RIGHT,
    ))

    tenant = invoice.tenant
    unit = invoice.rental_unit
    prop = invoice.property

    elements = [
        Paragraph(escape(site_name), styles['Header1']),
        Paragraph("RENT INVOICE", styles['Heading2']),
        Spacer(1, 4*mm),
    ]

    header = [
        ["Invoice #", invoice.invoice_number, "Invoice date", invoice.invoice_date.strftime('%d %b %Y')],
        ["Status", invoice.get_status_display(), "Due date", invoice.due_date.strftime('%d %b %Y')],
        ["Period", f"{invoice.period_start:%d %b %Y} - {invoice.period_end:%d %b %Y}", "Currency", invoice.currency],
    ]
    header_table = Table(header, colWidths=[28*mm, 62*mm, 28*mm, 62*mm])
    header_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (2, 0), (2, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    elements += [header_table, Spacer(1, 6*mm)]

    elements.append(Paragraph("<b>Billed to</b>", styles['Normal']))
    elements.append(Paragraph(escape(tenant.get_full_name()), styles['Normal']))
    if tenant.email:
        elements.append(Paragraph(escape(tenant.email), styles['Normal']))
    elements.append(Paragraph(
        escape(f"{prop.name} - {unit.display_name()}"), styles['Normal']))
    if prop.full_address():
        elements.append(Paragraph(escape(prop.full_address()), styles['Normal']))
    elements.append(Spacer(1, 6*mm))

    rows = [["Description", "Qty", "Unit price", "Amount"]]
    for item in invoice.items.all():
        rows.append([item.description, str(item.quantity),
                     _fmt(item.unit_price), _fmt(item.amount)])
    rows += [
        ["", "", "Subtotal", _fmt(invoice.subtotal)],
        ["", "", "Tax", _fmt(invoice.tax)],
        ["", "", "Total", f"{invoice.currency} {_fmt(invoice.total)}"],
    ]
    items_table = Table(rows, colWidths=[95*mm, 15*mm, 35*mm, 35*mm])
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (2, -1), (-1, -1), 'Helvetica-Bold'),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -4), 0.5, colors.grey),
        ('LINEABOVE', (2, -1), (-1, -1), 1, colors.black),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 3*mm))
    elements.append(Paragraph(
        f"<i>Amount in words: {escape(amount_in_words(invoice.total, invoice.currency))}</i>",
        styles['Normal']))

    if invoice.notes:
        elements += [Spacer(1, 6*mm), Paragraph(escape(invoice.notes), styles['Normal'])]

    doc.build(elements)
    return buffer.getvalue()


def send_invoice_email(invoice, recipient=None, pdf_content=None) -> bool:
    """
    Email the invoice PDF to ``recipient`` (the tenant by default) and mark the
    invoice sent. Returns False when there is no valid address.
    """
    recipient = recipient or invoice.tenant.email
    try:
        validate_email(recipient)
    except ValidationError:
        logger.warning("Invoice %s not emailed: invalid recipient %r",
                       invoice.invoice_number, recipient)
        return False

    pdf_content = pdf_content or render_invoice_pdf(invoice)
    email = EmailMessage(
        subject=f"Invoice {invoice.invoice_number} - {invoice.property.name}",
        body=(f"Dear {invoice.tenant.first_name},\n\n"
              f"Please find attached your rent invoice for "
              f"{invoice.period_start:%B %Y}, due on {invoice.due_date:%d %b %Y}.\n\n"
              f"Amount due: {invoice.currency} {_fmt(invoice.total)}\n\nThank you!"),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
    )
    email.attach(invoice_filename(invoice), pdf_content, 'application/pdf')
    email.send()

    invoice.email_sent = True
    invoice.email_sent_at = timezone.now()
    if invoice.status == 'draft':
        invoice.status = 'sent'
    invoice.save(update_fields=['email_sent', 'email_sent_at', 'status', 'updated_at'])
    logger.info("Invoice %s emailed to %s", invoice.invoice_number, recipient)
    return True
