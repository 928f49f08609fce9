from datetime import date
from decimal import Decimal

from django.core import mail
from django.test import TestCase, override_settings

from invoices.config import GenerationConfig
from invoices.documents import (amount_in_words, invoice_filename, render_invoice_pdf,
                                send_invoice_email)
from invoices.services import run_monthly_generation

from .factories import make_unit


@override_settings(EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend')
class InvoiceDocumentTests(TestCase):
    def setUp(self):
        make_unit()
        result = run_monthly_generation(2025, 6, config=GenerationConfig(),
                                        invoice_date=date(2025, 6, 10))
        self.invoice = result.invoices[0]

    def test_filename(self):
        self.assertEqual(invoice_filename(self.invoice), 'Invoice_INV-202506-001.pdf')

    def test_render_pdf(self):
        pdf = render_invoice_pdf(self.invoice)
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_render_pdf_escapes_markup(self):
        self.invoice.notes = 'Pay by <transfer> & cash'
        self.assertTrue(render_invoice_pdf(self.invoice).startswith(b'%PDF'))

    def test_email_attaches_pdf(self):
        self.assertTrue(send_invoice_email(self.invoice))

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ['aisha@example.com'])
        self.assertIn('INV-202506-001', message.subject)
        name, content, mimetype = message.attachments[0]
        self.assertEqual(name, 'Invoice_INV-202506-001.pdf')
        self.assertEqual(mimetype, 'application/pdf')

        self.invoice.refresh_from_db()
        self.assertTrue(self.invoice.email_sent)
        self.assertIsNotNone(self.invoice.email_sent_at)
        self.assertEqual(self.invoice.status, 'sent')

    def test_paid_invoice_keeps_status(self):
        self.invoice.status = 'paid'
        self.invoice.save()
        send_invoice_email(self.invoice)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, 'paid')

    def test_invalid_recipient(self):
        self.assertFalse(send_invoice_email(self.invoice, recipient='not-an-email'))
        self.assertEqual(len(mail.outbox), 0)
        self.invoice.refresh_from_db()
        self.assertFalse(self.invoice.email_sent)


def test_amount_in_words():
    assert amount_in_words(Decimal('500.00'), 'MVR') == 'MVR Five Hundred Only'
    assert amount_in_words(Decimal('12.50'), 'USD').startswith('USD Twelve Point Five')
