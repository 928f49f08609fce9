# invoices/views.py
import logging

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .config import GenerationConfig
from .documents import invoice_filename, render_invoice_pdf, send_invoice_email
from .exceptions import BatchGenerationError, ConfigurationError
from .models import Invoice
from .scheduler import scheduler
from .serializers import GenerateMonthlySerializer, InvoiceSerializer
from .services import occupied_units_count, run_monthly_generation

logger = logging.getLogger(__name__)


def _summary(result):
    data = result.as_dict()
    data['invoices'] = InvoiceSerializer(result.invoices, many=True).data
    return data


def _batch_failed(e):
    data = {
        'message': 'Failed to generate monthly rent invoices',
        'error': str(e),
    }
    if e.result is not None:
        data.update(_summary(e.result))
    return Response(data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST'])
def generate_monthly(request):
    """Generate rent invoices for every occupied unit for a given month."""
    serializer = GenerateMonthlySerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'message': 'Validation failed', 'errors': serializer.errors},
                        status=status.HTTP_400_BAD_REQUEST)
    params = serializer.validated_data

    try:
        result = run_monthly_generation(
            params['year'], params['month'], params.get('due_date_offset'),
            created_by=request.user, auto_generated=False)
    except ConfigurationError as e:
        return Response({'message': 'Invalid rent settings', 'error': str(e)},
                        status=status.HTTP_400_BAD_REQUEST)
    except BatchGenerationError as e:
        return _batch_failed(e)

    data = _summary(result)
    data['message'] = 'Monthly rent invoices generated successfully'
    return Response(data)


@api_view(['POST'])
def trigger_monthly_generation(request):
    """Run the scheduled job now, regardless of the auto-generate switch."""
    try:
        result = scheduler.trigger_manually()
    except ConfigurationError as e:
        return Response({'message': 'Invalid rent settings', 'error': str(e)},
                        status=status.HTTP_400_BAD_REQUEST)
    except BatchGenerationError as e:
        return _batch_failed(e)

    data = _summary(result)
    data['message'] = 'Monthly rent generation triggered successfully'
    return Response(data)


@api_view(['GET'])
def cron_status(request):
    data = scheduler.get_status()
    data['settingsInfo'] = GenerationConfig.load().as_dict()
    return Response(data)


@api_view(['POST'])
def cron_restart(request):
    scheduled = scheduler.restart()
    data = scheduler.get_status()
    data['scheduled'] = scheduled
    return Response(data, status=status.HTTP_200_OK if scheduled else status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
def occupied_units(request):
    count = occupied_units_count()
    return Response({
        'count': count,
        'message': (f"{count} occupied rental units found" if count
                    else "No occupied rental units found. Please assign tenants to rental units first."),
    })


@api_view(['GET'])
def invoice_pdf(request, pk):
    invoice = get_object_or_404(
        Invoice.objects.select_related('property', 'rental_unit', 'tenant'), pk=pk)
    try:
        pdf_content = render_invoice_pdf(invoice)
    except Exception as e:
        logger.error("PDF generation failed for invoice %s: %s",
                     invoice.invoice_number, e, exc_info=True)
        return Response({'message': 'Failed to generate PDF'},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = HttpResponse(pdf_content, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{invoice_filename(invoice)}"'
    return response


@api_view(['POST'])
def invoice_send_email(request, pk):
    invoice = get_object_or_404(
        Invoice.objects.select_related('property', 'rental_unit', 'tenant'), pk=pk)
    if not invoice.tenant.email:
        return Response({'message': 'Tenant email not found'},
                        status=status.HTTP_400_BAD_REQUEST)

    try:
        sent = send_invoice_email(invoice)
    except Exception as e:
        logger.error("Sending invoice %s failed: %s",
                     invoice.invoice_number, e, exc_info=True)
        return Response({'message': 'Failed to send email'},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not sent:
        return Response({'message': 'Invalid recipient email address'},
                        status=status.HTTP_400_BAD_REQUEST)
    return Response({'message': 'Invoice sent successfully'})
