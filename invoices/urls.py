from django.urls import path

from . import views

app_name = 'invoices'

urlpatterns = [
    # Generation
    path('generate-monthly/', views.generate_monthly, name='generate_monthly'),
    path('trigger-monthly-generation/', views.trigger_monthly_generation,
         name='trigger_monthly_generation'),
    path('occupied-units-count/', views.occupied_units, name='occupied_units_count'),

    # Scheduler
    path('cron-status/', views.cron_status, name='cron_status'),
    path('cron-restart/', views.cron_restart, name='cron_restart'),

    # Documents
    path('<int:pk>/pdf/', views.invoice_pdf, name='invoice_pdf'),
    path('<int:pk>/send-email/', views.invoice_send_email, name='send_email'),
]
