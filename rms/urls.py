# rms/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/invoices/', include(('invoices.urls', 'invoices'), namespace='invoices')),
]
