from decimal import Decimal

from properties.models import Property, RentalUnit
from tenants.models import Tenant


def make_property(name='Seaside', **kwargs):
    kwargs.setdefault('address', 'Boduthakurufaanu Magu')
    kwargs.setdefault('city', 'Male')
    return Property.objects.create(name=name, **kwargs)


def make_tenant(first_name='Aisha', last_name='Ibrahim', email='aisha@example.com', **kwargs):
    return Tenant.objects.create(first_name=first_name, last_name=last_name,
                                 email=email, **kwargs)


def make_unit(prop=None, unit_number='A1', floor_number=2, rent_amount='500.00',
              tenant=True, status='occupied', currency='MVR'):
    if tenant is True:
        tenant = make_tenant()
    return RentalUnit.objects.create(
        property=prop or make_property(),
        tenant=tenant or None,
        unit_number=unit_number,
        floor_number=floor_number,
        rent_amount=Decimal(rent_amount),
        currency=currency,
        status=status,
    )
