"""Record builders shared by the app test suites."""
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from accounts.context import resolve_auth_context
from distributors.models import Distributor
from products.models import Product

User = get_user_model()


def make_distributor(name='Gokul Dairy', **kwargs):
    kwargs.setdefault('company_name', f'{name} Pvt Ltd')
    return Distributor.objects.create(distributor_name=name, **kwargs)


def make_product(distributor, name='Toned Milk', cost_per_pack='50.00', **kwargs):
    kwargs.setdefault('pack_quantity', Decimal('500'))
    kwargs.setdefault('pack_unit', 'ml')
    return Product.objects.create(
        distributor=distributor,
        name=name,
        cost_per_pack=Decimal(cost_per_pack) if cost_per_pack is not None else None,
        **kwargs
    )


def make_user(username, role=User.ADMIN, distributor=None, password='secret-pass-1'):
    return User.objects.create_user(
        username=username, password=password, role=role, distributor=distributor
    )


def actor_for(user):
    return resolve_auth_context(user)


def line(product, quantity, unit='pack'):
    return {'product': product.pk, 'quantity': Decimal(str(quantity)), 'unit': unit}


def today():
    return timezone.localdate()
