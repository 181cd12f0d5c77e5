import logging

import pytest

from django_ipn_fixer.diagnostics import DiagnosticsSink
from django_ipn_fixer.models import Order, Subscription
from django_ipn_fixer.reconciler import MetaReconciler
from django_ipn_fixer.repositories import OrderRepository, SubscriptionRepository
from tests.apps.testapp.signals import renewal_decisions


@pytest.fixture
def subscription(db):
    parent = Order.objects.create(pk=42, status=Order.Status.COMPLETED)
    return Subscription.objects.create(
        pk=9, status=Subscription.Status.ON_HOLD, parent_order=parent
    )


@pytest.fixture
def renewal_order(subscription):
    order = Order.objects.create(pk=17, status=Order.Status.FAILED)
    subscription.renewal_orders.add(order)
    return order


@pytest.fixture
def reconciler():
    return MetaReconciler(
        OrderRepository(),
        SubscriptionRepository(),
        DiagnosticsSink("django_ipn_fixer"),
    )


@pytest.fixture
def ipn_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="django_ipn_fixer")
    return caplog


@pytest.fixture(autouse=True)
def clear_renewal_decisions():
    renewal_decisions.clear()
    yield
    renewal_decisions.clear()
