from django.conf import settings as dj_settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.utils.module_loading import import_string

from django_ipn_fixer import constants

DEFAULTS = {
    "ENABLED": True,
    "INVOICE_MARKER": constants.INVOICE_MARKER,
    "INVOICE_SEPARATOR": constants.INVOICE_SEPARATOR,
    "PAYMENT_TRANSACTION_TYPE": constants.PAYMENT_TRANSACTION_TYPE,
    "CORRECTION_FLAG_KEY": constants.CORRECTION_FLAG_KEY,
    "ORDER_REPOSITORY": "django_ipn_fixer.repositories.OrderRepository",
    "SUBSCRIPTION_REPOSITORY": "django_ipn_fixer.repositories.SubscriptionRepository",
    "LOGGER_NAME": "django_ipn_fixer",
}

IMPORTABLE_SETTINGS = ("ORDER_REPOSITORY", "SUBSCRIPTION_REPOSITORY")


def get_repository_class(value):
    if isinstance(value, type):
        return value

    if isinstance(value, str):
        try:
            value = import_string(value)
        except ImportError as e:
            raise ImproperlyConfigured(f"Could not import {value!r}: {e}") from e

    if not isinstance(value, type):
        raise ImproperlyConfigured(f"{value!r} must be a class or a dotted path.")

    return value


class Settings(object):
    def __getattr__(self, name):
        if name not in DEFAULTS:
            msg = "'%s' object has no attribute '%s'"
            raise AttributeError(msg % (self.__class__.__name__, name))

        value = self.get_setting(name)

        # Cache the result
        setattr(self, name, value)
        return value

    def get_setting(self, setting):
        django_setting = f"DJANGO_IPN_FIXER_{setting}"
        value = getattr(dj_settings, django_setting, DEFAULTS[setting])

        if setting in IMPORTABLE_SETTINGS:
            return get_repository_class(value)

        return value

    def change_setting(self, setting, value, enter, **kwargs):
        if not setting.startswith("DJANGO_IPN_FIXER_"):
            return

        setting = setting.split("DJANGO_IPN_FIXER_")[1]  # strip 'DJANGO_IPN_FIXER_'

        # ensure a valid app setting is being overridden
        if setting not in DEFAULTS:
            return

        # drop the cached value so the next access re-reads Django settings
        self.__dict__.pop(setting, None)


settings = Settings()
setting_changed.connect(settings.change_setting)
