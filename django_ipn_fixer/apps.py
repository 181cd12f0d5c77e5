import logging

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _

from django_ipn_fixer.constants import CORRECTION_PRIORITY, DOWNSTREAM_PRIORITY

logger = logging.getLogger(__name__)


class IPNFixerAppConfig(AppConfig):
    default = True
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_ipn_fixer"
    verbose_name = _("PayPal IPN Fixer")

    pipeline = None
    reconciler = None

    def ready(self):
        from django_ipn_fixer.coercion import CorrectionFlagCoercion, meta_read_filters
        from django_ipn_fixer.conf import settings as app_settings
        from django_ipn_fixer.pipeline import NotificationPipeline, send_ipn_validated
        from django_ipn_fixer.reconciler import MetaReconciler

        self.pipeline = NotificationPipeline()
        self.reconciler = None
        self.pipeline.register(send_ipn_validated, priority=DOWNSTREAM_PRIORITY)

        if not app_settings.ENABLED:
            logger.info("[django-ipn-fixer] Disabled; correction stage not registered")
            return

        meta_read_filters.register(
            app_settings.CORRECTION_FLAG_KEY, CorrectionFlagCoercion()
        )

        self.reconciler = MetaReconciler.from_settings()
        self.pipeline.register(self.reconciler.handle, priority=CORRECTION_PRIORITY)
