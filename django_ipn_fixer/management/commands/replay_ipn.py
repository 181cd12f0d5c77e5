import json

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from django_ipn_fixer.conf import settings as app_settings
from django_ipn_fixer.notification import Notification
from django_ipn_fixer.pipeline import get_pipeline
from django_ipn_fixer.reconciler import MetaReconciler


class Command(BaseCommand):
    help = "Replay a PayPal IPN through the subscription correction flag fix"

    def add_arguments(self, parser):
        parser.add_argument(
            "--invoice",
            required=True,
            type=str,
            help="IPN invoice value, e.g. WC-ORDER-42-wcsfrp-17",
        )
        parser.add_argument(
            "--txn-type",
            type=str,
            default=None,
            help="IPN txn_type (defaults to DJANGO_IPN_FIXER_PAYMENT_TRANSACTION_TYPE)",
        )
        parser.add_argument(
            "--custom",
            type=str,
            default="",
            help='IPN custom value, e.g. \'{"subscription_id": 9}\'',
        )
        parser.add_argument("--txn-id", type=str, default="", help="IPN txn_id")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would happen without writing",
        )
        parser.add_argument(
            "--dispatch",
            action="store_true",
            help="Run the full pipeline, including ipn_validated receivers",
        )

    def handle(self, *args, **options):
        if options["dry_run"] and options["dispatch"]:
            raise CommandError("--dry-run and --dispatch are mutually exclusive")

        notification = Notification(
            transaction_type=options["txn_type"]
            or app_settings.PAYMENT_TRANSACTION_TYPE,
            invoice=options["invoice"],
            correlation_payload=options["custom"],
            transaction_id=options["txn_id"],
        )

        reconciler = self._get_reconciler()

        if options["dry_run"]:
            self._dry_run(reconciler, notification)
            return

        try:
            if options["dispatch"]:
                get_pipeline().dispatch(notification)
            else:
                reconciler.handle(notification)
        except Exception as e:
            raise CommandError(f"Failed to replay IPN: {e}") from e

        self.stdout.write(self.style.SUCCESS(f"Replayed: {notification.invoice}"))

    def _get_reconciler(self) -> MetaReconciler:
        reconciler = apps.get_app_config("django_ipn_fixer").reconciler
        if reconciler is None:
            raise CommandError("Correction is disabled (DJANGO_IPN_FIXER_ENABLED)")
        return reconciler

    def _dry_run(self, reconciler: MetaReconciler, notification: Notification):
        self.stdout.write(f"IPN Fixer replay (DRY RUN): {notification.invoice}")
        self.stdout.write("=" * 40)

        classification = reconciler.classifier.classify(notification)
        self.stdout.write(f"Classification: {classification.outcome.value}")
        if classification.order_id is not None:
            self.stdout.write(f"Order ID: {classification.order_id}")
        if not classification.qualifies:
            return

        resolution = reconciler.resolver.resolve(notification.correlation_payload)
        self.stdout.write(f"Resolution: {resolution.outcome.value}")
        if not resolution.resolved:
            return

        current = reconciler.subscriptions.get_attribute(
            resolution.subscription, reconciler.flag_key
        )
        self.stdout.write(
            f"Would set {reconciler.flag_key} on subscription "
            f"{resolution.subscription_id}: {json.dumps(current)} -> "
            f"{classification.order_id}"
        )
