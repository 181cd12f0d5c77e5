# Generated manually for v1.2.0

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending Payment"),
                            ("processing", "Processing"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "db_table": "ipn_fixer_order",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Subscription",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("active", "Active"),
                            ("on-hold", "On Hold"),
                            ("cancelled", "Cancelled"),
                            ("expired", "Expired"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent_order",
                    models.ForeignKey(
                        blank=True,
                        help_text="Order that initiated the subscription",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="parent_of_subscriptions",
                        to="django_ipn_fixer.order",
                    ),
                ),
                (
                    "renewal_orders",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Orders created for recurring billing cycles",
                        related_name="renewal_subscriptions",
                        to="django_ipn_fixer.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Subscription",
                "verbose_name_plural": "Subscriptions",
                "db_table": "ipn_fixer_subscription",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="SubscriptionMeta",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("key", models.CharField(db_index=True, max_length=255)),
                ("value", models.TextField(blank=True, default="")),
                (
                    "subscription",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="meta",
                        to="django_ipn_fixer.subscription",
                    ),
                ),
            ],
            options={
                "verbose_name": "Subscription Meta",
                "verbose_name_plural": "Subscription Meta",
                "db_table": "ipn_fixer_subscription_meta",
            },
        ),
        migrations.AddConstraint(
            model_name="subscriptionmeta",
            constraint=models.UniqueConstraint(
                fields=("subscription", "key"), name="ipn_fixer_meta_unique_key"
            ),
        ),
    ]
