from django.dispatch import Signal

# Sent by the downstream pipeline stage, after the correction stage has run
ipn_validated = Signal()  # sender=Notification, notification=instance
