"""
Celery configuration for the laundry workflow service.

``DJANGO_SETTINGS_MODULE`` is set before the app is instantiated so Celery
reads its configuration from the Django settings (``CELERY_`` prefix).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("laundry")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up tasks.py from every installed app (orders.send_order_notification).
app.autodiscover_tasks()
