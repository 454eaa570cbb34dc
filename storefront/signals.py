"""
Keep the local mirror in step with ORM-level changes made outside the
repositories (Django admin, shell, data migrations).
"""
import logging

from django.db import DatabaseError, transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import AdminCredentials, CSContact, Product, SiteSettings, Testimonial, Variation
from .store import (
    contact_repository,
    credentials_repository,
    product_repository,
    settings_repository,
    testimonial_repository,
)

logger = logging.getLogger(__name__)

MIRRORED = {
    Product: product_repository,
    Variation: product_repository,
    CSContact: contact_repository,
    Testimonial: testimonial_repository,
    SiteSettings: settings_repository,
    AdminCredentials: credentials_repository,
}


def refresh_mirror(model):
    """Re-read the remote store for `model`; all()/get() rewrite the cache entry."""
    repo = MIRRORED[model]()
    try:
        if hasattr(repo, "all"):
            repo.all()
        else:
            repo.get()
    except DatabaseError as e:
        logger.warning("Could not refresh local cache for %s: %s", model.__name__, e)


@receiver(post_save)
@receiver(post_delete)
def mirror_on_change(sender, instance, **kwargs):
    if sender not in MIRRORED or kwargs.get("raw"):
        return
    transaction.on_commit(lambda: refresh_mirror(sender))
