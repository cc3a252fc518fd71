from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from ledger.services.seeding import seed_default_categories


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="ledger_seed_default_categories")
def seed_categories_for_new_user(sender, instance, created, raw=False, **kwargs):
    if created and not raw:
        seed_default_categories(instance)
