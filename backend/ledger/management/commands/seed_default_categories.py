from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from ledger.services.seeding import seed_default_categories


class Command(BaseCommand):
    help = "Insert the starter categories for users that have none."

    def add_arguments(self, parser):
        parser.add_argument(
            "--user",
            dest="usernames",
            action="append",
            default=[],
            help="Only seed this username (repeatable).",
        )

    def handle(self, *args, **options):
        users = get_user_model().objects.order_by("pk")
        if options["usernames"]:
            users = users.filter(username__in=options["usernames"])

        seeded = 0
        for user in users.iterator():
            if seed_default_categories(user):
                seeded += 1
        self.stdout.write(self.style.SUCCESS(f"Seeded default categories for {seeded} user(s)."))
