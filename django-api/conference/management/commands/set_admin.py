from django.core.management.base import BaseCommand, CommandError

from conference.dependencies import get_services


class Command(BaseCommand):
    help = "Grant or revoke the admin role on a user profile."

    def add_arguments(self, parser):
        parser.add_argument("user_id")
        parser.add_argument(
            "--remove", action="store_true", help="Revoke the admin role instead of granting it."
        )

    def handle(self, *args, **options):
        profiles = get_services().profiles
        user_id = options["user_id"]
        if options["remove"]:
            result = profiles.remove_admin(user_id)
        else:
            result = profiles.make_admin(user_id)
        if not result.success:
            raise CommandError(str(result.error))
        self.stdout.write(self.style.SUCCESS(f"User {user_id} now has role {result.data.role}"))
