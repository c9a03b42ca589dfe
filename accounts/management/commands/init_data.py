import json
import os
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from accounts.models import User
from scheduler.data.models import Flashcard


class Command(BaseCommand):
    help = "Replace all users with demo accounts and seed their flashcards"

    def add_arguments(self, parser):
        parser.add_argument(
            "--file", default="MOCK_DATA.json", help="JSON file name to load flashcards from"
        )

    def handle(self, *args, **options):
        file_name = options.get("file") or "MOCK_DATA.json"
        json_file_path = os.path.join(os.path.dirname(__file__), file_name)

        try:
            with open(json_file_path, encoding="utf-8") as json_file:
                cards = json.load(json_file)["flashcards"]
        except (OSError, ValueError, KeyError) as e:
            raise CommandError(f"Error loading data from {file_name}: {e}") from e

        with transaction.atomic():
            # Cascades to flashcards, reviews and sessions
            User.objects.all().delete()
            self.stdout.write(self.style.SUCCESS("All existing user data has been deleted"))

            users = [
                User.objects.create_superuser(
                    "testuser", email="testuser@example.com", password="testpassword"
                )
            ]
            for i in range(1, 6):
                users.append(
                    User.objects.create_user(
                        f"testuser{i}",
                        email=f"testuser{i}@example.com",
                        password="testpassword",
                    )
                )

            Flashcard.objects.bulk_create(
                Flashcard(
                    owner=user,
                    subject=card["subject"],
                    question=card["question"],
                    answer=card["answer"],
                )
                for user in users
                for card in cards
            )

        self.stdout.write(
            self.style.SUCCESS(
                f"Mock data loaded successfully from {file_name}: "
                f"{len(users)} users, {len(cards)} flashcards each"
            )
        )
