"""
Django management command to recalculate the Relof transparency index
"""

from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from apps.relof.services import RelofIndexService
from apps.relof.tasks import setup_relof_scheduled_tasks


class Command(BaseCommand):
    """📊 Recalculate the Relof index and optionally install the daily schedule"""

    help = "Recalculate the Relof transparency index"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--reason", type=str, default="management command", help="Reason stored on the snapshot")
        parser.add_argument(
            "--schedule",
            action="store_true",
            help="Also create the daily Django-Q recalculation schedule",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        result = RelofIndexService.recalculate(options["reason"])
        if result.is_err():
            raise CommandError(str(result.unwrap_err()))

        data = result.unwrap()
        score = data["newScore"]
        self.stdout.write(self.style.SUCCESS(f"✅ Relof index: {score['totalScore']}% ({score['grade']})"))
        if data["change"] is not None:
            self.stdout.write(f"  Change since previous snapshot: {data['change']:+}")

        if options["schedule"]:
            status = setup_relof_scheduled_tasks()["daily_recalculation"]
            self.stdout.write(f"  📅 Daily schedule: {status}")
