"""
Django management command to set up default site settings
Creates every setting defined in SettingsService.DEFAULT_SETTINGS
"""

from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from apps.settings.services import SettingsService


class Command(BaseCommand):
    """⚙️ Set up default site settings"""

    help = "Create missing site settings from the registry"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--force",
            action="store_true",
            help="Reset existing settings to their default values",
        )
        parser.add_argument(
            "--category",
            type=str,
            help="With --force, only reset this category",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        self.stdout.write(self.style.SUCCESS("🚀 Setting up default site settings..."))

        created = SettingsService.ensure_defaults()
        self.stdout.write(f"  ✅ Created {created} missing settings")

        if options.get("force"):
            result = SettingsService.reset_category(options.get("category"))
            if result.is_err():
                raise CommandError(str(result.unwrap_err()))
            self.stdout.write(f"  🔄 Reset {len(result.unwrap())} settings to defaults")

        SettingsService.clear_all_cache()
        self.stdout.write(self.style.SUCCESS("🎉 Default settings ready"))
