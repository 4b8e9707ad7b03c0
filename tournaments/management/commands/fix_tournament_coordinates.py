"""
Management command to (re)geocode tournament venues
Usage: python manage.py fix_tournament_coordinates [--all] [--id 12 --id 14] [--dry-run]
"""
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q

from tournaments.geocoding import GeocodingError, GeocodingService, GeocodingUnavailable
from tournaments.models import Tournament


class Command(BaseCommand):
    help = "Geocode tournaments that are missing map coordinates"

    def add_arguments(self, parser):
        parser.add_argument("--all", action="store_true", help="Re-geocode every tournament, not only missing ones")
        parser.add_argument("--id", type=int, action="append", dest="ids", help="Limit to these tournament ids")
        parser.add_argument("--dry-run", action="store_true", help="Show results without saving")

    def handle(self, *args, **options):
        queryset = Tournament.objects.all().order_by("id")
        if options["ids"]:
            queryset = queryset.filter(id__in=options["ids"])
        elif not options["all"]:
            queryset = queryset.filter(Q(latitude__isnull=True) | Q(longitude__isnull=True))

        service = GeocodingService()
        fixed = 0
        failed = 0

        for tournament in queryset:
            try:
                result = service.geocode_address(
                    tournament.location_name, tournament.postcode, tournament.region, tournament.country
                )
            except GeocodingUnavailable as e:
                raise CommandError(str(e))
            except GeocodingError as e:
                failed += 1
                self.stdout.write(self.style.WARNING(f"✗ {tournament.name}: {e}"))
                continue

            self.stdout.write(
                self.style.SUCCESS(
                    f"✓ {tournament.name}: {result.latitude:.6f}, {result.longitude:.6f} (from {result.query!r})"
                )
            )
            if not options["dry_run"]:
                tournament.latitude = result.latitude
                tournament.longitude = result.longitude
                tournament.save(update_fields=["latitude", "longitude", "updated_at"])
            fixed += 1

        suffix = " (dry run)" if options["dry_run"] else ""
        self.stdout.write(self.style.SUCCESS(f"\nGeocoded {fixed} tournament(s), {failed} failed{suffix}"))
