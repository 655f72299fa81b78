from django.core.management.base import BaseCommand

from quiz_app.services.quiz_store import publish_all


class Command(BaseCommand):
    help = 'Publishes every quiz that is still unpublished (one-way, cannot be undone through the API).'

    def handle(self, *args, **options):
        count = publish_all()
        self.stdout.write(self.style.SUCCESS(f'Updated quizzes: {count}'))
