"""
Django management command to create the default admin account and the
default settings records (event categories, employee roles, skills).

Usage:
    python manage.py seed_defaults
    python manage.py seed_defaults --admin-password s3cret
"""
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction

from backoffice.events.models import EventCategory
from backoffice.staff.models import EmployeeRole, Skill

User = get_user_model()

DEFAULT_EVENT_CATEGORIES = [
    ('Festa Infantil', 'Aniversários e festas particulares'),
    ('Evento Corporativo', 'Recreação em empresas e confraternizações'),
    ('Escola', 'Eventos escolares'),
]

DEFAULT_EMPLOYEE_ROLES = [
    ('Recreador', 'Conduz brincadeiras e atividades'),
    ('Caracterista', 'Atua caracterizado como personagem'),
    ('Secretaria', 'Atendimento e agenda'),
]

DEFAULT_SKILLS = ['Pintura facial', 'Escultura em balões', 'Mágica', 'Animação musical']


class Command(BaseCommand):
    help = 'Create the admin account and default event categories, employee roles and skills'

    def add_arguments(self, parser):
        parser.add_argument('--admin-username', default='admin')
        parser.add_argument('--admin-password', default='admin123')

    @transaction.atomic
    def handle(self, *args, **options):
        username = options['admin_username']
        admin, created = User.objects.get_or_create(
            username=username,
            defaults={'name': 'Administrador', 'role': 'admin', 'is_staff': True},
        )
        if created:
            admin.set_password(options['admin_password'])
            admin.save()
            self.stdout.write(self.style.SUCCESS(f'✓ Created admin user: {username}'))
        else:
            self.stdout.write(f'  Admin user already exists: {username}')

        created_count = 0
        for name, description in DEFAULT_EVENT_CATEGORIES:
            _, created = EventCategory.objects.get_or_create(name=name, defaults={'description': description})
            created_count += created
        for name, description in DEFAULT_EMPLOYEE_ROLES:
            _, created = EmployeeRole.objects.get_or_create(name=name, defaults={'description': description})
            created_count += created
        for name in DEFAULT_SKILLS:
            _, created = Skill.objects.get_or_create(name=name)
            created_count += created

        self.stdout.write(self.style.SUCCESS(
            f'\nCompleted: {created_count} settings records created'
        ))
