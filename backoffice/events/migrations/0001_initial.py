# Generated manually
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parties', '0001_initial'),
        ('staff', '0001_initial'),
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='EventCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'event_categories',
                'ordering': ['name'],
                'verbose_name_plural': 'Event categories',
            },
        ),
        migrations.CreateModel(
            name='Package',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'packages',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('date', models.DateTimeField()),
                ('end_time', models.TimeField(blank=True, null=True)),
                ('duration_hours', models.DecimalField(decimal_places=1, default=Decimal('3'), max_digits=4)),
                ('location', models.CharField(max_length=255)),
                ('contract_value', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('entry_value', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('payment_method', models.CharField(blank=True, choices=[('pix', 'PIX'), ('dinheiro', 'Dinheiro'), ('cartao', 'Cartão'), ('transferencia', 'Transferência'), ('link', 'Link de pagamento')], max_length=20)),
                ('card_type', models.CharField(blank=True, choices=[('credito', 'Crédito'), ('debito', 'Débito')], max_length=10)),
                ('payment_date', models.DateField(blank=True, null=True)),
                ('installments', models.PositiveSmallIntegerField(default=1)),
                ('estimated_children', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('package_notes', models.CharField(blank=True, max_length=255)),
                ('status', models.CharField(choices=[('scheduled', 'Agendado'), ('completed', 'Concluído'), ('cancelled', 'Cancelado')], default='scheduled', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='events', to='events.eventcategory')),
                ('characters', models.ManyToManyField(blank=True, related_name='events', to='inventory.inventoryitem')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='events', to='parties.client')),
                ('package', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='events', to='events.package')),
            ],
            options={
                'db_table': 'events',
                'ordering': ['date'],
                'indexes': [
                    models.Index(fields=['date'], name='events_date_idx'),
                    models.Index(fields=['status'], name='events_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EventEmployee',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('cache_value', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='event_assignments', to='staff.employee')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='event_employees', to='events.event')),
            ],
            options={
                'db_table': 'event_employees',
                'unique_together': {('event', 'employee')},
            },
        ),
    ]
