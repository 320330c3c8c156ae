from dateutil.relativedelta import relativedelta
from django.utils import timezone
from rest_framework import serializers

from backoffice.inventory.models import InventoryItem
from backoffice.staff.models import Employee
from .models import Event, EventCategory, EventEmployee, Package


class EventCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = EventCategory
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['created_at']


class PackageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Package
        fields = ['id', 'name', 'description', 'price', 'created_at']
        read_only_fields = ['created_at']


class EventEmployeeSerializer(serializers.ModelSerializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    employee_name = serializers.CharField(source='employee.name', read_only=True)

    class Meta:
        model = EventEmployee
        fields = ['id', 'employee', 'employee_name', 'cache_value']


class EventSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)
    client_person_type = serializers.CharField(source='client.person_type', read_only=True)
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    package_name = serializers.CharField(source='package.name', read_only=True, default=None)
    characters = serializers.PrimaryKeyRelatedField(
        many=True, required=False, queryset=InventoryItem.objects.filter(type='character')
    )
    character_names = serializers.SerializerMethodField()
    event_employees = EventEmployeeSerializer(many=True, required=False)
    installment_value = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Event
        fields = [
            'id', 'client', 'client_name', 'client_person_type', 'category', 'category_name',
            'package', 'package_name', 'package_notes', 'title', 'date', 'end_time', 'duration_hours',
            'location', 'contract_value', 'entry_value', 'payment_method', 'card_type',
            'payment_date', 'installments', 'installment_value', 'estimated_children', 'status',
            'notes', 'characters', 'character_names', 'event_employees', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def get_character_names(self, obj):
        return [character.name for character in obj.characters.all()]

    def validate_date(self, value):
        if value < timezone.now() - relativedelta(years=1):
            raise serializers.ValidationError('A data do evento não pode ser anterior a 1 ano da data atual')
        return value

    def validate_contract_value(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError('Valor do contrato não pode ser negativo')
        return value

    def validate_event_employees(self, value):
        employee_ids = [item['employee'].pk for item in value]
        if len(employee_ids) != len(set(employee_ids)):
            raise serializers.ValidationError('Funcionário repetido no evento')
        return value

    def validate(self, attrs):
        contract_value = attrs.get('contract_value', getattr(self.instance, 'contract_value', None))
        entry_value = attrs.get('entry_value', getattr(self.instance, 'entry_value', None))
        if entry_value is not None and contract_value is not None and entry_value > contract_value:
            raise serializers.ValidationError({'entry_value': 'Entrada maior que o valor do contrato'})
        return attrs

    def create(self, validated_data):
        characters = validated_data.pop('characters', [])
        staff = validated_data.pop('event_employees', [])
        event = Event.objects.create(**validated_data)
        event.characters.set(characters)
        self._save_staff(event, staff)
        return event

    def update(self, instance, validated_data):
        characters = validated_data.pop('characters', None)
        staff = validated_data.pop('event_employees', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        if characters is not None:
            instance.characters.set(characters)
        if staff is not None:
            instance.event_employees.all().delete()
            self._save_staff(instance, staff)
        return instance

    def _save_staff(self, event, staff):
        EventEmployee.objects.bulk_create([
            EventEmployee(event=event, employee=item['employee'], cache_value=item.get('cache_value'))
            for item in staff
        ])
