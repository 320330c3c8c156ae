import unicodedata

from rest_framework import serializers
from django.contrib.auth import get_user_model

from backoffice.core.masks import only_digits
from backoffice.core.permissions import EMPLOYEE, SECRETARIA
from .models import Employee, EmployeeRole, Skill, EmployeePayment

User = get_user_model()


def account_role_for(job_title):
    """Login role granted to an employee with the given job title"""
    text = unicodedata.normalize('NFKD', (job_title or '').lower())
    text = ''.join(ch for ch in text if not unicodedata.combining(ch))
    return SECRETARIA if 'secretaria' in text else EMPLOYEE


class SkillSerializer(serializers.ModelSerializer):
    class Meta:
        model = Skill
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['created_at']


class EmployeeRoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeRole
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['created_at']


class EmployeeSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(write_only=True, required=False, allow_blank=True)
    user_password = serializers.CharField(write_only=True, required=False, allow_blank=True, min_length=6)
    username = serializers.CharField(source='user.username', read_only=True, default=None)
    has_login = serializers.SerializerMethodField()
    skills = SkillSerializer(many=True, read_only=True)

    class Meta:
        model = Employee
        fields = [
            'id', 'name', 'role', 'phone', 'email', 'cpf', 'rg',
            'cep', 'rua', 'numero', 'bairro', 'cidade', 'estado', 'is_available',
            'user', 'username', 'has_login', 'skills', 'user_email', 'user_password',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['user', 'created_at', 'updated_at']

    def get_has_login(self, obj):
        return obj.user_id is not None

    def validate_cpf(self, value):
        digits = only_digits(value)
        if digits and len(digits) != 11:
            raise serializers.ValidationError('CPF deve conter 11 dígitos')
        return digits

    def validate_cep(self, value):
        digits = only_digits(value)
        if digits and len(digits) != 8:
            raise serializers.ValidationError('CEP deve conter 8 dígitos')
        return digits

    def validate_estado(self, value):
        return (value or '').strip().upper()

    def validate(self, attrs):
        email = attrs.get('user_email')
        password = attrs.get('user_password')
        has_user = self.instance is not None and self.instance.user_id is not None
        if email and not has_user:
            if not password:
                raise serializers.ValidationError({'user_password': 'Senha é obrigatória para criar o acesso'})
            if User.objects.filter(username=email).exists():
                raise serializers.ValidationError({'user_email': 'Email já cadastrado como usuário'})
        return attrs

    def create(self, validated_data):
        email = validated_data.pop('user_email', None)
        password = validated_data.pop('user_password', None)
        employee = Employee.objects.create(**validated_data)
        if email and password:
            employee.user = self._create_user(employee, email, password)
            employee.save(update_fields=['user'])
        return employee

    def update(self, instance, validated_data):
        email = validated_data.pop('user_email', None)
        password = validated_data.pop('user_password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if instance.user_id is not None:
            user = instance.user
            user.name = instance.name
            user.role = account_role_for(instance.role)
            if password:
                user.set_password(password)
            user.save()
        elif email and password:
            instance.user = self._create_user(instance, email, password)
            instance.save(update_fields=['user'])
        return instance

    def _create_user(self, employee, email, password):
        user = User(username=email, email=email, name=employee.name,
                    role=account_role_for(employee.role), phone=employee.phone)
        user.set_password(password)
        user.save()
        return user


class EmployeePaymentSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.name', read_only=True)

    class Meta:
        model = EmployeePayment
        fields = ['id', 'employee', 'employee_name', 'amount', 'payment_date', 'description', 'created_at']
        read_only_fields = ['created_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Valor deve ser maior que zero')
        return value
