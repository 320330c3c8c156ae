from rest_framework import serializers
from backoffice.core.masks import only_digits
from .models import Client


class ClientSerializer(serializers.ModelSerializer):
    event_count = serializers.IntegerField(source='events.count', read_only=True)

    class Meta:
        model = Client
        fields = [
            'id', 'name', 'person_type', 'phone', 'phone2', 'email',
            'cpf', 'rg', 'cnpj', 'responsible_name', 'responsible_role',
            'cep', 'rua', 'numero', 'bairro', 'cidade', 'estado', 'notes',
            'event_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_cpf(self, value):
        digits = only_digits(value)
        if digits and len(digits) != 11:
            raise serializers.ValidationError('CPF deve conter 11 dígitos')
        return digits

    def validate_cnpj(self, value):
        digits = only_digits(value)
        if digits and len(digits) != 14:
            raise serializers.ValidationError('CNPJ deve conter 14 dígitos')
        return digits

    def validate_cep(self, value):
        digits = only_digits(value)
        if digits and len(digits) != 8:
            raise serializers.ValidationError('CEP deve conter 8 dígitos')
        return digits

    def validate_rg(self, value):
        return only_digits(value)

    def validate_estado(self, value):
        return (value or '').strip().upper()
