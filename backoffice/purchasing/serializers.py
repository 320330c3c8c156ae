from decimal import Decimal, ROUND_HALF_UP
from rest_framework import serializers
from .models import Purchase


class PurchaseSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True, default=None)

    class Meta:
        model = Purchase
        fields = [
            'id', 'supplier', 'description', 'amount', 'item', 'item_name', 'quantity',
            'purchase_date', 'is_installment', 'installments', 'installment_amount',
            'first_installment_date', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['installment_amount', 'created_at', 'updated_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Valor deve ser maior que zero')
        return value

    def validate(self, attrs):
        def current(name, default=None):
            return attrs.get(name, getattr(self.instance, name, default))

        if current('is_installment', False):
            installments = current('installments')
            if not installments or installments < 2:
                raise serializers.ValidationError({'installments': 'Número de parcelas deve ser no mínimo 2'})
            if not current('first_installment_date'):
                raise serializers.ValidationError({'first_installment_date': 'Data da primeira parcela é obrigatória'})
            attrs['installment_amount'] = (current('amount') / installments).quantize(
                Decimal('0.01'), rounding=ROUND_HALF_UP
            )
        else:
            attrs['installments'] = None
            attrs['installment_amount'] = None
            attrs['first_installment_date'] = None
        if current('item') is not None and not current('quantity'):
            raise serializers.ValidationError({'quantity': 'Informe a quantidade comprada do item'})
        return attrs
