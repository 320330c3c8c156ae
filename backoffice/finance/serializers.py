from rest_framework import serializers
from .models import FinancialTransaction


class FinancialTransactionSerializer(serializers.ModelSerializer):
    event_title = serializers.CharField(source='event.title', read_only=True, default=None)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = FinancialTransaction
        fields = [
            'id', 'type', 'description', 'amount', 'event', 'event_title', 'purchase',
            'due_date', 'paid_date', 'is_paid', 'is_overdue', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['purchase', 'created_at', 'updated_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Valor deve ser maior que zero')
        return value

    def validate(self, attrs):
        is_paid = attrs.get('is_paid', getattr(self.instance, 'is_paid', False))
        if not is_paid:
            attrs['paid_date'] = None
        return attrs
