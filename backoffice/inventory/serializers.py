from rest_framework import serializers
from .models import InventoryItem, StockMovement


class InventoryItemSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'name', 'type', 'quantity', 'min_quantity', 'unit',
            'cost_price', 'sale_price', 'notes', 'is_low_stock', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError('Quantidade não pode ser negativa')
        return value

    def validate_min_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError('Quantidade mínima não pode ser negativa')
        return value


class StockMovementSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)

    class Meta:
        model = StockMovement
        fields = ['id', 'item', 'item_name', 'quantity', 'type', 'notes', 'created_at']
        read_only_fields = ['created_at']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantidade deve ser maior que zero')
        return value

    def validate(self, attrs):
        item = attrs.get('item')
        if attrs.get('type') == 'saida' and item is not None and attrs.get('quantity', 0) > item.quantity:
            raise serializers.ValidationError({'quantity': f'Estoque insuficiente. Disponível: {item.quantity}'})
        return attrs
