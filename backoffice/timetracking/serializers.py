from rest_framework import serializers
from .models import TimeRecord


class TimeRecordSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)

    class Meta:
        model = TimeRecord
        fields = ['id', 'user', 'username', 'user_name', 'type', 'timestamp', 'notes', 'created_at']
        read_only_fields = ['user', 'timestamp', 'created_at']

    def validate(self, attrs):
        request = self.context.get('request')
        if self.instance is None and request is not None:
            latest = TimeRecord.latest_for(request.user)
            punch = attrs.get('type')
            if punch == 'clock_in' and latest is not None and latest.type == 'clock_in':
                raise serializers.ValidationError({'type': 'Entrada já registrada. Registre a saída primeiro.'})
            if punch == 'clock_out' and (latest is None or latest.type == 'clock_out'):
                raise serializers.ValidationError({'type': 'Nenhuma entrada em aberto para registrar a saída.'})
        return attrs
