from django.conf import settings
from django.db import models
from django.utils import timezone


class TimeRecord(models.Model):
    """One clock-in or clock-out punch of a user"""
    TYPE_CHOICES = [
        ('clock_in', 'Entrada'),
        ('clock_out', 'Saída'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='time_records')
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    timestamp = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'time_records'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['user', 'timestamp'], name='time_records_user_ts_idx'),
        ]

    def __str__(self):
        return f"{self.user} {self.type} {self.timestamp:%d/%m/%Y %H:%M}"

    @classmethod
    def latest_for(cls, user):
        return cls.objects.filter(user=user).order_by('-timestamp', '-id').first()
