from django.db import models


class Client(models.Model):
    """Person or company that books events"""
    PERSON_TYPE_CHOICES = [
        ('fisica', 'Pessoa Física'),
        ('juridica', 'Pessoa Jurídica'),
    ]

    name = models.CharField(max_length=200)
    person_type = models.CharField(max_length=10, choices=PERSON_TYPE_CHOICES, default='fisica')
    phone = models.CharField(max_length=20, blank=True)
    phone2 = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    cpf = models.CharField(max_length=11, blank=True)
    rg = models.CharField(max_length=20, blank=True)
    cnpj = models.CharField(max_length=14, blank=True)
    responsible_name = models.CharField(max_length=200, blank=True)
    responsible_role = models.CharField(max_length=100, blank=True)
    cep = models.CharField(max_length=8, blank=True)
    rua = models.CharField(max_length=200, blank=True)
    numero = models.CharField(max_length=20, blank=True)
    bairro = models.CharField(max_length=100, blank=True)
    cidade = models.CharField(max_length=100, blank=True)
    estado = models.CharField(max_length=2, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['name'], name='clients_name_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def is_company(self):
        return self.person_type == 'juridica'
