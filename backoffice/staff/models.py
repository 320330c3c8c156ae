from decimal import Decimal
from django.conf import settings
from django.db import models


class EmployeeRole(models.Model):
    """Job title offered when registering employees"""
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'employee_roles'
        ordering = ['name']

    def __str__(self):
        return self.name


class Skill(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'skills'
        ordering = ['name']

    def __str__(self):
        return self.name


class Employee(models.Model):
    """Staff member; optionally linked to a login account"""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='employee')
    name = models.CharField(max_length=200)
    role = models.CharField(max_length=100, help_text="Job title, e.g. Recreador")
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    cpf = models.CharField(max_length=11, blank=True)
    rg = models.CharField(max_length=20, blank=True)
    cep = models.CharField(max_length=8, blank=True)
    rua = models.CharField(max_length=200, blank=True)
    numero = models.CharField(max_length=20, blank=True)
    bairro = models.CharField(max_length=100, blank=True)
    cidade = models.CharField(max_length=100, blank=True)
    estado = models.CharField(max_length=2, blank=True)
    is_available = models.BooleanField(default=True)
    skills = models.ManyToManyField(Skill, through='EmployeeSkill', related_name='employees', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employees'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class EmployeeSkill(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='employee_skills')
    skill = models.ForeignKey(Skill, on_delete=models.CASCADE, related_name='employee_skills')

    class Meta:
        db_table = 'employee_skills'
        unique_together = [['employee', 'skill']]

    def __str__(self):
        return f"{self.employee} - {self.skill}"


class EmployeePayment(models.Model):
    """Payment made to an employee (cachê, salary, advance)"""
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    payment_date = models.DateField()
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'employee_payments'
        ordering = ['-payment_date', '-created_at']

    def __str__(self):
        return f"{self.employee} - {self.amount} ({self.payment_date})"
