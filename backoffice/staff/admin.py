from django.contrib import admin
from .models import Employee, EmployeeRole, Skill, EmployeeSkill, EmployeePayment


class EmployeeSkillInline(admin.TabularInline):
    model = EmployeeSkill
    extra = 0


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['name', 'role', 'phone', 'email', 'user', 'is_available', 'created_at']
    list_filter = ['is_available', 'role']
    search_fields = ['name', 'email', 'phone', 'cpf']
    ordering = ['name']
    inlines = [EmployeeSkillInline]


@admin.register(EmployeeRole)
class EmployeeRoleAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(EmployeePayment)
class EmployeePaymentAdmin(admin.ModelAdmin):
    list_display = ['employee', 'amount', 'payment_date', 'description', 'created_at']
    list_filter = ['payment_date']
    search_fields = ['employee__name', 'description']
    ordering = ['-payment_date']
    date_hierarchy = 'payment_date'
