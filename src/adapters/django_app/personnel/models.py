"""
Django Models para os domínios de pessoal, organização e acesso.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Models são mapeados para/de Entities via Mappers
- Unicidade de e-mail, CPF e nome de usuário é garantida aqui,
  por constraints do banco

Relacionamentos:
- EmployeeModel → DepartmentModel, JobTitleModel, gestor (self)
- EmployeePhoneModel: telefones do colaborador
- UserAccountModel: 1:1 com EmployeeModel, N:N com RoleModel
"""

from django.db import models


class HierarchicalRoleChoices(models.TextChoices):
    """Choices para nível hierárquico (espelha HierarchicalRole do Core)."""
    JUNIOR = 'Junior', 'Junior'
    PLENO = 'Pleno', 'Pleno'
    SENIOR = 'Senior', 'Senior'
    MANAGER = 'Manager', 'Manager'
    DIRECTOR = 'Director', 'Director'
    SUPER_USER = 'SuperUser', 'SuperUser'


class JobTitleLevelChoices(models.IntegerChoices):
    """Níveis permitidos de cargo."""
    DIRECTOR = 1, 'Director'
    MANAGER = 2, 'Manager'
    SENIOR = 3, 'Senior'
    PLENO = 4, 'Pleno'
    JUNIOR = 5, 'Junior'
    SUPER_USER = 999, 'SuperUser'


class DepartmentModel(models.Model):
    """Persistência de DepartmentEntity."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do departamento"
    )
    name = models.CharField(max_length=150, db_index=True)
    description = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'departments'
        verbose_name = 'Departamento'
        verbose_name_plural = 'Departamentos'
        ordering = ['name']

    def __str__(self):
        return self.name


class JobTitleModel(models.Model):
    """Persistência de JobTitleEntity."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do cargo"
    )
    name = models.CharField(max_length=150, db_index=True)
    hierarchy_level = models.PositiveSmallIntegerField(
        choices=JobTitleLevelChoices.choices,
        help_text="1 = Director ... 5 = Junior, 999 = SuperUser"
    )
    description = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'job_titles'
        verbose_name = 'Cargo'
        verbose_name_plural = 'Cargos'
        ordering = ['hierarchy_level', 'name']

    def __str__(self):
        return f"{self.name} ({self.hierarchy_level})"


class RoleModel(models.Model):
    """Persistência de Role."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    name = models.CharField(max_length=50, unique=True)
    level = models.CharField(
        max_length=20,
        choices=HierarchicalRoleChoices.choices,
        db_index=True,
    )
    permissions = models.JSONField(
        default=list,
        blank=True,
        help_text="Lista de permissões em minúsculas"
    )
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'roles'
        verbose_name = 'Papel'
        verbose_name_plural = 'Papéis'

    def __str__(self):
        return self.name


class EmployeeModel(models.Model):
    """
    Persistência de EmployeeEntity.

    Fields:
        email: E-mail normalizado (único)
        document_number: Somente os dígitos do CPF (único)
        manager: Gestor (subordinados via related_name, nunca no agregado)
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do colaborador"
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.CharField(max_length=254, unique=True)
    document_number = models.CharField(max_length=11, unique=True)
    date_of_birth = models.DateField()
    job_title = models.ForeignKey(
        JobTitleModel,
        on_delete=models.PROTECT,
        related_name='employees',
    )
    department = models.ForeignKey(
        DepartmentModel,
        on_delete=models.PROTECT,
        related_name='employees',
    )
    manager = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='subordinates',
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'employees'
        verbose_name = 'Colaborador'
        verbose_name_plural = 'Colaboradores'
        ordering = ['first_name', 'last_name']
        indexes = [
            models.Index(fields=['department', 'is_active'], name='idx_employee_dept_active'),
            models.Index(fields=['manager', 'is_active'], name='idx_employee_manager_active'),
        ]

    def __str__(self):
        return f"{self.first_name} {self.last_name} <{self.email}>"


class EmployeePhoneModel(models.Model):
    """Telefone de colaborador (E.164 único por colaborador)."""

    employee = models.ForeignKey(
        EmployeeModel,
        on_delete=models.CASCADE,
        related_name='phones',
    )
    e164 = models.CharField(max_length=20)
    extension = models.CharField(max_length=10, null=True, blank=True)

    class Meta:
        db_table = 'employee_phones'
        verbose_name = 'Telefone'
        verbose_name_plural = 'Telefones'
        constraints = [
            models.UniqueConstraint(
                fields=['employee', 'e164'],
                name='uniq_employee_phone_e164',
            ),
        ]

    def __str__(self):
        return self.e164


class UserAccountModel(models.Model):
    """Persistência de UserAccountEntity."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único da conta"
    )
    user_name = models.CharField(max_length=254, unique=True)
    password_hash = models.CharField(max_length=255)
    security_stamp = models.CharField(max_length=64)
    password_changed_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    access_failed_count = models.PositiveIntegerField(default=0)
    lockout_end = models.DateTimeField(null=True, blank=True)
    two_factor_enabled = models.BooleanField(default=False)
    two_factor_secret = models.CharField(max_length=128, null=True, blank=True)
    last_login_at = models.DateTimeField(null=True, blank=True)
    employee = models.OneToOneField(
        EmployeeModel,
        on_delete=models.CASCADE,
        related_name='user_account',
    )
    roles = models.ManyToManyField(
        RoleModel,
        related_name='accounts',
        blank=True,
    )
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'user_accounts'
        verbose_name = 'Conta de Usuário'
        verbose_name_plural = 'Contas de Usuário'

    def __str__(self):
        return self.user_name
