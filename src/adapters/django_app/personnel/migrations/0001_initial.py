"""
Migration inicial para os domínios de pessoal, organização e acesso.

Cria as tabelas:
- departments / job_titles: estrutura organizacional
- roles: papéis por nível hierárquico
- employees / employee_phones: colaboradores e telefones
- user_accounts (+ user_accounts_roles): contas e seus papéis
"""

from django.db import migrations, models
import django.db.models.deletion


HIERARCHICAL_ROLE_CHOICES = [
    ('Junior', 'Junior'),
    ('Pleno', 'Pleno'),
    ('Senior', 'Senior'),
    ('Manager', 'Manager'),
    ('Director', 'Director'),
    ('SuperUser', 'SuperUser'),
]

JOB_TITLE_LEVEL_CHOICES = [
    (1, 'Director'),
    (2, 'Manager'),
    (3, 'Senior'),
    (4, 'Pleno'),
    (5, 'Junior'),
    (999, 'SuperUser'),
]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: departments
        # =================================================================
        migrations.CreateModel(
            name='DepartmentModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do departamento'
                )),
                ('name', models.CharField(max_length=150, db_index=True)),
                ('description', models.TextField(null=True, blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField(null=True, blank=True)),
            ],
            options={
                'db_table': 'departments',
                'verbose_name': 'Departamento',
                'verbose_name_plural': 'Departamentos',
                'ordering': ['name'],
            },
        ),

        # =================================================================
        # Tabela: job_titles
        # =================================================================
        migrations.CreateModel(
            name='JobTitleModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do cargo'
                )),
                ('name', models.CharField(max_length=150, db_index=True)),
                ('hierarchy_level', models.PositiveSmallIntegerField(
                    choices=JOB_TITLE_LEVEL_CHOICES,
                    help_text='1 = Director ... 5 = Junior, 999 = SuperUser'
                )),
                ('description', models.TextField(null=True, blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField(null=True, blank=True)),
            ],
            options={
                'db_table': 'job_titles',
                'verbose_name': 'Cargo',
                'verbose_name_plural': 'Cargos',
                'ordering': ['hierarchy_level', 'name'],
            },
        ),

        # =================================================================
        # Tabela: roles
        # =================================================================
        migrations.CreateModel(
            name='RoleModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False
                )),
                ('name', models.CharField(max_length=50, unique=True)),
                ('level', models.CharField(
                    max_length=20,
                    choices=HIERARCHICAL_ROLE_CHOICES,
                    db_index=True
                )),
                ('permissions', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='Lista de permissões em minúsculas'
                )),
                ('created_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField(null=True, blank=True)),
            ],
            options={
                'db_table': 'roles',
                'verbose_name': 'Papel',
                'verbose_name_plural': 'Papéis',
            },
        ),

        # =================================================================
        # Tabela: employees
        # =================================================================
        migrations.CreateModel(
            name='EmployeeModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do colaborador'
                )),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('email', models.CharField(max_length=254, unique=True)),
                ('document_number', models.CharField(max_length=11, unique=True)),
                ('date_of_birth', models.DateField()),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField(null=True, blank=True)),
                ('job_title', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='employees',
                    to='personnel.jobtitlemodel'
                )),
                ('department', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='employees',
                    to='personnel.departmentmodel'
                )),
                ('manager', models.ForeignKey(
                    on_delete=django.db.models.deletion.SET_NULL,
                    null=True,
                    blank=True,
                    related_name='subordinates',
                    to='personnel.employeemodel'
                )),
            ],
            options={
                'db_table': 'employees',
                'verbose_name': 'Colaborador',
                'verbose_name_plural': 'Colaboradores',
                'ordering': ['first_name', 'last_name'],
            },
        ),

        # Índices compostos para employees
        migrations.AddIndex(
            model_name='employeemodel',
            index=models.Index(
                fields=['department', 'is_active'],
                name='idx_employee_dept_active'
            ),
        ),
        migrations.AddIndex(
            model_name='employeemodel',
            index=models.Index(
                fields=['manager', 'is_active'],
                name='idx_employee_manager_active'
            ),
        ),

        # =================================================================
        # Tabela: employee_phones
        # =================================================================
        migrations.CreateModel(
            name='EmployeePhoneModel',
            fields=[
                ('id', models.BigAutoField(
                    auto_created=True,
                    primary_key=True,
                    serialize=False,
                    verbose_name='ID'
                )),
                ('e164', models.CharField(max_length=20)),
                ('extension', models.CharField(max_length=10, null=True, blank=True)),
                ('employee', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='phones',
                    to='personnel.employeemodel'
                )),
            ],
            options={
                'db_table': 'employee_phones',
                'verbose_name': 'Telefone',
                'verbose_name_plural': 'Telefones',
            },
        ),
        migrations.AddConstraint(
            model_name='employeephonemodel',
            constraint=models.UniqueConstraint(
                fields=('employee', 'e164'),
                name='uniq_employee_phone_e164'
            ),
        ),

        # =================================================================
        # Tabela: user_accounts
        # =================================================================
        migrations.CreateModel(
            name='UserAccountModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único da conta'
                )),
                ('user_name', models.CharField(max_length=254, unique=True)),
                ('password_hash', models.CharField(max_length=255)),
                ('security_stamp', models.CharField(max_length=64)),
                ('password_changed_at', models.DateTimeField(null=True, blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('access_failed_count', models.PositiveIntegerField(default=0)),
                ('lockout_end', models.DateTimeField(null=True, blank=True)),
                ('two_factor_enabled', models.BooleanField(default=False)),
                ('two_factor_secret', models.CharField(max_length=128, null=True, blank=True)),
                ('last_login_at', models.DateTimeField(null=True, blank=True)),
                ('created_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField(null=True, blank=True)),
                ('employee', models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='user_account',
                    to='personnel.employeemodel'
                )),
                ('roles', models.ManyToManyField(
                    blank=True,
                    related_name='accounts',
                    to='personnel.rolemodel'
                )),
            ],
            options={
                'db_table': 'user_accounts',
                'verbose_name': 'Conta de Usuário',
                'verbose_name_plural': 'Contas de Usuário',
            },
        ),
    ]
