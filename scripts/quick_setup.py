#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Aplica as migrations (cria as tabelas)
3. Cria a conta SuperUser inicial (opcional)

Sem um SuperUser nenhum ator consegue cadastrar cargos ou colaboradores,
por isso a primeira conta é criada aqui, fora dos use cases.

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --super-user admin@acme.com --password 'Admin@123' \
        --document 935.411.347-80 --phone '(11) 3456-7890'
"""

import os
import sys
import argparse
from datetime import date

# Adicionar raiz do projeto ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')
    os.environ.setdefault('DATABASE_URL', 'sqlite:///db.sqlite3')

    import django
    django.setup()


def create_tables():
    """Aplica as migrations de todos os apps."""
    from django.core.management import call_command

    print("📦 Aplicando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Tabelas prontas!")


def create_super_user(email, password, document, phone):
    """Cria departamento, cargo 999, papel SuperUser, colaborador e conta."""
    from src.config.container import get_container
    from src.core.access_control.entities import HierarchicalRole
    from src.core.organization.entities import DepartmentEntity, JobTitleEntity
    from src.core.personnel.entities import EmployeeEntity, UserAccountEntity
    from src.core.personnel.value_objects import DateOfBirth, DocumentNumber, Email, PhoneNumber

    container = get_container()
    email = Email(email)

    if container.user_account_repository().get_by_email(email.value):
        print(f"ℹ️  Conta {email.value} já existe")
        return

    print("👤 Criando SuperUser...")
    with container.unit_of_work():
        department = DepartmentEntity.create("Diretoria", "Administração do sistema")
        container.department_repository().add(department)
        job_title = JobTitleEntity.create("Administrador", 999)
        container.job_title_repository().add(job_title)

        employee = EmployeeEntity.create(
            first_name="Administrador",
            last_name="Sistema",
            email=email,
            document_number=DocumentNumber(document),
            date_of_birth=DateOfBirth(date(1980, 1, 1)),
            phones=[PhoneNumber(phone)],
            job_title_id=job_title.id,
            department_id=department.id,
        )
        container.employee_repository().add(employee)

        role = container.role_service().get_or_create_role_for_level(HierarchicalRole.SUPER_USER)
        account = UserAccountEntity.create(
            user_name=email.value,
            password_hash=container.password_hasher().hash(password),
            employee_id=employee.id,
            roles=[role],
        )
        container.user_account_repository().add(account)

    print(f"✅ SuperUser {email.value} criado (conta {account.id})")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection, DatabaseError

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except DatabaseError as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  Bloqueio: {settings.PERSONNEL['MAX_FAILED_ACCESS_ATTEMPTS']} falhas / "
          f"{settings.PERSONNEL['LOCKOUT_MINUTES']} min")
    print("=" * 60 + "\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument('--super-user', help='E-mail da conta SuperUser inicial')
    parser.add_argument('--password', help='Senha da conta SuperUser')
    parser.add_argument('--document', default='935.411.347-80', help='CPF do SuperUser')
    parser.add_argument('--phone', default='(11) 3456-7890', help='Telefone do SuperUser')
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()
    if args.super_user and not args.password:
        parser.error('--password é obrigatório com --super-user')

    print("\n" + "=" * 60)
    print("🔧 Company Manager - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    create_tables()

    if args.super_user:
        create_super_user(args.super_user, args.password, args.document, args.phone)

    show_info()


if __name__ == '__main__':
    main()
