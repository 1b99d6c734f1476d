"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter Entity → Model (para persistência)
- Converter Model → Entity (para uso no Core)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Value objects são reconstruídos a partir das formas canônicas
  armazenadas (e-mail normalizado, dígitos do CPF, E.164)
"""

from typing import Iterable, List

from src.core.access_control.entities import HierarchicalRole, Role
from src.core.organization.entities import DepartmentEntity, JobTitleEntity
from src.core.personnel.entities import EmployeeEntity, UserAccountEntity
from src.core.personnel.value_objects import DateOfBirth, DocumentNumber, Email, PhoneNumber

from .models import (
    DepartmentModel,
    EmployeeModel,
    EmployeePhoneModel,
    JobTitleModel,
    RoleModel,
    UserAccountModel,
)


class DepartmentMapper:
    """Mapper DepartmentEntity ↔ DepartmentModel."""

    @staticmethod
    def to_model(entity: DepartmentEntity) -> DepartmentModel:
        return DepartmentModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @staticmethod
    def to_entity(model: DepartmentModel) -> DepartmentEntity:
        return DepartmentEntity(
            id=model.id,
            name=model.name,
            description=model.description,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class JobTitleMapper:
    """Mapper JobTitleEntity ↔ JobTitleModel."""

    @staticmethod
    def to_model(entity: JobTitleEntity) -> JobTitleModel:
        return JobTitleModel(
            id=entity.id,
            name=entity.name,
            hierarchy_level=entity.hierarchy_level,
            description=entity.description,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @staticmethod
    def to_entity(model: JobTitleModel) -> JobTitleEntity:
        return JobTitleEntity(
            id=model.id,
            name=model.name,
            hierarchy_level=model.hierarchy_level,
            description=model.description,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class RoleMapper:
    """Mapper Role ↔ RoleModel."""

    @staticmethod
    def to_model(entity: Role) -> RoleModel:
        return RoleModel(
            id=entity.id,
            name=entity.name,
            level=entity.level.value,
            permissions=sorted(entity.permissions),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @staticmethod
    def to_entity(model: RoleModel) -> Role:
        return Role(
            id=model.id,
            name=model.name,
            level=HierarchicalRole(model.level),
            permissions=frozenset(model.permissions or ()),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class EmployeeMapper:
    """
    Mapper EmployeeEntity ↔ EmployeeModel.

    Telefones são tratados à parte (phones_to_models), pois dependem
    do model do colaborador já salvo.
    """

    @staticmethod
    def to_model(entity: EmployeeEntity) -> EmployeeModel:
        return EmployeeModel(
            id=entity.id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            email=entity.email.value,
            document_number=entity.document_number.digits,
            date_of_birth=entity.date_of_birth.value,
            job_title_id=entity.job_title_id,
            department_id=entity.department_id,
            manager_id=entity.manager_id,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @staticmethod
    def phone_to_entity(model: EmployeePhoneModel) -> PhoneNumber:
        raw = model.e164
        if model.extension:
            raw = f"{raw} ramal {model.extension}"
        return PhoneNumber(raw)

    @staticmethod
    def phones_to_models(model: EmployeeModel, phones: Iterable[PhoneNumber]) -> List[EmployeePhoneModel]:
        return [
            EmployeePhoneModel(employee=model, e164=phone.e164, extension=phone.extension)
            for phone in phones
        ]

    @classmethod
    def to_entity(cls, model: EmployeeModel) -> EmployeeEntity:
        return EmployeeEntity(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            email=Email(model.email),
            document_number=DocumentNumber(model.document_number),
            date_of_birth=DateOfBirth(model.date_of_birth),
            phones=frozenset(cls.phone_to_entity(p) for p in model.phones.all()),
            job_title_id=model.job_title_id,
            department_id=model.department_id,
            manager_id=model.manager_id,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @classmethod
    def to_entity_list(cls, models: Iterable[EmployeeModel]) -> List[EmployeeEntity]:
        return [cls.to_entity(model) for model in models]


class UserAccountMapper:
    """Mapper UserAccountEntity ↔ UserAccountModel (papéis via RoleMapper)."""

    @staticmethod
    def to_model(entity: UserAccountEntity) -> UserAccountModel:
        return UserAccountModel(
            id=entity.id,
            user_name=entity.user_name,
            password_hash=entity.password_hash,
            security_stamp=entity.security_stamp,
            password_changed_at=entity.password_changed_at,
            is_active=entity.is_active,
            access_failed_count=entity.access_failed_count,
            lockout_end=entity.lockout_end,
            two_factor_enabled=entity.two_factor_enabled,
            two_factor_secret=entity.two_factor_secret,
            last_login_at=entity.last_login_at,
            employee_id=entity.employee_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @staticmethod
    def to_entity(model: UserAccountModel) -> UserAccountEntity:
        return UserAccountEntity(
            id=model.id,
            user_name=model.user_name,
            password_hash=model.password_hash,
            employee_id=model.employee_id,
            roles=[RoleMapper.to_entity(role) for role in model.roles.all()],
            security_stamp=model.security_stamp,
            password_changed_at=model.password_changed_at,
            is_active=model.is_active,
            access_failed_count=model.access_failed_count,
            lockout_end=model.lockout_end,
            two_factor_enabled=model.two_factor_enabled,
            two_factor_secret=model.two_factor_secret,
            last_login_at=model.last_login_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
