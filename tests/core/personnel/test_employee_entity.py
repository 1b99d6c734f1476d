"""
Testes Unitários para EmployeeEntity.

Coverage:
- Criação e validações
- Invariante de telefones (nunca vazio)
- Idempotência das operações change_*
- Regras de gestão (autogestão, ciclo)
- Ciclo de vida (desligamento lógico)
"""

from datetime import date

import pytest

from src.core.personnel.entities import EmployeeEntity
from src.core.personnel.value_objects import DateOfBirth, DocumentNumber, Email, PhoneNumber
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EmptyPhoneSetError,
    ValidationError,
)


MOBILE = PhoneNumber("(11) 98765-4321")
LANDLINE = PhoneNumber("(11) 3456-7890")
OTHER_MOBILE = PhoneNumber("(21) 99876-5432")


@pytest.fixture
def employee():
    """Colaborador válido com um telefone."""
    return EmployeeEntity.create(
        first_name="Ana",
        last_name="Silva",
        email=Email("ana.silva@acme.com"),
        document_number=DocumentNumber("529.982.247-25"),
        date_of_birth=DateOfBirth(date(1990, 5, 17)),
        phones=[MOBILE],
        job_title_id="job-1",
        department_id="dep-1",
    )


class TestEmployeeCreation:
    """Testes de criação."""

    def test_create_valid(self, employee):
        assert employee.full_name == "Ana Silva"
        assert employee.phones == frozenset({MOBILE})
        assert employee.manager_id is None
        assert employee.is_active
        assert employee.updated_at is None

    def test_create_without_phones_raises(self):
        with pytest.raises(EmptyPhoneSetError) as exc_info:
            EmployeeEntity.create(
                first_name="Ana",
                last_name="Silva",
                email=Email("ana@acme.com"),
                document_number=DocumentNumber("52998224725"),
                date_of_birth=DateOfBirth(date(1990, 5, 17)),
                phones=[],
                job_title_id="job-1",
                department_id="dep-1",
            )

        assert exc_info.value.rule == "employee_requires_phone"

    def test_create_with_short_name_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            EmployeeEntity.create(
                first_name=" A ",
                last_name="Silva",
                email=Email("ana@acme.com"),
                document_number=DocumentNumber("52998224725"),
                date_of_birth=DateOfBirth(date(1990, 5, 17)),
                phones=[MOBILE],
                job_title_id="job-1",
                department_id="dep-1",
            )

        assert exc_info.value.field == "first_name"

    def test_create_without_department_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            EmployeeEntity.create(
                first_name="Ana",
                last_name="Silva",
                email=Email("ana@acme.com"),
                document_number=DocumentNumber("52998224725"),
                date_of_birth=DateOfBirth(date(1990, 5, 17)),
                phones=[MOBILE],
                job_title_id="job-1",
                department_id="  ",
            )

        assert exc_info.value.field == "department_id"

    def test_create_as_own_manager_raises(self):
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            EmployeeEntity.create(
                first_name="Ana",
                last_name="Silva",
                email=Email("ana@acme.com"),
                document_number=DocumentNumber("52998224725"),
                date_of_birth=DateOfBirth(date(1990, 5, 17)),
                phones=[MOBILE],
                job_title_id="job-1",
                department_id="dep-1",
                manager_id="emp-1",
                employee_id="emp-1",
            )

        assert exc_info.value.rule == "self_management"

    def test_duplicate_phones_collapse(self):
        employee = EmployeeEntity.create(
            first_name="Ana",
            last_name="Silva",
            email=Email("ana@acme.com"),
            document_number=DocumentNumber("52998224725"),
            date_of_birth=DateOfBirth(date(1990, 5, 17)),
            phones=[MOBILE, PhoneNumber("+55 11 98765-4321")],
            job_title_id="job-1",
            department_id="dep-1",
        )

        assert len(employee.phones) == 1


class TestEmployeePhones:
    """Invariante: colaborador sempre com ao menos um telefone."""

    def test_add_phone(self, employee):
        employee.add_phone(LANDLINE)

        assert employee.phones == frozenset({MOBILE, LANDLINE})
        assert employee.updated_at is not None

    def test_add_existing_phone_is_noop(self, employee):
        employee.add_phone(PhoneNumber("11987654321"))

        assert len(employee.phones) == 1
        assert employee.updated_at is None

    def test_remove_last_phone_raises(self, employee):
        with pytest.raises(EmptyPhoneSetError):
            employee.remove_phone(MOBILE)

        assert employee.phones == frozenset({MOBILE})

    def test_remove_absent_phone_is_noop(self, employee):
        employee.remove_phone(LANDLINE)

        assert employee.phones == frozenset({MOBILE})
        assert employee.updated_at is None

    def test_remove_phone(self, employee):
        employee.add_phone(LANDLINE)

        employee.remove_phone(MOBILE)

        assert employee.phones == frozenset({LANDLINE})

    def test_update_phones_reconciles(self, employee):
        employee.add_phone(LANDLINE)

        added, removed = employee.update_phones([LANDLINE, OTHER_MOBILE])

        assert added == frozenset({OTHER_MOBILE})
        assert removed == frozenset({MOBILE})
        assert employee.phones == frozenset({LANDLINE, OTHER_MOBILE})

    def test_update_phones_with_same_set_is_noop(self, employee):
        added, removed = employee.update_phones([MOBILE])

        assert not added and not removed
        assert employee.updated_at is None

    def test_update_phones_with_empty_set_raises(self, employee):
        with pytest.raises(EmptyPhoneSetError):
            employee.update_phones([])

        assert employee.phones == frozenset({MOBILE})

    def test_sorted_phones_is_stable(self, employee):
        employee.add_phone(OTHER_MOBILE)
        employee.add_phone(LANDLINE)

        assert [p.e164 for p in employee.sorted_phones()] == sorted(
            p.e164 for p in employee.phones
        )


class TestEmployeeChanges:
    """Operações change_* são idempotentes."""

    def test_change_email_to_equivalent_is_noop(self, employee):
        employee.change_email(Email("ANA.SILVA@ACME.COM"))

        assert employee.updated_at is None

    def test_change_email(self, employee):
        employee.change_email(Email("ana@nova.com"))

        assert employee.email.value == "ana@nova.com"
        assert employee.updated_at is not None

    def test_change_document_masked_equivalent_is_noop(self, employee):
        employee.change_document(DocumentNumber("52998224725"))

        assert employee.updated_at is None

    def test_change_name_trims(self, employee):
        employee.change_name(" Ana ", " Silva ")
        assert employee.updated_at is None

        employee.change_name("Ana", "Souza")
        assert employee.full_name == "Ana Souza"

    def test_change_date_of_birth(self, employee):
        employee.change_date_of_birth(DateOfBirth(date(1990, 5, 17)))
        assert employee.updated_at is None

        employee.change_date_of_birth(DateOfBirth(date(1991, 1, 1)))
        assert employee.date_of_birth.value == date(1991, 1, 1)

    def test_change_job_title_and_department(self, employee):
        employee.change_job_title("job-1")
        employee.change_department("dep-1")
        assert employee.updated_at is None

        employee.change_job_title("job-2")
        employee.change_department("dep-2")
        assert (employee.job_title_id, employee.department_id) == ("job-2", "dep-2")


class TestEmployeeManagement:
    """Regras de gestão."""

    def test_assign_manager(self, employee):
        employee.assign_manager("boss-1")

        assert employee.manager_id == "boss-1"
        assert employee.updated_at is not None

    def test_assign_self_raises(self, employee):
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            employee.assign_manager(employee.id)

        assert exc_info.value.rule == "self_management"

    def test_assign_subordinate_raises(self, employee):
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            employee.assign_manager("sub-1", subordinate_ids=["sub-1", "sub-2"])

        assert exc_info.value.rule == "circular_management"
        assert employee.manager_id is None

    def test_assign_same_manager_is_noop(self, employee):
        employee.assign_manager("boss-1")
        first_update = employee.updated_at

        employee.assign_manager("boss-1")

        assert employee.updated_at is first_update

    def test_remove_manager(self, employee):
        employee.remove_manager()
        assert employee.updated_at is None

        employee.assign_manager("boss-1")
        employee.remove_manager()
        assert employee.manager_id is None


class TestEmployeeLifecycle:
    """Desligamento lógico."""

    def test_deactivate_and_activate(self, employee):
        employee.deactivate()
        assert not employee.is_active
        first_update = employee.updated_at

        employee.deactivate()
        assert employee.updated_at is first_update

        employee.activate()
        assert employee.is_active

    def test_equality_by_id(self, employee):
        clone = EmployeeEntity.create(
            first_name="Outra",
            last_name="Pessoa",
            email=Email("outra@acme.com"),
            document_number=DocumentNumber("11144477735"),
            date_of_birth=DateOfBirth(date(1980, 1, 1)),
            phones=[LANDLINE],
            job_title_id="job-1",
            department_id="dep-1",
            employee_id=employee.id,
        )

        assert clone == employee
        assert "ana.silva@acme.com" in repr(employee)
