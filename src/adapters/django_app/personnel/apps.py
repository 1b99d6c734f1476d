"""
Configuração do Django App de Pessoal.
"""

from django.apps import AppConfig


class PersonnelConfig(AppConfig):
    """Configuração do app de pessoal (colaboradores, contas, organização)."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.personnel'
    label = 'personnel'
    verbose_name = 'Gestão de Pessoal'
