"""
Configuração do projeto Company Manager.

Módulos:
- settings: Configurações Django (python-dotenv)
- test_settings: Overrides para a suíte de testes
- container: Dependency Injection Container
"""
