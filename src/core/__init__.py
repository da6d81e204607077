"""
Core Domain Layer - O Hexágono.

Lógica de negócio pura do gerenciador de chaves PIX:
- Sem dependências de frameworks (Django, Celery)
- Testável sem banco de dados, via repositório em memória
- Adapters implementam os ports definidos aqui
"""
