#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria chaves PIX de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Raiz do projeto no path para imports ``src.*``
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # URL não-PostgreSQL cai no fallback SQLite dos settings
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """Cria chaves de exemplo pelos mesmos use cases da API."""
    from src.config.container import get_container
    from src.core.pix.dtos import CriarChavePixInputDTO
    from src.core.shared.exceptions import DomainException

    sample_keys = [
        CriarChavePixInputDTO(
            tipo_chave='cpf',
            valor_chave='12345678909',
            tipo_conta='corrente',
            numero_agencia=1,
            numero_conta=100,
            nome_correntista='Maria',
            sobrenome_correntista='Silva',
        ),
        CriarChavePixInputDTO(
            tipo_chave='email',
            valor_chave='maria.silva@exemplo.com.br',
            tipo_conta='corrente',
            numero_agencia=1,
            numero_conta=100,
            nome_correntista='Maria',
            sobrenome_correntista='Silva',
        ),
        CriarChavePixInputDTO(
            tipo_chave='celular',
            valor_chave='+5511987654321',
            tipo_conta='poupanca',
            numero_agencia=1234,
            numero_conta=56789012,
            nome_correntista='José',
            sobrenome_correntista='Santos',
        ),
        CriarChavePixInputDTO(
            tipo_chave='email',
            valor_chave='ana@exemplo.com',
            tipo_conta='corrente',
            numero_agencia=42,
            numero_conta=4242,
            nome_correntista='Ana',
        ),
    ]

    print("📝 Criando chaves PIX de exemplo...")

    criar_service = get_container().criar_chave_pix_service()
    criadas = 0

    for input_dto in sample_keys:
        try:
            output = criar_service.execute(input_dto)
        except DomainException as e:
            print(f"   - {input_dto.valor_chave}: {e}")
            continue
        criadas += 1
        print(f"   ✓ {output.tipo_chave} {output.valor_chave} (ag {output.numero_agencia} cc {output.numero_conta})")

    print(f"✅ {criadas} chaves criadas!")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import DatabaseError, connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        print(f"❌ Erro de conexão: {e}")
        return False

    print("✅ Conexão OK!")
    return True


def show_info():
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Limite de chaves por conta: {settings.PIX_LIMITE_CHAVES_POR_CONTA}")
    print(f"  Publisher de eventos: {settings.EVENT_PUBLISHER_MODE}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python manage.py runserver")
    print("   2. Acesse: http://localhost:8000/api/pix/?agencia=1&conta=100")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar chaves PIX de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Gerenciador de Chaves PIX - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
