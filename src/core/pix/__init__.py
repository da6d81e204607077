"""
Domínio PIX - Ciclo de vida de chaves PIX.

Este módulo contém a lógica de negócio de registro, alteração,
inativação e consulta de chaves PIX (CPF, email, celular):
- Entidades (ChavePixEntity, TipoChave, TipoConta)
- Validadores de formato por tipo de chave
- Use Cases (motor de ciclo de vida e resolvedor de consultas)
- Domain Events (ChavePixCriada, ChavePixAlterada, ChavePixInativada)
- DTOs e Ports (ChavePixRepository)

Regras do Domínio:
- Valor da chave único para sempre (mesmo após inativação)
- No máximo 5 chaves ativas por agência+conta (configurável)
- Inativação é terminal; chave inativa não pode ser alterada
"""

from .entities import ChavePixEntity, TipoChave, TipoConta
from .events import (
    ChavePixCriadaEvent,
    ChavePixAlteradaEvent,
    ChavePixInativadaEvent,
)
from .dtos import (
    CriarChavePixInputDTO,
    AlterarChavePixInputDTO,
    ChavePixOutputDTO,
    FiltrosChavePixQueryDTO,
)
from .ports import ChavePixRepository, InMemoryChavePixRepository
from .use_cases import (
    CriarChavePixService,
    AlterarChavePixService,
    InativarChavePixService,
    ObterChavePixService,
    BuscarChavesPixService,
    ResumoContaChavesPixService,
)

__all__ = [
    # Entities
    "ChavePixEntity",
    "TipoChave",
    "TipoConta",
    # Events
    "ChavePixCriadaEvent",
    "ChavePixAlteradaEvent",
    "ChavePixInativadaEvent",
    # DTOs
    "CriarChavePixInputDTO",
    "AlterarChavePixInputDTO",
    "ChavePixOutputDTO",
    "FiltrosChavePixQueryDTO",
    # Ports
    "ChavePixRepository",
    "InMemoryChavePixRepository",
    # Use Cases
    "CriarChavePixService",
    "AlterarChavePixService",
    "InativarChavePixService",
    "ObterChavePixService",
    "BuscarChavesPixService",
    "ResumoContaChavesPixService",
]
