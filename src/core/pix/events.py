"""
Domain Events do Domínio PIX.

Eventos:
- ChavePixCriadaEvent: nova chave registrada
- ChavePixAlteradaEvent: dados de conta/correntista alterados
- ChavePixInativadaEvent: chave inativada

O valor da chave (CPF, email, celular) não vai no payload: os
consumidores recebem o id e buscam o registro se precisarem.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.core.shared.events import DomainEvent


@dataclass
class ChavePixCriadaEvent(DomainEvent):
    """
    Evento: chave PIX criada.

    Handlers típicos:
    - Notificar o correntista
    - Registrar métrica de chaves por tipo
    """

    tipo_chave: str = ""
    tipo_conta: str = ""
    numero_agencia: int = 0
    numero_conta: int = 0

    @property
    def aggregate_type(self) -> str:
        return "ChavePix"


@dataclass
class ChavePixAlteradaEvent(DomainEvent):
    """
    Evento: dados de conta/correntista da chave alterados.

    Attributes:
        campos_alterados: Campos cujo valor mudou na alteração
    """

    campos_alterados: List[str] = field(default_factory=list)
    numero_agencia: int = 0
    numero_conta: int = 0

    @property
    def aggregate_type(self) -> str:
        return "ChavePix"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "campos_alterados": list(self.campos_alterados),
            "numero_agencia": self.numero_agencia,
            "numero_conta": self.numero_conta,
        }


@dataclass
class ChavePixInativadaEvent(DomainEvent):
    """
    Evento: chave PIX inativada.

    Libera uma vaga no limite de chaves ativas da conta.
    """

    data_hora_inativacao: str = ""
    numero_agencia: int = 0
    numero_conta: int = 0

    @property
    def aggregate_type(self) -> str:
        return "ChavePix"
