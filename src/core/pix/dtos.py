"""
Data Transfer Objects (DTOs) do Domínio PIX.

Tipos de DTOs:
- Input DTOs: dados de entrada já validados pelo adapter (forms/API)
- Output DTOs: formato de resposta, sem vazar a entidade
- Query DTOs: conjunto de filtros do resolvedor de consultas
"""

from dataclasses import dataclass, fields
from datetime import date, datetime, time, timezone
from typing import List, Optional

from .entities import ChavePixEntity


def normalizar_data(valor) -> Optional[datetime]:
    """
    Converte data/datetime para datetime UTC timezone-aware.

    Uma ``date`` representa o início do dia (00:00 UTC); datetimes
    sem timezone são interpretados como UTC.
    """
    if valor is None:
        return None

    if isinstance(valor, datetime):
        if valor.tzinfo is None:
            return valor.replace(tzinfo=timezone.utc)
        return valor.astimezone(timezone.utc)

    if isinstance(valor, date):
        return datetime.combine(valor, time.min, tzinfo=timezone.utc)

    raise TypeError(f"Data inválida: {valor!r}")


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarChavePixInputDTO:
    """
    DTO de entrada para criar chave PIX.

    Tipos de chave/conta chegam como string; a conversão para enum
    acontece no use case para que tipo desconhecido vire
    InvalidKeyTypeError.
    """

    tipo_chave: str
    valor_chave: str
    tipo_conta: str
    numero_agencia: int
    numero_conta: int
    nome_correntista: str
    sobrenome_correntista: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "tipo_chave": self.tipo_chave,
            "valor_chave": self.valor_chave,
            "tipo_conta": self.tipo_conta,
            "numero_agencia": self.numero_agencia,
            "numero_conta": self.numero_conta,
            "nome_correntista": self.nome_correntista,
            "sobrenome_correntista": self.sobrenome_correntista,
        }


@dataclass(frozen=True)
class AlterarChavePixInputDTO:
    """
    DTO de entrada para alterar chave PIX.

    Não há campos de tipo/valor da chave: eles são imutáveis.
    """

    chave_id: str
    tipo_conta: str
    numero_agencia: int
    numero_conta: int
    nome_correntista: str
    sobrenome_correntista: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "chave_id": self.chave_id,
            "tipo_conta": self.tipo_conta,
            "numero_agencia": self.numero_agencia,
            "numero_conta": self.numero_conta,
            "nome_correntista": self.nome_correntista,
            "sobrenome_correntista": self.sobrenome_correntista,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class ChavePixOutputDTO:
    """
    DTO de saída com todos os dados da chave.

    ``data_hora_inativacao`` permanece None para chaves ativas; a
    escolha de representação (null, string vazia) é do serializador.
    """

    id: str
    tipo_chave: str
    valor_chave: str
    tipo_conta: str
    numero_agencia: int
    numero_conta: int
    nome_correntista: str
    sobrenome_correntista: Optional[str]
    data_hora_inclusao: datetime
    data_hora_inativacao: Optional[datetime]
    ativa: bool

    @classmethod
    def from_entity(cls, entity: ChavePixEntity) -> "ChavePixOutputDTO":
        return cls(
            id=entity.id,
            tipo_chave=entity.tipo_chave.value,
            valor_chave=entity.valor_chave,
            tipo_conta=entity.tipo_conta.value,
            numero_agencia=entity.numero_agencia,
            numero_conta=entity.numero_conta,
            nome_correntista=entity.nome_correntista,
            sobrenome_correntista=entity.sobrenome_correntista,
            data_hora_inclusao=entity.data_hora_inclusao,
            data_hora_inativacao=entity.data_hora_inativacao,
            ativa=entity.esta_ativa,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "tipo_chave": self.tipo_chave,
            "valor_chave": self.valor_chave,
            "tipo_conta": self.tipo_conta,
            "numero_agencia": self.numero_agencia,
            "numero_conta": self.numero_conta,
            "nome_correntista": self.nome_correntista,
            "sobrenome_correntista": self.sobrenome_correntista,
            "data_hora_inclusao": self.data_hora_inclusao.isoformat(),
            "data_hora_inativacao": (
                self.data_hora_inativacao.isoformat()
                if self.data_hora_inativacao else None
            ),
            "ativa": self.ativa,
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class FiltrosChavePixQueryDTO:
    """
    Conjunto de filtros do resolvedor de consultas.

    Todos opcionais; os informados são combinados com AND.

    Attributes:
        id: Consulta direta por id (não combina com os demais)
        tipo_chave: Tipo exato (valor do enum, ex: "cpf")
        valor_chave: Valor exato da chave
        numero_agencia: Agência exata
        numero_conta: Conta exata
        nome_correntista: Trecho do nome, sem diferenciar maiúsculas
        inclusao_desde: Incluídas em ou após (inclusivo)
        inclusao_ate: Incluídas antes de (exclusivo)
        inativacao_desde: Inativadas em ou após (inclusivo)
        inativacao_ate: Inativadas antes de (exclusivo)
    """

    id: Optional[str] = None
    tipo_chave: Optional[str] = None
    valor_chave: Optional[str] = None
    numero_agencia: Optional[int] = None
    numero_conta: Optional[int] = None
    nome_correntista: Optional[str] = None
    inclusao_desde: Optional[datetime] = None
    inclusao_ate: Optional[datetime] = None
    inativacao_desde: Optional[datetime] = None
    inativacao_ate: Optional[datetime] = None

    CAMPOS_INCLUSAO = ("inclusao_desde", "inclusao_ate")
    CAMPOS_INATIVACAO = ("inativacao_desde", "inativacao_ate")

    def __post_init__(self):
        for campo in self.CAMPOS_INCLUSAO + self.CAMPOS_INATIVACAO:
            object.__setattr__(self, campo, normalizar_data(getattr(self, campo)))

    def criterios_informados(self) -> List[str]:
        """Nomes dos filtros informados, exceto ``id``."""
        return [
            f.name for f in fields(self)
            if f.name != "id" and getattr(self, f.name) not in (None, "")
        ]

    @property
    def vazio(self) -> bool:
        return not self.id and not self.criterios_informados()

    @property
    def tem_filtro_inclusao(self) -> bool:
        return any(getattr(self, campo) is not None for campo in self.CAMPOS_INCLUSAO)

    @property
    def tem_filtro_inativacao(self) -> bool:
        return any(getattr(self, campo) is not None for campo in self.CAMPOS_INATIVACAO)

    def corresponde(self, chave: ChavePixEntity) -> bool:
        """
        Avalia a chave contra todos os filtros informados (AND).

        Referência de semântica para repositórios que não traduzem
        os filtros para uma linguagem de consulta.
        """
        if self.id and chave.id != self.id:
            return False
        if self.tipo_chave and chave.tipo_chave.value != self.tipo_chave:
            return False
        if self.valor_chave and chave.valor_chave != self.valor_chave:
            return False
        if self.numero_agencia is not None and chave.numero_agencia != self.numero_agencia:
            return False
        if self.numero_conta is not None and chave.numero_conta != self.numero_conta:
            return False
        if self.nome_correntista and (
            self.nome_correntista.lower() not in chave.nome_correntista.lower()
        ):
            return False
        if self.inclusao_desde and chave.data_hora_inclusao < self.inclusao_desde:
            return False
        if self.inclusao_ate and chave.data_hora_inclusao >= self.inclusao_ate:
            return False

        if self.tem_filtro_inativacao:
            inativacao = chave.data_hora_inativacao
            if inativacao is None:
                return False
            if self.inativacao_desde and inativacao < self.inativacao_desde:
                return False
            if self.inativacao_ate and inativacao >= self.inativacao_ate:
                return False

        return True

    def to_dict(self) -> dict:
        resultado = {}
        for f in fields(self):
            valor = getattr(self, f.name)
            if valor in (None, ""):
                continue
            resultado[f.name] = valor.isoformat() if isinstance(valor, datetime) else valor
        return resultado
