"""
Entidades do Domínio PIX.

Entidades:
- ChavePixEntity: Agregado principal (registro de chave PIX)
- TipoChave: Tipos de chave suportados
- TipoConta: Tipos de conta aceitos

Regras de Negócio Encapsuladas:
- Faixas de agência/conta e tamanho de nome/sobrenome
- Ciclo de vida Ativa → Inativa (terminal, sem reativação)
- Alteração permitida apenas enquanto ativa
- Tipo e valor da chave imutáveis após a criação
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, List, Optional
import uuid

from src.core.shared.exceptions import ValidationError

from .exceptions import AlreadyInactiveError, InactiveKeyError


def agora() -> datetime:
    """Momento atual em UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


def _inteiro(valor) -> bool:
    # bool é subclasse de int
    return isinstance(valor, int) and not isinstance(valor, bool)


class TipoChave(Enum):
    """Tipos de chave PIX suportados (conjunto fechado)."""

    CPF = "cpf"
    EMAIL = "email"
    CELULAR = "celular"

    @classmethod
    def from_string(cls, value: str) -> "TipoChave":
        """
        Converte string para enum.

        Aceita nome ou valor sem diferenciar maiúsculas, além dos
        apelidos "phone" e "telefone" para celular.

        Raises:
            ValueError: Se valor inválido
        """
        normalizado = (value or "").strip().lower()

        if normalizado in ("phone", "telefone"):
            return cls.CELULAR

        for tipo in cls:
            if tipo.value == normalizado:
                return tipo

        raise ValueError(f"Tipo de chave inválido: {value}")


class TipoConta(Enum):
    CORRENTE = "corrente"
    POUPANCA = "poupanca"

    @classmethod
    def from_string(cls, value: str) -> "TipoConta":
        """
        Converte string para enum ("poupança" é aceito como poupanca).

        Raises:
            ValueError: Se valor inválido
        """
        normalizado = (value or "").strip().lower().replace("ç", "c")

        for tipo in cls:
            if tipo.value == normalizado:
                return tipo

        raise ValueError(f"Tipo de conta inválido: {value}")


@dataclass
class ChavePixEntity:
    """
    Entidade de Domínio: Chave PIX.

    Invariantes:
    - valor_chave único no armazenamento (ativa ou inativa)
    - tipo_chave e valor_chave não mudam após a criação
    - data_hora_inclusao definida uma única vez
    - data_hora_inativacao é None enquanto ativa; definida uma
      única vez e nunca anterior a data_hora_inclusao

    Example:
        chave = ChavePixEntity.criar(
            tipo_chave=TipoChave.CPF,
            valor_chave="12345678909",
            tipo_conta=TipoConta.CORRENTE,
            numero_agencia=1,
            numero_conta=100,
            nome_correntista="Maria",
        )
        chave.inativar()
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    tipo_chave: TipoChave = TipoChave.CPF
    valor_chave: str = ""

    tipo_conta: TipoConta = TipoConta.CORRENTE
    numero_agencia: int = 0
    numero_conta: int = 0

    nome_correntista: str = ""
    sobrenome_correntista: Optional[str] = None

    data_hora_inclusao: datetime = field(default_factory=agora)
    data_hora_inativacao: Optional[datetime] = None

    AGENCIA_MAX: ClassVar[int] = 9999
    CONTA_MAX: ClassVar[int] = 99999999
    NOME_MAX_LENGTH: ClassVar[int] = 30
    SOBRENOME_MAX_LENGTH: ClassVar[int] = 45
    LIMITE_CHAVES_POR_CONTA: ClassVar[int] = 5

    @classmethod
    def criar(
        cls,
        tipo_chave: TipoChave,
        valor_chave: str,
        tipo_conta: TipoConta,
        numero_agencia: int,
        numero_conta: int,
        nome_correntista: str,
        sobrenome_correntista: Optional[str] = None,
    ) -> "ChavePixEntity":
        """
        Factory method para criar chave ativa com validações de conta.

        O formato do valor da chave é validado antes, pelo use case,
        através de ``validar_formato_chave``; aqui ficam apenas as
        regras de conta e correntista.

        Raises:
            ValidationError: Se dados de conta/correntista inválidos
        """
        if not valor_chave:
            raise ValidationError("Valor da chave é obrigatório", field="valor_chave")

        cls._validar_conta(numero_agencia, numero_conta)
        nome, sobrenome = cls._validar_correntista(
            nome_correntista, sobrenome_correntista
        )

        return cls(
            tipo_chave=tipo_chave,
            valor_chave=valor_chave,
            tipo_conta=tipo_conta,
            numero_agencia=numero_agencia,
            numero_conta=numero_conta,
            nome_correntista=nome,
            sobrenome_correntista=sobrenome,
        )

    @classmethod
    def _validar_conta(cls, numero_agencia: int, numero_conta: int) -> None:
        if not _inteiro(numero_agencia) or not 1 <= numero_agencia <= cls.AGENCIA_MAX:
            raise ValidationError(
                f"Número da agência deve estar entre 1 e {cls.AGENCIA_MAX}",
                field="numero_agencia",
            )

        if not _inteiro(numero_conta) or not 1 <= numero_conta <= cls.CONTA_MAX:
            raise ValidationError(
                f"Número da conta deve estar entre 1 e {cls.CONTA_MAX}",
                field="numero_conta",
            )

    @classmethod
    def _validar_correntista(
        cls, nome: str, sobrenome: Optional[str]
    ) -> tuple:
        nome_limpo = (nome or "").strip()

        if not nome_limpo:
            raise ValidationError(
                "Nome do correntista é obrigatório",
                field="nome_correntista",
            )

        if len(nome_limpo) > cls.NOME_MAX_LENGTH:
            raise ValidationError(
                f"Nome do correntista deve ter no máximo {cls.NOME_MAX_LENGTH} caracteres",
                field="nome_correntista",
            )

        sobrenome_limpo = sobrenome.strip() if sobrenome else None

        if sobrenome_limpo and len(sobrenome_limpo) > cls.SOBRENOME_MAX_LENGTH:
            raise ValidationError(
                f"Sobrenome do correntista deve ter no máximo "
                f"{cls.SOBRENOME_MAX_LENGTH} caracteres",
                field="sobrenome_correntista",
            )

        return nome_limpo, sobrenome_limpo or None

    def alterar(
        self,
        tipo_conta: TipoConta,
        numero_agencia: int,
        numero_conta: int,
        nome_correntista: str,
        sobrenome_correntista: Optional[str] = None,
    ) -> List[str]:
        """
        Substitui dados de conta e correntista.

        Tipo/valor da chave e timestamps não são tocados.

        Returns:
            Nomes dos campos cujo valor mudou

        Raises:
            InactiveKeyError: Se a chave está inativa
            ValidationError: Se novos dados inválidos
        """
        if not self.esta_ativa:
            raise InactiveKeyError(self.id)

        self._validar_conta(numero_agencia, numero_conta)
        nome, sobrenome = self._validar_correntista(
            nome_correntista, sobrenome_correntista
        )

        novos_valores = {
            "tipo_conta": tipo_conta,
            "numero_agencia": numero_agencia,
            "numero_conta": numero_conta,
            "nome_correntista": nome,
            "sobrenome_correntista": sobrenome,
        }

        alterados = [
            campo for campo, valor in novos_valores.items()
            if getattr(self, campo) != valor
        ]

        for campo, valor in novos_valores.items():
            setattr(self, campo, valor)

        return alterados

    def inativar(self) -> None:
        """
        Inativa a chave (estado terminal).

        Raises:
            AlreadyInactiveError: Se já inativa
        """
        if not self.esta_ativa:
            raise AlreadyInactiveError(self.id)

        # relógio pode andar para trás; inativação nunca antecede a inclusão
        self.data_hora_inativacao = max(agora(), self.data_hora_inclusao)

    @property
    def esta_ativa(self) -> bool:
        return self.data_hora_inativacao is None

    def pertence_a_conta(self, numero_agencia: int, numero_conta: int) -> bool:
        return (
            self.numero_agencia == numero_agencia
            and self.numero_conta == numero_conta
        )

    def __repr__(self) -> str:
        return (
            f"ChavePixEntity("
            f"id={self.id[:8]}..., "
            f"tipo_chave={self.tipo_chave.value}, "
            f"agencia={self.numero_agencia}, "
            f"conta={self.numero_conta}, "
            f"ativa={self.esta_ativa}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, ChavePixEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
