"""
Exceções específicas do domínio PIX.

Cada falha do ciclo de vida e do resolvedor de consultas tem uma
classe própria, derivada das exceções compartilhadas, para que
adapters possam tratar por família (ex: toda BusinessRuleViolationError
vira 422) ou pelo caso exato.
"""

from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    InvalidQueryError,
    ValidationError,
)


class DuplicateKeyError(BusinessRuleViolationError):
    """Já existe registro (ativo ou inativo) com o mesmo valor de chave."""

    def __init__(self, valor_chave: str):
        self.valor_chave = valor_chave
        super().__init__(
            f"Chave {valor_chave} já cadastrada",
            rule="chave_duplicada",
        )


class KeyLimitExceededError(BusinessRuleViolationError):
    """Conta já possui o número máximo de chaves ativas."""

    def __init__(self, numero_agencia: int, numero_conta: int, limite: int):
        self.numero_agencia = numero_agencia
        self.numero_conta = numero_conta
        self.limite = limite
        super().__init__(
            f"Limite de {limite} chaves atingido para agência "
            f"{numero_agencia} conta {numero_conta}",
            rule="limite_chaves_conta",
        )


class InvalidKeyTypeError(ValidationError):
    """Tipo de chave fora do conjunto suportado."""

    def __init__(self, tipo_chave: str):
        self.tipo_chave = tipo_chave
        super().__init__(f"Tipo de chave inválido: {tipo_chave}", field="tipo_chave")


class InvalidKeyFormatError(ValidationError):
    """Valor da chave não respeita o formato do seu tipo."""

    def __init__(self, message: str, tipo_chave: str = None):
        self.tipo_chave = tipo_chave
        super().__init__(message, field="valor_chave")


class InactiveKeyError(BusinessRuleViolationError):
    def __init__(self, chave_id: str):
        self.chave_id = chave_id
        super().__init__(
            f"Chave PIX {chave_id} está inativa e não pode ser alterada",
            rule="chave_inativa",
        )


class AlreadyInactiveError(BusinessRuleViolationError):
    def __init__(self, chave_id: str):
        self.chave_id = chave_id
        super().__init__(
            f"Chave PIX {chave_id} já está inativa",
            rule="chave_ja_inativa",
        )


class EmptyFilterSetError(InvalidQueryError):
    def __init__(self):
        super().__init__(
            "Informe ao menos um filtro para a consulta",
            code="EMPTY_FILTER_SET",
        )


class ConflictingDateFiltersError(InvalidQueryError):
    def __init__(self):
        super().__init__(
            "Não é permitido combinar filtros de data de inclusão e de inativação",
            code="CONFLICTING_DATE_FILTERS",
        )


class InvalidFilterCombinationError(InvalidQueryError):
    def __init__(self, filtros: list):
        self.filtros = filtros
        super().__init__(
            f"Consulta por id não aceita outros filtros: {', '.join(filtros)}",
            code="INVALID_FILTER_COMBINATION",
        )
