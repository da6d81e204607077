"""
Exceções de Domínio do Gerenciador de Chaves PIX.

Exceções tipadas que atravessam as camadas (core → adapters) e permitem
que cada adapter traduza o erro para o seu protocolo (HTTP, Celery, CLI)
sem inspecionar mensagens.

Hierarquia:
    DomainException (base)
    ├── ValidationError (dado de entrada inválido)
    ├── EntityNotFoundError (registro inexistente)
    ├── BusinessRuleViolationError (regra de negócio violada)
    ├── InvalidQueryError (combinação de filtros inválida)
    └── RepositoryError (falha do armazenamento)
        └── StoreConstraintViolationError (restrição do banco violada)

As exceções específicas do domínio PIX ficam em
``src.core.pix.exceptions`` e herdam destas.
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Example:
        try:
            service.execute(input_dto)
        except DomainException as e:
            logger.warning(f"Operação rejeitada: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (resposta de API)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Dado de entrada fora do formato ou faixa aceitos.

    O código carrega o campo ofendido, ex: ``VALIDATION_ERROR_VALOR_CHAVE``.
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Registro não encontrado no repositório.

    Example:
        chave = repo.get_by_id(chave_id)
        if not chave:
            raise EntityNotFoundError(
                f"Chave PIX {chave_id} não encontrada",
                entity_type="ChavePix",
                entity_id=chave_id,
            )
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    O atributo ``rule`` identifica a regra de forma estável para clientes
    (ex: ``chave_duplicada``, ``limite_chaves_conta``).
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class InvalidQueryError(DomainException):
    """Conjunto de filtros de consulta que não pode ser atendido."""

    def __init__(self, message: str, code: str = "INVALID_QUERY"):
        super().__init__(message, code)


class RepositoryError(DomainException):
    """
    Falha do armazenamento (conexão, timeout, erro de driver).

    Adapters convertem as exceções do driver nesta classe para que o
    core nunca dependa de exceções de infraestrutura.
    """

    def __init__(self, message: str, code: str = "REPOSITORY_ERROR"):
        super().__init__(message, code)


class StoreConstraintViolationError(RepositoryError):
    """
    Restrição rígida do armazenamento violada (ex: UNIQUE em valor_chave).

    Ocorre quando duas criações concorrentes passam pela checagem de
    unicidade e a segunda esbarra na restrição do banco.
    """

    def __init__(self, message: str, constraint: str = None):
        self.constraint = constraint
        super().__init__(message, "STORE_CONSTRAINT_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.constraint:
            result["constraint"] = self.constraint
        return result
