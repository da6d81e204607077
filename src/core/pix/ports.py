"""
Ports (Interfaces) do Domínio PIX.

Define o contrato do armazenamento de chaves (Record Store) que os
adapters de infraestrutura implementam.

Implementações:
- DjangoChavePixRepository (ORM, UNIQUE + select_for_update)
- InMemoryChavePixRepository (testes, prototipagem)
"""

from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

from src.core.shared.exceptions import StoreConstraintViolationError

from .dtos import FiltrosChavePixQueryDTO
from .entities import ChavePixEntity, TipoChave


@runtime_checkable
class ChavePixRepository(Protocol):
    """
    Interface para persistência e consulta de chaves PIX.

    Resultados de listagem são ordenados por data_hora_inclusao.
    Falhas de infraestrutura são sinalizadas com RepositoryError;
    violação de unicidade do valor com StoreConstraintViolationError.
    """

    def save(self, chave: ChavePixEntity) -> None:
        """
        Persiste chave (create ou update).

        Raises:
            StoreConstraintViolationError: Se valor_chave já existe em outro registro
                ou se a chave persistida já foi inativada
            RepositoryError: Se falha na persistência
        """
        ...

    def get_by_id(self, chave_id: str) -> Optional[ChavePixEntity]:
        ...

    def get_by_id_for_update(self, chave_id: str) -> Optional[ChavePixEntity]:
        """
        Busca por id bloqueando a chave até o fim da transação.

        Usado por alteração e inativação dentro do Unit of Work: a
        leitura e a escrita da chave não intercalam com outra transação.
        """
        ...

    def get_by_valor(self, valor_chave: str) -> Optional[ChavePixEntity]:
        """Busca por valor, ativa ou inativa."""
        ...

    def exists(self, chave_id: str) -> bool:
        ...

    def delete(self, chave_id: str) -> None:
        """Remoção administrativa; não faz parte do ciclo de vida."""
        ...

    def list_by_tipo(self, tipo_chave: TipoChave) -> List[ChavePixEntity]:
        ...

    def list_by_conta(self, numero_agencia: int, numero_conta: int) -> List[ChavePixEntity]:
        ...

    def list_by_inclusao_between(
        self, inicio: datetime, fim: datetime
    ) -> List[ChavePixEntity]:
        """Incluídas em [inicio, fim)."""
        ...

    def list_by_inativacao_between(
        self, inicio: datetime, fim: datetime
    ) -> List[ChavePixEntity]:
        """Inativadas em [inicio, fim)."""
        ...

    def list_by_filtros(self, filtros: FiltrosChavePixQueryDTO) -> List[ChavePixEntity]:
        """Todos os filtros informados combinados com AND."""
        ...

    def count_by_conta(self, numero_agencia: int, numero_conta: int) -> int:
        """Total de chaves da conta, ativas e inativas."""
        ...

    def count_ativas_by_conta(self, numero_agencia: int, numero_conta: int) -> int:
        ...

    def count_ativas_by_conta_for_update(
        self, numero_agencia: int, numero_conta: int
    ) -> int:
        """
        Conta chaves ativas bloqueando a conta até o fim da transação.

        Deve ser chamado dentro do Unit of Work: duas criações
        concorrentes na mesma conta são serializadas, tornando a
        checagem de limite definitiva.
        """
        ...


class InMemoryChavePixRepository:
    """
    Implementação em memória do ChavePixRepository.

    Single-thread: o bloqueio de conta é no-op. A unicidade de
    valor_chave é verificada no save, como faria a restrição do banco.

    Example:
        repo = InMemoryChavePixRepository()
        repo.save(chave)
        repo.get_by_valor("12345678909")
    """

    def __init__(self):
        self._chaves: Dict[str, ChavePixEntity] = {}

    def save(self, chave: ChavePixEntity) -> None:
        existente = self.get_by_valor(chave.valor_chave)
        if existente is not None and existente.id != chave.id:
            raise StoreConstraintViolationError(
                f"Valor de chave {chave.valor_chave} já persistido",
                constraint="chaves_pix_valor_chave_key",
            )
        atual = self._chaves.get(chave.id)
        if atual is not None and atual is not chave and not atual.esta_ativa:
            raise StoreConstraintViolationError(
                f"Chave PIX {chave.id} já inativada",
                constraint="chaves_pix_inativacao_terminal",
            )
        self._chaves[chave.id] = chave

    def get_by_id(self, chave_id: str) -> Optional[ChavePixEntity]:
        return self._chaves.get(chave_id)

    def get_by_id_for_update(self, chave_id: str) -> Optional[ChavePixEntity]:
        return self.get_by_id(chave_id)

    def get_by_valor(self, valor_chave: str) -> Optional[ChavePixEntity]:
        for chave in self._chaves.values():
            if chave.valor_chave == valor_chave:
                return chave
        return None

    def exists(self, chave_id: str) -> bool:
        return chave_id in self._chaves

    def delete(self, chave_id: str) -> None:
        self._chaves.pop(chave_id, None)

    def list_all(self) -> List[ChavePixEntity]:
        return self._ordenar(self._chaves.values())

    def list_by_tipo(self, tipo_chave: TipoChave) -> List[ChavePixEntity]:
        return self._ordenar(c for c in self._chaves.values() if c.tipo_chave == tipo_chave)

    def list_by_conta(self, numero_agencia: int, numero_conta: int) -> List[ChavePixEntity]:
        return self._ordenar(
            c for c in self._chaves.values()
            if c.pertence_a_conta(numero_agencia, numero_conta)
        )

    def list_by_inclusao_between(
        self, inicio: datetime, fim: datetime
    ) -> List[ChavePixEntity]:
        return self.list_by_filtros(
            FiltrosChavePixQueryDTO(inclusao_desde=inicio, inclusao_ate=fim)
        )

    def list_by_inativacao_between(
        self, inicio: datetime, fim: datetime
    ) -> List[ChavePixEntity]:
        return self.list_by_filtros(
            FiltrosChavePixQueryDTO(inativacao_desde=inicio, inativacao_ate=fim)
        )

    def list_by_filtros(self, filtros: FiltrosChavePixQueryDTO) -> List[ChavePixEntity]:
        return self._ordenar(c for c in self._chaves.values() if filtros.corresponde(c))

    def count_by_conta(self, numero_agencia: int, numero_conta: int) -> int:
        return len(self.list_by_conta(numero_agencia, numero_conta))

    def count_ativas_by_conta(self, numero_agencia: int, numero_conta: int) -> int:
        return len([
            c for c in self.list_by_conta(numero_agencia, numero_conta)
            if c.esta_ativa
        ])

    def count_ativas_by_conta_for_update(
        self, numero_agencia: int, numero_conta: int
    ) -> int:
        return self.count_ativas_by_conta(numero_agencia, numero_conta)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._chaves.clear()

    @staticmethod
    def _ordenar(chaves) -> List[ChavePixEntity]:
        return sorted(chaves, key=lambda c: c.data_hora_inclusao)
