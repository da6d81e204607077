"""
Repositórios Django para o domínio PIX.

DRIVEN ADAPTERS que implementam os ports do Core usando o ORM.

Responsabilidades:
- Implementar ChavePixRepository (Record Store)
- Traduzir filtros do resolvedor para Q objects
- Bloquear a conta (select_for_update) na checagem de limite
- Converter erros do driver em RepositoryError /
  StoreConstraintViolationError

Repository não contém lógica de negócio.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional
import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from src.core.pix.dtos import FiltrosChavePixQueryDTO
from src.core.pix.entities import ChavePixEntity, TipoChave
from src.core.pix.ports import ChavePixRepository as ChavePixRepositoryPort
from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import RepositoryError, StoreConstraintViolationError
from src.core.shared.interfaces import EventStore

from .mappers import ChavePixMapper, DomainEventMapper
from .models import ChavePixModel, ContaPixModel, DomainEventModel

logger = logging.getLogger(__name__)


@contextmanager
def erros_de_banco(operacao: str):
    """Converte exceções do driver em exceções de domínio."""
    try:
        yield
    except IntegrityError as e:
        logger.warning(f"Restrição violada em {operacao}: {e}")
        raise StoreConstraintViolationError(
            f"Restrição do banco violada em {operacao}",
            constraint=str(e),
        )
    except DatabaseError as e:
        logger.error(f"Erro de banco em {operacao}: {e}")
        raise RepositoryError(f"Falha no armazenamento em {operacao}")


def filtros_para_q(filtros: FiltrosChavePixQueryDTO) -> Q:
    """
    Traduz o conjunto de filtros para um Q (AND de todos os informados).

    Mesma semântica de ``FiltrosChavePixQueryDTO.corresponde``.
    """
    q = Q()

    if filtros.id:
        q &= Q(id=filtros.id)
    if filtros.tipo_chave:
        q &= Q(tipo_chave=filtros.tipo_chave)
    if filtros.valor_chave:
        q &= Q(valor_chave=filtros.valor_chave)
    if filtros.numero_agencia is not None:
        q &= Q(numero_agencia=filtros.numero_agencia)
    if filtros.numero_conta is not None:
        q &= Q(numero_conta=filtros.numero_conta)
    if filtros.nome_correntista:
        q &= Q(nome_correntista__icontains=filtros.nome_correntista)
    if filtros.inclusao_desde:
        q &= Q(data_hora_inclusao__gte=filtros.inclusao_desde)
    if filtros.inclusao_ate:
        q &= Q(data_hora_inclusao__lt=filtros.inclusao_ate)

    if filtros.tem_filtro_inativacao:
        q &= Q(data_hora_inativacao__isnull=False)
    if filtros.inativacao_desde:
        q &= Q(data_hora_inativacao__gte=filtros.inativacao_desde)
    if filtros.inativacao_ate:
        q &= Q(data_hora_inativacao__lt=filtros.inativacao_ate)

    return q


class DjangoChavePixRepository(ChavePixRepositoryPort):
    """
    Implementação Django do ChavePixRepository.

    Example:
        repo = DjangoChavePixRepository()
        repo.save(chave)
        repo.list_by_conta(1, 100)
    """

    def __init__(self):
        self._mapper = ChavePixMapper()

    def save(self, chave: ChavePixEntity) -> None:
        """
        Persiste chave (insert ou update por id).

        Executado em savepoint próprio: uma violação de UNIQUE não
        deixa a transação externa quebrada. O update só atinge linhas
        ainda ativas, então uma inativação já gravada nunca é desfeita.

        Raises:
            StoreConstraintViolationError: valor_chave já existe em outro
                registro, ou a chave foi inativada por outra transação
            RepositoryError: falha do banco
        """
        logger.debug(f"Saving chave PIX: {chave.id}")

        defaults = self._mapper.to_defaults(chave)

        with erros_de_banco(f"save da chave {chave.id}"):
            with transaction.atomic():
                atualizadas = ChavePixModel.objects.filter(
                    id=chave.id,
                    data_hora_inativacao__isnull=True,
                ).update(**defaults)

                if not atualizadas:
                    if ChavePixModel.objects.filter(id=chave.id).exists():
                        logger.warning(f"Save rejeitado: chave {chave.id} já inativada")
                        raise StoreConstraintViolationError(
                            f"Chave PIX {chave.id} já inativada",
                            constraint="chaves_pix_inativacao_terminal",
                        )
                    ChavePixModel.objects.create(id=chave.id, **defaults)

        logger.info(f"Chave PIX saved: {chave.id}")

    def get_by_id(self, chave_id: str) -> Optional[ChavePixEntity]:
        with erros_de_banco("get_by_id"):
            model = ChavePixModel.objects.filter(id=chave_id).first()

        if model is None:
            logger.debug(f"Chave PIX not found: {chave_id}")
            return None

        return self._mapper.to_entity(model)

    def get_by_id_for_update(self, chave_id: str) -> Optional[ChavePixEntity]:
        """Lê a chave bloqueando a linha até o fim da transação."""
        with erros_de_banco("get_by_id_for_update"):
            model = ChavePixModel.objects.select_for_update().filter(id=chave_id).first()

        if model is None:
            logger.debug(f"Chave PIX not found: {chave_id}")
            return None

        return self._mapper.to_entity(model)

    def get_by_valor(self, valor_chave: str) -> Optional[ChavePixEntity]:
        with erros_de_banco("get_by_valor"):
            model = ChavePixModel.objects.filter(valor_chave=valor_chave).first()

        return self._mapper.to_entity(model) if model else None

    def exists(self, chave_id: str) -> bool:
        with erros_de_banco("exists"):
            return ChavePixModel.objects.filter(id=chave_id).exists()

    def delete(self, chave_id: str) -> None:
        """Remoção administrativa. Não falha se a chave não existe."""
        with erros_de_banco("delete"):
            deleted_count, _ = ChavePixModel.objects.filter(id=chave_id).delete()

        if deleted_count > 0:
            logger.info(f"Chave PIX deleted: {chave_id}")
        else:
            logger.debug(f"Chave PIX not found for deletion: {chave_id}")

    def list_by_tipo(self, tipo_chave: TipoChave) -> List[ChavePixEntity]:
        return self._listar(Q(tipo_chave=tipo_chave.value), "list_by_tipo")

    def list_by_conta(self, numero_agencia: int, numero_conta: int) -> List[ChavePixEntity]:
        return self._listar(
            Q(numero_agencia=numero_agencia, numero_conta=numero_conta),
            "list_by_conta",
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
        return self._listar(filtros_para_q(filtros), "list_by_filtros")

    def count_by_conta(self, numero_agencia: int, numero_conta: int) -> int:
        with erros_de_banco("count_by_conta"):
            return ChavePixModel.objects.filter(
                numero_agencia=numero_agencia,
                numero_conta=numero_conta,
            ).count()

    def count_ativas_by_conta(self, numero_agencia: int, numero_conta: int) -> int:
        with erros_de_banco("count_ativas_by_conta"):
            return self._ativas_da_conta(numero_agencia, numero_conta).count()

    def count_ativas_by_conta_for_update(
        self, numero_agencia: int, numero_conta: int
    ) -> int:
        """
        Bloqueia a linha da conta e conta chaves ativas.

        O bloqueio dura até o fim da transação do Unit of Work; em
        bancos sem SELECT ... FOR UPDATE (SQLite) a serialização fica
        a cargo do lock de escrita do próprio banco.
        """
        with erros_de_banco("count_ativas_by_conta_for_update"):
            conta, _ = ContaPixModel.objects.get_or_create(
                numero_agencia=numero_agencia,
                numero_conta=numero_conta,
            )
            ContaPixModel.objects.select_for_update().get(pk=conta.pk)
            return self._ativas_da_conta(numero_agencia, numero_conta).count()

    def _ativas_da_conta(self, numero_agencia: int, numero_conta: int):
        return ChavePixModel.objects.filter(
            numero_agencia=numero_agencia,
            numero_conta=numero_conta,
            data_hora_inativacao__isnull=True,
        )

    def _listar(self, q: Q, operacao: str) -> List[ChavePixEntity]:
        with erros_de_banco(operacao):
            models = list(
                ChavePixModel.objects.filter(q).order_by('data_hora_inclusao', 'id')
            )
        return self._mapper.to_entity_list(models)


class DjangoEventStore(EventStore):
    """
    Event Store sobre a tabela domain_events.

    A sequência de cada evento é a posição dele no histórico do agregado.
    """

    def append(self, event: DomainEvent) -> None:
        with erros_de_banco(f"append do evento {event.event_type}"):
            sequence = DomainEventModel.objects.filter(
                aggregate_id=event.aggregate_id
            ).count() + 1
            DomainEventMapper.to_model(event, sequence=sequence).save()

        logger.debug(f"Event stored: {event.event_type} #{sequence} for {event.aggregate_id}")

    def get_events_for_aggregate(self, aggregate_id: str) -> List[dict]:
        with erros_de_banco("get_events_for_aggregate"):
            models = list(
                DomainEventModel.objects
                .filter(aggregate_id=aggregate_id)
                .order_by('sequence')
            )
        return [DomainEventMapper.to_dict(model) for model in models]
