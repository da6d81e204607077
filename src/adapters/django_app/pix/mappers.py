"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- ChavePixEntity ↔ ChavePixModel
- DomainEvent → DomainEventModel (Event Store)

Mappers são stateless e não contêm lógica de negócio.
"""

from typing import Iterable, List

from src.core.pix.entities import ChavePixEntity, TipoChave, TipoConta
from src.core.shared.events import DomainEvent

from .models import ChavePixModel, DomainEventModel


class ChavePixMapper:
    """Mapper entre ChavePixEntity e ChavePixModel."""

    @staticmethod
    def to_model(entity: ChavePixEntity) -> ChavePixModel:
        """Converte entidade para model (não salvo)."""
        return ChavePixModel(
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
        )

    @staticmethod
    def to_entity(model: ChavePixModel) -> ChavePixEntity:
        """
        Converte model para entidade.

        Reconstrói a entidade diretamente (sem ``criar``): o
        registro já passou pelas validações quando foi criado.
        """
        return ChavePixEntity(
            id=model.id,
            tipo_chave=TipoChave(model.tipo_chave),
            valor_chave=model.valor_chave,
            tipo_conta=TipoConta(model.tipo_conta),
            numero_agencia=model.numero_agencia,
            numero_conta=model.numero_conta,
            nome_correntista=model.nome_correntista,
            sobrenome_correntista=model.sobrenome_correntista or None,
            data_hora_inclusao=model.data_hora_inclusao,
            data_hora_inativacao=model.data_hora_inativacao,
        )

    @staticmethod
    def to_entity_list(models: Iterable[ChavePixModel]) -> List[ChavePixEntity]:
        return [ChavePixMapper.to_entity(model) for model in models]

    @staticmethod
    def to_defaults(entity: ChavePixEntity) -> dict:
        """Campos mutáveis para ``update_or_create``."""
        return {
            'tipo_chave': entity.tipo_chave.value,
            'valor_chave': entity.valor_chave,
            'tipo_conta': entity.tipo_conta.value,
            'numero_agencia': entity.numero_agencia,
            'numero_conta': entity.numero_conta,
            'nome_correntista': entity.nome_correntista,
            'sobrenome_correntista': entity.sobrenome_correntista,
            'data_hora_inclusao': entity.data_hora_inclusao,
            'data_hora_inativacao': entity.data_hora_inativacao,
        }


class DomainEventMapper:
    """Mapper de DomainEvent para o Event Store."""

    @staticmethod
    def to_model(event: DomainEvent, sequence: int = 0) -> DomainEventModel:
        return DomainEventModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event._get_event_data(),
            version=event.version,
            sequence=sequence,
            occurred_at=event.occurred_at,
        )

    @staticmethod
    def to_dict(model: DomainEventModel) -> dict:
        """Mesmo formato de ``DomainEvent.to_dict``."""
        return {
            'event_id': model.event_id,
            'event_type': model.event_type,
            'aggregate_id': model.aggregate_id,
            'aggregate_type': model.aggregate_type,
            'occurred_at': model.occurred_at.isoformat(),
            'version': model.version,
            'data': model.event_data,
        }
