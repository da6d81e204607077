"""
Testes dos handlers Celery e dos publishers de eventos.

Tasks são chamadas diretamente (execução síncrona, sem broker);
``.delay`` é substituído por mocks.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

from src.adapters.django_app.events import handlers
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.adapters.django_app.pix.models import DomainEventModel
from src.core.pix.entities import TipoChave
from src.core.pix.events import ChavePixAlteradaEvent


# =============================================================================
# Publishers
# =============================================================================

class TestGetEventPublisher:

    @pytest.mark.parametrize('mode', ['sync', '', None])
    def test_modo_sync(self, mode):
        assert isinstance(get_event_publisher(mode), LoggingEventPublisher)

    def test_modo_celery(self):
        assert isinstance(get_event_publisher('celery'), CeleryEventPublisher)

    def test_modo_desconhecido(self):
        with pytest.raises(ValueError):
            get_event_publisher('kafka')


class TestPublishers:

    def test_logging_executa_handlers_locais(self, evento_criacao, caplog):
        publisher = LoggingEventPublisher()
        handler = Mock()
        publisher.register_handler('ChavePixCriadaEvent', handler)
        evento = evento_criacao()

        with caplog.at_level('INFO'):
            publisher.publish(evento)

        handler.assert_called_once_with(evento)
        assert '[EVENT] ChavePixCriadaEvent' in caplog.text

    def test_celery_envia_para_dispatcher(self, evento_criacao):
        evento = evento_criacao()

        with patch.object(handlers, 'dispatch_domain_event') as dispatch:
            CeleryEventPublisher(also_log=False).publish(evento)

        dispatch.delay.assert_called_once_with('ChavePixCriadaEvent', evento.to_dict())

    def test_celery_propaga_falha_do_broker(self, evento_criacao):
        with patch.object(handlers, 'dispatch_domain_event') as dispatch:
            dispatch.delay.side_effect = ConnectionError('broker fora do ar')

            with pytest.raises(ConnectionError):
                CeleryEventPublisher().publish(evento_criacao())

    def test_in_memory_filtra_por_tipo(self, evento_criacao):
        publisher = InMemoryEventPublisher()
        publisher.publish_batch([
            evento_criacao('a'),
            ChavePixAlteradaEvent(aggregate_id='a', campos_alterados=['numero_conta']),
        ])

        assert len(publisher.published_events) == 2
        assert len(publisher.get_events_by_type('ChavePixAlteradaEvent')) == 1

        publisher.clear()
        assert publisher.published_events == []


# =============================================================================
# Dispatcher e handlers
# =============================================================================

class TestDispatchDomainEvent:

    def test_roteia_para_handler(self, evento_criacao):
        handler = Mock()
        payload = evento_criacao().to_dict()

        with patch.dict(handlers.EVENT_HANDLERS, {'ChavePixCriadaEvent': handler}):
            assert handlers.dispatch_domain_event('ChavePixCriadaEvent', payload) is True

        handler.delay.assert_called_once_with(payload)

    def test_tipo_sem_handler(self):
        assert handlers.dispatch_domain_event('EventoDesconhecido', {}) is False

    def test_todos_os_eventos_tem_handler(self):
        assert set(handlers.EVENT_HANDLERS) == {
            'ChavePixCriadaEvent',
            'ChavePixAlteradaEvent',
            'ChavePixInativadaEvent',
        }


class TestHandlers:

    @pytest.fixture
    def record_metric(self):
        with patch.object(handlers, 'record_metric') as mock:
            yield mock

    def test_chave_criada(self, record_metric, evento_criacao):
        handlers.handle_chave_pix_criada(evento_criacao(tipo_chave='email').to_dict())

        kwargs = record_metric.delay.call_args.kwargs
        assert kwargs['metric_name'] == 'chaves_pix_criadas'
        assert kwargs['tags'] == {'tipo_chave': 'email', 'tipo_conta': 'corrente'}

    @pytest.mark.parametrize('campos,mudou_conta', [
        (['numero_conta'], 'sim'),
        (['nome_correntista'], 'nao'),
    ])
    def test_chave_alterada(self, record_metric, campos, mudou_conta):
        evento = ChavePixAlteradaEvent(aggregate_id='a', campos_alterados=campos)

        handlers.handle_chave_pix_alterada(evento.to_dict())

        assert record_metric.delay.call_args.kwargs['tags'] == {'mudou_conta': mudou_conta}

    def test_chave_inativada(self, record_metric):
        from src.core.pix.events import ChavePixInativadaEvent

        evento = ChavePixInativadaEvent(
            aggregate_id='a',
            data_hora_inativacao='2024-03-12T00:00:00+00:00',
        )

        handlers.handle_chave_pix_inativada(evento.to_dict())

        assert record_metric.delay.call_args.kwargs['metric_name'] == 'chaves_pix_inativadas'


# =============================================================================
# Tarefas agendadas
# =============================================================================

@pytest.mark.django_db
class TestScheduledTasks:

    def test_relatorio_diario(self, django_repo, chave_factory, dia_referencia):
        django_repo.save(chave_factory(data_hora_inclusao=dia_referencia))
        django_repo.save(chave_factory(
            valor_chave='a@b.com',
            tipo_chave=TipoChave.EMAIL,
            data_hora_inclusao=dia_referencia - timedelta(days=1),
            data_hora_inativacao=dia_referencia,
        ))
        django_repo.save(chave_factory(
            valor_chave='c@d.com',
            tipo_chave=TipoChave.EMAIL,
            data_hora_inclusao=dia_referencia + timedelta(hours=1),
        ))

        report = handlers.generate_daily_report(dia='2024-03-11')

        assert report == {
            'dia': '2024-03-11',
            'incluidas': 2,
            'inativadas': 1,
            'por_tipo': {'cpf': 1, 'email': 1},
        }

    def test_relatorio_sem_chaves(self):
        report = handlers.generate_daily_report()

        assert report['incluidas'] == 0
        assert report['inativadas'] == 0

    def test_limpeza_de_eventos_antigos(self, event_store, evento_criacao):
        antigo = evento_criacao('a')
        antigo.occurred_at = datetime.now(timezone.utc) - timedelta(days=120)
        event_store.append(antigo)
        event_store.append(evento_criacao('b'))

        removidos = handlers.cleanup_old_events(days=90)

        assert removidos == 1
        assert list(DomainEventModel.objects.values_list('aggregate_id', flat=True)) == ['b']
