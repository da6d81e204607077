"""
Event Handlers - Processadores de Eventos de Domínio.

Tasks Celery executadas quando o modo de publicação é ``celery``:

- dispatch_domain_event: roteador, ponto de entrada de todos os eventos
- handle_chave_pix_*: um handler por evento do ciclo de vida
- record_metric: registro de métricas
- generate_daily_report / cleanup_old_events: tarefas agendadas (Beat)

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        ...
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Event Handlers - Chaves PIX
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_chave_pix_criada(self, event_data: Dict[str, Any]) -> None:
    """Registra métrica de chaves criadas por tipo de chave e de conta."""
    data = event_data.get('data', {})

    logger.info(
        f"[HANDLER] ChavePixCriada: {event_data.get('aggregate_id')} | "
        f"tipo={data.get('tipo_chave')} | "
        f"agencia={data.get('numero_agencia')} conta={data.get('numero_conta')}"
    )

    record_metric.delay(
        metric_name='chaves_pix_criadas',
        value=1,
        tags={
            'tipo_chave': data.get('tipo_chave', ''),
            'tipo_conta': data.get('tipo_conta', ''),
        }
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_chave_pix_alterada(self, event_data: Dict[str, Any]) -> None:
    """Registra métrica de alteração; troca de conta ganha tag própria."""
    data = event_data.get('data', {})
    campos = data.get('campos_alterados', [])

    logger.info(
        f"[HANDLER] ChavePixAlterada: {event_data.get('aggregate_id')} | "
        f"campos={campos}"
    )

    mudou_conta = 'numero_agencia' in campos or 'numero_conta' in campos

    record_metric.delay(
        metric_name='chaves_pix_alteradas',
        value=1,
        tags={'mudou_conta': 'sim' if mudou_conta else 'nao'}
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_chave_pix_inativada(self, event_data: Dict[str, Any]) -> None:
    data = event_data.get('data', {})

    logger.info(
        f"[HANDLER] ChavePixInativada: {event_data.get('aggregate_id')} | "
        f"agencia={data.get('numero_agencia')} conta={data.get('numero_conta')} | "
        f"em {data.get('data_hora_inativacao')}"
    )

    record_metric.delay(
        metric_name='chaves_pix_inativadas',
        value=1,
        tags={}
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'ChavePixCriadaEvent': handle_chave_pix_criada,
    'ChavePixAlteradaEvent': handle_chave_pix_alterada,
    'ChavePixInativadaEvent': handle_chave_pix_inativada,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Roteia eventos para os handlers apropriados.

    Returns:
        True se havia handler para o tipo
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")
        return False

    logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
    handler.delay(event_data)
    return True


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Dict[str, str] = None
) -> None:
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def generate_daily_report(self, dia: Optional[str] = None) -> Dict[str, Any]:
    """
    Relatório de chaves incluídas e inativadas em um dia.

    Args:
        dia: Data ISO (AAAA-MM-DD); default: ontem (UTC)

    Returns:
        {"dia", "incluidas", "inativadas", "por_tipo"}
    """
    from src.config.container import get_container

    if dia:
        referencia = date.fromisoformat(dia)
    else:
        referencia = datetime.now(timezone.utc).date() - timedelta(days=1)

    logger.info(f"[SCHEDULED] Gerando relatório de {referencia.isoformat()}...")

    buscar_service = get_container().buscar_chaves_pix_service()

    incluidas = buscar_service.por_data(data_inclusao=referencia)
    inativadas = buscar_service.por_data(data_inativacao=referencia)

    por_tipo: Dict[str, int] = {}
    for chave in incluidas:
        por_tipo[chave.tipo_chave] = por_tipo.get(chave.tipo_chave, 0) + 1

    report = {
        'dia': referencia.isoformat(),
        'incluidas': len(incluidas),
        'inativadas': len(inativadas),
        'por_tipo': por_tipo,
    }

    logger.info(f"[SCHEDULED] Relatório gerado: {report}")

    return report


@shared_task(bind=True)
def cleanup_old_events(self, days: int = 90) -> int:
    """
    Remove eventos antigos do Event Store.

    Returns:
        Número de eventos removidos
    """
    from src.adapters.django_app.pix.models import DomainEventModel

    logger.info(f"[SCHEDULED] Limpando eventos com mais de {days} dias...")

    cutoff_date = datetime.now(timezone.utc) - timedelta(days=days)

    deleted, _ = DomainEventModel.objects.filter(
        occurred_at__lt=cutoff_date
    ).delete()

    logger.info(f"[SCHEDULED] {deleted} eventos removidos")

    return deleted
