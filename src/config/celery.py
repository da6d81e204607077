"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de chaves PIX fora do request/response
- Tarefas agendadas (relatório diário, limpeza do Event Store)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)

Uso:
    celery -A src.config.celery worker -l INFO
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from celery.schedules import crontab
from kombu import Queue, Exchange

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('pixkeys')

# Broker, backend, serialização e retry vêm dos settings (prefixo CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    worker_send_task_events=True,
    task_send_sent_event=True,
)

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)
app.conf.task_default_queue = 'default'

app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.generate_daily_report': {'queue': 'reports'},
    'src.adapters.django_app.events.handlers.cleanup_old_events': {'queue': 'reports'},
    'src.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

app.autodiscover_tasks(
    ['src.adapters.django_app.events'],
    related_name='handlers',
)

app.conf.beat_schedule = {
    # Resumo das chaves incluídas/inativadas no dia anterior
    'daily-report': {
        'task': 'src.adapters.django_app.events.handlers.generate_daily_report',
        'schedule': crontab(hour=8, minute=0),
    },

    'cleanup-old-events': {
        'task': 'src.adapters.django_app.events.handlers.cleanup_old_events',
        'schedule': crontab(hour=3, minute=0, day_of_week='sunday'),
        'kwargs': {'days': 90},
    },
}
