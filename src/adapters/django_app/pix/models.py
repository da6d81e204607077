"""
Django Models para o domínio PIX.

Estes models são ADAPTERS - implementam a persistência para as
entidades definidas em src/core/pix/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Regras de ciclo de vida ficam na ChavePixEntity e nos Use Cases
- Conversão Model ↔ Entity via Mappers

Tabelas:
- chaves_pix: Registros de chave (UNIQUE em valor_chave)
- contas_pix: Linha de bloqueio por agência+conta
- domain_events: Event Store
"""

from django.db import models
from django.utils import timezone


class TipoChaveChoices(models.TextChoices):
    """Espelha TipoChave do Core."""
    CPF = 'cpf', 'CPF'
    EMAIL = 'email', 'Email'
    CELULAR = 'celular', 'Celular'


class TipoContaChoices(models.TextChoices):
    """Espelha TipoConta do Core."""
    CORRENTE = 'corrente', 'Corrente'
    POUPANCA = 'poupanca', 'Poupança'


class ChavePixModel(models.Model):
    """
    Model Django para persistência de chaves PIX.

    A restrição UNIQUE de ``valor_chave`` é a garantia definitiva
    de unicidade quando duas criações concorrem.
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID da chave"
    )

    tipo_chave = models.CharField(
        max_length=10,
        choices=TipoChaveChoices.choices,
        help_text="Tipo da chave"
    )

    valor_chave = models.CharField(
        max_length=77,
        unique=True,
        help_text="Valor da chave (CPF, email ou celular)"
    )

    tipo_conta = models.CharField(
        max_length=10,
        choices=TipoContaChoices.choices,
        help_text="Tipo da conta"
    )

    numero_agencia = models.PositiveIntegerField(help_text="Número da agência")

    numero_conta = models.PositiveIntegerField(help_text="Número da conta")

    nome_correntista = models.CharField(
        max_length=30,
        help_text="Nome do correntista"
    )

    sobrenome_correntista = models.CharField(
        max_length=45,
        null=True,
        blank=True,
        help_text="Sobrenome do correntista"
    )

    data_hora_inclusao = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora de inclusão"
    )

    data_hora_inativacao = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Data/hora de inativação (vazio enquanto ativa)"
    )

    class Meta:
        db_table = 'chaves_pix'
        verbose_name = 'Chave PIX'
        verbose_name_plural = 'Chaves PIX'
        ordering = ['data_hora_inclusao']
        indexes = [
            models.Index(
                fields=['numero_agencia', 'numero_conta'],
                name='chaves_pix_conta_idx',
            ),
            models.Index(fields=['tipo_chave'], name='chaves_pix_tipo_idx'),
            models.Index(fields=['data_hora_inclusao'], name='chaves_pix_inclusao_idx'),
            models.Index(fields=['data_hora_inativacao'], name='chaves_pix_inativacao_idx'),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.tipo_chave} ag {self.numero_agencia} cc {self.numero_conta}"

    def __repr__(self):
        return f"<ChavePixModel id={self.id[:8]} tipo={self.tipo_chave}>"


class ContaPixModel(models.Model):
    """
    Linha de bloqueio por conta.

    ``select_for_update`` nesta linha serializa criações de chave
    na mesma agência+conta, tornando a checagem de limite definitiva.
    """

    id = models.BigAutoField(primary_key=True)

    numero_agencia = models.PositiveIntegerField()

    numero_conta = models.PositiveIntegerField()

    criada_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'contas_pix'
        verbose_name = 'Conta PIX'
        verbose_name_plural = 'Contas PIX'
        constraints = [
            models.UniqueConstraint(
                fields=['numero_agencia', 'numero_conta'],
                name='contas_pix_agencia_conta_uniq',
            ),
        ]

    def __str__(self):
        return f"ag {self.numero_agencia} cc {self.numero_conta}"


class DomainEventModel(models.Model):
    """
    Event Store para Domain Events.

    Gravado na mesma transação da operação que gerou o evento.
    """

    event_id = models.CharField(
        max_length=36,
        primary_key=True,
        help_text="UUID único do evento"
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tipo do evento (ex: ChavePixCriadaEvent)"
    )

    aggregate_type = models.CharField(
        max_length=100,
        help_text="Tipo do agregado (ex: ChavePix)"
    )

    aggregate_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="ID do agregado que gerou o evento"
    )

    event_data = models.JSONField(
        default=dict,
        help_text="Dados serializados do evento"
    )

    version = models.IntegerField(
        default=1,
        help_text="Versão do schema do evento"
    )

    sequence = models.BigIntegerField(
        default=0,
        help_text="Sequência do evento no agregado"
    )

    occurred_at = models.DateTimeField(help_text="Quando o evento ocorreu")

    recorded_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Quando o evento foi persistido"
    )

    class Meta:
        db_table = 'domain_events'
        verbose_name = 'Evento de Domínio'
        verbose_name_plural = 'Eventos de Domínio'
        ordering = ['recorded_at']
        indexes = [
            models.Index(fields=['aggregate_id', 'sequence'], name='domain_events_agg_seq_idx'),
            models.Index(fields=['event_type', 'recorded_at'], name='domain_events_type_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id[:8]} @ {self.occurred_at}"
