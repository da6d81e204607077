"""
Migration inicial do domínio PIX.

Cria as tabelas:
- chaves_pix: Registros de chave (UNIQUE em valor_chave)
- contas_pix: Linha de bloqueio por agência+conta
- domain_events: Event Store
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: chaves_pix
        # =================================================================
        migrations.CreateModel(
            name='ChavePixModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID da chave'
                )),
                ('tipo_chave', models.CharField(
                    max_length=10,
                    choices=[
                        ('cpf', 'CPF'),
                        ('email', 'Email'),
                        ('celular', 'Celular'),
                    ],
                    help_text='Tipo da chave'
                )),
                ('valor_chave', models.CharField(
                    max_length=77,
                    unique=True,
                    help_text='Valor da chave (CPF, email ou celular)'
                )),
                ('tipo_conta', models.CharField(
                    max_length=10,
                    choices=[
                        ('corrente', 'Corrente'),
                        ('poupanca', 'Poupança'),
                    ],
                    help_text='Tipo da conta'
                )),
                ('numero_agencia', models.PositiveIntegerField(
                    help_text='Número da agência'
                )),
                ('numero_conta', models.PositiveIntegerField(
                    help_text='Número da conta'
                )),
                ('nome_correntista', models.CharField(
                    max_length=30,
                    help_text='Nome do correntista'
                )),
                ('sobrenome_correntista', models.CharField(
                    max_length=45,
                    null=True,
                    blank=True,
                    help_text='Sobrenome do correntista'
                )),
                ('data_hora_inclusao', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora de inclusão'
                )),
                ('data_hora_inativacao', models.DateTimeField(
                    null=True,
                    blank=True,
                    help_text='Data/hora de inativação (vazio enquanto ativa)'
                )),
            ],
            options={
                'verbose_name': 'Chave PIX',
                'verbose_name_plural': 'Chaves PIX',
                'db_table': 'chaves_pix',
                'ordering': ['data_hora_inclusao'],
                'indexes': [
                    models.Index(
                        fields=['numero_agencia', 'numero_conta'],
                        name='chaves_pix_conta_idx',
                    ),
                    models.Index(fields=['tipo_chave'], name='chaves_pix_tipo_idx'),
                    models.Index(fields=['data_hora_inclusao'], name='chaves_pix_inclusao_idx'),
                    models.Index(fields=['data_hora_inativacao'], name='chaves_pix_inativacao_idx'),
                ],
            },
        ),

        # =================================================================
        # Tabela: contas_pix
        # =================================================================
        migrations.CreateModel(
            name='ContaPixModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('numero_agencia', models.PositiveIntegerField()),
                ('numero_conta', models.PositiveIntegerField()),
                ('criada_em', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Conta PIX',
                'verbose_name_plural': 'Contas PIX',
                'db_table': 'contas_pix',
                'constraints': [
                    models.UniqueConstraint(
                        fields=['numero_agencia', 'numero_conta'],
                        name='contas_pix_agencia_conta_uniq',
                    ),
                ],
            },
        ),

        # =================================================================
        # Tabela: domain_events
        # =================================================================
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    help_text='UUID único do evento'
                )),
                ('event_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do evento (ex: ChavePixCriadaEvent)'
                )),
                ('aggregate_type', models.CharField(
                    max_length=100,
                    help_text='Tipo do agregado (ex: ChavePix)'
                )),
                ('aggregate_id', models.CharField(
                    max_length=36,
                    db_index=True,
                    help_text='ID do agregado que gerou o evento'
                )),
                ('event_data', models.JSONField(
                    default=dict,
                    help_text='Dados serializados do evento'
                )),
                ('version', models.IntegerField(
                    default=1,
                    help_text='Versão do schema do evento'
                )),
                ('sequence', models.BigIntegerField(
                    default=0,
                    help_text='Sequência do evento no agregado'
                )),
                ('occurred_at', models.DateTimeField(
                    help_text='Quando o evento ocorreu'
                )),
                ('recorded_at', models.DateTimeField(
                    auto_now_add=True,
                    help_text='Quando o evento foi persistido'
                )),
            ],
            options={
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'db_table': 'domain_events',
                'ordering': ['recorded_at'],
                'indexes': [
                    models.Index(fields=['aggregate_id', 'sequence'], name='domain_events_agg_seq_idx'),
                    models.Index(fields=['event_type', 'recorded_at'], name='domain_events_type_idx'),
                ],
            },
        ),
    ]
