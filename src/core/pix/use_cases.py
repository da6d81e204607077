"""
Use Cases (Application Services) do Domínio PIX.

Motor de ciclo de vida:
- CriarChavePixService: unicidade → limite → formato → persistência
- AlterarChavePixService: troca dados de conta/correntista de chave ativa
- InativarChavePixService: inativação (terminal)

Resolvedor de consultas:
- ObterChavePixService: consulta por id
- BuscarChavesPixService: consulta por filtros combinados (AND)
- ResumoContaChavesPixService: contagens e vagas de uma conta

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Escritas dentro do Unit of Work; eventos publicados após commit
"""

from dataclasses import replace
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
import logging

from src.core.shared.exceptions import EntityNotFoundError, ValidationError
from src.core.shared.interfaces import UnitOfWork

from .dtos import (
    AlterarChavePixInputDTO,
    ChavePixOutputDTO,
    CriarChavePixInputDTO,
    FiltrosChavePixQueryDTO,
)
from .entities import ChavePixEntity, TipoChave, TipoConta
from .events import ChavePixAlteradaEvent, ChavePixCriadaEvent, ChavePixInativadaEvent
from .exceptions import (
    ConflictingDateFiltersError,
    DuplicateKeyError,
    EmptyFilterSetError,
    InvalidFilterCombinationError,
    InvalidKeyTypeError,
    KeyLimitExceededError,
)
from .ports import ChavePixRepository
from .validators import validar_formato_chave


logger = logging.getLogger(__name__)


def _converter_tipo_chave(valor: str) -> TipoChave:
    try:
        return TipoChave.from_string(valor)
    except ValueError:
        raise InvalidKeyTypeError(valor)


def _converter_tipo_conta(valor: str) -> TipoConta:
    try:
        return TipoConta.from_string(valor)
    except ValueError:
        raise ValidationError(
            f"Tipo de conta inválido: {valor}",
            field="tipo_conta"
        )


def _obter_ou_falhar(
    chave_repo: ChavePixRepository, chave_id: str, bloquear: bool = False
) -> ChavePixEntity:
    if bloquear:
        chave = chave_repo.get_by_id_for_update(chave_id)
    else:
        chave = chave_repo.get_by_id(chave_id)

    if not chave:
        raise EntityNotFoundError(
            f"Chave PIX {chave_id} não encontrada",
            entity_type="ChavePix",
            entity_id=chave_id
        )

    return chave


def janela_do_dia(dia: date) -> tuple:
    """Intervalo [dia 00:00 UTC, dia seguinte 00:00 UTC)."""
    if isinstance(dia, datetime):
        dia = dia.date()
    inicio = datetime.combine(dia, time.min, tzinfo=timezone.utc)
    return inicio, inicio + timedelta(days=1)


class CriarChavePixService:
    """
    Use Case: Registrar nova chave PIX.

    Fluxo (a ordem define qual erro vence quando há mais de um):
    1. Unicidade do valor (ativa ou inativa) → DuplicateKeyError
    2. Limite de chaves ativas da conta, com bloqueio → KeyLimitExceededError
    3. Tipo e formato da chave → InvalidKeyTypeError / InvalidKeyFormatError
    4. Criar entidade, persistir (um único save), disparar evento

    Nenhum save acontece se qualquer passo falhar.

    Example:
        service = CriarChavePixService(chave_repo, uow)
        output = service.execute(CriarChavePixInputDTO(
            tipo_chave="cpf",
            valor_chave="12345678909",
            tipo_conta="corrente",
            numero_agencia=1,
            numero_conta=100,
            nome_correntista="Maria",
        ))
    """

    def __init__(
        self,
        chave_repo: ChavePixRepository,
        uow: UnitOfWork,
        limite_chaves: Optional[int] = None,
    ):
        """
        Args:
            chave_repo: Repositório de chaves
            uow: Unit of Work para transação atômica
            limite_chaves: Máximo de chaves ativas por conta
                (default: ChavePixEntity.LIMITE_CHAVES_POR_CONTA)
        """
        self.chave_repo = chave_repo
        self.uow = uow
        self.limite_chaves = (
            limite_chaves if limite_chaves is not None
            else ChavePixEntity.LIMITE_CHAVES_POR_CONTA
        )

    def execute(self, input_dto: CriarChavePixInputDTO) -> ChavePixOutputDTO:
        """
        Raises:
            DuplicateKeyError: Valor já cadastrado
            KeyLimitExceededError: Conta sem vagas
            InvalidKeyTypeError: Tipo de chave desconhecido
            InvalidKeyFormatError: Valor fora do formato do tipo
            ValidationError: Dados de conta/correntista inválidos
        """
        with self.uow:
            if self.chave_repo.get_by_valor(input_dto.valor_chave) is not None:
                logger.info("Criação rejeitada: valor de chave já cadastrado")
                raise DuplicateKeyError(input_dto.valor_chave)

            ativas = self.chave_repo.count_ativas_by_conta_for_update(
                input_dto.numero_agencia, input_dto.numero_conta
            )
            if ativas >= self.limite_chaves:
                logger.info(
                    f"Criação rejeitada: agência {input_dto.numero_agencia} "
                    f"conta {input_dto.numero_conta} com {ativas} chaves ativas"
                )
                raise KeyLimitExceededError(
                    input_dto.numero_agencia,
                    input_dto.numero_conta,
                    self.limite_chaves,
                )

            tipo_chave = _converter_tipo_chave(input_dto.tipo_chave)
            validar_formato_chave(tipo_chave, input_dto.valor_chave)

            chave = ChavePixEntity.criar(
                tipo_chave=tipo_chave,
                valor_chave=input_dto.valor_chave,
                tipo_conta=_converter_tipo_conta(input_dto.tipo_conta),
                numero_agencia=input_dto.numero_agencia,
                numero_conta=input_dto.numero_conta,
                nome_correntista=input_dto.nome_correntista,
                sobrenome_correntista=input_dto.sobrenome_correntista,
            )

            self.chave_repo.save(chave)

            self.uow.publish_event(
                ChavePixCriadaEvent(
                    aggregate_id=chave.id,
                    tipo_chave=chave.tipo_chave.value,
                    tipo_conta=chave.tipo_conta.value,
                    numero_agencia=chave.numero_agencia,
                    numero_conta=chave.numero_conta,
                )
            )

        return ChavePixOutputDTO.from_entity(chave)


class AlterarChavePixService:
    """
    Use Case: Alterar dados de conta e correntista de chave ativa.

    Tipo e valor da chave nunca mudam; datas de inclusão e
    inativação não são tocadas.
    """

    def __init__(self, chave_repo: ChavePixRepository, uow: UnitOfWork):
        self.chave_repo = chave_repo
        self.uow = uow

    def execute(self, input_dto: AlterarChavePixInputDTO) -> ChavePixOutputDTO:
        """
        Raises:
            EntityNotFoundError: Id desconhecido
            InactiveKeyError: Chave inativa
            ValidationError: Novos dados inválidos
        """
        with self.uow:
            chave = _obter_ou_falhar(self.chave_repo, input_dto.chave_id, bloquear=True)

            campos_alterados = chave.alterar(
                tipo_conta=_converter_tipo_conta(input_dto.tipo_conta),
                numero_agencia=input_dto.numero_agencia,
                numero_conta=input_dto.numero_conta,
                nome_correntista=input_dto.nome_correntista,
                sobrenome_correntista=input_dto.sobrenome_correntista,
            )

            self.chave_repo.save(chave)

            self.uow.publish_event(
                ChavePixAlteradaEvent(
                    aggregate_id=chave.id,
                    campos_alterados=campos_alterados,
                    numero_agencia=chave.numero_agencia,
                    numero_conta=chave.numero_conta,
                )
            )

        return ChavePixOutputDTO.from_entity(chave)


class InativarChavePixService:
    """Use Case: Inativar chave PIX."""

    def __init__(self, chave_repo: ChavePixRepository, uow: UnitOfWork):
        self.chave_repo = chave_repo
        self.uow = uow

    def execute(self, chave_id: str) -> ChavePixOutputDTO:
        """
        Raises:
            EntityNotFoundError: Id desconhecido
            AlreadyInactiveError: Chave já inativa
        """
        with self.uow:
            chave = _obter_ou_falhar(self.chave_repo, chave_id, bloquear=True)

            chave.inativar()

            self.chave_repo.save(chave)

            self.uow.publish_event(
                ChavePixInativadaEvent(
                    aggregate_id=chave.id,
                    data_hora_inativacao=chave.data_hora_inativacao.isoformat(),
                    numero_agencia=chave.numero_agencia,
                    numero_conta=chave.numero_conta,
                )
            )

        return ChavePixOutputDTO.from_entity(chave)


class ObterChavePixService:
    """
    Use Case: Consulta por id.

    A consulta por id é exclusiva: qualquer outro filtro informado
    junto é rejeitado.
    """

    def __init__(self, chave_repo: ChavePixRepository):
        self.chave_repo = chave_repo

    def execute(
        self,
        chave_id: str,
        filtros: Optional[FiltrosChavePixQueryDTO] = None,
    ) -> ChavePixOutputDTO:
        """
        Raises:
            InvalidFilterCombinationError: Outros filtros junto com o id
            EntityNotFoundError: Id desconhecido
        """
        if filtros is not None:
            outros = filtros.criterios_informados()
            if outros:
                raise InvalidFilterCombinationError(outros)

        chave = _obter_ou_falhar(self.chave_repo, chave_id)
        return ChavePixOutputDTO.from_entity(chave)


class BuscarChavesPixService:
    """
    Use Case: Consulta por filtros combinados.

    Regras do conjunto de filtros:
    - ao menos um filtro
    - filtros de inclusão e de inativação não se combinam
    - id só é aceito sozinho (delegado a ObterChavePixService)

    Lista vazia é resultado válido, não erro.

    Example:
        service = BuscarChavesPixService(chave_repo)
        chaves = service.execute(FiltrosChavePixQueryDTO(
            numero_agencia=1, numero_conta=100, tipo_chave="cpf"
        ))
    """

    def __init__(self, chave_repo: ChavePixRepository):
        self.chave_repo = chave_repo

    def execute(self, filtros: FiltrosChavePixQueryDTO) -> List[ChavePixOutputDTO]:
        """
        Raises:
            EmptyFilterSetError: Nenhum filtro informado
            ConflictingDateFiltersError: Datas de inclusão e inativação juntas
            InvalidFilterCombinationError: Id junto com outros filtros
            InvalidKeyTypeError: Filtro de tipo desconhecido
        """
        if filtros.vazio:
            raise EmptyFilterSetError()

        if filtros.id:
            obter = ObterChavePixService(self.chave_repo)
            return [obter.execute(filtros.id, filtros)]

        if filtros.tem_filtro_inclusao and filtros.tem_filtro_inativacao:
            raise ConflictingDateFiltersError()

        if filtros.tipo_chave:
            tipo = _converter_tipo_chave(filtros.tipo_chave)
            if tipo.value != filtros.tipo_chave:
                filtros = replace(filtros, tipo_chave=tipo.value)

        chaves = self.chave_repo.list_by_filtros(filtros)
        logger.debug(f"Consulta {filtros.to_dict()} retornou {len(chaves)} chaves")
        return [ChavePixOutputDTO.from_entity(chave) for chave in chaves]

    def por_tipo(self, tipo_chave: str) -> List[ChavePixOutputDTO]:
        return self.execute(FiltrosChavePixQueryDTO(tipo_chave=tipo_chave))

    def por_conta(self, numero_agencia: int, numero_conta: int) -> List[ChavePixOutputDTO]:
        return self.execute(
            FiltrosChavePixQueryDTO(
                numero_agencia=numero_agencia,
                numero_conta=numero_conta,
            )
        )

    def por_nome(self, nome_correntista: str) -> List[ChavePixOutputDTO]:
        """Nome contém o trecho, sem diferenciar maiúsculas."""
        return self.execute(FiltrosChavePixQueryDTO(nome_correntista=nome_correntista))

    def por_data(
        self,
        data_inclusao: Optional[date] = None,
        data_inativacao: Optional[date] = None,
    ) -> List[ChavePixOutputDTO]:
        """
        Chaves incluídas ou inativadas em um dia (janela [dia, dia+1)).

        Exatamente uma das datas deve ser informada.

        Raises:
            ConflictingDateFiltersError: As duas datas informadas
            EmptyFilterSetError: Nenhuma data informada
        """
        if data_inclusao is not None and data_inativacao is not None:
            raise ConflictingDateFiltersError()

        if data_inclusao is not None:
            inicio, fim = janela_do_dia(data_inclusao)
            return self.execute(
                FiltrosChavePixQueryDTO(inclusao_desde=inicio, inclusao_ate=fim)
            )

        if data_inativacao is not None:
            inicio, fim = janela_do_dia(data_inativacao)
            return self.execute(
                FiltrosChavePixQueryDTO(inativacao_desde=inicio, inativacao_ate=fim)
            )

        raise EmptyFilterSetError()


class ResumoContaChavesPixService:
    """
    Use Case: Resumo de chaves de uma conta.

    Returns (execute):
        {"numero_agencia", "numero_conta", "total", "ativas",
         "limite", "vagas"}
    """

    def __init__(self, chave_repo: ChavePixRepository, limite_chaves: Optional[int] = None):
        self.chave_repo = chave_repo
        self.limite_chaves = (
            limite_chaves if limite_chaves is not None
            else ChavePixEntity.LIMITE_CHAVES_POR_CONTA
        )

    def execute(self, numero_agencia: int, numero_conta: int) -> dict:
        ativas = self.chave_repo.count_ativas_by_conta(numero_agencia, numero_conta)

        return {
            "numero_agencia": numero_agencia,
            "numero_conta": numero_conta,
            "total": self.chave_repo.count_by_conta(numero_agencia, numero_conta),
            "ativas": ativas,
            "limite": self.limite_chaves,
            "vagas": max(self.limite_chaves - ativas, 0),
        }
