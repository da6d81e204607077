"""
Testes do resolvedor de consultas de chaves PIX.

Coverage:
- ObterChavePixService: consulta por id exclusiva
- BuscarChavesPixService: filtros combinados (AND), conjunto vazio,
  datas conflitantes, atalhos por_tipo/por_conta/por_nome/por_data
- FiltrosChavePixQueryDTO: normalização de datas
"""

import pytest
from datetime import date, datetime, timedelta, timezone

from src.core.pix.dtos import FiltrosChavePixQueryDTO, normalizar_data
from src.core.pix.entities import ChavePixEntity, TipoChave, TipoConta
from src.core.pix.exceptions import (
    ConflictingDateFiltersError,
    EmptyFilterSetError,
    InvalidFilterCombinationError,
    InvalidKeyTypeError,
)
from src.core.pix.ports import InMemoryChavePixRepository
from src.core.pix.use_cases import BuscarChavesPixService, ObterChavePixService, janela_do_dia
from src.core.shared.exceptions import EntityNotFoundError, InvalidQueryError


DIA_1 = datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)
DIA_2 = datetime(2024, 3, 11, 23, 59, tzinfo=timezone.utc)
DIA_3 = datetime(2024, 3, 12, 0, 0, tzinfo=timezone.utc)


def nova_chave(valor, tipo=TipoChave.EMAIL, agencia=1, conta=100,
               nome="Maria", inclusao=DIA_1, inativacao=None) -> ChavePixEntity:
    return ChavePixEntity(
        tipo_chave=tipo,
        valor_chave=valor,
        tipo_conta=TipoConta.CORRENTE,
        numero_agencia=agencia,
        numero_conta=conta,
        nome_correntista=nome,
        data_hora_inclusao=inclusao,
        data_hora_inativacao=inativacao,
    )


@pytest.fixture
def chave_repo():
    repo = InMemoryChavePixRepository()
    for chave in [
        nova_chave("12345678909", tipo=TipoChave.CPF, nome="Maria"),
        nova_chave("maria@banco.com", nome="Maria Clara", inclusao=DIA_2),
        nova_chave("+5511987654321", tipo=TipoChave.CELULAR, conta=200,
                   nome="José", inclusao=DIA_2, inativacao=DIA_3),
        nova_chave("ana@banco.com", agencia=2, conta=100, nome="Ana",
                   inclusao=DIA_3),
    ]:
        repo.save(chave)
    return repo


@pytest.fixture
def service(chave_repo):
    return BuscarChavesPixService(chave_repo)


def valores(resultado):
    return [chave.valor_chave for chave in resultado]


class TestObterChavePixService:

    def test_obter_por_id(self, chave_repo):
        chave = chave_repo.get_by_valor("maria@banco.com")

        output = ObterChavePixService(chave_repo).execute(chave.id)

        assert output.id == chave.id
        assert output.valor_chave == "maria@banco.com"

    def test_id_inexistente(self, chave_repo):
        with pytest.raises(EntityNotFoundError):
            ObterChavePixService(chave_repo).execute("nao-existe")

    def test_id_com_outros_filtros(self, chave_repo):
        chave = chave_repo.get_by_valor("maria@banco.com")
        filtros = FiltrosChavePixQueryDTO(id=chave.id, numero_agencia=1, tipo_chave="email")

        with pytest.raises(InvalidFilterCombinationError) as exc_info:
            ObterChavePixService(chave_repo).execute(chave.id, filtros)

        assert exc_info.value.filtros == ["tipo_chave", "numero_agencia"]

    def test_id_sozinho_no_conjunto_de_filtros(self, chave_repo):
        chave = chave_repo.get_by_valor("maria@banco.com")

        output = ObterChavePixService(chave_repo).execute(
            chave.id, FiltrosChavePixQueryDTO(id=chave.id)
        )

        assert output.id == chave.id


class TestBuscarChavesPixService:

    def test_conjunto_vazio(self, service):
        with pytest.raises(EmptyFilterSetError) as exc_info:
            service.execute(FiltrosChavePixQueryDTO())

        assert isinstance(exc_info.value, InvalidQueryError)

    def test_strings_vazias_contam_como_nao_informadas(self, service):
        with pytest.raises(EmptyFilterSetError):
            service.execute(FiltrosChavePixQueryDTO(tipo_chave="", nome_correntista=""))

    def test_filtros_combinados_com_and(self, service):
        resultado = service.execute(FiltrosChavePixQueryDTO(
            numero_agencia=1, numero_conta=100, tipo_chave="email"
        ))

        assert valores(resultado) == ["maria@banco.com"]

    def test_filtro_por_conta_ignora_outras_agencias(self, service):
        resultado = service.execute(FiltrosChavePixQueryDTO(numero_conta=100))
        assert set(valores(resultado)) == {"12345678909", "maria@banco.com", "ana@banco.com"}

        resultado = service.execute(FiltrosChavePixQueryDTO(numero_agencia=1, numero_conta=100))
        assert set(valores(resultado)) == {"12345678909", "maria@banco.com"}

    def test_filtro_por_valor(self, service):
        resultado = service.execute(FiltrosChavePixQueryDTO(valor_chave="+5511987654321"))
        assert valores(resultado) == ["+5511987654321"]

    def test_nome_contem_sem_diferenciar_maiusculas(self, service):
        assert valores(service.por_nome("MARIA")) == ["12345678909", "maria@banco.com"]

    def test_resultado_vazio_nao_e_erro(self, service):
        assert service.execute(FiltrosChavePixQueryDTO(nome_correntista="Pedro")) == []

    def test_tipo_normalizado(self, service):
        assert valores(service.por_tipo("PHONE")) == ["+5511987654321"]

    def test_tipo_desconhecido(self, service):
        with pytest.raises(InvalidKeyTypeError):
            service.por_tipo("cnpj")

    def test_datas_de_inclusao_e_inativacao_juntas(self, service):
        filtros = FiltrosChavePixQueryDTO(
            inclusao_desde=date(2024, 3, 10),
            inativacao_desde=date(2024, 3, 10),
        )

        with pytest.raises(ConflictingDateFiltersError):
            service.execute(filtros)

    def test_inclusao_desde_inclusivo(self, service):
        resultado = service.execute(FiltrosChavePixQueryDTO(inclusao_desde=date(2024, 3, 12)))
        assert valores(resultado) == ["ana@banco.com"]

    def test_inativacao_exclui_chaves_ativas(self, service):
        resultado = service.execute(FiltrosChavePixQueryDTO(inativacao_desde=date(2024, 1, 1)))
        assert valores(resultado) == ["+5511987654321"]

    def test_id_delegado_a_obter(self, service, chave_repo):
        chave = chave_repo.get_by_valor("ana@banco.com")

        resultado = service.execute(FiltrosChavePixQueryDTO(id=chave.id))

        assert valores(resultado) == ["ana@banco.com"]

    def test_id_com_outros_filtros(self, service, chave_repo):
        chave = chave_repo.get_by_valor("ana@banco.com")

        with pytest.raises(InvalidFilterCombinationError):
            service.execute(FiltrosChavePixQueryDTO(id=chave.id, nome_correntista="Ana"))

    def test_resultado_ordenado_por_inclusao(self, service):
        resultado = service.execute(FiltrosChavePixQueryDTO(inclusao_desde=date(2024, 1, 1)))
        inclusoes = [chave.data_hora_inclusao for chave in resultado]
        assert inclusoes == sorted(inclusoes)


class TestPorData:

    def test_por_data_inclusao(self, service):
        resultado = service.por_data(data_inclusao=date(2024, 3, 11))

        assert set(valores(resultado)) == {"maria@banco.com", "+5511987654321"}

    def test_meia_noite_pertence_ao_dia_seguinte(self, service):
        assert valores(service.por_data(data_inclusao=date(2024, 3, 12))) == ["ana@banco.com"]

    def test_por_data_inativacao(self, service):
        assert valores(service.por_data(data_inativacao=date(2024, 3, 12))) == ["+5511987654321"]
        assert service.por_data(data_inativacao=date(2024, 3, 11)) == []

    def test_duas_datas(self, service):
        with pytest.raises(ConflictingDateFiltersError):
            service.por_data(data_inclusao=date(2024, 3, 11), data_inativacao=date(2024, 3, 12))

    def test_nenhuma_data(self, service):
        with pytest.raises(EmptyFilterSetError):
            service.por_data()

    def test_janela_do_dia(self):
        inicio, fim = janela_do_dia(date(2024, 3, 11))

        assert inicio == datetime(2024, 3, 11, tzinfo=timezone.utc)
        assert fim - inicio == timedelta(days=1)


class TestNormalizarData:

    def test_date_vira_inicio_do_dia_utc(self):
        assert normalizar_data(date(2024, 3, 10)) == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_datetime_sem_timezone_e_utc(self):
        assert normalizar_data(datetime(2024, 3, 10, 12)).tzinfo == timezone.utc

    def test_datetime_convertido_para_utc(self):
        brasilia = timezone(timedelta(hours=-3))
        valor = normalizar_data(datetime(2024, 3, 10, 21, tzinfo=brasilia))

        assert valor == datetime(2024, 3, 11, 0, tzinfo=timezone.utc)

    def test_tipo_invalido(self):
        with pytest.raises(TypeError):
            normalizar_data("2024-03-10")
