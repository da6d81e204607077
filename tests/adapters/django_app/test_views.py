"""
Testes para a API JSON de chaves PIX.

Testa:
- Mapeamento de exceções de domínio para status HTTP (views isoladas)
- Fluxo completo request → view → use case → banco (Client)
"""

import json
import pytest
from datetime import datetime, timezone
from unittest.mock import Mock, patch

from django.test import RequestFactory

from src.adapters.django_app.pix.api_views import (
    ChavePixAPIDetailView,
    ChavePixAPIListView,
    ChavePixAPIResumoContaView,
)
from src.core.pix.dtos import ChavePixOutputDTO
from src.core.pix.exceptions import (
    DuplicateKeyError,
    EmptyFilterSetError,
    InvalidKeyFormatError,
    KeyLimitExceededError,
)
from src.core.shared.exceptions import (
    EntityNotFoundError,
    RepositoryError,
    StoreConstraintViolationError,
)


PAYLOAD_CRIACAO = {
    'tipo_chave': 'cpf',
    'valor_chave': '12345678909',
    'tipo_conta': 'corrente',
    'numero_agencia': 1,
    'numero_conta': 100,
    'nome_correntista': 'Maria',
    'sobrenome_correntista': 'Silva',
}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def rf():
    return RequestFactory()


@pytest.fixture
def mock_chave_output():
    return ChavePixOutputDTO(
        id='12345678-1234-1234-1234-123456789012',
        tipo_chave='cpf',
        valor_chave='12345678909',
        tipo_conta='corrente',
        numero_agencia=1,
        numero_conta=100,
        nome_correntista='Maria',
        sobrenome_correntista=None,
        data_hora_inclusao=datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc),
        data_hora_inativacao=None,
        ativa=True,
    )


@pytest.fixture
def mock_container():
    with patch('src.adapters.django_app.pix.api_views.get_container') as mock:
        yield mock.return_value


def post_json(rf, path, payload):
    return rf.post(path, data=json.dumps(payload), content_type='application/json')


# =============================================================================
# Views isoladas (services mockados)
# =============================================================================

class TestChavePixAPIListView:

    def test_post_cria_chave(self, rf, mock_container, mock_chave_output):
        service = mock_container.criar_chave_pix_service.return_value
        service.execute.return_value = mock_chave_output

        response = ChavePixAPIListView().post(post_json(rf, '/api/pix/', PAYLOAD_CRIACAO))

        assert response.status_code == 201
        data = json.loads(response.content)
        assert data['success'] is True
        assert data['data']['id'] == mock_chave_output.id
        assert data['data']['data_hora_inativacao'] is None

        input_dto = service.execute.call_args[0][0]
        assert input_dto.valor_chave == '12345678909'
        assert input_dto.sobrenome_correntista == 'Silva'

    def test_post_normaliza_tipo_conta(self, rf, mock_container, mock_chave_output):
        service = mock_container.criar_chave_pix_service.return_value
        service.execute.return_value = mock_chave_output

        ChavePixAPIListView().post(
            post_json(rf, '/api/pix/', {**PAYLOAD_CRIACAO, 'tipo_conta': 'Poupança'})
        )

        assert service.execute.call_args[0][0].tipo_conta == 'poupanca'

    @pytest.mark.parametrize('campo,valor', [
        ('numero_agencia', 10000),
        ('numero_conta', 0),
        ('nome_correntista', 'x' * 31),
        ('sobrenome_correntista', 'x' * 46),
        ('tipo_conta', 'salario'),
        ('valor_chave', ''),
    ])
    def test_post_form_invalido(self, rf, mock_container, campo, valor):
        response = ChavePixAPIListView().post(
            post_json(rf, '/api/pix/', {**PAYLOAD_CRIACAO, campo: valor})
        )

        assert response.status_code == 400
        data = json.loads(response.content)
        assert campo in data['meta']['fields']
        mock_container.criar_chave_pix_service.assert_not_called()

    def test_post_json_invalido(self, rf, mock_container):
        request = rf.post('/api/pix/', data='{nao-e-json', content_type='application/json')

        response = ChavePixAPIListView().post(request)

        assert response.status_code == 400

    def test_post_corpo_nao_objeto(self, rf, mock_container):
        response = ChavePixAPIListView().post(post_json(rf, '/api/pix/', [1, 2]))
        assert response.status_code == 400

    @pytest.mark.parametrize('erro,status', [
        (InvalidKeyFormatError('CPF inválido', tipo_chave='cpf'), 400),
        (DuplicateKeyError('12345678909'), 422),
        (KeyLimitExceededError(1, 100, 5), 422),
        (StoreConstraintViolationError('unique', constraint='valor_chave'), 409),
        (RepositoryError('banco fora do ar'), 503),
        (RuntimeError('inesperado'), 500),
    ])
    def test_post_mapeia_erros(self, rf, mock_container, erro, status):
        mock_container.criar_chave_pix_service.return_value.execute.side_effect = erro

        response = ChavePixAPIListView().post(post_json(rf, '/api/pix/', PAYLOAD_CRIACAO))

        assert response.status_code == status
        assert json.loads(response.content)['success'] is False

    def test_get_lista_chaves(self, rf, mock_container, mock_chave_output):
        service = mock_container.buscar_chaves_pix_service.return_value
        service.execute.return_value = [mock_chave_output]

        response = ChavePixAPIListView().get(rf.get('/api/pix/', {'agencia': 1, 'conta': 100}))

        assert response.status_code == 200
        data = json.loads(response.content)
        assert data['meta']['total'] == 1

        filtros = service.execute.call_args[0][0]
        assert filtros.numero_agencia == 1
        assert filtros.numero_conta == 100

    def test_get_converte_datas_de_filtro(self, rf, mock_container, mock_chave_output):
        service = mock_container.buscar_chaves_pix_service.return_value
        service.execute.return_value = [mock_chave_output]

        ChavePixAPIListView().get(rf.get('/api/pix/', {'data_inclusao': '2024-03-10'}))

        filtros = service.execute.call_args[0][0]
        assert filtros.inclusao_desde == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_get_resultado_vazio_404(self, rf, mock_container):
        mock_container.buscar_chaves_pix_service.return_value.execute.return_value = []

        response = ChavePixAPIListView().get(rf.get('/api/pix/', {'nome': 'Pedro'}))

        assert response.status_code == 404

    def test_get_sem_filtros_422(self, rf, mock_container):
        mock_container.buscar_chaves_pix_service.return_value.execute.side_effect = (
            EmptyFilterSetError()
        )

        response = ChavePixAPIListView().get(rf.get('/api/pix/'))

        assert response.status_code == 422
        assert json.loads(response.content)['meta']['code'] == 'EMPTY_FILTER_SET'

    def test_get_data_mal_formatada(self, rf, mock_container):
        response = ChavePixAPIListView().get(rf.get('/api/pix/', {'data_inclusao': '10/03/2024'}))
        assert response.status_code == 400


class TestChavePixAPIDetailView:

    def test_get_por_id(self, rf, mock_container, mock_chave_output):
        service = mock_container.obter_chave_pix_service.return_value
        service.execute.return_value = mock_chave_output

        response = ChavePixAPIDetailView().get(rf.get('/api/pix/abc/'), pk='abc')

        assert response.status_code == 200
        chave_id, filtros = service.execute.call_args[0]
        assert chave_id == 'abc'
        assert filtros.criterios_informados() == []

    def test_get_nao_encontrada(self, rf, mock_container):
        mock_container.obter_chave_pix_service.return_value.execute.side_effect = (
            EntityNotFoundError('não encontrada', entity_type='ChavePix', entity_id='abc')
        )

        response = ChavePixAPIDetailView().get(rf.get('/api/pix/abc/'), pk='abc')

        assert response.status_code == 404

    def test_put_altera(self, rf, mock_container, mock_chave_output):
        service = mock_container.alterar_chave_pix_service.return_value
        service.execute.return_value = mock_chave_output
        payload = {k: v for k, v in PAYLOAD_CRIACAO.items() if k not in ('tipo_chave', 'valor_chave')}

        request = rf.put('/api/pix/abc/', data=json.dumps(payload), content_type='application/json')
        response = ChavePixAPIDetailView().put(request, pk='abc')

        assert response.status_code == 200
        assert service.execute.call_args[0][0].chave_id == 'abc'

    def test_delete_inativa(self, rf, mock_container, mock_chave_output):
        service = mock_container.inativar_chave_pix_service.return_value
        service.execute.return_value = mock_chave_output

        response = ChavePixAPIDetailView().delete(rf.delete('/api/pix/abc/'), pk='abc')

        assert response.status_code == 200
        service.execute.assert_called_once_with('abc')


class TestChavePixAPIResumoContaView:

    def test_resumo(self, rf, mock_container):
        resumo = {'numero_agencia': 1, 'numero_conta': 100, 'total': 0,
                  'ativas': 0, 'limite': 5, 'vagas': 5}
        mock_container.resumo_conta_chaves_pix_service.return_value.execute.return_value = resumo

        response = ChavePixAPIResumoContaView().get(rf.get('/'), agencia=1, conta=100)

        assert json.loads(response.content)['data'] == resumo


# =============================================================================
# Fluxo completo (Client + banco)
# =============================================================================

@pytest.mark.django_db
class TestChavePixAPIEndToEnd:

    def criar(self, client, **kwargs):
        return client.post(
            '/api/pix/',
            data=json.dumps({**PAYLOAD_CRIACAO, **kwargs}),
            content_type='application/json',
        )

    def test_ciclo_de_vida(self, client):
        response = self.criar(client)
        assert response.status_code == 201
        chave_id = response.json()['data']['id']

        response = client.get(f'/api/pix/{chave_id}/')
        assert response.status_code == 200
        assert response.json()['data']['ativa'] is True

        alteracao = {k: v for k, v in PAYLOAD_CRIACAO.items() if k not in ('tipo_chave', 'valor_chave')}
        alteracao['numero_conta'] = 200
        response = client.put(
            f'/api/pix/{chave_id}/',
            data=json.dumps(alteracao),
            content_type='application/json',
        )
        assert response.status_code == 200
        assert response.json()['data']['numero_conta'] == 200

        response = client.delete(f'/api/pix/{chave_id}/')
        assert response.status_code == 200
        assert response.json()['data']['data_hora_inativacao'] is not None

        assert client.delete(f'/api/pix/{chave_id}/').status_code == 422
        assert client.put(
            f'/api/pix/{chave_id}/',
            data=json.dumps(alteracao),
            content_type='application/json',
        ).status_code == 422

    def test_duplicada(self, client):
        self.criar(client)

        response = self.criar(client, numero_conta=300)

        assert response.status_code == 422
        assert response.json()['meta']['rule'] == 'chave_duplicada'

    def test_limite_por_conta(self, client):
        for i in range(5):
            assert self.criar(client, tipo_chave='email',
                              valor_chave=f'cliente{i}@banco.com').status_code == 201

        response = self.criar(client)

        assert response.status_code == 422
        assert response.json()['meta']['rule'] == 'limite_chaves_conta'

        resumo = client.get('/api/pix/contas/1/100/resumo/').json()['data']
        assert resumo['ativas'] == 5
        assert resumo['vagas'] == 0

    def test_formato_invalido(self, client):
        response = self.criar(client, valor_chave='123')

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'valor_chave'

    def test_consultas(self, client):
        chave_id = self.criar(client).json()['data']['id']
        self.criar(client, tipo_chave='email', valor_chave='maria@banco.com', numero_conta=101)

        response = client.get('/api/pix/', {'agencia': 1, 'tipo': 'cpf'})
        assert [c['id'] for c in response.json()['data']] == [chave_id]

        assert client.get('/api/pix/', {'nome': 'MARIA'}).json()['meta']['total'] == 2
        assert client.get('/api/pix/', {'nome': 'Pedro'}).status_code == 404
        assert client.get('/api/pix/').status_code == 422
        assert client.get('/api/pix/', {
            'data_inclusao': '2024-01-01', 'data_inativacao': '2024-01-01'
        }).status_code == 422
        assert client.get(f'/api/pix/{chave_id}/', {'agencia': 1}).status_code == 422
        assert client.get('/api/pix/nao-existe/').status_code == 404

    def test_health(self, client):
        assert client.get('/health/').json() == {'status': 'ok'}
