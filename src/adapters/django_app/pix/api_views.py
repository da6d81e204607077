"""
API Views JSON para o domínio PIX.

Endpoints:
- POST   /api/pix/ - Registrar chave
- GET    /api/pix/?tipo=&valor=&agencia=&conta=&nome=&data_inclusao=&data_inativacao=
                   - Consultar por filtros (404 se nenhuma chave)
- GET    /api/pix/<id>/ - Consultar por id (não aceita outros filtros)
- PUT    /api/pix/<id>/ - Alterar dados de conta/correntista
- DELETE /api/pix/<id>/ - Inativar chave
- GET    /api/pix/contas/<agencia>/<conta>/resumo/ - Resumo da conta

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}
"""

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    InvalidQueryError,
    RepositoryError,
    StoreConstraintViolationError,
    ValidationError,
)
from src.config.container import get_container

from .forms import ChavePixAlteracaoForm, ChavePixCreateForm, ChavePixFiltrosForm

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """Cria resposta JSON padronizada."""
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("Corpo da requisição deve ser um objeto JSON")

    return data


def form_errors_response(form) -> JsonResponse:
    """Resposta 400 com mensagens por campo."""
    return json_response(
        success=False,
        error="Dados de entrada inválidos",
        status=400,
        meta={'fields': {campo: list(erros) for campo, erros in form.errors.items()}},
    )


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Mapeamento de exceções de domínio para status HTTP
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container (ex: 'criar_chave_pix_service')."""
        container = self.get_container()
        return getattr(container, service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Mapeamento:
            ValidationError              → 400
            EntityNotFoundError          → 404
            StoreConstraintViolationError → 409
            BusinessRuleViolationError   → 422
            InvalidQueryError            → 422
            RepositoryError              → 503
            DomainException / ValueError → 400
            demais                       → 500
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': e.field, 'code': e.code}
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=str(e),
                status=404
            )

        if isinstance(e, StoreConstraintViolationError):
            return json_response(
                success=False,
                error=str(e),
                status=409
            )

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=str(e),
                status=422,
                meta={'rule': e.rule}
            )

        if isinstance(e, InvalidQueryError):
            return json_response(
                success=False,
                error=str(e),
                status=422,
                meta={'code': e.code}
            )

        if isinstance(e, RepositoryError):
            logger.error(f"Armazenamento indisponível: {e}")
            return json_response(
                success=False,
                error="Armazenamento indisponível",
                status=503
            )

        if isinstance(e, (DomainException, ValueError)):
            return json_response(
                success=False,
                error=str(e),
                status=400
            )

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Chave PIX API Views
# =============================================================================

class ChavePixAPIListView(BaseAPIView):
    """
    GET  /api/pix/ - Consulta por filtros
    POST /api/pix/ - Registra chave
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Consulta chaves por filtros combinados (AND).

        Query params: tipo, valor, agencia, conta, nome,
        data_inclusao, data_inativacao (AAAA-MM-DD), id.

        Resultado vazio responde 404.
        """
        try:
            form = ChavePixFiltrosForm(request.GET)
            if not form.is_valid():
                return form_errors_response(form)

            buscar_service = self.get_service('buscar_chaves_pix_service')
            chaves = buscar_service.execute(form.to_dto())

            if not chaves:
                return json_response(
                    success=False,
                    error="Nenhuma chave PIX encontrada para os filtros informados",
                    status=404
                )

            return json_response(
                success=True,
                data=[chave.to_dict() for chave in chaves],
                meta={'total': len(chaves)}
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Registra nova chave.

        Body JSON:
        {
            "tipo_chave": "cpf|email|celular",
            "valor_chave": "string",
            "tipo_conta": "corrente|poupanca",
            "numero_agencia": 1-9999,
            "numero_conta": 1-99999999,
            "nome_correntista": "string (até 30)",
            "sobrenome_correntista": "string (até 45, opcional)"
        }
        """
        try:
            form = ChavePixCreateForm(self.parse_body(request))
            if not form.is_valid():
                return form_errors_response(form)

            criar_service = self.get_service('criar_chave_pix_service')
            output = criar_service.execute(form.to_dto())

            logger.info(f"API: Chave PIX criada: {output.id}")

            return json_response(
                success=True,
                data=output.to_dict(),
                status=201
            )

        except Exception as e:
            return self.handle_exception(e)


class ChavePixAPIDetailView(BaseAPIView):
    """
    GET    /api/pix/<id>/ - Consulta por id
    PUT    /api/pix/<id>/ - Altera chave
    DELETE /api/pix/<id>/ - Inativa chave
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            form = ChavePixFiltrosForm(request.GET)
            if not form.is_valid():
                return form_errors_response(form)

            obter_service = self.get_service('obter_chave_pix_service')
            chave = obter_service.execute(pk, form.to_dto(chave_id=pk))

            return json_response(success=True, data=chave.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Altera dados de conta/correntista.

        Body JSON: tipo_conta, numero_agencia, numero_conta,
        nome_correntista, sobrenome_correntista (opcional).
        """
        try:
            form = ChavePixAlteracaoForm(self.parse_body(request))
            if not form.is_valid():
                return form_errors_response(form)

            alterar_service = self.get_service('alterar_chave_pix_service')
            output = alterar_service.execute(form.to_dto(chave_id=pk))

            logger.info(f"API: Chave PIX alterada: {pk}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            inativar_service = self.get_service('inativar_chave_pix_service')
            output = inativar_service.execute(pk)

            logger.info(f"API: Chave PIX inativada: {pk}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ChavePixAPIResumoContaView(BaseAPIView):
    """GET /api/pix/contas/<agencia>/<conta>/resumo/"""

    def get(self, request: HttpRequest, agencia: int, conta: int) -> JsonResponse:
        try:
            resumo_service = self.get_service('resumo_conta_chaves_pix_service')
            return json_response(success=True, data=resumo_service.execute(agencia, conta))

        except Exception as e:
            return self.handle_exception(e)
