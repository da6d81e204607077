"""
Django Forms para validação de entrada da API PIX.

Forms são DRIVING ADAPTERS: validam estrutura e faixas antes de
montar os DTOs dos Use Cases.

Responsabilidades:
- Campos obrigatórios e tipos
- Faixas de agência/conta, tamanho de nome/sobrenome
- Normalização de tipo de conta

O tipo e o formato da chave NÃO são validados aqui: ficam com o
motor de ciclo de vida, que aplica a ordem unicidade → limite → formato.
"""

from django import forms
from django.core.exceptions import ValidationError

from src.core.pix.dtos import (
    AlterarChavePixInputDTO,
    CriarChavePixInputDTO,
    FiltrosChavePixQueryDTO,
)
from src.core.pix.entities import ChavePixEntity, TipoConta


class DadosContaForm(forms.Form):
    """Campos de conta e correntista comuns a criação e alteração."""

    tipo_conta = forms.CharField(
        max_length=10,
        error_messages={'required': 'Tipo de conta é obrigatório'},
    )

    numero_agencia = forms.IntegerField(
        min_value=1,
        max_value=ChavePixEntity.AGENCIA_MAX,
        error_messages={
            'required': 'Número da agência é obrigatório',
            'invalid': 'Número da agência deve ser numérico',
            'min_value': 'Número da agência deve ser maior que zero',
            'max_value': 'Número da agência deve ter no máximo 4 dígitos',
        },
    )

    numero_conta = forms.IntegerField(
        min_value=1,
        max_value=ChavePixEntity.CONTA_MAX,
        error_messages={
            'required': 'Número da conta é obrigatório',
            'invalid': 'Número da conta deve ser numérico',
            'min_value': 'Número da conta deve ser maior que zero',
            'max_value': 'Número da conta deve ter no máximo 8 dígitos',
        },
    )

    nome_correntista = forms.CharField(
        max_length=ChavePixEntity.NOME_MAX_LENGTH,
        error_messages={
            'required': 'Nome do correntista é obrigatório',
            'max_length': 'Nome do correntista deve ter no máximo 30 caracteres',
        },
    )

    sobrenome_correntista = forms.CharField(
        max_length=ChavePixEntity.SOBRENOME_MAX_LENGTH,
        required=False,
        error_messages={
            'max_length': 'Sobrenome do correntista deve ter no máximo 45 caracteres',
        },
    )

    def clean_tipo_conta(self):
        """Aceita "corrente", "poupanca" ou "poupança"."""
        try:
            return TipoConta.from_string(self.cleaned_data['tipo_conta']).value
        except ValueError:
            raise ValidationError('Tipo de conta deve ser corrente ou poupanca')

    def clean_sobrenome_correntista(self):
        return self.cleaned_data.get('sobrenome_correntista') or None


class ChavePixCreateForm(DadosContaForm):
    """Form para criação de chave (POST /api/pix/)."""

    tipo_chave = forms.CharField(
        max_length=20,
        error_messages={'required': 'Tipo de chave é obrigatório'},
    )

    valor_chave = forms.CharField(
        max_length=77,
        strip=False,
        error_messages={
            'required': 'Valor da chave é obrigatório',
            'max_length': 'Valor da chave deve ter no máximo 77 caracteres',
        },
    )

    def to_dto(self) -> CriarChavePixInputDTO:
        data = self.cleaned_data
        return CriarChavePixInputDTO(
            tipo_chave=data['tipo_chave'],
            valor_chave=data['valor_chave'],
            tipo_conta=data['tipo_conta'],
            numero_agencia=data['numero_agencia'],
            numero_conta=data['numero_conta'],
            nome_correntista=data['nome_correntista'],
            sobrenome_correntista=data['sobrenome_correntista'],
        )


class ChavePixAlteracaoForm(DadosContaForm):
    """Form para alteração de chave (PUT /api/pix/<id>/)."""

    def to_dto(self, chave_id: str) -> AlterarChavePixInputDTO:
        data = self.cleaned_data
        return AlterarChavePixInputDTO(
            chave_id=chave_id,
            tipo_conta=data['tipo_conta'],
            numero_agencia=data['numero_agencia'],
            numero_conta=data['numero_conta'],
            nome_correntista=data['nome_correntista'],
            sobrenome_correntista=data['sobrenome_correntista'],
        )


class ChavePixFiltrosForm(forms.Form):
    """
    Form para filtros de consulta (query string).

    Datas são dias (AAAA-MM-DD) e valem como limite inferior
    inclusivo: ``data_inclusao=2024-01-10`` retorna chaves incluídas
    desde 10/01/2024 00:00.
    """

    id = forms.CharField(max_length=36, required=False)
    tipo = forms.CharField(max_length=20, required=False)
    valor = forms.CharField(max_length=77, required=False, strip=False)
    agencia = forms.IntegerField(min_value=1, max_value=ChavePixEntity.AGENCIA_MAX, required=False)
    conta = forms.IntegerField(min_value=1, max_value=ChavePixEntity.CONTA_MAX, required=False)
    nome = forms.CharField(max_length=ChavePixEntity.NOME_MAX_LENGTH, required=False)
    data_inclusao = forms.DateField(required=False, input_formats=['%Y-%m-%d'])
    data_inativacao = forms.DateField(required=False, input_formats=['%Y-%m-%d'])

    def to_dto(self, chave_id: str = None) -> FiltrosChavePixQueryDTO:
        data = self.cleaned_data
        return FiltrosChavePixQueryDTO(
            id=chave_id or data.get('id') or None,
            tipo_chave=data.get('tipo') or None,
            valor_chave=data.get('valor') or None,
            numero_agencia=data.get('agencia'),
            numero_conta=data.get('conta'),
            nome_correntista=data.get('nome') or None,
            inclusao_desde=data.get('data_inclusao'),
            inativacao_desde=data.get('data_inativacao'),
        )
