"""
Testes para os validadores de formato de chave PIX.
"""

import pytest

from src.core.pix.entities import TipoChave
from src.core.pix.exceptions import InvalidKeyFormatError, InvalidKeyTypeError
from src.core.pix.validators import (
    VALIDADORES,
    ValidadorCelular,
    ValidadorCpf,
    ValidadorEmail,
    validar_formato_chave,
)


def test_todo_tipo_tem_validador():
    assert set(VALIDADORES) == set(TipoChave)


class TestValidadorCpf:

    @pytest.mark.parametrize("valor", ["12345678909", "98765432100"])
    def test_validos(self, valor):
        assert ValidadorCpf().e_valido(valor)

    @pytest.mark.parametrize("valor", [
        "1234567890",      # 10 dígitos
        "123456789012",    # 12 dígitos
        "123.456.789-09",
        "1234567890a",
        "00000000000",
        "11111111111",
        "",
    ])
    def test_invalidos(self, valor):
        assert not ValidadorCpf().e_valido(valor)


class TestValidadorEmail:

    def test_valido(self):
        assert ValidadorEmail().e_valido("maria@banco.com.br")

    def test_sem_arroba(self):
        assert not ValidadorEmail().e_valido("maria.banco.com.br")

    def test_tamanho_maximo(self):
        local = "a" * 70
        assert ValidadorEmail().e_valido(local + "@b.com")      # 76
        assert ValidadorEmail().e_valido(local + "@bc.com")     # 77
        assert not ValidadorEmail().e_valido(local + "@bcd.com")  # 78


class TestValidadorCelular:

    @pytest.mark.parametrize("valor", [
        "+5511987654321",   # DDI 2, DDD 2
        "+55011987654321",  # DDI 2, DDD 3
        "+111987654321",    # DDI 1, DDD 2
    ])
    def test_validos(self, valor):
        assert ValidadorCelular().e_valido(valor)

    @pytest.mark.parametrize("valor", [
        "5511987654321",        # sem +
        "+55 11 987654321",
        "+55(11)987654321",
        "+5511987",
        "+55119876543210000",
        "+55abc987654321",
    ])
    def test_invalidos(self, valor):
        assert not ValidadorCelular().e_valido(valor)


class TestValidarFormatoChave:

    def test_formato_valido_nao_levanta(self):
        validar_formato_chave(TipoChave.EMAIL, "maria@banco.com")

    def test_formato_invalido(self):
        with pytest.raises(InvalidKeyFormatError) as exc_info:
            validar_formato_chave(TipoChave.CPF, "123")

        assert exc_info.value.field == "valor_chave"
        assert exc_info.value.tipo_chave == "cpf"

    def test_valor_nao_string(self):
        with pytest.raises(InvalidKeyFormatError):
            validar_formato_chave(TipoChave.CPF, 12345678909)

    def test_tipo_sem_validador(self):
        with pytest.raises(InvalidKeyTypeError):
            validar_formato_chave("cnpj", "12345678000199")


@pytest.mark.parametrize("tipo,valor,valido", [
    (TipoChave.CPF, "12345678901", True),
    (TipoChave.CPF, "11111111111", False),
    (TipoChave.CPF, "123", False),
    (TipoChave.EMAIL, "user@example.com", True),
    (TipoChave.EMAIL, "userexample.com", False),
    (TipoChave.CELULAR, "+5511999999999", True),
    (TipoChave.CELULAR, "11999999999", False),
])
def test_exemplos_de_formato(tipo, valor, valido):
    assert VALIDADORES[tipo].e_valido(valor) is valido
