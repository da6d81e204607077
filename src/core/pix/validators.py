"""
Validadores de formato de chave PIX.

Cada TipoChave tem exatamente um validador registrado em
``VALIDADORES``. O despacho é fechado: um tipo sem validador é
tratado como tipo inválido, nunca como chave válida.

Regras:
    cpf     11 dígitos, não todos iguais
    email   contém "@", no máximo 77 caracteres
    celular "+" + DDI (1-2) + DDD (2-3) + número (9), sem separadores
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Dict
import re

from .entities import TipoChave
from .exceptions import InvalidKeyFormatError, InvalidKeyTypeError


class ValidadorChave(ABC):
    """Regra de formato de um tipo de chave."""

    tipo: ClassVar[TipoChave]
    mensagem_erro: ClassVar[str]

    @abstractmethod
    def e_valido(self, valor: str) -> bool:
        ...

    def validar(self, valor: str) -> None:
        """
        Raises:
            InvalidKeyFormatError: Se valor fora do formato
        """
        if not isinstance(valor, str) or not self.e_valido(valor):
            raise InvalidKeyFormatError(self.mensagem_erro, tipo_chave=self.tipo.value)


class ValidadorCpf(ValidadorChave):
    tipo = TipoChave.CPF
    mensagem_erro = "CPF deve conter 11 dígitos numéricos não repetidos"

    PADRAO = re.compile(r"[0-9]{11}")

    def e_valido(self, valor: str) -> bool:
        if not self.PADRAO.fullmatch(valor):
            return False
        # 000.000.000-00, 111.111.111-11 ... são inválidos
        return len(set(valor)) > 1


class ValidadorEmail(ValidadorChave):
    tipo = TipoChave.EMAIL
    mensagem_erro = "Email deve conter '@' e ter no máximo 77 caracteres"

    TAMANHO_MAXIMO = 77

    def e_valido(self, valor: str) -> bool:
        return "@" in valor and len(valor) <= self.TAMANHO_MAXIMO


class ValidadorCelular(ValidadorChave):
    tipo = TipoChave.CELULAR
    mensagem_erro = "Celular deve seguir o formato +DDI DDD NÚMERO sem separadores"

    PADRAO = re.compile(r"\+[0-9]{1,2}[0-9]{2,3}[0-9]{9}")

    def e_valido(self, valor: str) -> bool:
        return bool(self.PADRAO.fullmatch(valor))


VALIDADORES: Dict[TipoChave, ValidadorChave] = {
    validador.tipo: validador
    for validador in (ValidadorCpf(), ValidadorEmail(), ValidadorCelular())
}


def validar_formato_chave(tipo_chave: TipoChave, valor_chave: str) -> None:
    """
    Valida valor da chave conforme o tipo.

    Raises:
        InvalidKeyTypeError: Se não há validador para o tipo
        InvalidKeyFormatError: Se valor fora do formato
    """
    validador = VALIDADORES.get(tipo_chave)

    if validador is None:
        raise InvalidKeyTypeError(str(getattr(tipo_chave, "value", tipo_chave)))

    validador.validar(valor_chave)
