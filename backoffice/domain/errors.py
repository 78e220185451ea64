"""
Exceções do domínio.

Erros de validação e de envio nunca derrubam a tela: a sessão que os
captura expõe a mensagem em ``error`` e continua utilizável.
"""

from __future__ import annotations


class BackofficeError(Exception):
    """Base de todas as exceções do pacote."""


class ValidationError(BackofficeError):
    """Campo obrigatório ausente ou valor inválido no momento do envio."""


class SubmissionError(BackofficeError):
    """Falha (simulada) do repositório ao receber um registro."""


class FieldUpdateError(BackofficeError):
    """Comando de atualização incompatível com o campo do formulário."""
