# backoffice/usecases/master_data.py
"""
UC: Cadastrar produto, material e fornecedor.

Fluxo de uma sessão de formulário:
- criada vazia (valores padrão do tipo de cadastro);
- alterada campo a campo por comandos tipados;
- enviada: validação → envio simulado (cancelável) → confirmação.

Erros de validação e de envio não são propagados: ficam em
``session.error`` para exibição na própria tela.
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Dict, Optional

from backoffice.adapters.parsers import parse_field_input
from backoffice.domain.errors import BackofficeError, FieldUpdateError, ValidationError
from backoffice.domain.forms import FieldUpdate, apply_update
from backoffice.domain.policies import (
    MasterForm,
    generate_material_code,
    generate_product_code,
    generate_supplier_code,
    validate_master,
)
from backoffice.infra.logger import log_submission, log_system_event
from backoffice.infra.repositories import MASTER_FORMS, Ack, MasterDataRepo, as_dict
from backoffice.infra.tasks import SubmissionTask

GENERIC_ERROR = "エラーが発生しました"


class MasterFormSession:
    """Estado de uma tela de cadastro."""

    def __init__(self, kind: str, repo: Optional[MasterDataRepo] = None):
        if kind not in MASTER_FORMS:
            raise ValueError(f"tipo de cadastro desconhecido: {kind}")
        self.kind = kind
        self.form: MasterForm = MASTER_FORMS[kind]()
        self.repo = repo or MasterDataRepo(kind)
        self.error: Optional[str] = None
        self.saving = False
        self.ack: Optional[Ack] = None
        self.closed = False
        self._task: Optional[SubmissionTask] = None

    # ------------------
    # edição
    # ------------------

    def apply(self, update: FieldUpdate) -> None:
        apply_update(self.form, update)

    def set_field(self, name: str, raw: str) -> None:
        """Atualiza um campo a partir do texto digitado."""
        self.apply(parse_field_input(self.form, name, raw))

    def update_many(self, values: Dict[str, Any]) -> None:
        for name, raw in values.items():
            if raw is None:
                continue
            if isinstance(raw, (list, tuple)):
                for item in raw:
                    self.set_field(name, str(item))
            else:
                self.set_field(name, str(raw))

    def generate_code(self, now_ms: Optional[int] = None) -> str:
        if self.kind == "product":
            code = generate_product_code(now_ms)
        elif self.kind == "material":
            code = generate_material_code(self.form.category, now_ms)
        else:
            code = generate_supplier_code(now_ms)
        self.form.code = code
        return code

    # ------------------
    # envio
    # ------------------

    async def submit(self) -> Optional[Ack]:
        """Valida e envia o formulário.

        Returns:
            A confirmação do repositório, ou None quando a validação/envio
            falhou (ver ``error``) ou a sessão foi fechada antes do fim.
        """
        if self.closed:
            return None
        try:
            validate_master(self.form)
        except ValidationError as e:
            self.error = str(e)
            log_submission(self.kind, as_dict(self.form), error=self.error)
            return None

        self.error = None
        self.saving = True
        record = copy.deepcopy(self.form)
        self._task = SubmissionTask(
            lambda: self.repo.submit(record),
            on_done=self._on_saved,
            name=f"submit-{self.kind}",
        )
        try:
            return await self._task.wait()
        except asyncio.CancelledError:
            # sessão fechada durante o envio: nada a atualizar
            return None
        except BackofficeError as e:
            self._on_failed(str(e))
            return None
        except Exception as e:
            log_system_event("master_submit_error", {"kind": self.kind, "error": str(e)}, level="error")
            self._on_failed(str(e))
            return None

    def _on_saved(self, ack: Ack) -> None:
        if self.closed:
            return
        self.ack = ack
        self.saving = False

    def _on_failed(self, message: str) -> None:
        if self.closed:
            return
        self.error = message or GENERIC_ERROR
        self.saving = False

    def close(self) -> None:
        """Fecha a tela; um envio pendente é cancelado."""
        self.closed = True
        if self._task is not None:
            self._task.cancel()


def run_master_submit(kind: str, values: Dict[str, Any], generate_code: bool = False,
                      repo: Optional[MasterDataRepo] = None) -> Dict[str, Any]:
    """Cria uma sessão, preenche os campos e envia (uso pela CLI)."""
    log_system_event("master_submit_start", {"kind": kind})
    session = MasterFormSession(kind, repo=repo)
    try:
        session.update_many(values)
    except FieldUpdateError as e:
        session.error = str(e)
        return {"kind": kind, "ok": False, "error": session.error, "form": as_dict(session.form)}
    if generate_code and not session.form.code:
        session.generate_code()
    ack = asyncio.run(session.submit())
    return {
        "kind": kind,
        "ok": ack is not None,
        "ack": ack,
        "error": session.error,
        "form": as_dict(session.form),
    }
