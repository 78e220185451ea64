"""
Comandos tipados de atualização dos formulários de cadastro.

Cada edição de campo é expressa como um comando explícito (``SetText``,
``SetNumber``...). ``apply_update`` confere o tipo declarado do campo em
``metadata["kind"]`` e recusa o comando quando não combinam, de modo que
um texto nunca vai parar num campo numérico.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Union

from backoffice.domain.errors import FieldUpdateError
from backoffice.domain.policies import MasterForm


@dataclass(frozen=True)
class SetText:
    field: str
    value: str


@dataclass(frozen=True)
class SetChoice:
    field: str
    value: str


@dataclass(frozen=True)
class SetNumber:
    field: str
    value: float


@dataclass(frozen=True)
class SetInt:
    field: str
    value: int


@dataclass(frozen=True)
class AddMaterial:
    value: str
    field: str = "materials"


@dataclass(frozen=True)
class RemoveMaterial:
    value: str
    field: str = "materials"


FieldUpdate = Union[SetText, SetChoice, SetNumber, SetInt, AddMaterial, RemoveMaterial]

_KIND_BY_COMMAND = {
    SetText: "text",
    SetChoice: "choice",
    SetNumber: "number",
    SetInt: "int",
    AddMaterial: "list",
    RemoveMaterial: "list",
}


def field_kinds(form: MasterForm) -> Dict[str, Dict[str, Any]]:
    """Mapeia nome do campo -> metadata (``kind`` e, se houver, ``options``)."""
    return {f.name: dict(f.metadata) for f in fields(form)}


def apply_update(form: MasterForm, update: FieldUpdate) -> MasterForm:
    """Aplica um comando ao formulário (in place) e devolve o próprio formulário.

    Raises:
        FieldUpdateError: campo inexistente, tipo incompatível ou opção
            fora da lista do campo.
    """
    kinds = field_kinds(form)
    meta = kinds.get(update.field)
    if meta is None:
        raise FieldUpdateError(f"campo desconhecido: {update.field}")
    expected = _KIND_BY_COMMAND[type(update)]
    if meta.get("kind") != expected:
        raise FieldUpdateError(
            f"{type(update).__name__} não se aplica ao campo {update.field} ({meta.get('kind')})"
        )

    if isinstance(update, SetText):
        setattr(form, update.field, str(update.value))
    elif isinstance(update, SetChoice):
        options = meta.get("options", ())
        # "" representa "selecione..." e é sempre aceito
        if update.value and update.value not in options:
            raise FieldUpdateError(f"opção inválida para {update.field}: {update.value}")
        setattr(form, update.field, update.value)
    elif isinstance(update, SetNumber):
        if isinstance(update.value, bool) or not isinstance(update.value, (int, float)):
            raise FieldUpdateError(f"{update.field} exige número")
        setattr(form, update.field, float(update.value))
    elif isinstance(update, SetInt):
        if isinstance(update.value, bool) or not isinstance(update.value, int):
            raise FieldUpdateError(f"{update.field} exige inteiro")
        setattr(form, update.field, update.value)
    elif isinstance(update, AddMaterial):
        material = update.value.strip()
        current = getattr(form, update.field)
        # ignora vazios e duplicados, como na tela original
        if material and material not in current:
            setattr(form, update.field, [*current, material])
    elif isinstance(update, RemoveMaterial):
        current = getattr(form, update.field)
        setattr(form, update.field, [m for m in current if m != update.value])
    return form
