"""
Utilidades de parsing para valores digitados nos formulários.

Este módulo converte o texto cru vindo do terminal (prompts, opções da
CLI, campos ``Input`` da TUI) em valores tipados e em comandos de
atualização de formulário. A coerção numérica segue a das telas
originais: o prefixo numérico é aproveitado e texto sem número vale 0.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from backoffice.domain.forms import (
    AddMaterial,
    FieldUpdate,
    SetChoice,
    SetInt,
    SetNumber,
    SetText,
    field_kinds,
)
from backoffice.domain.errors import FieldUpdateError
from backoffice.config import ALL
from backoffice.domain.models import PALLET_TYPES, ShipmentStatus
from backoffice.domain.policies import MasterForm

_NUM_RE = re.compile(r"^\s*[-+]?(?:\d+(?:[.,]\d*)?|[.,]\d+)")
_INT_RE = re.compile(r"^\s*[-+]?\d+")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_LIST_SEP_RE = re.compile(r"[,;、\n]")


def parse_number(txt: Optional[str]) -> float:
    """Interpreta um número decimal no início do texto.

    Exemplos:
        "1500"    → 1500.0
        "12,5"    → 12.5
        "99円"    → 99.0
        "abc"     → 0.0
        None      → 0.0
    """
    if txt is None:
        return 0.0
    m = _NUM_RE.match(str(txt))
    if not m:
        return 0.0
    return float(m.group(0).strip().replace(",", "."))


def parse_int(txt: Optional[str]) -> int:
    """Como ``parse_number``, mas trunca no primeiro caractere não dígito."""
    if txt is None:
        return 0
    m = _INT_RE.match(str(txt))
    return int(m.group(0)) if m else 0


def split_list(txt: Optional[str]) -> List[str]:
    """Separa "a, b、c" em ["a", "b", "c"]; itens vazios são descartados."""
    return [p.strip() for p in _LIST_SEP_RE.split(txt or "") if p.strip()]


STATUS_ALIASES = {
    "shipped": ShipmentStatus.SHIPPED.value,
    "in-transit": ShipmentStatus.IN_TRANSIT.value,
    "delivered": ShipmentStatus.DELIVERED.value,
    "cancelled": ShipmentStatus.CANCELLED.value,
    "returned": ShipmentStatus.RETURNED.value,
}


def parse_status(txt: Optional[str]) -> str:
    """Aceita o valor japonês ou um apelido em inglês; vazio vira ``all``.

    Valores desconhecidos passam adiante sem validação (o filtro então
    não encontra nada).
    """
    s = (txt or "").strip()
    if not s:
        return ALL
    return STATUS_ALIASES.get(s.lower(), s)


def parse_field_input(form: MasterForm, name: str, raw: str) -> FieldUpdate:
    """Cria o comando de atualização adequado ao tipo do campo ``name``."""
    meta = field_kinds(form).get(name)
    if meta is None:
        raise FieldUpdateError(f"campo desconhecido: {name}")
    kind = meta.get("kind")
    if kind == "number":
        return SetNumber(name, parse_number(raw))
    if kind == "int":
        return SetInt(name, parse_int(raw))
    if kind == "choice":
        return SetChoice(name, (raw or "").strip())
    if kind == "list":
        return AddMaterial((raw or "").strip(), field=name)
    return SetText(name, raw or "")


def parse_pallet_item(txt: str) -> Tuple[str, int, Optional[str]]:
    """Interpreta um item de pedido de paletes no formato ``TIPO:QTD[:AAAA-MM-DD]``.

    O tipo pode ser o nome completo ou o índice (1 a 4) da lista de tipos.

    Returns:
        Uma tupla (tipo, quantidade, data_entrega). A data é None quando
        omitida.
    """
    if txt is None or not str(txt).strip():
        raise ValueError("item vazio")
    parts = [p.strip() for p in str(txt).rsplit(":", 2)]
    delivery: Optional[str] = None
    if len(parts) == 3 and _ISO_DATE_RE.match(parts[2]):
        pallet, qty, delivery = parts
    else:
        pallet, qty = str(txt).rsplit(":", 1) if ":" in str(txt) else (str(txt), "0")
        pallet, qty = pallet.strip(), qty.strip()
    if pallet.isdigit() and 1 <= int(pallet) <= len(PALLET_TYPES):
        pallet = PALLET_TYPES[int(pallet) - 1]
    return pallet, parse_int(qty), delivery
