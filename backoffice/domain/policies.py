"""
Regras de validação e utilidades dos cadastros.

Este módulo contém as regras de negócio aplicadas no momento do envio
dos formulários (campos obrigatórios, itens de pedido de paletes) e os
geradores de código sugeridos pelas telas de cadastro.
"""

from __future__ import annotations

import time
from typing import Optional, Union

from backoffice.domain.errors import ValidationError
from backoffice.domain.models import (
    URGENCY_LABELS,
    EmailDraft,
    MaterialForm,
    PalletRequest,
    ProductForm,
    SupplierForm,
    Urgency,
)


MasterForm = Union[ProductForm, MaterialForm, SupplierForm]

# Prefixos de código de material por categoria
MATERIAL_PREFIXES = {
    "原材料": "MAT-R",
    "部品": "MAT-P",
    "工具": "MAT-T",
    "パーツ": "MAT-PT",
}


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def validate_master(form: MasterForm) -> None:
    """Valida os campos obrigatórios de um cadastro.

    Regras:
        - produto: código, nome e categoria
        - material: código, nome e categoria
        - fornecedor: código e nome (não possui categoria)

    Raises:
        ValidationError: com a mensagem exibida na tela.
    """
    if isinstance(form, ProductForm):
        if _blank(form.code) or _blank(form.name) or _blank(form.category):
            raise ValidationError("製品コード、製品名、カテゴリーは必須です")
    elif isinstance(form, MaterialForm):
        if _blank(form.code) or _blank(form.name) or _blank(form.category):
            raise ValidationError("資材コード、資材名、カテゴリーは必須です")
    elif isinstance(form, SupplierForm):
        if _blank(form.code) or _blank(form.name):
            raise ValidationError("サプライヤーコードとサプライヤー名は必須です")
    else:
        raise TypeError(f"formulário desconhecido: {type(form).__name__}")


def validate_pallet_request(request: PalletRequest) -> None:
    """Valida os itens de um pedido de retirada de paletes."""
    if not request.items:
        raise ValidationError("依頼項目を追加してください")
    if any(item.quantity <= 0 for item in request.items):
        raise ValidationError("数量を正しく入力してください")


def validate_email(draft: EmailDraft) -> None:
    if _blank(draft.to):
        raise ValidationError("送信先メールアドレスを入力してください")
    if _blank(draft.subject):
        raise ValidationError("件名を入力してください")
    if _blank(draft.body):
        raise ValidationError("メール本文を入力してください")


def urgency_label(urgency: Union[Urgency, str]) -> str:
    """Rótulo exibido para a urgência; valores desconhecidos voltam como estão."""
    try:
        return URGENCY_LABELS[Urgency(urgency)]
    except ValueError:
        return str(urgency)


# -------------------------
# Geradores de código
# -------------------------

def _now_ms(now_ms: Optional[int]) -> str:
    return str(now_ms if now_ms is not None else int(time.time() * 1000))


def generate_product_code(now_ms: Optional[int] = None) -> str:
    """``PROD-`` + últimos 6 dígitos do timestamp em ms."""
    return f"PROD-{_now_ms(now_ms)[-6:]}"


def generate_material_code(category: str = "", now_ms: Optional[int] = None) -> str:
    """Prefixo por categoria + últimos 3 dígitos do timestamp em ms."""
    prefix = MATERIAL_PREFIXES.get(category, "MAT")
    return f"{prefix}{_now_ms(now_ms)[-3:]}"


def generate_supplier_code(now_ms: Optional[int] = None) -> str:
    return f"SUP-{_now_ms(now_ms)[-3:]}"
