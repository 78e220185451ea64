import pytest

from backoffice.domain.errors import FieldUpdateError, ValidationError
from backoffice.domain.forms import (
    AddMaterial,
    RemoveMaterial,
    SetChoice,
    SetInt,
    SetNumber,
    SetText,
    apply_update,
)
from backoffice.domain.models import (
    EmailDraft,
    MaterialForm,
    PalletRequest,
    PalletRequestItem,
    ProductForm,
    SupplierForm,
    Urgency,
)
from backoffice.domain.policies import (
    generate_material_code,
    generate_product_code,
    generate_supplier_code,
    urgency_label,
    validate_email,
    validate_master,
    validate_pallet_request,
)


# ----------------------
# validação
# ----------------------

@pytest.mark.parametrize(
    "form,message",
    [
        (ProductForm(code="P-1", name="水"), "製品コード、製品名、カテゴリーは必須です"),
        (MaterialForm(name="鉄板", category="部品"), "資材コード、資材名、カテゴリーは必須です"),
        (SupplierForm(code="SUP-1", name="  "), "サプライヤーコードとサプライヤー名は必須です"),
    ],
)
def test_validate_master_required_fields(form, message):
    with pytest.raises(ValidationError) as exc:
        validate_master(form)
    assert str(exc.value) == message


def test_validate_master_accepts_complete_forms():
    validate_master(ProductForm(code="P-1", name="水", category="飲料"))
    validate_master(MaterialForm(code="M-1", name="鉄板", category="部品"))
    # fornecedor não tem categoria
    validate_master(SupplierForm(code="SUP-1", name="鈴木商事"))


def test_validate_master_rejects_other_types():
    with pytest.raises(TypeError):
        validate_master(object())


def test_validate_pallet_request():
    request = PalletRequest(request_number="JPR-1", request_date="2025-04-12")
    with pytest.raises(ValidationError, match="依頼項目を追加してください"):
        validate_pallet_request(request)
    request.items.append(PalletRequestItem(id="1", quantity=0))
    with pytest.raises(ValidationError, match="数量を正しく入力してください"):
        validate_pallet_request(request)
    request.items[0].quantity = 10
    validate_pallet_request(request)


def test_validate_email():
    with pytest.raises(ValidationError):
        validate_email(EmailDraft(subject="件名", body="本文"))
    with pytest.raises(ValidationError):
        validate_email(EmailDraft(to="a@b.jp", body="本文"))
    with pytest.raises(ValidationError):
        validate_email(EmailDraft(to="a@b.jp", subject="件名"))
    validate_email(EmailDraft(to="a@b.jp", subject="件名", body="本文"))


def test_urgency_label():
    assert urgency_label(Urgency.URGENT) == "緊急"
    assert urgency_label("low") == "低"
    assert urgency_label("???") == "???"


# ----------------------
# geradores de código
# ----------------------

def test_code_generators_use_timestamp_suffix():
    now = 1712900123456
    assert generate_product_code(now) == "PROD-123456"
    assert generate_supplier_code(now) == "SUP-456"
    assert generate_material_code("原材料", now) == "MAT-R456"
    assert generate_material_code("パーツ", now) == "MAT-PT456"
    assert generate_material_code("その他", now) == "MAT456"


def test_code_generator_without_timestamp():
    assert generate_product_code().startswith("PROD-")
    assert len(generate_product_code()) == len("PROD-") + 6


# ----------------------
# comandos de atualização
# ----------------------

def test_apply_update_sets_typed_values():
    form = MaterialForm()
    apply_update(form, SetText("name", "鉄板"))
    apply_update(form, SetChoice("category", "部品"))
    apply_update(form, SetNumber("standard_cost", 12))
    apply_update(form, SetInt("lead_time", 14))
    assert (form.name, form.category, form.standard_cost, form.lead_time) == ("鉄板", "部品", 12.0, 14)
    assert isinstance(form.standard_cost, float)


@pytest.mark.parametrize(
    "update",
    [
        SetText("standard_price", "100"),      # texto em campo numérico
        SetNumber("standard_price", "100"),    # valor não numérico
        SetNumber("standard_price", True),
        SetChoice("category", "家電"),          # fora da lista
        SetText("nao_existe", "x"),
        AddMaterial("鉄板"),                    # produto não tem materiais
    ],
)
def test_apply_update_rejects_mismatches(update):
    form = ProductForm()
    with pytest.raises(FieldUpdateError):
        apply_update(form, update)
    assert form == ProductForm()


def test_apply_update_int_field_rejects_float():
    with pytest.raises(FieldUpdateError):
        apply_update(MaterialForm(), SetInt("lead_time", 1.5))


def test_empty_choice_is_accepted():
    form = ProductForm(category="飲料")
    apply_update(form, SetChoice("category", ""))
    assert form.category == ""


def test_materials_add_and_remove():
    form = SupplierForm()
    apply_update(form, AddMaterial(" 鉄板 "))
    apply_update(form, AddMaterial("鉄板"))
    apply_update(form, AddMaterial(""))
    apply_update(form, AddMaterial("ボルト"))
    assert form.materials == ["鉄板", "ボルト"]
    apply_update(form, RemoveMaterial("鉄板"))
    assert form.materials == ["ボルト"]
