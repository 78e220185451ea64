# backoffice/adapters/cli.py
"""
CLI do back-office (Typer).

Comandos principais:
- history                 -> histórico de expedição (busca, status, período, página)
- customer-history        -> histórico de um cliente com preço médio
- schedule                -> programação semanal de expedição
- export <csv>            -> exporta o histórico filtrado
- master product|material|supplier -> cadastros
- master list <tipo>      -> lista cadastros
- pallet jpr|spr          -> pedido de retirada de paletes
- tui                     -> interface Textual
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from backoffice.config import ALL, DEFAULTS
from backoffice.adapters.parsers import parse_pallet_item, parse_status
from backoffice.domain.errors import FieldUpdateError
from backoffice.infra.repositories import MasterDataRepo, ShipmentHistoryRepo, as_dict
from backoffice.usecases.master_data import run_master_submit
from backoffice.usecases.pallet_request import run_pallet_request
from backoffice.usecases.shipment_history import ShipmentHistoryView, export_history_csv, history_rows
from backoffice.usecases.shipment_schedule import ShipmentScheduleView


app = typer.Typer(help="出荷・マスタ管理 back-office — CLI")
console = Console()

STATUS_STYLES = {
    "納品完了": "bold green",
    "配送中": "bold blue",
    "出荷済み": "bold magenta",
    "キャンセル": "bold red",
    "返品": "bold red",
}


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def _yen(val: Optional[float]) -> str:
    if val is None:
        return "N/A"
    return f"¥{val:,.0f}"


def _num(val: float) -> str:
    return f"{val:,}"


def _build_view(customer: bool, customer_id: str, customer_name: str, search: str,
                status: str, date_range: str, page: int, page_size: int) -> ShipmentHistoryView:
    try:
        if customer:
            view = ShipmentHistoryView.for_customer(customer_id, customer_name,
                                                    page_size=page_size, date_range=date_range)
        else:
            view = ShipmentHistoryView(repo=ShipmentHistoryRepo(customer_name=customer_name),
                                       page_size=page_size, date_range=date_range)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    view.set_search(search)
    view.set_status(parse_status(status))
    view.go_to_page(page)
    return view


def _history_json(snap: Dict[str, Any]) -> Dict[str, Any]:
    page = snap["page"]
    return {
        "stats": asdict(snap["stats"]),
        "average_unit_price": snap["average_unit_price"],
        "page": page.page,
        "total_pages": page.total_pages,
        "total_items": page.total_items,
        "items": history_rows(page.items),
        "message": snap["message"],
    }


def _display_history(snap: Dict[str, Any], title: str) -> None:
    """Exibe cartões de resumo, tabela paginada e rodapé da paginação."""
    stats = snap["stats"]
    page = snap["page"]

    customer = snap.get("customer")
    if customer is not None:
        console.print(Panel(
            f"{customer.customer_name}\n"
            f"顧客コード: {customer.customer_code}\n"
            f"担当者: {customer.contact_person}\n"
            f"電話: {customer.phone} | メール: {customer.email}",
            title="顧客情報", border_style="blue",
        ))

    summary = [
        f"総出荷件数: {stats.total_shipments}",
        f"総出荷金額: {_yen(stats.total_amount)}",
        f"総出荷数（c/s）: {_num(stats.total_cases)}",
        f"総出荷数（本）: {_num(stats.total_pieces)}",
    ]
    if customer is not None:
        summary.append(f"平均単価: {_yen(snap['average_unit_price'])}")
    console.print(Panel("\n".join(summary), title="統計サマリー", border_style="green"))

    if page.is_empty:
        console.print(Panel(snap["message"], title=title, border_style="yellow"))
        return

    table = Table(title=f"{title} ({page.total_items}件の履歴)", box=box.ROUNDED)
    table.add_column("製品")
    table.add_column("伝票番号")
    table.add_column("出荷数量", justify="right")
    table.add_column("出荷日・納品日", justify="center")
    table.add_column("納品先・運送会社")
    table.add_column("金額", justify="right")
    table.add_column("ステータス")
    for r in page.items:
        style = STATUS_STYLES.get(r.status.value, "")
        table.add_row(
            f"{r.product_name}\n{r.product_code}",
            f"納品書: {r.delivery_note_no}\n注文書: {r.order_no}",
            f"{_num(r.shipment_quantity_cases)} c/s\n{_num(r.shipment_quantity_pieces)} 本",
            f"出荷: {r.shipment_date.replace('-', '/')}\n納品: {r.delivery_date.replace('-', '/')}",
            f"{r.delivery_destination}\n{r.shipping_company}",
            f"{_yen(r.total_amount)}\n@{_yen(r.unit_price)}",
            f"[{style}]{r.status.value}[/]" if style else r.status.value,
        )
    console.print(table)
    end = min(page.start_index + page.page_size, page.total_items)
    console.print(f"[dim]{page.start_index + 1} - {end} / {page.total_items} 件 "
                  f"(ページ {page.page}/{page.total_pages})[/dim]")


def _display_result(res: Dict[str, Any], title: str) -> None:
    if res.get("ok"):
        ack = res.get("ack")
        console.print(Panel(f"保存しました: {ack.id if ack else ''}", title=title, border_style="green"))
    else:
        console.print(Panel(res.get("error") or "エラーが発生しました", title=title, border_style="red"))


# -----------------------
# histórico
# -----------------------

@app.command("history")
def cmd_history(
    search: str = typer.Option("", "--search", "-s", help="製品名・コード・伝票番号・納品先"),
    status: str = typer.Option(ALL, "--status", help="all | 出荷済み | 配送中 | 納品完了 | キャンセル (ou shipped, in-transit...)"),
    date_range: str = typer.Option(DEFAULTS.date_range, "--range", help="1month | 3months | 6months | 1year | all"),
    page: int = typer.Option(1, "--page", help="Página (limitada ao intervalo existente)"),
    page_size: int = typer.Option(DEFAULTS.page_size, "--page-size"),
    customer_name: str = typer.Option("", "--customer-name", help="Nome exibido como contraparte"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
):
    """Histórico de expedição."""
    view = _build_view(False, "", customer_name, search, status, date_range, page, page_size)
    snap = view.snapshot()
    if as_json:
        _print_json(_history_json(snap))
    else:
        _display_history(snap, "出荷履歴")


@app.command("customer-history")
def cmd_customer_history(
    customer_id: str = typer.Option("", "--customer-id"),
    customer_name: str = typer.Option("", "--customer-name"),
    search: str = typer.Option("", "--search", "-s"),
    status: str = typer.Option(ALL, "--status", help="all | 出荷済み | 配送中 | 納品完了 | 返品"),
    date_range: str = typer.Option(DEFAULTS.date_range, "--range"),
    page: int = typer.Option(1, "--page"),
    page_size: int = typer.Option(DEFAULTS.page_size, "--page-size"),
    as_json: bool = typer.Option(False, "--json"),
):
    """Histórico de expedição de um cliente (com preço médio)."""
    view = _build_view(True, customer_id, customer_name, search, status, date_range, page, page_size)
    snap = view.snapshot()
    if as_json:
        _print_json(_history_json(snap))
    else:
        _display_history(snap, "顧客別出荷履歴")


@app.command("export")
def cmd_export(
    path: str = typer.Argument(..., help="Caminho do CSV"),
    customer: bool = typer.Option(False, "--customer", help="Usa o histórico do cliente"),
    search: str = typer.Option("", "--search", "-s"),
    status: str = typer.Option(ALL, "--status"),
    date_range: str = typer.Option(DEFAULTS.date_range, "--range"),
):
    """Exporta o histórico filtrado (todas as páginas) para CSV."""
    view = _build_view(customer, "", "", search, status, date_range, 1, DEFAULTS.page_size)
    info = export_history_csv(view, path)
    typer.echo(f">> {info['linhas_exportadas']} linhas exportadas para {info['arquivo']}")


# -----------------------
# programação
# -----------------------

@app.command("schedule")
def cmd_schedule(
    week_of: Optional[str] = typer.Option(None, "--week-of", help="YYYY-MM-DD (qualquer dia da semana)"),
    search: str = typer.Option("", "--search", "-s", help="製品・顧客"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Semente das quantidades simuladas"),
):
    """Programação semanal de expedição (produto / cliente / destino)."""
    anchor = date.fromisoformat(week_of) if week_of else None
    view = ShipmentScheduleView(anchor=anchor, seed=seed)
    view.set_search(search)
    data = view.table()
    if data["empty"]:
        console.print(Panel("該当する製品がありません", title="出荷予定", border_style="yellow"))
        return

    table = Table(title=f"出荷予定 {view.week_start} - {view.week_end}", box=box.ROUNDED)
    table.add_column("製品 / 出荷顧客 / 出荷先")
    table.add_column("単価", justify="right")
    for d in data["dates"]:
        table.add_column(d[5:].replace("-", "/"), justify="right")
    table.add_column("合計", justify="right")
    for row in data["rows"]:
        if row["level"] == "product":
            label = f"[bold]{row['label']}[/bold]"
        elif row["level"] == "customer":
            label = f"  {row['label']}"
        else:
            label = f"    [dim]{row['label']}[/dim]"
        price = _yen(row["unit_price"]) if row["unit_price"] is not None else ""
        table.add_row(label, price, *[_num(v) for v in row["values"]], _num(row["total"]))
    console.print(table)


# -----------------------
# cadastros
# -----------------------

master_app = typer.Typer(help="Cadastros (製品・資材・サプライヤー)")
app.add_typer(master_app, name="master")


@master_app.command("product")
def cmd_master_product(
    code: str = typer.Option("", "--code", help="Vazio + --generate-code gera PROD-xxxxxx"),
    name: str = typer.Option("", "--name"),
    category: str = typer.Option("", "--category", help="飲料 | 食品 | 日用品 | 化粧品 | 医薬品 | その他"),
    unit: str = typer.Option("個", "--unit"),
    standard_price: str = typer.Option("0", "--standard-price"),
    description: str = typer.Option("", "--description"),
    status: str = typer.Option("アクティブ", "--status"),
    generate_code: bool = typer.Option(False, "--generate-code"),
):
    """Cadastra um produto."""
    res = run_master_submit("product", {
        "code": code, "name": name, "category": category, "unit": unit,
        "standard_price": standard_price, "description": description, "status": status,
    }, generate_code=generate_code)
    _display_result(res, "製品新規追加")
    if not res["ok"]:
        raise typer.Exit(code=1)


@master_app.command("material")
def cmd_master_material(
    code: str = typer.Option("", "--code"),
    name: str = typer.Option("", "--name"),
    category: str = typer.Option("", "--category", help="原材料 | 部品 | 工具 | パーツ | 消耗品 | その他"),
    unit: str = typer.Option("kg", "--unit"),
    standard_cost: str = typer.Option("0", "--standard-cost"),
    supplier: str = typer.Option("", "--supplier"),
    lead_time: str = typer.Option("7", "--lead-time", help="Dias"),
    location: str = typer.Option("", "--location"),
    description: str = typer.Option("", "--description"),
    status: str = typer.Option("アクティブ", "--status"),
    generate_code: bool = typer.Option(False, "--generate-code"),
):
    """Cadastra um material."""
    res = run_master_submit("material", {
        "code": code, "name": name, "category": category, "unit": unit,
        "standard_cost": standard_cost, "supplier": supplier, "lead_time": lead_time,
        "location": location, "description": description, "status": status,
    }, generate_code=generate_code)
    _display_result(res, "資材新規追加")
    if not res["ok"]:
        raise typer.Exit(code=1)


@master_app.command("supplier")
def cmd_master_supplier(
    code: str = typer.Option("", "--code"),
    name: str = typer.Option("", "--name"),
    contact_person: str = typer.Option("", "--contact-person"),
    phone: str = typer.Option("", "--phone"),
    email: str = typer.Option("", "--email"),
    address: str = typer.Option("", "--address"),
    payment_terms: str = typer.Option("", "--payment-terms"),
    material: List[str] = typer.Option([], "--material", help="Pode repetir"),
    notes: str = typer.Option("", "--notes"),
    status: str = typer.Option("アクティブ", "--status"),
    generate_code: bool = typer.Option(False, "--generate-code"),
):
    """Cadastra um fornecedor."""
    res = run_master_submit("supplier", {
        "code": code, "name": name, "contact_person": contact_person, "phone": phone,
        "email": email, "address": address, "payment_terms": payment_terms,
        "materials": list(material), "notes": notes, "status": status,
    }, generate_code=generate_code)
    _display_result(res, "サプライヤー新規追加")
    if not res["ok"]:
        raise typer.Exit(code=1)


@master_app.command("list")
def cmd_master_list(
    kind: str = typer.Argument("product", help="product | material | supplier"),
    search: str = typer.Option("", "--search", "-s"),
):
    """Lista os cadastros de um tipo."""
    try:
        repo = MasterDataRepo(kind)
    except ValueError as e:
        typer.echo(str(e))
        raise typer.Exit(code=1)
    rows = repo.list(search)
    if not rows:
        console.print(Panel("Nenhum dado encontrado", title=kind, border_style="yellow"))
        return
    table = Table(title=f"Cadastros: {kind}", box=box.ROUNDED)
    cols = ["code", "name", "category", "unit", "status"]
    for col in cols:
        table.add_column(col)
    for r in rows:
        data = as_dict(r)
        table.add_row(*[str(data.get(c, "")) for c in cols])
    console.print(table)


# -----------------------
# paletes
# -----------------------

pallet_app = typer.Typer(help="Pedido de retirada de paletes (JPR / SPR)")
app.add_typer(pallet_app, name="pallet")


def _pallet(variant: str, item: List[str], urgency: str, notes: str, send: bool) -> None:
    try:
        items = [parse_pallet_item(txt) for txt in item]
    except ValueError as e:
        typer.echo(f"Item inválido: {e}")
        raise typer.Exit(code=1)
    try:
        res = run_pallet_request(variant, items, values={"urgency": urgency, "notes": notes or None}, send=send)
    except (ValueError, FieldUpdateError) as e:
        typer.echo(f"Pedido inválido: {e}")
        raise typer.Exit(code=1)
    title = "JPRパレット引取手配依頼" if variant == "jpr" else "SPRパレット引取手配依頼書"
    console.print(Panel(res["text"], title=title, border_style="cyan"))
    if res["ok"]:
        msg = f"保存しました ({res['ack'].id}) 合計数量: {res['total_quantity']}個"
        if res["email_sent"]:
            msg += " / メールを送信しました"
        console.print(f"[green]{msg}[/green]")
    else:
        console.print(f"[red]{res['error']}[/red]")
        raise typer.Exit(code=1)


@pallet_app.command("jpr")
def cmd_pallet_jpr(
    item: List[str] = typer.Option([], "--item", help="TIPO:QTD[:AAAA-MM-DD]; TIPO pode ser 1-4"),
    urgency: str = typer.Option("normal", "--urgency", help="urgent | normal | low"),
    notes: str = typer.Option("", "--notes"),
    send: bool = typer.Option(False, "--send", help="Envia o e-mail (simulado)"),
):
    """Pedido JPR (gera o e-mail)."""
    _pallet("jpr", item, urgency, notes, send)


@pallet_app.command("spr")
def cmd_pallet_spr(
    item: List[str] = typer.Option([], "--item", help="TIPO:QTD[:AAAA-MM-DD]; TIPO pode ser 1-4"),
    urgency: str = typer.Option("normal", "--urgency", help="urgent | normal | low"),
    notes: str = typer.Option("", "--notes"),
):
    """Pedido SPR (documento para impressão)."""
    _pallet("spr", item, urgency, notes, send=False)


# -----------------------
# TUI
# -----------------------

@app.command("tui")
def cmd_tui():
    """
    Inicia a Interface Terminal (TUI) interativa do sistema.
    """
    try:
        from backoffice.adapters.tui import main as tui_main
    except ImportError:
        typer.echo("❌ TUI não disponível. Instale: pip install textual")
        raise typer.Exit(1)
    try:
        tui_main()
    except KeyboardInterrupt:
        typer.echo("\n👋 Saindo do TUI...")
        raise typer.Exit(0)


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
