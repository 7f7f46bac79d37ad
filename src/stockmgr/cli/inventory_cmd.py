#!/usr/bin/env python3
"""
在庫・買い物リスト管理 CLI

Usage:
    stockmgr list [--category all|food|goods]
    stockmgr shopping
    stockmgr add --name 牛乳 [--category food] [--quantity 1] [--threshold 1] [--price 230]
    stockmgr edit ID [--name ...] [--category ...] [--quantity N] [--threshold N] [--price N]
    stockmgr delete ID [--yes]
    stockmgr adjust ID DELTA
    stockmgr reorder ID [ID ...]
    stockmgr check ID / uncheck ID
    stockmgr purchase [--yes]
    stockmgr view
    stockmgr scan IMAGE [--provider gemini|groq] [--yes]
"""

import argparse
import sys
from pathlib import Path

from stockmgr.config import load_settings
from stockmgr.inventory import (
    CheckedState,
    InvalidItemError,
    InventoryRepository,
    KeyValueDB,
    PreferencesStore,
    RecordStore,
    ReorderMismatchError,
    StorageError,
    estimated_cost,
    filter_by_category,
    is_low_stock,
    purchase_checked,
    shopping_list,
    shortfall,
    summarize,
)
from stockmgr.log import setup_logging
from stockmgr.vision import ClassifierError, confirm_prefill, get_provider, resolve_guess

CATEGORY_LABELS = {"food": "食品", "goods": "日用品"}


class App:
    """CLI から使うストア一式"""

    def __init__(self, settings):
        self.settings = settings
        self.kv = KeyValueDB(settings.db_path)
        self.store = RecordStore(InventoryRepository(self.kv))
        self.checked = CheckedState(self.kv)
        self.prefs = PreferencesStore(self.kv)

    def close(self):
        self.kv.close()


def _yen(value: int) -> str:
    return f"¥{value:,}"


def _confirm(message: str, assume_yes: bool = False) -> bool:
    if assume_yes:
        return True
    try:
        answer = input(f"{message} [y/N]: ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


def _print_stats(store: RecordStore):
    stats = summarize(store.records)
    print(f"在庫総額: {_yen(stats.total_inventory_value)}  "
          f"買い物予算: {_yen(stats.total_shopping_estimate)} ({stats.shopping_count} 品目)")


# ── 在庫一覧 ──

def cmd_list(app: App, args):
    """在庫一覧を表示"""
    items = filter_by_category(app.store.records, args.category)
    if not items:
        print("アイテムがありません")
        return

    compact = app.prefs.load().compact_view
    for item in items:
        mark = "!" if is_low_stock(item) else " "
        if compact:
            print(f"{mark} {item.name} x{item.quantity}")
            continue
        label = CATEGORY_LABELS.get(item.category, item.category)
        print(f"{mark} {item.name}  x{item.quantity}  [{label}]  単価: {_yen(item.price)}  適正: {item.threshold}")
        print(f"    id: {item.id}")

    print()
    _print_stats(app.store)


def cmd_shopping(app: App, args):
    """買い物リストを表示"""
    items = shopping_list(app.store.records)
    if not items:
        print("買うものはありません")
        return

    print(f"=== 買い物リスト ({len(items)} 品目) ===\n")
    for item in items:
        box = "[x]" if app.checked.is_checked(item.id) else "[ ]"
        print(f"{box} {item.name}  (id: {item.id})")
        print(f"    不足: {shortfall(item)}個 × {_yen(item.price)} = {_yen(estimated_cost(item))}")
    print()
    _print_stats(app.store)


# ── 登録・編集 ──

def cmd_add(app: App, args):
    """アイテムを登録"""
    record = app.store.create({
        "name": args.name,
        "category": args.category,
        "quantity": args.quantity,
        "threshold": args.threshold,
        "price": args.price,
    })
    print(f"登録しました: {record.name} (id: {record.id})")


def cmd_edit(app: App, args):
    """アイテムを編集"""
    patch = {
        key: getattr(args, key)
        for key in ("name", "category", "quantity", "threshold", "price")
        if getattr(args, key) is not None
    }
    record = app.store.update(args.id, patch)
    if record:
        print(f"更新しました: {record.name}")


def cmd_delete(app: App, args):
    """アイテムを削除"""
    record = app.store.get(args.id)
    if record is None:
        return
    if not _confirm(f"「{record.name}」を本当に削除しますか？", args.yes):
        print("キャンセルしました")
        return
    app.store.delete(args.id)
    print(f"削除しました: {record.name}")


def cmd_adjust(app: App, args):
    """在庫数を増減"""
    record = app.store.adjust_quantity(args.id, args.delta)
    if record:
        print(f"{record.name}: x{record.quantity}")


def cmd_reorder(app: App, args):
    """並び順を変更（全アイテムの ID を指定）"""
    app.store.replace_order(args.ids)
    print("並び順を更新しました")


# ── 買い物 ──

def cmd_check(app: App, args):
    if app.store.get(args.id) is None:
        return
    app.checked.set(args.id, args.command == "check")


def cmd_purchase(app: App, args):
    """チェックした商品を在庫に追加"""
    count = purchase_checked(
        app.store,
        app.checked,
        confirm=lambda: _confirm("チェックした商品を在庫に追加しますか？", args.yes),
    )
    print(f"{count} 品目を在庫に追加しました")


def cmd_view(app: App, args):
    """表示モード（コンパクト/詳細）を切り替え"""
    prefs = app.prefs.toggle_compact()
    print("表示モード: " + ("コンパクト" if prefs.compact_view else "詳細"))


# ── 画像から取り込み ──

def cmd_scan(app: App, args):
    """写真から商品を判定して取り込む"""
    provider_name = args.provider or app.settings.provider
    provider = get_provider(
        provider_name,
        model=app.settings.model_for(provider_name),
        timeout=app.settings.timeout,
    )
    image = Path(args.image).read_bytes()

    print(f"画像を解析中... ({provider.name})")
    guess = provider.classify(image, app.settings.credential_for(provider.name))
    label = CATEGORY_LABELS.get(guess.category, guess.category)
    print(f"判定結果: {guess.name} [{label}] {_yen(guess.price)}")

    result = resolve_guess(app.store, guess, quantity=args.quantity, threshold=args.threshold)
    if result.is_match:
        print(f"既存アイテム「{result.matched.name}」の在庫を1つ増やしました (x{result.matched.quantity})")
        return

    prefill = result.prefill
    print(f"未登録の商品です: {prefill.name} 在庫 {prefill.quantity} / 適正 {prefill.threshold}")
    if not _confirm("この内容で登録しますか？", args.yes):
        print("登録しませんでした")
        return
    record = confirm_prefill(app.store, prefill)
    print(f"登録しました: {record.name} (id: {record.id})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stockmgr", description="在庫・買い物リスト管理")
    parser.add_argument("--env", default=None, help=".envファイルのパス")
    subparsers = parser.add_subparsers(dest="command")

    p_list = subparsers.add_parser("list", help="在庫一覧を表示")
    p_list.add_argument("--category", default="all", choices=["all", "food", "goods"])

    subparsers.add_parser("shopping", help="買い物リストを表示")

    p_add = subparsers.add_parser("add", help="アイテムを登録")
    p_add.add_argument("--name", required=True)
    p_add.add_argument("--category", default="food", choices=["food", "goods"])
    p_add.add_argument("--quantity", type=int, default=1)
    p_add.add_argument("--threshold", type=int, default=1)
    p_add.add_argument("--price", type=int, default=0)

    p_edit = subparsers.add_parser("edit", help="アイテムを編集")
    p_edit.add_argument("id")
    p_edit.add_argument("--name")
    p_edit.add_argument("--category", choices=["food", "goods"])
    p_edit.add_argument("--quantity", type=int)
    p_edit.add_argument("--threshold", type=int)
    p_edit.add_argument("--price", type=int)

    p_delete = subparsers.add_parser("delete", help="アイテムを削除")
    p_delete.add_argument("id")
    p_delete.add_argument("--yes", action="store_true", help="確認しない")

    p_adjust = subparsers.add_parser("adjust", help="在庫数を増減")
    p_adjust.add_argument("id")
    p_adjust.add_argument("delta", type=int)

    p_reorder = subparsers.add_parser("reorder", help="並び順を変更")
    p_reorder.add_argument("ids", nargs="+")

    for name in ("check", "uncheck"):
        p = subparsers.add_parser(name, help="買い物リストのチェックを付ける/外す")
        p.add_argument("id")

    p_purchase = subparsers.add_parser("purchase", help="チェックした商品を在庫に追加")
    p_purchase.add_argument("--yes", action="store_true", help="確認しない")

    subparsers.add_parser("view", help="表示モードを切り替え")

    p_scan = subparsers.add_parser("scan", help="写真から商品を取り込む")
    p_scan.add_argument("image")
    p_scan.add_argument("--provider", help="gemini / groq (デフォルト: STOCKMGR_PROVIDER)")
    p_scan.add_argument("--quantity", type=int, default=1, help="新規登録時の在庫数")
    p_scan.add_argument("--threshold", type=int, default=1, help="新規登録時の適正数")
    p_scan.add_argument("--yes", action="store_true", help="確認せずに登録")

    return parser


COMMANDS = {
    "list": cmd_list,
    "shopping": cmd_shopping,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "adjust": cmd_adjust,
    "reorder": cmd_reorder,
    "check": cmd_check,
    "uncheck": cmd_check,
    "purchase": cmd_purchase,
    "view": cmd_view,
    "scan": cmd_scan,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return

    app = None
    try:
        settings = load_settings(args.env)
        setup_logging(settings.log_level)
        app = App(settings)
        handler(app, args)
    except ReorderMismatchError as e:
        print(f"並び順を更新できませんでした（全アイテムのIDを指定してください）: {e}", file=sys.stderr)
        sys.exit(1)
    except (InvalidItemError, ClassifierError, StorageError, OSError, ValueError) as e:
        print(f"エラー: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if app is not None:
            app.close()


if __name__ == "__main__":
    main()
