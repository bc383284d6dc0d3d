"""
Order board — staff status saves with local refusals and rollback.
"""

from kungfu import Ok, Error

from storefront import Notice
from storefront import status as S
from storefront.normalize import Order, order_display_number
from examples._infra import FakeShop, banner, make_api, run


def toast(notice: Notice) -> None:
    print(f"  [{notice.kind.value}] {notice.message}")


async def ask(order: Order) -> bool:
    print(f"  ? {order_display_number(order)} is unpaid, mark delivered anyway? yes")
    return True


async def main() -> None:
    board = S.OrderBoard(make_api(FakeShop()), on_notice=toast)
    await board.load()

    banner("Board")
    for column, orders in board.group_by_board_status().items():
        numbers = ", ".join(order_display_number(order) for order in orders) or "-"
        print(f"  {column.value:<18} {numbers}")

    banner("Allowed moves")
    for order in board.orders:
        targets = [target.value for target in S.allowed_targets(order)]
        print(f"  {order_display_number(order)} ({S.payment_badge(order).name}): {targets or 'read-only'}")

    banner("Saves")
    attempts = [
        ("ord_1", S.BoardStatus.PREPARING, None),
        ("ord_1", S.BoardStatus.DELIVERED, None),  # skips steps
        ("ord_3", S.BoardStatus.RECEIVED, None),  # customer cancelled
        ("ord_2", S.BoardStatus.DELIVERED, ask),  # backend fails, rolls back
    ]
    for order_id, target, confirm in attempts:
        match await board.save_status(order_id, target, confirm=confirm):
            case Ok(order):
                print(f"  ✓ {order_id} -> {order.status}")
            case Error(e):
                print(f"  ✗ {order_id} -> {target.value}: {e.kind.name}, now {board.get(order_id).status}")


if __name__ == "__main__":
    run(main)
