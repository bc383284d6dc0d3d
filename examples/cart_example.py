"""
Cart session — bootstrap, mutate, reconcile, check out.

Session state survives restarts through a SQLAlchemy-backed store.
"""

from kungfu import Ok, Error

from storefront import Notice, ViewScope
from storefront.cart import CartSession
from storefront.pricing import PricingPreferences
from storefront.storage import SQLAlchemyKeyValueStore
from examples._infra import CONFIG, FakeShop, banner, make_api, run


def toast(notice: Notice) -> None:
    print(f"  [{notice.kind.value}] {notice.message}")


async def main() -> None:
    store = await SQLAlchemyKeyValueStore.from_url(CONFIG.storage_url)

    shop = FakeShop()
    api = make_api(shop)
    preferences = PricingPreferences(store)
    await preferences.load()

    async with ViewScope() as scope:
        session = CartSession(api, store, on_notice=toast, scope=scope)

        banner("Add to cart (bootstraps the session)")
        await session.add_item("var_beans", 2)
        await session.add_item("var_mug", 3)  # only 2 in stock
        print(f"  Cart {session.identity.cart_id}: {session.cart.item_count} items")

        banner("Quantity edits")
        beans = session.cart.find_line("var_beans")
        await session.update_item_quantity(beans.id, 40)  # clamped to stock
        mug = session.cart.find_line("var_mug")
        await session.update_item_quantity(mug.id, 0)  # removes the line

        for line in session.cart.items:
            shown = session.display_line_total(line, preferences)
            print(f"  {line.name} x{line.quantity}: {shown:.2f} ({preferences.display_mode.name})")

        banner("Restart: the stored pair restores the same cart")
        restored = CartSession(api, store, on_notice=toast, scope=scope)
        match await restored.bootstrap():
            case Ok(cart):
                print(f"  Restored {cart.cart_id} with {cart.item_count} items")
            case Error(e):
                print(f"  ✗ {e.message}")

        banner("Checkout")
        match await restored.checkout({"email": "ada@example.se", "paymentMode": "CARD"}):
            case Ok(result):
                print(f"  ✓ Order {result.order_id}, pay at {result.payment_url}")
            case Error(e):
                print(f"  ✗ {e.message}")

        banner("Closed cart refuses mutations")
        await restored.add_item("var_beans")
        await restored.start_new_cart()
        print(f"  New cart: {restored.identity.cart_id}")

    await store.aclose()


if __name__ == "__main__":
    run(main)
