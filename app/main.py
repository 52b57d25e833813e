import sys
import os
import logging
import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from farmcart.config import load_settings, configure_logging
from farmcart.domain import Session
from farmcart.formatting import (
    format_currency,
    format_quantity,
    format_unit_price,
)
from farmcart.service import (
    CatalogService,
    CartService,
    OrderService,
    by_badge,
    by_name,
    in_stock,
)
from farmcart.store import JsonFileStore, load_catalog
from farmcart.transforms import cart_subtotal
from Orders_Service.report import orders_summary, status_progress

BADGES = {
    "organic": "🌿 Organic",
    "limitedFertilizer": "⬇️ Low Fertilizer",
    "diabeticFriendly": "✅ Diabetic-Friendly",
}

settings = load_settings()
configure_logging(settings)
logger = logging.getLogger("farmcart.app")


# ============ Кэширование данных ============
@st.cache_data
def get_catalog():
    return load_catalog(settings.catalog_path)


@st.cache_resource
def get_store():
    return JsonFileStore(settings.data_dir)


def money(amount) -> str:
    return format_currency(amount, settings.currency)


# ============ Инициализация ============
st.set_page_config(
    page_title="Farm Cart",
    page_icon="🧺",
    layout="wide",
    initial_sidebar_state="expanded",
)

catalog = CatalogService(get_catalog())
store = get_store()
orders_service = OrderService(store)

if "session" not in st.session_state:
    st.session_state.session = Session()


def cart_service() -> CartService:
    """Одна CartService на сессию; при смене пользователя корзина перечитывается"""
    session = st.session_state.session
    svc = st.session_state.get("cart_service")
    if svc is None or svc.session != session:
        svc = CartService(store, session)
        svc.refresh()
        st.session_state.cart_service = svc
    return svc


# ============ HEADER ============
st.title("🧺 Farm Cart")
st.caption("Fresh produce straight from the farm")

# ============ SIDEBAR - Навигация ============
with st.sidebar:
    st.header("📂 Navigation")
    page = st.radio(
        "Section:",
        ["👤 Sign in", "🥕 Products", "🛒 Cart", "📦 Orders"],
        label_visibility="collapsed",
    )

    st.divider()
    session = st.session_state.session
    if session.is_authenticated:
        st.success(f"Signed in as **{session.user_id}**")
        lines = len(cart_service().cart.items)
        st.caption(f"🛒 {lines} line(s) in cart")
    else:
        st.info("Browsing as guest")


# ============ PAGE: SIGN IN ============
if page == "👤 Sign in":
    st.header("👤 Sign in")
    user_id = st.text_input("Customer ID", st.session_state.session.user_id or "")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Sign in", type="primary"):
            st.session_state.session = Session(user_id=user_id.strip() or None)
            logger.info("Session started for %s", st.session_state.session.user_id)
            st.rerun()
    with col2:
        if st.button("Sign out"):
            logger.info("Session ended for %s", st.session_state.session.user_id)
            st.session_state.session = Session()
            st.rerun()


# ============ PAGE: PRODUCTS ============
elif page == "🥕 Products":
    st.header("🥕 Products")

    col1, col2, col3 = st.columns([3, 2, 1])
    with col1:
        search = st.text_input("🔍 Search", "", key="catalog_search")
    with col2:
        badge = st.selectbox("🏷️ Badge", ["All"] + list(BADGES), key="catalog_badge")
    with col3:
        only_stock = st.checkbox("In stock", key="catalog_stock")

    filters = [by_name(search)]
    if badge != "All":
        filters.append(by_badge(badge))
    if only_stock:
        filters.append(in_stock())

    products = catalog.filter_products(*filters)
    st.info(f"Found **{len(products)}** product(s)")

    for p in products:
        view = catalog.view(p)
        with st.container():
            cols = st.columns([4, 2, 2, 2])
            with cols[0]:
                st.markdown(f"**{p.name}**")
                labels = [BADGES.get(b, b) for b in p.badges]
                st.caption(" · ".join(labels + [f"Stock: {view.available_label}"]))
            with cols[1]:
                option = st.selectbox(
                    "Quantity",
                    view.options,
                    format_func=lambda o: o.label,
                    key=f"qty_{p.id}",
                    label_visibility="collapsed",
                )
            with cols[2]:
                st.write(money(view.price_for(option.value)))
                st.caption(f"({format_unit_price(view.quote, settings.currency)})")
            with cols[3]:
                allowed = view.can_add(option.value)
                help_text = None if allowed else f"Only {view.available_label} available"
                if st.button("➕ Add", key=f"add_{p.id}", disabled=not allowed, help=help_text):
                    svc = cart_service()
                    svc.add(p, option.value)
                    if svc.error:
                        st.error(f"❌ {svc.error}")
                    else:
                        st.toast(f"✅ {p.name} added to cart")
            st.divider()


# ============ PAGE: CART ============
elif page == "🛒 Cart":
    st.header("🛒 Your Shopping Cart")

    svc = cart_service()
    cart = svc.cart

    if not st.session_state.session.is_authenticated:
        st.warning("Sign in to use the cart.")
    elif not cart.items:
        st.info("🛍️ Your cart is empty. Add some fresh produce from the products page!")
    else:
        for line in cart.items:
            key = f"{line.product_id}_{line.units_display}"
            cols = st.columns([4, 1, 2, 1, 2, 1])
            with cols[0]:
                st.write(f"**{line.name or line.product_id}**")
                st.caption(f"{money(line.unit_price)} per unit · {line.units_display}")
            with cols[1]:
                if st.button("➖", key=f"dec_{key}"):
                    svc.decrement(line.product_id, line.units_display)
                    st.rerun()
            with cols[2]:
                st.write(format_quantity(line.quantity, line.units_display))
            with cols[3]:
                if st.button("➕", key=f"inc_{key}"):
                    svc.increment(line.product_id, line.units_display)
                    st.rerun()
            with cols[4]:
                st.write(f"**{money(line.total_price)}**")
            with cols[5]:
                if st.button("🗑️", key=f"rm_{key}"):
                    svc.remove(line.product_id, line.units_display)
                    st.rerun()

        st.divider()
        subtotal = cart_subtotal(cart)
        st.markdown(f"### 💰 Order total: **{money(subtotal)}**")
        st.caption("Shipping: Free")

        if st.button("✅ Checkout", type="primary", use_container_width=True):
            svc.checkout().fold(
                lambda err: st.error(f"❌ {err['error']}"),
                lambda order: st.success(
                    f"🎉 Order placed! Total: {money(order.total)}"
                ),
            )


# ============ PAGE: ORDERS ============
elif page == "📦 Orders":
    st.header("📦 My Orders")

    session = st.session_state.session
    if not session.is_authenticated:
        st.warning("Sign in to see your orders.")
    else:
        my_orders = orders_service.orders_for(session.user_id)
        if not my_orders:
            st.info("No orders placed yet.")
        else:
            summary = orders_summary(my_orders)
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("🧾 Orders", summary["total_orders"])
            with col2:
                st.metric("💰 Spent", money(summary["total_spent"]))
            with col3:
                st.metric("📊 Average", money(summary["average_order_value"]))

            st.divider()

            for order in my_orders:
                with st.container():
                    st.markdown(f"**Order #{order.id[:8].upper()}** · {order.created_at[:10]}")
                    for line in order.items:
                        st.write(
                            f"• {line.name} ({format_quantity(line.quantity, line.units_display)})"
                            f" - {money(line.total_price)}"
                        )
                    steps = status_progress(order)
                    st.write(
                        " → ".join(
                            f"**{s['status']}**" if s["current"] else
                            (f"✓ {s['status']}" if s["done"] else s["status"])
                            for s in steps
                        )
                    )
                    st.caption(f"Total: {money(order.total)}")
                    if st.button("Advance status (demo)", key=f"adv_{order.id}"):
                        result = orders_service.advance(order.id)
                        if result.is_left:
                            st.warning(result.error)
                        else:
                            st.rerun()
                    st.divider()
