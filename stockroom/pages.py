"""
Stockroom: HTML pages

A small Bootstrap front end over the same operations as the JSON API.
The forms post to /add-product and /create-order as
application/x-www-form-urlencoded.
"""

from html import escape

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from . import inventory, order
from .dependencies import get_session

BOOTSTRAP_CSS = "https://cdn.jsdelivr.net/npm/bootstrap@5.3.0-alpha3/dist/css/bootstrap.min.css"

router = APIRouter(default_response_class=HTMLResponse)


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <link href="{BOOTSTRAP_CSS}" rel="stylesheet">
</head>
<body>
    <nav class="navbar navbar-expand-lg navbar-light bg-light">
        <div class="container-fluid">
            <a class="navbar-brand" href="/">Inventory Management</a>
        </div>
    </nav>
    <div class="container mt-4">
{body}
    </div>
</body>
</html>
"""


def _table(headers: list[str], rows: list[list]) -> str:
    head = "".join(f"<th>{escape(h)}</th>" for h in headers)
    body = "\n".join(
        "<tr>" + "".join(f"<td>{escape(str(cell))}</td>" for cell in row) + "</tr>"
        for row in rows
    )
    return f"""        <table class="table table-striped">
            <thead><tr>{head}</tr></thead>
            <tbody>
{body}
            </tbody>
        </table>"""


def _card(title: str, text: str, href: str) -> str:
    return f"""            <div class="col-md-3">
                <div class="card">
                    <div class="card-body">
                        <h5 class="card-title">{title}</h5>
                        <p class="card-text">{text}</p>
                        <a href="{href}" class="btn btn-primary">{title}</a>
                    </div>
                </div>
            </div>"""


def _field(label: str, name: str, kind: str = "text", step: str | None = None) -> str:
    step_attr = f' step="{step}"' if step else ""
    return f"""            <div class="mb-3">
                <label for="{name}" class="form-label">{label}</label>
                <input type="{kind}"{step_attr} class="form-control" id="{name}" name="{name}" required>
            </div>"""


def _form(title: str, action: str, fields: list[str]) -> str:
    inner = "\n".join(fields)
    return f"""        <h1>{title}</h1>
        <form action="{action}" method="POST">
{inner}
            <button type="submit" class="btn btn-primary">{title}</button>
        </form>"""


@router.get("/")
async def index():
    cards = "\n".join([
        _card("Add Product", "Add a new product to the inventory.", "/add-product-form"),
        _card("Create Order", "Place a new order for a product.", "/create-order-form"),
        _card("View Products", "Check the list of available products.", "/view-products"),
        _card("View Orders", "Check the list of all orders.", "/view-orders"),
    ])
    body = f"""        <h1>Welcome to the Inventory Management System</h1>
        <p>Use the options below to navigate and interact with the system.</p>
        <div class="row">
{cards}
        </div>"""
    return _page("Inventory Management System", body)


@router.get("/add-product-form")
async def add_product_form():
    return _page("Add Product", _form("Add Product", "/add-product", [
        _field("Product ID", "id"),
        _field("Product Name", "name"),
        _field("Stock", "stock", "number"),
        _field("Price", "price", "number", step="0.01"),
    ]))


@router.get("/create-order-form")
async def create_order_form():
    return _page("Create Order", _form("Create Order", "/create-order", [
        _field("Product ID", "product_id"),
        _field("Quantity", "quantity", "number"),
    ]))


@router.get("/view-products")
async def view_products(session: AsyncSession = Depends(get_session)):
    products = await inventory.list_products(session)
    rows = [[p.id, p.name, p.stock, p.price] for p in products]
    return _page("View Products", "        <h1>Product List</h1>\n" + _table(
        ["ID", "Name", "Stock", "Price"], rows,
    ))


@router.get("/view-orders")
async def view_orders(session: AsyncSession = Depends(get_session)):
    orders = await order.list_orders(session)
    rows = [[o.id, o.product_id, o.quantity, o.total, o.status] for o in orders]
    return _page("View Orders", "        <h1>Order List</h1>\n" + _table(
        ["Order ID", "Product ID", "Quantity", "Total", "Status"], rows,
    ))
