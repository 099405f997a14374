import pytest_asyncio

from sales_reports.features.store.models import Client, Order, Product


@pytest_asyncio.fixture
async def client_factory(ready_store):
    """A factory to create clients in the initialized test store."""

    async def _factory(name: str, last_name: str = "Pérez", email: str | None = None) -> Client:
        return await Client.create(name=name, last_name=last_name, email=email)

    return _factory


@pytest_asyncio.fixture
async def product_factory(ready_store):
    """A factory to create products in the initialized test store."""

    async def _factory(name: str, reference: str) -> Product:
        return await Product.create(name=name, reference=reference)

    return _factory


@pytest_asyncio.fixture
async def order_factory(ready_store):
    """A factory to create orders in the initialized test store."""

    async def _factory(client: Client, product: Product, quantity: int = 1, total: float = 0.0) -> Order:
        return await Order.create(client=client, product=product, quantity=quantity, total=total)

    return _factory


@pytest_asyncio.fixture
async def sample_sales(client_factory, product_factory, order_factory):
    """
    Two clients and three products:

    - Ana buys 2 + 3 Televisores for 1000 + 1500.
    - Luis buys 1 Televisor for 800 and 4 Neveras for 20000.
    - Nobody buys the Lavadora.
    """
    ana = await client_factory("Ana", "Gómez")
    luis = await client_factory("Luis", "Martínez")
    tv = await product_factory("Televisor", "TV-001")
    fridge = await product_factory("Nevera", "NV-002")
    washer = await product_factory("Lavadora", "LV-003")

    await order_factory(ana, tv, quantity=2, total=1000)
    await order_factory(ana, tv, quantity=3, total=1500)
    await order_factory(luis, tv, quantity=1, total=800)
    await order_factory(luis, fridge, quantity=4, total=20000)

    return {"ana": ana, "luis": luis, "tv": tv, "fridge": fridge, "washer": washer}
