"""Tortoise models for the three relations the reports read.

The tables are created by schema.sql, not by Tortoise.generate_schemas, so
every field maps onto the PascalCase column names through source_field."""

from tortoise import fields, models


class Client(models.Model):
    client_id = fields.IntField(primary_key=True, source_field="ClientId")
    name = fields.CharField(max_length=100, source_field="Name")
    last_name = fields.CharField(max_length=100, source_field="LastName")
    email = fields.CharField(max_length=255, null=True, source_field="Email")
    phone = fields.CharField(max_length=50, null=True, source_field="Phone")

    orders: fields.ReverseRelation["Order"]

    def __str__(self):
        return f"{self.name} {self.last_name}"

    class Meta:
        table = "Client"


class Product(models.Model):
    product_id = fields.IntField(primary_key=True, source_field="ProductId")
    name = fields.CharField(max_length=255, source_field="Name")
    reference = fields.CharField(max_length=100, unique=True, source_field="Reference")

    orders: fields.ReverseRelation["Order"]

    def __str__(self):
        return f"{self.name} ({self.reference})"

    class Meta:
        table = "Product"


class Order(models.Model):
    order_id = fields.IntField(primary_key=True, source_field="OrderId")
    client: fields.ForeignKeyRelation[Client] = fields.ForeignKeyField(
        "models.Client", related_name="orders", source_field="ClientId"
    )
    product: fields.ForeignKeyRelation[Product] = fields.ForeignKeyField(
        "models.Product", related_name="orders", source_field="ProductId"
    )
    quantity = fields.IntField(source_field="Quantity")
    total = fields.FloatField(source_field="Total")

    def __str__(self):
        return f"Order {self.order_id}: {self.quantity} x product {self.product_id}"

    class Meta:
        table = "Orders"
