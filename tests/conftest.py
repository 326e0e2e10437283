"""Shared fixtures: small schemas covering the key/column shapes."""

import json

import pytest

from dtgen.codegen.core.config import GeneratorConfig
from dtgen.codegen.core.schema import Column, Database, build_table


@pytest.fixture
def customer_table():
    """Identity primary key, two text columns, no foreign keys."""
    columns = [
        Column("Id", "int", is_identity=True),
        Column("Name", "nvarchar", length=50),
        Column("Email", "nvarchar", length=100),
    ]
    return build_table("Customer", columns, primary_keys=["Id"])


@pytest.fixture
def order_line_table():
    """Two single-column foreign-key groups."""
    columns = [
        Column("OrderLineID", "int", is_identity=True),
        Column("OrderID", "int"),
        Column("ProductID", "int"),
        Column("Quantity", "smallint"),
        Column("UnitPrice", "money"),
    ]
    return build_table(
        "OrderLine",
        columns,
        primary_keys=["OrderLineID"],
        foreign_keys={
            "FK_OrderLine_Order": ["OrderID"],
            "FK_OrderLine_Product": ["ProductID"],
        },
    )


@pytest.fixture
def link_table():
    """Every column is a primary key and its own foreign-key group."""
    columns = [Column("CustomerID", "int"), Column("TagID", "int")]
    return build_table(
        "CustomerTag",
        columns,
        primary_keys=["CustomerID", "TagID"],
        foreign_keys={"FK_CustomerTag_Customer": ["CustomerID"], "FK_CustomerTag_Tag": ["TagID"]},
    )


@pytest.fixture
def document_table():
    """Row-unique-identifier column without an identity column."""
    columns = [
        Column("DocumentGuid", "uniqueidentifier", is_rowguid=True),
        Column("Title", "varchar", length=-1),
        Column("Size", "decimal", precision=10, scale=2),
    ]
    return build_table("Document", columns, primary_keys=["DocumentGuid"])


@pytest.fixture
def database(customer_table, order_line_table):
    return Database("Shop", (customer_table, order_line_table))


@pytest.fixture
def config():
    return GeneratorConfig()


@pytest.fixture
def schema_dict():
    return {
        "database": "Shop",
        "tables": [
            {
                "name": "Customer",
                "columns": [
                    {"name": "Id", "type": "int", "identity": True},
                    {"name": "Name", "type": "nvarchar", "length": 50},
                    {"name": "Email", "type": "nvarchar", "length": 100, "nullable": True},
                ],
                "primary_keys": ["Id"],
            },
            {
                "name": "OrderLine",
                "columns": [
                    {"name": "OrderLineID", "type": "int", "identity": True},
                    {"name": "OrderID", "type": "int"},
                    {"name": "ProductID", "type": "int"},
                    {"name": "Quantity", "type": "smallint"},
                    {"name": "UnitPrice", "type": "money"},
                ],
                "primary_keys": ["OrderLineID"],
                "foreign_keys": {
                    "FK_OrderLine_Order": ["OrderID"],
                    "FK_OrderLine_Product": ["ProductID"],
                },
            },
        ],
    }


@pytest.fixture
def schema_file(tmp_path, schema_dict):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(schema_dict), encoding="utf-8")
    return path
