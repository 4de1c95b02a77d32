"""Unit tests for customer_repo."""

import uuid

import pytest

from app.core.errors import DataFetchError
from app.repos.customer_repo import fetch_customers, fetch_filtered_customers
from tests.fakes import compile_pg, executed_statement, make_db, make_result, make_row


class TestFetchCustomers:
    @pytest.mark.anyio
    async def test_returns_id_and_name(self):
        ids = [uuid.uuid4(), uuid.uuid4()]
        db = make_db(
            make_result([make_row(id=ids[0], name="Amy Burns"), make_row(id=ids[1], name="Lee")])
        )

        result = await fetch_customers(db)

        assert result == [
            {"id": ids[0], "name": "Amy Burns"},
            {"id": ids[1], "name": "Lee"},
        ]

    @pytest.mark.anyio
    async def test_orders_by_name(self):
        db = make_db(make_result([]))

        await fetch_customers(db)

        sql = str(compile_pg(executed_statement(db)))
        assert "ORDER BY customers.name ASC" in sql

    @pytest.mark.anyio
    async def test_empty_table_returns_empty_list(self):
        db = make_db(make_result([]))

        assert await fetch_customers(db) == []

    @pytest.mark.anyio
    async def test_storage_failure_raises_fixed_message(self):
        db = make_db(RuntimeError("permission denied for table customers"))

        with pytest.raises(DataFetchError) as exc_info:
            await fetch_customers(db)

        assert exc_info.value.message == "Failed to fetch all customers."
        assert "permission denied" not in exc_info.value.message


class TestFetchFilteredCustomers:
    @pytest.mark.anyio
    async def test_formats_totals(self):
        customer_id = uuid.uuid4()
        row = make_row(
            id=customer_id,
            name="Jane Smith",
            email="jane@smith.com",
            image_url="/customers/jane.png",
            total_invoices=3,
            total_pending=20348,
            total_paid=500,
        )
        db = make_db(make_result([row]))

        result = await fetch_filtered_customers(db, "smith")

        assert result == [
            {
                "id": customer_id,
                "name": "Jane Smith",
                "email": "jane@smith.com",
                "image_url": "/customers/jane.png",
                "total_invoices": 3,
                "total_pending": "$203.48",
                "total_paid": "$5.00",
            }
        ]

    @pytest.mark.anyio
    async def test_customer_without_invoices_reports_zero(self):
        row = make_row(
            id=uuid.uuid4(),
            name="Jane Doe",
            email="jane@doe.com",
            image_url=None,
            total_invoices=0,
            total_pending=None,
            total_paid=None,
        )
        db = make_db(make_result([row]))

        [customer] = await fetch_filtered_customers(db, "doe")

        assert customer["total_invoices"] == 0
        assert customer["total_pending"] == "$0.00"
        assert customer["total_paid"] == "$0.00"

    @pytest.mark.anyio
    async def test_query_keeps_customers_without_invoices(self):
        db = make_db(make_result([]))

        await fetch_filtered_customers(db, "")

        sql = str(compile_pg(executed_statement(db)))
        assert "LEFT OUTER JOIN invoices" in sql
        assert "GROUP BY customers.id" in sql
        assert "ORDER BY customers.name ASC" in sql

    @pytest.mark.anyio
    async def test_search_is_bound_and_limited_to_name_and_email(self):
        db = make_db(make_result([]))

        await fetch_filtered_customers(db, "o'brien")

        compiled = compile_pg(executed_statement(db))
        where = str(compiled).split("WHERE", 1)[1].split("GROUP BY", 1)[0]
        assert "customers.name" in where
        assert "customers.email" in where
        assert "invoices" not in where
        assert "o'brien" not in str(compiled)
        assert list(compiled.params.values()).count("o'brien") == 2

    @pytest.mark.anyio
    async def test_storage_failure_raises_fixed_message(self):
        db = make_db(RuntimeError("column customers.foo does not exist"))

        with pytest.raises(DataFetchError) as exc_info:
            await fetch_filtered_customers(db, "smith")

        assert exc_info.value.message == "Failed to fetch customer table."
        assert exc_info.value.details == {"operation": "fetch_filtered_customers"}
