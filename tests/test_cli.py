"""End-to-end tests for the recordview CLI against a temporary SQLite database."""

import pytest

from recordview.cli.main import cli


@pytest.fixture
def invoke(cli_runner, temp_db_path):
    """Invoke the CLI against the temporary database."""

    def _invoke(*args, user="1", schema=None, input=None):
        options = ["--store", temp_db_path]
        if user is not None:
            options += ["--user", user]
        if schema is not None:
            options += ["--schema", schema]
        return cli_runner.invoke(cli, [*options, *args], input=input)

    return _invoke


@pytest.fixture
def seeded(invoke):
    """Three expenses for user 1 and one for user 2."""
    invoke("add", "--name", "Lunch", "--amount", "12.50", "--category", "Food", "--date", "2024-05-01")
    invoke("add", "--name", "Flight", "--amount", "300", "--category", "Travel", "--date", "2024-03-10")
    invoke("add", "--name", "Groceries", "--amount", "$45.25", "--category", "Food", "--date", "2024-04-02")
    invoke("add", "--name", "Hotel", "--amount", "120", "--category", "Travel", user="2")
    return invoke


def test_help_does_not_need_store(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Recordview" in result.output


class TestAdd:
    def test_add(self, invoke):
        result = invoke(
            "add", "--name", "Lunch", "--amount", "12.50", "--category", "Food", "--date", "2024-05-01"
        )
        assert result.exit_code == 0, result.output
        assert "Created expense 1: Lunch" in result.output

    def test_add_requires_user(self, invoke):
        result = invoke("add", "--name", "Lunch", "--amount", "5", user=None)
        assert result.exit_code == 1
        assert "Error: Cannot modify expense: user is not authenticated" in result.output

    def test_add_rejects_zero_amount(self, invoke):
        result = invoke("add", "--name", "Lunch", "--amount", "0")
        assert result.exit_code == 1
        assert "Amount must be non-zero" in result.output

    def test_add_rejects_bad_amount(self, invoke):
        result = invoke("add", "--name", "Lunch", "--amount", "lots")
        assert result.exit_code == 1
        assert "Invalid amount format" in result.output

    def test_add_rejects_bad_date(self, invoke):
        result = invoke("add", "--name", "Lunch", "--amount", "5", "--date", "not-a-date")
        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_add_rejects_empty_name(self, invoke):
        result = invoke("add", "--name", "  ", "--amount", "5")
        assert result.exit_code == 1
        assert "Name cannot be empty" in result.output

    def test_add_extra_fields(self, invoke):
        invoke("add", "--name", "Rent", "--amount", "900", "--field", "status=paid")
        result = invoke("show", "1")
        assert "status: paid" in result.output


class TestList:
    def test_list_default_sort_is_newest_first(self, seeded):
        result = seeded("list")
        assert result.exit_code == 0, result.output
        assert "Found 3 expenses:" in result.output
        output = result.output
        assert output.index("Lunch") < output.index("Groceries") < output.index("Flight")
        assert "Total: $357.75" in output
        assert "Total (all records)" not in output
        assert "Hotel" not in output

    def test_list_filter_shows_both_totals(self, seeded):
        result = seeded("list", "--filter", "category=Food")
        assert "Found 2 expenses:" in result.output
        assert "Flight" not in result.output
        assert "Total: $57.75" in result.output
        assert "Total (all records): $357.75" in result.output

    def test_list_search_is_case_insensitive(self, seeded):
        result = seeded("list", "--search", "  FLIGHT ")
        assert "Found 1 expenses:" in result.output
        assert "Flight" in result.output

    def test_list_sort_by_amount(self, seeded):
        output = seeded("list", "--sort", "amount_asc").output
        assert output.index("Lunch") < output.index("Groceries") < output.index("Flight")

    def test_list_verbose(self, seeded):
        result = seeded("list", "--verbose", "--filter", "category=Travel")
        assert "Expense ID: 2" in result.output
        assert "date: 10-03-2024" in result.output

    def test_list_other_user(self, seeded):
        result = seeded("list", user="2")
        assert "Found 1 expenses:" in result.output
        assert "Hotel" in result.output

    def test_list_without_user_is_empty(self, seeded):
        result = seeded("list", user=None)
        assert result.exit_code == 0
        assert "No expenses found." in result.output

    def test_list_bad_filter_option(self, seeded):
        result = seeded("list", "--filter", "category")
        assert result.exit_code == 2
        assert "Expected KEY=VALUE" in result.output


class TestSingleRecord:
    def test_show(self, seeded):
        result = seeded("show", "1")
        assert result.exit_code == 0, result.output
        assert "Expense ID: 1" in result.output
        assert "Amount: $12.50" in result.output
        assert "category: Food" in result.output

    def test_show_missing(self, seeded):
        result = seeded("show", "99")
        assert result.exit_code == 1
        assert "Error: Expense 99 not found" in result.output

    def test_show_other_users_record(self, seeded):
        result = seeded("show", "4")
        assert result.exit_code == 1
        assert "Expense 4 not found for current user" in result.output

    def test_update_keeps_other_fields(self, seeded):
        result = seeded("update", "1", "--amount", "20")
        assert result.exit_code == 0, result.output
        assert "Updated expense 1" in result.output

        shown = seeded("show", "1").output
        assert "Amount: $20.00" in shown
        assert "name: Lunch" in shown
        assert "category: Food" in shown

    def test_update_requires_changes(self, seeded):
        result = seeded("update", "1")
        assert result.exit_code == 1
        assert "Provide at least one field to update" in result.output

    def test_update_other_users_record(self, seeded):
        result = seeded("update", "4", "--amount", "1", user="1")
        assert result.exit_code == 1
        assert seeded("show", "4", user="2").output.count("Amount: $120.00") == 1

    def test_delete(self, seeded):
        result = seeded("delete", "2", "--yes")
        assert result.exit_code == 0, result.output
        assert "Deleted expense 2" in result.output
        assert "Found 2 expenses:" in seeded("list").output

    def test_delete_confirmation_declined(self, seeded):
        result = seeded("delete", "2", input="n\n")
        assert result.exit_code == 1
        assert "Found 3 expenses:" in seeded("list").output

    def test_delete_missing(self, seeded):
        result = seeded("delete", "99", "-y")
        assert result.exit_code == 1
        assert "Expense 99 not found" in result.output


def test_facets(seeded):
    result = seeded("facets")
    assert result.exit_code == 0, result.output
    assert "category: Food, Travel" in result.output


def test_facets_without_records(invoke):
    assert "category: (none)" in invoke("facets").output


class TestImportJson:
    def test_import_db_json(self, invoke, fixtures_dir):
        result = invoke("import-json", str(fixtures_dir / "db.json"))
        assert result.exit_code == 0, result.output
        assert "Imported: 3 expenses" in result.output
        assert "Errors: 1" in result.output
        assert "Entry 3: expected an object" in result.output

        listed = invoke("list").output
        assert "Found 2 expenses:" in listed
        assert "Total: $150.00" in listed
        assert "Found 1 expenses:" in invoke("list", user="2").output

    def test_import_missing_key(self, invoke, fixtures_dir):
        result = invoke("import-json", str(fixtures_dir / "db.json"), schema="payments")
        assert result.exit_code == 1
        assert "No 'payments' list found" in result.output


def test_unscoped_schema(invoke):
    result = invoke(
        "add", "--field", "title=Alien", "--field", "year=1979", "--field", "country=US",
        user=None, schema="movies",
    )
    assert result.exit_code == 0, result.output
    assert "Created movie 1: Alien" in result.output

    listed = invoke("list", "--filter", "country=US", user=None, schema="movies").output
    assert "Found 1 movies:" in listed
    assert "Alien" in listed


def test_unknown_schema_is_a_usage_error(invoke):
    result = invoke("list", schema="invoices")
    assert result.exit_code == 2
    assert "Invalid value for '--schema'" in result.output


def test_cart_items_use_price_and_quantity(invoke):
    invoke("add", "--name", "Bike", "--amount", "100", "--field", "quantity=2", schema="cart")
    invoke("add", "--name", "Bell", "--amount", "7.50", schema="cart")

    shown = invoke("show", "1", schema="cart").output
    assert "Price: $100.00" in shown
    assert "Line total: $200.00" in shown

    listed = invoke("list", "--sort", "price_desc", schema="cart").output
    assert "Found 2 cart:" in listed
    assert listed.index("Bike") < listed.index("Bell")
    assert "Total: $207.50" in listed
