import pytest
import sqlite3

from models.portfolio import AccountSet


class TestPortfolioService:
    """Tests for PortfolioService."""

    def test_create_portfolio(self, services):
        portfolio = services.portfolios.create("cash")

        assert portfolio.id is not None
        assert portfolio.name == "cash"
        assert services.portfolios.find(portfolio.id) == portfolio
        assert services.portfolios.find_by_name("cash") == portfolio

    def test_duplicate_name(self, services):
        services.portfolios.create("cash")

        with pytest.raises(sqlite3.IntegrityError):
            services.portfolios.create("cash")

    def test_find_all(self, services):
        first = services.portfolios.create("cash")
        second = services.portfolios.create("retirement")

        assert services.portfolios.find_all() == [first, second]

    def test_rename(self, services):
        portfolio = services.portfolios.create("cash")

        assert services.portfolios.rename(portfolio.id, "liquid") is True
        assert services.portfolios.find(portfolio.id).name == "liquid"
        assert services.portfolios.rename(9999, "ghost") is False

    def test_delete_keeps_accounts(self, services, accounts):
        portfolio = services.portfolios.create("cash")
        services.portfolios.add_account(portfolio.id, accounts["checking"].id)

        assert services.portfolios.delete(portfolio.id) is True

        assert services.portfolios.find(portfolio.id) is None
        assert services.accounts.find(accounts["checking"].id) is not None
        assert services.portfolios.delete(portfolio.id) is False


class TestMembership:
    """Tests for adding and removing portfolio accounts."""

    def test_accounts_in_insertion_order(self, services, accounts):
        portfolio = services.portfolios.create("cash")
        services.portfolios.add_account(portfolio.id, accounts["savings"].id)
        services.portfolios.add_account(portfolio.id, accounts["checking"].id)

        members = services.portfolios.accounts(portfolio.id)

        assert [a.name for a in members] == ["savings", "checking"]

    def test_add_twice_is_noop(self, services, accounts):
        portfolio = services.portfolios.create("cash")

        assert services.portfolios.add_account(portfolio.id, accounts["checking"].id) is True
        assert services.portfolios.add_account(portfolio.id, accounts["checking"].id) is False
        assert len(services.portfolios.accounts(portfolio.id)) == 1

    def test_add_unknown_account(self, services):
        portfolio = services.portfolios.create("cash")

        with pytest.raises(sqlite3.IntegrityError):
            services.portfolios.add_account(portfolio.id, 9999)

    def test_remove_account(self, services, accounts):
        portfolio = services.portfolios.create("cash")
        services.portfolios.add_account(portfolio.id, accounts["checking"].id)

        assert services.portfolios.remove_account(portfolio.id, accounts["checking"].id) is True
        assert services.portfolios.accounts(portfolio.id) == []
        assert services.portfolios.remove_account(portfolio.id, accounts["checking"].id) is False

    def test_account_set(self, services, accounts):
        portfolio = services.portfolios.create("cash")
        services.portfolios.add_account(portfolio.id, accounts["checking"].id)
        services.portfolios.add_account(portfolio.id, accounts["savings"].id)

        account_set = services.portfolios.account_set(portfolio.id)

        assert account_set == AccountSet.of(accounts["checking"].id, accounts["savings"].id)
        assert accounts["checking"].id in account_set
        assert accounts["employer"].id not in account_set


class TestAccountSet:
    def test_drops_duplicates_keeping_first_order(self):
        account_set = AccountSet.of(3, 1, 3, 2, 1)

        assert list(account_set) == [3, 1, 2]
        assert len(account_set) == 3

    def test_from_iterable_passes_account_sets_through(self):
        account_set = AccountSet.of(1, 2)

        assert AccountSet.from_iterable(account_set) is account_set
        assert AccountSet.from_iterable([2, 1]) == AccountSet.of(2, 1)

    def test_empty(self):
        assert len(AccountSet()) == 0
        assert 1 not in AccountSet()
