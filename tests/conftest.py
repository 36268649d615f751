import random

import pytest

from levelwise.data.database import TransactionDatabase


@pytest.fixture
def abc_transactions():
    return [
        ['A', 'B', 'C'],
        ['A', 'B'],
        ['A', 'C'],
        ['B', 'C'],
    ]


@pytest.fixture
def abc_database(abc_transactions):
    return TransactionDatabase(abc_transactions)


@pytest.fixture
def basket_transactions():
    return [
        ['bread', 'milk'],
        ['bread', 'diapers', 'beer', 'eggs'],
        ['milk', 'diapers', 'beer', 'cola'],
        ['bread', 'milk', 'diapers', 'beer'],
        ['bread', 'milk', 'diapers', 'cola'],
        ['milk', 'eggs'],
        ['bread', 'butter', 'milk'],
        ['diapers', 'beer'],
        ['bread', 'milk', 'butter', 'eggs'],
        ['beer', 'cola', 'diapers'],
    ]


@pytest.fixture
def random_transactions():
    rng = random.Random(7)
    items = [f"i{n:02d}" for n in range(12)]
    return [rng.sample(items, rng.randint(1, 7)) for _ in range(80)]
