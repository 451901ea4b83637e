"""Factory Boy factories for the framework-free domain entities.

Factories only *build* entities; tests persist them through the repositories
under test so the store's own stamping and versioning rules apply.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import factory

from catetin.domain import AuthProvider, MoneyFlow, User, UserAuth


class UserFactory(factory.Factory):
    class Meta:
        model = User

    full_name = factory.Faker("name")
    phone_number = factory.Sequence(lambda n: f"user{n}@example.com")
    image = None


class AuthProviderFactory(factory.Factory):
    class Meta:
        model = AuthProvider

    display_name = factory.Faker("company")
    name = factory.Sequence(lambda n: f"provider-{n}")


class UserAuthFactory(factory.Factory):
    """Credential link; pass ``user_id`` and ``auth_provider_id`` explicitly."""

    class Meta:
        model = UserAuth

    user_id = factory.LazyFunction(uuid.uuid4)
    auth_provider_id = factory.LazyFunction(uuid.uuid4)
    credential_id = factory.Sequence(lambda n: f"login{n}@example.com")
    credential_secret = "plain$secret"


class MoneyFlowFactory(factory.Factory):
    class Meta:
        model = MoneyFlow

    user_id = factory.LazyFunction(uuid.uuid4)
    amount = factory.Sequence(lambda n: Decimal(1000 + n * 250))
    currency = "IDR"
    category = factory.Iterator(["food", "transport", "utilities"])
    description = factory.Faker("sentence", nb_words=4)
    tags = factory.LazyFunction(list)


__all__ = ["AuthProviderFactory", "MoneyFlowFactory", "UserAuthFactory", "UserFactory"]
