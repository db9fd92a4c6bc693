"""Account workflows exercised against an in-memory database."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_favorites.db.models import Favorite, Product, User
from catalog_favorites.db.repositories import UserRepository
from catalog_favorites.services.auth import TokenService
from catalog_favorites.services.user_service import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserNotFoundError,
    UserService,
)

SECRET = "unit-test-secret"


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret=SECRET)


@pytest.fixture
def service(session: AsyncSession, tokens: TokenService) -> UserService:
    return UserService(users=UserRepository(session), tokens=tokens)


@pytest.mark.asyncio
async def test_register_hashes_the_password(service: UserService) -> None:
    user = await service.register(name="Ana", email="ana@example.com", password="s3cret-pass")

    assert user.id
    assert user.password != "s3cret-pass"


@pytest.mark.asyncio
async def test_register_rejects_duplicate_email(service: UserService) -> None:
    await service.register(name="Ana", email="ana@example.com", password="s3cret-pass")

    with pytest.raises(EmailAlreadyRegisteredError):
        await service.register(name="Other", email="ana@example.com", password="another-pass")


@pytest.mark.asyncio
async def test_login_returns_verifiable_token(
    service: UserService, tokens: TokenService
) -> None:
    registered = await service.register(
        name="Ana", email="ana@example.com", password="s3cret-pass"
    )

    token, user = await service.login(email="ana@example.com", password="s3cret-pass")

    assert user.id == registered.id
    assert tokens.verify(token).id == registered.id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("email", "password"),
    [("ana@example.com", "wrong-pass"), ("nobody@example.com", "s3cret-pass")],
)
async def test_login_rejects_bad_credentials(
    service: UserService, email: str, password: str
) -> None:
    await service.register(name="Ana", email="ana@example.com", password="s3cret-pass")

    with pytest.raises(InvalidCredentialsError):
        await service.login(email=email, password=password)


@pytest.mark.asyncio
async def test_update_profile_changes_only_supplied_fields(service: UserService) -> None:
    user = await service.register(name="Ana", email="ana@example.com", password="s3cret-pass")

    updated = await service.update_profile(user.id, name="Ana Maria")

    assert updated.name == "Ana Maria"
    assert updated.email == "ana@example.com"


@pytest.mark.asyncio
async def test_update_profile_allows_keeping_own_email(service: UserService) -> None:
    user = await service.register(name="Ana", email="ana@example.com", password="s3cret-pass")

    updated = await service.update_profile(user.id, email="ana@example.com")

    assert updated.email == "ana@example.com"


@pytest.mark.asyncio
async def test_update_profile_rejects_taken_email(service: UserService) -> None:
    await service.register(name="Bruno", email="bruno@example.com", password="s3cret-pass")
    user = await service.register(name="Ana", email="ana@example.com", password="s3cret-pass")

    with pytest.raises(EmailAlreadyRegisteredError):
        await service.update_profile(user.id, email="bruno@example.com")


@pytest.mark.asyncio
async def test_unknown_user_profile_is_not_found(service: UserService) -> None:
    with pytest.raises(UserNotFoundError):
        await service.get_profile("missing-user")


@pytest.mark.asyncio
async def test_delete_profile_removes_favorites(
    service: UserService, session: AsyncSession
) -> None:
    user = await service.register(name="Ana", email="ana@example.com", password="s3cret-pass")
    session.add(
        Product(
            id=1,
            title="Product 1",
            image="https://catalog.test/img/1.jpg",
            price=10.0,
            category="electronics",
            description="A product",
        )
    )
    await session.flush()
    session.add(Favorite(user_id=user.id, product_id=1))
    await session.flush()

    await service.delete_profile(user.id)

    users = await session.execute(select(func.count()).select_from(User))
    favorites = await session.execute(select(func.count()).select_from(Favorite))
    products = await session.execute(select(func.count()).select_from(Product))
    assert users.scalar_one() == 0
    assert favorites.scalar_one() == 0
    assert products.scalar_one() == 1
