"""
tests/test_repositories.py
Tests for the repository and service generators.
"""

from __future__ import annotations

from modelforge.generators.repositories import (
    INCLUDE_MARKER,
    generate_repositories,
    generate_services,
)
from modelforge.models import DataModel


class TestRepositories:
    """Generic tier plus one repository per entity."""

    GENERIC_MEMBERS = (
        "GetByIdAsync<TKey>",
        "GetAllAsync(",
        "GetPagedAsync(",
        "FindAsync(",
        "FirstOrDefaultAsync(",
        "AnyAsync(",
        "CountAsync(",
        "AddAsync(",
        "AddRangeAsync(",
        "UpdateAsync(",
        "DeleteAsync(",
        "DeleteRangeAsync(",
    )

    def test_generic_tier(self, user_order_model: DataModel) -> None:
        code = generate_repositories(user_order_model)
        assert "public interface IRepository<T> where T : class" in code
        assert "public class Repository<T> : IRepository<T> where T : class" in code
        assert "protected readonly ShopDbContext _context;" in code
        for member in self.GENERIC_MEMBERS:
            assert member in code, member

    def test_count_has_two_overloads(self, user_order_model: DataModel) -> None:
        code = generate_repositories(user_order_model)
        assert code.count("public virtual async Task<int> CountAsync(") == 2

    def test_entity_tier(self, user_order_model: DataModel) -> None:
        code = generate_repositories(user_order_model)
        assert "public interface IUserRepository : IRepository<User>" in code
        assert "public class OrderRepository : Repository<Order>, IOrderRepository" in code
        assert "Task<User?> GetByIdAsync(Guid id, CancellationToken cancellationToken = default);" in code
        assert "GetByIdWithRelationsAsync(Guid id" in code
        assert code.count(INCLUDE_MARKER) == 2

    def test_banners(self, user_order_model: DataModel) -> None:
        code = generate_repositories(user_order_model)
        assert "// Generic Repository Interface" in code
        assert "// Entity-specific Repository Interfaces" in code
        assert "namespace Shop.Repositories;" in code

    def test_key_type(self, student_course_model: DataModel) -> None:
        code = generate_repositories(student_course_model)
        assert "GetByIdAsync(int id, CancellationToken cancellationToken = default)" in code

    def test_empty_model(self, empty_model: DataModel) -> None:
        code = generate_repositories(empty_model)
        assert "// No entities to generate repositories for" in code
        assert "IRepository" not in code


class TestServices:
    """Service interfaces and AutoMapper-based implementations."""

    def test_services(self, user_order_model: DataModel) -> None:
        code = generate_services(user_order_model)
        assert "using AutoMapper;" in code
        assert "namespace Shop.Services;" in code
        assert "public interface IUserService" in code
        assert "public class UserService : IUserService" in code
        assert "private readonly IMapper _mapper;" in code
        assert "Task<UserResponseDto> CreateAsync(CreateUserDto dto);" in code
        assert "Task<bool> DeleteAsync(Guid id);" in code

    def test_banners(self, user_order_model: DataModel) -> None:
        code = generate_services(user_order_model)
        assert "// Service Interfaces" in code
        assert "// Service Implementations" in code

    def test_empty_model(self, empty_model: DataModel) -> None:
        code = generate_services(empty_model)
        assert "// No entities to generate services for" in code
        assert "IMapper" not in code
