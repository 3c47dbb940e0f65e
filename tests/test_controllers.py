"""
tests/test_controllers.py
Tests for the CRUD controller generator.
"""

from __future__ import annotations

from modelforge.generators.controllers import controller_name, generate_controllers
from modelforge.models import DataModel


class TestControllers:
    """Routes, actions and service wiring."""

    def test_one_controller_per_entity(self, shop_model: DataModel) -> None:
        code = generate_controllers(shop_model)
        assert code.count("[ApiController]") == 4
        assert "public class CategoriesController : ControllerBase" in code
        assert "namespace Shop.Controllers;" in code

    def test_controller_name(self, user_order_model: DataModel) -> None:
        assert controller_name(user_order_model.entities[0]) == "UsersController"

    def test_route_and_service(self, user_order_model: DataModel) -> None:
        code = generate_controllers(user_order_model)
        assert '[Route("api/[controller]")]' in code
        assert "private readonly IUserService _userService;" in code
        assert "private readonly ILogger<UsersController> _logger;" in code

    def test_actions(self, user_order_model: DataModel) -> None:
        code = generate_controllers(user_order_model)
        assert "[FromQuery] int page = 1," in code
        assert "[FromQuery] int pageSize = 20)" in code
        assert "public async Task<ActionResult<UserResponseDto>> GetById(Guid id)" in code
        assert "public async Task<ActionResult<UserResponseDto>> Create([FromBody] CreateUserDto dto)" in code
        assert "public async Task<ActionResult<UserResponseDto>> Update(Guid id, [FromBody] UpdateUserDto dto)" in code
        assert "public async Task<ActionResult> Delete(Guid id)" in code

    def test_status_results(self, user_order_model: DataModel) -> None:
        code = generate_controllers(user_order_model)
        assert "return NotFound();" in code
        assert "return BadRequest(ModelState);" in code
        assert "return CreatedAtAction(nameof(GetById), new { id = item.Id }, item);" in code
        assert "return NoContent();" in code

    def test_key_type_follows_primary_key(self, student_course_model: DataModel) -> None:
        code = generate_controllers(student_course_model)
        assert "GetById(int id)" in code

    def test_empty_model(self, empty_model: DataModel) -> None:
        code = generate_controllers(empty_model)
        assert "// No entities to generate controllers for" in code
        assert "[ApiController]" not in code
