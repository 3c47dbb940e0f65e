"""
tests/test_entities.py
Tests for the entity-class generator.
"""

from __future__ import annotations

from typing import Any, Dict

from modelforge.generators.entities import generate_entity_classes
from modelforge.models import DataModel


class TestEntityClasses:
    """Class layout, properties, FKs and navigations."""

    def test_header_and_namespace(self, user_order_model: DataModel) -> None:
        code = generate_entity_classes(user_order_model)
        assert code.startswith("// <auto-generated>")
        assert "using System.ComponentModel.DataAnnotations;" in code
        assert "namespace Shop.Entities;" in code

    def test_one_class_per_entity(self, shop_model: DataModel) -> None:
        code = generate_entity_classes(shop_model)
        assert code.count("public class ") == 4
        assert code.index("public class Customer") < code.index("public class Order")

    def test_key_and_email_properties(self, user_order_model: DataModel) -> None:
        code = generate_entity_classes(user_order_model)
        assert "    [Key]\n    [DatabaseGenerated(DatabaseGeneratedOption.Identity)]\n    public Guid Id { get; set; }" in code
        assert "    [Required]\n    [MaxLength(255)]\n    public string Email { get; set; } = string.Empty;" in code

    def test_synthesized_foreign_key(self, user_order_model: DataModel) -> None:
        code = generate_entity_classes(user_order_model)
        assert "    // Foreign Key to User\n    public Guid? UserId { get; set; }" in code

    def test_navigations(self, user_order_model: DataModel) -> None:
        code = generate_entity_classes(user_order_model)
        assert "    [ForeignKey(\"UserId\")]\n    public virtual User? User { get; set; }" in code
        assert "public virtual ICollection<Order> Orders { get; set; } = new List<Order>();" in code

    def test_many_to_many_collection_from_source_only(self, student_course_model: DataModel) -> None:
        code = generate_entity_classes(student_course_model)
        assert "public virtual ICollection<Course> Courses { get; set; } = new List<Course>();" in code
        assert "ICollection<Student>" not in code
        assert "StudentId" not in code
        assert "CourseId" not in code

    def test_precision_attribute(self, decimal_model: DataModel) -> None:
        code = generate_entity_classes(decimal_model)
        assert "    [Precision(10, 2)]\n    public decimal Price { get; set; }" in code

    def test_table_attribute_only_when_needed(self, shop_model: DataModel) -> None:
        code = generate_entity_classes(shop_model)
        assert '[Table("SalesOrders", Schema = "sales")]\npublic class Order' in code
        assert "[Table(\"Customers\")]" not in code

    def test_descriptions_become_summaries(self, shop_model: DataModel) -> None:
        code = generate_entity_classes(shop_model)
        assert "/// <summary>\n/// A registered shop customer.\n/// </summary>\npublic class Customer" in code

    def test_defaults_and_json_column(self, shop_model: DataModel) -> None:
        code = generate_entity_classes(shop_model)
        assert "public bool IsActive { get; set; } = true;" in code
        assert "public DateTime CreatedAt { get; set; } = DateTime.UtcNow;" in code
        assert '[Column(TypeName = "jsonb")]\n    public string? Metadata { get; set; }' in code

    def test_custom_foreign_key_name(self, shop_model: DataModel) -> None:
        code = generate_entity_classes(shop_model)
        assert "public int? CategoryRef { get; set; }" in code
        assert '[ForeignKey("CategoryRef")]\n    public virtual Category? Category { get; set; }' in code

    def test_empty_model(self, empty_model: DataModel) -> None:
        code = generate_entity_classes(empty_model)
        assert "namespace Empty.Entities;" in code
        assert "// No entities defined in this model." in code
        assert "public class" not in code

    def test_entity_without_fields(self) -> None:
        model = DataModel.model_validate({"entities": [{"id": "e", "name": "Tag"}]})
        code = generate_entity_classes(model)
        assert code.endswith("public class Tag\n{\n}")

    def test_dangling_relation_ignored(self, dangling_model: DataModel) -> None:
        code = generate_entity_classes(dangling_model)
        assert "Navigation Properties" not in code
        assert "Foreign Key" not in code

    def test_declared_foreign_key_not_duplicated(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][1]["fields"].append(
            {"id": "f-order-user", "name": "UserId", "type": "Guid", "constraints": {"isRequired": True}}
        )
        code = generate_entity_classes(DataModel.model_validate(user_order_dict))
        assert code.count(" UserId { get; set; }") == 1
        assert "public Guid UserId { get; set; }" in code

    def test_self_relation(self, employee_model: DataModel) -> None:
        code = generate_entity_classes(employee_model)
        assert "public int? EmployeeId { get; set; }" in code
        assert '[ForeignKey("EmployeeId")]\n    public virtual Employee? ParentEmployee { get; set; }' in code
        assert (
            "public virtual ICollection<Employee> ChildEmployees { get; set; } = new List<Employee>();"
        ) in code
        assert " Employee { get; set; }" not in code

    def test_repeated_relation_generated_once(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["relations"].append(dict(user_order_dict["relations"][0], id="r-order-user-2"))
        code = generate_entity_classes(DataModel.model_validate(user_order_dict))
        assert code.count("public virtual User? User { get; set; }") == 1
        assert code.count("public virtual ICollection<Order> Orders") == 1
        assert code.count(" UserId { get; set; }") == 1

    def test_second_relation_to_same_target(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["relations"].append(
            {
                "id": "r-order-approver",
                "sourceEntityId": "e-order",
                "targetEntityId": "e-user",
                "cardinality": "one-to-many",
                "foreignKeyName": "ApprovedById",
            }
        )
        code = generate_entity_classes(DataModel.model_validate(user_order_dict))
        assert '[ForeignKey("UserId")]\n    public virtual User? User { get; set; }' in code
        assert '[ForeignKey("ApprovedById")]\n    public virtual User? ApprovedBy { get; set; }' in code
        assert "public virtual ICollection<Order> ApprovedByOrders { get; set; }" in code
