import copy
import unittest

import table_schema as ts
from table_schema.nodes import MISSING, SchemaDefinitionError


class BuilderTests(unittest.TestCase):
    def test_builders_set_kind(self):
        self.assertEqual(ts.string().kind, "string")
        self.assertEqual(ts.number().kind, "number")
        self.assertEqual(ts.boolean().kind, "boolean")
        self.assertEqual(ts.function().kind, "function")

    def test_integer_is_an_integer_number(self):
        node = ts.integer(min=1)
        self.assertEqual((node.kind, node.integer, node.min), ("number", True, 1))

    def test_lists_are_frozen_to_tuples(self):
        values = ["a", "b"]
        node = ts.string(values=values, not_allowed_values=["c"])
        values.append("z")
        self.assertEqual(node.values, ("a", "b"))
        self.assertEqual(node.not_allowed_values, ("c",))

    def test_table_copies_fields(self):
        fields = {"a": ts.number()}
        node = ts.table(fields)
        fields["b"] = ts.string()
        self.assertEqual(list(node.fields), ["a"])

    def test_nodes_are_immutable(self):
        node = ts.string()
        with self.assertRaises(Exception):
            node.kind = "number"

    def test_mappings_are_read_only(self):
        node = ts.table({"a": ts.number()})
        with self.assertRaises(TypeError):
            node.fields["b"] = ts.string()
        levels = ts.enum({"DEBUG": 10})
        with self.assertRaises(TypeError):
            levels.mapping["INFO"] = 20

    def test_nodes_are_hashable(self):
        schema = ts.table({"a": ts.number(default=[1])}, depends_on={"field": "a", "requires": "b"})
        enum = ts.enum({"DEBUG": 10})
        seen = {schema, schema.fields["a"], ts.union(ts.string()), enum}
        self.assertIn(schema, seen)
        self.assertEqual(len(seen), 4)

    def test_union_alternatives(self):
        node = ts.union(ts.string(), ts.number(), required=True)
        self.assertEqual(len(node.alternatives), 2)
        self.assertTrue(node.required)

    def test_depends_on_forms(self):
        single = ts.table(depends_on={"field": "a", "requires": "b"})
        self.assertEqual(single.dependencies, (ts.DependsOn("a", "b"),))
        many = ts.table(depends_on=[ts.DependsOn("a", "b"), {"field": "c", "requires": "d"}])
        self.assertEqual([d.field for d in many.dependencies], ["a", "c"])
        self.assertEqual(ts.table().dependencies, ())


class MissingTests(unittest.TestCase):
    def test_missing_is_a_falsy_singleton(self):
        self.assertFalse(MISSING)
        self.assertEqual(repr(MISSING), "MISSING")
        self.assertIs(copy.deepcopy(MISSING), MISSING)
        self.assertIs(type(MISSING)(), MISSING)

    def test_falsy_defaults_are_real_defaults(self):
        for default in (None, False, 0, ""):
            self.assertTrue(ts.string(default=default).has_default)
        self.assertFalse(ts.string().has_default)


class DefinitionErrorTests(unittest.TestCase):
    def test_unknown_scalar_kind(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.Scalar("datetime")

    def test_bad_pattern(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.string(pattern="(unclosed")

    def test_values_must_be_a_list(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.string(values="abc")

    def test_check_must_be_callable(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.number(check=42)

    def test_fields_and_each_are_exclusive(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.table({"a": ts.string()}, each=ts.string())

    def test_field_must_be_a_node(self):
        with self.assertRaisesRegex(SchemaDefinitionError, "Field 'a'"):
            ts.table({"a": {"type": "string"}})

    def test_count_shapes(self):
        for bad in ((3, 1), (-1, 2), ("1", 2), (1, "many"), (1,), "1-2"):
            with self.assertRaises(SchemaDefinitionError, msg=repr(bad)):
                ts.table(count=bad)
        self.assertEqual(ts.table(count=[0, "*"]).count, (0, "*"))

    def test_extra_key_policy(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.table({}, on_extra_keys="drop")

    def test_rule_names(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.table(one_of="a")
        with self.assertRaises(SchemaDefinitionError):
            ts.table(exclusive=["a", 1])
        with self.assertRaises(SchemaDefinitionError):
            ts.table(depends_on=["a"])

    def test_empty_union(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.union()

    def test_empty_enum(self):
        with self.assertRaises(SchemaDefinitionError):
            ts.enum({})

    def test_definition_errors_are_type_errors(self):
        self.assertTrue(issubclass(SchemaDefinitionError, TypeError))


if __name__ == "__main__":
    unittest.main(verbosity=2)
