import json
import tempfile
import unittest
from pathlib import Path

import table_schema as ts
from table_schema import loader
from table_schema.nodes import MISSING, Enum, Scalar, SchemaDefinitionError, Table, Union
from tests._util import field_codes, tmp_json


class FromDictTests(unittest.TestCase):
    def test_scalar_kinds(self):
        node = loader.from_dict({"type": "string", "min_len": 3, "pattern": "^[a-z]+$"}, _root=False)
        self.assertIsInstance(node, Scalar)
        self.assertEqual((node.kind, node.min_len, node.pattern), ("string", 3, "^[a-z]+$"))

    def test_integer_type_is_an_integer_number(self):
        node = loader.from_dict({"type": "integer", "min": 1}, _root=False)
        self.assertEqual(node.kind, "number")
        self.assertTrue(node.integer)

    def test_enum_values(self):
        node = loader.from_dict(
            {"type": "number", "values": {"enum": {"DEBUG": 10}, "reverse": True}}, _root=False,
        )
        self.assertIsInstance(node.values, Enum)
        self.assertTrue(node.values.reverse)
        self.assertEqual(node.values.value_for("DEBUG"), 10)

    def test_plain_values_become_a_tuple(self):
        node = loader.from_dict({"type": "string", "values": ["a", "b"]}, _root=False)
        self.assertEqual(node.values, ("a", "b"))

    def test_table_with_rules(self):
        node = loader.from_dict({
            "fields": {"a": {"type": "string"}, "b": {"type": "string"}},
            "one_of": ["a", "b"],
            "depends_on": {"field": "a", "requires": "b"},
            "on_extra_keys": "ignore",
        })
        self.assertIsInstance(node, Table)
        self.assertEqual(node.one_of, ("a", "b"))
        self.assertEqual(node.dependencies, (ts.DependsOn("a", "b"),))
        self.assertEqual(node.on_extra_keys, "ignore")

    def test_nested_table_is_detected_without_type(self):
        node = loader.from_dict({"fields": {"inner": {"fields": {"x": {"type": "number"}}}}})
        self.assertIsInstance(node.fields["inner"], Table)

    def test_each_and_count(self):
        node = loader.from_dict({"type": "table", "count": [1, "*"], "each": {"type": "string"}}, _root=False)
        self.assertEqual(node.count, (1, "*"))
        self.assertIsInstance(node.each, Scalar)

    def test_union(self):
        node = loader.from_dict({"union": [{"type": "number"}, {"type": "string"}], "default": 5}, _root=False)
        self.assertIsInstance(node, Union)
        self.assertEqual(len(node.alternatives), 2)
        self.assertEqual(node.default, 5)

    def test_default_is_copied(self):
        spec = {"type": "table", "default": ["a"]}
        node = loader.from_dict(spec, _root=False)
        spec["default"].append("b")
        self.assertEqual(node.default, ["a"])

    def test_missing_default_stays_missing(self):
        self.assertIs(loader.from_dict({"type": "boolean"}, _root=False).default, MISSING)

    def test_custom_validator_maps_to_check(self):
        node = loader.from_dict({"type": "number", "custom_validator": lambda v: v > 0}, _root=False)
        self.assertTrue(node.check(1))

    def test_description_is_ignored(self):
        node = loader.from_dict({"type": "string", "description": "a name"}, _root=False)
        self.assertEqual(node.kind, "string")

    def test_unknown_keys_are_rejected(self):
        with self.assertRaisesRegex(SchemaDefinitionError, "root.name"):
            loader.from_dict({"fields": {"name": {"type": "string", "minimum": 1}}})

    def test_unknown_type_is_rejected(self):
        with self.assertRaises(SchemaDefinitionError):
            loader.from_dict({"type": "datetime"}, _root=False)

    def test_node_instances_pass_through(self):
        node = ts.string()
        self.assertIs(loader.from_dict(node), node)

    def test_non_mapping_is_rejected(self):
        with self.assertRaises(SchemaDefinitionError):
            loader.from_dict(["type", "string"])


class LoadSchemaTests(unittest.TestCase):
    def test_load_schema_from_file(self):
        path = tmp_json({"fields": {"n": {"type": "number", "default": 1}}})
        try:
            schema = loader.load_schema(path)
            self.assertEqual(ts.validate({}, schema), (None, {"n": 1}))
        finally:
            path.unlink(missing_ok=True)

    def test_read_document_returns_fresh_copies(self):
        first = loader.read_document("logger_config.json")
        first["fields"].clear()
        self.assertIn("level", loader.read_document("logger_config.json")["fields"])

    def test_load_schema_not_found(self):
        with self.assertRaises(FileNotFoundError):
            loader.load_schema("does_not_exist.json")

    def test_invalid_json_raises_value_error(self):
        with tempfile.NamedTemporaryFile("w+", suffix=".json", delete=False) as tmp:
            tmp.write("{not json")
            tmp.flush()
            p = Path(tmp.name)
        try:
            with self.assertRaises(ValueError):
                loader.load_schema(p)
        finally:
            p.unlink(missing_ok=True)

    def test_top_level_must_be_a_table(self):
        path = tmp_json({"union": [{"type": "string"}]})
        try:
            with self.assertRaises(SchemaDefinitionError):
                loader.load_schema(path)
        finally:
            path.unlink(missing_ok=True)


class BundledLoggerSchemaTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.schema = loader.load_schema("logger_config.json")

    def test_empty_config_gets_every_default(self):
        err, out = ts.validate({}, self.schema)
        self.assertIsNone(err)
        self.assertEqual(out, {
            "name": "root",
            "level": 20,
            "propagate": True,
            "timezone": "local",
        })

    def test_level_names_and_numbers(self):
        self.assertEqual(ts.validate({"level": "debug"}, self.schema)[1]["level"], 10)
        self.assertEqual(ts.validate({"level": 25}, self.schema)[1]["level"], 25)
        err, _ = ts.validate({"level": "TRACE"}, self.schema)
        self.assertEqual(field_codes(err, "level"), ["UNION_MISMATCH"])

    def test_timezone_is_canonicalised(self):
        self.assertEqual(ts.validate({"timezone": "UTC"}, self.schema)[1]["timezone"], "utc")

    def test_custom_levels(self):
        self.assertIsNone(ts.validate({"levels": {"TRACE": 5, "NOTICE": 25}}, self.schema)[0])
        err, _ = ts.validate({"levels": {"TRACE": 5, "FINE": 5, "BAD": 20}}, self.schema)
        self.assertEqual(field_codes(err, "levels"), ["DUPLICATE_VALUE", "FORBIDDEN_VALUE"])

    def test_dispatchers(self):
        config = {"dispatchers": [
            {"type": "console", "stream": "stderr"},
            {"type": "file", "path": "/var/log/app.log", "max_bytes": 1024, "backup_count": 3},
        ]}
        err, out = ts.validate(config, self.schema)
        self.assertIsNone(err)
        self.assertEqual(out["dispatchers"][0]["presenter"], "text")

    def test_dispatcher_rules_are_namespaced(self):
        config = {"dispatchers": [{"type": "file", "stream": "stdout", "path": "x", "extra": 1},
                                  {"type": "console", "max_bytes": 10}]}
        err, _ = ts.validate(config, self.schema)
        self.assertEqual(
            field_codes(err, "dispatchers"),
            ["UNKNOWN_KEY", "EXCLUSIVE_CONFLICT", "DEPENDENCY_MISSING"],
        )
        messages = err.messages("dispatchers")
        self.assertEqual(messages[0], "dispatchers[0].extra: Unknown field 'extra'")
        self.assertTrue(messages[2].startswith("dispatchers[1]: Field 'max_bytes' requires"))

    def test_verbosity_mapping(self):
        config = {"command_line_verbosity": {"mapping": {"-v": "INFO", "-vv": "debug"}}}
        err, out = ts.validate(config, self.schema)
        self.assertIsNone(err)
        self.assertEqual(out["command_line_verbosity"], {
            "mapping": {"-v": "info", "-vv": "debug"},
            "auto_detect": True,
        })

        err, _ = ts.validate({"command_line_verbosity": {"mapping": {}}}, self.schema)
        self.assertEqual(field_codes(err, "command_line_verbosity"), ["INVALID_COUNT"])

    def test_unknown_top_level_key(self):
        err, _ = ts.validate({"colour": True}, self.schema)
        self.assertEqual(list(err.fields), ["colour"])

    def test_schema_is_json_serializable_source(self):
        doc = loader.read_document("logger_config.json")
        self.assertEqual(json.loads(json.dumps(doc)), doc)


if __name__ == "__main__":
    unittest.main(verbosity=2)
