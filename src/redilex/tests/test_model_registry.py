from typing import Optional
import unittest

from redilex.errors import ModelShapeError
from redilex.model.field import FieldSpec
from redilex.model.registry import normalize_model
from redilex.validation.schemas import ModelOptions


class TestNormalizeModel(unittest.TestCase):
    def test_defaults_are_filled_in(self) -> None:
        model = normalize_model({"name": {"lexical": True}}, "user")
        self.assertEqual(list(model.fields), ["id", "created", "name"])
        self.assertEqual(model.name, "user")
        self.assertEqual(model.lexical_fields, ("created", "name"))

        name = model["name"]
        self.assertFalse(name.mutable)
        self.assertTrue(name.lexical)
        self.assertIsNone(name.seed)

        self.assertFalse(model["id"].mutable)
        self.assertFalse(model["id"].lexical)
        self.assertIsInstance(model["id"].generate(), str)
        self.assertIsInstance(model["created"].generate(), int)

    def test_constant_seed_is_wrapped(self) -> None:
        model = normalize_model({"role": {"seed": "member"}}, "user")
        self.assertTrue(callable(model["role"].seed))
        self.assertEqual(model["role"].generate(), "member")

    def test_callable_seed_is_kept(self) -> None:
        calls = []

        def seed() -> int:
            calls.append(1)
            return len(calls)

        model = normalize_model({"n": FieldSpec(seed=seed)}, "counter")
        self.assertEqual(model["n"].generate(), 1)
        self.assertEqual(model["n"].generate(), 2)

    def test_caller_overrides_default_field(self) -> None:
        model = normalize_model({"created": {"lexical": False}}, "user")
        self.assertEqual(model.lexical_fields, ())
        self.assertIsNone(model["created"].seed)

    def test_none_drops_default_field(self) -> None:
        model = normalize_model({"created": None}, "user")
        self.assertNotIn("created", model)

    def test_dropping_id_is_rejected(self) -> None:
        with self.assertRaisesRegex(ModelShapeError, "id field"):
            normalize_model({"id": None}, "user")

    def test_non_boolean_flags_are_rejected(self) -> None:
        with self.assertRaises(ModelShapeError):
            normalize_model({"name": {"lexical": "yes"}}, "user")
        with self.assertRaises(ModelShapeError):
            normalize_model({"name": {"mutable": 1}}, "user")

    def test_unknown_descriptor_keys_are_rejected(self) -> None:
        with self.assertRaisesRegex(ModelShapeError, "indexed"):
            normalize_model({"name": {"indexed": True}}, "user")

    def test_bad_names_are_rejected(self) -> None:
        with self.assertRaises(ModelShapeError):
            normalize_model({"a:b": {}}, "user")
        with self.assertRaises(ModelShapeError):
            normalize_model({}, "us:er")
        with self.assertRaises(ModelShapeError):
            normalize_model({}, "")

    def test_options_mapping_and_instance(self) -> None:
        def hook(record):
            return record

        model = normalize_model({}, {"name": "user", "post_get": hook, "on_missing": "skip"})
        self.assertIs(model.options.post_get, hook)
        self.assertEqual(model.options.on_missing, "skip")

        options = ModelOptions(name="user")
        self.assertIs(normalize_model({}, options).options, options)

    def test_bad_options_are_rejected(self) -> None:
        with self.assertRaises(ModelShapeError):
            normalize_model({}, {"name": "user", "pre_create": "not callable"})
        with self.assertRaises(ModelShapeError):
            normalize_model({}, {"name": "user", "on_missing": "ignore"})
        with self.assertRaises(ModelShapeError):
            normalize_model({}, {"pre_create": lambda r: r})
        with self.assertRaises(ModelShapeError):
            normalize_model({}, 42)

    def test_model_is_immutable(self) -> None:
        model = normalize_model({"name": {}}, "user")
        with self.assertRaises(TypeError):
            model.fields["other"] = FieldSpec()  # type: ignore[index]
        with self.assertRaises(Exception):
            model.options = ModelOptions(name="other")  # type: ignore[misc]


class TestFieldSpec(unittest.TestCase):
    def test_create_and_update_validators(self) -> None:
        spec = FieldSpec(validate=int, update_validate=str)
        self.assertIsNone(spec.check(3))
        self.assertIsNotNone(spec.check("3"))
        self.assertIsNone(spec.check("3", update=True))

    def test_update_validator_defaults_to_create_validator(self) -> None:
        spec = FieldSpec(validate=int)
        self.assertIsNotNone(spec.check("x", update=True))

    def test_default_id_rejects_separator(self) -> None:
        model = normalize_model({}, "user")
        self.assertIsNone(model["id"].check("abc"))
        self.assertIsNotNone(model["id"].check("a:b"))
        self.assertIsNotNone(model["id"].check(""))

    def test_optional_follows_the_create_validator(self) -> None:
        self.assertFalse(FieldSpec().optional)
        self.assertFalse(FieldSpec(validate=str).optional)
        self.assertTrue(FieldSpec(validate=Optional[str]).optional)
        self.assertTrue(FieldSpec(validate=Optional[int], update_validate=int).optional)
        model = normalize_model({}, "user")
        self.assertFalse(model["id"].optional)
        self.assertFalse(model["created"].optional)

    def test_unusable_validator_is_a_shape_error(self) -> None:
        class Opaque:
            pass

        with self.assertRaises(ModelShapeError):
            FieldSpec(validate=Opaque)


if __name__ == "__main__":
    unittest.main()
