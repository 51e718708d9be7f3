"""
Unit tests for the cat runtime object model.
"""

import itertools
import pytest
from catlang.runtime import (
    ObjectType, HashKey, Hashable,
    Boolean, Hash, HashPair, Function, Builtin,
    Error, ReturnValue, Environment,
    TRUE, FALSE, NULL,
    int_val, string_val, bool_val, array_val, error_val, is_error, is_truthy,
)
from catlang import parse


class TestHashKeys:
    """Hash keys are equal for equal values of one kind, and never across kinds."""

    SAMPLES = {
        ObjectType.INTEGER: [int_val(0), int_val(1), int_val(-7), int_val(2**40)],
        ObjectType.STRING: [string_val(""), string_val("1"), string_val("0"),
                            string_val("true"), string_val("Hello World")],
        ObjectType.BOOLEAN: [TRUE, FALSE],
    }

    def test_equal_values_equal_keys(self):
        assert string_val("Hello World").hash_key() == string_val("Hello World").hash_key()
        assert int_val(1).hash_key() == int_val(1).hash_key()
        assert bool_val(True).hash_key() == Boolean(True).hash_key()

    def test_different_values_different_keys(self):
        assert string_val("Hello World").hash_key() != string_val("My name is johnny").hash_key()
        assert int_val(1).hash_key() != int_val(2).hash_key()
        assert TRUE.hash_key() != FALSE.hash_key()

    def test_pairwise_across_kinds(self):
        """Exhaustive pairwise check over samples of all three hashable kinds."""
        samples = [obj for objs in self.SAMPLES.values() for obj in objs]
        for a, b in itertools.product(samples, repeat=2):
            same = type(a) is type(b) and a.value == b.value
            assert (a.hash_key() == b.hash_key()) == same, (a, b)

    def test_coincident_representations_do_not_collide(self):
        """1, "1" and true never share a key."""
        keys = {int_val(1).hash_key(), string_val("1").hash_key(), TRUE.hash_key()}
        assert len(keys) == 3
        assert int_val(0).hash_key() != FALSE.hash_key()

    def test_key_is_type_qualified(self):
        key = int_val(5).hash_key()
        assert key == HashKey(ObjectType.INTEGER, 5)

    def test_hashable_capability(self):
        assert isinstance(int_val(1), Hashable)
        assert isinstance(string_val("a"), Hashable)
        assert isinstance(TRUE, Hashable)
        assert not isinstance(NULL, Hashable)
        assert not isinstance(array_val([]), Hashable)


class TestInspect:
    """Test display forms."""

    def test_scalars(self):
        assert int_val(5).inspect() == "5"
        assert int_val(-5).inspect() == "-5"
        assert string_val("hi there").inspect() == "hi there"
        assert TRUE.inspect() == "true"
        assert FALSE.inspect() == "false"
        assert NULL.inspect() == "null"

    def test_str_matches_inspect(self):
        assert str(int_val(42)) == "42"

    def test_array(self):
        assert array_val([int_val(1), string_val("a"), TRUE]).inspect() == "[1, a, true]"
        assert array_val([]).inspect() == "[]"

    def test_hash(self):
        key = string_val("a")
        h = Hash({key.hash_key(): HashPair(key, int_val(1))})
        assert h.inspect() == "{a: 1}"

    def test_function(self):
        program, _ = parse("fn(x, y) { x + y }")
        lit = program.statements[0].expression
        fn = Function(lit.parameters, lit.body, Environment())
        assert fn.inspect() == "fn(x, y) { (x + y) }"

    def test_builtin(self):
        b = Builtin("len", lambda args: NULL)
        assert b.inspect() == "builtin function len"

    def test_error_and_return_value(self):
        assert error_val("boom").inspect() == "ERROR: boom"
        assert ReturnValue(int_val(3)).inspect() == "3"


class TestTypeTags:
    """Every value exposes its type tag."""

    @pytest.mark.parametrize("obj,tag", [
        (int_val(1), ObjectType.INTEGER),
        (string_val("s"), ObjectType.STRING),
        (TRUE, ObjectType.BOOLEAN),
        (NULL, ObjectType.NULL),
        (array_val([]), ObjectType.ARRAY),
        (Hash(), ObjectType.HASH),
        (Builtin("f", lambda args: NULL), ObjectType.BUILTIN),
        (Error("e"), ObjectType.ERROR),
        (ReturnValue(NULL), ObjectType.RETURN_VALUE),
    ])
    def test_type(self, obj, tag):
        assert obj.type == tag

    def test_tag_display_names(self):
        assert ObjectType.INTEGER.value == "INTEGER"
        assert ObjectType.FUNCTION.value == "FUNCTION"


class TestConstructors:
    """Test convenience constructors and helpers."""

    def test_bool_val_returns_singletons(self):
        assert bool_val(True) is TRUE
        assert bool_val(False) is FALSE

    def test_int_val_wraps_to_64_bits(self):
        assert int_val(2**63).value == -2**63
        assert int_val(2**63 - 1).value == 2**63 - 1
        assert int_val(-2**63 - 1).value == 2**63 - 1

    def test_array_val_shares_list(self):
        elements = [int_val(1)]
        arr = array_val(elements)
        elements.append(int_val(2))
        assert len(arr.elements) == 2

    def test_is_error(self):
        assert is_error(error_val("x"))
        assert not is_error(NULL)

    @pytest.mark.parametrize("obj,expected", [
        (NULL, False),
        (FALSE, False),
        (TRUE, True),
        (int_val(0), True),
        (string_val(""), True),
        (array_val([]), True),
    ])
    def test_truthiness(self, obj, expected):
        assert is_truthy(obj) is expected
