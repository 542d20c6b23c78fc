import unittest

import jsxlint
from treebuilders import (
    call,
    class_field,
    declare,
    declarator,
    export_default,
    function,
    ident,
    klass,
    method,
    obj,
    program,
    prop,
    ret,
    statement,
)


def classify(root, node, settings=None):
    classifier = jsxlint.ComponentClassifier(jsxlint.TreeIndex(root), settings)
    return classifier.classify(node)


class ComponentClassifierTests(unittest.TestCase):
    def test_pure_and_plain_tiers(self) -> None:
        pure = klass("Foo", "PureComponent")
        plain = klass("Bar", "React.Component")
        root = program(pure, plain)

        pure_desc = classify(root, pure)
        self.assertEqual(pure_desc.tier, jsxlint.PURE)
        self.assertTrue(pure_desc.is_pure)
        self.assertEqual(pure_desc.display_name, "Foo")
        self.assertEqual(pure_desc.base_chain, ("PureComponent",))

        plain_desc = classify(root, plain)
        self.assertEqual(plain_desc.tier, jsxlint.PLAIN)
        self.assertEqual(plain_desc.base_chain, ("React", "Component"))

    def test_dotted_pure_base(self) -> None:
        node = klass("Foo", "React.PureComponent")
        self.assertTrue(classify(program(node), node).is_pure)
        aliased = klass("Bar", "SomeAlias.PureComponent")
        self.assertTrue(classify(program(aliased), aliased).is_pure)
        plain = klass("Baz", "Component")
        self.assertEqual(classify(program(plain), plain).tier, jsxlint.PLAIN)

    def test_unrelated_base_or_no_base_is_not_a_component(self) -> None:
        other = klass("Foo", "Base")
        bare = klass("Bar")
        root = program(other, bare)
        self.assertIsNone(classify(root, other))
        self.assertIsNone(classify(root, bare))

    def test_computed_base_is_not_a_component(self) -> None:
        node = klass("Foo", call("mixin", ident("PureComponent")))
        self.assertIsNone(classify(program(node), node))

    def test_anonymous_class_takes_declarator_name(self) -> None:
        node = klass(None, "PureComponent", qualifier="expression")
        root = program(declare(declarator("Foo", node)))
        self.assertEqual(classify(root, node).display_name, "Foo")

    def test_class_returned_from_function(self) -> None:
        named = klass("Bar", "PureComponent", qualifier="expression")
        anonymous = klass(None, "PureComponent", qualifier="expression")
        make_named = function("Foo", body=[ret(named)])
        make_anonymous = function("makeWidget", body=[ret(anonymous)])
        root = program(make_named, make_anonymous)

        self.assertEqual(classify(root, named).display_name, "Bar")
        self.assertEqual(classify(root, anonymous).display_name, "makeWidget")
        self.assertEqual(classify(root, make_anonymous).display_name, "makeWidget")

    def test_arrow_expression_body_class(self) -> None:
        node = klass(None, "PureComponent", qualifier="expression")
        arrow = function(None, body=node, qualifier="arrow")
        root = program(declare(declarator("make", arrow, qualifier="const")))
        self.assertEqual(classify(root, node).display_name, "make")
        self.assertTrue(classify(root, arrow).is_pure)

    def test_nested_function_returns_are_not_direct(self) -> None:
        inner_class = klass(None, "PureComponent", qualifier="expression")
        inner = function("inner", body=[ret(inner_class)], qualifier="expression")
        outer = function("outer", body=[ret(inner)])
        self.assertIsNone(classify(program(outer), outer))

    def test_class_passed_as_argument_is_anonymous(self) -> None:
        node = klass(None, "Component", qualifier="expression")
        fn = function("wrap", body=[statement(call("register", node))], qualifier="expression")
        root = program(declare(declarator("x", fn)))
        self.assertEqual(classify(root, node).display_name, "<anonymous>")

    def test_default_export(self) -> None:
        node = klass(None, "PureComponent", qualifier="expression")
        root = program(export_default(node))
        self.assertEqual(classify(root, node).display_name, "default")

    def test_class_field_name(self) -> None:
        node = klass(None, "Component", qualifier="expression")
        root = program(klass("Outer", members=[class_field("Inner", node)]))
        self.assertEqual(classify(root, node).display_name, "Inner")

    def test_create_class_factory_call(self) -> None:
        direct = call("createReactClass", obj(prop("render", ident("noop"))))
        dotted = call("React.createReactClass", obj())
        not_object = call("createReactClass", ident("options"))
        root = program(
            declare(declarator("Hello", direct)),
            declare(declarator("World", dotted)),
            statement(not_object),
        )
        desc = classify(root, direct)
        self.assertEqual(desc.tier, jsxlint.PLAIN)
        self.assertEqual(desc.display_name, "Hello")
        self.assertEqual(classify(root, dotted).base_chain, ("React", "createReactClass"))
        self.assertIsNone(classify(root, not_object))

    def test_configured_factory_and_bases(self) -> None:
        settings = jsxlint.AnalysisSettings(
            create_class="makeClass",
            pure_component_bases=("MemoComponent",),
        )
        factory = call("makeClass", obj())
        memo = klass("Foo", "MemoComponent")
        root = program(statement(factory), memo)
        self.assertIsNotNone(classify(root, factory, settings))
        self.assertTrue(classify(root, memo, settings).is_pure)

    def test_classification_is_idempotent(self) -> None:
        node = klass("Foo", "PureComponent", members=[method("render")])
        root = program(node)
        classifier = jsxlint.ComponentClassifier(jsxlint.TreeIndex(root))
        self.assertEqual(classifier.classify(node), classifier.classify(node))

    def test_class_member_names(self) -> None:
        node = klass("Foo", "PureComponent", members=[method("render"), class_field("shouldComponentUpdate")])
        self.assertEqual(jsxlint.class_member_names(node), ["render", "shouldComponentUpdate"])

    def test_other_nodes_are_not_classified(self) -> None:
        node = ident("Foo")
        self.assertIsNone(classify(program(statement(node)), node))


if __name__ == "__main__":
    unittest.main()
