import unittest

import jsxlint
from treebuilders import (
    block,
    declare,
    declarator,
    element,
    function,
    ident,
    import_default,
    import_named,
    klass,
    pattern,
    program,
    ret,
    statement,
)


class ScopeModelTests(unittest.TestCase):
    def resolve(self, root, name, node):
        return jsxlint.ScopeModel.build(root).resolve(name, node)

    def test_module_binding_resolves(self) -> None:
        site = element("img")
        root = program(declare(declarator("React")), statement(site))
        binding = self.resolve(root, "React", site)
        self.assertIsNotNone(binding)
        self.assertEqual(binding.scope.kind, jsxlint.MODULE_SCOPE)

    def test_missing_name_is_absent_not_error(self) -> None:
        site = element("img")
        root = program(declare(declarator("a", site)))
        self.assertIsNone(self.resolve(root, "React", site))

    def test_declaration_after_use_is_hoisted(self) -> None:
        site = element("img")
        root = program(statement(site), declare(declarator("React")))
        self.assertIsNotNone(self.resolve(root, "React", site))

    def test_innermost_binding_wins(self) -> None:
        site = element("img")
        inner_decl = declarator("React")
        fn = function("render", body=[declare(inner_decl), ret(site)])
        root = program(declare(declarator("React")), fn)
        binding = self.resolve(root, "React", site)
        self.assertIs(binding.node, inner_decl)
        self.assertEqual(binding.scope.kind, jsxlint.FUNCTION_SCOPE)

    def test_function_parameters_bind_inside_function_only(self) -> None:
        inside = element("img")
        outside = element("img")
        fn = function("render", params=["React"], body=[ret(inside)])
        root = program(fn, statement(outside))
        self.assertIsNotNone(self.resolve(root, "React", inside))
        self.assertIsNone(self.resolve(root, "React", outside))

    def test_var_hoists_out_of_blocks_but_let_does_not(self) -> None:
        after = element("img")
        fn = function(
            "render",
            body=[
                block(declare(declarator("React")), declare(declarator("Other", qualifier="let"))),
                ret(after),
            ],
        )
        root = program(fn)
        model = jsxlint.ScopeModel.build(root)
        self.assertIsNotNone(model.resolve("React", after))
        self.assertIsNone(model.resolve("Other", after))

    def test_destructuring_binds_targets_not_keys(self) -> None:
        site = element("img")
        root = program(
            declare(declarator(pattern("React", ("createElement", "h")), ident("lib"))),
            statement(site),
        )
        model = jsxlint.ScopeModel.build(root)
        self.assertIsNotNone(model.resolve("React", site))
        self.assertIsNotNone(model.resolve("h", site))
        self.assertIsNone(model.resolve("createElement", site))

    def test_imports_bind_in_module_scope(self) -> None:
        site = element("img")
        root = program(
            import_default("React", "react"),
            import_named("preact", ("h", "jsx"), "Fragment"),
            statement(site),
        )
        model = jsxlint.ScopeModel.build(root)
        self.assertIsNotNone(model.resolve("React", site))
        self.assertIsNotNone(model.resolve("jsx", site))
        self.assertIsNotNone(model.resolve("Fragment", site))
        self.assertIsNone(model.resolve("h", site))
        self.assertIsNone(model.resolve("react", site))

    def test_function_and_class_declarations_bind_in_enclosing_scope(self) -> None:
        site = element("img")
        root = program(function("React"), klass("Widget"), statement(site))
        model = jsxlint.ScopeModel.build(root)
        self.assertIsNotNone(model.resolve("React", site))
        self.assertIsNotNone(model.resolve("Widget", site))

    def test_named_function_expression_binds_only_inside(self) -> None:
        inside = element("img")
        outside = element("img")
        fn = function("React", body=[ret(inside)], qualifier="expression")
        root = program(declare(declarator("render", fn)), statement(outside))
        model = jsxlint.ScopeModel.build(root)
        self.assertIsNotNone(model.resolve("React", inside))
        self.assertIsNone(model.resolve("React", outside))

    def test_first_binding_in_scope_wins(self) -> None:
        first = declarator("React")
        second = declarator("React")
        site = element("img")
        root = program(declare(first, second), statement(site))
        self.assertIs(self.resolve(root, "React", site).node, first)

    def test_scope_for_node_outside_tree_is_module(self) -> None:
        root = program()
        model = jsxlint.ScopeModel.build(root)
        self.assertIs(model.scope_for(ident("x")), model.module_scope)


class BindingNamesTests(unittest.TestCase):
    def test_default_values_are_not_bound(self) -> None:
        default = jsxlint.SyntaxNode(
            jsxlint.OTHER,
            children=(ident("a", "left"), ident("fallback", "right")),
        )
        self.assertEqual(jsxlint.binding_names(default), ["a"])

    def test_none_target(self) -> None:
        self.assertEqual(jsxlint.binding_names(None), [])

    def test_names_keep_source_order(self) -> None:
        self.assertEqual(jsxlint.binding_names(pattern("a", ("b", "c"), "d")), ["a", "c", "d"])

    def test_deeply_nested_pattern(self) -> None:
        target = ident("leaf")
        for _ in range(3000):
            target = jsxlint.SyntaxNode(jsxlint.OTHER, children=(target,))
        self.assertEqual(jsxlint.binding_names(target), ["leaf"])


if __name__ == "__main__":
    unittest.main()
