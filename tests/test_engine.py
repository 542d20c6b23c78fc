import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

import jsxlint
from treebuilders import attribute, declare, declarator, element, parsed, program, statement, string, text


class ExplodingRule(jsxlint.Rule):
    id = "exploding"

    def create(self, context):
        def check(node, ancestors):
            if node.name == "boom":
                raise RuntimeError("kaboom")

        return {jsxlint.ELEMENT: check}


class RuleEngineTests(unittest.TestCase):
    def test_all_rules_enabled_by_default(self) -> None:
        engine = jsxlint.RuleEngine()
        ids = sorted(rule.id for rule in engine.rules)
        self.assertEqual(ids, sorted(jsxlint.RULES))

    def test_findings_from_several_rules_in_tree_order(self) -> None:
        node = element("Foo", attribute("bar", string("x", quote='"')), text("hello"))
        root = program(statement(node))
        config = jsxlint.ProjectConfig.from_mapping(
            {"rules": {"react-in-jsx-scope": True, "jsx-no-literals": {"noStrings": True}}}
        )
        findings = jsxlint.RuleEngine(config).analyze(parsed(root))
        kinds = [(f.rule_id, f.kind) for f in findings]
        self.assertEqual(
            kinds,
            [
                ("react-in-jsx-scope", jsxlint.NOT_IN_SCOPE),
                ("jsx-no-literals", jsxlint.INVALID_PROP_VALUE),
                ("jsx-no-literals", jsxlint.NO_STRINGS_IN_JSX),
            ],
        )

    def test_rule_crash_becomes_internal_finding(self) -> None:
        root = program(statement(element("boom")), statement(element("fine")))
        engine = jsxlint.RuleEngine(rules=[ExplodingRule(), jsxlint.ReactInJsxScopeRule()])
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            findings = engine.analyze(parsed(root, path="crash.jsx"))

        internal = [f for f in findings if f.internal]
        self.assertEqual(len(internal), 1)
        self.assertEqual(internal[0].kind, jsxlint.RULE_ERROR)
        self.assertEqual(internal[0].message_parameters["rule"], "exploding")
        self.assertEqual(len([f for f in findings if f.kind == jsxlint.NOT_IN_SCOPE]), 2)
        self.assertIn("[jsxlint] Rule 'exploding' failed on crash.jsx", stderr.getvalue())

    def test_malformed_subtree_is_reported(self) -> None:
        broken = jsxlint.SyntaxNode("ERROR", children=(element("lost"),))
        root = program(declare(declarator("React")), statement(broken), statement(element("kept")))
        findings = jsxlint.RuleEngine().analyze(parsed(root))
        self.assertEqual([(f.kind, f.internal) for f in findings], [(jsxlint.MALFORMED_TREE, True)])


class ProjectConfigTests(unittest.TestCase):
    def test_disabled_rules(self) -> None:
        config = jsxlint.ProjectConfig.from_mapping(
            {
                "rules": {
                    "react-in-jsx-scope": "off",
                    "jsx-no-literals": ["error", {"noStrings": True}],
                    "no-redundant-should-component-update": False,
                }
            }
        )
        rules = config.build_rules()
        self.assertEqual([rule.id for rule in rules], ["jsx-no-literals"])
        self.assertTrue(rules[0].config.no_strings)

    def test_unknown_rule_is_skipped_with_warning(self) -> None:
        config = jsxlint.ProjectConfig.from_mapping({"rules": {"no-such-rule": True, "react-in-jsx-scope": None}})
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            rules = config.build_rules()
        self.assertEqual([rule.id for rule in rules], ["react-in-jsx-scope"])
        self.assertIn("no-such-rule", stderr.getvalue())

    def test_invalid_rule_value(self) -> None:
        with self.assertRaises(jsxlint.ConfigError):
            jsxlint.ProjectConfig.from_mapping({"rules": {"jsx-no-literals": 3.5}})

    def test_settings_are_parsed(self) -> None:
        config = jsxlint.ProjectConfig.from_mapping({"settings": {"react": {"pragma": "Foo"}}})
        self.assertEqual(config.settings.pragma_override, "Foo")

    def test_non_mapping_config(self) -> None:
        with self.assertRaises(jsxlint.ConfigError):
            jsxlint.ProjectConfig.from_mapping(["rules"])


@unittest.skipIf(jsxlint.yaml is None, "PyYAML not installed")
class YamlConfigTests(unittest.TestCase):
    def write(self, content):
        handle = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False, encoding="utf-8")
        with handle:
            handle.write(content)
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def test_load_config(self) -> None:
        path = self.write(
            "settings:\n"
            "  react: {pragma: Foo}\n"
            "rules:\n"
            "  react-in-jsx-scope: {}\n"
            "  jsx-no-literals: {noStrings: true, allowedStrings: ['&nbsp;']}\n"
        )
        config = jsxlint.load_config_from_yaml(path)
        self.assertEqual(config.settings.pragma_override, "Foo")
        self.assertEqual(sorted(config.rules), ["jsx-no-literals", "react-in-jsx-scope"])
        self.assertEqual(config.rules["jsx-no-literals"]["allowedStrings"], ["&nbsp;"])

    def test_later_documents_override(self) -> None:
        path = self.write("settings: {pragmaOverride: A}\n---\nsettings: {pragmaOverride: B}\n")
        self.assertEqual(jsxlint.load_config_from_yaml(path).settings.pragma_override, "B")

    def test_invalid_pragma_in_file(self) -> None:
        path = self.write("settings: {pragmaOverride: 'not valid'}\n")
        with self.assertRaises(jsxlint.ConfigError):
            jsxlint.load_config_from_yaml(path)

    def test_broken_yaml(self) -> None:
        path = self.write("rules: [unclosed\n")
        with self.assertRaises(jsxlint.ConfigError):
            jsxlint.load_config_from_yaml(path)

    def test_missing_file_falls_back_to_defaults(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            config = jsxlint.load_config_from_yaml("/nonexistent/jsxlint.yaml")
        self.assertEqual(config, jsxlint.ProjectConfig())
        self.assertIn("Config file not found", stderr.getvalue())

    def test_no_path(self) -> None:
        self.assertEqual(jsxlint.load_config_from_yaml(None), jsxlint.ProjectConfig())


class OutputTests(unittest.TestCase):
    def sample_findings(self):
        location = jsxlint.SourceRange("a.jsx", 0, 5, 1, 1, 1, 6)
        return [
            jsxlint.Finding(jsxlint.NOT_IN_SCOPE, location, {"name": "React"}, rule_id="react-in-jsx-scope"),
            jsxlint.Finding(jsxlint.NO_STRINGS_IN_JSX, None, {"text": "'Test'"}, rule_id="jsx-no-literals"),
        ]

    def test_format_message(self) -> None:
        first, second = self.sample_findings()
        self.assertEqual(jsxlint.format_message(first), "'React' must be in scope when using JSX")
        self.assertEqual(jsxlint.format_message(second), "Strings not allowed in JSX files: \"'Test'\"")

    def test_missing_parameter_left_in_place(self) -> None:
        finding = jsxlint.Finding(jsxlint.NOT_IN_SCOPE, None, {})
        self.assertEqual(jsxlint.format_message(finding), "'{{name}}' must be in scope when using JSX")

    def test_json_object(self) -> None:
        first, second = self.sample_findings()
        obj = jsxlint.finding_to_json_obj(first)
        self.assertEqual(obj["rule_id"], "react-in-jsx-scope")
        self.assertEqual(obj["location"]["line_start"], 1)
        self.assertEqual(obj["location"]["col_end"], 6)
        self.assertEqual(obj["parameters"], {"name": "React"})
        self.assertEqual(jsxlint.finding_to_json_obj(second, "b.jsx")["location"]["file"], "b.jsx")

    def test_emit_to_stdout_and_file(self) -> None:
        results = [("a.jsx", self.sample_findings())]
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            jsxlint.emit_findings_json(results)
        self.assertEqual(len(json.loads(stdout.getvalue())), 2)

        with tempfile.TemporaryDirectory() as tmp:
            out = os.path.join(tmp, "out.json")
            jsxlint.emit_findings_json(results, out=out)
            with open(out, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        self.assertEqual([item["kind"] for item in data], [jsxlint.NOT_IN_SCOPE, jsxlint.NO_STRINGS_IN_JSX])


if __name__ == "__main__":
    unittest.main()
