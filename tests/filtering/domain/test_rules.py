import unittest

from symfilter.filtering.domain.errors import ConfigurationError, PatternCompileError, RuleError
from symfilter.filtering.domain.rules import CompiledPatternSet, compile_rule_document, exact_pattern


class RuleCompilerTests(unittest.TestCase):
    def test_export_matching_defaults_to_true(self):
        rules = compile_rule_document({"rules": {"exact": "main"}})
        self.assertTrue(rules.export_matching)

    def test_export_matching_false(self):
        rules = compile_rule_document({"export_matching": False, "rules": {"regex": "^_"}})
        self.assertFalse(rules.export_matching)

    def test_regex_sources_are_verbatim_and_exact_sources_anchored(self):
        rules = compile_rule_document({"rules": {"regex": ["^api_", "_v2$"], "exact": ["main", "init"]}})
        self.assertEqual(rules.matcher.sources, ("^api_", "_v2$", "^main\\Z", "^init\\Z"))
        self.assertEqual(len(rules.matcher), 4)

    def test_single_string_and_list_are_equivalent(self):
        single = compile_rule_document({"rules": {"exact": "main"}})
        listed = compile_rule_document({"rules": {"exact": ["main"]}})
        self.assertEqual(single.matcher.sources, listed.matcher.sources)

    def test_exact_pattern_does_not_escape(self):
        self.assertEqual(exact_pattern("a.b*"), "^a.b*\\Z")

    def test_document_must_be_mapping(self):
        for document in (None, "rules", ["rules"], 42):
            with self.subTest(document=document):
                with self.assertRaises(ConfigurationError):
                    compile_rule_document(document)

    def test_export_matching_must_be_boolean(self):
        for value in ("yes", 1, None, ["true"]):
            with self.subTest(value=value):
                with self.assertRaises(ConfigurationError):
                    compile_rule_document({"export_matching": value, "rules": {"exact": "main"}})

    def test_rules_key_required(self):
        with self.assertRaises(ConfigurationError):
            compile_rule_document({"export_matching": True})

    def test_rules_must_be_mapping(self):
        with self.assertRaises(ConfigurationError):
            compile_rule_document({"rules": ["main"]})

    def test_empty_rules_is_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            compile_rule_document({"rules": {}})

    def test_empty_lists_are_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            compile_rule_document({"rules": {"regex": [], "exact": []}})

    def test_wrong_shapes_are_configuration_errors(self):
        for rules in ({"regex": 5}, {"exact": {"a": "b"}}, {"regex": ["ok", 3]}, {"exact": None}):
            with self.subTest(rules=rules):
                with self.assertRaises(ConfigurationError):
                    compile_rule_document({"rules": rules})

    def test_bad_regex_is_pattern_compile_error(self):
        with self.assertRaises(PatternCompileError) as ctx:
            compile_rule_document({"rules": {"regex": ["ok", "(unclosed"]}})
        self.assertEqual(ctx.exception.pattern, "(unclosed")
        self.assertNotIsInstance(ctx.exception, ConfigurationError)
        self.assertIsInstance(ctx.exception, RuleError)

    def test_bad_exact_entry_is_pattern_compile_error(self):
        with self.assertRaises(PatternCompileError) as ctx:
            compile_rule_document({"rules": {"exact": "[x"}})
        self.assertEqual(ctx.exception.pattern, "^[x\\Z")


class CompiledPatternSetTests(unittest.TestCase):
    def test_is_match_any_pattern(self):
        matcher = CompiledPatternSet.compile(["^a", "z$"])
        self.assertTrue(matcher.is_match("abc"))
        self.assertTrue(matcher.is_match("xyz"))
        self.assertFalse(matcher.is_match("mmm"))

    def test_empty_pattern_list_rejected(self):
        with self.assertRaises(ConfigurationError):
            CompiledPatternSet.compile([])
