from __future__ import annotations

import unittest

from app.parsers.literal_parser import (
    MalformedPayloadError,
    PayloadTooLargeError,
    decode_account_payload,
    parse_literal,
)


class TestParseLiteral(unittest.TestCase):
    def test_parses_strict_json_array(self) -> None:
        self.assertEqual(
            parse_literal('[1, 2.5, -3, "a", true, false, null, {"k": [ ]}]'),
            [1, 2.5, -3, "a", True, False, None, {"k": []}],
        )

    def test_strips_const_declaration_prefix(self) -> None:
        text = "const accounts = [{name: 'Acme', status: \"active\",},];"
        self.assertEqual(parse_literal(text), [{"name": "Acme", "status": "active"}])

    def test_strips_module_exports_prefix(self) -> None:
        self.assertEqual(parse_literal('module.exports = [{"name": "Beta"}]'), [{"name": "Beta"}])

    def test_strips_export_default_and_export_const(self) -> None:
        self.assertEqual(parse_literal("export default [ ]"), [])
        self.assertEqual(parse_literal("export const accounts = [{name: 'X'}];"), [{"name": "X"}])

    def test_comments_are_whitespace(self) -> None:
        text = '// exported from CRM\n[ /* first */ {"name": "A"} // trailing\n]'
        self.assertEqual(parse_literal(text), [{"name": "A"}])

    def test_string_escapes(self) -> None:
        text = r"""["line\nbreak", 'it\'s', "\u00e9", "\x41", "\ud83d\ude00"]"""
        self.assertEqual(parse_literal(text), ["line\nbreak", "it's", "é", "A", "\U0001F600"])

    def test_hex_and_exponent_numbers(self) -> None:
        self.assertEqual(parse_literal("[0x1F, -0x10, 1e3, .5]"), [31, -16, 1000.0, 0.5])

    def test_numeric_keys_become_strings_and_last_duplicate_wins(self) -> None:
        self.assertEqual(parse_literal('[{1: "x", "a": 1, "a": 2}]'), [{"1": "x", "a": 2}])

    def test_rejects_function_call(self) -> None:
        with self.assertRaises(MalformedPayloadError) as ctx:
            parse_literal('[{"name": "A"}, alert(1)]')
        self.assertIn("Function calls are not allowed", str(ctx.exception))

    def test_rejects_iife(self) -> None:
        with self.assertRaises(MalformedPayloadError):
            parse_literal("(function () { return [] })()")

    def test_rejects_require_call_in_value(self) -> None:
        with self.assertRaises(MalformedPayloadError):
            parse_literal('[{"name": require("child_process").execSync("id")}]')

    def test_rejects_bare_identifiers(self) -> None:
        for text in ("[process.env]", "[undefined]", "[NaN]", "[Infinity]"):
            with self.subTest(text=text):
                with self.assertRaises(MalformedPayloadError) as ctx:
                    parse_literal(text)
                self.assertIn("Unexpected identifier", str(ctx.exception))

    def test_rejects_operators_and_template_literals(self) -> None:
        for text in ("[1 + 2]", "[1+2]", "[`${x}`]", "[() => 1]"):
            with self.subTest(text=text):
                with self.assertRaises(MalformedPayloadError):
                    parse_literal(text)

    def test_rejects_trailing_statements(self) -> None:
        with self.assertRaises(MalformedPayloadError) as ctx:
            parse_literal("const x = [1]; doSomething();")
        self.assertIn("Unexpected content", str(ctx.exception))

    def test_rejects_malformed_prefixes(self) -> None:
        for text in ("const = [1]", "let true = [1]", "module.exports.foo = [1]", "export [1]"):
            with self.subTest(text=text):
                with self.assertRaises(MalformedPayloadError):
                    parse_literal(text)

    def test_rejects_truncated_input(self) -> None:
        for text in ("[1, 2", '["abc', "[/* open", '{"a" 1}'):
            with self.subTest(text=text):
                with self.assertRaises(MalformedPayloadError):
                    parse_literal(text)

    def test_rejects_out_of_range_number(self) -> None:
        with self.assertRaises(MalformedPayloadError):
            parse_literal("[1e999]")

    def test_rejects_integer_with_too_many_digits(self) -> None:
        text = "[" + "9" * 5000 + "]"
        with self.assertRaises(MalformedPayloadError) as ctx:
            parse_literal(text)
        self.assertIn("Number is out of range", str(ctx.exception))
        self.assertIn("(line 1, column 2)", str(ctx.exception))

    def test_error_reports_line_and_column(self) -> None:
        with self.assertRaises(MalformedPayloadError) as ctx:
            parse_literal("[\n  foo\n]")
        self.assertEqual(ctx.exception.line, 2)
        self.assertEqual(ctx.exception.column, 3)

    def test_enforces_max_depth(self) -> None:
        self.assertEqual(parse_literal("[[[1]]]", max_depth=3), [[[1]]])
        with self.assertRaises(MalformedPayloadError) as ctx:
            parse_literal("[[[1]]]", max_depth=2)
        self.assertIn("maximum depth", str(ctx.exception))


class TestDecodeAccountPayload(unittest.TestCase):
    def test_decodes_bytes_with_bom(self) -> None:
        self.assertEqual(decode_account_payload(b'\xef\xbb\xbf[{"name": "A"}]'), [{"name": "A"}])

    def test_non_array_root_is_rejected(self) -> None:
        with self.assertRaises(MalformedPayloadError) as ctx:
            decode_account_payload(b'{"name": "Acme"}')
        self.assertIn("array", str(ctx.exception))

    def test_plain_text_is_rejected(self) -> None:
        with self.assertRaises(MalformedPayloadError):
            decode_account_payload(b"not an array at all")

    def test_non_utf8_is_rejected(self) -> None:
        with self.assertRaises(MalformedPayloadError) as ctx:
            decode_account_payload(b"[\xff\xfe]")
        self.assertIn("UTF-8", str(ctx.exception))

    def test_empty_payload_is_rejected(self) -> None:
        with self.assertRaises(MalformedPayloadError):
            decode_account_payload(b"   \n")

    def test_size_limit(self) -> None:
        with self.assertRaises(PayloadTooLargeError):
            decode_account_payload(b"[1, 2, 3]", max_bytes=4)
        self.assertEqual(decode_account_payload(b"[1, 2, 3]", max_bytes=9), [1, 2, 3])

    def test_decoding_is_repeatable(self) -> None:
        payload = b"const accounts = [{name: 'A', status: 'pending'}, {name: 'B'}, 3];"
        first = decode_account_payload(payload)
        second = decode_account_payload(payload)
        self.assertEqual(first, second)
        self.assertEqual(first[0], {"name": "A", "status": "pending"})
        self.assertEqual(first[2], 3)

    def test_error_dict_carries_empty_accounts(self) -> None:
        with self.assertRaises(MalformedPayloadError) as ctx:
            decode_account_payload("{}")
        self.assertEqual(ctx.exception.to_dict()["accounts"], [])


if __name__ == "__main__":
    unittest.main()
