import io
import json
import shutil
import unittest
from contextlib import redirect_stderr, redirect_stdout

from symfilter.cli import build_jobs, build_parser, main, run_symfilter
from tests.utils.fixtures import elf_fixture
from tests.utils.tempdir import managed_temp_dir


class ParserTests(unittest.TestCase):
    def test_repeated_flags_build_jobs_in_order(self):
        args = build_parser().parse_args(
            ["--filter", "r1.yaml", "x", "--export", "a", "b", "--strip", "c", "--export", "d", "--filter", "r2.yaml", "y"]
        )
        jobs = build_jobs(args.export, args.strip, args.filter)
        self.assertEqual([(j.mode, j.path, j.rule_path) for j in jobs], [
            ("export", "a", None),
            ("export", "b", None),
            ("export", "d", None),
            ("strip", "c", None),
            ("filter", "x", "r1.yaml"),
            ("filter", "y", "r2.yaml"),
        ])

    def test_no_jobs_is_usage_error(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main([])
        self.assertEqual(ctx.exception.code, 2)


class CliRunTests(unittest.TestCase):
    def test_end_to_end_with_archive_and_rules(self):
        with managed_temp_dir("cli_run") as tmp_path:
            lib = tmp_path / "libfixture.a"
            shutil.copyfile(elf_fixture("libfixture.a"), lib)
            rules = tmp_path / "rules.yaml"
            rules.write_text("rules:\n  exact: exported_fn\n", encoding="utf-8")
            empty_rules = tmp_path / "empty.yaml"
            empty_rules.write_text("rules: {}\n", encoding="utf-8")
            report = tmp_path / "report.json"

            stdout = io.StringIO()
            with redirect_stdout(stdout):
                code = main(
                    [
                        "--strip",
                        str(lib),
                        str(tmp_path / "missing.so"),
                        "--filter",
                        str(empty_rules),
                        str(lib),
                        "--filter",
                        str(rules),
                        str(lib),
                        "--report-json",
                        str(report),
                        "--no-progress",
                    ]
                )
            payload = json.loads(report.read_text(encoding="utf-8"))

        output = stdout.getvalue()
        self.assertEqual(code, 0)
        self.assertEqual(output.count("Error: "), 2)
        self.assertTrue(output.endswith("Done!\n"))
        self.assertEqual(payload["total_jobs"], 4)
        self.assertEqual(payload["failed"], 2)
        outcomes = payload["outcomes"]
        self.assertEqual([o["error_kind"] for o in outcomes], [None, "io", "configuration", None])
        self.assertEqual((outcomes[0]["export_count"], outcomes[0]["strip_count"]), (3, 6))
        self.assertEqual((outcomes[3]["export_count"], outcomes[3]["strip_count"]), (4, 5))
        self.assertIn(
            "Exported:\n\tmalloc\n\tfree\n\t_GLOBAL_OFFSET_TABLE_\n"
            "Stripped:\n\talpha.c\n\tuse_local\n\texported_fn\n\tbeta.c\n\tbeta_counter\n\tbeta_entry\n",
            output,
        )
        self.assertIn(
            "Exported:\n\tmalloc\n\tfree\n\texported_fn\n\t_GLOBAL_OFFSET_TABLE_\n"
            "Stripped:\n\talpha.c\n\tuse_local\n\tbeta.c\n\tbeta_counter\n\tbeta_entry\n",
            output,
        )

    def test_strict_exit_code(self):
        with redirect_stdout(io.StringIO()):
            code = main(["--export", "definitely/missing.so", "--strict", "--no-progress"])
        self.assertEqual(code, 1)

    def test_run_symfilter_uses_given_stream(self):
        stream = io.StringIO()
        result = run_symfilter([], stream=stream)
        self.assertEqual(result.outcomes, ())
        self.assertEqual(stream.getvalue(), "Done!\n")
